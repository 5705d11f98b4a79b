"""Shared fixtures for report aggregation tests."""

import pytest

FOO_TEST_XML = """<?xml version="1.0" encoding="UTF-8"?>
<testsuite xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" name="com.example.FooTest" time="0.052" tests="3" errors="0" skipped="0" failures="1">
  <properties>
    <property name="java.version" value="17.0.9"/>
  </properties>
  <testcase name="testSimpleECI" classname="com.example.FooTest" time="0.011"/>
  <testcase name="testCommarea" classname="com.example.FooTest" time="0.023">
    <failure message="boom" type="org.opentest4j.AssertionFailedError"><![CDATA[org.opentest4j.AssertionFailedError: boom
	at com.example.FooTest.testCommarea(FooTest.java:42)
]]></failure>
    <system-out><![CDATA[connecting to gateway]]></system-out>
  </testcase>
  <testcase name="testChannel" classname="com.example.FooTest" time="0.018"/>
</testsuite>
"""


def case_xml(name, marker=None, message=None):
    """Build one <testcase> entry, optionally wrapping a marker element."""
    if marker is None:
        return f'  <testcase name="{name}" classname="x" time="0.001"/>\n'
    attr = f' message="{message}"' if message is not None else ""
    return (
        f'  <testcase name="{name}" classname="x" time="0.001">\n'
        f"    <{marker}{attr}/>\n"
        f"  </testcase>\n"
    )


def suite_xml(cases, tests=None, failures=0, errors=0, skipped=0):
    """Wrap test case entries in a <testsuite> with declared counters."""
    if tests is None:
        tests = len(cases)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<testsuite name="s" tests="{tests}" failures="{failures}" '
        f'errors="{errors}" skipped="{skipped}">\n' + "".join(cases) + "</testsuite>\n"
    )


@pytest.fixture
def reports_dir(tmp_path):
    """An empty surefire-reports directory."""
    path = tmp_path / "surefire-reports"
    path.mkdir()
    return path


@pytest.fixture
def foo_report(reports_dir):
    """A reports directory holding TEST-com.example.FooTest.xml."""
    path = reports_dir / "TEST-com.example.FooTest.xml"
    path.write_text(FOO_TEST_XML, encoding="utf-8")
    return path
