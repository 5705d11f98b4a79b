"""Tests for the report aggregator."""

import logging

import pytest
from conftest import case_xml, suite_xml

from src.surefire_summary.aggregator import ReportAggregator, generate_reports
from src.surefire_summary.config import ReportConfig
from src.surefire_summary.exceptions import ReportWriteError
from src.surefire_summary.models import TestOutcome


def _config(reports_dir, tmp_path, **overrides):
    values = dict(
        reports_dir=str(reports_dir),
        repo_type="middlestream",
        csv_output=str(tmp_path / "out" / "test-summary.csv"),
        html_output=str(tmp_path / "out" / "test-summary.html"),
    )
    values.update(overrides)
    return ReportConfig(**values)


class TestGenerateReports:
    """Tests for the generate_reports entry point."""

    def test_concrete_scenario(self, foo_report, reports_dir, tmp_path):
        csv_path = tmp_path / "summary.csv"
        result = generate_reports(reports_dir, "middlestream", csv_path, tmp_path / "summary.html")

        summary = result.summary
        assert (summary.total, summary.passed, summary.failed, summary.errors, summary.skipped) == (
            3,
            2,
            1,
            0,
            0,
        )
        rows = csv_path.read_text(encoding="utf-8").splitlines()
        assert len(rows) == 4
        assert '"com.example.FooTest","testCommarea","FAILED","boom"' in rows

    def test_returns_output_paths(self, foo_report, reports_dir, tmp_path):
        result = generate_reports(
            reports_dir, "downstream", tmp_path / "a.csv", tmp_path / "a.html"
        )
        assert result.csv_path == tmp_path / "a.csv"
        assert result.html_path == tmp_path / "a.html"
        assert (tmp_path / "a.html").exists()
        assert '<span id="repo-type">downstream</span>' in (tmp_path / "a.html").read_text()

    def test_empty_directory(self, reports_dir, tmp_path):
        csv_path = tmp_path / "summary.csv"
        html_path = tmp_path / "summary.html"
        result = generate_reports(reports_dir, "middlestream", csv_path, html_path)

        assert csv_path.read_text(encoding="utf-8") == "Test Class,Test Method,Result,Failure Reason\n"
        html = html_path.read_text(encoding="utf-8")
        assert html.count('<div class="stat-number">0</div>') == 5
        assert "<tr><td>" not in html
        assert result.summary.total == 0
        assert result.reports_found is True

    def test_missing_directory(self, tmp_path, caplog):
        csv_path = tmp_path / "summary.csv"
        html_path = tmp_path / "summary.html"
        with caplog.at_level(logging.WARNING):
            result = generate_reports(tmp_path / "missing", "x", csv_path, html_path)

        assert result.reports_found is False
        assert result.summary.total == 0
        assert csv_path.read_text(encoding="utf-8").count("\n") == 1
        assert html_path.exists()
        assert "reports directory not found" in caplog.text

    def test_idempotent_csv(self, foo_report, reports_dir, tmp_path):
        (reports_dir / "TEST-com.example.BarTest.xml").write_text(
            suite_xml([case_xml("a"), case_xml("b", "error", "npe")], errors=1)
        )
        csv_path = tmp_path / "summary.csv"
        generate_reports(reports_dir, "x", csv_path, tmp_path / "one.html", generated="t1")
        first = csv_path.read_bytes()
        generate_reports(reports_dir, "x", csv_path, tmp_path / "two.html", generated="t2")
        assert csv_path.read_bytes() == first

    def test_idempotent_html_apart_from_timestamp(self, foo_report, reports_dir, tmp_path):
        html_path = tmp_path / "summary.html"
        generate_reports(reports_dir, "x", tmp_path / "s.csv", html_path, generated="T")
        first = html_path.read_bytes()
        generate_reports(reports_dir, "x", tmp_path / "s.csv", html_path, generated="T")
        assert html_path.read_bytes() == first

    def test_unwritable_output(self, foo_report, reports_dir, tmp_path):
        blocked = tmp_path / "summary.csv"
        blocked.mkdir()
        with pytest.raises(ReportWriteError):
            generate_reports(reports_dir, "x", blocked, tmp_path / "summary.html")


class TestReportAggregator:
    """Tests for ReportAggregator."""

    def test_files_processed_in_name_order(self, reports_dir, tmp_path):
        (reports_dir / "TEST-b.Second.xml").write_text(suite_xml([case_xml("second")]))
        (reports_dir / "TEST-a.First.xml").write_text(suite_xml([case_xml("first")]))
        config = _config(reports_dir, tmp_path)
        result = ReportAggregator(config).run()

        rows = (tmp_path / "out" / "test-summary.csv").read_text().splitlines()[1:]
        assert rows == ['"a.First","first","PASSED",""', '"b.Second","second","PASSED",""']
        assert [c.test_class for c in result.classes] == ["a.First", "b.Second"]

    def test_summary_trusts_declared_totals(self, reports_dir, tmp_path):
        (reports_dir / "TEST-Liar.xml").write_text(
            suite_xml([case_xml("a"), case_xml("b", "failure", "x")], tests=5, failures=0)
        )
        result = ReportAggregator(_config(reports_dir, tmp_path)).run()

        assert result.summary.total == 5
        assert result.summary.failed == 0
        assert result.summary.passed == 5
        rows = (tmp_path / "out" / "test-summary.csv").read_text().splitlines()[1:]
        assert len(rows) == 2
        assert [c.test_method for c in result.failing] == ["b"]

    def test_collects_failing_cases(self, foo_report, reports_dir, tmp_path):
        (reports_dir / "TEST-com.example.BarTest.xml").write_text(
            suite_xml(
                [case_xml("ok"), case_xml("broken", "error", "npe"), case_xml("later", "skipped")],
                errors=1,
                skipped=1,
            )
        )
        result = ReportAggregator(_config(reports_dir, tmp_path)).run()
        assert [(c.test_class, c.test_method, c.outcome) for c in result.failing] == [
            ("com.example.BarTest", "broken", TestOutcome.ERROR),
            ("com.example.FooTest", "testCommarea", TestOutcome.FAILED),
        ]
        assert result.summary.total == 6
        assert result.summary.passed == 3

    def test_custom_prefix_and_suffix(self, reports_dir, tmp_path):
        (reports_dir / "junit-Foo.report.xml").write_text(suite_xml([case_xml("a")]))
        (reports_dir / "TEST-Ignored.xml").write_text(suite_xml([case_xml("b")]))
        config = _config(reports_dir, tmp_path, report_prefix="junit-", report_suffix=".report.xml")
        result = ReportAggregator(config).run()
        assert [c.test_class for c in result.classes] == ["Foo"]

    def test_malformed_file_keeps_going(self, foo_report, reports_dir, tmp_path):
        (reports_dir / "TEST-a.Broken.xml").write_text(
            '<testsuite tests="2" failures="0">\n  <testcase name="kept"/>\n  <testcase name="lost">'
        )
        result = ReportAggregator(_config(reports_dir, tmp_path)).run()
        rows = (tmp_path / "out" / "test-summary.csv").read_text().splitlines()[1:]
        assert rows[0] == '"a.Broken","kept","PASSED",""'
        assert len(rows) == 4
        assert result.summary.total == 5

    def test_html_rows_match_csv_rows(self, foo_report, reports_dir, tmp_path):
        ReportAggregator(_config(reports_dir, tmp_path, title="CICS")).run(generated="now")
        html = (tmp_path / "out" / "test-summary.html").read_text()
        assert html.count("<tr><td>com.example.FooTest</td>") == 3
        assert "<title>CICS</title>" in html
        assert '<span id="timestamp">now</span>' in html

    def test_scans_output_issues(self, foo_report, reports_dir, tmp_path):
        (reports_dir / "com.example.FooTest-output.txt").write_text(
            "starting\nECI_ERR_UNKNOWN_SERVER while calling PROG1\n"
        )
        result = ReportAggregator(_config(reports_dir, tmp_path)).run()
        assert result.issues == ["com.example.FooTest-output.txt:ECI_ERR_UNKNOWN_SERVER while calling PROG1"]

    def test_issue_scan_disabled(self, foo_report, reports_dir, tmp_path):
        (reports_dir / "out.txt").write_text("Connection refused\n")
        result = ReportAggregator(_config(reports_dir, tmp_path, issue_limit=0)).run()
        assert result.issues == []
