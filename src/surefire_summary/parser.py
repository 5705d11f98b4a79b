"""
Streaming parser for Surefire/JUnit XML report files.
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Union

from .models import DeclaredTotals, TestCaseResult, TestOutcome

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "TEST-"
DEFAULT_SUFFIX = ".xml"

# Checked in this order; the first marker present decides the outcome.
_MARKERS = (
    ("failure", TestOutcome.FAILED),
    ("error", TestOutcome.ERROR),
    ("skipped", TestOutcome.SKIPPED),
)

_COUNTERS = ("tests", "failures", "errors", "skipped")

# Opening tag of a test case, allowing ">" inside quoted attribute values.
_TESTCASE_TAG = re.compile(rb"<testcase\b(?:[^>\"']|\"[^\"]*\"|'[^']*')*>")
_TESTCASE_CLOSE = b"</testcase>"

PathLike = Union[str, Path]


def _local_name(tag: str) -> str:
    """Strip an ``{namespace}`` qualifier from an element tag."""
    return tag.rsplit("}", 1)[-1]


def derive_test_class(
    path: PathLike, prefix: str = DEFAULT_PREFIX, suffix: str = DEFAULT_SUFFIX
) -> str:
    """
    Derive the test class name from a report file name.

    ``TEST-com.example.FooTest.xml`` becomes ``com.example.FooTest``.
    """
    name = Path(path).name
    if prefix and name.startswith(prefix):
        name = name[len(prefix):]
    if suffix and name.endswith(suffix):
        name = name[: -len(suffix)]
    return name


def find_report_files(
    directory: PathLike, prefix: str = DEFAULT_PREFIX, suffix: str = DEFAULT_SUFFIX
) -> List[Path]:
    """
    List the report files in a directory, non-recursively.

    Args:
        directory: Directory holding the report files
        prefix: Fixed file name prefix of a report
        suffix: Fixed file name suffix of a report

    Returns:
        Matching files sorted by file name (empty if the directory is missing)
    """
    directory = Path(directory)
    if not directory.is_dir():
        return []
    files = [p for p in directory.iterdir() if p.is_file() and _is_report_name(p.name, prefix, suffix)]
    return sorted(files, key=lambda p: p.name)


def _is_report_name(name: str, prefix: str, suffix: str) -> bool:
    return (
        len(name) > len(prefix) + len(suffix)
        and name.startswith(prefix)
        and name.endswith(suffix)
    )


def _classify(elem: ET.Element, test_class: str) -> TestCaseResult:
    """Turn a complete ``<testcase>`` element into a TestCaseResult."""
    method = elem.get("name", "")
    children = {}
    for child in elem:
        children.setdefault(_local_name(child.tag), child)

    for tag, outcome in _MARKERS:
        marker = children.get(tag)
        if marker is not None:
            return TestCaseResult(test_class, method, outcome, marker.get("message", ""))

    return TestCaseResult(test_class, method, TestOutcome.PASSED)


def iter_test_cases(path: PathLike, test_class: str) -> Iterator[TestCaseResult]:
    """
    Lazily yield one TestCaseResult per ``<testcase>`` in a report file.

    Malformed or truncated documents are not fatal. Every test case closed
    before the parse error is yielded as it streams; the entries after it are
    then re-read one by one, so a single bad entry is dropped on its own and
    the valid entries that follow it are kept.

    Args:
        path: Report file to parse
        test_class: Class name attached to every result

    Yields:
        TestCaseResult objects in document order
    """
    yielded = 0
    try:
        with open(path, "rb") as fh:
            parents: List[ET.Element] = []
            for event, elem in ET.iterparse(fh, events=("start", "end")):
                if event == "start":
                    parents.append(elem)
                    continue
                parents.pop()
                if _local_name(elem.tag) != "testcase":
                    continue
                yield _classify(elem, test_class)
                yielded += 1
                elem.clear()
                if parents:
                    parents[-1].remove(elem)
        return
    except ET.ParseError as e:
        logger.warning("Malformed report %s, re-reading remaining entries: %s", path, e)
    except OSError as e:
        logger.warning("Unable to read report %s: %s", path, e)
        return

    yield from _recover_test_cases(path, test_class, skip=yielded)


def _testcase_blocks(data: bytes) -> Iterator[bytes]:
    """
    Split raw report bytes into one chunk per ``<testcase`` opening tag.

    A self-closing tag is its own chunk. Otherwise the chunk runs to the
    first ``</testcase>`` before the next opening tag, or up to that next
    tag when the entry is never closed.
    """
    starts = list(_TESTCASE_TAG.finditer(data))
    for i, match in enumerate(starts):
        if match.group(0).endswith(b"/>"):
            yield match.group(0)
            continue
        limit = starts[i + 1].start() if i + 1 < len(starts) else len(data)
        close = data.find(_TESTCASE_CLOSE, match.end(), limit)
        end = close + len(_TESTCASE_CLOSE) if close != -1 else limit
        yield data[match.start():end]


def _recover_test_cases(path: PathLike, test_class: str, skip: int) -> Iterator[TestCaseResult]:
    try:
        with open(path, "rb") as fh:
            data = fh.read()
    except OSError as e:
        logger.warning("Unable to read report %s: %s", path, e)
        return

    for index, block in enumerate(_testcase_blocks(data)):
        if index < skip:
            continue
        try:
            elem = ET.fromstring(block)
        except ET.ParseError as e:
            logger.warning("Dropping malformed test case #%d in %s: %s", index + 1, path, e)
            continue
        yield _classify(elem, test_class)


def _int_attr(attrib: Dict[str, str], key: str, path: PathLike) -> int:
    value = attrib.get(key)
    if value is None:
        return 0
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r in %s", key, value, path)
        return 0


def read_declared_totals(path: PathLike, test_class: str) -> DeclaredTotals:
    """
    Read the counters a report declares on its root element.

    Only the opening tags are inspected; test cases are not counted. A
    ``<testsuites>`` wrapper without counters of its own gets the sum of its
    direct ``<testsuite>`` children.

    Args:
        path: Report file to inspect
        test_class: Class name the totals belong to

    Returns:
        DeclaredTotals (all zero if the file cannot be read)
    """
    counts = dict.fromkeys(_COUNTERS, 0)
    try:
        with open(path, "rb") as fh:
            depth = 0
            wrapper = False
            for event, elem in ET.iterparse(fh, events=("start", "end")):
                if event == "end":
                    elem.clear()
                    depth -= 1
                    if depth <= 0:
                        break
                    continue
                depth += 1
                if depth == 1:
                    tag = _local_name(elem.tag)
                    if tag == "testsuites" and not any(k in elem.attrib for k in _COUNTERS):
                        wrapper = True
                        continue
                    for key in _COUNTERS:
                        counts[key] = _int_attr(elem.attrib, key, path)
                    break
                if wrapper and depth == 2 and _local_name(elem.tag) == "testsuite":
                    for key in _COUNTERS:
                        counts[key] += _int_attr(elem.attrib, key, path)
    except ET.ParseError as e:
        logger.warning("Malformed report %s, declared totals may be incomplete: %s", path, e)
    except OSError as e:
        logger.warning("Unable to read report %s: %s", path, e)

    return DeclaredTotals(test_class=test_class, **counts)


@dataclass(frozen=True)
class ReportFile:
    """A single report file; iterating it re-parses the file each time."""

    path: Path
    test_class: str

    @classmethod
    def from_path(
        cls, path: PathLike, prefix: str = DEFAULT_PREFIX, suffix: str = DEFAULT_SUFFIX
    ) -> "ReportFile":
        return cls(Path(path), derive_test_class(path, prefix, suffix))

    def __iter__(self) -> Iterator[TestCaseResult]:
        return iter_test_cases(self.path, self.test_class)

    def declared_totals(self) -> DeclaredTotals:
        return read_declared_totals(self.path, self.test_class)
