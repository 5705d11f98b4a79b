"""
CSV reporter for test case results.
"""

import csv

from ..models import TestCaseResult
from .base import ReportWriter

CSV_HEADER = "Test Class,Test Method,Result,Failure Reason"


class CSVReportWriter(ReportWriter):
    """Write one fully quoted CSV row per test case."""

    def _write_header(self, **metadata: str) -> None:
        self.stream.write(CSV_HEADER + "\n")
        self._writer = csv.writer(self.stream, quoting=csv.QUOTE_ALL, lineterminator="\n")

    def _write_case(self, case: TestCaseResult) -> None:
        self._writer.writerow(
            [case.test_class, case.test_method, case.outcome.value, case.reason]
        )
