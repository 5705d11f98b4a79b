"""
Data models for the Surefire report aggregator.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class TestOutcome(Enum):
    """Outcome of a single test case, as written to the reports."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    ERROR = "ERROR"
    SKIPPED = "SKIPPED"

    @property
    def css_class(self) -> str:
        """CSS class used for the result cell in the HTML report."""
        return self.name.lower()


@dataclass(frozen=True)
class TestCaseResult:
    """Result of one test method execution."""

    test_class: str
    test_method: str
    outcome: TestOutcome
    reason: str = ""


@dataclass(frozen=True)
class DeclaredTotals:
    """Counters a report file declares about itself on its root element."""

    test_class: str
    tests: int = 0
    failures: int = 0
    errors: int = 0
    skipped: int = 0

    @property
    def has_problems(self) -> bool:
        """Return True if the class reported failures or errors."""
        return self.failures > 0 or self.errors > 0


@dataclass(frozen=True)
class ReportSummary:
    """Aggregated counters for one report generation run."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    skipped: int = 0

    @property
    def success(self) -> bool:
        """Return True if nothing failed or errored."""
        return self.failed == 0 and self.errors == 0


@dataclass
class AggregationResult:
    """Everything a single aggregation run produced."""

    summary: ReportSummary
    csv_path: Path
    html_path: Path
    reports_found: bool = True
    classes: List[DeclaredTotals] = field(default_factory=list)
    failing: List[TestCaseResult] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)
    reports_dir: Optional[Path] = None
