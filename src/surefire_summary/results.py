"""
Test result aggregation and utilities.
"""

from typing import Iterable, List

from .models import DeclaredTotals, ReportSummary, TestCaseResult, TestOutcome


def summarize(declared_totals: Iterable[DeclaredTotals]) -> ReportSummary:
    """
    Aggregate per-class declared totals into a summary.

    The counters come from what each report file declares, not from the
    parsed test cases; ``passed`` is whatever remains of the total.

    Args:
        declared_totals: DeclaredTotals of every report file in the run

    Returns:
        ReportSummary with aggregated counters
    """
    total = failed = errors = skipped = 0
    for totals in declared_totals:
        total += totals.tests
        failed += totals.failures
        errors += totals.errors
        skipped += totals.skipped

    return ReportSummary(
        total=total,
        passed=total - failed - errors - skipped,
        failed=failed,
        errors=errors,
        skipped=skipped,
    )


def failing_cases(cases: Iterable[TestCaseResult]) -> List[TestCaseResult]:
    """Return the failed and errored test cases, preserving order."""
    return [c for c in cases if c.outcome in (TestOutcome.FAILED, TestOutcome.ERROR)]
