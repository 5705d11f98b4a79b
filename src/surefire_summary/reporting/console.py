"""
Console reporter for an aggregation run.
"""

import os
import sys
from typing import Dict, List

from ..models import AggregationResult, TestCaseResult


def _supports_color() -> bool:
    """Return True if the output stream likely supports ANSI colours."""
    # Explicit opt-in / opt-out via environment variable
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    # Non-TTY output (e.g. piped to a file) should not use colour
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False
    # Windows: enable ANSI processing via the virtual terminal flag.
    if sys.platform == "win32":
        try:
            import ctypes

            kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
            # STD_OUTPUT_HANDLE = -11
            handle = kernel32.GetStdHandle(-11)
            # ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004
            mode = ctypes.c_ulong()
            kernel32.GetConsoleMode(handle, ctypes.byref(mode))
            kernel32.SetConsoleMode(handle, mode.value | 0x0004)
        except Exception:
            return False
    return True


def _group_by_class(cases: List[TestCaseResult]) -> Dict[str, List[TestCaseResult]]:
    grouped: Dict[str, List[TestCaseResult]] = {}
    for case in cases:
        grouped.setdefault(case.test_class, []).append(case)
    return grouped


class ConsoleReporter:
    """Generate the colored console listing for an aggregation run."""

    def __init__(self) -> None:
        color = _supports_color()
        self.GREEN = "\033[92m" if color else ""
        self.RED = "\033[91m" if color else ""
        self.YELLOW = "\033[93m" if color else ""
        self.BLUE = "\033[94m" if color else ""
        self.RESET = "\033[0m" if color else ""
        self.BOLD = "\033[1m" if color else ""

    def generate(self, result: AggregationResult) -> str:
        """Generate console report."""
        summary = result.summary
        lines = []

        lines.append(f"\n{self.BOLD}Test Summary{self.RESET}")
        lines.append("=" * 60)

        if not result.reports_found:
            lines.append(
                f"{self.YELLOW}Surefire reports directory not found: {result.reports_dir}{self.RESET}"
            )
            lines.append(
                f"{self.YELLOW}Tests may not have run, or the build failed before test execution"
                f"{self.RESET}"
            )
        elif result.reports_dir is not None:
            lines.append(f"Test reports location: {result.reports_dir}")

        # Zero counters are left out, except the total
        lines.append("")
        lines.append(f"  Total Tests:   {summary.total}")
        if summary.passed > 0:
            lines.append(f"  {self.GREEN}Passed:        {summary.passed}{self.RESET}")
        if summary.failed > 0:
            lines.append(f"  {self.RED}Failed:        {summary.failed}{self.RESET}")
        if summary.errors > 0:
            lines.append(f"  {self.RED}Errors:        {summary.errors}{self.RESET}")
        if summary.skipped > 0:
            lines.append(f"  {self.YELLOW}Skipped:       {summary.skipped}{self.RESET}")

        if result.classes:
            lines.append(f"\n{self.BOLD}Test classes executed:{self.RESET}")
            for totals in result.classes:
                if totals.has_problems:
                    lines.append(
                        f"  {self.RED}✗{self.RESET} {totals.test_class} "
                        f"({totals.tests} tests, {totals.failures} failures, {totals.errors} errors)"
                    )
                else:
                    lines.append(
                        f"  {self.GREEN}✓{self.RESET} {totals.test_class} ({totals.tests} tests)"
                    )

        if result.failing:
            lines.append(f"\n{self.RED}{self.BOLD}Failed/Error Test Details:{self.RESET}")
            for test_class, cases in _group_by_class(result.failing).items():
                lines.append(f"\n  {self.YELLOW}Class: {test_class}{self.RESET}")
                for case in cases:
                    lines.append(f"    - {case.test_method} [{case.outcome.value}]")
                    if case.reason:
                        first_line = case.reason.splitlines()[0]
                        lines.append(f"      {first_line}")

        if result.issues:
            lines.append(f"\n{self.YELLOW}{self.BOLD}Connection errors detected in test output:{self.RESET}")
            for issue in result.issues:
                lines.append(f"  {issue}")
            lines.append("  The tests may not be reaching the service they depend on.")
            lines.append("  Check that the service container is running and listening,")
            lines.append("  and inspect its logs for rejected connections.")
        elif result.reports_found:
            lines.append("\nNo obvious connection errors found in test output")

        lines.append(f"\n{self.BOLD}Test summary files created:{self.RESET}")
        lines.append(f"  CSV:  {result.csv_path}")
        lines.append(f"  HTML: {result.html_path}")

        if summary.success:
            lines.append(f"\n{self.GREEN}{self.BOLD}✓ NO FAILURES{self.RESET}")
        else:
            lines.append(f"\n{self.RED}{self.BOLD}✗ TESTS FAILED{self.RESET}")

        lines.append("")  # Empty line at end
        return "\n".join(lines)
