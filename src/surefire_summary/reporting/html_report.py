"""
Self-contained interactive HTML reporter.

The document is written in three passes: a static header carrying the run
metadata, one table row per test case, and a footer holding the summary
tiles and the filtering script. The stylesheet and script are bundled as
package assets and inlined, so the report opens without any other file.
"""

import html
from pathlib import Path
from typing import Union

from ..models import ReportSummary, TestCaseResult
from .base import ReportWriter

ASSETS_DIR = Path(__file__).parent / "assets"

_FILTER_BUTTONS = (
    ("all", "All", ""),
    ("PASSED", "Passed", "passed"),
    ("FAILED", "Failed", "failed"),
    ("ERROR", "Error", "error"),
    ("SKIPPED", "Skipped", "skipped"),
)


def load_asset(name: str) -> str:
    """Return the text of a bundled asset (``report.css`` or ``report.js``)."""
    return (ASSETS_DIR / name).read_text(encoding="utf-8")


def escape(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` for element content; quotes are kept."""
    return html.escape(text or "", quote=False)


def render_header(title: str, generated: str, repo_type: str) -> str:
    """Render everything up to and including the opening ``<tbody>``."""
    css = load_asset("report.css").rstrip("\n")
    buttons = "\n".join(
        f"        <button class=\"{css_class}\" onclick=\"filterByResult('{value}')\">{label}</button>"
        for value, label, css_class in _FILTER_BUTTONS
    )
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{escape(title)}</title>
    <style>
{css}
    </style>
</head>
<body>
    <h1>{escape(title)}</h1>
    <div class="summary">
        <p><strong>Report Generated:</strong> <span id="timestamp">{escape(generated)}</span></p>
        <p><strong>Repository:</strong> <span id="repo-type">{escape(repo_type)}</span></p>
        <div id="stats-container"></div>
    </div>

    <div class="filter">
        <input type="text" id="search" placeholder="Search test class or method..." onkeyup="filterTable()">
{buttons}
    </div>

    <table id="results-table">
        <thead>
            <tr>
                <th>Test Class</th>
                <th>Test Method</th>
                <th>Result</th>
                <th>Failure Reason</th>
            </tr>
        </thead>
        <tbody id="results-body">
"""


def render_row(case: TestCaseResult) -> str:
    """Render one ``<tr>`` for a test case."""
    return (
        f"<tr><td>{escape(case.test_class)}</td>"
        f"<td>{escape(case.test_method)}</td>"
        f"<td class=\"{case.outcome.css_class}\">{case.outcome.value}</td>"
        f"<td class=\"reason\">{escape(case.reason)}</td></tr>\n"
    )


def _stat_box(css_class: str, value: int, label: str) -> str:
    return f"""        <div class="stat-box {css_class}">
            <div class="stat-number">{value}</div>
            <div class="stat-label">{label}</div>
        </div>"""


def render_footer(summary: ReportSummary) -> str:
    """Render the summary tiles, the filtering script and the closing tags."""
    tiles = "\n".join(
        [
            _stat_box("total", summary.total, "Total Tests"),
            _stat_box("passed", summary.passed, "Passed"),
            _stat_box("failed", summary.failed, "Failed"),
            _stat_box("error", summary.errors, "Errors"),
            _stat_box("skipped", summary.skipped, "Skipped"),
        ]
    )
    script = load_asset("report.js").rstrip("\n")
    return f"""        </tbody>
    </table>

    <div class="stats" id="stats">
{tiles}
    </div>

    <script>
{script}
    </script>
</body>
</html>
"""


class HTMLReportWriter(ReportWriter):
    """Stream test cases into a single-file interactive HTML report."""

    def __init__(self, path: Union[str, Path], title: str = "Test Execution Summary"):
        super().__init__(path)
        self.title = title

    def _write_header(self, **metadata: str) -> None:
        self.stream.write(
            render_header(
                self.title,
                generated=metadata.get("generated", ""),
                repo_type=metadata.get("repo_type", "Unknown"),
            )
        )

    def _write_case(self, case: TestCaseResult) -> None:
        self.stream.write(render_row(case))

    def _write_footer(self, summary: ReportSummary) -> None:
        self.stream.write(render_footer(summary))
