"""
Report aggregator: turns a directory of Surefire reports into CSV and HTML summaries.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .config import ReportConfig
from .issues import scan_output_issues
from .models import AggregationResult, TestCaseResult
from .parser import ReportFile, find_report_files
from .reporting import CSVReportWriter, HTMLReportWriter, ReportWriter
from .results import failing_cases, summarize

logger = logging.getLogger(__name__)


class ReportAggregator:
    """Orchestrates one report generation pass."""

    def __init__(self, config: ReportConfig):
        self.config = config

    @property
    def reports_dir(self) -> Path:
        return Path(self.config.reports_dir)

    def discover(self) -> List[ReportFile]:
        """
        List the report files of the configured directory.

        Returns:
            ReportFile objects in processing order (empty if the directory is missing)
        """
        if not self.reports_dir.is_dir():
            logger.warning("Surefire reports directory not found: %s", self.reports_dir)
            return []

        paths = find_report_files(
            self.reports_dir, self.config.report_prefix, self.config.report_suffix
        )
        if not paths:
            logger.warning(
                "No %s*%s reports found in %s",
                self.config.report_prefix,
                self.config.report_suffix,
                self.reports_dir,
            )
        return [
            ReportFile.from_path(p, self.config.report_prefix, self.config.report_suffix)
            for p in paths
        ]

    def run(self, generated: Optional[str] = None) -> AggregationResult:
        """
        Generate the CSV and HTML summaries.

        Args:
            generated: Timestamp shown in the HTML report (defaults to now)

        Returns:
            AggregationResult describing the run

        Raises:
            ReportWriteError: If either output file cannot be written
        """
        if generated is None:
            generated = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        reports = self.discover()
        classes = [report.declared_totals() for report in reports]
        summary = summarize(classes)
        failing: List[TestCaseResult] = []

        logger.info("Aggregating %d report files from %s", len(reports), self.reports_dir)

        csv_writer = CSVReportWriter(self.config.csv_output)
        html_writer = HTMLReportWriter(self.config.html_output, title=self.config.title)
        writers: List[ReportWriter] = [csv_writer, html_writer]

        with csv_writer, html_writer:
            for writer in writers:
                writer.begin(generated=generated, repo_type=self.config.repo_type)

            for report in reports:
                logger.debug("Parsing %s", report.path)
                cases = list(report)
                for case in cases:
                    for writer in writers:
                        writer.write_case(case)
                failing.extend(failing_cases(cases))

            for writer in writers:
                writer.finish(summary)

        issues = scan_output_issues(
            self.reports_dir, self.config.issue_patterns, self.config.issue_limit
        )
        if issues:
            logger.warning("Connection errors detected in test output (%d hits)", len(issues))

        logger.info(
            "Summary: %d total, %d passed, %d failed, %d errors, %d skipped",
            summary.total,
            summary.passed,
            summary.failed,
            summary.errors,
            summary.skipped,
        )

        return AggregationResult(
            summary=summary,
            csv_path=csv_writer.path,
            html_path=html_writer.path,
            reports_found=self.reports_dir.is_dir(),
            classes=classes,
            failing=failing,
            issues=issues,
            reports_dir=self.reports_dir,
        )


def generate_reports(
    reports_dir: Union[str, Path],
    repo_type: str,
    csv_path: Union[str, Path],
    html_path: Union[str, Path],
    generated: Optional[str] = None,
) -> AggregationResult:
    """
    Summarize a directory of test reports into a CSV and an HTML file.

    Args:
        reports_dir: Directory holding the ``TEST-*.xml`` reports
        repo_type: Repository label shown in the HTML report
        csv_path: Destination of the CSV summary (overwritten)
        html_path: Destination of the HTML summary (overwritten)
        generated: Timestamp shown in the HTML report (defaults to now)

    Returns:
        AggregationResult describing the run

    Raises:
        ReportWriteError: If either output file cannot be written
    """
    config = ReportConfig(
        reports_dir=str(reports_dir),
        repo_type=repo_type,
        csv_output=str(csv_path),
        html_output=str(html_path),
    )
    return ReportAggregator(config).run(generated=generated)
