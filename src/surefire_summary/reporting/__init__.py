"""
Reporting modules for the Surefire report aggregator.
"""

from .base import ReportWriter
from .console import ConsoleReporter
from .csv_report import CSV_HEADER, CSVReportWriter
from .html_report import HTMLReportWriter

__all__ = ["ReportWriter", "ConsoleReporter", "CSVReportWriter", "CSV_HEADER", "HTMLReportWriter"]
