"""
Custom exceptions for the Surefire report aggregator.
"""


class SurefireSummaryError(Exception):
    """Base exception for report aggregation errors."""

    pass


class ReportWriteError(SurefireSummaryError):
    """Raised when an output report cannot be written."""

    def __init__(self, path: str, original_error: Exception):
        self.path = path
        self.original_error = original_error
        super().__init__(f"Unable to write report to {path}: {original_error}")
