"""
Base class for streaming report writers.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Optional, Union

from ..exceptions import ReportWriteError
from ..models import ReportSummary, TestCaseResult


class ReportWriter(ABC):
    """
    Base class for writers that stream test cases into an output file.

    A writer is used in three passes: ``begin`` truncates the file and writes
    the header, ``write_case`` appends one row per test case, and ``finish``
    writes the footer and closes the file. ``OSError`` from any pass is
    raised as ``ReportWriteError``.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._fh: Optional[IO[str]] = None

    def begin(self, **metadata: str) -> None:
        """Open (truncating) the output file and write the header."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = open(self.path, "w", encoding="utf-8", newline="")
            self._write_header(**metadata)
        except OSError as e:
            self.close()
            raise ReportWriteError(str(self.path), e) from e

    def write_case(self, case: TestCaseResult) -> None:
        """Append one test case row."""
        self._require_open()
        try:
            self._write_case(case)
        except OSError as e:
            raise ReportWriteError(str(self.path), e) from e

    def finish(self, summary: ReportSummary) -> None:
        """Write the footer and close the file."""
        try:
            self._write_footer(summary)
        except OSError as e:
            raise ReportWriteError(str(self.path), e) from e
        finally:
            self.close()

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def _require_open(self) -> None:
        if self._fh is None:
            raise RuntimeError(f"{type(self).__name__} for {self.path} is not open")

    @property
    def stream(self) -> IO[str]:
        self._require_open()
        return self._fh  # type: ignore[return-value]

    def __enter__(self) -> "ReportWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @abstractmethod
    def _write_header(self, **metadata: str) -> None:
        pass

    @abstractmethod
    def _write_case(self, case: TestCaseResult) -> None:
        pass

    def _write_footer(self, summary: ReportSummary) -> None:
        """Write anything that follows the rows. Nothing by default."""
        pass
