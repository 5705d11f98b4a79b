"""
Scan plain-text test output for known connectivity problems.
"""

import logging
from pathlib import Path
from typing import List, Sequence, Union

logger = logging.getLogger(__name__)

DEFAULT_ISSUE_PATTERNS = [
    "ECI_ERR_UNKNOWN_SERVER",
    "connection refused",
    "Connection refused",
]


def scan_output_issues(
    reports_dir: Union[str, Path],
    patterns: Sequence[str] = tuple(DEFAULT_ISSUE_PATTERNS),
    limit: int = 5,
) -> List[str]:
    """
    Search the ``*.txt`` output files next to the reports for known problems.

    Args:
        reports_dir: Directory holding the test output files
        patterns: Case-sensitive substrings that indicate a problem
        limit: Maximum number of hits to return

    Returns:
        Up to ``limit`` hits formatted as ``<file>:<line>``
    """
    reports_dir = Path(reports_dir)
    hits: List[str] = []
    if limit <= 0 or not patterns or not reports_dir.is_dir():
        return hits

    for path in sorted(reports_dir.glob("*.txt")):
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                for line in f:
                    if any(p in line for p in patterns):
                        hits.append(f"{path.name}:{line.rstrip()}")
                        if len(hits) >= limit:
                            return hits
        except OSError as e:
            logger.warning("Unable to read test output %s: %s", path, e)

    return hits
