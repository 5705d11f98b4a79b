"""
Surefire Summary - CSV and HTML summaries of JUnit XML test reports.
"""

__version__ = "1.0.0"
