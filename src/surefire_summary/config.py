"""
Configuration management for the Surefire report aggregator.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from .issues import DEFAULT_ISSUE_PATTERNS
from .parser import DEFAULT_PREFIX, DEFAULT_SUFFIX

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


@dataclass
class ReportConfig:
    """Main configuration for a report generation run.

    Example config YAML::

        reports_dir: camel-cics/target/surefire-reports
        repo_type: middlestream
        csv_output: /tmp/camel-ibm-cics-test/test-summary.csv
        html_output: /tmp/camel-ibm-cics-test/test-summary.html
        issue_patterns:
          - ECI_ERR_UNKNOWN_SERVER
          - Connection refused
    """

    # Input
    reports_dir: str = "target/surefire-reports"
    report_prefix: str = DEFAULT_PREFIX
    report_suffix: str = DEFAULT_SUFFIX

    # Display
    repo_type: str = "Unknown"
    title: str = "Test Execution Summary"

    # Outputs
    csv_output: str = "test-summary.csv"
    html_output: str = "test-summary.html"

    # Test output scan
    issue_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_ISSUE_PATTERNS))
    issue_limit: int = 5

    def __post_init__(self) -> None:
        """Normalise values that YAML may hand over loosely typed."""
        if self.issue_patterns is None:
            self.issue_patterns = []
        elif isinstance(self.issue_patterns, str):
            self.issue_patterns = [self.issue_patterns]
        else:
            self.issue_patterns = [str(p) for p in self.issue_patterns]


def _parse_env_int(var_name: str) -> Optional[int]:
    """
    Safely parse an integer from an environment variable.

    Args:
        var_name: Name of the environment variable

    Returns:
        Parsed integer value, or None if the variable is not set

    Raises:
        ConfigurationError: If the value cannot be parsed as an integer
    """
    value = os.environ.get(var_name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(
            f"Environment variable {var_name} must be a valid integer, got: '{value}'"
        )


def load_config(config_file: Optional[str] = None) -> ReportConfig:
    """
    Load configuration from file and environment variables.

    Configuration precedence (highest to lowest):
    1. Environment variables
    2. Configuration file
    3. Default values

    Args:
        config_file: Path to YAML configuration file (optional)

    Returns:
        ReportConfig object with merged configuration

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
        ConfigurationError: If config file has invalid YAML or env vars are invalid
    """
    config_data: Dict[str, Any] = {}

    if config_file:
        logger.info("Loading configuration from %s", config_file)
        try:
            with open(config_file, "r") as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file '{config_file}': {e}")
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        except PermissionError:
            raise ConfigurationError(f"Permission denied reading config file '{config_file}'")
        except OSError as e:
            raise ConfigurationError(f"Unable to read config file '{config_file}': {e}")
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Config file '{config_file}' must contain a mapping, "
                f"got {type(file_config).__name__}"
            )
        config_data.update(file_config)

    env_overrides = _load_from_env()
    config_data.update(env_overrides)
    if env_overrides:
        logger.debug("Applied environment variable overrides: %s", list(env_overrides.keys()))

    try:
        return ReportConfig(**config_data)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_from_env() -> Dict[str, Any]:
    """
    Load configuration from environment variables.

    Supported environment variables:
    - SUREFIRE_REPORTS_DIR: Directory holding the TEST-*.xml reports
    - SUREFIRE_REPO_TYPE: Repository label shown in the HTML report
    - SUREFIRE_CSV_OUTPUT: Destination of the CSV summary
    - SUREFIRE_HTML_OUTPUT: Destination of the HTML summary
    - SUREFIRE_ISSUE_LIMIT: Maximum number of output issues listed

    Returns:
        Dictionary of configuration values from environment

    Raises:
        ConfigurationError: If environment variable values are invalid
    """
    env_config: Dict[str, Any] = {}

    if "SUREFIRE_REPORTS_DIR" in os.environ:
        env_config["reports_dir"] = os.environ["SUREFIRE_REPORTS_DIR"]

    if "SUREFIRE_REPO_TYPE" in os.environ:
        env_config["repo_type"] = os.environ["SUREFIRE_REPO_TYPE"]

    if "SUREFIRE_CSV_OUTPUT" in os.environ:
        env_config["csv_output"] = os.environ["SUREFIRE_CSV_OUTPUT"]

    if "SUREFIRE_HTML_OUTPUT" in os.environ:
        env_config["html_output"] = os.environ["SUREFIRE_HTML_OUTPUT"]

    issue_limit = _parse_env_int("SUREFIRE_ISSUE_LIMIT")
    if issue_limit is not None:
        env_config["issue_limit"] = issue_limit

    return env_config


def validate_config(config: ReportConfig) -> List[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: ReportConfig to validate

    Returns:
        List of error messages (empty if valid)
    """
    errors: List[str] = []

    if not config.reports_dir:
        errors.append("reports_dir is required")

    if not config.report_prefix and not config.report_suffix:
        errors.append("report_prefix and report_suffix cannot both be empty")

    if not config.csv_output:
        errors.append("csv_output is required")
    if not config.html_output:
        errors.append("html_output is required")
    if config.csv_output and os.path.abspath(config.csv_output) == os.path.abspath(
        config.html_output or ""
    ):
        errors.append(f"csv_output and html_output must differ: {config.csv_output}")

    if not isinstance(config.issue_limit, int) or config.issue_limit < 0:
        errors.append(f"issue_limit must be a non-negative integer: {config.issue_limit}")

    for i, pattern in enumerate(config.issue_patterns):
        if not pattern:
            errors.append(f"issue_patterns[{i}] is empty")

    return errors
