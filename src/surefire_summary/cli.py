"""
Command-line interface for the Surefire report aggregator.
"""

import logging
import sys
from typing import Optional

import click

from .aggregator import ReportAggregator
from .config import ConfigurationError, load_config, validate_config
from .exceptions import ReportWriteError
from .reporting import ConsoleReporter

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--reports-dir",
    type=click.Path(file_okay=False),
    help="Directory holding the TEST-*.xml reports (overrides config)",
)
@click.option(
    "--repo-type",
    type=str,
    help="Repository label shown in the HTML report (overrides config)",
)
@click.option(
    "--csv",
    "csv_output",
    type=click.Path(),
    help="Destination of the CSV summary (overrides config)",
)
@click.option(
    "--html",
    "html_output",
    type=click.Path(),
    help="Destination of the HTML summary (overrides config)",
)
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to configuration file (YAML)",
)
@click.option(
    "--ci",
    is_flag=True,
    help="Enable CI mode (exit 1 when tests failed or errored)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="WARNING",
    help="Logging level",
)
def main(
    reports_dir: Optional[str],
    repo_type: Optional[str],
    csv_output: Optional[str],
    html_output: Optional[str],
    config: Optional[str],
    ci: bool,
    log_level: str,
) -> None:
    """
    Surefire Summary - CSV and HTML summaries of JUnit XML test reports.

    Examples:

      # Summarize the reports of the current Maven module
      surefire-summary

      # Summarize a specific module and label the repository
      surefire-summary --reports-dir camel-cics/target/surefire-reports --repo-type downstream

      # CI mode: fail the step when tests failed
      surefire-summary --ci --csv out/summary.csv --html out/summary.html
    """
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    try:
        logger.info("Loading configuration...")
        report_config = load_config(config)

        if reports_dir:
            report_config.reports_dir = reports_dir
        if repo_type:
            report_config.repo_type = repo_type
        if csv_output:
            report_config.csv_output = csv_output
        if html_output:
            report_config.html_output = html_output

        errors = validate_config(report_config)
        if errors:
            click.echo("Configuration errors:", err=True)
            for error in errors:
                click.echo(f"  - {error}", err=True)
            sys.exit(1)

        result = ReportAggregator(report_config).run()
        click.echo(ConsoleReporter().generate(result))

        if ci and not result.summary.success:
            sys.exit(1)
        sys.exit(0)

    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except ReportWriteError as e:
        logger.error("%s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        click.echo(f"Unexpected error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
