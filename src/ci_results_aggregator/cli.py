"""
Command-line interface for the CI results aggregator.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .analyzer import Analyzer
from .config import ConfigurationError, load_config, validate_config
from .exceptions import RecordFormatError
from .loader import load_records
from .sorting import SortBy

logger = logging.getLogger(__name__)


@click.command()
@click.argument("jobs_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to configuration file (YAML)",
)
@click.option(
    "--sort-by",
    type=click.Choice([key.name for key in SortBy], case_sensitive=False),
    help="Key to order jobs by within each group (overrides config)",
)
@click.option(
    "--out-of-date-hours",
    type=int,
    help="Flag results older than this many hours (overrides config)",
)
@click.option(
    "--output",
    type=click.Path(),
    help="Output file for the aggregation (default: stdout)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="INFO",
    help="Logging level",
)
def main(
    jobs_file: str,
    config: Optional[str],
    sort_by: Optional[str],
    out_of_date_hours: Optional[int],
    output: Optional[str],
    log_level: str,
) -> None:
    """
    CI Results Aggregator - classify, roll up and order CI job test results.

    JOBS_FILE is a YAML or JSON document listing the collected jobs.

    Examples:

      # Aggregate with defaults
      ci-aggregate jobs.yaml

      # Worst jobs first, flag results older than a day
      ci-aggregate jobs.yaml --sort-by status --out-of-date-hours 24

      # Write the aggregation to a file
      ci-aggregate jobs.yaml --config config.yaml --output summary.json
    """
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    try:
        logger.info("Loading configuration...")
        aggregator_config = load_config(config)

        if sort_by:
            aggregator_config.sort_jobs_by = SortBy.parse(sort_by)
        if out_of_date_hours is not None:
            aggregator_config.out_of_date_hours = out_of_date_hours

        errors = validate_config(aggregator_config)
        if errors:
            click.echo("Configuration errors:", err=True)
            for error in errors:
                click.echo(f"  - {error}", err=True)
            sys.exit(1)

        records = load_records(jobs_file)
        aggregated = Analyzer().analyze(records, aggregator_config)

        report = json.dumps(aggregated.to_dict(), indent=2)
        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(report)
            click.echo(f"Aggregation written to: {output}")
        else:
            click.echo(report)

        logger.info(
            "Aggregation complete: %d job(s), %d failed, %d still failing",
            aggregated.total_jobs,
            aggregated.failed_jobs,
            aggregated.keep_fail_jobs,
        )

        sys.exit(0 if aggregated.success else 1)

    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except RecordFormatError as e:
        logger.error("Invalid job records: %s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except FileNotFoundError as e:
        logger.error("File not found: %s", e)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        click.echo(f"Unexpected error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
