import argparse
import asyncio
import logging
import os
import sys
from typing import Iterable, List, Optional

from dotenv import load_dotenv

from athenacli.dal.athena.config import AthenaConfig
from athenacli.dal.athena.orchestrator import QueryOrchestrator
from athenacli.dal.errors import AthenaQueryError
from athenacli.reporting import ResultPresenter
from athenacli.sql.statements import InvalidSqlError, read_statements

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL_ENV = "ATHENACLI_LOG"

logger = logging.getLogger("athenacli.cli")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the athenacli command."""
    parser = argparse.ArgumentParser(prog="athenacli", description="Basic Athena CLI")
    parser.add_argument("-r", "--region", help="AWS region (default: $AWS_REGION)")
    parser.add_argument("-d", "--database", help="Database name to connect to")
    parser.add_argument(
        "-b",
        "--results",
        dest="output_location",
        help="S3 location for query results (eg s3://my-results)",
    )
    parser.add_argument("-w", "--workgroup", help="Athena workgroup to use")
    parser.add_argument(
        "--timeout",
        type=float,
        dest="query_timeout_seconds",
        help="Abandon a query after this many seconds (default: wait indefinitely)",
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-c",
        "--command",
        action="append",
        dest="commands",
        help="Run a single SQL statement, can be repeated",
    )
    source.add_argument(
        "-f", "--file", help="Execute one or more SQL statements from a file, then exit"
    )

    parser.add_argument(
        "-v",
        action="count",
        default=0,
        dest="verbose",
        help="Logging verbosity (repeat for more detail)",
    )
    return parser


def configure_logging(verbose: int) -> None:
    """Configure logging; ``$ATHENACLI_LOG`` overrides the ``-v`` derived level."""
    level_name = os.getenv(LOG_LEVEL_ENV) or ("INFO" if verbose == 0 else "DEBUG")
    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"{LOG_LEVEL_ENV} contained invalid level '{level_name}'")

    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
    logging.getLogger("athenacli").setLevel(level)
    if verbose > 1:
        logging.getLogger("botocore").setLevel(logging.DEBUG)


async def run_statements(
    orchestrator: QueryOrchestrator,
    statements: Iterable[str],
    presenter: ResultPresenter,
) -> int:
    """Execute statements in order, stopping at the first failure.

    Returns the number of statements executed.
    """
    executed = 0
    for sql in statements:
        result = await orchestrator.execute(sql)
        executed += 1
        logger.info(
            "Query complete: rows=%d data_scanned=%s execution_time=%s",
            result.row_count,
            result.data_scanned(),
            result.total_time(),
        )
        presenter.print_result(result)
    return executed


def main(argv: Optional[List[str]] = None) -> int:
    """Run the athenacli command."""
    args = build_parser().parse_args(argv)
    presenter = ResultPresenter()
    load_dotenv()

    try:
        configure_logging(args.verbose)
    except ValueError as e:
        presenter.print_error(str(e))
        return 1

    try:
        config = AthenaConfig.from_env(
            region=args.region,
            database=args.database,
            output_location=args.output_location,
            workgroup=args.workgroup,
            query_timeout_seconds=args.query_timeout_seconds,
        )
        statements = args.commands if args.commands else read_statements(args.file)
        orchestrator = QueryOrchestrator(config)
        logger.debug(
            "Executing %d statement(s) region=%s database=%s results=%s workgroup=%s",
            len(statements),
            config.region,
            config.database,
            config.output_location,
            config.workgroup,
        )
        asyncio.run(run_statements(orchestrator, statements, presenter))
    except (AthenaQueryError, InvalidSqlError, OSError, asyncio.TimeoutError) as e:
        logger.error("Error running query: %s", e)
        presenter.print_error(str(e) or type(e).__name__)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
