"""``btc-query`` command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys

import structlog

from btc_query import __version__
from btc_query.classifier import NostrPolicy
from btc_query.config import Settings, load_settings
from btc_query.engine import QueryOptions, render_record, run_query
from btc_query.exceptions import (
    EncodingFailureError,
    ParseFailureError,
    SerializationFailureError,
)
from btc_query.projection import OutputShape
from btc_query.units import resolve_unit

logger = structlog.get_logger(__name__)

EXIT_PARSE_FAILURE = 1
EXIT_FATAL = 2


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="btc-query",
        description="Identify a bitcoin or lightning payment string and print its fields as JSON.",
    )
    parser.add_argument("query", help="bitcoin string to parse")
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Pretty printed JSON"
    )
    parser.add_argument(
        "-u",
        "--units",
        dest="unit",
        default=settings.units,
        help="Bitcoin denomination to display (btc, mbtc, sat, msat) "
        "(default: %(default)s)",
    )

    shape = parser.add_mutually_exclusive_group()
    shape.add_argument(
        "-s",
        "--sparse",
        dest="shape",
        action="store_const",
        const=OutputShape.SPARSE,
        help="Omit fields that have no value",
    )
    shape.add_argument(
        "-f",
        "--full",
        dest="shape",
        action="store_const",
        const=OutputShape.FULL,
        help="Emit every field, unset ones as null",
    )
    parser.set_defaults(shape=settings.shape)

    parser.add_argument(
        "-n",
        "--nostr",
        action="store_true",
        help="Include hex and bech32 forms of an embedded nostr key",
    )
    parser.add_argument(
        "--nostr-policy",
        choices=[p.value for p in NostrPolicy],
        default=settings.nostr_policy.value,
        help="How to treat a nostr key when --nostr is not given "
        "(default: %(default)s)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def main(argv: list[str] | None = None) -> int:
    """Run one query. Returns the process exit code."""
    # Settings may log, so logging is set up before they are read
    configure_logging()
    parser = build_parser(load_settings())
    args = parser.parse_args(argv)
    if args.verbose:
        configure_logging(verbose=True)

    options = QueryOptions(
        nostr_policy=NostrPolicy(args.nostr_policy),
        unit=resolve_unit(args.unit),
        shape=args.shape,
        include_nostr=args.nostr,
    )

    try:
        record = run_query(args.query, options)
        output = render_record(record, pretty=args.pretty)
    except ParseFailureError as e:
        print(e, file=sys.stderr)
        return EXIT_PARSE_FAILURE
    except (EncodingFailureError, SerializationFailureError) as e:
        logger.error("Query failed", error=str(e))
        print(e, file=sys.stderr)
        return EXIT_FATAL

    print(output)
    return 0


def run() -> None:
    """Synchronous entry point for console script."""
    sys.exit(main())
