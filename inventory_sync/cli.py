import argparse
import functools
import logging
import sys
from typing import Any, Callable

import requests

from .config import get_retry_config
from .exceptions import AuthenticationError, ConfigurationError, InventorySyncError
from .models import RunSummary
from .report import format_summary, log_summary

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_SETUP_ERROR = 2
EXIT_INTERRUPTED = 130

logger = logging.getLogger(__name__)


def handle_keyboard_interrupt(exit_message="Run interrupted by user"):
    """Decorator to handle KeyboardInterrupt and exit gracefully."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                logging.warning(f"\n{exit_message}")
                sys.exit(EXIT_INTERRUPTED)
        return wrapper
    return decorator


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def add_common_arguments(parser: argparse.ArgumentParser, batching: bool = False) -> argparse.ArgumentParser:
    """
    Add the flags every runbook accepts.

    Defaults come from the SYNC_* environment variables (see config.get_retry_config).

    Args:
        parser: The runbook's parser.
        batching: Also add --batch-size/--batch-delay (write runbooks only).
    """
    defaults = get_retry_config()

    parser.add_argument('--dry-run', '--whatif', dest='dry_run', action='store_true',
                        help='Classify and report without writing to the target system')
    parser.add_argument('--max-retries', type=positive_int, default=defaults['max_retries'],
                        help='Attempts per request on throttling/server errors (default: %(default)s)')
    parser.add_argument('--initial-backoff', type=float, default=defaults['initial_backoff'],
                        help='First retry wait in seconds, doubled after each retry (default: %(default)s)')
    parser.add_argument('--max-backoff', type=float, default=defaults['max_backoff'],
                        help='Ceiling for the retry wait in seconds (default: %(default)s)')
    parser.add_argument('--limit', type=positive_int, default=None,
                        help='Stop paging the source collection after this many records')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose logging')
    parser.add_argument('--log', nargs='?', const='inventory_sync.log',
                        help='Also log to a file (defaults to inventory_sync.log)')

    if batching:
        parser.add_argument('--batch-size', type=positive_int, default=defaults['batch_size'],
                            help='Updates per batch (default: %(default)s)')
        parser.add_argument('--batch-delay', type=float, default=defaults['batch_delay'],
                            help='Seconds to wait between batches (default: %(default)s)')
    return parser


def add_report_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument('--mail-to', action='append', default=[], metavar='ADDRESS',
                        help='Email the HTML report to this address (repeatable)')
    parser.add_argument('--mail-sender-var', default='MAIL_SENDER',
                        help='Environment variable holding the sending mailbox (default: %(default)s)')
    parser.add_argument('--report-path', help='Write the HTML report to this file')
    return parser


def add_graph_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument('--tenant-id-var', default='AZURE_TENANT_ID',
                        help='Environment variable holding the Entra tenant ID (default: %(default)s)')
    parser.add_argument('--client-id-var', default='AZURE_CLIENT_ID',
                        help='Environment variable holding the app registration client ID (default: %(default)s)')
    parser.add_argument('--client-secret-var', default='AZURE_CLIENT_SECRET',
                        help='Environment variable holding the client secret (default: %(default)s)')
    return parser


def add_snipeit_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument('--snipeit-url', help='Snipe-IT API base URL ending in /api/v1 (default: $SNIPEIT_URL)')
    parser.add_argument('--snipeit-token-var', default='SNIPEIT_API_TOKEN',
                        help='Environment variable holding the Snipe-IT API token (default: %(default)s)')
    return parser


def add_action1_arguments(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    parser.add_argument('--action1-org-id', help='Action1 organization ID (default: $ACTION1_ORG_ID)')
    parser.add_argument('--action1-client-id-var', default='ACTION1_CLIENT_ID',
                        help='Environment variable holding the Action1 client ID (default: %(default)s)')
    parser.add_argument('--action1-client-secret-var', default='ACTION1_CLIENT_SECRET',
                        help='Environment variable holding the Action1 client secret (default: %(default)s)')
    return parser


def retry_options(args: argparse.Namespace) -> dict:
    """Keyword arguments for the API facades built from parsed flags."""
    return {
        'max_retries': args.max_retries,
        'initial_backoff': args.initial_backoff,
        'max_backoff': args.max_backoff,
    }


def execute(setup: Callable[[], Any], work: Callable[[Any], RunSummary]) -> int:
    """
    Run a runbook's two phases and map failures onto exit codes.

    ``setup`` reads configuration and acquires tokens; ``work`` fetches,
    reconciles and reports, returning the run summary. The JSON summary line is
    printed to stdout only when both phases succeed.

    Returns:
        int: EXIT_OK, EXIT_SETUP_ERROR for missing configuration or credentials,
        EXIT_FAILURE for any other unrecoverable error.
    """
    try:
        context = setup()
    except (ConfigurationError, AuthenticationError) as e:
        logger.error(f"❌ Setup failed: {e}")
        return EXIT_SETUP_ERROR
    except (InventorySyncError, requests.RequestException) as e:
        logger.error(f"❌ Setup failed: {e}")
        return EXIT_FAILURE

    try:
        summary = work(context)
    except (InventorySyncError, requests.RequestException) as e:
        logger.error(f"❌ Run failed: {e}")
        return EXIT_FAILURE

    log_summary(summary)
    print(format_summary(summary))
    return EXIT_OK
