#!/usr/bin/env python3
"""
Report Intune managed devices that have no Snipe-IT asset with the same serial number.

Read-only: nothing is written to either system. The HTML report can be written
to a file and/or emailed through Microsoft Graph.

Usage:
    python -m scripts.runbooks.intune_missing_in_snipeit --mail-to itops@example.com
    python -m scripts.runbooks.intune_missing_in_snipeit --report-path reports/missing.html --verbose
"""

import argparse
import logging
import sys
from typing import Optional

from inventory_sync.cli import (
    add_common_arguments,
    add_graph_arguments,
    add_report_arguments,
    add_snipeit_arguments,
    execute,
    handle_keyboard_interrupt,
    retry_options,
)
from inventory_sync.config import get_graph_config, get_mail_config, get_snipeit_config
from inventory_sync.logging_config import configure_logging
from inventory_sync.report import deliver_report
from inventory_sync.runbook import RunResult, run_existence_check
from microsoft_graph import GraphFacade
from snipeit import SnipeITFacade

RUNBOOK = "intune-missing-in-snipeit"
REPORT_TITLE = "Intune devices missing from Snipe-IT"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report Intune managed devices whose serial number is not in Snipe-IT"
    )
    add_common_arguments(parser)
    add_report_arguments(parser)
    add_graph_arguments(parser)
    add_snipeit_arguments(parser)
    return parser


def run(graph: GraphFacade, snipeit: SnipeITFacade, limit: Optional[int] = None) -> RunResult:
    devices = graph.get_managed_devices(limit=limit)
    assets = snipeit.get_assets()
    return run_existence_check(devices, assets, runbook=RUNBOOK)


@handle_keyboard_interrupt()
def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.log)

    def setup():
        graph_config = get_graph_config(args.tenant_id_var, args.client_id_var, args.client_secret_var)
        snipeit_config = get_snipeit_config(args.snipeit_url, args.snipeit_token_var)
        sender = get_mail_config(args.mail_sender_var)['sender'] if args.mail_to else None
        graph = GraphFacade.from_credentials(**graph_config, **retry_options(args))
        snipeit = SnipeITFacade(**snipeit_config, **retry_options(args))
        return graph, snipeit, sender

    def work(context):
        graph, snipeit, sender = context
        result = run(graph, snipeit, args.limit)
        deliver_report(
            result.report_rows,
            REPORT_TITLE,
            result.summary,
            report_path=args.report_path,
            mail_to=args.mail_to,
            send=lambda to, subject, body: graph.send_report(sender, to, subject, body),
            columns=result.report_columns,
        )
        return result.summary

    return execute(setup, work)


if __name__ == '__main__':
    sys.exit(main())
