#!/usr/bin/env python3
"""
Alert on Action1 managed endpoints that are not enrolled in Intune.

Action1 endpoints are matched to Intune managed devices by serial number. The
endpoints with no Intune counterpart are listed in an HTML report that can be
emailed through Microsoft Graph.

Usage:
    python -m scripts.runbooks.action1_missing_in_intune --mail-to itops@example.com
"""

import argparse
import logging
import sys
from typing import Optional

from action1 import Action1Facade
from inventory_sync.cli import (
    add_action1_arguments,
    add_common_arguments,
    add_graph_arguments,
    add_report_arguments,
    execute,
    handle_keyboard_interrupt,
    retry_options,
)
from inventory_sync.config import get_action1_config, get_graph_config, get_mail_config
from inventory_sync.logging_config import configure_logging
from inventory_sync.report import deliver_report
from inventory_sync.runbook import RunResult, run_existence_check
from microsoft_graph import GraphFacade

RUNBOOK = "action1-missing-in-intune"
REPORT_TITLE = "Action1 endpoints missing from Intune"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report Action1 managed endpoints whose serial number is not in Intune"
    )
    add_common_arguments(parser)
    add_report_arguments(parser)
    add_graph_arguments(parser)
    add_action1_arguments(parser)
    return parser


def run(action1: Action1Facade, graph: GraphFacade, limit: Optional[int] = None) -> RunResult:
    endpoints = action1.get_endpoints(limit=limit)
    devices = graph.get_managed_devices()
    return run_existence_check(endpoints, devices, runbook=RUNBOOK)


@handle_keyboard_interrupt()
def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.log)

    def setup():
        graph_config = get_graph_config(args.tenant_id_var, args.client_id_var, args.client_secret_var)
        action1_config = get_action1_config(
            args.action1_org_id, args.action1_client_id_var, args.action1_client_secret_var
        )
        sender = get_mail_config(args.mail_sender_var)['sender'] if args.mail_to else None
        graph = GraphFacade.from_credentials(**graph_config, **retry_options(args))
        action1 = Action1Facade.from_credentials(**action1_config, **retry_options(args))
        return action1, graph, sender

    def work(context):
        action1, graph, sender = context
        result = run(action1, graph, args.limit)
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
