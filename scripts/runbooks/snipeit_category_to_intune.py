#!/usr/bin/env python3
"""
Copy each Snipe-IT asset's category onto the matching Intune managed device.

Assets are matched to Intune devices by serial number. When the asset's
category name differs from the device's category display name, the device is
assigned the Intune device category with that name. Updates run in batches
with a pause between batches; --dry-run logs the changes without making them.

Usage:
    python -m scripts.runbooks.snipeit_category_to_intune --dry-run
    python -m scripts.runbooks.snipeit_category_to_intune --batch-size 25 --batch-delay 30
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
from inventory_sync.models import ReconciliationItem
from inventory_sync.reconciliation import ReconciliationPolicy
from inventory_sync.report import deliver_report
from inventory_sync.runbook import RunResult, run_attribute_sync
from microsoft_graph import GraphFacade
from snipeit import SnipeITFacade

RUNBOOK = "snipeit-category-to-intune"
REPORT_TITLE = "Intune device category changes from Snipe-IT"

logger = logging.getLogger(__name__)

CATEGORY_POLICY = ReconciliationPolicy.for_attribute("category", "category")


def describe(item: ReconciliationItem) -> str:
    target = item.target
    return (
        f"{target.display_name} ({item.source.serial_number}): "
        f"category '{target.attribute('category') or ''}' -> '{item.source.attribute('category')}'"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Set Intune device categories from Snipe-IT asset categories"
    )
    add_common_arguments(parser, batching=True)
    add_report_arguments(parser)
    add_graph_arguments(parser)
    add_snipeit_arguments(parser)
    return parser


def run(
    snipeit: SnipeITFacade,
    graph: GraphFacade,
    dry_run: bool,
    batch_size: int = 50,
    batch_delay: float = 10,
    limit: Optional[int] = None,
) -> RunResult:
    assets = snipeit.get_assets(limit=limit)
    devices = graph.get_managed_devices()
    return run_attribute_sync(
        assets,
        devices,
        CATEGORY_POLICY,
        writer=lambda source, target: graph.set_device_category(target, source.attribute("category")),
        dry_run=dry_run,
        batch_size=batch_size,
        batch_delay=batch_delay,
        runbook=RUNBOOK,
        describe=describe,
    )


@handle_keyboard_interrupt()
def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.log)

    if args.dry_run:
        logger.info("🔍 DRY RUN MODE - No changes will be made")

    def setup():
        graph_config = get_graph_config(args.tenant_id_var, args.client_id_var, args.client_secret_var)
        snipeit_config = get_snipeit_config(args.snipeit_url, args.snipeit_token_var)
        sender = get_mail_config(args.mail_sender_var)['sender'] if args.mail_to else None
        graph = GraphFacade.from_credentials(**graph_config, **retry_options(args))
        snipeit = SnipeITFacade(**snipeit_config, **retry_options(args))
        return snipeit, graph, sender

    def work(context):
        snipeit, graph, sender = context
        result = run(snipeit, graph, args.dry_run, args.batch_size, args.batch_delay, args.limit)
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
