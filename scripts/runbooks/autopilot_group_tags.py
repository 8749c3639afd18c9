#!/usr/bin/env python3
"""
Set Windows Autopilot group tags from Intune device categories.

Only corporate-owned Windows devices are considered. Each device is matched to
its Autopilot identity by serial number, and the identity's group tag is set
to the device's category display name when the two differ. Devices without a
category are skipped.

Usage:
    python -m scripts.runbooks.autopilot_group_tags --dry-run --verbose
    python -m scripts.runbooks.autopilot_group_tags --batch-size 20
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from inventory_sync.cli import (
    add_common_arguments,
    add_graph_arguments,
    add_report_arguments,
    execute,
    handle_keyboard_interrupt,
    retry_options,
)
from inventory_sync.config import get_graph_config, get_mail_config
from inventory_sync.logging_config import configure_logging
from inventory_sync.models import DeviceRecord, Ownership, ReconciliationItem
from inventory_sync.reconciliation import ReconciliationPolicy
from inventory_sync.report import deliver_report
from inventory_sync.runbook import RunResult, run_attribute_sync
from microsoft_graph import GraphFacade

RUNBOOK = "autopilot-group-tags"
REPORT_TITLE = "Autopilot group tag changes from Intune categories"

logger = logging.getLogger(__name__)

GROUP_TAG_POLICY = ReconciliationPolicy.for_attribute("category", "group_tag")


def corporate_windows_devices(devices: Sequence[DeviceRecord]) -> List[DeviceRecord]:
    """Corporate-owned Windows devices, in their original order."""
    return [
        device for device in devices
        if device.ownership is Ownership.CORPORATE
        and (device.operating_system or "").strip().lower().startswith("windows")
    ]


def describe(item: ReconciliationItem) -> str:
    return (
        f"{item.source.display_name} ({item.source.serial_number}): "
        f"group tag '{item.target.attribute('group_tag') or ''}' -> '{item.source.attribute('category')}'"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Set Autopilot group tags to match Intune device categories"
    )
    add_common_arguments(parser, batching=True)
    add_report_arguments(parser)
    add_graph_arguments(parser)
    return parser


def run(
    graph: GraphFacade,
    dry_run: bool,
    batch_size: int = 50,
    batch_delay: float = 10,
    limit: Optional[int] = None,
) -> RunResult:
    devices = corporate_windows_devices(graph.get_managed_devices(limit=limit))
    logger.info(f"{len(devices)} corporate Windows device(s) to check")
    identities = graph.get_autopilot_devices()
    return run_attribute_sync(
        devices,
        identities,
        GROUP_TAG_POLICY,
        writer=lambda source, target: graph.set_group_tag(target, source.attribute("category")),
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
        sender = get_mail_config(args.mail_sender_var)['sender'] if args.mail_to else None
        graph = GraphFacade.from_credentials(**graph_config, **retry_options(args))
        return graph, sender

    def work(context):
        graph, sender = context
        result = run(graph, args.dry_run, args.batch_size, args.batch_delay, args.limit)
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
