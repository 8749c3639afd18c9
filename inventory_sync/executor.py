"""Applies the write for records that need an update."""

import logging
from typing import Callable, Optional

from .logging_config import DRYRUN, SUCCESS
from .models import ActionResult, DeviceRecord, Outcome, ReconciliationItem

logger = logging.getLogger(__name__)

Writer = Callable[[DeviceRecord, DeviceRecord], object]
Describer = Callable[[ReconciliationItem], str]


def describe_change(item: ReconciliationItem) -> str:
    name = item.source.display_name or item.source.serial_number
    return f"{name} ({item.source.serial_number})"


def apply(
    item: ReconciliationItem,
    writer: Writer,
    dry_run: bool,
    describe: Optional[Describer] = None,
) -> ActionResult:
    """
    Perform the side-effecting write for a classified record.

    Only ``MATCHED_NEEDS_UPDATE`` items are acted on. In dry-run mode the change
    is logged and reported as applied without calling ``writer``. In live mode a
    failing write is logged and returned as an error so the caller can move on
    to the next record.

    Args:
        item: The classified record (source, matched target, outcome).
        writer: Callable performing the write, given (source, target).
        dry_run: Suppress the write when True.
        describe: Optional formatter for log lines.

    Returns:
        ActionResult: Whether the change was applied, and the error if not.
    """
    if item.outcome is not Outcome.MATCHED_NEEDS_UPDATE or item.target is None:
        return ActionResult(applied=False, dry_run=dry_run)

    description = (describe or describe_change)(item)

    if dry_run:
        logger.log(DRYRUN, f"[DRY RUN] Would update {description}")
        return ActionResult(applied=True, dry_run=True)

    try:
        writer(item.source, item.target)
    except Exception as e:
        logger.error(f"Failed to update {description}: {e}")
        return ActionResult(applied=False, error=str(e))

    logger.log(SUCCESS, f"Updated {description}")
    return ActionResult(applied=True)
