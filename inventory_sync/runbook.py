"""
Shared flow for the reconciliation runbooks.

Every runbook is one of two shapes: an existence check (report source records
whose serial is missing from the target) or an attribute sync (push a value
from the source onto the matching target record). Both take already-fetched
device records so the flow itself is independent of any vendor.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .batching import run_in_batches
from .executor import Describer, Writer, apply
from .models import DeviceRecord, Outcome, ReconciliationItem, RunSummary
from .normalization import TimestampFn, build_index
from .report import CHANGE_COLUMNS, DEFAULT_COLUMNS, change_row, records_to_rows
from .reconciliation import ReconciliationPolicy, reconcile

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """
    Outcome of one runbook pass.

    Attributes:
        summary (RunSummary): Counters for the run.
        notable (List[ReconciliationItem]): Missing records, or updates that were applied (or would be in a dry run).
        failed (List[ReconciliationItem]): Updates whose write failed.
        report_rows (List[Dict[str, Any]]): Rows for the HTML report, in source order.
        report_columns (List[str]): Column order for ``report_rows``.
    """

    summary: RunSummary
    notable: List[ReconciliationItem] = field(default_factory=list)
    failed: List[ReconciliationItem] = field(default_factory=list)
    report_rows: List[Dict[str, Any]] = field(default_factory=list)
    report_columns: List[str] = field(default_factory=lambda: list(DEFAULT_COLUMNS))

    @property
    def notable_records(self) -> List[DeviceRecord]:
        return [item.source for item in self.notable]


def run_existence_check(
    sources: Sequence[DeviceRecord],
    targets: Sequence[DeviceRecord],
    runbook: str = "",
    target_timestamp: Optional[TimestampFn] = None,
) -> RunResult:
    """
    Report every source record whose serial has no counterpart in ``targets``.

    Args:
        sources: Records to check, in source order.
        targets: The authoritative collection to check against.
        runbook: Name used in the summary.
        target_timestamp: Duplicate tie-break for the target index.

    Returns:
        RunResult: The summary and the ``MISSING`` items in source order.
    """
    started = time.monotonic()
    indexed = build_index(targets, target_timestamp)
    logger.info(f"Indexed {len(indexed.index)} target serial numbers")

    result = reconcile(sources, indexed.index, ReconciliationPolicy.existence())
    summary = result.summary
    summary.runbook = runbook
    summary.duration_seconds = time.monotonic() - started

    missing = result.with_outcome(Outcome.MISSING)
    for item in missing:
        logger.warning(f"Missing: {item.source.display_name} ({item.source.serial_number})")
    return RunResult(
        summary=summary,
        notable=missing,
        report_rows=records_to_rows(item.source for item in missing),
    )


def run_attribute_sync(
    sources: Sequence[DeviceRecord],
    targets: Sequence[DeviceRecord],
    policy: ReconciliationPolicy,
    writer: Writer,
    dry_run: bool,
    batch_size: int = 50,
    batch_delay: float = 10,
    runbook: str = "",
    target_timestamp: Optional[TimestampFn] = None,
    describe: Optional[Describer] = None,
) -> RunResult:
    """
    Push a source value onto matching target records.

    Only records classified ``MATCHED_NEEDS_UPDATE`` are handed to the batch
    scheduler, in source order. Each write result is folded into the summary;
    a failed write is counted and the run carries on.

    Args:
        sources: Records carrying the value to propagate.
        targets: Records to update, indexed by serial.
        policy: Attribute-sync policy naming the source and target values.
        writer: Performs one update, given (source, target).
        dry_run: Log instead of writing.
        batch_size: Updates per batch.
        batch_delay: Seconds between batches.
        runbook: Name used in the summary.
        target_timestamp: Duplicate tie-break for the target index.
        describe: Optional formatter for per-record log lines.

    Returns:
        RunResult: The summary, the applied and failed updates, and one report
        row per attempted update with the previous and new value.
    """
    started = time.monotonic()
    indexed = build_index(targets, target_timestamp)
    logger.info(f"Indexed {len(indexed.index)} target serial numbers")

    result = reconcile(sources, indexed.index, policy)
    summary = result.summary
    summary.runbook = runbook
    summary.dry_run = dry_run

    pending = result.with_outcome(Outcome.MATCHED_NEEDS_UPDATE)
    logger.info(f"{len(pending)} of {summary.total} record(s) need an update")

    batch_run = run_in_batches(
        pending,
        batch_size,
        batch_delay,
        lambda item: apply(item, writer, dry_run, describe),
    )
    summary.batches = batch_run.batches

    run_result = RunResult(summary=summary, report_columns=list(CHANGE_COLUMNS))
    for item, action_result in zip(pending, batch_run.results):
        summary.record_action(action_result)
        previous = policy.target_value(item.target)
        new = policy.source_value(item.source)
        if action_result.applied:
            run_result.notable.append(item)
            status = "Would update" if action_result.dry_run else "Updated"
        else:
            run_result.failed.append(item)
            status = f"Failed: {action_result.error}"
        run_result.report_rows.append(change_row(item, previous, new, status))

    summary.duration_seconds = time.monotonic() - started
    return run_result
