"""Rendering utilities for the run summary and the notable-record report."""

import datetime
import html
import json
import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

from .models import DeviceRecord, ReconciliationItem, RunSummary

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = ["Serial Number", "Device Name", "Operating System", "Ownership", "Last Sync"]
CHANGE_COLUMNS = ["Serial Number", "Device Name", "Operating System", "Previous Value", "New Value", "Status"]

ReportRow = Dict[str, Any]

_STYLE = """
<style>
  body { font-family: Segoe UI, Arial, sans-serif; font-size: 13px; }
  table { border-collapse: collapse; }
  th, td { border: 1px solid #ccc; padding: 4px 8px; text-align: left; }
  th { background: #f0f0f0; }
</style>
"""


def summarize(summary: RunSummary) -> Dict[str, Any]:
    """Structured summary of a run; produced whether or not anything was notable."""
    return summary.as_dict()


def format_summary(summary: RunSummary) -> str:
    """Single JSON line emitted on stdout when a run completes."""
    return json.dumps(summarize(summary), sort_keys=False)


def log_summary(summary: RunSummary) -> None:
    data = summarize(summary)
    logger.info("=" * 80)
    logger.info(f"{summary.runbook or 'Run'} complete ({'DRY RUN' if summary.dry_run else 'LIVE'})")
    for key, value in data.items():
        if key in ("runbook", "dryRun"):
            continue
        logger.info(f"  {key}: {value}")
    logger.info("=" * 80)


def records_to_rows(records: Iterable[DeviceRecord]) -> List[ReportRow]:
    return [record.as_report_row() for record in records]


def change_row(
    item: ReconciliationItem,
    previous: Optional[str],
    new: Optional[str],
    status: str,
) -> ReportRow:
    """One report row for an attempted update, showing the value before and after."""
    device = item.target or item.source
    return {
        "Serial Number": item.source.serial_number or "",
        "Device Name": device.display_name or item.source.display_name or "",
        "Operating System": device.operating_system or item.source.operating_system or "",
        "Previous Value": previous or "",
        "New Value": new or "",
        "Status": status,
    }


def rows_to_frame(rows: Iterable[ReportRow], columns: Optional[List[str]] = None) -> pd.DataFrame:
    frame = pd.DataFrame(list(rows), columns=columns or DEFAULT_COLUMNS)
    return frame.fillna("")


def report_title(title: str, summary: Optional[RunSummary] = None) -> str:
    """Marks dry-run reports so a would-be change is never read as a real one."""
    if summary is not None and summary.dry_run:
        return f"[DRY RUN] {title}"
    return title


def render_html(
    rows: Iterable[ReportRow],
    title: str,
    summary: Optional[RunSummary] = None,
    columns: Optional[List[str]] = None,
) -> str:
    """
    Render report rows as an HTML document.

    Every cell comes from a remote system and is HTML-escaped by
    ``DataFrame.to_html(escape=True)``; the title and summary lines are escaped
    with ``html.escape``.

    Args:
        rows: Report rows in report order (see ``records_to_rows`` and ``change_row``).
        title: Heading for the document (also used as the page title).
        summary: Optional run summary rendered above the table.
        columns: Report columns, defaults to serial/name/OS/ownership/last sync.

    Returns:
        str: A complete HTML document.
    """
    frame = rows_to_frame(rows, columns)
    safe_title = html.escape(title)
    generated = datetime.datetime.now(datetime.timezone.utc).strftime("%Y-%m-%d %H:%M UTC")

    parts = [
        "<html><head><meta charset=\"utf-8\">",
        f"<title>{safe_title}</title>",
        _STYLE,
        "</head><body>",
        f"<h2>{safe_title}</h2>",
        f"<p>Generated {generated}. {len(frame)} device(s) listed.</p>",
    ]

    if summary is not None:
        items = "".join(
            f"<li>{html.escape(str(key))}: {html.escape(str(value))}</li>"
            for key, value in summarize(summary).items()
        )
        parts.append(f"<ul>{items}</ul>")

    if frame.empty:
        parts.append("<p>No devices to report.</p>")
    else:
        parts.append(frame.to_html(index=False, escape=True, border=0))

    parts.append("</body></html>")
    return "\n".join(parts)


def write_html(path: str, document: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(document)
    logger.info(f"Report written to {path}")


def deliver_report(
    rows: List[ReportRow],
    title: str,
    summary: Optional[RunSummary] = None,
    report_path: Optional[str] = None,
    mail_to: Optional[List[str]] = None,
    send: Optional[Callable[[List[str], str, str], None]] = None,
    columns: Optional[List[str]] = None,
) -> Optional[str]:
    """
    Write and/or email the HTML report for a run.

    The file is written whenever ``report_path`` is given. Email only goes out
    when there are recipients and at least one row. Dry-run reports carry a
    "[DRY RUN]" prefix in both the heading and the email subject.

    Args:
        rows: Report rows (missing devices, or attempted changes with their status).
        title: Report heading, also the email subject.
        summary: Run summary rendered above the table.
        report_path: Optional file to write the HTML to.
        mail_to: Recipient addresses.
        send: Called as send(recipients, subject, html_body).
        columns: Report columns, defaults to DEFAULT_COLUMNS.

    Returns:
        Optional[str]: The rendered document, or None if nothing was delivered.
    """
    wants_mail = bool(mail_to) and bool(rows) and send is not None
    if not report_path and not wants_mail:
        if mail_to and not rows:
            logger.info("No notable devices, skipping report email")
        return None

    title = report_title(title, summary)
    document = render_html(rows, title, summary, columns)
    if report_path:
        write_html(report_path, document)
    if wants_mail:
        send(list(mail_to), title, document)
    return document
