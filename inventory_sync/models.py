"""Data models shared by every reconciliation runbook."""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Ownership(Enum):
    CORPORATE = "Corporate"
    PERSONAL = "Personal"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Ownership":
        """Map a vendor ownership string (e.g. Graph's 'company') onto the enum."""
        if not value:
            return cls.UNKNOWN
        lowered = value.strip().lower()
        if lowered in ("company", "corporate"):
            return cls.CORPORATE
        if lowered == "personal":
            return cls.PERSONAL
        return cls.UNKNOWN


class Outcome(Enum):
    """Classification of a single source record."""

    MISSING = "Missing"
    MATCHED_NO_CHANGE = "Matched-NoChange"
    MATCHED_NEEDS_UPDATE = "Matched-NeedsUpdate"
    SKIPPED_NO_SERIAL = "SkippedNoSerial"
    SKIPPED_NO_SOURCE_VALUE = "SkippedNoSourceValue"
    NOT_FOUND_IN_TARGET = "NotFoundInTarget"
    ERROR = "Error"


@dataclass
class DeviceRecord:
    """
    One physical asset as seen by a single source system.

    The serial number is kept exactly as the vendor returned it; lookups use
    a derived normalized key and never write it back.
    """

    serial_number: Optional[str]
    display_name: Optional[str] = None
    operating_system: Optional[str] = None
    last_sync: Optional[datetime.datetime] = None
    ownership: Ownership = Ownership.UNKNOWN
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)
    record_id: Optional[str] = None
    source: str = ""

    def attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def as_report_row(self) -> Dict[str, Any]:
        row = {
            "Serial Number": self.serial_number or "",
            "Device Name": self.display_name or "",
            "Operating System": self.operating_system or "",
            "Ownership": self.ownership.value,
            "Last Sync": self.last_sync.isoformat() if self.last_sync else "",
        }
        for name, value in self.attributes.items():
            row[name.replace("_", " ").title()] = value or ""
        return row


@dataclass
class ReconciliationItem:
    source: DeviceRecord
    target: Optional[DeviceRecord]
    outcome: Outcome


@dataclass
class ActionResult:
    applied: bool
    error: Optional[str] = None
    dry_run: bool = False


@dataclass
class Page:
    """Vendor-neutral page of a paginated collection."""

    items: List[Dict[str, Any]]
    next_url: Optional[str] = None


@dataclass
class RunSummary:
    """
    Aggregate counters for one runbook execution.

    Every classified record increments exactly one outcome counter, so the
    counters always sum to ``total``. Action results add to ``updated`` and
    ``errors``; a failed action also moves the record from the needs-update
    counter to the error counter.
    """

    runbook: str = ""
    dry_run: bool = False
    total: int = 0
    updated: int = 0
    errors: int = 0
    batches: int = 0
    duration_seconds: float = 0.0
    counts: Dict[Outcome, int] = field(default_factory=lambda: {outcome: 0 for outcome in Outcome})

    def record_outcome(self, outcome: Outcome) -> None:
        self.total += 1
        self.counts[outcome] += 1

    def record_action(self, result: ActionResult) -> None:
        if result.applied:
            self.updated += 1
        elif result.error is not None:
            self.errors += 1
            self.counts[Outcome.MATCHED_NEEDS_UPDATE] -= 1
            self.counts[Outcome.ERROR] += 1

    def count(self, outcome: Outcome) -> int:
        return self.counts[outcome]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "runbook": self.runbook,
            "dryRun": self.dry_run,
            "total": self.total,
            "missing": self.counts[Outcome.MISSING],
            "noChange": self.counts[Outcome.MATCHED_NO_CHANGE],
            "needsUpdate": self.counts[Outcome.MATCHED_NEEDS_UPDATE],
            "skippedNoSerial": self.counts[Outcome.SKIPPED_NO_SERIAL],
            "skippedNoSourceValue": self.counts[Outcome.SKIPPED_NO_SOURCE_VALUE],
            "notFoundInTarget": self.counts[Outcome.NOT_FOUND_IN_TARGET],
            "error": self.counts[Outcome.ERROR],
            "updated": self.updated,
            "errors": self.errors,
            "batches": self.batches,
            "durationSeconds": round(self.duration_seconds, 2),
        }
