"""Serial number normalization and lookup index construction."""

import datetime
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional

import dateutil.parser

from .models import DeviceRecord

logger = logging.getLogger(__name__)

SerialIndex = Dict[str, DeviceRecord]
TimestampFn = Callable[[DeviceRecord], Optional[datetime.datetime]]


def normalize_serial(value: Optional[str]) -> Optional[str]:
    """
    Derive the join key for a serial number.

    Args:
        value: The serial number as reported by the vendor.

    Returns:
        Optional[str]: The trimmed, uppercased serial, or None when the value
        is missing or only whitespace.
    """
    if value is None:
        return None
    normalized = str(value).strip().upper()
    return normalized or None


def parse_timestamp(value: Optional[str]) -> Optional[datetime.datetime]:
    """
    Parse a vendor timestamp into an aware UTC datetime.

    Accepts ISO 8601 with a trailing Z and more than six fractional digits (as
    Graph returns them) as well as "YYYY-MM-DD HH:MM:SS". Graph's
    "0001-01-01T00:00:00Z" placeholder and unparseable values yield None.
    """
    if not value:
        return None
    try:
        parsed = dateutil.parser.isoparse(str(value).strip())
    except (ValueError, OverflowError):
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None
    if parsed.year <= 1:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed.astimezone(datetime.timezone.utc)


def last_sync_timestamp(record: DeviceRecord) -> Optional[datetime.datetime]:
    return record.last_sync


@dataclass
class IndexResult:
    index: SerialIndex = field(default_factory=dict)
    no_serial: int = 0
    duplicates: int = 0


def _is_later(candidate: Optional[datetime.datetime], current: Optional[datetime.datetime]) -> bool:
    # Missing timestamps never displace the record already indexed.
    if candidate is None or current is None:
        return False
    return candidate > current


def build_index(
    records: Iterable[DeviceRecord], timestamp_fn: Optional[TimestampFn] = None
) -> IndexResult:
    """
    Build a serial -> record lookup from the authoritative collection.

    When two records normalize to the same serial, the one with the later
    timestamp wins; on a tie or a missing timestamp the first one seen is kept.
    The result only depends on the order of ``records``.

    Args:
        records: Device records in the order the vendor returned them.
        timestamp_fn: Tie-break accessor, defaults to ``DeviceRecord.last_sync``.

    Returns:
        IndexResult: The index plus counts of serial-less and duplicate records.
    """
    timestamp_fn = timestamp_fn or last_sync_timestamp
    result = IndexResult()

    for record in records:
        key = normalize_serial(record.serial_number)
        if key is None:
            result.no_serial += 1
            continue

        current = result.index.get(key)
        if current is None:
            result.index[key] = record
            continue

        result.duplicates += 1
        if _is_later(timestamp_fn(record), timestamp_fn(current)):
            logger.debug(f"Duplicate serial {key}: keeping newer record {record.record_id}")
            result.index[key] = record
        else:
            logger.debug(f"Duplicate serial {key}: keeping {current.record_id}")

    if result.duplicates:
        logger.warning(f"Resolved {result.duplicates} duplicate serial number(s) while indexing")
    if result.no_serial:
        logger.info(f"{result.no_serial} record(s) without a serial number were not indexed")

    return result

