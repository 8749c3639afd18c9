"""Classification of source records against a target serial index."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Mapping, Optional

from .models import DeviceRecord, Outcome, ReconciliationItem, RunSummary
from .normalization import normalize_serial

logger = logging.getLogger(__name__)

ValueFn = Callable[[DeviceRecord], Optional[str]]

MATCHED = (Outcome.MATCHED_NO_CHANGE, Outcome.MATCHED_NEEDS_UPDATE)


class Variant(Enum):
    EXISTENCE = "existence"
    ATTRIBUTE_SYNC = "attribute-sync"


@dataclass(frozen=True)
class ReconciliationPolicy:
    """
    Describes how a runbook compares a source record with its target.

    Attributes:
        variant (Variant): Existence check (report missing) or attribute sync.
        source_value (Optional[ValueFn]): Reads the value to propagate from the source record.
        target_value (Optional[ValueFn]): Reads the current value from the target record.
    """

    variant: Variant
    source_value: Optional[ValueFn] = None
    target_value: Optional[ValueFn] = None

    @classmethod
    def existence(cls) -> "ReconciliationPolicy":
        return cls(Variant.EXISTENCE)

    @classmethod
    def attribute_sync(cls, source_value: ValueFn, target_value: ValueFn) -> "ReconciliationPolicy":
        return cls(Variant.ATTRIBUTE_SYNC, source_value, target_value)

    @classmethod
    def for_attribute(cls, source_attribute: str, target_attribute: str) -> "ReconciliationPolicy":
        return cls.attribute_sync(
            lambda record: record.attribute(source_attribute),
            lambda record: record.attribute(target_attribute),
        )


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def classify(
    source: DeviceRecord,
    index: Mapping[str, DeviceRecord],
    policy: ReconciliationPolicy,
) -> Outcome:
    """
    Classify one source record.

    Rules are evaluated in a fixed order and the first match wins:
    no serial, no source value (attribute sync only), not in target,
    value already equal, needs update.

    Args:
        source: The record from the source collection.
        index: Normalized serial -> target record.
        policy: The comparison policy for the runbook.

    Returns:
        Outcome: Exactly one outcome; the decision itself never raises.
    """
    key = normalize_serial(source.serial_number)
    if key is None:
        return Outcome.SKIPPED_NO_SERIAL

    syncing = policy.variant is Variant.ATTRIBUTE_SYNC
    source_value = policy.source_value(source) if syncing else None
    if syncing and _is_blank(source_value):
        return Outcome.SKIPPED_NO_SOURCE_VALUE

    target = index.get(key)
    if target is None:
        return Outcome.NOT_FOUND_IN_TARGET if syncing else Outcome.MISSING

    if not syncing:
        return Outcome.MATCHED_NO_CHANGE

    # Attribute values compare case-sensitively; only the serial is case-folded.
    if policy.target_value(target) == source_value:
        return Outcome.MATCHED_NO_CHANGE
    return Outcome.MATCHED_NEEDS_UPDATE


@dataclass
class ReconciliationResult:
    items: List[ReconciliationItem] = field(default_factory=list)
    summary: RunSummary = field(default_factory=RunSummary)

    def with_outcome(self, outcome: Outcome) -> List[ReconciliationItem]:
        """Items with the given outcome, in source order."""
        return [item for item in self.items if item.outcome is outcome]


def reconcile(
    sources: Iterable[DeviceRecord],
    index: Mapping[str, DeviceRecord],
    policy: ReconciliationPolicy,
) -> ReconciliationResult:
    """Classify every source record in order and count each outcome once."""
    result = ReconciliationResult()
    for source in sources:
        outcome = classify(source, index, policy)
        key = normalize_serial(source.serial_number)
        target = index.get(key) if key and outcome in MATCHED else None
        result.items.append(ReconciliationItem(source=source, target=target, outcome=outcome))
        result.summary.record_outcome(outcome)
        logger.debug(f"{source.serial_number!r} ({source.display_name}) -> {outcome.value}")
    return result
