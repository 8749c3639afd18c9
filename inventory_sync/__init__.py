"""
Inventory Sync
==============

Shared reconciliation library for the device inventory runbooks: a resilient
paged HTTP client, serial-number indexing, record classification, batched
updates and reporting.
"""

from .models import DeviceRecord, Outcome, Ownership, RunSummary
from .normalization import build_index, normalize_serial
from .reconciliation import ReconciliationPolicy, classify, reconcile

__version__ = "0.1.0"

__all__ = [
    "DeviceRecord",
    "Outcome",
    "Ownership",
    "RunSummary",
    "build_index",
    "normalize_serial",
    "ReconciliationPolicy",
    "classify",
    "reconcile",
]
