"""
Data Models Package

This package contains all Pydantic models used by the Expense Tracker.
"""

from expense_tracker.models.entry import (
    Entry,
    EntryKind,
    LedgerProfile,
    LedgerSummary,
    TrackerMode,
    ValidationIssue,
    ValidationResult,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditSeverity,
    LedgerEventType,
)

__all__ = [
    # Ledger models
    "Entry",
    "EntryKind",
    "LedgerProfile",
    "LedgerSummary",
    "TrackerMode",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditSeverity",
    "LedgerEventType",
]
