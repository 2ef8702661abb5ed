"""
Audit Models for the Expense Tracker

Every change to a ledger, and every rejected attempt to change one, is
recorded as an audit event. Events are append-only.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of events we audit."""
    # Lifecycle
    TRACKER_INITIALIZED = "tracker_initialized"
    SNAPSHOT_DISCARDED = "snapshot_discarded"

    # Mutations
    ENTRY_ADDED = "entry_added"
    ENTRY_REMOVED = "entry_removed"
    LEDGER_CLEARED = "ledger_cleared"
    INCOME_SET = "income_set"

    # Rejections and declines
    ENTRY_REJECTED = "entry_rejected"
    INCOME_REJECTED = "income_rejected"
    ACTION_DECLINED = "action_declined"

    # Persistence
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: LedgerEventType
    severity: AuditSeverity = AuditSeverity.INFO

    ledger: Optional[str] = Field(
        default=None,
        description="Storage key of the ledger involved (e.g., 'expenses')"
    )
    entry_id: Optional[int] = Field(
        default=None,
        description="Id of the entry this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "ledger": self.ledger,
            "entry_id": self.entry_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_added("expenses", entry)
        event = AuditEventBuilder.action_declined("clear_all")
    """

    @staticmethod
    def tracker_initialized(counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=LedgerEventType.TRACKER_INITIALIZED,
            description="Tracker state loaded from storage",
            details={"entry_counts": counts},
        )

    @staticmethod
    def snapshot_discarded(key: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=LedgerEventType.SNAPSHOT_DISCARDED,
            severity=AuditSeverity.WARNING,
            ledger=key,
            description=f"Stored snapshot for '{key}' could not be read; starting empty",
            error_message=reason,
        )

    @staticmethod
    def entry_added(key: str, entry_id: int, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=LedgerEventType.ENTRY_ADDED,
            ledger=key,
            entry_id=entry_id,
            description=f"Entry added to {key}",
            details={"amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def entry_rejected(key: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=LedgerEventType.ENTRY_REJECTED,
            severity=AuditSeverity.WARNING,
            ledger=key,
            description=f"Entry for {key} rejected",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def entry_removed(key: str, entry_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=LedgerEventType.ENTRY_REMOVED,
            ledger=key,
            entry_id=entry_id,
            description=f"Entry removed from {key}",
            is_user_action=True,
        )

    @staticmethod
    def ledger_cleared(keys: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=LedgerEventType.LEDGER_CLEARED,
            description="All ledgers cleared",
            details={"keys": keys},
            is_user_action=True,
        )

    @staticmethod
    def income_set(amount: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=LedgerEventType.INCOME_SET,
            description="Income cleared" if amount is None else "Income updated",
            details={"amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def income_rejected(raw_value: str) -> AuditEvent:
        return AuditEvent(
            event_type=LedgerEventType.INCOME_REJECTED,
            severity=AuditSeverity.WARNING,
            description="Income value rejected",
            details={"value": raw_value},
            is_user_action=True,
        )

    @staticmethod
    def action_declined(action: str, entry_id: Optional[int] = None) -> AuditEvent:
        return AuditEvent(
            event_type=LedgerEventType.ACTION_DECLINED,
            entry_id=entry_id,
            description=f"User declined {action}",
            details={"action": action},
            is_user_action=True,
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=LedgerEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            ledger=key,
            description=f"Could not persist '{key}'; changes kept in memory only",
            error_message=error_message,
        )
