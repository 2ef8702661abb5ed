"""
Audit Logger

Every ledger mutation and every rejected or declined action is logged as a
structured event. The audit logger:
- Runs synchronously, inside the same call as the action it records
- Emits at the level matching the event severity
"""

from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Events are written to the structured local log. Callers that want to
    inspect the trail (tests, for example) can read
    `recent_events`, a bounded in-memory copy.
    """

    def __init__(self, history_size: int = 100):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
        """
        self._logger = structlog.get_logger("expense_tracker.audit")
        self._history: list[AuditEvent] = []
        self._history_size = history_size

    @property
    def recent_events(self) -> list[AuditEvent]:
        """Recent events, oldest first."""
        return list(self._history)

    def log(self, event: AuditEvent) -> AuditEvent:
        """Log an audit event and return it."""
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._history.append(event)
        if len(self._history) > self._history_size:
            del self._history[0]

        return event

    def log_initialized(self, counts: dict[str, int]) -> None:
        self.log(AuditEventBuilder.tracker_initialized(counts))

    def log_snapshot_discarded(self, key: str, reason: str) -> None:
        """Log that a stored ledger was unreadable and replaced by an empty one."""
        self.log(AuditEventBuilder.snapshot_discarded(key, reason))

    def log_entry_added(self, key: str, entry_id: int, amount: str) -> None:
        self.log(AuditEventBuilder.entry_added(key, entry_id, amount))

    def log_entry_rejected(self, key: str, issues: list[dict]) -> None:
        """Log a validation or overspend rejection."""
        self.log(AuditEventBuilder.entry_rejected(key, issues))

    def log_entry_removed(self, key: str, entry_id: int) -> None:
        self.log(AuditEventBuilder.entry_removed(key, entry_id))

    def log_ledger_cleared(self, keys: list[str]) -> None:
        self.log(AuditEventBuilder.ledger_cleared(keys))

    def log_income_set(self, amount: Optional[str]) -> None:
        self.log(AuditEventBuilder.income_set(amount))

    def log_income_rejected(self, raw_value: str) -> None:
        self.log(AuditEventBuilder.income_rejected(raw_value))

    def log_action_declined(self, action: str, entry_id: Optional[int] = None) -> None:
        """Log that the user answered 'no' to a confirmation prompt."""
        self.log(AuditEventBuilder.action_declined(action, entry_id))

    def log_save_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(key, error_message))
