"""
Expense Tracker

ExpenseTracker owns the ledgers for one session and is the only thing that
mutates them. Every mutation follows the same flow:

1. Validate the draft (and, for expenses, the overspend gate)
2. On rejection: notify the user once, change nothing
3. On success: update the in-memory ledger
4. Mirror the whole ledger to storage
5. Record an audit event

Destructive actions (remove, clear) go through the injected confirm
capability first; a declined prompt is not an error and has no effect.

The surrounding UI supplies two capabilities:
- confirm(message) -> bool   a blocking yes/no prompt
- notify(message) -> None    a blocking alert
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

import structlog

from expense_tracker.analytics import generate_insights, metrics
from expense_tracker.audit import AuditLogger
from expense_tracker.config import TrackerSettings, get_settings
from expense_tracker.identifiers import MonotonicIdFactory
from expense_tracker.models.entry import (
    Entry,
    EntryKind,
    LedgerProfile,
    LedgerSummary,
    ValidationResult,
)
from expense_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    LedgerStore,
    StorageError,
)
from expense_tracker.validation import EntryValidator
from expense_tracker.validation.validator import (
    INVALID_INCOME_VALUE_MESSAGE,
    AmountInput,
)


logger = structlog.get_logger(__name__)

Confirm = Callable[[str], bool]
Notify = Callable[[str], None]

DELETE_INCOME_PROMPT = "Delete this income entry? This cannot be undone."
DELETE_EXPENSE_PROMPT = "Delete this expense entry? This cannot be undone."
CLEAR_ALL_PROMPT = "Clear ALL incomes and expenses? This will delete all data."


class TrackerError(Exception):
    """Base exception for tracker misuse."""
    pass


class TrackerModeError(TrackerError):
    """Operation is not available in the configured tracker mode."""
    pass


class ExpenseTracker:
    """
    Holds the income and expense ledgers for one session.

    In income-ledger mode, income is a ledger of entries. In fixed-income
    mode, income is a single value that is overwritten rather than
    accumulated, and expenses carry a category.
    """

    def __init__(
        self,
        store: LedgerStore,
        confirm: Confirm,
        notify: Notify,
        settings: Optional[TrackerSettings] = None,
        profile: Optional[LedgerProfile] = None,
        id_factory: Optional[Callable[[], int]] = None,
        clock: Callable[[], datetime] = datetime.now,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings()
        self._profile = profile or self._settings.profile
        if self._profile.mode != self._settings.mode:
            raise TrackerModeError(
                f"Profile mode '{self._profile.mode.value}' does not match "
                f"settings mode '{self._settings.mode.value}'"
            )
        self._store = store
        self._confirm = confirm
        self._notify = notify
        self._validator = EntryValidator(self._profile)
        self._id_factory = id_factory or MonotonicIdFactory()
        self._clock = clock
        self._audit_logger = audit_logger or AuditLogger()

        self._incomes: list[Entry] = []
        self._expenses: list[Entry] = []
        self._income: Optional[Decimal] = None
        self._initialized = False

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def profile(self) -> LedgerProfile:
        return self._profile

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def storage_keys(self) -> list[str]:
        """Keys this tracker writes to storage."""
        return self._settings.storage_keys

    def initialize(self) -> None:
        """
        Load the previous session's state from storage.

        Missing or unreadable snapshots load as empty ledgers; this never
        raises. Calling it again has no effect.
        """
        if self._initialized:
            return

        if self._profile.uses_income_ledger:
            self._incomes = self._store.load(self._settings.incomes_key)
        else:
            self._income = self._store.load_scalar(self._settings.income_key)
        self._expenses = self._store.load(self._settings.expenses_key)

        if isinstance(self._id_factory, MonotonicIdFactory):
            self._id_factory.observe(
                entry.id for entry in [*self._incomes, *self._expenses]
            )

        self._initialized = True
        self._audit_logger.log_initialized({
            "incomes": len(self._incomes),
            "expenses": len(self._expenses),
        })

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    def _require_income_ledger(self, operation: str) -> None:
        if not self._profile.uses_income_ledger:
            raise TrackerModeError(
                f"{operation} requires income_ledger mode "
                f"(tracker is in {self._profile.mode.value} mode)"
            )

    def _require_fixed_income(self, operation: str) -> None:
        if self._profile.uses_income_ledger:
            raise TrackerModeError(
                f"{operation} requires fixed_income mode "
                f"(tracker is in {self._profile.mode.value} mode)"
            )

    # -------------------------------------------------------------------------
    # Persistence helpers
    # -------------------------------------------------------------------------

    def _persist(self, key: str, entries: list[Entry]) -> None:
        try:
            self._store.save(key, entries)
        except StorageError as e:
            self._audit_logger.log_save_failed(key, str(e))

    def _persist_income(self) -> None:
        key = self._settings.income_key
        try:
            if self._income is None:
                self._store.delete(key)
            else:
                self._store.save_scalar(key, self._income)
        except StorageError as e:
            self._audit_logger.log_save_failed(key, str(e))

    def _delete_key(self, key: str) -> None:
        try:
            self._store.delete(key)
        except StorageError as e:
            self._audit_logger.log_save_failed(key, str(e))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _new_entry(
        self,
        description: Optional[str],
        amount: Decimal,
        category: Optional[str] = None,
    ) -> Entry:
        return Entry(
            id=self._id_factory(),
            description=description or "",
            amount=amount,
            category=category,
            date=self._clock().strftime(self._settings.date_format),
        )

    def _reject(self, key: str, result: ValidationResult) -> None:
        self._notify(self._validator.get_user_message(result))
        self._audit_logger.log_entry_rejected(
            key,
            [issue.model_dump() for issue in result.issues],
        )

    def add_income(self, description: Optional[str], amount: AmountInput) -> Optional[Entry]:
        """
        Add an income entry (income-ledger mode).

        Returns:
            The new entry, or None if the draft was rejected
        """
        self._require_income_ledger("add_income")
        self._ensure_initialized()
        key = self._settings.incomes_key

        result = self._validator.validate_draft(
            EntryKind.INCOME,
            amount,
            description=description,
        )
        if result.has_errors:
            self._reject(key, result)
            return None

        entry = self._new_entry(description, result.amount)
        self._incomes.append(entry)
        self._persist(key, self._incomes)
        self._audit_logger.log_entry_added(key, entry.id, str(entry.amount))
        return entry

    def add_expense(
        self,
        amount: AmountInput,
        description: Optional[str] = "",
        category: Optional[str] = None,
    ) -> Optional[Entry]:
        """
        Add an expense entry.

        The expense is rejected if it would take total expenses above
        income. In fixed-income mode with no income entered, there is no
        limit. Income-ledger expenses carry no category; one passed in is
        dropped.

        Returns:
            The new entry, or None if the draft was rejected
        """
        self._ensure_initialized()
        key = self._settings.expenses_key

        if self._profile.uses_income_ledger:
            income = self.total_income
        else:
            income = self._income

        result = self._validator.validate_expense(
            amount,
            description=description,
            category=category,
            total_expenses=self.total_expenses,
            income=income,
        )
        if result.has_errors:
            self._reject(key, result)
            return None

        if self._profile.uses_income_ledger:
            category = None

        entry = self._new_entry(description, result.amount, category)
        self._expenses.append(entry)
        self._persist(key, self._expenses)
        self._audit_logger.log_entry_added(key, entry.id, str(entry.amount))
        return entry

    def set_income(self, value: AmountInput) -> bool:
        """
        Overwrite the income value (fixed-income mode).

        A blank value or None clears the income. Existing expenses are
        kept even if the new income is lower than what was already spent.

        Returns:
            True if the income was updated
        """
        self._require_fixed_income("set_income")
        self._ensure_initialized()

        if value is None or (isinstance(value, str) and not value.strip()):
            self._income = None
            self._persist_income()
            self._audit_logger.log_income_set(None)
            return True

        result = self._validator.validate_income_value(value)
        if result.has_errors:
            self._notify(INVALID_INCOME_VALUE_MESSAGE)
            self._audit_logger.log_income_rejected(str(value))
            return False

        self._income = result.amount
        self._persist_income()
        self._audit_logger.log_income_set(str(self._income))
        return True

    def _remove(
        self,
        ledger: list[Entry],
        key: str,
        entry_id: int,
        prompt: str,
    ) -> bool:
        self._ensure_initialized()

        if not self._confirm(prompt):
            self._audit_logger.log_action_declined(f"delete from {key}", entry_id)
            return False

        index = next(
            (i for i, entry in enumerate(ledger) if entry.id == entry_id),
            None,
        )
        if index is None:
            return False

        del ledger[index]
        self._persist(key, ledger)
        self._audit_logger.log_entry_removed(key, entry_id)
        return True

    def remove_income(self, entry_id: int) -> bool:
        """
        Remove an income entry after user confirmation.

        Returns:
            True if an entry was removed
        """
        self._require_income_ledger("remove_income")
        return self._remove(
            self._incomes,
            self._settings.incomes_key,
            entry_id,
            DELETE_INCOME_PROMPT,
        )

    def remove_expense(self, entry_id: int) -> bool:
        """
        Remove an expense entry after user confirmation.

        Returns:
            True if an entry was removed
        """
        return self._remove(
            self._expenses,
            self._settings.expenses_key,
            entry_id,
            DELETE_EXPENSE_PROMPT,
        )

    def clear_all(self) -> bool:
        """
        Empty every ledger after user confirmation.

        Unlike remove, this deletes the stored keys instead of writing
        empty ledgers.

        Returns:
            True if the ledgers were cleared
        """
        self._ensure_initialized()

        if not self._confirm(CLEAR_ALL_PROMPT):
            self._audit_logger.log_action_declined("clear_all")
            return False

        self._incomes = []
        self._expenses = []
        self._income = None

        keys = self.storage_keys
        for key in keys:
            self._delete_key(key)

        self._audit_logger.log_ledger_cleared(keys)
        return True

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    @property
    def incomes(self) -> tuple[Entry, ...]:
        return tuple(self._incomes)

    @property
    def expenses(self) -> tuple[Entry, ...]:
        return tuple(self._expenses)

    @property
    def income(self) -> Optional[Decimal]:
        """The fixed income value, or None if not entered."""
        return self._income

    @property
    def total_income(self) -> Decimal:
        if self._profile.uses_income_ledger:
            return metrics.total(self._incomes)
        return self._income if self._income is not None else metrics.ZERO

    @property
    def total_expenses(self) -> Decimal:
        return metrics.total(self._expenses)

    @property
    def remaining(self) -> Decimal:
        return metrics.remaining(self.total_income, self.total_expenses)

    @property
    def is_overspending(self) -> bool:
        return metrics.is_overspending(self.remaining)

    def category_totals(self) -> dict[str, Decimal]:
        return metrics.category_totals(self._expenses)

    def highest_category(self) -> Optional[tuple[str, Decimal]]:
        return metrics.highest_category(self._expenses)

    def insights(self) -> list[str]:
        """Insight lines for the current ledgers."""
        return generate_insights(
            self._profile,
            self._expenses,
            self.remaining,
            self._settings.currency_symbol,
        )

    def summary(self) -> LedgerSummary:
        """Totals for display."""
        remaining = self.remaining
        return LedgerSummary(
            total_income=self.total_income,
            total_expenses=self.total_expenses,
            remaining=remaining,
            is_overspending=metrics.is_overspending(remaining),
            income_count=len(self._incomes),
            expense_count=len(self._expenses),
        )


def create_tracker(
    confirm: Confirm,
    notify: Notify,
    settings: Optional[TrackerSettings] = None,
    storage: Optional[KeyValueStorage] = None,
) -> ExpenseTracker:
    """
    Factory function to build an initialized tracker.

    Args:
        confirm: Blocking yes/no prompt supplied by the UI
        notify: Blocking alert supplied by the UI
        settings: Settings to use (defaults to get_settings())
        storage: Storage backend. If None, one is built from settings;
                 if the configured file cannot be opened the tracker
                 falls back to in-memory storage.

    Returns:
        An ExpenseTracker with its previous state loaded
    """
    settings = settings or get_settings()
    logging.getLogger("expense_tracker").setLevel(settings.log_level)

    audit_logger = AuditLogger()

    if storage is None:
        if settings.use_file_storage:
            try:
                storage = JsonFileStorage(settings.storage_path)
            except StorageError as e:
                # Storage not available - continue in memory only
                logger.warning(
                    "file_storage_unavailable",
                    path=settings.storage_path,
                    error=str(e),
                )
                storage = InMemoryStorage()
        else:
            storage = InMemoryStorage()

    tracker = ExpenseTracker(
        store=LedgerStore(storage, audit_logger),
        confirm=confirm,
        notify=notify,
        settings=settings,
        audit_logger=audit_logger,
    )
    tracker.initialize()
    return tracker
