"""Shared fakes and fixtures for the Expense Tracker tests."""

from datetime import datetime
from typing import Optional

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.config import TrackerSettings
from expense_tracker.models.entry import LedgerProfile, TrackerMode
from expense_tracker.services.storage import (
    InMemoryStorage,
    LedgerStore,
    StorageWriteError,
)
from expense_tracker.tracker import ExpenseTracker


FIXED_NOW = datetime(2024, 6, 10, 9, 15, 2)


class ScriptedConfirm:
    """Answers confirmation prompts with a fixed reply and records them."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.prompts: list[str] = []

    def __call__(self, message: str) -> bool:
        self.prompts.append(message)
        return self.answer


class RecordingNotify:
    """Collects every alert shown to the user."""

    def __init__(self):
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


class FailingStorage(InMemoryStorage):
    """Reads work, every write fails."""

    def set(self, key: str, value: str) -> None:
        raise StorageWriteError("disk full")

    def delete(self, key: str) -> None:
        raise StorageWriteError("disk full")


def make_settings(mode: TrackerMode = TrackerMode.INCOME_LEDGER, **overrides) -> TrackerSettings:
    values = {"mode": mode, "use_file_storage": False}
    values.update(overrides)
    return TrackerSettings(_env_file=None, **values)


def make_tracker(
    storage: Optional[InMemoryStorage] = None,
    mode: TrackerMode = TrackerMode.INCOME_LEDGER,
    confirm: Optional[ScriptedConfirm] = None,
    notify: Optional[RecordingNotify] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> ExpenseTracker:
    audit_logger = audit_logger or AuditLogger()
    storage = storage if storage is not None else InMemoryStorage()
    tracker = ExpenseTracker(
        store=LedgerStore(storage, audit_logger),
        confirm=confirm or ScriptedConfirm(),
        notify=notify or RecordingNotify(),
        settings=make_settings(mode),
        profile=LedgerProfile.for_mode(mode),
        clock=lambda: FIXED_NOW,
        audit_logger=audit_logger,
    )
    tracker.initialize()
    return tracker


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def confirm() -> ScriptedConfirm:
    return ScriptedConfirm(answer=True)


@pytest.fixture
def notify() -> RecordingNotify:
    return RecordingNotify()


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()
