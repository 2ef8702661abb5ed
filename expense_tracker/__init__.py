"""
Expense Tracker - Source Package

Records income and expense entries, mirrors them to a key-value store,
and derives totals, the remaining balance and simple spending insights.

DESIGN PRINCIPLES:
1. Entries are immutable; ledgers only grow by append or shrink by removal
2. Totals are always derived, never stored
3. An expense that would exceed income is never recorded
4. Destructive actions require explicit confirmation
5. Storage, prompts and alerts are injected, never global
"""

from expense_tracker.tracker import (
    ExpenseTracker,
    TrackerError,
    TrackerModeError,
    create_tracker,
)

__version__ = "1.0.0"

__all__ = [
    "ExpenseTracker",
    "TrackerError",
    "TrackerModeError",
    "create_tracker",
]
