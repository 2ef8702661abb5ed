"""
Derived Metrics

Pure functions over ledger snapshots. Nothing here is stored: every total
is recomputed from the entries on demand, so there is no cached total that
can drift from the ledger.

All arithmetic is done in Decimal, so totals are exact and independent of
summation order.
"""

from decimal import Decimal
from typing import Iterable, Optional

from expense_tracker.models.entry import Entry


ZERO = Decimal("0")


def total(entries: Iterable[Entry]) -> Decimal:
    """Sum of all entry amounts; 0 for an empty ledger."""
    return sum((entry.amount for entry in entries), ZERO)


def remaining(total_income: Decimal, total_expenses: Decimal) -> Decimal:
    """Income left after expenses. May be negative."""
    return total_income - total_expenses


def is_overspending(remaining_balance: Decimal) -> bool:
    return remaining_balance < ZERO


def would_overspend(
    total_expenses: Decimal,
    amount: Decimal,
    income: Optional[Decimal],
) -> bool:
    """
    Check whether adding an expense would push expenses above income.

    Spending exactly the full income is allowed. When income is None (no
    income entered yet in fixed-income mode) there is nothing to check
    against and the expense is allowed.
    """
    if income is None:
        return False
    return total_expenses + amount > income


def category_totals(expenses: Iterable[Entry]) -> dict[str, Decimal]:
    """
    Sum expense amounts per category.

    Categories are matched exactly (case-sensitive, untrimmed). The result
    keeps the order in which each category was first seen. Entries without
    a category are skipped.
    """
    totals: dict[str, Decimal] = {}
    for entry in expenses:
        if entry.category is None:
            continue
        totals[entry.category] = totals.get(entry.category, ZERO) + entry.amount
    return totals


def highest_category(expenses: Iterable[Entry]) -> Optional[tuple[str, Decimal]]:
    """
    Find the category with the largest total.

    Ties go to the category seen first. Returns None if no expense has a
    category.
    """
    best: Optional[tuple[str, Decimal]] = None
    for category, amount in category_totals(expenses).items():
        if best is None or amount > best[1]:
            best = (category, amount)
    return best
