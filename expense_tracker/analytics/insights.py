"""
Insight Generation

Turns derived metrics into short, human-readable lines. The income-ledger
mode only shows a fixed placeholder; the fixed-income mode derives its
lines from category totals.
"""

from decimal import Decimal
from typing import Sequence

from expense_tracker.analytics import metrics
from expense_tracker.models.entry import Entry, LedgerProfile


PLACEHOLDER_INSIGHT = (
    'Example insight: "Most of your expenses are on Food." '
    "(We will replace this with dynamic analysis next.)"
)

NO_INSIGHTS = "No insights yet."


def format_amount(value: Decimal, currency_symbol: str = "₹") -> str:
    """Format an amount with two decimals, e.g. '₹1234.50'."""
    return f"{currency_symbol}{value:.2f}"


def category_insights(
    expenses: Sequence[Entry],
    remaining_balance: Decimal,
    currency_symbol: str = "₹",
) -> list[str]:
    """
    Build the category insight lines.

    Returns a single 'no insights' line for an empty ledger, otherwise, in
    order: highest spending category, total spent, remaining balance.
    """
    if not expenses:
        return [NO_INSIGHTS]

    spent = metrics.total(expenses)
    highest = metrics.highest_category(expenses)

    lines = []
    if highest is not None:
        category, amount = highest
        lines.append(
            f"Highest spending category: {category} "
            f"({format_amount(amount, currency_symbol)})"
        )
    lines.append(f"Total spent: {format_amount(spent, currency_symbol)}")
    lines.append(
        f"Remaining balance: {format_amount(remaining_balance, currency_symbol)}"
    )
    return lines


def generate_insights(
    profile: LedgerProfile,
    expenses: Sequence[Entry],
    remaining_balance: Decimal,
    currency_symbol: str = "₹",
) -> list[str]:
    """Generate the insight lines for a tracker mode."""
    if not profile.category_insights:
        return [PLACEHOLDER_INSIGHT]
    return category_insights(expenses, remaining_balance, currency_symbol)
