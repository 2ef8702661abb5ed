"""Derived metrics and insights."""

from expense_tracker.analytics import metrics
from expense_tracker.analytics.insights import (
    NO_INSIGHTS,
    PLACEHOLDER_INSIGHT,
    category_insights,
    format_amount,
    generate_insights,
)

__all__ = [
    "metrics",
    "NO_INSIGHTS",
    "PLACEHOLDER_INSIGHT",
    "category_insights",
    "format_amount",
    "generate_insights",
]
