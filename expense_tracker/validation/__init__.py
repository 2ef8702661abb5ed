"""Entry validation package."""

from expense_tracker.validation.validator import (
    EntryValidator,
    parse_amount,
)

__all__ = ["EntryValidator", "parse_amount"]
