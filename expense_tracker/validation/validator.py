"""
Entry Validation

Validation runs in two steps:

STEP 1 - DRAFT VALIDATION:
- Required text fields (description or category, depending on mode)
- Amount present, numeric, finite and strictly positive

STEP 2 - OVERSPEND GATE (expenses only):
- Current expenses + new amount must not exceed income

Step 2 only runs when step 1 passes. A rejected draft is never stored;
the caller shows one message and leaves the user's input as it was.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from expense_tracker.analytics import metrics
from expense_tracker.models.entry import (
    EntryKind,
    LedgerProfile,
    ValidationIssue,
    ValidationResult,
)


AmountInput = Union[str, int, float, Decimal, None]

INVALID_INCOME_MESSAGE = "Please enter valid income description and positive amount."
INVALID_EXPENSE_MESSAGE = "Please enter valid expense description and positive amount."
INVALID_CATEGORIZED_EXPENSE_MESSAGE = "Please enter a category and positive amount."
INVALID_INCOME_VALUE_MESSAGE = "Please enter a valid positive income."
OVERSPEND_MESSAGE = (
    "Warning: This expense would exceed your total income. "
    "Please adjust income or amount."
)
OVERSPEND_FIXED_INCOME_MESSAGE = "Warning: You cannot spend more than your income!"


def parse_amount(value: AmountInput) -> Optional[Decimal]:
    """
    Parse user input into a Decimal amount.

    Accepts strings (surrounding whitespace ignored), ints, floats and
    Decimals. Returns None for anything blank, non-numeric or non-finite.
    The sign is not checked here.

    Amounts are stored as JSON numbers, so the result is snapped to the
    nearest float value: what is kept in memory is exactly what a reload
    reads back. Values too large for a float count as non-finite, and
    values too small collapse to zero.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not amount.is_finite():
        return None

    amount = Decimal(str(float(amount)))
    if not amount.is_finite():
        return None
    return amount


class EntryValidator:
    """Validates entry drafts against the rules of one tracker mode."""

    def __init__(self, profile: LedgerProfile):
        self._profile = profile

    @property
    def profile(self) -> LedgerProfile:
        return self._profile

    def _check_amount(self, value: AmountInput) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        amount = parse_amount(value)

        if amount is None:
            missing = value is None or (isinstance(value, str) and not value.strip())
            return None, [ValidationIssue(
                field="amount",
                issue_type="missing" if missing else "invalid_format",
                message="Amount is required" if missing else f"Amount '{value}' is not a number",
            )]

        if amount <= 0:
            return amount, [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
            )]

        return amount, []

    def validate_draft(
        self,
        kind: EntryKind,
        amount: AmountInput,
        description: Optional[str] = "",
        category: Optional[str] = None,
    ) -> ValidationResult:
        """
        Step 1: check the fields of a new entry.

        Income entries always need a description. Expense entries need one
        only when the profile says so, and need a category when the
        profile says so.
        """
        issues = []

        needs_description = kind == EntryKind.INCOME or self._profile.require_description
        if needs_description and not (description or "").strip():
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
            ))

        if kind == EntryKind.EXPENSE and self._profile.require_category:
            if category is None or not category.strip():
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="missing",
                    message="Category is required",
                ))

        parsed, amount_issues = self._check_amount(amount)
        issues.extend(amount_issues)

        return ValidationResult(
            kind=kind,
            issues=issues,
            amount=parsed if not amount_issues else None,
        )

    def check_overspend(
        self,
        total_expenses: Decimal,
        amount: Decimal,
        income: Optional[Decimal],
    ) -> Optional[ValidationIssue]:
        """Step 2: reject an expense that would push spending above income."""
        if not metrics.would_overspend(total_expenses, amount, income):
            return None

        return ValidationIssue(
            field="amount",
            issue_type="overspend",
            message=(
                f"Expenses would reach {total_expenses + amount}, "
                f"above income of {income}"
            ),
        )

    def validate_expense(
        self,
        amount: AmountInput,
        description: Optional[str],
        category: Optional[str],
        total_expenses: Decimal,
        income: Optional[Decimal],
    ) -> ValidationResult:
        """Run both steps for a new expense."""
        result = self.validate_draft(
            EntryKind.EXPENSE,
            amount,
            description=description,
            category=category,
        )
        if result.has_errors:
            return result

        issue = self.check_overspend(total_expenses, result.amount, income)
        if issue is not None:
            return ValidationResult(
                kind=EntryKind.EXPENSE,
                issues=[*result.issues, issue],
                amount=result.amount,
            )
        return result

    def validate_income_value(self, value: AmountInput) -> ValidationResult:
        """Validate the single income value of fixed-income mode."""
        parsed, issues = self._check_amount(value)
        return ValidationResult(
            kind=EntryKind.INCOME,
            issues=issues,
            amount=parsed if not issues else None,
        )

    def get_user_message(self, result: ValidationResult) -> str:
        """
        Pick the single message shown to the user for a rejected draft.

        Overspend has its own warning; every other problem gets the
        generic 'please enter valid ...' prompt for the entry kind.
        """
        if any(issue.issue_type == "overspend" for issue in result.issues):
            if self._profile.uses_income_ledger:
                return OVERSPEND_MESSAGE
            return OVERSPEND_FIXED_INCOME_MESSAGE

        if result.kind == EntryKind.INCOME:
            return INVALID_INCOME_MESSAGE
        if self._profile.require_category:
            return INVALID_CATEGORIZED_EXPENSE_MESSAGE
        return INVALID_EXPENSE_MESSAGE
