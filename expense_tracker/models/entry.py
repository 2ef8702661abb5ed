"""
Core Data Models for the Expense Tracker

These models define the shape of every record the tracker keeps:
1. Entry - one recorded income or expense
2. LedgerProfile - the rules for one tracker mode
3. ValidationIssue / ValidationResult - outcome of validating a draft
4. LedgerSummary - derived totals shown to the user

Entries are immutable once created. The only way to change a ledger is to
append a new entry or remove a whole one.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)


# Stored records keep the amount as a JSON number, not a string
JsonDecimal = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


# =============================================================================
# ENUMS
# =============================================================================

class EntryKind(str, Enum):
    """Which ledger an entry belongs to."""
    INCOME = "income"
    EXPENSE = "expense"


class TrackerMode(str, Enum):
    """
    Supported tracker modes.

    INCOME_LEDGER: separate income and expense ledgers, descriptions required.
    FIXED_INCOME: a single overwritable income value plus categorized expenses.
    """
    INCOME_LEDGER = "income_ledger"
    FIXED_INCOME = "fixed_income"


# =============================================================================
# ENTRY MODEL
# =============================================================================

class Entry(BaseModel):
    """
    A single income or expense record.

    The id doubles as the removal key. The date is captured once at creation
    as a human-readable string and never touched again.
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(
        ...,
        gt=0,
        description="Unique, increasing identifier"
    )
    description: str = Field(
        default="",
        description="Free-text description (may be empty for categorized expenses)"
    )
    amount: Annotated[
        JsonDecimal,
        Field(gt=0, description="Amount, always positive")
    ]
    category: Optional[str] = Field(
        default=None,
        description="Expense category, kept exactly as entered"
    )
    date: str = Field(
        ...,
        description="Creation timestamp as displayed to the user"
    )

    @field_validator('description')
    @classmethod
    def strip_description(cls, v: str) -> str:
        return v.strip()

    def to_record(self) -> dict:
        """Convert to the plain dict written to storage."""
        return self.model_dump(mode="json", exclude_none=True)


# =============================================================================
# MODE PROFILES
# =============================================================================

class LedgerProfile(BaseModel):
    """
    Rules that differ between tracker modes.

    Both modes share one tracker implementation; the profile decides which
    fields are required and which income model is used.
    """
    model_config = ConfigDict(frozen=True)

    mode: TrackerMode
    require_description: bool
    require_category: bool

    @property
    def uses_income_ledger(self) -> bool:
        """True when income is a ledger of entries rather than one value."""
        return self.mode == TrackerMode.INCOME_LEDGER

    @property
    def category_insights(self) -> bool:
        return self.mode == TrackerMode.FIXED_INCOME

    @classmethod
    def income_ledger(cls) -> "LedgerProfile":
        return cls(
            mode=TrackerMode.INCOME_LEDGER,
            require_description=True,
            require_category=False,
        )

    @classmethod
    def categorized(cls) -> "LedgerProfile":
        return cls(
            mode=TrackerMode.FIXED_INCOME,
            require_description=False,
            require_category=True,
        )

    @classmethod
    def for_mode(cls, mode: TrackerMode) -> "LedgerProfile":
        """Get the preset profile for a mode."""
        if TrackerMode(mode) == TrackerMode.FIXED_INCOME:
            return cls.categorized()
        return cls.income_ledger()


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'overspend')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating an entry draft.

    When valid, `amount` holds the parsed amount ready to be stored.
    """

    kind: EntryKind
    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    issues: list[ValidationIssue] = Field(default_factory=list)
    amount: Optional[Decimal] = Field(
        default=None,
        description="Parsed amount (None if the amount did not parse)"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")


# =============================================================================
# SUMMARY MODEL
# =============================================================================

class LedgerSummary(BaseModel):
    """Totals derived from the current ledgers. Never stored."""

    total_income: Decimal
    total_expenses: Decimal
    remaining: Decimal
    is_overspending: bool
    income_count: int = Field(ge=0)
    expense_count: int = Field(ge=0)
