"""
Core Data Models for Expense Tracker

These models define the schemas for everything the tracker stores or derives.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to camelCase JSON (userId, paymentMethod, ...) for storage
4. Keep derived views (totals, percentages, budget usage) separate from
   the persisted records

DESIGN DECISION: Persisted records (User, Expense, Budget) carry camelCase
aliases; derived models never hit storage and use plain field names.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


def new_record_id() -> str:
    """Generate a fresh unique id for a stored record."""
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


NOTE_MAX_LENGTH = 500
EMAIL_MAX_LENGTH = 320


# Shared by every record that round-trips through the key-value store.
RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class PaymentMethod(str, Enum):
    """How an expense was paid."""
    UPI = "UPI"
    WALLET = "Wallet"
    CASH = "Cash"
    CARD = "Card"


class BudgetStatus(str, Enum):
    """
    Budget usage classification.

    NEAR_LIMIT covers usage above the near-limit threshold (80% by default)
    up to and including 100%; OVER_LIMIT is anything above 100%.
    """
    OK = "ok"
    NEAR_LIMIT = "near_limit"
    OVER_LIMIT = "over_limit"


# =============================================================================
# REFERENCE DATA
# =============================================================================

class Category(BaseModel):
    """
    A fixed spending bucket.

    Categories are static reference data: never created or destroyed at
    runtime, referenced by id from expenses and budgets.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    icon: str = Field(
        ...,
        description="Symbolic icon identifier, resolved by the presentation layer"
    )


# =============================================================================
# PERSISTED RECORDS
# =============================================================================

class User(BaseModel):
    """The single opaque user record. There is no authentication."""
    model_config = RECORD_CONFIG

    id: str = Field(default_factory=new_record_id, min_length=1)
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LENGTH)


class Expense(BaseModel):
    """
    A single recorded spending transaction.

    category_id should name a catalog category, but referential integrity
    is not enforced: an unknown id is kept and simply left out of the
    per-category breakdown.
    """
    model_config = RECORD_CONFIG

    id: str = Field(default_factory=new_record_id, min_length=1)
    user_id: str = Field(..., min_length=1)
    expense_date: date = Field(
        ...,
        alias="date",
        description="Calendar date the money was spent (YYYY-MM-DD)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount in INR"
    )
    payment_method: PaymentMethod = PaymentMethod.UPI
    category_id: str = Field(..., min_length=1)
    note: Optional[str] = Field(
        default=None,
        max_length=NOTE_MAX_LENGTH,
        description="Free text; also feeds the category suggestion"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the expense was recorded"
    )

    @field_validator('note')
    @classmethod
    def blank_note_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ExpenseUpdate(BaseModel):
    """
    A partial edit of an Expense.

    Only fields explicitly set on the update are applied. Setting note to
    None or "" clears it; every other field ignores an explicit None.
    """
    model_config = RECORD_CONFIG

    expense_date: Optional[date] = Field(default=None, alias="date")
    amount: Optional[Decimal] = Field(default=None, ge=0)
    payment_method: Optional[PaymentMethod] = None
    category_id: Optional[str] = Field(default=None, min_length=1)
    note: Optional[str] = Field(default=None, max_length=NOTE_MAX_LENGTH)

    @field_validator('note')
    @classmethod
    def blank_note_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    def changes(self) -> dict:
        """Field-name keyed changes that should be written to the record."""
        return {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None or name == "note"
        }

    def apply_to(self, expense: Expense) -> Expense:
        """Return a copy of expense with these changes applied."""
        return expense.model_copy(update=self.changes())


class Budget(BaseModel):
    """
    A monthly spending ceiling for one category.

    At most one Budget exists per (user_id, category_id); setting a limit
    again updates the existing record in place.
    """
    model_config = RECORD_CONFIG

    id: str = Field(default_factory=new_record_id, min_length=1)
    user_id: str = Field(..., min_length=1)
    category_id: str = Field(..., min_length=1)
    monthly_limit: Decimal = Field(
        ...,
        ge=0,
        description="Monthly limit in INR; 0 means no effective limit"
    )


# =============================================================================
# FORM INPUT
# =============================================================================

class ExpenseDraft(BaseModel):
    """
    Raw values from the add/edit expense form.

    Nothing here is trusted yet: the amount is the text the user typed and
    the category may be missing. ExpenseValidator turns a draft into an
    Expense or reports what is wrong with it.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    amount: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.UPI
    category_id: Optional[str] = None
    note: Optional[str] = None
    expense_date: Optional[date] = None


# =============================================================================
# DERIVED VIEWS - recomputed on every read, never persisted
# =============================================================================

class CategorySpend(BaseModel):
    """Monthly total and share-of-month for one category."""

    category: Category
    amount: Decimal
    percentage: float = Field(
        ...,
        ge=0.0,
        description="amount / month_total * 100, 0 when the month total is 0"
    )


class SpendingSummary(BaseModel):
    """Everything the dashboard shows about spending."""

    reference_date: date
    today_total: Decimal = Decimal("0")
    month_total: Decimal = Decimal("0")
    category_spends: list[CategorySpend] = Field(default_factory=list)
    recent: list[Expense] = Field(
        default_factory=list,
        description="Most recently added expenses, newest first"
    )


class BudgetUsage(BaseModel):
    """
    One budget compared against this month's spend.

    remaining goes negative when the budget is overspent.
    """

    budget: Budget
    category: Optional[Category] = Field(
        default=None,
        description="None when the budget names a category the catalog does not know"
    )
    spent: Decimal
    percentage: float = Field(
        ...,
        ge=0.0,
        description="spent / monthly_limit * 100, 0 when the limit is 0"
    )
    remaining: Decimal
    status: BudgetStatus

    @property
    def is_alert(self) -> bool:
        return self.status != BudgetStatus.OK

    @property
    def overspent_by(self) -> Decimal:
        """How far over the limit spending is (0 when within it)."""
        return -self.remaining if self.remaining < 0 else Decimal("0")


class CategoryBudgetView(BaseModel):
    """A catalog category with its spend and, if one is set, its budget usage."""

    category: Category
    spent: Decimal = Decimal("0")
    usage: Optional[BudgetUsage] = None

    @property
    def has_budget(self) -> bool:
        return self.usage is not None


class Dashboard(BaseModel):
    """Dashboard page model: spending summary plus budget alerts."""

    summary: SpendingSummary
    alerts: list[BudgetUsage] = Field(default_factory=list)
    month_label: str


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in form input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'unknown_category')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating form input.

    Errors block saving; warnings are shown but do not block.
    """

    validated_at: datetime = Field(default_factory=utc_now)
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
