"""
Form Input Validation

DESIGN DECISION: Raw form input is checked here, BEFORE anything reaches
storage or the aggregation code. The core only ever sees well-formed
records (possibly with edge-case values like a 0 amount).

Issues come in two severities:

ERRORS (block saving):
- Amount missing, not a number, or negative
- Note longer than 500 characters
- No category chosen and none could be suggested from the note
- Date missing
- Sign-in email blank or longer than 320 characters

WARNINGS (shown, but saving proceeds):
- Category id not in the catalog (referential integrity is not enforced;
  such expenses are left out of the per-category breakdown)

IMPORTANT: Validation never silently fixes values. The one automatic fill
is the category suggestion for a new expense with a blank category, which
is what the add form has always done.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from expense_tracker.categorization import (
    CATEGORIZATION_RULES,
    DEFAULT_CATALOG,
    CategoryCatalog,
    suggest_category,
)
from expense_tracker.categorization.suggester import CategorizationRules
from expense_tracker.models.expense import (
    EMAIL_MAX_LENGTH,
    NOTE_MAX_LENGTH,
    Expense,
    ExpenseDraft,
    ExpenseUpdate,
    ValidationIssue,
    ValidationResult,
)


class InvalidInputError(Exception):
    """Form input failed validation. The full result is on .result."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = [issue.message for issue in result.issues if issue.severity == "error"]
        super().__init__("; ".join(messages) or "Invalid input")


def _error(field: str, issue_type: str, message: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="error",
    )


def parse_amount(
    raw: Union[str, Decimal, int, float, None],
    field: str = "amount",
) -> tuple[Optional[Decimal], list[ValidationIssue]]:
    """
    Parse a user-typed amount.

    Returns:
        (amount, issues): amount is None whenever issues contains an error
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None, [_error(field, "missing", "Please enter an amount")]

    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None, [_error(field, "not_a_number", f"'{raw}' is not a valid amount")]

    if not value.is_finite():
        return None, [_error(field, "not_a_number", f"'{raw}' is not a valid amount")]
    if value < 0:
        return None, [_error(field, "negative", "Amount cannot be negative")]

    return value, []


def parse_budget_limit(raw: Union[str, Decimal, int, float, None]) -> Decimal:
    """
    Parse a monthly budget limit.

    Raises:
        InvalidInputError: If the limit is missing, not a number, or negative
    """
    value, issues = parse_amount(raw, field="monthly_limit")
    if issues:
        raise InvalidInputError(ValidationResult(issues=issues))
    return value


def parse_email(raw: Optional[str]) -> str:
    """
    Clean up a sign-in email address.

    Raises:
        InvalidInputError: If the email is blank or too long
    """
    email = (raw or "").strip()
    if not email:
        issue = _error("email", "missing", "Please enter your email address")
    elif len(email) > EMAIL_MAX_LENGTH:
        issue = _error(
            "email",
            "too_long",
            f"Email must be at most {EMAIL_MAX_LENGTH} characters",
        )
    else:
        return email
    raise InvalidInputError(ValidationResult(issues=[issue]))


class ExpenseValidator:
    """
    Validates add/edit expense form input.

    Uses the catalog to flag unknown categories and the keyword rules to
    fill in a missing category on new expenses.
    """

    def __init__(
        self,
        catalog: CategoryCatalog = DEFAULT_CATALOG,
        rules: CategorizationRules = CATEGORIZATION_RULES,
    ):
        self._catalog = catalog
        self._rules = rules

    def resolve_category(self, draft: ExpenseDraft) -> tuple[Optional[str], bool]:
        """
        Category to save a new expense under.

        Returns:
            (category_id, was_suggested)
        """
        if draft.category_id:
            return draft.category_id, False

        suggested = suggest_category(draft.note, self._rules)
        return suggested, suggested is not None

    def _check(
        self,
        draft: ExpenseDraft,
        category_id: Optional[str],
    ) -> tuple[Optional[Decimal], ValidationResult]:
        amount, issues = parse_amount(draft.amount)

        if not category_id:
            issues.append(_error("category_id", "missing", "Please choose a category"))
        elif category_id not in self._catalog:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="unknown_category",
                message=f"Category '{category_id}' is not a known category",
                severity="warning",
            ))

        if draft.note and len(draft.note) > NOTE_MAX_LENGTH:
            issues.append(_error(
                "note",
                "too_long",
                f"Note must be at most {NOTE_MAX_LENGTH} characters",
            ))

        if draft.expense_date is None:
            issues.append(_error("expense_date", "missing", "Please choose a date"))

        return amount, ValidationResult(issues=issues)

    def validate_expense(self, draft: ExpenseDraft, suggest: bool = True) -> ValidationResult:
        """
        Validate a draft.

        Args:
            draft: Raw form values
            suggest: Fill a blank category from the note before checking
                     (new expenses only; the edit form never auto-fills)
        """
        category_id = self.resolve_category(draft)[0] if suggest else draft.category_id
        return self._check(draft, category_id)[1]

    def build_expense(
        self,
        draft: ExpenseDraft,
        user_id: str,
        expense_id: Optional[str] = None,
    ) -> tuple[Expense, ValidationResult, bool]:
        """
        Turn a draft into a new Expense.

        Returns:
            (expense, validation_result, category_was_suggested)

        Raises:
            InvalidInputError: If the draft has any error-level issue
        """
        category_id, suggested = self.resolve_category(draft)
        amount, result = self._check(draft, category_id)
        if result.has_errors:
            raise InvalidInputError(result)

        fields = dict(
            user_id=user_id,
            expense_date=draft.expense_date,
            amount=amount,
            payment_method=draft.payment_method,
            category_id=category_id,
            note=draft.note,
        )
        if expense_id:
            fields["id"] = expense_id
        return Expense(**fields), result, suggested

    def build_update(self, draft: ExpenseDraft) -> tuple[ExpenseUpdate, ValidationResult]:
        """
        Turn an edit-form draft into an ExpenseUpdate of every form field.

        Raises:
            InvalidInputError: If the draft has any error-level issue
        """
        amount, result = self._check(draft, draft.category_id)
        if result.has_errors:
            raise InvalidInputError(result)

        update = ExpenseUpdate(
            expense_date=draft.expense_date,
            amount=amount,
            payment_method=draft.payment_method,
            category_id=draft.category_id,
            note=draft.note,
        )
        return update, result

    @staticmethod
    def get_user_friendly_summary(result: ValidationResult) -> str:
        """One message suitable for showing next to the form."""
        if not result.issues:
            return "Looks good."

        errors = [issue.message for issue in result.issues if issue.severity == "error"]
        if errors:
            return "Please fix: " + "; ".join(errors)
        return "Saved with a note: " + "; ".join(result.warnings)


def default_expense_date() -> date:
    """Date the add form starts on."""
    return date.today()
