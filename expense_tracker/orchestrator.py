"""
Main Orchestrator for Expense Tracker

This module ties together all the components and defines the flows the
UI calls:
1. Session (restore / sign in / sign out)
2. Expenses (add / edit / delete / list)
3. Budgets (set a monthly limit)
4. Views (dashboard, budget overview)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Form input is validated before anything is stored
- Derived views are recomputed from the stored records on every call
- Every change is audited and confirmed with a notification

This is the "glue": the aggregation, budget and suggestion code stays
pure and knows nothing about storage or sessions.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

import structlog
from pydantic import ValidationError

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.categorization import DEFAULT_CATALOG, CategoryCatalog, suggest_category
from expense_tracker.config import Settings, get_settings
from expense_tracker.models.expense import (
    Budget,
    Category,
    CategoryBudgetView,
    Dashboard,
    Expense,
    ExpenseDraft,
    ExpenseUpdate,
    User,
)
from expense_tracker.notifications import NotificationCenter, Notification
from expense_tracker.reports import (
    NEAR_LIMIT_PERCENT,
    RECENT_EXPENSE_LIMIT,
    aggregate,
    budget_alerts,
    budget_overview,
    category_spends,
    expenses_in_month,
    filter_expenses,
    group_by_date,
    month_key,
    month_label,
)
from expense_tracker.services.storage import (
    BudgetStorageInterface,
    ExpenseStorageInterface,
    RecordStore,
    StorageError,
    UserStorageInterface,
)
from expense_tracker.validation import (
    ExpenseValidator,
    InvalidInputError,
    parse_budget_limit,
    parse_email,
)

logger = structlog.get_logger(__name__)


class NotSignedInError(Exception):
    """The operation needs a signed-in user and there is none."""
    pass


class ExpenseTracker:
    """
    Facade over storage, validation, reports and audit for one session.

    Storage defaults to a fresh in-memory RecordStore, which is what
    tests use. The app builds one from settings via create_app_components().
    """

    def __init__(
        self,
        user_storage: Optional[UserStorageInterface] = None,
        expense_storage: Optional[ExpenseStorageInterface] = None,
        budget_storage: Optional[BudgetStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        catalog: CategoryCatalog = DEFAULT_CATALOG,
        validator: Optional[ExpenseValidator] = None,
        notifications: Optional[NotificationCenter] = None,
        recent_limit: int = RECENT_EXPENSE_LIMIT,
        near_limit_percent: float = NEAR_LIMIT_PERCENT,
    ):
        default_store = None
        if user_storage is None or expense_storage is None or budget_storage is None:
            default_store = RecordStore()

        self._users = user_storage or default_store
        self._expenses = expense_storage or default_store
        self._budgets = budget_storage or default_store
        self._audit_logger = audit_logger or AuditLogger()
        self._catalog = catalog
        self._validator = validator or ExpenseValidator(catalog)
        self._notifications = notifications or NotificationCenter()
        self._recent_limit = recent_limit
        self._near_limit_percent = near_limit_percent

        self._user: Optional[User] = None
        # (budget_id, status, month) already audited this session
        self._alerted: set[tuple[str, str, str]] = set()

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def catalog(self) -> CategoryCatalog:
        return self._catalog

    def _require_user(self) -> User:
        if self._user is None:
            raise NotSignedInError("Sign in to manage expenses")
        return self._user

    def restore_session(self) -> Optional[User]:
        """Resume as the stored user, if there is one."""
        self._user = self._users.get_user()
        return self._user

    def sign_in(self, email: str) -> User:
        """
        Sign in with an email address. There is no password.

        The stored user is reused when the email matches (ignoring case), so
        their expenses stay visible; any other email creates a new user.

        Raises:
            InvalidInputError: If the email is blank or too long
        """
        email = parse_email(email)

        stored = self._users.get_user()
        is_new = stored is None or stored.email.lower() != email.lower()
        if is_new:
            user = User(email=email)
            self._users.save_user(user)
        else:
            user = stored

        self._user = user
        self._alerted.clear()
        self._audit_logger.log_user_signed_in(user.id, user.email, is_new)
        return user

    def sign_out(self) -> None:
        """
        End the session.

        The stored user record is kept, so restore_session() signs the same
        user back in on the next start.
        """
        if self._user is not None:
            self._audit_logger.log_user_signed_out(self._user.id)
        self._user = None
        self._alerted.clear()
        self._notifications.dismiss()

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def notification(self, now: Optional[datetime] = None) -> Optional[Notification]:
        return self._notifications.current(now)

    def dismiss_notification(self) -> None:
        self._notifications.dismiss()

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def suggest_category(self, note: Optional[str]) -> Optional[Category]:
        """Catalog category suggested for a note, for the form hint."""
        return self._catalog.get(suggest_category(note))

    def add_expense(self, draft: ExpenseDraft, now: Optional[datetime] = None) -> Expense:
        """
        Validate and save a new expense.

        A blank category is filled from the note's suggestion when possible.

        Raises:
            NotSignedInError: If nobody is signed in
            InvalidInputError: If the draft fails validation
            StorageError: If the write fails
        """
        user = self._require_user()

        try:
            expense, _, suggested = self._validator.build_expense(draft, user.id)
        except InvalidInputError as e:
            self._audit_logger.log_expense_rejected(
                user.id,
                [issue.model_dump() for issue in e.result.issues],
            )
            raise

        self._expenses.add_expense(expense)
        self._audit_logger.log_expense_added(expense, suggested=suggested)
        self._notifications.show("Expense added successfully!", now)
        return expense

    def update_expense(
        self,
        expense_id: str,
        changes: Union[ExpenseUpdate, ExpenseDraft],
        now: Optional[datetime] = None,
    ) -> Optional[Expense]:
        """
        Apply an edit to one of the user's expenses.

        Accepts either a typed ExpenseUpdate or the raw edit-form draft.

        Returns:
            The updated expense, or None if the user has no such expense
        """
        user = self._require_user()

        if isinstance(changes, ExpenseDraft):
            try:
                changes, _ = self._validator.build_update(changes)
            except InvalidInputError as e:
                self._audit_logger.log_expense_rejected(
                    user.id,
                    [issue.model_dump() for issue in e.result.issues],
                )
                raise

        updated = self._expenses.update_expense(user.id, expense_id, changes)
        if updated is None:
            return None

        self._audit_logger.log_expense_updated(
            expense_id,
            user.id,
            sorted(changes.changes().keys()),
        )
        self._notifications.show("Expense updated successfully!", now)
        return updated

    def delete_expense(self, expense_id: str, now: Optional[datetime] = None) -> bool:
        """Delete one of the user's expenses. Unknown ids are a no-op."""
        user = self._require_user()

        removed = self._expenses.delete_expense(user.id, expense_id)
        if removed:
            self._audit_logger.log_expense_deleted(expense_id, user.id)
            self._notifications.show("Expense deleted successfully!", now)
        return removed

    def list_expenses(
        self,
        search_term: str = "",
        category_id: Optional[str] = None,
    ) -> list[Expense]:
        """The user's expenses, newest-added first, optionally filtered."""
        user = self._require_user()
        return filter_expenses(self._expenses.list_expenses(user.id), search_term, category_id)

    def expenses_by_day(
        self,
        search_term: str = "",
        category_id: Optional[str] = None,
    ) -> list[tuple[date, list[Expense]]]:
        """Filtered expenses grouped by day, newest day first."""
        return group_by_date(self.list_expenses(search_term, category_id))

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    def list_budgets(self) -> list[Budget]:
        user = self._require_user()
        return self._budgets.list_budgets(user.id)

    def set_budget(
        self,
        category_id: str,
        monthly_limit: Union[str, Decimal, int, float],
        now: Optional[datetime] = None,
    ) -> Budget:
        """
        Set the monthly limit for a category (create or update).

        Raises:
            InvalidInputError: If the limit is missing, not a number, or negative
        """
        user = self._require_user()
        limit = parse_budget_limit(monthly_limit)

        previous = next(
            (b for b in self._budgets.list_budgets(user.id) if b.category_id == category_id),
            None,
        )
        budget = self._budgets.set_budget(user.id, category_id, limit)

        self._audit_logger.log_budget_set(
            budget,
            previous_limit=str(previous.monthly_limit) if previous else None,
        )
        self._notifications.show("Budget updated successfully!", now)
        return budget

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def dashboard(self, reference_date: Optional[date] = None) -> Dashboard:
        """Spending summary and budget alerts as of reference_date (default today)."""
        user = self._require_user()
        reference_date = reference_date or date.today()

        summary = aggregate(
            self._expenses.list_expenses(user.id),
            reference_date,
            catalog=self._catalog,
            recent_limit=self._recent_limit,
        )
        alerts = budget_alerts(
            self._budgets.list_budgets(user.id),
            summary.category_spends,
            catalog=self._catalog,
            near_limit_percent=self._near_limit_percent,
        )

        month = month_key(reference_date)
        for alert in alerts:
            marker = (alert.budget.id, alert.status.value, month)
            if marker not in self._alerted:
                self._alerted.add(marker)
                self._audit_logger.log_budget_alert(alert)

        return Dashboard(
            summary=summary,
            alerts=alerts,
            month_label=month_label(reference_date),
        )

    def budget_overview(self, reference_date: Optional[date] = None) -> list[CategoryBudgetView]:
        """One row per category with this month's spend and budget usage."""
        user = self._require_user()
        reference_date = reference_date or date.today()

        month_expenses = expenses_in_month(self._expenses.list_expenses(user.id), reference_date)
        return budget_overview(
            self._budgets.list_budgets(user.id),
            category_spends(month_expenses, self._catalog),
            catalog=self._catalog,
            near_limit_percent=self._near_limit_percent,
        )


def create_app_components(
    settings: Optional[Settings] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> ExpenseTracker:
    """
    Factory function to create the application's ExpenseTracker.

    Falls back to in-memory storage if the configured store cannot be
    opened or the STORAGE_* settings are invalid, so the UI still starts.
    The fallback is logged as a warning and audited as a system error.

    Invalid app settings (LOG_LEVEL and friends) are not recovered from:
    the pydantic ValidationError propagates before anything is built.
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level)
    audit_logger = audit_logger or AuditLogger()

    try:
        store = RecordStore.from_settings(settings.storage)
    except (StorageError, ValidationError) as e:
        logger.warning("storage_unavailable", error=str(e), fallback="memory")
        audit_logger.log_error(type(e).__name__, str(e), {"fallback": "memory"})
        store = RecordStore()

    tracker = ExpenseTracker(
        user_storage=store,
        expense_storage=store,
        budget_storage=store,
        audit_logger=audit_logger,
        notifications=NotificationCenter(app_settings.notification_seconds),
        recent_limit=app_settings.recent_expense_limit,
        near_limit_percent=app_settings.near_limit_percent,
    )
    tracker.restore_session()
    return tracker
