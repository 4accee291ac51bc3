"""Tests for the audit logger."""

from datetime import date
from decimal import Decimal

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEvent, AuditEventType, AuditSeverity
from expense_tracker.models.expense import Budget, Expense
from expense_tracker.reports import evaluate_budget


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_returns_true(self):
        """Test that a normal event is written."""
        logger = AuditLogger()
        event = AuditEvent(event_type=AuditEventType.USER_SIGNED_OUT, description="bye")
        assert logger.log(event)

    def test_history_kept_when_enabled(self):
        """Test the in-memory history."""
        logger = AuditLogger(keep_history=True)
        expense = Expense(
            user_id="user-1",
            expense_date=date(2024, 6, 2),
            amount=Decimal("10"),
            category_id="2",
        )

        logger.log_expense_added(expense, suggested=True)
        logger.log_expense_deleted(expense.id, "user-1")

        assert [e.event_type for e in logger.history] == [
            AuditEventType.EXPENSE_ADDED,
            AuditEventType.EXPENSE_DELETED,
        ]
        assert logger.history[0].details["amount"] == "10"

    def test_history_off_by_default(self):
        """Test that nothing is kept without keep_history."""
        logger = AuditLogger()
        logger.log_user_signed_out("user-1")
        assert logger.history == []

    def test_budget_alert(self):
        """Test logging a budget alert from a usage."""
        logger = AuditLogger(keep_history=True)
        usage = evaluate_budget(
            Budget(user_id="user-1", category_id="2", monthly_limit=Decimal("250")),
            Decimal("300"),
        )

        logger.log_budget_alert(usage)

        event = logger.history[0]
        assert event.event_type == AuditEventType.BUDGET_ALERT_RAISED
        assert event.severity == AuditSeverity.WARNING
        assert event.details["status"] == "over_limit"
        assert event.details["percentage"] == 120.0

    def test_error_event(self):
        """Test logging a system error."""
        logger = AuditLogger(keep_history=True)
        logger.log_error("StorageError", "disk full", {"key": "dabbulu_expenses"})

        event = logger.history[0]
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"
