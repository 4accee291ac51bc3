"""
Audit Logger

DESIGN DECISION: Every action that changes stored records is logged.
This provides:
1. Traceability of every add / edit / delete / budget change
2. Debugging capability when stored data turns out malformed
3. A record of which budget alerts were shown and when

The audit logger:
- Is synchronous, like the rest of the tracker
- Never raises into the caller (a logging failure must not lose a save)
- Writes structured JSON lines through structlog
"""

import logging
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from expense_tracker.models.expense import Budget, BudgetUsage, Expense


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route the structured log to stderr at the given level."""
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Every event goes to the structured local log. Optionally, events are
    also kept in memory (handy for tests and for a "recent activity" view).
    """

    def __init__(self, keep_history: bool = False):
        """
        Initialize audit logger.

        Args:
            keep_history: Also keep every logged event in .history
        """
        self._logger = structlog.get_logger("expense_tracker.audit")
        self._keep_history = keep_history
        self.history: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written, False if logging failed.
        """
        try:
            log_dict = event.to_log_dict()

            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            logging.getLogger(__name__).error("audit logging failed: %s", e)
            return False

        if self._keep_history:
            self.history.append(event)
        return True

    def log_user_signed_in(self, user_id: str, email: str, is_new: bool) -> None:
        """Log sign-in."""
        self.log(AuditEventBuilder.user_signed_in(user_id, email, is_new))

    def log_user_signed_out(self, user_id: str) -> None:
        """Log sign-out."""
        self.log(AuditEventBuilder.user_signed_out(user_id))

    def log_expense_added(self, expense: Expense, suggested: bool = False) -> None:
        """Log a new expense."""
        self.log(AuditEventBuilder.expense_added(
            expense_id=expense.id,
            user_id=expense.user_id,
            amount=str(expense.amount),
            category_id=expense.category_id,
            suggested=suggested,
        ))

    def log_expense_updated(
        self,
        expense_id: str,
        user_id: str,
        changed_fields: list[str],
    ) -> None:
        """Log an edited expense."""
        self.log(AuditEventBuilder.expense_updated(expense_id, user_id, changed_fields))

    def log_expense_deleted(self, expense_id: str, user_id: str) -> None:
        """Log a deleted expense."""
        self.log(AuditEventBuilder.expense_deleted(expense_id, user_id))

    def log_expense_rejected(self, user_id: Optional[str], issues: list[dict]) -> None:
        """Log form input that failed validation."""
        self.log(AuditEventBuilder.expense_rejected(user_id, issues))

    def log_budget_set(self, budget: Budget, previous_limit: Optional[str]) -> None:
        """Log a budget create/update."""
        self.log(AuditEventBuilder.budget_set(
            budget_id=budget.id,
            user_id=budget.user_id,
            category_id=budget.category_id,
            monthly_limit=str(budget.monthly_limit),
            previous_limit=previous_limit,
        ))

    def log_budget_alert(self, usage: BudgetUsage) -> None:
        """Log a near-limit / over-limit budget."""
        self.log(AuditEventBuilder.budget_alert_raised(
            budget_id=usage.budget.id,
            user_id=usage.budget.user_id,
            category_id=usage.budget.category_id,
            status=usage.status.value,
            percentage=usage.percentage,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
