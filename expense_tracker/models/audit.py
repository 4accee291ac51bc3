"""
Audit Models for Expense Tracker

Every user action that changes stored records is logged for audit purposes.
This provides:
1. Traceability of every add / edit / delete
2. Debugging information when stored data turns out malformed
3. A history of budget changes and the alerts they triggered

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Session
    USER_SIGNED_IN = "user_signed_in"
    USER_SIGNED_OUT = "user_signed_out"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_REJECTED = "expense_rejected"

    # Budgets
    BUDGET_SET = "budget_set"
    BUDGET_ALERT_RAISED = "budget_alert_raised"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what record is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'budget', 'user')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the record this event relates to"
    )
    user_id: Optional[str] = Field(
        default=None,
        description="Owner of the record"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_deleted(expense_id, user_id)
        event = AuditEventBuilder.user_signed_out(user_id)
    """

    @staticmethod
    def user_signed_in(user_id: str, email: str, is_new: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_IN,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description=f"User signed in: {email}",
            details={
                "email": email,
                "new_user": is_new,
            },
            is_user_action=True,
        )

    @staticmethod
    def user_signed_out(user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SIGNED_OUT,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            description="User signed out",
            is_user_action=True,
        )

    @staticmethod
    def expense_added(
        expense_id: str,
        user_id: str,
        amount: str,
        category_id: str,
        suggested: bool = False,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            user_id=user_id,
            description=f"Expense added: ₹{amount} in category {category_id}",
            details={
                "amount": amount,
                "category_id": category_id,
                "category_suggested": suggested,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_updated(
        expense_id: str,
        user_id: str,
        changed_fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=expense_id,
            user_id=user_id,
            description=f"Expense updated: {', '.join(changed_fields) or 'no changes'}",
            details={
                "changed_fields": changed_fields,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(expense_id: str, user_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            user_id=user_id,
            description="Expense deleted",
            is_user_action=True,
        )

    @staticmethod
    def expense_rejected(
        user_id: Optional[str],
        issues: list[dict],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            user_id=user_id,
            description=f"Expense rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_set(
        budget_id: str,
        user_id: str,
        category_id: str,
        monthly_limit: str,
        previous_limit: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            entity_type="budget",
            entity_id=budget_id,
            user_id=user_id,
            description=f"Budget for category {category_id} set to ₹{monthly_limit}",
            details={
                "category_id": category_id,
                "monthly_limit": monthly_limit,
                "previous_limit": previous_limit,
            },
            is_user_action=True,
        )

    @staticmethod
    def budget_alert_raised(
        budget_id: str,
        user_id: str,
        category_id: str,
        status: str,
        percentage: float,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_ALERT_RAISED,
            severity=AuditSeverity.WARNING,
            entity_type="budget",
            entity_id=budget_id,
            user_id=user_id,
            description=f"Budget for category {category_id} is {status} ({percentage:.0f}%)",
            details={
                "category_id": category_id,
                "status": status,
                "percentage": round(percentage, 2),
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
