"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.expense import (
    Budget,
    BudgetStatus,
    BudgetUsage,
    Category,
    CategoryBudgetView,
    CategorySpend,
    Dashboard,
    Expense,
    ExpenseDraft,
    ExpenseUpdate,
    PaymentMethod,
    SpendingSummary,
    User,
    ValidationIssue,
    ValidationResult,
    new_record_id,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "Budget",
    "Category",
    "Expense",
    "ExpenseDraft",
    "ExpenseUpdate",
    "PaymentMethod",
    "User",
    "new_record_id",
    # Derived views
    "BudgetStatus",
    "BudgetUsage",
    "CategoryBudgetView",
    "CategorySpend",
    "Dashboard",
    "SpendingSummary",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
