"""
Expense Tracker - Source Package

A single-user personal expense tracker: record expenses against
categories and payment methods, see spending by day, month and
category, and set monthly per-category budgets with overspend alerts.

DESIGN PRINCIPLES:
1. Derived views are pure functions of the stored records
2. Storage layer is swappable
3. Bad stored data degrades to empty, never crashes the app
4. Every user action is auditable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
