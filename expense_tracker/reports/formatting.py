"""
Display formatting for amounts and dates.

Amounts use Indian digit grouping (1,23,456) with at most two decimals,
matching how the tracker's users write rupee amounts.
"""

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, float, str]

RUPEE = "₹"


def _indian_grouping(digits: str) -> str:
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(amount: Number, symbol: str = RUPEE) -> str:
    """
    Format an amount as rupees.

    >>> format_inr(Decimal("123456.5"))
    '₹1,23,456.5'
    >>> format_inr(-50)
    '-₹50'
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")
    fraction = fraction.rstrip("0")
    text = f"{sign}{symbol}{_indian_grouping(whole)}"
    return f"{text}.{fraction}" if fraction else text


def format_percentage(value: float, digits: int = 0) -> str:
    return f"{value:.{digits}f}%"


def format_relative_date(day: date, today: date) -> str:
    """'Today', 'Yesterday', '5 Jun', or '5 Jun 2023' for another year."""
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"

    label = f"{day.day} {day.strftime('%b')}"
    if day.year != today.year:
        label = f"{label} {day.year}"
    return label


def month_key(day: date) -> str:
    """Calendar month key, e.g. '2024-06'."""
    return f"{day.year:04d}-{day.month:02d}"


def month_label(day: date) -> str:
    """Month heading, e.g. 'June 2024'."""
    return day.strftime("%B %Y")
