"""
Category Suggestion

Maps the free-text note on an expense to a suggested category id using
keyword rules.

DESIGN DECISION: First match wins. The rule table is walked in its fixed
order and the first category with any keyword contained in the note is
returned, even when a later category matches more specifically. Some
keywords overlap on purpose or by accident:
- "hotel" is listed under Mess/Food and under Travel, Mess/Food wins
- "vi" (Mobile/Data) is a substring of "movie", so "movie" suggests Mobile/Data
- "bus" (Commute) is a substring of "business"
Changing the order changes suggestions users already rely on.
Use matching_categories() to see every candidate when ambiguity matters.
"""

from typing import Optional, Sequence

# (category_id, keywords) in match order. Keywords are lower-case.
CategorizationRules = Sequence[tuple[str, Sequence[str]]]

CATEGORIZATION_RULES: CategorizationRules = (
    ("2", ("zomato", "swiggy", "food", "restaurant", "hotel", "mess", "biryani", "pizza", "burger")),
    ("3", ("tiffin", "lunch", "breakfast", "dinner")),
    ("4", ("dmart", "big bazaar", "spencer", "reliance fresh", "grocery", "supermarket", "vegetables", "fruits")),
    ("5", ("phonepe", "paytm", "gpay", "amazon pay", "wallet", "upi")),
    ("6", ("uber", "ola", "metro", "auto", "bus", "taxi", "cab", "bmtc", "dmrc", "commute")),
    ("7", ("jio", "airtel", "vi", "vodafone", "idea", "mobile", "recharge", "data", "internet")),
    ("8", ("electricity", "water", "gas", "utility", "power", "bill")),
    ("9", ("movie", "cinema", "netflix", "prime", "hotstar", "entertainment", "game", "spotify")),
    ("10", ("pharmacy", "medicine", "doctor", "hospital", "health", "medical", "apollo")),
    ("11", ("amazon", "flipkart", "shopping", "myntra", "clothes", "shoes")),
    ("12", ("flight", "train", "hotel", "travel", "irctc", "makemytrip", "goibibo")),
)


def matching_categories(
    note: Optional[str],
    rules: CategorizationRules = CATEGORIZATION_RULES,
) -> list[str]:
    """Every category id whose keywords occur in note, in rule order."""
    if not note:
        return []

    text = note.lower()
    return [
        category_id
        for category_id, keywords in rules
        if any(keyword in text for keyword in keywords)
    ]


def suggest_category(
    note: Optional[str],
    rules: CategorizationRules = CATEGORIZATION_RULES,
) -> Optional[str]:
    """
    Suggest a category id for a free-text note.

    Returns the first category in rule order with a keyword that is a
    substring of the lower-cased note, or None when the note is empty or
    nothing matches.
    """
    if not note:
        return None

    text = note.lower()
    for category_id, keywords in rules:
        if any(keyword in text for keyword in keywords):
            return category_id

    return None
