"""
Default category set.

Seeded for an owner the first time their (unfiltered) category list comes
back empty. ``name`` and ``name_key`` both hold the translation key; the
client renders the localized label.
"""

from typing import Any

DEFAULT_CATEGORIES: tuple[dict[str, str], ...] = (
    # Expense
    {"name_key": "food_dining", "type": "Expense", "icon": "🍽️", "color": "#EF4444"},
    {"name_key": "groceries", "type": "Expense", "icon": "🛒", "color": "#F59E0B"},
    {"name_key": "transportation", "type": "Expense", "icon": "🚗", "color": "#3B82F6"},
    {"name_key": "utilities", "type": "Expense", "icon": "💡", "color": "#8B5CF6"},
    {"name_key": "rent_housing", "type": "Expense", "icon": "🏠", "color": "#EC4899"},
    {"name_key": "healthcare", "type": "Expense", "icon": "🏥", "color": "#10B981"},
    {"name_key": "entertainment", "type": "Expense", "icon": "🎬", "color": "#F97316"},
    {"name_key": "shopping", "type": "Expense", "icon": "🛍️", "color": "#06B6D4"},
    {"name_key": "insurance", "type": "Expense", "icon": "🛡️", "color": "#6366F1"},
    {"name_key": "education", "type": "Expense", "icon": "📚", "color": "#14B8A6"},
    {"name_key": "personal_care", "type": "Expense", "icon": "💅", "color": "#D946EF"},
    {"name_key": "subscriptions", "type": "Expense", "icon": "📱", "color": "#0EA5E9"},
    {"name_key": "travel", "type": "Expense", "icon": "✈️", "color": "#22C55E"},
    {"name_key": "gifts", "type": "Expense", "icon": "🎁", "color": "#E11D48"},
    {"name_key": "taxes", "type": "Expense", "icon": "📋", "color": "#64748B"},
    {"name_key": "other_expense", "type": "Expense", "icon": "📦", "color": "#78716C"},
    # Income
    {"name_key": "salary", "type": "Income", "icon": "💰", "color": "#22C55E"},
    {"name_key": "freelance", "type": "Income", "icon": "💻", "color": "#3B82F6"},
    {"name_key": "investments", "type": "Income", "icon": "📈", "color": "#10B981"},
    {"name_key": "rental_income", "type": "Income", "icon": "🏢", "color": "#8B5CF6"},
    {"name_key": "gifts_received", "type": "Income", "icon": "🎁", "color": "#EC4899"},
    {"name_key": "refunds", "type": "Income", "icon": "↩️", "color": "#06B6D4"},
    {"name_key": "other_income", "type": "Income", "icon": "💵", "color": "#78716C"},
)


def default_category_rows() -> list[dict[str, Any]]:
    """Column values for every default category, without the owner key."""
    return [
        {
            "name": category["name_key"],
            "name_key": category["name_key"],
            "type": category["type"],
            "icon": category["icon"],
            "color": category["color"],
            "is_default": True,
        }
        for category in DEFAULT_CATEGORIES
    ]
