from enum import StrEnum


class ExpenseCategory(StrEnum):
    FOOD = "Food"
    TRAVEL = "Travel"
    LEARNING = "Learning"
    ENTERTAINMENT = "Entertainment"
    WASTE = "Waste"


CATEGORY_COLORS: dict[ExpenseCategory, str] = {
    ExpenseCategory.FOOD: "#f59e0b",
    ExpenseCategory.TRAVEL: "#06b6d4",
    ExpenseCategory.LEARNING: "#8b5cf6",
    ExpenseCategory.ENTERTAINMENT: "#ec4899",
    ExpenseCategory.WASTE: "#ef4444",
}


def parse_category(name: str | None) -> ExpenseCategory | None:
    """Case-insensitive lookup. Returns None for unknown names."""
    if not name:
        return None
    normalized = name.strip().lower()
    for category in ExpenseCategory:
        if category.value.lower() == normalized:
            return category
    return None


def get_categories_str() -> str:
    return ", ".join(c.value for c in ExpenseCategory)
