from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from pcs.categories import ExpenseCategory
from pcs.db.models import ExpenseRecord


@dataclass(slots=True)
class CategoryTotal:
    category: ExpenseCategory
    total: float
    count: int


@dataclass(slots=True)
class MonthlySpending:
    month: str
    budget: float
    expenses: list[ExpenseRecord] = field(default_factory=list)
    total: float = 0.0
    waste_total: float = 0.0
    by_category: list[CategoryTotal] = field(default_factory=list)

    @property
    def remaining(self) -> float:
        return self.budget - self.total

    @property
    def overspend(self) -> float:
        return max(0.0, self.total - self.budget)

    @property
    def leak_detected(self) -> bool:
        return self.waste_total > 0

    @property
    def top_category(self) -> CategoryTotal | None:
        return self.by_category[0] if self.by_category else None


def month_key(day: date) -> str:
    return day.isoformat()[:7]


def parse_month(text: str | None) -> str | None:
    """Normalize `YYYY-M` or `YYYY-MM` to `YYYY-MM`. Anything else is None."""
    if not text:
        return None
    text = text.strip()
    try:
        year, month = text.split("-")
        if len(year) != 4 or not (1 <= int(month) <= 12):
            return None
        int(year)
    except ValueError:
        return None
    return f"{year}-{int(month):02d}"


def filter_month(expenses: Iterable[ExpenseRecord], month: str) -> list[ExpenseRecord]:
    """Records of one month, newest first. Same-day records keep insertion order."""
    matching = [e for e in expenses if e.expense_date.isoformat().startswith(month)]
    return sorted(matching, key=lambda e: e.expense_date, reverse=True)


def spending_by_category(expenses: Iterable[ExpenseRecord]) -> list[CategoryTotal]:
    totals: dict[ExpenseCategory, CategoryTotal] = {}
    for e in expenses:
        entry = totals.setdefault(e.category, CategoryTotal(category=e.category, total=0.0, count=0))
        entry.total += e.amount
        entry.count += 1
    # stable: first-seen category wins a tie
    return sorted(totals.values(), key=lambda c: c.total, reverse=True)


def summarize_month(expenses: Iterable[ExpenseRecord], month: str, budget: float) -> MonthlySpending:
    monthly = filter_month(expenses, month)
    return MonthlySpending(
        month=month,
        budget=budget,
        expenses=monthly,
        total=sum(e.amount for e in monthly),
        waste_total=sum(e.amount for e in monthly if e.category == ExpenseCategory.WASTE),
        by_category=spending_by_category(monthly),
    )


def daily_totals(expenses: Iterable[ExpenseRecord]) -> list[tuple[date, float]]:
    """Per-day totals in ascending date order."""
    totals: dict[date, float] = {}
    for e in expenses:
        totals[e.expense_date] = totals.get(e.expense_date, 0.0) + e.amount
    return sorted(totals.items())
