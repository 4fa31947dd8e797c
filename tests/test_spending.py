from datetime import date

from pcs.categories import ExpenseCategory
from pcs.db.models import ExpenseRecord
from pcs.metrics.spending import daily_totals, filter_month, month_key, parse_month, summarize_month
from pcs.metrics.states import Severity, expense_state, waste_severity


def _exp(id: str, amount: float, category: ExpenseCategory, day: date, note: str = "") -> ExpenseRecord:
    return ExpenseRecord(id=id, amount=amount, category=category, note=note, expense_date=day)


def test_month_totals():
    expenses = [
        _exp("a", 100, ExpenseCategory.FOOD, date(2024, 3, 1)),
        _exp("b", 50, ExpenseCategory.WASTE, date(2024, 3, 15)),
    ]
    summary = summarize_month(expenses, "2024-03", budget=1000)
    assert summary.total == 150
    assert summary.waste_total == 50
    assert summary.remaining == 850
    assert summary.leak_detected is True
    assert summary.overspend == 0


def test_other_months_excluded():
    expenses = [
        _exp("a", 100, ExpenseCategory.FOOD, date(2024, 3, 31)),
        _exp("b", 70, ExpenseCategory.FOOD, date(2024, 4, 1)),
        _exp("c", 30, ExpenseCategory.TRAVEL, date(2023, 3, 10)),
    ]
    summary = summarize_month(expenses, "2024-03", budget=1000)
    assert [e.id for e in summary.expenses] == ["a"]
    assert summary.total == 100


def test_remaining_can_go_negative():
    expenses = [_exp("a", 1200, ExpenseCategory.TRAVEL, date(2024, 3, 2))]
    summary = summarize_month(expenses, "2024-03", budget=1000)
    assert summary.remaining == -200
    assert summary.overspend == 200


def test_sorted_newest_first_with_stable_ties():
    expenses = [
        _exp("first", 1, ExpenseCategory.FOOD, date(2024, 3, 5)),
        _exp("older", 1, ExpenseCategory.FOOD, date(2024, 3, 1)),
        _exp("second", 1, ExpenseCategory.FOOD, date(2024, 3, 5)),
        _exp("newest", 1, ExpenseCategory.FOOD, date(2024, 3, 9)),
    ]
    assert [e.id for e in filter_month(expenses, "2024-03")] == ["newest", "first", "second", "older"]


def test_category_breakdown_largest_first():
    expenses = [
        _exp("a", 20, ExpenseCategory.FOOD, date(2024, 3, 1)),
        _exp("b", 90, ExpenseCategory.LEARNING, date(2024, 3, 2)),
        _exp("c", 30, ExpenseCategory.FOOD, date(2024, 3, 3)),
    ]
    summary = summarize_month(expenses, "2024-03", budget=1000)
    assert [(c.category, c.total, c.count) for c in summary.by_category] == [
        (ExpenseCategory.LEARNING, 90, 1),
        (ExpenseCategory.FOOD, 50, 2),
    ]
    assert summary.top_category.category == ExpenseCategory.LEARNING


def test_empty_month():
    summary = summarize_month([], "2024-03", budget=500)
    assert summary.total == 0
    assert summary.remaining == 500
    assert summary.top_category is None
    assert summary.leak_detected is False
    assert expense_state(summary).severity == Severity.EMPTY


def test_daily_totals():
    expenses = [
        _exp("a", 10, ExpenseCategory.FOOD, date(2024, 3, 2)),
        _exp("b", 5, ExpenseCategory.FOOD, date(2024, 3, 1)),
        _exp("c", 7, ExpenseCategory.WASTE, date(2024, 3, 2)),
    ]
    assert daily_totals(expenses) == [(date(2024, 3, 1), 5), (date(2024, 3, 2), 17)]


def test_month_key():
    assert month_key(date(2024, 3, 9)) == "2024-03"


def test_waste_exactly_twenty_percent_is_not_critical():
    assert waste_severity(200, 1000) == Severity.WARNING


def test_waste_above_twenty_percent_is_critical():
    assert waste_severity(200.01, 1000) == Severity.CRITICAL


def test_waste_exactly_fifteen_percent_is_not_warning():
    assert waste_severity(150, 1000) == Severity.OK


def test_waste_above_fifteen_percent_is_warning():
    assert waste_severity(150.01, 1000) == Severity.WARNING


def test_expense_state_messages():
    expenses = [_exp("a", 300, ExpenseCategory.WASTE, date(2024, 3, 1))]
    state = expense_state(summarize_month(expenses, "2024-03", budget=1000))
    assert state.severity == Severity.CRITICAL
    assert "exceeded limit" in state.messages[0]

    expenses = [_exp("a", 10, ExpenseCategory.FOOD, date(2024, 3, 1))]
    state = expense_state(summarize_month(expenses, "2024-03", budget=1000))
    assert state.severity == Severity.OK
    assert state.messages == []


def test_parse_month():
    assert parse_month("2024-03") == "2024-03"
    assert parse_month(" 2024-3 ") == "2024-03"
    assert parse_month("2024-13") is None
    assert parse_month("2024-00") is None
    assert parse_month("abc") is None
    assert parse_month("24-03") is None
    assert parse_month("2") is None
    assert parse_month(None) is None
