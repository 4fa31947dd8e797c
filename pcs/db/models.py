from dataclasses import dataclass, field
from datetime import date, datetime

from pcs.categories import ExpenseCategory

HABIT_KEYS: tuple[str, ...] = ("study", "exercise", "coding", "noJunkFood")

HABIT_LABELS: dict[str, str] = {
    "study": "Study",
    "exercise": "Exercise",
    "coding": "Coding",
    "noJunkFood": "No Junk Food",
}


def habit_label(key: str) -> str:
    return HABIT_LABELS.get(key, key[:1].upper() + key[1:])


@dataclass(slots=True)
class ExpenseRecord:
    id: str
    amount: float
    category: ExpenseCategory
    note: str
    expense_date: date

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "amount": self.amount,
            "category": self.category.value,
            "note": self.note,
            "date": self.expense_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExpenseRecord":
        return cls(
            id=str(data["id"]),
            amount=float(data["amount"]),
            category=ExpenseCategory(data["category"]),
            note=data.get("note") or "",
            expense_date=date.fromisoformat(data["date"]),
        )


@dataclass(slots=True)
class HabitState:
    history: dict[date, bool] = field(default_factory=dict)
    streak: int = 0
    longest: int = 0

    def done_on(self, day: date) -> bool:
        return bool(self.history.get(day))

    def to_dict(self) -> dict:
        return {
            "history": {d.isoformat(): done for d, done in sorted(self.history.items())},
            "streak": self.streak,
            "longest": self.longest,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HabitState":
        history = {}
        for day, done in (data.get("history") or {}).items():
            try:
                history[date.fromisoformat(day)] = bool(done)
            except (ValueError, TypeError):
                continue
        # streak/longest are caches; callers recompute them from history
        return cls(history=history)


@dataclass(slots=True)
class TimeLogEntry:
    screen: float
    productive: float
    logged_at: datetime | None = None

    def to_dict(self) -> dict:
        data: dict = {"screen": self.screen, "productive": self.productive}
        if self.logged_at is not None:
            data["logged_at"] = self.logged_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "TimeLogEntry":
        logged_at = data.get("logged_at")
        return cls(
            screen=float(data.get("screen") or 0),
            productive=float(data.get("productive") or 0),
            logged_at=datetime.fromisoformat(logged_at) if logged_at else None,
        )
