from pcs.config import settings


def format_amount(amount: float, decimals: int = 2) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{settings.currency_symbol}{abs(amount):,.{decimals}f}"


def format_hours(hours: float) -> str:
    return f"{hours:.1f} hrs"


def format_percent(ratio: float) -> str:
    return f"{ratio * 100:.0f}%"


def progress_bar(pct: float, width: int = 10) -> str:
    filled = max(0, min(int(pct / 100 * width), width))
    return "█" * filled + "░" * (width - filled)
