from __future__ import annotations
import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, List, Literal, Tuple, Union

from ledger import config
from ledger.errors import InvalidDate


TransactionType = Literal["income", "expense"]

TRANSACTION_TYPES: Tuple[TransactionType, ...] = ("income", "expense")

DEFAULT_CATEGORIES = {
    "income": "Salary",
    "expense": "Misc",
}

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
               "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

DateLike = Union[date, Tuple[int, int, int]]


@dataclass
class Transaction:
    amount: float
    t_type: TransactionType
    t_date: date
    category: str
    note: str = ""


@dataclass(frozen=True)
class Summary:
    income: float
    expense: float
    net: float


@dataclass(frozen=True)
class MonthlyExpenses:
    """Expense sums per calendar month of one year, January first."""
    year: int
    totals: List[float] = field(default_factory=lambda: [0.0] * 12)

    @property
    def maximum(self) -> float:
        return max(self.totals)

    @property
    def total(self) -> float:
        return sum(self.totals)

    def bar_lengths(self, width: int = config.CHART_WIDTH) -> Optional[List[int]]:
        """Scale each month against the busiest one.

        Returns None when the year has no expenses at all, so callers can
        tell "nothing to chart" apart from a chart of short bars.
        """
        peak = self.maximum
        if peak == 0.0:
            return None
        return [int(total / peak * width + 0.5) for total in self.totals]


def is_valid_date(year: int, month: int, day: int) -> bool:
    if not config.MIN_YEAR <= year <= config.MAX_YEAR:
        return False
    if not 1 <= month <= 12:
        return False
    return 1 <= day <= calendar.monthrange(year, month)[1]


def make_date(t_date: DateLike) -> date:
    """Turn a date or a (year, month, day) triple into a checked ``date``."""
    if isinstance(t_date, date):
        year, month, day = t_date.year, t_date.month, t_date.day
    else:
        try:
            year, month, day = (int(part) for part in t_date)
        except (TypeError, ValueError) as e:
            raise InvalidDate(f"Not a date: {t_date!r}") from e

    if not is_valid_date(year, month, day):
        raise InvalidDate(f"Invalid date: {year:04d}-{month:02d}-{day:02d}")
    return date(year, month, day)


def clean_text(text: Optional[str], limit: int) -> str:
    """Keep free text safe for the line format: no delimiter, no line breaks."""
    if not text:
        return ""
    text = text.replace(config.DELIMITER, config.DELIMITER_REPLACEMENT)
    text = text.replace("\r", " ").replace("\n", " ")
    return text[:limit]
