import math
from typing import Callable, Iterable, Iterator, List, Literal, Optional

from ledger import config
from ledger.errors import CapacityExceeded, IndexOutOfRange, InvalidAmount
from ledger.logging_setup import get_logger
from ledger.models import (
    DEFAULT_CATEGORIES, TRANSACTION_TYPES, DateLike, MonthlyExpenses, Summary,
    Transaction, TransactionType, clean_text, make_date
)

logger = get_logger(__name__)

TextField = Literal["category", "note"]


class TransactionStore:
    """Ordered, capacity-bounded collection of transactions.

    Entries keep insertion order until one of the sort methods reorders them.
    Query methods return a new generator on every call and yield in the
    current store order.
    """

    def __init__(self, capacity: int = config.MAX_TRANSACTIONS):
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._transactions: List[Transaction] = []

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self._transactions)

    def __getitem__(self, index: int) -> Transaction:
        return self._transactions[index]

    @property
    def is_full(self) -> bool:
        return len(self._transactions) >= self.capacity

    # ===== MUTATION =====
    def add_transaction(
            self,
            amount: float,
            t_type: TransactionType,
            t_date: DateLike,
            category_name: Optional[str] = None,
            note: str = "",
    ) -> int:
        if self.is_full:
            raise CapacityExceeded(f"Storage full ({self.capacity} transactions)")
        if t_type not in TRANSACTION_TYPES:
            raise ValueError("Type must be 'income' or 'expense'")

        checked_date = make_date(t_date)

        if not isinstance(amount, (int, float)) or not math.isfinite(amount):
            raise InvalidAmount(f"Amount must be a number, got {amount!r}")
        # Stored with two decimals, so keep only what survives a save.
        cents = round(float(amount), 2)
        if cents <= 0.0:
            raise InvalidAmount(f"Amount must be positive, got {amount!r}")

        category = clean_text(category_name, config.CATEGORY_LEN) or DEFAULT_CATEGORIES[t_type]

        self._transactions.append(Transaction(
            amount=cents,
            t_type=t_type,
            t_date=checked_date,
            category=category,
            note=clean_text(note, config.NOTE_LEN),
        ))
        logger.debug("Added %s of %.2f on %s (total %d)",
                     t_type, amount, checked_date, len(self._transactions))
        return len(self._transactions) - 1

    def delete_transaction(self, index: int) -> Transaction:
        if not 0 <= index < len(self._transactions):
            raise IndexOutOfRange(
                f"Index {index} out of range (store holds {len(self._transactions)})"
            )
        removed = self._transactions.pop(index)
        logger.debug("Deleted transaction %d, %d remaining", index, len(self._transactions))
        return removed

    def replace_all(self, transactions: Iterable[Transaction]) -> int:
        """Swap in a new set of transactions, dropping any beyond capacity."""
        kept = list(transactions)
        if len(kept) > self.capacity:
            logger.info("Dropping %d transactions beyond capacity %d",
                        len(kept) - self.capacity, self.capacity)
            kept = kept[:self.capacity]
        self._transactions = kept
        return len(kept)

    def clear(self) -> None:
        self._transactions.clear()

    # ===== ORDERING =====
    # list.sort is stable, so ties keep their current relative order.
    def sort_by_date(self) -> None:
        self._transactions.sort(key=lambda t: t.t_date)

    def sort_by_amount(self) -> None:
        self._transactions.sort(key=lambda t: t.amount, reverse=True)

    # ===== QUERIES =====
    def _select(self, predicate: Callable[[Transaction], bool], indexed: bool):
        for i, t in enumerate(self._transactions):
            if predicate(t):
                yield (i, t) if indexed else t

    def find_by_text(self, field: TextField, query: str, indexed: bool = False):
        if field not in ("category", "note"):
            raise ValueError("Search field must be 'category' or 'note'")
        needle = (query or "").lower()
        return self._select(lambda t: needle in getattr(t, field).lower(), indexed)

    def find_by_date(self, year: int, month: int, day: int, indexed: bool = False):
        target = make_date((year, month, day))
        return self._select(lambda t: t.t_date == target, indexed)

    def filter_expenses_above(self, threshold: float, indexed: bool = False):
        return self._select(lambda t: t.t_type == "expense" and t.amount > threshold, indexed)

    # ===== AGGREGATES =====
    def summary(self) -> Summary:
        total = {
            "income": 0.0,
            "expense": 0.0,
        }
        for t in self._transactions:
            total[t.t_type] += t.amount

        return Summary(
            income=total["income"],
            expense=total["expense"],
            net=total["income"] - total["expense"],
        )

    def monthly_expenses(self, year: int) -> MonthlyExpenses:
        totals = [0.0] * 12
        for t in self._transactions:
            if t.t_type == "expense" and t.t_date.year == year:
                totals[t.t_date.month - 1] += t.amount
        return MonthlyExpenses(year=year, totals=totals)
