"""Line-oriented persistence for the transaction store.

Each record is one line::

    year|month|day|kind|category|amount|note

``kind`` is ``0`` for income and ``1`` for expense, ``amount`` carries exactly
two decimals. The note is the remainder of the line and may be absent.
Loading is lenient: lines that do not parse are skipped one by one.
"""

import math
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ledger import config
from ledger.errors import PersistenceUnavailable
from ledger.logging_setup import get_logger
from ledger.logic import TransactionStore
from ledger.models import Transaction, is_valid_date

logger = get_logger(__name__)

PathLike = Union[str, Path]

FIELD_COUNT = 7
REQUIRED_FIELDS = 6

TYPE_CODES = {
    "income": 0,
    "expense": 1,
}


def format_line(t: Transaction) -> str:
    return config.DELIMITER.join((
        str(t.t_date.year),
        str(t.t_date.month),
        str(t.t_date.day),
        str(TYPE_CODES[t.t_type]),
        t.category,
        f"{t.amount:.2f}",
        t.note,
    ))


def serialize(transactions: Iterable[Transaction]) -> str:
    return "".join(format_line(t) + "\n" for t in transactions)


def parse_line(line: str) -> Optional[Transaction]:
    """Parse one stored line, or return None when it is malformed."""
    fields = line.rstrip("\r\n").split(config.DELIMITER, FIELD_COUNT - 1)
    if len(fields) < REQUIRED_FIELDS:
        return None

    try:
        year, month, day, type_code = (int(f) for f in fields[:4])
        amount = float(fields[5])
    except ValueError:
        return None

    category = fields[4]
    if not category or len(category) > config.CATEGORY_LEN:
        return None

    note = fields[6] if len(fields) == FIELD_COUNT else ""

    if not is_valid_date(year, month, day):
        return None
    if not math.isfinite(amount) or amount < 0.0:
        return None

    return Transaction(
        amount=amount,
        t_type="expense" if type_code == 1 else "income",
        t_date=date(year, month, day),
        category=category,
        note=note[:config.NOTE_LEN],
    )


def deserialize(text: str) -> List[Transaction]:
    transactions = []
    for line_no, line in enumerate(text.split("\n"), 1):
        if not line.strip():
            continue
        transaction = parse_line(line)
        if transaction is None:
            logger.debug("Skipping malformed line %d: %r", line_no, line)
            continue
        transactions.append(transaction)
    return transactions


def _atomic_write(target: Path, content: str) -> None:
    """Write to a temp file beside ``target`` and move it into place."""
    directory = target.parent
    temp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="\n",
            prefix=target.name + "-",
            suffix=".tmp",
            dir=directory,
            delete=False,
        ) as tf:
            temp_name = tf.name
            tf.write(content)
            tf.flush()
            os.fsync(tf.fileno())
        os.replace(temp_name, target)
    except OSError:
        if temp_name and os.path.exists(temp_name):
            try:
                os.unlink(temp_name)
            except OSError:
                logger.exception("Failed to remove temporary file %s", temp_name)
        raise


def save_data(store: TransactionStore, path: Optional[PathLike] = None) -> int:
    target = Path(path) if path is not None else config.DATA_FILE
    try:
        _atomic_write(target, serialize(store))
    except OSError as e:
        logger.warning("Could not save to %s: %s", target, e)
        raise PersistenceUnavailable(f"Cannot write '{target}': {e.strerror or e}") from e

    logger.info("Saved %d transactions to %s", len(store), target)
    return len(store)


def load_data(store: TransactionStore, path: Optional[PathLike] = None) -> int:
    source = Path(path) if path is not None else config.DATA_FILE
    try:
        text = source.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Could not load from %s: %s", source, e)
        raise PersistenceUnavailable(f"Cannot read '{source}': {e.strerror or e}") from e

    count = store.replace_all(deserialize(text))
    logger.info("Loaded %d transactions from %s", count, source)
    return count
