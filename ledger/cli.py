import cmd
import re
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Tuple

from dateutil import parser as date_parser

from ledger import config
from ledger.errors import InvalidDate, LedgerError
from ledger.logic import TransactionStore
from ledger.models import MONTH_NAMES, Transaction
from ledger.storage import save_data, load_data

ISO_DATE_SHAPE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}$")

HEADER = (
    "Idx  Date        Type     Category               Amount      Note\n"
    "---- ----------- -------- ---------------------- ----------- ------------------------------"
)


def parse_date(text: str) -> date:
    """Parse a command-line date such as 2025-01-15 or 20250115."""
    if ISO_DATE_SHAPE.match(text):
        # Split by hand so impossible days (2025-02-30) are reported as such.
        year, month, day = (int(part) for part in text.split("-"))
        try:
            return date(year, month, day)
        except ValueError as e:
            raise InvalidDate(f"Invalid date: {text}") from e
    try:
        return date_parser.isoparse(text).date()
    except (ValueError, OverflowError) as e:
        raise InvalidDate(f"Date must be in YYYY-MM-DD format, got {text!r}") from e


def format_row(index: int, t: Transaction) -> str:
    return (f"{index:<4d} {t.t_date.isoformat()} {t.t_type.upper():<8s} "
            f"{t.category:<22s} {t.amount:11.2f} {t.note}")


def format_chart(store: TransactionStore, year: int, width: int = config.CHART_WIDTH) -> str:
    monthly = store.monthly_expenses(year)
    bars = monthly.bar_lengths(width)
    if bars is None:
        return f"No expenses recorded for {year}."

    lines = [f"Monthly Expense Chart for {year} (each # ~ scaled)"]
    for name, bar, total in zip(MONTH_NAMES, bars, monthly.totals):
        lines.append(f"{name:>3s} | {'#' * bar}  {total:.2f}")
    lines.append("")
    lines.append(f"Total expenses in {year}: {monthly.total:.2f}")
    return "\n".join(lines)


class FinanceLedgerCLI(cmd.Cmd):
    prompt = "(ledger) "

    def __init__(self, store: Optional[TransactionStore] = None, data_file: Optional[Path] = None,
                 stdin=None, stdout=None):
        super().__init__(stdin=stdin, stdout=stdout)
        self.store = store if store is not None else TransactionStore()
        self.data_file = Path(data_file) if data_file is not None else config.DATA_FILE
        self.intro = "Welcome to the Personal Finance Ledger. Type 'help' for commands."

    def _print(self, text: str = "") -> None:
        self.stdout.write(text + "\n")

    def _print_rows(self, rows: Iterable[Tuple[int, Transaction]], empty_message: str) -> None:
        found = False
        self._print(HEADER)
        for index, t in rows:
            self._print(format_row(index, t))
            found = True
        if not found:
            self._print(empty_message)

    # ===== CORE COMMANDS =====
    def do_add(self, arg):
        """Add a transaction: add <amount> <income|expense> [category] [YYYY-MM-DD] [--note "text"]"""
        try:
            args = self._parse_add_args(arg)
            self.store.add_transaction(
                amount=args['amount'],
                t_type=args['type'],
                t_date=args['date'],
                category_name=args['category'],
                note=args['note'],
            )
            self._print(f"✓ Added {args['type']} of {args['amount']:.2f}. Total = {len(self.store)}")
        except LedgerError as e:
            self._print(f"Error: {e}")
        except ValueError as e:
            self._print(f"Invalid input: {e}")

    def do_list(self, arg):
        """List all transactions"""
        if not len(self.store):
            self._print("No transactions.")
            return
        self._print_rows(enumerate(self.store), "No transactions.")

    def do_sort(self, arg):
        """Sort transactions: sort <date|amount>"""
        key = arg.strip().lower()
        if not len(self.store):
            self._print("No transactions to sort.")
            return
        if key == "date":
            self.store.sort_by_date()
        elif key == "amount":
            self.store.sort_by_amount()
        else:
            self._print("Usage: sort <date|amount>")
            return
        self._print("Sorted.")

    def do_search(self, arg):
        """Search: search category <text> | search note <text> | search date <YYYY-MM-DD>"""
        field, _, query = arg.strip().partition(" ")
        field = field.lower()
        try:
            if field in ("category", "note"):
                rows = self.store.find_by_text(field, query.strip(), indexed=True)
            elif field == "date":
                target = parse_date(query.strip())
                rows = self.store.find_by_date(target.year, target.month, target.day, indexed=True)
            else:
                self._print("Usage: search <category|note|date> <query>")
                return
            self._print_rows(rows, "No matches.")
        except LedgerError as e:
            self._print(f"Error: {e}")

    def do_filter(self, arg):
        """Show expenses over an amount: filter <threshold>"""
        try:
            threshold = float(arg.strip())
            if threshold < 0:
                raise ValueError("threshold must not be negative")
        except ValueError as e:
            self._print(f"Invalid input: {e}")
            return
        self._print_rows(self.store.filter_expenses_above(threshold, indexed=True),
                         "No expenses above that amount.")

    def do_delete(self, arg):
        """Delete a transaction by index: delete <index>"""
        try:
            removed = self.store.delete_transaction(int(arg.strip()))
            self._print(f"✓ Deleted {removed.t_type} of {removed.amount:.2f}. Remaining = {len(self.store)}")
        except LedgerError as e:
            self._print(f"Error: {e}")
        except ValueError:
            self._print("Usage: delete <index>")

    # ===== REPORTS =====
    def do_summary(self, arg):
        """Show all-time income, expense and savings"""
        s = self.store.summary()
        self._print(f"Summary (all time): Income = {s.income:.2f} | "
                    f"Expense = {s.expense:.2f} | Savings = {s.net:.2f}")

    def do_chart(self, arg):
        """Monthly expense chart: chart [year]"""
        if not len(self.store):
            self._print("No data.")
            return
        try:
            year = int(arg.strip()) if arg.strip() else date.today().year
        except ValueError:
            self._print("Usage: chart [year]")
            return
        if not config.MIN_YEAR <= year <= config.MAX_YEAR:
            self._print(f"Year must be between {config.MIN_YEAR} and {config.MAX_YEAR}")
            return
        self._print(format_chart(self.store, year))

    # ===== DATA MANAGEMENT =====
    def do_save(self, arg):
        """Save all transactions to the data file"""
        try:
            save_data(self.store, self.data_file)
            self._print(f"✓ Saved to '{self.data_file}'.")
        except LedgerError as e:
            self._print(f"Save failed: {e}")

    def do_load(self, arg):
        """Replace current transactions with the data file contents"""
        try:
            count = load_data(self.store, self.data_file)
            self._print(f"✓ Loaded from '{self.data_file}'. {count} records.")
        except LedgerError as e:
            self._print(f"Load failed: {e}")

    # ===== UTILITIES =====
    def do_exit(self, arg):
        """Exit the program"""
        self._print("Goodbye!")
        return True

    do_quit = do_exit
    do_EOF = do_exit

    def emptyline(self):
        pass

    # ===== HELPERS =====
    def _parse_add_args(self, arg):
        """Parse add command arguments"""
        args = arg.split()
        if len(args) < 2:
            raise ValueError("Missing required arguments (amount and type)")

        result = {
            'amount': float(args[0]),
            'type': args[1].lower(),
            'category': None,
            'date': date.today(),
            'note': "",
        }

        if result['type'] not in ('income', 'expense'):
            raise ValueError("Type must be 'income' or 'expense'")

        i = 2
        while i < len(args):
            if args[i] == '--note':
                result['note'] = ' '.join(args[i+1:])
                break
            elif args[i].startswith('--'):
                raise ValueError(f"Unknown flag: {args[i]}")
            else:
                # Try to parse as date first
                try:
                    result['date'] = parse_date(args[i])
                    i += 1
                    continue
                except InvalidDate:
                    # 2025-02-30 is a bad date, not a category
                    if ISO_DATE_SHAPE.match(args[i]):
                        raise

                if result['category'] is None:
                    result['category'] = args[i]
                else:
                    raise ValueError(f"Unexpected argument: {args[i]}")
            i += 1

        return result
