import io
import os
import tempfile
import unittest
from collections import Counter
from datetime import date
from pathlib import Path

from ledger.cli import FinanceLedgerCLI, format_chart, parse_date
from ledger.errors import (
    CapacityExceeded, IndexOutOfRange, InvalidAmount, InvalidDate,
    LedgerError, PersistenceUnavailable
)
from ledger.logic import TransactionStore
from ledger.models import MonthlyExpenses, Transaction, clean_text, is_valid_date, make_date
from ledger.storage import (
    deserialize, format_line, load_data, parse_line, save_data, serialize
)


def _key(t):
    return (t.t_date, t.t_type, t.category, t.amount, t.note)


class TestModels(unittest.TestCase):
    def test_transaction_creation(self):
        """Test Transaction dataclass"""
        trans = Transaction(
            amount=100.0,
            t_type="expense",
            t_date=date(2023, 1, 15),
            category="Utilities",
            note="Electric bill",
        )
        self.assertEqual(trans.amount, 100.0)
        self.assertEqual(trans.t_type, "expense")
        self.assertEqual(trans.t_date, date(2023, 1, 15))
        self.assertEqual(trans.category, "Utilities")
        self.assertEqual(trans.note, "Electric bill")

    def test_is_valid_date(self):
        """Test calendar validation including leap years and year bounds"""
        self.assertTrue(is_valid_date(2024, 2, 29))
        self.assertTrue(is_valid_date(2000, 2, 29))
        self.assertFalse(is_valid_date(1900, 2, 29))
        self.assertFalse(is_valid_date(2023, 2, 29))
        self.assertFalse(is_valid_date(2023, 4, 31))
        self.assertFalse(is_valid_date(2023, 13, 1))
        self.assertFalse(is_valid_date(2023, 0, 1))
        self.assertFalse(is_valid_date(1899, 12, 31))
        self.assertFalse(is_valid_date(3001, 1, 1))
        self.assertTrue(is_valid_date(1900, 1, 1))
        self.assertTrue(is_valid_date(3000, 12, 31))

    def test_make_date(self):
        self.assertEqual(make_date((2025, 1, 15)), date(2025, 1, 15))
        self.assertEqual(make_date(date(2025, 1, 15)), date(2025, 1, 15))
        with self.assertRaises(InvalidDate):
            make_date((2025, 2, 30))
        with self.assertRaises(InvalidDate):
            make_date(date(1800, 1, 1))
        with self.assertRaises(InvalidDate):
            make_date("not a date")

    def test_clean_text(self):
        """Delimiters and line breaks never survive into stored text"""
        self.assertEqual(clean_text("a|b|c", 63), "a/b/c")
        self.assertEqual(clean_text("two\nlines", 63), "two lines")
        self.assertEqual(clean_text(None, 63), "")
        self.assertEqual(clean_text("x" * 100, 63), "x" * 63)

    def test_monthly_expenses_bars(self):
        monthly = MonthlyExpenses(year=2025, totals=[50.0, 950.0] + [0.0] * 10)
        self.assertEqual(monthly.maximum, 950.0)
        self.assertEqual(monthly.total, 1000.0)
        self.assertEqual(monthly.bar_lengths(), [3, 50] + [0] * 10)
        self.assertEqual(monthly.bar_lengths(10), [1, 10] + [0] * 10)

    def test_monthly_expenses_empty_year(self):
        """No expenses in the year means no chart at all"""
        monthly = MonthlyExpenses(year=2025)
        self.assertEqual(monthly.totals, [0.0] * 12)
        self.assertIsNone(monthly.bar_lengths())


class TestTransactionStore(unittest.TestCase):
    def setUp(self):
        """Fresh store for each test"""
        self.store = TransactionStore()

    def test_add_transaction(self):
        """Test adding transactions"""
        index = self.store.add_transaction(
            amount=100.0,
            t_type="income",
            t_date=date(2023, 1, 1),
            category_name="Salary",
            note="Monthly salary",
        )

        self.assertEqual(index, 0)
        self.assertEqual(len(self.store), 1)
        trans = self.store[0]
        self.assertEqual(trans.amount, 100.0)
        self.assertEqual(trans.t_type, "income")
        self.assertEqual(trans.t_date, date(2023, 1, 1))
        self.assertEqual(trans.category, "Salary")
        self.assertEqual(trans.note, "Monthly salary")

        index = self.store.add_transaction(20.0, "expense", (2023, 1, 2), "Food")
        self.assertEqual(index, 1)
        self.assertEqual(self.store[1].t_date, date(2023, 1, 2))

    def test_default_categories(self):
        """Empty category falls back to Salary or Misc"""
        self.store.add_transaction(10.0, "income", date(2023, 1, 1))
        self.store.add_transaction(10.0, "expense", date(2023, 1, 1), "")
        self.assertEqual(self.store[0].category, "Salary")
        self.assertEqual(self.store[1].category, "Misc")

    def test_delimiter_sanitized_on_entry(self):
        self.store.add_transaction(10.0, "expense", date(2023, 1, 1), "Food|Drink", "a|b")
        self.assertEqual(self.store[0].category, "Food/Drink")
        self.assertEqual(self.store[0].note, "a/b")

    def test_text_bounds(self):
        self.store.add_transaction(10.0, "expense", date(2023, 1, 1), "c" * 80, "n" * 200)
        self.assertEqual(len(self.store[0].category), 63)
        self.assertEqual(len(self.store[0].note), 127)

    def test_invalid_amount(self):
        """Zero and negative amounts are rejected on entry"""
        with self.assertRaises(InvalidAmount):
            self.store.add_transaction(0.0, "expense", date(2023, 1, 1))
        with self.assertRaises(InvalidAmount):
            self.store.add_transaction(-50.0, "expense", date(2023, 1, 1))
        with self.assertRaises(InvalidAmount):
            self.store.add_transaction(float("nan"), "expense", date(2023, 1, 1))
        self.assertEqual(len(self.store), 0)

    def test_amount_rounded_before_check(self):
        """An amount that rounds to 0.00 is rejected"""
        with self.assertRaises(InvalidAmount):
            self.store.add_transaction(0.004, "expense", date(2023, 1, 1))
        self.store.add_transaction(0.006, "expense", date(2023, 1, 1))
        self.assertEqual(self.store[0].amount, 0.01)

    def test_invalid_date(self):
        with self.assertRaises(InvalidDate):
            self.store.add_transaction(10.0, "expense", (2023, 2, 29))
        with self.assertRaises(InvalidDate):
            self.store.add_transaction(10.0, "expense", date(1899, 12, 31))
        self.assertEqual(len(self.store), 0)

    def test_invalid_type(self):
        with self.assertRaises(ValueError):
            self.store.add_transaction(10.0, "transfer", date(2023, 1, 1))

    def test_capacity(self):
        """The capacity cap is enforced on append"""
        store = TransactionStore(capacity=2)
        store.add_transaction(1.0, "expense", date(2023, 1, 1))
        store.add_transaction(2.0, "expense", date(2023, 1, 2))
        self.assertTrue(store.is_full)
        with self.assertRaises(CapacityExceeded):
            store.add_transaction(3.0, "expense", date(2023, 1, 3))
        self.assertEqual(len(store), 2)

    def test_errors_share_base(self):
        for error in (InvalidDate, InvalidAmount, CapacityExceeded,
                      IndexOutOfRange, PersistenceUnavailable):
            self.assertTrue(issubclass(error, LedgerError))

    def test_delete_transaction(self):
        """Deleting shifts later entries down by one"""
        for amount in (1.0, 2.0, 3.0, 4.0):
            self.store.add_transaction(amount, "expense", date(2023, 1, 1))

        removed = self.store.delete_transaction(1)
        self.assertEqual(removed.amount, 2.0)
        self.assertEqual([t.amount for t in self.store], [1.0, 3.0, 4.0])
        self.assertEqual(self.store[1].amount, 3.0)
        self.assertEqual(self.store[2].amount, 4.0)

        with self.assertRaises(IndexOutOfRange):
            self.store.delete_transaction(3)
        with self.assertRaises(IndexOutOfRange):
            self.store.delete_transaction(-1)

    def test_delete_only_transaction(self):
        self.store.add_transaction(5.0, "income", date(2023, 1, 1))
        self.store.delete_transaction(0)
        self.assertEqual(len(self.store), 0)
        with self.assertRaises(IndexOutOfRange):
            self.store.delete_transaction(0)

    def test_sort_by_date_is_stable(self):
        self.store.add_transaction(1.0, "expense", date(2023, 3, 1), note="march")
        self.store.add_transaction(2.0, "expense", date(2023, 1, 1), note="first jan")
        self.store.add_transaction(3.0, "expense", date(2022, 12, 31), note="dec")
        self.store.add_transaction(4.0, "expense", date(2023, 1, 1), note="second jan")

        self.store.sort_by_date()
        self.assertEqual([t.note for t in self.store],
                         ["dec", "first jan", "second jan", "march"])

    def test_sort_by_amount_is_stable(self):
        self.store.add_transaction(10.0, "expense", date(2023, 1, 1), note="a")
        self.store.add_transaction(30.0, "income", date(2023, 1, 2), note="b")
        self.store.add_transaction(10.0, "income", date(2023, 1, 3), note="c")
        self.store.add_transaction(20.0, "expense", date(2023, 1, 4), note="d")

        self.store.sort_by_amount()
        self.assertEqual([t.note for t in self.store], ["b", "d", "a", "c"])

    def test_sorts_idempotent_and_preserve_entries(self):
        for amount, day in ((5.0, 3), (7.5, 1), (5.0, 2), (1.0, 1), (7.5, 3)):
            self.store.add_transaction(amount, "expense", date(2023, 5, day))
        before = Counter(_key(t) for t in self.store)

        self.store.sort_by_date()
        once = list(self.store)
        self.store.sort_by_date()
        self.assertEqual(list(self.store), once)

        self.store.sort_by_amount()
        once = list(self.store)
        self.store.sort_by_amount()
        self.assertEqual(list(self.store), once)

        self.assertEqual(Counter(_key(t) for t in self.store), before)

    def test_find_by_text(self):
        """Case-insensitive substring search on category and note"""
        self.store.add_transaction(50.0, "expense", date(2025, 1, 15), "Food", "Lunch with Sam")
        self.store.add_transaction(950.0, "expense", date(2025, 2, 1), "Rent")
        self.store.add_transaction(5.0, "expense", date(2025, 2, 2), "Seafood", "")

        self.assertEqual([t.category for t in self.store.find_by_text("category", "foo")],
                         ["Food", "Seafood"])
        self.assertEqual([t.category for t in self.store.find_by_text("note", "LUNCH")],
                         ["Food"])
        self.assertEqual(list(self.store.find_by_text("note", "dinner")), [])
        # Empty query matches everything
        self.assertEqual(len(list(self.store.find_by_text("category", ""))), 3)

        with self.assertRaises(ValueError):
            self.store.find_by_text("amount", "5")

    def test_queries_restart_per_call(self):
        self.store.add_transaction(50.0, "expense", date(2025, 1, 15), "Food")
        first = list(self.store.find_by_text("category", "food"))
        second = list(self.store.find_by_text("category", "food"))
        self.assertEqual(first, second)
        self.assertEqual(len(first), 1)

    def test_queries_follow_current_store_order(self):
        self.store.add_transaction(2.0, "expense", date(2025, 1, 2), "Food")
        self.store.add_transaction(1.0, "expense", date(2025, 1, 1), "Food")
        self.store.sort_by_date()
        self.assertEqual([t.amount for t in self.store.find_by_text("category", "food")],
                         [1.0, 2.0])

    def test_find_by_date(self):
        self.store.add_transaction(50.0, "expense", date(2025, 1, 15), "Food")
        self.store.add_transaction(20.0, "income", date(2025, 1, 16), "Gift")
        self.store.add_transaction(30.0, "expense", date(2025, 1, 15), "Taxi")

        self.assertEqual([t.category for t in self.store.find_by_date(2025, 1, 15)],
                         ["Food", "Taxi"])
        self.assertEqual(list(self.store.find_by_date(2024, 1, 15)), [])
        self.assertEqual([i for i, _ in self.store.find_by_date(2025, 1, 15, indexed=True)],
                         [0, 2])
        with self.assertRaises(InvalidDate):
            list(self.store.find_by_date(2025, 2, 30))

    def test_filter_expenses_above(self):
        """Strictly greater than the threshold, expenses only"""
        self.store.add_transaction(100.0, "expense", date(2025, 1, 1))
        self.store.add_transaction(150.0, "expense", date(2025, 1, 2))
        self.store.add_transaction(500.0, "income", date(2025, 1, 3))

        self.assertEqual([t.amount for t in self.store.filter_expenses_above(100.0)], [150.0])
        self.assertEqual([t.amount for t in self.store.filter_expenses_above(0)], [100.0, 150.0])
        self.assertEqual(list(self.store.filter_expenses_above(150.0)), [])

    def test_summary(self):
        """Test totals partitioned by type"""
        self.assertEqual(self.store.summary().income, 0.0)
        self.assertEqual(self.store.summary().expense, 0.0)
        self.assertEqual(self.store.summary().net, 0.0)

        self.store.add_transaction(100.0, "income", date(2023, 1, 1))
        self.store.add_transaction(50.0, "expense", date(2023, 1, 1))
        self.store.add_transaction(30.0, "expense", date(2023, 1, 2))

        before = self.store.summary()
        self.assertEqual(before.income, 100.0)
        self.assertEqual(before.expense, 80.0)
        self.assertEqual(before.net, 20.0)

        self.store.add_transaction(25.0, "income", date(2023, 2, 1))
        after = self.store.summary()
        self.assertEqual(after.income, before.income + 25.0)
        self.assertEqual(after.net, before.net + 25.0)
        self.assertEqual(after.expense, before.expense)

    def test_monthly_expenses(self):
        """Monthly totals for one year, income and other years excluded"""
        self.store.add_transaction(50.0, "expense", date(2025, 1, 15), "Food")
        self.store.add_transaction(950.0, "expense", date(2025, 2, 1), "Rent")
        self.store.add_transaction(2000.0, "income", date(2025, 1, 20), "Salary")
        self.store.add_transaction(70.0, "expense", date(2024, 3, 1), "Food")

        monthly = self.store.monthly_expenses(2025)
        self.assertEqual(monthly.totals, [50.0, 950.0] + [0.0] * 10)
        self.assertEqual(monthly.maximum, 950.0)
        self.assertEqual(monthly.total, 1000.0)

        self.assertIsNone(self.store.monthly_expenses(2026).bar_lengths())

    def test_replace_all_caps_at_capacity(self):
        store = TransactionStore(capacity=2)
        store.add_transaction(9.0, "income", date(2020, 1, 1))
        rows = [Transaction(float(i), "expense", date(2023, 1, 1), "Misc") for i in range(1, 5)]
        self.assertEqual(store.replace_all(rows), 2)
        self.assertEqual([t.amount for t in store], [1.0, 2.0])


class TestStorage(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "finance_data.txt"
        self.store = TransactionStore()

    def tearDown(self):
        self.tmp.cleanup()

    def test_format_line(self):
        t = Transaction(50.0, "expense", date(2025, 1, 5), "Food", "lunch")
        self.assertEqual(format_line(t), "2025|1|5|1|Food|50.00|lunch")
        t = Transaction(1234.5, "income", date(2025, 12, 31), "Salary")
        self.assertEqual(format_line(t), "2025|12|31|0|Salary|1234.50|")

    def test_serialize(self):
        self.store.add_transaction(50.0, "expense", date(2025, 1, 15), "Food", "lunch")
        self.store.add_transaction(2000.0, "income", date(2025, 1, 20), "Salary")
        self.assertEqual(
            serialize(self.store),
            "2025|1|15|1|Food|50.00|lunch\n2025|1|20|0|Salary|2000.00|\n",
        )
        self.assertEqual(serialize([]), "")

    def test_parse_line(self):
        t = parse_line("2025|1|15|1|Food|50.00|lunch\n")
        self.assertEqual(t, Transaction(50.0, "expense", date(2025, 1, 15), "Food", "lunch"))

    def test_parse_line_optional_note(self):
        self.assertEqual(parse_line("2025|1|15|0|Salary|10.00").note, "")
        self.assertEqual(parse_line("2025|1|15|0|Salary|10.00|").note, "")

    def test_parse_line_note_keeps_remaining_text(self):
        self.assertEqual(parse_line("2025|1|15|1|Food|5.00|a|b\r\n").note, "a|b")

    def test_parse_line_rejects_malformed(self):
        for line in (
            "abc|garbage",
            "",
            "2025|1|15|1|Food",
            "2025|1|15|x|Food|5.00|",
            "2025|1|15|1||5.00|",
            "2025|1|15|1|Food|five|",
            "2025|2|30|1|Food|5.00|",
            "1899|1|1|1|Food|5.00|",
            "2025|1|15|1|Food|-5.00|",
            "2025|1|15|1|Food|nan|",
        ):
            self.assertIsNone(parse_line(line), line)

    def test_parse_line_accepts_zero_amount(self):
        """Loading is more lenient than entry: 0.00 is kept"""
        t = parse_line("2025|1|15|0|Gift|0.00|")
        self.assertIsNotNone(t)
        self.assertEqual(t.amount, 0.0)
        with self.assertRaises(InvalidAmount):
            self.store.add_transaction(0.0, "income", date(2025, 1, 15), "Gift")

    def test_parse_line_kind_codes(self):
        self.assertEqual(parse_line("2025|1|15|1|Food|5.00|").t_type, "expense")
        self.assertEqual(parse_line("2025|1|15|0|Food|5.00|").t_type, "income")
        self.assertEqual(parse_line("2025|1|15|7|Food|5.00|").t_type, "income")

    def test_parse_line_text_bounds(self):
        """Overlong category drops the line, overlong note is cut"""
        self.assertIsNone(parse_line("2025|1|1|1|" + "x" * 70 + "|5.00|n"))
        t = parse_line("2025|1|15|1|" + "c" * 63 + "|5.00|" + "n" * 150)
        self.assertEqual(len(t.category), 63)
        self.assertEqual(len(t.note), 127)

    def test_deserialize_drops_malformed_lines(self):
        transactions = deserialize("2025|1|15|1|Food|50.00|lunch\nabc|garbage\n")
        self.assertEqual(len(transactions), 1)
        self.assertEqual(transactions[0].category, "Food")

    def test_round_trip(self):
        self.store.add_transaction(50.0, "expense", date(2025, 1, 15), "Food|Drink", "lunch|dinner")
        self.store.add_transaction(2000.0, "income", date(2024, 2, 29))
        self.store.add_transaction(0.01, "expense", date(1900, 1, 1), "Tiny", "  spaced  ")
        self.assertEqual(deserialize(serialize(self.store)), list(self.store))

    def test_round_trip_rounds_to_cents(self):
        """Amounts beyond two decimals are stored as saved"""
        self.store.add_transaction(10.005, "expense", date(2025, 1, 1), "Food")
        self.store.add_transaction(3.14159, "income", date(2025, 1, 2), "Gift")
        self.assertEqual(self.store[1].amount, 3.14)
        self.assertEqual(deserialize(serialize(self.store)), list(self.store))

    def test_save_and_load_data(self):
        """Test saving and loading data"""
        self.store.add_transaction(100.0, "income", date(2023, 1, 1), "Salary")
        self.store.add_transaction(45.5, "expense", date(2023, 1, 3), "Food", "groceries")

        self.assertEqual(save_data(self.store, self.path), 2)
        self.assertEqual(self.path.read_text(),
                         "2023|1|1|0|Salary|100.00|\n2023|1|3|1|Food|45.50|groceries\n")

        restored = TransactionStore()
        restored.add_transaction(1.0, "expense", date(2020, 1, 1))
        self.assertEqual(load_data(restored, self.path), 2)
        self.assertEqual(list(restored), list(self.store))

    def test_save_replaces_file(self):
        self.path.write_text("old content that should disappear\n")
        self.store.add_transaction(10.0, "expense", date(2023, 1, 1), "Food")
        save_data(self.store, self.path)
        self.assertEqual(self.path.read_text(), "2023|1|1|1|Food|10.00|\n")
        self.assertEqual(os.listdir(self.tmp.name), ["finance_data.txt"])

    def test_save_failure(self):
        """Unwritable target reports an error and leaves the store alone"""
        self.store.add_transaction(10.0, "expense", date(2023, 1, 1), "Food")
        bad_path = Path(self.tmp.name) / "missing" / "finance_data.txt"
        with self.assertRaises(PersistenceUnavailable):
            save_data(self.store, bad_path)
        self.assertEqual(len(self.store), 1)
        self.assertFalse(bad_path.exists())

    def test_load_missing_file(self):
        self.store.add_transaction(10.0, "expense", date(2023, 1, 1), "Food")
        with self.assertRaises(PersistenceUnavailable):
            load_data(self.store, Path(self.tmp.name) / "nope.txt")
        self.assertEqual(len(self.store), 1)

    def test_load_caps_at_capacity(self):
        self.path.write_text("".join(f"2023|1|{d}|1|Food|{d}.00|\n" for d in range(1, 6)))
        store = TransactionStore(capacity=3)
        self.assertEqual(load_data(store, self.path), 3)
        self.assertEqual([t.amount for t in store], [1.0, 2.0, 3.0])

    def test_load_skips_bad_lines(self):
        self.path.write_text(
            "2025|1|15|1|Food|50.00|lunch\n"
            "abc|garbage\n"
            "2025|2|30|1|Food|5.00|\n"
            "\n"
            "2025|1|20|0|Salary|0.00\n"
        )
        self.assertEqual(load_data(self.store, self.path), 2)
        self.assertEqual([t.category for t in self.store], ["Food", "Salary"])


class TestCLI(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "finance_data.txt"
        self.out = io.StringIO()
        self.cli = FinanceLedgerCLI(store=TransactionStore(), data_file=self.path, stdout=self.out)

    def tearDown(self):
        self.tmp.cleanup()

    def run_cmd(self, line):
        self.out.seek(0)
        self.out.truncate()
        self.cli.onecmd(line)
        return self.out.getvalue()

    def test_parse_date(self):
        self.assertEqual(parse_date("2025-01-15"), date(2025, 1, 15))
        self.assertEqual(parse_date("20250115"), date(2025, 1, 15))
        with self.assertRaises(InvalidDate):
            parse_date("2025-02-30")
        with self.assertRaises(InvalidDate):
            parse_date("soon")

    def test_add_and_list(self):
        output = self.run_cmd("add 50 expense Food 2025-01-15 --note lunch with Sam")
        self.assertIn("✓ Added expense of 50.00", output)
        t = self.cli.store[0]
        self.assertEqual(t.category, "Food")
        self.assertEqual(t.t_date, date(2025, 1, 15))
        self.assertEqual(t.note, "lunch with Sam")

        output = self.run_cmd("list")
        self.assertIn("Idx  Date", output)
        self.assertIn("0    2025-01-15 EXPENSE  Food", output)
        self.assertIn("50.00 lunch with Sam", output)

    def test_add_invalid(self):
        self.assertIn("Error", self.run_cmd("add 0 expense Food 2025-01-15"))
        self.assertIn("Error", self.run_cmd("add 10 expense Food 2025-02-30"))
        self.assertIn("Invalid input", self.run_cmd("add 10 transfer"))
        self.assertIn("Invalid input", self.run_cmd("add ten expense"))
        self.assertEqual(len(self.cli.store), 0)

    def test_add_category_starting_with_digit(self):
        """Arguments that are not dates are taken as the category"""
        output = self.run_cmd("add 100 income 401k 2025-01-01")
        self.assertIn("✓ Added income of 100.00", output)
        self.assertEqual(self.cli.store[0].category, "401k")
        self.assertEqual(self.cli.store[0].t_date, date(2025, 1, 1))

        self.run_cmd("add 20 income 2025-01-02 2ndJob")
        self.assertEqual(self.cli.store[1].category, "2ndJob")
        self.assertEqual(self.cli.store[1].t_date, date(2025, 1, 2))

    def test_list_empty(self):
        self.assertEqual(self.run_cmd("list"), "No transactions.\n")

    def test_sort_and_delete(self):
        self.run_cmd("add 10 expense A 2025-03-01")
        self.run_cmd("add 30 expense B 2025-01-01")
        self.assertIn("Sorted.", self.run_cmd("sort date"))
        self.assertEqual([t.category for t in self.cli.store], ["B", "A"])
        self.assertIn("Usage", self.run_cmd("sort name"))

        self.assertIn("Remaining = 1", self.run_cmd("delete 0"))
        self.assertIn("Error", self.run_cmd("delete 5"))
        self.assertIn("Usage", self.run_cmd("delete x"))

    def test_search_and_filter(self):
        self.run_cmd("add 50 expense Food 2025-01-15")
        self.run_cmd("add 950 expense Rent 2025-02-01")

        output = self.run_cmd("search category foo")
        self.assertIn("Food", output)
        self.assertNotIn("Rent", output)
        self.assertIn("Rent", self.run_cmd("search date 2025-02-01"))
        self.assertIn("No matches.", self.run_cmd("search note anything"))

        output = self.run_cmd("filter 100")
        self.assertIn("Rent", output)
        self.assertNotIn("Food", output)
        self.assertIn("No expenses above that amount.", self.run_cmd("filter 1000"))

    def test_summary(self):
        self.run_cmd("add 2000 income Salary 2025-01-20")
        self.run_cmd("add 50 expense Food 2025-01-15")
        self.assertEqual(
            self.run_cmd("summary"),
            "Summary (all time): Income = 2000.00 | Expense = 50.00 | Savings = 1950.00\n",
        )

    def test_chart(self):
        self.run_cmd("add 50 expense Food 2025-01-15")
        self.run_cmd("add 950 expense Rent 2025-02-01")
        output = self.run_cmd("chart 2025")
        self.assertIn("Jan | ###  50.00", output)
        self.assertIn("Feb | " + "#" * 50 + "  950.00", output)
        self.assertIn("Mar |   0.00", output)
        self.assertIn("Total expenses in 2025: 1000.00", output)

        self.assertEqual(self.run_cmd("chart 2024"), "No expenses recorded for 2024.\n")
        self.assertEqual(format_chart(self.cli.store, 2024), "No expenses recorded for 2024.")

    def test_chart_empty_store(self):
        self.assertEqual(self.run_cmd("chart 2025"), "No data.\n")

    def test_save_and_load(self):
        self.run_cmd("add 50 expense Food 2025-01-15")
        self.assertIn("✓ Saved", self.run_cmd("save"))
        self.run_cmd("delete 0")
        self.assertIn("1 records", self.run_cmd("load"))
        self.assertEqual(self.cli.store[0].category, "Food")

    def test_load_missing(self):
        self.assertIn("Load failed", self.run_cmd("load"))

    def test_exit(self):
        self.assertTrue(self.cli.onecmd("exit"))


if __name__ == "__main__":
    unittest.main()
