"""Column coercion for record payloads."""

import unittest
from datetime import date
from decimal import Decimal

from sqlalchemy import Boolean, Column, Date, Integer, Numeric, String

from app.api.v1.records import _coerce
from app.core.errors import ValidationError


class TestIntegerColumns(unittest.TestCase):

    def setUp(self) -> None:
        self.column = Column("seats", Integer)

    def test_accepts_ints_and_whole_numbers(self) -> None:
        self.assertEqual(_coerce(self.column, 3), 3)
        self.assertEqual(_coerce(self.column, 3.0), 3)
        self.assertEqual(_coerce(self.column, "12"), 12)

    def test_rejects_fractions(self) -> None:
        with self.assertRaises(ValidationError):
            _coerce(self.column, 3.5)

    def test_rejects_non_numeric_text(self) -> None:
        with self.assertRaises(ValidationError):
            _coerce(self.column, "twelve")

    def test_rejects_booleans_and_containers(self) -> None:
        for value in (True, [1], {"n": 1}):
            with self.assertRaises(ValidationError):
                _coerce(self.column, value)


class TestTextColumns(unittest.TestCase):

    def setUp(self) -> None:
        self.column = Column("name", String(50))

    def test_scalars_become_text(self) -> None:
        self.assertEqual(_coerce(self.column, "Kiran"), "Kiran")
        self.assertEqual(_coerce(self.column, 7), "7")
        self.assertEqual(_coerce(self.column, 2.5), "2.5")

    def test_rejects_containers(self) -> None:
        for value in (["a"], {"x": 1}, False):
            with self.assertRaises(ValidationError):
                _coerce(self.column, value)


class TestOtherColumns(unittest.TestCase):

    def test_null_passes_through(self) -> None:
        self.assertIsNone(_coerce(Column("name", String(50)), None))

    def test_boolean_column(self) -> None:
        column = Column("email_opt_out", Boolean)
        self.assertTrue(_coerce(column, True))
        with self.assertRaises(ValidationError):
            _coerce(column, "yes")

    def test_date_column(self) -> None:
        column = Column("start_date", Date)
        self.assertEqual(_coerce(column, "2026-01-31"), date(2026, 1, 31))
        with self.assertRaises(ValidationError):
            _coerce(column, "31/01/2026")

    def test_numeric_column(self) -> None:
        column = Column("budget", Numeric(15, 2))
        self.assertEqual(_coerce(column, 1250.5), Decimal("1250.5"))
        with self.assertRaises(ValidationError):
            _coerce(column, "lots")
