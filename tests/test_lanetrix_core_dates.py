from __future__ import annotations

import datetime as dt
import unittest

from lanetrix_core.core.dates import (
    DateParseError,
    add_days,
    coerce_date,
    days_between,
    format_date,
    parse_date,
)


class DateMathTests(unittest.TestCase):
    def test_parse_and_format_round_trip(self) -> None:
        for token in ("2024-01-01", "2024-02-29", "1999-12-31", "0001-01-01", "9999-12-31"):
            with self.subTest(token=token):
                self.assertEqual(format_date(parse_date(token)), token)

    def test_round_trip_across_a_full_year(self) -> None:
        day = dt.date(2023, 12, 25)
        for _ in range(400):
            token = format_date(day)
            self.assertEqual(format_date(parse_date(token)), token)
            day = add_days(day, 1)

    def test_malformed_tokens_raise_date_parse_error(self) -> None:
        for token in ("2024-1-01", "2024/01/01", "20240101", "2024-01-0x", "", "2024-13-01", "2023-02-29", " 2024-01-01", "2024-01-01\n"):
            with self.subTest(token=token):
                with self.assertRaises(DateParseError):
                    parse_date(token)

    def test_non_string_is_rejected(self) -> None:
        with self.assertRaises(DateParseError):
            parse_date(20240101)  # type: ignore[arg-type]

    def test_date_parse_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            parse_date("not-a-date")
        self.assertEqual(ctx.exception.token, "not-a-date")

    def test_days_between_and_add_days(self) -> None:
        self.assertEqual(days_between("2024-01-01", "2024-01-03"), 2)
        self.assertEqual(days_between("2024-01-03", "2024-01-01"), -2)
        self.assertEqual(days_between("2024-02-28", "2024-03-01"), 2)
        self.assertEqual(add_days("2024-12-31", 1), dt.date(2025, 1, 1))
        self.assertEqual(add_days(dt.date(2024, 3, 1), -1), dt.date(2024, 2, 29))

    def test_coerce_date_drops_time_of_day(self) -> None:
        self.assertEqual(coerce_date(dt.datetime(2024, 5, 6, 23, 59)), dt.date(2024, 5, 6))
        self.assertEqual(coerce_date("2024-05-06"), dt.date(2024, 5, 6))


if __name__ == "__main__":
    unittest.main()
