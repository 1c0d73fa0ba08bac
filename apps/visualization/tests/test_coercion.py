import math

from django.test import SimpleTestCase

from apps.visualization.services.coercion import (
    BOOLEAN,
    NUMBER,
    STRING,
    coerce_value,
    finite_number,
    is_missing,
    looks_boolean,
    looks_like_date,
    looks_numeric,
    parse_date,
    to_number,
    value_key,
    value_label,
)


class TestValueCoercion(SimpleTestCase):
    def test_missing_values(self):
        for value in (None, "", float("nan")):
            self.assertTrue(is_missing(value), value)
        for value in (0, "0", " ", False, "x"):
            self.assertFalse(is_missing(value), value)

    def test_numeric_strings(self):
        self.assertEqual(to_number("42"), 42.0)
        self.assertEqual(to_number(" -3.5 "), -3.5)
        self.assertEqual(to_number("1e3"), 1000.0)
        self.assertEqual(to_number(".5"), 0.5)
        self.assertEqual(to_number("5."), 5.0)
        self.assertEqual(to_number("0x1A"), 26)
        self.assertEqual(to_number("0b101"), 5)
        self.assertTrue(math.isinf(to_number("Infinity")))
        self.assertEqual(to_number("   "), 0)

    def test_non_numeric_strings(self):
        for value in ("abc", "NaN", "inf", "1_000", "1,000", "12px", "true"):
            self.assertIsNone(to_number(value), value)
            self.assertFalse(looks_numeric(value), value)

    def test_native_values(self):
        self.assertEqual(to_number(7), 7)
        self.assertEqual(to_number(2.5), 2.5)
        self.assertEqual(to_number(True), 1)
        self.assertEqual(to_number(False), 0)
        self.assertIsNone(to_number(None))
        self.assertFalse(looks_numeric(""))

    def test_booleans(self):
        self.assertTrue(looks_boolean("TRUE"))
        self.assertTrue(looks_boolean("false"))
        self.assertTrue(looks_boolean(False))
        self.assertFalse(looks_boolean("yes"))

    def test_coerce_value_precedence(self):
        self.assertEqual(coerce_value("5"), (NUMBER, 5.0))
        self.assertEqual(coerce_value("True"), (BOOLEAN, True))
        self.assertEqual(coerce_value(False), (NUMBER, 0))
        self.assertEqual(coerce_value("false"), (BOOLEAN, False))
        self.assertEqual(coerce_value("hello"), (STRING, "hello"))
        self.assertEqual(coerce_value(None), (STRING, ""))

    def test_finite_number(self):
        self.assertEqual(finite_number("3"), 3.0)
        self.assertIsNone(finite_number(""))
        self.assertIsNone(finite_number("Infinity"))
        self.assertIsNone(finite_number("x"))
        self.assertEqual(finite_number(True), 1)

    def test_value_key_keeps_raw_type(self):
        self.assertNotEqual(value_key(5), value_key("5"))
        self.assertNotEqual(value_key(True), value_key(1))
        self.assertEqual(value_key(5), value_key(5.0))

    def test_value_label(self):
        self.assertEqual(value_label(5), "5")
        self.assertEqual(value_label(5.0), "5")
        self.assertEqual(value_label(2.5), "2.5")
        self.assertEqual(value_label(True), "true")
        self.assertEqual(value_label("North"), "North")

    def test_parse_date(self):
        parsed = parse_date("2024-03-15")
        self.assertEqual((parsed.year, parsed.month, parsed.day), (2024, 3, 15))
        self.assertIsNone(parse_date("hello"))
        self.assertIsNone(parse_date("June"))
        self.assertIsNone(parse_date(""))
        self.assertIsNone(parse_date(True))

    def test_parse_date_needs_a_full_calendar_date(self):
        for value in ("10:30", "23:59:59", "15"):
            self.assertIsNone(parse_date(value), value)
            self.assertFalse(looks_like_date(value), value)
        self.assertEqual(parse_date("2024-03-15 10:30").hour, 10)

    def test_parse_date_normalises_timezones(self):
        parsed = parse_date("2024-03-15T23:00:00-02:00")
        self.assertIsNone(parsed.tzinfo)
        self.assertEqual(parsed.day, 16)

    def test_looks_like_date(self):
        self.assertTrue(looks_like_date("2021-07-04"))
        self.assertTrue(looks_like_date("07/04/2021"))
        self.assertFalse(looks_like_date("1850/01/01 12:00"))
        self.assertFalse(looks_like_date("not a date"))
