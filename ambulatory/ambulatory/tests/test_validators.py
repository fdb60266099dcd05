"""
Tests for api/shared/validators.py
"""

import unittest
from datetime import date, datetime, timezone

from ambulatory.api.shared import validate_date_string, validate_datetime_string, validate_docname
from ambulatory.exceptions import ValidationError


class TestValidators(unittest.TestCase):

	def test_date_string(self):
		self.assertEqual(validate_date_string("2026-10-26"), date(2026, 10, 26))
		self.assertEqual(validate_date_string(date(2026, 10, 26)), date(2026, 10, 26))

	def test_date_string_errors(self):
		cases = {
			"": "The date field is required.",
			"26/10/2026": "The date is not a valid date.",
			"2026-02-30": "The date is not a valid date.",
		}

		for value, message in cases.items():
			with self.subTest(value=value):
				with self.assertRaises(ValidationError) as ctx:
					validate_date_string(value)

				self.assertEqual(ctx.exception.errors, {"date": [message]})

	def test_datetime_string(self):
		expected = datetime(2026, 10, 26, 9, 15)

		self.assertEqual(validate_datetime_string("2026-10-26 09:15:00"), expected)
		self.assertEqual(validate_datetime_string("2026-10-26T09:15"), expected)

	def test_datetime_string_with_offset(self):
		expected = datetime(2026, 10, 26, 9, 15, tzinfo=timezone.utc)

		self.assertEqual(validate_datetime_string("2026-10-26T09:15:00Z"), expected)
		self.assertEqual(validate_datetime_string("2026-10-26 11:15+02:00"), expected)

	def test_datetime_string_errors(self):
		with self.assertRaises(ValidationError) as ctx:
			validate_datetime_string("2026-10-26", "preferred_date_time")

		self.assertEqual(ctx.exception.errors, {"preferred_date_time": ["The preferred date time is not a valid date."]})

	def test_docname(self):
		self.assertEqual(validate_docname("  a1b2c3  "), "a1b2c3")

		for value in (None, "x" * 141, "abc;", "<script>", "1 UNION SELECT 2"):
			with self.subTest(value=value):
				with self.assertRaises(ValidationError):
					validate_docname(value)
