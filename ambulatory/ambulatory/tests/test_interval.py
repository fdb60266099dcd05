"""
Tests for scheduling/interval.py
"""

import unittest
from datetime import time, timedelta

from ambulatory.ambulatory.scheduling.interval import Interval
from ambulatory.exceptions import InvalidInterval


class TestInterval(unittest.TestCase):

	def test_parse_hh_mm(self):
		interval = Interval.parse("09:00", "11:30")

		self.assertEqual(interval.start, time(9, 0))
		self.assertEqual(interval.end, time(11, 30))
		self.assertEqual(interval.duration, timedelta(hours=2, minutes=30))

	def test_parse_timedelta(self):
		"""TIME columns come back as timedelta since midnight."""
		interval = Interval.parse(timedelta(hours=9), timedelta(hours=10))

		self.assertEqual(interval, Interval(time(9), time(10)))

	def test_start_must_be_before_end(self):
		with self.assertRaises(InvalidInterval):
			Interval(time(10), time(10))

		with self.assertRaises(InvalidInterval):
			Interval.parse("17:00", "09:00")

	def test_unparseable_bounds(self):
		with self.assertRaises(InvalidInterval):
			Interval.parse("nine", "11:00")

	def test_bounds_with_utc_offset(self):
		for start, end in [("09:00Z", "17:00"), ("09:00", "17:00+02:00"), ("09:00Z", "17:00Z")]:
			with self.subTest(start=start, end=end):
				with self.assertRaises(InvalidInterval):
					Interval.parse(start, end)

	def test_invalid_interval_is_value_error(self):
		with self.assertRaises(ValueError):
			Interval.parse("11:00", "09:00")

	def test_contains_is_half_open(self):
		interval = Interval.parse("09:00", "11:00")

		self.assertTrue(interval.contains(time(9, 0)))
		self.assertTrue(interval.contains(time(10, 59)))
		self.assertFalse(interval.contains(time(11, 0)))
		self.assertFalse(interval.contains(time(8, 59)))

	def test_touching_intervals_do_not_overlap(self):
		morning = Interval.parse("09:00", "11:00")

		self.assertFalse(morning.overlaps(Interval.parse("11:00", "12:00")))
		self.assertTrue(morning.overlaps(Interval.parse("10:30", "12:00")))
		self.assertTrue(morning.overlaps(Interval.parse("08:00", "18:00")))

	def test_split_drops_partial_tail(self):
		starts = list(Interval.parse("09:00", "10:00").split(25))

		self.assertEqual(starts, [time(9, 0), time(9, 25)])

	def test_split_whole_interval(self):
		starts = list(Interval.parse("09:00", "11:00").split(15))

		self.assertEqual(len(starts), 8)
		self.assertEqual(starts[0], time(9, 0))
		self.assertEqual(starts[-1], time(10, 45))

	def test_ordering_by_start_then_end(self):
		intervals = [
			Interval.parse("15:00", "19:00"),
			Interval.parse("09:00", "11:00"),
			Interval.parse("09:00", "10:00"),
		]

		self.assertEqual([str(i) for i in sorted(intervals)], ["09:00-10:00", "09:00-11:00", "15:00-19:00"])

	def test_to_dict(self):
		self.assertEqual(Interval.parse("09:00", "11:00").to_dict(), {"from": "09:00", "to": "11:00"})
