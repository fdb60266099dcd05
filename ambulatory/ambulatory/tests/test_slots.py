"""
Tests for scheduling/slots.py

Tests discrete slot generation.
"""

import unittest
from datetime import datetime, time, timedelta

import pytz

from ambulatory.ambulatory.scheduling.interval import Interval
from ambulatory.ambulatory.scheduling.slots import ScheduleBounds, Slot, SlotGenerator
from ambulatory.ambulatory.tests.utils import at, monday_next_week
from ambulatory.exceptions import InvalidDuration


class TestSlotGenerator(unittest.TestCase):

	def setUp(self):
		self.generator = SlotGenerator()
		self.monday = monday_next_week()
		self.bounds = ScheduleBounds(self.monday, self.monday + timedelta(days=4))
		self.working_day = [Interval.parse("09:00", "17:00")]

	def test_full_working_day(self):
		slots = self.generator.generate(self.monday, self.working_day, 15, self.bounds)

		self.assertEqual(len(slots), 32)
		self.assertEqual(slots[0].to_dict(), {"from": "09:00", "to": "09:15"})
		self.assertEqual(slots[-1].to_dict(), {"from": "16:45", "to": "17:00"})

	def test_default_duration(self):
		slots = SlotGenerator(30).generate(self.monday, self.working_day, None, self.bounds)

		self.assertEqual(len(slots), 16)

	def test_booked_instant_is_excluded(self):
		slots = self.generator.generate(
			self.monday,
			self.working_day,
			15,
			self.bounds,
			booked_instants=[at(self.monday, 10)],
		)

		self.assertEqual(len(slots), 31)
		self.assertNotIn(at(self.monday, 10), [slot.start for slot in slots])

	def test_booking_on_other_date_is_ignored(self):
		slots = self.generator.generate(
			self.monday,
			self.working_day,
			15,
			self.bounds,
			booked_instants=[at(self.monday + timedelta(days=1), 10)],
		)

		self.assertEqual(len(slots), 32)

	def test_outside_schedule_range(self):
		before = self.monday - timedelta(days=1)
		after = self.bounds.end_date + timedelta(days=1)

		self.assertEqual(self.generator.generate(before, self.working_day, 15, self.bounds), [])
		self.assertEqual(self.generator.generate(after, self.working_day, 15, self.bounds), [])

	def test_partial_tail_slot_dropped(self):
		slots = self.generator.generate(self.monday, [Interval.parse("09:00", "10:00")], 25, self.bounds)

		self.assertEqual([slot.to_dict()["from"] for slot in slots], ["09:00", "09:25"])

	def test_interval_shorter_than_duration(self):
		slots = self.generator.generate(self.monday, [Interval.parse("09:00", "09:10")], 15, self.bounds)

		self.assertEqual(slots, [])

	def test_multiple_intervals_in_order(self):
		intervals = [Interval.parse("09:00", "11:00"), Interval.parse("15:00", "19:00")]

		slots = self.generator.generate(self.monday, intervals, 15, self.bounds)

		self.assertEqual(len(slots), 24)
		self.assertEqual(slots, sorted(slots))

	def test_overlapping_intervals_do_not_repeat_starts(self):
		intervals = [Interval.parse("09:00", "10:00"), Interval.parse("09:30", "10:30")]

		slots = self.generator.generate(self.monday, intervals, 30, self.bounds)

		self.assertEqual([slot.to_dict()["from"] for slot in slots], ["09:00", "09:30", "10:00"])

	def test_invalid_duration(self):
		for duration in (0, -15, 1.5, True):
			with self.subTest(duration=duration):
				with self.assertRaises(InvalidDuration):
					self.generator.generate(self.monday, self.working_day, duration, self.bounds)

		with self.assertRaises(InvalidDuration):
			SlotGenerator(0)

	def test_timezone_aware_slots(self):
		tz = pytz.timezone("America/Bogota")

		slots = self.generator.generate(
			self.monday,
			self.working_day,
			15,
			self.bounds,
			booked_instants=[at(self.monday, 9)],
			tz=tz,
		)

		self.assertEqual(len(slots), 31)
		self.assertEqual(slots[0].start, tz.localize(at(self.monday, 9, 15)))
		self.assertEqual(slots[0].start.tzinfo.zone, "America/Bogota")

	def test_aware_booking_matches_in_schedule_timezone(self):
		tz = pytz.timezone("America/Bogota")
		# 14:00 UTC == 09:00 Bogota (UTC-5)
		booked = pytz.utc.localize(at(self.monday, 14))

		slots = self.generator.generate(self.monday, self.working_day, 15, self.bounds, [booked], tz)

		self.assertEqual(slots[0].to_dict(), {"from": "09:15", "to": "09:30"})

	def test_slot_to_dict(self):
		slot = Slot(datetime(2026, 10, 26, 9, 0), datetime(2026, 10, 26, 9, 15))

		self.assertEqual(slot.to_dict(), {"from": "09:00", "to": "09:15"})
		self.assertEqual(slot.start.time(), time(9))
