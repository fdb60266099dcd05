"""
Tests for api/availabilities/endpoints.py

Tests doctor-side management of availability overrides and its
authorization.
"""

import unittest
from datetime import timedelta

from ambulatory.ambulatory.records import User
from ambulatory.api.appointments import get_available_slots
from ambulatory.api.availabilities import create_availability, delete_availability, update_availability
from ambulatory.ambulatory.tests.utils import (
	DOCTOR_USER_ID,
	PATIENT_USER_ID,
	create_doctor,
	create_schedule,
	custom_intervals,
	make_context,
)
from ambulatory.exceptions import (
	AuthenticationError,
	DoesNotExistError,
	PermissionError,
	ValidationError,
)


class TestAvailabilityApi(unittest.TestCase):

	def setUp(self):
		self.ctx = make_context()
		self.doctor = create_doctor(self.ctx)
		self.schedule = create_schedule(self.ctx, self.doctor)
		self.monday = self.schedule.start_date
		self.doctor_user = User(id=DOCTOR_USER_ID, role="doctor")
		self.payload = {"date": self.monday.isoformat(), "intervals": custom_intervals()}

	def slots(self, target_date=None):
		target_date = target_date or self.monday
		return get_available_slots(self.ctx, self.schedule.id, target_date.isoformat())["data"]

	def create(self, payload=None, user=None):
		return create_availability(self.ctx, user or self.doctor_user, self.schedule.id, payload or self.payload)

	def test_doctor_creates_availability(self):
		availability = self.create()

		self.assertEqual(availability["schedule_id"], self.schedule.id)
		self.assertEqual(availability["type"], "date")
		self.assertEqual(availability["date"], self.monday.isoformat())
		self.assertEqual(availability["intervals"], custom_intervals())
		self.assertEqual(len(self.slots()), 24)

	def test_availability_on_weekend(self):
		schedule = create_schedule(self.ctx, self.doctor, end_date=self.monday + timedelta(days=6))
		saturday = self.monday + timedelta(days=5)

		create_availability(
			self.ctx,
			self.doctor_user,
			schedule.id,
			{"date": saturday.isoformat(), "intervals": [{"from": "08:00", "to": "10:00"}]},
		)

		data = get_available_slots(self.ctx, schedule.id, saturday.isoformat())["data"]
		self.assertEqual(len(data), 8)

	def test_patient_cannot_create(self):
		with self.assertRaises(PermissionError) as ctx:
			self.create(user=User(id=PATIENT_USER_ID))

		self.assertEqual(ctx.exception.message, "This action is unauthorized.")

	def test_admin_cannot_create(self):
		with self.assertRaises(PermissionError):
			self.create(user=User(id="admin-user", role="admin"))

	def test_other_doctor_cannot_create(self):
		with self.assertRaises(PermissionError):
			self.create(user=User(id="other-doctor", role="doctor"))

	def test_guest_cannot_create(self):
		with self.assertRaises(AuthenticationError):
			create_availability(self.ctx, None, self.schedule.id, self.payload)

	def test_authorization_before_validation(self):
		with self.assertRaises(PermissionError):
			self.create(payload={"date": "nope"}, user=User(id=PATIENT_USER_ID))

	def test_validation_messages(self):
		cases = [
			({"date": self.monday.isoformat()}, {"intervals": ["The intervals field is required."]}),
			(
				{"date": self.monday.isoformat(), "intervals": "09:00"},
				{"intervals": ["The intervals must be an array."]},
			),
			(
				{"date": self.monday.isoformat(), "intervals": [{"to": "11:00"}]},
				{"intervals.0.from": ["The intervals.0.from field is required."]},
			),
			({"intervals": custom_intervals()}, {"date": ["The date field is required."]}),
			({"date": "someday", "intervals": custom_intervals()}, {"date": ["The date is not a valid date."]}),
		]

		for payload, errors in cases:
			with self.subTest(payload=payload):
				with self.assertRaises(ValidationError) as ctx:
					self.create(payload=payload)

				self.assertEqual(ctx.exception.errors, errors)
				self.assertEqual(ctx.exception.message, "The given data was invalid.")

	def test_one_availability_per_date(self):
		self.create()

		with self.assertRaises(ValidationError) as ctx:
			self.create()

		self.assertIn("date", ctx.exception.errors)

	def test_unknown_schedule(self):
		with self.assertRaises(DoesNotExistError):
			create_availability(self.ctx, self.doctor_user, "missing", self.payload)

	def test_update(self):
		availability = self.create()

		updated = update_availability(
			self.ctx,
			self.doctor_user,
			availability["id"],
			{"date": self.monday.isoformat(), "intervals": [{"from": "08:00", "to": "09:00"}]},
		)

		self.assertEqual(updated["id"], availability["id"])
		self.assertEqual(updated["intervals"], [{"from": "08:00", "to": "09:00"}])
		self.assertEqual(self.slots()[0], {"from": "08:00", "to": "08:15"})
		self.assertEqual(len(self.slots()), 4)

	def test_update_to_taken_date(self):
		tuesday = self.monday + timedelta(days=1)
		self.create()
		other = self.create(payload={"date": tuesday.isoformat(), "intervals": custom_intervals()})

		with self.assertRaises(ValidationError):
			update_availability(self.ctx, self.doctor_user, other["id"], self.payload)

	def test_patient_cannot_update(self):
		availability = self.create()

		with self.assertRaises(PermissionError):
			update_availability(self.ctx, User(id=PATIENT_USER_ID), availability["id"], self.payload)

	def test_update_unknown(self):
		with self.assertRaises(DoesNotExistError):
			update_availability(self.ctx, self.doctor_user, "missing", self.payload)

	def test_delete_restores_working_hours(self):
		availability = self.create()

		result = delete_availability(self.ctx, self.doctor_user, availability["id"])

		self.assertTrue(result["success"])
		self.assertEqual(len(self.slots()), 32)

	def test_patient_cannot_delete(self):
		availability = self.create()

		with self.assertRaises(PermissionError):
			delete_availability(self.ctx, User(id=PATIENT_USER_ID), availability["id"])
