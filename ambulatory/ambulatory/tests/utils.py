"""
Test factories.

Fixtures are anchored on "Monday next week" so every schedule lies in the
future and today's slot listing is always empty.
"""

from datetime import date, datetime, time, timedelta
from typing import List, Optional

from ambulatory.config import SchedulingConfig
from ambulatory.ambulatory.records import Availability, Doctor, Schedule
from ambulatory.ambulatory.scheduling.availability import AvailabilityOverride
from ambulatory.ambulatory.scheduling.interval import Interval
from ambulatory.api.context import ApiContext

DOCTOR_USER_ID = "doctor-user"
PATIENT_USER_ID = "patient-user"


def monday_next_week(today: Optional[date] = None) -> date:
	today = today or date.today()
	return today + timedelta(days=7 - today.weekday())


def at(target_date: date, hour: int, minute: int = 0) -> datetime:
	return datetime.combine(target_date, time(hour, minute))


def default_rule(monday: Optional[date] = None, byday: str = "MO,TU,WE,TH,FR") -> str:
	"""Mon-Fri, 09:00-17:00, valid for the week starting on `monday`."""
	monday = monday or monday_next_week()
	friday = monday + timedelta(days=4)
	return (
		f"DTSTART={monday:%Y%m%d}T090000;UNTIL={friday:%Y%m%d}T170000;"
		f"FREQ=WEEKLY;BYDAY={byday}"
	)


def custom_intervals() -> List[dict]:
	return [{"from": "09:00", "to": "11:00"}, {"from": "15:00", "to": "19:00"}]


def custom_override(target_date: date) -> AvailabilityOverride:
	return AvailabilityOverride(
		target_date,
		(Interval.parse("09:00", "11:00"), Interval.parse("15:00", "19:00")),
	)


def make_context(**config) -> ApiContext:
	"""ApiContext over a fresh in-memory SQLite database."""
	config.setdefault("database_url", "sqlite://")
	return ApiContext.from_config(SchedulingConfig(**config))


def create_doctor(ctx: ApiContext, user_id: str = DOCTOR_USER_ID, rule: Optional[str] = None) -> Doctor:
	return ctx.doctors.add(
		Doctor(
			full_name="Dr. Ana Restrepo",
			user_id=user_id,
			working_hours_rule=rule if rule is not None else default_rule(),
		)
	)


def create_schedule(
	ctx: ApiContext,
	doctor: Doctor,
	start_date: Optional[date] = None,
	end_date: Optional[date] = None,
	slot_duration: Optional[int] = 15,
	timezone: Optional[str] = None
) -> Schedule:
	start_date = start_date or monday_next_week()
	end_date = end_date or start_date + timedelta(days=4)
	return ctx.schedules.add(
		Schedule(
			doctor_id=doctor.id,
			start_date=start_date,
			end_date=end_date,
			slot_duration=slot_duration,
			timezone=timezone,
		)
	)


def create_custom_availability(ctx: ApiContext, schedule: Schedule, target_date: Optional[date] = None) -> Availability:
	return ctx.availabilities.add(
		Availability(
			schedule_id=schedule.id,
			date=target_date or schedule.start_date,
			intervals=custom_intervals(),
		)
	)
