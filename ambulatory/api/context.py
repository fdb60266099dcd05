"""
API Context

Everything an endpoint needs, passed explicitly: repositories, configuration
and a clock. Endpoints never reach for globals.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Tuple

import pytz

from ambulatory.config import SchedulingConfig, get_config
from ambulatory.ambulatory.records import Schedule
from ambulatory.ambulatory.repositories import (
	AvailabilityRepository,
	BookingRepository,
	DoctorRepository,
	ScheduleRepository,
	build_repositories,
	init_schema,
	make_engine,
)
from ambulatory.ambulatory.scheduling.availability import AvailabilityOverride
from ambulatory.ambulatory.scheduling.booking import BookingValidator
from ambulatory.ambulatory.scheduling.recurrence import RecurrenceRule
from ambulatory.ambulatory.scheduling.slots import SlotGenerator
from ambulatory.exceptions import DoesNotExistError
from ambulatory.utils import get_timezone, now_datetime


@dataclass
class ApiContext:
	doctors: DoctorRepository
	schedules: ScheduleRepository
	availabilities: AvailabilityRepository
	bookings: BookingRepository
	config: SchedulingConfig = field(default_factory=get_config)
	clock: Callable[[Optional[pytz.BaseTzInfo]], datetime] = now_datetime

	@classmethod
	def from_config(cls, config: Optional[SchedulingConfig] = None) -> "ApiContext":
		"""
		Construye el contexto con repositorios SQL sobre config.database_url.

		Crea el schema si no existe.
		"""
		config = config or get_config()
		engine = make_engine(config.database_url)
		init_schema(engine)
		repositories = build_repositories(engine)
		return cls(
			doctors=repositories.doctors,
			schedules=repositories.schedules,
			availabilities=repositories.availabilities,
			bookings=repositories.bookings,
			config=config,
		)

	@property
	def slot_generator(self) -> SlotGenerator:
		return SlotGenerator(self.config.default_slot_duration)

	@property
	def booking_validator(self) -> BookingValidator:
		return BookingValidator(self.slot_generator)

	def get_schedule(self, schedule_id: str) -> Schedule:
		schedule = self.schedules.get(schedule_id)
		if schedule is None:
			raise DoesNotExistError(f"Schedule '{schedule_id}' does not exist")
		return schedule

	def load_availability(
		self,
		schedule: Schedule
	) -> Tuple[Optional[RecurrenceRule], List[AvailabilityOverride], pytz.BaseTzInfo]:
		"""
		Snapshot de disponibilidad del schedule.

		Returns:
			tuple: (regla semanal del doctor, overrides, timezone)

		Timezone: el del schedule, si no el de la regla, si no el configurado.
		"""
		doctor = self.doctors.get(schedule.doctor_id)
		rule = doctor.get_recurrence_rule() if doctor else None
		overrides = [
			availability.to_override()
			for availability in self.availabilities.list_for_schedule(schedule.id)
		]
		tz_name = schedule.timezone or (rule.timezone if rule else None) or self.config.default_timezone
		return rule, overrides, get_timezone(tz_name)
