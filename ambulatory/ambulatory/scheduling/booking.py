"""
Booking Validation Service

Decides whether one requested date-time can be booked, combining:
- The schedule's active date range
- Effective availability (AvailabilityResolver)
- Slot alignment (SlotGenerator)
- Existing active bookings

Rejections are returned as data (BookingDecision), never raised.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, Optional

import pytz

from ambulatory.utils import localize
from .availability import AvailabilityOverride, AvailabilityResolver
from .recurrence import RecurrenceRule
from .slots import ScheduleBounds, SlotGenerator


class RejectReason(str, Enum):
	OUT_OF_SCHEDULE_RANGE = "OutOfScheduleRange"
	NO_AVAILABILITY = "NoAvailability"
	TIME_NOT_AVAILABLE = "TimeNotAvailable"
	ALREADY_BOOKED = "AlreadyBooked"


NOT_AVAILABLE_MESSAGE = "The preferred date time is not available."
ALREADY_BOOKED_MESSAGE = "The preferred date time has already been booked."


# Rango expresado como fecha ISO (YYYY-MM-DD), sin hora
def before_start_message(start_date: date) -> str:
	return f"The preferred date time must be a date after or equal to {start_date.isoformat()}."


def after_end_message(end_date: date) -> str:
	return f"The preferred date time must be a date before or equal to {end_date.isoformat()}."


@dataclass(frozen=True)
class BookingDecision:
	accepted: bool
	reason: Optional[RejectReason] = None
	message: Optional[str] = None

	@classmethod
	def accept(cls) -> "BookingDecision":
		return cls(True)

	@classmethod
	def reject(cls, reason: RejectReason, message: str) -> "BookingDecision":
		return cls(False, reason, message)

	def __bool__(self) -> bool:
		return self.accepted


class BookingValidator:
	"""
	Valida una solicitud de reserva contra el schedule.

	Orden de validación (el primer fallo gana):
		1. Rango del schedule   -> OUT_OF_SCHEDULE_RANGE
		2. Disponibilidad del día -> NO_AVAILABILITY
		3. Alineación a un slot -> TIME_NOT_AVAILABLE
		4. Reserva existente    -> ALREADY_BOOKED
	"""

	def __init__(
		self,
		slot_generator: SlotGenerator,
		resolver: Optional[AvailabilityResolver] = None
	):
		self.slot_generator = slot_generator
		self.resolver = resolver or AvailabilityResolver()

	def can_book(
		self,
		requested: datetime,
		schedule: Any,
		rule: Optional[RecurrenceRule],
		overrides: Iterable[AvailabilityOverride],
		active_bookings: Iterable[datetime],
		tz: Optional[pytz.BaseTzInfo] = None
	) -> BookingDecision:
		"""
		Decide si `requested` es reservable.

		Args:
			requested: fecha y hora solicitada
			schedule: objeto con start_date, end_date y slot_duration
			rule: regla semanal del doctor
			overrides: overrides de disponibilidad del schedule
			active_bookings: inicios de reservas activas del schedule
			tz: timezone del schedule (None = hora local naive)

		Returns:
			BookingDecision
		"""
		if tz is not None:
			requested = localize(requested, tz)
		else:
			requested = requested.replace(tzinfo=None)

		target_date = requested.date()

		# 1. Rango del schedule
		if target_date < schedule.start_date:
			return BookingDecision.reject(
				RejectReason.OUT_OF_SCHEDULE_RANGE, before_start_message(schedule.start_date)
			)
		if target_date > schedule.end_date:
			return BookingDecision.reject(
				RejectReason.OUT_OF_SCHEDULE_RANGE, after_end_message(schedule.end_date)
			)

		# 2. Disponibilidad del día
		intervals = self.resolver.resolve(target_date, rule, overrides)
		if not intervals:
			return BookingDecision.reject(RejectReason.NO_AVAILABILITY, NOT_AVAILABLE_MESSAGE)

		# 3. Alineación (sin excluir reservas en este paso)
		slots = self.slot_generator.generate(
			target_date,
			intervals,
			schedule.slot_duration,
			ScheduleBounds(schedule.start_date, schedule.end_date),
			booked_instants=(),
			tz=tz,
		)
		if not any(slot.start == requested for slot in slots):
			return BookingDecision.reject(RejectReason.TIME_NOT_AVAILABLE, NOT_AVAILABLE_MESSAGE)

		# 4. Conflicto con reservas existentes
		for instant in active_bookings:
			booked = localize(instant, tz) if tz is not None else instant.replace(tzinfo=None)
			if booked == requested:
				return BookingDecision.reject(RejectReason.ALREADY_BOOKED, ALREADY_BOOKED_MESSAGE)

		return BookingDecision.accept()
