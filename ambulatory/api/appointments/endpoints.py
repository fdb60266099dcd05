"""
Appointment API Endpoints

Patient-facing operations on a schedule:
- List free slots for a date or a date range
- Pre-validate a preferred date-time
- Book and cancel appointments

Every endpoint takes an ApiContext first and returns a JSON-ready dict.
Input problems are raised as ValidationError keyed by field.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from ambulatory.ambulatory.records import Booking, CreateBooking, User
from ambulatory.ambulatory.scheduling.availability import AvailabilityResolver
from ambulatory.ambulatory.scheduling.booking import ALREADY_BOOKED_MESSAGE
from ambulatory.api.context import ApiContext
from ambulatory.api.security import authorize_booking_cancellation, require_user
from ambulatory.api.shared import (
	parse_payload,
	validate_date_string,
	validate_datetime_string,
	validate_docname,
)
from ambulatory.exceptions import BookingConflict, DoesNotExistError, ValidationError
from ambulatory.utils import localize

logger = logging.getLogger(__name__)


def get_available_slots(ctx: ApiContext, schedule_id: str, date: Optional[str] = None) -> Dict[str, Any]:
	"""
	Obtiene los slots libres de un schedule para una fecha.

	Args:
		ctx: contexto de la API
		schedule_id: ID del Schedule
		date: fecha (YYYY-MM-DD); None = hoy en el timezone del schedule

	Returns:
		dict: {"data": [{"from": "09:00", "to": "09:15"}, ...]}

	Raises:
		ValidationError: si la fecha no es válida
		DoesNotExistError: si el schedule no existe
	"""
	schedule_id = validate_docname(schedule_id, "schedule_id")
	target_date = validate_date_string(date, "date") if date else None

	schedule = ctx.get_schedule(schedule_id)
	rule, overrides, tz = ctx.load_availability(schedule)

	if target_date is None:
		target_date = ctx.clock(tz).date()

	intervals = AvailabilityResolver().resolve(target_date, rule, overrides)
	slots = ctx.slot_generator.generate(
		target_date,
		intervals,
		schedule.slot_duration,
		schedule.bounds,
		booked_instants=ctx.bookings.active_instants(schedule.id),
		tz=tz,
	)

	return {"data": [slot.to_dict() for slot in slots]}


def get_available_slots_for_range(
	ctx: ApiContext,
	schedule_id: str,
	from_date: str,
	to_date: str
) -> Dict[str, Any]:
	"""
	Obtiene los slots libres para un rango de fechas (inclusive).

	Returns:
		dict: {"data": {"2026-10-26": [{"from": "09:00", "to": "09:15"}, ...], ...}}
		Solo se incluyen fechas con al menos un slot libre.

	Raises:
		ValidationError: si las fechas no son válidas o from_date > to_date
		DoesNotExistError: si el schedule no existe
	"""
	schedule_id = validate_docname(schedule_id, "schedule_id")
	start_date = validate_date_string(from_date, "from_date")
	end_date = validate_date_string(to_date, "to_date")

	if start_date > end_date:
		raise ValidationError.for_field(
			"to_date", "The to date must be a date after or equal to from date."
		)

	schedule = ctx.get_schedule(schedule_id)

	# Fuera del rango del schedule no hay slots
	start_date = max(start_date, schedule.start_date)
	end_date = min(end_date, schedule.end_date)
	if start_date > end_date:
		return {"data": {}}

	rule, overrides, tz = ctx.load_availability(schedule)
	booked = ctx.bookings.active_instants(schedule.id)
	generator = ctx.slot_generator

	availability = AvailabilityResolver().resolve_range(start_date, end_date, rule, overrides)

	data: Dict[str, List[Dict[str, str]]] = {}
	for target_date, intervals in availability.items():
		slots = generator.generate(
			target_date,
			intervals,
			schedule.slot_duration,
			schedule.bounds,
			booked_instants=booked,
			tz=tz,
		)
		if slots:
			data[target_date.isoformat()] = [slot.to_dict() for slot in slots]

	return {"data": data}


def validate_booking(
	ctx: ApiContext,
	schedule_id: str,
	preferred_date_time: Union[str, datetime]
) -> Dict[str, Any]:
	"""
	Valida si una fecha-hora es reservable ANTES de reservar.
	Útil para que el frontend muestre el error antes de enviar.

	Returns:
		dict: {
			"valid": bool,
			"reason": "OutOfScheduleRange" | "NoAvailability" | "TimeNotAvailable" | "AlreadyBooked" | None,
			"errors": list[str]
		}

	Raises:
		DoesNotExistError: si el schedule no existe
	"""
	schedule_id = validate_docname(schedule_id, "schedule_id")

	try:
		requested = validate_datetime_string(preferred_date_time, "preferred_date_time")
	except ValidationError as e:
		return {
			"valid": False,
			"reason": None,
			"errors": e.errors["preferred_date_time"],
		}

	schedule = ctx.get_schedule(schedule_id)
	rule, overrides, tz = ctx.load_availability(schedule)

	decision = ctx.booking_validator.can_book(
		requested,
		schedule,
		rule,
		overrides,
		ctx.bookings.active_instants(schedule.id),
		tz=tz,
	)

	return {
		"valid": decision.accepted,
		"reason": decision.reason.value if decision.reason else None,
		"errors": [decision.message] if decision.message else [],
	}


def book_appointment(
	ctx: ApiContext,
	user: Optional[User],
	schedule_id: str,
	preferred_date_time: Union[str, datetime, None]
) -> Dict[str, Any]:
	"""
	Reserva un slot del schedule.

	Este endpoint:
	1. Valida que hay un usuario autenticado
	2. Valida el payload (preferred_date_time requerido y fecha válida)
	3. Decide con BookingValidator (rango, disponibilidad, alineación, reservas)
	4. Persiste la reserva; el índice único de la base de datos resuelve
	   la carrera entre dos reservas simultáneas

	Args:
		ctx: contexto de la API
		user: usuario autenticado
		schedule_id: ID del Schedule
		preferred_date_time: inicio del slot (YYYY-MM-DD HH:MM:SS); naive = hora
			local del schedule

	Returns:
		dict: Booking creado

	Raises:
		AuthenticationError: si no hay usuario
		ValidationError: {"preferred_date_time": [mensaje]} si no es reservable
		DoesNotExistError: si el schedule no existe
	"""
	user = require_user(user)
	schedule_id = validate_docname(schedule_id, "schedule_id")
	payload = parse_payload(CreateBooking, {"preferred_date_time": preferred_date_time})

	schedule = ctx.get_schedule(schedule_id)
	rule, overrides, tz = ctx.load_availability(schedule)

	decision = ctx.booking_validator.can_book(
		payload.preferred_date_time,
		schedule,
		rule,
		overrides,
		ctx.bookings.active_instants(schedule.id),
		tz=tz,
	)

	if not decision:
		logger.info(
			f"Booking rejected ({decision.reason.value}): schedule={schedule.id} "
			f"at {payload.preferred_date_time} user={user.id}"
		)
		raise ValidationError.for_field("preferred_date_time", decision.message)

	# Se guarda en hora local (naive) del timezone del schedule
	local_start = localize(payload.preferred_date_time, tz).replace(tzinfo=None)

	try:
		booking = ctx.bookings.add(
			Booking(
				schedule_id=schedule.id,
				user_id=user.id,
				preferred_date_time=local_start,
			)
		)
	except BookingConflict:
		# Otra reserva ganó la carrera entre la validación y el insert
		raise ValidationError.for_field("preferred_date_time", ALREADY_BOOKED_MESSAGE)

	logger.info(f"Booking {booking.id} created: schedule={schedule.id} at {local_start} user={user.id}")

	return booking.to_dict()


def cancel_booking(ctx: ApiContext, user: Optional[User], booking_id: str) -> Dict[str, Any]:
	"""
	Cancela una reserva (is_active = False). El slot vuelve a quedar libre.

	Solo quien reservó o el doctor dueño del schedule pueden cancelar.

	Returns:
		dict: {
			"success": bool,
			"action": "cancelled" | "none",
			"message": str
		}

	Raises:
		AuthenticationError: si no hay usuario
		PermissionError: si el usuario no puede cancelar la reserva
		DoesNotExistError: si la reserva no existe
	"""
	user = require_user(user)
	booking_id = validate_docname(booking_id, "booking_id")

	booking = ctx.bookings.get(booking_id)
	if booking is None:
		raise DoesNotExistError(f"Booking '{booking_id}' does not exist")

	schedule = ctx.get_schedule(booking.schedule_id)
	authorize_booking_cancellation(user, booking, ctx.doctors.get(schedule.doctor_id))

	if not booking.is_active:
		return {
			"success": False,
			"action": "none",
			"message": "The booking is already cancelled.",
		}

	ctx.bookings.deactivate(booking.id)
	logger.info(f"Booking {booking.id} cancelled by user={user.id}")

	return {
		"success": True,
		"action": "cancelled",
		"message": "The booking has been cancelled.",
	}
