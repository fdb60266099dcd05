"""
Availability API Endpoints

Doctor-facing management of date-specific availability overrides. Only the
doctor who owns the schedule may create, update or delete them.

Payload:
    {
        "date": "2026-10-26",
        "intervals": [{"from": "09:00", "to": "11:00"}, {"from": "15:00", "to": "19:00"}]
    }
"""

import datetime
import logging
from typing import Any, Dict, Optional

from ambulatory.ambulatory.records import Availability, CreateAvailability, Schedule, User
from ambulatory.api.context import ApiContext
from ambulatory.api.security import authorize_schedule_owner
from ambulatory.api.shared import parse_payload, validate_docname
from ambulatory.exceptions import DoesNotExistError, ValidationError

logger = logging.getLogger(__name__)

DUPLICATE_DATE_MESSAGE = "An availability already exists for this date."


def create_availability(
	ctx: ApiContext,
	user: Optional[User],
	schedule_id: str,
	payload: Dict[str, Any]
) -> Dict[str, Any]:
	"""
	Crea un override de disponibilidad para una fecha del schedule.

	Returns:
		dict: Availability creada

	Raises:
		AuthenticationError: si no hay usuario
		PermissionError: si el usuario no es el doctor dueño del schedule
		ValidationError: si el payload no es válido o la fecha ya tiene override
		DoesNotExistError: si el schedule no existe
	"""
	schedule_id = validate_docname(schedule_id, "schedule_id")
	schedule = ctx.get_schedule(schedule_id)
	user = authorize_schedule_owner(user, schedule, ctx.doctors.get(schedule.doctor_id))

	data = parse_payload(CreateAvailability, payload)
	_check_unique_date(ctx, schedule, data.date)

	availability = ctx.availabilities.add(
		Availability(
			schedule_id=schedule.id,
			date=data.date,
			intervals=data.intervals,
		)
	)

	logger.info(f"Availability {availability.id} created: schedule={schedule.id} date={data.date} user={user.id}")

	return availability.to_dict()


def update_availability(
	ctx: ApiContext,
	user: Optional[User],
	availability_id: str,
	payload: Dict[str, Any]
) -> Dict[str, Any]:
	"""
	Reemplaza fecha e intervalos de un override existente.

	Raises:
		AuthenticationError: si no hay usuario
		PermissionError: si el usuario no es el doctor dueño del schedule
		ValidationError: si el payload no es válido o la fecha ya tiene otro override
		DoesNotExistError: si el override no existe
	"""
	availability, schedule = _get_availability(ctx, availability_id)
	user = authorize_schedule_owner(user, schedule, ctx.doctors.get(schedule.doctor_id))

	data = parse_payload(CreateAvailability, payload)
	_check_unique_date(ctx, schedule, data.date, exclude=availability.id)

	updated = ctx.availabilities.update(
		availability.model_copy(update={"date": data.date, "intervals": data.intervals})
	)

	logger.info(f"Availability {updated.id} updated: schedule={schedule.id} date={data.date} user={user.id}")

	return updated.to_dict()


def delete_availability(ctx: ApiContext, user: Optional[User], availability_id: str) -> Dict[str, Any]:
	"""
	Elimina un override; la fecha vuelve a regirse por la regla semanal del doctor.

	Returns:
		dict: {"success": True, "action": "deleted", "message": str}
	"""
	availability, schedule = _get_availability(ctx, availability_id)
	user = authorize_schedule_owner(user, schedule, ctx.doctors.get(schedule.doctor_id))

	ctx.availabilities.delete(availability.id)
	logger.info(f"Availability {availability.id} deleted: schedule={schedule.id} user={user.id}")

	return {
		"success": True,
		"action": "deleted",
		"message": "The availability has been deleted.",
	}


def _get_availability(ctx: ApiContext, availability_id: str):
	availability_id = validate_docname(availability_id, "availability_id")

	availability = ctx.availabilities.get(availability_id)
	if availability is None:
		raise DoesNotExistError(f"Availability '{availability_id}' does not exist")

	return availability, ctx.get_schedule(availability.schedule_id)


def _check_unique_date(
	ctx: ApiContext,
	schedule: Schedule,
	target_date: datetime.date,
	exclude: Optional[str] = None
) -> None:
	"""Un solo override por fecha y schedule."""
	for existing in ctx.availabilities.list_for_schedule(schedule.id):
		if existing.date == target_date and existing.id != exclude:
			raise ValidationError.for_field("date", DUPLICATE_DATE_MESSAGE)
