"""
Authorization Policies

Capability checks used by the endpoints before they touch a schedule's
data:
- Authentication: an endpoint that acts on behalf of someone needs a user
- Schedule ownership: only the doctor who owns a schedule manages its
  availabilities
- Booking ownership: a booking is cancelled by the patient who made it or
  by the schedule's doctor
"""

import logging
from typing import Optional

from ambulatory.ambulatory.records import Booking, Doctor, Schedule, User
from ambulatory.exceptions import AuthenticationError, PermissionError

logger = logging.getLogger(__name__)


def require_user(user: Optional[User]) -> User:
	"""
	Raises:
		AuthenticationError: si no hay usuario autenticado
	"""
	if user is None:
		raise AuthenticationError()
	return user


def owns_schedule(user: User, doctor: Optional[Doctor]) -> bool:
	"""True si el usuario es el doctor dueño del schedule."""
	return user.is_doctor and doctor is not None and doctor.user_id == user.id


def authorize_schedule_owner(user: Optional[User], schedule: Schedule, doctor: Optional[Doctor]) -> User:
	"""
	Verifica que el usuario puede gestionar la disponibilidad del schedule.

	Args:
		user: usuario autenticado
		schedule: schedule sobre el que se actúa
		doctor: doctor dueño del schedule

	Returns:
		User: el usuario autorizado

	Raises:
		AuthenticationError: si no hay usuario
		PermissionError: si no es un doctor o no es el dueño del schedule
	"""
	user = require_user(user)

	if not owns_schedule(user, doctor):
		logger.warning(
			f"Unauthorized schedule access: user={user.id} role={user.role} schedule={schedule.id}"
		)
		raise PermissionError()

	return user


def authorize_booking_cancellation(user: Optional[User], booking: Booking, doctor: Optional[Doctor]) -> User:
	"""
	Verifica que el usuario puede cancelar la reserva.

	Raises:
		AuthenticationError: si no hay usuario
		PermissionError: si no es quien reservó ni el doctor del schedule
	"""
	user = require_user(user)

	if booking.user_id == user.id or owns_schedule(user, doctor):
		return user

	logger.warning(f"Unauthorized booking cancellation: user={user.id} booking={booking.id}")
	raise PermissionError()
