"""
Exceptions

Two families:
- Input-contract faults raised by the scheduling engine (InvalidInterval,
  MalformedRule, InvalidDuration). Fatal to the single operation.
- Errors raised by the calling layer (ValidationError, DoesNotExistError,
  AuthenticationError, PermissionError, BookingConflict), translated to responses by whoever
  serves the API.

Booking rejections (out of range, no availability, ...) are NOT exceptions,
see scheduling.booking.RejectReason.
"""

from typing import Dict, List, Optional


class AmbulatoryError(Exception):
	"""Base class for all errors raised by this package."""


# ===== ENGINE =====

class InvalidInterval(AmbulatoryError, ValueError):
	"""Malformed time bounds (start >= end, unparseable time)."""


class MalformedRule(AmbulatoryError, ValueError):
	"""Unparseable recurrence rule or rule without active weekdays."""


class InvalidDuration(AmbulatoryError, ValueError):
	"""Non-positive slot duration."""


# ===== CALLING LAYER =====

class ValidationError(AmbulatoryError):
	"""
	Invalid input, keyed by field.

	errors: {"preferred_date_time": ["The preferred date time is not available."]}
	"""

	message = "The given data was invalid."

	def __init__(self, errors: Optional[Dict[str, List[str]]] = None, message: Optional[str] = None):
		self.errors = errors or {}
		if message:
			self.message = message
		super().__init__(self.message)

	@classmethod
	def for_field(cls, field: str, message: str) -> "ValidationError":
		return cls({field: [message]})

	def to_dict(self) -> Dict[str, object]:
		return {"errors": self.errors, "message": self.message}


class DoesNotExistError(AmbulatoryError):
	"""Requested record not found."""


class AuthenticationError(AmbulatoryError):
	"""No authenticated user."""

	def __init__(self, message: str = "Unauthenticated."):
		self.message = message
		super().__init__(message)


class PermissionError(AmbulatoryError):
	"""Authenticated user is not allowed to perform the action."""

	def __init__(self, message: str = "This action is unauthorized."):
		self.message = message
		super().__init__(message)


class BookingConflict(AmbulatoryError):
	"""
	The datastore rejected a booking because an active booking already holds
	the same (schedule_id, preferred_date_time).
	"""
