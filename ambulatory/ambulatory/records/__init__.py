"""
Records

Typed records exchanged with the persistence layer and the API:
Doctor, Schedule, Availability, Booking and the request payloads used to
create them. Validation errors carry one entry per offending field.
"""

from .availability import Availability, CreateAvailability, IntervalPayload
from .booking import Booking, CreateBooking
from .doctor import Doctor
from .schedule import Schedule
from .user import User

__all__ = [
	"Availability",
	"CreateAvailability",
	"IntervalPayload",
	"Booking",
	"CreateBooking",
	"Doctor",
	"Schedule",
	"User",
]
