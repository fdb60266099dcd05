"""
Appointments API Domain

Handles slot listing, booking validation, booking and cancellation.
"""

from .endpoints import (
	# Slots
	get_available_slots,
	get_available_slots_for_range,
	# Validation
	validate_booking,
	# Bookings
	book_appointment,
	cancel_booking,
)

__all__ = [
	# Slots
	"get_available_slots",
	"get_available_slots_for_range",
	# Validation
	"validate_booking",
	# Bookings
	"book_appointment",
	"cancel_booking",
]
