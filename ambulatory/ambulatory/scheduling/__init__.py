"""
Scheduling Services Module

This module provides the core business logic for appointment booking:
- Time-of-day intervals (interval.py)
- Weekly working-hours rules (recurrence.py)
- Availability resolution with date overrides (availability.py)
- Slot generation (slots.py)
- Booking validation (booking.py)

Everything here is pure: no persistence, no logging, no shared state.
"""
