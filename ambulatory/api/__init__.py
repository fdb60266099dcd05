"""
Ambulatory API

Calling layer over the scheduling engine. Endpoints are plain functions that
take an ApiContext (repositories, configuration, clock) and return
JSON-ready dicts.

Structure:
    api/
    ├── __init__.py              # This file
    ├── context.py               # ApiContext
    ├── security.py              # Authorization policies
    ├── appointments/            # Slots, validation, booking, cancellation
    ├── availabilities/          # Doctor-side availability overrides
    └── shared/                  # Input validators, error formatting

Usage:
    ctx = ApiContext.from_config()
    appointments.get_available_slots(ctx, schedule_id, "2026-10-26")
"""

from . import appointments
from . import availabilities
from . import shared
from .context import ApiContext

__all__ = [
	"ApiContext",
	"appointments",
	"availabilities",
	"shared",
]
