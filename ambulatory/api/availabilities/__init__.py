"""
Availabilities API Domain

Doctor-side management of date-specific availability overrides.
"""

from .endpoints import (
	create_availability,
	delete_availability,
	update_availability,
)

__all__ = [
	"create_availability",
	"delete_availability",
	"update_availability",
]
