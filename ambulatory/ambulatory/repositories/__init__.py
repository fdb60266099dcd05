"""
Repositories

Abstract persistence interfaces (base.py) and their SQLAlchemy
implementation (sql.py).
"""

from .base import AvailabilityRepository, BookingRepository, DoctorRepository, ScheduleRepository
from .sql import SqlRepositories, build_repositories, init_schema, make_engine

__all__ = [
	"AvailabilityRepository",
	"BookingRepository",
	"DoctorRepository",
	"ScheduleRepository",
	"SqlRepositories",
	"build_repositories",
	"init_schema",
	"make_engine",
]
