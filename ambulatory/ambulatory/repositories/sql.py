"""
SQL repositories (SQLAlchemy)

Tables for doctors, schedules, availabilities and bookings. The bookings
table carries a partial unique index on (schedule_id, preferred_date_time)
restricted to active rows: the datastore is the authoritative guard against
double bookings, the engine only pre-checks.
"""

import logging
import uuid
from datetime import datetime
from typing import List, NamedTuple, Optional, Set

from sqlalchemy import (
	JSON,
	Boolean,
	Column,
	Date,
	DateTime,
	ForeignKey,
	Index,
	Integer,
	String,
	Text,
	create_engine,
	select,
	text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ambulatory.ambulatory.records import Availability, Booking, Doctor, Schedule
from ambulatory.exceptions import BookingConflict, DoesNotExistError
from .base import AvailabilityRepository, BookingRepository, DoctorRepository, ScheduleRepository

logger = logging.getLogger(__name__)


def generate_id() -> str:
	return uuid.uuid4().hex


class Base(DeclarativeBase):
	pass


class DoctorRow(Base):
	__tablename__ = "doctors"

	id = Column(String(32), primary_key=True, default=generate_id)
	full_name = Column(String(255), nullable=False)
	user_id = Column(String(64), nullable=False, index=True)
	working_hours_rule = Column(Text, nullable=True)


class ScheduleRow(Base):
	__tablename__ = "schedules"

	id = Column(String(32), primary_key=True, default=generate_id)
	doctor_id = Column(String(32), ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
	start_date = Column(Date, nullable=False)
	end_date = Column(Date, nullable=False)
	slot_duration = Column(Integer, nullable=True)
	timezone = Column(String(64), nullable=True)


class AvailabilityRow(Base):
	__tablename__ = "availabilities"

	id = Column(String(32), primary_key=True, default=generate_id)
	schedule_id = Column(String(32), ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False)
	type = Column(String(16), nullable=False, default="date")
	date = Column(Date, nullable=False)
	intervals = Column(JSON, nullable=False)  # [{"from": "09:00", "to": "11:00"}, ...]

	__table_args__ = (
		Index("idx_availabilities_schedule_date", "schedule_id", "date"),
	)


class BookingRow(Base):
	__tablename__ = "bookings"

	id = Column(String(32), primary_key=True, default=generate_id)
	schedule_id = Column(String(32), ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False)
	user_id = Column(String(64), nullable=True)
	# Hora local del timezone del schedule (naive)
	preferred_date_time = Column(DateTime, nullable=False)
	is_active = Column(Boolean, nullable=False, default=True)
	created_at = Column(DateTime, nullable=False, default=datetime.now)

	__table_args__ = (
		Index(
			"uq_bookings_active_slot",
			"schedule_id",
			"preferred_date_time",
			unique=True,
			sqlite_where=text("is_active = 1"),
			postgresql_where=text("is_active"),
		),
	)


# ===== ENGINE / SCHEMA =====

def make_engine(database_url: str, echo: bool = False) -> Engine:
	"""
	Crea el engine de SQLAlchemy.

	SQLite en memoria comparte una sola conexión para que todas las sesiones
	vean el mismo schema.
	"""
	if database_url in ("sqlite://", "sqlite:///:memory:"):
		return create_engine(
			database_url,
			echo=echo,
			poolclass=StaticPool,
			connect_args={"check_same_thread": False},
		)
	return create_engine(database_url, echo=echo, pool_pre_ping=True)


def init_schema(engine: Engine) -> None:
	"""Crea las tablas si no existen."""
	Base.metadata.create_all(engine)


# ===== REPOSITORIES =====

class _SqlRepository:

	def __init__(self, session_factory: sessionmaker):
		self.session_factory = session_factory


class SqlDoctorRepository(_SqlRepository, DoctorRepository):

	def get(self, doctor_id: str) -> Optional[Doctor]:
		with self.session_factory() as session:
			row = session.get(DoctorRow, doctor_id)
			return _doctor(row) if row else None

	def add(self, doctor: Doctor) -> Doctor:
		with self.session_factory() as session:
			row = DoctorRow(
				id=doctor.id or generate_id(),
				full_name=doctor.full_name,
				user_id=doctor.user_id,
				working_hours_rule=doctor.working_hours_rule,
			)
			session.add(row)
			session.commit()
			return _doctor(row)


class SqlScheduleRepository(_SqlRepository, ScheduleRepository):

	def get(self, schedule_id: str) -> Optional[Schedule]:
		with self.session_factory() as session:
			row = session.get(ScheduleRow, schedule_id)
			return _schedule(row) if row else None

	def add(self, schedule: Schedule) -> Schedule:
		with self.session_factory() as session:
			row = ScheduleRow(
				id=schedule.id or generate_id(),
				doctor_id=schedule.doctor_id,
				start_date=schedule.start_date,
				end_date=schedule.end_date,
				slot_duration=schedule.slot_duration,
				timezone=schedule.timezone,
			)
			session.add(row)
			session.commit()
			return _schedule(row)


class SqlAvailabilityRepository(_SqlRepository, AvailabilityRepository):

	def get(self, availability_id: str) -> Optional[Availability]:
		with self.session_factory() as session:
			row = session.get(AvailabilityRow, availability_id)
			return _availability(row) if row else None

	def list_for_schedule(self, schedule_id: str) -> List[Availability]:
		with self.session_factory() as session:
			rows = session.scalars(
				select(AvailabilityRow)
				.where(AvailabilityRow.schedule_id == schedule_id)
				.order_by(AvailabilityRow.date, AvailabilityRow.id)
			).all()
			return [_availability(row) for row in rows]

	def add(self, availability: Availability) -> Availability:
		with self.session_factory() as session:
			row = AvailabilityRow(
				id=availability.id or generate_id(),
				schedule_id=availability.schedule_id,
				type=availability.type,
				date=availability.date,
				intervals=[interval.to_dict() for interval in availability.intervals],
			)
			session.add(row)
			session.commit()
			return _availability(row)

	def update(self, availability: Availability) -> Availability:
		with self.session_factory() as session:
			row = session.get(AvailabilityRow, availability.id)
			if row is None:
				raise DoesNotExistError(f"Availability {availability.id} not found")

			row.date = availability.date
			row.intervals = [interval.to_dict() for interval in availability.intervals]
			session.commit()
			return _availability(row)

	def delete(self, availability_id: str) -> bool:
		with self.session_factory() as session:
			row = session.get(AvailabilityRow, availability_id)
			if row is None:
				return False
			session.delete(row)
			session.commit()
			return True


class SqlBookingRepository(_SqlRepository, BookingRepository):

	def get(self, booking_id: str) -> Optional[Booking]:
		with self.session_factory() as session:
			row = session.get(BookingRow, booking_id)
			return _booking(row) if row else None

	def active_instants(self, schedule_id: str) -> Set[datetime]:
		with self.session_factory() as session:
			values = session.scalars(
				select(BookingRow.preferred_date_time).where(
					BookingRow.schedule_id == schedule_id,
					BookingRow.is_active.is_(True),
				)
			).all()
			return set(values)

	def add(self, booking: Booking) -> Booking:
		with self.session_factory() as session:
			row = BookingRow(
				id=booking.id or generate_id(),
				schedule_id=booking.schedule_id,
				user_id=booking.user_id,
				preferred_date_time=booking.preferred_date_time,
				is_active=booking.is_active,
				created_at=booking.created_at or datetime.now(),
			)
			session.add(row)
			try:
				session.commit()
			except IntegrityError as e:
				session.rollback()
				logger.warning(
					f"Booking conflict on schedule {booking.schedule_id} "
					f"at {booking.preferred_date_time}: {e.orig}"
				)
				raise BookingConflict(
					f"Schedule {booking.schedule_id} already has an active booking at {booking.preferred_date_time}"
				) from e

			return _booking(row)

	def deactivate(self, booking_id: str) -> bool:
		with self.session_factory() as session:
			row = session.get(BookingRow, booking_id)
			if row is None or not row.is_active:
				return False
			row.is_active = False
			session.commit()
			return True


class SqlRepositories(NamedTuple):
	doctors: SqlDoctorRepository
	schedules: SqlScheduleRepository
	availabilities: SqlAvailabilityRepository
	bookings: SqlBookingRepository


def build_repositories(engine: Engine) -> SqlRepositories:
	"""Repositorios SQL que comparten un sessionmaker (expire_on_commit=False)."""
	session_factory = sessionmaker(bind=engine, class_=Session, expire_on_commit=False)
	return SqlRepositories(
		doctors=SqlDoctorRepository(session_factory),
		schedules=SqlScheduleRepository(session_factory),
		availabilities=SqlAvailabilityRepository(session_factory),
		bookings=SqlBookingRepository(session_factory),
	)


# ===== ROW -> RECORD =====

def _doctor(row: DoctorRow) -> Doctor:
	return Doctor(
		id=row.id,
		full_name=row.full_name,
		user_id=row.user_id,
		working_hours_rule=row.working_hours_rule,
	)


def _schedule(row: ScheduleRow) -> Schedule:
	return Schedule(
		id=row.id,
		doctor_id=row.doctor_id,
		start_date=row.start_date,
		end_date=row.end_date,
		slot_duration=row.slot_duration,
		timezone=row.timezone,
	)


def _availability(row: AvailabilityRow) -> Availability:
	return Availability(
		id=row.id,
		schedule_id=row.schedule_id,
		type=row.type,
		date=row.date,
		intervals=row.intervals,
	)


def _booking(row: BookingRow) -> Booking:
	return Booking(
		id=row.id,
		schedule_id=row.schedule_id,
		user_id=row.user_id,
		preferred_date_time=row.preferred_date_time,
		is_active=row.is_active,
		created_at=row.created_at,
	)
