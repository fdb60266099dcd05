"""
Repository interfaces

Persistence collaborators of the scheduling engine. The engine never talks
to them directly; API endpoints read snapshots through them and write
bookings back.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Set

from ambulatory.ambulatory.records import Availability, Booking, Doctor, Schedule


class DoctorRepository(ABC):

	@abstractmethod
	def get(self, doctor_id: str) -> Optional[Doctor]:
		...

	@abstractmethod
	def add(self, doctor: Doctor) -> Doctor:
		...


class ScheduleRepository(ABC):

	@abstractmethod
	def get(self, schedule_id: str) -> Optional[Schedule]:
		...

	@abstractmethod
	def add(self, schedule: Schedule) -> Schedule:
		...


class AvailabilityRepository(ABC):

	@abstractmethod
	def get(self, availability_id: str) -> Optional[Availability]:
		...

	@abstractmethod
	def list_for_schedule(self, schedule_id: str) -> List[Availability]:
		"""Todos los overrides del schedule, ordenados por fecha."""

	@abstractmethod
	def add(self, availability: Availability) -> Availability:
		...

	@abstractmethod
	def update(self, availability: Availability) -> Availability:
		...

	@abstractmethod
	def delete(self, availability_id: str) -> bool:
		...


class BookingRepository(ABC):

	@abstractmethod
	def get(self, booking_id: str) -> Optional[Booking]:
		...

	@abstractmethod
	def active_instants(self, schedule_id: str) -> Set[datetime]:
		"""preferred_date_time de las reservas activas del schedule."""

	@abstractmethod
	def add(self, booking: Booking) -> Booking:
		"""
		Persiste la reserva.

		Raises:
			BookingConflict: si ya existe una reserva activa para
				(schedule_id, preferred_date_time)
		"""

	@abstractmethod
	def deactivate(self, booking_id: str) -> bool:
		...
