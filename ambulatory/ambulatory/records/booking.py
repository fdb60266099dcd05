# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Booking

A confirmed reservation of one slot's start instant. preferred_date_time is
stored as wall-clock time of the schedule's timezone.
"""

import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError


class CreateBooking(BaseModel):
	"""Request to book an appointment."""

	preferred_date_time: datetime.datetime

	@field_validator("preferred_date_time", mode="before")
	@classmethod
	def check_present(cls, value: Any) -> Any:
		if value is None or (isinstance(value, str) and not value.strip()):
			raise PydanticCustomError("required", "field required")
		return value


class Booking(BaseModel):
	id: Optional[str] = None
	schedule_id: str
	user_id: Optional[str] = None
	preferred_date_time: datetime.datetime
	is_active: bool = True
	created_at: Optional[datetime.datetime] = None

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"schedule_id": self.schedule_id,
			"user_id": self.user_id,
			"preferred_date_time": self.preferred_date_time.strftime("%Y-%m-%d %H:%M:%S"),
			"is_active": self.is_active,
			"created_at": self.created_at.isoformat() if self.created_at else None,
		}
