# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Schedule

A doctor's bounded campaign of bookable dates.
"""

import datetime
from typing import Optional

import pytz
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from ambulatory.ambulatory.scheduling.slots import ScheduleBounds


class Schedule(BaseModel):
	"""
	Schedule con validaciones.

	Validations:
	- start_date <= end_date
	- slot_duration > 0 (si está presente; None = duración por defecto)
	- timezone conocido por pytz (si está presente)
	"""

	id: Optional[str] = None
	doctor_id: str
	start_date: datetime.date
	end_date: datetime.date
	slot_duration: Optional[int] = Field(default=None, gt=0)
	timezone: Optional[str] = None

	@field_validator("timezone")
	@classmethod
	def check_timezone(cls, value: Optional[str]) -> Optional[str]:
		if value and value not in pytz.all_timezones_set:
			raise PydanticCustomError("timezone", "Unknown timezone '{timezone}'", {"timezone": value})
		return value or None

	@model_validator(mode="after")
	def check_date_range(self) -> "Schedule":
		if self.start_date > self.end_date:
			raise PydanticCustomError(
				"date_range",
				"Start date ({start}) must be before or equal to end date ({end})",
				{"start": self.start_date.isoformat(), "end": self.end_date.isoformat()},
			)
		return self

	@property
	def bounds(self) -> ScheduleBounds:
		return ScheduleBounds(self.start_date, self.end_date)

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"doctor_id": self.doctor_id,
			"start_date": self.start_date.isoformat(),
			"end_date": self.end_date.isoformat(),
			"slot_duration": self.slot_duration,
			"timezone": self.timezone,
		}
