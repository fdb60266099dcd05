# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Availability

Date-specific override of a doctor's working hours. For its date it
replaces the weekly recurrence rule entirely.
"""

import re
import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from ambulatory.ambulatory.scheduling.availability import AvailabilityOverride
from ambulatory.ambulatory.scheduling.interval import Interval

TIME_FORMAT = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class IntervalPayload(BaseModel):
	"""Franja horaria HH:MM - HH:MM."""

	model_config = ConfigDict(populate_by_name=True)

	start: str = Field(alias="from")
	end: str = Field(alias="to")

	@field_validator("start", "end", mode="before")
	@classmethod
	def check_time(cls, value: Any) -> Any:
		if value is None or (isinstance(value, str) and not value.strip()):
			raise PydanticCustomError("required", "field required")
		if isinstance(value, str) and not TIME_FORMAT.match(value.strip()):
			raise PydanticCustomError("time_format", "invalid time format")
		return value.strip() if isinstance(value, str) else value

	@model_validator(mode="after")
	def check_order(self) -> "IntervalPayload":
		if self.start >= self.end:
			raise PydanticCustomError(
				"interval_order",
				"Start time ({start}) must be before end time ({end})",
				{"start": self.start, "end": self.end},
			)
		return self

	def to_interval(self) -> Interval:
		return Interval.parse(self.start, self.end)

	def to_dict(self) -> dict:
		return {"from": self.start, "to": self.end}


class CreateAvailability(BaseModel):
	"""Request to create or replace an availability override."""

	date: datetime.date
	intervals: List[IntervalPayload]

	@field_validator("date", mode="before")
	@classmethod
	def check_date_present(cls, value: Any) -> Any:
		if value is None or (isinstance(value, str) and not value.strip()):
			raise PydanticCustomError("required", "field required")
		return value

	@field_validator("intervals", mode="before")
	@classmethod
	def check_intervals_present(cls, value: Any) -> Any:
		if value is None or (isinstance(value, (list, tuple)) and len(value) == 0):
			raise PydanticCustomError("required", "field required")
		return value

	@field_validator("intervals")
	@classmethod
	def check_no_overlapping_intervals(cls, intervals: List[IntervalPayload]) -> List[IntervalPayload]:
		"""
		Valida que no haya franjas solapadas en el mismo día.

		Dos franjas se solapan si: a.start < b.end AND a.end > b.start
		"""
		ordered = sorted(intervals, key=lambda x: (x.start, x.end))

		for current, next_interval in zip(ordered, ordered[1:]):
			if current.end > next_interval.start:
				raise PydanticCustomError(
					"interval_overlap",
					"Interval {first} overlaps with {second}",
					{
						"first": f"{current.start}-{current.end}",
						"second": f"{next_interval.start}-{next_interval.end}",
					},
				)

		return intervals


class Availability(CreateAvailability):
	"""Override persistido de un schedule."""

	id: Optional[str] = None
	schedule_id: str
	type: Literal["date"] = "date"

	def get_intervals(self) -> List[Interval]:
		return [interval.to_interval() for interval in self.intervals]

	def to_override(self) -> AvailabilityOverride:
		return AvailabilityOverride(self.date, tuple(self.get_intervals()))

	def to_dict(self) -> dict:
		return {
			"id": self.id,
			"schedule_id": self.schedule_id,
			"type": self.type,
			"date": self.date.isoformat(),
			"intervals": [interval.to_dict() for interval in self.intervals],
		}
