# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Doctor

Owner of schedules. Carries the default weekly working hours as a
recurrence rule string.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ambulatory.ambulatory.scheduling.recurrence import RecurrenceRule


class Doctor(BaseModel):
	id: Optional[str] = None
	full_name: str
	user_id: str
	# No se expone en to_dict()
	working_hours_rule: Optional[str] = Field(default=None, exclude=True)

	@field_validator("working_hours_rule")
	@classmethod
	def check_working_hours_rule(cls, value: Optional[str]) -> Optional[str]:
		"""La regla debe ser parseable (MalformedRule -> error de validación)."""
		if value:
			RecurrenceRule.parse(value)
		return value or None

	def get_recurrence_rule(self) -> Optional[RecurrenceRule]:
		if not self.working_hours_rule:
			return None
		return RecurrenceRule.parse(self.working_hours_rule)

	def get_working_hours(self) -> List[Dict[str, object]]:
		"""
		Horario por defecto del doctor, un elemento por día activo.

		Returns:
			list[dict]: [
				{"type": "wday", "intervals": {"from": "09:00", "to": "17:00"}, "wday": "MO"},
				...
			]
		"""
		rule = self.get_recurrence_rule()
		if rule is None:
			return []

		return [
			{
				"type": "wday",
				"intervals": rule.interval.to_dict(),
				"wday": code,
			}
			for code in rule.weekday_codes
		]

	def to_dict(self) -> dict:
		return self.model_dump()
