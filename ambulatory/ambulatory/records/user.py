from typing import Literal

from pydantic import BaseModel


class User(BaseModel):
	"""Authenticated principal as seen by the policies."""

	id: str
	role: Literal["patient", "doctor", "admin"] = "patient"

	@property
	def is_doctor(self) -> bool:
		return self.role == "doctor"
