"""
Scheduling configuration.

Explicit settings passed into the slot generator, the booking validator and
the persistence layer, loaded from AMBULATORY_* environment variables:
- AMBULATORY_SLOT_DURATION: estimated service time in minutes
- AMBULATORY_TIMEZONE: timezone for schedules that do not define one
- AMBULATORY_DATABASE_URL: SQLAlchemy URL for the repositories
"""

from functools import lru_cache

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SLOT_DURATION = 15
DEFAULT_TIMEZONE = "UTC"
DEFAULT_DATABASE_URL = "sqlite:///ambulatory.db"


class SchedulingConfig(BaseSettings):
	"""
	Configuración del motor de agendamiento.

	Attributes:
		default_slot_duration: duración del slot en minutos cuando el Schedule no define una
		default_timezone: timezone usado cuando el Schedule no define uno
		database_url: URL de SQLAlchemy para los repositorios
	"""

	model_config = SettingsConfigDict(
		env_prefix="AMBULATORY_",
		frozen=True,
		populate_by_name=True,
	)

	default_slot_duration: int = Field(default=DEFAULT_SLOT_DURATION, alias="AMBULATORY_SLOT_DURATION")
	default_timezone: str = Field(default=DEFAULT_TIMEZONE, alias="AMBULATORY_TIMEZONE")
	database_url: str = Field(default=DEFAULT_DATABASE_URL, alias="AMBULATORY_DATABASE_URL")

	@field_validator("default_slot_duration")
	@classmethod
	def check_slot_duration(cls, value: int) -> int:
		if value <= 0:
			raise ValueError(f"default_slot_duration must be greater than 0, got {value}")
		return value

	@field_validator("default_timezone")
	@classmethod
	def check_timezone(cls, value: str) -> str:
		if value not in pytz.all_timezones_set:
			raise ValueError(f"Unknown timezone '{value}'")
		return value


def load_config() -> SchedulingConfig:
	"""
	Construye la configuración desde variables de entorno.

	Raises:
		pydantic.ValidationError: si alguna variable no es válida (nombra la variable)
	"""
	return SchedulingConfig()


@lru_cache
def get_config() -> SchedulingConfig:
	"""Configuración del proceso (se carga una sola vez)."""
	return load_config()
