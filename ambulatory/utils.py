"""
Date and time helpers.

Conversions shared by records, repositories and API endpoints:
- getdate / get_time / get_datetime accept strings, date/time objects and
  timedelta (time since midnight, as some databases return TIME columns)
- now_datetime in a given timezone
- timezone lookup and localization (pytz)
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser
from dateutil.parser import isoparser

from ambulatory.config import DEFAULT_TIMEZONE

_isoparser = isoparser()


def getdate(value: Union[date, datetime, str, None] = None) -> date:
	"""
	Convierte un valor a datetime.date.

	Args:
		value: date, datetime o string ISO (YYYY-MM-DD). None = hoy

	Returns:
		datetime.date

	Raises:
		ValueError: si el string no es una fecha válida
	"""
	if value is None:
		return now_datetime().date()
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value
	if isinstance(value, str):
		return _isoparser.isoparse(value.strip()).date()
	raise ValueError(f"Cannot convert {type(value)} to date")


def get_time(value: Union[time, timedelta, str]) -> time:
	"""
	Convierte diferentes formatos de tiempo a datetime.time.

	Args:
		value: time, timedelta (desde medianoche) o string (HH:MM / HH:MM:SS)

	Returns:
		datetime.time
	"""
	if isinstance(value, time):
		return value
	if isinstance(value, timedelta):
		# timedelta representa tiempo desde medianoche
		return (datetime.min + value).time()
	if isinstance(value, str):
		return _isoparser.parse_isotime(value.strip())
	raise ValueError(f"Cannot convert {type(value)} to time")


def get_datetime(value: Union[datetime, date, str]) -> datetime:
	"""
	Convierte un valor a datetime.datetime.

	Un date se interpreta como medianoche. Los strings se parsean con dateutil
	(YYYY-MM-DD HH:MM:SS, ISO 8601, ...).
	"""
	if isinstance(value, datetime):
		return value
	if isinstance(value, date):
		return datetime.combine(value, time.min)
	if isinstance(value, str):
		return date_parser.parse(value.strip())
	raise ValueError(f"Cannot convert {type(value)} to datetime")


def get_timezone(tz_name: Optional[str] = None) -> pytz.BaseTzInfo:
	"""
	Obtiene el objeto timezone de pytz.

	Raises:
		pytz.UnknownTimeZoneError: si el nombre no existe
	"""
	return pytz.timezone(tz_name or DEFAULT_TIMEZONE)


def localize(value: datetime, tz: pytz.BaseTzInfo) -> datetime:
	"""
	Expresa un datetime en el timezone dado.

	Naive: se asume hora local de tz. Aware: se convierte a tz.
	"""
	if value.tzinfo is None:
		return tz.localize(value)
	return value.astimezone(tz)


def now_datetime(tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
	"""Fecha y hora actual; naive si no se indica timezone."""
	if tz is None:
		return datetime.now()
	return datetime.now(tz)
