"""
Interval

Half-open time-of-day range [start, end) within a single day.
Used by the recurrence rule (daily working hours), availability overrides
and slot subdivision.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterator, Union

from ambulatory.exceptions import InvalidInterval
from ambulatory.utils import get_time


@dataclass(frozen=True, order=True)
class Interval:
	start: time
	end: time

	def __post_init__(self):
		if self.start.tzinfo is not None or self.end.tzinfo is not None:
			raise InvalidInterval(f"Interval bounds must be local times of day, got {self.start} - {self.end}")
		if self.start >= self.end:
			raise InvalidInterval(
				f"Interval start ({self.start.strftime('%H:%M')}) must be before end ({self.end.strftime('%H:%M')})"
			)

	@classmethod
	def parse(cls, start: Union[time, timedelta, str], end: Union[time, timedelta, str]) -> "Interval":
		"""
		Construye un Interval desde strings HH:MM (o time / timedelta).

		Raises:
			InvalidInterval: si algún extremo no es una hora válida, trae offset o start >= end
		"""
		try:
			start_time = get_time(start)
			end_time = get_time(end)
		except (TypeError, ValueError) as e:
			raise InvalidInterval(f"Invalid interval bounds {start!r} - {end!r}: {e}") from e
		return cls(start_time, end_time)

	@property
	def duration(self) -> timedelta:
		return _on(self.end) - _on(self.start)

	def contains(self, value: time) -> bool:
		"""start <= value < end"""
		return self.start <= value < self.end

	def overlaps(self, other: "Interval") -> bool:
		"""Intervalos que solo se tocan (a.end == b.start) no se solapan."""
		return self.start < other.end and other.start < self.end

	def split(self, minutes: int) -> Iterator[time]:
		"""
		Genera los inicios de cada sub-slot completo de `minutes` minutos.

		Un slot final parcial (que excede end) se descarta.
		"""
		step = timedelta(minutes=minutes)
		current = _on(self.start)
		limit = _on(self.end)

		while current + step <= limit:
			yield current.time()
			current += step

	def to_dict(self) -> Dict[str, str]:
		return {"from": self.start.strftime("%H:%M"), "to": self.end.strftime("%H:%M")}

	def __str__(self) -> str:
		return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"


def _on(value: time) -> datetime:
	# Aritmética de time vía una fecha fija
	return datetime.combine(date.min, value)
