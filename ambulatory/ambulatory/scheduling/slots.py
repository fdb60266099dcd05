"""
Slot Generation Service

Generates discrete bookable slots for one date, considering:
- Open intervals (already resolved by AvailabilityResolver)
- Slot duration
- The schedule's active date range
- Already booked start instants
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, NamedTuple, Optional, Set

import pytz

from ambulatory.config import DEFAULT_SLOT_DURATION
from ambulatory.exceptions import InvalidDuration
from ambulatory.utils import localize
from .interval import Interval


class ScheduleBounds(NamedTuple):
	"""Rango activo del schedule (ambos extremos inclusive)."""
	start_date: date
	end_date: date

	def contains(self, target_date: date) -> bool:
		return self.start_date <= target_date <= self.end_date


@dataclass(frozen=True, order=True)
class Slot:
	start: datetime
	end: datetime

	def to_dict(self) -> Dict[str, str]:
		return {"from": self.start.strftime("%H:%M"), "to": self.end.strftime("%H:%M")}


class SlotGenerator:
	"""
	Subdivide intervalos abiertos en slots de duración fija.

	La duración por defecto (tiempo estimado de atención) se inyecta al
	construir el generador; generate() acepta una duración explícita por
	schedule.
	"""

	def __init__(self, default_slot_duration: int = DEFAULT_SLOT_DURATION):
		self.default_slot_duration = _check_duration(default_slot_duration)

	def generate(
		self,
		target_date: date,
		open_intervals: Iterable[Interval],
		slot_duration: Optional[int],
		schedule_bounds: ScheduleBounds,
		booked_instants: Iterable[datetime] = (),
		tz: Optional[pytz.BaseTzInfo] = None
	) -> List[Slot]:
		"""
		Genera slots disponibles para una fecha.

		Args:
			target_date: fecha
			open_intervals: intervalos abiertos ordenados
			slot_duration: minutos por slot (None = duración por defecto)
			schedule_bounds: (start_date, end_date) del schedule
			booked_instants: inicios ya reservados
			tz: timezone del schedule; None = datetimes naive (hora local)

		Returns:
			list[Slot]: en orden cronológico, sin inicios repetidos

		Algoritmo:
			1. Fecha fuera del rango del schedule -> []
			2. Para cada intervalo, avanzar desde start en pasos de slot_duration
			   mientras t + slot_duration <= end (el slot parcial final se descarta)
			3. Descartar slots cuyo inicio está en booked_instants
			4. Retornar en orden cronológico

		Raises:
			InvalidDuration: si slot_duration <= 0
		"""
		duration = self.default_slot_duration if slot_duration is None else _check_duration(slot_duration)

		# 1. Fence al rango del schedule
		start_date, end_date = schedule_bounds
		if target_date < start_date or target_date > end_date:
			return []

		booked = {_normalize(instant, tz) for instant in booked_instants}
		step = timedelta(minutes=duration)

		slots = []
		seen: Set[datetime] = set()

		# 2. Subdividir cada intervalo
		for interval in open_intervals:
			for slot_start in interval.split(duration):
				start = datetime.combine(target_date, slot_start)
				end = start + step

				if tz is not None:
					start = localize(start, tz)
					end = localize(end, tz)

				# 3. Excluir reservados (y repetidos si los intervalos se solapan)
				if start in booked or start in seen:
					continue

				seen.add(start)
				slots.append(Slot(start, end))

		# 4. Orden cronológico
		slots.sort()
		return slots


def _check_duration(slot_duration: int) -> int:
	if isinstance(slot_duration, bool) or not isinstance(slot_duration, int) or slot_duration <= 0:
		raise InvalidDuration(f"Slot duration must be a positive number of minutes, got {slot_duration!r}")
	return slot_duration


def _normalize(instant: datetime, tz: Optional[pytz.BaseTzInfo]) -> datetime:
	if tz is not None:
		return localize(instant, tz)
	# Sin timezone se compara por hora local
	return instant.replace(tzinfo=None)
