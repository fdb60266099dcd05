"""
Availability Service

Resolves the open intervals of a schedule for one date, considering:
- Availability overrides (date-specific, replace the rule for that day)
- The doctor's weekly recurrence rule (fallback)
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from .interval import Interval
from .recurrence import RecurrenceRule


@dataclass(frozen=True)
class AvailabilityOverride:
	"""Vista del motor de un registro Availability: fecha + intervalos."""
	date: date
	intervals: Tuple[Interval, ...]


class AvailabilityResolver:
	"""
	Disponibilidad efectiva por fecha.

	Política: un override para la fecha reemplaza por completo la regla de
	recurrencia de ese día (no se suma a ella).
	"""

	def resolve(
		self,
		target_date: date,
		rule: Optional[RecurrenceRule],
		overrides: Iterable[AvailabilityOverride]
	) -> List[Interval]:
		"""
		Obtiene los intervalos abiertos para una fecha.

		Args:
			target_date: fecha objetivo
			rule: regla semanal del doctor (None = sin horario por defecto)
			overrides: overrides del schedule (cualquier fecha)

		Returns:
			list[Interval]: ordenados por (start, end)

		Algoritmo:
			1. Filtrar overrides cuya fecha == target_date
			2. Si hay alguno: unión de sus intervalos, ordenada (se ignora la regla)
			3. Si no: intervalo de la regla para ese día, o lista vacía
		"""
		matching = [
			interval
			for override in overrides
			if override.date == target_date
			for interval in override.intervals
		]

		if matching:
			return sorted(matching)

		if rule is None:
			return []

		interval = rule.resolve_for(target_date)
		return [interval] if interval else []

	def resolve_range(
		self,
		start_date: date,
		end_date: date,
		rule: Optional[RecurrenceRule],
		overrides: Iterable[AvailabilityOverride]
	) -> Dict[date, List[Interval]]:
		"""
		Disponibilidad para un rango de fechas (inclusive).

		Returns:
			dict: {date: [Interval, ...]} solo con fechas que tienen disponibilidad
		"""
		overrides = list(overrides)
		result = {}
		current_date = start_date

		while current_date <= end_date:
			intervals = self.resolve(current_date, rule, overrides)
			if intervals:
				result[current_date] = intervals
			if current_date == end_date:
				break
			current_date += timedelta(days=1)

		return result
