"""
Recurrence Rule

Narrow parser for the doctor's weekly working-hours rule. Only the weekly
range grammar is supported: active weekdays + daily time window + validity
range. DTSTART carries the first valid date and the daily start time, UNTIL
the last valid date and the daily end time.

Accepted forms:
	DTSTART=20261026T090000;UNTIL=20261030T170000;FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR

	DTSTART;TZID=America/Bogota:20261026T090000
	RRULE:FREQ=WEEKLY;UNTIL=20261030T170000;BYDAY=MO,TU,WE,TH,FR

	{"weekdays": ["MO", "TU"], "from": "09:00", "to": "17:00",
	 "valid_from": "2026-10-26", "valid_until": "2026-10-30"}
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from dateutil.parser import isoparser

from ambulatory.exceptions import InvalidInterval, MalformedRule
from ambulatory.utils import getdate
from .interval import Interval


# Índice == date.weekday() (Monday = 0)
WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

SUPPORTED_KEYS = {"DTSTART", "UNTIL", "FREQ", "BYDAY", "INTERVAL", "WKST"}

_isoparser = isoparser()


@dataclass(frozen=True)
class RecurrenceRule:
	weekdays: FrozenSet[int]
	interval: Interval
	valid_from: date
	valid_until: date
	timezone: Optional[str] = None

	def __post_init__(self):
		if not self.weekdays:
			raise MalformedRule("Recurrence rule has no active weekdays")
		if self.valid_from > self.valid_until:
			raise MalformedRule(
				f"Recurrence rule starts ({self.valid_from}) after it ends ({self.valid_until})"
			)

	@classmethod
	def parse(cls, spec: Union[str, Mapping[str, Any]]) -> "RecurrenceRule":
		"""
		Parsea una regla de recurrencia (string o mapping).

		Raises:
			MalformedRule: regla no parseable, sin días activos o con horario inválido
		"""
		if isinstance(spec, Mapping):
			return _parse_mapping(spec)
		if isinstance(spec, str):
			return _parse_rule_string(spec)
		raise MalformedRule(f"Unsupported recurrence specification type {type(spec).__name__}")

	@property
	def weekday_codes(self) -> List[str]:
		return [WEEKDAY_CODES[day] for day in sorted(self.weekdays)]

	def resolve_for(self, target_date: date) -> Optional[Interval]:
		"""
		Horario del día según la regla.

		Returns:
			Interval diario si la fecha está en [valid_from, valid_until] y su
			weekday está activo; None en otro caso
		"""
		if target_date < self.valid_from or target_date > self.valid_until:
			return None
		if target_date.weekday() not in self.weekdays:
			return None
		return self.interval

	def to_rule_string(self) -> str:
		dtstart = datetime.combine(self.valid_from, self.interval.start).strftime("%Y%m%dT%H%M%S")
		until = datetime.combine(self.valid_until, self.interval.end).strftime("%Y%m%dT%H%M%S")
		byday = ",".join(self.weekday_codes)

		if self.timezone == "UTC":
			return f"DTSTART={dtstart}Z;UNTIL={until}Z;FREQ=WEEKLY;BYDAY={byday}"
		if self.timezone:
			return f"DTSTART;TZID={self.timezone}:{dtstart}\nRRULE:FREQ=WEEKLY;UNTIL={until};BYDAY={byday}"
		return f"DTSTART={dtstart};UNTIL={until};FREQ=WEEKLY;BYDAY={byday}"


# ===== PARSING =====

def _parse_rule_string(spec: str) -> RecurrenceRule:
	text = spec.strip()
	if not text:
		raise MalformedRule("Empty recurrence rule")

	parts: Dict[str, str] = {}
	tzid: Optional[str] = None

	for line in text.splitlines():
		line = line.strip()
		if not line:
			continue

		upper = line.upper()
		if upper.startswith("DTSTART") and not upper.startswith("DTSTART="):
			# Forma RFC: DTSTART;TZID=Zone:20261026T090000
			head, sep, value = line.partition(":")
			if not sep:
				raise MalformedRule(f"Malformed DTSTART line '{line}'")
			for param in head.split(";")[1:]:
				key, _, param_value = param.partition("=")
				if key.strip().upper() == "TZID":
					tzid = param_value.strip()
			_put(parts, "DTSTART", value.strip())
			continue

		if upper.startswith("RRULE:"):
			line = line[len("RRULE:"):]

		for token in line.split(";"):
			token = token.strip()
			if not token:
				continue
			key, sep, value = token.partition("=")
			if not sep:
				raise MalformedRule(f"Malformed recurrence rule part '{token}'")
			_put(parts, key.strip().upper(), value.strip())

	unknown = set(parts) - SUPPORTED_KEYS
	if unknown:
		raise MalformedRule(f"Unsupported recurrence rule parts: {', '.join(sorted(unknown))}")

	freq = parts.get("FREQ", "WEEKLY").upper()
	if freq != "WEEKLY":
		raise MalformedRule(f"Only weekly recurrence rules are supported, got FREQ={freq}")

	if parts.get("INTERVAL", "1") != "1":
		raise MalformedRule(f"Only INTERVAL=1 is supported, got INTERVAL={parts['INTERVAL']}")

	for required in ("DTSTART", "UNTIL", "BYDAY"):
		if not parts.get(required):
			raise MalformedRule(f"Recurrence rule requires {required}")

	start, start_tz = _parse_instant(parts["DTSTART"], "DTSTART")
	end, end_tz = _parse_instant(parts["UNTIL"], "UNTIL")
	weekdays = _parse_weekdays(parts["BYDAY"].split(","))

	return _build(weekdays, start.date(), end.date(), start, end, tzid or start_tz or end_tz)


def _parse_mapping(spec: Mapping[str, Any]) -> RecurrenceRule:
	for required in ("weekdays", "from", "to", "valid_from", "valid_until"):
		if spec.get(required) in (None, ""):
			raise MalformedRule(f"Recurrence rule requires '{required}'")

	weekdays = spec["weekdays"]
	from_value = spec["from"]
	to_value = spec["to"]

	try:
		valid_from = getdate(spec["valid_from"])
		valid_until = getdate(spec["valid_until"])
	except (TypeError, ValueError) as e:
		raise MalformedRule(f"Invalid recurrence validity range: {e}") from e

	if isinstance(weekdays, (str, int)):
		weekdays = [weekdays]

	try:
		interval = Interval.parse(from_value, to_value)
	except InvalidInterval as e:
		raise MalformedRule(f"Invalid daily working hours: {e}") from e

	return RecurrenceRule(
		weekdays=_parse_weekdays(weekdays),
		interval=interval,
		valid_from=valid_from,
		valid_until=valid_until,
		timezone=spec.get("timezone"),
	)


def _build(
	weekdays: FrozenSet[int],
	valid_from: date,
	valid_until: date,
	start: datetime,
	end: datetime,
	timezone: Optional[str]
) -> RecurrenceRule:
	try:
		interval = Interval(start.time(), end.time())
	except InvalidInterval as e:
		raise MalformedRule(f"Invalid daily working hours: {e}") from e

	return RecurrenceRule(
		weekdays=weekdays,
		interval=interval,
		valid_from=valid_from,
		valid_until=valid_until,
		timezone=timezone,
	)


def _put(parts: Dict[str, str], key: str, value: str) -> None:
	if key in parts:
		raise MalformedRule(f"Duplicate recurrence rule part {key}")
	parts[key] = value


def _parse_instant(value: str, field: str) -> Tuple[datetime, Optional[str]]:
	"""Retorna (hora local naive, 'UTC' si el valor termina en Z)."""
	try:
		parsed = _isoparser.isoparse(value)
	except ValueError as e:
		raise MalformedRule(f"Invalid {field} '{value}'") from e

	timezone = "UTC" if value.upper().endswith("Z") else None
	return parsed.replace(tzinfo=None), timezone


def _parse_weekdays(values: Iterable[Union[str, int]]) -> FrozenSet[int]:
	days = set()

	for value in values:
		if isinstance(value, bool):
			raise MalformedRule(f"Invalid weekday {value!r}")
		if isinstance(value, int):
			if not 0 <= value <= 6:
				raise MalformedRule(f"Invalid weekday {value!r}")
			days.add(value)
			continue

		token = str(value).strip()
		if not token:
			continue
		if token.upper() in WEEKDAY_CODES:
			days.add(WEEKDAY_CODES.index(token.upper()))
		elif token.capitalize() in WEEKDAY_NAMES:
			days.add(WEEKDAY_NAMES.index(token.capitalize()))
		else:
			raise MalformedRule(f"Invalid weekday '{token}'")

	if not days:
		raise MalformedRule("Recurrence rule has no active weekdays")

	return frozenset(days)
