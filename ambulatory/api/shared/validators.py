"""
Request Validators

Input checks shared by the API endpoints. Every failure is raised as
ambulatory.exceptions.ValidationError keyed by the offending field, with
messages in the form callers display directly:

    {"date": ["The date is not a valid date."]}
"""

import re
from datetime import date, datetime
from typing import Any, Dict, List, Type, TypeVar

import pydantic

from ambulatory.exceptions import ValidationError
from ambulatory.utils import get_datetime, getdate

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}(:\d{2})?(Z|[+-]\d{2}:?\d{2})?$")


def _attribute(field_name: str) -> str:
	return field_name.replace("_", " ")


def required_message(field_name: str) -> str:
	return f"The {_attribute(field_name)} field is required."


def invalid_date_message(field_name: str) -> str:
	return f"The {_attribute(field_name)} is not a valid date."


def validate_date_string(value: Any, field_name: str = "date") -> date:
	"""
	Valida y convierte una fecha (YYYY-MM-DD).

	Args:
		value: string o date
		field_name: nombre del campo para los mensajes de error

	Returns:
		date: fecha validada

	Raises:
		ValidationError: si falta o no es una fecha válida
	"""
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value

	if value is None or not str(value).strip():
		raise ValidationError.for_field(field_name, required_message(field_name))

	value = str(value).strip()

	if not DATE_PATTERN.match(value):
		raise ValidationError.for_field(field_name, invalid_date_message(field_name))

	# 2026-02-30 pasa el patrón pero no es una fecha
	try:
		return getdate(value)
	except ValueError:
		raise ValidationError.for_field(field_name, invalid_date_message(field_name))


def validate_datetime_string(value: Any, field_name: str = "datetime") -> datetime:
	"""
	Valida y convierte una fecha-hora (YYYY-MM-DD HH:MM[:SS], también con "T"
	y offset opcional: Z, +HH:MM).

	Raises:
		ValidationError: si falta o no es una fecha-hora válida
	"""
	if isinstance(value, datetime):
		return value

	if value is None or not str(value).strip():
		raise ValidationError.for_field(field_name, required_message(field_name))

	value = str(value).strip()

	if not DATETIME_PATTERN.match(value):
		raise ValidationError.for_field(field_name, invalid_date_message(field_name))

	try:
		return get_datetime(value)
	except ValueError:
		raise ValidationError.for_field(field_name, invalid_date_message(field_name))


def validate_docname(name: Any, field_name: str = "name") -> str:
	"""
	Valida un ID de registro.

	Asegura que no esté vacío, no sea demasiado largo y no contenga
	patrones de inyección.

	Raises:
		ValidationError: si el ID es inválido
	"""
	if name is None or not str(name).strip():
		raise ValidationError.for_field(field_name, required_message(field_name))

	name = str(name).strip()

	if len(name) > 140:
		raise ValidationError.for_field(field_name, f"The {_attribute(field_name)} is too long.")

	dangerous_patterns = [
		r"<script",
		r"javascript:",
		r"onclick",
		r"onerror",
		r"SELECT\s+",
		r"INSERT\s+",
		r"UPDATE\s+",
		r"DELETE\s+",
		r"DROP\s+",
		r"UNION\s+",
		r"--",
		r";",
	]

	for pattern in dangerous_patterns:
		if re.search(pattern, name, re.IGNORECASE):
			raise ValidationError.for_field(field_name, f"The {_attribute(field_name)} is invalid.")

	return name


def format_validation_errors(exc: pydantic.ValidationError) -> Dict[str, List[str]]:
	"""
	Traduce los errores de pydantic a mensajes por campo.

	La ruta del error se une con "." (intervals.0.from), igual que la clave
	del diccionario resultante.

	Returns:
		dict: {"intervals.0.from": ["The intervals.0.from field is required."], ...}
	"""
	errors: Dict[str, List[str]] = {}

	for error in exc.errors():
		field = ".".join(str(part) for part in error["loc"]) or "payload"
		errors.setdefault(field, []).append(_message_for(field, error))

	return errors


def _message_for(field: str, error: Dict[str, Any]) -> str:
	attribute = _attribute(field)
	error_type = error["type"]

	if error_type in ("missing", "required"):
		return f"The {attribute} field is required."
	if error_type == "list_type":
		return f"The {attribute} must be an array."
	if error_type.startswith("date"):
		return f"The {attribute} is not a valid date."
	if error_type == "time_format":
		return f"The {attribute} does not match the format H:i."
	if error_type == "interval_order":
		return f"The {attribute}.to must be a time after {attribute}.from."

	return error["msg"]


def parse_payload(model: Type[ModelT], payload: Any) -> ModelT:
	"""
	Valida un payload contra un modelo pydantic.

	Raises:
		ValidationError: con los errores por campo
	"""
	try:
		return model.model_validate(payload)
	except pydantic.ValidationError as e:
		raise ValidationError(format_validation_errors(e)) from e
