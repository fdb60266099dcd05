"""
Shared utilities for the Ambulatory API.

Input validators and the translation of record validation errors into
field-keyed messages.
"""

from .validators import (
	format_validation_errors,
	parse_payload,
	validate_date_string,
	validate_datetime_string,
	validate_docname,
)

__all__ = [
	"format_validation_errors",
	"parse_payload",
	"validate_date_string",
	"validate_datetime_string",
	"validate_docname",
]
