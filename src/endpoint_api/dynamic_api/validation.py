"""Validation of untyped request values against the declared field types.

Each :class:`~endpoint_api.dynamic_api.models.FieldType` has one normalizer
in :data:`FIELD_TYPE_NORMALIZERS`. A normalizer receives the raw value from the
JSON payload, and returns the canonical representation that is stored.
Values that don't fit the type raise :class:`InvalidValue`.

The field-level policy (required fields, default values) is applied on top of this
by :func:`build_payload` for new documents, and :func:`merge_payload` for updates.
"""
from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, time
from decimal import Decimal

from dateutil import parser as dateutil_parser
from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import FieldValidationError
from .models import FieldDefinition, FieldType

# Plain decimal notation, as JSON would write it (no hex, no underscores, no "inf").
DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

# Same magnitude limit as a double, this also keeps int("1e999999999") from running away.
MAX_EXPONENT = 308

# Fills in the parts that a free-form date leaves out, e.g. "January 2024".
DEFAULT_DATETIME = datetime(2000, 1, 1)


class InvalidValue(ValueError):
    """The value doesn't match the declared field type."""


def _parse_decimal(value) -> Decimal:
    # bool is a subclass of int, but true/false are not numbers in JSON.
    if isinstance(value, bool):
        raise InvalidValue("Boolean is not a number")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidValue("Number is not finite")
        return Decimal(repr(value))
    if isinstance(value, str) and DECIMAL_RE.fullmatch(value.strip()):
        number = Decimal(value.strip())
        if number.adjusted() > MAX_EXPONENT:
            raise InvalidValue(f"Number out of range: {value!r}")
        return number
    raise InvalidValue(f"Not a number: {value!r}")


def normalize_int(value) -> int:
    number = _parse_decimal(value)
    if number != number.to_integral_value():
        raise InvalidValue(f"Not an integer: {value!r}")
    return int(number)


def normalize_float(value) -> float:
    result = float(_parse_decimal(value))
    if not math.isfinite(result):
        raise InvalidValue(f"Number out of range: {value!r}")
    return result


def normalize_text(value) -> str:
    if not isinstance(value, str):
        raise InvalidValue(f"Not a string: {value!r}")
    if "\x00" in value:
        # PostgreSQL can't store NUL characters in jsonb or text columns.
        raise InvalidValue("String contains a NUL character")
    return value


def normalize_boolean(value) -> bool:
    if isinstance(value, bool):
        return value
    elif value == "true":
        return True
    elif value == "false":
        return False
    raise InvalidValue(f"Not a boolean: {value!r}")


def _parse_temporal(value) -> datetime:
    """Parse a date or datetime string, a plain date becomes midnight.

    ISO 8601 is tried first. Other common notations (e.g. "2024/01/15" or
    "Mon, 15 Jan 2024 10:00:00 GMT") are handled by dateutil.
    """
    if not isinstance(value, str):
        raise InvalidValue(f"Not a date string: {value!r}")
    value = value.strip()
    try:
        # Both functions return None on a bad format, and raise on bad values (e.g. Feb 30th).
        if (parsed_datetime := parse_datetime(value)) is not None:
            return parsed_datetime
        if (parsed_date := parse_date(value)) is not None:
            return datetime.combine(parsed_date, time.min)
    except ValueError as e:
        raise InvalidValue(str(e)) from e

    try:
        return dateutil_parser.parse(value, default=DEFAULT_DATETIME)
    except (ValueError, OverflowError) as e:
        raise InvalidValue(f"Not a date: {value!r}") from e


def normalize_date(value) -> str:
    return _parse_temporal(value).date().isoformat()


def normalize_datetime(value) -> str:
    return _parse_temporal(value).isoformat()


FIELD_TYPE_NORMALIZERS: dict[FieldType, Callable[[object], object]] = {
    FieldType.INT: normalize_int,
    FieldType.FLOAT: normalize_float,
    FieldType.VARCHAR: normalize_text,
    FieldType.TEXT: normalize_text,
    FieldType.BOOLEAN: normalize_boolean,
    FieldType.DATE: normalize_date,
    FieldType.DATETIME: normalize_datetime,
}


def normalize_value(value, type_tag):
    """Validate a raw value against a declared type, and return the normalized value.

    :param value: The raw value from the request payload.
    :param type_tag: A :class:`FieldType`, or the type as stored in the registry.
    :raises InvalidValue: When the value doesn't match, or the type is unknown.
    """
    field_type = FieldType.parse(type_tag)
    if field_type is None:
        # A schema defect, no value can ever be valid.
        raise InvalidValue(f"Unknown field type: {type_tag!r}")

    return FIELD_TYPE_NORMALIZERS[field_type](value)


def is_empty(value) -> bool:
    """Tell whether a value counts as "not given"."""
    return value is None or value == ""


def _normalize_field(field: FieldDefinition, value):
    try:
        return normalize_value(value, field.type)
    except InvalidValue as e:
        raise FieldValidationError(
            field.name,
            f"Invalid data type for field '{field.name}'. Expected {field.type}.",
            code="invalid_type",
        ) from e


def build_payload(fields: Iterable[FieldDefinition], data: Mapping) -> dict:
    """Construct the payload of a new document.

    This checks every field of the schema, fills in defaults,
    and stops at the first field that fails. Undeclared keys are dropped.
    """
    payload = {}
    for field in fields:
        value = data.get(field.name)
        if is_empty(value):
            if field.required:
                raise FieldValidationError(
                    field.name, f"Field '{field.name}' is required.", code="required"
                )
            if field.default is not None:
                payload[field.name] = field.default
        else:
            payload[field.name] = _normalize_field(field, value)

    return payload


def merge_payload(fields: Iterable[FieldDefinition], existing: Mapping, data: Mapping) -> dict:
    """Apply a partial update on an existing payload.

    Only the fields that are present in the data are validated and replaced,
    omitted fields keep their stored value.
    """
    payload = dict(existing)
    for field in fields:
        if field.name in data:
            payload[field.name] = _normalize_field(field, data[field.name])

    return payload
