"""Coercion helpers behind ``z.coerce``.

Each helper follows the ``coerce(value) -> (value, ok)`` contract: failure
returns ``(value, False)`` and never raises, leaving the type check to
report the mismatch.
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

_TRUE = {"true", "1", "yes", "y", "on", "t"}
_FALSE = {"false", "0", "no", "n", "off", "f", ""}


def to_bool(value: Any) -> tuple[Any, bool]:
    if isinstance(value, bool):
        return value, True
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE:
            return True, True
        if text in _FALSE:
            return False, True
        return value, False
    if isinstance(value, (int, float, Decimal)) and value in (0, 1):
        return bool(value), True
    return value, False


def to_string(value: Any) -> tuple[Any, bool]:
    if isinstance(value, str):
        return value, True
    if isinstance(value, bool):
        return ("true" if value else "false"), True
    if isinstance(value, enum.Enum):
        return to_string(value.value)
    if isinstance(value, (int, float, Decimal, complex)):
        return str(value), True
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8"), True
        except UnicodeDecodeError:
            return value, False
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat(), True
    return value, False


def to_int(value: Any) -> tuple[Any, bool]:
    if isinstance(value, bool):
        return int(value), True
    if isinstance(value, int):
        return value, True
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value), True
        return value, False
    if isinstance(value, Decimal):
        if value.is_finite() and value == value.to_integral_value():
            return int(value), True
        return value, False
    if isinstance(value, str):
        text = value.strip().replace("_", "")
        try:
            return int(text, 10), True
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return value, False
        if math.isfinite(number) and number.is_integer():
            return int(number), True
    return value, False


def to_float(value: Any) -> tuple[Any, bool]:
    if isinstance(value, bool):
        return float(value), True
    if isinstance(value, (int, float, Decimal)):
        try:
            return float(value), True
        except OverflowError:
            return value, False
    if isinstance(value, str):
        try:
            return float(value.strip()), True
        except ValueError:
            return value, False
    return value, False


def to_complex(value: Any) -> tuple[Any, bool]:
    if isinstance(value, bool):
        return value, False
    if isinstance(value, (int, float, complex)):
        try:
            return complex(value), True
        except OverflowError:
            return value, False
    if isinstance(value, str):
        try:
            return complex(value.strip().replace(" ", "")), True
        except ValueError:
            return value, False
    return value, False


def to_time(value: Any) -> tuple[Any, bool]:
    """Timezone-aware datetimes; inputs without an offset are taken as UTC."""
    if isinstance(value, datetime.datetime):
        return _aware(value), True
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day, tzinfo=datetime.timezone.utc), True
    if isinstance(value, bool):
        return value, False
    if isinstance(value, (int, float)):
        try:
            return datetime.datetime.fromtimestamp(value, tz=datetime.timezone.utc), True
        except (OverflowError, OSError, ValueError):
            return value, False
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return _aware(datetime.datetime.fromisoformat(text)), True
        except ValueError:
            return value, False
    return value, False


def _aware(moment: datetime.datetime) -> datetime.datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=datetime.timezone.utc)
    return moment


def to_mapping(value: Any) -> tuple[Any, bool]:
    """Mappings and dataclass instances become plain dicts."""
    if isinstance(value, dict):
        return value, True
    if isinstance(value, Mapping):
        return dict(value), True
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}, True
    return value, False


def to_list(value: Any) -> tuple[Any, bool]:
    if isinstance(value, list):
        return value, True
    if isinstance(value, (tuple, set, frozenset)):
        return list(value), True
    return value, False
