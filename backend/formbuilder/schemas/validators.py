"""
Shared ``mode="before"`` checks for request schemas.

Failures raise ``PydanticCustomError`` whose type is the API error code
(``MISSING_TITLE``, ``INVALID_OPTIONS``...), so the code survives into
``ValidationError.errors()`` and reaches the client unchanged.
"""

import json
import re
from typing import Any, Dict, List, Optional

from pydantic_core import PydanticCustomError


UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE
)


def required_text(value: Any, code: str, name: str) -> str:
    """A trimmed, non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise PydanticCustomError(code, f"{name} is required and must be a non-empty string")
    return value.strip()


def optional_text(value: Any, name: str) -> Optional[str]:
    """Trim an optional string; empty becomes ``None``."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise PydanticCustomError(f"INVALID_{name.upper()}", f"{name} must be a string")
    return value.strip() or None


def uuid_text(value: Any, code: str, name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not UUID_PATTERN.match(value.strip()):
        raise PydanticCustomError(code, f"{name} must be a valid UUID")
    return value.strip().lower()


def _decode(value: Any, code: str, name: str) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            raise PydanticCustomError(code, f"{name} must be valid JSON")
    return value


def json_object(value: Any, code: str, name: str) -> Optional[Dict[str, Any]]:
    """
    Accept a plain object or a string holding one.

    ``None`` passes through as an absent value. Arrays are rejected.
    """
    if value is None:
        return None
    value = _decode(value, code, name)
    if not isinstance(value, dict):
        raise PydanticCustomError(code, f"{name} must be a JSON object")
    return value


def json_list(value: Any, code: str, name: str) -> Optional[List[Any]]:
    """Accept a list or a string holding one."""
    if value is None:
        return None
    value = _decode(value, code, name)
    if not isinstance(value, list):
        raise PydanticCustomError(code, f"{name} must be a list")
    return value
