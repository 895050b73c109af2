"""
Field type dispatch for rendering and answer validation.

Every stored field carries a free-form ``type`` string. This module maps it
onto a closed set of kinds, picks the rendering strategy for the kind, and
checks an answer against the per-strategy rules:

- text, email, number, tel, url: one scalar string (single line)
- textarea: one scalar string (multi line)
- select, radio: one of the options; only non-emptiness is enforced
- checkbox with options: list of ticked options
- checkbox without options, boolean, bool: a single boolean
- date: an ISO-8601 date string that parses to a calendar date
- anything else: a plain single-line text input
"""

import json
import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple


class FieldKind(str, Enum):
    """Closed vocabulary of field types."""
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    TEL = "tel"
    URL = "url"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"
    UNKNOWN = "unknown"


class RenderStrategy(str, Enum):
    """How a field is presented to the person filling the form."""
    SINGLE_LINE = "single_line"
    MULTI_LINE = "multi_line"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX_GROUP = "checkbox_group"
    BOOLEAN = "boolean"
    DATE = "date"


LEGACY_ALIASES = {
    "boolean": FieldKind.CHECKBOX,
    "bool": FieldKind.CHECKBOX,
}

# Kinds whose definition is invalid without at least one option
CHOICE_KINDS = frozenset({FieldKind.SELECT, FieldKind.RADIO})

_SCALAR_INPUT_TYPES = {
    FieldKind.TEXT: "text",
    FieldKind.EMAIL: "email",
    FieldKind.NUMBER: "number",
    FieldKind.TEL: "tel",
    FieldKind.URL: "url",
}

AFFIRMATION_PATTERN = re.compile(
    r"^\s*(i am|i have|i agree|i accept|agree|accept|consent)",
    re.IGNORECASE
)
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PHONE_DIGITS = 7


@dataclass(frozen=True)
class RenderSpec:
    """Everything a client needs to draw one field."""
    strategy: RenderStrategy
    kind: FieldKind
    input_type: str
    label: str
    placeholder: Optional[str] = None
    required: bool = False
    options: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking one answer."""
    valid: bool
    message: Optional[str] = None
    field_id: Optional[str] = None
    label: Optional[str] = None

    @classmethod
    def ok(cls, field_id: Optional[str] = None, label: Optional[str] = None) -> "ValidationResult":
        return cls(valid=True, field_id=field_id, label=label)

    @classmethod
    def error(
        cls,
        message: str,
        field_id: Optional[str] = None,
        label: Optional[str] = None
    ) -> "ValidationResult":
        return cls(valid=False, message=message, field_id=field_id, label=label)


def _attr(field: Any, name: str, default: Any = None) -> Any:
    """Read an attribute from an ORM row, a pydantic model or a plain dict."""
    if isinstance(field, Mapping):
        return field.get(name, default)
    return getattr(field, name, default)


def classify(field_type: Optional[str]) -> FieldKind:
    """Map a stored type string onto a FieldKind."""
    key = (field_type or "").strip().lower()
    if key in LEGACY_ALIASES:
        return LEGACY_ALIASES[key]
    try:
        return FieldKind(key)
    except ValueError:
        return FieldKind.UNKNOWN


def is_affirmation_label(label: Optional[str]) -> bool:
    """True when the label reads like a single yes/no statement."""
    return bool(label) and AFFIRMATION_PATTERN.match(label) is not None


def requires_options(field_type: Optional[str]) -> bool:
    """Whether a field definition of this type must list its options."""
    return classify(field_type) in CHOICE_KINDS


def normalize_options(options: Any) -> List[str]:
    """
    Coerce stored options into an ordered list of strings.

    Accepts a list (strings or ``{label, value}`` dicts), a JSON-encoded list
    or a comma-separated string left behind by older data.
    """
    if options is None:
        return []
    if isinstance(options, str):
        text = options.strip()
        if not text:
            return []
        try:
            parsed = json.loads(text)
        except ValueError:
            return [part.strip() for part in text.split(",") if part.strip()]
        return normalize_options(parsed) if isinstance(parsed, list) else []
    if not isinstance(options, (list, tuple)):
        return []

    result = []
    for option in options:
        if isinstance(option, Mapping):
            option = option.get("label") or option.get("value")
        if option is None:
            continue
        text = str(option).strip()
        if text:
            result.append(text)
    return result


def resolve_strategy(field: Any) -> RenderSpec:
    """Pick the rendering strategy for a field definition."""
    kind = classify(_attr(field, "type"))
    label = _attr(field, "label") or ""
    options = normalize_options(_attr(field, "options"))

    if kind == FieldKind.CHECKBOX:
        strategy = RenderStrategy.CHECKBOX_GROUP if options else RenderStrategy.BOOLEAN
    elif kind == FieldKind.UNKNOWN and not options and is_affirmation_label(label):
        # Mis-tagged consent statements are still rendered as a single checkbox
        strategy = RenderStrategy.BOOLEAN
    elif kind == FieldKind.TEXTAREA:
        strategy = RenderStrategy.MULTI_LINE
    elif kind == FieldKind.SELECT:
        strategy = RenderStrategy.SELECT
    elif kind == FieldKind.RADIO:
        strategy = RenderStrategy.RADIO
    elif kind == FieldKind.DATE:
        strategy = RenderStrategy.DATE
    else:
        strategy = RenderStrategy.SINGLE_LINE

    if strategy in (RenderStrategy.BOOLEAN, RenderStrategy.CHECKBOX_GROUP):
        input_type = "checkbox"
    elif strategy == RenderStrategy.DATE:
        input_type = "date"
    elif strategy == RenderStrategy.MULTI_LINE:
        input_type = "textarea"
    elif strategy in (RenderStrategy.SELECT, RenderStrategy.RADIO):
        input_type = strategy.value
    else:
        input_type = _SCALAR_INPUT_TYPES.get(kind, "text")

    return RenderSpec(
        strategy=strategy,
        kind=kind,
        input_type=input_type,
        label=label,
        placeholder=_attr(field, "placeholder"),
        required=bool(_attr(field, "required", False)),
        options=tuple(options),
    )


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.match(value.strip()) is not None


def is_valid_phone(value: str) -> bool:
    return len(re.sub(r"\D", "", value)) >= MIN_PHONE_DIGITS


def parse_date(value: str) -> Optional[date]:
    """Parse an ISO-8601 date or datetime string; None when it is not one."""
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _as_text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def validate_value(render: RenderSpec, value: Any, field_id: Optional[str] = None) -> ValidationResult:
    """Check one answer against the rules of its rendering strategy."""
    label = render.label
    required_message = f"{label} is required"

    if render.strategy == RenderStrategy.BOOLEAN:
        if render.required and value is not True:
            return ValidationResult.error(required_message, field_id, label)
        return ValidationResult.ok(field_id, label)

    if render.strategy == RenderStrategy.CHECKBOX_GROUP:
        if render.required and (not isinstance(value, (list, tuple)) or len(value) == 0):
            return ValidationResult.error(required_message, field_id, label)
        return ValidationResult.ok(field_id, label)

    text = _as_text(value).strip()
    if not text:
        if render.required:
            return ValidationResult.error(required_message, field_id, label)
        return ValidationResult.ok(field_id, label)

    if render.kind == FieldKind.EMAIL and not is_valid_email(text):
        return ValidationResult.error("Enter a valid email", field_id, label)
    if render.kind == FieldKind.TEL and not is_valid_phone(text):
        return ValidationResult.error("Enter a valid phone", field_id, label)
    if render.strategy == RenderStrategy.DATE and parse_date(text) is None:
        return ValidationResult.error("Enter a valid date", field_id, label)

    return ValidationResult.ok(field_id, label)


def render_and_validate(field: Any, current_value: Any) -> Tuple[RenderSpec, ValidationResult]:
    """Resolve how ``field`` renders and whether ``current_value`` is acceptable."""
    render = resolve_strategy(field)
    return render, validate_value(render, current_value, field_id=_attr(field, "id"))
