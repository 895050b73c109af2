"""
Input validation for every entity write.

Request bodies are parsed by the Pydantic schemas in ``formbuilder.schemas``.
Their field validators raise errors typed with the API error code; this
module turns the first error of a ``ValidationError`` (or of FastAPI's
``RequestValidationError``) into ``ValidationFailed``, so every rejected
write answers ``{"error", "code"}`` with status 400.

The ``clean_*`` helpers accept a parsed schema or a raw dict (seed data,
stored template configs) and return a dict keyed by model attribute names.
"""

from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from formbuilder.errors import ValidationFailed
from formbuilder.schemas.form import (
    FieldCreate,
    FieldUpdate,
    FormCreate,
    FormUpdate,
    StepCreate,
    StepTreeIn,
    StepUpdate,
)
from formbuilder.schemas.submission import AnswersIn, SubmissionDataIn
from formbuilder.schemas.template import TemplateCreate, TemplateUpdate
from formbuilder.schemas.validators import UUID_PATTERN
from formbuilder.services.field_types import normalize_options, requires_options

M = TypeVar("M", bound=BaseModel)

# Error locations FastAPI prepends to request parameters
REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}

# Attributes whose generic INVALID_<NAME> code reads differently in the API
INVALID_CODES = {
    "required": "INVALID_REQUIRED_FIELD",
    "data": "INVALID_DATA_FORMAT",
}

_STEP_TREE = TypeAdapter(List[StepTreeIn])


def validation_failure(errors: Sequence[Dict[str, Any]]) -> ValidationFailed:
    """Map the first Pydantic error to a ``ValidationFailed`` with a stable code."""
    error = errors[0]
    if error["type"].isupper():
        return ValidationFailed(error["type"], error["msg"])

    names = [
        part for part in error.get("loc", ())
        if isinstance(part, str) and part not in REQUEST_LOCATIONS
    ]
    if not names:
        return ValidationFailed("INVALID_BODY", "Request body must be a JSON object")

    name = names[-1]
    if error["type"] == "missing":
        return ValidationFailed(f"MISSING_{name.upper()}", f"{name} is required")
    code = INVALID_CODES.get(name, f"INVALID_{name.upper()}")
    return ValidationFailed(code, f"{name}: {error['msg']}")


def parse_model(model: Type[M], payload: Any) -> M:
    """Validate ``payload`` against ``model``; parsed instances pass through."""
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise validation_failure(exc.errors())


def validate_uuid(value: Any, code: str = "INVALID_UUID", name: str = "id") -> str:
    """Reject identifiers that are not canonical UUID text."""
    if not isinstance(value, str) or not UUID_PATTERN.match(value.strip()):
        raise ValidationFailed(code, f"{name} must be a valid UUID")
    return value.strip().lower()


def check_field_options(field_type: str, options: Optional[List[str]]) -> None:
    """Select and radio definitions need at least one option."""
    if requires_options(field_type) and not options:
        raise ValidationFailed(
            "INVALID_OPTIONS",
            f"options must be a non-empty list for {field_type} fields"
        )


def clean_form(payload: Any, partial: bool = False) -> Dict[str, Any]:
    """Form metadata (title, description, template, publication)."""
    form = parse_model(FormUpdate if partial else FormCreate, payload)
    return form.model_dump(exclude_unset=partial, exclude={"steps"})


def clean_step(payload: Any, partial: bool = False) -> Dict[str, Any]:
    """Step attributes; ``order_index`` stays optional (append)."""
    step = parse_model(StepUpdate if partial else StepCreate, payload)
    attrs = step.model_dump(exclude_unset=partial)
    if attrs.get("order_index") is None:
        attrs.pop("order_index", None)
    return attrs


def clean_field(payload: Any, partial: bool = False) -> Dict[str, Any]:
    """
    Field attributes with options normalised to a list of strings.

    On create the option rule is checked here; on update the caller checks it
    against the merged definition with ``check_field_options``.
    """
    field = parse_model(FieldUpdate if partial else FieldCreate, payload)
    attrs = field.model_dump(exclude_unset=partial)
    if attrs.get("order_index") is None:
        attrs.pop("order_index", None)
    if attrs.get("options") is not None:
        attrs["options"] = normalize_options(attrs["options"])
    if not partial:
        check_field_options(attrs["type"], attrs.get("options"))
    return attrs


def clean_tree(steps: Any) -> List[Dict[str, Any]]:
    """
    A nested ``[{title, description, fields: [...]}, ...]`` tree.

    Explicit ``order_index`` values are dropped; list position is the order.
    """
    if not isinstance(steps, list):
        raise ValidationFailed("INVALID_STEPS", "steps must be a list")
    if not all(isinstance(step, StepTreeIn) for step in steps):
        try:
            steps = _STEP_TREE.validate_python(steps)
        except ValidationError as exc:
            raise validation_failure(exc.errors())

    tree = []
    for step in steps:
        attrs = step.model_dump(exclude={"fields"})
        attrs["fields"] = []
        for field in step.fields:
            field_attrs = clean_field(field)
            field_attrs.pop("order_index", None)
            attrs["fields"].append(field_attrs)
        tree.append(attrs)
    return tree


def clean_template(payload: Any, partial: bool = False) -> Dict[str, Any]:
    """Template attributes with the config tree validated like a form tree."""
    template = parse_model(TemplateUpdate if partial else TemplateCreate, payload)
    attrs = template.model_dump(exclude_unset=partial, exclude={"config"})
    if template.config is not None:
        config = template.config.model_dump(exclude={"steps"})
        config["steps"] = clean_tree(template.config.steps)
        attrs["config"] = config
    return attrs


def clean_submission_data(payload: Any) -> Dict[str, Any]:
    """Submission data must be a non-empty JSON object."""
    return parse_model(SubmissionDataIn, payload).data


def clean_answers(payload: Any) -> Dict[str, Any]:
    """In-progress answers: a field-id keyed object, possibly empty."""
    return parse_model(AnswersIn, payload).answers
