"""Form, step and field Pydantic schemas."""

from datetime import datetime
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, Field as PydanticField, StrictBool, StrictInt, field_validator

from formbuilder.schemas.validators import (
    json_list,
    json_object,
    optional_text,
    required_text,
    uuid_text,
)


class FieldAttributes(BaseModel):
    """Optional field attributes shared by create and update bodies."""
    placeholder: Optional[str] = None
    default_value: Optional[str] = None
    required: StrictBool = False
    order_index: Optional[StrictInt] = PydanticField(None, ge=0)
    validation_rules: Optional[Dict[str, Any]] = None
    conditional_logic: Optional[Dict[str, Any]] = None
    options: Optional[List[Any]] = PydanticField(
        None, description="Ordered choices; strings or {label, value} objects"
    )

    @field_validator("placeholder", "default_value", mode="before")
    @classmethod
    def _trim(cls, value, info):
        return optional_text(value, info.field_name)

    @field_validator("validation_rules", "conditional_logic", mode="before")
    @classmethod
    def _json_object(cls, value, info):
        return json_object(value, f"INVALID_{info.field_name.upper()}", info.field_name)

    @field_validator("options", mode="before")
    @classmethod
    def _options(cls, value):
        return json_list(value, "INVALID_OPTIONS", "options")


class FieldCreate(FieldAttributes):
    """Schema for creating a field; also one field of a step tree."""
    type: str = PydanticField(..., max_length=64)
    label: str = PydanticField(..., max_length=512)

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, value):
        return required_text(value, "MISSING_TYPE", "type").lower()

    @field_validator("label", mode="before")
    @classmethod
    def _label(cls, value):
        return required_text(value, "MISSING_LABEL", "label")


class FieldUpdate(FieldAttributes):
    """Schema for a partial field update."""
    type: Optional[str] = PydanticField(None, max_length=64)
    label: Optional[str] = PydanticField(None, max_length=512)

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, value):
        return required_text(value, "INVALID_TYPE", "type").lower()

    @field_validator("label", mode="before")
    @classmethod
    def _label(cls, value):
        return required_text(value, "INVALID_LABEL", "label")


class StepCreate(BaseModel):
    """Schema for adding a step; without ``order_index`` it is appended."""
    title: str = PydanticField(..., max_length=512)
    description: Optional[str] = None
    order_index: Optional[StrictInt] = PydanticField(None, ge=0)

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value):
        return required_text(value, "MISSING_TITLE", "title")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value):
        return optional_text(value, "description")


class StepUpdate(StepCreate):
    """Schema for a partial step update; a new ``order_index`` moves it."""
    title: Optional[str] = PydanticField(None, max_length=512)

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value):
        return required_text(value, "INVALID_TITLE", "title")


class StepTreeIn(BaseModel):
    """One step of a nested tree; list position is its order."""
    title: str = PydanticField(..., max_length=512)
    description: Optional[str] = None
    fields: List[FieldCreate] = []

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value):
        return required_text(value, "MISSING_TITLE", "title")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value):
        return optional_text(value, "description")

    @field_validator("fields", mode="before")
    @classmethod
    def _fields(cls, value):
        return [] if value is None else value


class FormMetadata(BaseModel):
    """Optional form metadata shared by the write bodies."""
    description: Optional[str] = None

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value):
        return optional_text(value, "description")


class FormCreate(FormMetadata):
    """Schema for creating a form, optionally with its whole tree."""
    title: str = PydanticField(..., max_length=512)
    template_id: Optional[str] = None
    is_published: StrictBool = False
    steps: List[StepTreeIn] = []

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value):
        return required_text(value, "MISSING_TITLE", "title")

    @field_validator("template_id", mode="before")
    @classmethod
    def _template_id(cls, value):
        return uuid_text(value, "INVALID_TEMPLATE_ID", "template_id")

    @field_validator("steps", mode="before")
    @classmethod
    def _steps(cls, value):
        return [] if value is None else value


class FormUpdate(FormMetadata):
    """Schema for a partial metadata update; ``template_id: null`` detaches the template."""
    title: Optional[str] = PydanticField(None, max_length=512)
    template_id: Optional[str] = None
    is_published: StrictBool = False

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value):
        return required_text(value, "INVALID_TITLE", "title")

    @field_validator("template_id", mode="before")
    @classmethod
    def _template_id(cls, value):
        return uuid_text(value, "INVALID_TEMPLATE_ID", "template_id")


class FormTreeUpdate(FormMetadata):
    """Builder save: the complete step tree plus optional title and description."""
    title: Optional[str] = PydanticField(None, max_length=512)
    steps: List[StepTreeIn] = []

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value):
        return required_text(value, "INVALID_TITLE", "title")

    @field_validator("steps", mode="before")
    @classmethod
    def _steps(cls, value):
        return [] if value is None else value


class FieldResponse(BaseModel):
    """Schema for field responses."""
    id: str
    step_id: str
    type: str
    label: str
    placeholder: Optional[str]
    default_value: Optional[str]
    required: bool
    order_index: int
    validation_rules: Optional[Dict[str, Any]]
    conditional_logic: Optional[Dict[str, Any]]
    options: Optional[List[str]]
    created_at: datetime

    class Config:
        from_attributes = True


class StepResponse(BaseModel):
    """Schema for step responses."""
    id: str
    form_id: str
    title: str
    description: Optional[str]
    order_index: int
    created_at: datetime

    class Config:
        from_attributes = True


class StepTreeResponse(StepResponse):
    """A step together with its ordered fields."""
    fields: List[FieldResponse] = []


class FormResponse(BaseModel):
    """Schema for form responses."""
    id: str
    user_id: str
    title: str
    description: Optional[str]
    template_id: Optional[str]
    is_published: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FormListResponse(FormResponse):
    """Dashboard row: a form plus its response count."""
    submission_count: int = 0


class FormTreeResponse(FormResponse):
    """A form with its full ordered step/field tree."""
    steps: List[StepTreeResponse] = []


class ReorderRequest(BaseModel):
    """Drag-and-drop move inside one sibling collection."""
    from_index: int
    to_index: int


class RenderResponse(BaseModel):
    """How the public filler should draw one field."""
    strategy: str
    input_type: str
    options: List[str] = []


class PublicFieldResponse(BaseModel):
    """A field as seen by an anonymous respondent."""
    id: str
    type: str
    label: str
    placeholder: Optional[str]
    default_value: Optional[str]
    required: bool
    order_index: int
    options: Optional[List[str]]
    render: RenderResponse


class PublicStepResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    order_index: int
    fields: List[PublicFieldResponse] = []


class PublicFormResponse(BaseModel):
    """A published form prepared for filling."""
    id: str
    title: str
    description: Optional[str]
    steps: List[PublicStepResponse] = []


class StepValidationResponse(BaseModel):
    """Outcome of the gate before moving to the next step."""
    valid: bool
    step_index: int
    field_id: Optional[str] = None
    message: Optional[str] = None


class FieldDraft(BaseModel):
    """An unpersisted field produced by a generator."""
    id: str
    type: str
    label: str
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    order_index: int = 0


class StepDraft(BaseModel):
    """An unpersisted step produced by a generator."""
    id: str
    title: str
    description: Optional[str] = None
    order_index: int = 0
    fields: List[FieldDraft] = []


class FormDraft(BaseModel):
    """An unpersisted form tree produced by a generator."""
    title: str
    description: Optional[str] = None
    steps: List[StepDraft] = PydanticField(default_factory=list)
