"""AI generation request/response schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field

from formbuilder.schemas.form import FieldDraft, FormDraft


class GenerateRequest(BaseModel):
    """Free-text description of the wanted form or fields."""
    prompt: str = Field(..., min_length=1, max_length=4000)


class FieldSuggestionRequest(BaseModel):
    """Context for suggesting extra fields on an existing form."""
    form_title: str = ""
    form_description: str = ""
    existing_fields: List[str] = Field(default_factory=list, description="Labels already on the form")


class FieldImprovementRequest(BaseModel):
    """A single field to get improvement hints for."""
    field_label: str = Field(..., min_length=1)
    field_type: str = "text"


class GeneratedForm(BaseModel):
    """Whole-form generation result."""
    form: FormDraft
    used_fallback: bool


class GeneratedFields(BaseModel):
    """Quick field generation or suggestion result."""
    fields: List[FieldDraft]
    used_fallback: bool


class FieldImprovement(BaseModel):
    type: str
    message: str


class FieldImprovementResponse(BaseModel):
    suggestions: List[FieldImprovement] = []
    used_fallback: Optional[bool] = None
