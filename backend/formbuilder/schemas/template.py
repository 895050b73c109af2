"""Template-related Pydantic schemas."""

from datetime import datetime
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from formbuilder.schemas.form import StepTreeIn
from formbuilder.schemas.validators import json_object, optional_text, required_text


class TemplateConfig(BaseModel):
    """A form-shaped blueprint; keys other than ``steps`` are kept as given."""
    model_config = ConfigDict(extra="allow")

    steps: List[StepTreeIn] = []

    @field_validator("steps", mode="before")
    @classmethod
    def _steps(cls, value):
        if value is None:
            return []
        if not isinstance(value, list):
            raise PydanticCustomError("INVALID_CONFIG", "config.steps must be a list")
        return value


def _parse_config(value):
    if value is None:
        raise PydanticCustomError("MISSING_CONFIG", "config is required")
    return json_object(value, "INVALID_CONFIG", "config")


class TemplateAttributes(BaseModel):
    description: Optional[str] = None
    icon: Optional[str] = None
    category: Optional[str] = None

    @field_validator("description", "icon", "category", mode="before")
    @classmethod
    def _trim(cls, value, info):
        return optional_text(value, info.field_name)


class TemplateCreate(TemplateAttributes):
    """Schema for creating a template."""
    name: str = Field(..., max_length=255)
    config: TemplateConfig

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value):
        return required_text(value, "MISSING_NAME", "name")

    @field_validator("config", mode="before")
    @classmethod
    def _config(cls, value):
        return _parse_config(value)


class TemplateUpdate(TemplateAttributes):
    """Schema for a partial template update."""
    name: Optional[str] = Field(None, max_length=255)
    config: Optional[TemplateConfig] = None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value):
        return required_text(value, "INVALID_NAME", "name")

    @field_validator("config", mode="before")
    @classmethod
    def _config(cls, value):
        return _parse_config(value)


class TemplateUse(BaseModel):
    """Schema for creating a form from a template."""
    title: Optional[str] = Field(None, max_length=512, description="Defaults to the template name")
    description: Optional[str] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def _trim(cls, value, info):
        return optional_text(value, info.field_name)


class TemplateResponse(BaseModel):
    """Schema for template responses."""
    id: str
    name: str
    description: Optional[str]
    icon: Optional[str]
    category: Optional[str]
    config: Dict[str, Any]
    created_at: datetime

    class Config:
        from_attributes = True


class TemplateListResponse(BaseModel):
    """Schema for template list responses."""
    id: str
    name: str
    description: Optional[str]
    icon: Optional[str]
    category: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
