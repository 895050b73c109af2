"""Submission Pydantic schemas."""

from datetime import datetime
from typing import Optional, Dict, Any

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from formbuilder.schemas.validators import json_object

SCALAR_ANSWER_TYPES = (str, bool, int, float)


class SubmissionDataIn(BaseModel):
    """Label-keyed submission data written by the form owner."""
    data: Dict[str, Any]

    @field_validator("data", mode="before")
    @classmethod
    def _data(cls, value):
        if value is None:
            raise PydanticCustomError("MISSING_DATA", "data is required")
        data = json_object(value, "INVALID_DATA_FORMAT", "data")
        if not data:
            raise PydanticCustomError("EMPTY_DATA", "data must not be empty")
        return data


class AnswersIn(BaseModel):
    """
    In-progress answers keyed by field id.

    A value is text, a boolean, a number or a list of such scalars
    (checkbox groups); ``null`` means unanswered.
    """
    answers: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("answers", mode="before")
    @classmethod
    def _answers(cls, value):
        answers = json_object(value, "INVALID_ANSWERS", "answers") or {}
        for field_id, answer in answers.items():
            if answer is None or isinstance(answer, SCALAR_ANSWER_TYPES):
                continue
            if isinstance(answer, list) and all(isinstance(item, SCALAR_ANSWER_TYPES) for item in answer):
                continue
            raise PydanticCustomError(
                "INVALID_ANSWERS",
                f"answer for {field_id} must be text, a boolean, a number or a list of those"
            )
        return answers


class PublicSubmissionIn(AnswersIn):
    """Final answers; ``draft_key`` names the draft to discard once stored."""
    draft_key: Optional[str] = None


class SubmissionResponse(BaseModel):
    """Schema for submission responses."""
    id: str
    form_id: str
    data: Dict[str, Any]
    submitted_at: datetime

    class Config:
        from_attributes = True


class SubmissionDraftResponse(BaseModel):
    """In-progress answers for one respondent."""
    form_id: str
    draft_key: str
    answers: Dict[str, Any]
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubmissionExportRecord(BaseModel):
    """One row of the structured export."""
    id: str
    submitted_at: datetime
    data: Dict[str, Any]
