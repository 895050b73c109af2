"""Pydantic schemas for request/response validation."""

from formbuilder.schemas.template import (
    TemplateCreate,
    TemplateUpdate,
    TemplateUse,
    TemplateResponse,
    TemplateListResponse,
)
from formbuilder.schemas.form import (
    FieldCreate,
    FieldUpdate,
    StepCreate,
    StepUpdate,
    StepTreeIn,
    FormCreate,
    FormUpdate,
    FormTreeUpdate,
    FieldResponse,
    StepResponse,
    StepTreeResponse,
    FormResponse,
    FormListResponse,
    FormTreeResponse,
    ReorderRequest,
    PublicFormResponse,
    StepValidationResponse,
    FieldDraft,
    StepDraft,
    FormDraft,
)
from formbuilder.schemas.submission import (
    SubmissionDataIn,
    AnswersIn,
    PublicSubmissionIn,
    SubmissionResponse,
    SubmissionDraftResponse,
    SubmissionExportRecord,
)
from formbuilder.schemas.ai import (
    GenerateRequest,
    FieldSuggestionRequest,
    FieldImprovementRequest,
    GeneratedForm,
    GeneratedFields,
    FieldImprovementResponse,
)

__all__ = [
    # Template
    "TemplateCreate",
    "TemplateUpdate",
    "TemplateUse",
    "TemplateResponse",
    "TemplateListResponse",
    # Form
    "FieldCreate",
    "FieldUpdate",
    "StepCreate",
    "StepUpdate",
    "StepTreeIn",
    "FormCreate",
    "FormUpdate",
    "FormTreeUpdate",
    "FieldResponse",
    "StepResponse",
    "StepTreeResponse",
    "FormResponse",
    "FormListResponse",
    "FormTreeResponse",
    "ReorderRequest",
    "PublicFormResponse",
    "StepValidationResponse",
    "FieldDraft",
    "StepDraft",
    "FormDraft",
    # Submission
    "SubmissionDataIn",
    "AnswersIn",
    "PublicSubmissionIn",
    "SubmissionResponse",
    "SubmissionDraftResponse",
    "SubmissionExportRecord",
    # AI
    "GenerateRequest",
    "FieldSuggestionRequest",
    "FieldImprovementRequest",
    "GeneratedForm",
    "GeneratedFields",
    "FieldImprovementResponse",
]
