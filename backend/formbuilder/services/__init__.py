"""Service layer for business logic."""

from formbuilder.services.auth import AuthService
from formbuilder.services.template import TemplateService
from formbuilder.services.form import FormService
from formbuilder.services.step import StepService
from formbuilder.services.field import FieldService
from formbuilder.services.submission import SubmissionService
from formbuilder.services.ai import AIService

__all__ = [
    "AuthService",
    "TemplateService",
    "FormService",
    "StepService",
    "FieldService",
    "SubmissionService",
    "AIService",
]
