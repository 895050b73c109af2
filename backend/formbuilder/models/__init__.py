"""SQLAlchemy models for the form builder."""

from formbuilder.models.template import Template
from formbuilder.models.form import Form, Step, Field
from formbuilder.models.submission import Submission, SubmissionDraft

__all__ = [
    "Template",
    "Form",
    "Step",
    "Field",
    "Submission",
    "SubmissionDraft",
]
