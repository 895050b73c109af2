"""
Public (anonymous) router for filling published forms.

Nothing here needs a token. Unpublished and missing forms both answer
404 ``FORM_NOT_FOUND``.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from formbuilder.database import get_db
from formbuilder.models.form import Form
from formbuilder.schemas.form import (
    PublicFieldResponse,
    PublicFormResponse,
    PublicStepResponse,
    RenderResponse,
    StepValidationResponse,
)
from formbuilder.schemas.submission import (
    AnswersIn,
    PublicSubmissionIn,
    SubmissionDraftResponse,
    SubmissionResponse,
)
from formbuilder.services import ordering
from formbuilder.services.field_types import resolve_strategy
from formbuilder.services.form import FormService
from formbuilder.services.submission import SubmissionService

router = APIRouter()


def _public_form(form: Form) -> PublicFormResponse:
    steps = []
    for step in ordering.ordered(form.steps):
        fields = []
        for field in ordering.ordered(step.fields):
            spec = resolve_strategy(field)
            fields.append(PublicFieldResponse(
                id=field.id,
                type=field.type,
                label=field.label,
                placeholder=field.placeholder,
                default_value=field.default_value,
                required=field.required,
                order_index=field.order_index,
                options=list(spec.options) or None,
                render=RenderResponse(
                    strategy=spec.strategy.value,
                    input_type=spec.input_type,
                    options=list(spec.options),
                ),
            ))
        steps.append(PublicStepResponse(
            id=step.id,
            title=step.title,
            description=step.description,
            order_index=step.order_index,
            fields=fields,
        ))
    return PublicFormResponse(
        id=form.id,
        title=form.title,
        description=form.description,
        steps=steps,
    )


@router.get("/forms/{form_id}", response_model=PublicFormResponse)
async def get_public_form(form_id: str, db: Session = Depends(get_db)):
    """A published form with render hints for every field."""
    return _public_form(FormService.get_public_form(db, form_id))


@router.post("/forms/{form_id}/steps/{step_index}/validate", response_model=StepValidationResponse)
async def validate_step(
    form_id: str,
    step_index: int,
    payload: AnswersIn,
    db: Session = Depends(get_db)
):
    """
    Check the answers of one step before moving on.

    Body: ``{"answers": {<field id>: <value>}}``. Only the first invalid
    field is reported.
    """
    result = SubmissionService.validate_public_step(db, form_id, step_index, payload)
    return StepValidationResponse(
        valid=result.valid,
        step_index=step_index,
        field_id=result.field_id,
        message=result.message,
    )


@router.post("/forms/{form_id}/submissions", response_model=SubmissionResponse, status_code=201)
async def submit_form(
    form_id: str,
    payload: PublicSubmissionIn,
    db: Session = Depends(get_db)
):
    """
    Submit answers for a published form.

    Body: ``{"answers": {<field id>: <value>}, "draft_key": <optional>}``.
    """
    return SubmissionService.submit_answers(db, form_id, payload)


@router.get("/forms/{form_id}/drafts/{draft_key}", response_model=SubmissionDraftResponse)
async def get_draft(form_id: str, draft_key: str, db: Session = Depends(get_db)):
    """Restore in-progress answers."""
    return SubmissionService.get_draft(db, form_id, draft_key)


@router.put("/forms/{form_id}/drafts/{draft_key}", response_model=SubmissionDraftResponse)
async def save_draft(
    form_id: str,
    draft_key: str,
    payload: AnswersIn,
    db: Session = Depends(get_db)
):
    """Save in-progress answers; the last write wins."""
    return SubmissionService.save_draft(db, form_id, draft_key, payload)
