"""Form management router: forms, their step trees, steps and submissions."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from formbuilder.config import get_settings
from formbuilder.database import get_db
from formbuilder.schemas.form import (
    FormCreate,
    FormResponse,
    FormListResponse,
    FormTreeResponse,
    FormTreeUpdate,
    FormUpdate,
    ReorderRequest,
    StepCreate,
    StepResponse,
)
from formbuilder.schemas.submission import SubmissionDataIn, SubmissionResponse
from formbuilder.services.auth import SessionContext, get_current_session
from formbuilder.services.form import FormService
from formbuilder.services.step import StepService
from formbuilder.services.submission import SubmissionService

settings = get_settings()

router = APIRouter()


def _page_limit(limit: Optional[int]) -> int:
    return min(limit or settings.default_page_size, settings.max_page_size)


@router.get("", response_model=List[FormListResponse])
async def list_forms(
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    search: Optional[str] = None,
    is_published: Optional[bool] = None,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """
    List the caller's forms, newest first.

    Each row carries the number of submissions the form has received.
    """
    rows = FormService.get_user_forms(db, session, skip, _page_limit(limit), search, is_published)

    result = []
    for form, submission_count in rows:
        result.append(FormListResponse(
            id=form.id,
            user_id=form.user_id,
            title=form.title,
            description=form.description,
            template_id=form.template_id,
            is_published=form.is_published,
            created_at=form.created_at,
            updated_at=form.updated_at,
            submission_count=submission_count,
        ))
    return result


@router.post("", response_model=FormTreeResponse, status_code=201)
async def create_form(
    payload: FormCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Create a form; an optional ``steps`` tree is stored with it."""
    return FormService.create_form(db, session, payload)


@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Get a form by ID."""
    return FormService.get_owned_form(db, form_id, session)


@router.put("/{form_id}", response_model=FormResponse)
async def update_form(
    form_id: str,
    payload: FormUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Update form metadata."""
    return FormService.update_form(db, form_id, session, payload)


@router.delete("/{form_id}")
async def delete_form(
    form_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Delete a form with everything it owns."""
    FormService.delete_form(db, form_id, session)
    return {"message": "Form deleted successfully"}


@router.get("/{form_id}/tree", response_model=FormTreeResponse)
async def get_form_tree(
    form_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Get a form with its ordered steps and fields."""
    return FormService.get_owned_form(db, form_id, session)


@router.put("/{form_id}/tree", response_model=FormTreeResponse)
async def replace_form_tree(
    form_id: str,
    payload: FormTreeUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Save the builder: replace all steps and fields (and optionally title and description) at once."""
    return FormService.replace_tree(db, form_id, session, payload)


@router.post("/{form_id}/publish", response_model=FormResponse)
async def publish_form(
    form_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Publish a form so its public link works."""
    return FormService.set_published(db, form_id, session, True)


@router.post("/{form_id}/unpublish", response_model=FormResponse)
async def unpublish_form(
    form_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Unpublish a form."""
    return FormService.set_published(db, form_id, session, False)


@router.get("/{form_id}/steps", response_model=List[StepResponse])
async def list_steps(
    form_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """List the steps of a form in order."""
    return StepService.get_steps(db, form_id, session)


@router.post("/{form_id}/steps", response_model=StepResponse, status_code=201)
async def create_step(
    form_id: str,
    payload: StepCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Add a step; without ``order_index`` it is appended."""
    return StepService.create_step(db, form_id, session, payload)


@router.post("/{form_id}/steps/reorder", response_model=List[StepResponse])
async def reorder_steps(
    form_id: str,
    move: ReorderRequest,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Move one step and return the renumbered list."""
    return StepService.reorder_steps(db, form_id, session, move.from_index, move.to_index)


@router.get("/{form_id}/submissions", response_model=List[SubmissionResponse])
async def list_submissions(
    form_id: str,
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """List submissions of a form, newest first."""
    return SubmissionService.get_submissions(db, form_id, session, skip, _page_limit(limit))


@router.post("/{form_id}/submissions", response_model=SubmissionResponse, status_code=201)
async def create_submission(
    form_id: str,
    payload: SubmissionDataIn,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Store a label-keyed ``data`` object for a form the caller owns."""
    return SubmissionService.create_submission(db, form_id, session, payload)
