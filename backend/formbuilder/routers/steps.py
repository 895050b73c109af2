"""Step router: step edits and the fields of one step."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from formbuilder.database import get_db
from formbuilder.schemas.form import FieldCreate, FieldResponse, ReorderRequest, StepResponse, StepUpdate
from formbuilder.services.auth import SessionContext, get_current_session
from formbuilder.services.field import FieldService
from formbuilder.services.step import StepService

router = APIRouter()


@router.put("/{step_id}", response_model=StepResponse)
async def update_step(
    step_id: str,
    payload: StepUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Update a step; a new ``order_index`` moves it among its siblings."""
    return StepService.update_step(db, step_id, session, payload)


@router.delete("/{step_id}")
async def delete_step(
    step_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Delete a step and its fields."""
    StepService.delete_step(db, step_id, session)
    return {"message": "Step deleted successfully"}


@router.get("/{step_id}/fields", response_model=List[FieldResponse])
async def list_fields(
    step_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    return FieldService.get_fields(db, step_id, session)


@router.post("/{step_id}/fields", response_model=FieldResponse, status_code=201)
async def create_field(
    step_id: str,
    payload: FieldCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Add a field; without ``order_index`` it is appended."""
    return FieldService.create_field(db, step_id, session, payload)


@router.post("/{step_id}/fields/reorder", response_model=List[FieldResponse])
async def reorder_fields(
    step_id: str,
    move: ReorderRequest,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Move one field and return the renumbered list."""
    return FieldService.reorder_fields(db, step_id, session, move.from_index, move.to_index)
