"""Field router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from formbuilder.database import get_db
from formbuilder.schemas.form import FieldResponse, FieldUpdate
from formbuilder.services.auth import SessionContext, get_current_session
from formbuilder.services.field import FieldService

router = APIRouter()


@router.put("/{field_id}", response_model=FieldResponse)
async def update_field(
    field_id: str,
    payload: FieldUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Update a field definition."""
    return FieldService.update_field(db, field_id, session, payload)


@router.delete("/{field_id}")
async def delete_field(
    field_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    FieldService.delete_field(db, field_id, session)
    return {"message": "Field deleted successfully"}
