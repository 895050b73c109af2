"""Template management router."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from formbuilder.config import get_settings
from formbuilder.database import get_db
from formbuilder.schemas.form import FormTreeResponse
from formbuilder.schemas.template import (
    TemplateCreate,
    TemplateListResponse,
    TemplateResponse,
    TemplateUpdate,
    TemplateUse,
)
from formbuilder.services.auth import SessionContext, get_current_session
from formbuilder.services.template import TemplateService

settings = get_settings()

router = APIRouter()


@router.get("", response_model=List[TemplateListResponse])
async def list_templates(
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    search: Optional[str] = None,
    category: Optional[str] = None,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """List templates, newest first."""
    limit = min(limit or settings.default_page_size, settings.max_page_size)
    return TemplateService.get_templates(db, skip, limit, search, category)


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Get a template by ID."""
    return TemplateService.get_template(db, template_id)


@router.post("", response_model=TemplateResponse, status_code=201)
async def create_template(
    payload: TemplateCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Create a template from a ``{name, description, icon, category, config}`` body."""
    return TemplateService.create_template(db, payload)


@router.put("/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: str,
    payload: TemplateUpdate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Update a template."""
    return TemplateService.update_template(db, template_id, payload)


@router.delete("/{template_id}")
async def delete_template(
    template_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Delete a template. Forms created from it are kept."""
    TemplateService.delete_template(db, template_id)
    return {"message": "Template deleted successfully"}


@router.post("/{template_id}/use", response_model=FormTreeResponse, status_code=201)
async def use_template(
    template_id: str,
    body: Optional[TemplateUse] = None,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Create a new form for the caller from a template."""
    body = body or TemplateUse()
    return TemplateService.use_template(db, template_id, session, body.title, body.description)
