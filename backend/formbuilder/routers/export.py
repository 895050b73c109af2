"""Submission export router."""

import re
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from formbuilder.database import get_db
from formbuilder.schemas.submission import SubmissionExportRecord
from formbuilder.services import export
from formbuilder.services.auth import SessionContext, get_current_session
from formbuilder.services.form import FormService
from formbuilder.services.submission import SubmissionService

router = APIRouter()


def _filename(title: str) -> str:
    safe_title = re.sub(r"[^a-zA-Z0-9._-]", "_", title).strip("_") or "form"
    return f"{safe_title}-submissions.csv"


@router.get("/forms/{form_id}/csv")
async def export_csv(
    form_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Download all submissions of a form as CSV, one column per answer label."""
    form = FormService.get_owned_form(db, form_id, session)
    submissions = SubmissionService.get_submissions(db, form.id, session, limit=None)
    return Response(
        content=export.to_csv(submissions),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{_filename(form.title)}"'},
    )


@router.get("/forms/{form_id}/json", response_model=List[SubmissionExportRecord])
async def export_json(
    form_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """All submissions of a form as ``{id, submitted_at, data}`` records."""
    submissions = SubmissionService.get_submissions(db, form_id, session, limit=None)
    return export.to_records(submissions)
