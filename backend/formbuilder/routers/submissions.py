"""Owner-side submission router."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from formbuilder.database import get_db
from formbuilder.schemas.submission import SubmissionDataIn, SubmissionResponse
from formbuilder.services.auth import SessionContext, get_current_session
from formbuilder.services.submission import SubmissionService

router = APIRouter()


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    return SubmissionService.get_owned_submission(db, submission_id, session)


@router.put("/{submission_id}", response_model=SubmissionResponse)
async def update_submission(
    submission_id: str,
    payload: SubmissionDataIn,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Replace the ``data`` of a submission."""
    return SubmissionService.update_submission(db, submission_id, session, payload)


@router.delete("/{submission_id}")
async def delete_submission(
    submission_id: str,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_current_session)
):
    """Delete a submission."""
    SubmissionService.delete_submission(db, submission_id, session)
    return {"message": "Submission deleted successfully"}
