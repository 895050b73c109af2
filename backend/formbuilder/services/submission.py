"""Submission service: public submit, owner-side CRUD and answer drafts."""

import logging
from typing import Optional, List, Any

from sqlalchemy.orm import Session

from formbuilder.errors import NotFound, Forbidden, ValidationFailed
from formbuilder.models.submission import Submission, SubmissionDraft
from formbuilder.schemas.submission import AnswersIn, PublicSubmissionIn, SubmissionDataIn
from formbuilder.services.auth import SessionContext
from formbuilder.services.field_types import ValidationResult
from formbuilder.services.filling import FillSession
from formbuilder.services.form import FormService
from formbuilder.services.validation import clean_answers, clean_submission_data, parse_model, validate_uuid

logger = logging.getLogger(__name__)

MAX_DRAFT_KEY_LENGTH = 128


def _clean_draft_key(draft_key: Any) -> str:
    if not isinstance(draft_key, str) or not draft_key.strip():
        raise ValidationFailed("INVALID_DRAFT_KEY", "draft_key must be a non-empty string")
    draft_key = draft_key.strip()
    if len(draft_key) > MAX_DRAFT_KEY_LENGTH:
        raise ValidationFailed(
            "INVALID_DRAFT_KEY",
            f"draft_key must be at most {MAX_DRAFT_KEY_LENGTH} characters"
        )
    return draft_key


class SubmissionService:
    """Service for submission operations."""

    @staticmethod
    def submit_answers(db: Session, form_id: str, payload: PublicSubmissionIn) -> Submission:
        """
        Accept a respondent's answers for a published form.

        Every step is validated in order and the first invalid answer aborts
        the submit. A ``draft_key`` in the payload removes that draft once the
        submission is stored.
        """
        form = FormService.get_public_form(db, form_id)
        payload = parse_model(PublicSubmissionIn, payload)
        answers = payload.answers
        draft_key = payload.draft_key
        if draft_key is not None:
            draft_key = _clean_draft_key(draft_key)

        data = FillSession(form.steps, answers).submit_all()

        submission = Submission(form_id=form.id, data=data)
        db.add(submission)
        if draft_key:
            db.query(SubmissionDraft).filter(
                SubmissionDraft.form_id == form.id,
                SubmissionDraft.draft_key == draft_key
            ).delete(synchronize_session=False)
        db.commit()
        db.refresh(submission)

        logger.info("Submission %s stored for form %s", submission.id, form.id)
        return submission

    @staticmethod
    def validate_public_step(
        db: Session,
        form_id: str,
        step_index: int,
        payload: AnswersIn
    ) -> ValidationResult:
        """The gate a respondent passes before moving past ``step_index``."""
        form = FormService.get_public_form(db, form_id)
        return FillSession(form.steps, clean_answers(payload)).validate_step(step_index)

    @staticmethod
    def get_submissions(
        db: Session,
        form_id: str,
        session: SessionContext,
        skip: int = 0,
        limit: Optional[int] = 10
    ) -> List[Submission]:
        """Submissions of an owned form, newest first."""
        form = FormService.get_owned_form(db, form_id, session)
        query = (
            db.query(Submission)
            .filter(Submission.form_id == form.id)
            .order_by(Submission.submitted_at.desc(), Submission.id)
            .offset(skip)
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def get_owned_submission(db: Session, submission_id: str, session: SessionContext) -> Submission:
        submission_id = validate_uuid(submission_id)
        submission = db.query(Submission).filter(Submission.id == submission_id).first()
        if not submission:
            raise NotFound("SUBMISSION_NOT_FOUND", "Submission not found")
        if submission.form.user_id != session.user_id:
            raise Forbidden("NOT_AUTHORIZED", "Not authorized to access this submission")
        return submission

    @staticmethod
    def create_submission(
        db: Session,
        form_id: str,
        session: SessionContext,
        payload: SubmissionDataIn
    ) -> Submission:
        """Store label-keyed data directly, e.g. when importing responses."""
        form = FormService.get_owned_form(db, form_id, session)
        submission = Submission(form_id=form.id, data=clean_submission_data(payload))
        db.add(submission)
        db.commit()
        db.refresh(submission)
        return submission

    @staticmethod
    def update_submission(
        db: Session,
        submission_id: str,
        session: SessionContext,
        payload: SubmissionDataIn
    ) -> Submission:
        """Replace the whole ``data`` object of a submission."""
        submission = SubmissionService.get_owned_submission(db, submission_id, session)
        submission.data = clean_submission_data(payload)
        db.commit()
        db.refresh(submission)
        return submission

    @staticmethod
    def delete_submission(db: Session, submission_id: str, session: SessionContext) -> None:
        submission = SubmissionService.get_owned_submission(db, submission_id, session)
        db.delete(submission)
        db.commit()

    @staticmethod
    def get_draft(db: Session, form_id: str, draft_key: str) -> SubmissionDraft:
        """In-progress answers saved under ``draft_key``."""
        form = FormService.get_public_form(db, form_id)
        draft = db.query(SubmissionDraft).filter(
            SubmissionDraft.form_id == form.id,
            SubmissionDraft.draft_key == _clean_draft_key(draft_key)
        ).first()
        if not draft:
            raise NotFound("DRAFT_NOT_FOUND", "Draft not found")
        return draft

    @staticmethod
    def save_draft(db: Session, form_id: str, draft_key: str, payload: AnswersIn) -> SubmissionDraft:
        """Store in-progress answers; the last write wins."""
        form = FormService.get_public_form(db, form_id)
        draft_key = _clean_draft_key(draft_key)
        answers = clean_answers(payload)

        draft = db.query(SubmissionDraft).filter(
            SubmissionDraft.form_id == form.id,
            SubmissionDraft.draft_key == draft_key
        ).first()
        if draft:
            draft.answers = answers
        else:
            draft = SubmissionDraft(form_id=form.id, draft_key=draft_key, answers=answers)
            db.add(draft)

        db.commit()
        db.refresh(draft)
        return draft
