"""Form service for CRUD operations, publication and tree replacement."""

import logging
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from formbuilder.errors import NotFound, Forbidden
from formbuilder.models.form import Form, Step, Field
from formbuilder.models.submission import Submission
from formbuilder.models.template import Template
from formbuilder.services.auth import SessionContext
from formbuilder.schemas.form import FormCreate, FormTreeUpdate, FormUpdate
from formbuilder.services.validation import clean_form, clean_tree, parse_model, validate_uuid

logger = logging.getLogger(__name__)


class FormService:
    """Service for form operations."""

    @staticmethod
    def touch(form: Form) -> None:
        """Mark the form as modified; step and field edits count too."""
        form.updated_at = datetime.utcnow()

    @staticmethod
    def build_tree(form: Form, steps: List[Dict[str, Any]]) -> None:
        """
        Append cleaned step/field dicts to ``form``.

        List position becomes ``order_index`` so the new tree is dense.
        """
        offset = len(form.steps)
        for step_index, step_data in enumerate(steps):
            step = Step(
                title=step_data["title"],
                description=step_data.get("description"),
                order_index=offset + step_index,
            )
            for field_index, field_data in enumerate(step_data.get("fields", [])):
                step.fields.append(Field(order_index=field_index, **field_data))
            form.steps.append(step)

    @staticmethod
    def get_form(db: Session, form_id: str) -> Optional[Form]:
        """Get a form by ID."""
        form_id = validate_uuid(form_id)
        return db.query(Form).filter(Form.id == form_id).first()

    @staticmethod
    def get_owned_form(db: Session, form_id: str, session: SessionContext) -> Form:
        """Get a form the caller owns, or raise 404/403."""
        form = FormService.get_form(db, form_id)
        if not form:
            raise NotFound("FORM_NOT_FOUND", "Form not found")
        if form.user_id != session.user_id:
            raise Forbidden("NOT_AUTHORIZED", "Not authorized to access this form")
        return form

    @staticmethod
    def get_public_form(db: Session, form_id: str) -> Form:
        """
        Get a form for an anonymous respondent.

        Missing and unpublished forms raise the same error so the caller
        cannot tell them apart.
        """
        form = FormService.get_form(db, form_id)
        if not form or not form.is_published:
            raise NotFound("FORM_NOT_FOUND", "Form not found")
        return form

    @staticmethod
    def get_user_forms(
        db: Session,
        session: SessionContext,
        skip: int = 0,
        limit: int = 10,
        search: Optional[str] = None,
        is_published: Optional[bool] = None
    ) -> List[Tuple[Form, int]]:
        """Dashboard listing: the caller's forms with their submission counts."""
        counts = (
            db.query(
                Submission.form_id.label("form_id"),
                func.count(Submission.id).label("submission_count")
            )
            .group_by(Submission.form_id)
            .subquery()
        )
        query = (
            db.query(Form, func.coalesce(counts.c.submission_count, 0))
            .outerjoin(counts, counts.c.form_id == Form.id)
            .filter(Form.user_id == session.user_id)
        )
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Form.title.ilike(pattern), Form.description.ilike(pattern)))
        if is_published is not None:
            query = query.filter(Form.is_published == is_published)

        rows = query.order_by(Form.created_at.desc()).offset(skip).limit(limit).all()
        return [(form, int(count)) for form, count in rows]

    @staticmethod
    def create_form(db: Session, session: SessionContext, payload: FormCreate) -> Form:
        """
        Create a form, optionally with its whole step/field tree.

        The tree is validated before anything is added to the session.
        """
        payload = parse_model(FormCreate, payload)
        cleaned = clean_form(payload)
        steps = clean_tree(payload.steps)

        template_id = cleaned.get("template_id")
        if template_id and not db.query(Template.id).filter(Template.id == template_id).first():
            raise NotFound("TEMPLATE_NOT_FOUND", "Template not found")

        db_form = Form(user_id=session.user_id, **cleaned)
        FormService.build_tree(db_form, steps)
        db.add(db_form)
        db.commit()
        db.refresh(db_form)

        logger.info("Form %s created by %s with %d steps", db_form.id, session.user_id, len(steps))
        return db_form

    @staticmethod
    def update_form(
        db: Session,
        form_id: str,
        session: SessionContext,
        payload: FormUpdate
    ) -> Form:
        """Partially update form metadata; an explicit ``template_id: null`` detaches the template."""
        db_form = FormService.get_owned_form(db, form_id, session)
        cleaned = clean_form(payload, partial=True)

        template_id = cleaned.get("template_id")
        if template_id and not db.query(Template.id).filter(Template.id == template_id).first():
            raise NotFound("TEMPLATE_NOT_FOUND", "Template not found")

        for key, value in cleaned.items():
            setattr(db_form, key, value)
        FormService.touch(db_form)

        db.commit()
        db.refresh(db_form)
        return db_form

    @staticmethod
    def set_published(db: Session, form_id: str, session: SessionContext, published: bool) -> Form:
        """Publish or unpublish a form."""
        db_form = FormService.get_owned_form(db, form_id, session)
        db_form.is_published = published
        FormService.touch(db_form)
        db.commit()
        db.refresh(db_form)

        logger.info("Form %s %s", db_form.id, "published" if published else "unpublished")
        return db_form

    @staticmethod
    def replace_tree(
        db: Session,
        form_id: str,
        session: SessionContext,
        payload: FormTreeUpdate
    ) -> Form:
        """
        Save the builder: replace every step and field of a form in one
        transaction.

        ``title`` and ``description`` in the payload are applied in the same
        transaction. Either everything is stored or, on any failure, the form
        is left untouched.
        """
        db_form = FormService.get_owned_form(db, form_id, session)
        payload = parse_model(FormTreeUpdate, payload)
        metadata = payload.model_dump(exclude_unset=True, exclude={"steps"})
        steps = clean_tree(payload.steps)

        try:
            for key, value in metadata.items():
                setattr(db_form, key, value)
            db_form.steps = []
            db.flush()
            FormService.build_tree(db_form, steps)
            FormService.touch(db_form)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Replacing the step tree of form %s failed", form_id)
            raise

        db.refresh(db_form)
        logger.info("Form %s tree replaced with %d steps", db_form.id, len(steps))
        return db_form

    @staticmethod
    def delete_form(db: Session, form_id: str, session: SessionContext) -> None:
        """Delete a form with its steps, fields, submissions and drafts."""
        db_form = FormService.get_owned_form(db, form_id, session)
        db.delete(db_form)
        db.commit()
        logger.info("Form %s deleted by %s", form_id, session.user_id)
