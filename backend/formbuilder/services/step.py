"""Step service: CRUD and ordering of the steps of one form."""

from typing import List

from sqlalchemy.orm import Session

from formbuilder.errors import NotFound, Forbidden
from formbuilder.models.form import Step
from formbuilder.schemas.form import StepCreate, StepUpdate
from formbuilder.services import ordering
from formbuilder.services.auth import SessionContext
from formbuilder.services.form import FormService
from formbuilder.services.validation import clean_step, validate_uuid


class StepService:
    """Service for step operations."""

    @staticmethod
    def get_owned_step(db: Session, step_id: str, session: SessionContext) -> Step:
        step_id = validate_uuid(step_id)
        step = db.query(Step).filter(Step.id == step_id).first()
        if not step:
            raise NotFound("STEP_NOT_FOUND", "Step not found")
        if step.form.user_id != session.user_id:
            raise Forbidden("NOT_AUTHORIZED", "Not authorized to access this step")
        return step

    @staticmethod
    def get_steps(db: Session, form_id: str, session: SessionContext) -> List[Step]:
        """Steps of a form in display order."""
        form = FormService.get_owned_form(db, form_id, session)
        return ordering.ordered(form.steps)

    @staticmethod
    def create_step(
        db: Session,
        form_id: str,
        session: SessionContext,
        payload: StepCreate
    ) -> Step:
        """Append a step, or insert it at ``order_index`` shifting later ones."""
        form = FormService.get_owned_form(db, form_id, session)
        cleaned = clean_step(payload)
        index = cleaned.pop("order_index", None)

        step = Step(**cleaned)
        ordering.insert(form.steps, step, index)
        form.steps.append(step)
        FormService.touch(form)

        db.commit()
        db.refresh(step)
        return step

    @staticmethod
    def update_step(
        db: Session,
        step_id: str,
        session: SessionContext,
        payload: StepUpdate
    ) -> Step:
        """Partially update a step; a new ``order_index`` moves it."""
        step = StepService.get_owned_step(db, step_id, session)
        cleaned = clean_step(payload, partial=True)
        index = cleaned.pop("order_index", None)

        for key, value in cleaned.items():
            setattr(step, key, value)
        if index is not None:
            ordering.move_item(step.form.steps, step, index)
        FormService.touch(step.form)

        db.commit()
        db.refresh(step)
        return step

    @staticmethod
    def reorder_steps(
        db: Session,
        form_id: str,
        session: SessionContext,
        from_index: int,
        to_index: int
    ) -> List[Step]:
        """Move the step at ``from_index`` to ``to_index``; all ranks rewritten in one commit."""
        form = FormService.get_owned_form(db, form_id, session)
        steps = ordering.move(form.steps, from_index, to_index)
        FormService.touch(form)
        db.commit()
        return steps

    @staticmethod
    def delete_step(db: Session, step_id: str, session: SessionContext) -> None:
        """Delete a step with its fields and compact the remaining steps."""
        step = StepService.get_owned_step(db, step_id, session)
        form = step.form
        ordering.remove(form.steps, step)
        form.steps.remove(step)
        FormService.touch(form)
        db.commit()
