"""Field service: CRUD and ordering of the fields of one step."""

from typing import List

from sqlalchemy.orm import Session

from formbuilder.errors import NotFound, Forbidden
from formbuilder.models.form import Field
from formbuilder.schemas.form import FieldCreate, FieldUpdate
from formbuilder.services import ordering
from formbuilder.services.auth import SessionContext
from formbuilder.services.form import FormService
from formbuilder.services.step import StepService
from formbuilder.services.validation import check_field_options, clean_field, validate_uuid


class FieldService:
    """Service for field operations."""

    @staticmethod
    def get_owned_field(db: Session, field_id: str, session: SessionContext) -> Field:
        field_id = validate_uuid(field_id)
        field = db.query(Field).filter(Field.id == field_id).first()
        if not field:
            raise NotFound("FIELD_NOT_FOUND", "Field not found")
        if field.step.form.user_id != session.user_id:
            raise Forbidden("NOT_AUTHORIZED", "Not authorized to access this field")
        return field

    @staticmethod
    def get_fields(db: Session, step_id: str, session: SessionContext) -> List[Field]:
        step = StepService.get_owned_step(db, step_id, session)
        return ordering.ordered(step.fields)

    @staticmethod
    def create_field(
        db: Session,
        step_id: str,
        session: SessionContext,
        payload: FieldCreate
    ) -> Field:
        """Append a field, or insert it at ``order_index`` shifting later ones."""
        step = StepService.get_owned_step(db, step_id, session)
        cleaned = clean_field(payload)
        index = cleaned.pop("order_index", None)

        field = Field(**cleaned)
        ordering.insert(step.fields, field, index)
        step.fields.append(field)
        FormService.touch(step.form)

        db.commit()
        db.refresh(field)
        return field

    @staticmethod
    def update_field(
        db: Session,
        field_id: str,
        session: SessionContext,
        payload: FieldUpdate
    ) -> Field:
        """
        Partially update a field.

        The option rule is checked against the merged definition, so
        switching a text field to ``select`` needs options in the same call.
        """
        field = FieldService.get_owned_field(db, field_id, session)
        cleaned = clean_field(payload, partial=True)
        index = cleaned.pop("order_index", None)

        check_field_options(
            cleaned.get("type", field.type),
            cleaned["options"] if "options" in cleaned else field.options,
        )

        for key, value in cleaned.items():
            setattr(field, key, value)
        if index is not None:
            ordering.move_item(field.step.fields, field, index)
        FormService.touch(field.step.form)

        db.commit()
        db.refresh(field)
        return field

    @staticmethod
    def reorder_fields(
        db: Session,
        step_id: str,
        session: SessionContext,
        from_index: int,
        to_index: int
    ) -> List[Field]:
        step = StepService.get_owned_step(db, step_id, session)
        fields = ordering.move(step.fields, from_index, to_index)
        FormService.touch(step.form)
        db.commit()
        return fields

    @staticmethod
    def delete_field(db: Session, field_id: str, session: SessionContext) -> None:
        """Delete a field and compact its siblings."""
        field = FieldService.get_owned_field(db, field_id, session)
        step = field.step
        ordering.remove(step.fields, field)
        step.fields.remove(field)
        FormService.touch(step.form)
        db.commit()
