"""Template service for reusable form blueprints."""

import logging
from typing import Optional, List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from formbuilder.errors import NotFound
from formbuilder.models.form import Form
from formbuilder.models.template import Template
from formbuilder.schemas.template import TemplateCreate, TemplateUpdate
from formbuilder.services.auth import SessionContext
from formbuilder.services.form import FormService
from formbuilder.services.validation import clean_template, clean_tree, validate_uuid

logger = logging.getLogger(__name__)


class TemplateService:
    """Service for template management and form instantiation."""

    @staticmethod
    def get_template(db: Session, template_id: str) -> Template:
        """Get a template by ID, or raise 404."""
        template_id = validate_uuid(template_id, "INVALID_TEMPLATE_ID", "template_id")
        template = db.query(Template).filter(Template.id == template_id).first()
        if not template:
            raise NotFound("TEMPLATE_NOT_FOUND", "Template not found")
        return template

    @staticmethod
    def get_templates(
        db: Session,
        skip: int = 0,
        limit: int = 10,
        search: Optional[str] = None,
        category: Optional[str] = None
    ) -> List[Template]:
        """Get templates, newest first, with optional search and category filter."""
        query = db.query(Template)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Template.name.ilike(pattern), Template.description.ilike(pattern)))
        if category:
            query = query.filter(Template.category == category.strip())
        return query.order_by(Template.created_at.desc()).offset(skip).limit(limit).all()

    @staticmethod
    def create_template(db: Session, payload: TemplateCreate) -> Template:
        """Create a template from a validated config."""
        db_template = Template(**clean_template(payload))
        db.add(db_template)
        db.commit()
        db.refresh(db_template)

        logger.info("Template %s created: %s", db_template.id, db_template.name)
        return db_template

    @staticmethod
    def update_template(db: Session, template_id: str, payload: TemplateUpdate) -> Template:
        """Partially update a template; forms made from it are not affected."""
        db_template = TemplateService.get_template(db, template_id)
        for key, value in clean_template(payload, partial=True).items():
            setattr(db_template, key, value)

        db.commit()
        db.refresh(db_template)
        return db_template

    @staticmethod
    def delete_template(db: Session, template_id: str) -> None:
        """Delete a template; forms keep existing with ``template_id`` cleared."""
        db_template = TemplateService.get_template(db, template_id)
        orphaned = len(db_template.forms)
        db.delete(db_template)
        db.commit()
        logger.info("Template %s deleted, %d forms detached", template_id, orphaned)

    @staticmethod
    def use_template(
        db: Session,
        template_id: str,
        session: SessionContext,
        title: Optional[str] = None,
        description: Optional[str] = None
    ) -> Form:
        """
        Create a form owned by the caller from a template.

        Steps and fields are copied in blueprint order; the form keeps only a
        pointer back to the template.
        """
        db_template = TemplateService.get_template(db, template_id)
        steps = clean_tree(db_template.steps)

        db_form = Form(
            user_id=session.user_id,
            title=title or db_template.name,
            description=description or db_template.description,
            template_id=db_template.id,
        )
        FormService.build_tree(db_form, steps)
        db.add(db_form)
        db.commit()
        db.refresh(db_form)

        logger.info("Form %s created from template %s", db_form.id, db_template.id)
        return db_form
