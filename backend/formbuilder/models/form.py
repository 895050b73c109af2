"""Form, step and field models."""

import uuid
from datetime import datetime
from typing import Optional, List, Dict, Any

from sqlalchemy import String, Text, DateTime, ForeignKey, JSON, Boolean, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formbuilder.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Form(Base):
    """
    Form represents a user-owned, publishable container of ordered steps.

    A form exclusively owns its steps (and through them the fields) and its
    submissions; deleting the form deletes all of them.
    """

    __tablename__ = "forms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    # Owner, an opaque id issued by the identity provider
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Provenance pointer, cleared when the template is deleted
    template_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("templates.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    is_published: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow
    )

    # Relationships
    template: Mapped[Optional["Template"]] = relationship("Template", back_populates="forms")
    steps: Mapped[List["Step"]] = relationship(
        "Step",
        back_populates="form",
        cascade="all, delete-orphan",
        order_by="[Step.order_index, Step.created_at, Step.id]"
    )
    submissions: Mapped[List["Submission"]] = relationship(
        "Submission",
        back_populates="form",
        cascade="all, delete-orphan"
    )
    drafts: Mapped[List["SubmissionDraft"]] = relationship(
        "SubmissionDraft",
        back_populates="form",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Form(id={self.id}, title='{self.title}', published={self.is_published})>"


class Step(Base):
    """Step is one ordered page of fields within a form."""

    __tablename__ = "steps"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    form_id: Mapped[str] = mapped_column(
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Dense zero-based rank within the form
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    form: Mapped["Form"] = relationship("Form", back_populates="steps")
    fields: Mapped[List["Field"]] = relationship(
        "Field",
        back_populates="step",
        cascade="all, delete-orphan",
        order_by="[Field.order_index, Field.created_at, Field.id]"
    )

    def __repr__(self) -> str:
        return f"<Step(id={self.id}, form_id={self.form_id}, order={self.order_index})>"


class Field(Base):
    """
    Field is a single typed input definition within a step.

    ``type`` is stored as given; the dispatcher in
    ``formbuilder.services.field_types`` decides how it renders.
    """

    __tablename__ = "fields"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    step_id: Mapped[str] = mapped_column(
        ForeignKey("steps.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    type: Mapped[str] = mapped_column(String(50), nullable=False)
    label: Mapped[str] = mapped_column(String(512), nullable=False)
    placeholder: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    default_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    required: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Dense zero-based rank within the step
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)

    validation_rules: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    conditional_logic: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    options: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    step: Mapped["Step"] = relationship("Step", back_populates="fields")

    def __repr__(self) -> str:
        return f"<Field(id={self.id}, type='{self.type}', label='{self.label}')>"
