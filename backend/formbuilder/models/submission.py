"""Submission and in-progress answer draft models."""

import uuid
from datetime import datetime
from typing import Dict, Any

from sqlalchemy import String, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formbuilder.database import Base


class Submission(Base):
    """
    Submission stores one respondent's answers for a form.

    ``data`` maps the field *label* to the answer value, so two fields that
    share a label collapse into one key.
    """

    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )

    form_id: Mapped[str] = mapped_column(
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    data: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)

    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    form: Mapped["Form"] = relationship("Form", back_populates="submissions")

    def __repr__(self) -> str:
        return f"<Submission(id={self.id}, form_id={self.form_id})>"


class SubmissionDraft(Base):
    """
    SubmissionDraft keeps a respondent's in-progress answers.

    Answers are keyed by field id, one row per (form, draft key). Writes are
    last-write-wins.
    """

    __tablename__ = "submission_drafts"
    __table_args__ = (
        UniqueConstraint("form_id", "draft_key", name="uq_submission_drafts_form_key"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )

    form_id: Mapped[str] = mapped_column(
        ForeignKey("forms.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    draft_key: Mapped[str] = mapped_column(String(128), nullable=False)

    answers: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow
    )

    form: Mapped["Form"] = relationship("Form", back_populates="drafts")

    def __repr__(self) -> str:
        return f"<SubmissionDraft(form_id={self.form_id}, key='{self.draft_key}')>"
