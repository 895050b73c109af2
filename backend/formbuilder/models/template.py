"""Template model for reusable form blueprints."""

import uuid
from datetime import datetime
from typing import Optional, List, Dict, Any

from sqlalchemy import String, Text, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formbuilder.database import Base


class Template(Base):
    """
    Template model representing a reusable form blueprint.

    ``config`` has the same shape as a form draft: ``{"steps": [...]}`` where
    every step carries its own ``fields`` list. Forms copy the config when
    they are created from a template and keep only ``template_id`` as a
    provenance pointer.
    """

    __tablename__ = "templates"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)

    # Form-shaped blueprint
    config: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Deleting a template only clears the pointer on its forms
    forms: Mapped[List["Form"]] = relationship("Form", back_populates="template")

    def __repr__(self) -> str:
        return f"<Template(id={self.id}, name='{self.name}')>"

    @property
    def steps(self) -> List[Dict[str, Any]]:
        """Get step blueprints from config."""
        return (self.config or {}).get("steps", [])
