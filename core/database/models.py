"""
Database Models for FastAPI

SQLAlchemy models for the component store.
"""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlalchemy.sql import func

from stagecraft.constants import STAGE_NUMBERS

from .engine import Base

STAGE_NAMES = tuple(f"stage{number}" for number in STAGE_NUMBERS)
OUTPUT_TYPE_NONE = "none"


def stage_name(number: int) -> str:
    return f"stage{number}"


def stage_number(stage: str) -> int:
    """'stage3' -> 3, anything unknown -> 0."""
    if stage in STAGE_NAMES:
        return int(stage[len("stage"):])
    return 0


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamps to models."""
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now(), nullable=False)


class Component(Base, TimestampMixin):
    """
    A reusable, stage-tagged block of code.

    ``inputs`` holds a list of ``{name, type, description, required,
    default_value}`` mappings, ``output`` is ``{type, description}`` or NULL.
    """
    __tablename__ = "components"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    code = Column(Text, nullable=False)
    language = Column(String(50), nullable=False, default="python")
    stage = Column(String(10), nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    inputs = Column(JSON, nullable=False, default=list)
    output = Column(JSON(none_as_null=True), nullable=True)

    def __repr__(self):
        return f"<Component {self.name} ({self.stage})>"

    @property
    def stage_number(self) -> int:
        return stage_number(self.stage)

    @property
    def has_output(self) -> bool:
        return bool(self.output) and self.output.get("type") != OUTPUT_TYPE_NONE

    @property
    def required_inputs(self) -> List[Dict[str, Any]]:
        return [item for item in self.inputs or [] if item.get("required")]

    @property
    def optional_inputs(self) -> List[Dict[str, Any]]:
        return [item for item in self.inputs or [] if not item.get("required")]

    def output_type(self) -> Optional[str]:
        return self.output.get("type") if self.output else None

    def to_dict(self):
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "code": self.code,
            "language": self.language,
            "stage": self.stage,
            "tags": list(self.tags or []),
            "inputs": list(self.inputs or []),
            "output": self.output,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
