"""
Base entity classes.
"""

from datetime import datetime
from uuid import uuid4
from pydantic import BaseModel, Field, ConfigDict


def new_id() -> str:
    """Generate a store ID."""
    return uuid4().hex


class TimestampMixin(BaseModel):
    """Mixin for created/updated timestamps."""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class BaseEntity(TimestampMixin):
    """
    Base for all persistent entities.

    String fields are kept verbatim: names are compared exactly and
    extract text/timings are opaque pass-through values.
    """
    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",  # Ignore unknown fields from older library files
    )

    id: str = Field(default_factory=new_id)

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now()
