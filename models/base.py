"""
Base entity classes.
"""

from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class TimestampMixin(BaseModel):
    """Mixin for created/updated timestamps."""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class BaseEntity(TimestampMixin):
    """
    Base for mutable, session-owned entities.

    Subclasses define their own id field with appropriate type.
    """
    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now()
