from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime, func

from docmapper.utils.date_utils import utc_now


class BaseModel(SQLModel):
    """
    Base model with common fields for all database models.
    """

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        index=True,
        nullable=False,
        description="Unique identifier"
    )


class TimestampMixin(SQLModel):
    """
    Mixin for models that need timestamp fields.
    """

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=False),
        sa_column_kwargs={"server_default": func.now()},
        nullable=False,
        description="Record creation timestamp"
    )

    updated_at: Optional[datetime] = Field(
        default=None,
        sa_type=DateTime(timezone=False),
        sa_column_kwargs={"onupdate": func.now()},
        description="Record last update timestamp"
    )


class BaseModelWithTimestamp(BaseModel, TimestampMixin):
    """
    Base model with ID and timestamp fields.
    """
    pass
