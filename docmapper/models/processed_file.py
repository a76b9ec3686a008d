from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime
from sqlmodel import Field

from docmapper.core.enums import ProcessingStatus
from docmapper.models.base import BaseModelWithTimestamp


class ProcessedFile(BaseModelWithTimestamp, table=True):
    """One document-processing attempt and its outcome."""
    __tablename__ = "processed_files"

    file_name: Optional[str] = Field(default=None, max_length=255)
    document_type: Optional[str] = Field(default=None, max_length=20)
    status: str = Field(default=ProcessingStatus.PROCESSING.value, max_length=20, index=True)
    error_message: Optional[str] = Field(default=None, max_length=1000)

    interface_id: Optional[UUID] = Field(default=None, foreign_key="interfaces.id", index=True)
    client_id: Optional[int] = Field(default=None, index=True)
    header_id: Optional[UUID] = Field(default=None)
    line_count: int = Field(default=0)
    line_discovery: Optional[str] = Field(default=None, max_length=20)
    processed_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))

    @property
    def is_terminal(self) -> bool:
        return self.status in (ProcessingStatus.SUCCESS.value, ProcessingStatus.ERROR.value)
