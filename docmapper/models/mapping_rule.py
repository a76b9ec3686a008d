from typing import Optional
from uuid import UUID

from sqlmodel import Field, SQLModel

from docmapper.models.base import BaseModelWithTimestamp


class MappingRule(BaseModelWithTimestamp, table=True):
    """One configured binding from a source path onto a destination field."""
    __tablename__ = "mapping_rules"

    name: str = Field(max_length=100, description="Rule name")
    source_path: Optional[str] = Field(default=None, max_length=500, description="Path-query into the source document")
    target_field: str = Field(max_length=100, description="Logical field name on the destination record")
    table_name: str = Field(max_length=50, index=True, description="Destination record type, e.g. ASN_HEADERS")
    transformation: Optional[str] = Field(default=None, max_length=255, description="Pipe-delimited operation chain")
    is_active: bool = Field(default=True)
    priority: int = Field(default=0, description="Ordering hint")
    required: bool = Field(default=False)
    default_value: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)

    interface_id: Optional[UUID] = Field(default=None, foreign_key="interfaces.id", index=True)
    client_id: Optional[int] = Field(default=None, index=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.source_path} -> {self.table_name}.{self.target_field})"


class MappingRuleCreate(SQLModel):
    """Schema for creating mapping rules from configuration files."""
    name: str = Field(max_length=100)
    source_path: Optional[str] = Field(default=None, max_length=500)
    target_field: str = Field(max_length=100)
    table_name: str = Field(max_length=50)
    transformation: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = True
    priority: int = 0
    required: bool = False
    default_value: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=255)
