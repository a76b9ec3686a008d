from typing import Optional

from sqlmodel import Field, SQLModel

from docmapper.models.base import BaseModelWithTimestamp


class Interface(BaseModelWithTimestamp, table=True):
    """Interface descriptor: one configured inbound document feed for a client."""
    __tablename__ = "interfaces"

    name: str = Field(max_length=100, index=True, description="Interface name")
    interface_type: str = Field(max_length=20, description="Document type tag, e.g. ASN or ORDER")
    root_element: Optional[str] = Field(default=None, max_length=100, description="Expected root element")
    client_id: Optional[int] = Field(default=None, index=True, description="Owning client")
    description: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = Field(default=True)


class InterfaceCreate(SQLModel):
    """Schema for creating interfaces from configuration files."""
    name: str = Field(max_length=100)
    interface_type: str = Field(max_length=20)
    root_element: Optional[str] = Field(default=None, max_length=100)
    client_id: Optional[int] = None
    description: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = True
