from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime
from sqlmodel import Field

from docmapper.models.base import BaseModelWithTimestamp


class OrderHeader(BaseModelWithTimestamp, table=True):
    """Customer order header."""
    __tablename__ = "order_headers"

    client_id: Optional[int] = Field(default=None, index=True)
    order_number: str = Field(default="DEFAULT", max_length=50, index=True)
    creation_type: str = Field(default="DEFAULT", max_length=20)
    order_type: Optional[str] = Field(default=None, max_length=20)
    status: str = Field(default="NEW", max_length=20)
    priority: Optional[int] = Field(default=None)

    order_date_dttm: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))
    pickup_start_dttm: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))
    delivery_end_dttm: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))
    created_dttm: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))
    last_updated_dttm: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))

    business_partner_id: Optional[str] = Field(default=None, max_length=50)
    business_partner_name: Optional[str] = Field(default=None, max_length=100)
    ext_purchase_order: Optional[str] = Field(default=None, max_length=50)
    bill_to_name: Optional[str] = Field(default=None, max_length=100)
    bill_to_email: Optional[str] = Field(default=None, max_length=100)
    d_name: Optional[str] = Field(default=None, max_length=100)
    d_address_1: Optional[str] = Field(default=None, max_length=100)
    d_city: Optional[str] = Field(default=None, max_length=50)
    d_postal_code: Optional[str] = Field(default=None, max_length=20)
    d_country_code: Optional[str] = Field(default=None, max_length=3)

    baseline_cost: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=2)
    actual_cost: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=2)
    total_weight: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)

    is_cancelled: bool = Field(default=False)
    is_hazmat: bool = Field(default=False)
    is_perishable: bool = Field(default=False)

    notes: Optional[str] = Field(default=None, max_length=500)
    ref_field_1: Optional[str] = Field(default=None, max_length=50)
    ref_field_2: Optional[str] = Field(default=None, max_length=50)
    ref_field_3: Optional[str] = Field(default=None, max_length=50)

    created_source_type: int = Field(default=0)
    created_source: Optional[str] = Field(default=None, max_length=50)
    last_updated_source_type: int = Field(default=0)
    last_updated_source: Optional[str] = Field(default=None, max_length=50)


class OrderLine(BaseModelWithTimestamp, table=True):
    """Customer order line."""
    __tablename__ = "order_lines"

    header_id: Optional[UUID] = Field(default=None, foreign_key="order_headers.id", index=True)
    client_id: Optional[int] = Field(default=None, index=True)
    line_number: Optional[str] = Field(default=None, max_length=20)
    item_number: Optional[str] = Field(default=None, max_length=50)
    item_description: Optional[str] = Field(default=None, max_length=255)
    quantity: int = Field(default=0)
    unit_of_measure: str = Field(default="EA", max_length=10)
    lot_number: Optional[str] = Field(default=None, max_length=50)
    shipped_qty: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)
    retail_price: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=2)
    expire_date: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=500)

    status: str = Field(default="NEW", max_length=20)
    order_detail_status: int = Field(default=4)
    is_cancelled: int = Field(default=0)
    qty_conv_factor: Decimal = Field(default=Decimal("1"), max_digits=16, decimal_places=4)
    created_source_type: int = Field(default=1)
    created_source: Optional[str] = Field(default=None, max_length=50)
    last_updated_source_type: int = Field(default=1)
    last_updated_source: Optional[str] = Field(default=None, max_length=50)
