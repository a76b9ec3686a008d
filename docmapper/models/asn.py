from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import DateTime
from sqlmodel import Field

from docmapper.models.base import BaseModelWithTimestamp


class AsnHeader(BaseModelWithTimestamp, table=True):
    """Advance shipping notice header."""
    __tablename__ = "asn_headers"

    client_id: Optional[int] = Field(default=None, index=True)
    asn_number: str = Field(default="DEFAULT", max_length=50, index=True)
    asn_type: int = Field(default=1)
    asn_level: int = Field(default=1)
    status: str = Field(default="NEW", max_length=20)
    asn_priority: int = Field(default=0)
    receipt_dttm: Optional[date] = Field(default=None)
    schedule_appt: int = Field(default=0)
    appointment_dttm: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))
    delivery_start_dttm: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))

    business_partner_id: Optional[str] = Field(default=None, max_length=50)
    business_partner_name: Optional[str] = Field(default=None, max_length=100)
    assigned_carrier_code: Optional[str] = Field(default=None, max_length=20)
    trailer_number: Optional[str] = Field(default=None, max_length=50)
    bill_of_lading_number: Optional[str] = Field(default=None, max_length=50)
    pro_number: Optional[str] = Field(default=None, max_length=50)
    invoice_number: Optional[str] = Field(default=None, max_length=50)
    invoice_date: Optional[date] = Field(default=None)

    total_weight: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)
    total_volume: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)
    total_shipped_qty: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)
    shipping_cost: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=2)
    shipped_lpn_count: Optional[int] = Field(default=None)
    quality_audit_percent: Decimal = Field(default=Decimal("0"), max_digits=5, decimal_places=2)

    has_import_error: bool = Field(default=False)
    has_soft_check_error: bool = Field(default=False)
    has_alerts: bool = Field(default=False)
    is_cogi_generated: bool = Field(default=False)
    is_cancelled: bool = Field(default=False)
    is_closed: bool = Field(default=False)
    is_gift: bool = Field(default=False)
    receipt_variance: bool = Field(default=False)
    is_whse_transfer: str = Field(default="0", max_length=1)

    notes: Optional[str] = Field(default=None, max_length=500)
    ref_field_1: Optional[str] = Field(default=None, max_length=50)
    ref_field_2: Optional[str] = Field(default=None, max_length=50)
    ref_field_3: Optional[str] = Field(default=None, max_length=50)
    ref_num_1: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)
    ref_num_2: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)

    created_source_type: int = Field(default=0)
    created_source: Optional[str] = Field(default=None, max_length=50)
    last_updated_source_type: int = Field(default=0)
    last_updated_source: Optional[str] = Field(default=None, max_length=50)


class AsnLine(BaseModelWithTimestamp, table=True):
    """Advance shipping notice line."""
    __tablename__ = "asn_lines"

    header_id: Optional[UUID] = Field(default=None, foreign_key="asn_headers.id", index=True)
    client_id: Optional[int] = Field(default=None, index=True)
    line_number: Optional[str] = Field(default=None, max_length=20)
    item_number: Optional[str] = Field(default=None, max_length=50)
    item_description: Optional[str] = Field(default=None, max_length=255)
    quantity: int = Field(default=0)
    unit_of_measure: str = Field(default="EA", max_length=10)
    lot_number: Optional[str] = Field(default=None, max_length=50)
    serial_number: Optional[str] = Field(default=None, max_length=50)
    expiry_date: Optional[date] = Field(default=None)
    unit_price: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)
    shipped_qty: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)
    received_qty: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)
    weight: Optional[Decimal] = Field(default=None, max_digits=16, decimal_places=4)
    purchase_order_number: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=500)

    status: str = Field(default="NEW", max_length=20)
    asn_detail_status: int = Field(default=4)
    is_cancelled: int = Field(default=0)
    qty_conv_factor: Decimal = Field(default=Decimal("1"), max_digits=16, decimal_places=4)
    created_source_type: int = Field(default=1)
    created_source: Optional[str] = Field(default=None, max_length=50)
    last_updated_source_type: int = Field(default=1)
    last_updated_source: Optional[str] = Field(default=None, max_length=50)
