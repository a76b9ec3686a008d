from .base_factory import BaseRecordFactory
from .asn_factory import AsnFactory
from .order_factory import OrderFactory

__all__ = ["BaseRecordFactory", "AsnFactory", "OrderFactory"]
