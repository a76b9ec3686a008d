# ==============================================
# docmapper/models/__init__.py
# ==============================================
from .base import BaseModel, BaseModelWithTimestamp, TimestampMixin
from .interface import Interface, InterfaceCreate
from .mapping_rule import MappingRule, MappingRuleCreate
from .processed_file import ProcessedFile
from .asn import AsnHeader, AsnLine
from .order import OrderHeader, OrderLine

__all__ = [
    "BaseModel",
    "BaseModelWithTimestamp",
    "TimestampMixin",
    "Interface",
    "InterfaceCreate",
    "MappingRule",
    "MappingRuleCreate",
    "ProcessedFile",
    "AsnHeader",
    "AsnLine",
    "OrderHeader",
    "OrderLine",
]
