# ==============================================
# docmapper/strategies/order_strategy.py
# ==============================================
from sqlmodel import SQLModel

from docmapper.core.enums import DocumentType
from docmapper.core.exceptions import RecordValidationError
from docmapper.factories.order_factory import OrderFactory
from docmapper.strategies.base_strategy import BaseDocumentStrategy


class OrderDocumentStrategy(BaseDocumentStrategy):
    """Customer orders: ORDER_HEADERS / ORDER_LINES."""

    document_type = DocumentType.ORDER.value
    header_table = "ORDER_HEADERS"
    line_table = "ORDER_LINES"
    factory_class = OrderFactory

    def validate_line(self, line: SQLModel) -> None:
        super().validate_line(line)
        if line.quantity is not None and line.quantity < 0:
            raise RecordValidationError(f"Negative quantity {line.quantity}", record_type="OrderLine")
