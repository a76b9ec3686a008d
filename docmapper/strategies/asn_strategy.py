# ==============================================
# docmapper/strategies/asn_strategy.py
# ==============================================
from sqlmodel import SQLModel

from docmapper.core.enums import DocumentType
from docmapper.core.exceptions import RecordValidationError
from docmapper.factories.asn_factory import AsnFactory
from docmapper.strategies.base_strategy import BaseDocumentStrategy


class AsnDocumentStrategy(BaseDocumentStrategy):
    """Advance shipping notices: ASN_HEADERS / ASN_LINES."""

    document_type = DocumentType.ASN.value
    header_table = "ASN_HEADERS"
    line_table = "ASN_LINES"
    factory_class = AsnFactory

    def validate_line(self, line: SQLModel) -> None:
        super().validate_line(line)
        if line.quantity is not None and line.quantity < 0:
            raise RecordValidationError(f"Negative quantity {line.quantity}", record_type="AsnLine")
