"""
Builders and test doubles shared by the test modules.
"""

from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from docmapper.domain.repositories.document_repository import DocumentRepository
from docmapper.models.mapping_rule import MappingRule
from docmapper.models.processed_file import ProcessedFile


CONFIG_FILE = Path(__file__).resolve().parent.parent / "config" / "mappings" / "acme_asn.json"

ASN_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<tns:ASN xmlns:tns="http://example.com/asn">
  <tns:Header>
    <tns:AsnNumber>ASN-0001</tns:AsnNumber>
    <tns:ShipDate>15/03/2024</tns:ShipDate>
    <tns:TotalWeight>00125.5</tns:TotalWeight>
    <tns:Carrier>ups</tns:Carrier>
  </tns:Header>
  <tns:Lines>
    <tns:Line><tns:Item>SKU-1</tns:Item><tns:Qty>10</tns:Qty></tns:Line>
    <tns:Line><tns:Item>SKU-2</tns:Item><tns:Qty>20</tns:Qty></tns:Line>
    <tns:Line><tns:Item>SKU-3</tns:Item><tns:Qty>ABC</tns:Qty></tns:Line>
    <tns:Line><tns:Item>SKU-4</tns:Item><tns:Qty>40</tns:Qty></tns:Line>
    <tns:Line><tns:Item>SKU-5</tns:Item><tns:Qty>50</tns:Qty></tns:Line>
  </tns:Lines>
</tns:ASN>
"""

ORDER_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<Order xmlns="http://example.com/order">
  <OrderNumber>PO-77</OrderNumber>
  <OrderDate>2024-05-01T08:30:00</OrderDate>
  <Details>
    <Detail><Sku>A-1</Sku><Quantity>3</Quantity><Price>9.999</Price></Detail>
    <Detail><Sku>A-2</Sku><Quantity>1.5</Quantity><Price>12</Price></Detail>
  </Details>
</Order>
"""


def make_rule(target_field: str, source_path: Optional[str], table_name: str = "ASN_HEADERS",
              **kwargs) -> MappingRule:
    """Build a mapping rule with sensible defaults."""
    values = {
        "name": kwargs.pop("name", f"{table_name}.{target_field}"),
        "source_path": source_path,
        "target_field": target_field,
        "table_name": table_name,
    }
    values.update(kwargs)
    return MappingRule(**values)


class InMemoryDocumentRepository(DocumentRepository):
    """Repository double that keeps everything in lists."""

    def __init__(self, rules: Sequence[MappingRule] = (), fail_on: Optional[str] = None):
        self.rules = list(rules)
        self.fail_on = fail_on
        self.headers: List = []
        self.lines: List = []
        self.results: List[Tuple[UUID, str]] = []

    def _maybe_fail(self, operation: str) -> None:
        if self.fail_on == operation:
            raise RuntimeError(f"{operation} unavailable")

    def persist_header(self, header):
        self._maybe_fail("persist_header")
        self.headers.append(header)
        return header

    def persist_lines(self, lines):
        self._maybe_fail("persist_lines")
        self.lines.extend(lines)

    def resolve_mapping_rules(self, interface_id, table_name):
        self._maybe_fail("resolve_mapping_rules")
        return [
            rule for rule in self.rules
            if rule.interface_id == interface_id and rule.table_name.upper() == table_name.upper()
        ]

    def record_processing_result(self, processed_file: ProcessedFile) -> ProcessedFile:
        self._maybe_fail("record_processing_result")
        self.results.append((processed_file.id, processed_file.status))
        return processed_file
