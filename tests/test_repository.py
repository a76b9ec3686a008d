"""End-to-end tests against an in-memory SQLite database."""

import json
from datetime import datetime
from decimal import Decimal

import pytest
from sqlmodel import select

from docmapper.core.enums import ProcessingStatus
from docmapper.core.exceptions import MappingConfigurationError
from docmapper.infrastructure.db.document_repository_impl import SQLModelDocumentRepository
from docmapper.infrastructure.db.seeds import load_mapping_config, parse_mapping_config
from docmapper.models.asn import AsnHeader, AsnLine
from docmapper.models.mapping_rule import MappingRule
from docmapper.models.order import OrderHeader, OrderLine
from docmapper.models.processed_file import ProcessedFile
from docmapper.services.document_service import DocumentProcessingService

from tests.helpers import ASN_XML, CONFIG_FILE, ORDER_XML


@pytest.fixture
def asn_config():
    return json.loads(CONFIG_FILE.read_text(encoding="utf-8"))


@pytest.fixture
def repository(database_manager):
    return SQLModelDocumentRepository(database_manager.session_factory)


@pytest.fixture
def loaded_interface(database_manager):
    with database_manager.get_session() as session:
        return load_mapping_config(session, CONFIG_FILE)


class TestMappingConfig:
    def test_loads_interface_and_rules(self, database_manager, loaded_interface, asn_config):
        assert loaded_interface.name == "acme-asn"
        assert loaded_interface.client_id == 7

        with database_manager.get_session() as session:
            rules = session.exec(select(MappingRule)).all()
        assert len(rules) == len(asn_config["rules"])
        assert all(rule.interface_id == loaded_interface.id for rule in rules)
        assert all(rule.client_id == 7 for rule in rules)

    def test_reload_replaces_rules(self, database_manager, loaded_interface, asn_config):
        asn_config["rules"] = asn_config["rules"][:2]
        with database_manager.get_session() as session:
            reloaded = load_mapping_config(session, asn_config)

        assert reloaded.id == loaded_interface.id
        with database_manager.get_session() as session:
            assert len(session.exec(select(MappingRule)).all()) == 2

    def test_append_keeps_rules(self, database_manager, loaded_interface, asn_config):
        extra = {"interface": asn_config["interface"], "rules": [
            {"name": "notes", "source_path": "//tns:Notes", "target_field": "notes", "table_name": "ASN_HEADERS"},
        ]}
        with database_manager.get_session() as session:
            load_mapping_config(session, extra, replace=False)
        with database_manager.get_session() as session:
            assert len(session.exec(select(MappingRule)).all()) == len(asn_config["rules"]) + 1

    @pytest.mark.parametrize("mutate", [
        lambda config: config["interface"].update(interface_type="INVOICE"),
        lambda config: config["rules"][0].update(transformation="trim|reverse"),
        lambda config: config["rules"][0].pop("target_field"),
    ])
    def test_invalid_configuration(self, asn_config, mutate):
        mutate(asn_config)
        with pytest.raises(MappingConfigurationError):
            parse_mapping_config(asn_config)

    def test_missing_file(self, database_manager, tmp_path):
        with database_manager.get_session() as session:
            with pytest.raises(MappingConfigurationError):
                load_mapping_config(session, tmp_path / "missing.json")


class TestRepository:
    def test_rules_resolved_by_table_case_insensitively(self, repository, loaded_interface):
        rules = repository.resolve_mapping_rules(loaded_interface.id, "asn_headers")
        assert [rule.name for rule in rules][0] == "asn-number"
        assert len(rules) == 4

    def test_rules_of_unknown_interface(self, repository, loaded_interface):
        assert repository.resolve_mapping_rules(None, "ASN_HEADERS") == []

    def test_interface_lookup(self, repository, loaded_interface):
        assert repository.get_interface_by_name("acme-asn").id == loaded_interface.id
        assert repository.get_interface_by_name("acme-asn", client_id=8) is None


class TestEndToEnd:
    def test_document_persisted(self, database_manager, repository, loaded_interface):
        service = DocumentProcessingService(repository)

        result = service.process_xml(ASN_XML, loaded_interface, file_name="asn.xml")

        assert result.status == ProcessingStatus.SUCCESS.value
        assert repository.count_lines(AsnLine, result.header_id) == 4

        stored = repository.get_processed_file(result.id)
        assert stored.status == ProcessingStatus.SUCCESS.value
        assert stored.line_count == 4
        assert "Line 3" in stored.error_message

        with database_manager.get_session() as session:
            header = session.get(AsnHeader, result.header_id)
            assert header.asn_number == "ASN-0001"
            assert header.assigned_carrier_code == "UPS"
            assert session.exec(select(ProcessedFile)).all()[0].id == result.id

    def test_failed_document_leaves_no_header(self, database_manager, repository, loaded_interface):
        service = DocumentProcessingService(repository)
        xml = b'<tns:ASN xmlns:tns="http://example.com/asn"><tns:Header/></tns:ASN>'

        result = service.process_xml(xml, loaded_interface)

        assert result.status == ProcessingStatus.ERROR.value
        assert repository.get_processed_file(result.id).status == ProcessingStatus.ERROR.value
        with database_manager.get_session() as session:
            assert session.exec(select(AsnHeader)).all() == []

    def test_order_document_persisted(self, database_manager, repository):
        config = {
            "interface": {"name": "acme-orders", "interface_type": "ORDER", "client_id": 7},
            "rules": [
                {"name": "order-number", "source_path": "/Order/OrderNumber", "target_field": "orderNumber",
                 "table_name": "ORDER_HEADERS", "required": True},
                {"name": "order-date", "source_path": "//OrderDate", "target_field": "order_date_dttm",
                 "table_name": "ORDER_HEADERS"},
                {"name": "sku", "source_path": "//Details/Detail/Sku", "target_field": "itemNumber",
                 "table_name": "ORDER_LINES"},
                {"name": "quantity", "source_path": "//Details/Detail/Quantity", "target_field": "quantity",
                 "table_name": "ORDER_LINES"},
                {"name": "price", "source_path": "//Details/Detail/Price", "target_field": "retailPrice",
                 "table_name": "ORDER_LINES", "transformation": "currency_format"},
            ],
        }
        with database_manager.get_session() as session:
            interface = load_mapping_config(session, config)

        result = DocumentProcessingService(repository).process_xml(ORDER_XML, interface, file_name="po-77.xml")

        assert result.status == ProcessingStatus.SUCCESS.value, result.error_message
        stored = repository.get_processed_file(result.id)
        assert stored.status == ProcessingStatus.SUCCESS.value
        assert stored.document_type == "ORDER"
        assert stored.processed_at is not None

        with database_manager.get_session() as session:
            header = session.get(OrderHeader, result.header_id)
            assert header.order_number == "PO-77"
            assert header.order_date_dttm == datetime(2024, 5, 1, 8, 30)
            assert header.created_dttm is not None
            lines = session.exec(select(OrderLine).order_by(OrderLine.line_number)).all()
            assert [line.quantity for line in lines] == [3, 2]
            assert [line.retail_price for line in lines] == [Decimal("10.00"), Decimal("12.00")]
