"""Tests for default header and line records."""

from datetime import date, datetime

import pytest

from docmapper.core.config import MappingSettings
from docmapper.factories import AsnFactory, OrderFactory
from docmapper.models.asn import AsnHeader, AsnLine
from docmapper.models.order import OrderHeader, OrderLine


@pytest.mark.parametrize("factory_class,header_type,line_type", [
    (AsnFactory, AsnHeader, AsnLine),
    (OrderFactory, OrderHeader, OrderLine),
])
class TestDefaults:
    def test_header_defaults_are_populated(self, settings, factory_class, header_type, line_type):
        header = factory_class(settings).create_default_header(client_id=7)

        assert isinstance(header, header_type)
        assert header.client_id == 7
        assert header.status == "NEW"
        assert header.created_source == header.last_updated_source == "DOCMAPPER"
        for name in factory_class.HEADER_DEFAULTS:
            assert getattr(header, name) is not None, name

    def test_line_defaults_reference_header(self, settings, factory_class, header_type, line_type):
        factory = factory_class(settings)
        header = factory.create_default_header(client_id=7)

        line = factory.create_default_line(header, 3)

        assert isinstance(line, line_type)
        assert line.header_id == header.id
        assert line.client_id == 7
        assert line.line_number == "3"
        assert line.quantity == 0
        assert line.unit_of_measure == "EA"
        for name in factory_class.LINE_DEFAULTS:
            assert getattr(line, name) is not None, name

    def test_headers_are_independent(self, settings, factory_class, header_type, line_type):
        factory = factory_class(settings)
        first = factory.create_default_header()
        second = factory.create_default_header()
        assert first.id != second.id


def test_asn_receipt_date_is_today(settings):
    header = AsnFactory(settings).create_default_header()
    assert isinstance(header.receipt_dttm, date)


def test_order_timestamps(settings):
    header = OrderFactory(settings).create_default_header()
    assert isinstance(header.order_date_dttm, datetime)
    assert header.created_dttm == header.last_updated_dttm


def test_audit_source_from_settings():
    header = AsnFactory(MappingSettings(audit_source="EDI")).create_default_header()
    assert header.created_source == "EDI"
