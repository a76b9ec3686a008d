"""
Pytest fixtures shared by the docmapper test suite.
Provides parsed sample documents, interfaces, rules and a database.
"""

from typing import List

import pytest
from lxml import etree

from docmapper.core.config import DatabaseSettings, MappingSettings
from docmapper.infrastructure.db.connection import DatabaseManager
from docmapper.models.interface import Interface
from docmapper.models.mapping_rule import MappingRule
from docmapper.processors.path_evaluator import PathEvaluator
from docmapper.transformers.transform_chain import TransformChain

from tests.helpers import ASN_XML, ORDER_XML, make_rule


@pytest.fixture
def settings():
    return MappingSettings()


@pytest.fixture
def evaluator(settings):
    return PathEvaluator(settings)


@pytest.fixture
def chain(settings):
    return TransformChain(settings)


@pytest.fixture
def asn_document():
    return etree.fromstring(ASN_XML).getroottree()


@pytest.fixture
def order_document():
    return etree.fromstring(ORDER_XML).getroottree()


@pytest.fixture
def asn_interface():
    return Interface(name="acme-asn", interface_type="ASN", client_id=7)


@pytest.fixture
def order_interface():
    return Interface(name="acme-orders", interface_type="ORDER", client_id=7)


@pytest.fixture
def asn_rules(asn_interface) -> List[MappingRule]:
    interface_id = asn_interface.id
    return [
        make_rule("asnNumber", "//*[local-name()='AsnNumber']", required=True, interface_id=interface_id),
        make_rule("ASSIGNED_CARRIER_CODE", "//tns:Header/tns:Carrier", transformation="trim|uppercase",
                  interface_id=interface_id),
        make_rule("totalWeight", "//tns:Header/tns:TotalWeight",
                  transformation="remove_leading_zeros|decimal_format", interface_id=interface_id),
        make_rule("invoice_date", "//tns:Header/tns:ShipDate", transformation="date_format",
                  interface_id=interface_id),
        make_rule("itemNumber", "//tns:Lines/tns:Line/tns:Item", table_name="ASN_LINES",
                  interface_id=interface_id),
        make_rule("quantity", "//tns:Lines/tns:Line/tns:Qty", table_name="ASN_LINES", required=True,
                  interface_id=interface_id),
    ]


@pytest.fixture
def database_manager():
    manager = DatabaseManager(DatabaseSettings(url="sqlite://"))
    manager.create_tables()
    yield manager
    manager.drop_tables()
    manager.dispose()

