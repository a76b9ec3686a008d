"""Tests for namespace-agnostic path evaluation and line discovery."""

import pytest
from lxml import etree

from docmapper.core.config import MappingSettings
from docmapper.core.enums import LineDiscovery
from docmapper.core.exceptions import PathEvaluationError
from docmapper.processors.path_evaluator import (
    PathEvaluator,
    normalize_path,
    split_steps,
    strip_prefixes,
    to_local_name_path,
)


def parse(xml: str):
    return etree.fromstring(xml.encode("utf-8")).getroottree()


SAMPLE_A = """<a:Shipment xmlns:a="urn:ship"><a:Ref>R-1</a:Ref></a:Shipment>"""
SAMPLE_B = """<b:Shipment xmlns:b="urn:ship"><b:Ref>R-1</b:Ref></b:Shipment>"""
SAMPLE_DEFAULT = """<Shipment xmlns="urn:ship"><Ref>R-1</Ref></Shipment>"""
SAMPLE_PLAIN = """<Shipment><Ref>R-1</Ref></Shipment>"""


class TestPathRewriting:
    """Step splitting and rewriting helpers."""

    def test_split_steps_round_trips(self):
        path = "//tns:Lines/tns:Line[@type='a/b']/Qty"
        steps = split_steps(path)
        assert steps == ["", "", "tns:Lines", "tns:Line[@type='a/b']", "Qty"]
        assert "/".join(steps) == path

    def test_strip_prefixes(self):
        assert strip_prefixes("//tns:Items/tns:Item/@x:code") == "//Items/Item/@code"

    def test_local_name_rewrite_keeps_predicates(self):
        assert to_local_name_path("//tns:Line[2]/Qty") == (
            "//*[local-name()='Line'][2]/*[local-name()='Qty']"
        )

    def test_local_name_rewrite_leaves_functions_alone(self):
        assert to_local_name_path("//Line/text()") == "//*[local-name()='Line']/text()"

    def test_normalize_path(self):
        assert normalize_path(" //Lines/Line/ ") == "//Lines/Line"
        assert normalize_path(None) == ""


class TestEvaluate:
    """Scalar evaluation."""

    @pytest.mark.parametrize("xml", [SAMPLE_A, SAMPLE_B, SAMPLE_DEFAULT, SAMPLE_PLAIN])
    def test_wildcard_local_name_path_resolves_in_every_sample(self, evaluator, xml):
        path = "//*[local-name()='Shipment']/*[local-name()='Ref']"
        assert evaluator.evaluate(parse(xml), path) == "R-1"

    @pytest.mark.parametrize("xml", [SAMPLE_A, SAMPLE_B, SAMPLE_DEFAULT, SAMPLE_PLAIN])
    def test_prefixed_rule_resolves_under_any_prefix(self, evaluator, xml):
        assert evaluator.evaluate(parse(xml), "/a:Shipment/a:Ref") == "R-1"

    def test_no_match_returns_none(self, evaluator):
        assert evaluator.evaluate(parse(SAMPLE_PLAIN), "//Missing") is None

    def test_attribute_value(self, evaluator):
        document = parse('<Root><Line qty="5"/></Root>')
        assert evaluator.evaluate(document, "//Line/@qty") == "5"

    def test_count_function_renders_integer(self, evaluator):
        document = parse("<Root><L/><L/><L/></Root>")
        assert evaluator.evaluate(document, "count(//L)") == "3"

    def test_element_text_includes_descendants(self, evaluator):
        document = parse("<Root><Name>Acme <b>Corp</b></Name></Root>")
        assert evaluator.evaluate(document, "//Name") == "Acme Corp"

    def test_relative_to_element(self, evaluator):
        document = parse(SAMPLE_A)
        root = document.getroot()
        assert evaluator.evaluate(root, "a:Ref") == "R-1"

    def test_malformed_path_raises(self, evaluator):
        with pytest.raises(PathEvaluationError) as exc_info:
            evaluator.evaluate(parse(SAMPLE_PLAIN), "//Ref[")
        assert exc_info.value.path == "//Ref["

    def test_empty_path_raises(self, evaluator):
        with pytest.raises(PathEvaluationError):
            evaluator.evaluate(parse(SAMPLE_PLAIN), "  ")


class TestNamespaces:
    def test_collects_prefixed_and_default(self, evaluator):
        document = parse(
            '<Root xmlns="urn:default" xmlns:x="urn:x"><x:A><B xmlns:y="urn:y"/></x:A></Root>'
        )
        assert evaluator.collect_namespaces(document) == {
            "x": "urn:x",
            "y": "urn:y",
            "default": "urn:default",
        }

    def test_default_prefix_usable_in_queries(self, evaluator):
        assert evaluator.evaluate(parse(SAMPLE_DEFAULT), "/default:Shipment/default:Ref") == "R-1"


class TestEvaluateNodes:
    def test_document_order(self, evaluator):
        document = parse("<R><I>1</I><X/><I>2</I><I>3</I></R>")
        nodes = evaluator.evaluate_nodes(document, "//I")
        assert [node.text for node in nodes] == ["1", "2", "3"]

    def test_scalar_result_gives_no_nodes(self, evaluator):
        assert evaluator.evaluate_nodes(parse("<R><I/></R>"), "count(//I)") == []


class TestParentAndRelativePath:
    @pytest.mark.parametrize("path,expected", [
        ("//Lines/Line/Qty", "//Lines/Line"),
        ("//tns:Lines/tns:Line/tns:Qty/", "//tns:Lines/tns:Line"),
        ("/ASN/Header/AsnNumber", "/ASN/Header"),
        ("//Line//Qty", "//Line"),
        ("//Line/@qty", "//Line"),
        ("//*[local-name()='Line']/*[local-name()='Qty']", "//*[local-name()='Line']"),
        ("//Qty", ""),
        ("Qty", ""),
    ])
    def test_parent_path(self, evaluator, path, expected):
        assert evaluator.parent_path(path) == expected

    @pytest.mark.parametrize("path,ancestor,expected", [
        ("//Lines/Line/Qty", "//Lines/Line", "Qty"),
        ("//Lines/Line/Pack/Qty", "//Lines/Line", "Pack/Qty"),
        ("//Lines/Line//Qty", "//Lines/Line", ".//Qty"),
        ("//Lines/Line/@qty", "//Lines/Line/", "@qty"),
        ("//Lines/Line", "//Lines/Line", "."),
        ("//Other/Qty", "//Lines/Line", "Qty"),
    ])
    def test_relative_path(self, evaluator, path, ancestor, expected):
        assert evaluator.relative_path(path, ancestor) == expected


class TestLineDiscovery:
    def test_configured_path(self, evaluator):
        document = parse("<R><Lines><Line/><Line/></Lines></R>")
        match = evaluator.find_line_nodes(document, "//Lines/Line")
        assert len(match) == 2
        assert match.discovery == LineDiscovery.CONFIGURED
        assert not match.used_fallback

    def test_conventional_pattern_fallback(self, evaluator):
        document = parse('<R xmlns="urn:r"><Items><Item/><Item/><Item/></Items></R>')
        match = evaluator.find_line_nodes(document, "//Products/Product")
        assert len(match) == 3
        assert match.discovery == LineDiscovery.PATTERN
        assert match.used_fallback

    def test_heuristic_fallback(self, evaluator):
        document = parse("<R><Pallets><Pallet/><Pallet/></Pallets></R>")
        match = evaluator.find_line_nodes(document, "//Products/Product")
        assert match.discovery == LineDiscovery.HEURISTIC
        assert [etree.QName(node).localname for node in match.nodes] == ["Pallet", "Pallet"]

    def test_fallback_disabled(self):
        evaluator = PathEvaluator(MappingSettings(fallback_line_discovery=False))
        document = parse("<R><Items><Item/><Item/></Items></R>")
        match = evaluator.find_line_nodes(document, "//Products/Product")
        assert match.nodes == []
        assert match.discovery is None

    def test_nothing_repeats(self, evaluator):
        match = evaluator.find_line_nodes(parse("<R><A/><B/></R>"), "//Products/Product")
        assert len(match) == 0

    def test_heuristic_tie_is_first_in_document_order(self, evaluator):
        xml = "<R><G><Box>1</Box><Crate>1</Crate><Box>2</Box><Crate>2</Crate></G></R>"
        picks = {
            tuple(node.tag for node in evaluator.find_repeating_elements(parse(xml)))
            for _ in range(5)
        }
        assert picks == {("Box", "Box")}

    def test_heuristic_requires_common_parent(self, evaluator):
        document = parse("<R><A><X/></A><B><X/></B><C><Y/><Y/></C></R>")
        nodes = evaluator.find_repeating_elements(document)
        assert [node.tag for node in nodes] == ["Y", "Y"]
