# ==============================================
# docmapper/processors/document_parser.py
# ==============================================
from pathlib import Path
from typing import Union

from lxml import etree

from docmapper.core.exceptions import DocumentParseError
from docmapper.utils.logger import get_logger

logger = get_logger(__name__)


def _safe_parser() -> etree.XMLParser:
    # No DTD entity expansion and no network lookups for untrusted feeds
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        huge_tree=False,
        remove_blank_text=False,
    )


def parse_document(source: Union[bytes, str, Path]) -> etree._ElementTree:
    """
    Parse XML content into a document tree

    Args:
        source: Raw XML bytes, XML text, or a path to an XML file

    Returns:
        Parsed element tree

    Raises:
        DocumentParseError: If the content is empty or not well-formed
    """
    parser = _safe_parser()

    try:
        if isinstance(source, Path):
            return etree.parse(str(source), parser)

        if isinstance(source, str):
            # lxml refuses str input carrying an encoding declaration
            source = source.encode("utf-8")

        if not source or not source.strip():
            raise DocumentParseError("Document is empty")

        root = etree.fromstring(source, parser)
        return root.getroottree()

    except etree.XMLSyntaxError as e:
        logger.error(f"Invalid XML document: {e}")
        raise DocumentParseError(f"Invalid XML format: {e}", details={"line": e.lineno})
    except OSError as e:
        raise DocumentParseError(f"Cannot read document: {e}")


def root_local_name(document: Union[etree._ElementTree, etree._Element]) -> str:
    """Local name of the document element, without namespace."""
    root = document.getroot() if isinstance(document, etree._ElementTree) else document.getroottree().getroot()
    return etree.QName(root).localname
