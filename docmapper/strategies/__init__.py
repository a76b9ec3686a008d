# ==============================================
# docmapper/strategies/__init__.py
# ==============================================
from typing import Optional

from docmapper.core.exceptions import UnsupportedDocumentTypeError
from docmapper.models.interface import Interface
from docmapper.processors.document_parser import root_local_name
from docmapper.processors.path_evaluator import Node

from .base_strategy import BaseDocumentStrategy, ProcessingContext
from .asn_strategy import AsnDocumentStrategy
from .order_strategy import OrderDocumentStrategy

# Strategy registry keyed by document type tag
STRATEGY_REGISTRY = {
    'ASN': AsnDocumentStrategy,
    'ORDER': OrderDocumentStrategy,
}


def get_strategy(document_type: str, **kwargs) -> BaseDocumentStrategy:
    """
    Factory function to get the strategy for a document type

    Args:
        document_type: Document type tag, case-insensitive
        **kwargs: Arguments passed to the strategy (repository, settings, ...)

    Returns:
        Strategy instance

    Raises:
        UnsupportedDocumentTypeError: If no strategy is registered for the type
    """
    strategy_class = STRATEGY_REGISTRY.get((document_type or "").strip().upper())

    if not strategy_class:
        raise UnsupportedDocumentTypeError(document_type, supported=get_supported_document_types())

    return strategy_class(**kwargs)


def resolve_document_type(document: Node, interface: Optional[Interface] = None) -> str:
    """Interface type when configured, otherwise the document's root element name."""
    if interface is not None and interface.interface_type:
        return interface.interface_type.strip().upper()
    return root_local_name(document).upper()


def get_supported_document_types():
    """Get list of all supported document types"""
    return list(STRATEGY_REGISTRY.keys())


def is_supported_document_type(document_type: str) -> bool:
    return (document_type or "").strip().upper() in STRATEGY_REGISTRY


__all__ = [
    "BaseDocumentStrategy",
    "ProcessingContext",
    "AsnDocumentStrategy",
    "OrderDocumentStrategy",
    "STRATEGY_REGISTRY",
    "get_strategy",
    "resolve_document_type",
    "get_supported_document_types",
    "is_supported_document_type",
]
