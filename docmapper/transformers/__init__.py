# ==============================================
# docmapper/transformers/__init__.py
# ==============================================
from .transform_chain import (
    OPERATION_REGISTRY,
    Operation,
    TransformChain,
    get_supported_operations,
    is_supported_operation,
    unwrap_optional,
)

__all__ = [
    "TransformChain",
    "Operation",
    "OPERATION_REGISTRY",
    "get_supported_operations",
    "is_supported_operation",
    "unwrap_optional",
]
