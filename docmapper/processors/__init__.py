# ==============================================
# docmapper/processors/__init__.py
# ==============================================
from .document_parser import parse_document, root_local_name
from .path_evaluator import LineNodeMatch, PathEvaluator, normalize_path, split_steps

__all__ = [
    "PathEvaluator",
    "LineNodeMatch",
    "normalize_path",
    "split_steps",
    "parse_document",
    "root_local_name",
]
