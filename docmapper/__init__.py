# ==============================================
# docmapper/__init__.py
# ==============================================
"""Dynamic XML document-mapping engine."""

__version__ = "0.1.0"
