from .connection import DatabaseManager
from .document_repository_impl import SQLModelDocumentRepository

__all__ = ["DatabaseManager", "SQLModelDocumentRepository"]
