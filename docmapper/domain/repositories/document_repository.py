# ==============================================
# docmapper/domain/repositories/document_repository.py
# ==============================================
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
from uuid import UUID

from sqlmodel import SQLModel

from docmapper.models.mapping_rule import MappingRule
from docmapper.models.processed_file import ProcessedFile


class DocumentRepository(ABC):
    """Persistence boundary consumed by the document strategies."""

    @abstractmethod
    def persist_header(self, header: SQLModel) -> SQLModel:
        """Durably create a header and return it with its identity assigned"""
        pass

    @abstractmethod
    def persist_lines(self, lines: Sequence[SQLModel]) -> None:
        """Persist a batch of lines belonging to one persisted header"""
        pass

    @abstractmethod
    def resolve_mapping_rules(self, interface_id: Optional[UUID], table_name: str) -> List[MappingRule]:
        """Mapping rules configured for an interface and destination table"""
        pass

    @abstractmethod
    def record_processing_result(self, processed_file: ProcessedFile) -> ProcessedFile:
        """Create or update the record of one processing attempt"""
        pass
