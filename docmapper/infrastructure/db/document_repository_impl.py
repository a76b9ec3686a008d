# ==============================================
# docmapper/infrastructure/db/document_repository_impl.py
# ==============================================
from typing import Callable, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from docmapper.core.exceptions import DatabaseError
from docmapper.domain.repositories.document_repository import DocumentRepository
from docmapper.models.interface import Interface
from docmapper.models.mapping_rule import MappingRule
from docmapper.models.processed_file import ProcessedFile
from docmapper.utils.logger import get_logger

logger = get_logger(__name__)


class SQLModelDocumentRepository(DocumentRepository):
    """
    DocumentRepository backed by SQLModel sessions. Every call runs in its own
    session and commits before returning.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def _save(self, instance: SQLModel, operation: str) -> SQLModel:
        session = self.session_factory()
        try:
            instance = session.merge(instance)
            session.commit()
            session.refresh(instance)
            return instance
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"{operation} failed: {e}")
            raise DatabaseError(f"{operation} failed: {e}", operation=operation)
        finally:
            session.close()

    def persist_header(self, header: SQLModel) -> SQLModel:
        return self._save(header, "persist_header")

    def persist_lines(self, lines: Sequence[SQLModel]) -> None:
        session = self.session_factory()
        try:
            session.add_all(list(lines))
            session.commit()
            logger.debug(f"Persisted {len(lines)} lines")
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"persist_lines failed: {e}")
            raise DatabaseError(f"persist_lines failed: {e}", operation="persist_lines")
        finally:
            session.close()

    def resolve_mapping_rules(self, interface_id: Optional[UUID], table_name: str) -> List[MappingRule]:
        statement = (
            select(MappingRule)
            .where(MappingRule.interface_id == interface_id)
            .where(func.upper(MappingRule.table_name) == table_name.upper())
            .order_by(MappingRule.priority.desc(), MappingRule.name)
        )
        session = self.session_factory()
        try:
            return list(session.exec(statement).all())
        except SQLAlchemyError as e:
            logger.error(f"resolve_mapping_rules failed: {e}")
            raise DatabaseError(f"resolve_mapping_rules failed: {e}", operation="resolve_mapping_rules")
        finally:
            session.close()

    def record_processing_result(self, processed_file: ProcessedFile) -> ProcessedFile:
        return self._save(processed_file, "record_processing_result")

    # ------------------------------------------------------------------
    # Lookups used by the CLI
    # ------------------------------------------------------------------

    def get_interface_by_name(self, name: str, client_id: Optional[int] = None) -> Optional[Interface]:
        statement = select(Interface).where(Interface.name == name)
        if client_id is not None:
            statement = statement.where(Interface.client_id == client_id)
        session = self.session_factory()
        try:
            return session.exec(statement).first()
        finally:
            session.close()

    def get_processed_file(self, processed_file_id: UUID) -> Optional[ProcessedFile]:
        session = self.session_factory()
        try:
            return session.get(ProcessedFile, processed_file_id)
        finally:
            session.close()

    def count_lines(self, line_model: type, header_id: UUID) -> int:
        statement = select(func.count()).select_from(line_model).where(line_model.header_id == header_id)
        session = self.session_factory()
        try:
            return session.exec(statement).one()
        finally:
            session.close()
