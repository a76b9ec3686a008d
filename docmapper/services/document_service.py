# ==============================================
# docmapper/services/document_service.py
# ==============================================
from pathlib import Path
from typing import Optional, Union

from docmapper.core.config import MappingSettings, get_settings
from docmapper.core.enums import ProcessingStatus
from docmapper.core.exceptions import DocumentParseError, PersistenceBoundaryError, UnsupportedDocumentTypeError
from docmapper.domain.repositories.document_repository import DocumentRepository
from docmapper.models.interface import Interface
from docmapper.models.processed_file import ProcessedFile
from docmapper.processors.document_parser import parse_document
from docmapper.processors.path_evaluator import Node, PathEvaluator
from docmapper.services.base import BaseService
from docmapper.services.error_trail import SEPARATOR, truncate_message
from docmapper.strategies import get_strategy, resolve_document_type
from docmapper.transformers.transform_chain import TransformChain
from docmapper.utils.date_utils import utc_now


class DocumentProcessingService(BaseService):
    """
    Entry point for the ingestion layer: picks the strategy for a document and
    runs it. Callers only ever receive a ProcessedFile in SUCCESS or ERROR state.
    """

    def __init__(self, repository: DocumentRepository, settings: Optional[MappingSettings] = None):
        super().__init__(repository)
        self.settings = settings or get_settings().mapping
        # Stateless collaborators shared by every strategy this service creates
        self.evaluator = PathEvaluator(self.settings)
        self.chain = TransformChain(self.settings)

    def get_service_name(self) -> str:
        return "document_processing"

    def process_document(self, document: Node, interface: Interface,
                         client_id: Optional[int] = None,
                         file_name: Optional[str] = None) -> ProcessedFile:
        """
        Process a parsed document through the strategy of its document type

        Args:
            document: Parsed XML document
            interface: Interface descriptor; its type selects the strategy
            client_id: Tenant identifier, defaults to the interface's client

        Returns:
            ProcessedFile in SUCCESS or ERROR state
        """
        if client_id is None and interface is not None:
            client_id = interface.client_id

        document_type = resolve_document_type(document, interface)
        self.log_operation("process_document", {
            "document_type": document_type,
            "interface": interface.name if interface else None,
            "file_name": file_name,
        })

        try:
            strategy = get_strategy(
                document_type,
                repository=self.repository,
                evaluator=self.evaluator,
                chain=self.chain,
                settings=self.settings,
            )
        except UnsupportedDocumentTypeError as e:
            self.logger.error(e.message)
            return self._record_failure(e.message, interface, client_id, file_name, document_type)

        return strategy.process_document(document, interface, client_id, file_name)

    def process_xml(self, content: Union[bytes, str, Path], interface: Interface,
                    client_id: Optional[int] = None,
                    file_name: Optional[str] = None) -> ProcessedFile:
        """
        Parse raw XML and process it. Unparseable content yields an ERROR result.
        """
        if file_name is None and isinstance(content, Path):
            file_name = content.name

        try:
            document = parse_document(content)
        except DocumentParseError as e:
            self.logger.error(f"Cannot parse {file_name or 'document'}: {e.message}")
            if client_id is None and interface is not None:
                client_id = interface.client_id
            document_type = interface.interface_type if interface else None
            return self._record_failure(e.message, interface, client_id, file_name, document_type)

        return self.process_document(document, interface, client_id, file_name)

    def _record_failure(self, message: str, interface: Optional[Interface], client_id: Optional[int],
                        file_name: Optional[str], document_type: Optional[str]) -> ProcessedFile:
        result = ProcessedFile(
            file_name=file_name,
            document_type=document_type,
            interface_id=interface.id if interface else None,
            client_id=client_id,
            status=ProcessingStatus.ERROR.value,
            error_message=truncate_message(message, self.settings.error_trail_max_length),
            processed_at=utc_now(),
        )
        try:
            return self.repository.record_processing_result(result) or result
        except Exception as e:
            self.logger.error(f"Could not record processing result: {e}", exc_info=True)
            failure = PersistenceBoundaryError("record_processing_result", e)
            result.error_message = truncate_message(
                f"{message}{SEPARATOR}{failure.message}", self.settings.error_trail_max_length
            )
            return result
