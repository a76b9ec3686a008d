"""
Base service class providing common functionality for all services.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from docmapper.domain.repositories.document_repository import DocumentRepository
from docmapper.utils.logger import get_logger


class BaseService(ABC):
    """Base class for all services."""

    def __init__(self, repository: DocumentRepository):
        self.repository = repository
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Log service operation."""
        log_msg = f"Service operation: {operation}"
        if details:
            log_msg += f" - Details: {details}"
        self.logger.info(log_msg)

    @abstractmethod
    def get_service_name(self) -> str:
        """Return the service name."""
        pass
