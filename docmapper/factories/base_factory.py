# ==============================================
# docmapper/factories/base_factory.py
# ==============================================
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type

from sqlmodel import SQLModel

from docmapper.core.config import MappingSettings, get_settings


class BaseRecordFactory(ABC):
    """
    Builds header and line records pre-populated with system defaults so a
    record is complete even when no rule targets a given field.
    """

    header_model: Type[SQLModel]
    line_model: Type[SQLModel]

    HEADER_DEFAULTS: Dict[str, Any] = {}
    LINE_DEFAULTS: Dict[str, Any] = {}

    def __init__(self, settings: Optional[MappingSettings] = None):
        self.settings = settings or get_settings().mapping

    def _audit_fields(self) -> Dict[str, Any]:
        return {
            "created_source": self.settings.audit_source,
            "last_updated_source": self.settings.audit_source,
        }

    @abstractmethod
    def _header_timestamps(self) -> Dict[str, Any]:
        """Time-dependent header defaults, evaluated per record"""
        pass

    def create_default_header(self, client_id: Optional[int] = None) -> SQLModel:
        values = {
            **self.HEADER_DEFAULTS,
            **self._audit_fields(),
            **self._header_timestamps(),
            "client_id": client_id,
        }
        return self.header_model(**values)

    def create_default_line(self, header: SQLModel, line_number: int,
                            client_id: Optional[int] = None) -> SQLModel:
        """
        Args:
            header: Persisted header; its identity is stored on the line
            line_number: Sequence number within this header's lines
            client_id: Owning client, defaults to the header's
        """
        values = {
            **self.LINE_DEFAULTS,
            **self._audit_fields(),
            "header_id": header.id,
            "client_id": client_id if client_id is not None else getattr(header, "client_id", None),
            "line_number": str(line_number),
        }
        return self.line_model(**values)
