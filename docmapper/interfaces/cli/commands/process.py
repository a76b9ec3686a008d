"""
Command to run an XML file through the mapping engine
"""

from pathlib import Path

from docmapper.core.enums import ProcessingStatus
from docmapper.infrastructure.db.connection import DatabaseManager
from docmapper.infrastructure.db.document_repository_impl import SQLModelDocumentRepository
from docmapper.interfaces.cli.commands.base import BaseCommand
from docmapper.services.document_service import DocumentProcessingService


class Command(BaseCommand):
    description = "Process an XML document for an interface"

    def add_arguments(self, parser):
        parser.add_argument(
            'file',
            help='XML file to process'
        )
        parser.add_argument(
            '--interface',
            required=True,
            help='Interface name'
        )
        parser.add_argument(
            '--client-id',
            type=int,
            default=None,
            help='Client identifier (defaults to the interface client)'
        )

    def handle(self, **kwargs):
        file_path = Path(kwargs['file'])
        if not file_path.exists():
            self.print_error(f"File not found: {file_path}")
            return 1

        manager = DatabaseManager()
        repository = SQLModelDocumentRepository(manager.session_factory)

        interface = repository.get_interface_by_name(kwargs['interface'], kwargs.get('client_id'))
        if interface is None:
            self.print_error(f"Unknown interface: {kwargs['interface']}")
            return 1

        service = DocumentProcessingService(repository)
        result = service.process_xml(file_path, interface, client_id=kwargs.get('client_id'))

        if result.status == ProcessingStatus.SUCCESS.value:
            self.print_success(f"{file_path.name}: {result.line_count} lines, header {result.header_id}")
            if result.line_discovery and result.line_discovery != "configured":
                self.print_warning(f"Line nodes found by {result.line_discovery} fallback")
            if result.error_message:
                self.print_warning(result.error_message)
            return 0

        self.print_error(f"{file_path.name}: {result.error_message}")
        return 1
