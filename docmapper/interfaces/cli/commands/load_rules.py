"""
Command to load an interface and its mapping rules from a JSON file
"""

from pathlib import Path

from docmapper.infrastructure.db.connection import DatabaseManager
from docmapper.infrastructure.db.seeds import load_mapping_config
from docmapper.interfaces.cli.commands.base import BaseCommand


class Command(BaseCommand):
    description = "Load interface mapping rules from a JSON file"

    def add_arguments(self, parser):
        parser.add_argument(
            'config_file',
            help='Path to the mapping configuration JSON'
        )
        parser.add_argument(
            '--append',
            action='store_true',
            help='Keep existing rules of the interface'
        )

    def handle(self, **kwargs):
        config_file = Path(kwargs['config_file'])
        manager = DatabaseManager()
        manager.create_tables()

        with manager.get_session() as session:
            interface = load_mapping_config(session, config_file, replace=not kwargs.get('append'))
            name = interface.name

        self.print_success(f"Mapping rules loaded for interface '{name}'")
        return 0
