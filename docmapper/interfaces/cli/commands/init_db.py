"""
Command to create (or recreate) the database tables
"""

from docmapper.infrastructure.db.connection import DatabaseManager
from docmapper.interfaces.cli.commands.base import BaseCommand


class Command(BaseCommand):
    description = "Create database tables"

    def add_arguments(self, parser):
        parser.add_argument(
            '--drop',
            action='store_true',
            help='Drop existing tables first'
        )

    def handle(self, **kwargs):
        manager = DatabaseManager()
        self.print_info(f"Database: {manager.get_engine().url.render_as_string(hide_password=True)}")

        if kwargs.get('drop'):
            self.print_warning("Dropping existing tables...")
            manager.drop_tables()

        manager.create_tables()

        if not manager.health_check():
            self.print_error("Database health check failed")
            return 1

        self.print_success("Database tables ready")
        return 0
