"""
Base class for the management commands
"""

from abc import ABC, abstractmethod
from typing import List, Optional, TextIO
import argparse
import sys

from docmapper.core.exceptions import AppException
from docmapper.utils.logger import get_logger

logger = get_logger(__name__)

# ANSI colour code and marker per message kind
STYLES = {
    "success": ("92", "✓"),
    "error": ("91", "✗"),
    "warning": ("93", "⚠"),
    "info": ("94", "ℹ"),
}


class BaseCommand(ABC):
    """
    A management command: arguments, a handle() body returning an exit code,
    and coloured status output.

    AppException raised from handle() is reported as an error line and turned
    into exit code 1; anything else propagates to the caller.
    """

    description = "No description provided"

    def __init__(self, stdout: Optional[TextIO] = None):
        self.stdout = stdout or sys.stdout
        self.parser = self._create_parser()

    @property
    def name(self) -> str:
        return self.__class__.__module__.rsplit(".", 1)[-1]

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog=f"manage.py {self.name}",
            description=self.description,
            add_help=False
        )
        self.add_arguments(parser)
        return parser

    def add_arguments(self, parser: argparse.ArgumentParser):
        """Override to add command arguments"""
        pass

    @abstractmethod
    def handle(self, **kwargs) -> Optional[int]:
        """Command body. Returns the exit code, None meaning 0"""

    def run(self, args: List[str]) -> int:
        kwargs = vars(self.parser.parse_args(args))

        try:
            exit_code = self.handle(**kwargs)
        except AppException as e:
            logger.error(
                f"Command {self.name} failed: {e.message}",
                extra={"extra_fields": {"command": self.name, "error_code": e.error_code, **e.details}},
            )
            self.print_error(e.message)
            return 1

        return exit_code or 0

    def help(self):
        self.parser.print_help(self.stdout)

    def _write(self, kind: str, message: str):
        colour, marker = STYLES[kind]
        if self.stdout.isatty():
            print(f"\033[{colour}m{marker} {message}\033[0m", file=self.stdout)
        else:
            print(f"{marker} {message}", file=self.stdout)

    def print_success(self, message: str):
        self._write("success", message)

    def print_error(self, message: str):
        self._write("error", message)

    def print_warning(self, message: str):
        self._write("warning", message)

    def print_info(self, message: str):
        self._write("info", message)
