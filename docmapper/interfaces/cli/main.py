#!/usr/bin/env python3
"""
docmapper CLI management tool
Entry point for all CLI commands
"""

import importlib
import pkgutil
import sys
import argparse
from typing import Any, Dict, List

from docmapper.core.logging import setup_logging
from docmapper.interfaces.cli import commands as commands_package


class CLIManager:
    def __init__(self):
        self.available_commands = self._discover_commands()

    def _discover_commands(self) -> Dict[str, Any]:
        """Discover every command module in the commands package"""
        commands = {}

        for module_info in pkgutil.iter_modules(commands_package.__path__):
            module_name = module_info.name
            if module_name.startswith("_") or module_name == "base":
                continue

            module = importlib.import_module(f"{commands_package.__name__}.{module_name}")
            if hasattr(module, 'Command'):
                commands[module_name] = module.Command

        return commands

    def list_commands(self):
        """Show every available command"""
        print("Available commands:")
        print("=" * 40)

        if not self.available_commands:
            print("No commands found.")
            return

        for name, command_class in sorted(self.available_commands.items()):
            description = getattr(command_class, 'description', 'No description')
            print(f"  {name:<20} {description}")

    def run_command(self, command_name: str, args: List[str]) -> int:
        """Run one command"""
        if command_name not in self.available_commands:
            print(f"Unknown command: {command_name}")
            print("Use 'python manage.py help' to see available commands.")
            return 1

        command_instance = self.available_commands[command_name]()
        return command_instance.run(args) or 0


def main(argv: List[str] = None) -> int:
    parser = argparse.ArgumentParser(
        description="docmapper CLI Management Tool",
        add_help=False
    )
    parser.add_argument('command', nargs='?', help='Command to run')
    parser.add_argument('args', nargs='*', help='Arguments for the command')

    args, unknown = parser.parse_known_args(argv)
    all_args = args.args + unknown

    setup_logging()
    cli_manager = CLIManager()

    if not args.command or args.command == 'help':
        if all_args:
            command_name = all_args[0]
            if command_name in cli_manager.available_commands:
                cli_manager.available_commands[command_name]().help()
            else:
                print(f"Unknown command: {command_name}")
        else:
            print("docmapper CLI Management Tool")
            print("Usage: python manage.py <command> [args...]")
            print()
            cli_manager.list_commands()
            print()
            print("Use 'python manage.py help <command>' for help on a specific command.")
        return 0

    return cli_manager.run_command(args.command, all_args)


if __name__ == "__main__":
    sys.exit(main())
