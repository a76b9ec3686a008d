"""Tests for the management commands."""

import io

import pytest

from docmapper.core.config import get_settings
from docmapper.core.exceptions import MappingConfigurationError
from docmapper.interfaces.cli.commands.base import BaseCommand
from docmapper.interfaces.cli.main import CLIManager, main

from tests.helpers import ASN_XML, CONFIG_FILE


@pytest.fixture
def sqlite_env(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def test_commands_are_discovered():
    assert sorted(CLIManager().available_commands) == ["init_db", "load_rules", "process"]


def test_help_lists_commands(capsys):
    assert main(["help"]) == 0
    assert "load_rules" in capsys.readouterr().out


def test_unknown_command():
    assert main(["frobnicate"]) == 1


def test_load_and_process(sqlite_env, capsys):
    document = sqlite_env / "asn.xml"
    document.write_bytes(ASN_XML)

    assert main(["init_db"]) == 0
    assert main(["load_rules", str(CONFIG_FILE)]) == 0
    assert main(["process", str(document), "--interface", "acme-asn"]) == 0

    out = capsys.readouterr().out
    assert "asn.xml: 4 lines" in out
    assert "Line 3" in out


def test_process_unknown_interface(sqlite_env):
    document = sqlite_env / "asn.xml"
    document.write_bytes(ASN_XML)

    assert main(["init_db"]) == 0
    assert main(["process", str(document), "--interface", "nobody"]) == 1


def test_process_missing_file(sqlite_env):
    assert main(["process", str(sqlite_env / "absent.xml"), "--interface", "acme-asn"]) == 1


def test_load_rules_missing_file(sqlite_env, capsys):
    assert main(["load_rules", str(sqlite_env / "absent.json")]) == 1
    assert "Cannot read mapping configuration" in capsys.readouterr().out


def test_load_rules_invalid_config(sqlite_env, capsys):
    config = sqlite_env / "broken.json"
    config.write_text('{"interface": {"name": "x", "interface_type": "INVOICE"}, "rules": []}', encoding="utf-8")

    assert main(["load_rules", str(config)]) == 1
    assert "Unsupported interface type 'INVOICE'" in capsys.readouterr().out


class TestBaseCommand:
    class Failing(BaseCommand):
        description = "Always fails"

        def add_arguments(self, parser):
            parser.add_argument('--code', default="CFG")

        def handle(self, **kwargs):
            raise MappingConfigurationError(f"bad mapping {kwargs['code']}")

    class Quiet(BaseCommand):
        def handle(self, **kwargs):
            self.print_info("nothing to do")

    def test_app_exception_becomes_exit_code(self):
        out = io.StringIO()
        assert self.Failing(stdout=out).run(["--code", "X1"]) == 1
        assert out.getvalue() == "✗ bad mapping X1\n"

    def test_none_means_success(self):
        out = io.StringIO()
        assert self.Quiet(stdout=out).run([]) == 0
        assert out.getvalue() == "ℹ nothing to do\n"

    def test_other_exceptions_propagate(self):
        class Broken(BaseCommand):
            def handle(self, **kwargs):
                raise KeyError("missing")

        with pytest.raises(KeyError):
            Broken(stdout=io.StringIO()).run([])
