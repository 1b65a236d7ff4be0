"""Tests for the intl-refactor command line."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from intl_refactor import cli as cli_module
from intl_refactor.cli import cli
from intl_refactor.config import Config

runner = CliRunner()


@pytest.fixture
def workspace(project: Path, monkeypatch) -> Path:
    """Run commands from the project root with a fixed configuration."""
    monkeypatch.chdir(project)
    monkeypatch.setattr(
        cli_module,
        "config",
        Config(
            key_format="snake_case",
            output_dir="lib/l10n",
            locale="en",
            merge_mode="dedupe",
            use_app_localizations=True,
            max_workers=2,
            exclude_patterns=None,
        ),
    )
    return project


def read_arb(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


class TestGroup:
    """Group-level options."""

    def test_version(self):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_invalid_configuration_aborts(self, workspace, monkeypatch):
        monkeypatch.setattr(cli_module, "config", Config(max_workers=0, key_format="snake_case"))
        result = runner.invoke(cli, ["scan", "lib"])
        assert result.exit_code == 1
        assert "Configuration errors" in result.output


# =============================================================================
# Scan and Generate
# =============================================================================


class TestScan:
    """The scan command."""

    def test_summary(self, workspace):
        result = runner.invoke(cli, ["scan", "lib"])
        assert result.exit_code == 0, result.output
        assert "Files scanned: 2" in result.output
        assert "Strings found: 4" in result.output

    def test_verbose_lists_strings(self, workspace):
        result = runner.invoke(cli, ["scan", "lib", "--verbose"])
        assert result.exit_code == 0, result.output
        assert "Welcome back" in result.output
        assert "Goodbye" in result.output

    def test_missing_directory(self, workspace):
        result = runner.invoke(cli, ["scan", "missing"])
        assert result.exit_code == 2
        assert "Directory not found" in result.output


class TestGenerate:
    """The generate command."""

    def test_writes_resource_file(self, workspace):
        result = runner.invoke(cli, ["generate", "lib"])
        assert result.exit_code == 0, result.output
        assert read_arb(workspace / "lib" / "l10n" / "app_en.arb")["hello_world"] == "Hello World"
        assert "Entries added: 4" in result.output

    def test_scope_and_key_format(self, workspace):
        result = runner.invoke(cli, ["generate", "lib", "--scope", "login", "--key-format", "camelCase"])
        assert result.exit_code == 0, result.output
        assert read_arb(workspace / "lib" / "l10n" / "feature_login.arb")["helloWorld"] == "Hello World"

    def test_unknown_key_format(self, workspace):
        result = runner.invoke(cli, ["generate", "lib", "--key-format", "kebab-case"])
        assert result.exit_code == 2


# =============================================================================
# Rewriting Commands
# =============================================================================


class TestRewriteCommands:
    """The internationalize and refactor commands."""

    def test_internationalize(self, workspace):
        result = runner.invoke(cli, ["internationalize", "lib"])
        main = (workspace / "lib" / "main.dart").read_text(encoding="utf-8")
        assert result.exit_code == 0, result.output
        assert "Text(AppLocalizations.of(context).welcome_back)" in main
        assert (workspace / "lib" / "l10n" / "app_en.arb").exists()
        assert "Files changed: 2" in result.output

    def test_dry_run(self, workspace):
        original = (workspace / "lib" / "main.dart").read_text(encoding="utf-8")
        result = runner.invoke(cli, ["internationalize", "lib", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "Dry run" in result.output
        assert (workspace / "lib" / "main.dart").read_text(encoding="utf-8") == original
        assert not (workspace / "lib" / "l10n" / "app_en.arb").exists()

    def test_refactor_leaves_resource_file_alone(self, workspace):
        result = runner.invoke(cli, ["refactor", "lib", "--no-app-localizations", "--backup"])
        farewell = (workspace / "lib" / "widgets" / "farewell.dart").read_text(encoding="utf-8")
        assert result.exit_code == 0, result.output
        assert 'Text(tr("goodbye"))' in farewell
        assert (workspace / "lib" / "widgets" / "farewell.dart.bak").exists()
        assert not (workspace / "lib" / "l10n" / "app_en.arb").exists()


# =============================================================================
# Maintenance Commands
# =============================================================================


class TestClean:
    """The clean command."""

    def test_removes_invalid_entries(self, workspace):
        arb = workspace / "lib" / "l10n" / "app_en.arb"
        arb.parent.mkdir(parents=True)
        arb.write_text(json.dumps({"valid": "Fine", "bad-key": "Hyphenated"}), encoding="utf-8")
        result = runner.invoke(cli, ["clean"])
        assert result.exit_code == 0, result.output
        assert "bad-key" in result.output
        assert read_arb(arb) == {"valid": "Fine"}

    def test_directory(self, workspace):
        l10n = workspace / "lib" / "l10n"
        l10n.mkdir(parents=True)
        (l10n / "app_en.arb").write_text(json.dumps({"broken": "Hi {name"}), encoding="utf-8")
        (l10n / "app_de.arb").write_text(json.dumps({"ok_key": "Gut"}), encoding="utf-8")
        result = runner.invoke(cli, ["clean", "--dir", "lib/l10n"])
        assert result.exit_code == 0, result.output
        assert read_arb(l10n / "app_en.arb") == {}
        assert read_arb(l10n / "app_de.arb") == {"ok_key": "Gut"}


class TestPatterns:
    """The patterns command."""

    def test_lists_categories(self, workspace):
        result = runner.invoke(cli, ["patterns"])
        assert result.exit_code == 0, result.output
        assert "URLs and Web Addresses" in result.output
        assert "Code Elements" in result.output

    def test_bracketed_patterns_shown_verbatim(self, workspace):
        result = runner.invoke(cli, ["patterns"])
        assert result.exit_code == 0, result.output
        assert r"^[A-Z][a-zA-Z0-9]*\.[A-Za-z0-9]+" in result.output

    def test_excluded_sample(self, workspace):
        result = runner.invoke(cli, ["patterns", "--test", "https://example.com"])
        assert result.exit_code == 0, result.output
        assert "Excluded" in result.output

    def test_translatable_sample(self, workspace):
        result = runner.invoke(cli, ["patterns", "--test", "Welcome to our app"])
        assert result.exit_code == 0, result.output
        assert "Translatable" in result.output
