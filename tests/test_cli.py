"""Tests for the validate-install command line entry point."""

import json

import pytest

from conftest import create_agent_source
from installcheck.tools.validate_install import (
    EXIT_FATAL_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_FAILED,
    discover_agent_ids,
    main,
)


@pytest.fixture(autouse=True)
def stub_probe_env(monkeypatch):
    monkeypatch.setenv("INSTALLCHECK_PROBE_MODE", "stub")


def _run(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestDiscoverAgentIds:
    def test_sorted_ids_from_sources(self, install_root, settings):
        create_agent_source(install_root, "dev")
        assert discover_agent_ids(install_root, settings) == ["architect", "dev"]

    def test_none_found(self, tmp_path, settings):
        assert discover_agent_ids(tmp_path, settings) == []


class TestMain:
    def test_passing_install_exits_zero(self, installed, capsys):
        assert _run([str(installed)]) == EXIT_SUCCESS
        assert "Installation validation PASSED." in capsys.readouterr().out

    def test_failing_install_exits_one(self, install_root, capsys):
        assert _run([str(install_root), "--location", "project"]) == EXIT_VALIDATION_FAILED
        assert "DirectoryNotFound" in capsys.readouterr().out

    def test_missing_install_dir_exits_two(self, tmp_path, capsys):
        assert _run([str(tmp_path / "nope")]) == EXIT_FATAL_ERROR
        assert "not found" in capsys.readouterr().err

    def test_no_agents_exits_two(self, tmp_path):
        assert _run([str(tmp_path)]) == EXIT_FATAL_ERROR

    def test_json_report(self, installed, capsys):
        assert _run([str(installed), "--report", "json"]) == EXIT_SUCCESS

        report = json.loads(capsys.readouterr().out)
        assert report["status"] == "PASSED"
        assert report["warning_count"] == 1

    def test_full_json(self, installed, capsys):
        assert _run([str(installed), "--json", "--location", "user"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert [r["location"] for r in data["file_integrity"]] == ["user"]
        assert data["overall"]["success"] is True

    def test_markdown_report(self, installed, capsys):
        assert _run([str(installed), "--report", "markdown"]) == EXIT_SUCCESS
        assert "# Installation Validation Report" in capsys.readouterr().out

    def test_explicit_agent_without_source_fails(self, installed, capsys):
        assert _run([str(installed), "--agent", "ghost", "--report", "json"]) == EXIT_VALIDATION_FAILED

        report = json.loads(capsys.readouterr().out)
        assert report["errors"][0]["type"] == "NotFound"
