"""Tests for schema compliance: field checks, naming rules and heuristics."""

from pathlib import Path

import pytest

from conftest import valid_artifact, write_artifact
from installcheck.checks.schema_compliance import check_schema_compliance, validate_agent_schema
from installcheck.types import ErrorKind, InstallLocation
from installcheck.validator.schema import AGENT_CONFIG_FIELDS, FieldSpec, check_fields, missing_fields

USER = InstallLocation.USER
PROJECT = InstallLocation.PROJECT


# ============================================================================
# Declarative Field Checks
# ============================================================================


class TestCheckFields:
    def test_valid_config_has_no_problems(self):
        assert check_fields(valid_artifact("architect")) == []

    def test_missing_field_reported(self):
        config = valid_artifact("architect")
        del config["prompt"]
        assert check_fields(config) == ["Missing required field: prompt"]

    def test_wrong_types_reported_in_field_order(self):
        config = valid_artifact("architect", tools="fs_read", name=42)
        assert check_fields(config) == [
            "Field 'name' must be a string",
            "Field 'tools' must be an array",
        ]

    def test_non_object_root(self):
        assert check_fields(["not", "an", "object"]) == ["Configuration root must be an object, got list"]

    def test_missing_fields_in_spec_order(self):
        assert missing_fields({"tools": []}) == ["name", "description", "prompt", "resources"]

    def test_optional_field_not_required(self):
        fields = tuple(AGENT_CONFIG_FIELDS) + (FieldSpec("model", "string", required=False),)
        assert check_fields(valid_artifact("architect"), fields) == []
        assert check_fields(valid_artifact("architect", model=3), fields) == ["Field 'model' must be a string"]


# ============================================================================
# Per-Artifact Validation
# ============================================================================


class TestValidateAgentSchema:
    def test_valid_artifact_has_no_issues(self, settings):
        log = validate_agent_schema(valid_artifact("architect"), "architect", settings)
        assert log.errors == []
        assert log.warnings == []

    def test_missing_resources_is_single_error(self, settings):
        config = valid_artifact("architect")
        del config["resources"]

        log = validate_agent_schema(config, "architect", settings)

        (error,) = log.errors
        assert error.kind == ErrorKind.SCHEMA_ERROR
        assert "resources" in error.problem
        assert log.warnings == []

    def test_resources_without_knowledge_base_is_warning(self, settings):
        config = valid_artifact("architect", resources=["file://README.md"])

        log = validate_agent_schema(config, "architect", settings)

        assert log.errors == []
        (warning,) = log.warnings
        assert ".bmad-core" in warning.problem

    @pytest.mark.parametrize("bad_name", ["bmad architect", "bmad/architect"])
    def test_invalid_characters_are_naming_violation(self, settings, bad_name):
        config = valid_artifact("architect", name=bad_name)

        log = validate_agent_schema(config, "architect", settings)

        kinds = [e.kind for e in log.errors]
        assert kinds == [ErrorKind.NAMING_VIOLATION, ErrorKind.NAMING_VIOLATION]
        assert any("invalid characters" in e.problem for e in log.errors)

    def test_wrong_name_is_naming_violation(self, settings):
        config = valid_artifact("architect", name="bmad-dev")

        log = validate_agent_schema(config, "architect", settings)

        (error,) = log.errors
        assert error.kind == ErrorKind.NAMING_VIOLATION
        assert "bmad-architect" in error.problem

    def test_prefixed_agent_id_accepts_same_name(self, settings):
        log = validate_agent_schema(valid_artifact("bmad-dev"), "bmad-dev", settings)
        assert log.errors == []

    def test_empty_tools_is_warning(self, settings):
        log = validate_agent_schema(valid_artifact("architect", tools=[]), "architect", settings)

        assert log.errors == []
        assert [w.problem for w in log.warnings] == ["Agent has no tools assigned"]

    def test_short_prompt_without_keyword_warns_twice(self, settings):
        log = validate_agent_schema(valid_artifact("architect", prompt="Be helpful."), "architect", settings)

        assert log.errors == []
        assert len(log.warnings) == 2
        assert "too short" in log.warnings[0].problem
        assert "BMAD" in log.warnings[1].problem

    def test_non_mapping_root_stops_after_schema_error(self, settings):
        log = validate_agent_schema("just text", "architect", settings)

        (error,) = log.errors
        assert error.kind == ErrorKind.SCHEMA_ERROR
        assert log.warnings == []

    def test_non_string_name_skips_naming_checks(self, settings):
        log = validate_agent_schema(valid_artifact("architect", name=["x"]), "architect", settings)

        assert [e.kind for e in log.errors] == [ErrorKind.SCHEMA_ERROR]

    def test_issue_location_used(self, settings):
        log = validate_agent_schema(valid_artifact("architect", tools=[]), "architect", settings, location="user/x.json")
        assert log.warnings[0].location == "user/x.json"


# ============================================================================
# Stage
# ============================================================================


class TestCheckSchemaCompliance:
    def test_reads_artifacts_from_disk(self, installed, settings):
        results = check_schema_compliance(installed, [USER, PROJECT], ["architect"], settings)

        assert [(r.location, r.agent_id) for r in results] == [(USER, "architect"), (PROJECT, "architect")]
        assert all(r.success for r in results)

    def test_missing_artifacts_skipped(self, install_root, project_dir, settings):
        write_artifact(project_dir, "architect")

        results = check_schema_compliance(install_root, [USER, PROJECT], ["architect", "dev"], settings)

        assert [(r.location, r.agent_id) for r in results] == [(PROJECT, "architect")]

    def test_corrupt_file_is_parse_error(self, install_root, project_dir, settings):
        write_artifact(project_dir, "architect", raw="{oops")

        (result,) = check_schema_compliance(install_root, [PROJECT], ["architect"], settings)

        assert result.success is False
        (error,) = result.errors
        assert error.kind == ErrorKind.PARSE_ERROR
        assert error.problem.startswith("Failed to parse JSON")
        assert error.location == "project/bmad-architect.json"

    def test_unreadable_artifact_is_parse_error(self, install_root, project_dir, settings, monkeypatch):
        write_artifact(project_dir, "architect")
        write_artifact(project_dir, "dev")
        original = Path.is_file

        def is_file(path):
            if path.name == "bmad-dev.json":
                raise PermissionError(13, "Permission denied", str(path))
            return original(path)

        monkeypatch.setattr(Path, "is_file", is_file)

        ok, failed = check_schema_compliance(install_root, [PROJECT], ["architect", "dev"], settings)

        assert ok.success is True
        (error,) = failed.errors
        assert error.kind == ErrorKind.PARSE_ERROR
        assert error.problem.startswith("Failed to read artifact")

    def test_overlong_agent_id_does_not_abort_stage(self, install_root, project_dir, settings):
        write_artifact(project_dir, "architect")

        results = check_schema_compliance(install_root, [PROJECT], ["architect", "x" * 300], settings)

        assert results[0].agent_id == "architect"
        assert results[0].success is True

    def test_ordered_by_location_then_agent(self, install_root, user_dir, project_dir, settings):
        ids = ["qa", "architect", "dev"]
        for agent_id in ids:
            write_artifact(user_dir, agent_id)
            write_artifact(project_dir, agent_id)

        results = check_schema_compliance(install_root, [PROJECT, USER], ids, settings)

        expected = [(PROJECT, a) for a in ids] + [(USER, a) for a in ids]
        assert [(r.location, r.agent_id) for r in results] == expected

    def test_warnings_do_not_fail_artifact(self, install_root, project_dir, settings):
        write_artifact(project_dir, "architect", valid_artifact("architect", tools=[]))

        (result,) = check_schema_compliance(install_root, [PROJECT], ["architect"], settings)

        assert result.success is True
        assert len(result.warnings) == 1
