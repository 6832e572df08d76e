"""Tests for issue formatting and the issue log."""

from installcheck.runtime.parallel import map_in_order
from installcheck.validator.errors import ErrorKind, Issue, IssueLog


def test_issue_format_with_fix():
    issue = Issue(ErrorKind.SCHEMA_ERROR, "project/bmad-dev.json", "Missing required field: tools", "Regenerate")

    assert issue.format() == "[FAIL] SchemaError: project/bmad-dev.json Missing required field: tools\n  Fix: Regenerate"
    assert issue.message() == "SchemaError: project/bmad-dev.json: Missing required field: tools"


def test_issue_format_warning_marker():
    issue = Issue(ErrorKind.WARNING, "context", "README.md not found")
    assert issue.format(marker="WARN") == "[WARN] Warning: context README.md not found"


def test_issue_log_snapshot_and_dict():
    log = IssueLog()
    log.add_error(ErrorKind.NOT_FOUND, "dev", "missing")
    log.add_warning("dev", "short prompt")
    log.add_warning("qa", "no tools")

    errors, warnings = log.snapshot()
    assert isinstance(errors, tuple)
    assert [w.location for w in warnings] == ["dev", "qa"]

    data = log.to_dict()
    assert data["status"] == "FAIL"
    assert data["error_count"] == 1
    assert data["warning_count"] == 2


def test_map_in_order_preserves_input_order():
    import time

    def slow_for_small(n):
        time.sleep(0.01 * (5 - n))
        return n * 10

    assert map_in_order(slow_for_small, [0, 1, 2, 3, 4], max_workers=4) == [0, 10, 20, 30, 40]
    assert map_in_order(slow_for_small, [3], max_workers=4) == [30]
    assert map_in_order(slow_for_small, [], max_workers=4) == []
