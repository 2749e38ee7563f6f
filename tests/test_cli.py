"""Tests for the schema-drift command line interface."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from schema_drift.cli import build_parser, main
from schema_drift.factory import CheckResult
from schema_drift.schema.models import (
    ColumnChanged,
    Diff,
    DriftReport,
    MissingTable,
    TableAudit,
)

CONFIG_TOML = """
[profiles.dev]
url = "postgresql://app:pw@localhost:5432/app"
description = "Local development"

[profiles.reports]
url = "sqlite:///reports.db"
"""


def _config_file(tmp_path: Path) -> Path:
    path = tmp_path / "schema-drift.toml"
    path.write_text(CONFIG_TOML)
    return path


def _drift_report() -> DriftReport:
    return DriftReport(
        audits=[
            TableAudit(
                namespace="public",
                table="users",
                issues=[
                    ColumnChanged(
                        namespace="public",
                        table="users",
                        diff=Diff(
                            column="id",
                            db_type="INT4",
                            db_nullable=False,
                            model_type="str",
                            model_nullable=False,
                            type_changed=True,
                        ),
                    )
                ],
            ),
            TableAudit(
                namespace="public",
                table="orders",
                issues=[MissingTable(namespace="public", table="orders")],
            ),
        ]
    )


# ============================================================================
# Test: Parser
# ============================================================================


class TestParser:
    """Argument parsing."""

    def test_check_defaults(self) -> None:
        args = build_parser().parse_args(["check"])
        assert args.command == "check"
        assert args.profile is None
        assert args.json is False
        assert args.config is None
        assert args.env_prefix == ""

    def test_check_options(self) -> None:
        args = build_parser().parse_args(
            ["--config", "ci.toml", "--env-prefix", "APP_", "check", "-p", "prod", "--json"]
        )
        assert args.config == Path("ci.toml")
        assert args.env_prefix == "APP_"
        assert args.profile == "prod"
        assert args.json is True

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# ============================================================================
# Test: profiles command
# ============================================================================


class TestProfilesCommand:
    """schema-drift profiles lists configured profiles."""

    def test_lists_profiles(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        exit_code = main(["--config", str(_config_file(tmp_path)), "profiles"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "dev" in out
        assert "reports" in out
        assert "sqlite" in out

    def test_missing_config(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        exit_code = main(["--config", str(tmp_path / "missing.toml"), "profiles"])

        assert exit_code == 1
        assert "Config not found" in capsys.readouterr().out


# ============================================================================
# Test: check command
# ============================================================================


class TestCheckCommand:
    """schema-drift check exit codes and output."""

    def test_no_drift(self, capsys: pytest.CaptureFixture) -> None:
        result = CheckResult(
            success=True,
            profile_name="dev",
            report=DriftReport(audits=[TableAudit(namespace="public", table="users")]),
        )
        with patch("schema_drift.cli.check_profile", new=AsyncMock(return_value=result)) as check:
            exit_code = main(["check", "--profile", "dev"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Checked 1 tables" in out
        assert "No schema drift detected" in out
        check.assert_awaited_once_with(profile_name="dev", config_path=None, env_prefix="")

    def test_drift(self, capsys: pytest.CaptureFixture) -> None:
        result = CheckResult(
            success=False,
            profile_name="dev",
            report=_drift_report(),
            error="Schema drift detected: 2 issues",
        )
        with patch("schema_drift.cli.check_profile", new=AsyncMock(return_value=result)):
            exit_code = main(["check", "-p", "dev"])

        out = capsys.readouterr().out
        assert exit_code == 1
        assert "CHANGED" in out
        assert "MISSING TABLE" in out
        assert "Schema drift detected: 2 issues" in out

    def test_failure(self, capsys: pytest.CaptureFixture) -> None:
        result = CheckResult(
            success=False,
            profile_name="dev",
            error="Failed to query database: connection refused",
        )
        with patch("schema_drift.cli.check_profile", new=AsyncMock(return_value=result)):
            exit_code = main(["check", "-p", "dev"])

        assert exit_code == 1
        assert "connection refused" in capsys.readouterr().out

    def test_json_report(self, capsys: pytest.CaptureFixture) -> None:
        result = CheckResult(
            success=False,
            profile_name="dev",
            report=_drift_report(),
            error="Schema drift detected: 2 issues",
        )
        with patch("schema_drift.cli.check_profile", new=AsyncMock(return_value=result)):
            exit_code = main(["check", "-p", "dev", "--json"])

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        kinds = [issue["kind"] for audit in payload["audits"] for issue in audit["issues"]]
        assert kinds == ["column_changed", "missing_table"]

    def test_json_failure(self, capsys: pytest.CaptureFixture) -> None:
        result = CheckResult(success=False, error="Config not found: x.toml")
        with patch("schema_drift.cli.check_profile", new=AsyncMock(return_value=result)):
            exit_code = main(["check", "--json"])

        payload = json.loads(capsys.readouterr().out)
        assert exit_code == 1
        assert payload["success"] is False
        assert payload["error"] == "Config not found: x.toml"

    def test_env_prefix_forwarded(self) -> None:
        result = CheckResult(success=True, profile_name="ci", report=DriftReport())
        with patch("schema_drift.cli.check_profile", new=AsyncMock(return_value=result)) as check:
            main(["--env-prefix", "CI_", "check"])

        assert check.await_args.kwargs["env_prefix"] == "CI_"
        assert check.await_args.kwargs["profile_name"] is None
