"""
Tests for the use cases — run (ledger bookkeeping), status, config check.
"""

from pathlib import Path

import pytest

from spicectl.adapters.mock import MockRunner
from spicectl.adapters.shell.command import ProcessRunner
from spicectl.core.models.operation import OperationKind, OperationStatus
from spicectl.core.models.settings import AppSettings
from spicectl.core.models.status import StatusState
from spicectl.core.persistence.settings_file import (
    default_settings_path,
    load_settings,
    save_settings,
)
from spicectl.core.use_cases.config_check import check_config
from spicectl.core.use_cases.run import build_service, run_operation
from spicectl.core.use_cases.status import get_status

EXISTS = "command -v spicetify"
VERSION = "spicetify -v"
BOOTSTRAP = (
    "curl -fsSL https://raw.githubusercontent.com/spicetify/spicetify-cli/master/install.sh | sh"
)
APPLY = "spicetify apply"
RESTORE = "spicetify restore"


# ── Run use case ─────────────────────────────────────────────────────


class TestRunOperation:
    """Ledger bookkeeping and settings sync around one operation."""

    def test_success_is_recorded(self, service, ledger, mock_runner, host_app):
        mock_runner.set_output(BOOTSTRAP, "installer says hi\n")
        mock_runner.set_output(VERSION, "2.36.11\n")

        result = run_operation(OperationKind.INSTALL, service, ledger)

        assert result.ok
        assert result.record.status == OperationStatus.SUCCESS
        stored = ledger.get(result.record.id)
        assert stored.ok
        assert "installer says hi" in stored.output
        assert "Installation completed" in stored.output
        assert result.status.state == StatusState.INSTALLED

    def test_failure_is_recorded(self, service, ledger, mock_runner):
        mock_runner.set_failure(APPLY, output="apply exploded\n")

        result = run_operation(OperationKind.APPLY, service, ledger)

        assert not result.ok
        assert result.error_kind == "apply_failed"
        stored = ledger.get(result.record.id)
        assert stored.status == OperationStatus.FAILED
        assert "apply exploded" in stored.error
        assert "apply exploded" in stored.output
        assert result.status is None

    def test_precondition_failure_recorded_without_commands(
        self, service, ledger, mock_runner,
    ):
        result = run_operation(OperationKind.INSTALL, service, ledger)

        assert result.error_kind == "precondition_missing"
        assert result.recovery_suggestion
        assert mock_runner.call_count == 0
        assert ledger.get(result.record.id).status == OperationStatus.FAILED

    def test_no_record_left_pending(self, service, ledger, mock_runner, host_app):
        """Failed runs still complete their ledger records."""
        mock_runner.set_failure(BOOTSTRAP)
        run_operation(OperationKind.INSTALL, service, ledger)
        run_operation(OperationKind.APPLY, service, ledger)
        assert all(not r.pending for r in ledger.read_all())

    def test_unexpected_error_completes_record_and_propagates(
        self, service, ledger, monkeypatch,
    ):
        def _boom(kind, sink=None):
            raise RuntimeError("kaboom")

        monkeypatch.setattr(service, "perform", _boom)

        with pytest.raises(RuntimeError):
            run_operation(OperationKind.APPLY, service, ledger)

        (record,) = ledger.read_all()
        assert record.status == OperationStatus.FAILED
        assert "kaboom" in record.error

    def test_remove_always_succeeds(self, service, ledger, mock_runner):
        """Remove is recorded as Success even when restore fails."""
        mock_runner.set_failure(RESTORE)
        result = run_operation(OperationKind.REMOVE, service, ledger)
        assert result.ok
        assert ledger.get(result.record.id).ok

    def test_sink_sees_same_text_as_ledger(self, service, ledger):
        """The caller's sink and the ledger output see the same text."""
        chunks: list[str] = []
        result = run_operation(OperationKind.APPLY, service, ledger, sink=chunks.append)
        assert "".join(chunks) == ledger.get(result.record.id).output

    def test_update_outcome_attached(self, service, ledger):
        result = run_operation(OperationKind.UPDATE, service, ledger)
        assert result.update is not None
        assert result.to_dict()["update"]["changed"] is False

    def test_install_syncs_settings(self, service, ledger, mock_runner, host_app, home):
        mock_runner.set_output(VERSION, "2.36.11\n")
        settings_path = home / "settings.json"

        run_operation(OperationKind.INSTALL, service, ledger, settings_path=settings_path)

        assert load_settings(settings_path).last_tool_version == "2.36.11"

    def test_update_records_check(self, service, ledger):
        run_operation(OperationKind.UPDATE, service, ledger)
        settings = load_settings(default_settings_path(ledger.path.parent))
        assert settings.last_update_check is not None

    def test_unwritable_settings_do_not_fail_the_operation(
        self, service, ledger, mock_runner, host_app, home,
    ):
        """The ledger already says Success; a settings write error is only a warning."""
        blocker = home / "blocker"
        blocker.write_text("not a directory")

        result = run_operation(
            OperationKind.INSTALL, service, ledger, settings_path=blocker / "settings.json",
        )

        assert result.ok
        assert ledger.get(result.record.id).ok
        assert len(result.warnings) == 1
        assert result.to_dict()["warnings"][0].startswith("Settings not updated")

    def test_remove_clears_settings(self, service, ledger):
        path = default_settings_path(ledger.path.parent)
        save_settings(
            AppSettings(last_tool_version="2.0.0", installation_path="/x", theme="dark"),
            path,
        )

        run_operation(OperationKind.REMOVE, service, ledger)

        settings = load_settings(path)
        assert settings.last_tool_version is None
        assert settings.installation_path is None
        assert settings.theme == "dark"

    def test_apply_does_not_touch_settings(self, service, ledger):
        run_operation(OperationKind.APPLY, service, ledger)
        assert not default_settings_path(ledger.path.parent).exists()

    def test_to_dict_on_failure(self, service, ledger, mock_runner):
        mock_runner.set_failure(EXISTS, output="")
        data = run_operation(OperationKind.UPDATE, service, ledger).to_dict()
        assert data["ok"] is False
        assert data["operation"] == "update"
        assert data["error_kind"] == "precondition_missing"
        assert data["record"]["status"] == "failed"


class TestBuildService:
    def test_mock_mode(self, config):
        service = build_service(config, mock_mode=True)
        assert isinstance(service.runner, MockRunner)

    def test_real_runner(self, config):
        service = build_service(config)
        assert isinstance(service.runner, ProcessRunner)


# ── Status use case ──────────────────────────────────────────────────


class TestGetStatus:
    """Tests for the status use case."""

    def test_without_ledger(self, service, mock_runner, host_app):
        mock_runner.set_output(VERSION, "2.36.11\n")

        result = get_status(service)

        assert result.tool == "spicetify"
        assert result.host == "Spotify"
        assert result.host_installed
        assert result.status.version == "2.36.11"
        assert result.last_operation is None

    def test_includes_last_operation(self, service, ledger):
        run_operation(OperationKind.APPLY, service, ledger)

        result = get_status(service, ledger)

        assert result.last_operation.kind == OperationKind.APPLY
        data = result.to_dict()
        assert data["last_operation"]["status"] == "success"
        assert data["host"] == {"name": "Spotify", "installed": False}

    def test_update_check_due_until_an_update_runs(self, service, ledger):
        """A successful update stamps the check time."""
        assert get_status(service, ledger).update_check_due is True

        run_operation(OperationKind.UPDATE, service, ledger)

        assert get_status(service, ledger).update_check_due is False

    def test_update_check_not_due_when_not_installed(self, service, ledger, mock_runner):
        mock_runner.set_failure(EXISTS, output="")
        assert get_status(service, ledger).update_check_due is False

    def test_naive_update_check_timestamp(self, service, ledger):
        """A hand-edited settings file without an offset still yields a status."""
        path = default_settings_path(ledger.path.parent)
        path.parent.mkdir(parents=True)
        path.write_text('{"last_update_check": "2020-01-01T00:00:00"}')

        assert get_status(service, ledger).update_check_due is True

    def test_not_installed_to_dict(self, service, mock_runner):
        mock_runner.set_failure(EXISTS, output="")
        data = get_status(service).to_dict()
        assert data["status"]["state"] == "not_installed"
        assert data["status"]["display"] == "Not Installed"


# ── Config check use case ────────────────────────────────────────────


class TestCheckConfig:
    """Tests for config validation and warnings."""

    def test_no_file_uses_defaults_with_warning(self, home):
        result = check_config()
        assert result.valid
        assert result.config_path is None
        assert any("built-in defaults" in w for w in result.warnings)

    def test_valid_file(self, home, host_app):
        path = home / "config.yml"
        path.write_text(
            "tool: spicetify\n"
            "host:\n"
            "  name: Spotify\n"
            "  install_paths: ['~/Applications/Spotify.app']\n"
        )

        result = check_config(path)

        assert result.valid
        assert result.errors == []
        assert not any("not found" in w for w in result.warnings)

    def test_missing_host_is_a_warning(self, home):
        path = home / "config.yml"
        path.write_text("host:\n  install_paths: ['~/Nowhere/Spotify.app']\n")

        result = check_config(path)

        assert result.valid
        assert any("Spotify not found" in w for w in result.warnings)

    def test_http_script_url_is_an_error(self, home):
        path = home / "config.yml"
        path.write_text("install_script_url: http://example.com/install.sh\n")

        result = check_config(path)

        assert not result.valid
        assert any("https" in e for e in result.errors)

    def test_invalid_yaml(self, home):
        path = home / "config.yml"
        path.write_text("tool: [unclosed\n")

        result = check_config(path)

        assert not result.valid
        assert result.config is None

    def test_explicit_missing_file(self, home):
        result = check_config(home / "nope.yml")
        assert not result.valid
        assert "not found" in result.errors[0]

    def test_disabled_timeout_and_empty_remove_paths(self, home):
        path = home / "config.yml"
        path.write_text("command_timeout: null\nremove_paths: []\n")

        warnings = " ".join(check_config(path).warnings)

        assert "command_timeout" in warnings
        assert "remove_paths" in warnings

    def test_to_dict(self, home):
        data = check_config().to_dict()
        assert data["valid"] is True
        assert data["tool"] == "spicetify"
        assert data["config_path"] is None
