"""Tests for the habit-reminders CLI commands."""

from __future__ import annotations

import json
import logging
import os
import time
from unittest.mock import AsyncMock, MagicMock

from click.testing import CliRunner
import pytest

from habit_reminders.autostart import NoAutostart
from habit_reminders.cli.commands import daemon as daemon_commands
from habit_reminders.cli.main import cli
from habit_reminders.core.exceptions import AutostartError
from habit_reminders.core.settings import get_reminder_settings
from habit_reminders.features.reminders.store import ReminderConfigStore


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def store(isolated_config_dir) -> ReminderConfigStore:
    return ReminderConfigStore(get_reminder_settings().config_path)


def json_payload(output: str):
    """Cut the JSON document out of output that may carry status lines."""
    start = min(i for i in (output.find("["), output.find("{")) if i >= 0)
    end = max(output.rfind("]"), output.rfind("}")) + 1
    return json.loads(output[start:end])


@pytest.mark.unit
class TestRemindersList:
    def test_json_output_uses_file_format(self, runner, store, reminder_factory):
        store.write([reminder_factory("c1", title="Stretch", days={1: True, 3: False}, times=["08:00"])])

        result = runner.invoke(cli, ["reminders", "list", "--format", "json"])

        assert result.exit_code == 0
        assert json_payload(result.output) == [
            {"id": "c1", "title": "Stretch", "days": {"1": True, "3": False}, "times": ["08:00"]}
        ]

    def test_table_output(self, runner, store, reminder_factory):
        store.write([reminder_factory("c1", title="Stretch", days={1: True, 3: True}, times=["08:00"])])

        result = runner.invoke(cli, ["reminders", "list"])

        assert result.exit_code == 0
        assert "Stretch" in result.output
        assert "MO,WE" in result.output
        assert "Total: 1 reminders" in result.output

    def test_empty_store(self, runner):
        result = runner.invoke(cli, ["reminders", "list"])

        assert result.exit_code == 0
        assert "No reminders configured" in result.output


@pytest.mark.unit
class TestRemindersJobs:
    def test_json_lists_one_job_per_time(self, runner, store, reminder_factory):
        store.write(
            [
                reminder_factory(
                    "c1", title="Stretch", days={d: True for d in range(7)}, times=["08:00", "08:00"]
                ),
                reminder_factory("off", days={}, times=["09:00"]),
            ]
        )

        result = runner.invoke(cli, ["reminders", "jobs", "--format", "json"])

        assert result.exit_code == 0
        jobs = json_payload(result.output)
        assert [job["id"] for job in jobs] == ["c1-08:00", "c1-08:00#2"]
        assert jobs[0]["rrule"] == "FREQ=WEEKLY;BYDAY=SU,MO,TU,WE,TH,FR,SA;BYHOUR=8;BYMINUTE=0;BYSECOND=0"
        assert jobs[0]["next_run_time"] is not None

    def test_table_output(self, runner, store, reminder_factory):
        store.write([reminder_factory("c1", title="Stretch", times=["08:00"])])

        result = runner.invoke(cli, ["reminders", "jobs"])

        assert result.exit_code == 0
        assert "c1-08:00" in result.output
        assert "Total: 1 scheduled jobs" in result.output


@pytest.mark.unit
class TestRemindersSync:
    def test_sync_writes_enabled_habits(self, runner, store, tmp_path):
        habits_file = tmp_path / "habits.json"
        habits_file.write_text(
            json.dumps(
                [
                    {
                        "id": "c1",
                        "title": "Stretch",
                        "notificationEnabled": True,
                        "notificationDays": {"1": True},
                        "notificationTimes": ["08:00"],
                    },
                    {"id": "c2", "title": "Read", "notificationEnabled": False},
                ]
            )
        )

        result = runner.invoke(cli, ["reminders", "sync", str(habits_file)])

        assert result.exit_code == 0
        assert "Synced 1 of 2 habits" in result.output
        assert [c.id for c in store.read()] == ["c1"]

    def test_invalid_file_exits_with_1(self, runner, store, tmp_path):
        habits_file = tmp_path / "habits.json"
        habits_file.write_text(json.dumps([{"id": "c1", "notificationTimes": ["8am"]}]))

        result = runner.invoke(cli, ["reminders", "sync", str(habits_file)])

        assert result.exit_code == 1
        assert not store.path.exists()


@pytest.mark.unit
class TestConfigShow:
    def test_json_output(self, runner, isolated_config_dir):
        result = runner.invoke(cli, ["config", "show", "--format", "json"])

        assert result.exit_code == 0
        payload = json_payload(result.output)
        assert set(payload) == {"reminders", "daemon", "logging"}
        assert payload["reminders"]["config_dir"] == str(isolated_config_dir)

    def test_yaml_output(self, runner):
        result = runner.invoke(cli, ["config", "show", "--format", "yaml"])

        assert result.exit_code == 0
        assert "reminders:" in result.output


@pytest.mark.unit
class TestDaemonCommands:
    @pytest.fixture(autouse=True)
    def no_autostart(self, monkeypatch):
        monkeypatch.setattr(daemon_commands, "select_autostart_provider", lambda: NoAutostart())

    def test_status_without_foreground_app(self, runner):
        result = runner.invoke(cli, ["daemon", "status"])

        assert result.exit_code == 0
        assert "Autostart state    : unsupported" in result.output
        assert "Firing duty        : daemon" in result.output

    def test_status_with_live_marker(self, runner):
        marker_path = get_reminder_settings().marker_path
        marker_path.parent.mkdir(parents=True)
        marker_path.touch()

        result = runner.invoke(cli, ["daemon", "status"])

        assert "Firing duty        : foreground app" in result.output

    def test_status_with_stale_marker(self, runner):
        marker_path = get_reminder_settings().marker_path
        marker_path.parent.mkdir(parents=True)
        marker_path.touch()
        old = time.time() - 3600
        os.utime(marker_path, (old, old))

        result = runner.invoke(cli, ["daemon", "status"])

        assert "stale marker" in result.output

    def test_install_unsupported_exits_with_1(self, runner):
        result = runner.invoke(cli, ["daemon", "install"])

        assert result.exit_code == 1
        assert "No autostart mechanism" in result.output

    def test_install_with_provider(self, runner, monkeypatch):
        provider = MagicMock()
        provider.name = "systemd"
        provider.is_supported.return_value = True
        monkeypatch.setattr(daemon_commands, "select_autostart_provider", lambda: provider)

        result = runner.invoke(cli, ["daemon", "install"])

        assert result.exit_code == 0
        provider.install.assert_called_once_with()
        assert "Daemon registered with systemd" in result.output

    def test_install_failure_exits_with_1(self, runner, monkeypatch, caplog):
        provider = MagicMock()
        provider.name = "systemd"
        provider.is_supported.return_value = True
        provider.install.side_effect = AutostartError(detail="systemctl --user enable failed")
        monkeypatch.setattr(daemon_commands, "select_autostart_provider", lambda: provider)

        with caplog.at_level(logging.ERROR):
            result = runner.invoke(cli, ["daemon", "install"])

        assert result.exit_code == 1
        assert "Failed to install daemon" in result.output
        assert "systemctl --user enable failed" in caplog.text

    def test_run_propagates_startup_failure(self, runner, monkeypatch):
        monkeypatch.setattr(daemon_commands, "run_daemon", AsyncMock(return_value=1))

        result = runner.invoke(cli, ["daemon", "run"])

        assert result.exit_code == 1

    def test_run_clean_exit(self, runner, monkeypatch):
        monkeypatch.setattr(daemon_commands, "run_daemon", AsyncMock(return_value=0))

        result = runner.invoke(cli, ["daemon", "run"])

        assert result.exit_code == 0


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "habit-reminders" in result.output
