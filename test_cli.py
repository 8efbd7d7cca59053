"""Command line dispatch tests."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from conftest import RESOLVER, FakeProbe, FakeSupervisor
from wgswitch.cli import cli
from wgswitch.vpn.diagnostics import DiagnosticsReporter
from wgswitch.vpn.manager import LifecycleController
from wgswitch.vpn.models import SyncSummary
from wgswitch.vpn.tracker import ActiveProfileTracker


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_env(store):
    """Patch the CLI's factories so commands run against fakes."""
    supervisor = FakeSupervisor()

    def controller_factory(settings, confirm=None):
        return LifecycleController(store, supervisor, ActiveProfileTracker(supervisor), RESOLVER, confirm=confirm)

    diagnostics = DiagnosticsReporter(store, FakeProbe({"10.0.0.1": 31.5}))
    synchronizer = MagicMock()

    with (
        patch("wgswitch.cli.get_controller", side_effect=controller_factory),
        patch("wgswitch.cli.get_diagnostics", return_value=diagnostics),
        patch("wgswitch.cli.get_synchronizer", return_value=synchronizer),
    ):
        yield supervisor, synchronizer


def invoke(runner, *args, **kwargs):
    return runner.invoke(cli, ["--config", "/nonexistent/wgswitch.conf", *args], **kwargs)


def test_unknown_command_prints_usage(runner, cli_env):
    result = invoke(runner, "frobnicate")

    assert result.exit_code != 0
    assert "Usage" in result.output


def test_no_command_prints_usage(runner, cli_env):
    result = runner.invoke(cli, [])

    assert result.exit_code != 0
    assert "Usage" in result.output


@pytest.mark.parametrize("args", [["list"], ["l"]])
def test_list(runner, cli_env, args):
    result = invoke(runner, *args)

    assert result.exit_code == 0
    assert result.output.split() == ["ca1", "us1", "us2"]


def test_country_codes(runner, cli_env):
    result = invoke(runner, "c")

    assert result.output.split() == ["ca", "us"]


def test_which(runner, cli_env):
    supervisor, _ = cli_env

    assert "No profile enabled" in invoke(runner, "w").output

    supervisor.enabled = {"us2"}
    assert "us2 (inactive)" in invoke(runner, "which").output


def test_start_alias(runner, cli_env):
    supervisor, _ = cli_env

    result = invoke(runner, "a", "us1")

    assert result.exit_code == 0
    assert supervisor.calls == [("enable", "us1"), ("start", "us1"), ("restart_unit", RESOLVER)]
    assert f"Restarted {RESOLVER}" in result.output


def test_enable_prompts_until_valid_answer(runner, cli_env):
    supervisor, _ = cli_env
    supervisor.enabled = {"us1"}

    result = invoke(runner, "e", "us2", input="x\ny\n")

    assert result.exit_code == 0
    assert result.output.count("Disable it and enable us2?") == 2
    assert supervisor.calls == [("disable", "us1"), ("enable", "us2")]


def test_enable_declined(runner, cli_env):
    supervisor, _ = cli_env
    supervisor.enabled = {"us1"}

    result = invoke(runner, "enable", "us2", input="n\n")

    assert result.exit_code == 1
    assert "Kept 'us1' enabled" in result.output
    assert supervisor.calls == []


def test_switch_without_name(runner, cli_env):
    result = invoke(runner, "i")

    assert result.exit_code == 1
    assert "Missing required argument" in result.output


def test_stop_without_profile(runner, cli_env):
    result = invoke(runner, "o")

    assert result.exit_code == 1
    assert "No profile is currently enabled" in result.output


def test_disable(runner, cli_env):
    supervisor, _ = cli_env
    supervisor.enabled = {"ca1"}
    supervisor.active = {"ca1"}

    result = invoke(runner, "d")

    assert result.exit_code == 0
    assert supervisor.calls == [("disable", "ca1"), ("stop", "ca1"), ("restart_unit", RESOLVER)]


def test_ping(runner, cli_env):
    result = invoke(runner, "p", "us")

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "unreachable" in lines[1]
    ranking = lines[lines.index("Ranking:") + 1:]
    assert len(ranking) == 1
    assert ranking[0].startswith("us1")
    assert "31.5 ms" in ranking[0]


def test_get(runner, cli_env):
    _, synchronizer = cli_env
    synchronizer.sync.return_value = SyncSummary(fetched=["de1", "de2"], backup_dir=Path("/etc/wireguard/2024-05-01_12-30"))

    result = invoke(runner, "g")

    assert result.exit_code == 0
    assert "2024-05-01_12-30" in result.output
    assert "Fetched 2 profiles" in result.output
