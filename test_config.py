"""Configuration loading tests."""

from pathlib import Path

import pytest

from wgswitch.config import DEFAULT_CONFIG_FILE, load_settings
from wgswitch.vpn.exceptions import ConfigurationError


def write_config(tmp_path, text):
    path = tmp_path / "wgswitch.conf"
    path.write_text(text)
    return path


def test_defaults_when_file_missing(tmp_path):
    settings = load_settings(tmp_path / "missing.conf")

    assert settings.profile_dir == Path("/etc/wireguard")
    assert settings.wants_dir == Path("/etc/systemd/system/multi-user.target.wants")
    assert settings.resolver_unit == "systemd-resolved.service"
    assert settings.use_sudo is False
    assert settings.ping_count == 1


def test_shipped_config_is_valid():
    assert load_settings(DEFAULT_CONFIG_FILE).profile_dir == Path("/etc/wireguard")


def test_overrides(tmp_path):
    path = write_config(tmp_path, (
        "[profiles]\ndirectory = /srv/wg\n"
        "[supervisor]\nuse_sudo = yes\nresolver_unit = unbound.service\n"
        "[latency]\ncount = 3\n"
    ))

    settings = load_settings(path)

    assert settings.profile_dir == Path("/srv/wg")
    assert settings.use_sudo is True
    assert settings.resolver_unit == "unbound.service"
    assert settings.ping_count == 3
    assert settings.ping_timeout == 1


def test_env_var(tmp_path, monkeypatch):
    path = write_config(tmp_path, "[profiles]\ndirectory = /opt/profiles\n")
    monkeypatch.setenv("WGSWITCH_CONFIG", str(path))

    assert load_settings().profile_dir == Path("/opt/profiles")


@pytest.mark.parametrize("text", [
    "[latency]\ncount = many\n",
    "[latency]\ncount = 0\n",
    "[supervisor]\nuse_sudo = maybe\n",
    "[sync]\ncommand = relay-sync\n",
    "[logging]\nlevel = LOUD\n",
    "not an ini file",
])
def test_invalid_values(tmp_path, text):
    with pytest.raises(ConfigurationError):
        load_settings(write_config(tmp_path, text))
