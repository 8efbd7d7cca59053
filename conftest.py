import os
import tempfile

os.environ.setdefault("WGSWITCH_LOG_DIR", tempfile.mkdtemp(prefix="wgswitch-logs-"))

import pytest

from wgswitch.vpn.exceptions import SupervisorError
from wgswitch.vpn.manager import LifecycleController
from wgswitch.vpn.store import ProfileStore
from wgswitch.vpn.tracker import ActiveProfileTracker
from wgswitch.vpn.utils import profile_file_name, profile_name_from_unit, unit_name


RESOLVER = "systemd-resolved.service"

PROFILES = {
    "us1": "10.0.0.1",
    "us2": "10.0.0.2",
    "ca1": "10.0.1.1",
}


class FakeSupervisor:
    """In-memory supervisor that records every state-changing call in order."""

    def __init__(self, enabled=None, active=False, resolver_enabled=True, fail_on=()):
        self.enabled = {enabled} if enabled else set()
        self.active = {enabled} if enabled and active else set()
        self.resolver_enabled = resolver_enabled
        self.fail_on = set(fail_on)
        self.calls = []

    def _record(self, verb, target):
        self.calls.append((verb, target))
        if (verb, target) in self.fail_on:
            raise SupervisorError(["systemctl", verb, target], f"{verb} {target} failed")

    def enable(self, name):
        self._record("enable", name)
        self.enabled.add(name)

    def disable(self, name):
        self._record("disable", name)
        self.enabled.discard(name)

    def start(self, name):
        self._record("start", name)
        self.active.add(name)

    def stop(self, name):
        self._record("stop", name)
        self.active.discard(name)

    def restart(self, name):
        self._record("restart", name)
        self.active.add(name)

    def restart_unit(self, unit):
        self._record("restart_unit", unit)

    def is_enabled(self, unit):
        if unit == RESOLVER:
            return self.resolver_enabled
        return profile_name_from_unit(unit) in self.enabled

    def is_active(self, unit):
        return profile_name_from_unit(unit) in self.active

    def currently_enabled_unit(self):
        if not self.enabled:
            return None
        return unit_name(sorted(self.enabled)[0])


class FakeProbe:
    def __init__(self, latencies):
        self.latencies = latencies
        self.hosts = []

    def measure(self, host):
        self.hosts.append(host)
        return self.latencies.get(host)


def write_profile(directory, name, host):
    path = directory / profile_file_name(name)
    path.write_text(
        "[Interface]\n"
        "PrivateKey = aGVsbG8=\n"
        "Address = 10.64.0.2/32\n"
        "DNS = 10.64.0.1\n"
        "\n"
        "[Peer]\n"
        "PublicKey = d29ybGQ=\n"
        "AllowedIPs = 0.0.0.0/0\n"
        f"Endpoint = {host}:51820\n"
    )
    return path


@pytest.fixture
def profile_dir(tmp_path):
    directory = tmp_path / "wireguard"
    directory.mkdir()
    for name, host in PROFILES.items():
        write_profile(directory, name, host)
    return directory


@pytest.fixture
def store(profile_dir):
    return ProfileStore(profile_dir)


@pytest.fixture
def make_controller(store):
    def _make(supervisor, confirm=None):
        return LifecycleController(
            store=store,
            supervisor=supervisor,
            tracker=ActiveProfileTracker(supervisor),
            resolver_unit=RESOLVER,
            confirm=confirm,
        )
    return _make
