"""Read-only access to the WireGuard profile directory."""

import re
from pathlib import Path
from typing import List, Set

from .exceptions import MalformedProfile, ProfileNotFound, StoreUnavailable
from .models import Profile
from .utils import PROFILE_EXTENSION, profile_file_name, profile_name_from_file


ENDPOINT_RE = re.compile(r"^\s*Endpoint\s*=\s*(\S+)", re.IGNORECASE)
COUNTRY_CODE_RE = re.compile(r"^[A-Za-z]+")


def parse_endpoint_host(endpoint: str) -> str:
    """
    Strip the port from a WireGuard Endpoint value.

    Args:
        endpoint: e.g. '185.65.134.1:51820' or '[2a03:1b20::1]:51820'

    Returns:
        str: host part
    """
    if endpoint.startswith("["):
        return endpoint[1:endpoint.index("]")] if "]" in endpoint else endpoint[1:]
    host, _, _ = endpoint.rpartition(":")
    return host or endpoint


def country_code(name: str) -> str:
    """Leading letters of a profile name: 'us1' -> 'us', 'se-got-wg-001' -> 'se'"""
    match = COUNTRY_CODE_RE.match(name)
    return match.group(0) if match else name


class ProfileStore:
    """Enumerates `<name>-wireguard.conf` files in a single flat directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _profile_files(self) -> List[Path]:
        if not self.directory.is_dir():
            raise StoreUnavailable(f"Profile directory {self.directory} does not exist")
        try:
            return [p for p in self.directory.glob(f"*{PROFILE_EXTENSION}") if p.is_file()]
        except OSError as e:
            raise StoreUnavailable(f"Cannot read profile directory {self.directory}: {e}")

    def list(self) -> List[str]:
        names = (profile_name_from_file(p.name) for p in self._profile_files())
        return sorted(name for name in names if name)

    def exists(self, name: str) -> bool:
        if not name:
            return False
        return (self.directory / profile_file_name(name)).is_file()

    def get(self, name: str) -> Profile:
        if not self.exists(name):
            raise ProfileNotFound(name)
        return Profile(name=name, path=self.directory / profile_file_name(name))

    def matching(self, prefix: str) -> List[str]:
        return [name for name in self.list() if name.startswith(prefix)]

    def country_codes(self) -> Set[str]:
        return {country_code(name) for name in self.list()}

    def endpoint_host(self, name: str) -> str:
        """
        Resolve the server host a profile connects to.

        Raises:
            ProfileNotFound: no definition for name
            MalformedProfile: definition has no Endpoint line
        """
        profile = self.get(name)
        try:
            content = profile.path.read_text()
        except OSError as e:
            raise StoreUnavailable(f"Cannot read profile {profile.path}: {e}")

        for line in content.splitlines():
            match = ENDPOINT_RE.match(line)
            if match:
                return parse_endpoint_host(match.group(1))
        raise MalformedProfile(f"Profile '{name}' has no Endpoint field")
