"""Factory for creating profile-related commands."""

from pathlib import Path
from .commands import (
    Command,
    PING,
    SYSTEMCTL_ENABLE,
    SYSTEMCTL_DISABLE,
    SYSTEMCTL_START,
    SYSTEMCTL_STOP,
    SYSTEMCTL_RESTART,
    SYSTEMCTL_IS_ACTIVE,
    SYSTEMCTL_IS_ENABLED,
)


class ProfileCommandFactory:
    """Factory for creating supervisor, latency and sync commands."""

    @staticmethod
    def enable_unit(unit: str, sudo: bool = False) -> list[str]:
        """Create command registering a unit for auto-start."""
        return SYSTEMCTL_ENABLE.with_arg(unit).as_sudo(sudo).build()

    @staticmethod
    def disable_unit(unit: str, sudo: bool = False) -> list[str]:
        """Create command removing a unit's auto-start registration."""
        return SYSTEMCTL_DISABLE.with_arg(unit).as_sudo(sudo).build()

    @staticmethod
    def start_unit(unit: str, sudo: bool = False) -> list[str]:
        return SYSTEMCTL_START.with_arg(unit).as_sudo(sudo).build()

    @staticmethod
    def stop_unit(unit: str, sudo: bool = False) -> list[str]:
        return SYSTEMCTL_STOP.with_arg(unit).as_sudo(sudo).build()

    @staticmethod
    def restart_unit(unit: str, sudo: bool = False) -> list[str]:
        return SYSTEMCTL_RESTART.with_arg(unit).as_sudo(sudo).build()

    @staticmethod
    def is_active(unit: str) -> list[str]:
        """Create unit running-state query (exit status only)."""
        return SYSTEMCTL_IS_ACTIVE.with_arg(unit).build()

    @staticmethod
    def is_enabled(unit: str) -> list[str]:
        """Create unit auto-start query (exit status only)."""
        return SYSTEMCTL_IS_ENABLED.with_arg(unit).build()

    @staticmethod
    def ping_host(host: str, count: int = 1, timeout: int = 1) -> list[str]:
        """Create latency probe command."""
        return PING.with_args("-c", str(count), "-W", str(timeout), host).build()

    @staticmethod
    def sync_profiles(template: str, output_dir: Path) -> list[str]:
        """Create relay sync command writing into output_dir."""
        cmd = Command.from_str(template)
        return Command([arg.replace("{output}", str(output_dir)) for arg in cmd.base_cmd]).build()
