"""systemd adapter for wg-quick units."""

from pathlib import Path
from typing import Optional

from .command_factory import ProfileCommandFactory
from .utils import UNIT_GLOB, command_succeeds, profile_name_from_unit, run_command, unit_name
from ..logging_utility import logger


class ServiceSupervisorClient:
    """
    Issues single requests to systemctl. Lifecycle methods take a profile
    name and address its wg-quick unit; queries take a unit name.

    Nothing here retries: a failing systemctl call raises SupervisorError.
    """

    def __init__(self, wants_dir: Path, use_sudo: bool = False):
        self.wants_dir = Path(wants_dir)
        self.use_sudo = use_sudo

    def enable(self, name: str) -> None:
        run_command(ProfileCommandFactory.enable_unit(unit_name(name), self.use_sudo))

    def disable(self, name: str) -> None:
        run_command(ProfileCommandFactory.disable_unit(unit_name(name), self.use_sudo))

    def start(self, name: str) -> None:
        run_command(ProfileCommandFactory.start_unit(unit_name(name), self.use_sudo))

    def stop(self, name: str) -> None:
        run_command(ProfileCommandFactory.stop_unit(unit_name(name), self.use_sudo))

    def restart(self, name: str) -> None:
        self.restart_unit(unit_name(name))

    def restart_unit(self, unit: str) -> None:
        run_command(ProfileCommandFactory.restart_unit(unit, self.use_sudo))

    def is_enabled(self, unit: str) -> bool:
        return command_succeeds(ProfileCommandFactory.is_enabled(unit))

    def is_active(self, unit: str) -> bool:
        return command_succeeds(ProfileCommandFactory.is_active(unit))

    def currently_enabled_unit(self) -> Optional[str]:
        """Return the profile unit registered under multi-user.target, if any.

        wg-quick units outside the profile naming convention are skipped.
        """
        if not self.wants_dir.is_dir():
            return None
        units = []
        for link in sorted(self.wants_dir.glob(UNIT_GLOB)):
            if not link.is_symlink():
                continue
            if profile_name_from_unit(link.name) is None:
                logger.debug(f"Skipping foreign wg-quick unit {link.name}")
                continue
            units.append(link.name)
        if not units:
            return None
        if len(units) > 1:
            logger.warning(f"More than one profile unit enabled: {', '.join(units)}; using {units[0]}")
        return units[0]
