"""Relay list synchronization with timestamped backups of replaced profiles."""

import shutil
import subprocess
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, List

from .command_factory import ProfileCommandFactory
from .exceptions import StoreUnavailable, SyncError
from .models import SyncSummary
from .utils import PROFILE_EXTENSION, PROFILE_SUFFIX, profile_name_from_file
from ..logging_utility import logger


BACKUP_FORMAT = "%Y-%m-%d_%H-%M"


class ProfileSynchronizer:
    """
    Fetches a fresh profile set with the external sync tool.

    The tool writes into a staging directory; the profile directory is only
    touched once the tool has succeeded and produced at least one profile.
    Replaced profiles are moved into a YYYY-MM-DD_HH-MM subdirectory.
    """

    def __init__(self, directory: Path, command_template: str,
                 clock: Callable[[], datetime] = datetime.now):
        self.directory = Path(directory)
        self.command_template = command_template
        self.clock = clock

    def _existing_profiles(self) -> List[Path]:
        return sorted(self.directory.glob(f"*{PROFILE_SUFFIX}{PROFILE_EXTENSION}"))

    def _backup(self, files: List[Path]) -> Path:
        backup_dir = self.directory / self.clock().strftime(BACKUP_FORMAT)
        backup_dir.mkdir(exist_ok=True)
        for path in files:
            shutil.move(str(path), str(backup_dir / path.name))
        logger.info(f"Backed up {len(files)} profiles to {backup_dir}")
        return backup_dir

    def _fetch(self, staging: Path) -> None:
        cmd = ProfileCommandFactory.sync_profiles(self.command_template, staging)
        logger.info(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError:
            raise SyncError(f"Sync tool not found: {cmd[0]}")
        if result.returncode != 0:
            logger.error(f"Sync tool failed:\n{result.stderr}")
            raise SyncError(f"Sync tool exited with status {result.returncode}: {result.stderr.strip()}")

    def sync(self) -> SyncSummary:
        if not self.directory.is_dir():
            raise StoreUnavailable(f"Profile directory {self.directory} does not exist")

        with tempfile.TemporaryDirectory(prefix=".sync-", dir=self.directory) as tmp:
            staging = Path(tmp)
            self._fetch(staging)

            fetched = sorted(staging.glob(f"*{PROFILE_EXTENSION}"))
            if not fetched:
                raise SyncError("Sync tool produced no profiles")

            summary = SyncSummary()
            existing = self._existing_profiles()
            if existing:
                summary.backup_dir = self._backup(existing)

            try:
                for path in fetched + sorted(staging.glob("*.log")):
                    shutil.move(str(path), str(self.directory / path.name))
            except OSError as e:
                where = f"previous profiles are in {summary.backup_dir}" if summary.backup_dir else "there were no previous profiles"
                logger.error(f"Installing fetched profiles into {self.directory} failed: {e}; {where}")
                raise SyncError(f"Could not install fetched profiles: {e}; {where}")
            summary.fetched = [name for name in (profile_name_from_file(p.name) for p in fetched) if name]

        logger.info(f"Fetched {len(summary.fetched)} profiles into {self.directory}")
        return summary
