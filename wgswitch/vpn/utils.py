"""Utility functions for profile management."""

import subprocess
from typing import Optional, Tuple

from .exceptions import SupervisorError
from ..logging_utility import logger


PROFILE_SUFFIX = "-wireguard"
PROFILE_EXTENSION = ".conf"
UNIT_PREFIX = "wg-quick@"
UNIT_EXTENSION = ".service"
UNIT_GLOB = "wg-quick*"


def profile_file_name(name: str) -> str:
    """us1 -> us1-wireguard.conf"""
    return f"{name}{PROFILE_SUFFIX}{PROFILE_EXTENSION}"


def profile_name_from_file(file_name: str) -> Optional[str]:
    """us1-wireguard.conf -> us1, anything else -> None"""
    tail = PROFILE_SUFFIX + PROFILE_EXTENSION
    if not file_name.endswith(tail) or len(file_name) == len(tail):
        return None
    return file_name[:-len(tail)]


def unit_name(name: str) -> str:
    """us1 -> wg-quick@us1-wireguard.service"""
    return f"{UNIT_PREFIX}{name}{PROFILE_SUFFIX}{UNIT_EXTENSION}"


def profile_name_from_unit(unit: str) -> Optional[str]:
    """
    Map a supervisor unit name back to a profile name.

    Args:
        unit: Unit name, e.g. 'wg-quick@us1-wireguard.service'

    Returns:
        str: Profile name, or None if the unit does not follow the naming convention
    """
    tail = PROFILE_SUFFIX + UNIT_EXTENSION
    if not unit.startswith(UNIT_PREFIX) or not unit.endswith(tail):
        return None
    name = unit[len(UNIT_PREFIX):-len(tail)]
    return name or None


def run_command(cmd: list[str], check: bool = True) -> Tuple[str, str]:
    """
    Run shell command and return output.

    Args:
        cmd: Command as list of strings
        check: Whether to raise exception on error

    Returns:
        Tuple of (stdout, stderr)
    """
    logger.info(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=check)
        return result.stdout, result.stderr
    except subprocess.CalledProcessError as e:
        logger.error(f"Command failed: {' '.join(cmd)}\n{e.stderr}")
        raise SupervisorError(cmd, e.stderr)
    except FileNotFoundError as e:
        logger.error(f"Command not found: {cmd[0]}")
        raise SupervisorError(cmd, str(e))


def command_succeeds(cmd: list[str]) -> bool:
    """Run a status query and report whether it exited with status 0."""
    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=False,
            text=True,
        )
    except FileNotFoundError:
        logger.error(f"Command not found: {cmd[0]}")
        return False
    return result.returncode == 0
