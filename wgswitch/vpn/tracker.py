"""Derives the enabled/active profile from the supervisor on every call."""

from typing import Optional

from .utils import profile_name_from_unit, unit_name
from ..logging_utility import logger


class ActiveProfileTracker:
    """Holds no state between calls; every query goes to the supervisor."""

    def __init__(self, supervisor):
        self.supervisor = supervisor

    def current(self) -> Optional[str]:
        unit = self.supervisor.currently_enabled_unit()
        if unit is None:
            return None
        name = profile_name_from_unit(unit)
        if name is None:
            logger.warning(f"Ignoring enabled unit {unit}: not a wgswitch profile unit")
        return name

    def is_active(self) -> bool:
        name = self.current()
        if name is None:
            return False
        return self.supervisor.is_active(unit_name(name))
