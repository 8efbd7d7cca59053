"""Profile lifecycle management: enable, start, restart, switch, stop, disable."""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .exceptions import (
    AlreadyActive,
    AlreadyEnabled,
    ConfirmationDeclined,
    MissingArgument,
    NoProfileEnabled,
    NoProfileSpecified,
    NotActive,
    ProfileNotFound,
    SupervisorError,
)
from .models import ResolverOutcome, TransitionResult
from .utils import unit_name
from ..logging_utility import logger


ConfirmOverride = Callable[[str, str], bool]


def decline_override(current: str, target: str) -> bool:
    """Non-interactive default: never replace an enabled profile."""
    return False


@dataclass
class TransitionStep:
    """One supervisor request inside a lifecycle operation."""
    description: str
    action: Callable[[], None]


class LifecycleController:
    """
    Moves profiles between disabled, enabled and active while keeping at
    most one profile enabled.

    State is re-read from the supervisor at the start of every operation.
    Multi-step operations run their steps in order and stop at the first
    failing step; nothing is rolled back, so a failure between a disable and
    the following enable leaves no profile enabled.
    """

    def __init__(self, store, supervisor, tracker, resolver_unit: str,
                 confirm: Optional[ConfirmOverride] = None):
        self.store = store
        self.supervisor = supervisor
        self.tracker = tracker
        self.resolver_unit = resolver_unit
        self.confirm = confirm or decline_override

    # -- step plans -------------------------------------------------------

    def _step(self, verb: str, name: str) -> TransitionStep:
        action = getattr(self.supervisor, verb)
        return TransitionStep(f"{verb} {name}", lambda: action(name))

    def _plan_disable(self, name: str) -> Tuple[List[TransitionStep], bool]:
        """Disable, then stop if running. Returns the plan and whether it was running."""
        was_active = self.supervisor.is_active(unit_name(name))
        steps = [self._step("disable", name)]
        if was_active:
            steps.append(self._step("stop", name))
        return steps, was_active

    def _plan_enable_start(self, name: str) -> List[TransitionStep]:
        return [self._step("enable", name), self._step("start", name)]

    def _run_steps(self, steps: List[TransitionStep], result: TransitionResult) -> None:
        for step in steps:
            logger.info(f"Transition step: {step.description}")
            try:
                step.action()
            except SupervisorError as e:
                logger.error(f"Transition step '{step.description}' failed: {e}")
                raise
            result.steps.append(step.description)

    def _restart_resolver(self, result: TransitionResult) -> None:
        """Best-effort restart of the name-resolution service; never raises."""
        unit = self.resolver_unit
        if not self.supervisor.is_enabled(unit):
            logger.warning(f"{unit} is not enabled, skipping restart")
            result.resolver = ResolverOutcome.SKIPPED
            result.messages.append(f"{unit} is not enabled; restart skipped")
            return

        try:
            self.supervisor.restart_unit(unit)
        except SupervisorError as e:
            logger.error(f"Failed to restart {unit}: {e}")
            result.resolver = ResolverOutcome.FAILED
            result.messages.append(f"Failed to restart {unit}: {e.stderr or e}")
            return

        logger.info(f"Restarted {unit}")
        result.resolver = ResolverOutcome.RESTARTED
        result.messages.append(f"Restarted {unit}")

    def _require_existing(self, name: Optional[str]) -> str:
        if not name:
            raise MissingArgument("profile name")
        if not self.store.exists(name):
            raise ProfileNotFound(name)
        return name

    def _enable_and_start(self, name: str, result: TransitionResult) -> TransitionResult:
        steps: List[TransitionStep] = []
        stale = self.tracker.current()
        if stale is not None:
            logger.warning(f"Clearing stale registration of {stale} before starting {name}")
            steps, _ = self._plan_disable(stale)
        steps += self._plan_enable_start(name)

        self._run_steps(steps, result)
        result.profile = name
        result.messages.append(f"Enabled and started {name}")
        self._restart_resolver(result)
        return result

    # -- queries ----------------------------------------------------------

    def status(self) -> Tuple[Optional[str], bool]:
        """Return (enabled profile or None, whether it is running)."""
        current = self.tracker.current()
        if current is None:
            return None, False
        return current, self.supervisor.is_active(unit_name(current))

    # -- transitions ------------------------------------------------------

    def enable(self, name: Optional[str]) -> TransitionResult:
        """
        Register a profile for auto-start without starting it.

        If another profile is enabled the operator must confirm; the old
        profile is then disabled (and stopped if running) first.

        Raises:
            ProfileNotFound, AlreadyEnabled, ConfirmationDeclined, SupervisorError
        """
        name = self._require_existing(name)
        current = self.tracker.current()
        if current == name:
            raise AlreadyEnabled(name)

        result = TransitionResult(profile=name)
        steps: List[TransitionStep] = []
        if current is not None:
            if not self.confirm(current, name):
                logger.info(f"Override of {current} by {name} declined")
                raise ConfirmationDeclined(current, name)
            steps, _ = self._plan_disable(current)
            result.messages.append(f"Disabled {current}")
        steps.append(self._step("enable", name))

        self._run_steps(steps, result)
        result.messages.append(f"Enabled {name}")
        return result

    def start(self, name: Optional[str] = None) -> TransitionResult:
        """
        Start the enabled profile, or enable and start `name` when none is enabled.

        Raises:
            AlreadyActive, NoProfileSpecified, ProfileNotFound, SupervisorError
        """
        current = self.tracker.current()
        if current is None:
            if not name:
                raise NoProfileSpecified()
            self._require_existing(name)
            return self._enable_and_start(name, TransitionResult(profile=name))

        result = TransitionResult(profile=current)
        if name and name != current:
            logger.warning(f"Requested {name} but {current} is enabled; starting {current}")
            result.messages.append(f"{current} is enabled; starting it instead of {name}")
        if self.supervisor.is_active(unit_name(current)):
            raise AlreadyActive(current)

        self._run_steps([self._step("start", current)], result)
        result.messages.append(f"Started {current}")
        self._restart_resolver(result)
        return result

    def restart(self, name: Optional[str] = None) -> TransitionResult:
        """
        Restart the enabled profile through the supervisor in a single call;
        with nothing enabled, behaves like start(name).
        """
        current = self.tracker.current()
        if current is None:
            return self.start(name)

        result = TransitionResult(profile=current)
        self._run_steps([self._step("restart", current)], result)
        result.messages.append(f"Restarted {current}")
        self._restart_resolver(result)
        return result

    def switch(self, name: Optional[str]) -> TransitionResult:
        """
        Replace the enabled profile with `name` and start it, without asking.
        The resolver restart happens once, after the new profile is started.

        Raises:
            MissingArgument, AlreadyEnabled, ProfileNotFound, SupervisorError
        """
        if not name:
            raise MissingArgument("profile name")
        current = self.tracker.current()
        if current == name:
            raise AlreadyEnabled(name)
        self._require_existing(name)

        result = TransitionResult(profile=name)
        if current is not None:
            steps, _ = self._plan_disable(current)
            self._run_steps(steps, result)
            result.messages.append(f"Disabled {current}")
        return self._enable_and_start(name, result)

    def stop(self, name: Optional[str] = None, suppress_resolver_restart: bool = False) -> TransitionResult:
        """
        Stop the enabled profile, leaving it enabled.

        Raises:
            NoProfileEnabled, NotActive, SupervisorError
        """
        current = self.tracker.current()
        if current is None:
            raise NoProfileEnabled()
        if name and name != current:
            raise NotActive(name)
        if not self.supervisor.is_active(unit_name(current)):
            raise NotActive(current)

        result = TransitionResult(profile=current)
        self._run_steps([self._step("stop", current)], result)
        result.messages.append(f"Stopped {current}")
        if not suppress_resolver_restart:
            self._restart_resolver(result)
        return result

    def disable(self, suppress_resolver_restart: bool = False) -> TransitionResult:
        """
        Remove the enabled profile's auto-start registration, stopping it
        afterwards if it was running.

        Raises:
            NoProfileEnabled, SupervisorError
        """
        current = self.tracker.current()
        if current is None:
            raise NoProfileEnabled()

        result = TransitionResult(profile=current)
        steps, was_active = self._plan_disable(current)
        self._run_steps(steps, result)
        result.messages.append(f"Disabled {current}")
        if was_active:
            result.messages.append(f"Stopped {current}")
            if not suppress_resolver_restart:
                self._restart_resolver(result)
        return result
