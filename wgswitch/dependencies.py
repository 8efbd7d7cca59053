"""Shared factories wiring settings into the profile services.

Used by the CLI directly and by the FastAPI app through Depends, so tests
can swap any of them out.
"""

from functools import lru_cache
from typing import Optional

from .config import Settings, load_settings
from .logging_utility import Logger
from .vpn.diagnostics import DiagnosticsReporter, PingProbe
from .vpn.manager import ConfirmOverride, LifecycleController
from .vpn.store import ProfileStore
from .vpn.supervisor import ServiceSupervisorClient
from .vpn.sync import ProfileSynchronizer
from .vpn.tracker import ActiveProfileTracker


@lru_cache
def get_settings() -> Settings:
    settings = load_settings()
    Logger().set_level(settings.log_level)
    return settings


def get_store(settings: Settings) -> ProfileStore:
    return ProfileStore(settings.profile_dir)


def get_supervisor(settings: Settings) -> ServiceSupervisorClient:
    return ServiceSupervisorClient(settings.wants_dir, use_sudo=settings.use_sudo)


def get_controller(settings: Settings, confirm: Optional[ConfirmOverride] = None) -> LifecycleController:
    supervisor = get_supervisor(settings)
    return LifecycleController(
        store=get_store(settings),
        supervisor=supervisor,
        tracker=ActiveProfileTracker(supervisor),
        resolver_unit=settings.resolver_unit,
        confirm=confirm,
    )


def get_diagnostics(settings: Settings) -> DiagnosticsReporter:
    probe = PingProbe(count=settings.ping_count, timeout=settings.ping_timeout)
    return DiagnosticsReporter(get_store(settings), probe)


def get_synchronizer(settings: Settings) -> ProfileSynchronizer:
    return ProfileSynchronizer(settings.profile_dir, settings.sync_command)
