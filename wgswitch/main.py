from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from .config import Settings
from .dependencies import get_controller, get_diagnostics, get_settings, get_synchronizer
from .logging_utility import logger
from .vpn.diagnostics import DiagnosticsReporter
from .vpn.exceptions import (
    AlreadyActive,
    AlreadyEnabled,
    ConfigurationError,
    ConfirmationDeclined,
    MalformedProfile,
    MissingArgument,
    NoMatchingProfiles,
    NoProfileEnabled,
    NoProfileSpecified,
    NotActive,
    ProfileNotFound,
    StoreUnavailable,
    SupervisorError,
    SyncError,
    VPNError,
)
from .vpn.manager import LifecycleController
from .vpn.models import LatencyResult, TransitionResult
from .vpn.sync import ProfileSynchronizer


app = FastAPI(title="wgswitch")

ERROR_STATUS = (
    ((ProfileNotFound, NoMatchingProfiles), 404),
    ((MissingArgument, NoProfileSpecified), 400),
    ((AlreadyEnabled, AlreadyActive, NotActive, NoProfileEnabled, ConfirmationDeclined), 409),
    ((MalformedProfile,), 422),
    ((SupervisorError, SyncError), 502),
    ((StoreUnavailable, ConfigurationError), 503),
)


class TransitionResponse(BaseModel):
    profile: Optional[str] = None
    steps: List[str]
    resolver: str
    messages: List[str]


class StatusResponse(BaseModel):
    profile: Optional[str] = None
    active: bool


class LatencyEntry(BaseModel):
    profile: str
    host: str
    latency_ms: Optional[float] = None


class LatencyResponse(BaseModel):
    measurements: List[LatencyEntry]
    ranking: List[LatencyEntry]


class SyncResponse(BaseModel):
    fetched: List[str]
    backup_dir: Optional[str] = None


def controller_dependency(settings: Settings = Depends(get_settings)) -> LifecycleController:
    return get_controller(settings)


def override_controller_dependency(force: bool = False,
                                   settings: Settings = Depends(get_settings)) -> LifecycleController:
    """Controller whose override decision is the request's force flag."""
    return get_controller(settings, confirm=lambda current, target: force)


def diagnostics_dependency(settings: Settings = Depends(get_settings)) -> DiagnosticsReporter:
    return get_diagnostics(settings)


def synchronizer_dependency(settings: Settings = Depends(get_settings)) -> ProfileSynchronizer:
    return get_synchronizer(settings)


def http_error(e: VPNError) -> HTTPException:
    for error_types, status_code in ERROR_STATUS:
        if isinstance(e, error_types):
            return HTTPException(status_code=status_code, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


def transition_response(result: TransitionResult) -> TransitionResponse:
    return TransitionResponse(
        profile=result.profile,
        steps=result.steps,
        resolver=result.resolver.value,
        messages=result.messages,
    )


def latency_entry(result: LatencyResult) -> LatencyEntry:
    return LatencyEntry(profile=result.profile, host=result.host, latency_ms=result.latency_ms)


@app.get("/profiles")
async def list_profiles(diagnostics: DiagnosticsReporter = Depends(diagnostics_dependency)):
    """List available profiles"""
    try:
        return {"profiles": diagnostics.list_profiles()}
    except VPNError as e:
        logger.error(f"Error listing profiles: {str(e)}")
        raise http_error(e)


@app.get("/country_codes")
async def country_codes(diagnostics: DiagnosticsReporter = Depends(diagnostics_dependency)):
    """List country codes of available profiles"""
    try:
        return {"country_codes": sorted(diagnostics.country_codes())}
    except VPNError as e:
        logger.error(f"Error listing country codes: {str(e)}")
        raise http_error(e)


@app.get("/latency/{country_code}", response_model=LatencyResponse)
def latency(country_code: str, diagnostics: DiagnosticsReporter = Depends(diagnostics_dependency)):
    """Rank a country's servers by latency"""
    measurements = []
    try:
        ranking = diagnostics.latency_ranking(country_code, on_measurement=measurements.append)
    except VPNError as e:
        logger.error(f"Error ranking {country_code}: {str(e)}")
        raise http_error(e)
    return LatencyResponse(
        measurements=[latency_entry(r) for r in measurements],
        ranking=[latency_entry(r) for r in ranking],
    )


@app.get("/current", response_model=StatusResponse)
def current(controller: LifecycleController = Depends(controller_dependency)):
    """Get the enabled profile and whether it is running"""
    profile, active = controller.status()
    return StatusResponse(profile=profile, active=active)


@app.post("/profiles/{name}/enable", response_model=TransitionResponse)
def enable(name: str, controller: LifecycleController = Depends(override_controller_dependency)):
    """Enable a profile; replacing an already enabled one requires force=true"""
    try:
        return transition_response(controller.enable(name))
    except VPNError as e:
        logger.error(f"Error enabling {name}: {str(e)}")
        raise http_error(e)


@app.post("/start", response_model=TransitionResponse)
def start(name: Optional[str] = None,
          controller: LifecycleController = Depends(controller_dependency)):
    """Start the enabled profile, or enable and start the named one"""
    try:
        return transition_response(controller.start(name))
    except VPNError as e:
        logger.error(f"Error starting profile: {str(e)}")
        raise http_error(e)


@app.post("/restart", response_model=TransitionResponse)
def restart(name: Optional[str] = None,
            controller: LifecycleController = Depends(controller_dependency)):
    """Restart the enabled profile, or enable and start the named one"""
    try:
        return transition_response(controller.restart(name))
    except VPNError as e:
        logger.error(f"Error restarting profile: {str(e)}")
        raise http_error(e)


@app.post("/switch/{name}", response_model=TransitionResponse)
def switch(name: str, controller: LifecycleController = Depends(controller_dependency)):
    """Replace the enabled profile and start the new one"""
    try:
        return transition_response(controller.switch(name))
    except VPNError as e:
        logger.error(f"Error switching to {name}: {str(e)}")
        raise http_error(e)


@app.post("/stop", response_model=TransitionResponse)
def stop(controller: LifecycleController = Depends(controller_dependency)):
    """Stop the enabled profile"""
    try:
        return transition_response(controller.stop())
    except VPNError as e:
        logger.error(f"Error stopping profile: {str(e)}")
        raise http_error(e)


@app.post("/disable", response_model=TransitionResponse)
def disable(controller: LifecycleController = Depends(controller_dependency)):
    """Disable the enabled profile, stopping it if it runs"""
    try:
        return transition_response(controller.disable())
    except VPNError as e:
        logger.error(f"Error disabling profile: {str(e)}")
        raise http_error(e)


@app.post("/sync", response_model=SyncResponse)
def sync(synchronizer: ProfileSynchronizer = Depends(synchronizer_dependency)):
    """Fetch a fresh profile set, backing up the current one"""
    try:
        summary = synchronizer.sync()
    except VPNError as e:
        logger.error(f"Error syncing profiles: {str(e)}")
        raise http_error(e)
    backup_dir = str(summary.backup_dir) if summary.backup_dir else None
    return SyncResponse(fetched=summary.fetched, backup_dir=backup_dir)
