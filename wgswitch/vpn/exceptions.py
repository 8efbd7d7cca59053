"""Custom exceptions for VPN profile management."""

from typing import Optional, Sequence


class VPNError(Exception):
    """Base exception for VPN-related errors."""
    pass


class ConfigurationError(VPNError):
    """Raised when there's an issue with the wgswitch configuration"""
    pass


class StoreUnavailable(VPNError):
    """Raised when the profile directory is missing or unreadable"""
    pass


class ProfileNotFound(VPNError):
    """Raised when a profile name has no definition in the store"""

    def __init__(self, name: str):
        super().__init__(f"Profile '{name}' does not exist")
        self.name = name


class MalformedProfile(VPNError):
    """Raised when a profile definition has no Endpoint field"""
    pass


class NoProfileEnabled(VPNError):
    """Raised when an operation needs an enabled profile and there is none"""

    def __init__(self, message: str = "No profile is currently enabled"):
        super().__init__(message)


class NoProfileSpecified(VPNError):
    """Raised when no profile is enabled and no name was given"""

    def __init__(self, message: str = "No profile is enabled and no profile name was given"):
        super().__init__(message)


class AlreadyEnabled(VPNError):
    """Raised when the target profile is already the enabled one"""

    def __init__(self, name: str):
        super().__init__(f"Profile '{name}' is already enabled")
        self.name = name


class AlreadyActive(VPNError):
    """Raised when starting a profile that is already running"""

    def __init__(self, name: str):
        super().__init__(f"Profile '{name}' is already active")
        self.name = name


class NotActive(VPNError):
    """Raised when stopping a profile that is not running"""

    def __init__(self, name: str):
        super().__init__(f"Profile '{name}' is not active")
        self.name = name


class MissingArgument(VPNError):
    """Raised when a required argument is empty"""

    def __init__(self, argument: str):
        super().__init__(f"Missing required argument: {argument}")
        self.argument = argument


class NoMatchingProfiles(VPNError):
    """Raised when no profile starts with the requested country code"""

    def __init__(self, country_code: str):
        super().__init__(f"No profiles match country code '{country_code}'")
        self.country_code = country_code


class SupervisorError(VPNError):
    """Raised when a systemctl call fails; keeps the supervisor's own output"""

    def __init__(self, command: Sequence[str], stderr: Optional[str] = None):
        self.command = list(command)
        self.stderr = (stderr or "").strip()
        message = f"Command failed: {' '.join(self.command)}"
        if self.stderr:
            message = f"{message}\n{self.stderr}"
        super().__init__(message)


class ConfirmationDeclined(VPNError):
    """Raised when the operator refuses to replace the enabled profile"""

    def __init__(self, current: str, target: str):
        super().__init__(f"Kept '{current}' enabled; '{target}' was not enabled")
        self.current = current
        self.target = target


class SyncError(VPNError):
    """Raised when the relay synchronization tool fails"""
    pass
