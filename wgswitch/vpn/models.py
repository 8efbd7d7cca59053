"""Data models for VPN profile management."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class ResolverOutcome(Enum):
    """What happened to the name-resolution service after a transition"""
    NOT_ATTEMPTED = "not_attempted"
    RESTARTED = "restarted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class Profile:
    """A WireGuard profile definition on disk"""
    name: str
    path: Path


@dataclass
class LatencyResult:
    """Latency measurement for one profile's endpoint"""
    profile: str
    host: str
    latency_ms: Optional[float] = None

    @property
    def reachable(self) -> bool:
        return self.latency_ms is not None


@dataclass
class TransitionResult:
    """Outcome of a lifecycle operation"""
    profile: Optional[str] = None
    steps: List[str] = field(default_factory=list)
    resolver: ResolverOutcome = ResolverOutcome.NOT_ATTEMPTED
    messages: List[str] = field(default_factory=list)


@dataclass
class SyncSummary:
    """Result of a relay synchronization run"""
    fetched: List[str] = field(default_factory=list)
    backup_dir: Optional[Path] = None
