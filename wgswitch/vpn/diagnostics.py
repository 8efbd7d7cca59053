"""Read-only profile diagnostics: listing, country codes, latency ranking."""

import re
import subprocess
from typing import Callable, List, Optional, Set

from .command_factory import ProfileCommandFactory
from .exceptions import MissingArgument, NoMatchingProfiles
from .models import LatencyResult
from ..logging_utility import logger


RTT_SUMMARY_RE = re.compile(r"=\s*[\d.]+/([\d.]+)/[\d.]+(?:/[\d.]+)?\s*ms")
RTT_SINGLE_RE = re.compile(r"time[=<]([\d.]+)\s*ms")


def parse_ping_latency(output: str) -> Optional[float]:
    """
    Extract the round-trip time from ping output.

    Prefers the average from the rtt summary line and falls back to the
    first per-packet time.
    """
    match = RTT_SUMMARY_RE.search(output)
    if match is None:
        match = RTT_SINGLE_RE.search(output)
    return float(match.group(1)) if match else None


class PingProbe:
    """Measures latency with the system ping utility."""

    def __init__(self, count: int = 1, timeout: int = 1):
        self.count = count
        self.timeout = timeout

    def measure(self, host: str) -> Optional[float]:
        """Return latency in ms, or None when the host did not answer."""
        cmd = ProfileCommandFactory.ping_host(host, self.count, self.timeout)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError:
            logger.error("ping is not installed")
            return None
        if result.returncode != 0:
            logger.info(f"{host} unreachable: {result.stderr.strip() or result.stdout.strip()}")
            return None
        return parse_ping_latency(result.stdout)


class DiagnosticsReporter:
    def __init__(self, store, probe):
        self.store = store
        self.probe = probe

    def list_profiles(self) -> List[str]:
        return self.store.list()

    def country_codes(self) -> Set[str]:
        return self.store.country_codes()

    def latency_ranking(self, country_code: Optional[str],
                        on_measurement: Optional[Callable[[LatencyResult], None]] = None) -> List[LatencyResult]:
        """
        Ping every profile whose name starts with country_code, one at a time.

        Each raw result is passed to on_measurement as soon as it is known.
        The returned ranking is sorted by descending latency and leaves out
        servers that did not answer.

        Raises:
            MissingArgument: empty country code
            NoMatchingProfiles: no profile name starts with the code
        """
        if not country_code:
            raise MissingArgument("country code")
        names = self.store.matching(country_code)
        if not names:
            raise NoMatchingProfiles(country_code)

        results = []
        for name in names:
            host = self.store.endpoint_host(name)
            measurement = LatencyResult(profile=name, host=host, latency_ms=self.probe.measure(host))
            logger.info(f"Latency {name} ({host}): {measurement.latency_ms}")
            if on_measurement is not None:
                on_measurement(measurement)
            results.append(measurement)

        reachable = [r for r in results if r.reachable]
        return sorted(reachable, key=lambda r: r.latency_ms, reverse=True)
