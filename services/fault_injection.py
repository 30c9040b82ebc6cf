"""Simulated network conditions: per-endpoint latency and randomized failure.

A fault strategy is any callable taking an endpoint name and returning a
``FaultDecision``. The request simulator consults it once per request,
before any work is done, so a failing request never touches the store.
"""

import random
from typing import Callable, Dict, Iterable, NamedTuple, Optional

from config.settings import Settings, settings as default_settings
from constants import Latency
from core.exceptions import ConfigurationError


class FaultDecision(NamedTuple):
    """Outcome of the fault strategy for one request."""

    delay: float  # seconds
    fail: bool


FaultStrategy = Callable[[str], FaultDecision]


class RandomFaults:
    """Latency drawn from each endpoint's range; failure with the endpoint's probability."""

    def __init__(
        self,
        failure_rates: Optional[Dict[str, float]] = None,
        latency_enabled: bool = True,
        latency_scale: float = 1.0,
        rng: Optional[random.Random] = None,
    ):
        self.failure_rates = dict(failure_rates or {})
        for endpoint, rate in self.failure_rates.items():
            if not 0.0 <= rate <= 1.0:
                raise ConfigurationError(f"Failure rate for {endpoint} must be within [0, 1], got {rate}")
        if latency_scale < 0:
            raise ConfigurationError(f"latency_scale must be >= 0, got {latency_scale}")
        self.latency_enabled = latency_enabled
        self.latency_scale = latency_scale
        self.rng = rng or random.Random()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RandomFaults":
        settings = settings or default_settings
        return cls(
            failure_rates=settings.failure_rates,
            latency_enabled=settings.latency_enabled,
            latency_scale=settings.latency_scale,
            rng=random.Random(settings.random_seed),
        )

    def delay_for(self, endpoint: str) -> float:
        if not self.latency_enabled:
            return 0.0
        low, high = Latency.for_endpoint(endpoint)
        millis = low if low == high else self.rng.uniform(low, high)
        return millis * self.latency_scale / 1000.0

    def __call__(self, endpoint: str) -> FaultDecision:
        rate = self.failure_rates.get(endpoint, 0.0)
        fail = rate > 0 and self.rng.random() < rate
        return FaultDecision(delay=self.delay_for(endpoint), fail=fail)


class NoFaults:
    """Instant and always successful."""

    def __call__(self, endpoint: str) -> FaultDecision:
        return FaultDecision(delay=0.0, fail=False)


class AlwaysFail:
    """Fail every request to the given endpoints (all endpoints when none given)."""

    def __init__(self, endpoints: Optional[Iterable[str]] = None, delay: float = 0.0):
        self.endpoints = set(endpoints) if endpoints is not None else None
        self.delay = delay

    def __call__(self, endpoint: str) -> FaultDecision:
        fail = self.endpoints is None or endpoint in self.endpoints
        return FaultDecision(delay=self.delay, fail=fail)


class ScriptedFaults:
    """Replay a fixed sequence of failure flags, then succeed."""

    def __init__(self, outcomes: Iterable[bool], delay: float = 0.0):
        self.outcomes = list(outcomes)
        self.delay = delay

    def __call__(self, endpoint: str) -> FaultDecision:
        fail = self.outcomes.pop(0) if self.outcomes else False
        return FaultDecision(delay=self.delay, fail=fail)
