# fieldsim/sensors.py
"""
SensorDynamics
--------------
Turns a raw physical signal into what the device's sensor would report.

Each channel is a discrete single-pole low-pass filter (zero-order-hold
discretisation, a = exp(-sample_interval / tau)) followed by additive
gaussian noise drawn from the channel's own seedable generator. The noise
is applied after the lag and is not fed back into the filter state.
Readings are not clipped: noise may push a reading briefly outside the
physical range, as real instruments do.
"""

import logging
import math
from typing import Dict, Optional

import numpy as np

from fieldsim.site_config import SENSOR_QUANTITIES, SensorParams, SiteConfig
from fieldsim.validation import check_sample

logger = logging.getLogger(__name__)


def lag_coefficient(sample_interval: float, time_constant: float) -> float:
    """Per-tick decay factor of the discrete first-order lag."""
    return math.exp(-sample_interval / time_constant)


class SensorDynamics:
    """One sensor channel: first-order lag plus measurement noise."""

    def __init__(self, quantity: str, params: SensorParams, sample_interval: float,
                 rng: Optional[np.random.Generator] = None):
        self.quantity = quantity
        self.params = params
        self.sample_interval = float(sample_interval)
        self.a = lag_coefficient(self.sample_interval, params.time_constant_seconds)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.filtered: Optional[float] = None  # seeded by the first raw sample

    @classmethod
    def from_config(cls, config: SiteConfig, quantity: str,
                    rng: Optional[np.random.Generator] = None) -> "SensorDynamics":
        return cls(quantity, config.sensor(quantity), config.sample_interval, rng=rng)

    def filter(self, raw_value: float) -> float:
        """Advance the lag filter only (no noise); returns the new filtered value."""
        raw_value = check_sample(raw_value, f"{self.quantity} raw value")
        if self.filtered is None:
            self.filtered = raw_value
            logger.debug("%s filter seeded at %.4f", self.quantity, raw_value)
        else:
            self.filtered = self.a * self.filtered + (1.0 - self.a) * raw_value
        return self.filtered

    def step(self, raw_value: float) -> float:
        """Filter one raw sample and return the noisy reading."""
        filtered = self.filter(raw_value)
        return float(filtered + self.rng.normal(0.0, self.params.noise_sigma))

    def reset(self):
        self.filtered = None


class SensorSuite:
    """
    The four sensor channels of the device, each with an independent noise
    stream spawned from one seed so a run is reproducible end to end.
    """

    def __init__(self, config: SiteConfig, seed: Optional[int] = None):
        seed = config.seed if seed is None else seed
        streams = np.random.SeedSequence(seed).spawn(len(SENSOR_QUANTITIES))
        self.channels: Dict[str, SensorDynamics] = {
            q: SensorDynamics.from_config(config, q, rng=np.random.default_rng(s))
            for q, s in zip(SENSOR_QUANTITIES, streams)
        }

    def __getitem__(self, quantity: str) -> SensorDynamics:
        return self.channels[quantity]

    def step(self, raw: Dict[str, float]) -> Dict[str, float]:
        """raw: dict keyed by quantity name -> measured readings with the same keys."""
        return {q: self.channels[q].step(raw[q]) for q in SENSOR_QUANTITIES}

    def reset(self):
        for ch in self.channels.values():
            ch.reset()
