# fieldsim/soil_model.py
"""
SoilMoistureModel
-----------------
Volumetric water content (VWC, %) of the root zone, advanced one tick at a
time:

1. continuous evaporation at `evaporation_rate_per_second`
2. an irrigation pulse of `irrigation_pulse_vwc` whenever `t` crosses into a
   new `irrigation_interval_seconds` window since the last pulse
3. clamp to [min_vwc, max_vwc] (residual bound water / saturation runoff)

Coarse steps that skip several irrigation windows fire a single pulse by
default; set `irrigation_catch_up=True` in the config to apply every skipped
pulse instead.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import List

import numpy as np

from fieldsim.site_config import SiteConfig
from fieldsim.validation import StepInputError, check_dt, check_time

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SoilMoistureState:
    vwc: float  # % volumetric water content
    last_pulse_time: float = 0.0  # s, time of the most recent irrigation pulse (0 = start of run)
    last_step_time: float = -math.inf  # s, time passed to the previous step
    pulses_fired: int = 0


def initial_state(config: SiteConfig) -> SoilMoistureState:
    return SoilMoistureState(vwc=float(config.initial_vwc))


def pending_pulses(state: SoilMoistureState, t: float, config: SiteConfig) -> int:
    """Irrigation windows crossed between the last pulse and `t`."""
    interval = config.irrigation_interval_seconds
    crossed = math.floor(t / interval) - math.floor(state.last_pulse_time / interval)
    return max(0, int(crossed))


def advance(state: SoilMoistureState, dt: float, t: float, config: SiteConfig) -> SoilMoistureState:
    """
    Pure soil-moisture update: returns the state after one tick ending at `t`.

    Not idempotent; call exactly once per tick with strictly increasing `t`.
    """
    dt = check_dt(dt)
    t = check_time(t)
    if t <= state.last_step_time:
        raise StepInputError(
            f"soil model must be stepped with increasing time: got t={t} after t={state.last_step_time}"
        )

    vwc = state.vwc - config.evaporation_rate_per_second * dt

    last_pulse = state.last_pulse_time
    fired = state.pulses_fired
    crossed = pending_pulses(state, t, config)
    if crossed:
        n = crossed if config.irrigation_catch_up else 1
        vwc += n * config.irrigation_pulse_vwc
        last_pulse = t
        fired += n
        logger.debug("irrigation: %d pulse(s) of %.2f%% VWC at t=%.0fs", n, config.irrigation_pulse_vwc, t)

    vwc = float(np.clip(vwc, config.min_vwc, config.max_vwc))
    return replace(state, vwc=vwc, last_pulse_time=last_pulse, last_step_time=t, pulses_fired=fired)


class SoilMoistureModel:
    """Owns a SoilMoistureState and advances it via `step`."""

    def __init__(self, config: SiteConfig):
        self.config = config
        self.state = initial_state(config)
        self.pulse_times: List[float] = []

    @property
    def vwc(self) -> float:
        return self.state.vwc

    def step(self, dt: float, t: float) -> float:
        """Advance one tick ending at time `t`; returns the new raw VWC."""
        prev = self.state
        self.state = advance(prev, dt, t, self.config)
        fired = self.state.pulses_fired - prev.pulses_fired
        if fired == 1:
            self.pulse_times.append(self.state.last_pulse_time)
        elif fired > 1:
            # catch-up: one entry per crossed window boundary
            interval = self.config.irrigation_interval_seconds
            first = math.floor(prev.last_pulse_time / interval) + 1
            self.pulse_times.extend(k * interval for k in range(first, first + fired))
        return self.state.vwc

    def reset(self):
        self.state = initial_state(self.config)
        self.pulse_times = []
