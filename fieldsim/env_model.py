# fieldsim/env_model.py
"""
EnvironmentModel
----------------
Diurnal generator for the raw (noiseless, unfiltered) site signals:
air temperature, relative humidity and soil temperature.

All three are sinusoids of hour-of-day with a 24 h period:
- air temperature bottoms out near midnight and peaks near 11:00
- humidity is shifted +7 h against temperature, so it peaks before dawn
  and bottoms out around midday
- soil temperature follows air temperature `soil_temp_lag_hours` later,
  with its own mean and a damped swing

No bounds are enforced here; the amplitudes in the config decide the range.
"""

import math
from dataclasses import dataclass, asdict
from typing import Dict

import numpy as np

from fieldsim.site_config import SiteConfig
from fieldsim.validation import check_time

SECONDS_PER_HOUR = 3600.0
HOURS_PER_DAY = 24.0
SECONDS_PER_DAY = SECONDS_PER_HOUR * HOURS_PER_DAY

AIR_TEMP_PHASE_HOURS = 5.0
HUMIDITY_PHASE_HOURS = -7.0


@dataclass(frozen=True)
class EnvironmentalSample:
    """Raw site signals at one instant."""
    air_temp_raw: float  # deg C
    humidity_raw: float  # %RH
    soil_temp_raw: float  # deg C

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def hour_of_day(t: float) -> float:
    """Seconds since simulation start -> hour of day in [0, 24)."""
    return (t / SECONDS_PER_HOUR) % HOURS_PER_DAY


def _diurnal(hr, mean, amplitude, phase_hours):
    return mean + amplitude * math.sin(2.0 * math.pi * (hr - phase_hours) / HOURS_PER_DAY)


def generate(t: float, config: SiteConfig) -> EnvironmentalSample:
    """
    Raw environmental sample at simulation time `t` (seconds).

    Pure: the same `t` and config always give the same sample.
    """
    t = check_time(t)
    hr = hour_of_day(t)
    air = _diurnal(hr, config.air_temp_mean, config.air_temp_amplitude, AIR_TEMP_PHASE_HOURS)
    rh = _diurnal(hr, config.humidity_mean, config.humidity_amplitude, HUMIDITY_PHASE_HOURS)
    soil = _diurnal(
        hr,
        config.soil_temp_mean,
        config.soil_temp_amplitude,
        AIR_TEMP_PHASE_HOURS + config.soil_temp_lag_hours,
    )
    return EnvironmentalSample(air_temp_raw=air, humidity_raw=rh, soil_temp_raw=soil)


def diurnal_profile(config: SiteConfig, step_seconds: float = 60.0, days: float = 1.0) -> Dict[str, np.ndarray]:
    """
    Vectorised version of `generate` over a regular grid.

    Returns arrays keyed 'time_s', 'hour', 'air_temp_raw', 'humidity_raw',
    'soil_temp_raw'. Useful for inspecting a whole day at once (peaks,
    troughs, periodicity) without stepping.
    """
    if step_seconds <= 0 or days <= 0:
        raise ValueError("step_seconds and days must be > 0")
    t = np.arange(0.0, days * SECONDS_PER_DAY, step_seconds)
    hr = (t / SECONDS_PER_HOUR) % HOURS_PER_DAY
    w = 2.0 * np.pi / HOURS_PER_DAY
    return {
        "time_s": t,
        "hour": hr,
        "air_temp_raw": config.air_temp_mean + config.air_temp_amplitude * np.sin(w * (hr - AIR_TEMP_PHASE_HOURS)),
        "humidity_raw": config.humidity_mean + config.humidity_amplitude * np.sin(w * (hr - HUMIDITY_PHASE_HOURS)),
        "soil_temp_raw": config.soil_temp_mean + config.soil_temp_amplitude * np.sin(
            w * (hr - AIR_TEMP_PHASE_HOURS - config.soil_temp_lag_hours)
        ),
    }
