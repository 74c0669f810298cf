# fieldsim/site_config.py
"""
Site configuration for the field-station simulator.

A single immutable `SiteConfig` carries every tunable parameter: climate
means and swings, soil-moisture bounds, per-quantity sensor time constants
and noise levels, and duty-cycle timing. It is built once at simulation
setup and handed to every model; no model mutates it.

Defaults describe the November-December baseline of a mid-elevation
Himalayan field station.
"""

import math
from dataclasses import dataclass, field, fields, replace, asdict
from typing import Any, Dict, Mapping, Optional

SENSOR_QUANTITIES = ("air_temp", "humidity", "soil_temp", "soil_moisture")


class ConfigValidationError(ValueError):
    """Raised when a configuration value is out of its allowed domain."""


@dataclass(frozen=True)
class SensorParams:
    """Response of one physical sensor channel"""
    time_constant_seconds: float = 2.0  # first-order lag tau (s)
    noise_sigma: float = 0.1  # additive gaussian noise, in the quantity's units


@dataclass(frozen=True)
class SiteConfig:
    # Site metadata (informational only)
    site_name: str = "Himalayan field station"
    latitude: float = 32.2
    longitude: float = 77.2
    altitude_m: float = 2050.0

    # Timing
    sample_interval: float = 1.0  # seconds per tick
    simulation_duration_seconds: float = 7 * 86400.0

    # Climate (deg C, %RH)
    air_temp_mean: float = 15.0
    air_temp_amplitude: float = 11.0
    humidity_mean: float = 50.0
    humidity_amplitude: float = 15.0
    soil_temp_mean_offset: float = 2.0  # soil mean = air mean + offset
    soil_temp_amplitude: float = 4.0
    soil_temp_lag_hours: float = 2.0

    # Soil moisture (% VWC)
    initial_vwc: float = 60.0
    min_vwc: float = 15.0
    max_vwc: float = 70.0
    evaporation_rate_per_second: float = 0.2 / 3600.0  # 0.2 %VWC per hour
    irrigation_pulse_vwc: float = 6.0
    irrigation_interval_seconds: float = 36 * 3600.0
    irrigation_catch_up: bool = False  # apply every pulse skipped by a coarse step

    # Sensors
    air_temp: SensorParams = field(default_factory=lambda: SensorParams(2.0, 0.1))
    humidity: SensorParams = field(default_factory=lambda: SensorParams(2.0, 0.5))
    soil_temp: SensorParams = field(default_factory=lambda: SensorParams(6.0, 0.05))
    soil_moisture: SensorParams = field(default_factory=lambda: SensorParams(2.0, 0.7))

    # Duty cycle
    cycle_period_seconds: float = 1860.0  # 31 min
    awake_seconds: float = 60.0

    # Noise generator seed (None draws fresh OS entropy)
    seed: Optional[int] = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type is float:
                if not _is_number(value):
                    raise ConfigValidationError(f"{f.name} must be a number, got {value!r}")
                if not math.isfinite(value):
                    raise ConfigValidationError(f"{f.name} must be finite, got {value!r}")
            elif f.type is bool and not isinstance(value, bool):
                raise ConfigValidationError(f"{f.name} must be true or false, got {value!r}")
            elif f.type is str and not isinstance(value, str):
                raise ConfigValidationError(f"{f.name} must be a string, got {value!r}")

        _require_positive(self, "sample_interval")
        _require_positive(self, "simulation_duration_seconds")
        _require_positive(self, "soil_temp_lag_hours", allow_zero=True)
        _require_positive(self, "evaporation_rate_per_second", allow_zero=True)
        _require_positive(self, "irrigation_pulse_vwc", allow_zero=True)
        _require_positive(self, "irrigation_interval_seconds")
        _require_positive(self, "cycle_period_seconds")
        _require_positive(self, "awake_seconds")

        if not self.min_vwc < self.initial_vwc < self.max_vwc:
            raise ConfigValidationError(
                "expected min_vwc < initial_vwc < max_vwc, got "
                f"{self.min_vwc} / {self.initial_vwc} / {self.max_vwc}"
            )
        if self.awake_seconds >= self.cycle_period_seconds:
            raise ConfigValidationError(
                f"awake_seconds ({self.awake_seconds}) must be shorter than "
                f"cycle_period_seconds ({self.cycle_period_seconds})"
            )

        for name in SENSOR_QUANTITIES:
            params = getattr(self, name)
            if not isinstance(params, SensorParams):
                raise ConfigValidationError(f"{name} must be a SensorParams, got {type(params).__name__}")
            tau = params.time_constant_seconds
            sigma = params.noise_sigma
            if not (_is_number(tau) and math.isfinite(tau) and tau > 0):
                raise ConfigValidationError(f"{name}.time_constant_seconds must be > 0, got {tau!r}")
            if not (_is_number(sigma) and math.isfinite(sigma) and sigma >= 0):
                raise ConfigValidationError(f"{name}.noise_sigma must be >= 0, got {sigma!r}")

        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0):
            raise ConfigValidationError(f"seed must be a non-negative int or None, got {self.seed!r}")

    # Derived values ------------------------------------------------------
    @property
    def soil_temp_mean(self) -> float:
        return self.air_temp_mean + self.soil_temp_mean_offset

    def sensor(self, quantity: str) -> SensorParams:
        if quantity not in SENSOR_QUANTITIES:
            raise KeyError(f"unknown sensor quantity: {quantity}")
        return getattr(self, quantity)

    # Named construction --------------------------------------------------
    def with_overrides(self, **changes) -> "SiteConfig":
        """Copy with the given top-level fields replaced (validated again)."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigValidationError(f"unknown config field(s): {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def with_sensor(self, quantity: str, **changes) -> "SiteConfig":
        """Copy with one sensor channel's parameters replaced."""
        current = self.sensor(quantity)
        return replace(self, **{quantity: replace(current, **changes)})

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SiteConfig":
        """
        Build a config by overlaying `data` on the defaults.

        Sensor channels may be given as nested mappings, e.g.
        {'humidity': {'noise_sigma': 1.5}}; unspecified sensor fields keep
        their defaults.
        """
        data = dict(data or {})
        base = cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigValidationError(f"unknown config field(s): {', '.join(sorted(unknown))}")

        kwargs = {}
        for key, value in data.items():
            if key in SENSOR_QUANTITIES and isinstance(value, Mapping):
                sensor_keys = {f.name for f in fields(SensorParams)}
                bad = set(value) - sensor_keys
                if bad:
                    raise ConfigValidationError(f"unknown {key} field(s): {', '.join(sorted(bad))}")
                kwargs[key] = replace(getattr(base, key), **value)
            else:
                kwargs[key] = value
        return replace(base, **kwargs)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_positive(cfg, name, allow_zero=False):
    value = getattr(cfg, name)
    ok = value >= 0 if allow_zero else value > 0
    if not ok:
        bound = ">= 0" if allow_zero else "> 0"
        raise ConfigValidationError(f"{name} must be {bound}, got {value!r}")


# Scenario presets -------------------------------------------------------

def winter_config(base: Optional[SiteConfig] = None) -> SiteConfig:
    """Colder, narrower diurnal swing (late-winter cold snap)."""
    base = base or SiteConfig()
    return base.with_overrides(air_temp_mean=6.0, air_temp_amplitude=8.0, soil_temp_amplitude=2.5)


def drought_config(base: Optional[SiteConfig] = None) -> SiteConfig:
    """No irrigation: VWC only ever decreases, flooring at min_vwc."""
    base = base or SiteConfig()
    return base.with_overrides(irrigation_pulse_vwc=0.0)


def noisy_config(factor: float = 5.0, base: Optional[SiteConfig] = None) -> SiteConfig:
    """Every sensor's noise sigma scaled by `factor`, for robustness runs."""
    base = base or SiteConfig()
    cfg = base
    for q in SENSOR_QUANTITIES:
        cfg = cfg.with_sensor(q, noise_sigma=cfg.sensor(q).noise_sigma * factor)
    return cfg


SCENARIOS = {
    "baseline": lambda base=None: base or SiteConfig(),
    "winter": winter_config,
    "drought": drought_config,
    "noisy": noisy_config,
}
