# fieldsim/validation.py
"""Call-site checks shared by the step functions."""

import math


class StepInputError(ValueError):
    """Raised when a step function receives a time, timestep or sample it cannot use."""


def check_time(t):
    """Simulation time must be a finite, non-negative number of seconds."""
    t = float(t)
    if not math.isfinite(t) or t < 0:
        raise StepInputError(f"simulation time must be finite and >= 0, got {t!r}")
    return t


def check_dt(dt):
    dt = float(dt)
    if not math.isfinite(dt) or dt <= 0:
        raise StepInputError(f"timestep must be finite and > 0, got {dt!r}")
    return dt


def check_sample(value, name="raw value"):
    value = float(value)
    if not math.isfinite(value):
        raise StepInputError(f"{name} must be finite, got {value!r}")
    return value
