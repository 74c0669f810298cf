# fieldsim/duty_cycle.py
"""
Duty-cycle scheduler: the device is awake for the first `awake_seconds` of
every `cycle_period_seconds` window and asleep for the rest. Stateless.
"""

from enum import Enum

from fieldsim.site_config import SiteConfig
from fieldsim.validation import check_time


class DeviceStatus(str, Enum):
    ACTIVE = "active"
    SLEEPING = "sleeping"  # device chose not to sample; not a fault


def cycle_phase(t: float, config: SiteConfig) -> float:
    """Seconds elapsed within the current duty cycle."""
    return check_time(t) % config.cycle_period_seconds


def is_active(t: float, config: SiteConfig) -> bool:
    return cycle_phase(t, config) < config.awake_seconds


def status(t: float, config: SiteConfig) -> DeviceStatus:
    return DeviceStatus.ACTIVE if is_active(t, config) else DeviceStatus.SLEEPING


def active_fraction(config: SiteConfig) -> float:
    return config.awake_seconds / config.cycle_period_seconds
