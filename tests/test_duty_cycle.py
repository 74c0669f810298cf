import numpy as np
import pytest

from fieldsim.duty_cycle import DeviceStatus, active_fraction, cycle_phase, is_active, status
from fieldsim.site_config import SiteConfig
from fieldsim.validation import StepInputError


def test_active_at_start_of_every_cycle():
    cfg = SiteConfig()
    for k in range(5):
        start = k * cfg.cycle_period_seconds
        assert is_active(start, cfg)
        assert is_active(start + cfg.awake_seconds - 1, cfg)
        assert not is_active(start + cfg.awake_seconds, cfg)
        assert not is_active(start + cfg.cycle_period_seconds - 1, cfg)


def test_exactly_awake_seconds_per_cycle():
    cfg = SiteConfig()
    period = int(cfg.cycle_period_seconds)
    for k in range(3):
        window = np.arange(k * period, (k + 1) * period, 1.0)
        assert sum(is_active(t, cfg) for t in window) == int(cfg.awake_seconds)


def test_default_active_fraction():
    assert active_fraction(SiteConfig()) == pytest.approx(60.0 / 1860.0)
    assert active_fraction(SiteConfig()) == pytest.approx(0.032, abs=0.001)


def test_status_marks_sleep_distinctly():
    cfg = SiteConfig()
    assert status(0.0, cfg) is DeviceStatus.ACTIVE
    assert status(120.0, cfg) is DeviceStatus.SLEEPING
    assert DeviceStatus.SLEEPING.value == 'sleeping'


def test_cycle_phase():
    cfg = SiteConfig(cycle_period_seconds=100.0, awake_seconds=10.0)
    assert cycle_phase(250.0, cfg) == pytest.approx(50.0)
    assert is_active(305.0, cfg)


def test_rejects_negative_time():
    with pytest.raises(StepInputError):
        is_active(-1.0, SiteConfig())
