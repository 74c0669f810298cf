# fieldsim/driver.py
"""
Reference simulation driver.

Owns the timeline t = 0, dt, 2*dt, ... and calls the models in a fixed order
each tick:

    generate(t) -> soil step -> sensor steps (all four) -> is_active(t)

Soil and sensors advance on every tick, awake or not, because the physics
keeps going while the device sleeps. Whether a tick is *published* is the
duty cycle's decision: sleeping ticks are dropped from the output by
default, or kept and marked SLEEPING (never as a failed reading).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

import pandas as pd

from fieldsim.duty_cycle import DeviceStatus, active_fraction, status
from fieldsim.env_model import generate, hour_of_day
from fieldsim.sensors import SensorSuite
from fieldsim.site_config import SENSOR_QUANTITIES, SiteConfig
from fieldsim.soil_model import SoilMoistureModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickRecord:
    t: float
    status: DeviceStatus
    raw: Dict[str, float]
    measured: Dict[str, float]

    @property
    def published(self) -> bool:
        return self.status is DeviceStatus.ACTIVE


@dataclass
class RunSummary:
    ticks: int = 0
    published: int = 0
    irrigation_pulses: int = 0
    pulse_times: List[float] = field(default_factory=list)
    min_vwc: Optional[float] = None  # None until a tick has run
    max_vwc: Optional[float] = None


class SimulationDriver:
    def __init__(self, config: SiteConfig, include_sleeping: bool = False, seed: Optional[int] = None):
        self.config = config
        self.include_sleeping = include_sleeping
        self.dt = config.sample_interval
        self.seed = seed
        self.reset()

    def reset(self):
        """Fresh soil state, sensor filters, noise streams and summary; a seeded run replays exactly."""
        self.soil = SoilMoistureModel(self.config)
        self.sensors = SensorSuite(self.config, seed=self.seed)
        self._summary = RunSummary()

    def default_ticks(self) -> int:
        """Ticks covering [0, simulation_duration_seconds] inclusive."""
        return int(self.config.simulation_duration_seconds // self.dt) + 1

    def tick(self, i: int) -> TickRecord:
        """Run tick `i` (t = i * dt). Ticks must be run in order, each exactly once."""
        t = i * self.dt
        env = generate(t, self.config)
        vwc = self.soil.vwc if i == 0 else self.soil.step(self.dt, t)

        raw = {
            "air_temp": env.air_temp_raw,
            "humidity": env.humidity_raw,
            "soil_temp": env.soil_temp_raw,
            "soil_moisture": vwc,
        }
        measured = self.sensors.step(raw)
        rec = TickRecord(t=t, status=status(t, self.config), raw=raw, measured=measured)

        s = self._summary
        s.ticks += 1
        s.published += int(rec.published)
        s.min_vwc = vwc if s.min_vwc is None else min(s.min_vwc, vwc)
        s.max_vwc = vwc if s.max_vwc is None else max(s.max_vwc, vwc)
        return rec

    def iter_ticks(self, n_ticks: Optional[int] = None) -> Iterator[TickRecord]:
        """Yield the published records (plus sleeping ones if include_sleeping)."""
        self.reset()
        n = self.default_ticks() if n_ticks is None else int(n_ticks)
        logger.info(
            "simulation started: %d ticks of %.3gs, duty cycle %.0fs/%.0fs (%.1f%% active)",
            n, self.dt, self.config.awake_seconds, self.config.cycle_period_seconds,
            100.0 * active_fraction(self.config),
        )
        for i in range(n):
            rec = self.tick(i)
            if rec.published or self.include_sleeping:
                yield rec
        s = self.summary()
        vwc_range = "n/a" if s.ticks == 0 else f"{s.min_vwc:.2f}..{s.max_vwc:.2f}%"
        logger.info(
            "simulation finished: %d ticks, %d published, %d irrigation pulse(s), VWC %s",
            s.ticks, s.published, s.irrigation_pulses, vwc_range,
        )

    def run(self, n_ticks: Optional[int] = None) -> List[TickRecord]:
        return list(self.iter_ticks(n_ticks))

    def summary(self) -> RunSummary:
        self._summary.irrigation_pulses = self.soil.state.pulses_fired
        self._summary.pulse_times = list(self.soil.pulse_times)
        return self._summary


def to_dataframe(records: List[TickRecord]) -> pd.DataFrame:
    """Flatten records into a time-indexed table for offline inspection."""
    rows = []
    for r in records:
        row = {"time_s": r.t, "hour_of_day": hour_of_day(r.t), "status": r.status.value}
        for q in SENSOR_QUANTITIES:
            row[f"{q}_raw"] = r.raw[q]
            row[f"{q}_measured"] = r.measured[q]
        rows.append(row)
    columns = ["time_s", "hour_of_day", "status"] + [
        f"{q}_{kind}" for q in SENSOR_QUANTITIES for kind in ("raw", "measured")
    ]
    return pd.DataFrame(rows, columns=columns)


def export_csv(records: List[TickRecord], path) -> pd.DataFrame:
    df = to_dataframe(records)
    df.to_csv(path, index=False)
    logger.info("wrote %d rows to %s", len(df), path)
    return df
