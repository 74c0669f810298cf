# config.py
"""
Config loader for the field-station simulator.

Provides a single entry `load_config(path=None)` that reads YAML overrides
from `configs/default.yaml` by default and returns a validated `SiteConfig`.
Also exposes `get_default_config()` for quick access.

The YAML file may set any subset of SiteConfig fields; sensor channels are
nested mappings:

    air_temp_mean: 6.0
    humidity:
      noise_sigma: 2.0

A `seed` key, when present, seeds the sensor noise streams of the run.
"""

import logging
import os

import yaml

from fieldsim.site_config import ConfigValidationError, SiteConfig

logger = logging.getLogger(__name__)

DEFAULT_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'configs', 'default.yaml'))


def load_config(path=None):
    """Load YAML config and return a SiteConfig (defaults for any key not given)."""
    p = path or DEFAULT_PATH
    if not os.path.exists(p):
        raise FileNotFoundError(f"Config file not found: {p}")
    with open(p, 'r') as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigValidationError(f"Config file {p} must contain a mapping, got {type(raw).__name__}")

    cfg = SiteConfig.from_dict(raw)
    logger.info("[config] Loaded %s (site=%s, seed=%s)", p, cfg.site_name, cfg.seed)
    return cfg


def get_default_config():
    return load_config(DEFAULT_PATH)


if __name__ == '__main__':
    print(load_config())
