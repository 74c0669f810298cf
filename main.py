#!/usr/bin/env python3
"""
main.py - Orchestrator for the field-station sensor simulator

Usage examples:
    python main.py sim_run --days 7
    python main.py sim_run --days 2 --scenario drought --csv_out viz_output/drought.csv
    python main.py sim_run --config configs/default.yaml --include_sleeping
    python main.py show_config --scenario winter

This script expects to be run from the project root.
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

# Ensure project root is on PYTHONPATH
ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from config import load_config
from fieldsim.driver import SimulationDriver, export_csv
from fieldsim.site_config import SCENARIOS, SENSOR_QUANTITIES, SiteConfig


def _build_config(args):
    cfg = load_config(args.config) if args.config else SiteConfig()
    cfg = SCENARIOS[args.scenario](base=cfg)
    overrides = {}
    if getattr(args, 'days', None) is not None:
        overrides['simulation_duration_seconds'] = args.days * 86400.0
    if getattr(args, 'step', None) is not None:
        overrides['sample_interval'] = args.step
    if getattr(args, 'seed', None) is not None:
        overrides['seed'] = args.seed
    return cfg.with_overrides(**overrides) if overrides else cfg


def _setup_logging(verbose=False):
    log_dir = ROOT / "logs"
    log_dir.mkdir(exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"sim_run_{timestamp}.log"
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s | %(levelname)s | %(message)s',
        handlers=[
            logging.FileHandler(log_file, mode='w'),
            logging.StreamHandler()  # Also print to console
        ]
    )
    return log_file


def sim_run(args):
    log_file = _setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    cfg = _build_config(args)
    logger.info("="*80)
    logger.info("SIMULATION RUN STARTED")
    logger.info(f"Site: {cfg.site_name} ({cfg.latitude:.2f}N, {cfg.longitude:.2f}E, {cfg.altitude_m:.0f} m)")
    logger.info(f"Scenario: {args.scenario}")
    logger.info(f"Duration: {cfg.simulation_duration_seconds / 86400.0:.2f} days at {cfg.sample_interval}s/tick")
    logger.info(f"Seed: {cfg.seed}")
    logger.info(f"Log file: {log_file}")
    logger.info("="*80)

    driver = SimulationDriver(cfg, include_sleeping=args.include_sleeping)
    records = []
    for rec in driver.iter_ticks():
        records.append(rec)
        if rec.published:
            readings = ", ".join(f"{q}={rec.measured[q]:.2f}" for q in SENSOR_QUANTITIES)
            logger.debug(f"t={rec.t:.0f}s | {readings}")

    s = driver.summary()
    logger.info("-"*80)
    logger.info(f"Ticks: {s.ticks}")
    logger.info(f"Published readings: {s.published}")
    logger.info(f"Irrigation pulses: {s.irrigation_pulses} at hours "
                f"{[round(p / 3600.0, 2) for p in s.pulse_times]}")
    if s.ticks:
        logger.info(f"VWC range: {s.min_vwc:.2f}% .. {s.max_vwc:.2f}%")

    if args.csv_out:
        out = Path(args.csv_out)
        out.parent.mkdir(parents=True, exist_ok=True)
        export_csv(records, out)
        logger.info(f"CSV written to {out}")
    return s


def show_config(args):
    cfg = _build_config(args)
    for key, value in cfg.as_dict().items():
        print(f"{key}: {value}")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Field-station sensor simulator - main orchestrator")
    sub = p.add_subparsers(dest="cmd")

    def add_common(sp):
        sp.add_argument("--config", type=str, default=None, help="YAML config file (default: built-in baseline)")
        sp.add_argument("--scenario", type=str, default="baseline", choices=sorted(SCENARIOS),
                        help="Scenario preset applied on top of the config")
        sp.add_argument("--days", type=float, default=None, help="Simulated days")
        sp.add_argument("--step", type=float, default=None, help="Seconds per tick")
        sp.add_argument("--seed", type=int, default=None, help="Noise seed")

    s = sub.add_parser("sim_run", help="Run a simulation and log published readings")
    add_common(s)
    s.add_argument("--include_sleeping", action='store_true', help="Keep sleeping ticks (marked 'sleeping') in the output")
    s.add_argument("--csv_out", type=str, default=None, help="CSV output file")
    s.add_argument("--verbose", action='store_true', help="Log every published reading")

    c = sub.add_parser("show_config", help="Print the resolved configuration")
    add_common(c)

    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if not args.cmd:
        print("No command given. Use -h to see options.")
        return
    if args.cmd == "sim_run":
        sim_run(args)
    elif args.cmd == "show_config":
        show_config(args)
    else:
        print("Unknown command:", args.cmd)


if __name__ == "__main__":
    main()
