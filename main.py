#!/usr/bin/env python3
"""
Pendulum Music - Main Entry Point.

Animates an ensemble of chained pendulums and maps their motion onto synth
parameters (pitch from mass, pan from position, timbre from color).
Real-time matplotlib view with sliders + TensorBoard logging, or a headless
run for a fixed number of ticks.

Usage:
    python main.py [--config configs/pendulum_music.yaml]
    python main.py --headless --ticks 2000 --log-csv runs/pendulum_log.csv
"""

import argparse
import os

import numpy as np
import yaml

from pendulum_music.ensemble import Ensemble


def load_config(path):
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def run_headless(ensemble, ticks, spawn_every, tb_logger=None):
    """Drive the ensemble without a window, adding a random pendulum periodically."""
    for t in range(ticks):
        if spawn_every > 0 and t % spawn_every == 0:
            p = ensemble.add_random()
            print(f"[pendulum-music] tick {ensemble.tick}: added pendulum {p.pendulum_id} "
                  f"(mass {p.arm1.mass:.1f}/{p.arm2.mass:.1f})")
        ensemble.advance_all()
        if tb_logger is not None:
            tb_logger.log(ensemble)

    m = ensemble.get_metrics()
    print(f"[pendulum-music] {m['tick']} ticks, {m['count']} active, "
          f"{len(ensemble.log)} added, total energy {m['total_energy']:.2f}")


def main():
    parser = argparse.ArgumentParser(
        description="Pendulum Music - generative pendulum synth"
    )
    parser.add_argument(
        "--config", default="configs/pendulum_music.yaml",
        help="Path to YAML config file"
    )
    parser.add_argument(
        "--no-tb", action="store_true",
        help="Disable TensorBoard logging"
    )
    parser.add_argument(
        "--headless", action="store_true",
        help="Run without a window"
    )
    parser.add_argument("--ticks", type=int, default=2000,
                        help="Ticks to simulate in headless mode")
    parser.add_argument("--spawn-every", type=int, default=300,
                        help="Add a random pendulum every N ticks (headless)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for randomized pendulums")
    parser.add_argument("--log-csv", default=None,
                        help="Write the pendulum log to this CSV on exit")
    args = parser.parse_args()

    cfg = load_config(args.config)
    rng = np.random.default_rng(args.seed)

    ensemble = Ensemble(cfg, rng=rng)
    print(f"[pendulum-music] Canvas {ensemble.width:.0f}x{ensemble.height:.0f}, "
          f"max {ensemble.max_pendulums} pendulums, stillness test '{ensemble.stillness_test}'")

    # TensorBoard
    tb_logger = None
    if not args.no_tb:
        from pendulum_music.tb_logger import TBLogger

        tb_cfg = cfg.get("tensorboard", {"log_dir": "runs", "log_interval": 10})
        os.makedirs(tb_cfg["log_dir"], exist_ok=True)
        tb_logger = TBLogger(
            log_dir=tb_cfg["log_dir"],
            log_interval=tb_cfg["log_interval"],
        )
        print(f"[pendulum-music] TensorBoard logging to {tb_cfg['log_dir']}/")
        print(f"                 Run: tensorboard --logdir {tb_cfg['log_dir']}")

    try:
        if args.headless:
            run_headless(ensemble, args.ticks, args.spawn_every, tb_logger=tb_logger)
        else:
            from pendulum_music.visualizer import RealTimeVisualizer

            print("[pendulum-music] Launching real-time visualization...")
            print("                 Close the window to exit.")
            viz = RealTimeVisualizer(ensemble, cfg)
            viz.run(tb_logger=tb_logger)
    except KeyboardInterrupt:
        print("\n[pendulum-music] Interrupted.")
    finally:
        ensemble.clear()
        if tb_logger:
            tb_logger.close()
        if args.log_csv:
            path = ensemble.log.save(args.log_csv)
            print(f"[pendulum-music] Wrote {len(ensemble.log)} log rows to {path}")
        print("[pendulum-music] Done.")


if __name__ == "__main__":
    main()
