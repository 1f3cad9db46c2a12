"""Headless simulation run: moves a marker around a preset track and prints laps.

Press Ctrl+C to quit early.

Usage:
    uv run python scripts/simulate.py
    uv run python scripts/simulate.py --track spa --seconds 120 --tyre soft
    uv run python scripts/simulate.py --session qualifying --fuel 20 --run-minutes 1
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from redline.config import SimulationConfig  # noqa: E402
from redline.hotpath.engine import SimulationEngine  # noqa: E402
from redline.hotpath.event_stream import TickLoop  # noqa: E402
from redline.hotpath.speed import SpeedFactors  # noqa: E402
from redline.overlay.renderer import OverlayRenderer  # noqa: E402
from redline.track.presets import available_tracks  # noqa: E402

_logger = logging.getLogger("redline.simulate")


def main() -> int:
    ap = argparse.ArgumentParser(description="RedLine: headless track simulation")
    ap.add_argument("--track", default="monza", choices=available_tracks(), help="Track preset")
    ap.add_argument("--seconds", type=float, default=60.0, help="Wall-clock seconds to run")
    ap.add_argument("--tyre", default="medium", help="soft / medium / hard")
    ap.add_argument("--session", default="race", help="practice / qualifying / race")
    ap.add_argument("--fuel", type=float, default=50.0, help="Fuel load in kg")
    ap.add_argument("--difficulty", default="normal", help="easy / normal / hard")
    ap.add_argument("--hz", type=float, default=None, help="Tick rate (default from config)")
    ap.add_argument("--run-minutes", type=float, default=None, help="Stop after N minutes")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = SimulationConfig.from_env()
        cfg.run_minutes = args.run_minutes
        hz = cfg.target_hz if args.hz is None else args.hz
        factors = SpeedFactors.from_settings(
            tyre_compound=args.tyre,
            session_type=args.session,
            fuel_kg=args.fuel,
            difficulty=args.difficulty,
            base_speed=cfg.base_speed,
        )
        engine = SimulationEngine(config=cfg)
        engine.load_track(args.track)
        engine.set_speed_factors(factors)
        loop = TickLoop(engine, target_hz=hz)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    renderer = OverlayRenderer()

    _logger.info(
        "Running %s at %.5f progress/frame for up to %.0f s",
        args.track, engine.driver.speed, args.seconds,
    )
    engine.start()
    loop.start()

    deadline_frames = int(args.seconds * hz)
    try:
        for _ in range(deadline_frames):
            frame = loop.get_frame(timeout=1.0)
            if loop.error is not None:
                return 1
            if frame is None:
                continue
            if frame.lap is not None:
                print(
                    f"  Lap {frame.lap.lap_number}: "
                    f"{renderer.format_lap_time(frame.lap.lap_time_s)}",
                    flush=True,
                )
            if not frame.running:
                print("Run time elapsed.")
                break
    except KeyboardInterrupt:
        pass
    finally:
        loop.stop()
        engine.stop()

    best = renderer.format_lap_time(engine.laps.best_lap_s)
    print(f"\nLaps completed: {engine.laps.laps_completed}  best: {best}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
