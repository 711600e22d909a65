"""Live proximity radar entry point.

Requires iRacing running on the same machine.  Press Ctrl+C to quit.

Usage:
    uv run python scripts/radar.py
    uv run python scripts/radar.py --range 50 --no-audio
    uv run python scripts/radar.py --verbose           # debug logging
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import math
import sys
import time

from dotenv import load_dotenv

load_dotenv()

from racing_radar.config import AppSettings, load_settings  # noqa: E402
from racing_radar.hotpath.audio import NullAudioPlayer, ProximityAudio, WinsoundPlayer  # noqa: E402
from racing_radar.hotpath.cadence import ProximityAlerter  # noqa: E402
from racing_radar.hotpath.engine import RadarEngine  # noqa: E402
from racing_radar.hotpath.event_stream import TelemetryEventStream  # noqa: E402
from racing_radar.proximity.classifier import ProximityClassifier  # noqa: E402
from racing_radar.radar.projector import RadarProjector  # noqa: E402
from racing_radar.telemetry.connection import LiveTelemetryConnection  # noqa: E402
from racing_radar.telemetry.normalizer import TelemetryNormalizer  # noqa: E402


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number of metres: {text!r}")
    return value


def build_parser(settings: AppSettings) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Racing Radar — live proximity warnings")
    ap.add_argument(
        "--range", type=_positive_float, default=settings.radar.range_m, help="Radar range in metres"
    )
    ap.add_argument("--no-audio", action="store_true", help="Disable audio warnings")
    ap.add_argument("--verbose", action="store_true", help="Debug logging")
    return ap


def main() -> None:
    settings = load_settings()
    args = build_parser(settings).parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    radar_settings = dataclasses.replace(settings.radar, range_m=args.range)
    use_audio = settings.audio.proximity_audio and not args.no_audio
    player = WinsoundPlayer() if use_audio and sys.platform == "win32" else NullAudioPlayer()
    audio = ProximityAudio(player, enabled=use_audio, volume=settings.audio.volume)

    conn = LiveTelemetryConnection()
    if not conn.connect():
        print("iRacing not detected — waiting for connection...", flush=True)

    stream = TelemetryEventStream(conn, TelemetryNormalizer(), target_hz=60)
    engine = RadarEngine(
        stream,
        ProximityClassifier(settings.side_bars.lateral_min_m, settings.side_bars.lateral_max_m),
        RadarProjector(),
        ProximityAlerter(),
        audio,
        radar_settings,
    )

    def on_connection_change(connected: bool) -> None:
        if connected:
            engine.reset()

    conn.register_callback(on_connection_change)

    engine.start()
    print("Radar running. Press Ctrl+C to stop.", flush=True)

    try:
        while True:
            if not conn.is_connected:
                conn.connect()

            result = engine.tick()
            if result is not None and result.beep is not None:
                summary = result.left if result.beep.side is result.left.side else result.right
                car = summary.car
                print(
                    f"  [{result.beep.side.value:>5}] {result.beep.level.value:<6} "
                    f"#{car.car_number} lat {car.lateral_m:+.1f} m  lon {car.longitudinal_m:+.1f} m",
                    flush=True,
                )

            time.sleep(0.001)
    except KeyboardInterrupt:
        pass
    finally:
        engine.stop()
        print("\nRadar stopped.")


if __name__ == "__main__":
    main()
