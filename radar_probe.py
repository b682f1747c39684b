import argparse
import sys
import time
from pathlib import Path

from radar_loop import settings
from radar_loop.frames import format_frame_time
from radar_loop.leaflet import page_html
from radar_loop.overlay import ConsoleMapSurface
from radar_loop.session import RadarSession


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Load the RainViewer frame feed and show the radar loop.")
    parser.add_argument("--url", default=settings.RAINVIEWER_API_URL, help="weather-maps.json feed URL")
    parser.add_argument("--db", default=settings.DB_PATH, help="settings database with display overrides")
    parser.add_argument("--play", type=float, default=0, metavar="SECONDS", help="animate the loop for SECONDS")
    parser.add_argument("--html", type=Path, help="write a Leaflet page for the displayed frame")
    parser.add_argument("--no-probe", action="store_true", help="keep nowcast frames without checking their tiles")
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="store a display override (" + ", ".join(settings.OVERRIDE_KEYS) + ")",
    )
    parser.add_argument("--unset", action="append", default=[], metavar="KEY", help="remove a stored override")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    if args.set or args.unset:
        try:
            settings.apply_overrides(args.db, args.set, args.unset)
        except ValueError as exc:
            print(f"ERROR: {exc}")
            return 2
    session = RadarSession.from_settings(
        db_path=args.db,
        surface=ConsoleMapSurface(),
        feed_url=args.url,
        probe_nowcast=not args.no_probe,
    )
    if not session.load():
        print(f"STATUS: {session.controls.frame_text}")
        return 1

    print(f"HOST: {session.loader.snapshot.host}")
    for idx, frame in enumerate(session.store.frames):
        marker = "*" if idx == session.store.current_index else " "
        print(f"{marker} {idx:2d} {frame.kind:<7} {format_frame_time(frame.time, settings.LOCAL_TZ):<18} {frame.path}")

    if args.play > 0:
        session.start()
        try:
            time.sleep(args.play)
        except KeyboardInterrupt:
            pass
        finally:
            session.stop()

    print(f"SHOWING: {session.controls.frame_text}")
    if args.html:
        args.html.write_text(
            page_html(session.view, session.surface.active_layers(), title="Radar Loop", caption=session.controls.frame_text),
            encoding="utf-8",
        )
        print(f"WROTE: {args.html}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
