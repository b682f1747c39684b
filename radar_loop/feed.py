from dataclasses import dataclass, field

import requests

from radar_loop.frames import NOWCAST, PAST, Frame, FrameStore, frame_time_supported
from radar_loop.logs import error, log, warn
from radar_loop.overlay import ERROR_TEXT, NO_DATA_TEXT, ControlState, OverlayController
from radar_loop.tiles import DEFAULT_OPTIONS, DisplayOptions, build_tile_url, resolve_tile_url

USER_AGENT = "RadarLoop/1.0"


class FeedError(Exception):
    pass


class FetchError(FeedError):
    pass


class ParseError(FeedError):
    pass


class EmptyDataError(FeedError):
    pass


@dataclass
class FeedSnapshot:
    host: str = ""
    frames: list[Frame] = field(default_factory=list)
    generated: int | None = None


def _parse_frame(item, kind: str) -> Frame | None:
    if not isinstance(item, dict):
        return None
    path = item.get("path")
    if not isinstance(path, str):
        return None
    try:
        epoch = int(item.get("time"))
    except (TypeError, ValueError, OverflowError):
        return None
    if not frame_time_supported(epoch):
        return None
    return Frame(path=path, time=epoch, kind=kind)


def parse_feed(payload) -> FeedSnapshot:
    """
    Turn the weather-maps JSON into past frames followed by nowcast frames.

    Any shape other than the expected object yields an empty snapshot.
    """
    if not isinstance(payload, dict):
        return FeedSnapshot()
    host = payload.get("host")
    host = host if isinstance(host, str) else ""
    generated = payload.get("generated")
    generated = generated if isinstance(generated, int) else None
    radar = payload.get("radar")
    if not isinstance(radar, dict):
        return FeedSnapshot(host=host, generated=generated)

    frames = []
    for kind, key in ((PAST, "past"), (NOWCAST, "nowcast")):
        items = radar.get(key)
        if not isinstance(items, list):
            continue
        for item in items:
            frame = _parse_frame(item, kind)
            if frame is None:
                log(f"Skipping malformed {key} frame entry: {item!r}")
                continue
            frames.append(frame)
    return FeedSnapshot(host=host, frames=frames, generated=generated)


def fetch_weather_maps(url: str, timeout: float = 10) -> dict:
    headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
    try:
        resp = requests.get(url, headers=headers, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(f"GET {url} failed: {exc}") from exc
    try:
        return resp.json()
    except ValueError as exc:
        raise ParseError(f"GET {url} returned a body that is not JSON: {exc}") from exc


def tile_available(url: str, timeout: float = 10) -> bool:
    try:
        resp = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
    except requests.RequestException:
        return False
    return resp.ok


def drop_unserved_nowcast(
    snapshot: FeedSnapshot,
    options: DisplayOptions = DEFAULT_OPTIONS,
    timeout: float = 10,
) -> FeedSnapshot:
    """Keep past frames as-is; keep nowcast frames only if their zoom-0 tile loads."""
    kept = []
    for frame in snapshot.frames:
        if frame.kind == NOWCAST:
            url = resolve_tile_url(build_tile_url(snapshot.host, frame, options), 0, 0, 0)
            if not tile_available(url, timeout=timeout):
                log(f"Nowcast frame {frame.path} not served yet, skipping")
                continue
        kept.append(frame)
    return FeedSnapshot(host=snapshot.host, frames=kept, generated=snapshot.generated)


class FeedLoader:
    def __init__(
        self,
        store: FrameStore,
        controller: OverlayController,
        controls: ControlState,
        url: str,
        timeout: float = 10,
        probe_nowcast: bool = True,
    ):
        self.store = store
        self.controller = controller
        self.controls = controls
        self.url = url
        self.timeout = timeout
        self.probe_nowcast = probe_nowcast
        self.snapshot: FeedSnapshot | None = None

    def load(self) -> bool:
        try:
            snapshot = parse_feed(fetch_weather_maps(self.url, timeout=self.timeout))
            if self.probe_nowcast:
                snapshot = drop_unserved_nowcast(snapshot, self.controller.options, timeout=self.timeout)
            self.snapshot = snapshot
            self.controller.host = snapshot.host
            self.store.set_frames(snapshot.frames)
            if not snapshot.frames:
                raise EmptyDataError(f"{self.url} listed no radar frames")
        except EmptyDataError as exc:
            warn(f"No radar frames available: {exc}")
            self.controls.frame_text = NO_DATA_TEXT
            return False
        except FeedError as exc:
            error(f"Error fetching radar frames: {exc}")
            self.controls.frame_text = ERROR_TEXT
            return False

        log(f"Loaded {len(snapshot.frames)} radar frames from {self.url}")
        self.controller.display(len(self.store.frames) - 1)
        return True
