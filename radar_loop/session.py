import threading

from radar_loop import settings
from radar_loop.animation import AnimationDriver, ThreadTicker
from radar_loop.feed import FeedLoader
from radar_loop.frames import FrameStore, format_frame_time
from radar_loop.logs import log
from radar_loop.overlay import ControlState, MapSurface, OverlayController
from radar_loop.settings import MapView
from radar_loop.tiles import DEFAULT_OPTIONS, DisplayOptions


class RadarSession:
    """
    Everything one radar map needs: frames, overlay cache, playback and the
    control bar text. Every entry point takes the session lock, so timer ticks
    and button presses never interleave.
    """

    def __init__(
        self,
        options: DisplayOptions = DEFAULT_OPTIONS,
        view: MapView | None = None,
        surface: MapSurface | None = None,
        feed_url: str = settings.RAINVIEWER_API_URL,
        tz_name: str = settings.LOCAL_TZ,
        interval_ms: int = settings.FRAME_INTERVAL_MS,
        timeout: float = settings.FEED_TIMEOUT_SECONDS,
        probe_nowcast: bool = settings.PROBE_NOWCAST,
        ticker_factory=ThreadTicker,
    ):
        self.options = options
        self.view = view or MapView()
        self.surface = surface or MapSurface()
        self.controls = ControlState()
        self.store = FrameStore()
        self.controller = OverlayController(self.store, self.surface, self.controls, options, tz_name)
        self.animation = AnimationDriver(self._on_tick, self.controls, interval_ms, ticker_factory)
        self.loader = FeedLoader(
            self.store,
            self.controller,
            self.controls,
            feed_url,
            timeout=timeout,
            probe_nowcast=probe_nowcast,
        )
        self._lock = threading.RLock()

    @classmethod
    def from_settings(cls, db_path=settings.DB_PATH, **kwargs) -> "RadarSession":
        options, view = settings.load_startup_settings(db_path)
        return cls(options=options, view=view, **kwargs)

    def _on_tick(self) -> None:
        with self._lock:
            # a tick can be waiting on the lock while stop() cancels its ticker
            if self.animation.playing:
                self.controller.advance()

    @property
    def playing(self) -> bool:
        return self.animation.playing

    def load(self) -> bool:
        with self._lock:
            return self.loader.load()

    def reload(self) -> bool:
        with self._lock:
            self.animation.stop()
            ok = self.loader.load()
            if ok:
                dropped = self.store.prune_overlays(keep=self.surface.active_layers())
                if dropped:
                    log(f"Dropped {dropped} cached overlays for expired frames")
            return ok

    def display(self, index: int) -> None:
        with self._lock:
            self.controller.display(index)

    def toggle_play(self) -> None:
        with self._lock:
            self.animation.toggle()

    def start(self) -> None:
        with self._lock:
            self.animation.start()

    def stop(self) -> None:
        with self._lock:
            self.animation.stop()

    def step_back(self) -> None:
        with self._lock:
            self.animation.stop()
            self.controller.retreat()

    def step_forward(self) -> None:
        with self._lock:
            self.animation.stop()
            self.controller.advance()

    def loop_frames(self) -> list:
        """(overlay, label) for every frame, for pages that animate in the browser."""
        with self._lock:
            return [
                (self.controller.overlay_for(frame), format_frame_time(frame.time, self.controller.tz_name))
                for frame in self.store.frames
            ]

    def current_frame(self):
        return self.controller.current_frame()
