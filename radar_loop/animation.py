import threading
from typing import Callable

from radar_loop.overlay import PLAY_LABEL, STOP_LABEL, ControlState

DEFAULT_INTERVAL_MS = 500


class ThreadTicker:
    """Calls `callback` every `interval_s` seconds on a daemon thread until cancelled."""

    def __init__(self, interval_s: float, callback: Callable[[], None]):
        self.interval_s = interval_s
        self.callback = callback
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name="radar-loop-ticker", daemon=True)

    def _run(self) -> None:
        while not self._stopped.wait(self.interval_s):
            self.callback()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stopped.set()


class ManualTicker:
    """Ticker fired from outside, e.g. by a page rerun or a test."""

    def __init__(self, interval_s: float, callback: Callable[[], None]):
        self.interval_s = interval_s
        self.callback = callback
        self.running = False
        self.ticks = 0

    def start(self) -> None:
        self.running = True

    def cancel(self) -> None:
        self.running = False

    def fire(self) -> bool:
        if not self.running:
            return False
        self.ticks += 1
        self.callback()
        return True


class AnimationDriver:
    def __init__(
        self,
        on_tick: Callable[[], None],
        controls: ControlState,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        ticker_factory=ThreadTicker,
    ):
        self.on_tick = on_tick
        self.controls = controls
        self.interval_ms = interval_ms
        self.ticker_factory = ticker_factory
        self.ticker = None

    @property
    def playing(self) -> bool:
        return self.ticker is not None

    def start(self) -> None:
        if self.playing:
            return
        self.controls.play_label = STOP_LABEL
        self.ticker = self.ticker_factory(self.interval_ms / 1000.0, self.on_tick)
        self.ticker.start()

    def stop(self) -> None:
        if not self.playing:
            return
        self.ticker.cancel()
        self.ticker = None
        self.controls.play_label = PLAY_LABEL

    def toggle(self) -> None:
        if self.playing:
            self.stop()
        else:
            self.start()
