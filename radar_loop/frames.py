from dataclasses import dataclass
from typing import Callable

import pandas as pd

PAST = "past"
NOWCAST = "nowcast"


@dataclass(frozen=True)
class Frame:
    path: str
    time: int
    kind: str = PAST


def normalize_index(index: int, count: int) -> int:
    """
    Wrap an index one step past either end of the frame list.

    Negative indexes land on the last frame, anything at or past the end lands
    on the first one.
    """
    if index < 0:
        return count - 1
    if index >= count:
        return 0
    return index


def frame_time_supported(epoch: int) -> bool:
    try:
        pd.to_datetime(epoch, unit="s", utc=True)
    except (OverflowError, ValueError, pd.errors.OutOfBoundsDatetime):
        return False
    return True


def format_frame_time(epoch: int, tz_name: str) -> str:
    try:
        ts = pd.to_datetime(epoch, unit="s", utc=True)
    except (OverflowError, ValueError, pd.errors.OutOfBoundsDatetime):
        return str(epoch)
    try:
        ts = ts.tz_convert(tz_name)
    except Exception:
        pass
    return f"{ts.strftime('%b %d')} {ts.strftime('%I:%M %p').lstrip('0')}"


class FrameStore:
    def __init__(self):
        self.frames: list[Frame] = []
        self.current_index = 0
        self._overlays: dict[str, object] = {}

    def __len__(self) -> int:
        return len(self.frames)

    def set_frames(self, frames: list[Frame]) -> None:
        # cached overlays survive a new frame list; paths that repeat reuse them
        self.frames = list(frames)

    def get_frame(self, index: int) -> Frame:
        return self.frames[normalize_index(index, len(self.frames))]

    def get_or_create_overlay(self, frame: Frame, factory: Callable[[Frame], object]):
        overlay = self._overlays.get(frame.path)
        if overlay is None:
            overlay = factory(frame)
            self._overlays[frame.path] = overlay
        return overlay

    def overlays(self) -> list:
        return list(self._overlays.values())

    def prune_overlays(self, keep=()) -> int:
        live = {frame.path for frame in self.frames}
        live.update(getattr(overlay, "path", None) for overlay in keep)
        stale = [path for path in self._overlays if path not in live]
        for path in stale:
            del self._overlays[path]
        return len(stale)

    def to_dataframe(self, tz_name: str) -> pd.DataFrame:
        rows = [
            {
                "index": idx,
                "time": pd.to_datetime(frame.time, unit="s", utc=True),
                "kind": frame.kind,
                "path": frame.path,
                "current": idx == self.current_index,
            }
            for idx, frame in enumerate(self.frames)
        ]
        df = pd.DataFrame(rows, columns=["index", "time", "kind", "path", "current"])
        if not df.empty:
            try:
                df["time"] = df["time"].dt.tz_convert(tz_name)
            except Exception:
                pass
        return df
