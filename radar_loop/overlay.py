from radar_loop.frames import FrameStore, format_frame_time, normalize_index
from radar_loop.tiles import DEFAULT_OPTIONS, DisplayOptions, make_overlay

NO_DATA_TEXT = "No data"
ERROR_TEXT = "Error loading data"
PLAY_LABEL = "Play"
STOP_LABEL = "Stop"


class ControlState:
    """Text shown by the control bar under the map."""

    def __init__(self):
        self.frame_text = ""
        self.play_label = PLAY_LABEL


class MapSurface:
    """Tracks which radar layers are on the map; renderers read `active_layers`."""

    def __init__(self):
        self._layers = []

    def has_layer(self, layer) -> bool:
        return layer in self._layers

    def add_layer(self, layer) -> None:
        if layer not in self._layers:
            self._layers.append(layer)

    def remove_layer(self, layer) -> None:
        if layer in self._layers:
            self._layers.remove(layer)

    def active_layers(self) -> list:
        return list(self._layers)


class ConsoleMapSurface(MapSurface):
    def __init__(self, echo=print):
        super().__init__()
        self.echo = echo

    def add_layer(self, layer) -> None:
        super().add_layer(layer)
        self.echo(f"layer on:  {layer.url_template}")


class OverlayController:
    def __init__(
        self,
        store: FrameStore,
        surface: MapSurface,
        controls: ControlState,
        options: DisplayOptions = DEFAULT_OPTIONS,
        tz_name: str = "UTC",
    ):
        self.store = store
        self.surface = surface
        self.controls = controls
        self.options = options
        self.tz_name = tz_name
        self.host = ""

    def _create_overlay(self, frame):
        return make_overlay(self.host, frame, self.options)

    def overlay_for(self, frame):
        return self.store.get_or_create_overlay(frame, self._create_overlay)

    def clear(self) -> None:
        for layer in self.store.overlays():
            if self.surface.has_layer(layer):
                self.surface.remove_layer(layer)

    def display(self, position: int) -> None:
        if not self.store.frames:
            return
        position = normalize_index(position, len(self.store.frames))
        self.store.current_index = position
        frame = self.store.get_frame(position)

        overlay = self.overlay_for(frame)
        self.clear()
        self.surface.add_layer(overlay)

        self.controls.frame_text = format_frame_time(frame.time, self.tz_name)

    def advance(self) -> None:
        self.display(self.store.current_index + 1)

    def retreat(self) -> None:
        self.display(self.store.current_index - 1)

    def current_frame(self):
        if not self.store.frames:
            return None
        return self.store.frames[self.store.current_index]
