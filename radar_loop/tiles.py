"""
Tile URL templates and overlay handles for RainViewer radar frames.

A frame path such as ``/v2/radar/1755471000`` combined with the feed host and
the display options gives a Leaflet template like::

    https://tilecache.rainviewer.com/v2/radar/1755471000/512/{z}/{x}/{y}/2/1_1.png
"""

from dataclasses import dataclass

VALID_TILE_SIZES = (256, 512)
VALID_EXTENSIONS = ("png", "webp")

OVERLAY_OPACITY = 0.6
OVERLAY_Z_INDEX = 10
# RainViewer serves radar tiles up to zoom 9
OVERLAY_MAX_ZOOM = 9
# Leaflet requests 256px tiles and scales the 512px images
LEAFLET_TILE_SIZE = 256


@dataclass(frozen=True)
class DisplayOptions:
    tile_size: int = 512
    color_scheme: int = 2  # Universal Blue
    smooth: bool = True
    snow: bool = True
    extension: str = "png"


@dataclass(frozen=True)
class TileOverlay:
    """One Leaflet tile layer bound to a single frame path."""
    path: str
    url_template: str
    opacity: float = OVERLAY_OPACITY
    z_index: int = OVERLAY_Z_INDEX
    max_zoom: int = OVERLAY_MAX_ZOOM
    tile_size: int = LEAFLET_TILE_SIZE

    def leaflet_options(self) -> dict:
        return {
            "tileSize": self.tile_size,
            "opacity": self.opacity,
            "zIndex": self.z_index,
            "maxZoom": self.max_zoom,
        }


DEFAULT_OPTIONS = DisplayOptions()


def _flag(value: bool) -> str:
    return "1" if value else "0"


def build_tile_url(host: str, frame, options: DisplayOptions = DEFAULT_OPTIONS) -> str:
    return (
        f"{host}{frame.path}/{options.tile_size}/{{z}}/{{x}}/{{y}}/"
        f"{options.color_scheme}/{_flag(options.smooth)}_{_flag(options.snow)}.{options.extension}"
    )


def resolve_tile_url(template: str, z: int, x: int, y: int) -> str:
    return template.replace("{z}", str(z)).replace("{x}", str(x)).replace("{y}", str(y))


def make_overlay(host: str, frame, options: DisplayOptions = DEFAULT_OPTIONS) -> TileOverlay:
    return TileOverlay(path=frame.path, url_template=build_tile_url(host, frame, options))
