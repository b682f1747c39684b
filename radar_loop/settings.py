import os
import sqlite3
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from radar_loop.logs import warn
from radar_loop.tiles import DEFAULT_OPTIONS, VALID_EXTENSIONS, VALID_TILE_SIZES, DisplayOptions


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


RAINVIEWER_API_URL = os.getenv("RAINVIEWER_API_URL", "https://api.rainviewer.com/public/weather-maps.json")
DB_PATH = os.getenv("RADAR_DB_PATH", "data/radar.db")
LOCAL_TZ = os.getenv("LOCAL_TZ", "America/Detroit")
FRAME_INTERVAL_MS = int(os.getenv("RADAR_FRAME_INTERVAL_MS", "500"))
FEED_TIMEOUT_SECONDS = float(os.getenv("RADAR_FEED_TIMEOUT_SECONDS", "10"))
FEED_REFRESH_MINUTES = int(os.getenv("RADAR_FEED_REFRESH_MINUTES", "10"))
PROBE_NOWCAST = _env_flag("RADAR_PROBE_NOWCAST", "true")

APP_CONFIG_TABLE = "app_config"

# Operator overrides, stored in the app_config table
TILE_SIZE_KEY = "radar_tile_size"
COLOR_SCHEME_KEY = "radar_color_scheme"
SMOOTH_KEY = "radar_smooth"
SNOW_KEY = "radar_snow"
EXTENSION_KEY = "radar_extension"
MAP_LAT_KEY = "map_center_lat"
MAP_LON_KEY = "map_center_lon"
MAP_ZOOM_KEY = "map_zoom"

BOOL_KEYS = (SMOOTH_KEY, SNOW_KEY)
OVERRIDE_KEYS = (
    TILE_SIZE_KEY,
    COLOR_SCHEME_KEY,
    SMOOTH_KEY,
    SNOW_KEY,
    EXTENSION_KEY,
    MAP_LAT_KEY,
    MAP_LON_KEY,
    MAP_ZOOM_KEY,
)


@dataclass(frozen=True)
class MapView:
    # Traverse City, Michigan
    lat: float = 44.7631
    lon: float = -85.6206
    zoom: int = 6


def connect(db_path: str | Path) -> sqlite3.Connection:
    db_file = Path(db_path)
    if not db_file.is_absolute():
        db_file = Path.cwd() / db_file
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA busy_timeout=5000;")
    conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {APP_CONFIG_TABLE} (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )
    return conn


def get_config(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute(
        f"SELECT value FROM {APP_CONFIG_TABLE} WHERE key = ?",
        (key,),
    ).fetchone()
    return row[0] if row else None


def set_config(conn: sqlite3.Connection, key: str, value: Any) -> None:
    conn.execute(
        f"""
        INSERT INTO {APP_CONFIG_TABLE} (key, value)
        VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET
          value=excluded.value
        """,
        (key, str(value)),
    )
    conn.commit()


def delete_config(conn: sqlite3.Connection, key: str) -> None:
    conn.execute(f"DELETE FROM {APP_CONFIG_TABLE} WHERE key = ?", (key,))
    conn.commit()


def get_bool(conn: sqlite3.Connection, key: str) -> bool | None:
    value = get_config(conn, key)
    if value is None:
        return None
    return str(value) == "1"


def set_bool(conn: sqlite3.Connection, key: str, value: bool) -> None:
    set_config(conn, key, "1" if value else "0")


def get_int(conn: sqlite3.Connection, key: str) -> int | None:
    value = get_config(conn, key)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        warn(f"Ignoring non-integer setting {key}={value!r}")
        return None


def get_float(conn: sqlite3.Connection, key: str) -> float | None:
    value = get_config(conn, key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        warn(f"Ignoring non-numeric setting {key}={value!r}")
        return None


def load_display_options(conn: sqlite3.Connection) -> DisplayOptions:
    tile_size = get_int(conn, TILE_SIZE_KEY)
    if tile_size is not None and tile_size not in VALID_TILE_SIZES:
        warn(f"Ignoring {TILE_SIZE_KEY}={tile_size}; expected one of {VALID_TILE_SIZES}")
        tile_size = None
    extension = get_config(conn, EXTENSION_KEY)
    if extension is not None and extension not in VALID_EXTENSIONS:
        warn(f"Ignoring {EXTENSION_KEY}={extension!r}; expected one of {VALID_EXTENSIONS}")
        extension = None
    color_scheme = get_int(conn, COLOR_SCHEME_KEY)
    smooth = get_bool(conn, SMOOTH_KEY)
    snow = get_bool(conn, SNOW_KEY)
    return DisplayOptions(
        tile_size=DEFAULT_OPTIONS.tile_size if tile_size is None else tile_size,
        color_scheme=DEFAULT_OPTIONS.color_scheme if color_scheme is None else color_scheme,
        smooth=DEFAULT_OPTIONS.smooth if smooth is None else smooth,
        snow=DEFAULT_OPTIONS.snow if snow is None else snow,
        extension=DEFAULT_OPTIONS.extension if extension is None else extension,
    )


def load_map_view(conn: sqlite3.Connection) -> MapView:
    default = MapView()
    lat = get_float(conn, MAP_LAT_KEY)
    lon = get_float(conn, MAP_LON_KEY)
    zoom = get_int(conn, MAP_ZOOM_KEY)
    if lat is not None and not -90 <= lat <= 90:
        lat = None
    if lon is not None and not -180 <= lon <= 180:
        lon = None
    return MapView(
        lat=default.lat if lat is None else lat,
        lon=default.lon if lon is None else lon,
        zoom=default.zoom if zoom is None else zoom,
    )


def load_startup_settings(db_path: str | Path = DB_PATH) -> tuple[DisplayOptions, MapView]:
    try:
        with closing(connect(db_path)) as conn:
            return load_display_options(conn), load_map_view(conn)
    except (sqlite3.Error, OSError) as exc:
        warn(f"Settings store {db_path} unavailable, using defaults: {exc}")
        return DEFAULT_OPTIONS, MapView()


def save_override(conn: sqlite3.Connection, key: str, value: str) -> None:
    if key not in OVERRIDE_KEYS:
        raise ValueError(f"Unknown setting {key!r}; expected one of {', '.join(OVERRIDE_KEYS)}")
    if key in BOOL_KEYS:
        set_bool(conn, key, str(value).strip().lower() in ("1", "true", "yes", "on"))
    else:
        set_config(conn, key, str(value).strip())


def apply_overrides(db_path: str | Path, assignments=(), removals=()) -> None:
    """
    Write `KEY=VALUE` assignments and drop `removals` from the override store.

    Values are checked when the session loads them; bad ones are logged and
    the default is used.
    """
    with closing(connect(db_path)) as conn:
        for assignment in assignments:
            key, sep, value = assignment.partition("=")
            if not sep:
                raise ValueError(f"Expected KEY=VALUE, got {assignment!r}")
            save_override(conn, key.strip(), value)
        for key in removals:
            if key not in OVERRIDE_KEYS:
                raise ValueError(f"Unknown setting {key!r}")
            delete_config(conn, key)
