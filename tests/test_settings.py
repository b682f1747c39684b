from contextlib import closing
from pathlib import Path
import unittest

from radar_loop.settings import (
    COLOR_SCHEME_KEY,
    EXTENSION_KEY,
    MAP_LAT_KEY,
    MAP_ZOOM_KEY,
    SMOOTH_KEY,
    TILE_SIZE_KEY,
    SNOW_KEY,
    MapView,
    apply_overrides,
    connect,
    delete_config,
    get_config,
    load_display_options,
    load_map_view,
    load_startup_settings,
    set_bool,
    set_config,
)
from radar_loop.tiles import DEFAULT_OPTIONS


class SettingsStoreTest(unittest.TestCase):
    def setUp(self):
        data_dir = Path.cwd() / "data"
        data_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = data_dir / "test_radar_settings.db"
        self._cleanup()

    def tearDown(self):
        self._cleanup()

    def _cleanup(self):
        for suffix in ("", "-wal", "-shm"):
            candidate = Path(f"{self.db_path}{suffix}")
            if candidate.exists():
                candidate.unlink()

    def test_defaults_when_empty(self):
        options, view = load_startup_settings(self.db_path)
        self.assertEqual(options, DEFAULT_OPTIONS)
        self.assertEqual(view, MapView())

    def test_overrides_round_trip(self):
        with closing(connect(self.db_path)) as conn:
            set_config(conn, TILE_SIZE_KEY, 256)
            set_config(conn, COLOR_SCHEME_KEY, 4)
            set_bool(conn, SMOOTH_KEY, False)
            set_config(conn, EXTENSION_KEY, "webp")
            set_config(conn, MAP_LAT_KEY, 42.5)
            set_config(conn, MAP_ZOOM_KEY, 8)
            self.assertEqual(get_config(conn, EXTENSION_KEY), "webp")

        options, view = load_startup_settings(self.db_path)
        self.assertEqual(options.tile_size, 256)
        self.assertEqual(options.color_scheme, 4)
        self.assertFalse(options.smooth)
        self.assertTrue(options.snow)
        self.assertEqual(options.extension, "webp")
        self.assertAlmostEqual(view.lat, 42.5)
        self.assertAlmostEqual(view.lon, MapView().lon)
        self.assertEqual(view.zoom, 8)

    def test_invalid_overrides_fall_back(self):
        with closing(connect(self.db_path)) as conn:
            set_config(conn, TILE_SIZE_KEY, 300)
            set_config(conn, COLOR_SCHEME_KEY, "blue")
            set_config(conn, EXTENSION_KEY, "gif")
            set_config(conn, MAP_LAT_KEY, 123)
            options = load_display_options(conn)
            view = load_map_view(conn)
            delete_config(conn, TILE_SIZE_KEY)
            self.assertIsNone(get_config(conn, TILE_SIZE_KEY))
        self.assertEqual(options, DEFAULT_OPTIONS)
        self.assertEqual(view.lat, MapView().lat)

    def test_apply_overrides_writes_and_removes(self):
        apply_overrides(self.db_path, ["radar_tile_size=256", "radar_snow=off", "map_zoom = 7"])
        options, view = load_startup_settings(self.db_path)
        self.assertEqual(options.tile_size, 256)
        self.assertFalse(options.snow)
        self.assertEqual(view.zoom, 7)

        apply_overrides(self.db_path, removals=[TILE_SIZE_KEY, SNOW_KEY])
        options, view = load_startup_settings(self.db_path)
        self.assertEqual(options.tile_size, DEFAULT_OPTIONS.tile_size)
        self.assertTrue(options.snow)
        self.assertEqual(view.zoom, 7)

    def test_apply_overrides_rejects_unknown_keys(self):
        with self.assertRaises(ValueError):
            apply_overrides(self.db_path, ["radar_opacity=0.9"])
        with self.assertRaises(ValueError):
            apply_overrides(self.db_path, ["radar_tile_size"])
        with self.assertRaises(ValueError):
            apply_overrides(self.db_path, removals=["station_lat"])


if __name__ == "__main__":
    unittest.main()
