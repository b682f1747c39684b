import unittest

from radar_loop.frames import Frame
from radar_loop.tiles import DEFAULT_OPTIONS, DisplayOptions, build_tile_url, make_overlay, resolve_tile_url

HOST = "https://tilecache.rainviewer.com"


class TileUrlTest(unittest.TestCase):
    def test_default_template(self):
        url = build_tile_url(HOST, Frame(path="/v2/radar/1755471000", time=1755471000), DEFAULT_OPTIONS)
        self.assertEqual(url, HOST + "/v2/radar/1755471000/512/{z}/{x}/{y}/2/1_1.png")

    def test_flags_and_extension(self):
        options = DisplayOptions(tile_size=256, color_scheme=4, smooth=False, snow=True, extension="webp")
        url = build_tile_url(HOST, Frame(path="/v2/radar/nowcast_abc", time=0), options)
        self.assertEqual(url, HOST + "/v2/radar/nowcast_abc/256/{z}/{x}/{y}/4/0_1.webp")

    def test_empty_path_is_not_validated(self):
        url = build_tile_url("", Frame(path="", time=0))
        self.assertEqual(url, "/512/{z}/{x}/{y}/2/1_1.png")

    def test_resolve_placeholders(self):
        template = build_tile_url(HOST, Frame(path="/v2/radar/1", time=1))
        self.assertEqual(resolve_tile_url(template, 0, 0, 0), HOST + "/v2/radar/1/512/0/0/0/2/1_1.png")

    def test_overlay_rendering_parameters(self):
        overlay = make_overlay(HOST, Frame(path="/v2/radar/1", time=1))
        self.assertEqual(overlay.path, "/v2/radar/1")
        self.assertEqual(
            overlay.leaflet_options(),
            {"tileSize": 256, "opacity": 0.6, "zIndex": 10, "maxZoom": 9},
        )


if __name__ == "__main__":
    unittest.main()
