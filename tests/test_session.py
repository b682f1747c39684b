import unittest
from unittest import mock

from radar_loop.animation import ManualTicker
from radar_loop.session import RadarSession

HOST = "https://tilecache.rainviewer.com"


def feed_payload(past_times, nowcast_times=()):
    return {
        "host": HOST,
        "radar": {
            "past": [{"time": t, "path": f"/v2/radar/{t}"} for t in past_times],
            "nowcast": [{"time": t, "path": f"/v2/radar/nowcast_{t}"} for t in nowcast_times],
        },
    }


def json_response(payload):
    resp = mock.Mock()
    resp.ok = True
    resp.json.return_value = payload
    return resp


class RadarSessionTest(unittest.TestCase):
    def setUp(self):
        self.session = RadarSession(tz_name="UTC", probe_nowcast=False, ticker_factory=ManualTicker)

    def load(self, payload):
        with mock.patch("radar_loop.feed.requests.get", return_value=json_response(payload)):
            return self.session.load()

    def test_play_ticks_advance_with_wraparound(self):
        self.assertTrue(self.load(feed_payload([1755470400, 1755471000, 1755471600])))
        self.assertEqual(self.session.store.current_index, 2)
        self.session.toggle_play()
        self.assertEqual(self.session.controls.play_label, "Stop")
        ticker = self.session.animation.ticker
        ticker.fire()
        self.assertEqual(self.session.store.current_index, 0)
        ticker.fire()
        self.assertEqual(self.session.store.current_index, 1)
        self.assertEqual(len(self.session.surface.active_layers()), 1)

    def test_step_buttons_stop_playback(self):
        self.load(feed_payload([1755470400, 1755471000]))
        self.session.start()
        self.session.step_back()
        self.assertFalse(self.session.playing)
        self.assertEqual(self.session.controls.play_label, "Play")
        self.assertEqual(self.session.store.current_index, 0)
        self.session.start()
        self.session.step_forward()
        self.assertFalse(self.session.playing)
        self.assertEqual(self.session.store.current_index, 1)

    def test_tick_after_stop_is_ignored(self):
        self.load(feed_payload([1755470400, 1755471000]))
        self.session.start()
        ticker = self.session.animation.ticker
        self.session.stop()
        self.session._on_tick()
        self.assertEqual(self.session.store.current_index, 1)
        self.assertFalse(ticker.running)

    def test_reload_prunes_expired_overlays(self):
        self.load(feed_payload([100, 200, 300]))
        self.session.display(0)
        self.session.display(1)
        self.assertEqual(len(self.session.store.overlays()), 3)
        self.assertTrue(self.load_reload(feed_payload([200, 300, 400])))
        paths = {overlay.path for overlay in self.session.store.overlays()}
        self.assertNotIn("/v2/radar/100", paths)
        self.assertIn("/v2/radar/400", paths)
        self.assertEqual(self.session.current_frame().path, "/v2/radar/400")

    def load_reload(self, payload):
        with mock.patch("radar_loop.feed.requests.get", return_value=json_response(payload)):
            return self.session.reload()

    def test_loop_frames_reuse_cached_overlays(self):
        self.load(feed_payload([1755470400, 1755471000]))
        frames = self.session.loop_frames()
        self.assertEqual([label for _, label in frames], ["Aug 17 10:40 PM", "Aug 17 10:50 PM"])
        self.assertIs(frames[1][0], self.session.surface.active_layers()[0])
        self.assertEqual(len(self.session.store.overlays()), 2)
        self.session.step_forward()
        self.assertEqual(len(self.session.store.overlays()), 2)

    def test_no_data_status(self):
        self.assertFalse(self.load({"host": HOST, "radar": {}}))
        self.assertEqual(self.session.controls.frame_text, "No data")
        self.session.toggle_play()
        self.session.animation.ticker.fire()
        self.assertEqual(self.session.surface.active_layers(), [])


if __name__ == "__main__":
    unittest.main()
