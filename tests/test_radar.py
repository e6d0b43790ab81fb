import unittest

import requests

from metwatch.layers import MARKERS_LAYER, LayerStack
from metwatch.radar import SATELLITE_LAYER, FrameIndexError, RadarEngine, frame_label, parse_frames
from metwatch.scheduler import CooperativeScheduler

FRAMES_PAYLOAD = {
    "version": "2.0",
    "host": "https://tilecache.rainviewer.com",
    "radar": {
        "past": [
            {"time": 1704067200, "path": "/v2/radar/1704067200"},
            {"time": 1704067800, "path": "/v2/radar/1704067800"},
            {"time": 1704068400, "path": "/v2/radar/1704068400"},
            {"time": 1704069000, "path": "/v2/radar/1704069000"},
        ],
        "nowcast": [],
    },
}


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(FRAMES_PAYLOAD)
        self.error = error
        self.calls = 0

    def get(self, url, **kwargs):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.response


def make_engine(session=None):
    clock = FakeClock()
    scheduler = CooperativeScheduler(clock=clock)
    layers = LayerStack()
    engine = RadarEngine(layers, scheduler, session=session or FakeSession(), frame_interval_ms=500)
    return engine, layers, scheduler, clock


class FrameFetchTest(unittest.TestCase):
    def test_parse_frames(self):
        self.assertEqual(parse_frames(FRAMES_PAYLOAD), [1704067200, 1704067800, 1704068400, 1704069000])
        with self.assertRaises(KeyError):
            parse_frames({"radar": {}})

    def test_fetch_resets_cursor_to_latest(self):
        engine, _, _, _ = make_engine()
        self.assertTrue(engine.fetch_frames())
        self.assertEqual(len(engine.frames), 4)
        self.assertEqual(engine.cursor, 3)
        timeline = engine.timeline()
        self.assertEqual(timeline.maximum, 3)
        self.assertTrue(timeline.enabled)

    def test_fetch_failure_keeps_state(self):
        session = FakeSession()
        engine, _, _, _ = make_engine(session)
        engine.fetch_frames()
        session.error = requests.ConnectionError("offline")
        self.assertFalse(engine.fetch_frames())
        self.assertEqual(len(engine.frames), 4)
        session.error = None
        session.response = FakeResponse(None)
        self.assertFalse(engine.fetch_frames())
        self.assertEqual(len(engine.frames), 4)

    def test_frame_label(self):
        self.assertEqual(frame_label(1704067800), "00:10 Z")


class ShowFrameTest(unittest.TestCase):
    def setUp(self):
        self.engine, self.layers, self.scheduler, self.clock = make_engine()
        self.engine.toggle_radar_visible()

    def test_toggle_fetches_and_shows_latest(self):
        attached = self.engine.attached_radar_layers()
        self.assertEqual(len(attached), 1)
        self.assertIn("/1704069000/256/", attached[0].url)
        self.assertEqual(self.engine.timeline().label, "00:30 Z")
        self.assertEqual(self.layers.draw_order()[-1], MARKERS_LAYER)

    def test_out_of_range_rejected(self):
        for index in (-1, 4, 99):
            with self.assertRaises(FrameIndexError):
                self.engine.show_frame(index)
        self.assertEqual(self.engine.timeline().position, 3)

    def test_at_most_one_overlay_attached(self):
        for index in (0, 2, 1, 1, 3, 0, 2):
            self.engine.show_frame(index)
            self.assertEqual(len(self.engine.attached_radar_layers()), 1)
        self.assertEqual(len(self.engine.cached_timestamps), 4)
        self.assertIn("/1704068400/256/", self.engine.attached_radar_layers()[0].url)

    def test_cached_layer_reused(self):
        self.engine.show_frame(1)
        first = self.engine.attached_radar_layers()[0]
        self.engine.show_frame(2)
        self.engine.show_frame(1)
        self.assertIs(self.engine.attached_radar_layers()[0], first)

    def test_hidden_is_noop_and_keeps_cache(self):
        self.engine.show_frame(0)
        self.engine.toggle_radar_visible()
        self.assertEqual(self.engine.attached_radar_layers(), [])
        self.assertEqual(len(self.engine.cached_timestamps), 2)
        self.engine.show_frame(99)
        self.assertEqual(self.engine.attached_radar_layers(), [])

    def test_refetch_only_when_empty(self):
        session = self.engine._session
        self.engine.toggle_radar_visible()
        self.engine.toggle_radar_visible()
        self.assertEqual(session.calls, 1)


class PlaybackTest(unittest.TestCase):
    def setUp(self):
        self.engine, self.layers, self.scheduler, self.clock = make_engine()
        self.engine.toggle_radar_visible()

    def run_until(self, end, step=0.25):
        ticks = 0
        while self.clock.now < end:
            self.clock.now += step
            ticks += self.scheduler.run_pending()
        return ticks

    def test_play_advances_and_wraps(self):
        self.engine.toggle_play()
        self.run_until(0.5)
        self.assertEqual(self.engine.cursor, 0)
        self.run_until(1.0)
        self.assertEqual(self.engine.cursor, 1)
        self.assertEqual(self.engine.timeline().position, 1)

    def test_play_pause_play_keeps_one_timer(self):
        self.engine.toggle_play()
        self.clock.now = 0.25
        self.engine.toggle_play()
        self.engine.toggle_play()
        self.assertEqual(self.scheduler.active_count, 1)
        ticks = self.run_until(5.0)
        # due at 0.75, 1.25, ..., 4.75
        self.assertEqual(ticks, 9)

    def test_pause_stops_ticks(self):
        self.engine.toggle_play()
        self.engine.toggle_play()
        self.assertEqual(self.scheduler.active_count, 0)
        self.assertEqual(self.run_until(3.0), 0)

    def test_scrub_stops_playback(self):
        self.engine.toggle_play()
        self.engine.scrub(1)
        self.assertFalse(self.engine.playing)
        self.assertEqual(self.scheduler.active_count, 0)
        self.assertEqual(self.engine.cursor, 1)
        with self.assertRaises(FrameIndexError):
            self.engine.scrub(10)
        self.assertEqual(self.engine.cursor, 1)

    def test_hiding_stops_playback(self):
        self.engine.toggle_play()
        self.engine.toggle_radar_visible()
        self.assertFalse(self.engine.playing)
        self.assertEqual(self.scheduler.active_count, 0)
        self.assertFalse(self.engine.timeline().visible)

    def test_rapid_toggles_never_duplicate_timers(self):
        for _ in range(5):
            self.engine.toggle_radar_visible()
            self.engine.toggle_play()
            self.engine.toggle_play()
            self.engine.toggle_play()
        self.assertLessEqual(self.scheduler.active_count, 1)


class EmptyFramesTest(unittest.TestCase):
    def test_no_frames_leaves_slider_disabled(self):
        session = FakeSession(FakeResponse({"radar": {"past": []}}))
        engine, _, scheduler, clock = make_engine(session)
        engine.toggle_radar_visible()
        timeline = engine.timeline()
        self.assertTrue(timeline.visible)
        self.assertFalse(timeline.enabled)
        self.assertEqual(engine.attached_radar_layers(), [])
        engine.toggle_play()
        clock.now = 2.0
        scheduler.run_pending()
        self.assertEqual(engine.attached_radar_layers(), [])

    def test_failed_fetch_leaves_radar_inert(self):
        engine, _, _, _ = make_engine(FakeSession(error=requests.Timeout("slow")))
        engine.toggle_radar_visible()
        self.assertFalse(engine.timeline().enabled)
        self.assertEqual(engine.attached_radar_layers(), [])


class SatelliteTest(unittest.TestCase):
    def test_toggle_satellite(self):
        engine, layers, _, _ = make_engine()
        self.assertTrue(engine.toggle_satellite())
        self.assertTrue(layers.has_layer(SATELLITE_LAYER))
        self.assertEqual(layers.draw_order()[-1], MARKERS_LAYER)
        self.assertFalse(engine.toggle_satellite())
        self.assertFalse(layers.has_layer(SATELLITE_LAYER))

    def test_satellite_independent_of_radar(self):
        engine, layers, _, _ = make_engine()
        engine.toggle_satellite()
        engine.toggle_radar_visible()
        engine.toggle_radar_visible()
        self.assertTrue(layers.has_layer(SATELLITE_LAYER))


if __name__ == "__main__":
    unittest.main()
