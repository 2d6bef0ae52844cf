import unittest

from autozoom.camera.cursor import CLICK_WINDOW, CursorTrack, cursor_at
from autozoom.models.event import EventType, InputEvent


class CursorAtTests(unittest.TestCase):
    def setUp(self):
        self.events = [
            InputEvent(EventType.MOVE, 1.0, 10, 20),
            InputEvent(EventType.DOWN, 2.0, 30, 40),
            InputEvent(EventType.UP, 2.1, 30, 40),
            InputEvent(EventType.MOVE, 3.0, 70, 80),
        ]

    def test_no_events_gives_center(self):
        sample = cursor_at([], 5)
        self.assertEqual((sample.x, sample.y, sample.clicking), (50, 50, False))

    def test_before_first_event_uses_first_position(self):
        sample = cursor_at(self.events, 0.2)
        self.assertEqual((sample.x, sample.y), (10, 20))

    def test_last_event_at_or_before_time(self):
        self.assertEqual((cursor_at(self.events, 2.5).x, cursor_at(self.events, 2.5).y), (30, 40))
        self.assertEqual(cursor_at(self.events, 3.0).x, 70)

    def test_click_window(self):
        self.assertTrue(cursor_at(self.events, 1.8).clicking)
        self.assertTrue(cursor_at(self.events, 2.25).clicking)
        self.assertFalse(cursor_at(self.events, 2.4).clicking)
        self.assertFalse(cursor_at(self.events, 1.5).clicking)


class CursorTrackTests(unittest.TestCase):
    def setUp(self):
        self.events = [InputEvent(EventType.MOVE, i * 0.1, i % 100, (i * 7) % 100) for i in range(200)]
        self.events += [InputEvent(EventType.DOWN, t, 10, 10) for t in (3.05, 9.0, 15.55)]
        self.events.sort(key=lambda e: e.time)
        self.track = CursorTrack(self.events)

    def test_click_times_indexed_once(self):
        self.assertEqual(self.track.click_times, [3.05, 9.0, 15.55])

    def test_matches_linear_scan(self):
        for i in range(250):
            t = i * 0.083
            sample = self.track.at(t)
            previous = [e for e in self.events if e.time <= t] or self.events[:1]
            expected_click = any(e.type == EventType.DOWN and abs(e.time - t) < CLICK_WINDOW
                                 for e in self.events)
            self.assertEqual((sample.x, sample.y), (previous[-1].x, previous[-1].y))
            self.assertEqual(sample.clicking, expected_click)


if __name__ == "__main__":
    unittest.main()
