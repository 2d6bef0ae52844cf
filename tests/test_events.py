import json
import os
import tempfile
import unittest

from autozoom.models.event import EventType, InputEvent, load_events, parse_event_type, parse_events


class EventParsingTests(unittest.TestCase):
    def test_recorder_type_names(self):
        self.assertEqual(parse_event_type('mousemove'), EventType.MOVE)
        self.assertEqual(parse_event_type('mousedown'), EventType.DOWN)
        self.assertEqual(parse_event_type('mouseup'), EventType.UP)
        self.assertEqual(parse_event_type('keydown'), EventType.KEY)
        self.assertEqual(parse_event_type('down'), EventType.DOWN)
        with self.assertRaises(ValueError):
            parse_event_type('scroll')

    def test_positions_clamped_to_screen(self):
        event = InputEvent.from_dict({'type': 'mousedown', 'time': 1, 'x': 101.5, 'y': -0.2})
        self.assertEqual((event.x, event.y), (100.0, 0.0))

    def test_negative_time_rejected(self):
        with self.assertRaises(ValueError):
            InputEvent(EventType.MOVE, -1.0)

    def test_parse_sorts_by_time_and_keeps_ties(self):
        events = parse_events({'events': [
            {'type': 'mousedown', 'time': 2.0, 'x': 10, 'y': 10},
            {'type': 'mousemove', 'time': 1.0, 'x': 20, 'y': 20},
            {'type': 'mouseup', 'time': 2.0, 'x': 10, 'y': 10},
        ], 'screenWidth': 1920, 'screenHeight': 1080})
        self.assertEqual([e.type for e in events], [EventType.MOVE, EventType.DOWN, EventType.UP])

    def test_bare_list(self):
        events = parse_events([{'type': 'down', 'time': 0.5}])
        self.assertEqual(events, [InputEvent(EventType.DOWN, 0.5, 50.0, 50.0)])

    def test_load_from_file(self):
        handle, path = tempfile.mkstemp(suffix='.events.json')
        try:
            with os.fdopen(handle, 'w', encoding='utf-8') as f:
                json.dump({'events': [{'type': 'mousedown', 'time': 3, 'x': 40, 'y': 60}]}, f)
            events = load_events(path)
        finally:
            os.remove(path)
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].to_dict(), {'type': 'down', 'time': 3.0, 'x': 40.0, 'y': 60.0})


if __name__ == "__main__":
    unittest.main()
