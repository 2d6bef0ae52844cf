import unittest

import numpy as np

from autozoom.models.event import EventType, InputEvent
from autozoom.models.keyframe import Keyframe
from autozoom.video.compositor import CompositorStyle, CropPolicy
from autozoom.video.export import ExportJob, MemoryFrameSink
from helpers import ArraySource, solid_frame

STYLE = CompositorStyle(background=((0, 0, 0),), shadow_opacity=0.0)


def make_source(count=5, fail_at=None):
    frames = [solid_frame(64, 36, (i * 40, 100, 100)) for i in range(count)]
    return ArraySource(frames, fps=10.0, fail_at=fail_at)


class StoppingSink(MemoryFrameSink):
    def __init__(self, stop_after):
        super().__init__()
        self.stop_after = stop_after
        self.job = None

    def _write(self, frame, t):
        super()._write(frame, t)
        if len(self.frames) == self.stop_after:
            self.job.stop()


class FailingSink(MemoryFrameSink):
    def _write(self, frame, t):
        if self.frame_count == 2:
            raise OSError("disk full")
        super()._write(frame, t)


class ExportJobTests(unittest.TestCase):
    def setUp(self):
        self.trajectory = [Keyframe.start(), Keyframe('b', 0.3, 2, 70, 30, 'ease-in-out')]

    def test_frames_written_in_time_order(self):
        sink = MemoryFrameSink()
        job = ExportJob(make_source(), self.trajectory, sink, style=STYLE, show_progress=False)
        result = job.run()

        self.assertEqual(result.status, 'completed')
        self.assertTrue(result.ok)
        self.assertEqual(result.frames_written, 5)
        self.assertTrue(sink.finalized)
        self.assertEqual(sink.times, sorted(sink.times))
        self.assertEqual(len(set(sink.times)), 5)
        self.assertEqual(sink.frames[0].shape, (36, 64, 3))

    def test_custom_canvas_size_and_fps(self):
        sink = MemoryFrameSink()
        job = ExportJob(make_source(), self.trajectory, sink, dest_size=(128, 72), fps=20,
                        style=STYLE, show_progress=False)
        result = job.run()
        self.assertEqual(result.frames_written, 10)
        self.assertEqual(sink.frames[0].shape, (72, 128, 3))

    def test_export_is_a_pure_function_of_time(self):
        events = [InputEvent(EventType.MOVE, 0.0, 20, 20), InputEvent(EventType.DOWN, 0.2, 60, 60)]
        first, second = MemoryFrameSink(), MemoryFrameSink()
        ExportJob(make_source(), self.trajectory, first, events=events, style=STYLE, show_progress=False).run()
        ExportJob(make_source(), self.trajectory, second, events=events, style=STYLE, show_progress=False).run()
        for a, b in zip(first.frames, second.frames):
            np.testing.assert_array_equal(a, b)

    def test_stop_finalizes_early(self):
        sink = StoppingSink(stop_after=2)
        job = ExportJob(make_source(), self.trajectory, sink, style=STYLE, show_progress=False)
        sink.job = job
        result = job.run()

        self.assertEqual(result.status, 'stopped')
        self.assertEqual(result.frames_written, 2)
        self.assertTrue(sink.finalized)

    def test_render_failure_aborts_export(self):
        sink = MemoryFrameSink()
        job = ExportJob(make_source(fail_at=3), self.trajectory, sink, style=STYLE, show_progress=False)
        result = job.run()

        self.assertEqual(result.status, 'failed')
        self.assertFalse(result.ok)
        self.assertEqual(result.frames_written, 3)
        self.assertTrue(sink.aborted)
        self.assertFalse(sink.finalized)
        self.assertIsNotNone(result.error)

    def test_sink_rejects_out_of_order_frames(self):
        sink = MemoryFrameSink()
        frame = np.zeros((2, 2, 3), dtype=np.uint8)
        sink.write(frame, 0.1)
        with self.assertRaises(ValueError):
            sink.write(frame, 0.1)
        with self.assertRaises(ValueError):
            sink.write(frame, 0.05)


    def test_out_of_bounds_crop_under_reject_fails_export(self):
        style = CompositorStyle(background=((0, 0, 0),), shadow_opacity=0.0, crop_policy=CropPolicy.REJECT)
        sink = MemoryFrameSink()
        job = ExportJob(make_source(), [Keyframe.start(zoom=2, x=100, y=100)], sink,
                        style=style, show_progress=False)
        result = job.run()

        self.assertEqual(result.status, 'failed')
        self.assertEqual(result.frames_written, 0)
        self.assertTrue(sink.aborted)
        self.assertFalse(sink.finalized)

    def test_unexpected_sink_error_aborts_and_propagates(self):
        sink = FailingSink()
        job = ExportJob(make_source(), self.trajectory, sink, style=STYLE, show_progress=False)
        with self.assertRaises(OSError):
            job.run()
        self.assertTrue(sink.aborted)
        self.assertFalse(sink.finalized)

    def test_partial_last_frame_is_exported(self):
        frames = [solid_frame(64, 36, (i * 20, 0, 0)) for i in range(11)]
        source = ArraySource(frames, fps=20.0)
        sink = MemoryFrameSink()
        job = ExportJob(source, self.trajectory, sink, fps=10, style=STYLE, show_progress=False)
        job.run()
        self.assertEqual([round(t, 6) for t in sink.times], [0.0, 0.1, 0.2, 0.3, 0.4, 0.5])


if __name__ == "__main__":
    unittest.main()
