import unittest

from autozoom.models.keyframe import Keyframe
from autozoom.timeline import Timeline
from autozoom.video.compositor import CompositorStyle, CropPolicy
from autozoom.video.preview import PreviewSession
from helpers import ArraySource, solid_frame

STYLE = CompositorStyle(background=((0, 0, 0),), shadow_opacity=0.0)


class PreviewSessionTests(unittest.TestCase):
    def setUp(self):
        frames = [solid_frame(64, 36, (50, 50, 50)) for _ in range(40)]
        self.source = ArraySource(frames, fps=10.0)
        self.timeline = Timeline([Keyframe.start(), Keyframe('b', 2, 2, 80, 20, 'ease-in-out')])
        self.session = PreviewSession(self.source, self.timeline, STYLE)

    def test_scrub_jumps_without_damping(self):
        frame = self.session.scrub(1.0)
        camera = self.session.poses.camera
        self.assertEqual(frame.shape, (36, 64, 3))
        self.assertFalse(self.session.playing)
        self.assertAlmostEqual(camera.zoom, 1.5)
        self.assertAlmostEqual(camera.x, 65)

    def test_playing_steps_are_damped(self):
        self.session.scrub(1.0)
        self.session.play()
        self.session.advance(1.0)
        self.session.step()
        camera = self.session.poses.camera
        self.assertAlmostEqual(self.session.position, 2.0)
        self.assertAlmostEqual(camera.x, 65 + 15 * 0.05)
        self.assertAlmostEqual(camera.zoom, 1.5 + 0.5 * 0.08)

    def test_paused_step_does_not_advance_damping(self):
        self.session.scrub(1.0)
        before = self.session.poses.camera
        self.session.advance(1.0)
        self.session.step()
        self.assertEqual(self.session.poses.camera, before)
        self.assertAlmostEqual(self.session.position, 1.0)

    def test_edit_while_paused_renders_immediately(self):
        self.session.scrub(3.0)
        self.assertAlmostEqual(self.session.poses.camera.zoom, 2)
        self.timeline.add_keyframe(3.0, 3.0, 10, 90)
        camera = self.session.poses.camera
        self.assertEqual((camera.zoom, camera.x, camera.y), (3.0, 10, 90))
        self.assertEqual(len(self.session.poses.trajectory), 3)

    def test_playback_stops_at_end(self):
        self.session.scrub(3.9)
        self.session.play()
        self.session.advance(1.0)
        self.assertFalse(self.session.playing)
        self.assertAlmostEqual(self.session.position, self.source.duration)

    def test_play_from_end_restarts(self):
        self.session.scrub(10.0)
        self.session.play()
        self.assertEqual(self.session.position, 0.0)
        self.assertTrue(self.session.playing)


    def test_close_stops_listening_to_edits(self):
        self.session.scrub(1.0)
        self.session.close()
        seeks = len(self.source.seeks)
        self.timeline.add_keyframe(3.0, 3.0, 10, 90)
        self.assertEqual(len(self.source.seeks), seeks)
        self.assertEqual(len(self.session.poses.trajectory), 2)

    def test_rejected_crop_skips_frame(self):
        style = CompositorStyle(background=((0, 0, 0),), shadow_opacity=0.0, crop_policy=CropPolicy.REJECT)
        timeline = Timeline([Keyframe.start(zoom=2, x=100, y=100)])
        session = PreviewSession(self.source, timeline, style)
        self.assertIsNone(session.scrub(1.0))
        self.assertIsNone(session.last_frame)
        session.play()
        session.advance(0.5)
        self.assertIsNone(session.step())


if __name__ == "__main__":
    unittest.main()
