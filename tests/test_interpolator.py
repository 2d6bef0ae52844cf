import random
import unittest

from autozoom.camera.easing import EasingStyle
from autozoom.camera.interpolator import sample, segment_progress
from autozoom.models.keyframe import Keyframe
from autozoom.models.pose import Pose


def kf(id, time, zoom, x, y, easing=None):
    return Keyframe(id=id, time=time, zoom=zoom, x=x, y=y, easing=easing)


class SampleTests(unittest.TestCase):
    def setUp(self):
        self.trajectory = [
            kf('start', 0, 1, 50, 50),
            kf('b', 2, 2, 80, 20, 'ease-in-out'),
        ]

    def test_midpoint_of_ease_in_out_segment(self):
        pose = sample(self.trajectory, 1.0)
        self.assertAlmostEqual(pose.zoom, 1.5)
        self.assertAlmostEqual(pose.x, 65)
        self.assertAlmostEqual(pose.y, 35)

    def test_holds_first_pose_before_timeline(self):
        trajectory = [kf('a', 1, 1.5, 20, 30), kf('b', 3, 2, 60, 60)]
        self.assertEqual(sample(trajectory, 0.5), Pose(1.5, 20, 30))
        self.assertEqual(sample(trajectory, 0.0), Pose(1.5, 20, 30))

    def test_holds_last_pose_at_and_after_end(self):
        self.assertEqual(sample(self.trajectory, 2.0), Pose(2, 80, 20))
        self.assertEqual(sample(self.trajectory, 100.0), Pose(2, 80, 20))

    def test_exact_keyframe_time_returns_its_pose(self):
        trajectory = self.trajectory + [kf('c', 4, 1, 50, 50)]
        self.assertEqual(sample(trajectory, 2.0), Pose(2, 80, 20))

    def test_linear_easing_on_closing_keyframe(self):
        trajectory = [kf('start', 0, 1, 0, 0), kf('b', 4, 3, 100, 100, 'linear')]
        pose = sample(trajectory, 1.0)
        self.assertAlmostEqual(pose.zoom, 1.5)
        self.assertAlmostEqual(pose.x, 25)

    def test_style_selects_ease_in_out_curve(self):
        cubic = sample(self.trajectory, 0.5, EasingStyle.CUBIC)
        quad = sample(self.trajectory, 0.5, EasingStyle.QUAD)
        # progress 0.25: cubic 0.0625, quad 0.125
        self.assertAlmostEqual(cubic.zoom, 1.0625)
        self.assertAlmostEqual(quad.zoom, 1.125)

    def test_default_easing_applies_to_unnamed_keyframes(self):
        trajectory = [kf('start', 0, 1, 50, 50), kf('b', 2, 2, 50, 50)]
        self.assertAlmostEqual(sample(trajectory, 0.5, default_easing='linear').zoom, 1.25)

    def test_degenerate_segment_does_not_divide_by_zero(self):
        self.assertEqual(segment_progress(kf('a', 1, 2, 10, 10), kf('b', 1, 3, 90, 90), 1.0), 1.0)
        trajectory = [kf('start', 0, 1, 50, 50), kf('a', 1, 2, 10, 10), kf('b', 1, 3, 90, 90)]
        pose = sample(trajectory, 1.0)
        self.assertEqual(pose, Pose(3, 90, 90))

    def test_empty_trajectory_rejected(self):
        with self.assertRaises(ValueError):
            sample([], 1.0)

    def test_no_overshoot_between_adjacent_keyframes(self):
        rng = random.Random(7)
        for style in (EasingStyle.CUBIC, EasingStyle.QUAD):
            for easing in ('linear', 'ease-in-out'):
                for _ in range(50):
                    t1 = rng.uniform(0, 10)
                    t2 = t1 + rng.uniform(0.1, 5)
                    k1 = kf('a', t1, rng.uniform(1, 4), rng.uniform(0, 100), rng.uniform(0, 100))
                    k2 = kf('b', t2, rng.uniform(1, 4), rng.uniform(0, 100), rng.uniform(0, 100), easing)
                    for i in range(21):
                        t = t1 + (t2 - t1) * i / 20
                        pose = sample([k1, k2], t, style)
                        for value, a, b in ((pose.zoom, k1.zoom, k2.zoom), (pose.x, k1.x, k2.x),
                                            (pose.y, k1.y, k2.y)):
                            self.assertGreaterEqual(value, min(a, b) - 1e-9)
                            self.assertLessEqual(value, max(a, b) + 1e-9)


if __name__ == "__main__":
    unittest.main()
