import os
import unittest
from unittest.mock import patch

from autozoom.camera.easing import EasingStyle
from autozoom.config import AutoZoomConfig, parse_background
from autozoom.video.compositor import CropPolicy


def env(**values):
    return patch.dict(os.environ, values, clear=True)


@patch('autozoom.config.load_dotenv')
class ConfigFromEnvTests(unittest.TestCase):
    def test_defaults(self, _):
        with env():
            config = AutoZoomConfig.from_env()
        self.assertEqual(config.focus_zoom, 2.0)
        self.assertEqual(config.region_duration, 3.0)
        self.assertIsNone(config.fps)
        self.assertEqual(config.crop_policy, CropPolicy.LETTERBOX)
        self.assertEqual(config.easing_style, EasingStyle.CUBIC)
        self.assertEqual(config.export_easing_style, EasingStyle.CUBIC)

    def test_overrides(self, _):
        with env(AUTOZOOM_FOCUS_ZOOM='2.4', AUTOZOOM_FPS='24', AUTOZOOM_CROP_POLICY='Clamp',
                 AUTOZOOM_BACKGROUND='#000000,#ffffff', AUTOZOOM_FRAME_SCALE='0.9'):
            config = AutoZoomConfig.from_env()
        self.assertEqual(config.focus_zoom, 2.4)
        self.assertEqual(config.fps, 24.0)
        self.assertEqual(config.crop_policy, CropPolicy.CLAMP)
        self.assertEqual(config.background, ((0, 0, 0), (255, 255, 255)))
        self.assertEqual(config.compositor_style().frame_scale, 0.9)

    def test_export_easing_follows_preview_easing(self, _):
        with env(AUTOZOOM_EASING_STYLE='quad'):
            config = AutoZoomConfig.from_env()
        self.assertEqual(config.export_easing_style, EasingStyle.QUAD)

        with env(AUTOZOOM_EASING_STYLE='quad', AUTOZOOM_EXPORT_EASING_STYLE='cubic'):
            config = AutoZoomConfig.from_env()
        self.assertEqual(config.easing_style, EasingStyle.QUAD)
        self.assertEqual(config.export_easing_style, EasingStyle.CUBIC)

    def test_invalid_values(self, _):
        with env(AUTOZOOM_FOCUS_ZOOM='lots'):
            with self.assertRaises(ValueError):
                AutoZoomConfig.from_env()
        with env(AUTOZOOM_CROP_POLICY='stretch'):
            with self.assertRaises(ValueError):
                AutoZoomConfig.from_env()


class ParseBackgroundTests(unittest.TestCase):
    def test_solid_and_gradient(self):
        self.assertEqual(parse_background('#102030'), ((16, 32, 48),))
        self.assertEqual(parse_background('102030, #ffffff'), ((16, 32, 48), (255, 255, 255)))

    def test_rejects_bad_input(self):
        with self.assertRaises(ValueError):
            parse_background('#fff')
        with self.assertRaises(ValueError):
            parse_background('#000000,#111111,#222222')
        with self.assertRaises(ValueError):
            parse_background('')


if __name__ == "__main__":
    unittest.main()
