#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Configuration defaults, overridable from the environment (or a .env file).
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

from autozoom.camera.easing import EasingStyle
from autozoom.synthesis.events import FOCUS_ZOOM, REGION_DURATION
from autozoom.synthesis.motion import SAMPLE_INTERVAL
from autozoom.video.compositor import Color, CompositorStyle, CropPolicy, parse_color


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == '':
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got '{value}'") from None


def _env_choice(name: str, enum_type, default):
    value = os.getenv(name)
    if not value:
        return default
    try:
        return enum_type(value.lower())
    except ValueError:
        choices = ', '.join(e.value for e in enum_type)
        raise ValueError(f"{name} must be one of {choices}, got '{value}'") from None


def parse_background(value: str) -> Tuple[Color, ...]:
    """'#rrggbb' for a solid fill, '#rrggbb,#rrggbb' for a gradient."""
    colors = tuple(parse_color(part) for part in value.split(',') if part.strip())
    if len(colors) not in (1, 2):
        raise ValueError(f"Background must be one or two colors, got '{value}'")
    return colors


@dataclass
class AutoZoomConfig:
    focus_zoom: float = FOCUS_ZOOM
    region_duration: float = REGION_DURATION
    sample_interval: float = SAMPLE_INTERVAL
    fps: Optional[float] = None
    frame_scale: float = 0.8
    background: Tuple[Color, ...] = ((30, 27, 75), (124, 58, 237))
    crop_policy: CropPolicy = CropPolicy.LETTERBOX
    easing_style: EasingStyle = EasingStyle.CUBIC
    export_easing_style: EasingStyle = EasingStyle.CUBIC
    output_size: Optional[Tuple[int, int]] = field(default=None)

    @classmethod
    def from_env(cls) -> "AutoZoomConfig":
        """Read AUTOZOOM_* variables, loading a .env file first if present."""
        load_dotenv()
        defaults = cls()
        fps = _env_float('AUTOZOOM_FPS', 0.0)
        background = os.getenv('AUTOZOOM_BACKGROUND')
        easing_style = _env_choice('AUTOZOOM_EASING_STYLE', EasingStyle, defaults.easing_style)
        return cls(
            focus_zoom=_env_float('AUTOZOOM_FOCUS_ZOOM', defaults.focus_zoom),
            region_duration=_env_float('AUTOZOOM_REGION_DURATION', defaults.region_duration),
            sample_interval=_env_float('AUTOZOOM_SAMPLE_INTERVAL', defaults.sample_interval),
            fps=fps if fps > 0 else None,
            frame_scale=_env_float('AUTOZOOM_FRAME_SCALE', defaults.frame_scale),
            background=parse_background(background) if background else defaults.background,
            crop_policy=_env_choice('AUTOZOOM_CROP_POLICY', CropPolicy, defaults.crop_policy),
            easing_style=easing_style,
            export_easing_style=_env_choice('AUTOZOOM_EXPORT_EASING_STYLE', EasingStyle, easing_style)
        )

    def compositor_style(self) -> CompositorStyle:
        return CompositorStyle(
            background=self.background,
            frame_scale=self.frame_scale,
            crop_policy=self.crop_policy
        )
