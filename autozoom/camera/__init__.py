#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Camera module: keyframe compilation, interpolation and live smoothing.
"""

from autozoom.camera.easing import EasingStyle, linear, ease_in_out_cubic, ease_in_out_quad, resolve_easing
from autozoom.camera.trajectory import compile_trajectory, compile_region, debounce
from autozoom.camera.interpolator import sample
from autozoom.camera.smoothing import smooth_camera, smooth_cursor
from autozoom.camera.cursor import CursorSample, CursorTrack, cursor_at
from autozoom.camera.pose_source import PoseSource, DeterministicSample, SmoothedLive, FramePose

__all__ = [
    'EasingStyle',
    'linear',
    'ease_in_out_cubic',
    'ease_in_out_quad',
    'resolve_easing',
    'compile_trajectory',
    'compile_region',
    'debounce',
    'sample',
    'smooth_camera',
    'smooth_cursor',
    'CursorSample',
    'CursorTrack',
    'cursor_at',
    'PoseSource',
    'DeterministicSample',
    'SmoothedLive',
    'FramePose'
]
