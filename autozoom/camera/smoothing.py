#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Exponential damping for the live preview camera and cursor.

State is passed in and returned; nothing here is kept between calls.
Export never goes through this module.
"""

from typing import Tuple

from autozoom.camera.interpolator import lerp
from autozoom.models.pose import CameraState, CursorState, Pose

CAMERA_DAMPING_POS = 0.05
CAMERA_DAMPING_ZOOM = 0.08
CURSOR_DAMPING = 0.2

SNAP_POSITION = 0.01
SNAP_ZOOM = 0.001


def _damp(current: float, target: float, factor: float, snap: float) -> float:
    value = lerp(current, target, factor)
    if abs(target - value) < snap:
        return target
    return value


def smooth_camera(camera: CameraState, target: Pose) -> CameraState:
    """One damping step of the camera toward the interpolated target pose."""
    return CameraState(
        x=_damp(camera.x, target.x, CAMERA_DAMPING_POS, SNAP_POSITION),
        y=_damp(camera.y, target.y, CAMERA_DAMPING_POS, SNAP_POSITION),
        zoom=_damp(camera.zoom, target.zoom, CAMERA_DAMPING_ZOOM, SNAP_ZOOM)
    )


def smooth_cursor(cursor: CursorState, raw: Tuple[float, float]) -> CursorState:
    """One damping step of the cursor toward its recorded position."""
    raw_x, raw_y = raw
    return CursorState(
        x=_damp(cursor.x, raw_x, CURSOR_DAMPING, SNAP_POSITION),
        y=_damp(cursor.y, raw_y, CURSOR_DAMPING, SNAP_POSITION)
    )
