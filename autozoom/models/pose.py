#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Pose and smoothing-state models for the virtual camera and cursor.
"""

from dataclasses import dataclass

NEUTRAL_ZOOM = 1.0
CENTER = 50.0


@dataclass(frozen=True)
class Pose:
    """Camera state at an instant: zoom factor and pan center in percent."""
    zoom: float = NEUTRAL_ZOOM
    x: float = CENTER
    y: float = CENTER

    def __iter__(self):
        return iter((self.zoom, self.x, self.y))


NEUTRAL_POSE = Pose()


@dataclass(frozen=True)
class CameraState:
    """Damped camera position owned by a live preview session."""
    x: float = CENTER
    y: float = CENTER
    zoom: float = NEUTRAL_ZOOM

    @property
    def pose(self) -> Pose:
        return Pose(self.zoom, self.x, self.y)

    @staticmethod
    def at(pose: Pose) -> "CameraState":
        return CameraState(x=pose.x, y=pose.y, zoom=pose.zoom)


@dataclass(frozen=True)
class CursorState:
    """Damped cursor position owned by a live preview session."""
    x: float = CENTER
    y: float = CENTER
