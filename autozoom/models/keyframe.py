#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Keyframe model class for representing a camera pose pinned to an instant.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from autozoom.models.pose import Pose

START_KEYFRAME_ID = 'start'

EASING_LINEAR = 'linear'
EASING_EASE_IN_OUT = 'ease-in-out'
EASING_NAMES = (EASING_LINEAR, EASING_EASE_IN_OUT)


def validate_pose(zoom: float, x: float, y: float):
    """Raise ValueError if a (zoom, x%, y%) triple is out of range."""
    if zoom < 1:
        raise ValueError(f"zoom must be >= 1, got {zoom}")
    if not 0 <= x <= 100:
        raise ValueError(f"x must be a percentage in [0, 100], got {x}")
    if not 0 <= y <= 100:
        raise ValueError(f"y must be a percentage in [0, 100], got {y}")


@dataclass(frozen=True)
class Keyframe:
    """A fully specified camera pose at a point in time.

    ``x`` and ``y`` are percentages of the source frame; ``easing`` names the
    curve used for the segment that *ends* at this keyframe. ``None`` means
    the interpolator's default curve.
    """
    id: str
    time: float
    zoom: float = 1.0
    x: float = 50.0
    y: float = 50.0
    easing: Optional[str] = None

    def __post_init__(self):
        if self.time < 0:
            raise ValueError(f"Keyframe time must be >= 0, got {self.time}")
        validate_pose(self.zoom, self.x, self.y)
        if self.easing is not None and self.easing not in EASING_NAMES:
            raise ValueError(f"Unknown easing '{self.easing}'")

    @staticmethod
    def start(zoom: float = 1.0, x: float = 50.0, y: float = 50.0) -> "Keyframe":
        """The keyframe every timeline is anchored on."""
        return Keyframe(id=START_KEYFRAME_ID, time=0.0, zoom=zoom, x=x, y=y)

    @property
    def is_start(self) -> bool:
        return self.id == START_KEYFRAME_ID

    @property
    def pose(self) -> Pose:
        return Pose(self.zoom, self.x, self.y)

    def with_pose(self, zoom: float, x: float, y: float) -> "Keyframe":
        return replace(self, zoom=zoom, x=x, y=y)

    def to_dict(self) -> Dict[str, Any]:
        d = {'id': self.id, 'time': self.time, 'zoom': self.zoom, 'x': self.x, 'y': self.y}
        if self.easing:
            d['easing'] = self.easing
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Keyframe":
        return Keyframe(
            id=str(d['id']),
            time=float(d['time']),
            zoom=float(d.get('zoom', 1.0)),
            x=float(d.get('x', 50.0)),
            y=float(d.get('y', 50.0)),
            easing=d.get('easing')
        )

    def __str__(self):
        return f"Keyframe {self.id} @ {self.time:.2f}s: {self.zoom:.2f}x at ({self.x:.1f}%, {self.y:.1f}%)"
