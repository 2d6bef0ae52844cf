#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
ZoomRegion model class for representing a "stay zoomed on this spot" span.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict

from autozoom.models.keyframe import validate_pose


@dataclass(frozen=True)
class ZoomRegion:
    """Stay zoomed on an anchor point from ``start`` to ``end`` (seconds).

    Regions are never interpolated directly; they are compiled into
    keyframes by ``autozoom.camera.trajectory``.
    """
    id: str
    start: float
    end: float
    zoom: float = 2.0
    anchor_x: float = 50.0
    anchor_y: float = 50.0

    def __post_init__(self):
        if self.start < 0:
            raise ValueError(f"Region start must be >= 0, got {self.start}")
        if self.start >= self.end:
            raise ValueError(f"Invalid region: start ({self.start}) must be less than end ({self.end})")
        validate_pose(self.zoom, self.anchor_x, self.anchor_y)

    @property
    def duration(self) -> float:
        return self.end - self.start

    def resized(self, start: float, end: float) -> "ZoomRegion":
        return replace(self, start=start, end=end)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'start': self.start,
            'end': self.end,
            'zoom': self.zoom,
            'anchor_x': self.anchor_x,
            'anchor_y': self.anchor_y
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ZoomRegion":
        return ZoomRegion(
            id=str(d['id']),
            start=float(d['start']),
            end=float(d['end']),
            zoom=float(d.get('zoom', 2.0)),
            anchor_x=float(d.get('anchor_x', 50.0)),
            anchor_y=float(d.get('anchor_y', 50.0))
        )

    def __str__(self):
        return (f"Region {self.id}: {self.start:.2f}s - {self.end:.2f}s ({self.duration:.2f}s) | "
                f"{self.zoom:.2f}x at ({self.anchor_x:.1f}%, {self.anchor_y:.1f}%)")
