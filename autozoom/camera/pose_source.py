#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Pose sources: where the compositor gets the camera and cursor for a frame.

``DeterministicSample`` is a pure function of time and drives export.
``SmoothedLive`` damps toward the same samples frame by frame and drives
the live preview, so its output depends on the frames it has already seen.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from autozoom.camera.cursor import CursorSample, CursorTrack
from autozoom.camera.easing import EasingStyle
from autozoom.camera.interpolator import sample
from autozoom.camera.smoothing import smooth_camera, smooth_cursor
from autozoom.models.event import InputEvent
from autozoom.models.keyframe import Keyframe
from autozoom.models.pose import CameraState, CursorState, Pose


@dataclass(frozen=True)
class FramePose:
    """Everything the compositor needs to place camera and cursor."""
    camera: Pose
    cursor: CursorSample


class PoseSource:
    """Base class for camera/cursor providers."""

    def __init__(self, trajectory: Sequence[Keyframe],
                 events: Optional[Sequence[InputEvent]] = None,
                 style: EasingStyle = EasingStyle.CUBIC):
        self.trajectory = list(trajectory)
        self.events = list(events or [])
        self.cursor_track = CursorTrack(self.events)
        self.style = style

    def target(self, t: float) -> Pose:
        return sample(self.trajectory, t, self.style)

    def pose_at(self, t: float) -> FramePose:
        raise NotImplementedError

    def reset(self, t: float = 0.0):
        """Forget any history; the next pose is taken at ``t`` exactly."""

    def update_trajectory(self, trajectory: Sequence[Keyframe]):
        self.trajectory = list(trajectory)


class DeterministicSample(PoseSource):
    """Exact interpolated pose and raw cursor for any time."""

    def pose_at(self, t: float) -> FramePose:
        return FramePose(camera=self.target(t), cursor=self.cursor_track.at(t))


class SmoothedLive(PoseSource):
    """Damped camera and cursor; one call to ``pose_at`` is one preview frame."""

    def __init__(self, trajectory: Sequence[Keyframe],
                 events: Optional[Sequence[InputEvent]] = None,
                 style: EasingStyle = EasingStyle.CUBIC):
        super().__init__(trajectory, events, style)
        self.camera = CameraState()
        self.cursor = CursorState()

    def pose_at(self, t: float) -> FramePose:
        raw = self.cursor_track.at(t)
        self.cursor = smooth_cursor(self.cursor, (raw.x, raw.y))
        self.camera = smooth_camera(self.camera, self.target(t))
        return FramePose(
            camera=self.camera.pose,
            cursor=CursorSample(self.cursor.x, self.cursor.y, raw.clicking)
        )

    def reset(self, t: float = 0.0):
        # A scrub is a jump, not a transition
        self.camera = CameraState.at(self.target(t))
        raw = self.cursor_track.at(t)
        self.cursor = CursorState(raw.x, raw.y)
