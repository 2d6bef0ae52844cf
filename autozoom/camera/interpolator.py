#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Interpolator: turns a sorted keyframe sequence into a pose at any time.
"""

from bisect import bisect_right
from typing import Optional, Sequence

from autozoom.camera.easing import EasingStyle, resolve_easing
from autozoom.models.keyframe import Keyframe
from autozoom.models.pose import Pose


def lerp(a: float, b: float, f: float) -> float:
    return a + (b - a) * f


def segment_progress(k1: Keyframe, k2: Keyframe, t: float) -> float:
    """Linear progress of ``t`` through the segment k1 -> k2."""
    span = k2.time - k1.time
    if span <= 0:
        return 1.0
    return (t - k1.time) / span


def sample(trajectory: Sequence[Keyframe],
           t: float,
           style: EasingStyle = EasingStyle.CUBIC,
           default_easing: Optional[str] = None) -> Pose:
    """
    Sample the camera pose at time ``t``.

    Before the first keyframe the first pose is held, at or after the last
    keyframe the last pose is held. In between, the easing named on the
    segment's closing keyframe (or ``default_easing``) shapes the progress
    and zoom, x and y are interpolated independently.

    Args:
        trajectory: Keyframes sorted ascending by time (not re-checked)
        t: Time in seconds
        style: Which ease-in-out curve to use
        default_easing: Easing name for keyframes that carry none

    Returns:
        Pose at time t
    """
    if not trajectory:
        raise ValueError("Cannot sample an empty trajectory")

    next_index = bisect_right([k.time for k in trajectory], t)
    if next_index == 0:
        return trajectory[0].pose
    if next_index == len(trajectory):
        return trajectory[-1].pose

    k1 = trajectory[next_index - 1]
    k2 = trajectory[next_index]
    ease = resolve_easing(k2.easing or default_easing, style)
    eased = ease(segment_progress(k1, k2, t))

    return Pose(
        zoom=lerp(k1.zoom, k2.zoom, eased),
        x=lerp(k1.x, k2.x, eased),
        y=lerp(k1.y, k2.y, eased)
    )
