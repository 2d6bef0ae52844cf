#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Trajectory compilation: merges manual keyframes with keyframes derived from
zoom regions into the sorted, debounced sequence the interpolator samples.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from autozoom.models.event import EventType, InputEvent
from autozoom.models.keyframe import EASING_EASE_IN_OUT, EASING_LINEAR, Keyframe
from autozoom.models.pose import CENTER, NEUTRAL_ZOOM
from autozoom.models.region import ZoomRegion

logger = logging.getLogger(__name__)

# Neutral pose is held this long before a region's zoom-in starts
TRANSITION = 0.5
# Zoom-out transition after a region ends
ZOOM_OUT_DURATION = 0.8
# Minimum spacing between cursor-follow samples inside a region
FOLLOW_SPACING = 0.15
# Keyframes closer than this to the previous survivor are dropped
DEBOUNCE = 0.05


def compile_region(region: ZoomRegion, events: Optional[Sequence[InputEvent]] = None) -> List[Keyframe]:
    """
    Expand one zoom region into its keyframes.

    Emits, in time order: a neutral anchor before the zoom-in (only when
    there is room for it), the zoom-in at ``start``, cursor-follow keyframes
    from pointer moves inside the region, a hold at ``end`` and the zoom-out
    ``ZOOM_OUT_DURATION`` later.
    """
    keyframes = []

    if region.start > TRANSITION:
        keyframes.append(Keyframe(
            id=f"{region.id}-anchor",
            time=region.start - TRANSITION,
            zoom=NEUTRAL_ZOOM, x=CENTER, y=CENTER,
            easing=EASING_LINEAR
        ))

    keyframes.append(Keyframe(
        id=f"{region.id}-start",
        time=region.start,
        zoom=region.zoom, x=region.anchor_x, y=region.anchor_y,
        easing=EASING_EASE_IN_OUT
    ))

    last_x, last_y = region.anchor_x, region.anchor_y
    last_sample_time = None
    for event in events or ():
        if event.type != EventType.MOVE or not region.start < event.time < region.end:
            continue
        if last_sample_time is not None and event.time - last_sample_time < FOLLOW_SPACING:
            continue
        keyframes.append(Keyframe(
            id=f"{region.id}-follow-{len(keyframes)}",
            time=event.time,
            zoom=region.zoom, x=event.x, y=event.y,
            easing=EASING_LINEAR
        ))
        last_sample_time = event.time
        last_x, last_y = event.x, event.y

    keyframes.append(Keyframe(
        id=f"{region.id}-hold",
        time=region.end,
        zoom=region.zoom, x=last_x, y=last_y,
        easing=EASING_LINEAR
    ))

    keyframes.append(Keyframe(
        id=f"{region.id}-end",
        time=region.end + ZOOM_OUT_DURATION,
        zoom=NEUTRAL_ZOOM, x=CENTER, y=CENTER,
        easing=EASING_EASE_IN_OUT
    ))

    return keyframes


def debounce(keyframes: Iterable[Keyframe], min_gap: float = DEBOUNCE) -> List[Keyframe]:
    """Drop every keyframe within ``min_gap`` of the previous surviving one.
    Input must already be sorted by time."""
    result = []
    for keyframe in keyframes:
        if result and keyframe.time - result[-1].time <= min_gap:
            continue
        result.append(keyframe)
    return result


def compile_trajectory(manual_keyframes: Sequence[Keyframe],
                       regions: Sequence[ZoomRegion] = (),
                       events: Optional[Sequence[InputEvent]] = None) -> List[Keyframe]:
    """
    Build the effective trajectory.

    Args:
        manual_keyframes: User keyframes, including the 'start' keyframe
        regions: Zoom regions to compile; overlaps are not resolved
        events: Recorded events, used for cursor-follow inside regions

    Returns:
        Time-sorted, debounced list of keyframes
    """
    # Manual keyframes win ties so 'start' always survives at t=0
    tagged = [(k.time, 0, i, k) for i, k in enumerate(manual_keyframes)]
    derived = [k for region in regions for k in compile_region(region, events)]
    tagged.extend((k.time, 1, i, k) for i, k in enumerate(derived))
    tagged.sort(key=lambda item: item[:3])

    trajectory = debounce(item[3] for item in tagged)
    logger.debug(f"Compiled {len(manual_keyframes)} manual keyframes and {len(regions)} regions "
                 f"into {len(trajectory)} keyframes")
    return trajectory
