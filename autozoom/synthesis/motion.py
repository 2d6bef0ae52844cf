#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Motion-fallback auto-zoom for recordings without an event stream.

Frames are sampled at a fixed interval, consecutive samples are compared
on a downsampled grid and the changed area is classified as cursor motion,
a stationary dwell, or a scene change/scroll. This is a heuristic; it has
no guaranteed recall or precision.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

import cv2
import numpy as np
from tqdm import tqdm

from autozoom.models.keyframe import EASING_EASE_IN_OUT, EASING_LINEAR, Keyframe
from autozoom.models.pose import CENTER, NEUTRAL_ZOOM

logger = logging.getLogger(__name__)

ANALYSIS_SIZE = (320, 180)
PIXEL_STRIDE = 4
PIXEL_THRESHOLD = 50
MIN_CHANGED_PIXELS = 50
LARGE_AREA = 0.15
STILL_SAMPLES = 2

SAMPLE_INTERVAL = 1.0
FOLLOW_ZOOM = 1.3
DWELL_ZOOM = 2.0


class SynthesisCancelled(Exception):
    """Raised when motion analysis is cancelled before it finishes."""


class MotionKind(str, Enum):
    CURSOR = 'cursor'
    STILL = 'still'
    TRANSITION = 'transition'


@dataclass(frozen=True)
class MotionSample:
    """Difference between two consecutive samples, in percent of the frame."""
    changed: int
    area: float = 0.0
    centroid: Optional[Tuple[float, float]] = None
    bbox: Optional[Tuple[float, float, float, float]] = None


@contextmanager
def preserved_position(source):
    """Restore the source's playback position on exit, success or not."""
    original = source.position
    try:
        yield source
    finally:
        source.seek(original)


def downsample(frame: np.ndarray) -> np.ndarray:
    small = cv2.resize(frame[:, :, :3], ANALYSIS_SIZE, interpolation=cv2.INTER_AREA)
    return small.astype(np.int16)


def difference_mask(previous: np.ndarray, current: np.ndarray) -> np.ndarray:
    """Boolean grid of changed pixels, every PIXEL_STRIDE-th column sampled.
    Both inputs must be downsampled frames of the same shape."""
    prev = previous[:, ::PIXEL_STRIDE]
    curr = current[:, ::PIXEL_STRIDE]
    return np.abs(curr - prev).sum(axis=2) > PIXEL_THRESHOLD


def measure_difference(previous: np.ndarray, current: np.ndarray) -> MotionSample:
    mask = difference_mask(previous, current)
    ys, xs = np.nonzero(mask)
    if len(xs) == 0:
        return MotionSample(changed=0)

    height, width = previous.shape[:2]
    xs = xs * PIXEL_STRIDE
    x0, x1 = int(xs.min()), int(xs.max()) + PIXEL_STRIDE
    y0, y1 = int(ys.min()), int(ys.max()) + 1
    area = (x1 - x0) * (y1 - y0) / float(width * height)
    centroid = (float(xs.mean()) / width * 100.0, float(ys.mean()) / height * 100.0)
    bbox = (x0 / width * 100.0, y0 / height * 100.0, min(x1, width) / width * 100.0, y1 / height * 100.0)
    return MotionSample(changed=int(len(xs)), area=area, centroid=centroid, bbox=bbox)


def classify_difference(sample: MotionSample) -> MotionKind:
    if sample.changed < MIN_CHANGED_PIXELS:
        return MotionKind.STILL
    if sample.area >= LARGE_AREA:
        return MotionKind.TRANSITION
    return MotionKind.CURSOR


class MotionTracker:
    """Turns a stream of classified samples into keyframes."""

    def __init__(self, follow_zoom: float = FOLLOW_ZOOM, dwell_zoom: float = DWELL_ZOOM):
        self.follow_zoom = follow_zoom
        self.dwell_zoom = dwell_zoom
        self.keyframes: List[Keyframe] = []
        self.zoom = NEUTRAL_ZOOM
        self.centroid = None
        self.still_count = 0

    def _emit(self, kind: str, t: float, zoom: float, x: float, y: float, easing: str):
        self.keyframes.append(Keyframe(
            id=f"motion-{kind}-{len(self.keyframes)}",
            time=t, zoom=zoom, x=x, y=y, easing=easing
        ))
        self.zoom = zoom

    def update(self, t: float, sample: MotionSample) -> MotionKind:
        kind = classify_difference(sample)
        if kind == MotionKind.CURSOR:
            self.still_count = 0
            self.centroid = sample.centroid
            self._emit('follow', t, self.follow_zoom, *sample.centroid, EASING_LINEAR)
        elif kind == MotionKind.STILL:
            self.still_count += 1
            if (self.still_count >= STILL_SAMPLES and self.centroid is not None
                    and self.zoom < self.dwell_zoom):
                self._emit('dwell', t, self.dwell_zoom, *self.centroid, EASING_EASE_IN_OUT)
        else:
            self.still_count = 0
            if self.zoom > NEUTRAL_ZOOM:
                self._emit('reset', t, NEUTRAL_ZOOM, CENTER, CENTER, EASING_EASE_IN_OUT)
        return kind


def sample_times(duration: float, interval: float) -> List[float]:
    if interval <= 0:
        raise ValueError(f"Sample interval must be positive, got {interval}")
    count = int(np.ceil(duration / interval - 1e-9))
    return [i * interval for i in range(max(0, count))]


def analyze_motion(source,
                   interval: float = SAMPLE_INTERVAL,
                   follow_zoom: float = FOLLOW_ZOOM,
                   dwell_zoom: float = DWELL_ZOOM,
                   cancel: Optional[Callable[[], bool]] = None,
                   show_progress: bool = True) -> List[Keyframe]:
    """
    Derive keyframes from frame differences.

    The source is seeked to each sample time in turn; its original
    position is restored afterwards, including on cancellation or error.

    Args:
        source: Object with ``position``, ``duration``, ``seek(t)`` and ``read()``
        interval: Seconds between samples
        follow_zoom: Zoom for cursor-follow keyframes
        dwell_zoom: Zoom for dwell keyframes
        cancel: Polled before each sample; returning True cancels
        show_progress: Show a tqdm progress bar

    Returns:
        Keyframes in time order (without a 'start' keyframe)
    """
    tracker = MotionTracker(follow_zoom, dwell_zoom)
    times = sample_times(source.duration, interval)
    logger.info(f"Analyzing motion at {len(times)} sample points ({interval:.2f}s interval)")

    with preserved_position(source):
        previous = None
        for t in tqdm(times, desc="Analyzing motion", disable=not show_progress):
            if cancel is not None and cancel():
                logger.info(f"Motion analysis cancelled at {t:.2f}s")
                raise SynthesisCancelled(f"Cancelled at {t:.2f}s")
            source.seek(t)
            current = downsample(source.read())
            if previous is not None:
                kind = tracker.update(t, measure_difference(previous, current))
                logger.debug(f"Motion at {t:.2f}s: {kind.value}")
            previous = current

    logger.info(f"Motion analysis produced {len(tracker.keyframes)} keyframes")
    return tracker.keyframes
