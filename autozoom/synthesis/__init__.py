#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Auto-zoom synthesis: picks the event-driven or motion-fallback strategy
depending on what the recording provides.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from autozoom.models.event import InputEvent
from autozoom.models.keyframe import Keyframe
from autozoom.models.region import ZoomRegion
from autozoom.synthesis.events import regions_from_events, REGION_DURATION, FOCUS_ZOOM
from autozoom.synthesis.motion import analyze_motion, SynthesisCancelled, SAMPLE_INTERVAL

logger = logging.getLogger(__name__)

STRATEGY_EVENTS = 'events'
STRATEGY_MOTION = 'motion'
STRATEGY_NONE = 'none'


@dataclass(frozen=True)
class SynthesisResult:
    """Replacement keyframe and region sets produced by one synthesis run.

    ``keyframes`` never contains the 'start' keyframe; the timeline
    supplies it when the result is applied."""
    strategy: str
    keyframes: List[Keyframe] = field(default_factory=list)
    regions: List[ZoomRegion] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.keyframes and not self.regions


def synthesize(events: Optional[Sequence[InputEvent]] = None,
               source=None,
               focus_zoom: float = FOCUS_ZOOM,
               region_duration: float = REGION_DURATION,
               sample_interval: float = SAMPLE_INTERVAL,
               cancel=None,
               show_progress: bool = True) -> SynthesisResult:
    """
    Run auto-zoom synthesis.

    With a non-empty event stream, one region is made per click. Without
    one, the source video is analyzed for motion instead. If neither
    yields anything the result is empty and the camera stays neutral.

    Args:
        events: Recorded input events
        source: Seekable source video for the motion fallback
        focus_zoom: Zoom factor for click regions
        region_duration: Seconds each click region lasts
        sample_interval: Seconds between motion samples
        cancel: Cancellation hook for motion analysis
        show_progress: Show progress bars

    Returns:
        SynthesisResult
    """
    if events:
        duration = source.duration if source is not None else None
        regions = regions_from_events(events, region_duration, focus_zoom, duration)
        return SynthesisResult(STRATEGY_EVENTS, regions=regions)

    if source is None:
        logger.warning("No events and no source video; keeping the neutral camera")
        return SynthesisResult(STRATEGY_NONE)

    logger.warning("No input events available, falling back to motion analysis")
    keyframes = analyze_motion(source, sample_interval, cancel=cancel, show_progress=show_progress)
    if not keyframes:
        logger.warning("Motion analysis found no usable movement; keeping the neutral camera")
    return SynthesisResult(STRATEGY_MOTION, keyframes=keyframes)


__all__ = [
    'SynthesisResult',
    'SynthesisCancelled',
    'synthesize',
    'regions_from_events',
    'analyze_motion',
    'STRATEGY_EVENTS',
    'STRATEGY_MOTION',
    'STRATEGY_NONE'
]
