#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Event-driven auto-zoom: one zoom region per pointer-down event.
"""

import logging
from typing import List, Optional, Sequence

from autozoom.models.event import EventType, InputEvent
from autozoom.models.region import ZoomRegion

logger = logging.getLogger(__name__)

REGION_DURATION = 3.0
FOCUS_ZOOM = 2.0
MIN_FOCUS_ZOOM = 2.0
MAX_FOCUS_ZOOM = 2.5


def regions_from_events(events: Sequence[InputEvent],
                        region_duration: float = REGION_DURATION,
                        focus_zoom: float = FOCUS_ZOOM,
                        duration: Optional[float] = None) -> List[ZoomRegion]:
    """
    Create a zoom region anchored on every click.

    Overlapping regions are left as they are; compilation layers their
    keyframes by time.

    Args:
        events: Recorded events in time order
        region_duration: Seconds each region stays zoomed
        focus_zoom: Zoom factor, clamped to [2.0, 2.5]
        duration: Recording length; clicks at or past it are ignored

    Returns:
        List of ZoomRegion objects in click order
    """
    zoom = min(MAX_FOCUS_ZOOM, max(MIN_FOCUS_ZOOM, focus_zoom))
    clicks = [e for e in events if e.type == EventType.DOWN]
    if duration is not None:
        clicks = [e for e in clicks if e.time < duration]

    regions = [
        ZoomRegion(
            id=f"click-{index}",
            start=click.time,
            end=click.time + region_duration,
            zoom=zoom,
            anchor_x=click.x,
            anchor_y=click.y
        )
        for index, click in enumerate(clicks)
    ]
    logger.info(f"Generated {len(regions)} zoom regions from {len(events)} events")
    return regions
