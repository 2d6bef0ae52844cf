#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Raw cursor trajectory reconstructed from the recorded event stream.
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import Sequence

from autozoom.models.event import EventType, InputEvent
from autozoom.models.pose import CENTER

# A click stays visible this long on either side of its down event
CLICK_WINDOW = 0.3


@dataclass(frozen=True)
class CursorSample:
    x: float
    y: float
    clicking: bool = False


class CursorTrack:
    """Time-indexed view of an event stream; lookups are O(log n)."""

    def __init__(self, events: Sequence[InputEvent]):
        self.events = list(events)
        self.times = [e.time for e in self.events]
        self.click_times = sorted(e.time for e in self.events if e.type == EventType.DOWN)

    def is_clicking(self, t: float) -> bool:
        index = bisect_right(self.click_times, t - CLICK_WINDOW)
        return index < len(self.click_times) and self.click_times[index] < t + CLICK_WINDOW

    def at(self, t: float) -> CursorSample:
        """
        Cursor position and click state at time ``t``.

        The position is that of the last event at or before ``t`` (the first
        event before the stream starts, the screen center with no events).
        """
        if not self.events:
            return CursorSample(CENTER, CENTER, False)
        index = bisect_right(self.times, t)
        closest = self.events[max(0, index - 1)]
        return CursorSample(closest.x, closest.y, self.is_clicking(t))


def cursor_at(events: Sequence[InputEvent], t: float) -> CursorSample:
    return CursorTrack(events).at(t)
