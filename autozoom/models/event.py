#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
InputEvent model class and loader for recorded pointer/key event streams.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    MOVE = 'move'
    DOWN = 'down'
    UP = 'up'
    KEY = 'key'


# Names written by the desktop recorder
_RECORDER_TYPE_NAMES = {
    'mousemove': EventType.MOVE,
    'mousedown': EventType.DOWN,
    'mouseup': EventType.UP,
    'keydown': EventType.KEY,
}


def parse_event_type(name: str) -> EventType:
    if name in _RECORDER_TYPE_NAMES:
        return _RECORDER_TYPE_NAMES[name]
    try:
        return EventType(name)
    except ValueError:
        raise ValueError(f"Unknown event type '{name}'") from None


@dataclass(frozen=True)
class InputEvent:
    """One recorded input event. ``time`` is seconds since recording start,
    ``x``/``y`` are percentages of the captured screen."""
    type: EventType
    time: float
    x: float = 50.0
    y: float = 50.0

    def __post_init__(self):
        if self.time < 0:
            raise ValueError(f"Event time must be >= 0, got {self.time}")

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type.value, 'time': self.time, 'x': self.x, 'y': self.y}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "InputEvent":
        # Recorders occasionally report positions a hair outside the screen
        x = min(100.0, max(0.0, float(d.get('x', 50.0))))
        y = min(100.0, max(0.0, float(d.get('y', 50.0))))
        return InputEvent(type=parse_event_type(d['type']), time=float(d['time']), x=x, y=y)


def parse_events(data: Union[Dict[str, Any], List[Dict[str, Any]]]) -> List[InputEvent]:
    """
    Build a time-ordered event list from a recorder document.

    Accepts either ``{"events": [...], "screenWidth": ..., ...}`` or a bare
    list of event dicts. Ordering among events with equal times is kept.
    """
    records = data.get('events', []) if isinstance(data, dict) else data
    events = [InputEvent.from_dict(r) for r in records]
    return sorted(events, key=lambda e: e.time)


def load_events(events_path: Union[str, Path]) -> List[InputEvent]:
    """
    Load a recorded event stream from a JSON file.

    Args:
        events_path: Path to the recorder's JSON output

    Returns:
        List of InputEvent objects sorted by time
    """
    with open(events_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    events = parse_events(data)
    logger.info(f"Loaded {len(events)} input events from {events_path}")
    return events
