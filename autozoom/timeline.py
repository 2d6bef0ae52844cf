#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Timeline: the editable keyframe and region sets plus the effective
trajectory derived from them.

Every mutation recomputes the effective trajectory before it returns and
then notifies subscribers (the live preview re-renders on that signal).
"""

import json
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from autozoom.camera.trajectory import compile_trajectory
from autozoom.models.event import InputEvent
from autozoom.models.keyframe import Keyframe
from autozoom.models.region import ZoomRegion
from autozoom.synthesis import SynthesisResult

logger = logging.getLogger(__name__)

# Adding a keyframe replaces manual keyframes closer than this
REPLACE_WINDOW = 0.1


@dataclass(frozen=True)
class Snapshot:
    keyframes: Tuple[Keyframe, ...]
    regions: Tuple[ZoomRegion, ...]


def state_path_for(video_path: Union[str, Path]) -> Path:
    """Where the editable trajectory of a recording is saved."""
    video_path = Path(video_path)
    return video_path.with_name(f"{video_path.stem}_trajectory.state.json")


class Timeline:
    def __init__(self, keyframes: Optional[Sequence[Keyframe]] = None,
                 regions: Optional[Sequence[ZoomRegion]] = None,
                 events: Optional[Sequence[InputEvent]] = None):
        keyframes = list(keyframes or [])
        if not any(k.is_start for k in keyframes):
            keyframes.insert(0, Keyframe.start())
        if any(k.is_start and k.time != 0 for k in keyframes):
            raise ValueError("The start keyframe must be at time 0")
        self.keyframes: List[Keyframe] = sorted(keyframes, key=lambda k: (k.time, not k.is_start))
        self.regions: List[ZoomRegion] = list(regions or [])
        self.events: List[InputEvent] = list(events or [])
        self.selected_id: Optional[str] = Keyframe.start().id
        self.effective: List[Keyframe] = []
        self.history: List[Snapshot] = []
        self._listeners: List[Callable[["Timeline"], None]] = []
        self._recompute()

    def subscribe(self, listener: Callable[["Timeline"], None]):
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[["Timeline"], None]):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _recompute(self):
        self.effective = compile_trajectory(self.keyframes, self.regions, self.events)
        for listener in self._listeners:
            listener(self)

    def _find_keyframe(self, keyframe_id: str) -> int:
        for index, keyframe in enumerate(self.keyframes):
            if keyframe.id == keyframe_id:
                return index
        raise KeyError(f"No keyframe with id '{keyframe_id}'")

    def _find_region(self, region_id: str) -> int:
        for index, region in enumerate(self.regions):
            if region.id == region_id:
                return index
        raise KeyError(f"No region with id '{region_id}'")

    @property
    def start_keyframe(self) -> Keyframe:
        return self.keyframes[self._find_keyframe(Keyframe.start().id)]

    def add_keyframe(self, time: float, zoom: float, x: float, y: float,
                     easing: Optional[str] = None) -> Keyframe:
        """
        Pin the given pose at ``time``.

        Manual keyframes within REPLACE_WINDOW of ``time`` are replaced. The
        'start' keyframe is never replaced; if it is the one in the way its
        pose is updated instead.
        """
        start = self.start_keyframe
        if abs(start.time - time) <= REPLACE_WINDOW:
            updated = start.with_pose(zoom, x, y)
            self.keyframes[self._find_keyframe(start.id)] = updated
            self.selected_id = updated.id
            self._recompute()
            return updated

        keyframe = Keyframe(id=f"kf-{uuid.uuid4().hex[:8]}", time=time, zoom=zoom, x=x, y=y, easing=easing)
        kept = [k for k in self.keyframes if k.is_start or abs(k.time - time) > REPLACE_WINDOW]
        self.keyframes = sorted(kept + [keyframe], key=lambda k: (k.time, not k.is_start))
        self.selected_id = keyframe.id
        self._recompute()
        logger.debug(f"Added {keyframe}")
        return keyframe

    def update_keyframe(self, keyframe_id: str,
                        zoom: Optional[float] = None,
                        x: Optional[float] = None,
                        y: Optional[float] = None,
                        time: Optional[float] = None) -> Keyframe:
        """Change a keyframe's pose, or move a non-start keyframe in time."""
        index = self._find_keyframe(keyframe_id)
        current = self.keyframes[index]
        if time is not None and current.is_start and time != current.time:
            raise ValueError("The start keyframe cannot be moved")
        updated = Keyframe(
            id=current.id,
            time=current.time if time is None else time,
            zoom=current.zoom if zoom is None else zoom,
            x=current.x if x is None else x,
            y=current.y if y is None else y,
            easing=current.easing
        )
        self.keyframes[index] = updated
        self.keyframes.sort(key=lambda k: (k.time, not k.is_start))
        self._recompute()
        return updated

    def delete_keyframe(self, keyframe_id: str) -> bool:
        """Delete a manual keyframe. Returns False for the 'start' keyframe."""
        index = self._find_keyframe(keyframe_id)
        if self.keyframes[index].is_start:
            return False
        del self.keyframes[index]
        if self.selected_id == keyframe_id:
            self.selected_id = self.keyframes[0].id
        self._recompute()
        return True

    def add_region(self, start: float, end: float, zoom: float = 2.0,
                   anchor_x: float = 50.0, anchor_y: float = 50.0) -> ZoomRegion:
        region = ZoomRegion(id=f"region-{uuid.uuid4().hex[:8]}", start=start, end=end,
                            zoom=zoom, anchor_x=anchor_x, anchor_y=anchor_y)
        self.regions.append(region)
        self.selected_id = region.id
        self._recompute()
        return region

    def resize_region(self, region_id: str, start: float, end: float) -> ZoomRegion:
        index = self._find_region(region_id)
        self.regions[index] = self.regions[index].resized(start, end)
        self._recompute()
        return self.regions[index]

    def delete_region(self, region_id: str) -> bool:
        del self.regions[self._find_region(region_id)]
        if self.selected_id == region_id:
            self.selected_id = self.keyframes[0].id
        self._recompute()
        return True

    def select(self, item_id: str) -> Union[Keyframe, ZoomRegion]:
        """Make a keyframe or region the current selection and return it."""
        for item in list(self.keyframes) + list(self.regions):
            if item.id == item_id:
                self.selected_id = item_id
                return item
        raise KeyError(f"No keyframe or region with id '{item_id}'")

    def snapshot(self) -> Snapshot:
        return Snapshot(tuple(self.keyframes), tuple(self.regions))

    def _restore(self, snapshot: Snapshot):
        self.keyframes = list(snapshot.keyframes)
        self.regions = list(snapshot.regions)
        self.selected_id = Keyframe.start().id
        self._recompute()

    def apply_synthesis(self, result: SynthesisResult):
        """
        Replace the keyframe and region sets with a synthesis result.

        The previous sets are pushed onto ``history`` as one snapshot so
        the whole replacement can be undone in a single step.
        """
        self.history.append(self.snapshot())
        keyframes = [Keyframe.start()] + [k for k in result.keyframes if not k.is_start]
        keyframes.sort(key=lambda k: (k.time, not k.is_start))
        self._restore(Snapshot(tuple(keyframes), tuple(result.regions)))
        logger.info(f"Applied {result.strategy} synthesis: {len(result.keyframes)} keyframes, "
                    f"{len(result.regions)} regions")

    def undo(self) -> bool:
        if not self.history:
            return False
        self._restore(self.history.pop())
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'keyframes': [k.to_dict() for k in self.keyframes],
            'regions': [r.to_dict() for r in self.regions]
        }

    @staticmethod
    def from_dict(data: Dict[str, Any], events: Optional[Sequence[InputEvent]] = None) -> "Timeline":
        return Timeline(
            keyframes=[Keyframe.from_dict(k) for k in data.get('keyframes', [])],
            regions=[ZoomRegion.from_dict(r) for r in data.get('regions', [])],
            events=events
        )

    def save(self, path: Union[str, Path]):
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info(f"Saved trajectory state to {path}")

    @staticmethod
    def load(path: Union[str, Path], events: Optional[Sequence[InputEvent]] = None) -> "Timeline":
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info(f"Loaded trajectory state from {path}")
        return Timeline.from_dict(data, events)
