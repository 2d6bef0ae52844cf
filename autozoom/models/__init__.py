from .pose import Pose, CameraState, CursorState, NEUTRAL_POSE
from .keyframe import Keyframe, START_KEYFRAME_ID, EASING_LINEAR, EASING_EASE_IN_OUT
from .region import ZoomRegion
from .event import InputEvent, EventType, load_events, parse_events

__all__ = [
    'Pose', 'CameraState', 'CursorState', 'NEUTRAL_POSE',
    'Keyframe', 'START_KEYFRAME_ID', 'EASING_LINEAR', 'EASING_EASE_IN_OUT',
    'ZoomRegion',
    'InputEvent', 'EventType', 'load_events', 'parse_events'
]
