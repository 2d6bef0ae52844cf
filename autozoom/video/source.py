#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Source video access: seek, read and metadata for a recorded screen capture.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import numpy as np
from moviepy import VideoFileClip

logger = logging.getLogger(__name__)


def load_video(video_path: Union[str, Path]) -> VideoFileClip:
    """
    Load a video file into a VideoFileClip object.

    Args:
        video_path: Path to the video file

    Returns:
        MoviePy VideoFileClip object
    """
    logger.info(f"Loading video: {video_path}")
    return VideoFileClip(str(video_path), audio=False)


def get_video_info(video_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Get basic information about a video file.

    Args:
        video_path: Path to the video file

    Returns:
        Dictionary with video info (width, height, fps, duration, aspect_ratio)
    """
    try:
        video = load_video(video_path)
        info = {
            'width': int(video.w),
            'height': int(video.h),
            'fps': video.fps,
            'duration': video.duration,
            'aspect_ratio': video.w / video.h if video.h > 0 else 0
        }
        video.close()
        return info
    except Exception as e:
        logger.error(f"Failed to get video info: {e}")
        raise


class VideoSource:
    """
    Seekable frame reader over a recorded video.

    Holds a playback position like a player element does: ``seek`` moves
    it, ``read`` returns the RGB frame at it.
    """

    def __init__(self, clip: VideoFileClip):
        self.clip = clip
        self.position = 0.0

    @classmethod
    def open(cls, video_path: Union[str, Path]) -> "VideoSource":
        return cls(load_video(video_path))

    @property
    def duration(self) -> float:
        return float(self.clip.duration or 0.0)

    @property
    def fps(self) -> float:
        return float(self.clip.fps or 30.0)

    @property
    def size(self) -> Tuple[int, int]:
        w, h = self.clip.size
        return int(w), int(h)

    def seek(self, t: float):
        self.position = min(max(0.0, t), self.duration)

    def read(self) -> np.ndarray:
        # get_frame past the last decodable frame fails on some containers
        t = min(self.position, max(0.0, self.duration - 1.0 / self.fps))
        return self.clip.get_frame(t)

    def close(self):
        self.clip.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
