#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Live preview: a playback session with a damped camera, an OpenCV window
loop that drives it, and a still side-by-side preview image.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
import numpy as np
from PIL import Image, ImageDraw, ImageFont

from autozoom.camera.easing import EasingStyle
from autozoom.camera.pose_source import DeterministicSample, SmoothedLive
from autozoom.timeline import Timeline
from autozoom.video.compositor import Compositor, CompositorStyle, CropOutOfBoundsError, RenderError
from autozoom.video.source import VideoSource

logger = logging.getLogger(__name__)

SCRUB_STEP = 1.0


class PreviewSession:
    """
    Playback state for the interactive preview.

    The damped camera and cursor live in ``self.poses`` and belong to this
    session only. While playing, each ``step`` renders one frame and moves
    the damping forward. While paused, every timeline edit and every scrub
    renders immediately with the camera snapped to its target.
    """

    def __init__(self, source: VideoSource,
                 timeline: Timeline,
                 style: Optional[CompositorStyle] = None,
                 easing_style: EasingStyle = EasingStyle.CUBIC,
                 dest_size: Optional[Tuple[int, int]] = None):
        self.source = source
        self.timeline = timeline
        self.dest_size = dest_size or source.size
        self.compositor = Compositor(style)
        self.poses = SmoothedLive(timeline.effective, timeline.events, easing_style)
        self.playing = False
        self.running = True
        self.position = 0.0
        self.last_frame: Optional[np.ndarray] = None
        timeline.subscribe(self._on_timeline_change)

    def _on_timeline_change(self, timeline: Timeline):
        self.poses.update_trajectory(timeline.effective)
        if not self.playing:
            self.render_now()

    def _render(self) -> Optional[np.ndarray]:
        self.source.seek(self.position)
        frame_pose = self.poses.pose_at(self.position)
        cursor = frame_pose.cursor if self.timeline.events else None
        try:
            self.last_frame = self.compositor.render(self.source.read(), frame_pose.camera, self.dest_size, cursor)
        except (RenderError, CropOutOfBoundsError) as e:
            logger.warning(f"Skipped preview frame at {self.position:.2f}s: {e}")
            return None
        return self.last_frame

    def play(self):
        if self.position >= self.source.duration:
            self.position = 0.0
            self.poses.reset(0.0)
        self.playing = True

    def pause(self):
        self.playing = False

    def toggle(self):
        if self.playing:
            self.pause()
        else:
            self.play()

    def scrub(self, t: float) -> Optional[np.ndarray]:
        """Jump to ``t``: pauses playback and renders without damping."""
        self.pause()
        self.position = min(max(0.0, t), self.source.duration)
        return self.render_now()

    def render_now(self) -> Optional[np.ndarray]:
        self.poses.reset(self.position)
        return self._render()

    def advance(self, dt: float):
        """Move the playhead by wall-clock ``dt`` seconds while playing."""
        if not self.playing:
            return
        self.position += dt
        if self.position >= self.source.duration:
            self.position = self.source.duration
            self.pause()

    def step(self) -> Optional[np.ndarray]:
        """One display refresh."""
        if not self.playing:
            return self.last_frame
        return self._render()

    def close(self):
        self.running = False
        self.playing = False
        self.timeline.unsubscribe(self._on_timeline_change)


def run_preview_window(session: PreviewSession, window_name: str = 'autozoom preview', refresh_hz: float = 60.0):
    """
    Drive a preview session from an OpenCV window until it is closed.

    Keys: space play/pause, ',' and '.' scrub one second, 'q' or Esc quit.
    """
    delay_ms = max(1, int(1000 / refresh_hz))
    session.scrub(0.0)
    session.play()
    last = time.monotonic()

    try:
        while session.running:
            now = time.monotonic()
            session.advance(now - last)
            last = now

            frame = session.step()
            if frame is not None:
                cv2.imshow(window_name, cv2.cvtColor(frame, cv2.COLOR_RGB2BGR))

            key = cv2.waitKey(delay_ms) & 0xFF
            if key in (ord('q'), 27):
                session.close()
            elif key == ord(' '):
                session.toggle()
            elif key == ord(','):
                session.scrub(session.position - SCRUB_STEP)
            elif key == ord('.'):
                session.scrub(session.position + SCRUB_STEP)
    finally:
        cv2.destroyWindow(window_name)


def create_trajectory_preview(source: VideoSource,
                              timeline: Timeline,
                              timestamp: float,
                              output_preview_path: Union[str, Path],
                              style: Optional[CompositorStyle] = None,
                              easing_style: EasingStyle = EasingStyle.CUBIC,
                              max_height: int = 720) -> str:
    """
    Save a side-by-side image of the original frame and the composited
    output at ``timestamp``.

    Args:
        source: Opened source video
        timeline: Timeline whose effective trajectory is sampled
        timestamp: Time of the preview frame in seconds
        output_preview_path: Path of the JPEG to write
        style: Compositor style
        easing_style: Ease-in-out curve to sample with
        max_height: Height of each panel in the preview

    Returns:
        Path of the saved preview image
    """
    logger.info(f"Creating trajectory preview using frame at {timestamp:.2f}s")

    source.seek(timestamp)
    frame = source.read()
    frame_pose = DeterministicSample(timeline.effective, timeline.events, easing_style).pose_at(timestamp)
    cursor = frame_pose.cursor if timeline.events else None
    processed = Compositor(style).render(frame, frame_pose.camera, source.size, cursor)

    original_image = Image.fromarray(frame)
    processed_image = Image.fromarray(processed)
    scale_factor = max_height / max(original_image.height, processed_image.height)
    original_image = original_image.resize(
        (int(original_image.width * scale_factor), int(original_image.height * scale_factor)),
        Image.Resampling.LANCZOS)
    processed_image = processed_image.resize(
        (int(processed_image.width * scale_factor), int(processed_image.height * scale_factor)),
        Image.Resampling.LANCZOS)

    margin = 20
    text_height = 30
    preview_width = original_image.width + processed_image.width + 3 * margin
    preview_height = max(original_image.height, processed_image.height) + 2 * margin + text_height
    preview = Image.new('RGB', (preview_width, preview_height), 'black')

    y_offset = margin + text_height
    preview.paste(original_image, (margin, y_offset))
    preview.paste(processed_image, (margin * 2 + original_image.width, y_offset))

    pose = frame_pose.camera
    draw = ImageDraw.Draw(preview)
    font = ImageFont.load_default()
    draw.text((margin, margin), "Original", fill='white', font=font)
    draw.text((margin * 2 + original_image.width, margin),
              f"Output at {timestamp:.2f}s (zoom {pose.zoom:.2f}x, pan {pose.x:.0f}%, {pose.y:.0f}%)",
              fill='white', font=font)

    preview.save(str(output_preview_path), 'JPEG', quality=95)
    logger.info(f"Saved trajectory preview to {output_preview_path}")
    return str(output_preview_path)
