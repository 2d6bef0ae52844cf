#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Export loop: renders every output frame from the deterministic trajectory
and hands the frames, in time order, to a stateful encoder.
"""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from moviepy.video.io.ffmpeg_writer import FFMPEG_VideoWriter
from tqdm import tqdm

from autozoom.camera.easing import EasingStyle
from autozoom.camera.pose_source import DeterministicSample
from autozoom.models.event import InputEvent
from autozoom.models.keyframe import Keyframe
from autozoom.video.compositor import Compositor, CompositorStyle, CropOutOfBoundsError, RenderError
from autozoom.video.source import VideoSource

logger = logging.getLogger(__name__)


class FrameSink:
    """Consumer of composited frames. Frames must arrive in increasing time."""

    def __init__(self):
        self.last_time = None
        self.frame_count = 0

    def write(self, frame: np.ndarray, t: float):
        if self.last_time is not None and t <= self.last_time:
            raise ValueError(f"Frame at {t:.3f}s is not after previous frame at {self.last_time:.3f}s")
        self._write(frame, t)
        self.last_time = t
        self.frame_count += 1

    def _write(self, frame: np.ndarray, t: float):
        raise NotImplementedError

    def finalize(self):
        """Close the stream and return the produced artifact."""
        raise NotImplementedError

    def abort(self):
        """Discard whatever was written so far."""


class MemoryFrameSink(FrameSink):
    """Keeps frames in a list; the artifact is the list itself."""

    def __init__(self):
        super().__init__()
        self.frames: List[np.ndarray] = []
        self.times: List[float] = []
        self.finalized = False
        self.aborted = False

    def _write(self, frame: np.ndarray, t: float):
        self.frames.append(frame)
        self.times.append(t)

    def finalize(self):
        self.finalized = True
        return self.frames

    def abort(self):
        self.aborted = True
        self.frames = []
        self.times = []


class FFmpegFrameSink(FrameSink):
    """Encodes frames to a video file through moviepy's ffmpeg writer."""

    def __init__(self, output_path: Union[str, Path],
                 size: Tuple[int, int],
                 fps: float,
                 codec: str = 'libx264',
                 bitrate: Optional[str] = '8000k',
                 preset: str = 'medium',
                 threads: int = 2):
        super().__init__()
        self.output_path = str(output_path)
        os.makedirs(os.path.dirname(os.path.abspath(self.output_path)), exist_ok=True)
        self.writer = FFMPEG_VideoWriter(
            self.output_path,
            size,
            fps,
            codec=codec,
            preset=preset,
            bitrate=bitrate,
            threads=threads
        )

    def _write(self, frame: np.ndarray, t: float):
        self.writer.write_frame(frame)

    def finalize(self):
        self.writer.close()
        logger.info(f"Video saved to: {self.output_path}")
        return self.output_path

    def abort(self):
        self.writer.close()
        if os.path.exists(self.output_path):
            os.remove(self.output_path)
            logger.info(f"Removed partial export {self.output_path}")


@dataclass
class ExportResult:
    status: str
    frames_written: int
    artifact: object = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in ('completed', 'stopped')


class ExportJob:
    """
    Drives the source forward one output frame at a time.

    Frames are rendered and handed to the sink strictly in increasing
    source time. ``stop()`` ends the loop after the current frame and the
    sink is still finalized; a render failure aborts the sink.
    """

    def __init__(self, source: VideoSource,
                 trajectory: Sequence[Keyframe],
                 sink: FrameSink,
                 dest_size: Optional[Tuple[int, int]] = None,
                 fps: Optional[float] = None,
                 events: Optional[Sequence[InputEvent]] = None,
                 style: Optional[CompositorStyle] = None,
                 easing_style: EasingStyle = EasingStyle.CUBIC,
                 show_progress: bool = True):
        self.source = source
        self.sink = sink
        self.dest_size = dest_size or source.size
        self.fps = fps or source.fps
        self.poses = DeterministicSample(trajectory, events, easing_style)
        self.compositor = Compositor(style)
        self.show_progress = show_progress
        self._stopped = False

    def frame_times(self) -> List[float]:
        count = math.ceil(self.source.duration * self.fps - 1e-9)
        return [i / self.fps for i in range(count)]

    def stop(self):
        self._stopped = True

    def run(self) -> ExportResult:
        times = self.frame_times()
        logger.info(f"Exporting {len(times)} frames at {self.fps:.2f} fps, "
                    f"{self.dest_size[0]}x{self.dest_size[1]}")
        draw_cursor = bool(self.poses.events)

        try:
            for t in tqdm(times, desc="Exporting", disable=not self.show_progress):
                if self._stopped:
                    logger.info(f"Export stopped at {t:.2f}s")
                    break
                self.source.seek(t)
                frame_pose = self.poses.pose_at(t)
                output = self.compositor.render(
                    self.source.read(),
                    frame_pose.camera,
                    self.dest_size,
                    frame_pose.cursor if draw_cursor else None
                )
                self.sink.write(output, t)
        except (RenderError, CropOutOfBoundsError) as e:
            logger.error(f"Export aborted after {self.sink.frame_count} frames: {e}")
            self.sink.abort()
            return ExportResult('failed', self.sink.frame_count, error=str(e))
        except Exception as e:
            logger.error(f"Export aborted after {self.sink.frame_count} frames: {e}")
            self.sink.abort()
            raise

        artifact = self.sink.finalize()
        status = 'stopped' if self._stopped else 'completed'
        logger.info(f"Export {status}: {self.sink.frame_count} frames")
        return ExportResult(status, self.sink.frame_count, artifact=artifact)


def export_video(source: VideoSource,
                 trajectory: Sequence[Keyframe],
                 output_path: Union[str, Path],
                 dest_size: Optional[Tuple[int, int]] = None,
                 fps: Optional[float] = None,
                 events: Optional[Sequence[InputEvent]] = None,
                 style: Optional[CompositorStyle] = None,
                 easing_style: EasingStyle = EasingStyle.CUBIC) -> ExportResult:
    """
    Render the whole recording through the compositor into a video file.

    Args:
        source: Opened source video
        trajectory: Effective trajectory to sample
        output_path: Where to write the encoded video
        dest_size: Output (width, height); defaults to the source size
        fps: Output frame rate; defaults to the source frame rate
        events: Recorded events, for the cursor overlay
        style: Compositor style
        easing_style: Ease-in-out curve used for export

    Returns:
        ExportResult describing how the export ended
    """
    dest_size = dest_size or source.size
    fps = fps or source.fps
    sink = FFmpegFrameSink(output_path, dest_size, fps)
    job = ExportJob(source, trajectory, sink, dest_size, fps, events, style, easing_style)
    return job.run()
