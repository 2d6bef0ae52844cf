#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Video module: source access, frame compositing, export and preview.
"""

from autozoom.video.source import VideoSource, load_video, get_video_info
from autozoom.video.compositor import (
    Compositor,
    CompositorStyle,
    CropPolicy,
    RenderError,
    CropOutOfBoundsError,
    compute_crop,
    render_frame
)
from autozoom.video.export import ExportJob, ExportResult, FFmpegFrameSink, MemoryFrameSink, export_video
from autozoom.video.preview import PreviewSession, run_preview_window, create_trajectory_preview

__all__ = [
    'VideoSource',
    'load_video',
    'get_video_info',
    'Compositor',
    'CompositorStyle',
    'CropPolicy',
    'RenderError',
    'CropOutOfBoundsError',
    'compute_crop',
    'render_frame',
    'ExportJob',
    'ExportResult',
    'FFmpegFrameSink',
    'MemoryFrameSink',
    'export_video',
    'PreviewSession',
    'run_preview_window',
    'create_trajectory_preview'
]
