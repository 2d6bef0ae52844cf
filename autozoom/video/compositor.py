#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Compositor: turns a source frame and a camera pose into an output frame.

The same code path runs for the live preview and for export, so a frame
rendered at time t looks the same in both given the same pose.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from autozoom.camera.cursor import CursorSample
from autozoom.models.pose import Pose

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

# Arrow outline in a 28x28 box; the first point is the tip
CURSOR_SHAPE = np.array([(7, 4), (13, 24), (16, 16), (24, 13)], dtype=np.float32)
CURSOR_BOX = 28.0
CURSOR_CLICK_SCALE = 0.85
RIPPLE_COLOR = (96, 165, 250)


class RenderError(RuntimeError):
    """The compositor could not get a usable drawing surface."""


class CropOutOfBoundsError(ValueError):
    """A crop rectangle left the source frame under CropPolicy.REJECT."""


class CropPolicy(str, Enum):
    LETTERBOX = 'letterbox'
    CLAMP = 'clamp'
    REJECT = 'reject'


class GradientDirection(str, Enum):
    HORIZONTAL = 'horizontal'
    VERTICAL = 'vertical'
    DIAGONAL = 'diagonal'


def parse_color(value: str) -> Color:
    """Parse '#rrggbb' (or 'rrggbb') into an RGB tuple."""
    text = value.strip().lstrip('#')
    if len(text) != 6:
        raise ValueError(f"Invalid color '{value}', expected #rrggbb")
    return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)


@dataclass(frozen=True)
class CompositorStyle:
    """Look of the output canvas around the floating video frame."""
    background: Tuple[Color, ...] = ((30, 27, 75), (124, 58, 237))
    gradient_direction: GradientDirection = GradientDirection.DIAGONAL
    frame_scale: float = 0.8
    corner_radius: int = 12
    shadow_blur: float = 40.0
    shadow_offset: Tuple[int, int] = (0, 25)
    shadow_opacity: float = 0.6
    crop_policy: CropPolicy = CropPolicy.LETTERBOX
    letterbox_color: Color = (0, 0, 0)
    draw_cursor: bool = True
    cursor_size: float = 28.0

    def __post_init__(self):
        if len(self.background) not in (1, 2):
            raise ValueError("background must be one color or a two-stop gradient")
        if not 0 < self.frame_scale <= 1:
            raise ValueError(f"frame_scale must be in (0, 1], got {self.frame_scale}")


@dataclass(frozen=True)
class CropRect:
    """Source-pixel rectangle; may extend past the source frame."""
    x: float
    y: float
    width: float
    height: float

    def inside(self, source_w: int, source_h: int, tolerance: float = 1e-6) -> bool:
        return (self.x >= -tolerance and self.y >= -tolerance
                and self.x + self.width <= source_w + tolerance
                and self.y + self.height <= source_h + tolerance)


def compute_crop(pose: Pose, source_w: int, source_h: int) -> CropRect:
    """Crop centered on the pose's pan point, 1/zoom of the source size.
    No clamping is applied."""
    crop_w = source_w / pose.zoom
    crop_h = source_h / pose.zoom
    return CropRect(
        x=pose.x / 100.0 * source_w - crop_w / 2,
        y=pose.y / 100.0 * source_h - crop_h / 2,
        width=crop_w,
        height=crop_h
    )


def apply_crop_policy(crop: CropRect, source_w: int, source_h: int, policy: CropPolicy) -> CropRect:
    """
    Resolve a possibly out-of-bounds crop according to ``policy``.

    LETTERBOX keeps the crop as is (the uncovered area is painted with the
    letterbox color), CLAMP slides it back inside the source and REJECT
    raises CropOutOfBoundsError.
    """
    policy = CropPolicy(policy)
    if policy == CropPolicy.LETTERBOX or crop.inside(source_w, source_h):
        return crop
    if policy == CropPolicy.REJECT:
        raise CropOutOfBoundsError(
            f"Crop ({crop.x:.1f}, {crop.y:.1f}, {crop.width:.1f}x{crop.height:.1f}) "
            f"exceeds source {source_w}x{source_h}")
    x = min(max(0.0, crop.x), max(0.0, source_w - crop.width))
    y = min(max(0.0, crop.y), max(0.0, source_h - crop.height))
    return CropRect(x, y, crop.width, crop.height)


def frame_rect(dest_size: Tuple[int, int], source_size: Tuple[int, int], scale: float) -> Tuple[int, int, int, int]:
    """
    Centered floating-frame rectangle.

    The source aspect ratio is kept and the frame fits inside ``scale`` of
    the destination in both dimensions.

    Returns:
        (x, y, width, height) in destination pixels
    """
    dest_w, dest_h = dest_size
    source_w, source_h = source_size
    box_w, box_h = dest_w * scale, dest_h * scale
    fit = min(box_w / source_w, box_h / source_h)
    width = max(1, int(round(source_w * fit)))
    height = max(1, int(round(source_h * fit)))
    return (dest_w - width) // 2, (dest_h - height) // 2, width, height


def render_background(dest_size: Tuple[int, int], colors: Sequence[Color],
                      direction: GradientDirection = GradientDirection.DIAGONAL) -> np.ndarray:
    """Solid or two-stop linear gradient fill, RGB uint8."""
    dest_w, dest_h = dest_size
    if len(colors) == 1:
        return np.full((dest_h, dest_w, 3), colors[0], dtype=np.uint8)

    xs = np.linspace(0.0, 1.0, dest_w, dtype=np.float32)[np.newaxis, :]
    ys = np.linspace(0.0, 1.0, dest_h, dtype=np.float32)[:, np.newaxis]
    direction = GradientDirection(direction)
    if direction == GradientDirection.HORIZONTAL:
        t = np.broadcast_to(xs, (dest_h, dest_w))
    elif direction == GradientDirection.VERTICAL:
        t = np.broadcast_to(ys, (dest_h, dest_w))
    else:
        t = (xs + ys) / 2.0

    start = np.array(colors[0], dtype=np.float32)
    end = np.array(colors[1], dtype=np.float32)
    gradient = start + (end - start) * t[..., np.newaxis]
    return np.clip(np.rint(gradient), 0, 255).astype(np.uint8)


def rounded_mask(width: int, height: int, radius: int) -> np.ndarray:
    """Single-channel mask (255 inside) of a rounded rectangle."""
    mask = np.zeros((height, width), dtype=np.uint8)
    r = int(max(0, min(radius, width // 2, height // 2)))
    if r == 0:
        mask[:] = 255
        return mask
    cv2.rectangle(mask, (r, 0), (width - 1 - r, height - 1), 255, -1)
    cv2.rectangle(mask, (0, r), (width - 1, height - 1 - r), 255, -1)
    for cx, cy in ((r, r), (width - 1 - r, r), (r, height - 1 - r), (width - 1 - r, height - 1 - r)):
        cv2.circle(mask, (cx, cy), r, 255, -1)
    return mask


def _as_rgb(frame) -> np.ndarray:
    if frame is None or not isinstance(frame, np.ndarray) or frame.size == 0:
        raise RenderError("Source frame is missing or empty")
    if frame.ndim == 2:
        frame = cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
    elif frame.ndim != 3 or frame.shape[2] not in (3, 4):
        raise RenderError(f"Unsupported source frame shape {frame.shape}")
    if frame.shape[2] == 4:
        frame = frame[:, :, :3]
    if frame.dtype != np.uint8:
        frame = np.clip(frame, 0, 255).astype(np.uint8)
    return np.ascontiguousarray(frame)


def crop_and_scale(frame: np.ndarray, crop: CropRect, out_size: Tuple[int, int],
                   fill: Color = (0, 0, 0)) -> np.ndarray:
    """Map ``crop`` onto an ``out_size`` image; uncovered pixels get ``fill``."""
    out_w, out_h = out_size
    sx = out_w / crop.width
    sy = out_h / crop.height
    matrix = np.float32([[sx, 0, -crop.x * sx], [0, sy, -crop.y * sy]])
    return cv2.warpAffine(frame, matrix, (out_w, out_h), flags=cv2.INTER_LINEAR,
                          borderMode=cv2.BORDER_CONSTANT, borderValue=tuple(int(c) for c in fill))


def draw_cursor(image: np.ndarray, x: float, y: float, scale: float, clicking: bool = False):
    """Draw the arrow cursor with its tip at (x, y), in place."""
    if clicking:
        scale *= CURSOR_CLICK_SCALE
    points = (CURSOR_SHAPE - CURSOR_SHAPE[0]) * scale + np.float32([x, y])
    polygon = np.round(points).astype(np.int32).reshape(-1, 1, 2)
    thickness = max(1, int(round(2 * scale)))

    if clicking:
        center = (int(round(x + 7 * scale)), int(round(y + 10 * scale)))
        cv2.circle(image, center, max(2, int(round(20 * scale))), RIPPLE_COLOR, thickness, cv2.LINE_AA)

    cv2.fillPoly(image, [polygon], (0, 0, 0), cv2.LINE_AA)
    cv2.polylines(image, [polygon], True, (255, 255, 255), thickness, cv2.LINE_AA)


class Compositor:
    """
    Per-frame renderer with a cached background layer.

    The background, shadow and frame mask only depend on the canvas and
    source sizes, so they are built once per size pair.
    """

    def __init__(self, style: Optional[CompositorStyle] = None):
        self.style = style or CompositorStyle()
        self._base_key = None
        self._base = None
        self._mask = None

    def _base_layer(self, dest_size: Tuple[int, int], rect: Tuple[int, int, int, int]):
        key = (dest_size, rect)
        if self._base_key == key:
            return self._base, self._mask

        style = self.style
        dest_w, dest_h = dest_size
        fx, fy, fw, fh = rect
        base = render_background(dest_size, style.background, style.gradient_direction)
        mask = rounded_mask(fw, fh, style.corner_radius)

        if style.shadow_opacity > 0 and style.shadow_blur > 0:
            shadow = np.zeros((dest_h, dest_w), dtype=np.float32)
            ox, oy = style.shadow_offset
            x0, y0 = max(0, fx + ox), max(0, fy + oy)
            x1, y1 = min(dest_w, fx + ox + fw), min(dest_h, fy + oy + fh)
            if x1 > x0 and y1 > y0:
                shadow[y0:y1, x0:x1] = mask[y0 - fy - oy:y1 - fy - oy, x0 - fx - ox:x1 - fx - ox] / 255.0
                shadow = cv2.GaussianBlur(shadow, (0, 0), style.shadow_blur / 2.0)
                alpha = (shadow * style.shadow_opacity)[..., np.newaxis]
                base = (base.astype(np.float32) * (1.0 - alpha)).astype(np.uint8)

        self._base_key = key
        self._base = base
        self._mask = mask
        return base, mask

    def render(self, frame: np.ndarray, pose: Pose, dest_size: Tuple[int, int],
               cursor: Optional[CursorSample] = None) -> np.ndarray:
        """
        Composite one output frame.

        Args:
            frame: Source RGB frame (H x W x 3)
            pose: Camera pose for this instant
            dest_size: Output canvas (width, height)
            cursor: Cursor to draw, in source percent coordinates, or None

        Returns:
            Output RGB frame (dest_h x dest_w x 3, uint8)
        """
        dest_w, dest_h = dest_size
        if dest_w <= 0 or dest_h <= 0:
            raise RenderError(f"Invalid canvas size {dest_w}x{dest_h}")
        source = _as_rgb(frame)
        source_h, source_w = source.shape[:2]

        style = self.style
        rect = frame_rect(dest_size, (source_w, source_h), style.frame_scale)
        base, mask = self._base_layer(dest_size, rect)
        fx, fy, fw, fh = rect

        crop = apply_crop_policy(compute_crop(pose, source_w, source_h), source_w, source_h, style.crop_policy)
        view = crop_and_scale(source, crop, (fw, fh), style.letterbox_color)

        if cursor is not None and style.draw_cursor:
            sx = fw / crop.width
            sy = fh / crop.height
            cx = (cursor.x / 100.0 * source_w - crop.x) * sx
            cy = (cursor.y / 100.0 * source_h - crop.y) * sy
            if -style.cursor_size * sx <= cx <= fw and -style.cursor_size * sy <= cy <= fh:
                draw_cursor(view, cx, cy, style.cursor_size / CURSOR_BOX * sx, cursor.clicking)

        output = base.copy()
        region = output[fy:fy + fh, fx:fx + fw]
        inside = mask > 0
        region[inside] = view[inside]
        return output


def render_frame(frame: np.ndarray, pose: Pose, dest_size: Tuple[int, int],
                 style: Optional[CompositorStyle] = None,
                 cursor: Optional[CursorSample] = None) -> np.ndarray:
    """One-off render without background caching."""
    return Compositor(style).render(frame, pose, dest_size, cursor)
