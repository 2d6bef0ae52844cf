#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Auto-zoom video generator: turns a screen recording and its input event
log into a video where the camera pans and zooms toward the action.
"""

import os
import sys
import json
import time
import logging
import argparse
from pathlib import Path
from typing import List, Optional, Tuple

from autozoom.camera.easing import EasingStyle
from autozoom.config import AutoZoomConfig, parse_background
from autozoom.models.event import InputEvent, load_events
from autozoom.models.keyframe import Keyframe
from autozoom.models.region import ZoomRegion
from autozoom.synthesis import synthesize
from autozoom.timeline import Timeline, state_path_for
from autozoom.video.compositor import CropPolicy
from autozoom.video.export import export_video
from autozoom.video.preview import PreviewSession, create_trajectory_preview, run_preview_window
from autozoom.video.source import VideoSource

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger(__name__)


def parse_regions(regions_input: str) -> List[ZoomRegion]:
    """
    Parse region input into ZoomRegion objects.

    Supports:
    1. "start-end[:zoom[@x,y]]" separated by ';' (e.g. "5-8:2@30,70;12-15")
    2. JSON list: [{"start": 5, "end": 8, "zoom": 2, "anchor_x": 30, "anchor_y": 70}]
    3. Path to a JSON file with that list

    Args:
        regions_input: String containing region information

    Returns:
        List of ZoomRegion objects
    """
    if os.path.isfile(regions_input):
        logger.info(f"Loading regions from file: {regions_input}")
        with open(regions_input, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return [ZoomRegion.from_dict({'id': f'region-{i}', **item}) for i, item in enumerate(data)]

    if regions_input.strip().startswith('['):
        data = json.loads(regions_input)
        return [ZoomRegion.from_dict({'id': f'region-{i}', **item}) for i, item in enumerate(data)]

    regions = []
    for i, part in enumerate(p.strip() for p in regions_input.split(';')):
        if not part:
            continue
        span, _, rest = part.partition(':')
        zoom_text, _, anchor_text = rest.partition('@')
        start_text, _, end_text = span.partition('-')
        anchor_x, anchor_y = (anchor_text.split(',') if anchor_text else ('50', '50'))
        regions.append(ZoomRegion(
            id=f'region-{i}',
            start=float(start_text),
            end=float(end_text),
            zoom=float(zoom_text) if zoom_text else 2.0,
            anchor_x=float(anchor_x),
            anchor_y=float(anchor_y)
        ))
    return regions


def parse_keyframe(keyframe_input: str, index: int) -> Keyframe:
    """Parse "time:zoom:x:y[:easing]" into a Keyframe."""
    parts = keyframe_input.split(':')
    if len(parts) not in (4, 5):
        raise ValueError(f"Invalid keyframe '{keyframe_input}', expected time:zoom:x:y[:easing]")
    return Keyframe(
        id=f'manual-{index}',
        time=float(parts[0]),
        zoom=float(parts[1]),
        x=float(parts[2]),
        y=float(parts[3]),
        easing=parts[4] if len(parts) == 5 else None
    )


def parse_size(size_input: str) -> Tuple[int, int]:
    width, _, height = size_input.lower().partition('x')
    return int(width), int(height)


def find_events_file(video_path: str) -> Optional[Path]:
    """Look for the recorder's event log next to the video."""
    video_path_obj = Path(video_path)
    for name in (f"{video_path_obj.stem}.events.json", f"{video_path_obj.stem}_events.json"):
        candidate = video_path_obj.with_name(name)
        if candidate.exists():
            return candidate
    return None


def build_config(args: argparse.Namespace) -> AutoZoomConfig:
    """Environment defaults, overridden by command line flags."""
    config = AutoZoomConfig.from_env()
    if args.focus_zoom is not None:
        config.focus_zoom = args.focus_zoom
    if args.fps is not None:
        config.fps = args.fps
    if args.frame_scale is not None:
        config.frame_scale = args.frame_scale
    if args.background:
        config.background = parse_background(args.background)
    if args.crop_policy:
        config.crop_policy = CropPolicy(args.crop_policy)
    if args.easing_style:
        config.easing_style = EasingStyle(args.easing_style)
        config.export_easing_style = EasingStyle(args.easing_style)
    if args.export_easing_style:
        config.export_easing_style = EasingStyle(args.export_easing_style)
    if args.size:
        config.output_size = parse_size(args.size)
    return config


def process_single_file(input_file: str, output_file: Optional[str], args: argparse.Namespace,
                        config: AutoZoomConfig) -> bool:
    """
    Process a single recording with the given arguments.

    Args:
        input_file: Path to the recorded video
        output_file: Path to output file (optional)
        args: Command line arguments
        config: Resolved configuration

    Returns:
        bool: True if processing was successful
    """
    try:
        if not output_file:
            input_path = Path(input_file)
            timestamp = time.strftime("%Y%m%d_%H%M%S")
            output_file = str(input_path.with_name(f"{input_path.stem}_autozoom_{timestamp}.mp4"))
            logger.info(f"Setting default output path to: {output_file}")

        # Step 1: Load the event log
        events: List[InputEvent] = []
        events_path = args.events or find_events_file(input_file)
        if events_path:
            events = load_events(events_path)
        else:
            logger.warning("No event log found; auto-zoom will use motion analysis")

        with VideoSource.open(input_file) as source:
            # Step 2: Load or build the timeline
            state_file = state_path_for(input_file)
            if args.resume and state_file.exists():
                timeline = Timeline.load(state_file, events)
            else:
                keyframes = [parse_keyframe(k, i) for i, k in enumerate(args.keyframe or [])]
                regions = parse_regions(args.regions) if args.regions else []
                timeline = Timeline(keyframes, regions, events)

            # Step 3: Auto-zoom
            if args.auto:
                logger.info("Running auto-zoom synthesis...")
                result = synthesize(
                    events,
                    source,
                    focus_zoom=config.focus_zoom,
                    region_duration=config.region_duration,
                    sample_interval=config.sample_interval
                )
                timeline.apply_synthesis(result)

            timeline.save(state_file)
            logger.info(f"Effective trajectory has {len(timeline.effective)} keyframes")

            style = config.compositor_style()

            if args.preview_image is not None:
                preview_path = str(Path(output_file).with_suffix('.preview.jpg'))
                create_trajectory_preview(source, timeline, args.preview_image, preview_path,
                                          style, config.easing_style)

            if args.preview:
                session = PreviewSession(source, timeline, style, config.easing_style, config.output_size)
                run_preview_window(session)

            if args.no_export:
                return True

            # Step 4: Export
            result = export_video(
                source,
                timeline.effective,
                output_file,
                dest_size=config.output_size,
                fps=config.fps,
                events=events,
                style=style,
                easing_style=config.export_easing_style
            )
            if not result.ok:
                logger.error(f"Export failed: {result.error}")
                return False

        logger.info(f"Auto-zoom video created successfully: {output_file}")
        return True

    except Exception as e:
        logger.error(f"Error processing file {input_file}: {e}")
        return False


def main():
    """Main function to process a recording into an auto-zoomed video"""
    parser = argparse.ArgumentParser(description='Generate auto-zoomed videos from screen recordings')
    parser.add_argument('--input-file', '-i', required=True, help='Path to the recorded video')
    parser.add_argument('--events', '-e', help='Path to the recorded event log (default: <video>.events.json)')
    parser.add_argument('--output', '-o', help='Path to the output video file')
    parser.add_argument('--auto', '-a', action='store_true',
                        help='Generate zoom regions from clicks (or motion analysis without events)')
    parser.add_argument('--regions', '-r',
                        help='Zoom regions: "start-end[:zoom[@x,y]];..." or JSON list or JSON file')
    parser.add_argument('--keyframe', '-k', action='append',
                        help='Manual keyframe "time:zoom:x:y[:easing]" (repeatable)')
    parser.add_argument('--resume', action='store_true',
                        help='Start from the saved trajectory state next to the video')
    parser.add_argument('--focus-zoom', '-z', type=float,
                        help='Zoom factor for click regions (2.0 to 2.5, default: 2.0)')
    parser.add_argument('--fps', type=float, help='Output frame rate (default: source frame rate)')
    parser.add_argument('--size', help='Output size WIDTHxHEIGHT (default: source size)')
    parser.add_argument('--frame-scale', type=float, help='Floating frame size as a fraction of the canvas')
    parser.add_argument('--background', '-b', help='Background "#rrggbb" or gradient "#rrggbb,#rrggbb"')
    parser.add_argument('--crop-policy', choices=[p.value for p in CropPolicy],
                        help='How crops past the source edge are handled (default: letterbox)')
    parser.add_argument('--easing-style', choices=[s.value for s in EasingStyle],
                        help='Ease-in-out curve for preview and export (default: cubic)')
    parser.add_argument('--export-easing-style', choices=[s.value for s in EasingStyle],
                        help='Ease-in-out curve for export only')
    parser.add_argument('--preview-image', type=float, metavar='SECONDS',
                        help='Save a side-by-side preview image at this timestamp')
    parser.add_argument('--preview', action='store_true', help='Open the interactive preview window')
    parser.add_argument('--no-export', action='store_true', help='Skip the video export')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = build_config(args)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    return 0 if process_single_file(args.input_file, args.output, args, config) else 1


if __name__ == "__main__":
    sys.exit(main())
