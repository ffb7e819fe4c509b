#!/usr/bin/env python3
"""
CLI tool to generate highlight clips for a video and print the manifest.

Usage:
    python scripts/make_clips_cli.py <video_url_or_id> [--source comments|retention]

Example:
    python scripts/make_clips_cli.py dQw4w9WgXcQ --background minecraft --caption "wait for it"
"""
import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from autoshorts.config import settings
from autoshorts.pipeline.errors import ResolutionError
from autoshorts.pipeline.models import CompositionSpec
from autoshorts.services.clip_service import ClipRequest, ClipService, MissingCredentialsError
from autoshorts.services.youtube_service import YouTubeApiError


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
)
logger = logging.getLogger(__name__)


async def make_clips(request: ClipRequest, output_file: Path = None):
    """
    Run the clip pipeline and write the manifest.

    Args:
        request: Clip request
        output_file: Optional JSON file for the full window report
    """
    service = ClipService.from_settings(settings)
    result = await service.generate_clips(request)

    manifest = result.to_manifest()
    print(json.dumps({"clips": manifest}, indent=2))

    if output_file:
        report = [
            {
                "start": o.window.start,
                "end": o.window.end,
                "state": o.state.value,
                "history": [s.value for s in o.history],
                "subtitles": o.transcribed,
                "background": o.composited,
                "error": o.error,
                "url": o.result.url if o.result else None,
            }
            for o in result.outcomes
        ]
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(json.dumps(report, indent=2))
        logger.info(f"Window report written to {output_file}")


def main():
    parser = argparse.ArgumentParser(
        description="Generate vertical highlight clips for a YouTube video",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Comment timestamps, default styling
    python scripts/make_clips_cli.py https://youtu.be/dQw4w9WgXcQ

    # Retention analytics (token from YOUTUBE_ACCESS_TOKEN)
    python scripts/make_clips_cli.py dQw4w9WgXcQ --source retention
        """
    )

    parser.add_argument("video", nargs="?", help="YouTube URL or 11-character video id")
    parser.add_argument("--channel", help="Use the latest upload of this channel id")
    parser.add_argument("--source", choices=["comments", "retention"], default="comments")
    parser.add_argument("--caption", default=None, help="Caption text drawn on every clip")
    parser.add_argument("--font", default="Arial")
    parser.add_argument("--font-size", type=int, default=24)
    parser.add_argument("--color", default="white")
    parser.add_argument("--outline", action="store_true")
    parser.add_argument("--position", choices=["top", "center", "bottom"], default="bottom")
    parser.add_argument("--background", default=None, choices=sorted(settings.background_sources))
    parser.add_argument(
        "--report", "-r",
        type=Path,
        default=None,
        help="Write a per-window JSON report here"
    )

    args = parser.parse_args()

    if not args.video and not args.channel:
        parser.error("a video or --channel is required")

    request = ClipRequest(
        video_url=args.video,
        channel_id=args.channel,
        source=args.source,
        access_token=os.environ.get("YOUTUBE_ACCESS_TOKEN"),
        spec=CompositionSpec(
            caption_text=args.caption,
            font_family=args.font,
            font_size=args.font_size,
            color=args.color,
            outline=args.outline,
            position=args.position,
            background=args.background,
        ),
    )

    try:
        asyncio.run(make_clips(request, args.report))
    except (ResolutionError, MissingCredentialsError, YouTubeApiError) as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
