"""FFmpeg utilities for audio extraction, compositing and text burn-in."""
import shutil
from pathlib import Path
from typing import List

from autoshorts.config import settings
from autoshorts.utils.process import run_command

# Output canvas for vertical shorts; each half is CANVAS_HEIGHT // 2 tall
CANVAS_WIDTH = 1080
CANVAS_HEIGHT = 1920
CAPTION_MARGIN = 10

# Characters that end an option value, and a filter inside a filtergraph
_OPTION_SPECIAL_CHARS = "':"
_GRAPH_SPECIAL_CHARS = "',;[]"


class FFmpegError(Exception):
    """FFmpeg related error."""
    pass


def check_ffmpeg_available() -> bool:
    """Check if ffmpeg is available."""
    return shutil.which(settings.ffmpeg_path) is not None


def check_ffprobe_available() -> bool:
    """Check if ffprobe is available."""
    return shutil.which(settings.ffprobe_path) is not None


def _backslash_escape(value: str, chars: str) -> str:
    escaped = value.replace("\\", "\\\\")
    for char in chars:
        escaped = escaped.replace(char, f"\\{char}")
    return escaped


def escape_filter_value(value: str) -> str:
    """
    Escape a value for embedding as a filter option inside a filtergraph.

    ffmpeg unescapes twice: once when splitting the graph into filters and
    once when splitting a filter's arguments into options.
    """
    option_level = _backslash_escape(str(value).replace("\n", " "), _OPTION_SPECIAL_CHARS)
    return _backslash_escape(option_level, _GRAPH_SPECIAL_CHARS)


def _encoder_options() -> List[str]:
    return ["-threads", str(settings.export_threads)]


async def extract_audio(video_path: str | Path, output_path: str | Path) -> Path:
    """
    Extract mono 16 kHz PCM audio for speech-to-text.

    Args:
        video_path: Source video
        output_path: Destination .wav path

    Returns:
        Path to the wav file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        settings.ffmpeg_path,
        "-y",
        "-i", str(video_path),
        "-vn",
        "-acodec", "pcm_s16le",
        "-ac", "1",
        "-ar", "16000",
        "-f", "wav",
        str(output_path)
    ]

    result = await run_command(cmd)
    if not result.ok:
        raise FFmpegError(f"Audio extraction failed: {result.stderr[-1000:]}")

    return output_path


def build_background_filter() -> List[str]:
    """
    Filtergraph stacking a background (input 0) over the main clip (input 1).

    The background is scaled and cropped into the upper half of the
    canvas, the main clip is fitted and letterboxed into the lower half.
    """
    half = CANVAS_HEIGHT // 2
    return [
        f"[0:v]scale=-2:{half},crop={CANVAS_WIDTH}:{half},"
        f"pad={CANVAS_WIDTH}:{CANVAS_HEIGHT}:0:0:black[bgp]",
        f"[1:v]scale={CANVAS_WIDTH}:{half}:force_original_aspect_ratio=decrease,"
        f"pad={CANVAS_WIDTH}:{half}:(ow-iw)/2:(oh-ih)/2:black[mc]",
        f"[bgp][mc]overlay=0:{half}[cmb]",
    ]


async def overlay_on_background(
    background_path: str | Path,
    main_path: str | Path,
    output_path: str | Path,
) -> Path:
    """
    Composite the main clip under a background clip on a vertical canvas.

    Audio comes only from the main clip and the output stops at the end
    of the shorter input.
    """
    output_path = Path(output_path)

    cmd = [
        settings.ffmpeg_path,
        "-y",
        "-i", str(background_path),
        "-i", str(main_path),
        "-filter_complex", ";".join(build_background_filter()),
        "-map", "[cmb]",
        "-map", "1:a",
        "-c:v", settings.export_video_codec,
        "-c:a", settings.export_audio_codec,
        "-b:a", settings.export_audio_bitrate,
        *_encoder_options(),
        "-shortest",
        str(output_path)
    ]

    result = await run_command(cmd)
    if not result.ok:
        raise FFmpegError(f"Background overlay failed: {result.stderr[-1000:]}")

    return output_path


def caption_y_expression(position: str) -> str:
    """drawtext y expression for a top/center/bottom anchor."""
    if position == "top":
        return str(CAPTION_MARGIN)
    if position == "center":
        return "(h-text_h)/2"
    return f"h-text_h-{CAPTION_MARGIN}"


def build_caption_filter(
    text: str,
    font_family: str,
    font_size: int,
    color: str,
    outline: bool,
    position: str,
) -> str:
    """Build a horizontally centred drawtext filter for a literal caption."""
    options = [
        f"text={escape_filter_value(text.strip())}",
        "expansion=none",
        f"font={escape_filter_value(font_family)}",
        f"fontsize={int(font_size)}",
        f"fontcolor={escape_filter_value(color)}",
        "x=(w-text_w)/2",
        f"y={caption_y_expression(position)}",
    ]
    if outline:
        options.extend(["borderw=2", "bordercolor=black"])
    return "drawtext=" + ":".join(options)


def build_subtitles_filter(subtitle_path: str | Path) -> str:
    """Build a subtitles filter for a srt/vtt file."""
    return f"subtitles={escape_filter_value(str(subtitle_path))}"


async def apply_video_filters(
    input_path: str | Path,
    output_path: str | Path,
    filters: List[str],
) -> Path:
    """
    Re-encode video through a simple filter chain, copying audio.

    Raises:
        FFmpegError: If the render fails
    """
    output_path = Path(output_path)

    cmd = [
        settings.ffmpeg_path,
        "-y",
        "-i", str(input_path),
        "-vf", ",".join(filters),
        "-c:v", settings.export_video_codec,
        "-c:a", "copy",
        *_encoder_options(),
        "-shortest",
        str(output_path)
    ]

    result = await run_command(cmd)
    if not result.ok:
        raise FFmpegError(f"Filter render failed: {result.stderr[-1000:]}")

    return output_path


def copy_video(input_path: str | Path, output_path: str | Path) -> Path:
    """Byte-for-byte copy used when there is nothing to burn in."""
    output_path = Path(output_path)
    shutil.copyfile(input_path, output_path)
    return output_path
