"""yt-dlp utilities for YouTube section and caption downloads."""
import logging
import shutil
from pathlib import Path
from typing import Optional

from autoshorts.config import settings
from autoshorts.utils.process import run_command

logger = logging.getLogger(__name__)

CAPTION_EXTENSIONS = ("srt", "vtt")


class YtdlpError(Exception):
    """yt-dlp related error."""
    pass


def check_ytdlp_available() -> bool:
    """Check if yt-dlp is available."""
    return shutil.which(settings.ytdlp_path) is not None


def to_hhmmss(seconds: float) -> str:
    """Format seconds as HH:MM:SS for --download-sections."""
    total = int(seconds)
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


async def download_section(
    url: str,
    output_path: Path,
    start: int,
    end: int,
) -> Path:
    """
    Download the [start, end) slice of a video with audio, merged to mp4.

    The output path is used as-is and existing files are overwritten, so
    repeated calls for the same slice land on the same file.

    Args:
        url: Video locator
        output_path: Destination .mp4 path
        start: Slice start in seconds
        end: Slice end in seconds

    Returns:
        Path to the downloaded slice

    Raises:
        YtdlpError: If yt-dlp fails or produces no file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        settings.ytdlp_path,
        "-f", "bestvideo+bestaudio/best",
        "--merge-output-format", "mp4",
        "--download-sections", f"*{to_hhmmss(start)}-{to_hhmmss(end)}",
        "-o", str(output_path),
        "--no-playlist",
        "--force-overwrites",
        url
    ]

    result = await run_command(cmd)

    if not result.ok:
        logger.error(f"yt-dlp section download failed:\n{result.stderr[-2000:]}")
        raise YtdlpError(f"Section download failed for {url}: {result.stderr.strip()[-500:]}")

    if not output_path.exists():
        raise YtdlpError(f"Download completed but {output_path.name} was not written")

    return output_path


async def download_auto_captions(
    url: str,
    output_dir: Path,
    stem: str,
    language: str = "en",
) -> Optional[Path]:
    """
    Fetch automatically generated captions without downloading media.

    yt-dlp names the file <stem>.<lang>.<ext>; whichever srt or vtt file
    starting with the stem shows up afterwards is returned.

    Args:
        url: Video locator
        output_dir: Directory to write captions into
        stem: Filename stem for the caption file
        language: Caption language code

    Returns:
        Path to the caption file, or None if none was produced

    Raises:
        YtdlpError: If yt-dlp exits with an error
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    cmd = [
        settings.ytdlp_path,
        "--write-auto-subs",
        "--sub-langs", language,
        "--skip-download",
        "-o", str(output_dir / f"{stem}.%(ext)s"),
        url
    ]

    result = await run_command(cmd)

    if not result.ok:
        raise YtdlpError(f"Caption download failed: {result.stderr.strip()[-500:]}")

    return find_caption_file(output_dir, stem)


def find_caption_file(directory: Path, stem: str) -> Optional[Path]:
    """Find a srt/vtt file named <stem>.* in directory."""
    for candidate in sorted(Path(directory).iterdir()):
        if not candidate.name.startswith(f"{stem}."):
            continue
        if candidate.suffix.lstrip(".").lower() in CAPTION_EXTENSIONS:
            return candidate
    return None
