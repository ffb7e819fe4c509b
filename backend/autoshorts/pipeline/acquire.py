"""Segment acquisition via yt-dlp section downloads."""
import logging
from pathlib import Path
from typing import Awaitable, Callable

from autoshorts.utils.ytdlp import YtdlpError, download_section

from .config import PipelineConfig
from .errors import AcquisitionError
from .models import HighlightWindow, MediaSegment, VideoReference
from .artifacts import WindowArtifacts

logger = logging.getLogger(__name__)

SectionDownloader = Callable[[str, Path, int, int], Awaitable[Path]]


class SegmentAcquirer:
    """Downloads exactly one [start, end) slice per call."""

    def __init__(
        self,
        config: PipelineConfig,
        downloader: SectionDownloader = download_section,
    ):
        self.config = config
        self._download = downloader

    async def fetch(self, url: str, start: int, end: int, output_path: Path) -> Path:
        """
        Download [start, end) of url into output_path.

        Raises:
            AcquisitionError: If the download fails for any reason
        """
        try:
            path = await self._download(url, Path(output_path), start, end)
        except (YtdlpError, OSError) as e:
            raise AcquisitionError(f"Could not download {url} [{start}-{end}]: {e}") from e

        if not Path(path).exists():
            raise AcquisitionError(f"Download of {url} [{start}-{end}] produced no file")
        return Path(path)

    async def acquire(self, reference: VideoReference, window: HighlightWindow) -> MediaSegment:
        """Download the window's slice of the source video."""
        artifacts = WindowArtifacts(self.config.clips_dir, reference.video_id, window.start)
        logger.info(f"Acquiring {reference.video_id} [{window.start}-{window.end}]")

        path = await self.fetch(reference.url, window.start, window.end, artifacts.segment)
        return MediaSegment(
            video_id=reference.video_id,
            start=window.start,
            end=window.end,
            path=path,
        )
