"""Background compositing stage.

Stacks the clip under a random slice of a gameplay video. Any failure
here leaves the raw segment as the carry-forward artifact.
"""
import logging
import random
from pathlib import Path
from typing import Awaitable, Callable, Optional

from autoshorts.utils.ffmpeg import FFmpegError, overlay_on_background

from .acquire import SegmentAcquirer
from .artifacts import WindowArtifacts
from .config import PipelineConfig
from .errors import AcquisitionError, CompositionError
from .models import CompositionSpec, MediaSegment

logger = logging.getLogger(__name__)

Overlayer = Callable[[Path, Path, Path], Awaitable[Path]]


class BackgroundCompositor:
    """Optional background overlay for a segment."""

    def __init__(
        self,
        config: PipelineConfig,
        acquirer: SegmentAcquirer,
        overlayer: Overlayer = overlay_on_background,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.acquirer = acquirer
        self._overlay = overlayer
        self._rng = rng or random.Random()

    def pick_offset(self) -> int:
        """Random background start in [0, background_max_offset)."""
        return self._rng.randrange(max(1, self.config.background_max_offset))

    async def compose(self, segment: MediaSegment, spec: CompositionSpec) -> Path:
        """
        Return the carry-forward artifact for the segment.

        That is the overlay when a known background theme was requested
        and compositing worked, otherwise the segment itself.
        """
        background_url = self.config.background_url(spec.background)
        if background_url is None:
            if spec.background:
                logger.warning(f"Unknown background theme '{spec.background}', skipping overlay")
            return segment.path

        try:
            return await self._compose(segment, background_url)
        except (AcquisitionError, CompositionError) as e:
            logger.warning(f"Overlay failed; using raw clip: {e}")
            return segment.path
        except Exception as e:
            logger.warning(f"Unexpected overlay error; using raw clip: {e}", exc_info=True)
            return segment.path

    async def _compose(self, segment: MediaSegment, background_url: str) -> Path:
        artifacts = WindowArtifacts(self.config.clips_dir, segment.video_id, segment.start)
        offset = self.pick_offset()

        background_path = await self.acquirer.fetch(
            background_url,
            offset,
            offset + self.config.background_clip_seconds,
            artifacts.background,
        )

        try:
            return await self._overlay(background_path, segment.path, artifacts.overlay)
        except (FFmpegError, OSError) as e:
            raise CompositionError(str(e)) from e
