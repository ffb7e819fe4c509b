"""Final render: burned-in subtitles and an optional drawn caption."""
import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from autoshorts.utils.ffmpeg import (
    FFmpegError,
    apply_video_filters,
    build_caption_filter,
    build_subtitles_filter,
    copy_video,
)

from .errors import BurnError
from .models import CompositionSpec, Transcript

logger = logging.getLogger(__name__)

Renderer = Callable[[Path, Path, List[str]], Awaitable[Path]]
Copier = Callable[[Path, Path], Path]


def build_finalize_filters(
    transcript: Optional[Transcript],
    spec: CompositionSpec,
) -> List[str]:
    """Filters to burn into the final clip; empty when there is nothing to add."""
    filters: List[str] = []

    if transcript is not None:
        if Path(transcript.subtitle_path).exists():
            filters.append(build_subtitles_filter(transcript.subtitle_path))
        else:
            logger.warning(f"Subtitle file not found: {transcript.subtitle_path}")

    if spec.caption_text and spec.caption_text.strip():
        filters.append(build_caption_filter(
            spec.caption_text,
            font_family=spec.font_family,
            font_size=spec.font_size,
            color=spec.color,
            outline=spec.outline,
            position=spec.position,
        ))

    return filters


class SubtitleBurner:
    """Renders the final artifact from the carry-forward artifact."""

    def __init__(
        self,
        renderer: Renderer = apply_video_filters,
        copier: Copier = copy_video,
    ):
        self._render = renderer
        self._copy = copier

    async def finalize(
        self,
        carry_forward: Path,
        transcript: Optional[Transcript],
        spec: CompositionSpec,
        output_path: Path,
    ) -> Path:
        """
        Produce the final clip at output_path.

        With nothing to burn in, the carry-forward artifact is copied
        unchanged.

        Raises:
            BurnError: If rendering or copying fails
        """
        filters = build_finalize_filters(transcript, spec)

        try:
            if not filters:
                return self._copy(carry_forward, output_path)
            return await self._render(carry_forward, output_path, filters)
        except (FFmpegError, OSError) as e:
            raise BurnError(f"Final render of {Path(output_path).name} failed: {e}") from e
