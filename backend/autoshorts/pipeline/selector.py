"""Window selection.

Turns ranked candidate signals into fixed (start, end) windows.
"""
import logging
import math
from typing import List, Optional, Sequence

from .config import PipelineConfig
from .models import HighlightWindow
from .signals import CandidatePoint, CandidateRange, CandidateSignal

logger = logging.getLogger(__name__)


def window_for_point(point: CandidatePoint, pad_seconds: int, clip_seconds: int) -> tuple:
    """Start a little before the mentioned moment and run a fixed length."""
    start = max(int(point.time_sec) - pad_seconds, 0)
    return start, start + clip_seconds


def window_for_range(candidate: CandidateRange) -> tuple:
    """Use the range's own bounds, floored to whole seconds."""
    start = math.floor(candidate.start_sec)
    return start, start + math.floor(candidate.end_sec - candidate.start_sec)


def select_windows(
    candidates: Sequence[CandidateSignal],
    config: PipelineConfig,
    duration_sec: Optional[int] = None,
) -> List[HighlightWindow]:
    """
    Derive up to top_k windows from candidates already ranked by strength.

    Ends are clamped to the video duration when it is known (non-zero).
    Windows that end up empty after clamping are skipped and do not count
    towards top_k. Overlapping windows, including ones sharing a start,
    are passed through unchanged.

    Args:
        candidates: Ranked points or ranges from one strategy
        config: Pipeline configuration
        duration_sec: Video duration, 0 or None when unknown

    Returns:
        Windows in candidate order
    """
    windows: List[HighlightWindow] = []

    for candidate in candidates:
        if len(windows) >= config.top_k:
            break

        if isinstance(candidate, CandidatePoint):
            start, end = window_for_point(candidate, config.pad_seconds, config.clip_seconds)
        elif isinstance(candidate, CandidateRange):
            start, end = window_for_range(candidate)
        else:
            raise TypeError(f"Unsupported candidate type: {type(candidate).__name__}")

        if duration_sec:
            end = min(end, duration_sec)

        if end <= start:
            logger.warning(f"Empty window for candidate {candidate}, skipping")
            continue

        windows.append(HighlightWindow(start=start, end=end))

    logger.info(f"Selected {len(windows)} windows from {len(candidates)} candidates")
    return windows
