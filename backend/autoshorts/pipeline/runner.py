"""Clip pipeline runner.

Runs each highlight window through acquire, transcribe, compose and
finalize. Windows are independent: one failing never affects another,
and the manifest keeps the order the windows were selected in.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .acquire import SegmentAcquirer
from .artifacts import WindowArtifacts
from .burn import SubtitleBurner
from .compose import BackgroundCompositor
from .config import PipelineConfig
from .errors import AcquisitionError, BurnError
from .models import ClipResult, CompositionSpec, HighlightWindow, VideoReference
from .transcribe import Transcriber

logger = logging.getLogger(__name__)


class WindowState(str, enum.Enum):
    """Processing state of a single window."""
    SELECTED = "selected"
    ACQUIRED = "acquired"
    TRANSCRIBED = "transcribed"
    COMPOSED = "composed"
    FINALIZED = "finalized"
    FAILED = "failed"


@dataclass
class WindowOutcome:
    """Where a window ended up, and what it produced."""
    window: HighlightWindow
    state: WindowState = WindowState.SELECTED
    history: List[WindowState] = field(default_factory=lambda: [WindowState.SELECTED])
    result: Optional[ClipResult] = None
    error: Optional[str] = None
    transcribed: bool = False
    composited: bool = False

    @property
    def ok(self) -> bool:
        return self.state == WindowState.FINALIZED

    def advance(self, state: WindowState) -> None:
        self.state = state
        self.history.append(state)

    def fail(self, error: Exception) -> None:
        self.error = str(error)
        self.advance(WindowState.FAILED)


@dataclass
class PipelineResult:
    """Outcomes for every window, in selection order."""
    reference: VideoReference
    outcomes: List[WindowOutcome]

    @property
    def clips(self) -> List[ClipResult]:
        """Manifest of finalized clips."""
        return [o.result for o in self.outcomes if o.ok and o.result is not None]

    def to_manifest(self) -> List[dict]:
        return [clip.to_dict() for clip in self.clips]


class ClipPipeline:
    """Per-window processing with bounded fan-out."""

    def __init__(
        self,
        config: PipelineConfig,
        acquirer: Optional[SegmentAcquirer] = None,
        transcriber: Optional[Transcriber] = None,
        compositor: Optional[BackgroundCompositor] = None,
        burner: Optional[SubtitleBurner] = None,
    ):
        self.config = config
        self.acquirer = acquirer or SegmentAcquirer(config)
        self.transcriber = transcriber or Transcriber(config)
        self.compositor = compositor or BackgroundCompositor(config, self.acquirer)
        self.burner = burner or SubtitleBurner()
        logger.debug(f"Pipeline config: {config.to_dict()}")

    def clip_url(self, path: Path) -> str:
        return f"{self.config.clips_url_prefix.rstrip('/')}/{Path(path).name}"

    async def process_window(
        self,
        reference: VideoReference,
        window: HighlightWindow,
        spec: CompositionSpec,
    ) -> WindowOutcome:
        """
        Run one window to FINALIZED or FAILED.

        If the task is cancelled, files the window wrote are removed and
        the cancellation propagates.
        """
        outcome = WindowOutcome(window=window)
        artifacts = WindowArtifacts(self.config.clips_dir, reference.video_id, window.start)
        tag = f"{artifacts.stem} [{window.start}-{window.end}]"

        try:
            segment = await self.acquirer.acquire(reference, window)
            outcome.advance(WindowState.ACQUIRED)

            transcript = await self.transcriber.transcribe(reference, segment)
            if transcript is not None:
                outcome.transcribed = True
                outcome.advance(WindowState.TRANSCRIBED)

            carry_forward = await self.compositor.compose(segment, spec)
            if carry_forward != segment.path:
                outcome.composited = True
                outcome.advance(WindowState.COMPOSED)

            final_path = await self.burner.finalize(
                carry_forward, transcript, spec, artifacts.final
            )
            outcome.result = ClipResult(
                url=self.clip_url(final_path),
                start=window.start,
                end=window.end,
                path=final_path,
            )
            outcome.advance(WindowState.FINALIZED)
            logger.info(
                f"Finalized {tag} (subtitles={outcome.transcribed}, background={outcome.composited})"
            )

        except (AcquisitionError, BurnError) as e:
            logger.error(f"Window {tag} failed: {e}")
            outcome.fail(e)
        except asyncio.CancelledError:
            logger.info(f"Window {tag} cancelled; discarding artifacts")
            artifacts.discard()
            raise
        except Exception as e:
            logger.exception(f"Unexpected error in window {tag}")
            outcome.fail(e)

        return outcome

    async def run(
        self,
        reference: VideoReference,
        windows: Sequence[HighlightWindow],
        spec: CompositionSpec,
    ) -> PipelineResult:
        """
        Process all windows, at most max_concurrent_windows at a time.

        Results are collected positionally so the manifest follows the
        order of windows, not the order they finish in.
        """
        logger.info(f"Processing {len(windows)} windows for {reference.video_id}")
        semaphore = asyncio.Semaphore(max(1, self.config.max_concurrent_windows))

        async def bounded(window: HighlightWindow) -> WindowOutcome:
            async with semaphore:
                return await self.process_window(reference, window, spec)

        outcomes = await asyncio.gather(*(bounded(w) for w in windows))

        result = PipelineResult(reference=reference, outcomes=list(outcomes))
        failed = sum(1 for o in outcomes if not o.ok)
        logger.info(f"Pipeline done: {len(result.clips)} clips, {failed} failed windows")
        return result
