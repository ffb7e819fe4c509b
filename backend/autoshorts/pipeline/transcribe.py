"""Transcription stage.

Primary: speech-to-text on the segment's audio. Fallback: the source
video's automatic captions, cut down to the window. A window with
neither simply gets no subtitles.
"""
import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

from autoshorts.services.speech_service import SpeechToTextError
from autoshorts.utils.ffmpeg import FFmpegError, extract_audio
from autoshorts.utils.ytdlp import YtdlpError, download_auto_captions

from .artifacts import WindowArtifacts
from .config import PipelineConfig
from .errors import TranscriptionError
from .models import MediaSegment, Transcript, VideoReference
from .subtitles import clip_cues, cues_from_segments, normalize_cues, parse_subtitle_text, write_srt

logger = logging.getLogger(__name__)


class SpeechClient(Protocol):
    async def transcribe(self, audio_path: Path) -> List[Dict[str, Any]]:
        ...


AudioExtractor = Callable[[Path, Path], Awaitable[Path]]
CaptionFetcher = Callable[[str, Path, str, str], Awaitable[Optional[Path]]]

PRIMARY_FAILURES = (
    SpeechToTextError,
    FFmpegError,
    asyncio.TimeoutError,
    OSError,
    KeyError,
    TypeError,
    ValueError,
)


class Transcriber:
    """Produces a subtitle file for a segment, or None."""

    def __init__(
        self,
        config: PipelineConfig,
        speech_client: Optional[SpeechClient] = None,
        audio_extractor: AudioExtractor = extract_audio,
        caption_fetcher: CaptionFetcher = download_auto_captions,
    ):
        self.config = config
        self.speech_client = speech_client
        self._extract_audio = audio_extractor
        self._fetch_captions = caption_fetcher

    async def transcribe(
        self,
        reference: VideoReference,
        segment: MediaSegment,
    ) -> Optional[Transcript]:
        artifacts = WindowArtifacts(self.config.clips_dir, segment.video_id, segment.start)

        if self.speech_client is not None:
            try:
                return await self._transcribe_speech(segment, artifacts)
            except PRIMARY_FAILURES as e:
                logger.warning(f"Speech-to-text failed for {artifacts.stem}: {e}")
            except Exception as e:
                logger.warning(f"Unexpected speech-to-text error for {artifacts.stem}: {e}", exc_info=True)
            logger.info("Falling back to automatic captions")
        else:
            logger.info(f"No speech-to-text client; using automatic captions for {artifacts.stem}")

        try:
            return await self._transcribe_auto_captions(reference, segment, artifacts)
        except TranscriptionError as e:
            logger.warning(f"No transcript for {artifacts.stem}: {e}")
            return None
        except Exception as e:
            logger.warning(f"Unexpected caption error for {artifacts.stem}: {e}", exc_info=True)
            return None

    async def _transcribe_speech(
        self,
        segment: MediaSegment,
        artifacts: WindowArtifacts,
    ) -> Transcript:
        audio_path = await self._extract_audio(segment.path, artifacts.audio)
        raw_segments = await asyncio.wait_for(
            self.speech_client.transcribe(audio_path),
            timeout=self.config.transcription_timeout_seconds,
        )

        cues = cues_from_segments(raw_segments)
        if not cues:
            raise SpeechToTextError("Transcription returned only empty segments")

        write_srt(cues, artifacts.transcript)
        logger.debug(f"Wrote {len(cues)} cues to {artifacts.transcript.name}")
        return Transcript(subtitle_path=artifacts.transcript, source="speech", cues=cues)

    async def _transcribe_auto_captions(
        self,
        reference: VideoReference,
        segment: MediaSegment,
        artifacts: WindowArtifacts,
    ) -> Transcript:
        try:
            caption_path = await self._fetch_captions(
                reference.url,
                self.config.clips_dir,
                artifacts.auto_caption_stem,
                self.config.subtitle_language,
            )
        except YtdlpError as e:
            raise TranscriptionError(f"Automatic caption download failed: {e}") from e

        if caption_path is None or not Path(caption_path).exists():
            raise TranscriptionError("No automatic captions available")

        try:
            content = Path(caption_path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise TranscriptionError(f"Could not read {caption_path}: {e}") from e

        # Captions cover the whole video; keep only this window's part
        cues = normalize_cues(clip_cues(parse_subtitle_text(content), segment.start, segment.end))
        if not cues:
            raise TranscriptionError("Automatic captions have no cues inside the window")

        write_srt(cues, artifacts.transcript)
        return Transcript(subtitle_path=artifacts.transcript, source="auto_captions", cues=cues)
