"""Speech-to-text through the OpenAI audio transcription API."""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


class SpeechToTextError(RuntimeError):
    """Raised when the transcription service fails or returns no segments."""


def _field(segment: Any, name: str) -> Any:
    if isinstance(segment, dict):
        return segment[name]
    return getattr(segment, name)


class OpenAISpeechClient:
    """Time-aligned transcription of a local audio file."""

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-1",
        timeout: float = 120.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self._client = client or AsyncOpenAI(api_key=api_key, timeout=timeout)

    async def transcribe(self, audio_path: str | Path) -> List[Dict[str, Any]]:
        """
        Transcribe audio into {start, end, text} segments.

        Raises:
            SpeechToTextError: On API errors or a response without segments
        """
        try:
            with open(audio_path, "rb") as f:
                response = await self._client.audio.transcriptions.create(
                    file=f,
                    model=self.model,
                    response_format="verbose_json",
                    timestamp_granularities=["segment"],
                )
        except openai.OpenAIError as e:
            raise SpeechToTextError(f"Transcription request failed: {e}") from e

        segments = getattr(response, "segments", None)
        if not segments:
            raise SpeechToTextError("Transcription response contained no segments")

        try:
            return [
                {
                    "start": float(_field(seg, "start")),
                    "end": float(_field(seg, "end")),
                    "text": str(_field(seg, "text")),
                }
                for seg in segments
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SpeechToTextError(f"Malformed transcription segment: {e}") from e

    async def list_models(self, limit: int = 10) -> List[str]:
        """
        Model ids visible to the API key, as a connectivity check.

        Raises:
            SpeechToTextError: If the API cannot be reached or rejects the key
        """
        try:
            page = await self._client.models.list()
        except openai.OpenAIError as e:
            raise SpeechToTextError(f"OpenAI API check failed: {e}") from e
        return [model.id for model in page.data[:limit]]
