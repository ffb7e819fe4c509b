"""Tests for the transcription stage and its fallback."""
import asyncio
from pathlib import Path

import pytest

from autoshorts.pipeline.config import PipelineConfig
from autoshorts.pipeline.models import MediaSegment, VideoReference
from autoshorts.pipeline.transcribe import Transcriber
from autoshorts.services.speech_service import SpeechToTextError
from autoshorts.utils.ytdlp import YtdlpError


REFERENCE = VideoReference(video_id="dQw4w9WgXcQ", url="https://youtu.be/dQw4w9WgXcQ")

AUTO_CAPTIONS = """WEBVTT

00:00:10.000 --> 00:00:12.000
too early

00:01:02.000 --> 00:01:04.000
in the window
"""


class _FakeSpeechClient:
    def __init__(self, segments=None, error=None, delay=0.0):
        self._segments = segments
        self._error = error
        self._delay = delay
        self.calls = []

    async def transcribe(self, audio_path):
        self.calls.append(audio_path)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error:
            raise self._error
        return self._segments


async def _fake_extract_audio(video_path, output_path):
    Path(output_path).write_bytes(b"RIFF")
    return Path(output_path)


def _caption_fetcher(content=AUTO_CAPTIONS, error=None):
    calls = []

    async def fetch(url, output_dir, stem, language):
        calls.append((url, stem, language))
        if error:
            raise error
        if content is None:
            return None
        path = Path(output_dir) / f"{stem}.{language}.vtt"
        path.write_text(content)
        return path

    fetch.calls = calls
    return fetch


@pytest.fixture
def config(tmp_path):
    return PipelineConfig(clips_dir=tmp_path, transcription_timeout_seconds=1.0)


@pytest.fixture
def segment(tmp_path):
    path = tmp_path / "dQw4w9WgXcQ_60.mp4"
    path.write_bytes(b"video")
    return MediaSegment(video_id="dQw4w9WgXcQ", start=60, end=90, path=path)


@pytest.mark.asyncio
async def test_primary_writes_srt(config, segment, tmp_path):
    speech = _FakeSpeechClient(segments=[
        {"start": 0.0, "end": 1.25, "text": " Hello "},
        {"start": 1.25, "end": 2.5, "text": "there"},
    ])
    fetcher = _caption_fetcher()
    transcriber = Transcriber(config, speech, _fake_extract_audio, fetcher)

    transcript = await transcriber.transcribe(REFERENCE, segment)

    assert transcript.source == "speech"
    assert transcript.subtitle_path == tmp_path / "dQw4w9WgXcQ_60.srt"
    assert transcript.subtitle_path.read_text().startswith(
        "1\n00:00:00,000 --> 00:00:01,250\nHello\n"
    )
    assert speech.calls == [tmp_path / "dQw4w9WgXcQ_60.wav"]
    assert fetcher.calls == []


@pytest.mark.asyncio
async def test_primary_failure_falls_back_to_captions(config, segment):
    speech = _FakeSpeechClient(error=SpeechToTextError("quota exceeded"))
    fetcher = _caption_fetcher()
    transcriber = Transcriber(config, speech, _fake_extract_audio, fetcher)

    transcript = await transcriber.transcribe(REFERENCE, segment)

    assert transcript.source == "auto_captions"
    assert [c.text for c in transcript.cues] == ["in the window"]
    assert transcript.cues[0].start == 2.0
    assert fetcher.calls == [(REFERENCE.url, "dQw4w9WgXcQ_60_yt", "en")]


@pytest.mark.asyncio
async def test_unexpected_primary_error_falls_back(config, segment):
    speech = _FakeSpeechClient(error=RuntimeError("client bug"))
    transcriber = Transcriber(config, speech, _fake_extract_audio, _caption_fetcher())

    transcript = await transcriber.transcribe(REFERENCE, segment)

    assert transcript.source == "auto_captions"
    assert [c.text for c in transcript.cues] == ["in the window"]


@pytest.mark.asyncio
async def test_primary_timeout_falls_back(config, segment):
    config.transcription_timeout_seconds = 0.01
    speech = _FakeSpeechClient(segments=[{"start": 0, "end": 1, "text": "late"}], delay=1.0)
    transcriber = Transcriber(config, speech, _fake_extract_audio, _caption_fetcher())

    transcript = await transcriber.transcribe(REFERENCE, segment)

    assert transcript.source == "auto_captions"


@pytest.mark.asyncio
async def test_malformed_primary_response_falls_back(config, segment):
    speech = _FakeSpeechClient(segments=[{"text": "no timing"}])
    transcriber = Transcriber(config, speech, _fake_extract_audio, _caption_fetcher())

    transcript = await transcriber.transcribe(REFERENCE, segment)

    assert transcript.source == "auto_captions"


@pytest.mark.asyncio
async def test_no_speech_client_uses_captions(config, segment):
    transcriber = Transcriber(config, None, _fake_extract_audio, _caption_fetcher())
    transcript = await transcriber.transcribe(REFERENCE, segment)
    assert transcript.source == "auto_captions"


@pytest.mark.asyncio
async def test_both_failing_gives_none(config, segment):
    speech = _FakeSpeechClient(error=SpeechToTextError("down"))
    transcriber = Transcriber(
        config, speech, _fake_extract_audio, _caption_fetcher(error=YtdlpError("blocked"))
    )
    assert await transcriber.transcribe(REFERENCE, segment) is None


@pytest.mark.asyncio
async def test_no_caption_file_gives_none(config, segment):
    transcriber = Transcriber(config, None, _fake_extract_audio, _caption_fetcher(content=None))
    assert await transcriber.transcribe(REFERENCE, segment) is None


@pytest.mark.asyncio
async def test_captions_outside_window_give_none(config, segment):
    only_early = "WEBVTT\n\n00:00:01.000 --> 00:00:02.000\nintro\n"
    transcriber = Transcriber(config, None, _fake_extract_audio, _caption_fetcher(content=only_early))
    assert await transcriber.transcribe(REFERENCE, segment) is None


@pytest.mark.asyncio
async def test_unexpected_caption_error_gives_none(config, segment):
    transcriber = Transcriber(
        config, None, _fake_extract_audio, _caption_fetcher(error=RuntimeError("parser bug"))
    )
    assert await transcriber.transcribe(REFERENCE, segment) is None
