"""Tests for subtitle formatting and parsing."""
import pytest

from autoshorts.pipeline.models import TranscriptCue
from autoshorts.pipeline.subtitles import (
    clip_cues,
    cues_from_segments,
    format_srt_timestamp,
    parse_subtitle_text,
    render_srt,
)


VTT_SAMPLE = """WEBVTT
Kind: captions
Language: en

00:00:58.000 --> 00:01:01.500 align:start position:0%
before <c>the</c> window

00:01:01.500 --> 00:01:04.000
inside one

00:01:03.000 --> 00:01:05.000
inside one

00:01:29.000 --> 00:01:33.000
straddles the end

00:02:00.000 --> 00:02:02.000
after
"""

# yt-dlp --write-auto-subs output: each line rolls up, with a blank-looking
# " " line in the first cue and 10ms transition cues between lines
YOUTUBE_AUTO_VTT = """WEBVTT
Kind: captions
Language: en

00:01:00.000 --> 00:01:02.500 align:start position:0%
 
hello<00:01:00.400><c> there</c><00:01:01.000><c> world</c>

00:01:02.500 --> 00:01:02.510 align:start position:0%
hello there world
 

00:01:02.510 --> 00:01:05.000 align:start position:0%
hello there world
this<00:01:03.000><c> is</c><00:01:04.000><c> fine</c>

00:01:05.000 --> 00:01:05.010 align:start position:0%
this is fine
 
"""


class TestFormatting:
    """Tests for SRT rendering."""

    def test_timestamp(self):
        assert format_srt_timestamp(0) == "00:00:00,000"
        assert format_srt_timestamp(3723.456) == "01:02:03,456"
        assert format_srt_timestamp(59.9999) == "00:01:00,000"

    def test_render_numbering(self):
        srt = render_srt([
            TranscriptCue(0.0, 1.5, "hello"),
            TranscriptCue(1.5, 3.0, "world"),
        ])
        assert srt == (
            "1\n00:00:00,000 --> 00:00:01,500\nhello\n"
            "\n"
            "2\n00:00:01,500 --> 00:00:03,000\nworld\n"
        )


class TestCuesFromSegments:
    """Tests for speech-to-text segment conversion."""

    def test_strips_and_drops_blank(self):
        cues = cues_from_segments([
            {"start": 0.0, "end": 1.0, "text": "  hi  "},
            {"start": 1.0, "end": 2.0, "text": "   "},
        ])
        assert cues == [TranscriptCue(0.0, 1.0, "hi")]

    def test_overlaps_are_removed(self):
        cues = cues_from_segments([
            {"start": 0.0, "end": 2.0, "text": "a"},
            {"start": 1.5, "end": 3.0, "text": "b"},
            {"start": 2.5, "end": 2.6, "text": "c"},
        ])
        assert [(c.start, c.end) for c in cues] == [(0.0, 2.0), (2.0, 3.0), (3.0, 3.0)]
        for prev, cur in zip(cues, cues[1:]):
            assert cur.start >= prev.end


class TestParseSubtitles:
    """Tests for SRT/VTT parsing."""

    def test_vtt(self):
        cues = parse_subtitle_text(VTT_SAMPLE)
        assert cues[0] == TranscriptCue(58.0, 61.5, "before the window")
        # rolling duplicate merged
        assert cues[1] == TranscriptCue(61.5, 65.0, "inside one")
        assert len(cues) == 4

    def test_srt(self):
        srt = "1\n00:00:01,000 --> 00:00:02,500\nfirst\nline\n\n2\n00:00:03,000 --> 00:00:04,000\nsecond\n"
        cues = parse_subtitle_text(srt)
        assert cues == [
            TranscriptCue(1.0, 2.5, "first line"),
            TranscriptCue(3.0, 4.0, "second"),
        ]

    def test_garbage(self):
        assert parse_subtitle_text("not subtitles at all") == []


class TestClipCues:
    """Tests for cutting captions down to a window."""

    def test_window(self):
        cues = clip_cues(parse_subtitle_text(VTT_SAMPLE), 60, 90)
        assert [c.text for c in cues] == ["before the window", "inside one", "straddles the end"]
        assert cues[0].start == 0.0
        assert cues[0].end == 1.5
        assert cues[-1].end == 30.0

    def test_youtube_rolling_captions(self):
        cues = parse_subtitle_text(YOUTUBE_AUTO_VTT)

        assert [c.text for c in cues] == ["hello there world", "this is fine"]
        assert cues[0].start == pytest.approx(60.0)
        assert cues[0].end == pytest.approx(62.51)
        assert cues[1].start == pytest.approx(62.51)
        assert cues[1].end == pytest.approx(65.01)

    def test_youtube_rolling_captions_in_window(self):
        cues = clip_cues(parse_subtitle_text(YOUTUBE_AUTO_VTT), 60, 90)

        assert [c.text for c in cues] == ["hello there world", "this is fine"]
        assert cues[0].start == pytest.approx(0.0)
        assert cues[1].end == pytest.approx(5.01)
        for cue in cues:
            assert cue.end - cue.start >= 0.05

    def test_flash_cue_with_new_text_is_dropped(self):
        vtt = (
            "WEBVTT\n\n"
            "00:00:01.000 --> 00:00:03.000\nfirst\n\n"
            "00:00:03.000 --> 00:00:03.010\nblink\n\n"
            "00:00:03.010 --> 00:00:05.000\nsecond\n"
        )
        assert [c.text for c in parse_subtitle_text(vtt)] == ["first", "second"]
