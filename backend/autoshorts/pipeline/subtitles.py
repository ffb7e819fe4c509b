"""SRT/WebVTT formatting and parsing."""
import re
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Tuple

from .models import TranscriptCue

_TIMING_RE = re.compile(
    r"(?P<start>(?:\d+:)?\d{1,2}:\d{2}[.,]\d{1,3})\s*-->\s*(?P<end>(?:\d+:)?\d{1,2}:\d{2}[.,]\d{1,3})"
)
_TAG_RE = re.compile(r"<[^>]+>")

# Rolling captions insert ~10ms cues that only flash the previous line
MIN_CUE_SECONDS = 0.05


def format_srt_timestamp(seconds: float) -> str:
    """Format seconds as HH:MM:SS,mmm."""
    total_ms = max(0, int(round(seconds * 1000)))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, ms = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{ms:03d}"


def parse_timestamp(value: str) -> float:
    """Parse HH:MM:SS,mmm / MM:SS.mmm into seconds."""
    parts = value.replace(",", ".").split(":")
    seconds = float(parts[-1])
    minutes = int(parts[-2]) if len(parts) >= 2 else 0
    hours = int(parts[-3]) if len(parts) >= 3 else 0
    return hours * 3600 + minutes * 60 + seconds


def normalize_cues(cues: Iterable[TranscriptCue]) -> List[TranscriptCue]:
    """
    Make cue boundaries non-overlapping and non-decreasing.

    A cue starting before the previous one ended is pushed to the
    previous end. Blank cues are dropped.
    """
    normalized: List[TranscriptCue] = []
    previous_end = 0.0
    for cue in cues:
        text = cue.text.strip()
        if not text:
            continue
        start = max(cue.start, previous_end)
        end = max(cue.end, start)
        normalized.append(TranscriptCue(start=start, end=end, text=text))
        previous_end = end
    return normalized


def cues_from_segments(segments: Iterable[Mapping]) -> List[TranscriptCue]:
    """Build cues from speech-to-text {start, end, text} segments."""
    return normalize_cues(
        TranscriptCue(
            start=float(seg["start"]),
            end=float(seg["end"]),
            text=str(seg.get("text") or ""),
        )
        for seg in segments
    )


def render_srt(cues: Iterable[TranscriptCue]) -> str:
    """Render cues as SRT with 1-based numbering."""
    blocks = []
    for i, cue in enumerate(cues, start=1):
        blocks.append(
            f"{i}\n"
            f"{format_srt_timestamp(cue.start)} --> {format_srt_timestamp(cue.end)}\n"
            f"{cue.text}\n"
        )
    return "\n".join(blocks)


def write_srt(cues: List[TranscriptCue], path: Path) -> Path:
    path = Path(path)
    path.write_text(render_srt(cues), encoding="utf-8")
    return path


def _carried_over(lines: List[str], previous: List[str]) -> int:
    """Count leading lines that repeat the tail of the previous cue."""
    for k in range(min(len(lines), len(previous)), 0, -1):
        if lines[:k] == previous[-k:]:
            return k
    return 0


def _read_cue_blocks(content: str) -> List[Tuple[float, float, List[str]]]:
    """
    Split subtitle content into (start, end, lines) blocks.

    A block starts at each timing line and ends at the next empty line.
    Whitespace-only lines do not end a block, since rolling WebVTT
    captions put one between the timing line and the text.
    """
    blocks: List[Tuple[float, float, List[str]]] = []
    lines: Optional[List[str]] = None
    for raw in content.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        match = _TIMING_RE.search(raw)
        if match:
            lines = []
            blocks.append((
                parse_timestamp(match.group("start")),
                parse_timestamp(match.group("end")),
                lines,
            ))
        elif lines is None:
            continue
        elif not raw:
            lines = None
        else:
            text = _TAG_RE.sub("", raw).strip()
            if text:
                lines.append(text)
    return blocks


def parse_subtitle_text(content: str) -> List[TranscriptCue]:
    """
    Parse SRT or WebVTT content into cues.

    Inline markup is stripped. Rolling auto-captions repeat the previous
    cue's lines above the new one; only the new lines are kept, and a
    cue with nothing new extends the previous cue instead. Cues shorter
    than MIN_CUE_SECONDS are dropped.
    """
    cues: List[TranscriptCue] = []
    previous: List[str] = []
    for start, end, lines in _read_cue_blocks(content):
        if not lines:
            continue
        fresh = lines[_carried_over(lines, previous):]
        previous = lines
        text = " ".join(fresh).strip()

        if cues and (not text or cues[-1].text == text):
            last = cues[-1]
            cues[-1] = TranscriptCue(start=last.start, end=max(end, last.end), text=last.text)
            continue
        if not text:
            continue
        cues.append(TranscriptCue(start=start, end=end, text=text))

    return [cue for cue in cues if cue.end - cue.start >= MIN_CUE_SECONDS]


def clip_cues(cues: Iterable[TranscriptCue], start: float, end: float) -> List[TranscriptCue]:
    """Keep cues overlapping [start, end) and shift them to start at 0."""
    clipped: List[TranscriptCue] = []
    for cue in cues:
        if cue.end <= start or cue.start >= end:
            continue
        clipped.append(TranscriptCue(
            start=max(cue.start, start) - start,
            end=min(cue.end, end) - start,
            text=cue.text,
        ))
    return clipped
