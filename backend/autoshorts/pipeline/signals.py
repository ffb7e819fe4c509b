"""Candidate highlight signals.

Two strategies produce candidates: timestamps mentioned in comments
(points scored by mention count) and above-baseline audience retention
(ranges scored by relative retention). Scores are only comparable within
one strategy's output.
"""
import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

# m:ss or mm:ss with zero-padded seconds up to 59
TIMESTAMP_PATTERN = re.compile(r"\b(\d{1,2}):([0-5]\d)\b", re.ASCII)

# Relative retention of 1.0 means the channel baseline
RETENTION_BASELINE = 1.0


@dataclass(frozen=True)
class CandidatePoint:
    """A single moment, e.g. a timestamp people mention in comments."""
    time_sec: int
    strength: float


@dataclass(frozen=True)
class CandidateRange:
    """An interval, e.g. a stretch of above-baseline retention."""
    start_sec: int
    end_sec: int
    strength: float


CandidateSignal = Union[CandidatePoint, CandidateRange]


def count_comment_timestamps(comments: Iterable[str]) -> Dict[int, int]:
    """
    Histogram of timestamp mentions keyed by exact second.

    Nearby seconds are kept as distinct keys. Keys appear in the order
    they were first seen.
    """
    freq: Dict[int, int] = {}
    for text in comments:
        if not text:
            continue
        for minutes, seconds in TIMESTAMP_PATTERN.findall(text):
            t = int(minutes) * 60 + int(seconds)
            freq[t] = freq.get(t, 0) + 1
    return freq


def mine_comment_timestamps(comments: Iterable[str]) -> List[CandidatePoint]:
    """
    Rank mentioned timestamps by how often they are mentioned.

    Ties keep first-seen order.
    """
    freq = count_comment_timestamps(comments)
    ranked = sorted(freq.items(), key=lambda item: item[1], reverse=True)
    logger.debug(f"Found {len(ranked)} distinct timestamps in comments")
    return [CandidatePoint(time_sec=t, strength=float(count)) for t, count in ranked]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def extract_retention_ranges(
    duration_sec: int,
    samples: Sequence[Tuple[float, float]],
) -> List[CandidateRange]:
    """
    Turn a retention curve into ranges where viewers stay above baseline.

    Each sample i with retention above 1.0 covers
    [ratio[i] * duration, ratio[i + 1] * duration), with 1.0 as the ratio
    after the last sample. Ranges are ranked by retention, highest first,
    with equal retention keeping curve order.

    Args:
        duration_sec: Video duration in seconds
        samples: (elapsed_ratio, relative_retention) pairs in curve order

    Returns:
        Ranked candidate ranges; empty if nothing beats the baseline
    """
    ranges: List[CandidateRange] = []
    for i, (ratio, retention) in enumerate(samples):
        next_ratio = samples[i + 1][0] if i < len(samples) - 1 else 1.0
        if retention > RETENTION_BASELINE:
            ranges.append(CandidateRange(
                start_sec=_round_half_up(ratio * duration_sec),
                end_sec=_round_half_up(next_ratio * duration_sec),
                strength=float(retention),
            ))

    ranges.sort(key=lambda r: r.strength, reverse=True)
    logger.debug(f"{len(ranges)} of {len(samples)} retention samples above baseline")
    return ranges
