"""Kinematic sequence scoring and session-level aggregation of swing results."""

from __future__ import annotations

import statistics
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

IDEAL_SEQUENCE: tuple[str, ...] = (
    "rear_leg",
    "lead_leg",
    "torso",
    "bottom_arm",
    "top_arm",
    "bat",
)

SEGMENT_DISPLAY_NAMES = {
    "rear_leg": "Rear Leg",
    "lead_leg": "Lead Leg",
    "torso": "Torso",
    "bottom_arm": "Bottom Arm",
    "top_arm": "Top Arm",
    "bat": "Bat",
}

FOUR_B_KEYS = ("brain", "body", "bat", "ball")


@dataclass
class SequenceError:
    segment: str
    expected_position: int
    actual_position: int
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segment": self.segment,
            "expectedPosition": self.expected_position,
            "actualPosition": self.actual_position,
            "description": self.description,
        }


@dataclass
class SequenceAnalysis:
    actual_order: List[str]
    sequence_match: bool
    errors: List[SequenceError]
    order_score: float
    timing_score: float
    sequence_score: int
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actualOrder": self.actual_order,
            "idealOrder": list(IDEAL_SEQUENCE),
            "sequenceMatch": self.sequence_match,
            "sequenceErrors": [error.to_dict() for error in self.errors],
            "orderScore": round(self.order_score, 1),
            "timingScore": round(self.timing_score, 1),
            "sequenceScore": self.sequence_score,
            "summary": self.summary,
        }


@dataclass
class SwingResult:
    """Scoring-engine output for one swing plus its sequence analysis."""

    swing_id: str
    brain: float
    body: float
    bat: float
    ball: float
    motor_profile: Optional[str] = None
    leaks: List[str] = field(default_factory=list)
    sequence: Optional[SequenceAnalysis] = None


@dataclass
class SessionAggregate:
    brain: float
    body: float
    bat: float
    ball: float
    composite: float
    motor_profile: Optional[str]
    leaks: List[str]
    sequence_score: int
    sequence_match: bool
    in_sequence_rate: float
    sequence_order: List[str]
    sequence_errors: List[Dict[str, Any]]
    swing_count: int


def count_inversions(order: Sequence[str]) -> int:
    """Kendall tau distance between ``order`` and the ideal sequence."""
    positions = [IDEAL_SEQUENCE.index(segment) for segment in order]
    inversions = 0
    for i in range(len(positions)):
        for j in range(i + 1, len(positions)):
            if positions[i] > positions[j]:
                inversions += 1
    return inversions


def timing_score(peak_times: Sequence[float]) -> float:
    """Score the evenness of consecutive peak intervals (100 = perfectly even)."""
    intervals = [b - a for a, b in zip(peak_times, peak_times[1:])]
    if not intervals:
        return 100.0
    mean = sum(intervals) / len(intervals)
    if mean <= 0:
        return 100.0
    # population standard deviation
    cv = statistics.pstdev(intervals) / mean
    return max(0.0, 100.0 - cv * 50.0)


def analyze_sequence(segment_peaks: Dict[str, float]) -> SequenceAnalysis:
    """Score one swing's kinematic sequence from per-segment peak times in ms.

    Raises:
        ValueError: when a segment of the ideal sequence has no peak time
    """
    missing = [segment for segment in IDEAL_SEQUENCE if segment not in segment_peaks]
    if missing:
        raise ValueError(f"Missing segment peaks: {', '.join(missing)}")

    # stable sort keeps ideal order on ties
    actual_order = sorted(IDEAL_SEQUENCE, key=lambda segment: segment_peaks[segment])

    errors: List[SequenceError] = []
    for ideal_index, segment in enumerate(IDEAL_SEQUENCE):
        actual_index = actual_order.index(segment)
        if actual_index != ideal_index:
            direction = "early" if actual_index < ideal_index else "late"
            errors.append(
                SequenceError(
                    segment=segment,
                    expected_position=ideal_index + 1,
                    actual_position=actual_index + 1,
                    description=(
                        f"{SEGMENT_DISPLAY_NAMES[segment]} fired {direction} "
                        f"(position {actual_index + 1} instead of {ideal_index + 1})"
                    ),
                )
            )

    n = len(actual_order)
    max_inversions = n * (n - 1) // 2
    inversions = count_inversions(actual_order)
    order_score = (1 - inversions / max_inversions) * 100 if max_inversions else 100.0
    timing = timing_score([segment_peaks[segment] for segment in actual_order])
    score = round(order_score * 0.7 + timing * 0.3)

    return SequenceAnalysis(
        actual_order=list(actual_order),
        sequence_match=not errors,
        errors=errors,
        order_score=order_score,
        timing_score=timing,
        sequence_score=score,
        summary=_summarize(actual_order, errors),
    )


def _summarize(actual_order: Sequence[str], errors: Sequence[SequenceError]) -> str:
    if not errors:
        chain = " → ".join(SEGMENT_DISPLAY_NAMES[s] for s in actual_order)
        return f"Body-to-Bat sequence: in sequence ({chain})."

    early = [SEGMENT_DISPLAY_NAMES[e.segment] for e in errors if e.actual_position < e.expected_position]
    late = [SEGMENT_DISPLAY_NAMES[e.segment] for e in errors if e.actual_position > e.expected_position]
    parts = []
    if early:
        parts.append(f"{', '.join(early)} fired early")
    if late:
        parts.append(f"{', '.join(late)} fired late")
    return f"Body-to-Bat sequence: out of sequence. {'. '.join(parts)}."


def most_common_label(labels: Iterable[Optional[str]]) -> Optional[str]:
    """Most frequent non-empty label; ties go to the first seen."""
    counts = Counter(label for label in labels if label)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def rank_leaks(leak_lists: Iterable[Iterable[str]]) -> List[str]:
    """Unique leaks ordered by frequency, then by first appearance."""
    counts: Counter[str] = Counter()
    first_seen: Dict[str, int] = {}
    for leaks in leak_lists:
        for leak in leaks:
            if not leak:
                continue
            counts[leak] += 1
            first_seen.setdefault(leak, len(first_seen))
    return sorted(counts, key=lambda leak: (-counts[leak], first_seen[leak]))


def aggregate_session(results: Sequence[SwingResult]) -> SessionAggregate:
    """Combine per-swing results into session-level scores.

    Raises:
        ValueError: when ``results`` is empty
    """
    if not results:
        raise ValueError("Cannot aggregate a session without swings")

    count = len(results)
    means = {
        key: round(sum(getattr(result, key) for result in results) / count, 1)
        for key in FOUR_B_KEYS
    }
    composite = round(sum(means.values()) / len(FOUR_B_KEYS), 1)

    sequences = [result.sequence for result in results if result.sequence is not None]
    in_sequence = sum(1 for sequence in sequences if sequence.sequence_match)
    sequence_score = (
        round(sum(sequence.sequence_score for sequence in sequences) / len(sequences))
        if sequences
        else 0
    )

    return SessionAggregate(
        brain=means["brain"],
        body=means["body"],
        bat=means["bat"],
        ball=means["ball"],
        composite=composite,
        motor_profile=most_common_label(result.motor_profile for result in results),
        leaks=rank_leaks(result.leaks for result in results),
        sequence_score=sequence_score,
        sequence_match=bool(sequences) and in_sequence == len(sequences),
        in_sequence_rate=(in_sequence / len(sequences) * 100) if sequences else 0.0,
        sequence_order=sequences[0].actual_order if sequences else list(IDEAL_SEQUENCE),
        # first two errors of each swing
        sequence_errors=[
            error.to_dict() for sequence in sequences for error in sequence.errors[:2]
        ],
        swing_count=count,
    )


__all__ = [
    "FOUR_B_KEYS",
    "IDEAL_SEQUENCE",
    "SEGMENT_DISPLAY_NAMES",
    "SequenceAnalysis",
    "SequenceError",
    "SessionAggregate",
    "SwingResult",
    "aggregate_session",
    "analyze_sequence",
    "count_inversions",
    "most_common_label",
    "rank_leaks",
    "timing_score",
]
