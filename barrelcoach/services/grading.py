"""20-80 scouting-scale grade labels."""

from __future__ import annotations

# (lower bound, label), highest first
GRADE_THRESHOLDS = (
    (70, "Plus-Plus"),
    (60, "Plus"),
    (50, "Average"),
    (40, "Fringe Avg"),
)
LOWEST_GRADE = "Below Avg"


def grade_label(score: float) -> str:
    """Map a score to its scouting-scale label."""
    for threshold, label in GRADE_THRESHOLDS:
        if score >= threshold:
            return label
    return LOWEST_GRADE


__all__ = ["GRADE_THRESHOLDS", "LOWEST_GRADE", "grade_label"]
