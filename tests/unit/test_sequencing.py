"""Unit tests for kinematic sequence scoring and session aggregation."""

import pytest

from barrelcoach.services.sequencing import (
    IDEAL_SEQUENCE,
    aggregate_session,
    analyze_sequence,
    count_inversions,
    most_common_label,
    rank_leaks,
    timing_score,
)
from tests.conftest import ideal_peaks, make_result


def test_ideal_order_scores_perfectly():
    analysis = analyze_sequence(ideal_peaks())

    assert analysis.actual_order == list(IDEAL_SEQUENCE)
    assert analysis.sequence_match is True
    assert analysis.errors == []
    assert analysis.order_score == 100
    assert analysis.timing_score == 100
    assert analysis.sequence_score == 100
    assert "in sequence" in analysis.summary


def test_torso_firing_before_lead_leg_is_flagged():
    peaks = ideal_peaks()
    peaks["torso"], peaks["lead_leg"] = peaks["lead_leg"], peaks["torso"]

    analysis = analyze_sequence(peaks)

    assert analysis.sequence_match is False
    assert analysis.actual_order[:3] == ["rear_leg", "torso", "lead_leg"]
    assert count_inversions(analysis.actual_order) == 1
    segments = {error.segment: error for error in analysis.errors}
    assert segments["torso"].actual_position == 2
    assert segments["torso"].expected_position == 3
    assert "early" in segments["torso"].description
    assert "late" in segments["lead_leg"].description
    # one inversion out of 15
    assert analysis.order_score == pytest.approx(100 * 14 / 15)


def test_ties_keep_ideal_order():
    peaks = {segment: 0.0 for segment in IDEAL_SEQUENCE}
    analysis = analyze_sequence(peaks)

    assert analysis.actual_order == list(IDEAL_SEQUENCE)
    assert analysis.sequence_match is True


def test_missing_segment_raises():
    peaks = ideal_peaks()
    del peaks["bat"]

    with pytest.raises(ValueError, match="bat"):
        analyze_sequence(peaks)


def test_uneven_intervals_lower_timing_score():
    assert timing_score([0, 10, 20, 30]) == 100
    assert timing_score([0, 5, 40, 45]) < 100
    assert timing_score([0]) == 100


def test_fully_reversed_order_scores_zero_order():
    peaks = {segment: -index for index, segment in enumerate(IDEAL_SEQUENCE)}
    analysis = analyze_sequence(peaks)

    assert analysis.actual_order == list(reversed(IDEAL_SEQUENCE))
    assert analysis.order_score == 0


def test_most_common_label_prefers_first_on_tie():
    assert most_common_label(["spinner", None, "whipper", "whipper", "spinner"]) == "spinner"
    assert most_common_label([None, ""]) is None


def test_rank_leaks_by_frequency_then_first_seen():
    ranked = rank_leaks([["casting", "drifting"], ["drifting"], ["bat_drag", "casting"]])
    assert ranked == ["casting", "drifting", "bat_drag"]


def test_aggregate_session_means_and_composite():
    results = [
        make_result("a", brain=60, body=50, bat=70, ball=40, leaks=["casting"]),
        make_result("b", brain=70, body=55, bat=60, ball=45, leaks=["casting", "drifting"]),
    ]
    aggregate = aggregate_session(results)

    assert aggregate.brain == 65.0
    assert aggregate.body == 52.5
    assert aggregate.bat == 65.0
    assert aggregate.ball == 42.5
    assert aggregate.composite == 56.2
    assert aggregate.leaks == ["casting", "drifting"]
    assert aggregate.motor_profile == "spinner"
    assert aggregate.swing_count == 2
    assert aggregate.sequence_match is True
    assert aggregate.in_sequence_rate == 100.0


def test_aggregate_session_keeps_two_errors_per_swing():
    peaks = {segment: -index for index, segment in enumerate(IDEAL_SEQUENCE)}
    aggregate = aggregate_session([make_result("a", peaks=peaks), make_result("b")])

    assert len(aggregate.sequence_errors) == 2
    assert aggregate.sequence_match is False
    assert aggregate.in_sequence_rate == 50.0


def test_aggregate_session_requires_results():
    with pytest.raises(ValueError):
        aggregate_session([])
