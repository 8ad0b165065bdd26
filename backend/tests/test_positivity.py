"""Tests for the layered positivity gate."""

from dataclasses import replace

import pytest

from goodfeed.config import Settings
from goodfeed.core.positivity import DEFAULT_POLICY, FilterPolicy, PositivityFilter


@pytest.fixture
def gate():
    return PositivityFilter()


def test_blocked_word_rejects_regardless_of_sentiment(gate, make_candidate):
    candidate = make_candidate(
        title="Community celebrates hero after murder trial",
        description="An inspiring breakthrough",
        sentiment=0.99,
    )

    decision = gate.evaluate(candidate)

    assert decision.passes is False
    assert decision.score == 0


@pytest.mark.parametrize(
    "title",
    [
        "Two murders and three killings shock town",
        "Bombs and wars",
        "Terrorists behind shootings",
        "Disasters and overdoses",
        "Crashes on the highway",
    ],
)
def test_plural_forms_of_blocked_words_reject(gate, make_candidate, title):
    candidate = make_candidate(title=title, description="community hope", sentiment=0.99)

    decision = gate.evaluate(candidate)

    assert decision.passes is False
    assert decision.score == 0
    assert decision.reason.startswith("blocked keyword")


def test_blocked_word_in_content_rejects(gate, make_candidate):
    candidate = make_candidate(content="Two people were killed nearby.", sentiment=0.95)

    assert gate.evaluate(candidate).passes is False


def test_blocklist_matches_on_word_boundaries(gate, make_candidate):
    """'therapist' must not trip the blocked word embedded in it."""
    candidate = make_candidate(
        title="Therapist shares inspiring breakthrough with community",
        description="",
        sentiment=0.5,
    )

    assert gate.blocked_keyword("therapist shares inspiring breakthrough") is None
    decision = gate.evaluate(candidate)
    assert decision.passes is True
    # 30 sentiment + 3 signals * 5 + 20 clean + 10 strong
    assert decision.score == 75


def test_sentiment_below_floor_rejects_even_with_signals(gate, make_candidate):
    candidate = make_candidate(
        title="Inspiring rescue brings joy and hope",
        description="A heartwarming community triumph",
        sentiment=0.2,
    )

    decision = gate.evaluate(candidate)

    assert decision.passes is False
    assert decision.score == 0


def test_no_positive_signal_rejects(gate, make_candidate):
    candidate = make_candidate(title="Town council meets on Tuesday", description="Agenda posted", sentiment=0.9)

    assert gate.evaluate(candidate).passes is False


def test_score_below_threshold_rejects(gate, make_candidate):
    # 26 sentiment + 5 for 'joy' + 20 clean = 51
    candidate = make_candidate(title="Local garden brings joy", description="", sentiment=0.3)

    assert gate.calculate_score(candidate) == 51
    decision = gate.evaluate(candidate)
    assert decision.passes is False
    assert decision.score == 0


def test_signal_points_are_capped(gate, make_candidate):
    candidate = make_candidate(
        title="success breakthrough discovery celebration achievement hero rescue innovation kindness",
        description="",
        sentiment=1.0,
    )

    assert gate.calculate_score(candidate) == 100


def test_negative_sentiment_contributes_nothing(gate, make_candidate):
    candidate = make_candidate(title="Some hope", description="", sentiment=-1.0)

    assert gate.calculate_score(candidate) == 25


def test_score_is_clamped_to_100(make_candidate):
    gate = PositivityFilter(replace(DEFAULT_POLICY, clean_bonus=500))

    assert gate.calculate_score(make_candidate(sentiment=1.0)) == 100


def test_filter_marks_admitted_candidates_and_keeps_order(gate, make_candidate):
    good_a = make_candidate(url="https://example.org/a")
    bad = make_candidate(title="Storm disaster", description="", url="https://example.org/b")
    good_b = make_candidate(url="https://example.org/c", sentiment=1.0)

    admitted = gate.filter([good_a, bad, good_b])

    assert admitted == [good_a, good_b]
    assert all(c.is_verified_positive for c in admitted)
    assert all(c.positivity_score >= 65 for c in admitted)
    assert good_b.positivity_percentage == good_b.positivity_score / 100
    assert bad.is_verified_positive is False
    assert bad.positivity_score == 0


def test_lenient_policy_can_be_swapped_in(make_candidate):
    lenient = PositivityFilter(FilterPolicy(sentiment_floor=-0.5, min_score=0))
    candidate = make_candidate(title="Quiet hope", description="", sentiment=0.0)

    assert PositivityFilter().evaluate(candidate).passes is False
    assert lenient.evaluate(candidate).passes is True


def test_policy_thresholds_come_from_settings():
    settings = Settings(_env_file=None, SENTIMENT_FLOOR=0.1, MIN_POSITIVITY_SCORE=50)

    policy = FilterPolicy.from_settings(settings)

    assert policy.sentiment_floor == 0.1
    assert policy.min_score == 50
    assert policy.blocked_keywords == DEFAULT_POLICY.blocked_keywords


def test_strong_keywords_are_positive_signals():
    assert DEFAULT_POLICY.strong_keywords <= DEFAULT_POLICY.positive_keywords
