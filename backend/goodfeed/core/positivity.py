"""
Layered positivity gate.

Every candidate goes through four ordered layers and the first failing layer
rejects it with a score of 0:

1. blocklist (whole words, plurals included)
2. sentiment floor
3. at least one positive signal (substring match)
4. composite score threshold

The keyword sets and thresholds live in ``FilterPolicy`` so a different
policy can be swapped in without touching the algorithm.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import FrozenSet, Iterable, List, NamedTuple, Optional, Pattern

from goodfeed.config import Settings
from goodfeed.models import Candidate
from goodfeed.utils import clamp, clamp_to_sentiment_range

logger = logging.getLogger(__name__)

BLOCKED_KEYWORDS: FrozenSet[str] = frozenset({
    # Violence
    "murder", "murdered", "murderer", "killed", "killing", "killer", "shooting",
    "shooter", "gunman", "shot", "stabbing", "stabbed", "terrorist", "terrorism",
    "massacre", "slaughter", "execution", "executed", "homicide", "assault",
    "assaulted", "rape", "rapist", "kidnapped", "kidnapping", "abducted",
    "hostage", "torture", "violence", "violent", "riot", "abuse", "abused",
    "trafficking", "extremist",
    # War and attacks
    "war", "warfare", "invasion", "airstrike", "missile", "bomb", "bombing",
    "explosion", "genocide", "atrocity",
    # Death and injury
    "dead", "death", "deaths", "died", "dies", "dying", "fatal", "fatality",
    "fatalities", "corpse", "casualties", "injured", "wounded", "suicide",
    "overdose",
    # Disaster
    "tragedy", "tragic", "disaster", "catastrophe", "crash", "famine",
    "pandemic", "outbreak", "epidemic",
    # Crime and conflict
    "victim", "victims", "arrested", "convicted", "sentenced", "prison",
    "crime", "criminal", "fraud", "scandal", "lawsuit", "corruption",
    "hate", "racist",
    # Economic distress
    "crisis", "recession", "bankruptcy", "layoffs",
})

POSITIVE_KEYWORDS: FrozenSet[str] = frozenset({
    "success", "breakthrough", "discovery", "celebration", "celebrate",
    "achievement", "hero", "saved", "rescue", "innovation", "kindness",
    "charity", "volunteer", "hope", "inspiring", "uplifting", "heartwarming",
    "wholesome", "joy", "happiness", "recovery", "healing", "triumph",
    "overcome", "remarkable", "generous", "compassion", "miracle", "wonderful",
    "amazing", "sustainable", "renewable", "conservation", "wellness",
    "mindful", "creative", "artistic", "community", "together", "reunited",
    "grateful", "thriving", "restored",
})

STRONG_KEYWORDS: FrozenSet[str] = frozenset({
    "breakthrough", "heartwarming", "inspiring", "uplifting", "miracle",
    "triumph", "rescue", "kindness", "wholesome", "reunited",
})


@dataclass(frozen=True)
class FilterPolicy:
    """Keyword sets and thresholds for the positivity gate."""

    blocked_keywords: FrozenSet[str] = BLOCKED_KEYWORDS
    positive_keywords: FrozenSet[str] = POSITIVE_KEYWORDS
    strong_keywords: FrozenSet[str] = STRONG_KEYWORDS
    sentiment_floor: float = 0.3
    min_score: int = 65
    sentiment_points: int = 40
    points_per_signal: int = 5
    max_signal_points: int = 30
    clean_bonus: int = 20
    strong_bonus: int = 10

    @classmethod
    def from_settings(cls, settings: Settings, base: Optional["FilterPolicy"] = None) -> "FilterPolicy":
        return replace(
            base or cls(),
            sentiment_floor=settings.SENTIMENT_FLOOR,
            min_score=settings.MIN_POSITIVITY_SCORE,
        )


DEFAULT_POLICY = FilterPolicy()


class FilterDecision(NamedTuple):
    passes: bool
    score: int
    reason: str


@lru_cache(maxsize=8)
def _word_boundary_pattern(words: FrozenSet[str]) -> Optional[Pattern[str]]:
    if not words:
        return None
    # Longest first so multi-word entries win over their prefixes.
    # Roots are anchored at a word start and may take a plural suffix.
    alternatives = sorted((re.escape(w.lower()) for w in words), key=len, reverse=True)
    return re.compile(r"\b(?:" + "|".join(alternatives) + r")(?:s|es)?\b")


def article_text(candidate: Candidate) -> str:
    """Title, description and content, lowercased."""
    parts = (candidate.title, candidate.description or "", candidate.content or "")
    return " ".join(parts).lower()


class PositivityFilter:
    def __init__(self, policy: FilterPolicy = DEFAULT_POLICY) -> None:
        self.policy = policy

    def blocked_keyword(self, text: str) -> Optional[str]:
        """First blocked word (root or plural) found in lowercased ``text``."""
        pattern = _word_boundary_pattern(self.policy.blocked_keywords)
        if pattern is None:
            return None
        match = pattern.search(text)
        return match.group(0) if match else None

    def positive_signals(self, text: str) -> List[str]:
        return sorted(k for k in self.policy.positive_keywords if k in text)

    def calculate_score(self, candidate: Candidate) -> int:
        """
        Composite 0-100 positivity score.

        Sentiment contributes up to 40 points, each distinct positive signal
        5 points (capped at 30), the absence of blocked words a flat 20 and
        any strong signal a flat 10.
        """
        policy = self.policy
        text = article_text(candidate)

        sentiment = clamp_to_sentiment_range(candidate.sentiment_score)
        score = int((sentiment + 1) / 2 * policy.sentiment_points)
        score += min(len(self.positive_signals(text)) * policy.points_per_signal, policy.max_signal_points)
        if self.blocked_keyword(text) is None:
            score += policy.clean_bonus
        if any(k in text for k in policy.strong_keywords):
            score += policy.strong_bonus

        return int(clamp(score, 0, 100))

    def evaluate(self, candidate: Candidate) -> FilterDecision:
        text = article_text(candidate)

        blocked = self.blocked_keyword(text)
        if blocked is not None:
            return FilterDecision(False, 0, f"blocked keyword {blocked!r}")

        if candidate.sentiment_score < self.policy.sentiment_floor:
            return FilterDecision(False, 0, f"sentiment {candidate.sentiment_score:.2f} below floor")

        if not any(k in text for k in self.policy.positive_keywords):
            return FilterDecision(False, 0, "no positive signal")

        score = self.calculate_score(candidate)
        if score < self.policy.min_score:
            return FilterDecision(False, 0, f"score {score} below {self.policy.min_score}")

        return FilterDecision(True, score, "passed")

    def filter(self, candidates: Iterable[Candidate]) -> List[Candidate]:
        """
        Keep admitted candidates, in input order.

        Admitted candidates are marked verified and carry their composite
        score as ``positivity_score``.
        """
        admitted: List[Candidate] = []
        for candidate in candidates:
            decision = self.evaluate(candidate)
            if not decision.passes:
                logger.debug("Rejected %r: %s", candidate.title, decision.reason)
                continue
            candidate.is_verified_positive = True
            candidate.positivity_score = decision.score
            admitted.append(candidate)
        return admitted
