"""
Heuristic QA Scoring.

Deterministic, length- and label-based estimates. These are not a measure of
factual correctness:
- confidence: longer answers presumed more substantiated, capped at 300 chars
- accuracy: harder-labelled items get a small bonus
- score: mean of the two
"""
from __future__ import annotations

from dataclasses import dataclass

from qa_curator.core.modes import Difficulty

MAX_ANSWER_LENGTH = 300
BASE_CONFIDENCE = 0.7
CONFIDENCE_WEIGHT = 0.3
BASE_ACCURACY = 0.75
ACCURACY_WEIGHT = 0.3
PRECISION = 4

DIFFICULTY_MULTIPLIERS = {
    Difficulty.BASIC: 1.0,
    Difficulty.INTERMEDIATE: 1.15,
    Difficulty.ADVANCED: 1.3,
}


@dataclass(frozen=True)
class HeuristicMetrics:
    """Per-pair heuristic metrics, each in [0, 1] at 4 decimal places."""

    confidence: float
    accuracy: float
    score: float


def calculate_heuristic_metrics(answer: str, difficulty: Difficulty | str) -> HeuristicMetrics:
    """
    Score one QA pair.

    Pure: identical (answer length, difficulty) always yields identical metrics.
    """
    length_ratio = min(1.0, len(answer) / MAX_ANSWER_LENGTH)
    confidence = round(BASE_CONFIDENCE + CONFIDENCE_WEIGHT * length_ratio, PRECISION)

    multiplier = DIFFICULTY_MULTIPLIERS.get(Difficulty.coerce(difficulty), 1.0)
    accuracy = round(min(1.0, BASE_ACCURACY + ACCURACY_WEIGHT * (multiplier - 1.0)), PRECISION)

    score = round((confidence + accuracy) / 2, PRECISION)
    return HeuristicMetrics(confidence=confidence, accuracy=accuracy, score=score)
