"""
Curated dataset model and merge rules.

Transitions are pure: each takes the current dataset (possibly ``None``)
and returns the next one. Invariants maintained by every transition:
- ``overall_accuracy_score`` is the mean of member scores (4 decimals)
- ``quality_level`` is advanced iff that mean exceeds 0.85
- a dataset never exists with zero pairs; deleting the last pair yields ``None``
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from typing import Any

from loguru import logger

from qa_curator.core.errors import InputValidationError
from qa_curator.core.modes import Difficulty, InputMode, QualityLevel
from qa_curator.generation.scoring import PRECISION, calculate_heuristic_metrics

ADVANCED_THRESHOLD = 0.85
EDITABLE_FIELDS = ("question", "answer")


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


def format_score(value: float) -> str:
    """Fixed-precision rendering used in the export artifact (``0.92`` -> ``"0.9200"``)."""
    return f"{value:.{PRECISION}f}"


def new_dataset_id(timestamp_ms: int | None = None) -> str:
    """Session-stable dataset identifier."""
    return f"qa-ds-{timestamp_ms if timestamp_ms is not None else now_ms()}"


@dataclass(frozen=True)
class QARecord:
    """One curated question/answer unit."""

    qa_id: str
    question: str
    answer: str
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    score: float = 0.0
    confidence: float = 0.0
    accuracy: float = 0.0
    source_type: InputMode = InputMode.TEXT
    edited: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Export layout (nested traceability/metadata blocks)."""
        return {
            "qa_id": self.qa_id,
            "question": self.question,
            "answer": self.answer,
            "difficulty": self.difficulty.value,
            "score": format_score(self.score),
            "traceability": {
                "confidence_level": format_score(self.confidence),
                "source_type": self.source_type.value,
            },
            "metadata": {
                "difficulty": self.difficulty.value,
                "edited": self.edited,
                "quality_metrics": {"accuracy": format_score(self.accuracy)},
            },
        }


@dataclass(frozen=True)
class CuratedDataset:
    """Accumulated QA pairs for the session, in generation order."""

    dataset_id: str
    domain: str
    model_used: str
    qa_pairs: tuple[QARecord, ...] = field(default_factory=tuple)
    overall_accuracy_score: float = 0.0
    quality_level: QualityLevel = QualityLevel.INTERMEDIATE

    def __len__(self) -> int:
        return len(self.qa_pairs)

    def get(self, qa_id: str) -> QARecord | None:
        return next((qa for qa in self.qa_pairs if qa.qa_id == qa_id), None)


# =============================================================================
# Aggregates
# =============================================================================


def compute_overall_score(records: tuple[QARecord, ...] | list[QARecord]) -> float:
    """Arithmetic mean of member scores."""
    if not records:
        raise ValueError("cannot score an empty dataset")
    return round(sum(qa.score for qa in records) / len(records), PRECISION)


def assess_quality(overall_score: float) -> QualityLevel:
    """Derive the quality level from the mean score."""
    return QualityLevel.ADVANCED if overall_score > ADVANCED_THRESHOLD else QualityLevel.INTERMEDIATE


def _with_records(dataset: CuratedDataset, records: tuple[QARecord, ...]) -> CuratedDataset:
    overall = compute_overall_score(records)
    return replace(
        dataset,
        qa_pairs=records,
        overall_accuracy_score=overall,
        quality_level=assess_quality(overall),
    )


# =============================================================================
# Transitions
# =============================================================================


def create_record(pair: dict[str, Any], qa_id: str, source_type: InputMode) -> QARecord:
    """Score a recovered pair and wrap it as a record."""
    difficulty = Difficulty.coerce(pair.get("difficulty"))
    metrics = calculate_heuristic_metrics(pair["answer"], difficulty)
    return QARecord(
        qa_id=qa_id,
        question=pair["question"],
        answer=pair["answer"],
        difficulty=difficulty,
        score=metrics.score,
        confidence=metrics.confidence,
        accuracy=metrics.accuracy,
        source_type=InputMode(source_type),
    )


def merge_records(
    dataset: CuratedDataset | None,
    pairs: list[dict[str, Any]],
    *,
    dataset_id: str,
    domain: str,
    model_used: str,
    source_type: InputMode,
    timestamp_ms: int | None = None,
) -> CuratedDataset:
    """
    Append newly recovered pairs after the existing ones.

    Identifiers combine domain, a timestamp and the pair's position in the
    combined sequence, so they stay unique across generation rounds.

    Args:
        dataset: Current dataset, or None for the first round
        pairs: Normalized pairs from the recovery parser
        dataset_id: Session dataset identifier
        domain: Domain profile id used for this round
        model_used: Model that produced the pairs
        source_type: Input mode of this round
        timestamp_ms: Override for the identifier timestamp

    Returns:
        New dataset with recomputed aggregates
    """
    if not pairs:
        raise ValueError("no pairs to merge")

    stamp = timestamp_ms if timestamp_ms is not None else now_ms()
    existing = dataset.qa_pairs if dataset else ()
    offset = len(existing)

    new_records = tuple(
        create_record(pair, f"{domain}-qa-{stamp}-{offset + i}", source_type)
        for i, pair in enumerate(pairs)
    )

    base = dataset or CuratedDataset(dataset_id=dataset_id, domain=domain, model_used=model_used)
    base = replace(base, dataset_id=dataset_id, domain=domain, model_used=model_used)
    merged = _with_records(base, existing + new_records)

    logger.info(
        f"Merged {len(new_records)} pair(s) into {dataset_id}: "
        f"{len(merged)} total, overall {merged.overall_accuracy_score:.4f} ({merged.quality_level.value})"
    )
    return merged


def delete_record(dataset: CuratedDataset | None, qa_id: str) -> CuratedDataset | None:
    """Remove a record; removing the last one discards the dataset."""
    if dataset is None:
        return None

    remaining = tuple(qa for qa in dataset.qa_pairs if qa.qa_id != qa_id)
    if len(remaining) == len(dataset.qa_pairs):
        raise InputValidationError(f"Unknown QA pair '{qa_id}'")
    if not remaining:
        logger.info(f"Deleted last pair of {dataset.dataset_id}; dataset cleared")
        return None
    return _with_records(dataset, remaining)


def edit_record(dataset: CuratedDataset | None, qa_id: str, field_name: str, value: str) -> CuratedDataset:
    """Update a record's question or answer and flag it as edited."""
    if field_name not in EDITABLE_FIELDS:
        raise InputValidationError(f"Field '{field_name}' is not editable")
    if dataset is None or dataset.get(qa_id) is None:
        raise InputValidationError(f"Unknown QA pair '{qa_id}'")

    records = tuple(
        replace(qa, **{field_name: value, "edited": True}) if qa.qa_id == qa_id else qa
        for qa in dataset.qa_pairs
    )
    return replace(dataset, qa_pairs=records)
