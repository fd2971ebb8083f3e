"""
Structured Recovery Parser.

Turns free-form model output into a validated list of QA pairs. Models
(small local ones especially) wrap the array in prose or code fences, emit
a JSON object instead of an array, or get truncated mid-item. Recovery is an
ordered chain of pure stages; the first stage that yields a batch wins:

1. strip_and_parse   - drop fences and leading/trailing noise, parse, validate
2. array_pattern     - parse the first ``[{...}]``-shaped substring, validate
3. object_salvage    - parse every well-formed ``{...}`` independently and keep
                       the ones carrying both question and answer

Stages never invent a pair that is not present in the model's text.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from loguru import logger

from qa_curator.core.errors import RecoveryError
from qa_curator.core.modes import Difficulty

CODE_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
ARRAY_PATTERN = re.compile(r"\[\s*\{[\s\S]*\}\s*\]")

_decoder = json.JSONDecoder()

# Degenerate nesting (a model repeating "[" or '{"a":') overflows the decoder
PARSE_ERRORS = (json.JSONDecodeError, RecursionError)


class StageFailure(ValueError):
    """A single recovery stage could not produce a batch."""


@dataclass
class StageOutcome:
    """Result of one recovery stage."""

    stage: str
    pairs: list[dict[str, Any]] | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return bool(self.pairs)


@dataclass
class RecoveryResult:
    """Recovered batch plus the stage that produced it."""

    pairs: list[dict[str, Any]]
    stage: str


# =============================================================================
# Validation
# =============================================================================


def _text_field(item: dict[str, Any], key: str) -> str:
    # Only JSON strings count; lists, objects and numbers are not QA text
    value = item.get(key)
    if not isinstance(value, str):
        return ""
    return value.strip()


def has_question_and_answer(item: Any) -> bool:
    """True for a dict carrying non-empty question and answer."""
    return (
        isinstance(item, dict)
        and bool(_text_field(item, "question"))
        and bool(_text_field(item, "answer"))
    )


def normalize_pair(item: dict[str, Any]) -> dict[str, Any]:
    """Copy of ``item`` with trimmed text and a valid difficulty label."""
    pair = dict(item)
    pair["question"] = _text_field(item, "question")
    pair["answer"] = _text_field(item, "answer")
    pair["difficulty"] = Difficulty.coerce(item.get("difficulty")).value
    return pair


def validate_batch(parsed: Any) -> list[dict[str, Any]]:
    """
    Structural validation of a parsed batch.

    Fail fast: one item without question/answer rejects the whole batch.

    Raises:
        StageFailure: If the batch is not a non-empty array of complete items
    """
    if not isinstance(parsed, list):
        raise StageFailure("response is not an array")
    if not parsed:
        raise StageFailure("array is empty")

    for index, item in enumerate(parsed):
        if not has_question_and_answer(item):
            raise StageFailure(f"item {index} has no question or answer")

    return [normalize_pair(item) for item in parsed]


# =============================================================================
# Stages
# =============================================================================


def clean_model_text(text: str) -> str:
    """Remove code fences and any noise outside the outermost brackets."""
    cleaned = CODE_FENCE.sub("", text)

    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i != -1]
    if not starts:
        return ""
    end = max(cleaned.rfind("}"), cleaned.rfind("]"))
    return cleaned[min(starts) : end + 1].strip()


def strip_and_parse(text: str) -> list[dict[str, Any]]:
    """Stage 1: clean the text, parse it whole, validate the batch."""
    cleaned = clean_model_text(text)
    if not cleaned:
        raise StageFailure("empty response after cleanup")

    try:
        parsed = json.loads(cleaned)
    except PARSE_ERRORS as e:
        raise StageFailure(str(e)) from e

    return validate_batch(parsed)


def extract_array_pattern(text: str) -> list[dict[str, Any]]:
    """Stage 2: parse the first array-of-objects substring alone."""
    match = ARRAY_PATTERN.search(text)
    if not match:
        raise StageFailure("no array of objects found")

    try:
        parsed = json.loads(match.group(0))
    except PARSE_ERRORS as e:
        raise StageFailure(f"array pattern is not valid JSON: {e}") from e

    return validate_batch(parsed)


def iter_json_objects(text: str) -> Iterator[dict[str, Any]]:
    """Yield every well-formed JSON object embedded in ``text``, left to right."""
    position = text.find("{")
    while position != -1:
        try:
            obj, end = _decoder.raw_decode(text, position)
        except PARSE_ERRORS:
            position = text.find("{", position + 1)
            continue

        if isinstance(obj, dict):
            yield obj
        position = text.find("{", end)


def salvage_objects(text: str) -> list[dict[str, Any]]:
    """Stage 3: keep each independently parseable object with question and answer."""
    found = 0
    pairs = []
    for obj in iter_json_objects(text):
        found += 1
        if has_question_and_answer(obj):
            pairs.append(normalize_pair(obj))

    if not pairs:
        raise StageFailure(f"no complete QA objects among {found} parsed objects")

    dropped = found - len(pairs)
    if dropped:
        logger.debug(f"Object salvage dropped {dropped} incomplete object(s)")
    return pairs


RECOVERY_STAGES: tuple[tuple[str, Callable[[str], list[dict[str, Any]]]], ...] = (
    ("strip_and_parse", strip_and_parse),
    ("array_pattern", extract_array_pattern),
    ("object_salvage", salvage_objects),
)


# =============================================================================
# Pipeline
# =============================================================================


def run_stage(name: str, stage: Callable[[str], list[dict[str, Any]]], text: str) -> StageOutcome:
    """Run one stage, converting its failure into an outcome."""
    try:
        return StageOutcome(stage=name, pairs=stage(text))
    except StageFailure as e:
        return StageOutcome(stage=name, error=str(e))


def recover(text: str) -> RecoveryResult:
    """
    Run the recovery chain, stopping at the first stage that yields pairs.

    Args:
        text: Raw model output believed to contain a JSON array of QA objects

    Returns:
        RecoveryResult with normalized pairs and the winning stage

    Raises:
        RecoveryError: If every stage fails; carries the first stage's reason
    """
    logger.debug(f"Raw model output: {text!r}")
    outcomes = []
    for name, stage in RECOVERY_STAGES:
        outcome = run_stage(name, stage, text)
        if outcome.ok:
            if outcomes:
                logger.warning(
                    f"Recovered {len(outcome.pairs)} pair(s) via fallback stage '{name}' "
                    f"(first failure: {outcomes[0].error})"
                )
            return RecoveryResult(pairs=outcome.pairs, stage=name)
        outcomes.append(outcome)

    logger.error(f"Structured recovery failed: {[(o.stage, o.error) for o in outcomes]}")
    raise RecoveryError(outcomes[0].error or "unknown parse failure")


def recover_qa_pairs(text: str) -> list[dict[str, Any]]:
    """Convenience wrapper returning only the recovered pairs."""
    return recover(text).pairs
