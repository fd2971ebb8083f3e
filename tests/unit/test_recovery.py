"""
Unit tests for the structured recovery parser.

Covers each fallback stage on its own and the chain as a whole.
Run: pytest tests/unit/test_recovery.py -v
"""
import json

import pytest

from qa_curator.core.errors import RecoveryError
from qa_curator.generation.recovery import (
    StageFailure,
    clean_model_text,
    extract_array_pattern,
    iter_json_objects,
    recover,
    recover_qa_pairs,
    salvage_objects,
    strip_and_parse,
    validate_batch,
)


class TestCleanModelText:
    """Fence and noise stripping."""

    def test_removes_json_code_fence(self):
        text = '```json\n[{"question": "Q", "answer": "A"}]\n```'
        assert clean_model_text(text) == '[{"question": "Q", "answer": "A"}]'

    def test_trims_prose_around_array(self):
        text = 'Sure! Here it is: [{"question": "Q", "answer": "A"}] Hope it helps.'
        assert clean_model_text(text) == '[{"question": "Q", "answer": "A"}]'

    def test_no_brackets_yields_empty(self):
        assert clean_model_text("I cannot help with that.") == ""


class TestValidateBatch:
    """Structural validation rules."""

    def test_rejects_non_array(self):
        with pytest.raises(StageFailure, match="not an array"):
            validate_batch({"question": "Q", "answer": "A"})

    def test_rejects_empty_array(self):
        with pytest.raises(StageFailure, match="empty"):
            validate_batch([])

    def test_rejects_whole_batch_on_incomplete_item(self):
        """Fail fast: partial records are not dropped silently at this stage."""
        batch = [{"question": "Q1", "answer": "A1"}, {"question": "Q2", "answer": ""}]
        with pytest.raises(StageFailure, match="item 1"):
            validate_batch(batch)

    @pytest.mark.parametrize(
        "item",
        [
            {"question": ["What", "is"], "answer": "A"},
            {"question": "Q", "answer": {"k": False}},
            {"question": "Q", "answer": 42},
            {"question": True, "answer": "A"},
            {"question": "   ", "answer": "A"},
        ],
    )
    def test_rejects_non_string_or_blank_text(self, item):
        with pytest.raises(StageFailure, match="item 0"):
            validate_batch([item])

    def test_missing_difficulty_defaults_to_intermediate(self):
        pairs = validate_batch([{"question": "Q", "answer": "A"}])
        assert pairs[0]["difficulty"] == "intermediate"

    def test_invalid_difficulty_coerced(self):
        pairs = validate_batch([{"question": "Q", "answer": "A", "difficulty": "expert"}])
        assert pairs[0]["difficulty"] == "intermediate"

    def test_valid_difficulty_kept(self):
        pairs = validate_batch([
            {"question": "Q1", "answer": "A1", "difficulty": "basic"},
            {"question": "Q2", "answer": "A2", "difficulty": "Advanced"},
        ])
        assert [p["difficulty"] for p in pairs] == ["basic", "advanced"]


class TestStripAndParse:
    """Stage 1."""

    def test_valid_batch_recovered_exactly(self, sample_pairs):
        pairs = strip_and_parse(json.dumps(sample_pairs))
        assert pairs == sample_pairs

    def test_code_fenced_batch(self):
        text = '```json\n[{"question":"Q1","answer":"A1"}]\n```'
        assert strip_and_parse(text) == [
            {"question": "Q1", "answer": "A1", "difficulty": "intermediate"}
        ]

    def test_single_backtick_fence(self):
        text = '`json\n[{"question":"Q1","answer":"A1"}]\n`'
        assert strip_and_parse(text) == [
            {"question": "Q1", "answer": "A1", "difficulty": "intermediate"}
        ]

    def test_broken_json_fails(self):
        with pytest.raises(StageFailure):
            strip_and_parse('[{"question": "Q1", "answer": "A1"},')


class TestArrayPattern:
    """Stage 2."""

    def test_array_inside_prose_with_stray_brackets(self):
        text = 'Note [1]: the output is [{"question": "Q", "answer": "A"}] as requested.'
        with pytest.raises(StageFailure):
            strip_and_parse(text)
        assert extract_array_pattern(text) == [
            {"question": "Q", "answer": "A", "difficulty": "intermediate"}
        ]

    def test_array_nested_in_object(self):
        text = '{"questions": [{"question": "Q", "answer": "A", "difficulty": "basic"}]}'
        assert extract_array_pattern(text)[0]["difficulty"] == "basic"

    def test_no_array(self):
        with pytest.raises(StageFailure, match="no array"):
            extract_array_pattern('{"question": "Q", "answer": "A"}')


class TestObjectSalvage:
    """Stage 3."""

    def test_iter_json_objects_skips_noise(self):
        text = 'noise {"a": 1} more {broken {"b": 2} end'
        assert list(iter_json_objects(text)) == [{"a": 1}, {"b": 2}]

    def test_concatenated_objects_with_noise(self):
        text = (
            '{"question": "Q1", "answer": "A1", "difficulty": "basic"}\n'
            "-- separator --\n"
            '{"question": "Q2", "answer": "A2"}'
            '{"question": "Q3"}'
            '{"answer": "orphan"}'
        )
        pairs = salvage_objects(text)
        assert [p["question"] for p in pairs] == ["Q1", "Q2"]
        assert pairs[1]["difficulty"] == "intermediate"

    def test_truncated_array_keeps_complete_items(self):
        text = '[{"question": "Q1", "answer": "A1"}, {"question": "Q2", "answer": "A2"}, {"question": "Q3", "ans'
        pairs = salvage_objects(text)
        assert [p["question"] for p in pairs] == ["Q1", "Q2"]

    def test_drops_objects_with_non_string_text(self):
        text = (
            '{"question": ["What", "is"], "answer": {"k": false}} '
            '{"question": "Q", "answer": 7} '
            '{"question": "Kept?", "answer": "Yes."}'
        )
        assert salvage_objects(text) == [
            {"question": "Kept?", "answer": "Yes.", "difficulty": "intermediate"}
        ]

    def test_nothing_salvageable(self):
        with pytest.raises(StageFailure):
            salvage_objects('{"question": "only a question"}')


class TestRecoveryChain:
    """End-to-end fallback ordering."""

    def test_clean_output_uses_first_stage(self, sample_pairs):
        result = recover(json.dumps(sample_pairs))
        assert result.stage == "strip_and_parse"
        assert len(result.pairs) == 3

    def test_object_wrapped_array_uses_array_pattern(self):
        text = '{"qa": [{"question": "Q", "answer": "A"}]}'
        result = recover(text)
        assert result.stage == "array_pattern"
        assert result.pairs == [{"question": "Q", "answer": "A", "difficulty": "intermediate"}]

    def test_prose_with_loose_objects(self):
        text = 'Here you go: {"question":"Q","answer":"A"} and also {"question":"Q2"}'
        result = recover(text)
        assert result.stage == "object_salvage"
        assert result.pairs == [{"question": "Q", "answer": "A", "difficulty": "intermediate"}]

    def test_wrapping_does_not_change_logical_array(self, sample_pairs):
        bare = recover_qa_pairs(json.dumps(sample_pairs))
        wrapped = recover_qa_pairs(
            "Of course! Below is the JSON.\n```json\n" + json.dumps(sample_pairs, indent=2) + "\n```\nEnjoy."
        )
        assert wrapped == bare

    def test_all_stages_fail_reports_original_reason(self):
        with pytest.raises(RecoveryError) as exc_info:
            recover("I am sorry, I cannot produce JSON today.")

        message = str(exc_info.value)
        assert message.startswith("Invalid structured output")
        assert "empty response after cleanup" in message
        assert exc_info.value.reason == "empty response after cleanup"

    def test_structured_values_never_become_text(self):
        with pytest.raises(RecoveryError):
            recover('[{"question": ["What", "is"], "answer": {"k": false}}]')

    def test_incomplete_batch_without_salvageable_items_fails(self):
        with pytest.raises(RecoveryError, match="no question or answer"):
            recover('[{"question": "Q1"}, {"answer": "A2"}]')

    @pytest.mark.parametrize(
        "text",
        [
            "[" * 5000 + "]" * 5000,
            '{"a":' * 5000 + "1" + "}" * 5000,
            '[{"question": "Q", "answer": ' + "[" * 5000 + "]" * 5000 + "}]",
        ],
    )
    def test_degenerate_nesting_fails_cleanly(self, text):
        with pytest.raises(RecoveryError, match="Invalid structured output"):
            recover(text)

    def test_deep_noise_does_not_hide_later_pair(self):
        text = "[" * 5000 + ' then {"question": "Q", "answer": "A"}'
        assert recover(text).pairs == [{"question": "Q", "answer": "A", "difficulty": "intermediate"}]

    def test_never_fabricates_pairs(self):
        text = 'Question: what is X? Answer: Y. {"note": "no pair here"}'
        with pytest.raises(RecoveryError):
            recover(text)
