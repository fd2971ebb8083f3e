"""
Curation Operating Modes

Closed value sets shared by the curation pipeline:
1. Backend mode - cloud API or locally hosted model server
2. Input mode - literal source text or a web-search query
3. Difficulty - the three labels a QA pair may carry
4. Quality level - derived from the dataset's mean score
5. Workflow step - where the session currently is
"""

from __future__ import annotations

from enum import Enum


class BackendMode(str, Enum):
    """LLM-serving backend."""

    CLOUD = "cloud"  # Gemini generateContent
    LOCAL = "local"  # Ollama-compatible /api/generate


class InputMode(str, Enum):
    """How the source content should be interpreted."""

    TEXT = "text"
    WEB_QUERY = "web-query"


class Difficulty(str, Enum):
    """Difficulty label of a QA pair."""

    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def coerce(cls, value: object) -> Difficulty:
        """Map any model-supplied value onto a valid label (default: intermediate)."""
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return cls.INTERMEDIATE


class QualityLevel(str, Enum):
    """Dataset-wide quality assessment."""

    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class WorkflowStep(str, Enum):
    """Session workflow position."""

    INPUT = "input"
    ANALYSIS = "analysis"  # request issued
    GENERATION = "generation"  # response received
    VALIDATION = "validation"  # dataset merged
    EXPORT = "export"  # artifact produced


DIFFICULTY_VALUES = tuple(d.value for d in Difficulty)
