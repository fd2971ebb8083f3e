"""Core value types and error taxonomy for QA curation."""

from qa_curator.core.errors import (
    CurationError,
    ExtractionError,
    InputValidationError,
    RecoveryError,
    TransportError,
)
from qa_curator.core.modes import (
    DIFFICULTY_VALUES,
    BackendMode,
    Difficulty,
    InputMode,
    QualityLevel,
    WorkflowStep,
)

__all__ = [
    "CurationError",
    "ExtractionError",
    "InputValidationError",
    "RecoveryError",
    "TransportError",
    "DIFFICULTY_VALUES",
    "BackendMode",
    "Difficulty",
    "InputMode",
    "QualityLevel",
    "WorkflowStep",
]
