"""
Curation session state.

Single-user, in-memory: the dataset, backend selection, local server health
and model list all live here for the session lifetime. Dataset changes go
through the pure transitions in ``qa_curator.curation.dataset``; the session
only holds the current value.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from config import Settings, get_settings
from qa_curator.core.modes import BackendMode, WorkflowStep
from qa_curator.curation.dataset import CuratedDataset, delete_record, edit_record, new_dataset_id
from qa_curator.integrations.backends import BackendConfig


def select_local_model(current: str | None, available: list[str]) -> str | None:
    """Keep the current model if listed, otherwise fall back to the first listed one."""
    if available and (not current or current not in available):
        return available[0]
    return current


@dataclass
class CurationSession:
    """Mutable state for one user session."""

    backend: BackendConfig
    dataset_id: str = field(default_factory=new_dataset_id)
    dataset: CuratedDataset | None = None
    local_health: bool | None = None
    available_models: list[str] = field(default_factory=list)
    step: WorkflowStep = WorkflowStep.INPUT
    is_loading: bool = False
    last_error: str | None = None

    @classmethod
    def create(cls, settings: Settings | None = None) -> CurationSession:
        return cls(backend=BackendConfig.from_settings(settings or get_settings()))

    def reset(self) -> None:
        """Clear dataset and error state; the dataset id is kept."""
        self.dataset = None
        self.last_error = None
        self.step = WorkflowStep.INPUT
        logger.debug(f"Session {self.dataset_id} reset")

    def set_backend_mode(self, mode: BackendMode | str) -> None:
        self.backend.mode = BackendMode(mode)
        if self.backend.mode is BackendMode.CLOUD:
            self.local_health = None
            self.available_models = []

    def apply_local_probe(self, healthy: bool, models: list[str]) -> None:
        """Record a health/model-listing result and auto-select a model."""
        self.local_health = healthy
        self.available_models = list(models)
        selected = select_local_model(self.backend.local_model, self.available_models)
        if selected != self.backend.local_model:
            logger.info(f"Local model '{self.backend.local_model}' not available; selecting '{selected}'")
        self.backend.local_model = selected

    def delete_pair(self, qa_id: str) -> CuratedDataset | None:
        self.dataset = delete_record(self.dataset, qa_id)
        if self.dataset is None:
            self.step = WorkflowStep.INPUT
        return self.dataset

    def edit_pair(self, qa_id: str, field_name: str, value: str) -> CuratedDataset:
        self.dataset = edit_record(self.dataset, qa_id, field_name, value)
        return self.dataset

    def mark_exported(self) -> None:
        self.step = WorkflowStep.EXPORT
