"""
Dataset export artifact.

Document shape:
    dataset_id, domain, model_used, overall_accuracy_score,
    quality_assessment{level}, qa_pairs[...]

Scores are written as fixed four-decimal strings (``"0.9200"``).

Filename: ``<dataset_id>-<count>items.json``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from qa_curator.curation.dataset import CuratedDataset, format_score


def to_export_dict(dataset: CuratedDataset) -> dict[str, Any]:
    """Serialize a dataset to the export document."""
    return {
        "dataset_id": dataset.dataset_id,
        "domain": dataset.domain,
        "model_used": dataset.model_used,
        "overall_accuracy_score": format_score(dataset.overall_accuracy_score),
        "quality_assessment": {"level": dataset.quality_level.value},
        "qa_pairs": [qa.to_dict() for qa in dataset.qa_pairs],
    }


def export_filename(dataset: CuratedDataset) -> str:
    return f"{dataset.dataset_id}-{len(dataset)}items.json"


def write_export(dataset: CuratedDataset, output_dir: Path | str) -> Path:
    """Write the export document to ``output_dir`` and return its path."""
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(dataset)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_export_dict(dataset), f, indent=2, ensure_ascii=False)

    logger.info(f"Exported {len(dataset)} QA pairs to {path}")
    return path
