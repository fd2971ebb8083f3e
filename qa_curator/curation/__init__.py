"""Curated dataset model, export artifact and session state."""

from qa_curator.curation.dataset import (
    CuratedDataset,
    QARecord,
    assess_quality,
    compute_overall_score,
    delete_record,
    edit_record,
    merge_records,
    new_dataset_id,
)
from qa_curator.curation.export import export_filename, to_export_dict, write_export
from qa_curator.curation.session import CurationSession, select_local_model

__all__ = [
    "CuratedDataset",
    "QARecord",
    "assess_quality",
    "compute_overall_score",
    "delete_record",
    "edit_record",
    "merge_records",
    "new_dataset_id",
    "export_filename",
    "to_export_dict",
    "write_export",
    "CurationSession",
    "select_local_model",
]
