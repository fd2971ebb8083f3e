"""
Curation router for QA generation and dataset review.

Endpoints for:
- Running a curation round (POST /curate)
- Reading, editing and deleting QA pairs
- Exporting the dataset artifact
- Resetting the session
"""
from __future__ import annotations

import json
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Response
from loguru import logger
from pydantic import BaseModel, Field

from qa_curator.api.dependencies import get_curator, get_session
from qa_curator.core.modes import BackendMode, InputMode
from qa_curator.curation.export import export_filename, to_export_dict
from qa_curator.curation.session import CurationSession
from qa_curator.generation.curator import CurationRequest, QACurator

router = APIRouter()


# ========================================
# Request/Response Models
# ========================================


class CurateRequest(BaseModel):
    """Request model for one curation round."""

    source: str = Field(..., description="Source text, or search target in web-query mode")
    domain: str = Field(..., description="Domain profile id")
    input_mode: InputMode = Field(InputMode.TEXT, description="text or web-query")
    backend: BackendMode | None = Field(None, description="cloud or local (keeps current if omitted)")
    local_url: str | None = Field(None, description="Local generate URL")
    local_model: str | None = Field(None, description="Local model name")


class EditRequest(BaseModel):
    """Request model for editing a QA pair."""

    field: Literal["question", "answer"]
    value: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    """Session snapshot with the current dataset (if any)."""

    dataset_id: str
    step: str
    backend: BackendMode
    local_model: str | None
    local_health: bool | None
    last_error: str | None
    dataset: dict[str, Any] | None


def _snapshot(session: CurationSession) -> SessionResponse:
    return SessionResponse(
        dataset_id=session.dataset_id,
        step=session.step.value,
        backend=session.backend.mode,
        local_model=session.backend.local_model,
        local_health=session.local_health,
        last_error=session.last_error,
        dataset=to_export_dict(session.dataset) if session.dataset else None,
    )


# ========================================
# Endpoints
# ========================================


@router.post("/curate", response_model=SessionResponse)
async def curate(
    body: CurateRequest,
    session: CurationSession = Depends(get_session),
    curator: QACurator = Depends(get_curator),
) -> SessionResponse:
    """Generate QA pairs and merge them into the session dataset."""
    if body.local_url:
        session.backend.local_url = body.local_url
    if body.local_model:
        session.backend.local_model = body.local_model
    if body.backend is not None:
        session.set_backend_mode(body.backend)
    if session.backend.mode is BackendMode.LOCAL and not session.available_models:
        await curator.refresh_local_backend(session)

    await curator.curate(
        session,
        CurationRequest(source=body.source, domain=body.domain, input_mode=body.input_mode),
    )
    return _snapshot(session)


@router.get("/dataset", response_model=SessionResponse)
async def get_dataset(session: CurationSession = Depends(get_session)) -> SessionResponse:
    return _snapshot(session)


@router.patch("/dataset/qa/{qa_id}", response_model=SessionResponse)
async def edit_pair(
    qa_id: str,
    body: EditRequest,
    session: CurationSession = Depends(get_session),
) -> SessionResponse:
    session.edit_pair(qa_id, body.field, body.value)
    return _snapshot(session)


@router.delete("/dataset/qa/{qa_id}", response_model=SessionResponse)
async def delete_pair(
    qa_id: str,
    session: CurationSession = Depends(get_session),
) -> SessionResponse:
    session.delete_pair(qa_id)
    return _snapshot(session)


@router.get("/dataset/export")
async def export_dataset(session: CurationSession = Depends(get_session)) -> Response:
    """Download the dataset as a JSON attachment."""
    if session.dataset is None:
        raise HTTPException(status_code=404, detail="No dataset to export")

    filename = export_filename(session.dataset)
    content = json.dumps(to_export_dict(session.dataset), indent=2, ensure_ascii=False)
    session.mark_exported()
    logger.info(f"Exported {len(session.dataset)} QA pairs as {filename}")
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/session/reset", response_model=SessionResponse)
async def reset_session(session: CurationSession = Depends(get_session)) -> SessionResponse:
    session.reset()
    return _snapshot(session)
