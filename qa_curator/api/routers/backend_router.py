"""
Backend router: domain profiles and local model server discovery.

Health and model listing refresh the session's display/selection state
only; they never touch the dataset.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from qa_curator.api.dependencies import get_curator, get_session
from qa_curator.curation.session import CurationSession
from qa_curator.generation.curator import QACurator
from qa_curator.generation.domains import DOMAIN_PROFILES, is_small_model

router = APIRouter()


class DomainResponse(BaseModel):
    id: str
    label: str
    max_pairs: int
    recommended_models: dict[str, str]


class LocalBackendResponse(BaseModel):
    url: str
    healthy: bool
    models: list[str]
    selected_model: str | None
    small_model: bool


@router.get("/domains", response_model=list[DomainResponse])
async def list_domains() -> list[DomainResponse]:
    return [
        DomainResponse(
            id=profile.id,
            label=profile.label,
            max_pairs=profile.max_pairs,
            recommended_models=profile.recommended_models,
        )
        for profile in DOMAIN_PROFILES.values()
    ]


async def _refresh(session: CurationSession, curator: QACurator, url: str | None) -> LocalBackendResponse:
    if url:
        session.backend.local_url = url
    healthy = await curator.refresh_local_backend(session)
    return LocalBackendResponse(
        url=session.backend.local_url,
        healthy=healthy,
        models=session.available_models,
        selected_model=session.backend.local_model,
        small_model=is_small_model(session.backend.local_model),
    )


@router.get("/backend/local/health", response_model=LocalBackendResponse)
async def local_health(
    url: str | None = Query(None, description="Local generate URL"),
    session: CurationSession = Depends(get_session),
    curator: QACurator = Depends(get_curator),
) -> LocalBackendResponse:
    """Probe the local server (also refreshes the model list)."""
    return await _refresh(session, curator, url)


@router.get("/backend/local/models", response_model=LocalBackendResponse)
async def local_models(
    url: str | None = Query(None, description="Local generate URL"),
    session: CurationSession = Depends(get_session),
    curator: QACurator = Depends(get_curator),
) -> LocalBackendResponse:
    """List local models and auto-select one if the current choice is missing."""
    return await _refresh(session, curator, url)
