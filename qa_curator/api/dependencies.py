"""FastAPI dependencies resolving the app-scoped session and curator."""

from __future__ import annotations

from fastapi import Request

from qa_curator.curation.session import CurationSession
from qa_curator.generation.curator import QACurator


def get_session(request: Request) -> CurationSession:
    return request.app.state.session


def get_curator(request: Request) -> QACurator:
    return request.app.state.curator
