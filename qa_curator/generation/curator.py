"""
QA Curation Pipeline.

One curation round:
1. Validate input (no request is issued on failure)
2. Build domain prompts for the active backend
3. Send through the resilient transport
4. Extract the model text from the backend-specific response shape
5. Recover a structured batch from possibly malformed text
6. Score and merge into the session dataset

Any failure leaves the previous dataset untouched and returns the session
to the input step; the error propagates for the caller to surface.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from config import Settings, get_settings
from qa_curator.core.errors import CurationError, ExtractionError, InputValidationError
from qa_curator.core.modes import BackendMode, InputMode, WorkflowStep
from qa_curator.curation.dataset import CuratedDataset, merge_records
from qa_curator.curation.session import CurationSession
from qa_curator.generation.domains import get_domain, is_small_model
from qa_curator.generation.prompts import build_prompt
from qa_curator.generation.recovery import recover
from qa_curator.integrations.backends import get_backend
from qa_curator.integrations.model_server import LocalModelServer
from qa_curator.integrations.transport import ResilientTransport


@dataclass
class CurationRequest:
    """User input for one curation round."""

    source: str
    domain: str
    input_mode: InputMode = InputMode.TEXT


class QACurator:
    """
    Orchestrates prompt -> transport -> extraction -> recovery -> merge.

    Holds the transport; session state is passed in explicitly.
    """

    def __init__(
        self,
        transport: ResilientTransport | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.transport = transport or ResilientTransport(
            timeout_seconds=self.settings.request_timeout_seconds,
            max_attempts=self.settings.request_max_attempts,
        )

    async def close(self) -> None:
        await self.transport.close()

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_request(self, session: CurationSession, request: CurationRequest) -> None:
        """
        Check the request before anything is sent.

        Raises:
            InputValidationError: On any precondition failure
        """
        if session.is_loading:
            raise InputValidationError("A curation request is already in progress.")

        input_mode = InputMode(request.input_mode)
        min_length = self.settings.get_min_source_length(input_mode.value)
        if len(request.source.strip()) < min_length:
            if input_mode is InputMode.TEXT:
                raise InputValidationError(f"The source text must be at least {min_length} characters.")
            raise InputValidationError("Please enter a URL or a search query.")

        get_domain(request.domain)

        backend = session.backend
        if BackendMode(backend.mode) is BackendMode.LOCAL:
            if input_mode is InputMode.WEB_QUERY:
                raise InputValidationError("Local mode does not support web search grounding.")
            if not backend.local_model or not session.available_models:
                raise InputValidationError("Please select a valid local model.")
        elif not backend.api_key:
            raise InputValidationError("No cloud API key configured (set GEMINI_API_KEY).")

    # =========================================================================
    # Curation
    # =========================================================================

    async def curate(self, session: CurationSession, request: CurationRequest) -> CuratedDataset:
        """
        Run one curation round and merge the result into the session dataset.

        Args:
            session: Session state (dataset, backend selection)
            request: Source, domain and input mode

        Returns:
            The updated dataset

        Raises:
            CurationError: Input, transport, extraction or recovery failure
        """
        self.validate_request(session, request)

        input_mode = InputMode(request.input_mode)
        profile = get_domain(request.domain)
        backend = get_backend(session.backend)

        session.is_loading = True
        session.last_error = None
        session.step = WorkflowStep.ANALYSIS
        try:
            prompt = build_prompt(profile, input_mode, request.source, backend.mode)
            if backend.mode is BackendMode.LOCAL and is_small_model(backend.model_name):
                logger.warning(f"Small local model '{backend.model_name}': limited to {prompt.num_pairs} QA pairs")

            logger.info(
                f"Curating {prompt.num_pairs} {profile.id} pairs via {backend.mode.value} "
                f"backend ({backend.model_name}, {input_mode.value} mode)"
            )
            response = await self.transport.post_json(
                backend.url,
                backend.build_request(profile, prompt),
                headers=backend.headers,
                max_attempts=self.settings.request_max_attempts,
            )
            session.step = WorkflowStep.GENERATION

            try:
                body = response.json()
            except ValueError as e:
                raise ExtractionError(f"The model produced no usable content (invalid response body: {e}).") from e

            text = backend.extract_text(body)
            if not text:
                raise ExtractionError()

            result = recover(text)
            dataset = merge_records(
                session.dataset,
                result.pairs,
                dataset_id=session.dataset_id,
                domain=profile.id,
                model_used=backend.model_name,
                source_type=input_mode,
            )
        except CurationError as e:
            logger.error(f"Curation failed: {e}")
            session.last_error = str(e)
            session.step = WorkflowStep.INPUT
            raise
        except Exception as e:
            logger.exception(f"Unexpected curation failure: {e}")
            session.last_error = f"Unexpected error: {e}"
            session.step = WorkflowStep.INPUT
            raise
        finally:
            session.is_loading = False

        session.dataset = dataset
        session.step = WorkflowStep.VALIDATION
        return dataset

    # =========================================================================
    # Local backend discovery
    # =========================================================================

    async def refresh_local_backend(
        self,
        session: CurationSession,
        server: LocalModelServer | None = None,
    ) -> bool:
        """
        Probe the local server and refresh the session's model list.

        Returns:
            True if the server is reachable
        """
        owned = server is None
        server = server or LocalModelServer(
            session.backend.local_url,
            timeout_seconds=self.settings.health_timeout_seconds,
        )
        try:
            healthy = await server.health_check()
            models = await server.list_models() if healthy else []
        finally:
            if owned:
                await server.close()

        session.apply_local_probe(healthy, models)
        logger.info(f"Local server {'reachable' if healthy else 'unreachable'}: {len(models)} model(s)")
        return healthy
