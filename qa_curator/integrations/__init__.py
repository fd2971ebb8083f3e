"""HTTP integrations: generation backends, resilient transport, local model server probe."""

from qa_curator.integrations.backends import (
    BackendConfig,
    CloudBackend,
    LocalBackend,
    get_backend,
)
from qa_curator.integrations.model_server import LocalModelServer, derive_tags_url
from qa_curator.integrations.transport import ResilientTransport

__all__ = [
    "BackendConfig",
    "CloudBackend",
    "LocalBackend",
    "get_backend",
    "LocalModelServer",
    "derive_tags_url",
    "ResilientTransport",
]
