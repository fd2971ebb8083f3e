"""
Generation backends.

Two heterogeneous endpoints behind one contract:
- ``build_request(profile, prompt)`` -> JSON payload
- ``extract_text(response)`` -> raw model text, or None when absent

Cloud (Gemini generateContent):
    request  {contents, systemInstruction, tools?, generationConfig{responseMimeType, responseSchema}}
    response candidates[0].content.parts[0].text

Local (Ollama /api/generate):
    request  {model, prompt, stream: false, format: "json", options}
    response {"response": "..."}
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from config import Settings, get_settings
from qa_curator.core.modes import BackendMode
from qa_curator.generation.domains import DomainProfile
from qa_curator.generation.prompts import PromptBundle

LOCAL_GENERATION_OPTIONS = {
    "temperature": 0.3,
    "top_p": 0.9,
    "top_k": 40,
    "num_predict": 1024,
}


@dataclass
class BackendConfig:
    """Active transport target for the session."""

    mode: BackendMode = BackendMode.CLOUD
    local_url: str = "http://localhost:11434/api/generate"
    local_model: str | None = None
    cloud_url: str = ""
    cloud_model: str = ""
    api_key: str = ""

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> BackendConfig:
        """Build the default config from application settings."""
        settings = settings or get_settings()
        return cls(
            mode=BackendMode(settings.default_backend),
            local_url=settings.local_generate_url,
            local_model=settings.local_model or None,
            cloud_url=settings.get_cloud_url(),
            cloud_model=settings.gemini_model,
            api_key=settings.gemini_api_key,
        )


class CloudBackend:
    """Gemini generateContent request shaping."""

    mode = BackendMode.CLOUD

    def __init__(self, url: str, model_name: str, api_key: str):
        self.url = url
        self.model_name = model_name
        self.api_key = api_key

    @property
    def headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.api_key}

    def build_request(self, profile: DomainProfile, prompt: PromptBundle) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt.user}]}],
            "systemInstruction": {"parts": [{"text": prompt.system}]},
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": copy.deepcopy(profile.output_schema),
            },
        }
        if prompt.tools:
            payload["tools"] = prompt.tools
        return payload

    @staticmethod
    def extract_text(response: Any) -> str | None:
        try:
            text = response["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
        return text if isinstance(text, str) and text else None


class LocalBackend:
    """Ollama /api/generate request shaping."""

    mode = BackendMode.LOCAL

    def __init__(self, url: str, model_name: str):
        self.url = url
        self.model_name = model_name

    @property
    def headers(self) -> dict[str, str]:
        return {}

    def build_request(self, profile: DomainProfile, prompt: PromptBundle) -> dict[str, Any]:
        # No separate system channel: system and user instructions are concatenated
        return {
            "model": self.model_name,
            "prompt": prompt.combined(),
            "stream": False,
            "format": "json",
            "options": dict(LOCAL_GENERATION_OPTIONS),
        }

    @staticmethod
    def extract_text(response: Any) -> str | None:
        if not isinstance(response, dict):
            return None
        text = response.get("response")
        return text if isinstance(text, str) and text else None


Backend = CloudBackend | LocalBackend


def get_backend(config: BackendConfig) -> Backend:
    """Select the backend strategy for the active mode."""
    if BackendMode(config.mode) is BackendMode.LOCAL:
        return LocalBackend(url=config.local_url, model_name=config.local_model or "")
    return CloudBackend(url=config.cloud_url, model_name=config.cloud_model, api_key=config.api_key)
