"""
Domain profiles.

Each subject-matter domain is a frozen configuration record looked up by
identifier. Domains differ only in data (label, pair cap, prompt text), so
there is no per-domain subclassing.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from qa_curator.core.errors import InputValidationError
from qa_curator.core.modes import DIFFICULTY_VALUES
from qa_curator.generation.schemas import EXAMPLE_OUTPUT, QA_RESPONSE_SCHEMA

DEFAULT_MAX_PAIRS = 6

RECOMMENDED_MODELS = {
    "small": "phi3:mini",
    "medium": "llama3:8b",
    "large": "mixtral:8x7b",
}

# Substrings marking a local model as small (limited instruction following)
SMALL_MODEL_MARKERS = (":1b", ":2b", ":3b", "tiny", "mini", "phi3")


@dataclass(frozen=True)
class DomainProfile:
    """Immutable prompt/schema bundle for one subject area."""

    id: str
    label: str
    max_pairs: int
    system_prompt: str
    output_schema: dict[str, Any]
    recommended_models: dict[str, str] = field(default_factory=lambda: dict(RECOMMENDED_MODELS))


def build_system_prompt(label: str, max_pairs: int) -> str:
    """System instruction shared by all domains, specialised by label and pair cap."""
    difficulties = "|".join(DIFFICULTY_VALUES)
    return f"""You are an expert in {label}. Generate EXCLUSIVELY a valid JSON array.

**INSTRUCTIONS:**
1. ONLY respond with valid JSON, no additional text
2. Structure: [{{"question": "...", "answer": "...", "difficulty": "{difficulties}"}}]
3. Each object must have exactly the fields question, answer, difficulty
4. difficulty must be one of: {", ".join(DIFFICULTY_VALUES)}
5. Use ONLY information from the provided source
6. Maximum {max_pairs} QA pairs
7. Vary the difficulty

**EXAMPLE:**
{EXAMPLE_OUTPUT}"""


def create_domain_profile(domain_id: str, label: str, max_pairs: int = DEFAULT_MAX_PAIRS) -> DomainProfile:
    """Build a profile from its static configuration."""
    return DomainProfile(
        id=domain_id,
        label=label,
        max_pairs=max_pairs,
        system_prompt=build_system_prompt(label, max_pairs),
        output_schema=copy.deepcopy(QA_RESPONSE_SCHEMA),
    )


DOMAIN_PROFILES: dict[str, DomainProfile] = {
    profile.id: profile
    for profile in (
        create_domain_profile("medicine", "Medicine"),
        create_domain_profile("law", "Law"),
        create_domain_profile("technology", "Technology"),
        create_domain_profile("finance", "Finance/Economics"),
    )
}


def get_domain(domain_id: str) -> DomainProfile:
    """Look up a domain profile by identifier."""
    try:
        return DOMAIN_PROFILES[domain_id]
    except KeyError:
        known = ", ".join(DOMAIN_PROFILES)
        raise InputValidationError(f"Unknown domain '{domain_id}'. Available: {known}") from None


def is_small_model(model_name: str | None) -> bool:
    """Heuristic: does this local model name denote a small model?"""
    if not model_name:
        return False
    name = model_name.lower()
    return any(marker in name for marker in SMALL_MODEL_MARKERS)
