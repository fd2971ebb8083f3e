"""
LLM Prompts for QA Pair Generation.

Builds the instruction payload for one curation request:
1. System instruction - taken from the domain profile (format contract + pair cap)
2. User instruction - embeds the literal source (text mode) or describes
   the search target (web-query mode)
3. Tools - web-search directive, cloud + web-query only

Local models get a terse imperative checklist; they are less reliable at
following long-form instructions, so they are also asked for fewer pairs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from qa_curator.core.modes import DIFFICULTY_VALUES, BackendMode, InputMode
from qa_curator.generation.domains import DomainProfile
from qa_curator.generation.schemas import WEB_SEARCH_TOOLS

# =============================================================================
# Pair Count Policy
# =============================================================================

PAIRS_PER_REQUEST = {
    BackendMode.LOCAL: 4,
    BackendMode.CLOUD: 6,
}


def get_pair_count(profile: DomainProfile, backend_mode: BackendMode) -> int:
    """Pairs to request: backend policy, capped by the domain maximum."""
    return min(PAIRS_PER_REQUEST[BackendMode(backend_mode)], profile.max_pairs)


# =============================================================================
# User Prompt Templates
# =============================================================================

WEB_QUERY_PROMPT = (
    'Analyze the information provided by the Google Search sources related to "{query}" '
    "and generate a JSON array of objects with {num_pairs} question-answer pairs. "
    "The generation must be strictly based on the content of those web sources "
    "and on the {label} domain."
)

CLOUD_TEXT_PROMPT = (
    "From the following source text specialised in {label}, generate a JSON array of "
    "objects with {num_pairs} question-answer pairs. Use only the information provided "
    "in the text. SOURCE TEXT:\n\n---\n{source}\n---"
)

LOCAL_TEXT_PROMPT = """SOURCE TEXT: {source}

GENERATE EXACTLY {num_pairs} QA PAIRS IN JSON FORMAT.

INSTRUCTIONS:
- ONLY respond with valid JSON
- Each object must have: question, answer, difficulty
- Use ONLY information from the provided text
- Difficulty: {difficulties}

RESPOND ONLY WITH THE JSON, NOTHING ELSE."""


@dataclass
class PromptBundle:
    """Instruction payload for one curation request."""

    system: str
    user: str
    num_pairs: int
    tools: list[dict[str, Any]] = field(default_factory=list)

    def combined(self) -> str:
        """Single prompt for backends without a separate system channel."""
        return f"{self.system}\n\n{self.user}"


def build_user_prompt(
    profile: DomainProfile,
    input_mode: InputMode,
    source: str,
    backend_mode: BackendMode,
    num_pairs: int,
) -> str:
    """Render the user instruction for a mode/backend combination."""
    if InputMode(input_mode) is InputMode.WEB_QUERY:
        return WEB_QUERY_PROMPT.format(query=source, num_pairs=num_pairs, label=profile.label)

    if BackendMode(backend_mode) is BackendMode.LOCAL:
        return LOCAL_TEXT_PROMPT.format(
            source=source,
            num_pairs=num_pairs,
            difficulties=", ".join(DIFFICULTY_VALUES),
        )

    return CLOUD_TEXT_PROMPT.format(label=profile.label, num_pairs=num_pairs, source=source)


def build_prompt(
    profile: DomainProfile,
    input_mode: InputMode,
    source: str,
    backend_mode: BackendMode,
) -> PromptBundle:
    """
    Build the full prompt bundle.

    Pure: no network or state side effects.

    Args:
        profile: Domain profile supplying the system instruction
        input_mode: text or web-query
        source: Source text, or the search target in web-query mode
        backend_mode: Target backend (drives pair count and prompt style)

    Returns:
        PromptBundle with system/user instructions and optional tools
    """
    num_pairs = get_pair_count(profile, backend_mode)
    tools: list[dict[str, Any]] = []
    if BackendMode(backend_mode) is BackendMode.CLOUD and InputMode(input_mode) is InputMode.WEB_QUERY:
        tools = [dict(tool) for tool in WEB_SEARCH_TOOLS]

    return PromptBundle(
        system=profile.system_prompt,
        user=build_user_prompt(profile, input_mode, source, backend_mode, num_pairs),
        num_pairs=num_pairs,
        tools=tools,
    )
