"""LLM-based QA pair generation.

Pipeline:
1. Prompt builder specialises the instructions per domain and backend
2. Structured recovery turns model text into validated QA pairs
3. Heuristic scorer attaches confidence/accuracy/score

Usage:
    from qa_curator.generation.curator import CurationRequest, QACurator

    curator = QACurator()
    dataset = await curator.curate(session, CurationRequest(source=text, domain="law"))
"""

from qa_curator.generation.domains import DOMAIN_PROFILES, DomainProfile, get_domain
from qa_curator.generation.prompts import PromptBundle, build_prompt
from qa_curator.generation.recovery import RecoveryResult, recover, recover_qa_pairs
from qa_curator.generation.scoring import HeuristicMetrics, calculate_heuristic_metrics

__all__ = [
    "DOMAIN_PROFILES",
    "DomainProfile",
    "get_domain",
    "PromptBundle",
    "build_prompt",
    "RecoveryResult",
    "recover",
    "recover_qa_pairs",
    "HeuristicMetrics",
    "calculate_heuristic_metrics",
]
