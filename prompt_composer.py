"""
Prompt composition for roadmap generation.

Builds the instruction text and user context sent to the generation service.
Attachments travel as separate typed parts on the payload and are never
inlined into the text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from config import ReguflowConfig
from models import Attachment
from tier_policy import TierPolicy

logger = logging.getLogger(__name__)

HISTORY_HEADER = "PRIOR SCENARIOS (context only, most recent first; do not answer these):"
QUERY_HEADER = "CURRENT SCENARIO:"


@dataclass
class PromptPayload:
    system_instruction: str
    user_text: str
    attachments: List[Attachment] = field(default_factory=list)
    history_count: int = 0


def _history_entries(recent_history: Sequence[str], limit: int) -> List[str]:
    return [entry.strip() for entry in recent_history if entry and entry.strip()][:limit]


def _history_block(entries: Sequence[str]) -> List[str]:
    if not entries:
        return []
    lines = [HISTORY_HEADER]
    for i, entry in enumerate(entries, 1):
        lines.append(f"{i}. {entry}")
    lines.append("")
    return lines


def _tier_directives(policy: TierPolicy) -> List[str]:
    directives: List[str] = []
    if policy.use_live_augmentation:
        hints = ", ".join(ReguflowConfig.OFFICIAL_SOURCE_HINTS)
        directives.append(
            "Use live web search to confirm current rules. Prefer official government "
            f"sources ({hints}) and cite the specific ministry or regulator pages."
        )
    if policy.amplified_detail:
        directives.append(
            "Provide statutory citation-level detail: name the act, section, rule and "
            "form number behind every regulation and obligation."
        )
        directives.append(
            f"Break the checklist into roughly {policy.detail_multiplier}x the usual number of "
            "granular steps, each naming the portal, form or office involved."
        )
    return directives


def compose_prompt(
    scenario: str,
    recent_history: Sequence[str],
    policy: TierPolicy,
    attachments: Optional[Sequence[Attachment]] = None,
    history_limit: Optional[int] = None,
) -> PromptPayload:
    """
    Build the request payload for one roadmap generation.

    Args:
        scenario: Current business scenario text (may be empty when attachments exist)
        recent_history: Prior scenario strings, most recent first
        policy: Resolved tier policy
        attachments: Optional binary parts
        history_limit: Maximum number of history entries included (config default)

    Returns:
        PromptPayload with system instruction, user text and attachment parts
    """
    attachments = list(attachments or [])
    if history_limit is None:
        history_limit = ReguflowConfig.HISTORY_LIMIT
    history = _history_entries(recent_history, max(history_limit, 0))
    history_lines = _history_block(history)

    system_parts = [ReguflowConfig.system_instruction()]
    directives = _tier_directives(policy)
    if directives:
        system_parts.append("PLAN DETAIL\n" + "\n".join(f"- {d}" for d in directives))
    system_instruction = "\n\n".join(system_parts)

    user_lines: List[str] = list(history_lines)
    user_lines.append(QUERY_HEADER)
    scenario_text = (scenario or "").strip()
    if scenario_text:
        user_lines.append(scenario_text)
    else:
        user_lines.append("(No text provided. Derive the business scenario from the attached documents.)")
    if attachments:
        user_lines.append("")
        user_lines.append(f"{len(attachments)} attachment(s) provided as supporting material.")

    payload = PromptPayload(
        system_instruction=system_instruction,
        user_text="\n".join(user_lines),
        attachments=attachments,
        history_count=len(history),
    )
    token_estimate = (len(payload.system_instruction) + len(payload.user_text)) // 4
    logger.debug(f"Prompt: ~{token_estimate} tokens, history={payload.history_count}, attachments={len(attachments)}")
    return payload
