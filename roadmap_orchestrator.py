"""
Roadmap Generation Orchestrator

Public entry point: resolves tier policy, composes the prompt, calls the
generation service once and validates the reply. Every failure reaches the
caller as a classified error; no partial roadmap is ever returned.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from errors import GenerationServiceError, InvalidRequest
from generation_client import GenerationClient, RawResponse
from models import RoadmapRequest, RoadmapResult
from prompt_composer import PromptPayload, compose_prompt
from response_normalizer import parse_and_validate
from tier_policy import TierPolicy, resolve_policy

logger = logging.getLogger(__name__)


class RequestStatus(str, Enum):
    IDLE = "IDLE"
    REQUESTED = "REQUESTED"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class RoadmapOrchestrator:
    """Ties tier policy, prompt, generation and validation together."""

    def __init__(self, client: GenerationClient):
        self.client = client
        self.last_status = RequestStatus.IDLE

    def generate_roadmap(self, request: RoadmapRequest) -> RoadmapResult:
        if not request.has_content:
            raise InvalidRequest("Scenario text is empty and no attachments were provided.")

        self.last_status = RequestStatus.REQUESTED
        try:
            result = self._run(request)
        except Exception:
            self.last_status = RequestStatus.FAILED
            raise
        self.last_status = RequestStatus.SUCCEEDED
        return result

    def _run(self, request: RoadmapRequest) -> RoadmapResult:
        policy = resolve_policy(request.tier)
        logger.info(
            f"Generating roadmap: tier={request.tier.value}, engine={policy.engine_strength.value}, "
            f"web_search={policy.use_live_augmentation}, detail={policy.detail_multiplier}"
        )
        payload = compose_prompt(
            request.scenario,
            request.recent_history,
            policy,
            attachments=request.attachments,
        )

        raw = self._invoke(payload, policy)

        result = parse_and_validate(
            raw.text,
            citations=raw.citations,
            augmentation_requested=policy.use_live_augmentation,
        )
        logger.info(
            f"Roadmap ready: {len(result.applicable_regulations)} regulations, "
            f"{len(result.actionable_task_checklist)} tasks, grounded={bool(result.is_grounded)}"
        )
        return result

    def _invoke(self, payload: PromptPayload, policy: TierPolicy) -> RawResponse:
        try:
            return self.client.invoke(payload, policy)
        except GenerationServiceError:
            raise
        except Exception as exc:
            logger.error(f"Error calling generation service: {exc}")
            raise GenerationServiceError(f"Generation service call failed: {exc}") from exc


def create_orchestrator(api_key: str, organization: Optional[str] = None) -> RoadmapOrchestrator:
    """Factory function to create an orchestrator over the hosted model."""
    return RoadmapOrchestrator(GenerationClient(api_key=api_key, organization=organization))
