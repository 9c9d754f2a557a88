"""
Generation service adapter.

Wraps the hosted chat model behind a single ``invoke`` call. Engine strength
and live web search are selected strictly from the tier policy.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from config import ReguflowConfig
from errors import GenerationServiceError
from models import Attachment
from prompt_composer import PromptPayload
from tier_policy import EngineStrength, TierPolicy

logger = logging.getLogger(__name__)

MODEL_BY_STRENGTH = {
    EngineStrength.STANDARD: ReguflowConfig.STANDARD_MODEL,
    EngineStrength.ADVANCED: ReguflowConfig.ADVANCED_MODEL,
}


@dataclass
class RawResponse:
    """Unvalidated service reply: text plus any citation annotations."""

    text: str
    model: str
    citations: List[Dict[str, Any]] = field(default_factory=list)


def attachment_part(attachment: Attachment) -> Dict[str, Any]:
    """Typed base64 content block for one attachment."""
    encoded = base64.b64encode(attachment.data).decode("ascii")
    if attachment.is_image:
        return {
            "type": "image",
            "source_type": "base64",
            "data": encoded,
            "mime_type": attachment.mime_type,
        }
    part = {
        "type": "file",
        "source_type": "base64",
        "data": encoded,
        "mime_type": attachment.mime_type,
    }
    if attachment.filename:
        part["filename"] = attachment.filename
    return part


def message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    chunks: List[str] = []
    for block in content or []:
        if isinstance(block, str):
            chunks.append(block)
        elif isinstance(block, dict) and block.get("type") in ("text", "output_text"):
            chunks.append(block.get("text") or "")
    return "".join(chunks)


def message_citations(content: Any) -> List[Dict[str, Any]]:
    """Collect annotation dicts attached to text blocks, in order."""
    if isinstance(content, str):
        return []
    citations: List[Dict[str, Any]] = []
    for block in content or []:
        if not isinstance(block, dict):
            continue
        for annotation in block.get("annotations") or []:
            if isinstance(annotation, dict):
                citations.append(annotation)
    return citations


class GenerationClient:
    """Single-call adapter over ``langchain_openai.ChatOpenAI``."""

    def __init__(
        self,
        api_key: str,
        organization: Optional[str] = None,
        timeout: float = ReguflowConfig.HTTP_TIMEOUT_SECONDS,
        temperature: float = ReguflowConfig.MODEL_TEMPERATURE,
    ):
        self.api_key = api_key
        self.organization = organization or ReguflowConfig.OPENAI_ORGANIZATION
        self.timeout = timeout
        self.temperature = temperature

    def _build_llm(self, policy: TierPolicy) -> Any:
        llm_params = {
            "api_key": self.api_key,
            "model": MODEL_BY_STRENGTH[policy.engine_strength],
            "temperature": self.temperature,
            "timeout": self.timeout,
            "max_retries": 0,
        }
        if self.organization:
            llm_params["openai_organization"] = self.organization
        if policy.use_live_augmentation:
            # JSON mode is not combined with the search tool; fences are unwrapped downstream.
            llm_params["use_responses_api"] = True
            return ChatOpenAI(**llm_params).bind_tools([ReguflowConfig.WEB_SEARCH_TOOL])
        llm_params["response_format"] = ReguflowConfig.RESPONSE_FORMAT
        return ChatOpenAI(**llm_params)

    def _build_messages(self, payload: PromptPayload) -> List[Any]:
        if payload.attachments:
            content: Any = [{"type": "text", "text": payload.user_text}]
            content.extend(attachment_part(att) for att in payload.attachments)
        else:
            content = payload.user_text
        return [SystemMessage(content=payload.system_instruction), HumanMessage(content=content)]

    def invoke(self, payload: PromptPayload, policy: TierPolicy) -> RawResponse:
        """
        Call the generation service once.

        Args:
            payload: Composed prompt
            policy: Tier policy selecting engine and web search

        Returns:
            RawResponse with text and, when web search was requested, citations

        Raises:
            GenerationServiceError: when the service returned no text
        """
        model = MODEL_BY_STRENGTH[policy.engine_strength]
        llm = self._build_llm(policy)
        logger.info(
            f"Invoking {model} (web_search={policy.use_live_augmentation}, "
            f"attachments={len(payload.attachments)})"
        )
        response = llm.invoke(self._build_messages(payload))

        text = message_text(response.content).strip()
        if not text:
            raise GenerationServiceError("Empty response from AI engine.")

        citations = message_citations(response.content) if policy.use_live_augmentation else []
        logger.info(f"Received {len(text)} chars, {len(citations)} citation(s)")
        return RawResponse(text=text, model=model, citations=citations)
