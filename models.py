from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Tier(str, Enum):
    """Subscription level carried in the user's identity metadata."""

    FREE = "FREE"
    PRO = "PRO"
    PREMIUM = "PREMIUM"


class Attachment(BaseModel):
    """Binary document or photo sent alongside the scenario text."""

    data: bytes
    mime_type: str
    filename: Optional[str] = None

    @field_validator("mime_type")
    def validate_mime_type(cls, v: str) -> str:
        if "/" not in v:
            raise ValueError(f"Media type must look like 'type/subtype': {v}")
        return v.strip().lower()

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")


class RoadmapRequest(BaseModel):
    scenario: str = ""
    tier: Tier = Tier.FREE
    attachments: List[Attachment] = Field(default_factory=list)
    recent_history: List[str] = Field(
        default_factory=list, description="Prior scenarios, most recent first"
    )

    @property
    def has_content(self) -> bool:
        return bool(self.scenario.strip()) or bool(self.attachments)


class Regulation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str


class ComplianceTask(BaseModel):
    model_config = ConfigDict(frozen=True)

    task: str
    description: str


class GroundingSource(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    uri: str


class RoadmapResult(BaseModel):
    """
    Structured compliance roadmap returned by the generation pipeline.

    The seven primary lists are required; a reply missing any of them is
    rejected rather than defaulted. Grounding fields are only set by the
    normalizer, never taken from model text.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    applicable_regulations: List[Regulation] = Field(alias="applicableRegulations")
    compliance_obligations: List[str] = Field(alias="complianceObligations")
    actionable_task_checklist: List[ComplianceTask] = Field(alias="actionableTaskChecklist")
    required_documents: List[str] = Field(alias="requiredDocuments")
    deadlines_frequency: List[str] = Field(alias="deadlinesFrequency")
    risk_flags: List[str] = Field(alias="riskFlags")
    monitoring_suggestions: List[str] = Field(alias="monitoringSuggestions")
    is_grounded: Optional[bool] = Field(default=None, alias="isGrounded")
    grounding_sources: Optional[List[GroundingSource]] = Field(default=None, alias="groundingSources")

    def to_payload(self) -> dict:
        """camelCase dict suitable for JSON storage."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RoadmapRecord(BaseModel):
    """Persisted roadmap plus the user's completion state."""

    id: str
    user_id: str
    scenario: str
    data: RoadmapResult
    completed_tasks: List[str] = Field(default_factory=list)
    created_at: datetime
