"""
ReguFlow Configuration

Environment-driven settings for the roadmap engine. Values stay lightweight so
the orchestrator can focus on turning a scenario into an actionable checklist.
"""

import os
from typing import Dict, List

from dotenv import load_dotenv

load_dotenv()


class ReguflowConfig:
    """Runtime configuration shared by the generation pipeline and the CLI."""

    PRODUCT_NAME = "ReguFlow"
    JURISDICTION = os.getenv("REGUFLOW_JURISDICTION", "India")

    # Generation engine
    STANDARD_MODEL = os.getenv("REGUFLOW_STANDARD_MODEL", "gpt-5-mini-2025-08-07")
    ADVANCED_MODEL = os.getenv("REGUFLOW_ADVANCED_MODEL", "gpt-5-2025-08-07")
    RESPONSE_FORMAT = {"type": "json_object"}
    WEB_SEARCH_TOOL = {"type": "web_search_preview"}
    MODEL_TEMPERATURE = float(os.getenv("REGUFLOW_MODEL_TEMPERATURE", "0.1"))
    HTTP_TIMEOUT_SECONDS = float(os.getenv("REGUFLOW_HTTP_TIMEOUT", "120"))
    OPENAI_ORGANIZATION = os.getenv("OPENAI_ORGANIZATION")

    # Prompt context
    HISTORY_LIMIT = int(os.getenv("REGUFLOW_HISTORY_LIMIT", "3"))
    OFFICIAL_SOURCE_HINTS = [
        hint.strip()
        for hint in os.getenv("REGUFLOW_OFFICIAL_SOURCES", "MCA,GSTN,RBI,SEBI,EPFO,FSSAI").split(",")
        if hint.strip()
    ]

    # Credentials per tier; paid tiers need their own key selected
    TIER_KEY_ENV: Dict[str, str] = {
        "FREE": "OPENAI_API_KEY",
        "PRO": "REGUFLOW_PRO_API_KEY",
        "PREMIUM": "REGUFLOW_PRO_API_KEY",
    }

    # Storage and logs
    STORE_DIR = os.getenv("REGUFLOW_STORE_DIR", "reguflow_data")
    LOG_DIR = os.getenv("REGUFLOW_LOG_DIR", "reguflow_logs")
    DEFAULT_USER = os.getenv("REGUFLOW_USER", "local")

    REQUIRED_FIELDS: List[str] = [
        "applicableRegulations",
        "complianceObligations",
        "actionableTaskChecklist",
        "requiredDocuments",
        "deadlinesFrequency",
        "riskFlags",
        "monitoringSuggestions",
    ]

    OUTPUT_SHAPE = (
        "{\n"
        '  "applicableRegulations": [{"name": string, "description": string}],\n'
        '  "complianceObligations": [string],\n'
        '  "actionableTaskChecklist": [{"task": string, "description": string}],\n'
        '  "requiredDocuments": [string],\n'
        '  "deadlinesFrequency": [string],\n'
        '  "riskFlags": [string],\n'
        '  "monitoringSuggestions": [string]\n'
        "}"
    )

    DISCLAIMER = (
        "This roadmap is an operational aid, not legal advice. "
        "Verify obligations with the relevant authority or a qualified professional."
    )

    @classmethod
    def system_instruction(cls) -> str:
        return (
            f"Role: Compliance & Risk Workflow Assistant ({cls.JURISDICTION})\n"
            f"Purpose: Convert complex {cls.JURISDICTION} regulations into clear operational tasks and checklists.\n"
            "Tone: Professional, neutral, helpful. NO legal advice.\n\n"
            "OUTPUT CONTRACT\n"
            "- Return exactly one JSON object with this shape and these seven keys:\n"
            f"{cls.OUTPUT_SHAPE}\n"
            "- Every key is required. Use an empty list when nothing applies.\n"
            "- Order actionableTaskChecklist in the sequence the operator should work through it.\n"
            "- Do not include any text, markdown, or code fences outside the JSON object."
        )
