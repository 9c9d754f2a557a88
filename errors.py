"""Classified failures surfaced by the roadmap pipeline."""

from __future__ import annotations


class ReguflowError(Exception):
    """Base class; every pipeline failure is one of the subclasses below."""

    user_message = "Roadmap generation failed."


class InvalidRequest(ReguflowError, ValueError):
    """Request rejected before any external call was made."""

    user_message = "Describe your business scenario or attach a document first."


class GenerationServiceError(ReguflowError, RuntimeError):
    """The generation service call failed, timed out, or returned no text."""

    user_message = "The analysis engine is unavailable right now. Please try again."


class MalformedResponse(ReguflowError, ValueError):
    """Text came back but did not match the roadmap shape."""

    user_message = (
        "The AI returned an invalid format. This usually happens with very complex "
        "scenarios. Please try simplifying your input."
    )


class AuthorizationRequired(ReguflowError, PermissionError):
    """The acting tier needs a credential that has not been selected yet."""

    user_message = "Select an API key for your plan before generating a roadmap."

    def __init__(self, tier: str, message: str = ""):
        self.tier = tier
        super().__init__(message or f"Tier {tier} requires a configured credential.")
