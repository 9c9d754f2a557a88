"""Renderer registry."""

from __future__ import annotations

from typing import List

from .base import BaseRenderer


def _normalized(name: str) -> str:
    return (name or "").strip().lower()


def get_renderer(name: str) -> BaseRenderer:
    normalized = _normalized(name)
    if normalized in {"roadmap_markdown", "markdown", "print"}:
        from .roadmap_markdown import RoadmapMarkdownRenderer

        return RoadmapMarkdownRenderer()
    raise ValueError(f"Unknown renderer '{name}'")


def available_renderers() -> List[str]:
    return ["roadmap_markdown"]
