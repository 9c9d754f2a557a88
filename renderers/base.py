"""Base classes for roadmap renderers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from models import RoadmapRecord


class BaseRenderer(ABC):
    """Shared interface for any roadmap renderer."""

    name: str = "base"

    @abstractmethod
    def render(self, record: RoadmapRecord, report_dir: str) -> List[str]:
        """Render the record into artifacts and return the written file paths."""
