"""
Compass models - a guided walk through the four fixed analysis phases.
"""

import uuid
from typing import Optional
from pydantic import BaseModel, Field

from .base import BaseEntity


class PhaseAnalysis(BaseModel):
    """The recorded answer to one phase plus its static annotations."""
    phase: int
    question: str
    answer: str
    perspectives: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)


class CompassRun(BaseEntity):
    id: str = Field(default_factory=lambda: f"compass-{uuid.uuid4().hex[:12]}")
    idea: str
    language: str = "de"
    current_phase: int = 0
    analyses: list[PhaseAnalysis] = Field(default_factory=list)
    completed: bool = False

    def last_analysis(self) -> Optional[PhaseAnalysis]:
        return self.analyses[-1] if self.analyses else None
