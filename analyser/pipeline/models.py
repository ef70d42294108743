"""Pipeline state and result models."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer

from analyser.diagnostics.models import IntentType, SimilarityLabel


class StepStatus(str, Enum):
    """Lifecycle of a pipeline stage."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass
class AnalysisStep:
    """A named pipeline stage as shown to the user."""

    id: str
    title: str
    status: StepStatus = StepStatus.PENDING
    description: str | None = None


def default_steps() -> list[AnalysisStep]:
    """Fresh stage list in execution order."""
    return [
        AnalysisStep("parse", "Parsing uploaded files"),
        AnalysisStep("extract", "Extracting URLs and responses"),
        AnalysisStep("scrape", "Scraping page content"),
        AnalysisStep("embed", "Generating embeddings"),
        AnalysisStep("calculate", "Calculating similarity scores"),
    ]


class AnalysisResult(BaseModel):
    """Outcome of analysing one URL against its matched answer."""

    model_config = ConfigDict(frozen=True)

    url: str
    prompt: str
    page_text: str
    gpt_answer: str
    similarity: float
    intent_type: IntentType
    match_found: bool = True
    ideal_prompt: str = ""
    priority_score: float
    keyword_gaps: tuple[str, ...] = ()
    entity_mismatch: bool = False
    sentence_structure_issue: bool = False
    similarity_label: SimilarityLabel = SimilarityLabel.POOR
    degraded: bool = False

    @field_serializer("similarity", when_used="json")
    def serialize_similarity(self, value: float) -> float | None:
        # JSON has no NaN; an undefined score is sent as null
        return value if math.isfinite(value) else None


@dataclass
class AnalysisState:
    """Progress view of a batch run.

    Owned and mutated by one SimilarityAnalyzer; everyone else should read
    ``snapshot()``.
    """

    is_analyzing: bool = False
    progress: int = 0
    steps: list[AnalysisStep] = field(default_factory=default_steps)
    results: list[AnalysisResult] = field(default_factory=list)
    total_urls: int = 0
    processed_urls: int = 0
    missing_coverage: int = 0
    degraded_items: int = 0
    failed_items: int = 0
    error: str | None = None

    def step(self, step_id: str) -> AnalysisStep:
        for step in self.steps:
            if step.id == step_id:
                return step
        raise KeyError(f"Unknown step: {step_id}")

    def snapshot(self) -> dict[str, Any]:
        """Read-only copy suitable for presentation or JSON encoding."""
        return {
            "is_analyzing": self.is_analyzing,
            "progress": self.progress,
            "steps": [
                {
                    "id": s.id,
                    "title": s.title,
                    "status": s.status.value,
                    "description": s.description,
                }
                for s in self.steps
            ],
            "results": [r.model_dump(mode="json") for r in self.results],
            "total_urls": self.total_urls,
            "processed_urls": self.processed_urls,
            "missing_coverage": self.missing_coverage,
            "degraded_items": self.degraded_items,
            "failed_items": self.failed_items,
            "error": self.error,
        }
