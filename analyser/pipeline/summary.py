"""Aggregate statistics over a batch of results."""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from analyser.diagnostics.models import SimilarityLabel
from .models import AnalysisResult


@dataclass
class BatchSummary:
    """Headline numbers for a finished batch."""

    urls_analyzed: int
    average_similarity: float
    distribution: dict[str, int] = field(default_factory=dict)
    average_priority: float = 0.0
    top_priority_url: str | None = None
    degraded_items: int = 0


def summarize_results(results: Sequence[AnalysisResult]) -> BatchSummary:
    """Summarize results; undefined similarities are left out of the average."""
    distribution = {label.value: 0 for label in SimilarityLabel}
    for result in results:
        distribution[result.similarity_label.value] += 1

    scored = [r.similarity for r in results if not math.isnan(r.similarity)]
    average_similarity = sum(scored) / len(scored) if scored else float("nan")
    average_priority = sum(r.priority_score for r in results) / len(results) if results else 0.0
    top = max(results, key=lambda r: r.priority_score, default=None)

    return BatchSummary(
        urls_analyzed=len(results),
        average_similarity=average_similarity,
        distribution=distribution,
        average_priority=average_priority,
        top_priority_url=top.url if top else None,
        degraded_items=sum(1 for r in results if r.degraded),
    )
