"""Analysis pipeline module."""

from .analyzer import SimilarityAnalyzer
from .models import AnalysisResult, AnalysisState, AnalysisStep, StepStatus
from .summary import BatchSummary, summarize_results

__all__ = [
    "AnalysisResult",
    "AnalysisState",
    "AnalysisStep",
    "BatchSummary",
    "SimilarityAnalyzer",
    "StepStatus",
    "summarize_results",
]
