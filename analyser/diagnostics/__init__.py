"""Content diagnostics module."""

from .engine import (
    calculate_priority_score,
    classify_intent,
    detect_entity_mismatch,
    detect_structure_issue,
    diagnose,
    find_keyword_gaps,
    similarity_label,
)
from .models import (
    DEFAULT_VOCABULARY,
    Diagnostics,
    DiagnosticsVocabulary,
    IntentType,
    SimilarityLabel,
)

__all__ = [
    "DEFAULT_VOCABULARY",
    "Diagnostics",
    "DiagnosticsVocabulary",
    "IntentType",
    "SimilarityLabel",
    "calculate_priority_score",
    "classify_intent",
    "detect_entity_mismatch",
    "detect_structure_issue",
    "diagnose",
    "find_keyword_gaps",
    "similarity_label",
]
