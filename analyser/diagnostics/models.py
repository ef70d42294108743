"""Vocabulary and result models for content diagnostics."""

from dataclasses import dataclass, field
from enum import Enum


class IntentType(str, Enum):
    """Coarse classification of a query's purpose."""

    INFORMATIONAL = "Informational"
    TRANSACTIONAL = "Transactional"
    NAVIGATIONAL = "Navigational"
    MIXED = "Mixed"


class SimilarityLabel(str, Enum):
    """Quality bucket for a similarity score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


@dataclass(frozen=True)
class DiagnosticsVocabulary:
    """Keyword lists and patterns the diagnostics are computed from.

    The defaults target rail ticket pages; pass a different vocabulary to
    reuse the diagnostics for another domain.
    """

    critical_terms: tuple[str, ...] = (
        "cheapest",
        "price",
        "prices",
        "fare",
        "fares",
        "booking",
        "book",
        "discount",
        "railcard",
        "advance",
        "off-peak",
        "return",
        "single",
        "direct",
        "journey time",
        "refund",
        "timetable",
        "e-ticket",
    )
    brand_entities: tuple[str, ...] = (
        "trainline",
        "thetrainline",
        "national rail",
        "eurostar",
        "omio",
        "rail europe",
        "trainpal",
        "lner",
        "avanti",
        "gwr",
        "split my fare",
    )
    transactional_keywords: tuple[str, ...] = (
        "buy",
        "book",
        "booking",
        "cheapest",
        "cheap",
        "ticket",
        "tickets",
        "price",
        "prices",
        "fare",
        "fares",
        "deal",
        "deals",
        "discount",
        "purchase",
        "order",
    )
    informational_keywords: tuple[str, ...] = (
        "how",
        "what",
        "why",
        "when",
        "which",
        "guide",
        "timetable",
        "journey time",
        "duration",
        "distance",
        "information",
        "tips",
    )
    navigational_keywords: tuple[str, ...] = (
        "login",
        "log in",
        "sign in",
        "account",
        "homepage",
        "contact",
        "official site",
        "website",
        "app",
    )
    pricing_patterns: tuple[str, ...] = (
        r"[£$€]\s?\d+(?:[.,]\d{1,2})?",
        r"\b\d+(?:[.,]\d{1,2})?\s?(?:gbp|eur|usd|pounds?|euros?|dollars?)\b",
        r"\b(?:from|only|just)\s+[£$€]",
    )
    vague_patterns: tuple[str, ...] = (
        r"\bgreat value\b",
        r"\bbest (?:prices?|deals?)\b",
        r"\baffordable\b",
        r"\bcompetitive(?:ly)? pric",
        r"\bvarious options\b",
        r"\ba (?:wide )?range of\b",
        r"\bmany options\b",
        r"\bflexible\b",
        r"\bconvenient\b",
        r"\bdiscover\b",
        r"\bexplore\b",
    )


DEFAULT_VOCABULARY = DiagnosticsVocabulary()


@dataclass(frozen=True)
class Diagnostics:
    """Derived findings for a scored page/answer pair."""

    intent_type: IntentType
    keyword_gaps: tuple[str, ...] = field(default_factory=tuple)
    entity_mismatch: bool = False
    sentence_structure_issue: bool = False
    priority_score: float = 0.0
    similarity_label: SimilarityLabel = SimilarityLabel.POOR
