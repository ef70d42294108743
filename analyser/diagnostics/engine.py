"""Heuristic diagnostics derived from a scored page/answer pair.

Every function here is pure: the result depends only on the arguments and the
vocabulary passed in.
"""

import math
import re
from collections.abc import Iterable
from functools import lru_cache

from .models import (
    DEFAULT_VOCABULARY,
    Diagnostics,
    DiagnosticsVocabulary,
    IntentType,
    SimilarityLabel,
)

MAX_PRIORITY = 100.0
BASE_PRIORITY = 50.0
SIMILARITY_WEIGHT = 40.0
INTENT_BONUS = {IntentType.TRANSACTIONAL: 20.0, IntentType.MIXED: 15.0}
KEYWORD_GAP_WEIGHT = 5.0
ENTITY_MISMATCH_BONUS = 15.0
STRUCTURE_ISSUE_BONUS = 10.0


@lru_cache(maxsize=512)
def _term_pattern(term: str) -> re.Pattern[str]:
    # Whole-word match; words of a multi-word term may be separated by any whitespace
    body = r"\s+".join(re.escape(word) for word in term.split())
    return re.compile(rf"(?<!\w){body}(?!\w)", re.IGNORECASE)


def _contains_term(text: str, term: str) -> bool:
    return _term_pattern(term).search(text) is not None


def _count_terms(text: str, terms: Iterable[str]) -> int:
    return sum(len(_term_pattern(term).findall(text)) for term in terms)


def _matches_any(text: str, patterns: Iterable[str]) -> bool:
    return any(re.search(pattern, text, re.IGNORECASE) for pattern in patterns)


def find_keyword_gaps(
    page_text: str, answer: str, vocabulary: DiagnosticsVocabulary = DEFAULT_VOCABULARY
) -> tuple[str, ...]:
    """Critical terms used by the answer but missing from the page, sorted."""
    gaps = {
        term
        for term in vocabulary.critical_terms
        if _contains_term(answer, term) and not _contains_term(page_text, term)
    }
    return tuple(sorted(gaps))


def _brands_overlap(a: str, b: str) -> bool:
    a, b = a.lower(), b.lower()
    return a in b or b in a


def detect_entity_mismatch(
    page_text: str, answer: str, vocabulary: DiagnosticsVocabulary = DEFAULT_VOCABULARY
) -> bool:
    """True when the answer names a brand the page lacks while the page names another one.

    Brands whose names contain one another (``trainline``/``thetrainline``)
    are treated as the same brand.
    """
    answer_brands = [b for b in vocabulary.brand_entities if _contains_term(answer, b)]
    if not answer_brands:
        return False
    page_brands = [b for b in vocabulary.brand_entities if _contains_term(page_text, b)]

    for brand in answer_brands:
        if brand in page_brands:
            continue
        if any(not _brands_overlap(brand, other) for other in page_brands):
            return True
    return False


def detect_structure_issue(
    page_text: str, answer: str, vocabulary: DiagnosticsVocabulary = DEFAULT_VOCABULARY
) -> bool:
    """True when the answer quotes prices, the page does not, and the page is vague instead."""
    if _matches_any(page_text, vocabulary.pricing_patterns):
        return False
    if not _matches_any(answer, vocabulary.pricing_patterns):
        return False
    return _matches_any(page_text, vocabulary.vague_patterns)


def classify_intent(
    prompt: str, page_text: str, vocabulary: DiagnosticsVocabulary = DEFAULT_VOCABULARY
) -> IntentType:
    """Classify the combined prompt and page text by keyword counts."""
    text = f"{prompt} {page_text}"
    transactional = _count_terms(text, vocabulary.transactional_keywords)
    informational = _count_terms(text, vocabulary.informational_keywords)
    navigational = _count_terms(text, vocabulary.navigational_keywords)

    if transactional and informational:
        return IntentType.MIXED
    if transactional and transactional >= navigational:
        return IntentType.TRANSACTIONAL
    if informational and informational >= navigational:
        return IntentType.INFORMATIONAL
    return IntentType.NAVIGATIONAL


def calculate_priority_score(
    similarity: float,
    intent_type: IntentType,
    keyword_gaps: Iterable[str] = (),
    entity_mismatch: bool = False,
    sentence_structure_issue: bool = False,
) -> float:
    """Urgency of revising a page, from 0 to 100.

    Lower similarity raises the score. An undefined (NaN) similarity counts
    as zero similarity.
    """
    if math.isnan(similarity):
        similarity = 0.0

    score = BASE_PRIORITY + (1 - similarity) * SIMILARITY_WEIGHT
    score += INTENT_BONUS.get(intent_type, 0.0)
    score += KEYWORD_GAP_WEIGHT * len(tuple(keyword_gaps))
    if entity_mismatch:
        score += ENTITY_MISMATCH_BONUS
    if sentence_structure_issue:
        score += STRUCTURE_ISSUE_BONUS
    return min(MAX_PRIORITY, max(0.0, score))


def similarity_label(similarity: float) -> SimilarityLabel:
    """Bucket a similarity score; NaN is Poor."""
    if similarity >= 0.8:
        return SimilarityLabel.EXCELLENT
    if similarity >= 0.7:
        return SimilarityLabel.GOOD
    if similarity >= 0.6:
        return SimilarityLabel.FAIR
    return SimilarityLabel.POOR


def diagnose(
    prompt: str,
    page_text: str,
    answer: str,
    similarity: float,
    vocabulary: DiagnosticsVocabulary = DEFAULT_VOCABULARY,
) -> Diagnostics:
    """Run every diagnostic over a scored pair."""
    gaps = find_keyword_gaps(page_text, answer, vocabulary)
    entity = detect_entity_mismatch(page_text, answer, vocabulary)
    structure = detect_structure_issue(page_text, answer, vocabulary)
    intent = classify_intent(prompt, page_text, vocabulary)
    return Diagnostics(
        intent_type=intent,
        keyword_gaps=gaps,
        entity_mismatch=entity,
        sentence_structure_issue=structure,
        priority_score=calculate_priority_score(similarity, intent, gaps, entity, structure),
        similarity_label=similarity_label(similarity),
    )
