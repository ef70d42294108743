"""Lookup of the corpus answer recorded for a derived prompt."""

from collections.abc import Iterable

from analyser.ingest.models import AnswerRecord


def find_matching_answer(prompt: str, corpus: Iterable[AnswerRecord]) -> AnswerRecord | None:
    """Return the first record whose query contains, or is contained in, the prompt.

    Comparison is case-insensitive. Records with an empty query and an empty
    prompt never match.
    """
    lower_prompt = (prompt or "").lower()
    if not lower_prompt:
        return None

    for record in corpus:
        query = record.query.lower()
        if not query:
            continue
        if query in lower_prompt or lower_prompt in query:
            return record
    return None
