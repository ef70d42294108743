"""Parsers that turn uploaded text into pipeline inputs."""

import csv
import logging

from pydantic import TypeAdapter, ValidationError

from analyser.errors import InputFormatError
from .models import AnswerRecord

logger = logging.getLogger(__name__)

_corpus_adapter = TypeAdapter(list[AnswerRecord])


def parse_url_list(text: str, max_urls: int | None = 5) -> list[str]:
    """Extract URLs from a delimited URL list.

    The first non-blank line is a header and is skipped. Each following row
    contributes its first CSV field, so a quoted URL may contain commas,
    with any remaining quote characters removed.

    Args:
        text: Raw contents of the uploaded file
        max_urls: Maximum number of data rows to consume, None for no limit

    Returns:
        List of URLs in file order
    """
    if max_urls is not None and max_urls < 0:
        raise ValueError("max_urls must not be negative")

    lines = [line for line in text.splitlines() if line.strip()]
    rows = lines[1:]
    if max_urls is not None:
        rows = rows[:max_urls]

    urls = [(fields[0] if fields else "").strip().replace('"', "") for fields in csv.reader(rows)]
    logger.info(f"Parsed {len(urls)} URLs from {len(lines) - 1 if lines else 0} data rows")
    return urls


def parse_answer_corpus(text: str) -> list[AnswerRecord]:
    """Parse a JSON array of answer records.

    Raises:
        InputFormatError: If the text is not a JSON array of objects
    """
    try:
        records = _corpus_adapter.validate_json(text)
    except ValidationError as e:
        raise InputFormatError(f"Invalid answer corpus: {e.error_count()} problem(s), {e.errors()[0]['msg']}") from e

    logger.info(f"Parsed {len(records)} answer records")
    return records
