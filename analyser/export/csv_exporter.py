"""CSV serialization of analysis results."""

import csv
import io
import logging
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from analyser.pipeline.models import AnalysisResult

logger = logging.getLogger(__name__)

HEADER = ["URL", "Prompt", "Page Text (truncated)", "GPT Answer (truncated)", "Cosine Similarity"]
DIAGNOSTIC_HEADER = [
    "Intent",
    "Priority Score",
    "Keyword Gaps",
    "Entity Mismatch",
    "Structure Issue",
    "Degraded",
]


def _row(result: "AnalysisResult", include_diagnostics: bool) -> list[str]:
    row = [
        result.url,
        result.prompt,
        result.page_text,
        result.gpt_answer,
        f"{result.similarity:.4f}",
    ]
    if include_diagnostics:
        row += [
            result.intent_type.value,
            f"{result.priority_score:.1f}",
            "; ".join(result.keyword_gaps),
            str(result.entity_mismatch).lower(),
            str(result.sentence_structure_issue).lower(),
            str(result.degraded).lower(),
        ]
    return row


def export_csv(results: Sequence["AnalysisResult"], include_diagnostics: bool = False) -> str:
    """Serialize results as fully quoted CSV with a header row.

    Embedded double quotes are doubled. Returns an empty string when there
    are no results.
    """
    if not results:
        return ""

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(HEADER + (DIAGNOSTIC_HEADER if include_diagnostics else []))
    for result in results:
        writer.writerow(_row(result, include_diagnostics))

    # No trailing newline after the last row
    return buffer.getvalue().rstrip("\n")


def export_filename(on: date | None = None) -> str:
    """Download name embedding the export date."""
    return f"similarity_analysis_{(on or date.today()).isoformat()}.csv"


def write_export(
    results: Sequence["AnalysisResult"],
    directory: Path,
    on: date | None = None,
    include_diagnostics: bool = False,
) -> Path | None:
    """Write results to ``directory`` as a dated UTF-8 CSV file.

    Returns:
        Path of the written file, or None when there is nothing to export
    """
    content = export_csv(results, include_diagnostics=include_diagnostics)
    if not content:
        logger.info("No results to export")
        return None

    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(on)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Exported {len(results)} results to {path}")
    return path
