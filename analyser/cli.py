"""Typer CLI for running analyses and serving the HTTP surface."""

import asyncio
import math
from pathlib import Path
from typing import Optional

import typer
from tqdm import tqdm

from analyser.config import EmbeddingBackend, get_settings, validate_openai_key
from analyser.export import write_export
from analyser.main import configure_logging, serve
from analyser.pipeline import SimilarityAnalyzer, summarize_results

app = typer.Typer(help="Measure semantic alignment between web pages and AI answers")


@app.command()
def analyze(
    urls_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV file of URLs"),
    answers_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON answer corpus"),
    api_key: Optional[str] = typer.Option(None, envvar="OPENAI_API_KEY", help="Embedding service key"),
    max_urls: Optional[int] = typer.Option(None, min=0, help="URL rows to consume"),
    output_dir: Optional[Path] = typer.Option(None, help="Where to write the CSV export"),
    diagnostics: bool = typer.Option(False, help="Add diagnostic columns to the export"),
    log_level: Optional[str] = typer.Option(None, help="Logging level"),
) -> None:
    """Analyse a batch of URLs against an answer corpus and export the scores."""
    configure_logging(log_level)
    settings = get_settings()

    if settings.embedding_backend == EmbeddingBackend.OPENAI and not validate_openai_key(
        api_key or settings.openai_api_key
    ):
        typer.secho(
            "Warning: the API key does not look like an OpenAI key (sk-...); "
            "embeddings will fall back to random vectors",
            fg=typer.colors.YELLOW,
            err=True,
        )

    bar = tqdm(total=100, desc="Analysing", unit="%", ncols=100)

    def on_progress(snapshot: dict) -> None:
        bar.update(snapshot["progress"] - bar.n)
        running = [s["title"] for s in snapshot["steps"] if s["status"] == "running"]
        if running:
            bar.set_description(running[-1])

    analyzer = SimilarityAnalyzer(settings=settings, max_urls=max_urls, progress_listener=on_progress)
    state = asyncio.run(
        analyzer.start_analysis(
            urls_file.read_text(encoding="utf-8"),
            answers_file.read_text(encoding="utf-8"),
            api_key,
        )
    )
    bar.close()

    if state.error:
        typer.secho(f"Analysis failed: {state.error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    summary = summarize_results(state.results)
    typer.echo(f"URLs analysed: {summary.urls_analyzed}/{state.total_urls}")
    if not math.isnan(summary.average_similarity):
        typer.echo(f"Average similarity: {summary.average_similarity * 100:.1f}%")
    typer.echo(f"Missing coverage: {state.missing_coverage}")
    if state.degraded_items:
        typer.secho(
            f"Fallback embeddings used for {state.degraded_items} URL(s); their scores are noise",
            fg=typer.colors.YELLOW,
        )
    for result in sorted(state.results, key=lambda r: r.priority_score, reverse=True):
        typer.echo(
            f"  [{result.priority_score:5.1f}] {result.similarity_label.value:<9} "
            f"{result.similarity:.4f} {result.intent_type.value:<13} {result.url}"
        )

    path = write_export(
        state.results,
        output_dir or settings.export_dir,
        include_diagnostics=diagnostics,
    )
    if path:
        typer.echo(f"Results written to {path}")


@app.command(name="serve")
def serve_command(
    port: Optional[int] = typer.Option(None, help="HTTP port"),
    log_level: Optional[str] = typer.Option(None, help="Logging level"),
) -> None:
    """Serve the analysis API over HTTP."""
    configure_logging(log_level)
    try:
        asyncio.run(serve(port))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    app()
