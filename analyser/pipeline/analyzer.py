"""Batch orchestration: scrape, match, embed, score and diagnose each URL."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from analyser.config import Settings, get_settings
from analyser.diagnostics import DEFAULT_VOCABULARY, DiagnosticsVocabulary, diagnose
from analyser.embedding import FallbackEmbedder, cosine_similarity
from analyser.errors import AnalysisInProgressError, EmbeddingError
from analyser.export import export_csv
from analyser.ingest import AnswerRecord, parse_answer_corpus, parse_url_list
from analyser.llm import EmbeddingProvider, create_embedding_provider
from analyser.matching import PromptDeriver, TrainTimesPromptDeriver, find_matching_answer
from analyser.scraping import ContentFetcher
from .models import AnalysisResult, AnalysisState, StepStatus

logger = logging.getLogger(__name__)

ProgressListener = Callable[[dict[str, Any]], None]

# Progress checkpoints; per-URL progress is spread over the remaining span
PARSE_STARTED = 10
PARSE_DONE = 20
EXTRACT_STARTED = 30
EXTRACT_DONE = 40
PER_URL_SPAN = 50
COMPLETE = 100


class SimilarityAnalyzer:
    """Runs the similarity analysis over a batch of URLs.

    URLs are processed one after another. For each URL the page text and
    the matched answer are embedded concurrently, then scored and diagnosed.
    Per-URL failures are logged and skipped; any other failure marks the
    running steps as errored and discards the batch's results.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        embedding_provider: EmbeddingProvider | None = None,
        fetcher: ContentFetcher | None = None,
        prompt_deriver: PromptDeriver | None = None,
        vocabulary: DiagnosticsVocabulary = DEFAULT_VOCABULARY,
        max_urls: int | None = None,
        progress_listener: ProgressListener | None = None,
    ):
        """Initialize analyzer.

        Args:
            settings: Application settings (global settings if None)
            embedding_provider: Embedding service (created per batch from the credential if None)
            fetcher: Page fetcher (created per batch from settings if None)
            prompt_deriver: URL to query strategy
            vocabulary: Keyword lists used by the diagnostics
            max_urls: URL rows consumed per batch (settings.max_urls if None)
            progress_listener: Called with a state snapshot after every change
        """
        self.settings = settings or get_settings()
        self.embedding_provider = embedding_provider
        self.fetcher = fetcher
        self.prompt_deriver = prompt_deriver or TrainTimesPromptDeriver()
        self.vocabulary = vocabulary
        self.max_urls = self.settings.max_urls if max_urls is None else max_urls
        self.progress_listener = progress_listener
        self._state = AnalysisState()

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def is_analyzing(self) -> bool:
        return self._state.is_analyzing

    async def start_analysis(
        self, url_input: str, answer_input: str, credential: str | None = None
    ) -> AnalysisState:
        """Analyse every URL of ``url_input`` against the ``answer_input`` corpus.

        Args:
            url_input: Delimited URL list (header row first)
            answer_input: JSON array of query/answer records
            credential: API key for the embedding service

        Returns:
            The final state of the run

        Raises:
            AnalysisInProgressError: If a batch is already running
        """
        if self._state.is_analyzing:
            raise AnalysisInProgressError("An analysis is already running")

        state = AnalysisState(is_analyzing=True)
        self._state = state
        self._notify()

        provider: EmbeddingProvider | None = None
        fetcher: ContentFetcher | None = None
        try:
            self._update_step("parse", StepStatus.RUNNING, "Reading CSV and JSON files...")
            self._set_progress(PARSE_STARTED)

            urls = parse_url_list(url_input, self.max_urls)
            corpus = parse_answer_corpus(answer_input)

            self._update_step("parse", StepStatus.COMPLETED)
            self._set_progress(PARSE_DONE)

            self._update_step("extract", StepStatus.RUNNING, f"Found {len(urls)} URLs to analyze")
            self._set_progress(EXTRACT_STARTED)
            state.total_urls = len(urls)

            provider = self.embedding_provider or create_embedding_provider(api_key=credential)
            embedder = FallbackEmbedder(
                provider,
                dimensions=self.settings.fallback_dimensions(),
                max_chars=self.settings.max_embedding_chars,
                strict=self.settings.strict_embeddings,
            )
            fetcher = self.fetcher or ContentFetcher(
                proxy_url=self.settings.scrape_proxy_url,
                timeout=self.settings.request_timeout,
            )

            self._update_step("extract", StepStatus.COMPLETED)
            self._set_progress(EXTRACT_DONE)

            results = await self._process_urls(urls, corpus, fetcher, embedder)

            for step_id in ("scrape", "embed", "calculate"):
                self._update_step(step_id, StepStatus.COMPLETED)

            state.results = results
            self._set_progress(COMPLETE)
            logger.info(
                f"Analysis complete: {len(results)}/{len(urls)} URLs scored, "
                f"{state.missing_coverage} without a matching answer, "
                f"{state.degraded_items} with fallback embeddings"
            )

        except Exception as e:
            logger.error(f"Analysis failed: {e}", exc_info=True)
            state.error = str(e)
            state.results = []
            for step in state.steps:
                if step.status == StepStatus.RUNNING:
                    step.status = StepStatus.ERROR

        finally:
            if provider is not None and self.embedding_provider is None:
                await provider.aclose()
            if fetcher is not None and self.fetcher is None:
                await fetcher.aclose()
            state.is_analyzing = False
            self._notify()

        return state

    def export_results(self, include_diagnostics: bool = False) -> str:
        """CSV text of the current results, empty when there are none."""
        return export_csv(self._state.results, include_diagnostics=include_diagnostics)

    async def _process_urls(
        self,
        urls: list[str],
        corpus: list[AnswerRecord],
        fetcher: ContentFetcher,
        embedder: FallbackEmbedder,
    ) -> list[AnalysisResult]:
        state = self._state
        results: list[AnalysisResult] = []
        total = len(urls)

        self._update_step("scrape", StepStatus.RUNNING)
        for index, url in enumerate(urls, start=1):
            self._update_step("scrape", StepStatus.RUNNING, f"Processing URL {index}/{total}: {url}")
            try:
                result = await self._analyze_url(url, index, corpus, fetcher, embedder)
            except EmbeddingError:
                raise
            except Exception as e:
                logger.warning(f"Skipping {url} after unexpected error: {e}")
                state.failed_items += 1
                result = None

            if result is not None:
                results.append(result)
                if result.degraded:
                    state.degraded_items += 1

            state.processed_urls = index
            self._set_progress(EXTRACT_DONE + int(PER_URL_SPAN * index / total))

        return results

    async def _analyze_url(
        self,
        url: str,
        index: int,
        corpus: list[AnswerRecord],
        fetcher: ContentFetcher,
        embedder: FallbackEmbedder,
    ) -> AnalysisResult | None:
        prompt = self.prompt_deriver.derive(url)
        page_text = await fetcher.fetch(url)
        match = find_matching_answer(prompt, corpus)

        if match is None or not match.answer:
            logger.warning(f"No matching GPT response for: {prompt!r} ({url})")
            self._state.missing_coverage += 1
            self._notify()
            return None

        self._update_step("embed", StepStatus.RUNNING, f"Generating embeddings for URL {index}")
        page_task = asyncio.create_task(embedder.embed(page_text))
        answer_task = asyncio.create_task(embedder.embed(match.answer))
        try:
            page_embedding, answer_embedding = await asyncio.gather(page_task, answer_task)
        except BaseException:
            page_task.cancel()
            answer_task.cancel()
            raise
        page_embedding, answer_embedding = embedder.align(page_embedding, answer_embedding)

        self._update_step("calculate", StepStatus.RUNNING, f"Calculating similarity for URL {index}")
        similarity = cosine_similarity(page_embedding.vector, answer_embedding.vector)
        findings = diagnose(prompt, page_text, match.answer, similarity, self.vocabulary)

        preview = self.settings.text_preview_chars
        return AnalysisResult(
            url=url,
            prompt=prompt,
            page_text=page_text[:preview],
            gpt_answer=match.answer[:preview],
            similarity=similarity,
            intent_type=findings.intent_type,
            match_found=True,
            ideal_prompt=match.query,
            priority_score=findings.priority_score,
            keyword_gaps=findings.keyword_gaps,
            entity_mismatch=findings.entity_mismatch,
            sentence_structure_issue=findings.sentence_structure_issue,
            similarity_label=findings.similarity_label,
            degraded=page_embedding.degraded or answer_embedding.degraded,
        )

    def _update_step(self, step_id: str, status: StepStatus, description: str | None = None) -> None:
        step = self._state.step(step_id)
        step.status = status
        step.description = description
        self._notify()

    def _set_progress(self, value: int) -> None:
        self._state.progress = max(self._state.progress, min(COMPLETE, value))
        self._notify()

    def _notify(self) -> None:
        if self.progress_listener is None:
            return
        try:
            self.progress_listener(self._state.snapshot())
        except Exception as e:
            logger.warning(f"Progress listener failed: {e}")
