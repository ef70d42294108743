"""Tests for the batch analyzer."""

import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from analyser.config import EmbeddingBackend, Settings
from analyser.diagnostics import SimilarityLabel
from analyser.errors import AnalysisInProgressError
from analyser.llm.base import EmbeddingResult
from analyser.pipeline import SimilarityAnalyzer, StepStatus
from conftest import FakeFetcher

PARIS_URL = "https://www.example.com/train-times/london-to-paris/"
YORK_URL = "https://www.example.com/train-times/leeds-to-york/"
BATH_URL = "https://www.example.com/train-times/bath-to-bristol/"

URLS_CSV = f"url,title\n{PARIS_URL},Paris\n{YORK_URL},York\n"
ANSWERS_JSON = json.dumps(
    [
        {"query": "cheapest london to paris train tickets online", "answer": "Eurostar fares start from £39"},
        {"prompt": "cheapest leeds to york train tickets online", "response": "Advance singles from £8"},
    ]
)


def statuses(state):
    return {step.id: step.status for step in state.steps}


class TestSimilarityAnalyzer:
    """Test end-to-end batch runs."""

    @pytest.mark.asyncio
    async def test_successful_batch(self, settings, fixed_provider):
        """Test every matched URL is scored and every step completes."""
        fetcher = FakeFetcher({PARIS_URL: "Trains to Paris", YORK_URL: "Trains to York"})
        analyzer = SimilarityAnalyzer(settings=settings, embedding_provider=fixed_provider, fetcher=fetcher)

        state = await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON)

        assert state.error is None
        assert state.is_analyzing is False
        assert state.progress == 100
        assert set(statuses(state).values()) == {StepStatus.COMPLETED}
        assert [r.url for r in state.results] == [PARIS_URL, YORK_URL]
        assert fetcher.requested == [PARIS_URL, YORK_URL]

        paris = state.results[0]
        assert paris.prompt == "cheapest london to paris train tickets online"
        assert paris.ideal_prompt == "cheapest london to paris train tickets online"
        assert paris.gpt_answer == "Eurostar fares start from £39"
        assert paris.similarity == pytest.approx(1.0)
        assert paris.similarity_label == SimilarityLabel.EXCELLENT
        assert paris.degraded is False
        assert 0 <= paris.priority_score <= 100
        # Page text and answer embedded concurrently for each URL
        assert fixed_provider.generate_embedding.await_count == 4

    @pytest.mark.asyncio
    async def test_failing_provider_falls_back(self, settings, failing_provider):
        """Test an unusable embedding service still produces scored results."""
        analyzer = SimilarityAnalyzer(
            settings=settings, embedding_provider=failing_provider, fetcher=FakeFetcher()
        )

        state = await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON, credential="bad-key")

        assert state.error is None
        assert state.progress == 100
        assert len(state.results) == 2
        assert all(r.degraded for r in state.results)
        assert all(-1.0 <= r.similarity <= 1.0 for r in state.results)
        assert state.degraded_items == 2
        assert StepStatus.ERROR not in statuses(state).values()

    @pytest.mark.asyncio
    async def test_unmatched_url_is_skipped(self, settings, fixed_provider):
        """Test URLs without a matching answer are counted and left out."""
        urls = f"url\n{PARIS_URL}\n{BATH_URL}\nhttps://www.example.com/about\n"
        analyzer = SimilarityAnalyzer(settings=settings, embedding_provider=fixed_provider, fetcher=FakeFetcher())

        state = await analyzer.start_analysis(urls, ANSWERS_JSON)

        assert [r.url for r in state.results] == [PARIS_URL]
        assert state.missing_coverage == 2
        assert state.total_urls == 3
        assert state.processed_urls == 3
        assert state.progress == 100

    @pytest.mark.asyncio
    async def test_previews_are_truncated(self, settings, fixed_provider):
        """Test stored page text and answer are cut to the preview length."""
        analyzer = SimilarityAnalyzer(
            settings=settings, embedding_provider=fixed_provider, fetcher=FakeFetcher(default="x" * 1000)
        )

        state = await analyzer.start_analysis(f"url\n{PARIS_URL}\n", ANSWERS_JSON)

        assert len(state.results[0].page_text) == 300

    @pytest.mark.asyncio
    async def test_max_urls(self, settings, fixed_provider):
        """Test only the configured number of URL rows is processed."""
        analyzer = SimilarityAnalyzer(
            settings=settings, embedding_provider=fixed_provider, fetcher=FakeFetcher(), max_urls=1
        )

        state = await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON)

        assert state.total_urls == 1
        assert len(state.results) == 1

    @pytest.mark.asyncio
    async def test_malformed_corpus(self, settings, fixed_provider):
        """Test bad input marks the running step as errored and yields no results."""
        analyzer = SimilarityAnalyzer(settings=settings, embedding_provider=fixed_provider, fetcher=FakeFetcher())

        state = await analyzer.start_analysis(URLS_CSV, "{not json")

        assert state.error is not None
        assert state.results == []
        assert state.is_analyzing is False
        assert statuses(state)["parse"] == StepStatus.ERROR
        assert statuses(state)["extract"] == StepStatus.PENDING
        fixed_provider.generate_embedding.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_strict_embeddings_abort_batch(self, settings, fixed_provider):
        """Test a strict-mode embedding failure discards earlier results."""
        fixed_provider.generate_embedding.side_effect = [
            EmbeddingResult(embedding=[1.0] * 8, model="test"),
            EmbeddingResult(embedding=[1.0] * 8, model="test"),
            RuntimeError("quota exceeded"),
            RuntimeError("quota exceeded"),
        ]
        strict = settings.model_copy(update={"strict_embeddings": True})
        analyzer = SimilarityAnalyzer(settings=strict, embedding_provider=fixed_provider, fetcher=FakeFetcher())

        state = await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON)

        assert "quota exceeded" in state.error
        assert state.results == []
        assert statuses(state)["parse"] == StepStatus.COMPLETED
        assert statuses(state)["embed"] == StepStatus.ERROR

    @pytest.mark.asyncio
    async def test_unexpected_item_error_is_skipped(self, settings, fixed_provider):
        """Test an unexpected per-URL failure skips only that URL."""
        fixed_provider.generate_embedding.side_effect = [
            EmbeddingResult(embedding=[1.0, 0.0], model="test"),
            EmbeddingResult(embedding=[1.0, 0.0, 0.0], model="test"),
            EmbeddingResult(embedding=[1.0] * 8, model="test"),
            EmbeddingResult(embedding=[1.0] * 8, model="test"),
        ]
        analyzer = SimilarityAnalyzer(settings=settings, embedding_provider=fixed_provider, fetcher=FakeFetcher())

        state = await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON)

        assert state.error is None
        assert [r.url for r in state.results] == [YORK_URL]
        assert state.failed_items == 1

    @pytest.mark.asyncio
    async def test_progress_is_monotonic(self, settings, fixed_provider):
        """Test the listener sees progress rise to 100 without going back."""
        seen = []
        analyzer = SimilarityAnalyzer(
            settings=settings,
            embedding_provider=fixed_provider,
            fetcher=FakeFetcher(),
            progress_listener=lambda snapshot: seen.append(snapshot["progress"]),
        )

        await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON)

        assert seen == sorted(seen)
        assert {10, 20, 30, 40, 65, 90, 100} <= set(seen)
        assert seen[-1] == 100

    @pytest.mark.asyncio
    async def test_listener_errors_do_not_abort(self, settings, fixed_provider):
        """Test a broken progress listener does not fail the batch."""
        analyzer = SimilarityAnalyzer(
            settings=settings,
            embedding_provider=fixed_provider,
            fetcher=FakeFetcher(),
            progress_listener=lambda snapshot: 1 / 0,
        )

        state = await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON)

        assert state.error is None
        assert len(state.results) == 2

    @pytest.mark.asyncio
    async def test_rejects_concurrent_batch(self, settings, fixed_provider):
        """Test a second batch cannot start while one is running."""
        release = asyncio.Event()

        class BlockingFetcher(FakeFetcher):
            async def fetch(self, url):
                await release.wait()
                return await super().fetch(url)

        analyzer = SimilarityAnalyzer(
            settings=settings, embedding_provider=fixed_provider, fetcher=BlockingFetcher()
        )
        task = asyncio.create_task(analyzer.start_analysis(URLS_CSV, ANSWERS_JSON))
        await asyncio.sleep(0)

        assert analyzer.is_analyzing is True
        with pytest.raises(AnalysisInProgressError):
            await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON)

        release.set()
        state = await task
        assert len(state.results) == 2

    @pytest.mark.asyncio
    async def test_new_batch_resets_state(self, settings, fixed_provider):
        """Test each batch starts from a fresh state."""
        analyzer = SimilarityAnalyzer(settings=settings, embedding_provider=fixed_provider, fetcher=FakeFetcher())

        await analyzer.start_analysis(URLS_CSV, "{not json")
        state = await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON)

        assert state.error is None
        assert len(state.results) == 2

    @pytest.mark.asyncio
    async def test_provider_created_from_credential(self, settings, fixed_provider):
        """Test the batch credential is handed to the provider factory and the provider closed."""
        analyzer = SimilarityAnalyzer(settings=settings, fetcher=FakeFetcher())

        with patch(
            "analyser.pipeline.analyzer.create_embedding_provider", return_value=fixed_provider
        ) as mock_create:
            state = await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON, credential="sk-batch")

        mock_create.assert_called_once_with(api_key="sk-batch")
        fixed_provider.aclose.assert_awaited_once()
        assert len(state.results) == 2

    @pytest.mark.asyncio
    async def test_export_results(self, settings, fixed_provider):
        """Test the analyzer exports its current results."""
        analyzer = SimilarityAnalyzer(settings=settings, embedding_provider=fixed_provider, fetcher=FakeFetcher())
        assert analyzer.export_results() == ""

        await analyzer.start_analysis(URLS_CSV, ANSWERS_JSON)

        assert len(analyzer.export_results().split("\n")) == 3


def test_snapshot_is_json_serializable(settings):
    """Test the progress view can be sent as JSON."""
    analyzer = SimilarityAnalyzer(settings=settings, embedding_provider=AsyncMock(), fetcher=FakeFetcher())

    snapshot = analyzer.state.snapshot()

    assert json.loads(json.dumps(snapshot))["steps"][0] == {
        "id": "parse",
        "title": "Parsing uploaded files",
        "status": "pending",
        "description": None,
    }


class TestFallbackDimensionsInBatch:
    """Test a single failed embedding next to a real one is still scored."""

    @pytest.fixture
    def ollama_settings(self):
        return Settings(_env_file=None, embedding_backend=EmbeddingBackend.OLLAMA, scrape_proxy_url=None)

    @pytest.mark.asyncio
    async def test_ollama_default_model(self, ollama_settings, fixed_provider):
        """Test the fallback matches the 768-dimension default Ollama model."""
        fixed_provider.generate_embedding.side_effect = [
            RuntimeError("timeout"),
            EmbeddingResult(embedding=[0.5] * 768, model="nomic-embed-text"),
        ]
        analyzer = SimilarityAnalyzer(
            settings=ollama_settings, embedding_provider=fixed_provider, fetcher=FakeFetcher()
        )

        state = await analyzer.start_analysis(f"url\n{PARIS_URL}\n", ANSWERS_JSON)

        assert state.failed_items == 0
        assert len(state.results) == 1
        assert state.results[0].degraded is True
        assert state.degraded_items == 1

    @pytest.mark.asyncio
    async def test_unknown_model_size(self, ollama_settings, fixed_provider):
        """Test the fallback takes the size of the real vector it is compared with."""
        settings = ollama_settings.model_copy(update={"ollama_embedding_model": "custom-embedder"})
        fixed_provider.generate_embedding.side_effect = [
            RuntimeError("timeout"),
            EmbeddingResult(embedding=[0.5] * 1024, model="custom-embedder"),
        ]
        analyzer = SimilarityAnalyzer(settings=settings, embedding_provider=fixed_provider, fetcher=FakeFetcher())

        state = await analyzer.start_analysis(f"url\n{PARIS_URL}\n", ANSWERS_JSON)

        assert state.failed_items == 0
        assert len(state.results) == 1
        assert state.results[0].degraded is True
