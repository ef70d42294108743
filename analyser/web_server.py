"""HTTP surface exposing the analyzer's progress view and export."""

import asyncio
import logging

from aiohttp import web

from analyser.config import get_settings
from analyser.export import export_filename
from analyser.pipeline import SimilarityAnalyzer

logger = logging.getLogger(__name__)


class WebServer:
    """HTTP server for starting analyses and polling their progress."""

    def __init__(self, analyzer: SimilarityAnalyzer | None = None, port: int | None = None):
        """Initialize web server."""
        settings = get_settings()
        self.host = settings.server_host
        self.port = port or settings.server_port
        self.analyzer = analyzer or SimilarityAnalyzer(settings=settings)
        self.app = web.Application()
        self._task: asyncio.Task | None = None
        self._start_lock = asyncio.Lock()
        self._setup_routes()
        logger.info(f"Web server initialized on port {self.port}")

    def _setup_routes(self):
        """Set up HTTP routes."""
        self.app.router.add_get("/", self._handle_health)
        self.app.router.add_get("/health", self._handle_health)
        self.app.router.add_post("/api/analysis", self._handle_start)
        self.app.router.add_get("/api/analysis", self._handle_state)
        self.app.router.add_get("/api/analysis/export", self._handle_export)
        logger.info("Routes configured: /, /health, /api/analysis, /api/analysis/export")

    async def _handle_health(self, request: web.Request) -> web.Response:
        """Health check endpoint."""
        return web.json_response({"status": "healthy", "service": "Cosine Similarity Analyser"})

    async def _handle_start(self, request: web.Request) -> web.Response:
        """
        Start a background analysis.

        Expects JSON: {"urls_csv": "...", "answers_json": "...", "api_key": "..."}
        """
        try:
            data = await request.json()
        except ValueError:
            return web.json_response({"error": "Request body must be JSON"}, status=400)
        if not isinstance(data, dict):
            return web.json_response({"error": "Request body must be a JSON object"}, status=400)

        urls_csv = str(data.get("urls_csv") or "")
        answers_json = str(data.get("answers_json") or "")
        if not urls_csv.strip() or not answers_json.strip():
            return web.json_response(
                {"error": "Both urls_csv and answers_json are required"},
                status=400,
            )

        async with self._start_lock:
            if self.analyzer.is_analyzing:
                return web.json_response({"error": "An analysis is already running"}, status=409)

            self._task = asyncio.create_task(
                self.analyzer.start_analysis(urls_csv, answers_json, data.get("api_key"))
            )
            self._task.add_done_callback(self._on_analysis_done)
            # The run sets is_analyzing on its first step; hold the lock until it has
            await asyncio.sleep(0)

        return web.json_response(self.analyzer.state.snapshot(), status=202)

    def _on_analysis_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            logger.warning("Background analysis was cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Background analysis failed: {error}", exc_info=error)

    async def _handle_state(self, request: web.Request) -> web.Response:
        """Current progress, steps and results."""
        return web.json_response(self.analyzer.state.snapshot())

    async def _handle_export(self, request: web.Request) -> web.Response:
        """Download the current results as CSV."""
        include_diagnostics = request.query.get("diagnostics", "").lower() in ("1", "true", "yes")
        content = self.analyzer.export_results(include_diagnostics=include_diagnostics)
        if not content:
            return web.json_response({"error": "No results to export"}, status=404)

        return web.Response(
            text=content,
            content_type="text/csv",
            charset="utf-8",
            headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
        )

    async def start(self):
        """Start the web server."""
        runner = web.AppRunner(self.app)
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port)
        await site.start()
        logger.info(f"Web server started on http://{self.host}:{self.port}")
        return runner

    async def stop(self, runner):
        """Stop the web server."""
        if self._task is not None and not self._task.done():
            await self._task
        await runner.cleanup()
        logger.info("Web server stopped")
