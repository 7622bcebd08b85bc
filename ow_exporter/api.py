"""HTTP API serving the metrics endpoint and runtime controls using FastAPI."""
from fastapi import FastAPI, HTTPException, Response
from fastapi.responses import HTMLResponse
import logging
import time

from ow_exporter.collector import Collector
from ow_exporter.exposition import PrometheusExporter

logger = logging.getLogger(__name__)

INDEX_HTML = """<html>
    <head><title>OpenWeather Exporter</title></head>
    <body>
        <h1>OpenWeather Exporter</h1>
        <p><a href="/metrics">Metrics</a></p>
    </body>
</html>"""


class ExporterAPI:
    """FastAPI application exposing /metrics plus status and control routes."""

    def __init__(self, exporter: PrometheusExporter, collector: Collector):
        """
        Initialize the API.

        Args:
            exporter: Renders the registry snapshot for scrapes
            collector: Refresh scheduler, used for status and manual refresh
        """
        self.exporter = exporter
        self.collector = collector
        self.start_time = time.time()
        self.app = FastAPI(title="OpenWeather Exporter")

        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/", response_class=HTMLResponse)
        async def index():
            return INDEX_HTML

        @self.app.get("/metrics")
        async def metrics():
            """Prometheus scrape endpoint; renders a fresh snapshot every time."""
            return Response(content=self.exporter.render(), media_type=self.exporter.content_type)

        @self.app.get("/healthz")
        async def healthz():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": time.time()}

        @self.app.get("/status")
        async def status():
            """Get current collector status."""
            try:
                return {
                    "uptime_seconds": time.time() - self.start_time,
                    **self.collector.status(),
                }
            except Exception as e:
                logger.error(f"Error getting status: {e}")
                raise HTTPException(status_code=500, detail=str(e))

        # Plain def: the refresh blocks on upstream I/O, so it runs in the threadpool
        @self.app.post("/control/refresh")
        def trigger_refresh():
            """Run a refresh cycle now."""
            logger.info("Manual refresh requested")
            result = self.collector.refresh()
            if result is None:
                raise HTTPException(status_code=409, detail="A refresh cycle is already running")

            return {
                "status": "refreshed" if result.ok else "refreshed_with_errors",
                "station": result.station,
                "weather_written": result.weather_written,
                "pollution_written": result.pollution_written,
                "errors": result.errors,
                "timestamp": time.time(),
            }

    def run(self, host: str = "0.0.0.0", port: int = 8080):
        """Run the API server."""
        import uvicorn
        # log_config=None: uvicorn logs through the handlers set up by main.setup_logging
        uvicorn.run(self.app, host=host, port=port, log_level="info", log_config=None)
