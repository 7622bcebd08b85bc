"""Main entry point for the OpenWeather exporter."""
import argparse
import logging
import sys
import threading
import signal

import structlog
from dotenv import load_dotenv

from ow_exporter.api import ExporterAPI
from ow_exporter.client import UpstreamClient
from ow_exporter.collector import Collector, run_collector_thread
from ow_exporter.config import load_config
from ow_exporter.exposition import PrometheusExporter
from ow_exporter.registry import MetricRegistry


def setup_logging(log_level: str, log_format: str):
    """Setup logging configuration."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    if log_format == "json":
        # structlog renders stdlib records (ours, uvicorn's, urllib3's) as one JSON object per line
        pre_chain = [
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
        structlog.configure(
            processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=pre_chain,
        ))

        root = logging.getLogger()
        root.handlers = [handler]
        root.setLevel(level)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    # Reduce noise from some libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def main():
    """Main function."""
    parser = argparse.ArgumentParser(
        description="OpenWeather Exporter - Prometheus metrics for weather and air quality"
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to an optional configuration YAML file (environment variables override it)"
    )

    args = parser.parse_args()

    # Load environment variables from .env if it exists
    env_loaded = load_dotenv()

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        sys.exit(1)

    # Setup logging
    setup_logging(config.global_.log_level, config.global_.log_format)
    logger = logging.getLogger(__name__)

    if not env_loaded:
        logger.info(".env file not found, using system environment variables")

    ow = config.openweather
    logger.info(f"Location: lat={ow.latitude} lon={ow.longitude}, units={ow.units}")
    logger.info(f"Refresh interval: {config.global_.refresh_interval_s}s")

    registry = MetricRegistry()
    exporter = PrometheusExporter(registry, prefix=config.exporter.prefix)
    collector = Collector(
        registry,
        UpstreamClient(timeout_s=ow.timeout_s),
        weather_url=ow.weather_url(),
        pollution_url=ow.pollution_url(),
        interval_s=config.global_.refresh_interval_s,
        self_metrics=exporter.self_metrics,
    )
    api = ExporterAPI(exporter, collector)

    # Start collector in separate thread; it refreshes once immediately
    collector_thread = threading.Thread(
        target=run_collector_thread,
        args=(collector,),
        daemon=True
    )
    collector_thread.start()
    logger.info("Collector started")

    # Setup signal handlers
    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, shutting down...")
        collector.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    # Run HTTP server (blocking)
    logger.info(f"Starting OpenWeather exporter on port {config.exporter.port}")
    try:
        api.run(
            host=config.exporter.bind_address,
            port=config.exporter.port
        )
    except Exception as e:
        logger.error(f"HTTP server error: {e}", exc_info=True)
        collector.stop()
        sys.exit(1)


if __name__ == "__main__":
    main()
