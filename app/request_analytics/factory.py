"""
Factory for creating the request analytics module.
"""
from pathlib import Path

from traffic_analytics.persistence import PersistenceManager
from traffic_analytics.report_generator import ReportGenerator
from traffic_analytics.store import AggregationStore, DEFAULT_SAVE_INTERVAL

from .middleware import RequestTrackingMiddleware
from .routes import create_request_analytics_blueprint


def create_request_analytics_module(
    data_dir: Path,
    summary_file: str = "data.json",
    daily_file: str = "daily-data.json",
    save_interval: int = DEFAULT_SAVE_INTERVAL,
    default_limit: int = 10
) -> dict:
    """Create request analytics module with store, middleware and routes.

    The store is hydrated from disk before it is returned.

    Args:
        data_dir: Directory holding the persisted analytics documents
        summary_file: File name of the cumulative document
        daily_file: File name of the per-day document
        save_interval: Number of recorded requests between throttled saves
        default_limit: Default entry limit for reports

    Returns:
        Dictionary containing:
            - store: AggregationStore instance
            - report_generator: ReportGenerator instance
            - middleware: RequestTrackingMiddleware to register on the app
            - blueprint: Flask blueprint for the report endpoint
    """
    persistence = PersistenceManager.in_directory(Path(data_dir), summary_file, daily_file)

    store = AggregationStore(persistence=persistence, save_interval=save_interval)
    store.load()

    report_generator = ReportGenerator(store)
    middleware = RequestTrackingMiddleware(store)
    blueprint = create_request_analytics_blueprint(report_generator, default_limit=default_limit)

    return {
        "store": store,
        "report_generator": report_generator,
        "middleware": middleware,
        "blueprint": blueprint
    }
