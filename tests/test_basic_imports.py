"""
Basic import tests to verify the core functionality.
"""


def test_traffic_analytics_imports():
    """Test that the analytics core can be imported."""
    from traffic_analytics import (
        AggregationStore,
        PersistenceManager,
        ReportGenerationError,
        ReportGenerator,
        categorize_referrers,
        classify_user_agent,
        parse_referrer,
    )

    # Test that functions are callable
    assert callable(categorize_referrers)
    assert callable(classify_user_agent)
    assert callable(parse_referrer)

    # Test that classes can be instantiated
    store = AggregationStore()
    assert isinstance(ReportGenerator(store), ReportGenerator)
    assert issubclass(ReportGenerationError, Exception)
    assert PersistenceManager is not None


def test_models_imports():
    """Test that the models package exposes its public names."""
    from traffic_analytics.models import (
        AggregateCounters,
        DayBucket,
        ParsedReferrer,
        ReportFormat,
        ReportOptions,
        SnapshotDocument,
    )

    counters = AggregateCounters()
    assert counters.total_requests == 0
    assert counters.unique_visitors == 0
    assert DayBucket().hourly_stats == {}
    assert ParsedReferrer.direct().category == "Direct"
    assert ReportOptions().format == ReportFormat.DETAILED
    assert SnapshotDocument is not None


def test_request_analytics_module_imports():
    """Test that the Flask glue can be imported."""
    from app.request_analytics import create_request_analytics_module, RequestTrackingMiddleware

    assert callable(create_request_analytics_module)
    assert RequestTrackingMiddleware is not None


def test_app_factory_import():
    """Test that the application factory can be imported."""
    from app.main import create_app, main

    assert callable(create_app)
    assert callable(main)
