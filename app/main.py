import argparse
import atexit
import logging
import signal
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from config_manager import ConfigManager
from traffic_analytics.logging_config import setup_logging, stop_logging
from traffic_analytics.store import AggregationStore

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent


def create_app(config_manager: Optional[ConfigManager] = None) -> Flask:
    """Create the Flask application with request analytics wired in.

    Args:
        config_manager: Configuration source; a default ConfigManager if None

    Returns:
        Configured Flask application. The analytics store is available as
        ``app.extensions["request_analytics"]["store"]``.
    """
    config_manager = config_manager or ConfigManager()
    app_config = config_manager.get_app_config()
    analytics_config = config_manager.get_analytics_config()

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_for   = app_config.proxy_hops,   # client address from X-Forwarded-For
            x_proto = 1,
            x_host  = 1,
            x_prefix= 1)

    started_at = time.monotonic()

    # -------------------------------------------------------------------------
    # Request analytics
    # -------------------------------------------------------------------------

    from app.request_analytics.factory import create_request_analytics_module

    request_analytics_module = create_request_analytics_module(
        data_dir=PROJECT_ROOT / analytics_config.data_dir,
        summary_file=analytics_config.summary_file,
        daily_file=analytics_config.daily_file,
        save_interval=analytics_config.save_interval,
        default_limit=analytics_config.default_limit
    )

    request_analytics_module["middleware"].init_app(app)
    app.register_blueprint(request_analytics_module["blueprint"])
    app.extensions["request_analytics"] = request_analytics_module

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    @app.get("/api/health")
    def health():
        """Health check endpoint for monitoring tools."""
        logger.info(f"Health check requested from {request.remote_addr}")
        return jsonify({
            "status": "healthy",
            "timestamp": datetime.now().astimezone().isoformat(),
            "uptime": round(time.monotonic() - started_at, 3)
        })

    # -------------------------------------------------------------------------
    # Error handling
    # -------------------------------------------------------------------------

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        """Log unhandled errors and answer with a JSON 500."""
        if isinstance(exc, HTTPException):
            return exc

        logger.error(
            f"Unhandled error on {request.method} {request.url} "
            f"from {request.remote_addr} ({request.headers.get('User-Agent')}): {exc}",
            exc_info=exc
        )
        return jsonify({
            "error": "Internal Server Error",
            "timestamp": datetime.now().astimezone().isoformat()
        }), 500

    return app


def register_shutdown_hooks(store: AggregationStore) -> None:
    """Flush the analytics store on interpreter exit and on SIGTERM/SIGINT."""
    def flush() -> None:
        if store.save():
            logger.info("Analytics data flushed on shutdown")

    atexit.register(flush)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, shutting down")
        # sys.exit runs the atexit flush.
        sys.exit(0)

    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------

def main(argv: Optional[list] = None) -> None:
    """Parse command line arguments, configure logging and run the server."""
    parser = argparse.ArgumentParser(description="Site analytics server")
    parser.add_argument("--port", type=int, help="Port to run the server on")
    parser.add_argument("--host", type=str, help="Host to bind the server to")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    args = parser.parse_args(argv)

    config_manager = ConfigManager()
    app_config = config_manager.get_app_config()
    logging_settings = config_manager.get_logging_config()

    # Override configuration with command line arguments
    if args.port:
        app_config.port = args.port
    if args.host:
        app_config.host = args.host
    if args.debug:
        app_config.debug = args.debug

    setup_logging(
        debug=app_config.debug,
        log_dir=PROJECT_ROOT / logging_settings.log_dir,
        level=logging_settings.level
    )
    atexit.register(stop_logging)

    app = create_app(config_manager)
    register_shutdown_hooks(app.extensions["request_analytics"]["store"])

    logger.info(f"Server starting on {app_config.host}:{app_config.port}")
    app.run(
        host=app_config.host,
        port=app_config.port,
        debug=app_config.debug,
        use_reloader=False
    )


if __name__ == "__main__":
    main()
