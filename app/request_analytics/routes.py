"""
Request Analytics Routes

Flask routes serving the aggregated analytics report.
"""

from datetime import datetime

from flask import Blueprint, jsonify, request

from traffic_analytics.models import ReportOptions
from traffic_analytics.report_generator import ReportGenerationError, ReportGenerator


def create_request_analytics_blueprint(
    report_generator: ReportGenerator,
    default_limit: int = 10
) -> Blueprint:
    """Create request analytics blueprint with routes.

    Args:
        report_generator: The report generator instance
        default_limit: Entry limit used when the query does not give one

    Returns:
        Flask blueprint with the analytics report route
    """
    bp = Blueprint('request_analytics', __name__, url_prefix='/api')

    @bp.route('/analytics', methods=['GET'])
    def get_analytics():
        """
        Get the aggregated request analytics report.

        Query parameters:
            - format: detailed (default), summary or minimal
            - limit: Maximum entries per ranked list (default 10, range 1-50)
        """
        options = ReportOptions.create(
            format=request.args.get('format'),
            limit=request.args.get('limit'),
            default_limit=default_limit
        )

        try:
            report = report_generator.generate(options)
        except ReportGenerationError as exc:
            return jsonify({
                "error": f"Failed to generate analytics: {exc}",
                "timestamp": datetime.now().astimezone().isoformat()
            }), 500

        return jsonify(report)

    return bp
