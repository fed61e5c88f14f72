from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from bleach import clean
from sqlalchemy.exc import SQLAlchemyError
import os
import logging
from dotenv import load_dotenv
from config import get_config, load_service_region
from firebase_setup import initialize_firebase
from models import build_community_report, unified_as_dicts
from services.flood_data_integrator import FloodDataIntegrator
from services.flood_report_repository import FirebaseFloodReportRepository
from services.nws_flood_alerts import NWSFloodAlertService
from services.record_linkage import RecordLinkageMatcher
from services.report_store import create_store
from utils.distance import get_cache_info
from utils.secure_logging import coarse_location, redact_coordinates
from utils.validators import CoordinateValidator, FloodReportValidator

load_dotenv()

app_config = get_config()

app = Flask(__name__)
app.config.from_object(app_config)
logger = logging.getLogger(__name__)

# 1 MB is plenty for a report body; photos are uploaded separately
app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024

CORS(app, origins=[origin for origin in app_config.CORS_ORIGINS if origin], supports_credentials=True)


@app.after_request
def set_security_headers(response):
    """Add security headers to all responses."""
    if os.getenv('FLASK_ENV') == 'production':
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains; preload'
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
    return response


# Set REDIS_URL to share limits across processes
limiter = Limiter(
    get_remote_address,
    app=app,
    default_limits=["200 per day", "50 per hour"],
    storage_uri=app_config.RATELIMIT_STORAGE_URI
)

# Region configuration is validated here so a bad polygon fails at startup
service_region = load_service_region(app_config)
flood_integrator = FloodDataIntegrator(
    region=service_region,
    matcher=RecordLinkageMatcher(app_config.MATCH_DISTANCE_KM, app_config.MATCH_WINDOW_MS)
)
nws_service = NWSFloodAlertService(app_config.NWS_USER_AGENT, app_config.NWS_TIMEOUT_SECONDS)
report_store = create_store(app_config.DATABASE_URL)

# Report source (initialized after Firebase)
report_repository = None
firebase_db = initialize_firebase(app_config.FIREBASE_DATABASE_URL)
if firebase_db is not None:
    report_repository = FirebaseFloodReportRepository(firebase_db)
else:
    logger.error("Set either FIREBASE_CREDENTIALS_BASE64 or FIREBASE_CREDENTIALS_PATH in environment")


def _query_point(default_lat, default_lon):
    """
    Read lat/lon query parameters, falling back to the given defaults.

    Returns:
        (lat, lon, error_message)
    """
    lat = request.args.get('lat', default=default_lat, type=float)
    lon = request.args.get('lon', default=default_lon, type=float)
    if lat is None or lon is None:
        return None, None, 'lat and lon query parameters are required'
    if not CoordinateValidator.validate_coordinates(lat, lon):
        return None, None, 'Invalid coordinates'
    return lat, lon, None


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({
        'status': 'healthy',
        'service': 'flood-fusion-api',
        'firebase': report_repository is not None,
        'distance_cache': get_cache_info()
    })


@app.route('/api/flood-reports/unified', methods=['GET'])
@limiter.limit("120 per hour")
def get_unified_reports():
    """
    Fused view of community reports and NWS flood alerts.

    Query Parameters:
        - lat, lon (optional): Point used for the NWS alert lookup.
          Defaults to the service region centroid.

    Returns:
        {
            reports: [UnifiedReport...],
            count: int,
            inputs: {community: int, official: int}
        }
    """
    if report_repository is None:
        return jsonify({'error': 'Report source unavailable'}), 503

    center_lat, center_lon = service_region.centroid
    lat, lon, error = _query_point(center_lat, center_lon)
    if error:
        return jsonify({'error': error}), 400

    try:
        reports = report_repository.get_all_reports()
        alerts = nws_service.get_flood_alerts(lat, lon)
        unified = flood_integrator.integrate(reports, alerts)

        return jsonify({
            'reports': unified_as_dicts(unified),
            'count': len(unified),
            'inputs': {'community': len(reports), 'official': len(alerts)}
        })
    except Exception as e:
        logger.error(f"Error in get_unified_reports: {e}")
        return jsonify({'error': 'Failed to build unified flood reports'}), 500


@app.route('/api/flood-reports/nearby', methods=['GET'])
@limiter.limit("600 per hour")
def get_nearby_reports():
    """
    Persisted flood reports within a radius, newest first.

    Query Parameters:
        - lat, lon (required): Center point
        - radius_mi (optional): Radius in miles (default DEFAULT_RADIUS_MILES)
    """
    lat, lon, error = _query_point(None, None)
    if error:
        return jsonify({'error': error}), 400

    raw_radius = request.args.get('radius_mi', default=app_config.DEFAULT_RADIUS_MILES)
    is_valid, error = FloodReportValidator.validate_radius(raw_radius, app_config.MAX_RADIUS_MILES)
    if not is_valid:
        return jsonify({'error': error}), 400
    radius_mi = float(raw_radius)

    try:
        reports = report_store.find_within_radius(lat, lon, radius_mi)
    except SQLAlchemyError as e:
        logger.error(f"Radius query failed near {coarse_location(lat, lon)}: {e}")
        return jsonify({'error': 'Report storage unavailable'}), 503

    return jsonify({
        'reports': [report.to_dict() for report in reports],
        'count': len(reports),
        'radius_mi': radius_mi
    })


@app.route('/api/flood-reports', methods=['POST'])
@limiter.limit("20 per hour")  # Allow burst reporting during floods
@limiter.limit("100 per day")
def create_flood_report():
    """Submit a community flood report (written to Firebase and the local store)"""
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        return jsonify({'error': 'Request body is required'}), 400

    is_valid, error_message = FloodReportValidator.validate_report_data(data)
    if not is_valid:
        return jsonify({'error': error_message}), 400

    if report_repository is None:
        return jsonify({'error': 'Report source unavailable'}), 503

    description = clean(data['description'], tags=[], strip=True).strip()
    if not description:
        return jsonify({'error': 'Description must contain text'}), 400

    report = build_community_report({**data, 'description': description},
                                    user_id=str(data.get('user_id') or ''))

    # Local store first; it is rolled back if the Firebase write fails
    try:
        report_store.save_report(report)
    except SQLAlchemyError as e:
        logger.error(redact_coordinates(f"Error storing flood report {report.id}: {e}"))
        return jsonify({'error': 'Failed to save flood report'}), 500

    try:
        report_repository.create_report(report)
    except Exception as e:
        logger.error(redact_coordinates(f"Error writing flood report {report.id} to Firebase: {e}"))
        try:
            report_store.delete_report(report.id)
        except SQLAlchemyError as rollback_error:
            logger.error(f"Could not roll back local flood report {report.id}: {rollback_error}")
        return jsonify({'error': 'Failed to save flood report'}), 500

    logger.info(f"Flood report {report.id} submitted near {coarse_location(report.latitude, report.longitude)}")
    return jsonify(report.to_dict()), 201


@app.route('/api/flood-reports/<report_id>', methods=['GET'])
def get_flood_report(report_id):
    """Fetch one persisted flood report"""
    try:
        report = report_store.get_report(report_id)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching flood report {report_id}: {e}")
        return jsonify({'error': 'Report storage unavailable'}), 503

    if report is None:
        return jsonify({'error': 'Report not found'}), 404
    return jsonify(report.to_dict())


# ===== ERROR HANDLERS =====

@app.errorhandler(413)
def request_entity_too_large(error):
    return jsonify({
        'error': 'Request payload too large',
        'max_size': '1 MB'
    }), 413


@app.errorhandler(429)
def rate_limit_exceeded(error):
    return jsonify({
        'error': 'Rate limit exceeded',
        'message': str(error.description)
    }), 429


if __name__ == '__main__':
    debug_mode = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'
    app.run(debug=debug_mode, host='0.0.0.0', port=5001)
