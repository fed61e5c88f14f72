"""
Configuration file for the flood report fusion backend.
"""
import os
import json
from dotenv import load_dotenv

from services.geo_region import BEXAR_COUNTY_POLYGON, ServiceRegion

load_dotenv()


def _json_env(name, default=None):
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"{name} must be valid JSON: {e}")


class Config:
    """Base configuration"""
    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'True').lower() == 'true'
    TESTING = False

    # Firebase
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_DATABASE_URL = os.getenv('FIREBASE_DATABASE_URL')

    # Local report store (SQLAlchemy URL)
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///flood_reports.db')

    # NWS alert feed
    NWS_USER_AGENT = os.getenv('NWS_USER_AGENT', 'SAFloodResponse/1.0 (contact@example.com)')
    NWS_TIMEOUT_SECONDS = float(os.getenv('NWS_TIMEOUT_SECONDS', '30'))

    # CORS
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',')

    # Service region: JSON list of [lat, lon] vertices, optional
    # [min_lat, max_lat, min_lon, max_lon] bounding box
    SERVICE_REGION_NAME = os.getenv('SERVICE_REGION_NAME', 'bexar_county')
    SERVICE_REGION_POLYGON = _json_env('SERVICE_REGION_POLYGON', [list(v) for v in BEXAR_COUNTY_POLYGON])
    SERVICE_REGION_BBOX = _json_env('SERVICE_REGION_BBOX')

    # Record linkage thresholds
    MATCH_DISTANCE_KM = float(os.getenv('MATCH_DISTANCE_KM', '0.2'))
    MATCH_WINDOW_MS = int(os.getenv('MATCH_WINDOW_MS', str(60 * 60 * 1000)))

    # Radius query limits (miles)
    DEFAULT_RADIUS_MILES = float(os.getenv('DEFAULT_RADIUS_MILES', '10'))
    MAX_RADIUS_MILES = float(os.getenv('MAX_RADIUS_MILES', '100'))

    # Rate Limiting
    RATELIMIT_STORAGE_URI = os.getenv('REDIS_URL', 'memory://')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False


class TestingConfig(Config):
    """Test configuration"""
    TESTING = True
    DATABASE_URL = 'sqlite:///:memory:'
    RATELIMIT_ENABLED = False


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(name=None):
    """Config class for a name (defaults to FLASK_ENV, then 'default')."""
    return config.get(name or os.getenv('FLASK_ENV', 'default'), DevelopmentConfig)


def load_service_region(cfg=Config) -> ServiceRegion:
    """
    Build and validate the configured service region.

    Raises:
        ValueError: If the polygon or bounding box configuration is malformed
    """
    try:
        polygon = [(float(lat), float(lon)) for lat, lon in cfg.SERVICE_REGION_POLYGON]
        bbox = tuple(float(v) for v in cfg.SERVICE_REGION_BBOX) if cfg.SERVICE_REGION_BBOX else None
    except (TypeError, ValueError) as e:
        raise ValueError(f"Malformed service region configuration: {e}")

    if bbox is not None and len(bbox) != 4:
        raise ValueError("SERVICE_REGION_BBOX must have 4 values: min_lat, max_lat, min_lon, max_lon")

    return ServiceRegion(polygon, bbox, name=cfg.SERVICE_REGION_NAME).validate()
