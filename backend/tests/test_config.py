"""
Tests for configuration selection and service region loading.
"""
import pytest
from config import Config, DevelopmentConfig, TestingConfig, get_config, load_service_region


def region_config(polygon, bbox=None, name='test_region'):
    class RegionConfig(Config):
        SERVICE_REGION_NAME = name
        SERVICE_REGION_POLYGON = polygon
        SERVICE_REGION_BBOX = bbox
    return RegionConfig


class TestGetConfig:

    def test_named(self):
        assert get_config('testing') is TestingConfig

    def test_unknown_name_falls_back(self):
        assert get_config('staging') is DevelopmentConfig

    def test_uses_flask_env(self, monkeypatch):
        monkeypatch.setenv('FLASK_ENV', 'testing')
        assert get_config() is TestingConfig

    def test_testing_uses_memory_database(self):
        assert TestingConfig.DATABASE_URL == 'sqlite:///:memory:'
        assert TestingConfig.RATELIMIT_ENABLED is False


class TestLoadServiceRegion:
    """Region configuration is validated at load time"""

    def test_default_region(self):
        region = load_service_region(Config)
        assert region.contains(29.4, -98.5)
        assert not region.contains(0.0, 0.0)

    def test_custom_region(self):
        cfg = region_config([[0, 0], [0, 2], [2, 2], [2, 0]], [0, 2, 0, 2], name='square')
        region = load_service_region(cfg)
        assert region.name == 'square'
        assert region.contains(1, 1)

    def test_malformed_polygon(self):
        with pytest.raises(ValueError, match='Malformed'):
            load_service_region(region_config([[0, 0], ['a', 'b'], [1, 1]]))

    def test_bbox_wrong_length(self):
        with pytest.raises(ValueError, match='4 values'):
            load_service_region(region_config([[0, 0], [0, 2], [2, 2]], [0, 2]))

    def test_degenerate_polygon(self):
        with pytest.raises(ValueError):
            load_service_region(region_config([[0, 0], [1, 1]]))
