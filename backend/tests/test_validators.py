"""
Unit tests for input validators
"""
import pytest
from utils.validators import CoordinateValidator, FloodReportValidator


def valid_report(**overrides):
    data = {
        'latitude': 29.4241,
        'longitude': -98.4936,
        'description': 'Water over the low crossing on Culebra',
    }
    data.update(overrides)
    return data


class TestCoordinateValidator:
    """Test coordinate validation"""

    def test_valid_coordinates(self):
        assert CoordinateValidator.validate_coordinates(29.4241, -98.4936) is True
        assert CoordinateValidator.validate_coordinates(-90, -180) is True
        assert CoordinateValidator.validate_coordinates('29.4', '-98.5') is True

    def test_invalid_coordinates(self):
        assert CoordinateValidator.validate_coordinates(90.1, 0) is False
        assert CoordinateValidator.validate_coordinates(0, 180.1) is False
        assert CoordinateValidator.validate_coordinates('abc', 0) is False
        assert CoordinateValidator.validate_coordinates(float('nan'), 0) is False


class TestFloodReportValidator:
    """Test flood report payload validation"""

    def test_valid_minimal(self):
        assert FloodReportValidator.validate_report_data(valid_report()) == (True, None)

    def test_valid_full(self):
        data = valid_report(severity='Extreme', water_depth_inches=14, photo_urls=['https://x/1.jpg'])
        assert FloodReportValidator.validate_report_data(data) == (True, None)

    def test_missing_fields(self):
        is_valid, error = FloodReportValidator.validate_report_data({'latitude': 29.4})
        assert is_valid is False
        assert 'longitude' in error
        assert 'description' in error

    def test_non_numeric_coordinates(self):
        is_valid, error = FloodReportValidator.validate_report_data(valid_report(latitude='north'))
        assert is_valid is False
        assert 'valid numbers' in error

    def test_out_of_range_coordinates(self):
        is_valid, _ = FloodReportValidator.validate_report_data(valid_report(latitude=95))
        assert is_valid is False

    @pytest.mark.parametrize('description', ['', '   ', None, 42])
    def test_bad_description(self, description):
        is_valid, _ = FloodReportValidator.validate_report_data(valid_report(description=description))
        assert is_valid is False

    def test_description_too_long(self):
        data = valid_report(description='x' * (FloodReportValidator.MAX_DESCRIPTION_LENGTH + 1))
        is_valid, error = FloodReportValidator.validate_report_data(data)
        assert is_valid is False
        assert 'exceed' in error

    def test_invalid_severity(self):
        is_valid, error = FloodReportValidator.validate_report_data(valid_report(severity='critical'))
        assert is_valid is False
        assert 'severity' in error

    @pytest.mark.parametrize('depth', [-1, 'deep', float('inf')])
    def test_invalid_water_depth(self, depth):
        is_valid, _ = FloodReportValidator.validate_report_data(valid_report(water_depth_inches=depth))
        assert is_valid is False

    @pytest.mark.parametrize('photo_urls', ['https://x/1.jpg', [1, 2], {'a': 'b'}])
    def test_invalid_photo_urls(self, photo_urls):
        is_valid, _ = FloodReportValidator.validate_report_data(valid_report(photo_urls=photo_urls))
        assert is_valid is False


class TestRadiusValidation:
    """Test radius query validation"""

    @pytest.mark.parametrize('radius', [0.1, 10, 100, '5'])
    def test_valid(self, radius):
        assert FloodReportValidator.validate_radius(radius, 100) == (True, None)

    @pytest.mark.parametrize('radius', [0, -2, 100.5, float('nan'), float('inf')])
    def test_out_of_range(self, radius):
        is_valid, error = FloodReportValidator.validate_radius(radius, 100)
        assert is_valid is False
        assert 'at most 100' in error

    def test_not_a_number(self):
        assert FloodReportValidator.validate_radius('far', 100) == (False, 'radius_mi must be a number')
        assert FloodReportValidator.validate_radius(None, 100) == (False, 'radius_mi must be a number')
