"""
Tests for observation value types and severity normalization.
"""
import pytest
from pydantic import ValidationError

from models import (
    CommunityReport,
    OfficialAlert,
    UnifiedReport,
    build_community_report,
    normalize_severity,
    unified_as_dicts,
)


class TestNormalizeSeverity:

    @pytest.mark.parametrize('raw,expected', [
        ('low', 'low'),
        ('HIGH', 'high'),
        (' extreme ', 'extreme'),
        ('Minor', 'low'),
        ('Moderate', 'medium'),
        ('Severe', 'high'),
        ('Unknown', 'medium'),
        ('', 'medium'),
        (None, 'medium'),
        (3, 'medium'),
    ])
    def test_mapping(self, raw, expected):
        assert normalize_severity(raw) == expected

    def test_custom_default(self):
        assert normalize_severity('bogus', default='low') == 'low'


class TestObservations:
    """Immutable observation records"""

    def test_default_sources(self):
        report = CommunityReport(id='r1', latitude=29.4, longitude=-98.5, timestamp=1)
        alert = OfficialAlert(id='a1', latitude=29.4, longitude=-98.5, timestamp=1)
        assert report.source == 'Internal'
        assert alert.source == 'NWS'
        assert report.severity == 'medium'

    def test_frozen(self):
        report = CommunityReport(id='r1', latitude=29.4, longitude=-98.5, timestamp=1)
        with pytest.raises(ValidationError):
            report.latitude = 0.0

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            CommunityReport(id='r1', latitude=29.4, longitude=-98.5, timestamp=1, denied_count=-1)


class TestFirebaseMapping:
    """from_firebase / to_firebase"""

    def test_round_trip_fields(self):
        report = CommunityReport(id='r1', latitude=29.4, longitude=-98.5, timestamp=1714564800000,
                                 severity='high', user_id='u1', confirmed_count=2)
        restored = CommunityReport.from_firebase('r1', report.to_firebase())
        assert restored == report.model_copy(update={'updated_at': 1714564800000})

    def test_missing_coordinates(self):
        with pytest.raises(ValueError, match='coordinates'):
            CommunityReport.from_firebase('r1', {'created_at': 1000})

    def test_missing_timestamp(self):
        with pytest.raises(ValueError, match='created_at'):
            CommunityReport.from_firebase('r1', {'latitude': 29.4, 'longitude': -98.5})

    def test_to_dict_includes_id_and_source(self):
        data = CommunityReport(id='r1', latitude=29.4, longitude=-98.5, timestamp=1).to_dict()
        assert data['id'] == 'r1'
        assert data['source'] == 'Internal'
        assert data['photo_urls'] == []


class TestBuildCommunityReport:

    def test_fresh_report(self):
        report = build_community_report(
            {'latitude': '29.45', 'longitude': '-98.5', 'description': 'Flooded', 'severity': 'Severe'},
            user_id='u1'
        )
        assert report.latitude == 29.45
        assert report.severity == 'high'
        assert report.status == 'pending'
        assert report.updated_at == report.timestamp
        assert len(report.id) == 36

    def test_ids_are_unique(self):
        data = {'latitude': 29.45, 'longitude': -98.5, 'description': 'x', 'id': 'chosen'}
        first = build_community_report(data)
        second = build_community_report(data)
        assert first.id != second.id
        assert first.id != 'chosen'


class TestUnifiedReport:

    def test_to_dict(self):
        unified = UnifiedReport(id='r1_a1', latitude=29.4, longitude=-98.5, timestamp=1,
                                severity='high', description='x', sources=('Internal', 'NWS'))
        assert unified_as_dicts([unified]) == [{
            'id': 'r1_a1',
            'latitude': 29.4,
            'longitude': -98.5,
            'timestamp': 1,
            'severity': 'high',
            'description': 'x',
            'sources': ['Internal', 'NWS'],
        }]
