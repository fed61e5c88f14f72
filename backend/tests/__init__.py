"""
Test suite for the flood report fusion backend.

This package contains:
- test_flood_data_integrator.py: End-to-end fusion (region filter, linkage, merge, assembly)
- test_geo_region.py / test_record_linkage.py / test_fusion_synthesizer.py: Pipeline stages
- test_report_store.py: SQLite radius query and persistence
- test_nws_flood_alerts.py / test_flood_report_repository.py: Data sources (mocked)
- test_flood_api.py: Flask endpoint integration tests

Run tests:
    pip install -e ".[test]"
    python -m pytest

Run specific test file:
    python -m pytest backend/tests/test_flood_data_integrator.py
"""
