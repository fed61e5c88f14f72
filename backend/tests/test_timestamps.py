"""
Tests for timestamp normalization to epoch milliseconds.
"""
from datetime import datetime, timedelta, timezone

import pytest
from utils.timestamps import now_millis, to_epoch_millis

EPOCH_S = 1714564800          # 2024-05-01T12:00:00Z
EPOCH_MS = EPOCH_S * 1000


class FirestoreTimestamp:
    """Stand-in for google.cloud Timestamp objects"""

    def __init__(self, seconds, nanoseconds=0):
        self.seconds = seconds
        self.nanoseconds = nanoseconds


class TestToEpochMillis:

    @pytest.mark.parametrize('value', [
        '2024-05-01T12:00:00Z',
        '2024-05-01T12:00:00+00:00',
        '2024-05-01T07:00:00-05:00',
        ' 2024-05-01T12:00:00Z ',
    ])
    def test_iso_strings(self, value):
        assert to_epoch_millis(value) == EPOCH_MS

    def test_aware_datetime(self):
        assert to_epoch_millis(datetime(2024, 5, 1, 12, tzinfo=timezone.utc)) == EPOCH_MS
        offset = timezone(timedelta(hours=-5))
        assert to_epoch_millis(datetime(2024, 5, 1, 7, tzinfo=offset)) == EPOCH_MS

    def test_naive_datetime_is_utc(self):
        assert to_epoch_millis(datetime(2024, 5, 1, 12)) == EPOCH_MS

    def test_seconds_and_millis(self):
        assert to_epoch_millis(EPOCH_S) == EPOCH_MS
        assert to_epoch_millis(EPOCH_MS) == EPOCH_MS
        assert to_epoch_millis(float(EPOCH_S) + 0.5) == EPOCH_MS + 500

    def test_serialized_firestore(self):
        assert to_epoch_millis({'_seconds': EPOCH_S, '_nanoseconds': 250_000_000}) == EPOCH_MS + 250
        assert to_epoch_millis({'seconds': EPOCH_S, 'nanoseconds': 0}) == EPOCH_MS

    def test_timestamp_object(self):
        assert to_epoch_millis(FirestoreTimestamp(EPOCH_S, 1_000_000)) == EPOCH_MS + 1

    @pytest.mark.parametrize('value', [
        None,
        True,
        'not a date',
        '',
        float('nan'),
        {'unrelated': 1},
        ['2024-05-01'],
    ])
    def test_unusable_values(self, value):
        assert to_epoch_millis(value) is None


class TestNowMillis:

    def test_close_to_wall_clock(self):
        expected = int(datetime.now(timezone.utc).timestamp() * 1000)
        assert abs(now_millis() - expected) < 5000
