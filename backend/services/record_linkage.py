"""
Record Linkage Matcher
Decides whether a community report and an official alert describe the same
flood event, using fixed distance and time thresholds.
"""
import logging
from typing import AbstractSet, Optional, Sequence, Tuple

from models import CommunityReport, OfficialAlert
from utils.distance import distance_km, elapsed_ms

logger = logging.getLogger(__name__)

MATCH_DISTANCE_KM = 0.2          # 200 meters
MATCH_WINDOW_MS = 60 * 60 * 1000  # 1 hour


class RecordLinkageMatcher:
    """
    First-fit matcher between reports and alerts.

    The first unused alert (in source order) within both thresholds wins; the
    matcher does not search for the closest candidate.
    """

    def __init__(self, max_distance_km: float = MATCH_DISTANCE_KM,
                 max_elapsed_ms: int = MATCH_WINDOW_MS):
        self.max_distance_km = max_distance_km
        self.max_elapsed_ms = max_elapsed_ms

    def is_match(self, report: CommunityReport, alert: OfficialAlert) -> bool:
        """Both thresholds are inclusive."""
        return (distance_km(report, alert) <= self.max_distance_km and
                elapsed_ms(report, alert) <= self.max_elapsed_ms)

    def find_match(
        self,
        report: CommunityReport,
        alerts: Sequence[OfficialAlert],
        used: AbstractSet[int]
    ) -> Optional[Tuple[int, OfficialAlert]]:
        """
        Find the first alert matching a report.

        Args:
            report: Region-filtered community report
            alerts: Region-filtered alerts in source order
            used: Positions in ``alerts`` already consumed in this run

        Returns:
            (position, alert) of the first match, or None
        """
        for index, alert in enumerate(alerts):
            if index in used:
                continue
            if self.is_match(report, alert):
                logger.debug(f"Report {report.id} matched alert {alert.id}")
                return index, alert
        return None
