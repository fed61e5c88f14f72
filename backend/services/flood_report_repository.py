"""
Firebase-backed source of community flood reports.

Reads and writes the `flood_reports` node of the Firebase Realtime Database.
"""
import logging
from typing import List, Optional

from models import CommunityReport
from utils.secure_logging import hash_user_id

logger = logging.getLogger(__name__)

REPORTS_PATH = 'flood_reports'


class FirebaseFloodReportRepository:
    """Community report snapshots for fusion and report submission."""

    def __init__(self, firebase_db):
        """
        Args:
            firebase_db: firebase_admin.db module (or a compatible mock)
        """
        self.db = firebase_db

    def get_all_reports(self) -> List[CommunityReport]:
        """
        Snapshot of all stored community reports.

        Malformed records are skipped with a warning. Firebase errors are
        logged and produce an empty list.
        """
        try:
            reports_dict = self.db.reference(REPORTS_PATH).get() or {}
        except Exception as e:
            logger.error(f"Error fetching flood reports from Firebase: {e}")
            return []

        if not isinstance(reports_dict, dict):
            logger.warning(f"Unexpected {REPORTS_PATH} payload type: {type(reports_dict)}")
            return []

        reports = []
        for key, payload in reports_dict.items():
            if not isinstance(payload, dict):
                logger.warning(f"Skipping report {key}: payload is not an object")
                continue
            try:
                reports.append(CommunityReport.from_firebase(key, payload))
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed report {key}: {e}")

        logger.info(f"Loaded {len(reports)} of {len(reports_dict)} flood reports from Firebase")
        return reports

    def get_report(self, report_id: str) -> Optional[CommunityReport]:
        payload = self.db.reference(f'{REPORTS_PATH}/{report_id}').get()
        if not payload:
            return None
        return CommunityReport.from_firebase(report_id, payload)

    def create_report(self, report: CommunityReport) -> CommunityReport:
        """Write a report under its id. Errors propagate to the caller."""
        self.db.reference(REPORTS_PATH).child(report.id).set(report.to_firebase())
        logger.info(f"Flood report {report.id} created by user {hash_user_id(report.user_id)}")
        return report
