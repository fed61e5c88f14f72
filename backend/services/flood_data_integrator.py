"""
FloodDataIntegrator - fuses community flood reports with official NWS alerts.

Pipeline: region filter -> first-fit linkage -> merge -> assemble.
The integrator holds no state between calls; the set of consumed alerts lives
only for the duration of one integrate() call, so runs are repeatable and
safe to execute concurrently on immutable inputs.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Set, TypeVar

from models import CommunityReport, GeolocatedObservation, OfficialAlert, UnifiedReport
from services.fusion_synthesizer import merge, to_unified
from services.geo_region import ServiceRegion, bexar_county_region
from services.record_linkage import RecordLinkageMatcher

logger = logging.getLogger(__name__)

T = TypeVar('T', bound=GeolocatedObservation)


class FloodDataIntegrator:
    """Combines two independently sourced observation lists into one view."""

    def __init__(self, region: Optional[ServiceRegion] = None,
                 matcher: Optional[RecordLinkageMatcher] = None):
        self.region = region or bexar_county_region()
        self.matcher = matcher or RecordLinkageMatcher()

    def filter_to_region(self, observations: Iterable[T]) -> List[T]:
        """
        Keep observations inside the service region, preserving order.

        A record whose coordinates cannot be compared is logged and dropped
        rather than failing the batch.
        """
        kept = []
        for observation in observations:
            try:
                if self.region.contains(observation.latitude, observation.longitude):
                    kept.append(observation)
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Dropping malformed observation {getattr(observation, 'id', '?')}: {e}")
        return kept

    def integrate(
        self,
        reports: Sequence[CommunityReport],
        alerts: Sequence[OfficialAlert]
    ) -> List[UnifiedReport]:
        """
        Fuse community reports with official alerts.

        Output order: merged or pass-through reports in report order, then
        unmatched alerts in alert order.

        Args:
            reports: Snapshot of community reports
            alerts: Snapshot of official alerts

        Returns:
            List of freshly constructed UnifiedReport values
        """
        region_reports = self.filter_to_region(reports)
        region_alerts = self.filter_to_region(alerts)

        unified: List[UnifiedReport] = []
        used_alerts: Set[int] = set()
        merged_count = 0

        for report in region_reports:
            try:
                match = self.matcher.find_match(report, region_alerts, used_alerts)
            except (TypeError, ValueError) as e:
                logger.warning(f"Linkage failed for report {report.id}, passing through: {e}")
                match = None

            merged = None
            if match is not None:
                index, alert = match
                merged = merge(report, alert)
                # A concave region can put the midpoint of two in-region records outside it
                if self.region.contains(merged.latitude, merged.longitude):
                    used_alerts.add(index)
                    merged_count += 1
                else:
                    logger.warning(f"Merge of {report.id} and {alert.id} falls outside the region, "
                                   f"keeping both as pass-through")
                    merged = None

            unified.append(merged if merged is not None else to_unified(report))

        for index, alert in enumerate(region_alerts):
            if index not in used_alerts:
                unified.append(to_unified(alert))

        logger.info(
            f"Fused {len(reports)} reports and {len(alerts)} alerts: "
            f"{len(region_reports)}/{len(region_alerts)} in region, "
            f"{merged_count} merged, {len(unified)} unified records"
        )
        return unified


_default_integrator = FloodDataIntegrator()


def fuse(reports: Sequence[CommunityReport], alerts: Sequence[OfficialAlert]) -> List[UnifiedReport]:
    """Fuse reports and alerts over the default (Bexar County) service region."""
    return _default_integrator.integrate(reports, alerts)
