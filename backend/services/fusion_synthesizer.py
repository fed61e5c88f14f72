"""
Fusion Synthesizer
Builds UnifiedReport values: pass-through records for unmatched observations
and merged records for linked report/alert pairs.
"""
from typing import Dict, Iterable, Sequence, Tuple

from models import (
    INTERNAL_SOURCE,
    NWS_SOURCE,
    CommunityReport,
    GeolocatedObservation,
    OfficialAlert,
    UnifiedReport,
)

# Severity precedence by source tag. Higher rank wins severity on merge;
# unknown tags rank 0. Official feeds outrank community reports.
SOURCE_PRECEDENCE: Dict[str, int] = {
    NWS_SOURCE: 2,
    INTERNAL_SOURCE: 1,
}
OFFICIAL_RANK = SOURCE_PRECEDENCE[NWS_SOURCE]


def source_rank(sources: Iterable[str]) -> int:
    """Highest precedence rank among a record's source tags."""
    return max((SOURCE_PRECEDENCE.get(tag, 0) for tag in sources), default=0)


def tag_description(source: str, description: str) -> str:
    """
    Prefix a description with its originating source tag.

    Examples:
        >>> tag_description('NWS', 'Flash Flood Warning')
        '[NWS] Flash Flood Warning'
    """
    return f'[{source}] {description}'


def to_unified(observation: GeolocatedObservation) -> UnifiedReport:
    """Wrap one observation as a pass-through UnifiedReport."""
    return UnifiedReport(
        id=observation.id,
        latitude=observation.latitude,
        longitude=observation.longitude,
        timestamp=observation.timestamp,
        severity=observation.severity,
        description=tag_description(observation.source, observation.description),
        sources=(observation.source,),
    )


def _merge_sources(first: Sequence[str], second: Sequence[str]) -> Tuple[str, ...]:
    # First list order, then new tags from the second list
    merged = list(dict.fromkeys(first))
    merged.extend(tag for tag in dict.fromkeys(second) if tag not in merged)
    return tuple(merged)


def resolve_severity(report: UnifiedReport, alert: UnifiedReport) -> str:
    """
    Pick the merged severity by source precedence.

    The alert's severity wins whenever its sources reach the official rank,
    regardless of the report's sources; otherwise the report's severity is kept.
    """
    if source_rank(alert.sources) >= OFFICIAL_RANK:
        return alert.severity
    return report.severity


def merge_unified(report: UnifiedReport, alert: UnifiedReport) -> UnifiedReport:
    """
    Merge two tagged records (report first, then alert).

    - Coordinates: arithmetic mean
    - Timestamp: earliest of the two
    - Description: report then alert, newline separated
    - Severity: source precedence (see resolve_severity)
    - Sources: union, report order first
    - Identifier: '{report_id}_{alert_id}'
    """
    return UnifiedReport(
        id=f'{report.id}_{alert.id}',
        latitude=(report.latitude + alert.latitude) / 2,
        longitude=(report.longitude + alert.longitude) / 2,
        timestamp=min(report.timestamp, alert.timestamp),
        severity=resolve_severity(report, alert),
        description=f'{report.description}\n{alert.description}',
        sources=_merge_sources(report.sources, alert.sources),
    )


def merge(report: CommunityReport, alert: OfficialAlert) -> UnifiedReport:
    """Fuse a linked community report and official alert."""
    return merge_unified(to_unified(report), to_unified(alert))
