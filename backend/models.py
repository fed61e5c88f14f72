"""
Value types shared by the flood-report fusion engine.

Community reports and official alerts share the GeolocatedObservation shape;
UnifiedReport is the fused output and is rebuilt on every fusion run.
"""
import uuid
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from utils.timestamps import now_millis, to_epoch_millis

SEVERITY_LEVELS = ('low', 'medium', 'high', 'extreme')

# Source tags used in descriptions and source lists
INTERNAL_SOURCE = 'Internal'
NWS_SOURCE = 'NWS'

# NWS CAP severity -> report severity vocabulary
NWS_SEVERITY_MAP = {
    'minor': 'low',
    'moderate': 'medium',
    'severe': 'high',
    'extreme': 'extreme',
}


def normalize_severity(value: Optional[str], default: str = 'medium') -> str:
    """
    Map a raw severity string onto the report vocabulary.

    Accepts the report levels directly and NWS CAP levels (Minor, Moderate,
    Severe, Extreme). Anything else falls back to ``default``.
    """
    if not value or not isinstance(value, str):
        return default
    lowered = value.strip().lower()
    if lowered in SEVERITY_LEVELS:
        return lowered
    return NWS_SEVERITY_MAP.get(lowered, default)


class GeolocatedObservation(BaseModel):
    """Geolocated, timestamped observation from any source."""

    model_config = ConfigDict(frozen=True)

    id: str
    latitude: float
    longitude: float
    timestamp: int  # epoch milliseconds
    severity: str = 'medium'
    description: str = ''
    source: str


class CommunityReport(GeolocatedObservation):
    """Flood report submitted by a community member."""

    source: str = INTERNAL_SOURCE
    user_id: str = ''
    photo_urls: Tuple[str, ...] = ()
    status: str = 'pending'
    confirmed_count: int = Field(default=0, ge=0)
    denied_count: int = Field(default=0, ge=0)
    is_manual_location: bool = False
    water_depth_inches: float = 0.0
    is_road_closed: bool = False
    updated_at: Optional[int] = None

    @classmethod
    def from_firebase(cls, report_id: str, payload: Dict[str, Any]) -> 'CommunityReport':
        """
        Build a report from a Firebase record.

        Firebase stores reports with snake_case keys and a ``created_at`` value
        that may be a Firestore timestamp, an ISO string or an epoch number.

        Raises:
            ValueError: If coordinates or the creation time are missing
        """
        created_at = to_epoch_millis(payload.get('created_at', payload.get('timestamp')))
        if created_at is None:
            raise ValueError(f'Report {report_id} has no usable created_at')
        if payload.get('latitude') is None or payload.get('longitude') is None:
            raise ValueError(f'Report {report_id} is missing coordinates')

        return cls(
            id=report_id,
            latitude=float(payload['latitude']),
            longitude=float(payload['longitude']),
            timestamp=created_at,
            severity=normalize_severity(payload.get('severity')),
            description=payload.get('description') or '',
            user_id=payload.get('user_id') or '',
            photo_urls=tuple(payload.get('photo_urls') or ()),
            status=payload.get('status') or 'pending',
            confirmed_count=int(payload.get('confirmed_count') or 0),
            denied_count=int(payload.get('denied_count') or 0),
            is_manual_location=bool(payload.get('is_manual_location', False)),
            water_depth_inches=float(payload.get('water_depth_inches') or 0.0),
            is_road_closed=bool(payload.get('is_road_closed', False)),
            updated_at=to_epoch_millis(payload.get('updated_at')),
        )

    def to_firebase(self) -> Dict[str, Any]:
        """Serialize to the Firebase record layout (id is the record key)."""
        return {
            'user_id': self.user_id,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'description': self.description,
            'photo_urls': list(self.photo_urls),
            'status': self.status,
            'severity': self.severity,
            'created_at': self.timestamp,
            'updated_at': self.updated_at if self.updated_at is not None else self.timestamp,
            'is_manual_location': self.is_manual_location,
            'confirmed_count': self.confirmed_count,
            'denied_count': self.denied_count,
            'water_depth_inches': self.water_depth_inches,
            'is_road_closed': self.is_road_closed,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'source': self.source, **self.to_firebase()}


class OfficialAlert(GeolocatedObservation):
    """Alert from the official weather feed. Immutable for a fusion run."""

    source: str = NWS_SOURCE
    title: str = ''
    area_desc: str = ''


class UnifiedReport(BaseModel):
    """Fused view of one physical flood event."""

    model_config = ConfigDict(frozen=True)

    id: str
    latitude: float
    longitude: float
    timestamp: int
    severity: str
    description: str
    sources: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        data['sources'] = list(self.sources)
        return data


def new_report_id() -> str:
    return str(uuid.uuid4())


def build_community_report(data: Dict[str, Any], user_id: str = '') -> CommunityReport:
    """Create a fresh report from validated API input."""
    created = now_millis()
    return CommunityReport(
        id=new_report_id(),
        latitude=float(data['latitude']),
        longitude=float(data['longitude']),
        timestamp=created,
        updated_at=created,
        severity=normalize_severity(data.get('severity')),
        description=data.get('description', ''),
        user_id=user_id,
        photo_urls=tuple(data.get('photo_urls') or ()),
        is_manual_location=bool(data.get('is_manual_location', False)),
        water_depth_inches=float(data.get('water_depth_inches') or 0.0),
        is_road_closed=bool(data.get('is_road_closed', False)),
    )


def unified_as_dicts(reports: List[UnifiedReport]) -> List[Dict[str, Any]]:
    return [report.to_dict() for report in reports]
