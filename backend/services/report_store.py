"""
Flood Report Store
Local persistence for community flood reports, including the radius query
used by "reports near me" read paths. The haversine predicate is evaluated by
the database, not by iterating rows in Python.
"""
import logging
import math
from typing import List, Optional

from sqlalchemy import JSON, BigInteger, Boolean, Float, Index, Integer, String, Text
from sqlalchemy import create_engine, delete, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from models import CommunityReport
from utils.distance import EARTH_RADIUS_MI
from utils.geo import is_valid_coordinates

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class FloodReportRecord(Base):
    """Row in the local flood_reports table."""

    __tablename__ = 'flood_reports'
    __table_args__ = (Index('ix_flood_reports_created_at', 'created_at'),)

    report_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(128), default='')
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str] = mapped_column(Text, default='')
    photo_urls: Mapped[list] = mapped_column(JSON, default=list)
    status: Mapped[str] = mapped_column(String(32), default='pending')
    severity: Mapped[str] = mapped_column(String(16), default='medium')
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    is_manual_location: Mapped[bool] = mapped_column(Boolean, default=False)
    confirmed_count: Mapped[int] = mapped_column(Integer, default=0)
    denied_count: Mapped[int] = mapped_column(Integer, default=0)
    water_depth_inches: Mapped[float] = mapped_column(Float, default=0.0)
    is_road_closed: Mapped[bool] = mapped_column(Boolean, default=False)

    @classmethod
    def from_model(cls, report: CommunityReport) -> 'FloodReportRecord':
        return cls(
            report_id=report.id,
            user_id=report.user_id,
            latitude=report.latitude,
            longitude=report.longitude,
            description=report.description,
            photo_urls=list(report.photo_urls),
            status=report.status,
            severity=report.severity,
            created_at=report.timestamp,
            updated_at=report.updated_at if report.updated_at is not None else report.timestamp,
            is_manual_location=report.is_manual_location,
            confirmed_count=report.confirmed_count,
            denied_count=report.denied_count,
            water_depth_inches=report.water_depth_inches,
            is_road_closed=report.is_road_closed,
        )

    def to_model(self) -> CommunityReport:
        return CommunityReport(
            id=self.report_id,
            user_id=self.user_id or '',
            latitude=self.latitude,
            longitude=self.longitude,
            description=self.description or '',
            photo_urls=tuple(self.photo_urls or ()),
            status=self.status or 'pending',
            severity=self.severity or 'medium',
            timestamp=self.created_at,
            updated_at=self.updated_at,
            is_manual_location=bool(self.is_manual_location),
            confirmed_count=self.confirmed_count or 0,
            denied_count=self.denied_count or 0,
            water_depth_inches=self.water_depth_inches or 0.0,
            is_road_closed=bool(self.is_road_closed),
        )


def _register_math_functions(dbapi_connection, connection_record):
    """Expose the math functions used by the haversine predicate to SQLite."""
    dbapi_connection.create_function('sin', 1, math.sin, deterministic=True)
    dbapi_connection.create_function('cos', 1, math.cos, deterministic=True)
    dbapi_connection.create_function('sqrt', 1, math.sqrt, deterministic=True)
    dbapi_connection.create_function('atan2', 2, math.atan2, deterministic=True)
    dbapi_connection.create_function('radians', 1, math.radians, deterministic=True)


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA journal_mode=WAL')
    cursor.execute('PRAGMA busy_timeout=7000')
    cursor.close()


def haversine_miles_expression(latitude: float, longitude: float):
    """
    SQL expression for the haversine distance in miles from a center point
    to each row, in the same operation order as utils.distance._central_angle.
    """
    lat1_rad = func.radians(latitude, type_=Float)
    lat2_rad = func.radians(FloodReportRecord.latitude, type_=Float)
    dlat = func.radians(FloodReportRecord.latitude - latitude, type_=Float)
    dlon = func.radians(FloodReportRecord.longitude - longitude, type_=Float)

    half_dlat_sin = func.sin(dlat / 2, type_=Float)
    half_dlon_sin = func.sin(dlon / 2, type_=Float)
    a = (half_dlat_sin * half_dlat_sin +
         func.cos(lat1_rad, type_=Float) * func.cos(lat2_rad, type_=Float) *
         half_dlon_sin * half_dlon_sin)
    c = 2 * func.atan2(func.sqrt(a, type_=Float), func.sqrt(1 - a, type_=Float), type_=Float)
    return EARTH_RADIUS_MI * c


class FloodReportStore:
    """
    Read/write access to locally persisted flood reports.

    Storage errors are logged and re-raised unchanged; no retries.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(engine, expire_on_commit=False)

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def save_report(self, report: CommunityReport) -> CommunityReport:
        """Insert or replace a report."""
        try:
            with self._session_factory.begin() as session:
                session.merge(FloodReportRecord.from_model(report))
            return report
        except SQLAlchemyError as e:
            logger.error(f"Error saving flood report {report.id}: {e}")
            raise

    def get_report(self, report_id: str) -> Optional[CommunityReport]:
        try:
            with self._session_factory() as session:
                record = session.get(FloodReportRecord, report_id)
                return record.to_model() if record else None
        except SQLAlchemyError as e:
            logger.error(f"Error fetching flood report {report_id}: {e}")
            raise

    def delete_report(self, report_id: str) -> bool:
        """Delete a report; returns False when it did not exist."""
        try:
            with self._session_factory.begin() as session:
                result = session.execute(
                    delete(FloodReportRecord).where(FloodReportRecord.report_id == report_id)
                )
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Error deleting flood report {report_id}: {e}")
            raise

    def get_all_reports(self) -> List[CommunityReport]:
        """All reports, most recently created first."""
        try:
            with self._session_factory() as session:
                records = session.scalars(
                    select(FloodReportRecord).order_by(FloodReportRecord.created_at.desc())
                ).all()
                return [record.to_model() for record in records]
        except SQLAlchemyError as e:
            logger.error(f"Error listing flood reports: {e}")
            raise

    def find_within_radius(self, latitude: float, longitude: float,
                           radius_miles: float) -> List[CommunityReport]:
        """
        Reports within ``radius_miles`` of a center point.

        Args:
            latitude: Center latitude
            longitude: Center longitude
            radius_miles: Search radius in miles (inclusive)

        Returns:
            Matching reports, most recently created first

        Raises:
            ValueError: If the center is not a valid coordinate or the radius
                is negative or not finite
            SQLAlchemyError: On storage failures (unchanged)
        """
        if not is_valid_coordinates(latitude, longitude):
            raise ValueError(f"Invalid coordinates: ({latitude}, {longitude})")
        if not math.isfinite(radius_miles) or radius_miles < 0:
            raise ValueError(f"Invalid radius: {radius_miles}")

        distance = haversine_miles_expression(latitude, longitude)
        query = (
            select(FloodReportRecord)
            .where(distance <= radius_miles)
            .order_by(FloodReportRecord.created_at.desc())
        )

        try:
            with self._session_factory() as session:
                records = session.scalars(query).all()
                logger.info(f"Radius query ({radius_miles} mi) returned {len(records)} reports")
                return [record.to_model() for record in records]
        except SQLAlchemyError as e:
            logger.error(f"Error running radius query: {e}")
            raise


def create_store(database_url: str, echo: bool = False) -> FloodReportStore:
    """
    Build a store for a SQLAlchemy database URL and create its schema.

    SQLite connections get the haversine math functions registered on connect.
    """
    if database_url.startswith('sqlite'):
        in_memory = database_url in ('sqlite://', 'sqlite:///:memory:')
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={'check_same_thread': False},
            # One shared connection keeps an in-memory database alive
            poolclass=StaticPool if in_memory else None,
        )
        event.listen(engine, 'connect', _register_math_functions)
        if not in_memory:
            event.listen(engine, 'connect', _set_sqlite_pragmas)
    else:
        engine = create_engine(database_url, echo=echo)

    store = FloodReportStore(engine)
    store.create_schema()
    return store
