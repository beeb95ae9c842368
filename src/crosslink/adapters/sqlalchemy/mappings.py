"""SQLAlchemy mapping metadata for the crosslink domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from enum import StrEnum
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
    text,
)
from sqlalchemy.orm import configure_mappers, relationship

from crosslink.domain.model import (
    ArtistMatch,
    EntityType,
    LinkSource,
    MatchStatus,
    Release,
    Track,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _value_enum(enum_cls: type[StrEnum]) -> Enum:
    """Persist enum values (not member names) so raw SQL predicates stay readable."""
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
    )


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Core tables -----------------------------------------------------------------

release_table = Table(
    "release",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("profile_id", UUIDColumnType, nullable=False, index=True),
    Column("title", String, nullable=False),
    Column("release_date", Date, nullable=True),
    Column("upc", String, nullable=True),
)

track_table = Table(
    "track",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "release_id",
        UUIDColumnType,
        ForeignKey("release.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", String, nullable=False),
    Column("duration_ms", Integer, nullable=True),
    Column("disc_number", Integer, nullable=False, default=1),
    Column("track_number", Integer, nullable=False),
    Column("explicit", Boolean, nullable=False, default=False),
    Column("isrc", String, nullable=True, index=True),
)

dsp_link_table = Table(
    "dsp_link",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("owner_type", _value_enum(EntityType), nullable=False),
    Column("owner_id", UUIDColumnType, nullable=False),
    Column("position", Integer, nullable=False),
    Column("provider", String, nullable=False),
    Column("url", String, nullable=False),
    Column("source", _value_enum(LinkSource), nullable=False),
    Column("confidence", Float, nullable=False),
    Column("identifier", String, nullable=True),
    Column("external_id", String, nullable=True),
    UniqueConstraint("owner_type", "owner_id", "provider"),
    Index("ix_dsp_link_owner", "owner_type", "owner_id"),
)

artist_match_table = Table(
    "artist_match",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("profile_id", UUIDColumnType, nullable=False),
    Column("provider", String, nullable=False),
    Column("external_artist_id", String, nullable=False),
    Column("external_artist_name", String, nullable=False),
    Column("external_artist_url", String, nullable=True),
    Column("image_url", String, nullable=True),
    Column("confidence", Float, nullable=False),
    Column("matching_isrc_count", Integer, nullable=False, default=0),
    Column("matching_upc_count", Integer, nullable=False, default=0),
    Column("total_tracks_checked", Integer, nullable=False, default=0),
    Column("breakdown", JSON, nullable=False, default=dict),
    Column("status", _value_enum(MatchStatus), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column("confirmed_at", UTCDateTime(), nullable=True),
    Column("confirmed_by", UUIDColumnType, nullable=True),
    Column("rejected_at", UTCDateTime(), nullable=True),
    Column("rejection_reason", String, nullable=True),
    Index("ix_artist_match_profile_provider", "profile_id", "provider"),
    # one non-rejected match per (profile, provider)
    Index(
        "uq_artist_match_active",
        "profile_id",
        "provider",
        unique=True,
        sqlite_where=text("status != 'rejected'"),
        postgresql_where=text("status != 'rejected'"),
    ),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(
        Release,
        release_table,
        properties={
            "_tracks": relationship(
                Track,
                back_populates="_release",
                cascade="all, delete-orphan",
                order_by=(track_table.c.disc_number, track_table.c.track_number),
            ),
        },
    )

    mapper_registry.map_imperatively(
        Track,
        track_table,
        properties={
            "_release": relationship(
                Release,
                back_populates="_tracks",
            ),
        },
    )

    mapper_registry.map_imperatively(
        ArtistMatch,
        artist_match_table,
    )

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
