"""
Rights Models

RightsPackage is the contractual envelope for a broadcaster; RightsEvent is
a per-event grant, optionally derived from a package.
"""
import uuid
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from rightsdesk.database import Base
from rightsdesk.models.types import GUID, TimestampMixin


class RightsPackage(Base, TimestampMixin):
    """
    Rights Package (Contract)

    Examples: Ligue 1 2024/25 season, all tennis, Champions League
    """
    __tablename__ = "rights_packages"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    broadcaster_id = Column(
        GUID,
        ForeignKey("broadcasters.id", ondelete="CASCADE"),
        nullable=False
    )
    name = Column(String(300), nullable=False)
    scope_type = Column(String(20), nullable=False)  # sport, competition, season
    sport_id = Column(GUID)
    league_id = Column(GUID)
    season = Column(String(20))
    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=False)
    is_exclusive_default = Column(Boolean, default=False, nullable=False)
    territories_default = Column(JSON, default=list, nullable=False)
    status = Column(String(20), nullable=False, default="draft")  # draft, active, expired

    # Relationships
    broadcaster = relationship("Broadcaster", back_populates="packages")
    rights = relationship("RightsEvent", back_populates="package", lazy="dynamic")

    def __repr__(self):
        return f"<RightsPackage(name={self.name}, scope_type={self.scope_type})>"


class RightsEvent(Base, TimestampMixin):
    """
    Rights Grant for a single event

    territories_blocked takes precedence over territories_allowed.
    Active grants are revoked rather than deleted.
    """
    __tablename__ = "rights_events"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    event_id = Column(
        GUID,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    broadcaster_id = Column(
        GUID,
        ForeignKey("broadcasters.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    package_id = Column(
        GUID,
        ForeignKey("rights_packages.id", ondelete="SET NULL"),
        nullable=True
    )
    rights_live = Column(Boolean, default=True, nullable=False)
    rights_replay = Column(Boolean, default=False, nullable=False)
    rights_highlights = Column(Boolean, default=False, nullable=False)
    replay_window_hours = Column(Integer)
    territories_allowed = Column(JSON, default=list, nullable=False)
    territories_blocked = Column(JSON, default=list, nullable=False)
    exclusivity = Column(String(20), nullable=False, default="non_exclusive")  # exclusive, shared, non_exclusive
    platform = Column(String(20), nullable=False, default="both")  # ott, linear, both
    status = Column(String(20), nullable=False, default="draft")  # draft, active, expired, revoked
    expires_at = Column(DateTime(timezone=True))

    # Relationships
    event = relationship("Event")
    broadcaster = relationship("Broadcaster", back_populates="rights")
    package = relationship("RightsPackage", back_populates="rights")

    def __repr__(self):
        return f"<RightsEvent(event_id={self.event_id}, exclusivity={self.exclusivity}, status={self.status})>"
