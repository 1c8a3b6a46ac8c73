"""
Event Model

Sports fixtures from the catalog. Read-only for the rights and pricing engine.
"""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime

from rightsdesk.database import Base
from rightsdesk.models.types import GUID, TimestampMixin


class Event(Base, TimestampMixin):
    """
    Event (Fixture)

    Examples: PSG vs Marseille (Ligue 1), Lakers vs Celtics (NBA)
    """
    __tablename__ = "events"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    sport_id = Column(GUID)
    league_id = Column(GUID)
    sport = Column(String(100))
    league = Column(String(200))
    api_title = Column(String(500))
    override_title = Column(String(500))
    home_team = Column(String(200))
    away_team = Column(String(200))
    event_date = Column(DateTime(timezone=True), nullable=False)
    is_pinned = Column(Boolean, default=False)
    status = Column(String(20), default="draft")  # draft, published, archived

    @property
    def display_title(self) -> str:
        if self.override_title:
            return self.override_title
        if self.api_title:
            return self.api_title
        return f"{self.home_team or ''} vs {self.away_team or ''}"

    def __repr__(self):
        return f"<Event(title={self.display_title}, status={self.status})>"
