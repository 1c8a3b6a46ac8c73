"""
Broadcaster Model

Represents a rights holder (TV channel, OTT platform)
"""
import uuid
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from rightsdesk.database import Base
from rightsdesk.models.types import GUID, TimestampMixin


class Broadcaster(Base, TimestampMixin):
    """
    Broadcaster (Rights Holder)

    Examples: Canal+, beIN Sports, DAZN
    """
    __tablename__ = "broadcasters"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    legal_name = Column(String(300))
    logo_url = Column(String(1000))
    contact_email = Column(String(320))
    status = Column(String(20), nullable=False, default="pending")  # active, suspended, pending

    # Relationships
    packages = relationship("RightsPackage", back_populates="broadcaster", lazy="dynamic")
    rights = relationship("RightsEvent", back_populates="broadcaster", lazy="dynamic")

    def __repr__(self):
        return f"<Broadcaster(name={self.name}, status={self.status})>"
