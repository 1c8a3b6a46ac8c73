"""
AdminProfile Model

Display data for console users, keyed by the identity provider's user id
"""
from sqlalchemy import Column, String

from rightsdesk.database import Base
from rightsdesk.models.types import GUID, TimestampMixin


class AdminProfile(Base, TimestampMixin):
    """Console user profile (name and email shown next to history entries)"""
    __tablename__ = "admin_profiles"

    user_id = Column(GUID, primary_key=True)
    email = Column(String(320))
    full_name = Column(String(200))

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or str(self.user_id)

    def __repr__(self):
        return f"<AdminProfile(user_id={self.user_id}, email={self.email})>"
