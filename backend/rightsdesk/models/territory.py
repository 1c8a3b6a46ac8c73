"""
Territory Model

Static reference data: ISO 3166-1 alpha-2 codes grouped by region
"""
from sqlalchemy import Column, String

from rightsdesk.database import Base


class Territory(Base):
    """
    Territory (Broadcast Market)

    Examples: FR (Europe), US (Americas), NG (Africa)
    """
    __tablename__ = "territories"

    code = Column(String(2), primary_key=True)
    name = Column(String(100), nullable=False)
    region = Column(String(50))

    def __repr__(self):
        return f"<Territory(code={self.code}, region={self.region})>"
