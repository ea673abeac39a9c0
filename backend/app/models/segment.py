"""Saved lead filter: the criteria, the resolved query and a count snapshot."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Segment(Base):
    __tablename__ = "segments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(String, nullable=True)
    filter_criteria = Column(JSON, nullable=False, default=dict)
    query = Column(Text, nullable=False)
    lead_count = Column(Integer, nullable=False, default=0)
    count_refreshed_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    created_by_name = Column(String, nullable=False)
    created_by_email = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    @property
    def created_by(self):
        return {"name": self.created_by_name, "email": self.created_by_email}
