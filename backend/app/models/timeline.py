"""Timeline event model: the immutable audit feed of a lead."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


TIMELINE_EVENT_TYPES = ("lead_created", "lead_updated", "task_created", "task_updated")


class TimelineEvent(Base):
    __tablename__ = "timeline_events"

    id = Column(Integer, primary_key=True, index=True)
    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=False, index=True)
    event_type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    # "metadata" is reserved on declarative classes
    event_metadata = Column("metadata", JSON, nullable=False, default=dict)
    created_by_name = Column(String, nullable=False)
    created_by_email = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)

    lead = relationship("Lead", back_populates="timeline")

    @property
    def created_by(self):
        return {"name": self.created_by_name, "email": self.created_by_email}
