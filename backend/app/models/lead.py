"""Lead model for Leadbook CRM."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


LEAD_STATUSES = ("new", "contacted", "follow-up", "converted", "not-interested")
LEAD_PRIORITIES = ("low", "medium", "high")


class Lead(Base):
    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, index=True)
    lead_id = Column(String(16), unique=True, index=True, nullable=False)
    business_name = Column(String, nullable=False, index=True)
    business_type = Column(String, nullable=False, default="Other")
    business_category = Column(String, nullable=False)
    contact_person = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    email = Column(String, nullable=True, index=True)
    website_url = Column(String, nullable=True)
    city = Column(String, nullable=True, index=True)
    state = Column(String, nullable=True, index=True)
    country = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="new", index=True)
    priority = Column(String, nullable=False, default="medium", index=True)
    follow_up_date = Column(DateTime(timezone=True), nullable=True, index=True)
    source = Column(String, nullable=False, default="manual")
    service_interest = Column(String, nullable=True)
    website_status = Column(String, nullable=True)
    is_archived = Column(Boolean, nullable=False, default=False)
    created_by_name = Column(String, nullable=True)
    created_by_email = Column(String, nullable=True, index=True)
    updated_by_name = Column(String, nullable=True)
    updated_by_email = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    tasks = relationship("Task", back_populates="lead", cascade="all, delete-orphan")
    timeline = relationship("TimelineEvent", back_populates="lead", cascade="all, delete-orphan")

    @property
    def created_by(self):
        if not self.created_by_email and not self.created_by_name:
            return None
        return {"name": self.created_by_name, "email": self.created_by_email}

    @property
    def updated_by(self):
        if not self.updated_by_email and not self.updated_by_name:
            return None
        return {"name": self.updated_by_name, "email": self.updated_by_email}
