from sqlalchemy import Column, DateTime, Integer, String, func

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class GoogleUser(Base):
    __tablename__ = "google_users"

    id = Column(Integer, primary_key=True, index=True)
    uid = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    photo_url = Column(String(512), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
