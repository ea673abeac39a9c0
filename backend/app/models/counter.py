"""Named sequence counters."""

from sqlalchemy import Column, Integer, String

from backend.app.db.base_class import Base


class Counter(Base):
    __tablename__ = "counters"

    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
