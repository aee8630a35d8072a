from uuid import uuid4

from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text
from sqlalchemy.orm import relationship

from offer_monitor.models.database import Base, utcnow


class Offer(Base):
    """A marketing offer a user tracks through one or more Ad Library pages."""

    __tablename__ = "offers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid4()))
    name = Column(Text)
    user_id = Column(String(100), nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    last_scraped_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    page_links = relationship("OfferPage", back_populates="offer", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Offer(id={self.id}, name={self.name}, active={self.is_active})>"
