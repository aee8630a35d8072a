from sqlalchemy import Column, Boolean, DateTime, Integer, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from offer_monitor.models.database import Base, utcnow


class FacebookPage(Base):
    """A monitored Ad Library URL and its cached display name."""

    __tablename__ = "facebook_pages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    url = Column(Text, unique=True, nullable=False)
    page_name = Column(Text)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    offer_links = relationship("OfferPage", back_populates="page", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<FacebookPage(id={self.id}, page_name={self.page_name})>"


class OfferPage(Base):
    """Association between an offer and a page it monitors."""

    __tablename__ = "offer_pages"
    __table_args__ = (UniqueConstraint("offer_id", "page_id", name="uq_offer_page"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    offer_id = Column(Integer, ForeignKey("offers.id", ondelete="CASCADE"), nullable=False, index=True)
    page_id = Column(Integer, ForeignKey("facebook_pages.id", ondelete="CASCADE"), nullable=False, index=True)
    is_primary = Column(Boolean, default=False, nullable=False)  # informational only
    created_at = Column(DateTime, default=utcnow, nullable=False)

    offer = relationship("Offer", back_populates="page_links")
    page = relationship("FacebookPage", back_populates="offer_links")

    def __repr__(self):
        return f"<OfferPage(offer_id={self.offer_id}, page_id={self.page_id})>"
