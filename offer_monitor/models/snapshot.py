from sqlalchemy import Column, DateTime, Integer, ForeignKey, CheckConstraint

from offer_monitor.models.database import Base, utcnow


class CreativeSnapshot(Base):
    """Append-only creative count observations for a page of an offer."""

    __tablename__ = "creative_snapshots"
    __table_args__ = (CheckConstraint("creative_count >= 0", name="ck_creative_count_non_negative"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    offer_id = Column(Integer, ForeignKey("offers.id", ondelete="CASCADE"), nullable=False, index=True)
    page_id = Column(Integer, ForeignKey("facebook_pages.id", ondelete="CASCADE"), index=True)
    creative_count = Column(Integer, nullable=False)
    scraped_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<CreativeSnapshot(offer_id={self.offer_id}, page_id={self.page_id}, count={self.creative_count})>"
