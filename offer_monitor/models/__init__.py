from offer_monitor.models.database import Base, engine, SessionLocal, get_db, init_db, utcnow
from offer_monitor.models.offer import Offer
from offer_monitor.models.page import FacebookPage, OfferPage
from offer_monitor.models.snapshot import CreativeSnapshot

__all__ = [
    "Base",
    "engine",
    "SessionLocal",
    "get_db",
    "init_db",
    "utcnow",
    "Offer",
    "FacebookPage",
    "OfferPage",
    "CreativeSnapshot",
]
