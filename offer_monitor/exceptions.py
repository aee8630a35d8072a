class OfferMonitorError(Exception):
    """Base class for offer monitor errors."""


class FetchError(OfferMonitorError):
    """The browser could not load a page (timeout, network, launch failure)."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class OfferNotFoundError(OfferMonitorError):
    """Offer does not exist or is not owned by the caller."""


class NoPagesError(OfferMonitorError):
    """Offer has no monitored pages to refresh."""
