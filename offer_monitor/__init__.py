"""Facebook Ad Library creative-count monitoring for tracked offers."""

__version__ = "0.1.0"
