from .base import BaseScraper
from .cvent import CventAgendaScraper

__all__ = [
    "BaseScraper",
    "CventAgendaScraper",
]
