# site_probe/crawler/models.py
"""
Data models shared by the crawl controller and the page drivers.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(slots=True, frozen=True)
class ResponseEvent:
    """One network response reported by the page driver."""

    url: str
    status: int


@dataclass(slots=True, frozen=True)
class PageVisit:
    """Outcome of a successful navigation."""

    url: str
    status: Optional[int] = None
    title: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not None and self.status < 400


ResponseObserver = Callable[[ResponseEvent], None]
