# File: tests/conftest.py
from __future__ import annotations

import random
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from site_probe.config import ProbeConfig
from site_probe.crawler.models import PageVisit, ResponseEvent, ResponseObserver
from site_probe.errors import NavigationError


class FakeDriver:
    """In-memory page driver.

    *pages* maps a URL to its anchors; unknown URLs get *default_anchors*.
    Every navigation reports the page itself plus *assets* as responses.
    """

    def __init__(
        self,
        pages: Optional[Dict[str, List[str]]] = None,
        *,
        default_anchors: Sequence[str] = (),
        assets: Iterable[Tuple[str, int]] = (),
        statuses: Optional[Dict[str, int]] = None,
        failing: Iterable[str] = (),
        launch_error: Optional[Exception] = None,
    ) -> None:
        self.pages = pages or {}
        self.default_anchors = list(default_anchors)
        self.assets = list(assets)
        self.statuses = statuses or {}
        self.failing = set(failing)
        self.launch_error = launch_error
        self.observers: List[ResponseObserver] = []
        self.navigations: List[str] = []
        self.timeouts: List[float] = []
        self.human_calls = 0
        self.launched = False
        self.closed = False
        self._url: Optional[str] = None

    @property
    def current_url(self) -> Optional[str]:
        return self._url

    def on_response(self, observer: ResponseObserver) -> None:
        self.observers.append(observer)

    def emit(self, url: str, status: int) -> None:
        for observer in self.observers:
            observer(ResponseEvent(url, status))

    async def launch(self) -> None:
        if self.launch_error is not None:
            raise self.launch_error
        self.launched = True

    async def close(self) -> None:
        self.closed = True

    async def navigate(self, url: str, timeout: float) -> PageVisit:
        self.navigations.append(url)
        self.timeouts.append(timeout)
        self._url = url
        if url in self.failing:
            raise NavigationError(url, "Timeout exceeded")
        status = self.statuses.get(url, 200)
        self.emit(url, status)
        for asset_url, asset_status in self.assets:
            self.emit(asset_url, asset_status)
        return PageVisit(url=url, status=status, title=f"Title of {url}")

    async def simulate_human(self) -> None:
        self.human_calls += 1

    async def anchor_hrefs(self) -> List[str]:
        if self._url in self.failing:
            return []
        return list(self.pages.get(self._url, self.default_anchors))


@pytest.fixture()
def make_driver():
    """Factory for :class:`FakeDriver` instances."""
    return FakeDriver


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def basic_config(tmp_path: Path) -> ProbeConfig:
    """
    Return a basic valid ProbeConfig for crawler tests.
    """
    return ProbeConfig(
        url="https://example.com",
        domains=["example.com", "*.example.com"],
        max_pages=3,
        network_timeout=2.0,
        output=tmp_path / "report.html",
    )
