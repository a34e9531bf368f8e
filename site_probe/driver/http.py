# site_probe/driver/http.py
"""
Plain HTTP page driver: aiohttp for transport, BeautifulSoup for anchors.

No JavaScript is executed, so only the document itself (and its redirect
hops) is reported to the response observers.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout
from bs4 import BeautifulSoup
from bs4.element import Tag

from site_probe.crawler.models import PageVisit, ResponseEvent, ResponseObserver
from site_probe.errors import LaunchError, NavigationError

DEFAULT_USER_AGENT = "SiteProbe/0.1"
_HTML_TYPES = ("text/html", "application/xhtml+xml")


class HttpDriver:
    """Page driver без браузера: GET-запрос и разбор HTML."""

    def __init__(self, *, user_agent: Optional[str] = None) -> None:
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.session: Optional[ClientSession] = None
        self.logger = logging.getLogger("SiteProbe")
        self._observers: List[ResponseObserver] = []
        self._url: Optional[str] = None
        self._soup: Optional[BeautifulSoup] = None

    @property
    def current_url(self) -> Optional[str]:
        return self._url

    def on_response(self, observer: ResponseObserver) -> None:
        self._observers.append(observer)

    def _emit(self, url: str, status: int) -> None:
        event = ResponseEvent(url=url, status=status)
        for observer in self._observers:
            observer(event)

    async def launch(self) -> None:
        try:
            self.session = ClientSession(
                headers={"User-Agent": self.user_agent},
                raise_for_status=False,
            )
        except (ClientError, RuntimeError) as exc:
            raise LaunchError(f"Cannot create HTTP session: {exc}") from exc

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def navigate(self, url: str, timeout: float) -> PageVisit:
        if not self.session:
            raise RuntimeError("Session not initialized")
        self._url = url
        self._soup = None
        try:
            async with self.session.get(url, timeout=ClientTimeout(total=timeout)) as resp:
                for hop in resp.history:
                    self._emit(str(hop.url), hop.status)
                self._emit(str(resp.url), resp.status)
                self._url = str(resp.url)
                status = resp.status
                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                html = await resp.text(errors="replace") if mime in _HTML_TYPES else ""
        except (ClientError, asyncio.TimeoutError) as exc:
            raise NavigationError(url, str(exc) or type(exc).__name__) from exc

        if html:
            self._soup = BeautifulSoup(html, "html.parser")
        return PageVisit(url=self._url, status=status, title=self._title())

    def _title(self) -> str:
        if self._soup is None or self._soup.title is None or self._soup.title.string is None:
            return ""
        return self._soup.title.string.strip()

    async def simulate_human(self) -> None:
        self.logger.debug("Human-behaviour simulation is a no-op for the HTTP driver")

    async def anchor_hrefs(self) -> List[str]:
        if self._soup is None:
            return []
        hrefs: List[str] = []
        for tag in self._soup.find_all("a", href=True):
            if not isinstance(tag, Tag):
                continue
            href_val = tag.get("href")
            if isinstance(href_val, str) and href_val.strip():
                hrefs.append(href_val)
        return hrefs
