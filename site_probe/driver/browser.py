"""Playwright-driven Chromium page driver.

Launches a single Chromium page with a small anti-automation init script,
forwards every network response to the registered observers and can imitate
a human visitor (mouse movement, scrolling, pauses) before links are read.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    Response,
    async_playwright,
)

from site_probe.crawler.models import PageVisit, ResponseEvent, ResponseObserver
from site_probe.errors import LaunchError, NavigationError

logger = logging.getLogger("SiteProbe")

LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--disable-dev-shm-usage",
]

DEFAULT_VIEWPORT = {"width": 1280, "height": 720}

STEALTH_JS = """
Object.defineProperty(navigator, 'webdriver', {
    get: () => undefined
});

window.chrome = {
    runtime: {},
    loadTimes: function() {},
    csi: function() {},
    app: {}
};

Object.defineProperty(navigator, 'plugins', {
    get: () => [
        {name: 'Chrome PDF Plugin', description: 'Portable Document Format', filename: 'internal-pdf-viewer'},
        {name: 'Chrome PDF Viewer', description: '', filename: 'mhjfbmdgcfjbbpaeojofohoefgiehjai'},
        {name: 'Native Client', description: '', filename: 'internal-nacl-plugin'}
    ]
});

Object.defineProperty(navigator, 'languages', {
    get: () => ['en-US', 'en']
});

const originalQuery = window.navigator.permissions.query;
window.navigator.permissions.query = (parameters) => (
    parameters.name === 'notifications' ?
        Promise.resolve({ state: Notification.permission }) :
        originalQuery(parameters)
);
"""

ANCHORS_JS = "els => els.map(e => e.getAttribute('href'))"


def _first_line(message: str) -> str:
    return message.strip().splitlines()[0] if message.strip() else "navigation failed"


class BrowserDriver:
    """Page driver backed by Playwright's async Chromium API."""

    def __init__(
        self,
        *,
        headless: bool = True,
        user_agent: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.headless = headless
        self.user_agent = user_agent
        self._rng = rng or random.Random()
        self._observers: List[ResponseObserver] = []
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def current_url(self) -> Optional[str]:
        return self._page.url if self._page is not None else None

    def on_response(self, observer: ResponseObserver) -> None:
        self._observers.append(observer)

    async def launch(self) -> None:
        """Start Playwright, Chromium and a single page.

        Raises:
            LaunchError: if Playwright or the browser binary cannot be started.
        """
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=LAUNCH_ARGS,
            )
            context_options: Dict[str, Any] = {"viewport": DEFAULT_VIEWPORT}
            if self.user_agent:
                context_options["user_agent"] = self.user_agent
            self._context = await self._browser.new_context(**context_options)
            await self._context.add_init_script(STEALTH_JS)
            self._page = await self._context.new_page()
        except PlaywrightError as exc:
            raise LaunchError(f"Cannot launch Chromium: {_first_line(str(exc))}") from exc

        self._page.on("response", self._handle_response)
        logger.debug("Chromium launched (headless=%s)", self.headless)

    async def close(self) -> None:
        """Release the page, context, browser and Playwright, whichever were acquired."""
        for resource in (self._context, self._browser):
            if resource is None:
                continue
            try:
                await resource.close()
            except PlaywrightError as exc:
                logger.debug("Error while closing %s: %s", type(resource).__name__, exc)
        if self._playwright is not None:
            await self._playwright.stop()
        self._page = self._context = self._browser = self._playwright = None

    def _handle_response(self, response: Response) -> None:
        event = ResponseEvent(url=response.url, status=response.status)
        for observer in self._observers:
            observer(event)

    def _require_page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser not launched")
        return self._page

    async def navigate(self, url: str, timeout: float) -> PageVisit:
        page = self._require_page()
        try:
            response = await page.goto(url, wait_until="networkidle", timeout=timeout * 1000)
        except PlaywrightError as exc:
            raise NavigationError(url, _first_line(str(exc))) from exc

        try:
            title = await page.title()
        except PlaywrightError:
            title = ""
        return PageVisit(url=page.url, status=response.status if response else None, title=title)

    async def simulate_human(self) -> None:
        """Mouse wandering, scrolling down and back up with randomized pauses."""
        page = self._require_page()
        rng = self._rng
        try:
            for _ in range(5):
                x = rng.randint(100, 799)
                y = rng.randint(100, 599)
                await page.mouse.move(x, y, steps=rng.randint(5, 24))
                await page.wait_for_timeout(rng.uniform(200, 600))

            for _ in range(3):
                await page.evaluate("window.scrollBy(0, window.innerHeight * 0.8)")
                await page.wait_for_timeout(rng.uniform(500, 1200))

            await page.wait_for_timeout(rng.uniform(500, 1000))
            await page.evaluate("window.scrollBy(0, -window.innerHeight * 0.5)")
            await page.wait_for_timeout(rng.uniform(300, 800))
        except PlaywrightError as exc:
            logger.warning("Human-behaviour simulation interrupted: %s", _first_line(str(exc)))

    async def anchor_hrefs(self) -> List[str]:
        page = self._require_page()
        try:
            hrefs = await page.eval_on_selector_all("a[href]", ANCHORS_JS)
        except PlaywrightError as exc:
            logger.debug("Cannot read anchors from %s: %s", page.url, _first_line(str(exc)))
            return []
        return [href for href in hrefs if isinstance(href, str) and href]
