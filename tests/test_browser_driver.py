"""Tests for the Playwright page driver (no real browser is started)."""

from __future__ import annotations

import random
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

import site_probe.driver.browser as browser_module
from site_probe.config import ProbeConfig
from site_probe.crawler.models import ResponseEvent
from site_probe.driver import BrowserDriver, HttpDriver, create_driver
from site_probe.errors import LaunchError, NavigationError


def _driver_with_page(url: str = "https://example.com/") -> tuple[BrowserDriver, MagicMock]:
    driver = BrowserDriver(rng=random.Random(0))
    page = MagicMock()
    page.url = url
    driver._page = page
    return driver, page


class TestResponses:
    """Response events forwarded to observers."""

    def test_forwards_url_and_status(self) -> None:
        driver = BrowserDriver()
        events: list[ResponseEvent] = []
        driver.on_response(events.append)
        driver._handle_response(MagicMock(url="https://example.com/app.js", status=404))
        assert events == [ResponseEvent("https://example.com/app.js", 404)]


class TestNavigate:
    """Navigation outcome and error mapping."""

    @pytest.mark.asyncio()
    async def test_success(self) -> None:
        driver, page = _driver_with_page()
        page.goto = AsyncMock(return_value=MagicMock(status=200))
        page.title = AsyncMock(return_value="Home")

        visit = await driver.navigate("https://example.com/", timeout=1.5)

        assert visit.status == 200
        assert visit.title == "Home"
        assert visit.url == "https://example.com/"
        page.goto.assert_awaited_once_with(
            "https://example.com/", wait_until="networkidle", timeout=1500
        )

    @pytest.mark.asyncio()
    async def test_no_response(self) -> None:
        driver, page = _driver_with_page()
        page.goto = AsyncMock(return_value=None)
        page.title = AsyncMock(side_effect=PlaywrightError("Target closed"))

        visit = await driver.navigate("https://example.com/", timeout=1)

        assert visit.status is None
        assert visit.title == ""
        assert not visit.ok

    @pytest.mark.asyncio()
    async def test_timeout_becomes_navigation_error(self) -> None:
        driver, page = _driver_with_page()
        page.goto = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 1000ms exceeded.\nCall log: ..."))

        with pytest.raises(NavigationError) as exc_info:
            await driver.navigate("https://example.com/slow", timeout=1)

        assert exc_info.value.url == "https://example.com/slow"
        assert exc_info.value.reason == "Timeout 1000ms exceeded."

    @pytest.mark.asyncio()
    async def test_requires_launch(self) -> None:
        with pytest.raises(RuntimeError):
            await BrowserDriver().navigate("https://example.com/", timeout=1)


class TestAnchors:
    """Anchor extraction."""

    @pytest.mark.asyncio()
    async def test_drops_empty_hrefs(self) -> None:
        driver, page = _driver_with_page()
        page.eval_on_selector_all = AsyncMock(return_value=["/a", None, "", "/b"])
        assert await driver.anchor_hrefs() == ["/a", "/b"]

    @pytest.mark.asyncio()
    async def test_evaluation_error_yields_nothing(self) -> None:
        driver, page = _driver_with_page()
        page.eval_on_selector_all = AsyncMock(side_effect=PlaywrightError("Execution context was destroyed"))
        assert await driver.anchor_hrefs() == []


class TestHumanBehaviour:
    """Mouse and scroll imitation."""

    @pytest.mark.asyncio()
    async def test_moves_and_scrolls(self) -> None:
        driver, page = _driver_with_page()
        page.mouse.move = AsyncMock()
        page.wait_for_timeout = AsyncMock()
        page.evaluate = AsyncMock()

        await driver.simulate_human()

        assert page.mouse.move.await_count == 5
        for call in page.mouse.move.await_args_list:
            x, y = call.args
            assert 100 <= x < 800
            assert 100 <= y < 600
            assert 5 <= call.kwargs["steps"] < 25
        scrolls = [call.args[0] for call in page.evaluate.await_args_list]
        assert scrolls == ["window.scrollBy(0, window.innerHeight * 0.8)"] * 3 + [
            "window.scrollBy(0, -window.innerHeight * 0.5)"
        ]
        assert page.wait_for_timeout.await_count == 10

    @pytest.mark.asyncio()
    async def test_interrupted_simulation_is_not_fatal(self) -> None:
        driver, page = _driver_with_page()
        page.mouse.move = AsyncMock(side_effect=PlaywrightError("Target closed"))
        await driver.simulate_human()


class TestLifecycle:
    """Launch and close."""

    @pytest.mark.asyncio()
    async def test_launch_failure(self, monkeypatch) -> None:
        fake = MagicMock()
        fake.return_value.start = AsyncMock(side_effect=PlaywrightError("Executable doesn't exist at /ms-playwright"))
        monkeypatch.setattr(browser_module, "async_playwright", fake)

        driver = BrowserDriver()
        with pytest.raises(LaunchError, match="Executable doesn't exist"):
            await driver.launch()
        await driver.close()

    @pytest.mark.asyncio()
    async def test_launch_registers_response_handler(self, monkeypatch) -> None:
        page = MagicMock()
        context = MagicMock()
        context.add_init_script = AsyncMock()
        context.new_page = AsyncMock(return_value=page)
        browser = MagicMock()
        browser.new_context = AsyncMock(return_value=context)
        playwright = MagicMock()
        playwright.chromium.launch = AsyncMock(return_value=browser)
        fake = MagicMock()
        fake.return_value.start = AsyncMock(return_value=playwright)
        monkeypatch.setattr(browser_module, "async_playwright", fake)

        driver = BrowserDriver(headless=False, user_agent="TestAgent/1.0")
        await driver.launch()

        playwright.chromium.launch.assert_awaited_once_with(
            headless=False, args=browser_module.LAUNCH_ARGS
        )
        browser.new_context.assert_awaited_once_with(
            viewport=browser_module.DEFAULT_VIEWPORT, user_agent="TestAgent/1.0"
        )
        context.add_init_script.assert_awaited_once_with(browser_module.STEALTH_JS)
        page.on.assert_called_once_with("response", driver._handle_response)

    @pytest.mark.asyncio()
    async def test_close_releases_everything(self) -> None:
        driver = BrowserDriver()
        context, browser, playwright = MagicMock(), MagicMock(), MagicMock()
        context.close = AsyncMock(side_effect=PlaywrightError("already closed"))
        browser.close = AsyncMock()
        playwright.stop = AsyncMock()
        driver._context, driver._browser, driver._playwright = context, browser, playwright

        await driver.close()

        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()
        assert driver.current_url is None


class TestCreateDriver:
    """Driver selection from configuration."""

    def test_browser_is_default(self) -> None:
        driver = create_driver(ProbeConfig(url="https://example.com", headless=False))
        assert isinstance(driver, BrowserDriver)
        assert driver.headless is False

    def test_http(self) -> None:
        driver = create_driver(ProbeConfig(url="https://example.com", driver="http", user_agent="UA/1"))
        assert isinstance(driver, HttpDriver)
        assert driver.user_agent == "UA/1"
