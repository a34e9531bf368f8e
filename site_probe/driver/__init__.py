"""site_probe.driver: драйверы страниц (Playwright и простой HTTP)."""

from __future__ import annotations

from site_probe.config import ProbeConfig
from site_probe.driver.base import PageDriver
from site_probe.driver.browser import BrowserDriver
from site_probe.driver.http import HttpDriver


def create_driver(config: ProbeConfig) -> PageDriver:
    """Создаёт драйвер, выбранный в конфигурации."""
    if config.driver == "http":
        return HttpDriver(user_agent=config.user_agent)
    return BrowserDriver(headless=config.headless, user_agent=config.user_agent)


__all__ = ["PageDriver", "BrowserDriver", "HttpDriver", "create_driver"]
