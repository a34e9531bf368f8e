# File: site_probe/engine.py
"""site_probe.engine: Orchestration layer: запуск драйвера, обход, построение и сохранение отчёта."""

from __future__ import annotations

import random
from pathlib import Path
from typing import Optional

from site_probe.config import ProbeConfig
from site_probe.crawler.crawler import CrawlResult, ProbeCrawler
from site_probe.driver import PageDriver, create_driver
from site_probe.logger import logger
from site_probe.report import build_report, save_html

__all__ = ["run_probe", "crawl_site"]


async def crawl_site(
    config: ProbeConfig,
    driver: Optional[PageDriver] = None,
    *,
    rng: Optional[random.Random] = None,
) -> CrawlResult:
    """Выполняет обход; драйвер освобождается всегда, даже при ошибках навигации."""
    driver = driver if driver is not None else create_driver(config)
    async with ProbeCrawler(config, driver, rng=rng) as crawler:
        return await crawler.crawl()


async def run_probe(
    config: ProbeConfig,
    driver: Optional[PageDriver] = None,
    *,
    rng: Optional[random.Random] = None,
) -> Path:
    """Обходит сайт и сохраняет HTML-отчёт; возвращает путь к отчёту."""
    result = await crawl_site(config, driver, rng=rng)
    report = build_report(
        result.target_url,
        result.links,
        result.visits,
        result.requests,
        result.domains,
    )
    path = save_html(report, config.output)
    logger.info("Report saved to: %s", path)
    return path
