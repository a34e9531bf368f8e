# === FILE: site_probe/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import enum
import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional, Set

from site_probe.config import ProbeConfig
from site_probe.crawler.frontier import Frontier
from site_probe.crawler.ledger import RequestLedger
from site_probe.crawler.models import PageVisit, ResponseEvent
from site_probe.errors import InvalidUrl, LaunchError, NavigationError
from site_probe.scope import accept, normalize

if TYPE_CHECKING:
    from site_probe.driver.base import PageDriver

__all__ = ("CrawlState", "CrawlResult", "ProbeCrawler")


class CrawlState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    EXHAUSTED = "exhausted"
    PAGE_BUDGET_REACHED = "page_budget_reached"
    DONE = "done"


@dataclass(slots=True)
class CrawlResult:
    """Собранные за обход контейнеры; читаются один раз построителем отчёта."""
    target_url: str
    links: Dict[str, None]
    visits: Dict[str, None]
    requests: Dict[str, int]
    domains: Set[str]
    state: CrawlState


class ProbeCrawler:
    """Последовательный обход сайта через драйвер страниц со случайным выбором следующей страницы.

    Ответы сети приходят от драйвера через наблюдатель в очередь и
    записываются в журнал одной задачей-потребителем.
    """

    def __init__(
        self,
        config: ProbeConfig,
        driver: PageDriver,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.driver = driver
        self.scope = config.scope
        self.frontier = Frontier(rng)
        self.ledger = RequestLedger(self.scope)
        self.state = CrawlState.IDLE
        self.logger = logging.getLogger("SiteProbe")
        self._events: asyncio.Queue[ResponseEvent] = asyncio.Queue()
        self._consumer: Optional[asyncio.Task[None]] = None

    async def __aenter__(self) -> ProbeCrawler:
        self.driver.on_response(self._observe)
        try:
            await self.driver.launch()
        except LaunchError:
            await self.driver.close()
            raise
        except Exception as exc:
            await self.driver.close()
            raise LaunchError(f"Page driver failed to start: {exc}") from exc
        self._consumer = asyncio.create_task(self._consume_responses())
        self.state = CrawlState.RUNNING
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await self.driver.close()
        finally:
            await self._settle()
            if self._consumer is not None:
                self._consumer.cancel()
                await asyncio.gather(self._consumer, return_exceptions=True)
                self._consumer = None
            self.state = CrawlState.DONE

    def _observe(self, event: ResponseEvent) -> None:
        self._events.put_nowait(event)

    async def _consume_responses(self) -> None:
        while True:
            event = await self._events.get()
            try:
                self.ledger.record(event.url, event.status)
            except Exception as exc:
                self.logger.debug("Dropped response %r: %s", event.url, exc)
            finally:
                self._events.task_done()

    async def _settle(self) -> None:
        if self._consumer is not None and not self._consumer.done():
            await self._events.join()

    async def crawl(self) -> CrawlResult:
        if self.state is not CrawlState.RUNNING:
            raise RuntimeError("Crawler not started; use 'async with ProbeCrawler(...)'")

        target = self._seed()
        self.logger.info("Старт обхода: %s (scope: %s)", target, ", ".join(self.scope))
        for _ in range(self.config.max_pages):
            await self._visit(target)

            if self.config.delay:
                await asyncio.sleep(self.config.delay)

            next_target = self.frontier.next_unvisited()
            if next_target is None:
                self.state = CrawlState.EXHAUSTED
                self.logger.info("No unvisited pages remaining")
                break
            target = next_target
        else:
            self.state = CrawlState.PAGE_BUDGET_REACHED
            self.logger.info("Page budget of %d reached", self.config.max_pages)

        await self._settle()
        self.logger.info(
            "Завершено: %d посещено, %d ссылок, %d запросов, %d доменов",
            len(self.frontier.visited),
            len(self.frontier.discovered),
            len(self.ledger.requests),
            len(self.ledger.domains),
        )
        return CrawlResult(
            target_url=self.config.url,
            links=self.frontier.discovered,
            visits=self.frontier.visited,
            requests=self.ledger.requests,
            domains=self.ledger.domains,
            state=self.state,
        )

    def _seed(self) -> str:
        """Нормализованный seed: `https://example.com` посещается как `https://example.com/`.

        Именно эта форма попадает в `visits`; `CrawlResult.target_url` хранит URL как он задан.
        """
        try:
            return normalize(self.config.url, self.config.url)
        except InvalidUrl:
            return self.config.url

    async def _visit(self, target: str) -> None:
        self.frontier.mark_visited(target)
        self.logger.info("Visiting: %s", target)

        try:
            visit = await self.driver.navigate(target, self.config.network_timeout)
        except NavigationError as exc:
            self.logger.warning("Navigation failed for %s: %s", target, exc.reason)
            return
        self._log_visit(visit)

        if self.config.human:
            await self.driver.simulate_human()

        base_url = self.driver.current_url or target
        found = 0
        for href in await self.driver.anchor_hrefs():
            link = accept(href, base_url, self.scope)
            if link is None:
                self.logger.debug("Skipped anchor %r on %s", href, target)
                continue
            self.frontier.record_discovery(link)
            found += 1
        self.logger.debug("%d in-scope links on %s", found, target)

    def _log_visit(self, visit: PageVisit) -> None:
        status = visit.status if visit.status is not None else "no response"
        if visit.ok:
            self.logger.info("Title: %s [%s]", visit.title, status)
        else:
            self.logger.warning("Title: %s [%s]", visit.title, status)
