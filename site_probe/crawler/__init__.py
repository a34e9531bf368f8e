"""site_probe.crawler: контроллер обхода, фронтир и журнал запросов."""

from site_probe.crawler.crawler import CrawlResult, CrawlState, ProbeCrawler
from site_probe.crawler.frontier import Frontier
from site_probe.crawler.ledger import RequestLedger
from site_probe.crawler.models import PageVisit, ResponseEvent

__all__ = [
    "CrawlResult",
    "CrawlState",
    "Frontier",
    "PageVisit",
    "ProbeCrawler",
    "RequestLedger",
    "ResponseEvent",
]
