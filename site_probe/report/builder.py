# File: site_probe/report/builder.py
"""site_probe.report.builder: Построение данных отчёта из собранных за обход контейнеров."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Tuple


@dataclass(slots=True, frozen=True)
class RequestRow:
    url: str
    status: int

    @property
    def ok(self) -> bool:
        return self.status < 400


@dataclass(slots=True, frozen=True)
class ProbeReport:
    """Отсортированные списки и агрегаты для HTML-отчёта."""

    target_url: str
    generated_at: str
    requests: Tuple[RequestRow, ...] = ()
    visits: Tuple[str, ...] = ()
    links: Tuple[str, ...] = ()
    domains: Tuple[str, ...] = ()
    ok_count: int = 0
    error_count: int = 0


def utc_now_iso() -> str:
    """Return current UTC time in ISO format."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_report(
    target_url: str,
    links: Iterable[str],
    visits: Iterable[str],
    requests: Mapping[str, int],
    domains: Iterable[str],
    *,
    generated_at: Optional[str] = None,
) -> ProbeReport:
    """Собирает ProbeReport; входные контейнеры не изменяются.

    Запросы сортируются по статусу по убыванию, затем по URL; остальные
    списки лексикографически по возрастанию.
    """
    rows: List[RequestRow] = sorted(
        (RequestRow(url, status) for url, status in requests.items()),
        key=lambda row: (-row.status, row.url),
    )
    return ProbeReport(
        target_url=target_url,
        generated_at=generated_at or utc_now_iso(),
        requests=tuple(rows),
        visits=tuple(sorted(visits)),
        links=tuple(sorted(links)),
        domains=tuple(sorted(domains)),
        ok_count=sum(1 for row in rows if row.ok),
        error_count=sum(1 for row in rows if not row.ok),
    )
