# site_probe/driver/base.py
"""
Page driver contract used by the crawl controller.
"""
from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from site_probe.crawler.models import PageVisit, ResponseObserver


@runtime_checkable
class PageDriver(Protocol):
    """Браузерный (или HTTP) исполнитель переходов.

    ``navigate`` бросает :class:`~site_probe.errors.NavigationError` при таймауте
    или транспортной ошибке; ``launch`` бросает
    :class:`~site_probe.errors.LaunchError`. Наблюдатель ответов вызывается
    для каждого сетевого ответа, в том числе для подзапросов страницы.
    """

    @property
    def current_url(self) -> Optional[str]: ...

    def on_response(self, observer: ResponseObserver) -> None: ...

    async def launch(self) -> None: ...

    async def close(self) -> None: ...

    async def navigate(self, url: str, timeout: float) -> PageVisit: ...

    async def simulate_human(self) -> None: ...

    async def anchor_hrefs(self) -> List[str]: ...
