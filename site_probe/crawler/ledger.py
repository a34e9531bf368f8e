# site_probe/crawler/ledger.py
"""
Request ledger: last observed status per URL of a listed domain and every contacted host.
"""
from __future__ import annotations

import logging
from typing import Dict, Set

from site_probe.scope import ScopeSpec, hostname_of


class RequestLedger:
    """Журнал сетевых ответов.

    ``domains`` собирает хосты всех ответов без фильтрации. ``requests``
    хранит только ответы хостов, буквально перечисленных в списке доменов
    (шаблоны вида ``*.example.com`` здесь не раскрываются), последняя запись побеждает.
    """

    def __init__(self, scope: ScopeSpec) -> None:
        self.scope = scope
        self.requests: Dict[str, int] = {}
        self.domains: Set[str] = set()
        self.logger = logging.getLogger("SiteProbe")

    def record(self, url: str, status: int) -> None:
        """Raises ValueError when *url* cannot be parsed; nothing is recorded then."""
        hostname = hostname_of(url)
        if hostname:
            self.domains.add(hostname)
        self.logger.info("Request: %s %s", url, status)
        if hostname in self.scope:
            self.requests[url] = status
