# site_probe/crawler/frontier.py
"""
Frontier: discovered vs. visited links and random selection of the next page.
"""
from __future__ import annotations

import random
from typing import Dict, Optional


class Frontier:
    """Множества найденных и посещённых ссылок.

    Оба множества хранятся в ``dict`` ради порядка вставки и только растут.
    Следующая страница выбирается равновероятно среди непосещённых,
    а не в порядке BFS/DFS.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._discovered: Dict[str, None] = {}
        self._visited: Dict[str, None] = {}
        self._rng = rng or random.Random()

    @property
    def discovered(self) -> Dict[str, None]:
        return self._discovered

    @property
    def visited(self) -> Dict[str, None]:
        return self._visited

    def record_discovery(self, link: str) -> None:
        self._discovered.setdefault(link, None)

    def mark_visited(self, link: str) -> None:
        self._visited.setdefault(link, None)

    def unvisited(self) -> list[str]:
        return [link for link in self._discovered if link not in self._visited]

    def next_unvisited(self) -> Optional[str]:
        """Случайная непосещённая ссылка или None, если фронтир исчерпан."""
        candidates = self.unvisited()
        if not candidates:
            return None
        return self._rng.choice(candidates)

    def __len__(self) -> int:
        return len(self._discovered)
