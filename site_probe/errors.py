"""site_probe.errors: Исключения, которыми обмениваются слои SiteProbe."""

from __future__ import annotations

__all__ = [
    "ProbeError",
    "ConfigurationError",
    "InvalidUrl",
    "LaunchError",
    "NavigationError",
]


class ProbeError(Exception):
    """Базовое исключение SiteProbe."""


class ConfigurationError(ProbeError, ValueError):
    """Неверный стартовый URL или шаблон домена. Фатально, до запуска драйвера."""


class InvalidUrl(ProbeError, ValueError):
    """href не удалось разрешить в абсолютный URL."""


class LaunchError(ProbeError):
    """Драйвер страниц не запустился. Фатально для всего прогона."""


class NavigationError(ProbeError):
    """Таймаут или транспортная ошибка при переходе на одну страницу."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
