# File: site_probe/scope.py
"""site_probe.scope: Классификация ссылок: нормализация, проверка домена и фильтр расширений."""

from __future__ import annotations

import re
from fnmatch import fnmatchcase
from typing import Iterable, Optional, Sequence, Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit

from site_probe.errors import InvalidUrl

__all__: Sequence[str] = (
    "ScopeSpec",
    "SKIP_EXTENSIONS",
    "normalize",
    "hostname_of",
    "matches_scope",
    "is_in_scope",
    "should_skip",
    "accept",
    "default_scope",
    "is_valid_domain_pattern",
)

ScopeSpec = Tuple[str, ...]

SKIP_EXTENSIONS: Tuple[str, ...] = (
    # archives
    ".zip", ".tar", ".gz", ".tgz", ".rar", ".7z", ".bz2",
    # documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".odt",
    # images
    ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".svg", ".webp", ".ico", ".tiff",
    # audio
    ".mp3", ".wav", ".ogg", ".flac", ".aac", ".m4a",
    # video
    ".mp4", ".avi", ".mkv", ".mov", ".wmv", ".webm", ".flv",
    # fonts
    ".woff", ".woff2", ".ttf", ".otf", ".eot",
    # data
    ".json", ".xml", ".csv", ".rss", ".atom",
    # executables and packages
    ".exe", ".dmg", ".apk", ".deb", ".rpm", ".msi", ".bin", ".iso",
    # source maps & misc
    ".map", ".wasm",
)

_GLOB_CHARS = ("*", "?", "[")
_LABEL_RE = re.compile(r"^[a-z0-9*?](?:[a-z0-9*?-]{0,61}[a-z0-9*?])?$", re.IGNORECASE)


def normalize(href: str, base_url: str) -> str:
    """Разрешает *href* относительно *base_url* и убирает фрагмент.

    Хост приводится к нижнему регистру, пустой путь становится ``/``.
    Бросает :class:`InvalidUrl`, если ссылку нельзя разобрать.
    """
    try:
        parts = urlsplit(urljoin(base_url, href.strip()))
        _ = parts.port  # ValueError for a malformed port
    except ValueError as exc:
        raise InvalidUrl(f"Cannot resolve {href!r} against {base_url!r}: {exc}") from exc
    if not parts.scheme:
        raise InvalidUrl(f"Cannot resolve {href!r} against {base_url!r}: no scheme")

    netloc = parts.netloc
    if netloc:
        userinfo, at, hostinfo = netloc.rpartition("@")
        netloc = f"{userinfo}{at}{hostinfo.lower()}"
    path = parts.path or ("/" if netloc else "")
    return urlunsplit((parts.scheme.lower(), netloc, path, parts.query, ""))


def hostname_of(url: str) -> str:
    """Returns the lowercased hostname of *url* or ``""``. Raises ValueError on malformed URLs."""
    return urlsplit(url).hostname or ""


def matches_scope(hostname: str, scope: Iterable[str]) -> bool:
    """Точное совпадение для обычных шаблонов, shell-glob для шаблонов со звёздочкой."""
    if not hostname:
        return False
    for pattern in scope:
        if any(ch in pattern for ch in _GLOB_CHARS):
            if fnmatchcase(hostname, pattern):
                return True
        elif hostname == pattern:
            return True
    return False


def is_in_scope(link: str, scope: Iterable[str]) -> bool:
    try:
        hostname = hostname_of(link)
    except ValueError:
        return False
    return matches_scope(hostname, scope)


def should_skip(link: str) -> bool:
    """True для ссылок на не-HTML ресурсы (по расширению пути, без query и fragment)."""
    try:
        path = urlsplit(link).path.lower()
    except ValueError:
        return False
    return path.endswith(SKIP_EXTENSIONS)


def accept(href: str, base_url: str, scope: Iterable[str]) -> Optional[str]:
    """Возвращает нормализованную ссылку или None, если она вне области обхода."""
    try:
        link = normalize(href, base_url)
    except InvalidUrl:
        return None
    if not is_in_scope(link, scope) or should_skip(link):
        return None
    return link


def default_scope(url: str) -> ScopeSpec:
    """Seed hostname plus its wildcard-subdomain form."""
    hostname = hostname_of(url)
    return (hostname, f"*.{hostname}")


def is_valid_domain_pattern(pattern: str) -> bool:
    """Проверяет синтаксис имени хоста или glob-шаблона вида ``*.example.com``."""
    if not pattern or len(pattern) > 253 or pattern.endswith("."):
        return False
    return all(_LABEL_RE.match(label) for label in pattern.split("."))
