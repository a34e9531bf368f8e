# === FILE: site_probe/config.py ===
"""
Модуль для загрузки и валидации конфигурации SiteProbe.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union
from urllib.parse import urlsplit

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from site_probe.errors import ConfigurationError
from site_probe.scope import ScopeSpec, default_scope, is_valid_domain_pattern


class ProbeConfig(BaseModel):
    """Конфигурация одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    url: str = Field(..., description="Стартовый URL.")
    domains: List[str] = Field(
        default_factory=list,
        description="Шаблоны доменов (хост или glob). Пусто: хост URL и его поддомены.",
    )
    headless: bool = Field(True, description="Запускать браузер без окна.")
    human: bool = Field(False, description="Имитировать поведение человека.")
    max_pages: int = Field(25, ge=1, description="Жесткий лимит по числу переходов.")
    delay: float = Field(0.0, ge=0, description="Пауза между страницами (секунд).")
    network_timeout: float = Field(10.0, gt=0, description="Таймаут на один переход (секунд).")
    output: Path = Field(Path("report.html"), description="Путь к HTML-отчёту.")
    driver: Literal["browser", "http"] = Field("browser", description="Драйвер страниц.")
    user_agent: Optional[str] = Field(None, min_length=1, description="Заголовок User-Agent.")

    @field_validator("url")
    @classmethod
    def _check_url(cls, v: str) -> str:
        try:
            parts = urlsplit(v.strip())
            _ = parts.port
        except ValueError as exc:
            raise ValueError(f"Invalid URL: {v}") from exc
        if not parts.scheme or not parts.hostname:
            raise ValueError(f"Invalid URL: {v}")
        return v.strip()

    @field_validator("domains")
    @classmethod
    def _check_domains(cls, v: List[str]) -> List[str]:
        for domain in v:
            if not is_valid_domain_pattern(domain):
                raise ValueError(f"Invalid domain: {domain}")
        return v

    @property
    def scope(self) -> ScopeSpec:
        """Шаблоны доменов, действующие на время обхода."""
        if self.domains:
            return tuple(self.domains)
        return default_scope(self.url)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Читает YAML или JSON и возвращает сырые значения без проверки схемы."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def _describe(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        msg = str(err.get("msg", ""))
        msg = msg.removeprefix("Value error, ")
        loc = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(msg if msg.startswith("Invalid ") else f"{loc}: {msg}")
    return "; ".join(messages)


def make_config(values: Dict[str, Any]) -> ProbeConfig:
    """Проверяет значения и возвращает ProbeConfig; ошибки схемы → ConfigurationError."""
    try:
        return ProbeConfig(**values)
    except ValidationError as exc:
        raise ConfigurationError(_describe(exc)) from exc


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> ProbeConfig:
    """
    Собирает ProbeConfig из файла (если указан) и явных переопределений.
    Переопределения со значением None игнорируются.
    """
    values: Dict[str, Any] = read_config_file(path) if path is not None else {}
    values.update({k: v for k, v in overrides.items() if v is not None})
    return make_config(values)
