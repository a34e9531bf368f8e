# === FILE: site_probe/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска SiteProbe через командную строку.

Использование:
  site-probe URL [OPTIONS]

Опции обхода:
  --domain, -d DOMAIN        Домен или glob (повторяемая); по умолчанию хост URL и *.хост
  --show-browser, -S         Показать окно браузера (отключить headless)
  --human, -u                Имитировать поведение человека
  --max-pages, -m INT        Макс. число переходов (default: 25)
  --delay, -w SEC            Пауза между страницами (default: 0)
  --network-timeout, -t SEC  Таймаут перехода (default: 10)
  --output, -o PATH          Путь к HTML-отчёту (default: report.html)
  --driver [browser|http]    Драйвер страниц (default: browser)

Общие опции:
  --config, -c PATH   YAML/JSON файл со значениями по умолчанию
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --version, -v       Показать версию SiteProbe

Пример:
  site-probe https://example.com -d example.com -d "*.example.com" -m 50 -o reports/example.html
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict

import click
from click.core import ParameterSource

from site_probe import __version__
from site_probe.config import ProbeConfig, make_config, read_config_file
from site_probe.engine import run_probe
from site_probe.errors import ConfigurationError, LaunchError
from site_probe.logger import init_logging

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])

# CLI parameter name -> (config key, value converter)
_OPTION_KEYS = {
    "domains": ("domains", list),
    "show_browser": ("headless", lambda v: not v),
    "human": ("human", bool),
    "max_pages": ("max_pages", int),
    "delay": ("delay", float),
    "network_timeout": ("network_timeout", float),
    "output": ("output", Path),
    "driver": ("driver", str),
    "user_agent": ("user_agent", str),
}


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _merge_options(ctx: click.Context, file_values: Dict[str, Any], url: str) -> Dict[str, Any]:
    """Значения из файла конфигурации, перекрытые явно заданными опциями CLI."""
    values = dict(file_values)
    values["url"] = url
    for param, (key, convert) in _OPTION_KEYS.items():
        value = ctx.params[param]
        explicit = ctx.get_parameter_source(param) not in (ParameterSource.DEFAULT, None)
        if explicit or key not in values:
            if value is None:
                continue
            values[key] = convert(value)
    return values


def _print_banner(cfg: ProbeConfig) -> None:
    def line(label: str, value: str) -> None:
        click.echo(f"{click.style(label, bold=True)} {value}")

    line("URL:", click.style(cfg.url, fg='blue'))
    line("Domains:", click.style(", ".join(cfg.scope), fg='blue'))
    line("Headless:", click.style("true", fg='green') if cfg.headless else click.style("false", fg='yellow'))
    line("Human:", click.style("true", fg='green') if cfg.human else click.style("false", fg='bright_black'))
    line("Max Pages:", click.style(str(cfg.max_pages), fg='blue'))
    line("Delay:", f"{click.style(str(cfg.delay), fg='blue')} seconds")
    line("Network Timeout:", f"{click.style(str(cfg.network_timeout), fg='blue')} seconds")
    line("Output:", click.style(str(cfg.output), fg='blue'))
    line("Driver:", click.style(cfg.driver, fg='blue'))


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteProbe, version %(version)s')
@click.argument('url')
@click.option(
    '--domain', '-d', 'domains',
    multiple=True,
    help='Учитывать только страницы этого домена (по умолчанию хост URL и все его поддомены)'
)
@click.option(
    '--show-browser', '-S', 'show_browser',
    is_flag=True, default=False,
    help='Показать окно браузера (отключить headless)'
)
@click.option(
    '--human', '-u', 'human',
    is_flag=True, default=False,
    help='Имитировать поведение человека'
)
@click.option(
    '--max-pages', '-m', 'max_pages',
    type=int, default=25, show_default=True,
    help='Максимальное число проверяемых страниц'
)
@click.option(
    '--delay', '-w', 'delay',
    type=float, default=0.0, show_default=True,
    help='Пауза между страницами (секунд)'
)
@click.option(
    '--network-timeout', '-t', 'network_timeout',
    type=float, default=10.0, show_default=True,
    help='Сколько ждать завершения сетевых запросов страницы (секунд)'
)
@click.option(
    '--output', '-o', 'output',
    default='report.html', show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь для HTML-отчёта'
)
@click.option(
    '--driver', 'driver',
    default='browser', show_default=True,
    type=click.Choice(['browser', 'http']),
    help='Драйвер страниц: Playwright Chromium или простой HTTP без JavaScript'
)
@click.option(
    '--user-agent', 'user_agent',
    default=None,
    help='Заголовок User-Agent'
)
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML/JSON файл со значениями опций'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.pass_context
def cli(ctx, url, domains, show_browser, human, max_pages, delay, network_timeout,
        output, driver, user_agent, config_path, log_level, log_file):
    """Обойти сайт начиная с URL и сохранить HTML-отчёт."""
    init_logging(level=log_level, log_file=str(log_file) if log_file else None)

    try:
        file_values = read_config_file(config_path) if config_path else {}
        cfg = make_config(_merge_options(ctx, file_values, url))
    except ConfigurationError as e:
        print_error(str(e))
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    _print_banner(cfg)

    try:
        asyncio.run(run_probe(cfg))
    except LaunchError as e:
        print_error(f'Не удалось запустить драйвер страниц: {e}')


if __name__ == "__main__":
    cli()
