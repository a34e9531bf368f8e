# File: site_probe/report/html_report.py
"""site_probe.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Union
from urllib.parse import unquote

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_probe.report.builder import ProbeReport

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def _environment(template_dir: Union[Path, str]) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
        keep_trailing_newline=True,
    )
    env.filters["unquote"] = unquote
    return env


def render_html(report: ProbeReport, template_dir: Union[Path, str] = TEMPLATE_DIR) -> str:
    """Рендерит HTML-отчёт из шаблона; результат зависит только от *report*."""
    template = _environment(template_dir).get_template(TEMPLATE_NAME)
    return template.render(report=report)


def save_html(
    report: ProbeReport,
    output_path: Union[Path, str],
    template_dir: Union[Path, str] = TEMPLATE_DIR,
) -> Path:
    """Рендерит отчёт и сохраняет его по указанному пути.

    Args:
        report: объект ProbeReport.
        output_path: путь к итоговому HTML-файлу.
        template_dir: директория с Jinja2-шаблонами.

    Returns:
        Path до сохранённого HTML-файла.

    Пример:
    ```python
    from site_probe.report import build_report, save_html
    html_path = save_html(build_report(url, links, visits, requests, domains), 'report.html')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_html(report, template_dir), encoding="utf-8")
    return output
