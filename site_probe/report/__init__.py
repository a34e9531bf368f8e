# File: site_probe/report/__init__.py
"""site_probe.report: Построение и рендеринг HTML-отчёта, используемые движком и тестами."""

from __future__ import annotations

from site_probe.report.builder import ProbeReport, RequestRow, build_report
from site_probe.report.html_report import render_html, save_html

__all__ = ["ProbeReport", "RequestRow", "build_report", "render_html", "save_html"]
