# File: favicon_stats/report/__init__.py
"""favicon_stats.report: генерация отчётов со статистикой (JSON и HTML), используемая CLI и тестами."""

from __future__ import annotations

from favicon_stats.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from favicon_stats.report.json_report import render_json

__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
