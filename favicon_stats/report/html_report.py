# File: favicon_stats/report/html_report.py
"""favicon_stats.report.html_report: Генерация HTML-отчёта со статистикой с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from favicon_stats.aggregator import StatsReport
from favicon_stats.models import STATUS_DOWNLOADED, STATUS_NOT_MODIFIED

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
TEMPLATE_NAME = "stats.html.j2"

#: число ошибок на графике и в таблице
TOP_ERRORS_CHART = 20
TOP_ERRORS_TABLE = 50


def build_context(report: StatsReport) -> dict[str, Any]:
    """Данные, которые шаблон получает для отрисовки."""
    http_statuses = report.sorted_http_statuses()
    return {
        "total": report.total,
        "downloaded": report.by_status.get(STATUS_DOWNLOADED, 0),
        "not_modified": report.by_status.get(STATUS_NOT_MODIFIED, 0),
        "failed": report.failed_count,
        "average_size": report.average_size,
        "downloaded_count": report.downloaded_count,
        "status_labels": list(report.by_status.keys()),
        "status_values": list(report.by_status.values()),
        "http_labels": [str(code) for code, _ in http_statuses],
        "http_values": [count for _, count in http_statuses],
        "size_labels": list(report.by_file_size.keys()),
        "size_values": list(report.by_file_size.values()),
        "chart_errors": [
            (msg[:80] + ("..." if len(msg) > 80 else ""), count)
            for msg, count in report.top_errors(TOP_ERRORS_CHART)
        ],
        "error_rows": [
            {
                "message": msg,
                "count": count,
                "default": report.by_error_default.get(msg, 0),
                "custom": report.by_error_custom.get(msg, 0),
            }
            for msg, count in report.top_errors(TOP_ERRORS_TABLE)
        ],
    }


def render_html(
    report: StatsReport,
    template_dir: Optional[Union[Path, str]],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        report: объект StatsReport.
        template_dir: директория с Jinja2-шаблонами; None — встроенные шаблоны.
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.

    Пример:
    ```python
    from favicon_stats.report.html_report import render_html
    html_path = render_html(report, template_dir=None, output_path='stats.html')
    ```
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    html_content = template.render(**build_context(report))
    output_path.write_text(html_content, encoding="utf-8")

    return output_path
