# favicon_stats/report/json_report.py

"""
Генерация JSON-отчёта со статистикой favicon.

Сериализация объекта StatsReport в файл.
"""
import json
from pathlib import Path

from favicon_stats.aggregator import StatsReport


def render_json(report: StatsReport, output_path: Path | str) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект StatsReport
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = report.to_dict()
    data['averageSize'] = report.average_size

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
