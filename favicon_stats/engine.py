# File: favicon_stats/engine.py
"""favicon_stats.engine: Orchestration layer: чтение записей, обработка, дедупликация и статистика."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from favicon_stats.aggregator import StatsReport, aggregate_stats
from favicon_stats.config import PipelineConfig
from favicon_stats.dedup import Deduplicator
from favicon_stats.icon_store import IconStore
from favicon_stats.logger import logger
from favicon_stats.models import RawRecord
from favicon_stats.normalizer import normalize_all

__all__ = ["Engine", "InputError", "ProcessResult", "load_records", "save_records"]


class InputError(RuntimeError):
    """Входной файл нельзя прочитать или разобрать; запуск прерывается целиком."""

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.hint = hint

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base}\nHint: {self.hint}" if self.hint else base


@dataclass(slots=True)
class ProcessResult:
    """Результат обработки: все нормализованные записи и записи после дедупликации."""

    normalized: List[Any] = field(default_factory=list)
    records: List[Any] = field(default_factory=list)
    removed: int = 0


def load_records(path: Union[str, Path]) -> List[RawRecord]:
    """Читает JSON-массив записей обхода."""
    p = Path(path)
    try:
        raw_data = p.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise InputError(
            f"Input file not found: {p}",
            hint=f"Make sure the input file exists at '{p}'; run the favicon crawler first.",
        ) from exc
    except OSError as exc:
        raise InputError(f"Cannot read {p}: {exc}") from exc

    try:
        data = json.loads(raw_data)
    except json.JSONDecodeError as exc:
        raise InputError(f"Invalid JSON in {p}: {exc}") from exc

    if not isinstance(data, list):
        raise InputError(f"Top level of {p} must be a JSON array, got {type(data).__name__}")
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise InputError(
                f"Entry #{index} in {p} must be a JSON object, got {type(entry).__name__}"
            )
    logger.info("Found %d entries in %s", len(data), p)
    return data


def save_records(records: Iterable[Mapping[str, Any]], path: Union[str, Path]) -> Path:
    """Сохраняет записи JSON-массивом с отступом 2."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        json.dump(list(records), f, ensure_ascii=False, indent=2)
    logger.info("Processed data saved to %s", output)
    return output


class Engine:
    """Фасад для CLI и тестов: нормализация, дедупликация и сбор статистики."""

    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        self.config = config or PipelineConfig()

    def process(self, raw_records: Iterable[Mapping[str, Any]]) -> ProcessResult:
        """Нормализует записи и оставляет по одной записи на домен."""
        normalized = normalize_all(raw_records)
        dedup = Deduplicator()
        unique = dedup.run(normalized)
        return ProcessResult(normalized=normalized, records=unique, removed=dedup.removed)

    def process_file(
        self,
        input_path: Union[str, Path, None] = None,
        output_path: Union[str, Path, None] = None,
    ) -> ProcessResult:
        """Читает сырой файл, обрабатывает его и сохраняет результат."""
        source = Path(input_path or self.config.input_file)
        target = Path(output_path or self.config.processed_file)
        logger.info("Reading and processing data from %s", source)
        result = self.process(load_records(source))
        save_records(result.records, target)
        return result

    def build_stats(
        self,
        records: Iterable[Mapping[str, Any]],
        icons_dir: Union[str, Path, None] = None,
        *,
        dedupe: bool = False,
        normalize: bool = False,
    ) -> StatsReport:
        """Строит статистику по записям как есть.

        С ``normalize=True`` сырые записи сначала нормализуются, но ошибка,
        уже записанная загрузчиком, сохраняется.
        """
        prepared: List[Any] = list(records)
        if normalize:
            prepared = normalize_all(prepared, keep_error=True)
        if dedupe:
            prepared = Deduplicator().run(prepared)
        store = IconStore(icons_dir or self.config.icons_dir)
        report = aggregate_stats(prepared, store, rules=self.config.error_rules())
        logger.info(
            "Statistics built: %d records, %d icons sized in %s",
            report.total,
            report.downloaded_count,
            store.root,
        )
        return report

    def stats_file(
        self,
        input_path: Union[str, Path, None] = None,
        icons_dir: Union[str, Path, None] = None,
        *,
        dedupe: bool = False,
        normalize: bool = False,
    ) -> StatsReport:
        """Читает файл записей и строит по нему статистику."""
        source = Path(input_path or self.config.stats_input_file)
        return self.build_stats(
            load_records(source), icons_dir, dedupe=dedupe, normalize=normalize
        )
