# File: favicon_stats/aggregator.py
"""favicon_stats.aggregator: сбор статистики по нормализованным записям обхода."""

from __future__ import annotations

import json
import math
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from favicon_stats.models import SIZED_STATUSES, STATUS_ERROR, STATUS_FAILED, STATUS_UNKNOWN
from favicon_stats.utils import FaviconPathKind, favicon_path_kind

SizeLookup = Callable[[str], Optional[int]]
HttpStatusKey = Union[int, str]


@dataclass(frozen=True, slots=True)
class ErrorGroupingRule:
    """Сообщения, начинающиеся с ``prefix``, считаются одним ключом ``label``."""

    prefix: str
    label: str

    def matches(self, message: str) -> bool:
        return message.startswith(self.prefix)


XML_HEADER_ERROR_PREFIX = "Input buffer has corrupt header: glib: XML parse error"

DEFAULT_ERROR_RULES: Tuple[ErrorGroupingRule, ...] = (
    ErrorGroupingRule(XML_HEADER_ERROR_PREFIX, f"{XML_HEADER_ERROR_PREFIX} (grouped)"),
)

#: (label, lower bound inclusive, upper bound exclusive), in bytes
FILE_SIZE_BUCKETS: Tuple[Tuple[str, float, float], ...] = (
    ("<1KB", 0, 1024),
    ("1KB - 5KB", 1024, 5 * 1024),
    ("5KB - 10KB", 5 * 1024, 10 * 1024),
    ("10KB - 50KB", 10 * 1024, 50 * 1024),
    (">50KB", 50 * 1024, math.inf),
)


def group_error_message(
    message: str, rules: Sequence[ErrorGroupingRule] = DEFAULT_ERROR_RULES
) -> str:
    """Применяет первое подходящее правило группировки к сообщению об ошибке."""
    for rule in rules:
        if rule.matches(message):
            return rule.label
    return message


def size_bucket(size: int) -> str:
    """Возвращает метку интервала размера файла."""
    for label, lower, upper in FILE_SIZE_BUCKETS:
        if lower <= size < upper:
            return label
    raise ValueError(f"Negative file size: {size}")


def _empty_size_buckets() -> Dict[str, int]:
    return {label: 0 for label, _, _ in FILE_SIZE_BUCKETS}


_COUNTER_FIELDS = (
    "by_status",
    "by_http_status",
    "by_error",
    "by_error_default",
    "by_error_custom",
    "by_file_size",
)


def _http_status_key(value: Any) -> HttpStatusKey:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    text = str(value).strip()
    return int(text) if text.isdecimal() and text.isascii() else text


@dataclass(frozen=True, slots=True)
class StatsReport:
    """Итоговая статистика по набору записей. Не изменяется после сборки."""

    total: int = 0
    by_status: Mapping[str, int] = field(default_factory=dict)
    by_http_status: Mapping[HttpStatusKey, int] = field(default_factory=dict)
    by_error: Mapping[str, int] = field(default_factory=dict)
    by_error_default: Mapping[str, int] = field(default_factory=dict)
    by_error_custom: Mapping[str, int] = field(default_factory=dict)
    by_file_size: Mapping[str, int] = field(default_factory=_empty_size_buckets)
    total_size: int = 0
    downloaded_count: int = 0

    def __post_init__(self) -> None:
        # счётчики копируются и закрываются только на чтение
        for name in _COUNTER_FIELDS:
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def average_size(self) -> float:
        """Средний размер иконки в байтах; 0.0, если ни одна не найдена."""
        if self.downloaded_count <= 0:
            return 0.0
        return self.total_size / self.downloaded_count

    @property
    def failed_count(self) -> int:
        return self.by_status.get(STATUS_FAILED, 0) + self.by_status.get(STATUS_ERROR, 0)

    def top_errors(self, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        """Ошибки по убыванию частоты."""
        ranked = sorted(self.by_error.items(), key=lambda item: item[1], reverse=True)
        return ranked if limit is None else ranked[:limit]

    def sorted_http_statuses(self) -> List[Tuple[HttpStatusKey, int]]:
        """HTTP-коды по возрастанию; нечисловые ключи в конце."""
        return sorted(
            self.by_http_status.items(),
            key=lambda item: (not isinstance(item[0], int), str(item[0]).zfill(8)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Словарь с ключами в формате исходных отчётов (camelCase)."""
        return {
            "total": self.total,
            "byStatus": dict(self.by_status),
            "byHttpStatus": {str(k): v for k, v in self.by_http_status.items()},
            "byError": dict(self.by_error),
            "byErrorDefault": dict(self.by_error_default),
            "byErrorCustom": dict(self.by_error_custom),
            "byFileSize": dict(self.by_file_size),
            "totalSize": self.total_size,
            "downloadedCount": self.downloaded_count,
        }

    def json(self, *, pretty: bool = False) -> str:
        """JSON-представление отчёта вместе со средним размером."""
        output = self.to_dict()
        output["averageSize"] = self.average_size
        return json.dumps(output, ensure_ascii=False, indent=2 if pretty else None)


def aggregate_stats(
    records: Iterable[Mapping[str, Any]],
    size_lookup: SizeLookup,
    rules: Sequence[ErrorGroupingRule] = DEFAULT_ERROR_RULES,
) -> StatsReport:
    """Собирает StatsReport за один проход по записям.

    Каждая запись попадает ровно в один счётчик статуса, не более чем в один
    счётчик HTTP-кода и, если есть ``error``, в ``by_error`` и ровно в одну из
    подгрупп default/custom. Размер файла учитывается только для статусов
    из ``SIZED_STATUSES`` и только если ``size_lookup`` вернул значение.
    """
    total = 0
    by_status: Counter[str] = Counter()
    by_http_status: Counter[HttpStatusKey] = Counter()
    by_error: Counter[str] = Counter()
    by_error_default: Counter[str] = Counter()
    by_error_custom: Counter[str] = Counter()
    by_file_size = _empty_size_buckets()
    total_size = 0
    downloaded_count = 0

    for record in records:
        total += 1

        status = str(record.get("status") or STATUS_UNKNOWN)
        by_status[status] += 1

        http_status = record.get("httpStatus")
        if http_status is not None and http_status != "":
            by_http_status[_http_status_key(http_status)] += 1

        error = record.get("error")
        if error:
            message = group_error_message(str(error), rules)
            by_error[message] += 1
            if favicon_path_kind(record.get("favicon")) is FaviconPathKind.DEFAULT:
                by_error_default[message] += 1
            else:
                by_error_custom[message] += 1

        url = record.get("url")
        if status in SIZED_STATUSES and url:
            size = size_lookup(url)
            if size is not None and size >= 0:
                total_size += size
                downloaded_count += 1
                by_file_size[size_bucket(size)] += 1

    return StatsReport(
        total=total,
        by_status=dict(by_status),
        by_http_status=dict(by_http_status),
        by_error=dict(by_error),
        by_error_default=dict(by_error_default),
        by_error_custom=dict(by_error_custom),
        by_file_size=by_file_size,
        total_size=total_size,
        downloaded_count=downloaded_count,
    )


__all__ = [
    "ErrorGroupingRule",
    "DEFAULT_ERROR_RULES",
    "FILE_SIZE_BUCKETS",
    "XML_HEADER_ERROR_PREFIX",
    "SizeLookup",
    "StatsReport",
    "aggregate_stats",
    "group_error_message",
    "size_bucket",
]
