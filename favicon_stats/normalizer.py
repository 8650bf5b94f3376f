# File: favicon_stats/normalizer.py
"""favicon_stats.normalizer: приведение сырых записей обхода к нормализованному виду."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping

from favicon_stats.logger import logger
from favicon_stats.models import INVALID_URL_PREFIX, MISSING_FIELDS_ERROR, NormalizedRecord
from favicon_stats.utils import UrlError, resolve_favicon

__all__ = ["flatten_date", "normalize", "normalize_all"]


def flatten_date(value: Any) -> Any:
    """Дата может прийти как есть или обёрткой ``{"value": ...}``."""
    if isinstance(value, Mapping):
        return value.get("value")
    return value


def normalize(raw: Mapping[str, Any], *, keep_error: bool = False) -> NormalizedRecord:
    """Нормализует одну запись; никогда не бросает исключений по данным.

    Возвращает новую запись: ``favicon`` заменён абсолютным URL, ``date``
    развёрнута. При ошибке выставляется поле ``error``, а ``favicon``
    остаётся исходным. С ``keep_error=True`` уже заданная ошибка
    (например, от загрузчика) не перезаписывается.
    """
    record: dict[str, Any] = dict(raw)
    record["date"] = flatten_date(raw.get("date"))

    def classify(message: str) -> None:
        if not (keep_error and raw.get("error")):
            record["error"] = message

    url = raw.get("url")
    favicon = raw.get("favicon")
    if not url or not favicon:
        classify(MISSING_FIELDS_ERROR)
        return record  # type: ignore[return-value]

    try:
        record["favicon"] = resolve_favicon(url, favicon)
    except UrlError as exc:
        logger.warning("Could not parse URL for entry: %s. Error: %s", url, exc)
        classify(f"{INVALID_URL_PREFIX}{exc}")
    return record  # type: ignore[return-value]


def normalize_all(
    records: Iterable[Mapping[str, Any]], *, keep_error: bool = False
) -> List[NormalizedRecord]:
    """Нормализует пачку записей: ровно одна запись на выходе на каждую входную."""
    normalized = [normalize(raw, keep_error=keep_error) for raw in records]
    failed = sum(1 for rec in normalized if rec.get("error"))
    logger.info("Normalized %d records (%d with errors)", len(normalized), failed)
    return normalized
