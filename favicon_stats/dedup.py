# File: favicon_stats/dedup.py
"""favicon_stats.dedup: удаление дубликатов записей по домену (первая запись побеждает)."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Set

from favicon_stats.logger import logger
from favicon_stats.utils import UrlError, extract_domain

__all__ = ["Deduplicator", "deduplicate"]


class Deduplicator:
    """Один проход дедупликации со своим множеством уже встреченных доменов."""

    def __init__(self) -> None:
        self.seen: Set[str] = set()
        self.removed: int = 0

    def accept(self, record: Mapping[str, Any]) -> bool:
        """Решает, оставить ли запись, и запоминает её домен."""
        url = record.get("url")
        if record.get("error") or not url:
            return True
        try:
            domain = extract_domain(url)
        except UrlError:
            # запись не проходила нормализацию; сравнивать не с чем
            return True
        if domain in self.seen:
            logger.debug("Duplicate domain dropped: %s (%s)", domain, url)
            self.removed += 1
            return False
        self.seen.add(domain)
        return True

    def run(self, records: Iterable[Mapping[str, Any]]) -> List[Any]:
        """Возвращает устойчивую подпоследовательность записей без повторов доменов."""
        unique = [record for record in records if self.accept(record)]
        logger.info("Deduplication complete. Removed %d duplicate domain entries.", self.removed)
        return unique


def deduplicate(records: Iterable[Mapping[str, Any]]) -> List[Any]:
    """Дедупликация с новым, пустым множеством доменов."""
    return Deduplicator().run(records)
