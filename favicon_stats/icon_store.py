# favicon_stats/icon_store.py
"""
Read-only view over the directory of downloaded icons.

Icons are stored as ``<domain>.png`` (see :func:`favicon_stats.utils.icon_filename`);
the store answers one question: how many bytes the icon for a page URL takes.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from favicon_stats.logger import logger
from favicon_stats.utils import UrlError, icon_filename


class IconStore:
    """Looks up stored icon sizes by page URL."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    def path_for(self, url: str) -> Path:
        """Path of the stored icon for *url*; raises UrlError for URLs without a host."""
        return self.root / icon_filename(url)

    def size_of(self, url: str) -> Optional[int]:
        """
        Size of the stored icon in bytes.

        Returns None when the URL has no domain or the icon was never
        materialised on disk.
        """
        try:
            path = self.path_for(url)
        except UrlError:
            return None
        try:
            return path.stat().st_size if path.is_file() else None
        except OSError as exc:
            logger.debug("Cannot stat icon %s: %s", path, exc)
            return None

    __call__ = size_of

    def __repr__(self) -> str:
        return f"IconStore({str(self.root)!r})"


__all__ = ["IconStore"]
