# File: favicon_stats/utils.py
"""favicon_stats.utils: разрешение ссылок на favicon и извлечение домена из URL."""

from __future__ import annotations

import enum
import re
from typing import Any, Sequence
from urllib.parse import quote, urljoin, urlsplit, urlunsplit

__all__: Sequence[str] = (
    "UrlError",
    "FaviconPathKind",
    "DEFAULT_FAVICON_PATH",
    "resolve_favicon",
    "normalize_url",
    "extract_domain",
    "favicon_path_kind",
    "is_default_favicon_path",
    "icon_filename",
)

DEFAULT_FAVICON_PATH = "/favicon.ico"

# схемы, для которых обязателен хост
SPECIAL_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})
_DEFAULT_PORTS = {"http": 80, "https": 443, "ftp": 21, "ws": 80, "wss": 443}

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")
_FORBIDDEN_HOST_RE = re.compile(r"[\x00-\x20#%/:<>?@\[\\\]^|\x7f]")
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?"
_SCHEME_PREFIX_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")
_DOT_SEGMENTS = frozenset({".", "%2e"})
_DOUBLE_DOT_SEGMENTS = frozenset({"..", ".%2e", "%2e.", "%2e%2e"})


class UrlError(ValueError):
    """URL не разбирается или не может быть разрешён относительно базы."""


class FaviconPathKind(enum.Enum):
    """Результат проверки пути favicon: стандартный, собственный или нераспознанный."""

    DEFAULT = "default"
    CUSTOM = "custom"
    UNPARSEABLE = "unparseable"


def _require_str(value: Any, what: str) -> str:
    if not isinstance(value, str):
        raise UrlError(f"{what} must be a string, got {type(value).__name__}")
    stripped = value.strip()
    if not stripped:
        raise UrlError(f"{what} is empty")
    return stripped


def _normalize_host(host: str, url: str) -> str:
    if _FORBIDDEN_HOST_RE.search(host):
        raise UrlError(f"Invalid host in {url!r}")
    try:
        return host.encode("idna").decode("ascii").lower()
    except UnicodeError as exc:
        raise UrlError(f"Invalid host in {url!r}: {exc}") from exc


def _scheme_of(url: str) -> str:
    match = _SCHEME_PREFIX_RE.match(url)
    return match.group(1).lower() if match else ""


def _backslashes_to_slashes(url: str) -> str:
    """В специальных схемах ``\\`` до запроса и фрагмента означает ``/``."""
    cut = len(url)
    for marker in ("?", "#"):
        index = url.find(marker)
        if index != -1:
            cut = min(cut, index)
    return url[:cut].replace("\\", "/") + url[cut:]


def _remove_dot_segments(path: str) -> str:
    """Убирает из абсолютного пути сегменты ``.`` и ``..`` (включая ``%2e``)."""
    segments = path.split("/")[1:]
    output: list[str] = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        lowered = segment.lower()
        if lowered in _DOT_SEGMENTS:
            if last:
                output.append("")
        elif lowered in _DOUBLE_DOT_SEGMENTS:
            if output:
                output.pop()
            if last:
                output.append("")
        else:
            output.append(segment)
    return "/" + "/".join(output)


def _split(url: str):
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as exc:
        raise UrlError(f"Cannot parse {url!r}: {exc}") from exc
    return parts, port


def normalize_url(url: str) -> str:
    """Проверяет абсолютный URL и приводит его к канонической форме.

    Схема и хост в нижнем регистре, порт по умолчанию отбрасывается,
    пустой путь становится ``/``, небезопасные символы пути и запроса
    кодируются, сегменты ``.`` и ``..`` убираются из пути, а ``\\`` в
    специальных схемах читается как ``/``. Повторный вызов на результате
    ничего не меняет.
    """
    url = _require_str(url, "URL")
    if _scheme_of(url) in SPECIAL_SCHEMES:
        url = _backslashes_to_slashes(url)
    parts, port = _split(url)

    scheme = parts.scheme.lower()
    if not scheme or not _SCHEME_RE.match(scheme):
        raise UrlError(f"Invalid URL {url!r}: missing scheme")

    if scheme not in SPECIAL_SCHEMES:
        # data:, mailto: и прочие непрозрачные ссылки оставляем как есть
        return urlunsplit((scheme, parts.netloc, parts.path, parts.query, parts.fragment))

    if not parts.hostname:
        raise UrlError(f"Invalid URL {url!r}: missing host")

    if ":" in parts.hostname:
        netloc = f"[{parts.hostname}]"
    else:
        netloc = _normalize_host(parts.hostname, url)
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    userinfo = parts.netloc.rpartition("@")[0] if "@" in parts.netloc else ""
    if userinfo:
        netloc = f"{userinfo}@{netloc}"

    path = quote(_remove_dot_segments(parts.path or "/"), safe=_PATH_SAFE)
    query = quote(parts.query, safe=_QUERY_SAFE)
    return urlunsplit((scheme, netloc, path, query, parts.fragment))


def resolve_favicon(page_url: str, favicon_ref: str) -> str:
    """Разрешает ссылку на favicon относительно URL страницы.

    Абсолютная ссылка возвращается нормализованной, protocol-relative
    наследует схему страницы, относительные пути разрешаются по правилам
    :func:`urllib.parse.urljoin`. Бросает :class:`UrlError`, если база
    невалидна или результат не является корректным URL.
    """
    base = _require_str(page_url, "Page URL")
    ref = _require_str(favicon_ref, "Favicon reference")
    if _scheme_of(base) in SPECIAL_SCHEMES:
        base = _backslashes_to_slashes(base)
    if (_scheme_of(ref) or _scheme_of(base)) in SPECIAL_SCHEMES:
        ref = _backslashes_to_slashes(ref)

    base_parts, _ = _split(base)
    if not base_parts.scheme or not _SCHEME_RE.match(base_parts.scheme):
        raise UrlError(f"Invalid base URL {base!r}: missing scheme")
    if base_parts.scheme.lower() in SPECIAL_SCHEMES and not base_parts.hostname:
        raise UrlError(f"Invalid base URL {base!r}: missing host")

    try:
        joined = urljoin(base, ref)
    except ValueError as exc:
        raise UrlError(f"Cannot resolve {ref!r} against {base!r}: {exc}") from exc
    return normalize_url(joined)


def extract_domain(url: str) -> str:
    """Возвращает хост URL без ведущего ``www.``."""
    url = _require_str(url, "URL")
    parts, _ = _split(url)
    host = parts.hostname
    if not host:
        raise UrlError(f"Invalid URL {url!r}: missing host")
    host = host.lower()
    return host[4:] if host.startswith("www.") else host


def favicon_path_kind(url: Any) -> FaviconPathKind:
    """Классифицирует путь favicon, никогда не бросая исключений.

    Относительная ссылка (без схемы) считается нераспознанной: путь у неё
    ещё не определён.
    """
    if not isinstance(url, str):
        return FaviconPathKind.UNPARSEABLE
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return FaviconPathKind.UNPARSEABLE
    if not parts.scheme or (parts.scheme.lower() in SPECIAL_SCHEMES and not parts.netloc):
        return FaviconPathKind.UNPARSEABLE
    if parts.path == DEFAULT_FAVICON_PATH:
        return FaviconPathKind.DEFAULT
    return FaviconPathKind.CUSTOM


def is_default_favicon_path(url: Any) -> bool:
    """True, если путь URL ровно ``/favicon.ico``."""
    return favicon_path_kind(url) is FaviconPathKind.DEFAULT


def icon_filename(url: str) -> str:
    """Имя файла иконки в хранилище, например ``example.com.png``."""
    return f"{extract_domain(url)}.png"
