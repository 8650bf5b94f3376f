# === FILE: favicon_stats/config.py ===
"""
Модуль для загрузки и валидации конфигурации конвейера favicon_stats.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from favicon_stats.aggregator import DEFAULT_ERROR_RULES, ErrorGroupingRule


class ErrorGroupConfig(BaseModel):
    """Правило группировки сообщений об ошибках по префиксу."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    prefix: str = Field(..., min_length=1, description="Префикс сообщения об ошибке.")
    label: str = Field(..., min_length=1, description="Ключ, под которым считаются совпадения.")

    @field_validator("prefix")
    def _prefix_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("prefix must not be blank")
        return v


def _default_error_groups() -> list[ErrorGroupConfig]:
    return [ErrorGroupConfig(prefix=r.prefix, label=r.label) for r in DEFAULT_ERROR_RULES]


class PipelineConfig(BaseModel):
    """Конфигурация одного запуска обработки и статистики."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    input_file: Path = Field(Path("favicons.json"), description="Сырые результаты обхода.")
    processed_file: Path = Field(
        Path("favicons-processed.json"), description="Куда сохранить очищенные записи."
    )
    stats_input_file: Path = Field(
        Path("favicons-downloaded.json"), description="Записи, по которым строится статистика."
    )
    stats_html: Path = Field(Path("stats.html"), description="HTML-отчёт со статистикой.")
    stats_json: Optional[Path] = Field(None, description="JSON-отчёт со статистикой.")
    icons_dir: Path = Field(Path("icons"), description="Папка со скачанными иконками.")
    template_dir: Optional[Path] = Field(
        None, description="Папка с Jinja2-шаблонами (по умолчанию встроенные)."
    )
    error_groups: list[ErrorGroupConfig] = Field(
        default_factory=_default_error_groups,
        description="Правила группировки ошибок, применяются по порядку.",
    )

    def error_rules(self) -> Tuple[ErrorGroupingRule, ...]:
        return tuple(ErrorGroupingRule(g.prefix, g.label) for g in self.error_groups)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> PipelineConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект PipelineConfig.
    Без пути берёт configs/default.yaml, а если его нет, значения по умолчанию.
    Явно указанный, но отсутствующий файл даёт FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return PipelineConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return PipelineConfig(**data)


__all__ = ["ErrorGroupConfig", "PipelineConfig", "load_config"]
