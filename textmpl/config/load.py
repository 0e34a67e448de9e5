"""
Загрузчик опций шаблонизатора и контекста рендеринга из YAML/JSON файлов.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigError
from .model import DEFAULT_OPTIONS, TemplateOptions

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def load_options(path: Optional[Path]) -> TemplateOptions:
    """
    Загружает опции шаблонизатора.

    Args:
        path: Путь к YAML файлу или None

    Returns:
        Проверенные опции; значения по умолчанию, если файла нет
    """
    if path is None or not path.is_file():
        return DEFAULT_OPTIONS
    return TemplateOptions.from_dict(_read_yaml_map(path)).validate()


def load_context(path: Path) -> Dict[str, Any]:
    """
    Загружает контекст рендеринга из YAML или JSON файла.

    JSON является подмножеством YAML, поэтому используется один загрузчик.
    """
    if not path.is_file():
        raise ConfigError(f"Context file not found: {path}")
    return _read_yaml_map(path)


__all__ = ["load_options", "load_context"]
