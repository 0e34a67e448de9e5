"""
Модели опций шаблонизатора.
Содержит разделители, ключевые слова инструкций и общие опции
с поддержкой сериализации в YAML.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

from ..errors import ConfigError

_RE_KEYWORD = re.compile(r"\w+")


def _check_keys(data: Mapping[str, Any], allowed: set[str], where: str) -> None:
    unknown = set(data) - allowed
    if unknown:
        raise ConfigError(f"{where}: unknown option(s) {', '.join(sorted(map(str, unknown)))}")


def _str_or_default(data: Mapping[str, Any], key: str, default: str) -> str:
    # Пустое значение трактуется как "не задано"
    value = data.get(key)
    if value is None or value == "":
        return default
    if not isinstance(value, str):
        raise ConfigError(f"{key}: expected string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Delimiters:
    """
    Разделители выражений и инструкций.

    Выражение: expression_start ... expression_end
    Инструкция: statement_start name args statement_end
    """
    expression_start: str = "{{"
    expression_end: str = "}}"
    statement_start: str = "{%"
    statement_end: str = "%}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Delimiters":
        """Создание экземпляра из словаря (из YAML)."""
        names = {f.name for f in fields(cls)}
        _check_keys(data, names, "delimiters")
        defaults = cls()
        return cls(**{name: _str_or_default(data, name, getattr(defaults, name)) for name in names})

    def to_dict(self) -> Dict[str, str]:
        """Сериализация в словарь для YAML."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class Statements:
    """Ключевые слова десяти инструкций."""
    if_: str = "if"
    elseif: str = "elseif"
    else_: str = "else"
    endif: str = "endif"
    foreach: str = "foreach"
    endforeach: str = "endforeach"
    switch: str = "switch"
    case: str = "case"
    default: str = "default"
    endswitch: str = "endswitch"

    @staticmethod
    def _key(name: str) -> str:
        # if_ / else_ в YAML пишутся без подчёркивания
        return name.rstrip("_")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Statements":
        """Создание экземпляра из словаря (из YAML)."""
        keys = {cls._key(f.name): f.name for f in fields(cls)}
        _check_keys(data, set(keys), "statements")
        defaults = cls()
        return cls(**{
            attr: _str_or_default(data, key, getattr(defaults, attr))
            for key, attr in keys.items()
        })

    def to_dict(self) -> Dict[str, str]:
        """Сериализация в словарь для YAML."""
        return {self._key(f.name): getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class TemplateOptions:
    """
    Полный набор опций шаблонизатора.

    trim_result: перед токенизацией срезать пробелы по краям каждой строки
    и убрать переводы строк.
    """
    delimiters: Delimiters = field(default_factory=Delimiters)
    statements: Statements = field(default_factory=Statements)
    trim_result: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "TemplateOptions":
        """Создание экземпляра из словаря (из YAML)."""
        data = data or {}
        _check_keys(data, {"delimiters", "statements", "trim_result"}, "options")

        delimiters = data.get("delimiters") or {}
        statements = data.get("statements") or {}
        if not isinstance(delimiters, Mapping):
            raise ConfigError("delimiters: expected a mapping")
        if not isinstance(statements, Mapping):
            raise ConfigError("statements: expected a mapping")

        trim_result = data.get("trim_result", False)
        if not isinstance(trim_result, bool):
            raise ConfigError(f"trim_result: expected bool, got {type(trim_result).__name__}")

        return cls(
            delimiters=Delimiters.from_dict(delimiters),
            statements=Statements.from_dict(statements),
            trim_result=trim_result,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь для YAML."""
        return {
            "delimiters": self.delimiters.to_dict(),
            "statements": self.statements.to_dict(),
            "trim_result": self.trim_result,
        }

    def validate(self) -> "TemplateOptions":
        """
        Проверяет, что конфигурация допускает однозначную токенизацию.

        Returns:
            Тот же объект опций

        Raises:
            ConfigError: При пустых или конфликтующих значениях
        """
        for name, value in self.delimiters.to_dict().items():
            if not value:
                raise ConfigError(f"delimiters.{name}: must not be empty")

        if self.delimiters.expression_start == self.delimiters.statement_start:
            raise ConfigError(
                f"delimiters: expression_start and statement_start are both "
                f"'{self.delimiters.statement_start}'"
            )

        # Открывающий разделитель не может начинаться с другого открывающего
        expr, stmt = self.delimiters.expression_start, self.delimiters.statement_start
        if expr.startswith(stmt) or stmt.startswith(expr):
            shorter, longer = sorted((expr, stmt), key=len)
            raise ConfigError(
                f"delimiters: expression_start and statement_start overlap: "
                f"'{shorter}' is a prefix of '{longer}'"
            )

        seen: Dict[str, str] = {}
        for name, keyword in self.statements.to_dict().items():
            if not _RE_KEYWORD.fullmatch(keyword):
                raise ConfigError(f"statements.{name}: '{keyword}' is not a single word")
            if keyword in seen:
                raise ConfigError(
                    f"statements: '{keyword}' is used for both '{seen[keyword]}' and '{name}'"
                )
            seen[keyword] = name

        return self


DEFAULT_OPTIONS = TemplateOptions()


def coerce_options(options: TemplateOptions | Mapping[str, Any] | None) -> TemplateOptions:
    """Приводит опции из словаря или None к проверенному TemplateOptions."""
    if options is None:
        return DEFAULT_OPTIONS
    if isinstance(options, TemplateOptions):
        return options.validate()
    return TemplateOptions.from_dict(options).validate()


__all__ = [
    "Delimiters",
    "Statements",
    "TemplateOptions",
    "DEFAULT_OPTIONS",
    "coerce_options",
]
