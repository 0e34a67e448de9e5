"""
Лексические типы шаблонизатора.

Определяет типы токенов, которые лексер передаёт сборщику блоков.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Типы токенов в шаблоне."""

    TEXT = "TEXT"              # Обычный текст вне разделителей
    EXPRESSION = "EXPRESSION"  # {{ ... }}
    STATEMENT = "STATEMENT"    # {% name ... %}


@dataclass(frozen=True)
class Token:
    """
    Токен с позиционной информацией для точной диагностики ошибок.

    Attributes:
        type: Тип токена
        value: Текст, исходник выражения или аргумент инструкции
        position: Позиция в исходном тексте
        line: Номер строки (начиная с 1)
        column: Номер колонки (начиная с 1)
        name: Имя инструкции (только для STATEMENT)
    """
    type: TokenType
    value: str
    position: int = 0
    line: int = 1
    column: int = 1
    name: str = ""

    def __repr__(self) -> str:
        if self.type is TokenType.STATEMENT:
            return f"Token({self.type.name}:{self.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"


__all__ = ["TokenType", "Token"]
