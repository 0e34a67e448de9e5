"""
Протокол вычислителя выражений.

Ядро шаблонизатора не знает, как устроен язык выражений: оно лишь
передаёт подготовленный исходник и контекст рендеринга.
"""

from __future__ import annotations

from typing import MutableMapping, Protocol, runtime_checkable


@runtime_checkable
class ExpressionEvaluator(Protocol):
    """Интерфейс вычислителя выражений шаблона."""

    def evaluate(self, source: str, context: MutableMapping[str, object]) -> object:
        """
        Вычисляет подготовленное выражение.

        Args:
            source: Подготовленный исходник (см. prepare_source)
            context: Изменяемый контекст рендеринга

        Returns:
            Результат вычисления

        Raises:
            EvaluationError: При любой ошибке вычисления
        """
        ...


def prepare_source(source: str) -> str:
    """
    Подготавливает исходник выражения к вычислению.

    Однострочное выражение без ';' оборачивается в неявный return,
    иначе исходник считается телом скрипта с явным return.
    """
    if "\n" not in source and ";" not in source:
        return f"return {source}"
    return source


__all__ = ["ExpressionEvaluator", "prepare_source"]
