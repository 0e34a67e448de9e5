"""
Публичная точка входа шаблонизатора.

TextTemplate хранит скомпилированное дерево вместе с опциями, которыми оно
было получено, и контекст рендеринга по умолчанию.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, MutableMapping, Optional

from .config.model import TemplateOptions, coerce_options
from .evaluation.protocols import ExpressionEvaluator
from .evaluation.python import PythonEvaluator
from .template.lexer import TemplateLexer, trim_lines
from .template.nodes import TemplateAST
from .template.parser import parse_template
from .template.processor import TemplateRenderer

logger = logging.getLogger(__name__)


class TextTemplate:
    """
    Скомпилированный шаблон.

    Пример:
        TextTemplate("{% if user %}Hi {{ user }}{% endif %}").render({"user": "Ann"})
    """

    def __init__(
        self,
        template: Optional[str] = None,
        options: TemplateOptions | Mapping[str, Any] | None = None,
        evaluator: Optional[ExpressionEvaluator] = None,
    ):
        """
        Args:
            template: Текст шаблона; без него шаблон рендерится в пустую строку
            options: Опции шаблонизатора (объект или словарь из YAML)
            evaluator: Вычислитель выражений (по умолчанию PythonEvaluator)

        Raises:
            ConfigError: При некорректных опциях
            DelimiterError, StatementError: При ошибке компиляции шаблона
        """
        self.options = coerce_options(options)
        self.evaluator: ExpressionEvaluator = evaluator or PythonEvaluator()
        self.context: MutableMapping[str, object] = {}
        self.nodes: Optional[TemplateAST] = None

        if template:
            self.set_template(template)

    def set_template(self, template: str) -> "TextTemplate":
        """
        Компилирует новый шаблон и заменяет им текущее дерево.

        Дерево заменяется только после успешной компиляции.
        """
        if self.options.trim_result:
            template = trim_lines(template)

        tokens = TemplateLexer(template, self.options.delimiters).tokenize()
        nodes = parse_template(tokens, self.options.statements)

        self.nodes = nodes
        logger.debug("Compiled template: %d tokens, %d top-level nodes", len(tokens), len(nodes))
        return self

    def set_context(self, context: MutableMapping[str, object]) -> "TextTemplate":
        """Задаёт контекст рендеринга по умолчанию."""
        self.context = context
        return self

    def render(self, context: Optional[MutableMapping[str, object]] = None) -> str:
        """
        Рендерит скомпилированный шаблон.

        Args:
            context: Контекст; если передан, заменяет контекст по умолчанию

        Returns:
            Результат рендеринга; пустая строка, если шаблон не задан

        Raises:
            EvaluationError: При ошибке вычисления выражения
            IncompatibleArgumentError: Если коллекция цикла не последовательность
        """
        if context is not None:
            self.set_context(context)

        if self.nodes is None:
            return ""

        return TemplateRenderer(self.evaluator).render(self.nodes, self.context)


def render_template(
    template: str,
    context: Optional[MutableMapping[str, object]] = None,
    options: TemplateOptions | Mapping[str, Any] | None = None,
) -> str:
    """Удобная функция: компилирует и рендерит шаблон за один вызов."""
    return TextTemplate(template, options).render({} if context is None else context)


__all__ = ["TextTemplate", "render_template"]
