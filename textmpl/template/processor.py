"""
Рендерер AST шаблона.

Обходит дерево узлов в контексте переменных и собирает итоговую строку.
Скомпилированное дерево при этом не изменяется.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import List, MutableMapping, Optional

from ..errors import IncompatibleArgumentError
from ..evaluation.protocols import ExpressionEvaluator
from .nodes import (
    ConditionalNode,
    ExpressionNode,
    IterationNode,
    SwitchNode,
    TemplateAST,
    TemplateNode,
    TextNode,
)
from .scope import LoopScope


def stringify(value: object) -> str:
    """Приводит результат выражения к строке; None выводится как пустая строка."""
    if value is None:
        return ""
    return str(value)


class TemplateRenderer:
    """
    Рендерер шаблона.

    Контекст передаётся по ссылке во все вложенные узлы: изменения,
    сделанные выражениями, видны последующим узлам в рамках одного рендера.
    """

    def __init__(self, evaluator: ExpressionEvaluator):
        self.evaluator = evaluator

    def render(self, ast: TemplateAST, context: MutableMapping[str, object]) -> str:
        """
        Рендерит список узлов.

        Args:
            ast: Узлы для рендеринга
            context: Изменяемый контекст переменных

        Returns:
            Конкатенация результатов всех узлов
        """
        result_parts: List[str] = []

        for node in ast:
            result_parts.append(self._render_node(node, context))

        return "".join(result_parts)

    def _render_node(self, node: TemplateNode, context: MutableMapping[str, object]) -> str:
        if isinstance(node, TextNode):
            return node.text

        elif isinstance(node, ExpressionNode):
            return stringify(self.evaluator.evaluate(node.source, context))

        elif isinstance(node, ConditionalNode):
            return self._render_conditional(node, context)

        elif isinstance(node, IterationNode):
            return self._render_iteration(node, context)

        elif isinstance(node, SwitchNode):
            return self._render_switch(node, context)

        raise TypeError(f"Unknown node type: {type(node).__name__}")

    def _render_conditional(self, node: ConditionalNode, context: MutableMapping[str, object]) -> str:
        # Условия вычисляются по порядку до первого истинного
        for branch in node.branches:
            if self.evaluator.evaluate(branch.condition, context):
                return self.render(branch.body, context)

        if node.else_body is not None:
            return self.render(node.else_body, context)

        return ""

    def _render_iteration(self, node: IterationNode, context: MutableMapping[str, object]) -> str:
        collection = self.evaluator.evaluate(node.collection, context)

        if not isinstance(collection, Sequence) or isinstance(collection, (str, bytes, bytearray)):
            raise IncompatibleArgumentError(node.collection, collection)

        result_parts: List[str] = []
        for index, item in enumerate(collection):
            scope = LoopScope(context, {node.item_name: item, node.index_name: index})
            result_parts.append(self.render(node.body, scope))

        return "".join(result_parts)

    def _render_switch(self, node: SwitchNode, context: MutableMapping[str, object]) -> str:
        # Все значения case вычисляются до subject
        case_values = [
            (self.evaluator.evaluate(case.value, context), case.body)
            for case in node.cases
        ]
        subject = self.evaluator.evaluate(node.subject, context)

        matched: Optional[TemplateAST] = None
        for value, body in case_values:
            # При совпадающих значениях побеждает последний case
            if value == subject:
                matched = body

        if matched is not None:
            return self.render(matched, context)

        if node.default is not None:
            return self.render(node.default, context)

        return ""


def render_ast(
    ast: TemplateAST,
    context: MutableMapping[str, object],
    evaluator: ExpressionEvaluator,
) -> str:
    """
    Удобная функция для рендеринга AST.

    Raises:
        EvaluationError: При ошибке вычисления выражения
        IncompatibleArgumentError: Если коллекция цикла не последовательность
    """
    return TemplateRenderer(evaluator).render(ast, context)


__all__ = ["TemplateRenderer", "render_ast", "stringify"]
