"""
AST-узлы шаблона.

Определяет замкнутый набор узлов, в которые сборщик блоков превращает
поток токенов. Узлы неизменяемы после построения.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union


@dataclass(frozen=True)
class TextNode:
    """
    Обычный текстовый контент.

    Выводится в результат как есть.
    """
    text: str


@dataclass(frozen=True)
class ExpressionNode:
    """
    Выражение {{ ... }}.

    Хранит подготовленный исходник выражения; результат вычисления
    приводится к строке.
    """
    source: str


@dataclass(frozen=True)
class ConditionalBranch:
    """Ветка if/elseif: условие и её тело."""
    condition: str
    body: TemplateAST


@dataclass(frozen=True)
class ConditionalNode:
    """
    Условный блок {% if %}...{% elseif %}...{% else %}...{% endif %}.

    Выводится первая ветка с истинным условием, иначе else-блок.
    """
    branches: Tuple[ConditionalBranch, ...]
    else_body: Optional[TemplateAST] = None


@dataclass(frozen=True)
class IterationNode:
    """
    Цикл {% foreach item[, index] in collection %}...{% endforeach %}.

    Имена элемента и индекса различны и не являются ключевыми словами Python.
    """
    item_name: str
    index_name: str
    collection: str
    body: TemplateAST


@dataclass(frozen=True)
class SwitchCase:
    """Ветка case: выражение значения и её тело."""
    value: str
    body: TemplateAST


@dataclass(frozen=True)
class SwitchNode:
    """
    Ветвление {% switch subject %}{% case value %}...{% default %}...{% endswitch %}.

    Значения case сравниваются с subject по результату вычисления.
    """
    subject: str
    cases: Tuple[SwitchCase, ...]
    default: Optional[TemplateAST] = None


TemplateNode = Union[TextNode, ExpressionNode, ConditionalNode, IterationNode, SwitchNode]

# Тип для коллекции узлов шаблона
TemplateAST = List[TemplateNode]


def collect_text_content(ast: TemplateAST) -> str:
    """
    Собирает весь текстовый контент из AST (для тестирования и отладки).

    Обходит все ветки, включая else/default.
    """
    result_parts: List[str] = []

    def collect_from_nodes(nodes: TemplateAST) -> None:
        for node in nodes:
            if isinstance(node, TextNode):
                result_parts.append(node.text)
            elif isinstance(node, ConditionalNode):
                for branch in node.branches:
                    collect_from_nodes(branch.body)
                if node.else_body:
                    collect_from_nodes(node.else_body)
            elif isinstance(node, IterationNode):
                collect_from_nodes(node.body)
            elif isinstance(node, SwitchNode):
                for case in node.cases:
                    collect_from_nodes(case.body)
                if node.default:
                    collect_from_nodes(node.default)

    collect_from_nodes(ast)
    return "".join(result_parts)


def format_ast_tree(ast: TemplateAST, indent: int = 0) -> str:
    """Форматирует AST как дерево для отладки."""
    lines = []
    prefix = "  " * indent

    for node in ast:
        if isinstance(node, TextNode):
            # Показываем только начало текста для читабельности
            text_preview = repr(node.text[:50] + "..." if len(node.text) > 50 else node.text)
            lines.append(f"{prefix}TextNode({text_preview})")
        elif isinstance(node, ExpressionNode):
            lines.append(f"{prefix}ExpressionNode({node.source!r})")
        elif isinstance(node, ConditionalNode):
            lines.append(f"{prefix}ConditionalNode")
            for i, branch in enumerate(node.branches):
                lines.append(f"{prefix}  branch[{i}] ({branch.condition!r}):")
                if branch.body:
                    lines.append(format_ast_tree(branch.body, indent + 2))
            if node.else_body is not None:
                lines.append(f"{prefix}  else:")
                if node.else_body:
                    lines.append(format_ast_tree(node.else_body, indent + 2))
        elif isinstance(node, IterationNode):
            lines.append(
                f"{prefix}IterationNode({node.item_name}, {node.index_name} in {node.collection!r})"
            )
            if node.body:
                lines.append(format_ast_tree(node.body, indent + 1))
        elif isinstance(node, SwitchNode):
            lines.append(f"{prefix}SwitchNode({node.subject!r})")
            for i, case in enumerate(node.cases):
                lines.append(f"{prefix}  case[{i}] ({case.value!r}):")
                if case.body:
                    lines.append(format_ast_tree(case.body, indent + 2))
            if node.default is not None:
                lines.append(f"{prefix}  default:")
                if node.default:
                    lines.append(format_ast_tree(node.default, indent + 2))
        else:
            lines.append(f"{prefix}{type(node).__name__}")

    return "\n".join(lines)


__all__ = [
    "TemplateNode",
    "TemplateAST",
    "TextNode",
    "ExpressionNode",
    "ConditionalBranch",
    "ConditionalNode",
    "IterationNode",
    "SwitchCase",
    "SwitchNode",
    "collect_text_content",
    "format_ast_tree",
]
