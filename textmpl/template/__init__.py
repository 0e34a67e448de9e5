"""
Компилятор шаблонов: лексер, сборщик блоков, AST-узлы и рендерер.
"""

from __future__ import annotations

from .lexer import TemplateLexer, tokenize_template, trim_lines
from .nodes import format_ast_tree, collect_text_content
from .parser import BlockAssembler, parse_template
from .processor import TemplateRenderer, render_ast
from .tokens import Token, TokenType

__all__ = [
    "Token",
    "TokenType",
    "TemplateLexer",
    "BlockAssembler",
    "TemplateRenderer",

    # Удобные функции
    "tokenize_template",
    "parse_template",
    "render_ast",
    "trim_lines",

    # Отладка
    "format_ast_tree",
    "collect_text_content",
]
