"""
textmpl: шаблонизатор текста с выражениями и блочными инструкциями
(if/elseif/else, foreach, switch/case/default).
"""

from __future__ import annotations

from .config import Delimiters, Statements, TemplateOptions
from .engine import TextTemplate, render_template
from .errors import (
    ConfigError,
    DelimiterError,
    EvaluationError,
    IncompatibleArgumentError,
    StatementError,
    TemplateRenderError,
    TemplateSyntaxError,
    TemplateUserError,
)
from .evaluation import ExpressionEvaluator, PythonEvaluator

__all__ = [
    "TextTemplate",
    "render_template",
    "TemplateOptions",
    "Delimiters",
    "Statements",
    "ExpressionEvaluator",
    "PythonEvaluator",
    "TemplateUserError",
    "TemplateSyntaxError",
    "DelimiterError",
    "StatementError",
    "TemplateRenderError",
    "EvaluationError",
    "IncompatibleArgumentError",
    "ConfigError",
]
