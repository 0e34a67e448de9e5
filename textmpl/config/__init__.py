from __future__ import annotations

from .load import load_context, load_options
from .model import DEFAULT_OPTIONS, Delimiters, Statements, TemplateOptions, coerce_options

__all__ = [
    "Delimiters",
    "Statements",
    "TemplateOptions",
    "DEFAULT_OPTIONS",
    "coerce_options",
    "load_options",
    "load_context",
]
