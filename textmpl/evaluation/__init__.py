from __future__ import annotations

from .protocols import ExpressionEvaluator, prepare_source
from .python import PythonEvaluator

__all__ = ["ExpressionEvaluator", "PythonEvaluator", "prepare_source"]
