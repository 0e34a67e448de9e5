"""
Вычислитель выражений на базе самого Python.

Подготовленный исходник компилируется как тело функции, параметры которой
совпадают с ключами контекста, а последний параметр `context` указывает
на сам объект контекста.
"""

from __future__ import annotations

import ast
import functools
import keyword
import logging
import textwrap
from typing import Callable, MutableMapping, Tuple

from ..errors import EvaluationError

logger = logging.getLogger(__name__)

_FUNCTION_NAME = "__template_expression__"
_CONTEXT_PARAM = "context"


def _normalize_body(source: str) -> str:
    """
    Выравнивает отступы многострочного тела.

    Первая строка уже лишена отступа лексером, поэтому остальные строки
    выравниваются отдельно как единый блок.
    """
    first, _, rest = source.partition("\n")
    if not rest:
        return first.strip()
    return first.strip() + "\n" + textwrap.dedent(rest)


@functools.lru_cache(maxsize=512)
def _compile(source: str, params: Tuple[str, ...]) -> Callable[..., object]:
    # Тело собирается на уровне AST: содержимое строковых литералов не сдвигается
    body = ast.parse(_normalize_body(source), "<template expression>").body
    signature = ", ".join(params + (_CONTEXT_PARAM,))
    module = ast.parse(f"def {_FUNCTION_NAME}({signature}):\n    pass\n")
    module.body[0].body = body or [ast.Pass()]
    ast.fix_missing_locations(module)
    logger.debug("Compiling template expression with %d parameter(s)", len(params))

    namespace: dict = {}
    exec(compile(module, "<template expression>", "exec"), namespace)
    return namespace[_FUNCTION_NAME]


def _param_names(context: MutableMapping[str, object]) -> Tuple[str, ...]:
    return tuple(
        key for key in context
        if isinstance(key, str)
        and key.isidentifier()
        and not keyword.iskeyword(key)
        and key != _CONTEXT_PARAM
    )


class PythonEvaluator:
    """
    Вычислитель выражений шаблона на Python.

    Присваивание переменной внутри выражения локально для этого выражения;
    изменения через context[...] сохраняются в контексте рендеринга.
    """

    def evaluate(self, source: str, context: MutableMapping[str, object]) -> object:
        """
        Вычисляет подготовленное выражение.

        Raises:
            EvaluationError: При ошибке компиляции или выполнения
        """
        params = _param_names(context)
        try:
            function = _compile(source, params)
            return function(*(context[name] for name in params), context)
        except Exception as e:
            raise EvaluationError(source, e) from e


__all__ = ["PythonEvaluator"]
