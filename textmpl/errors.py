"""
Base exceptions for user-facing errors.

All expected errors that a template author can fix (malformed templates,
failing expressions, invalid options) inherit from TemplateUserError and
are reported by the CLI as clean messages without stack traces.

Programming errors and bugs should NOT inherit from TemplateUserError:
they propagate with full tracebacks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .template.tokens import Token


class TemplateUserError(Exception):
    """
    Base class for all user-facing errors in textmpl.

    These errors indicate problems that the user can fix:
    template syntax, expression failures, configuration issues.
    """
    pass


class TemplateSyntaxError(TemplateUserError):
    """Ошибка компиляции шаблона с привязкой к токену."""

    def __init__(self, message: str, token: Optional[Token] = None):
        if token is not None:
            super().__init__(f"{message} at {token.line}:{token.column}")
        else:
            super().__init__(message)
        self.message = message
        self.token = token

    @property
    def position(self) -> Optional[int]:
        return self.token.position if self.token is not None else None


class DelimiterError(TemplateSyntaxError):
    """Незакрытый или лишний разделитель выражения/инструкции."""
    pass


class StatementError(TemplateSyntaxError):
    """Нарушение блочной структуры инструкций."""
    pass


class TemplateRenderError(TemplateUserError):
    """Ошибка, возникшая во время рендеринга скомпилированного шаблона."""
    pass


class EvaluationError(TemplateRenderError):
    """Вычислитель выражений завершился с ошибкой."""

    def __init__(self, source: str, cause: BaseException):
        super().__init__(f"Internal error in '{source}': {cause}")
        self.source = source
        self.cause = cause


class IncompatibleArgumentError(TemplateRenderError, TypeError):
    """Коллекция цикла не является последовательностью."""

    def __init__(self, source: str, value: object):
        super().__init__(f"Incompatible argument: '{source}' is not a sequence")
        self.source = source
        self.value = value


class ConfigError(TemplateUserError, ValueError):
    """Некорректные опции шаблонизатора."""
    pass


__all__ = [
    "TemplateUserError",
    "TemplateSyntaxError",
    "DelimiterError",
    "StatementError",
    "TemplateRenderError",
    "EvaluationError",
    "IncompatibleArgumentError",
    "ConfigError",
]
