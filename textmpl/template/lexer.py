"""
Лексический анализатор шаблонов.

Разбивает исходный текст шаблона на плоскую последовательность токенов:
обычный текст, выражения и именованные инструкции.
"""

from __future__ import annotations

import bisect
import logging
import re
from typing import List, Optional

from ..config.model import Delimiters
from ..errors import DelimiterError
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Работает за один линейный проход, переключаясь между двумя режимами:
    - поиск ближайшего открывающего разделителя (выражения или инструкции)
    - поиск конкретного закрывающего разделителя
    """

    # Имя инструкции и её аргумент
    _STATEMENT_PATTERN = re.compile(r"^\s*(\w+)\s*(.*)", re.DOTALL)

    def __init__(self, text: str, delimiters: Delimiters):
        self.text = text
        self.delimiters = delimiters
        self.position = 0
        self.length = len(text)
        # Начала строк для вычисления line:column за O(log n)
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст.

        Returns:
            Список токенов в порядке появления

        Raises:
            DelimiterError: При незакрытом или лишнем разделителе
        """
        tokens: List[Token] = []

        while self.position < self.length:
            start, opener, closer, kind = self._find_next_opener()

            if start == -1:
                self._emit_text(tokens, self.position, self.length)
                self.position = self.length
                break

            self._emit_text(tokens, self.position, start)

            content_start = start + len(opener)
            end = self.text.find(closer, content_start)
            if end == -1:
                raise DelimiterError(
                    f"Missing delimiter: '{closer}'",
                    self._make_token(TokenType.TEXT, opener, start),
                )

            content = self.text[content_start:end].strip()
            if content:
                if kind is TokenType.EXPRESSION:
                    tokens.append(self._make_token(TokenType.EXPRESSION, content, start))
                else:
                    match = self._STATEMENT_PATTERN.match(content)
                    if match:
                        tokens.append(self._make_token(
                            TokenType.STATEMENT, match.group(2), start, name=match.group(1)
                        ))

            self.position = end + len(closer)

        logger.debug("Tokenized template of %d chars into %d tokens", self.length, len(tokens))
        return tokens

    def _find_next_opener(self) -> tuple[int, str, str, Optional[TokenType]]:
        """
        Находит ближайший открывающий разделитель от текущей позиции.

        Returns:
            Кортеж (позиция, открывающий, закрывающий, тип токена);
            позиция -1 если разделителей больше нет
        """
        d = self.delimiters
        expr = self.text.find(d.expression_start, self.position)
        stmt = self.text.find(d.statement_start, self.position)

        # При равенстве позиций приоритет у выражения
        if expr != -1 and (stmt == -1 or expr <= stmt):
            return expr, d.expression_start, d.expression_end, TokenType.EXPRESSION
        if stmt != -1:
            return stmt, d.statement_start, d.statement_end, TokenType.STATEMENT
        return -1, "", "", None

    def _emit_text(self, tokens: List[Token], start: int, end: int) -> None:
        """Добавляет текстовый сегмент, предварительно проверив его на лишние закрывающие разделители."""
        if start >= end:
            return

        value = self.text[start:end]
        d = self.delimiters

        if d.expression_end in value:
            raise DelimiterError(
                f"Missing delimiter: '{d.expression_start}'",
                self._make_token(TokenType.TEXT, d.expression_end, start + value.index(d.expression_end)),
            )
        if d.statement_end in value:
            raise DelimiterError(
                f"Missing delimiter: '{d.statement_start}'",
                self._make_token(TokenType.TEXT, d.statement_end, start + value.index(d.statement_end)),
            )

        tokens.append(self._make_token(TokenType.TEXT, value, start))

    def _make_token(self, token_type: TokenType, value: str, position: int, name: str = "") -> Token:
        line = bisect.bisect_right(self._line_starts, position)
        line_start = self._line_starts[line - 1]
        return Token(
            type=token_type,
            value=value,
            position=position,
            line=line,
            column=position - line_start + 1,
            name=name,
        )


def trim_lines(text: str) -> str:
    """Срезает пробелы по краям каждой строки и склеивает строки без переводов."""
    return "".join(line.strip() for line in text.splitlines())


def tokenize_template(text: str, delimiters: Optional[Delimiters] = None) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона
        delimiters: Разделители (по умолчанию {{ }} и {% %})

    Returns:
        Список токенов
    """
    return TemplateLexer(text, delimiters or Delimiters()).tokenize()


__all__ = ["TemplateLexer", "tokenize_template", "trim_lines"]
