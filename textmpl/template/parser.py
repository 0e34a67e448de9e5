"""
Сборщик блоков шаблона.

Преобразует плоскую последовательность токенов в AST за один проход
слева направо. На каждом уровне отслеживается не более одного открытого
блока; вложенные конструкции накапливаются как непрозрачное тело и
разбираются рекурсивно новым экземпляром сборщика.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from keyword import iskeyword
from typing import List, Optional, Tuple

from ..config.model import Statements
from ..errors import StatementError
from ..evaluation.protocols import prepare_source
from .nodes import (
    ConditionalBranch,
    ConditionalNode,
    ExpressionNode,
    IterationNode,
    SwitchCase,
    SwitchNode,
    TemplateAST,
    TextNode,
)
from .statements import BlockFamily, StatementRole, StatementTable
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

_RE_IDENTIFIER = re.compile(r"[^\W\d]\w*")

# Имя индекса цикла, если оно не указано явно
DEFAULT_INDEX_NAME = "index"


@dataclass
class OpenBlock:
    """
    Состояние открытого блока на текущем уровне.

    Attributes:
        family: Семейство отслеживаемого блока
        opener: Токен, открывший блок
        branch: Токен текущей ветки (if/elseif/else, case/default) или None
        depth: Глубина вложенности одноимённых блоков
        branches: Завершённые ветки (токен ветки, токены тела)
        body: Токены тела текущей ветки
    """
    family: BlockFamily
    opener: Token
    branch: Optional[Token] = None
    depth: int = 1
    branches: List[Tuple[Token, List[Token]]] = field(default_factory=list)
    body: List[Token] = field(default_factory=list)

    def close_branch(self) -> None:
        """Переносит текущую ветку в список завершённых."""
        if self.branch is not None:
            self.branches.append((self.branch, self.body))
            self.body = []


class BlockAssembler:
    """
    Конечный автомат сборки блоков.

    Интерпретирует структурно только инструкции семейства открытого блока;
    всё остальное копится в тело до рекурсивного разбора.
    """

    def __init__(self, tokens: List[Token], table: StatementTable):
        self.tokens = tokens
        self.table = table
        self.nodes: TemplateAST = []
        self.block: Optional[OpenBlock] = None

    def parse(self) -> TemplateAST:
        """
        Собирает AST из всей последовательности токенов.

        Returns:
            Список корневых узлов

        Raises:
            StatementError: При нарушении блочной структуры
        """
        for token in self.tokens:
            if token.type is TokenType.STATEMENT:
                self._handle_statement(token)
            elif self.block is not None:
                self.block.body.append(token)
            elif token.type is TokenType.TEXT:
                self.nodes.append(TextNode(text=token.value))
            else:
                self.nodes.append(ExpressionNode(source=prepare_source(token.value)))

        if self.block is not None:
            closer = self.table.keyword(self.block.family, StatementRole.CLOSE)
            raise StatementError(f"Missing statement: '{closer}'", self.block.opener)

        return self.nodes

    def _handle_statement(self, token: Token) -> None:
        info = self.table.lookup(token.name)
        if info is None:
            raise StatementError(f"Unknown statement: '{token.name}'", token)

        block = self.block

        if block is None:
            if info.role is StatementRole.OPEN:
                self.block = OpenBlock(family=info.family, opener=token)
                if info.family is BlockFamily.CONDITIONAL:
                    # Условие if является первой веткой
                    self.block.branch = token
                return
            opener = self.table.keyword(info.family, StatementRole.OPEN)
            raise StatementError(f"Missing statement: '{opener}'", token)

        # Инструкции других семейств разбираются рекурсивно
        if info.family is not block.family:
            block.body.append(token)
            return

        if info.role is StatementRole.OPEN:
            block.depth += 1
            block.body.append(token)
            return

        if block.depth > 1:
            if info.role is StatementRole.CLOSE:
                block.depth -= 1
            block.body.append(token)
            return

        if info.role is StatementRole.CLOSE:
            self.nodes.append(self._finalize(block))
            self.block = None
            return

        self._open_branch(block, token, info.role)

    def _open_branch(self, block: OpenBlock, token: Token, role: StatementRole) -> None:
        last = self.table.keyword(block.family, StatementRole.LAST_BRANCH)
        opener = self.table.keyword(block.family, StatementRole.OPEN)

        if block.branch is not None and block.branch.name == last:
            if role is StatementRole.LAST_BRANCH:
                raise StatementError(f"Invalid statement: duplicate '{last}' in '{opener}'", token)
            raise StatementError(
                f"Invalid statement: '{last}' must be the last element of '{opener}'", token
            )

        # До первого case накопленное тело переходит в первую ветку
        block.close_branch()
        block.branch = token

    def _finalize(self, block: OpenBlock) -> object:
        logger.debug("Assembling %s block opened at %d:%d",
                     block.family.value, block.opener.line, block.opener.column)

        if block.family is BlockFamily.CONDITIONAL:
            return self._build_conditional(block)
        if block.family is BlockFamily.ITERATION:
            return self._build_iteration(block)
        return self._build_switch(block)

    def _subtree(self, tokens: List[Token]) -> TemplateAST:
        return BlockAssembler(tokens, self.table).parse()

    def _is_last_branch(self, block: OpenBlock) -> bool:
        last = self.table.keyword(block.family, StatementRole.LAST_BRANCH)
        return block.branch is not None and block.branch.name == last

    def _build_conditional(self, block: OpenBlock) -> ConditionalNode:
        else_body: Optional[TemplateAST] = None
        if self._is_last_branch(block):
            else_body = self._subtree(block.body)
        else:
            block.close_branch()

        branches = tuple(
            ConditionalBranch(condition=prepare_source(token.value), body=self._subtree(body))
            for token, body in block.branches
        )
        return ConditionalNode(branches=branches, else_body=else_body)

    def _build_iteration(self, block: OpenBlock) -> IterationNode:
        item_name, index_name, collection = self._parse_foreach_args(block.opener)
        return IterationNode(
            item_name=item_name,
            index_name=index_name,
            collection=prepare_source(collection),
            body=self._subtree(block.body),
        )

    def _parse_foreach_args(self, token: Token) -> Tuple[str, str, str]:
        """
        Разбирает аргумент цикла: <item>[, <index>] in <collection>.

        Raises:
            StatementError: Если нет 'in', коллекции, имена некорректны
                или совпадают
        """
        keyword = token.name
        names, sep, collection = token.value.partition(" in ")
        collection = collection.strip()
        if not sep or not collection:
            raise StatementError(
                f"Invalid statement: '{keyword}' expects '<item>[, <index>] in <collection>'", token
            )

        item_name, _, index_name = names.partition(",")
        item_name = item_name.strip()
        index_name = index_name.strip() or DEFAULT_INDEX_NAME

        for name in (item_name, index_name):
            if not _RE_IDENTIFIER.fullmatch(name) or iskeyword(name):
                raise StatementError(
                    f"Invalid statement: '{name}' is not a valid name in '{keyword}'", token
                )

        if item_name == index_name:
            raise StatementError(
                f"Invalid statement: item and index share the name '{item_name}' in '{keyword}'", token
            )

        return item_name, index_name, collection

    def _build_switch(self, block: OpenBlock) -> SwitchNode:
        case = self.table.keyword(BlockFamily.SWITCH, StatementRole.BRANCH)

        default: Optional[TemplateAST] = None
        if block.branch is not None and block.branch.name == case:
            block.close_branch()
        else:
            # Ветка default либо тело switch без единого case
            default = self._subtree(block.body)

        cases = tuple(
            SwitchCase(value=prepare_source(token.value), body=self._subtree(body))
            for token, body in block.branches
        )
        return SwitchNode(subject=prepare_source(block.opener.value), cases=cases, default=default)


def parse_template(tokens: List[Token], statements: Optional[Statements] = None) -> TemplateAST:
    """
    Удобная функция для сборки AST из токенов.

    Args:
        tokens: Токены от лексера
        statements: Ключевые слова инструкций (по умолчанию стандартные)

    Returns:
        AST шаблона

    Raises:
        StatementError: При ошибке блочной структуры
    """
    ast = BlockAssembler(tokens, StatementTable(statements or Statements())).parse()
    logger.debug("Assembled %d top-level nodes from %d tokens", len(ast), len(tokens))
    return ast


__all__ = ["BlockAssembler", "OpenBlock", "parse_template", "DEFAULT_INDEX_NAME"]
