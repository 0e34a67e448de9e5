"""
Таблица инструкций шаблона.

Сопоставляет настроенные ключевые слова с семейством блока
(условие, цикл, ветвление) и ролью ключевого слова внутри семейства.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Optional

from ..config.model import Statements


class BlockFamily(enum.Enum):
    """Семейства блочных инструкций."""
    CONDITIONAL = "conditional"  # if / elseif / else / endif
    ITERATION = "iteration"      # foreach / endforeach
    SWITCH = "switch"            # switch / case / default / endswitch


class StatementRole(enum.Enum):
    """Роль ключевого слова внутри своего семейства."""
    OPEN = "open"
    BRANCH = "branch"            # elseif, case
    LAST_BRANCH = "last_branch"  # else, default: только последней веткой
    CLOSE = "close"


@dataclass(frozen=True)
class StatementInfo:
    family: BlockFamily
    role: StatementRole


class StatementTable:
    """
    Фиксированная таблица ключевых слов, построенная из конфигурации.

    Помимо прямого отображения ключевое слово -> (семейство, роль) хранит
    обратное отображение для формирования сообщений об ошибках.
    """

    def __init__(self, statements: Statements):
        self.statements = statements

        layout = {
            BlockFamily.CONDITIONAL: {
                StatementRole.OPEN: statements.if_,
                StatementRole.BRANCH: statements.elseif,
                StatementRole.LAST_BRANCH: statements.else_,
                StatementRole.CLOSE: statements.endif,
            },
            BlockFamily.ITERATION: {
                StatementRole.OPEN: statements.foreach,
                StatementRole.CLOSE: statements.endforeach,
            },
            BlockFamily.SWITCH: {
                StatementRole.OPEN: statements.switch,
                StatementRole.BRANCH: statements.case,
                StatementRole.LAST_BRANCH: statements.default,
                StatementRole.CLOSE: statements.endswitch,
            },
        }

        self._keywords: Dict[BlockFamily, Dict[StatementRole, str]] = layout
        self._lookup: Dict[str, StatementInfo] = {
            keyword: StatementInfo(family, role)
            for family, roles in layout.items()
            for role, keyword in roles.items()
        }

    def lookup(self, name: str) -> Optional[StatementInfo]:
        """Возвращает семейство и роль ключевого слова или None для неизвестного."""
        return self._lookup.get(name)

    def keyword(self, family: BlockFamily, role: StatementRole) -> str:
        """Возвращает настроенное ключевое слово для пары (семейство, роль)."""
        return self._keywords[family][role]


__all__ = ["BlockFamily", "StatementRole", "StatementInfo", "StatementTable"]
