"""
Область видимости тела цикла.
"""

from __future__ import annotations

from itertools import chain
from typing import Dict, Iterator, MutableMapping


class LoopScope(MutableMapping[str, object]):
    """
    Производное представление контекста для тела цикла.

    Имена элемента и индекса затеняют одноимённые переменные внешнего
    контекста. Запись любых других имён уходит во внешний контекст, поэтому
    состояние, накопленное выражениями, видно последующим итерациям и узлам
    после цикла.
    """

    def __init__(self, parent: MutableMapping[str, object], bindings: Dict[str, object]):
        self.parent = parent
        self.bindings = bindings

    def __getitem__(self, key: str) -> object:
        if key in self.bindings:
            return self.bindings[key]
        return self.parent[key]

    def __setitem__(self, key: str, value: object) -> None:
        if key in self.bindings:
            self.bindings[key] = value
        else:
            self.parent[key] = value

    def __delitem__(self, key: str) -> None:
        if key in self.bindings:
            del self.bindings[key]
        else:
            del self.parent[key]

    def __iter__(self) -> Iterator[str]:
        seen = set(self.bindings)
        return chain(self.bindings, (key for key in self.parent if key not in seen))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __contains__(self, key: object) -> bool:
        return key in self.bindings or key in self.parent

    def __repr__(self) -> str:
        return f"LoopScope({self.bindings!r}, parent={self.parent!r})"


__all__ = ["LoopScope"]
