"""
Утилиты для создания файлов в тестах.
"""

from __future__ import annotations

from pathlib import Path


def write(p: Path, text: str) -> Path:
    """
    Записывает текст в файл, создавая родительские директории при необходимости.

    Args:
        p: Путь к файлу
        text: Содержимое для записи

    Returns:
        Путь к созданному файлу
    """
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


__all__ = ["write"]
