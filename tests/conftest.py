import textwrap
from pathlib import Path

import pytest

from tests.infrastructure import RecordingEvaluator, write


@pytest.fixture
def recording_evaluator() -> RecordingEvaluator:
    return RecordingEvaluator()


@pytest.fixture
def tmpproj(tmp_path: Path):
    """Минимальный набор файлов: шаблон, контекст и опции с нестандартными ключевыми словами."""
    root = tmp_path
    write(
        root / "page.tpl",
        "{%IF items%}{%FOREACH item in items%}{{item}};{%ENDFOREACH%}{%ELSE%}empty{%ENDIF%}",
    )
    write(
        root / "context.yaml",
        textwrap.dedent("""
        items:
          - a
          - b
        """).strip() + "\n",
    )
    write(
        root / "options.yaml",
        textwrap.dedent("""
        statements:
          if: IF
          elseif: ELSEIF
          else: ELSE
          endif: ENDIF
          foreach: FOREACH
          endforeach: ENDFOREACH
        """).strip() + "\n",
    )
    return root
