from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .config.load import load_context, load_options
from .config.model import TemplateOptions
from .engine import TextTemplate
from .errors import TemplateUserError
from .template.nodes import format_ast_tree
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="textmpl",
        description="Text templates with expressions, if/foreach/switch blocks",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--debug", action="store_true", help="отладочный вывод в stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для render/check
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument("template", help="путь к файлу шаблона или - для чтения из stdin")
        sp.add_argument(
            "--config",
            metavar="FILE",
            help="YAML с опциями: delimiters, statements, trim_result",
        )
        sp.add_argument(
            "--trim",
            action="store_true",
            help="срезать пробелы по краям строк и переводы строк (trim_result)",
        )

    sp_render = sub.add_parser("render", help="Отрендерить шаблон в stdout")
    add_common(sp_render)
    sp_render.add_argument(
        "--context",
        metavar="FILE",
        help="YAML или JSON с контекстом рендеринга",
    )

    sp_check = sub.add_parser("check", help="Скомпилировать шаблон и вывести дерево узлов")
    add_common(sp_check)

    return p


def _setup_logging(debug: bool) -> None:
    level = logging.DEBUG if debug or os.environ.get("TEXTMPL_DEBUG") else logging.WARNING
    logger = logging.getLogger("textmpl")
    logger.setLevel(level)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(h)


def _read_template(arg: str) -> str:
    """Читает шаблон из файла или из stdin для '-'."""
    if arg == "-":
        return sys.stdin.read()

    path = Path(arg)
    if not path.is_file():
        raise TemplateUserError(f"Template file not found: {path}")
    return path.read_text(encoding="utf-8")


def _options(ns: argparse.Namespace) -> TemplateOptions:
    config: Optional[str] = getattr(ns, "config", None)
    if config and not Path(config).is_file():
        raise TemplateUserError(f"Config file not found: {config}")

    options = load_options(Path(config) if config else None)
    if ns.trim and not options.trim_result:
        options = replace(options, trim_result=True)
    return options


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.debug)

    try:
        template = TextTemplate(_read_template(ns.template), _options(ns))

        if ns.cmd == "render":
            context = load_context(Path(ns.context)) if ns.context else {}
            sys.stdout.write(template.render(context))
            return 0

        if ns.cmd == "check":
            sys.stdout.write(format_ast_tree(template.nodes or []) + "\n")
            return 0

    except TemplateUserError as e:
        sys.stderr.write(f"error: {str(e).rstrip()}\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
