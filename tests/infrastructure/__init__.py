"""
Unified test infrastructure for textmpl.

Modules:
- file_utils: Utilities for creating files and directories
- cli_utils: Running the CLI in a subprocess
- templating_utils: Compiling templates and observing expression evaluation
"""

from .cli_utils import run_cli
from .file_utils import write
from .templating_utils import RecordingEvaluator, compile_ast

__all__ = [
    # File utilities
    "write",

    # CLI utilities
    "run_cli",

    # Templating utilities
    "compile_ast", "RecordingEvaluator",
]
