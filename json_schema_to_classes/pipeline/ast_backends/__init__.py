"""
AST backends - render the model IR as source code.

Each backend builds language-native declarations (custom Dart nodes
serialized through Jinja2 templates, or Python ``ast`` nodes) and turns
them into text.
"""

from .base import AstBackend
from .dart_ast_backend import DartAstBackend
from .python_ast_backend import PythonAstBackend

BACKENDS: dict[str, type[AstBackend]] = {
    "dart": DartAstBackend,
    "python": PythonAstBackend,
}

__all__ = ["AstBackend", "BACKENDS", "DartAstBackend", "PythonAstBackend"]
