"""
Optional post-processing formatters for generated code.
"""

from __future__ import annotations

from ..config import CodeGeneratorConfig
from .base import Formatter
from .black_formatter import BlackFormatter

FORMATTERS: tuple[type[Formatter], ...] = (BlackFormatter,)


def formatter_for(config: CodeGeneratorConfig) -> Formatter | None:
    """The formatter to run on rendered units, if any is enabled for the language."""
    for formatter_cls in FORMATTERS:
        if formatter_cls.applies_to(config):
            return formatter_cls()
    return None


__all__ = ["Formatter", "BlackFormatter", "FORMATTERS", "formatter_for"]
