"""
Post-processing formatters for rendered output units.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import CodeGeneratorConfig, FormatterConfig


class Formatter(ABC):
    """Rewrites the source of one rendered unit of a given target language."""

    LANGUAGE = ""

    @classmethod
    def applies_to(cls, config: CodeGeneratorConfig) -> bool:
        """Whether this formatter runs on output generated with ``config``."""
        return config.formatter.enabled and config.language == cls.LANGUAGE

    @abstractmethod
    def format(self, code: str, config: FormatterConfig) -> str:
        """Return ``code`` formatted, or unchanged when the tool rejects it."""

    @abstractmethod
    def is_available(self) -> bool:
        pass
