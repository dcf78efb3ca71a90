"""
Reference resolver for name-based model references.

References between models are plain names; this pass only checks that
every referenced name is declared by a model of the same schema.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..errors import DanglingReferenceError
from .ir_nodes import Schema

logger = logging.getLogger(__name__)


@dataclass
class ReferenceReport:
    """Result of a reference check."""

    # (model name, field name, referenced name)
    dangling: list[tuple[str, str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.dangling


class ReferenceResolver:
    """Checks references against the models of a schema."""

    def __init__(self, schema: Schema):
        self.schema = schema
        self._declared = set(schema.model_names())

    def is_declared(self, name: str) -> bool:
        return name in self._declared

    def find_dangling(self) -> ReferenceReport:
        """Collect every reference whose target is not declared."""
        report = ReferenceReport()
        for model in self.schema.models:
            for f in model.all_fields():
                for target in f.type.referenced_names():
                    if target not in self._declared:
                        logger.warning("Unresolved reference %s.%s -> %s", model.name, f.name, target)
                        report.dangling.append((model.name, f.name, target))
        return report

    def check(self) -> None:
        """
        Raise if the schema has unresolved references.

        Raises:
            DanglingReferenceError: Listing every unresolved reference
        """
        report = self.find_dangling()
        if not report.ok:
            raise DanglingReferenceError(report.dangling)
