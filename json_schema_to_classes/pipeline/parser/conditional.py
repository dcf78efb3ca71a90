"""
Decomposition of boolean-discriminated ``if/then/else`` schemas.

A conditional schema becomes an abstract base model holding the shared
properties, plus one concrete variant per branch holding the properties
that branch requires.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...utils import snake_to_pascal_case
from ..analyzer.ir_nodes import Model
from ..errors import AmbiguousDiscriminatorError

if TYPE_CHECKING:
    from .schema_parser import SchemaParser

logger = logging.getLogger(__name__)

CONDITIONAL_KEYS = ("if", "then", "else")


class ConditionalSchemaSplitter:
    """Splits a conditional schema into a base model and two variants."""

    def __init__(self, parser: SchemaParser):
        self.parser = parser
        self.config = parser.config
        self.naming = parser.naming

    def matches(self, document: dict[str, Any]) -> bool:
        return all(key in document for key in CONDITIONAL_KEYS)

    def discriminator_key(self, document: dict[str, Any]) -> str:
        """
        The property named by ``if.properties``.

        Raises:
            AmbiguousDiscriminatorError: Unless exactly one key is declared
                (or at least one with the "first" policy)
        """
        condition = document.get("if")
        properties = condition.get("properties") if isinstance(condition, dict) else None
        keys = list(properties) if isinstance(properties, dict) else []

        if not keys:
            raise AmbiguousDiscriminatorError("Conditional schema has no discriminator property under if.properties")
        if len(keys) > 1:
            if self.config.conditional_discriminator_policy != "first":
                raise AmbiguousDiscriminatorError(f"Conditional schema declares several discriminator properties: {', '.join(keys)}")
            logger.warning("Several discriminator properties (%s), using %s", ", ".join(keys), keys[0])
        return keys[0]

    def discriminator_value(self, document: dict[str, Any], key: str) -> bool:
        value = document["if"]["properties"][key]
        const = value.get("const") if isinstance(value, dict) else None
        if not isinstance(const, bool):
            raise AmbiguousDiscriminatorError(f"Discriminator {key} must have a boolean const, got {const!r}")
        return const

    def split(self, document: dict[str, Any]) -> list[Model]:
        """
        Decompose the conditional schema.

        Args:
            document: A document with ``if``, ``then`` and ``else``

        Returns:
            [base, then-variant, else-variant], or [] when the document lacks
            ``properties``, ``title`` or ``required``
        """
        key = self.discriminator_key(document)
        then_prefix = snake_to_pascal_case(key[self.naming.discriminator_prefix_length :])
        else_prefix = self.naming.else_prefix

        base_name = document.get("title") or self.naming.default_base_name
        formatter = self.parser.name_formatter
        base_class_name = formatter.format_class_name(base_name)
        then_class_name = formatter.format_class_name(then_prefix + base_name)
        else_class_name = formatter.format_class_name(else_prefix + base_name)

        then_value = self.discriminator_value(document, key)
        union_cases = {
            _bool_key(then_value): then_class_name,
            _bool_key(not then_value): else_class_name,
        }

        if "properties" not in document or "title" not in document:
            logger.debug("Conditional schema without properties or title, no models produced")
            return []
        if "required" not in document and self.config.conditional_requires_required:
            logger.warning("Conditional schema %s has no required list, no models produced", base_name)
            return []

        base_properties = dict(document["properties"]) if isinstance(document["properties"], dict) else {}
        base_required = self.parser.required_list(document)

        then_node = self._move_required(base_properties, base_required, document["then"])
        else_node = self._move_required(base_properties, base_required, document["else"])

        base_node = dict(document)
        base_node["properties"] = base_properties
        base_node["required"] = base_required

        base = self.parser.parse_model(base_name, base_node)
        base.is_abstract = True
        base.union_key = key
        base.union_cases = union_cases

        then_model = self.parser.parse_model(then_prefix + base_name, then_node)
        then_model.parent_class = base_class_name

        else_model = self.parser.parse_model(else_prefix + base_name, else_node)
        else_model.parent_class = base_class_name

        logger.debug("Split %s into %s and %s on %s", base_class_name, then_class_name, else_class_name, key)
        return [base, then_model, else_model]

    def _move_required(self, base_properties: dict[str, Any], base_required: list[str], branch: Any) -> dict[str, Any]:
        """Move the properties a branch requires out of the base candidate set."""
        branch_required = self.parser.required_list(branch) if isinstance(branch, dict) else []
        properties: dict[str, Any] = {}
        required: list[str] = []
        for prop_name in list(base_properties):
            if prop_name in branch_required:
                properties[prop_name] = base_properties.pop(prop_name)
                required.append(prop_name)
                if prop_name in base_required:
                    base_required.remove(prop_name)
        return {"properties": properties, "required": required}


def _bool_key(value: bool) -> str:
    return "true" if value else "false"
