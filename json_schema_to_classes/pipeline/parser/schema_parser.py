"""
JSON Schema parser that builds the model IR.

Phase 1 of the pipeline: recognize the shape of a schema document
(conditional schema, multi-model container, or single schema) and turn
every recognized subtree into a Model. Unrecognized subtrees contribute
no models.
"""

from __future__ import annotations

import logging
from typing import Any

from ..analyzer.ir_nodes import Field, Model, Schema
from ..analyzer.name_resolver import NameFormatter
from ..analyzer.type_resolver import TypeResolver
from ..config import CodeGeneratorConfig
from .conditional import ConditionalSchemaSplitter

logger = logging.getLogger(__name__)

METADATA_KEYS = ("title", "description", "$id")


class SchemaParser:
    """Parses JSON Schema documents into a Schema IR."""

    def __init__(self, config: CodeGeneratorConfig | None = None):
        self.config = config or CodeGeneratorConfig()
        self.naming = self.config.naming
        self.name_formatter = NameFormatter(self.naming)
        self.type_resolver = TypeResolver(self.name_formatter)
        self.conditional_splitter = ConditionalSchemaSplitter(self)

    def parse(self, document: Any) -> Schema:
        """
        Parse a decoded JSON Schema document.

        Args:
            document: The decoded JSON value

        Returns:
            Schema with the models in declaration order

        Raises:
            SchemaError: On structural errors; no partial Schema is returned
        """
        if not isinstance(document, dict):
            logger.debug("Schema document is not an object, no models produced")
            return Schema()

        version = self._read_version(document)
        metadata = self._read_metadata(document)

        if self.conditional_splitter.matches(document):
            logger.debug("Parsing document as a conditional schema")
            models = self.conditional_splitter.split(document)
            return Schema(models=models, version=version, metadata=metadata)

        models = self._parse_container(document)

        # Single-schema fallback
        if not models and "properties" in document:
            name = document.get("title") or self.naming.root_model_name
            logger.debug("Parsing document as a single schema named %s", name)
            models.append(self.parse_model(name, document))

        return Schema(models=models, version=version, metadata=metadata)

    def _read_version(self, document: dict[str, Any]) -> str | None:
        version = document.get("$schema")
        return version if isinstance(version, str) else None

    def _read_metadata(self, document: dict[str, Any]) -> dict[str, Any] | None:
        metadata = {key: document[key] for key in METADATA_KEYS if key in document}
        return metadata or None

    def _parse_container(self, document: dict[str, Any]) -> list[Model]:
        """Parse every top-level entry that holds a model."""
        models: list[Model] = []
        for name, value in document.items():
            if not isinstance(value, dict):
                continue

            if "schema" in value:
                schema = value["schema"]
                if isinstance(schema, dict) and "properties" in schema:
                    description = value.get("description")
                    models.append(self.parse_model(name, schema, description if isinstance(description, str) else None))
                else:
                    logger.debug("Skipping %s: its schema has no properties", name)
            elif "properties" in value:
                models.append(self.parse_model(name, value))
            elif "definitions" in value:
                definitions = value["definitions"]
                if not isinstance(definitions, dict):
                    logger.warning("Skipping %s: definitions is not an object", name)
                    continue
                for def_name, def_value in definitions.items():
                    if not isinstance(def_value, dict):
                        logger.warning("Skipping definition %s_%s: not an object", name, def_name)
                        continue
                    models.append(self.parse_model(f"{name}_{def_name}", def_value))
        return models

    def parse_model(self, name: str, node: dict[str, Any], description: str | None = None) -> Model:
        """
        Parse one model.

        Args:
            name: Raw model name (formatted here)
            node: Schema holding ``properties``
            description: Explicit description, defaults to the node's own

        Returns:
            The parsed Model
        """
        model_name = self.name_formatter.format_class_name(name)
        path = f"#/{name}"

        properties = node.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        required = self.required_list(node)

        fields = [
            self.parse_field(prop_name, properties[prop_name], prop_name not in required, f"{path}/properties/{prop_name}")
            for prop_name in self.ordered_property_names(node, properties)
        ]

        if description is None:
            node_description = node.get("description")
            description = node_description if isinstance(node_description, str) else None

        return Model(name=model_name, fields=fields, description=description)

    def parse_field(self, name: str, node: Any, is_nullable: bool, path: str) -> Field:
        description = node.get("description") if isinstance(node, dict) else None
        return Field(
            name=name,
            type=self.type_resolver.resolve(node, path),
            is_nullable=is_nullable,
            description=description if isinstance(description, str) else None,
        )

    def ordered_property_names(self, node: dict[str, Any], properties: dict[str, Any]) -> list[str]:
        """Explicit property order first, then the remaining declared properties."""
        order = node.get(self.naming.property_order_key)
        names: list[str] = []
        if isinstance(order, list):
            for prop_name in order:
                if prop_name in properties and prop_name not in names:
                    names.append(prop_name)
        for prop_name in properties:
            if prop_name not in names:
                names.append(prop_name)
        return names

    @staticmethod
    def required_list(node: dict[str, Any]) -> list[str]:
        """The node's ``required`` list; any other shape counts as empty."""
        required = node.get("required")
        if not isinstance(required, list):
            return []
        return [name for name in required if isinstance(name, str)]
