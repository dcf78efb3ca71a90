"""
Exceptions raised by the pipeline.
"""

from __future__ import annotations


class SchemaError(Exception):
    """Base class for every error raised while loading, parsing or rendering a schema."""

    pass


class AmbiguousDiscriminatorError(SchemaError):
    """Raised when a conditional schema does not name exactly one boolean discriminator.

    This can happen when:
    - ``if.properties`` is empty or declares several properties
    - the discriminator ``const`` is missing or is not a boolean
    """

    pass


class MissingKeywordError(SchemaError):
    """Raised when a structural keyword is missing (e.g. an array without ``items``)."""

    def __init__(self, keyword: str, path: str):
        self.keyword = keyword
        self.path = path
        super().__init__(f"Missing '{keyword}' keyword at {path}")


class DanglingReferenceError(SchemaError):
    """Raised when ``$ref`` targets have no corresponding model in the schema."""

    def __init__(self, dangling: list[tuple[str, str, str]]):
        self.dangling = dangling
        details = ", ".join(f"{model}.{field} -> {target}" for model, field, target in dangling)
        super().__init__(f"Unresolved references: {details}")


class SchemaLoadError(SchemaError):
    """Raised when a schema cannot be read from a file or URL."""

    pass


class RenderError(SchemaError):
    """Raised when a model cannot be rendered."""

    def __init__(self, model_name: str, message: str):
        self.model_name = model_name
        super().__init__(f"Cannot render {model_name}: {message}")


class OutputError(SchemaError):
    """Raised when a generated file cannot be validated or written."""

    pass
