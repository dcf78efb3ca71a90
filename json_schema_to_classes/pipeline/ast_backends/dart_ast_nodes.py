"""
Dart AST node definitions.

These nodes represent the structure of Dart source files for code generation.
They are built by the Dart backend and serialized through Jinja2 templates.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DartNode:
    """Base class for all Dart AST nodes."""

    pass


@dataclass
class DartAnnotation(DartNode):
    """Represents a Dart annotation (e.g., @Default(true))."""

    name: str = ""
    arguments: list[str] | None = None

    def to_string(self) -> str:
        """Convert to annotation string."""
        if self.arguments is None:
            return f"@{self.name}"
        return f"@{self.name}({', '.join(self.arguments)})"


@dataclass
class DartParameter(DartNode):
    """Represents a named constructor parameter."""

    name: str = ""
    type_name: str = ""
    required: bool = False
    nullable: bool = False

    # "this.name" initializing formal (plain classes)
    initializing: bool = False

    annotations: list[DartAnnotation] = field(default_factory=list)
    comment: list[str] = field(default_factory=list)

    def to_string(self) -> str:
        parts = [annotation.to_string() for annotation in self.annotations]
        if self.required:
            parts.append("required")
        if self.initializing:
            parts.append(f"this.{self.name}")
        else:
            mark = "?" if self.nullable and self.type_name != "dynamic" else ""
            parts.append(f"{self.type_name}{mark} {self.name}")
        return " ".join(parts)


@dataclass
class DartField(DartNode):
    """Represents a final class field."""

    name: str = ""
    type_name: str = ""
    comment: list[str] = field(default_factory=list)


@dataclass
class DartConstructor(DartNode):
    """Represents a constructor (plain, named, factory, or redirecting)."""

    class_name: str = ""
    name: str | None = None
    is_const: bool = False
    is_factory: bool = False
    parameters: list[DartParameter] = field(default_factory=list)
    redirect: str | None = None
    annotations: list[DartAnnotation] = field(default_factory=list)

    def head(self) -> str:
        parts = []
        if self.is_const:
            parts.append("const")
        if self.is_factory:
            parts.append("factory")
        parts.append(f"{self.class_name}.{self.name}" if self.name else self.class_name)
        return " ".join(parts)

    def tail(self) -> str:
        return f" = {self.redirect}" if self.redirect else ""


@dataclass
class DartMethod(DartNode):
    """Represents a method as pre-formatted lines, relative to the class body."""

    name: str = ""
    lines: list[str] = field(default_factory=list)


@dataclass
class DartClass(DartNode):
    """Represents a class declaration."""

    name: str = ""
    comment: list[str] = field(default_factory=list)
    annotations: list[DartAnnotation] = field(default_factory=list)
    mixins: list[str] = field(default_factory=list)
    fields: list[DartField] = field(default_factory=list)
    constructors: list[DartConstructor] = field(default_factory=list)
    methods: list[DartMethod] = field(default_factory=list)


@dataclass
class DartFile(DartNode):
    """Represents a complete Dart source file."""

    generation_comment: str = ""
    package_imports: list[str] = field(default_factory=list)
    model_imports: list[str] = field(default_factory=list)
    parts: list[str] = field(default_factory=list)
    classes: list[DartClass] = field(default_factory=list)
