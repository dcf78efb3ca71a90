"""
Configuration for the code generator pipeline.

Naming conventions, conditional-schema policies, render options and
formatter/output settings are grouped here so they can be loaded from a
JSON config file and passed through every phase.
"""

from __future__ import annotations

from dataclasses import dataclass, field

SUPPORTED_LANGUAGES = ("dart", "python")


@dataclass
class NamingConfig:
    """Naming conventions shared by the parser, the rename pass and the backends."""

    # Class-name suffix rule: "...Params" -> "...AdapterParams"
    params_suffix: str = "Params"
    params_replacement: str = "AdapterParams"

    # File-stem suffix rules, tried in order
    file_stem_suffixes: dict[str, str] = field(
        default_factory=lambda: {
            "_adapter_params": "_adapter",
            "_params": "_adapter",
        }
    )

    # Number of leading characters stripped from the discriminator key ("isX" -> "X")
    discriminator_prefix_length: int = 2

    # Prefix of the "else" variant of a conditional schema
    else_prefix: str = "Default"

    # Name used for a conditional schema without a title
    default_base_name: str = "BaseClass"

    # Name used for a single root schema without a title
    root_model_name: str = "Root"

    # Keyword holding an explicit property order
    property_order_key: str = "propertyOrder"


@dataclass
class FormatterConfig:
    """Configuration for post-processing formatters (python output only)."""

    # Whether formatting is enabled
    enabled: bool = False

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312")
    target_version: str = "py312"

    # Whether to use string normalization (convert single quotes to double)
    string_normalization: bool = True

    magic_trailing_comma: bool = True


@dataclass
class CodeGeneratorConfig:
    """Configuration options for parsing and code generation."""

    # Target language: "dart" or "python"
    language: str = "dart"

    # Emit tagged-variant (Freezed / dataclasses_json) style, or plain classes
    generate_discriminated_union: bool = True

    # Emit (de)serialization routines
    include_serialization: bool = True

    # Add generation comment at top of each file
    add_generation_comment: bool = True

    # Use from __future__ import annotations (python)
    use_future_annotations: bool = True

    # Fail before rendering when a $ref points at no model of the schema
    validate_references: bool = False

    # "error": reject if.properties with != 1 key, "first": use the first key
    conditional_discriminator_policy: str = "error"

    # Conditional schemas without a top-level "required" produce no models
    conditional_requires_required: bool = True

    naming: NamingConfig = field(default_factory=NamingConfig)

    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    def __post_init__(self):
        if self.language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Language not supported: {self.language}")
        if self.conditional_discriminator_policy not in ("error", "first"):
            raise ValueError(f"Unknown conditional discriminator policy: {self.conditional_discriminator_policy}")

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "naming" and isinstance(v, dict):
                config.naming = NamingConfig(**v)
            elif k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif hasattr(config, k):
                setattr(config, k, v)
        config.__post_init__()
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "language": self.language,
            "generate_discriminated_union": self.generate_discriminated_union,
            "include_serialization": self.include_serialization,
            "add_generation_comment": self.add_generation_comment,
            "use_future_annotations": self.use_future_annotations,
            "validate_references": self.validate_references,
            "conditional_discriminator_policy": self.conditional_discriminator_policy,
            "conditional_requires_required": self.conditional_requires_required,
            "naming": {
                "params_suffix": self.naming.params_suffix,
                "params_replacement": self.naming.params_replacement,
                "file_stem_suffixes": dict(self.naming.file_stem_suffixes),
                "discriminator_prefix_length": self.naming.discriminator_prefix_length,
                "else_prefix": self.naming.else_prefix,
                "default_base_name": self.naming.default_base_name,
                "root_model_name": self.naming.root_model_name,
                "property_order_key": self.naming.property_order_key,
            },
            "formatter": {
                "enabled": self.formatter.enabled,
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
                "string_normalization": self.formatter.string_normalization,
                "magic_trailing_comma": self.formatter.magic_trailing_comma,
            },
        }
