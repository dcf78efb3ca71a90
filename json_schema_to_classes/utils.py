"""
Utility functions for JSON Schema to class generation.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(_normalize_separators(text))


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "isPriority" -> "IsPriority"
        "task-params" -> "TaskParams"
        "first 3 rows" -> "First3Rows"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    return "".join(word.capitalize() for word in _split_into_words(text) if word)


def pascal_to_snake_case(text: str) -> str:
    """Convert PascalCase or camelCase text to snake_case.

    Examples:
        "TaskAdapterParams" -> "task_adapter_params"
        "FooBar" -> "foo_bar"
    """
    return "_".join(word.lower() for word in _split_into_words(text) if word)


def lower_camel_case(text: str) -> str:
    """Convert text to lowerCamelCase ("default_task" -> "defaultTask")."""
    pascal = snake_to_pascal_case(text)
    return pascal[:1].lower() + pascal[1:]
