"""
Atomic output writer for generated code.

Writes are atomic so an interrupted run never leaves a half-written file:
the content goes to a temporary file in the target directory, is validated,
then replaces the target.
"""

from __future__ import annotations

import ast
import logging
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .errors import OutputError

logger = logging.getLogger(__name__)

WILDCARD = "*"


@dataclass
class WriteReport:
    """Outcome of writing one output unit."""

    path: Path
    ok: bool
    error: str | None = None


def is_split_output(output: str | Path) -> bool:
    """True if the output path template asks for one file per model."""
    return WILDCARD in str(output)


def output_path(output: str | Path, stem: str) -> Path:
    """Replace every wildcard of the output template with a model file stem."""
    return Path(str(output).replace(WILDCARD, stem))


class OutputWriter:
    """Writes rendered units to disk, atomically and with validation."""

    def __init__(self, validate_python: Callable[[str], None] | None = None):
        """
        Initialize the writer.

        Args:
            validate_python: Optional validation function for Python code
        """
        self._validate_python = validate_python or self._default_validate_python

    def write(self, path: Path, content: str, language: str, validate: bool = True) -> None:
        """
        Write content to a file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("dart" or "python")
            validate: Whether to validate before finalizing

        Raises:
            OutputError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory keeps the final rename on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            if validate and language == "python":
                self._validate_python(content)
            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def write_all(self, files: dict[str, str], output: str | Path, language: str) -> list[WriteReport]:
        """
        Write every rendered unit and report per-file success.

        Args:
            files: Unit name (file stem in split mode) to content
            output: Output path, with a wildcard replaced by each stem in split mode
            language: Language of the content

        Returns:
            One WriteReport per unit, in order
        """
        reports: list[WriteReport] = []
        for stem, content in files.items():
            path = output_path(output, stem) if is_split_output(output) else Path(output)
            try:
                self.write(path, content, language)
            except (OSError, OutputError) as e:
                logger.error("Failed to write %s: %s", path, e)
                reports.append(WriteReport(path=path, ok=False, error=str(e)))
            else:
                logger.info("Wrote %s", path)
                reports.append(WriteReport(path=path, ok=True))
        return reports

    def _default_validate_python(self, content: str) -> None:
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise OutputError(f"Generated Python code is not valid: {e}") from e
