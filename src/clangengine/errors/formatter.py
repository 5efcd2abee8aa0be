"""Error detail formatting service.

Centralizes error output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import ErrorDetail

__all__ = [
    "ErrorFormatter",
    "OutputFormat",
]

# C0 controls except tab, plus DEL. libclang echoes user paths and compiler
# arguments into messages, so these are escaped before reaching logs.
_CONTROL_TRANSLATION = {code: f"\\x{code:02x}" for code in (*range(0x09), *range(0x0A, 0x20), 0x7F)}


class OutputFormat(StrEnum):
    """Output format options for error formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class ErrorFormatter:
    """Error formatting service.

    Attributes:
        output_format: Output style (rust, simple, json)
        sanitize: Truncate content to prevent information leakage
        color: Enable ANSI color codes (for terminal output)
        max_content_length: Maximum content length when sanitizing

    Example:
        >>> formatter = ErrorFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(ErrorTemplate.engine_unavailable()))
        ENGINE_UNAVAILABLE: An EngineToken is already in use in this process
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100

    def format(self, detail: ErrorDetail) -> str:
        """Format a single error detail.

        Args:
            detail: ErrorDetail to format

        Returns:
            Formatted error string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(detail)
            case OutputFormat.SIMPLE:
                return self._format_simple(detail)
            case OutputFormat.JSON:
                return self._format_json(detail)

    def format_all(self, details: Iterable[ErrorDetail]) -> str:
        """Format multiple error details separated by blank lines."""
        return "\n\n".join(self.format(d) for d in details)

    def _format_rust(self, detail: ErrorDetail) -> str:
        """Format detail in Rust compiler style.

        Example output:
            error[SAVE_ERRORS]: Failed to save translation unit to 'out.ast'
              --> out.ast
              = kind: errors
              = status: 3
              = help: Fix the error diagnostics of the translation unit first
        """
        label = "\033[1;31merror\033[0m" if self.color else "error"
        parts = [f"{label}[{detail.code.name}]: {self._clean(detail.message)}"]

        if detail.path:
            parts.append(f"  --> {self._clean(detail.path)}")

        if detail.kind:
            parts.append(f"  = kind: {detail.kind}")

        if detail.raw_status is not None:
            parts.append(f"  = status: {detail.raw_status}")

        if detail.hint:
            parts.append(f"  = help: {self._clean(detail.hint)}")

        return "\n".join(parts)

    def _format_simple(self, detail: ErrorDetail) -> str:
        """Format detail in single-line format.

        Example output:
            SOURCE_CRASH: Failed to parse 'main.c': libclang crashed
        """
        return f"{detail.code.name}: {self._clean(detail.message)}"

    def _format_json(self, detail: ErrorDetail) -> str:
        """Format detail as JSON.

        Example output:
            {"code": "SOURCE_CRASH", "code_value": 2002, "category": "source", ...}
        """
        data: dict[str, str | int | None] = {
            "code": detail.code.name,
            "code_value": detail.code.value,
            "category": str(detail.code.category),
            "message": self._maybe_sanitize(detail.message),
        }

        if detail.path:
            data["path"] = detail.path

        if detail.kind:
            data["kind"] = detail.kind

        if detail.raw_status is not None:
            data["raw_status"] = detail.raw_status

        if detail.hint:
            data["hint"] = self._maybe_sanitize(detail.hint)

        return json.dumps(data, ensure_ascii=False)

    def _clean(self, text: str) -> str:
        return self._maybe_sanitize(text).translate(_CONTROL_TRANSLATION)

    def _maybe_sanitize(self, text: str) -> str:
        """Truncate text if sanitization is enabled.

        Args:
            text: Text to possibly truncate

        Returns:
            Original or truncated text
        """
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
