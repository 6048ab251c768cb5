"""
Error handling for the ToyC lexer.

Provides diagnostics with source location information. The same
`Diagnostic` record is shared by the parser and the code generator so
every stage reports problems the same way.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass
from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """A compiler diagnostic (error, warning, info)."""
    message: str
    location: Optional[SourceLocation]
    severity: str  # "error", "warning", "info"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        if self.code:
            severity_prefix = f"{severity_prefix}[{self.code}]"
        result = f"{severity_prefix}: {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result

    def short(self) -> str:
        """One-line rendering: `file:line:col: error: message`."""
        prefix = f"{self.location}: " if self.location is not None else ""
        return f"{prefix}{self.severity}: {self.message}"


class LexerError(Exception):
    """
    Lexical error.

    Never raised across the pipeline; the lexer records it in its
    `errors` list and keeps producing tokens.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


ERROR_CODES = {
    "L003": "Invalid numeric literal",
}


def create_invalid_number_error(lexeme: str, location: SourceLocation, reason: str) -> LexerError:
    """Create an error for an invalid numeric literal."""
    return LexerError(
        message=f"Invalid numeric literal: '{lexeme}'",
        location=location,
        code="L003",
        help_text=reason,
        suggestions=["Numeric literals are decimal with at most one '.'"]
    )
