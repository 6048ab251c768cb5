"""
Token definitions for the ToyC lexer.

The language only has a handful of token kinds:
- End of input
- The `def` and `extern` keywords
- Identifiers and numeric literals
- Single-character punctuation (operators, parentheses, comma, ...)

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Dict


class TokenType(Enum):
    """Enumeration of all token types in ToyC."""

    EOF = auto()                    # End of input (repeats forever once reached)

    # Keywords
    DEF = auto()                    # def
    EXTERN = auto()                 # extern

    # Primary
    IDENTIFIER = auto()             # foo, x1
    NUMBER = auto()                 # 42, 3.5 (truncated to an integer)

    # Anything else is a single character: + - * < ( ) , ; ...
    CHAR = auto()


# Keyword spellings
KEYWORDS: Dict[str, TokenType] = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
}


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and debugging information.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the ToyC language.

    Contains the token type, lexeme (raw text), semantic value
    and source location.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # int for NUMBER, name for IDENTIFIER
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in (TokenType.DEF, TokenType.EXTERN)

    def is_char(self, char: str) -> bool:
        """Check if this is the punctuation token for `char`."""
        return self.type == TokenType.CHAR and self.lexeme == char

    def describe(self) -> str:
        """Human readable description for diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        return f"'{self.lexeme}'"
