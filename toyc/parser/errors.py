"""
Error handling for the ToyC parser.

Syntax errors carry a `Diagnostic` with the offending token's location.
The parser wraps them in a failed `Result` rather than raising them.

Author: xwest
"""

from typing import Optional, List

from ..lexer.tokens import Token
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Syntax error found by the parser.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=token.location if token is not None else None,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    def __str__(self) -> str:
        return str(self.diagnostic)


PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Expected token not found",
    "P003": "Duplicate parameter name",
    "P004": "Invalid numeric literal",
}


def create_unexpected_token_error(expected: str, found: Token) -> ParseError:
    """Create an error for a token that cannot start the expected construct."""
    return ParseError(
        message=f"unknown token when expecting {expected}",
        token=found,
        code="P001",
        help_text=f"found {found.describe()}"
    )


def create_missing_token_error(message: str, expected: str, found: Token) -> ParseError:
    """Create an error for a missing delimiter or name."""
    return ParseError(
        message=message,
        token=found,
        code="P002",
        help_text=f"found {found.describe()}",
        suggestions=[f"Add '{expected}'"] if len(expected) == 1 else None
    )


def create_duplicate_parameter_error(name: str, function: str, token: Token) -> ParseError:
    """Create an error for a parameter name used twice in one prototype."""
    return ParseError(
        message=f"duplicate parameter name '{name}' in prototype of '{function}'",
        token=token,
        code="P003",
        help_text="Each parameter of a function must have a distinct name."
    )


def create_invalid_number_error(token: Token) -> ParseError:
    """Create an error for a malformed numeric literal such as `1.2.3`."""
    return ParseError(
        message=f"invalid numeric literal '{token.lexeme}'",
        token=token,
        code="P004",
        help_text="Numeric literals are decimal with at most one '.'"
    )
