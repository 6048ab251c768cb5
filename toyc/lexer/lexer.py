"""
ToyC Lexer - turns a character stream into tokens on demand.

The lexer never reads ahead more than one character: it keeps the last
character it read and produces the next token only when asked, which lets
the driver work on an interactive stream (stdin) as well as on a string.

xwest
"""

import io
import logging
from typing import Iterator, List, TextIO, Union

from .tokens import Token, TokenType, SourceLocation, KEYWORDS
from .errors import LexerError, Diagnostic, create_invalid_number_error


logger = logging.getLogger(__name__)

# Only ASCII digits start or continue a numeric literal
DIGITS = frozenset("0123456789")


class Lexer:
    """
    ToyC lexical analyzer.

    Converts source text into a stream of tokens, one token per
    `next_token()` call.
    """

    def __init__(self, source: Union[str, TextIO], filename: str = "<stdin>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string or a readable text stream
            filename: Name of source file for error reporting
        """
        if isinstance(source, str):
            source = io.StringIO(source)
        self.stream = source
        self.filename = filename

        # One character of lookahead; a space forces the first read.
        self._last_char = " "
        self.line = 1
        self.column = 0
        self.pos = -1

        self.errors: List[LexerError] = []

    def next_token(self) -> Token:
        """Return the next token from the input."""
        while self._last_char and self._last_char.isspace():
            self._advance()

        location = self._location()

        if not self._last_char:
            return Token(TokenType.EOF, "", None, location)

        # identifier: [a-zA-Z][a-zA-Z0-9]*
        if self._is_identifier_start(self._last_char):
            chars = [self._last_char]
            self._advance()
            while self._last_char and self._is_identifier_continue(self._last_char):
                chars.append(self._last_char)
                self._advance()
            lexeme = "".join(chars)
            token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
            value = lexeme if token_type == TokenType.IDENTIFIER else None
            return Token(token_type, lexeme, value, location)

        # number: [0-9.]+
        if self._is_number_char(self._last_char):
            chars = []
            while self._last_char and self._is_number_char(self._last_char):
                chars.append(self._last_char)
                self._advance()
            lexeme = "".join(chars)
            return Token(TokenType.NUMBER, lexeme, self._number_value(lexeme, location), location)

        char = self._last_char
        self._advance()
        return Token(TokenType.CHAR, char, None, location)

    def tokenize(self) -> List[Token]:
        """
        Tokenize the rest of the input.

        Returns:
            List of tokens ending with a single EOF token
        """
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokenize())

    def _number_value(self, lexeme: str, location: SourceLocation):
        """Convert a numeric lexeme, truncating any fractional part."""
        if lexeme.count(".") > 1 or not any(c in DIGITS for c in lexeme):
            error = create_invalid_number_error(
                lexeme, location, "Expected digits with at most one decimal point"
            )
            self.errors.append(error)
            logger.error(error.diagnostic.short())
            return None
        whole = lexeme.split(".", 1)[0]
        return int(whole) if whole else 0

    def _advance(self):
        """Read one character, updating line/column."""
        if self._last_char == "\n":
            self.line += 1
            self.column = 0
        self._last_char = self.stream.read(1)
        if self._last_char:
            self.column += 1
            self.pos += 1

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    @staticmethod
    def _is_identifier_start(char: str) -> bool:
        return char.isascii() and char.isalpha()

    @staticmethod
    def _is_identifier_continue(char: str) -> bool:
        return char.isascii() and char.isalnum()

    @staticmethod
    def _is_number_char(char: str) -> bool:
        return char in DIGITS or char == "."

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0

    def get_diagnostics(self) -> List[Diagnostic]:
        """Get all diagnostics."""
        return [error.diagnostic for error in self.errors]


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Malformed literals do not raise; they come back as NUMBER tokens
    with a `None` value.
    """
    return Lexer(source, filename).tokenize()
