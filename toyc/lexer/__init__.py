"""
ToyC Lexer Package

Implements the lazy, one-character-lookahead tokenizer for the ToyC language.

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string
from .errors import Diagnostic, LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "Diagnostic",
    "LexerError",
    "tokenize_string",
]
