"""
ToyC Recursive Descent Parser

Builds the AST one top-level form at a time, pulling tokens from the
lexer on demand. Binary expressions are parsed with operator-precedence
climbing so `1+2*3` groups as `1+(2*3)` and `1-2-3` as `(1-2)-3`.

Every parse routine returns a `Result`; on failure the diagnostic is
logged, recorded in `Parser.errors` and handed back to the caller, who
must not build on it.

Author: xwest
"""

import logging
from enum import IntEnum
from typing import Dict, List, Union, TextIO

from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType
from ..result import Result
from .ast_nodes import (
    Expression, NumberLiteral, VariableReference, BinaryOperation, Call,
    Prototype, FunctionDefinition
)
from .errors import (
    ParseError, create_unexpected_token_error, create_missing_token_error,
    create_duplicate_parameter_error, create_invalid_number_error
)


logger = logging.getLogger(__name__)

# Name of the zero-argument wrapper synthesized around top-level expressions
ANONYMOUS_FUNCTION_NAME = "__anon_expr"


class Precedence(IntEnum):
    """Binary operator precedence levels."""
    NONE = -1           # not a binary operator
    COMPARISON = 10     # <
    TERM = 20           # +, -
    FACTOR = 40         # *


BINOP_PRECEDENCE: Dict[str, Precedence] = {
    "<": Precedence.COMPARISON,
    "+": Precedence.TERM,
    "-": Precedence.TERM,
    "*": Precedence.FACTOR,
}


class Parser:
    """
    ToyC parser.

    Holds exactly one token of lookahead (`current_token`).
    """

    def __init__(self, lexer: Union[Lexer, str, TextIO],
                 anonymous_name: str = ANONYMOUS_FUNCTION_NAME):
        """
        Initialize parser over a lexer.

        Args:
            lexer: Lexer to pull tokens from (a string or stream is wrapped)
            anonymous_name: Function name used for top-level expressions
        """
        if not isinstance(lexer, Lexer):
            lexer = Lexer(lexer)
        self.lexer = lexer
        self.anonymous_name = anonymous_name
        self.errors: List[ParseError] = []
        self.current_token: Token = self.lexer.next_token()

    def get_next_token(self) -> Token:
        """Consume the current token and read the next one."""
        self.current_token = self.lexer.next_token()
        return self.current_token

    # Top-level forms

    def parse_definition(self) -> Result[FunctionDefinition]:
        """definition ::= 'def' prototype expression"""
        def_token = self.current_token
        self.get_next_token()  # eat def

        proto = self.parse_prototype()
        if not proto:
            return proto

        body = self.parse_expression()
        if not body:
            return body

        return Result.ok(FunctionDefinition(proto.value, body.value, def_token.location))

    def parse_extern(self) -> Result[Prototype]:
        """external ::= 'extern' prototype"""
        self.get_next_token()  # eat extern
        return self.parse_prototype()

    def parse_top_level_expression(self) -> Result[FunctionDefinition]:
        """toplevelexpr ::= expression, wrapped in a zero-argument function"""
        location = self.current_token.location
        body = self.parse_expression()
        if not body:
            return body

        proto = Prototype(self.anonymous_name, [], location)
        return Result.ok(FunctionDefinition(proto, body.value, location))

    def parse_prototype(self) -> Result[Prototype]:
        """prototype ::= identifier '(' identifier* ')'"""
        name_token = self.current_token
        if name_token.type != TokenType.IDENTIFIER:
            return self._error(create_missing_token_error(
                "Expected function name in prototype", "identifier", name_token
            ))
        name = name_token.value

        if not self.get_next_token().is_char("("):
            return self._error(create_missing_token_error(
                "Expected '(' in prototype", "(", self.current_token
            ))

        parameters: List[str] = []
        while self.get_next_token().type == TokenType.IDENTIFIER:
            param = self.current_token.value
            if param in parameters:
                return self._error(create_duplicate_parameter_error(
                    param, name, self.current_token
                ))
            parameters.append(param)

        if not self.current_token.is_char(")"):
            return self._error(create_missing_token_error(
                "Expected ')' in prototype", ")", self.current_token
            ))

        self.get_next_token()  # eat ')'
        return Result.ok(Prototype(name, parameters, name_token.location))

    # Expressions

    def parse_expression(self) -> Result[Expression]:
        """expression ::= primary binoprhs"""
        lhs = self.parse_primary()
        if not lhs:
            return lhs
        return self.parse_binop_rhs(0, lhs.value)

    def parse_binop_rhs(self, min_precedence: int, lhs: Expression) -> Result[Expression]:
        """
        binoprhs ::= (binop primary)*

        Folds operators whose precedence is at least `min_precedence`
        into `lhs`. A tighter operator after the right operand is folded
        into that operand first, by recursing one level higher.
        """
        while True:
            token_precedence = self._get_token_precedence()
            if token_precedence < min_precedence:
                return Result.ok(lhs)

            operator_token = self.current_token
            self.get_next_token()  # eat binop

            rhs = self.parse_primary()
            if not rhs:
                return rhs

            if token_precedence < self._get_token_precedence():
                rhs = self.parse_binop_rhs(token_precedence + 1, rhs.value)
                if not rhs:
                    return rhs

            lhs = BinaryOperation(operator_token.lexeme, lhs, rhs.value, operator_token.location)

    def parse_primary(self) -> Result[Expression]:
        """primary ::= identifierexpr | numberexpr | parenexpr"""
        token = self.current_token
        if token.type == TokenType.IDENTIFIER:
            return self.parse_identifier_expr()
        if token.type == TokenType.NUMBER:
            return self.parse_number_expr()
        if token.is_char("("):
            return self.parse_paren_expr()
        return self._error(create_unexpected_token_error("an expression", token))

    def parse_identifier_expr(self) -> Result[Expression]:
        """
        identifierexpr
          ::= identifier
          ::= identifier '(' expression* ')'
        """
        name_token = self.current_token
        self.get_next_token()  # eat identifier

        if not self.current_token.is_char("("):
            return Result.ok(VariableReference(name_token.value, name_token.location))

        self.get_next_token()  # eat (
        arguments: List[Expression] = []
        if not self.current_token.is_char(")"):
            while True:
                arg = self.parse_expression()
                if not arg:
                    return arg
                arguments.append(arg.value)

                if self.current_token.is_char(")"):
                    break
                if not self.current_token.is_char(","):
                    return self._error(create_missing_token_error(
                        "Expected ')' or ',' in argument list", ")", self.current_token
                    ))
                self.get_next_token()

        self.get_next_token()  # eat )
        return Result.ok(Call(name_token.value, arguments, name_token.location))

    def parse_number_expr(self) -> Result[Expression]:
        """numberexpr ::= number"""
        token = self.current_token
        if token.value is None:
            return self._error(create_invalid_number_error(token))
        self.get_next_token()  # consume the number
        return Result.ok(NumberLiteral(token.value, token.location))

    def parse_paren_expr(self) -> Result[Expression]:
        """parenexpr ::= '(' expression ')'"""
        self.get_next_token()  # eat (
        expr = self.parse_expression()
        if not expr:
            return expr

        if not self.current_token.is_char(")"):
            return self._error(create_missing_token_error(
                "Expected ')'", ")", self.current_token
            ))
        self.get_next_token()  # eat )
        return expr

    # Utility methods

    def _get_token_precedence(self) -> int:
        """Precedence of the current token, -1 if it is not a binary operator."""
        token = self.current_token
        if token.type != TokenType.CHAR:
            return Precedence.NONE
        return BINOP_PRECEDENCE.get(token.lexeme, Precedence.NONE)

    def _error(self, error: ParseError) -> Result:
        """Record and log a syntax error, returning it as a failed result."""
        self.errors.append(error)
        logger.error(error.diagnostic.short())
        return Result.fail(error.diagnostic)

    def has_errors(self) -> bool:
        return len(self.errors) > 0


def parse_expression_string(source: str, filename: str = "<string>") -> Result[Expression]:
    """
    Convenience function to parse a single expression.

    Args:
        source: Source code string
        filename: Filename for error reporting
    """
    return Parser(Lexer(source, filename)).parse_expression()
