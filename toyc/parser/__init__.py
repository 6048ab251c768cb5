"""
ToyC Parser Package

Recursive descent parser with operator-precedence climbing for binary
expressions, and the AST it produces.

Author: xwest
"""

from .ast_nodes import (
    ASTNode, ASTNodeType, Expression, NumberLiteral, VariableReference,
    BinaryOperation, Call, Prototype, FunctionDefinition
)
from .parser import Parser, ANONYMOUS_FUNCTION_NAME, BINOP_PRECEDENCE, parse_expression_string
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser",
    "ANONYMOUS_FUNCTION_NAME",
    "BINOP_PRECEDENCE",
    "parse_expression_string",

    # AST nodes
    "ASTNode", "ASTNodeType", "Expression",
    "NumberLiteral", "VariableReference", "BinaryOperation", "Call",
    "Prototype", "FunctionDefinition",

    # Error handling
    "ParseError",
]
