"""
Abstract Syntax Tree node definitions for ToyC.

The node set is closed: expressions are one of NumberLiteral,
VariableReference, BinaryOperation or Call. Code generation dispatches
over these variants in a single place (`toyc.backend.codegen`) instead
of giving each node its own codegen method.

Each parent exclusively owns its children; nodes are never shared.

Author: xwest
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from ..lexer.tokens import SourceLocation


class ASTNodeType(Enum):
    """Enumeration of all AST node types."""

    # Top-level
    PROTOTYPE = "Prototype"
    FUNCTION_DEF = "FunctionDefinition"

    # Expressions
    NUMBER = "NumberLiteral"
    VARIABLE = "VariableReference"
    BINARY_OP = "BinaryOperation"
    CALL = "Call"


class ASTNode:
    """Base class for all AST nodes."""

    node_type: ASTNodeType

    def children(self) -> List["ASTNode"]:
        """Get all child nodes."""
        return []

    def to_sexpr(self) -> str:
        """Render the node as an s-expression (for debugging and tests)."""
        raise NotImplementedError


# ============================================================================
# Expressions
# ============================================================================

@dataclass
class NumberLiteral(ASTNode):
    """A numeric constant."""
    value: int
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.NUMBER

    def to_sexpr(self) -> str:
        return str(self.value)


@dataclass
class VariableReference(ASTNode):
    """A lookup by identifier."""
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.VARIABLE

    def to_sexpr(self) -> str:
        return self.name


@dataclass
class BinaryOperation(ASTNode):
    """`left <operator> right`; both operands are owned by this node."""
    operator: str
    left: "Expression"
    right: "Expression"
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.BINARY_OP

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]

    def to_sexpr(self) -> str:
        return f"({self.operator} {self.left.to_sexpr()} {self.right.to_sexpr()})"


@dataclass
class Call(ASTNode):
    """Call of a named function with positional arguments."""
    callee: str
    arguments: List["Expression"] = field(default_factory=list)
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.CALL

    def children(self) -> List[ASTNode]:
        return list(self.arguments)

    def to_sexpr(self) -> str:
        args = "".join(" " + arg.to_sexpr() for arg in self.arguments)
        return f"(call {self.callee}{args})"


Expression = Union[NumberLiteral, VariableReference, BinaryOperation, Call]


# ============================================================================
# Top-level
# ============================================================================

@dataclass
class Prototype(ASTNode):
    """
    A function signature: its name and ordered parameter names.

    Parameter order defines argument binding position.
    """
    name: str
    parameters: List[str] = field(default_factory=list)
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.PROTOTYPE

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def to_sexpr(self) -> str:
        return f"(prototype {self.name} ({' '.join(self.parameters)}))"


@dataclass
class FunctionDefinition(ASTNode):
    """A prototype plus a single body expression."""
    prototype: Prototype
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    node_type = ASTNodeType.FUNCTION_DEF

    @property
    def name(self) -> str:
        return self.prototype.name

    def children(self) -> List[ASTNode]:
        return [self.prototype, self.body]

    def to_sexpr(self) -> str:
        return f"(def {self.prototype.to_sexpr()} {self.body.to_sexpr()})"
