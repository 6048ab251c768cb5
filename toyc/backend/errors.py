"""
Code generation errors for ToyC.

Covers name resolution (unknown variable / function, wrong arity,
redefinition) and instruction selection (unsupported operator,
verification failure).

Author: xwest
"""

from typing import Optional, List

from ..lexer.tokens import SourceLocation
from ..lexer.errors import Diagnostic


class CodegenError(Exception):
    """Error found while lowering the AST to LLVM IR."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
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


CODEGEN_ERROR_CODES = {
    "C001": "Unknown variable name",
    "C002": "Unknown function referenced",
    "C003": "Incorrect number of arguments",
    "C004": "Invalid binary operator",
    "C005": "Function cannot be redefined",
    "C006": "Function redeclared with a different number of arguments",
    "C007": "Function failed verification",
}


def create_unknown_variable_error(name: str, location: Optional[SourceLocation],
                                  similar: Optional[List[str]] = None) -> CodegenError:
    return CodegenError(
        message=f"unknown variable name '{name}'",
        location=location,
        code="C001",
        help_text="Only the parameters of the enclosing function are in scope.",
        suggestions=[f"Did you mean '{s}'?" for s in similar] if similar else None
    )


def create_unknown_function_error(name: str, location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        message=f"unknown function referenced '{name}'",
        location=location,
        code="C002",
        suggestions=[f"Declare it first with 'extern {name}(...)' or 'def {name}(...)'"]
    )


def create_argument_count_error(name: str, expected: int, found: int,
                                location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        message=f"incorrect number of arguments passed to '{name}'",
        location=location,
        code="C003",
        help_text=f"'{name}' takes {expected} argument(s) but {found} were given"
    )


def create_invalid_operator_error(operator: str, location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        message=f"invalid binary operator '{operator}'",
        location=location,
        code="C004",
        help_text="Supported operators are <, +, - and *"
    )


def create_redefinition_error(name: str, location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        message=f"function cannot be redefined: '{name}'",
        location=location,
        code="C005"
    )


def create_arity_mismatch_error(name: str, declared: int, found: int,
                                location: Optional[SourceLocation]) -> CodegenError:
    return CodegenError(
        message=f"function '{name}' redeclared with a different number of arguments",
        location=location,
        code="C006",
        help_text=f"previously declared with {declared} argument(s), now {found}"
    )


def create_verification_error(name: str, details: str) -> CodegenError:
    return CodegenError(
        message=f"function '{name}' failed verification",
        code="C007",
        help_text=details.strip() or None
    )
