"""
Code generator for ToyC.

Walks the AST and emits LLVM IR through `llvmlite.ir`. Names are
resolved against a per-function symbol table (the parameters) and the
module (functions). Every step returns a `Result`; a failure anywhere in
a function body discards that function from the module.

Author: xwest
"""

from typing import List, Optional
from dataclasses import dataclass, field
import logging

import llvmlite.ir as ll

from ..analyzer.symbol_table import SymbolTable
from ..config import CompilerOptions
from ..parser.ast_nodes import (
    ASTNode, NumberLiteral, VariableReference, BinaryOperation, Call,
    Prototype, FunctionDefinition
)
from ..result import Result
from .errors import (
    CodegenError, create_unknown_variable_error, create_unknown_function_error,
    create_argument_count_error, create_invalid_operator_error,
    create_redefinition_error, create_arity_mismatch_error,
    create_verification_error
)
from .llvm_backend import verify_module


logger = logging.getLogger(__name__)

# The language's single numeric type
INT_TYPE = ll.IntType(32)


def wrap_int32(value: int) -> int:
    """Narrow an integer to 32-bit two's complement."""
    return ((value + 2 ** 31) % 2 ** 32) - 2 ** 31


@dataclass
class LLVMGenContext:
    """Context for LLVM code generation."""
    module: ll.Module
    builder: Optional[ll.IRBuilder] = None
    current_function: Optional[ll.Function] = None
    named_values: SymbolTable = field(default_factory=SymbolTable)


class CodeGenerator:
    """
    Lowers ToyC AST nodes to LLVM IR.

    One instance owns one module for a whole compilation run; the symbol
    table inside its context is rebuilt for each function.
    """

    def __init__(self, module: Optional[ll.Module] = None,
                 options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()
        if module is None:
            module = ll.Module(name=self.options.module_name)
        self.context = LLVMGenContext(module=module)
        self.errors: List[CodegenError] = []

    @property
    def module(self) -> ll.Module:
        return self.context.module

    @property
    def symbol_table(self) -> SymbolTable:
        return self.context.named_values

    def codegen(self, node: ASTNode) -> Result:
        """Generate IR for any AST node."""
        if isinstance(node, NumberLiteral):
            return self._codegen_number(node)
        if isinstance(node, VariableReference):
            return self._codegen_variable(node)
        if isinstance(node, BinaryOperation):
            return self._codegen_binary(node)
        if isinstance(node, Call):
            return self._codegen_call(node)
        if isinstance(node, Prototype):
            return self._codegen_prototype(node)
        if isinstance(node, FunctionDefinition):
            return self._codegen_function(node)
        raise TypeError(f"Cannot generate code for {type(node).__name__}")

    # Expressions

    def _codegen_number(self, node: NumberLiteral) -> Result:
        return Result.ok(ll.Constant(INT_TYPE, wrap_int32(node.value)))

    def _codegen_variable(self, node: VariableReference) -> Result:
        value = self.symbol_table.lookup(node.name)
        if value is None:
            return self._error(create_unknown_variable_error(
                node.name, node.location, self.symbol_table.get_similar_names(node.name)
            ))
        return Result.ok(value)

    def _codegen_binary(self, node: BinaryOperation) -> Result:
        left = self.codegen(node.left)
        if not left:
            return left
        right = self.codegen(node.right)
        if not right:
            return right

        builder = self.context.builder
        lhs, rhs = left.value, right.value
        if node.operator == "+":
            return Result.ok(builder.add(lhs, rhs, name="addtmp"))
        if node.operator == "-":
            return Result.ok(builder.sub(lhs, rhs, name="subtmp"))
        if node.operator == "*":
            return Result.ok(builder.mul(lhs, rhs, name="multmp"))
        if node.operator == "<":
            cmp = builder.icmp_unsigned("<", lhs, rhs, name="cmptmp")
            # i1 back to the numeric type
            return Result.ok(builder.zext(cmp, INT_TYPE, name="booltmp"))
        return self._error(create_invalid_operator_error(node.operator, node.location))

    def _codegen_call(self, node: Call) -> Result:
        callee = self.get_function(node.callee)
        if callee is None:
            return self._error(create_unknown_function_error(node.callee, node.location))

        if len(callee.args) != len(node.arguments):
            return self._error(create_argument_count_error(
                node.callee, len(callee.args), len(node.arguments), node.location
            ))

        args = []
        for argument in node.arguments:
            value = self.codegen(argument)
            if not value:
                return value
            args.append(value.value)

        return Result.ok(self.context.builder.call(callee, args, name="calltmp"))

    # Functions

    def _codegen_prototype(self, node: Prototype) -> Result:
        """Declare `i32 name(i32, ...)`, or return the existing declaration."""
        existing = self.get_function(node.name)
        if existing is not None:
            if len(existing.args) != node.arity:
                return self._error(create_arity_mismatch_error(
                    node.name, len(existing.args), node.arity, node.location
                ))
            return Result.ok(existing)

        function_type = ll.FunctionType(INT_TYPE, [INT_TYPE] * node.arity)
        function = ll.Function(self.module, function_type, name=node.name)
        for arg, name in zip(function.args, node.parameters):
            arg.name = name
        logger.debug(f"Declared {node.name}/{node.arity}")
        return Result.ok(function)

    def _codegen_function(self, node: FunctionDefinition) -> Result:
        proto = node.prototype
        function = self.get_function(proto.name)
        existed = function is not None

        if existed and not function.is_declaration:
            return self._error(create_redefinition_error(proto.name, node.location))

        declared = self._codegen_prototype(proto)
        if not declared:
            return declared
        function = declared.value

        builder = ll.IRBuilder(function.append_basic_block(name="entry"))
        self.context.builder = builder
        self.context.current_function = function
        # Parameters bind positionally onto the declaration's arguments.
        self.symbol_table.reset(zip(proto.parameters, function.args), proto.name)

        try:
            body = self.codegen(node.body)
            if body:
                builder.ret(body.value)
                problem = verify_module(self.module)
                if problem is None:
                    logger.debug(f"Defined {proto.name}/{proto.arity}")
                    return Result.ok(function)
                body = self._error(create_verification_error(proto.name, problem))
        finally:
            self.symbol_table.clear()
            self.context.builder = None
            self.context.current_function = None

        self._discard_body(function, keep_declaration=existed)
        return body

    # Module access

    def get_function(self, name: str) -> Optional[ll.Function]:
        """Look up a function already declared in the module."""
        value = self.module.globals.get(name)
        return value if isinstance(value, ll.Function) else None

    def erase_function(self, name: str) -> bool:
        """
        Remove a function from the module entirely.

        Returns:
            True if a function was removed
        """
        if self.get_function(name) is None:
            return False
        del self.module.globals[name]
        # llvmlite has no public way to release a global name
        self.module.scope._useset.discard(name)
        return True

    def defined_functions(self) -> List[str]:
        return [f.name for f in self.module.functions if not f.is_declaration]

    def declared_functions(self) -> List[str]:
        return [f.name for f in self.module.functions if f.is_declaration]

    def get_ir(self) -> str:
        return str(self.module)

    def _discard_body(self, function: ll.Function, keep_declaration: bool):
        """Drop a failed body; a prior `extern` declaration survives."""
        if keep_declaration:
            function.blocks = []
        else:
            self.erase_function(function.name)
        logger.debug(f"Discarded failed definition of {function.name}")

    def _error(self, error: CodegenError) -> Result:
        self.errors.append(error)
        logger.error(error.diagnostic.short())
        return Result.fail(error.diagnostic)
