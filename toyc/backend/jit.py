"""
ToyC JIT
========

Runs generated functions in-process with LLVM's MCJIT. The driver uses
it to evaluate top-level expressions, and it is the quickest way to
check what a compiled function actually computes.

Every evaluation compiles a fresh copy of the module, so the engine
always sees the module as it is now (functions defined after an earlier
evaluation included).
"""

import ctypes
import logging
from typing import Dict, Optional, Set

import llvmlite.binding as llvm
import llvmlite.ir as ll

from ..lexer.errors import Diagnostic
from ..result import Result
from .llvm_backend import initialize_llvm


logger = logging.getLogger(__name__)


class JITEngine:
    """MCJIT-based evaluation of `i32` functions."""

    def __init__(self):
        initialize_llvm()
        target = llvm.Target.from_default_triple()
        self.target_machine = target.create_target_machine()
        backing_module = llvm.parse_assembly("")
        self.engine = llvm.create_mcjit_compiler(backing_module, self.target_machine)
        self.evaluations = 0

    def evaluate(self, module: ll.Module, name: str, *args: int) -> Result[int]:
        """
        Call function `name` of `module` with integer arguments.

        Returns:
            Result holding the function's return value
        """
        function = module.globals.get(name)
        if not isinstance(function, ll.Function) or function.is_declaration:
            return self._error(f"no compiled function named '{name}'")
        if len(function.args) != len(args):
            return self._error(
                f"'{name}' takes {len(function.args)} argument(s), got {len(args)}"
            )

        unresolved = sorted(
            callee for callee in self._reachable_declarations(function)
            if llvm.address_of_symbol(callee) is None
        )
        if unresolved:
            return self._error(
                f"cannot evaluate '{name}': unresolved external function(s) {', '.join(unresolved)}"
            )

        try:
            llvm_module = llvm.parse_assembly(str(module))
            llvm_module.verify()
        except RuntimeError as e:
            return self._error(f"cannot evaluate '{name}': {e}")
        llvm_module.triple = llvm.get_process_triple()

        self.engine.add_module(llvm_module)
        try:
            self.engine.finalize_object()
            self.engine.run_static_constructors()
            address = self.engine.get_function_address(name)
            signature = ctypes.CFUNCTYPE(ctypes.c_int32, *([ctypes.c_int32] * len(args)))
            result = signature(address)(*args)
        finally:
            self.engine.remove_module(llvm_module)

        self.evaluations += 1
        logger.debug(f"Evaluated {name}{args} = {result}")
        return Result.ok(result)

    @staticmethod
    def _reachable_declarations(function: ll.Function) -> Set[str]:
        """Names of body-less functions `function` can end up calling."""
        seen: Dict[str, ll.Function] = {}
        pending = [function]
        while pending:
            current = pending.pop()
            if current.name in seen:
                continue
            seen[current.name] = current
            for block in current.blocks:
                for instruction in block.instructions:
                    if isinstance(instruction, ll.CallInstr):
                        pending.append(instruction.callee)
        return {name for name, fn in seen.items() if fn.is_declaration}

    @staticmethod
    def _error(message: str) -> Result:
        logger.error(message)
        return Result.fail(Diagnostic(message=message, location=None, severity="error", code="J001"))


def evaluate(module: ll.Module, name: str, *args: int, engine: Optional[JITEngine] = None) -> Result[int]:
    """Convenience wrapper creating a throwaway engine when none is given."""
    return (engine or JITEngine()).evaluate(module, name, *args)
