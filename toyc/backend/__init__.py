"""
ToyC Backend Package.

Lowers the AST to LLVM IR and turns that IR into object code or
in-process machine code.

Author: xwest
"""

from .codegen import CodeGenerator, LLVMGenContext, INT_TYPE
from .llvm_backend import LLVMBackend, verify_module
from .jit import JITEngine
from .errors import CodegenError

__all__ = [
    'CodeGenerator', 'LLVMGenContext', 'INT_TYPE',
    'LLVMBackend', 'verify_module',
    'JITEngine',
    'CodegenError',
]
