"""
ToyC Compiler Package

Front end for ToyC, a minimal expression-oriented language whose only
type is a 32-bit integer. Source is lexed and parsed into an AST, then
lowered to LLVM IR with llvmlite and emitted as native object code.

Architecture:
    toyc/
    ├── lexer/           # Tokenization
    ├── parser/          # AST and precedence-climbing parser
    ├── analyzer/        # Per-function symbol table
    ├── backend/         # LLVM IR generation, object emission, JIT
    ├── driver.py        # Top-level loop
    └── cli.py           # `toyc` command

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .lexer import Lexer
from .parser import Parser
from .backend import CodeGenerator, LLVMBackend, JITEngine
from .config import CompilerOptions
from .driver import Driver, compile_source

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "CodeGenerator",
    "LLVMBackend",
    "JITEngine",
    "CompilerOptions",
    "Driver",
    "compile_source",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
