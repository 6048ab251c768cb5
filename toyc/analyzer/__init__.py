"""
ToyC Analyzer Package

Name resolution support for code generation.

Author: xwest
"""

from .symbol_table import SymbolTable, Symbol

__all__ = [
    "SymbolTable", "Symbol",
]
