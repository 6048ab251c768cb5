"""
Per-function symbol table for ToyC code generation.

The only names a function body can refer to are its parameters, so a
single flat table is enough. It is repopulated from the parameter list
at the start of every function and cleared once the body is done.

Author: xwest
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple
from dataclasses import dataclass


@dataclass
class Symbol:
    """A parameter name bound to its IR value."""
    name: str
    handle: Any         # llvmlite ir.Argument for parameters
    position: int = 0   # argument position in the prototype

    def __str__(self) -> str:
        return f"{self.name}#{self.position}"


class SymbolTable:
    """
    Maps parameter names to the IR values they resolve to.

    Valid only while one function body is being generated.
    """

    def __init__(self):
        self.symbols: Dict[str, Symbol] = {}
        self.function_name: Optional[str] = None

    def reset(self, bindings: Iterable[Tuple[str, Any]], function_name: Optional[str] = None):
        """Clear the table and bind each (name, handle) pair in order."""
        self.clear()
        self.function_name = function_name
        for position, (name, handle) in enumerate(bindings):
            self.define(name, handle, position)

    def define(self, name: str, handle: Any, position: int = 0) -> Symbol:
        """Bind a name; a later binding of the same name replaces the earlier one."""
        symbol = Symbol(name, handle, position)
        self.symbols[name] = symbol
        return symbol

    def lookup(self, name: str) -> Optional[Any]:
        """Return the handle bound to `name`, or None."""
        symbol = self.symbols.get(name)
        return symbol.handle if symbol is not None else None

    def lookup_symbol(self, name: str) -> Optional[Symbol]:
        return self.symbols.get(name)

    def clear(self):
        self.symbols.clear()
        self.function_name = None

    def names(self) -> List[str]:
        return list(self.symbols)

    def get_similar_names(self, name: str, max_distance: int = 2) -> List[str]:
        """Get bound names similar to `name` (for error suggestions)."""
        def levenshtein_distance(s1: str, s2: str) -> int:
            if len(s1) < len(s2):
                return levenshtein_distance(s2, s1)

            if len(s2) == 0:
                return len(s1)

            previous_row = list(range(len(s2) + 1))
            for i, c1 in enumerate(s1):
                current_row = [i + 1]
                for j, c2 in enumerate(s2):
                    insertions = previous_row[j + 1] + 1
                    deletions = current_row[j] + 1
                    substitutions = previous_row[j] + (c1 != c2)
                    current_row.append(min(insertions, deletions, substitutions))
                previous_row = current_row

            return previous_row[-1]

        similar_names = []
        for symbol_name in self.symbols:
            distance = levenshtein_distance(name.lower(), symbol_name.lower())
            if distance <= max_distance:
                similar_names.append((symbol_name, distance))

        similar_names.sort(key=lambda x: x[1])
        return [similar for similar, _ in similar_names[:5]]

    def __contains__(self, name: str) -> bool:
        return name in self.symbols

    def __len__(self) -> int:
        return len(self.symbols)

    def __str__(self) -> str:
        scope = self.function_name or "<none>"
        return f"SymbolTable({scope}, {len(self.symbols)} symbols)"
