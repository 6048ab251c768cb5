"""
Compiler configuration for ToyC.

Author: xwest
"""

from dataclasses import dataclass
from typing import Optional

from .parser.parser import ANONYMOUS_FUNCTION_NAME


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        module_name: Name of the generated LLVM module
        filename: Source name used in diagnostics
        target_triple: Target triple for object emission. None means the
                       host's default triple.
        optimization_level: Code generator level for the target machine
                            (0-3). IR itself is never optimized.
        output_path: Object file written by the command-line driver
        evaluate_expressions: JIT-evaluate top-level expressions instead of
                              only generating and discarding them
        anonymous_name: Function name used to wrap top-level expressions
    """
    module_name: str = "my_cool_jit"
    filename: str = "<stdin>"
    target_triple: Optional[str] = None
    optimization_level: int = 0
    output_path: str = "output.o"
    evaluate_expressions: bool = False
    anonymous_name: str = ANONYMOUS_FUNCTION_NAME

    def __post_init__(self):
        if not 0 <= self.optimization_level <= 3:
            raise ValueError(f"optimization_level must be 0-3, got {self.optimization_level}")
