"""
ToyC driver - reads top-level forms and compiles them one at a time.

    program ::= ( definition | external | expression | ';' )*

Each form is an independent unit of failure: when a form fails to parse,
its lookahead token is skipped and parsing resumes with whatever follows,
so one bad form never takes down the rest of the input.

Author: xwest
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, TextIO, Union

from .backend.codegen import CodeGenerator
from .backend.jit import JITEngine
from .backend.llvm_backend import LLVMBackend
from .config import CompilerOptions
from .lexer.errors import Diagnostic
from .lexer.lexer import Lexer
from .lexer.tokens import TokenType
from .parser.parser import Parser
from .result import Result


logger = logging.getLogger(__name__)


@dataclass
class TopLevelExpression:
    """IR (and value, when evaluated) of one top-level expression."""
    ir: str
    value: Optional[int] = None


@dataclass
class CompilationReport:
    """What one run of the driver produced."""
    defined: List[str] = field(default_factory=list)
    declared: List[str] = field(default_factory=list)
    expressions: List[TopLevelExpression] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.diagnostics

    @property
    def values(self) -> List[Optional[int]]:
        return [expr.value for expr in self.expressions]


class Driver:
    """
    Top-level loop over one source.

    Owns the lexer, parser and code generator for a compilation run;
    the generated module accumulates every successful definition.
    """

    # Tokens that open a new form; recovery never skips them.
    FORM_STARTS = (TokenType.DEF, TokenType.EXTERN, TokenType.EOF)

    def __init__(self, source: Union[str, TextIO], options: Optional[CompilerOptions] = None,
                 prompt: Optional[Callable[[], None]] = None):
        self.options = options or CompilerOptions()
        self.lexer = Lexer(source, self.options.filename)
        self.parser = Parser(self.lexer, self.options.anonymous_name)
        self.codegen = CodeGenerator(options=self.options)
        self.report = CompilationReport()
        self.prompt = prompt
        self._jit: Optional[JITEngine] = None

    @property
    def module(self):
        return self.codegen.module

    @property
    def jit(self) -> JITEngine:
        if self._jit is None:
            self._jit = JITEngine()
        return self._jit

    def run(self) -> CompilationReport:
        """Compile every top-level form until end of input."""
        while True:
            if self.prompt is not None:
                self.prompt()
            token = self.parser.current_token
            if token.type == TokenType.EOF:
                return self.report
            if token.is_char(";"):
                self.parser.get_next_token()  # ignore top-level semicolons
            elif token.type == TokenType.DEF:
                self.handle_definition()
            elif token.type == TokenType.EXTERN:
                self.handle_extern()
            else:
                self.handle_top_level_expression()

    def handle_definition(self) -> Result:
        parsed = self.parser.parse_definition()
        if not parsed:
            return self._recover(parsed)

        generated = self.codegen.codegen(parsed.value)
        if not generated:
            return self._record(generated)

        logger.info(f"Read function definition: {parsed.value.name}")
        self.report.defined.append(parsed.value.name)
        return generated

    def handle_extern(self) -> Result:
        parsed = self.parser.parse_extern()
        if not parsed:
            return self._recover(parsed)

        generated = self.codegen.codegen(parsed.value)
        if not generated:
            return self._record(generated)

        logger.info(f"Read extern: {parsed.value.name}")
        if parsed.value.name not in self.report.declared:
            self.report.declared.append(parsed.value.name)
        return generated

    def handle_top_level_expression(self) -> Result:
        parsed = self.parser.parse_top_level_expression()
        if not parsed:
            return self._recover(parsed)

        generated = self.codegen.codegen(parsed.value)
        if not generated:
            return self._record(generated)

        name = parsed.value.name
        expression = TopLevelExpression(ir=str(generated.value))
        try:
            if self.options.evaluate_expressions:
                evaluated = self.jit.evaluate(self.module, name)
                if not evaluated:
                    return self._record(evaluated)
                expression.value = evaluated.value
                logger.info(f"Evaluated to {evaluated.value}")
        finally:
            # The wrapper only exists long enough to be generated and run.
            self.codegen.erase_function(name)

        self.report.expressions.append(expression)
        return generated

    def write_object(self, output_path: Optional[str] = None,
                     backend: Optional[LLVMBackend] = None) -> bool:
        """Emit the accumulated module as a native object file."""
        backend = backend or LLVMBackend(self.options)
        return backend.compile_to_object(self.module, output_path or self.options.output_path)

    def _recover(self, failed: Result) -> Result:
        """Skip one token after a syntax error unless it starts the next form."""
        if self.parser.current_token.type not in self.FORM_STARTS:
            self.parser.get_next_token()
        return self._record(failed)

    def _record(self, failed: Result) -> Result:
        self.report.diagnostics.append(failed.error)
        return failed


def compile_source(source: Union[str, TextIO], options: Optional[CompilerOptions] = None) -> Driver:
    """
    Run the driver over a whole source.

    Returns:
        The finished driver; its `report` and `module` hold the results
    """
    driver = Driver(source, options)
    driver.run()
    return driver
