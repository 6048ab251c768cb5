"""
toyc - ToyC Compiler Command-Line Interface
==========================================

Compiles ToyC source into a native object file that C programs can link
against.

Usage Examples
--------------
Compile a file to output.o:
    $ toyc average.toy

Interactive session, object written at end of input (Ctrl+D):
    $ toyc
    ready> def average(x y) (x + y) * 5

Print LLVM IR instead of writing an object:
    $ toyc --emit-llvm average.toy

Evaluate top-level expressions as they are read:
    $ echo "def sq(x) x*x; sq(12);" | toyc --eval
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import CompilerOptions
from .driver import Driver


@click.command()
@click.argument(
    "input_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: output.o, or stdout with --emit-llvm)",
)
@click.option(
    "--emit-llvm",
    is_flag=True,
    help="Write LLVM IR instead of an object file",
)
@click.option(
    "--eval/--no-eval", "evaluate",
    default=False,
    help="JIT-evaluate top-level expressions and print their values",
)
@click.option(
    "--triple",
    default=None,
    help="Target triple (default: host)",
)
@click.option(
    "-O", "optimization_level",
    type=click.IntRange(0, 3),
    default=0,
    help="Target code generation level (0-3)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="toyc")
def main(
    input_file: Optional[Path],
    output: Optional[Path],
    emit_llvm: bool,
    evaluate: bool,
    triple: Optional[str],
    optimization_level: int,
    verbose: bool,
) -> None:
    """
    Compile ToyC source code.

    INPUT_FILE is the source to compile; standard input is read when it
    is omitted.

    \b
    Language:
        def name(a b) expr     define a function
        extern name(a b)       declare an external function
        expr;                  top-level expression
        operators: < + - *     (all values are 32-bit integers)
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = CompilerOptions(
        filename=str(input_file) if input_file else "<stdin>",
        target_triple=triple,
        optimization_level=optimization_level,
        evaluate_expressions=evaluate,
    )
    if output is not None:
        options.output_path = str(output)

    stdin = click.get_text_stream("stdin")
    prompt = None
    if input_file is None and stdin.isatty():
        prompt = lambda: click.echo("ready> ", nl=False, err=True)

    try:
        if input_file is not None:
            with open(input_file, "r", encoding="utf-8") as source:
                driver = Driver(source, options, prompt)
                report = driver.run()
        else:
            driver = Driver(stdin, options, prompt)
            report = driver.run()
    except UnicodeDecodeError as e:
        click.echo(f"{options.filename}: error: source is not valid UTF-8 ({e.reason})", err=True)
        sys.exit(1)

    for diagnostic in report.diagnostics:
        click.echo(diagnostic.short(), err=True)

    if evaluate:
        for expression in report.expressions:
            click.echo(f"Evaluated to {expression.value}")

    if emit_llvm:
        ir_text = str(driver.module)
        if output is None:
            click.echo(ir_text)
        else:
            output.write_text(ir_text, encoding="utf-8")
    else:
        if not driver.write_object():
            click.echo(f"error: could not write {options.output_path}", err=True)
            sys.exit(1)
        if verbose:
            click.echo(f"Wrote {options.output_path}", err=True)

    if not report.succeeded:
        sys.exit(1)


if __name__ == "__main__":
    main()
