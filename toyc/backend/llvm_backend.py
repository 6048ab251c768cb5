"""
LLVM Backend for ToyC.

Takes the `llvmlite.ir.Module` built by the code generator, verifies it
and turns it into native code: relocatable object files for linking
with C programs, or executables linked through the system C compiler.

Author: xwest
"""

from typing import List, Optional
import logging
import os
import shutil
import subprocess
import tempfile

import llvmlite.binding as llvm
import llvmlite.ir as ll

from ..config import CompilerOptions


logger = logging.getLogger(__name__)

_llvm_initialized = False


def initialize_llvm():
    """Initialize the native target once per process."""
    global _llvm_initialized
    if _llvm_initialized:
        return
    # Core initialization is automatic in current llvmlite; only the
    # native target and printers still need registering.
    llvm.initialize_native_target()
    llvm.initialize_native_asmprinter()
    llvm.initialize_native_asmparser()
    _llvm_initialized = True


def parse_module(module: ll.Module) -> "llvm.ModuleRef":
    """
    Parse and verify textual IR.

    Raises:
        RuntimeError: If the IR does not parse or fails verification
    """
    initialize_llvm()
    llvm_module = llvm.parse_assembly(str(module))
    llvm_module.verify()
    return llvm_module


def verify_module(module: ll.Module) -> Optional[str]:
    """Verify a module, returning the verifier's message on failure."""
    try:
        parse_module(module)
    except RuntimeError as e:
        return str(e)
    return None


class LLVMBackend:
    """
    LLVM backend for ToyC.

    Handles:
    - Module verification
    - Target machine setup
    - Object code generation
    - Linking into executables
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        """
        Initialize the LLVM backend.

        Args:
            options: Compiler options (target triple, codegen level)
        """
        initialize_llvm()

        self.options = options or CompilerOptions()
        self.target_triple = self.options.target_triple or llvm.get_default_triple()
        self._target_machine = None

    @property
    def target_machine(self) -> "llvm.TargetMachine":
        """Target machine for the configured triple (created lazily)."""
        if self._target_machine is None:
            target = llvm.Target.from_triple(self.target_triple)
            self._target_machine = target.create_target_machine(
                opt=self.options.optimization_level,
                reloc="pic",
                codemodel="default"
            )
        return self._target_machine

    def finalize(self, module: ll.Module) -> "llvm.ModuleRef":
        """
        Stamp the module with the target triple and data layout, then verify.

        Args:
            module: IR module produced by the code generator

        Returns:
            Verified LLVM module
        """
        module.triple = self.target_triple
        module.data_layout = str(self.target_machine.target_data)
        return parse_module(module)

    def verify(self, module: ll.Module) -> bool:
        """Check that a module is well-formed."""
        error = verify_module(module)
        if error is not None:
            logger.error(f"LLVM module verification failed: {error}")
            logger.debug(f"Generated LLVM IR:\n{module}")
            return False
        return True

    def emit_object(self, module: ll.Module) -> bytes:
        """Generate native object code for a module."""
        llvm_module = self.finalize(module)
        return self.target_machine.emit_object(llvm_module)

    def emit_assembly(self, module: ll.Module) -> str:
        """Generate native assembly text for a module."""
        llvm_module = self.finalize(module)
        return self.target_machine.emit_assembly(llvm_module)

    def compile_to_object(self, module: ll.Module, output_path: str) -> bool:
        """
        Compile a module to an object file.

        Args:
            module: IR module to compile
            output_path: Path for output object file

        Returns:
            True if compilation succeeded, False otherwise
        """
        try:
            object_code = self.emit_object(module)
        except RuntimeError as e:
            logger.error(f"Compilation failed: {e}")
            return False

        with open(output_path, "wb") as f:
            f.write(object_code)

        logger.info(f"Wrote {len(object_code)} bytes of object code to {output_path}")
        return True

    def compile_to_executable(self, module: ll.Module, output_path: str,
                              sources: Optional[List[str]] = None,
                              link_with: Optional[List[str]] = None) -> bool:
        """
        Compile a module and link it into an executable.

        Args:
            module: IR module to compile
            output_path: Path for output executable
            sources: C/C++ sources or objects to link with (one must hold main)
            link_with: Additional libraries to link with

        Returns:
            True if compilation and linking succeeded, False otherwise
        """
        linker = find_linker()
        if linker is None:
            logger.error("No C compiler found to link with (tried clang, cc, gcc)")
            return False

        with tempfile.NamedTemporaryFile(suffix=".o", delete=False) as obj_file:
            obj_path = obj_file.name

        try:
            if not self.compile_to_object(module, obj_path):
                return False

            link_cmd = [linker, "-o", output_path, *(sources or []), obj_path]
            for lib in link_with or []:
                link_cmd.extend(["-l", lib])

            result = subprocess.run(link_cmd, capture_output=True, text=True)
            if result.returncode != 0:
                logger.error(f"Linking failed: {result.stderr}")
                return False
            return True
        finally:
            os.unlink(obj_path)

    def print_llvm_ir(self, module: ll.Module) -> str:
        """Get the LLVM IR as a string."""
        return str(module)


def find_linker() -> Optional[str]:
    """Locate a C compiler driver usable for linking."""
    for candidate in ("clang", "cc", "gcc"):
        path = shutil.which(candidate)
        if path:
            return path
    return None
