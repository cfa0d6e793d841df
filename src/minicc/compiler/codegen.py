"""
x86-64 Code Generator for minicc
================================

This module walks the AST and emits x86-64 assembly in AT&T syntax,
as a list of lines ready to be joined with newlines and handed to the
system assembler.

Code Generation Strategy
------------------------
The generator uses a simple accumulator/stack evaluation model:

1. Every expression leaves its result in %eax, which is also the
   function's return-value register
2. For binary operations the left operand is evaluated and pushed, the
   right operand is evaluated into %eax, and the left value is popped
   into %ecx
3. The operator then combines %ecx (left) and %eax (right) into %eax

Register Usage
--------------
| Register | Usage                                        |
|----------|----------------------------------------------|
| %eax     | Accumulator, return value, dividend/quotient |
| %ecx     | Left operand of a binary op, divisor         |
| %edx     | Sign extension of the dividend (cdq)         |
| %rsp     | Stack of pending left operands               |

Operator Sequences
------------------
    -x      negl %eax
    ~x      notl %eax
    !x      cmpl $0, %eax / movl $0, %eax / sete %al
    a + b   addl %ecx, %eax
    a - b   subl %eax, %ecx / movl %ecx, %eax
    a * b   imull %ecx, %eax
    a / b   xchgl %eax, %ecx / cdq / idivl %ecx

Division by zero is not checked; it faults at run time.

Example output for `int main() { return 2 + 3; }` on Linux:
        .globl main
    main:
        movl $2, %eax
        push %rax
        movl $3, %eax
        pop %rcx
        addl %ecx, %eax
        ret
        .section .note.GNU-stack,"",@progbits
"""

from typing import Optional
import logging
import sys

from minicc.compiler.ast import (
    ASTVisitor,
    ProgramNode,
    FunctionNode,
    ReturnStatement,
    Expression,
    BinaryExpression,
    UnaryExpression,
    IntConstant,
    BinaryOperator,
    UnaryOperator,
)
from minicc.compiler.errors import UnsupportedNodeError

logger = logging.getLogger(__name__)


def host_platform() -> str:
    """Return the target platform name matching the running interpreter."""
    return "darwin" if sys.platform.startswith("darwin") else "linux"


# =============================================================================
# Code Generator Class
# =============================================================================

class CodeGenerator(ASTVisitor):
    """
    Generates x86-64 assembly from a minicc AST.

    Attributes:
        target_platform: "linux" or "darwin"; decides external symbol
                         naming and the trailing stack-note section
    """

    # External symbol prefix per platform
    PLATFORM_SYMBOL_PREFIX = {
        "linux": "",
        "darwin": "_",
    }

    # Immediates are loaded into a 32-bit register
    IMMEDIATE_MASK = 0xFFFFFFFF

    def __init__(self, target_platform: Optional[str] = None):
        """
        Initialize the code generator.

        Args:
            target_platform: "linux" or "darwin". Defaults to the host.

        Raises:
            ValueError: If the platform is not supported
        """
        platform = (target_platform or host_platform()).lower()
        if platform not in self.PLATFORM_SYMBOL_PREFIX:
            supported = ", ".join(sorted(self.PLATFORM_SYMBOL_PREFIX))
            raise ValueError(f"unsupported target platform '{target_platform}' (expected {supported})")
        self._target_platform = platform

        # Assembly output lines
        self._output: list[str] = []

    @property
    def target_platform(self) -> str:
        return self._target_platform

    def generate(self, program: ProgramNode) -> list[str]:
        """
        Generate assembly from an AST.

        Args:
            program: The root AST node

        Returns:
            Assembly lines, one directive, label or instruction per line

        Raises:
            UnsupportedNodeError: If the tree holds a node with no rule
        """
        self._output = []
        self.visit(program)
        self._emit_footer()
        logger.debug(f"Generated {len(self._output)} lines for {self._target_platform}")
        return self._output

    # =========================================================================
    # Output Helpers
    # =========================================================================

    def _emit(self, line: str) -> None:
        self._output.append(line)

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _emit_instruction(self, mnemonic: str, operand: str = "") -> None:
        if operand:
            self._emit(f"\t{mnemonic} {operand}")
        else:
            self._emit(f"\t{mnemonic}")

    def _emit_footer(self) -> None:
        """Mark the stack non-executable for the GNU linker."""
        if self._target_platform == "linux":
            self._emit_instruction(".section", '.note.GNU-stack,"",@progbits')

    def symbol_name(self, name: str) -> str:
        """External symbol for a function name on the target platform."""
        return f"{self.PLATFORM_SYMBOL_PREFIX[self._target_platform]}{name}"

    # =========================================================================
    # Node Visitors
    # =========================================================================

    def generic_visit(self, node) -> None:
        raise UnsupportedNodeError(node, getattr(node, "location", None))

    def visit_ProgramNode(self, node: ProgramNode) -> None:
        self.visit(node.function)

    def visit_FunctionNode(self, node: FunctionNode) -> None:
        label = self.symbol_name(node.name)
        self._emit_instruction(".globl", label)
        self._emit_label(label)
        self.visit(node.body)

    def visit_ReturnStatement(self, node: ReturnStatement) -> None:
        self._generate_expression(node.value)
        self._emit_instruction("ret")

    # =========================================================================
    # Expression Generation
    # =========================================================================

    def _generate_expression(self, expr: Expression) -> None:
        """
        Emit code that leaves the value of expr in %eax.

        The tree is walked with an explicit work stack rather than by
        recursion, so operator chains of any length compile. Each entry
        is a node and the number of its operands already emitted.
        """
        pending: list[tuple[Expression, int]] = [(expr, 0)]

        while pending:
            node, done = pending.pop()

            if isinstance(node, IntConstant):
                self._generate_constant(node)

            elif isinstance(node, UnaryExpression):
                if done == 0:
                    pending.append((node, 1))
                    pending.append((node.operand, 0))
                else:
                    self._generate_unary(node)

            elif isinstance(node, BinaryExpression):
                if done == 0:
                    pending.append((node, 1))
                    pending.append((node.left, 0))
                elif done == 1:
                    # Left operand goes to the stack while the right one is computed
                    self._emit_instruction("push", "%rax")
                    pending.append((node, 2))
                    pending.append((node.right, 0))
                else:
                    self._emit_instruction("pop", "%rcx")
                    self._generate_binary(node)

            else:
                raise UnsupportedNodeError(node, getattr(node, "location", None))

    def _generate_constant(self, expr: IntConstant) -> None:
        value = expr.value & self.IMMEDIATE_MASK
        if value != expr.value:
            logger.debug(f"Literal {expr.value} truncated to 32 bits ({value})")
        self._emit_instruction("movl", f"${value}, %eax")

    def _generate_unary(self, expr: UnaryExpression) -> None:
        """Apply a unary operator to the operand value in %eax."""
        op = expr.operator
        if op == UnaryOperator.NEGATE:
            self._emit_instruction("negl", "%eax")
        elif op == UnaryOperator.BITWISE_COMPLEMENT:
            self._emit_instruction("notl", "%eax")
        elif op == UnaryOperator.LOGICAL_NOT:
            # movl leaves the flags from cmpl intact
            self._emit_instruction("cmpl", "$0, %eax")
            self._emit_instruction("movl", "$0, %eax")
            self._emit_instruction("sete", "%al")
        else:
            raise UnsupportedNodeError(expr, expr.location)

    def _generate_binary(self, expr: BinaryExpression) -> None:
        """Combine %ecx (left) and %eax (right) into %eax."""
        op = expr.operator
        if op == BinaryOperator.ADD:
            self._emit_instruction("addl", "%ecx, %eax")
        elif op == BinaryOperator.SUBTRACT:
            self._emit_instruction("subl", "%eax, %ecx")
            self._emit_instruction("movl", "%ecx, %eax")
        elif op == BinaryOperator.MULTIPLY:
            self._emit_instruction("imull", "%ecx, %eax")
        elif op == BinaryOperator.DIVIDE:
            self._emit_instruction("xchgl", "%eax, %ecx")
            self._emit_instruction("cdq")
            self._emit_instruction("idivl", "%ecx")
        else:
            raise UnsupportedNodeError(expr, expr.location)


# =============================================================================
# Convenience Functions
# =============================================================================

def generate(program: ProgramNode, target_platform: Optional[str] = None) -> list[str]:
    """Generate assembly lines for a parsed program."""
    return CodeGenerator(target_platform).generate(program)
