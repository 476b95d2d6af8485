"""
Post-parse checks over the arc AST.

The parser is context-free and accepts 'break' anywhere a statement may
appear. This pass reports every 'break' that has no enclosing 'while'.
Each function body starts with no enclosing loop.
"""

from typing import Optional

from starfleet_sdk.arc.ast import ASTVisitor, Break, FunctionDef, Program, While
from starfleet_sdk.arc.errors import ArcError, BreakOutsideLoopError


class LoopContextChecker(ASTVisitor):
    """Visitor that records 'break' statements outside any loop."""

    def __init__(self, source_lines: Optional[list[str]] = None):
        self.source_lines = source_lines or []
        self.errors: list[ArcError] = []
        self._loop_depth = 0

    def visit_While(self, node: While):
        self.visit(node.condition)
        self._loop_depth += 1
        self.visit(node.body)
        self._loop_depth -= 1

    def visit_FunctionDef(self, node: FunctionDef):
        saved = self._loop_depth
        self._loop_depth = 0
        self.generic_visit(node)
        self._loop_depth = saved

    def visit_Break(self, node: Break):
        if self._loop_depth == 0:
            location = node.span.start
            self.errors.append(
                BreakOutsideLoopError(location, self._get_source_line(location.line))
            )

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None


def check_program(program: Program, source: Optional[str] = None) -> list[ArcError]:
    """
    Run the post-parse checks on a program.

    Args:
        program: A program returned by a successful parse
        source: Original source text, used for error context

    Returns:
        The errors found, in source order (empty if none)
    """
    checker = LoopContextChecker(source.split("\n") if source else None)
    checker.visit(program)
    return checker.errors
