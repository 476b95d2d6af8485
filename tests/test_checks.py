# =============================================================================
# test_checks.py - Post-parse Check Tests
# =============================================================================
# Tests for the 'break' placement pass that runs on a parsed program.
# =============================================================================

from starfleet_sdk.arc import parse, check_program
from starfleet_sdk.arc.ast import ASTVisitor, Call
from starfleet_sdk.arc.errors import BreakOutsideLoopError, DiagnosticKind


def check(source: str) -> list:
    program = parse(source, "<test>").unwrap()
    return check_program(program, source)


class TestBreakPlacement:
    """'break' must sit inside a while loop."""

    def test_break_in_loop(self):
        assert check("while true { break; }") == []

    def test_break_in_if_inside_loop(self):
        assert check("while x { if y { break; } else { break; } }") == []

    def test_break_in_nested_loop(self):
        assert check("while a { while b { break; } break; }") == []

    def test_top_level_break(self):
        errors = check("break;")
        assert len(errors) == 1
        assert isinstance(errors[0], BreakOutsideLoopError)
        assert errors[0].kind == DiagnosticKind.SEMANTIC

    def test_break_in_function_without_loop(self):
        errors = check("fun f() {\n  if x { break; }\n}")
        assert len(errors) == 1
        assert errors[0].location.line == 2
        assert errors[0].source_line == "  if x { break; }"

    def test_break_after_loop(self):
        errors = check("fun f() { while x { } break; }")
        assert len(errors) == 1

    def test_function_resets_loop_context(self):
        """Functions do not inherit the loop of surrounding script code."""
        errors = check("while x { fun_call(); }\nfun g() { break; }")
        assert len(errors) == 1

    def test_every_misplaced_break_reported(self):
        errors = check("break; fun f() { break; } break;")
        assert len(errors) == 3
        offsets = [e.location.offset for e in errors]
        assert offsets == sorted(offsets)

    def test_source_line_after_carriage_return(self):
        """Only '\\n' ends a line, as in the lexer."""
        errors = check("x := 1;\rbreak;\nwhile a { }")
        assert errors[0].location.line == 1
        assert errors[0].location.column == 9
        assert errors[0].source_line == "x := 1;\rbreak;"

    def test_parse_does_not_check(self):
        """Placement is not a syntax error."""
        assert parse("break;").success


class TestVisitor:
    """ASTVisitor reaches every node through generic_visit."""

    def test_counts_nested_calls(self):
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.count = 0

            def visit_Call(self, node):
                self.count += 1
                self.generic_visit(node)

        program = parse("fun f() { a(b(c()), [d()]); if e() { x.y(); } }").unwrap()
        counter = CallCounter()
        counter.visit(program)
        assert counter.count == 6

    def test_children_in_source_order(self):
        program = parse("f(a, b);").unwrap()
        call = program.items[0].expression
        assert isinstance(call, Call)
        assert [child.name for child in call.children()] == ["f", "a", "b"]
