# =============================================================================
# test_expressions.py - Arc Expression Parser Unit Tests
# =============================================================================
# Tests for precedence climbing over the arc operator table.
#
# Test coverage includes:
#   - Precedence between every pair of adjacent levels
#   - Left associativity of binary operators
#   - Prefix operators and their interaction with postfix chains
#   - Assignment forms and right associativity
#   - The operator enumerations themselves
# =============================================================================

import pytest
from starfleet_sdk.arc import parse
from starfleet_sdk.arc.ast import describe
from starfleet_sdk.arc.operators import (
    AssignOperator,
    BinaryOperator,
    Precedence,
)


# =============================================================================
# Helper Functions
# =============================================================================

def expr(text: str) -> str:
    """
    Parse an expression statement and render it with describe().

    Args:
        text: Expression source without the trailing semicolon

    Returns:
        Compact constructor-style rendering of the expression
    """
    result = parse(f"{text};", "<test>")
    assert result.success, result.report()
    return describe(result.program.items[0].expression)


# =============================================================================
# Primary and Postfix Expressions
# =============================================================================

class TestPrimary:
    """Test primary expressions."""

    def test_variable(self):
        assert expr("speed") == "Variable(speed)"

    def test_parenthesized_expression_is_kept(self):
        assert expr("(a)") == "Paren(Variable(a))"

    def test_nested_parentheses(self):
        assert expr("((1))") == "Paren(Paren(Num(1)))"

    def test_array_literal_of_expressions(self):
        assert expr("[a + 1, f()]") == (
            "ArrayLiteral([Binary(+, Variable(a), Num(1)), Call(Variable(f), [])])"
        )

    def test_nested_array_literal(self):
        assert expr("[[1], []]") == "ArrayLiteral([ArrayLiteral([Num(1)]), ArrayLiteral([])])"


class TestPostfix:
    """Postfix chains apply left to right."""

    def test_member(self):
        assert expr("ship.hull") == "Member(Variable(ship), hull)"

    def test_index(self):
        assert expr("bays[2]") == "Index(Variable(bays), Num(2))"

    def test_call_with_arguments(self):
        assert expr("fire(1, x)") == "Call(Variable(fire), [Num(1), Variable(x)])"

    def test_call_with_trailing_comma(self):
        assert expr("fire(1,)") == "Call(Variable(fire), [Num(1)])"

    def test_method_style_call(self):
        assert expr("ship.engine.fire()") == (
            "Call(Member(Member(Variable(ship), engine), fire), [])"
        )

    def test_call_result_indexed_and_called(self):
        assert expr("table[0](1)[2]") == (
            "Index(Call(Index(Variable(table), Num(0)), [Num(1)]), Num(2))"
        )

    def test_member_of_parenthesized(self):
        assert expr("(a).b") == "Member(Paren(Variable(a)), b)"

    def test_member_of_literal(self):
        """Postfix applies to any primary; meaning is a later stage's concern."""
        assert expr("[1, 2][0]") == "Index(ArrayLiteral([Num(1), Num(2)]), Num(0))"


# =============================================================================
# Precedence Tests
# =============================================================================

class TestPrecedence:
    """Each level binds tighter than the one below it."""

    @pytest.mark.parametrize("text,expected", [
        ("a || b && c", "Binary(||, Variable(a), Binary(&&, Variable(b), Variable(c)))"),
        ("a && b | c", "Binary(&&, Variable(a), Binary(|, Variable(b), Variable(c)))"),
        ("a | b ^ c", "Binary(|, Variable(a), Binary(^, Variable(b), Variable(c)))"),
        ("a ^ b & c", "Binary(^, Variable(a), Binary(&, Variable(b), Variable(c)))"),
        ("a & b == c", "Binary(&, Variable(a), Binary(==, Variable(b), Variable(c)))"),
        ("a == b < c", "Binary(==, Variable(a), Binary(<, Variable(b), Variable(c)))"),
        ("a < b << c", "Binary(<, Variable(a), Binary(<<, Variable(b), Variable(c)))"),
        ("a << b + c", "Binary(<<, Variable(a), Binary(+, Variable(b), Variable(c)))"),
        ("a + b * c", "Binary(+, Variable(a), Binary(*, Variable(b), Variable(c)))"),
    ])
    def test_adjacent_levels(self, text, expected):
        assert expr(text) == expected

    def test_higher_level_on_the_left(self):
        assert expr("a * b + c") == "Binary(+, Binary(*, Variable(a), Variable(b)), Variable(c))"

    def test_parentheses_override(self):
        assert expr("(a + b) * c") == (
            "Binary(*, Paren(Binary(+, Variable(a), Variable(b))), Variable(c))"
        )

    def test_prefix_binds_tighter_than_binary(self):
        assert expr("-a * b") == "Binary(*, Prefix(-, Variable(a)), Variable(b))"

    def test_postfix_binds_tighter_than_prefix(self):
        assert expr("!a.b") == "Prefix(!, Member(Variable(a), b))"

    def test_binary_minus_after_operand(self):
        assert expr("a - -b") == "Binary(-, Variable(a), Prefix(-, Variable(b)))"

    def test_mixed_chain(self):
        assert expr("x < 1 || y >= 2 && !z") == (
            "Binary(||, Binary(<, Variable(x), Num(1)), "
            "Binary(&&, Binary(>=, Variable(y), Num(2)), Prefix(!, Variable(z))))"
        )


class TestAssociativity:
    """Binary operators are left-associative; prefix and assignment are right."""

    @pytest.mark.parametrize("op", ["+", "-", "*", "/", "%", "&", "|", "^", "<<", ">>", "==", "&&", "||"])
    def test_binary_left_associative(self, op):
        assert expr(f"a {op} b {op} c") == (
            f"Binary({op}, Binary({op}, Variable(a), Variable(b)), Variable(c))"
        )

    def test_same_level_mixed_operators(self):
        assert expr("a - b + c") == "Binary(+, Binary(-, Variable(a), Variable(b)), Variable(c))"

    def test_prefix_right_associative(self):
        assert expr("!~-x") == "Prefix(!, Prefix(~, Prefix(-, Variable(x))))"

    def test_assignment_right_associative(self):
        assert expr("a := b := c") == (
            "Assign(:=, Variable(a), Assign(:=, Variable(b), Variable(c)))"
        )

    def test_mixed_assignments(self):
        assert expr("a += b <<= 2") == (
            "Assign(+=, Variable(a), Assign(<<=, Variable(b), Num(2)))"
        )


# =============================================================================
# Assignment Tests
# =============================================================================

class TestAssignment:
    """Assignment is a top-level expression form."""

    @pytest.mark.parametrize("symbol", [
        ":=", "+=", "-=", "*=", "/=", "%=", "&=", "|=", "^=", "<<=", ">>=",
    ])
    def test_every_assignment_operator(self, symbol):
        assert expr(f"x {symbol} 1") == f"Assign({symbol}, Variable(x), Num(1))"

    def test_assignment_value_is_full_expression(self):
        assert expr("x := a || b") == (
            "Assign(:=, Variable(x), Binary(||, Variable(a), Variable(b)))"
        )

    def test_assignment_as_call_argument(self):
        assert expr("f(x := 1)") == "Call(Variable(f), [Assign(:=, Variable(x), Num(1))])"

    def test_assignment_inside_parentheses(self):
        assert expr("(x := 1)") == "Paren(Assign(:=, Variable(x), Num(1)))"

    def test_index_target(self):
        assert expr("grid[i][j] := 0") == (
            "Assign(:=, Index(Index(Variable(grid), Variable(i)), Variable(j)), Num(0))"
        )


# =============================================================================
# Operator Table Tests
# =============================================================================

class TestOperatorTable:
    """Test the operator enumerations."""

    def test_compound_assignment_knows_its_operator(self):
        assert AssignOperator.ADD_ASSIGN.binary is BinaryOperator.ADD
        assert AssignOperator.LSHIFT_ASSIGN.binary is BinaryOperator.LEFT_SHIFT
        assert AssignOperator.XOR_ASSIGN.binary is BinaryOperator.BITWISE_XOR
        assert AssignOperator.ASSIGN.binary is None

    def test_is_compound(self):
        assert not AssignOperator.ASSIGN.is_compound
        assert all(op.is_compound for op in AssignOperator if op is not AssignOperator.ASSIGN)

    def test_every_binary_operator_has_precedence(self):
        for op in BinaryOperator:
            assert Precedence.LOGICAL_OR <= op.precedence <= Precedence.MULTIPLICATIVE

    def test_relative_precedence(self):
        assert BinaryOperator.MULTIPLY.precedence > BinaryOperator.ADD.precedence
        assert BinaryOperator.EQUAL.precedence > BinaryOperator.BITWISE_AND.precedence
        assert BinaryOperator.LOGICAL_AND.precedence > BinaryOperator.LOGICAL_OR.precedence
