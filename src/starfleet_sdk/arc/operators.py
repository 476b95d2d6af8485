"""
Arc Operator Table
==================

The arc grammar writes binary expressions as simultaneously left- and
right-recursive with no stratification, so it does not say how
`a + b * c` groups. This module fixes the canonical answer.

Precedence (lowest to highest)
------------------------------
1.  assignment     :=  +=  -=  *=  /=  %=  &=  |=  ^=  <<=  >>=   (right)
2.  logical_or     ||
3.  logical_and    &&
4.  bitwise_or     |
5.  bitwise_xor    ^
6.  bitwise_and    &
7.  equality       ==
8.  relational     <  >  <=  >=
9.  shift          <<  >>
10. additive       +  -
11. multiplicative *  /  %
12. prefix         !  ~  -                                        (right)
13. postfix        .name  [index]  (args)

All binary levels are left-associative. Assignment is not part of the
binary table: it is a top-level expression form handled separately by the
parser because its left side must be addressable.
"""

from enum import Enum, IntEnum
from typing import Optional

from starfleet_sdk.arc.lexer import TokenKind


class Precedence(IntEnum):
    """Binding power of each operator level."""
    ASSIGNMENT = 1
    LOGICAL_OR = 2
    LOGICAL_AND = 3
    BITWISE_OR = 4
    BITWISE_XOR = 5
    BITWISE_AND = 6
    EQUALITY = 7
    RELATIONAL = 8
    SHIFT = 9
    ADDITIVE = 10
    MULTIPLICATIVE = 11
    PREFIX = 12
    POSTFIX = 13


class BinaryOperator(Enum):
    """Binary operators, valued by their source symbol."""
    # Arithmetic
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"

    # Bitwise
    BITWISE_AND = "&"
    BITWISE_OR = "|"
    BITWISE_XOR = "^"
    LEFT_SHIFT = "<<"
    RIGHT_SHIFT = ">>"

    # Logical
    LOGICAL_AND = "&&"
    LOGICAL_OR = "||"

    # Comparison
    EQUAL = "=="
    LESS = "<"
    GREATER = ">"
    LESS_EQ = "<="
    GREATER_EQ = ">="

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def precedence(self) -> Precedence:
        return BINARY_PRECEDENCE[self]


class PrefixOperator(Enum):
    """Prefix (unary) operators."""
    LOGICAL_NOT = "!"
    BITWISE_NOT = "~"
    NEGATE = "-"

    @property
    def symbol(self) -> str:
        return self.value


class AssignOperator(Enum):
    """
    Plain and compound assignment operators.

    Compound forms are single tokens made of a binary operator and '='.
    """
    ASSIGN = ":="
    ADD_ASSIGN = "+="
    SUB_ASSIGN = "-="
    MUL_ASSIGN = "*="
    DIV_ASSIGN = "/="
    MOD_ASSIGN = "%="
    AND_ASSIGN = "&="
    OR_ASSIGN = "|="
    XOR_ASSIGN = "^="
    LSHIFT_ASSIGN = "<<="
    RSHIFT_ASSIGN = ">>="

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def binary(self) -> Optional[BinaryOperator]:
        """The operator a compound assignment applies, None for ':='."""
        if self is AssignOperator.ASSIGN:
            return None
        return BinaryOperator(self.value[:-1])

    @property
    def is_compound(self) -> bool:
        return self is not AssignOperator.ASSIGN


BINARY_PRECEDENCE: dict[BinaryOperator, Precedence] = {
    BinaryOperator.LOGICAL_OR: Precedence.LOGICAL_OR,
    BinaryOperator.LOGICAL_AND: Precedence.LOGICAL_AND,
    BinaryOperator.BITWISE_OR: Precedence.BITWISE_OR,
    BinaryOperator.BITWISE_XOR: Precedence.BITWISE_XOR,
    BinaryOperator.BITWISE_AND: Precedence.BITWISE_AND,
    BinaryOperator.EQUAL: Precedence.EQUALITY,
    BinaryOperator.LESS: Precedence.RELATIONAL,
    BinaryOperator.GREATER: Precedence.RELATIONAL,
    BinaryOperator.LESS_EQ: Precedence.RELATIONAL,
    BinaryOperator.GREATER_EQ: Precedence.RELATIONAL,
    BinaryOperator.LEFT_SHIFT: Precedence.SHIFT,
    BinaryOperator.RIGHT_SHIFT: Precedence.SHIFT,
    BinaryOperator.ADD: Precedence.ADDITIVE,
    BinaryOperator.SUBTRACT: Precedence.ADDITIVE,
    BinaryOperator.MULTIPLY: Precedence.MULTIPLICATIVE,
    BinaryOperator.DIVIDE: Precedence.MULTIPLICATIVE,
    BinaryOperator.MODULO: Precedence.MULTIPLICATIVE,
}


# =============================================================================
# Token Mappings
# =============================================================================

BINARY_OPERATORS: dict[TokenKind, BinaryOperator] = {
    TokenKind.OR: BinaryOperator.LOGICAL_OR,
    TokenKind.AND: BinaryOperator.LOGICAL_AND,
    TokenKind.PIPE: BinaryOperator.BITWISE_OR,
    TokenKind.CARET: BinaryOperator.BITWISE_XOR,
    TokenKind.AMPERSAND: BinaryOperator.BITWISE_AND,
    TokenKind.EQ: BinaryOperator.EQUAL,
    TokenKind.LT: BinaryOperator.LESS,
    TokenKind.GT: BinaryOperator.GREATER,
    TokenKind.LE: BinaryOperator.LESS_EQ,
    TokenKind.GE: BinaryOperator.GREATER_EQ,
    TokenKind.LSHIFT: BinaryOperator.LEFT_SHIFT,
    TokenKind.RSHIFT: BinaryOperator.RIGHT_SHIFT,
    TokenKind.PLUS: BinaryOperator.ADD,
    TokenKind.MINUS: BinaryOperator.SUBTRACT,
    TokenKind.STAR: BinaryOperator.MULTIPLY,
    TokenKind.SLASH: BinaryOperator.DIVIDE,
    TokenKind.PERCENT: BinaryOperator.MODULO,
}

PREFIX_OPERATORS: dict[TokenKind, PrefixOperator] = {
    TokenKind.NOT: PrefixOperator.LOGICAL_NOT,
    TokenKind.TILDE: PrefixOperator.BITWISE_NOT,
    TokenKind.MINUS: PrefixOperator.NEGATE,
}

ASSIGN_OPERATORS: dict[TokenKind, AssignOperator] = {
    TokenKind.ASSIGN: AssignOperator.ASSIGN,
    TokenKind.PLUS_ASSIGN: AssignOperator.ADD_ASSIGN,
    TokenKind.MINUS_ASSIGN: AssignOperator.SUB_ASSIGN,
    TokenKind.STAR_ASSIGN: AssignOperator.MUL_ASSIGN,
    TokenKind.SLASH_ASSIGN: AssignOperator.DIV_ASSIGN,
    TokenKind.PERCENT_ASSIGN: AssignOperator.MOD_ASSIGN,
    TokenKind.AND_ASSIGN: AssignOperator.AND_ASSIGN,
    TokenKind.OR_ASSIGN: AssignOperator.OR_ASSIGN,
    TokenKind.XOR_ASSIGN: AssignOperator.XOR_ASSIGN,
    TokenKind.LSHIFT_ASSIGN: AssignOperator.LSHIFT_ASSIGN,
    TokenKind.RSHIFT_ASSIGN: AssignOperator.RSHIFT_ASSIGN,
}
