"""
Arc Type Names
==============

This module holds the building blocks the parser uses for type names:
integer widths, the primitive-type keyword table, the radix tag carried by
numeric literals, and the parse-time resolution of array lengths.

Supported Type Names
--------------------
| Syntax            | AST node                  |
|-------------------|---------------------------|
| bool              | BoolType                  |
| float             | FloatType                 |
| i8 i16 i32 i64    | IntType(signed=True, ..)  |
| u8 u16 u32 u64    | IntType(signed=False, ..) |
| [T, N]            | ArrayType(T, N)           |
| Name              | NamedType("Name")         |

Array lengths are the only numeric literals the front end converts to a
value, because the length is part of the type. Everywhere else a number
keeps its source text and radix tag.
"""

from enum import Enum, IntEnum
from typing import Optional

from starfleet_sdk.arc.lexer import TokenKind


class IntWidth(IntEnum):
    """Valid integer bit widths."""
    EIGHT = 8
    SIXTEEN = 16
    THIRTY_TWO = 32
    SIXTY_FOUR = 64


# Integer type keywords: token kind -> (signed, width)
INTEGER_TYPES: dict[TokenKind, tuple[bool, IntWidth]] = {
    TokenKind.I8: (True, IntWidth.EIGHT),
    TokenKind.I16: (True, IntWidth.SIXTEEN),
    TokenKind.I32: (True, IntWidth.THIRTY_TWO),
    TokenKind.I64: (True, IntWidth.SIXTY_FOUR),
    TokenKind.U8: (False, IntWidth.EIGHT),
    TokenKind.U16: (False, IntWidth.SIXTEEN),
    TokenKind.U32: (False, IntWidth.THIRTY_TWO),
    TokenKind.U64: (False, IntWidth.SIXTY_FOUR),
}


def integer_type_name(signed: bool, width: IntWidth) -> str:
    """Source spelling of an integer type, e.g. 'i32' or 'u8'."""
    return f"{'i' if signed else 'u'}{int(width)}"


class Radix(Enum):
    """Radix tag of a numeric literal, taken from its prefix alone."""
    DECIMAL = 10
    HEXADECIMAL = 16
    BINARY = 2

    @classmethod
    def of(cls, text: str) -> "Radix":
        """
        Tag a numeric literal by prefix.

        '0x...' is hexadecimal and '0b...' binary; anything else is
        decimal. The digits are not checked.
        """
        prefix = text[:2]
        if prefix == "0x":
            return cls.HEXADECIMAL
        if prefix == "0b":
            return cls.BINARY
        return cls.DECIMAL

    def digits(self, text: str) -> str:
        """The literal text without its radix prefix."""
        if self is Radix.DECIMAL:
            return text
        return text[2:]


def resolve_array_length(text: str) -> Optional[int]:
    """
    Convert the text of an array length literal to an int.

    Returns:
        The length, or None if the digits are not valid for the radix
        given by the prefix ('0xg', '12ab', '0b2').
    """
    radix = Radix.of(text)
    digits = radix.digits(text)
    if not digits or not all(c in _VALID_DIGITS[radix] for c in digits.lower()):
        return None
    return int(digits, radix.value)


_VALID_DIGITS: dict[Radix, str] = {
    Radix.DECIMAL: "0123456789",
    Radix.HEXADECIMAL: "0123456789abcdef",
    Radix.BINARY: "01",
}
