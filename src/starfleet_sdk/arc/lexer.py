"""
Arc Lexer (Tokenizer)
=====================

This module implements the lexer for arc, the scripting language that
drives ship systems in the Starfleet simulation. It converts source text
into a lazy stream of tokens for the parser.

Token Categories
----------------
- Keywords: fun, struct, if, else, while, return, break, true, false
- Type keywords: bool, float, i8, i16, i32, i64, u8, u16, u32, u64
- Identifiers: letter or underscore, then letters, digits, underscores
- Numbers: a digit followed by any run of letters and digits
- Chars: 'letters'
- Strings: "letters"
- Operators: + - * / % & | ^ ! ~ && || == < > <= >= << >>
- Assignment: := and compound forms += -= *= /= %= &= |= ^= <<= >>=
- Delimiters: { } ( ) [ ] , : ; .

Literal Forms
-------------
Numeric literals are kept as text. The lexer accepts any alphanumeric
run after the leading digit, so 0xFF, 0b101 and even 0xg are single
NUMBER tokens; checking the digits against the radix belongs to a later
stage.

Char and string literals accept letters only: no digits, spaces,
punctuation or escape sequences. A char literal needs at least one
letter ('ab' is a valid char literal), a string literal may be empty.

Comments
--------
- Single-line: // comment

Error Handling
--------------
Without an ErrorCollector the lexer raises on the first LexicalError.
With one, it records the error, skips the offending text and emits an
ERROR token covering it, then carries on. Outside literals the skip runs
to the next whitespace; inside a literal it runs to the closing quote or
the end of the line.

Example Usage
-------------
>>> from starfleet_sdk.arc.lexer import Lexer
>>> for token in Lexer("x := 1;").tokenize():
...     print(token)
Token(IDENTIFIER, 'x', 1:1)
Token(ASSIGN, ':=', 1:3)
Token(NUMBER, '1', 1:6)
Token(SEMICOLON, ';', 1:7)
Token(EOF, 1:8)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import logging
import string

from starfleet_sdk.errors import SourceLocation, SourceSpan
from starfleet_sdk.arc.errors import (
    ErrorCollector,
    LexicalError,
    UnterminatedLiteralError,
    InvalidCharacterError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """
    Token kinds for the arc language.

    Keywords are distinguished from identifiers so the parser never has to
    compare identifier text.
    """

    # === Structural Tokens ===
    EOF = auto()            # End of input
    ERROR = auto()          # Placeholder for text skipped after a lexical error

    # === Identifiers and Literals ===
    IDENTIFIER = auto()
    NUMBER = auto()         # Numeric literal, kept as text
    STRING = auto()         # "letters"
    CHAR = auto()           # 'letters'

    # === Keywords ===
    FUN = auto()
    STRUCT = auto()
    IF = auto()
    ELSE = auto()
    WHILE = auto()
    RETURN = auto()
    BREAK = auto()
    TRUE = auto()
    FALSE = auto()

    # === Type Keywords ===
    BOOL = auto()
    FLOAT = auto()
    I8 = auto()
    I16 = auto()
    I32 = auto()
    I64 = auto()
    U8 = auto()
    U16 = auto()
    U32 = auto()
    U64 = auto()

    # === Arithmetic Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # - (subtract or negate)
    STAR = auto()           # *
    SLASH = auto()          # /
    PERCENT = auto()        # %

    # === Bitwise Operators ===
    AMPERSAND = auto()      # &
    PIPE = auto()           # |
    CARET = auto()          # ^
    TILDE = auto()          # ~
    LSHIFT = auto()         # <<
    RSHIFT = auto()         # >>

    # === Logical and Comparison Operators ===
    AND = auto()            # &&
    OR = auto()             # ||
    NOT = auto()            # !
    EQ = auto()             # ==
    LT = auto()             # <
    GT = auto()             # >
    LE = auto()             # <=
    GE = auto()             # >=

    # === Assignment Operators ===
    ASSIGN = auto()         # :=
    PLUS_ASSIGN = auto()    # +=
    MINUS_ASSIGN = auto()   # -=
    STAR_ASSIGN = auto()    # *=
    SLASH_ASSIGN = auto()   # /=
    PERCENT_ASSIGN = auto() # %=
    AND_ASSIGN = auto()     # &=
    OR_ASSIGN = auto()      # |=
    XOR_ASSIGN = auto()     # ^=
    LSHIFT_ASSIGN = auto()  # <<=
    RSHIFT_ASSIGN = auto()  # >>=

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACE = auto()         # {
    RBRACE = auto()         # }
    LBRACKET = auto()       # [
    RBRACKET = auto()       # ]
    COMMA = auto()          # ,
    COLON = auto()          # :
    SEMICOLON = auto()      # ;
    DOT = auto()            # .


# =============================================================================
# Keyword Mapping
# =============================================================================

KEYWORDS: dict[str, TokenKind] = {
    # Declarations
    "fun": TokenKind.FUN,
    "struct": TokenKind.STRUCT,

    # Control flow
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "while": TokenKind.WHILE,
    "return": TokenKind.RETURN,
    "break": TokenKind.BREAK,

    # Boolean literals
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,

    # Primitive types
    "bool": TokenKind.BOOL,
    "float": TokenKind.FLOAT,
    "i8": TokenKind.I8,
    "i16": TokenKind.I16,
    "i32": TokenKind.I32,
    "i64": TokenKind.I64,
    "u8": TokenKind.U8,
    "u16": TokenKind.U16,
    "u32": TokenKind.U32,
    "u64": TokenKind.U64,
}

# Operators that may be followed by '=' to form a compound assignment.
# '<' and '>' are absent: '<=' and '>=' are comparisons.
COMPOUND_ASSIGNMENTS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS_ASSIGN,
    "-": TokenKind.MINUS_ASSIGN,
    "*": TokenKind.STAR_ASSIGN,
    "/": TokenKind.SLASH_ASSIGN,
    "%": TokenKind.PERCENT_ASSIGN,
    "&": TokenKind.AND_ASSIGN,
    "|": TokenKind.OR_ASSIGN,
    "^": TokenKind.XOR_ASSIGN,
    "<<": TokenKind.LSHIFT_ASSIGN,
    ">>": TokenKind.RSHIFT_ASSIGN,
}

# Two-character operators, checked before single characters
DOUBLE_OPERATORS: dict[str, TokenKind] = {
    "&&": TokenKind.AND,
    "||": TokenKind.OR,
    "==": TokenKind.EQ,
    "<=": TokenKind.LE,
    ">=": TokenKind.GE,
    "<<": TokenKind.LSHIFT,
    ">>": TokenKind.RSHIFT,
    ":=": TokenKind.ASSIGN,
}

SINGLE_TOKENS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "&": TokenKind.AMPERSAND,
    "|": TokenKind.PIPE,
    "^": TokenKind.CARET,
    "~": TokenKind.TILDE,
    "!": TokenKind.NOT,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ";": TokenKind.SEMICOLON,
    ".": TokenKind.DOT,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from arc source code.

    Attributes:
        kind: The TokenKind classification
        lexeme: The exact source text of the token ("" for EOF)
        span: Where the token appears in the source
    """
    kind: TokenKind
    lexeme: str
    span: SourceSpan

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.lexeme:
            return f"Token({self.kind.name}, {self.lexeme!r}, {self.line}:{self.column})"
        return f"Token({self.kind.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return the start SourceLocation for error reporting."""
        return self.span.start

    @property
    def line(self) -> int:
        return self.span.start.line

    @property
    def column(self) -> int:
        return self.span.start.column

    def describe(self) -> str:
        """Describe the token for error messages."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        return f"'{self.lexeme}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes arc source code.

    The lexer is a generator: tokenize() yields tokens on demand and ends
    with a single EOF token. Each call to tokenize() returns an independent
    stream with its own cursor, starting from the beginning of the source.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
        errors: Optional collector; when given, lexical errors are recorded
            and the lexer resynchronizes instead of raising
    """

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        errors: Optional[ErrorCollector] = None,
    ):
        """
        Initialize the lexer with source code.

        Args:
            source: The arc source code to tokenize
            filename: Name of the source file (for error messages)
            errors: Collector for lexical errors (raise on first error if None)
        """
        self.source = source
        self.filename = filename
        self.errors = errors

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects, ending with one EOF token

        Raises:
            LexicalError: On invalid input, when no collector is attached
        """
        return _Scanner(self.source, self.filename, self.errors).tokens()


class _Scanner:
    """Scanning state for a single token stream."""

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    # Characters allowed in the body of numeric literals
    NUMBER_CHARS = string.ascii_letters + string.digits

    # Characters allowed inside char and string literals
    LITERAL_CHARS = string.ascii_letters

    WHITESPACE = " \t\r\n"

    QUOTES = "'\""

    def __init__(
        self,
        source: str,
        filename: str,
        errors: Optional[ErrorCollector],
    ):
        self.source = source
        self.filename = filename
        self.errors = errors
        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

    def tokens(self) -> Iterator[Token]:
        while True:
            self._skip_whitespace_and_comments()
            if self._at_end():
                break

            start = self._location()
            try:
                yield self._scan_token(start)
            except LexicalError as e:
                if self.errors is None:
                    raise
                self.errors.add(e)
                yield self._resynchronize(start)

        yield Token(TokenKind.EOF, "", SourceSpan(self._location(), self._location()))

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at current position + offset, or "" past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line and column."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self._line, self._column, self._pos)

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(self, kind: TokenKind, start: SourceLocation) -> Token:
        """Create a token covering everything from start to the current position."""
        lexeme = self.source[start.offset:self._pos]
        return Token(kind, lexeme, SourceSpan(start, self._location()))

    def _resynchronize(self, start: SourceLocation) -> Token:
        """
        Skip past the text that caused a lexical error.

        Inside a char or string literal this is the rest of the literal,
        up to and including its closing quote, or up to the end of the
        line. Anywhere else it is everything up to the next whitespace.

        Returns an ERROR token covering the skipped text so the parser can
        tell that a diagnostic has already been recorded for it.
        """
        quote = self.source[start.offset]
        if quote in self.QUOTES:
            if self._pos == start.offset:
                self._advance()
            while not self._at_end() and self._peek() not in ("\n", quote):
                self._advance()
            if self._peek() == quote:
                self._advance()
        else:
            while not self._at_end() and self._peek() not in self.WHITESPACE:
                self._advance()
        token = self._make_token(TokenKind.ERROR, start)
        logger.debug(f"Lexer resynchronized after {token.lexeme!r} at {start}")
        return token

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char in self.WHITESPACE:
                self._advance()
                continue

            # Single-line comment: //
            if char == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            break

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self, start: SourceLocation) -> Token:
        char = self._peek()

        # Identifiers and keywords
        if char in self.IDENT_START:
            return self._scan_identifier(start)

        # Numbers (ASCII digits only)
        if char in string.digits:
            return self._scan_number(start)

        # String and char literals
        if char == '"':
            return self._scan_quoted(start, '"', TokenKind.STRING, min_length=0)
        if char == "'":
            return self._scan_quoted(start, "'", TokenKind.CHAR, min_length=1)

        return self._scan_operator(start)

    def _scan_identifier(self, start: SourceLocation) -> Token:
        """
        Scan an identifier or keyword.

        Keywords are resolved against the fixed KEYWORDS table, so 'If' and
        'IF' are ordinary identifiers.
        """
        while self._peek() and self._peek() in self.IDENT_CHARS:
            self._advance()

        name = self.source[start.offset:self._pos]
        return self._make_token(KEYWORDS.get(name, TokenKind.IDENTIFIER), start)

    def _scan_number(self, start: SourceLocation) -> Token:
        """
        Scan a numeric literal.

        A digit followed by any run of letters and digits. The digits are
        not checked against the radix prefix.
        """
        self._advance()
        while self._peek() and self._peek() in self.NUMBER_CHARS:
            self._advance()
        return self._make_token(TokenKind.NUMBER, start)

    def _scan_quoted(
        self,
        start: SourceLocation,
        quote: str,
        kind: TokenKind,
        min_length: int,
    ) -> Token:
        """Scan a char or string literal whose body is letters only."""
        self._advance()  # consume opening quote

        length = 0
        while self._peek() and self._peek() in self.LITERAL_CHARS:
            self._advance()
            length += 1

        char = self._peek()
        if char == quote and length >= min_length:
            self._advance()  # consume closing quote
            return self._make_token(kind, start)

        what = "string literal" if kind == TokenKind.STRING else "character literal"

        if char in ("", "\n") or char == quote:
            # End of input, end of line, or an empty char literal
            if char == quote:
                raise LexicalError(
                    "empty character literal",
                    start,
                    hint="character literals need at least one letter",
                    source_line=self._get_current_line(),
                )
            raise UnterminatedLiteralError(quote, start, self._get_current_line())

        raise InvalidCharacterError(
            char,
            self._location(),
            self._get_current_line(),
            context=what,
        )

    def _scan_operator(self, start: SourceLocation) -> Token:
        """
        Scan an operator or delimiter.

        Longest match wins: '<<=' before '<<' before '<', and any binary
        operator directly followed by '=' becomes a compound assignment.
        """
        pair = self._peek() + self._peek(1)

        if pair in ("<<", ">>") and self._peek(2) == "=":
            self._advance()
            self._advance()
            self._advance()
            return self._make_token(COMPOUND_ASSIGNMENTS[pair], start)

        if pair in DOUBLE_OPERATORS:
            self._advance()
            self._advance()
            return self._make_token(DOUBLE_OPERATORS[pair], start)

        char = self._peek()
        if char in COMPOUND_ASSIGNMENTS and self._peek(1) == "=":
            self._advance()
            self._advance()
            return self._make_token(COMPOUND_ASSIGNMENTS[char], start)

        if char in SINGLE_TOKENS:
            self._advance()
            return self._make_token(SINGLE_TOKENS[char], start)

        raise InvalidCharacterError(char, start, self._get_current_line())

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize source text eagerly, raising on the first lexical error."""
    return list(Lexer(source, filename).tokenize())
