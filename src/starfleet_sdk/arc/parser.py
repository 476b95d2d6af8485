"""
Arc Recursive Descent Parser
============================

This module implements the parser for arc. It pulls tokens from the lexer
on demand and builds the AST defined in starfleet_sdk.arc.ast.

Grammar (Simplified EBNF)
-------------------------
program         ::= (function_def | struct_def | statement)*
function_def    ::= 'fun' IDENTIFIER '(' params? ')' (':' type)? body
params          ::= param (',' param)* ','?
param           ::= IDENTIFIER ':' type
struct_def      ::= 'struct' IDENTIFIER '{' fields? '}'
fields          ::= field (',' field)* ','?
field           ::= IDENTIFIER ':' type

type            ::= 'bool' | 'float' | int_type | IDENTIFIER
                  | '[' type ',' NUMBER ']'
int_type        ::= 'i8' | 'i16' | 'i32' | 'i64' | 'u8' | 'u16' | 'u32' | 'u64'

body            ::= '{' statement* '}'
statement       ::= 'break' ';'
                  | 'return' expr? ';'
                  | 'while' expr body
                  | 'if' expr body ('else' body)?
                  | expr ';'

expr            ::= binary (assign_op expr)?
binary          ::= prefix (binary_op prefix)*
prefix          ::= prefix_op prefix | postfix
postfix         ::= primary ('.' IDENTIFIER | '[' expr ']' | '(' args? ')')*
args            ::= expr (',' expr)* ','?
primary         ::= NUMBER | CHAR | STRING | 'true' | 'false' | IDENTIFIER
                  | '(' expr ')' | '[' args? ']'

Binary operators are grouped by the table in starfleet_sdk.arc.operators
using precedence climbing. An assignment is only formed at the top of an
expression, and its target must be a Variable, Member or Index node.

Error Recovery
--------------
Syntax errors are recorded in an ErrorCollector and the parser skips to
the next statement boundary (';', '}', or a statement keyword) before
carrying on, so a single pass reports every independent mistake. Errors
found at an ERROR token are not recorded, because the lexer has already
reported the text behind it. A RecursionLimitError ends the parse.

Example Usage
-------------
>>> from starfleet_sdk.arc.lexer import Lexer
>>> from starfleet_sdk.arc.parser import Parser
>>> source = 'fun main(): i32 { return 42; }'
>>> parser = Parser(Lexer(source, "main.arc").tokenize(), "main.arc")
>>> program = parser.parse()
>>> program.functions[0].name
'main'
"""

from contextlib import contextmanager
from typing import Callable, Iterable, Optional, TypeVar
import logging
import sys

from starfleet_sdk.errors import SourceLocation, SourceSpan
from starfleet_sdk.arc.lexer import Token, TokenKind
from starfleet_sdk.arc.operators import (
    ASSIGN_OPERATORS,
    BINARY_OPERATORS,
    PREFIX_OPERATORS,
    Precedence,
)
from starfleet_sdk.arc.types import INTEGER_TYPES, Radix, resolve_array_length
from starfleet_sdk.arc.ast import (
    ArrayLiteral,
    ArrayType,
    Assign,
    ASTNode,
    Binary,
    Block,
    BoolLiteral,
    BoolType,
    Break,
    Call,
    CharLiteral,
    Expression,
    ExprStmt,
    FloatType,
    FunctionDef,
    If,
    Index,
    IntType,
    Member,
    NamedType,
    NumLiteral,
    Parameter,
    Paren,
    Prefix,
    Program,
    Return,
    Statement,
    StrLiteral,
    StructDef,
    StructField,
    TypeName,
    Variable,
    While,
)
from starfleet_sdk.arc.errors import (
    ArcSyntaxError,
    ErrorCollector,
    InvalidAssignmentTargetError,
    MissingTokenError,
    RecursionLimitError,
    TypeNameError,
    UnexpectedTokenError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_DEPTH = 64

# Python frames spent per nesting level on the deepest path: an array
# literal element goes through expression, binary, prefix, postfix,
# primary and the delimited-list helper.
FRAMES_PER_LEVEL = 6

# Frames left for the caller, the lexer and diagnostic formatting
_STACK_RESERVE = 250


def max_supported_depth() -> int:
    """Largest max_depth the interpreter stack can hold at its current limit."""
    return max(1, (sys.getrecursionlimit() - _STACK_RESERVE) // FRAMES_PER_LEVEL)

# Tokens at which error recovery stops skipping
_STATEMENT_KEYWORDS = frozenset({
    TokenKind.IF,
    TokenKind.WHILE,
    TokenKind.RETURN,
    TokenKind.BREAK,
    TokenKind.FUN,
    TokenKind.STRUCT,
})

_RADIX_NAMES = {
    Radix.DECIMAL: "decimal",
    Radix.HEXADECIMAL: "hexadecimal",
    Radix.BINARY: "binary",
}


class Parser:
    """
    Recursive descent parser for arc.

    Consumes a token stream (usually the generator returned by
    Lexer.tokenize()) and produces a Program. Tokens are pulled one at a
    time through a small lookahead buffer, so the whole token list never
    has to exist in memory.

    parse() always returns a Program. Whether it is usable depends on the
    diagnostics left in the error collector: a program parsed with errors
    contains only the items that parsed cleanly.

    Attributes:
        filename: Source filename for error reporting
        source_lines: Original source lines for error context
        max_depth: Maximum nesting depth before RecursionLimitError
        errors: Collector receiving syntax diagnostics
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        errors: Optional[ErrorCollector] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Token stream ending with an EOF token
            filename: Source filename for error messages
            source_lines: Original source lines for error context
            max_depth: Nesting bound for expressions, types and bodies
            errors: Collector to record diagnostics in (a new one if None)
        """
        self.filename = filename
        self.source_lines = source_lines or []
        self.max_depth = max_depth
        self.errors = errors if errors is not None else ErrorCollector()

        self._tokens = iter(tokens)
        self._lookahead: list[Token] = []
        self._eof: Optional[Token] = None
        self._previous: Optional[Token] = None

        # Number of tokens consumed, used to detect recovery without progress
        self._pos = 0

        # Current nesting depth, checked by _nested()
        self._depth = 0

    def parse(self) -> Program:
        """
        Parse the token stream into a Program.

        Returns:
            Program containing every item that parsed without error
        """
        items: list[ASTNode] = []

        while not self._at_end() and not self.errors.should_stop():
            pos = self._pos
            try:
                items.append(self._parse_item())
            except ArcSyntaxError as e:
                self._report(e)
                self._synchronize_item()
                if self._pos == pos:
                    self._advance()
            except RecursionLimitError as e:
                self.errors.add(e)
                logger.debug(f"Parse stopped: {e.message} at {e.location}")
                break
            except RecursionError:
                # The interpreter stack ran out before max_depth was reached
                error = self._depth_error()
                self.errors.add(error)
                logger.debug(f"Parse stopped: stack exhausted at {error.location}")
                break

        start = SourceLocation(self.filename, 1, 1, 0)
        end = self._peek().span.end if self._at_end() else self._previous_end(start)
        return Program(span=SourceSpan(start, end), items=tuple(items))

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _peek(self, offset: int = 0) -> Token:
        """Look at the token at current position + offset."""
        while len(self._lookahead) <= offset:
            self._lookahead.append(self._next_token())
        return self._lookahead[offset]

    def _next_token(self) -> Token:
        if self._eof is not None:
            return self._eof
        token = next(self._tokens, None)
        if token is None:
            # Stream ended without EOF; synthesize one after the last token
            location = self._previous_end(SourceLocation(self.filename, 1, 1, 0))
            token = Token(TokenKind.EOF, "", SourceSpan(location, location))
        if token.kind == TokenKind.EOF:
            self._eof = token
        return token

    def _previous_end(self, default: SourceLocation) -> SourceLocation:
        if self._previous is None:
            return default
        return self._previous.span.end

    def _at_end(self) -> bool:
        return self._peek().kind == TokenKind.EOF

    def _advance(self) -> Token:
        """Consume and return the current token. EOF is never consumed."""
        token = self._peek()
        if token.kind != TokenKind.EOF:
            self._lookahead.pop(0)
            self._previous = token
            self._pos += 1
        return token

    def _check(self, *kinds: TokenKind) -> bool:
        """Check if current token is one of the given kinds."""
        return self._peek().kind in kinds

    def _match(self, *kinds: TokenKind) -> Optional[Token]:
        """
        Consume current token if it matches one of the kinds.

        Returns:
            The consumed token, or None if no match
        """
        if self._check(*kinds):
            return self._advance()
        return None

    def _expect(self, kind: TokenKind, expected: str) -> Token:
        """
        Expect and consume a specific token kind.

        Raises:
            MissingTokenError: If the expected token is not found
        """
        if self._check(kind):
            return self._advance()

        current = self._peek()
        raise self._error_at(
            MissingTokenError(
                expected,
                current.location,
                self._get_source_line(current.line),
                hint=f"found {current.describe()}",
            ),
            current,
        )

    def _expect_closing(self, kind: TokenKind, expected: str, opener: Token) -> Token:
        """Expect a closing delimiter, pointing the hint at its opener."""
        if self._check(kind):
            return self._advance()

        current = self._peek()
        raise self._error_at(
            MissingTokenError(
                expected,
                current.location,
                self._get_source_line(current.line),
                hint=f"to match {opener.describe()} at {opener.line}:{opener.column}",
            ),
            current,
        )

    def _span_from(self, first) -> SourceSpan:
        """Span from the start of a token or node to the last consumed token."""
        return SourceSpan(first.span.start, self._previous.span.end)

    # =========================================================================
    # Error Handling
    # =========================================================================

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _error_at(self, error: ArcSyntaxError, token: Token) -> ArcSyntaxError:
        """Tag an error raised at a token that stands for a lexical error."""
        error.at_error_token = token.kind == TokenKind.ERROR
        return error

    def _unexpected(self, expected: str) -> ArcSyntaxError:
        token = self._peek()
        return self._error_at(
            UnexpectedTokenError(
                token.describe(),
                expected,
                token.location,
                self._get_source_line(token.line),
            ),
            token,
        )

    def _report(self, error: ArcSyntaxError) -> None:
        if error.at_error_token:
            logger.debug(f"Suppressed follow-on error at {error.location}: {error.message}")
            return
        self.errors.add(error)
        logger.debug(f"Recovering from syntax error at {error.location}: {error.message}")

    def _synchronize(self) -> None:
        """
        Skip tokens until a likely statement boundary.

        A ';' is consumed; '}', end of input and statement keywords are
        left for the caller.
        """
        while not self._at_end():
            kind = self._peek().kind
            if kind == TokenKind.SEMICOLON:
                self._advance()
                return
            if kind == TokenKind.RBRACE or kind in _STATEMENT_KEYWORDS:
                return
            self._advance()

    def _synchronize_item(self) -> None:
        """
        Skip tokens until the next top-level item.

        Braces are balanced, so the rest of a broken function or struct is
        skipped as a whole, including its closing '}'.
        """
        depth = 0
        while not self._at_end():
            kind = self._peek().kind
            if depth == 0:
                if kind == TokenKind.SEMICOLON:
                    self._advance()
                    return
                if kind in _STATEMENT_KEYWORDS:
                    return

            if kind == TokenKind.LBRACE:
                depth += 1
            elif kind == TokenKind.RBRACE:
                depth -= 1
                if depth <= 0:
                    self._advance()
                    return
            self._advance()

    @contextmanager
    def _nested(self):
        """Count one level of nesting, failing past max_depth."""
        if self._depth >= self.max_depth:
            raise self._depth_error()
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def _depth_error(self) -> RecursionLimitError:
        token = self._peek()
        return RecursionLimitError(
            self.max_depth,
            token.location,
            self._get_source_line(token.line),
        )

    # =========================================================================
    # Declarations
    # =========================================================================

    def _parse_item(self) -> ASTNode:
        """Parse a top-level item: function, struct, or statement."""
        if self._check(TokenKind.FUN):
            return self._parse_function()
        if self._check(TokenKind.STRUCT):
            return self._parse_struct()
        return self._parse_statement()

    def _parse_function(self) -> FunctionDef:
        """Parse fun name(params) [: type] body."""
        start = self._advance()  # consume 'fun'
        name = self._expect(TokenKind.IDENTIFIER, "function name")
        open_paren = self._expect(TokenKind.LPAREN, "'('")
        params = self._parse_delimited(
            open_paren, TokenKind.RPAREN, "')'", self._parse_parameter
        )

        return_type = None
        if self._match(TokenKind.COLON):
            return_type = self._parse_type()

        body = self._parse_body()

        logger.debug(f"Parsed function '{name.lexeme}' with {len(params)} parameter(s)")
        return FunctionDef(
            span=self._span_from(start),
            name=name.lexeme,
            params=params,
            return_type=return_type,
            body=body,
        )

    def _parse_parameter(self) -> Parameter:
        name = self._expect(TokenKind.IDENTIFIER, "parameter name")
        self._expect(TokenKind.COLON, "':' after parameter name")
        param_type = self._parse_type()
        return Parameter(span=self._span_from(name), name=name.lexeme, param_type=param_type)

    def _parse_struct(self) -> StructDef:
        """Parse struct name { field: type, ... }."""
        start = self._advance()  # consume 'struct'
        name = self._expect(TokenKind.IDENTIFIER, "struct name")
        open_brace = self._expect(TokenKind.LBRACE, "'{'")
        fields = self._parse_delimited(
            open_brace, TokenKind.RBRACE, "'}'", self._parse_field
        )
        return StructDef(span=self._span_from(start), name=name.lexeme, fields=fields)

    def _parse_field(self) -> StructField:
        name = self._expect(TokenKind.IDENTIFIER, "field name")
        self._expect(TokenKind.COLON, "':' after field name")
        field_type = self._parse_type()
        return StructField(span=self._span_from(name), name=name.lexeme, field_type=field_type)

    def _parse_delimited(
        self,
        opener: Token,
        closer: TokenKind,
        closer_text: str,
        parse_element: Callable[[], T],
    ) -> tuple[T, ...]:
        """
        Parse a comma separated list up to and including its closer.

        The list may be empty and may end with a trailing comma.
        """
        elements = []
        while not self._check(closer):
            elements.append(parse_element())
            if not self._match(TokenKind.COMMA):
                break
        self._expect_closing(closer, closer_text, opener)
        return tuple(elements)

    # =========================================================================
    # Type Names
    # =========================================================================

    def _parse_type(self) -> TypeName:
        """Parse a type name."""
        token = self._peek()
        kind = token.kind

        if kind == TokenKind.BOOL:
            self._advance()
            return BoolType(span=token.span)

        if kind == TokenKind.FLOAT:
            self._advance()
            return FloatType(span=token.span)

        if kind in INTEGER_TYPES:
            self._advance()
            signed, width = INTEGER_TYPES[kind]
            return IntType(span=token.span, signed=signed, width=width)

        if kind == TokenKind.IDENTIFIER:
            self._advance()
            return NamedType(span=token.span, name=token.lexeme)

        if kind == TokenKind.LBRACKET:
            return self._parse_array_type()

        raise self._error_at(
            TypeNameError(
                f"expected type name, found {token.describe()}",
                token.location,
                hint="use bool, float, i8..i64, u8..u64, a struct name or [type, length]",
                source_line=self._get_source_line(token.line),
            ),
            token,
        )

    def _parse_array_type(self) -> ArrayType:
        """Parse [element, length]."""
        open_bracket = self._advance()  # consume '['
        with self._nested():
            element = self._parse_type()
        self._expect(TokenKind.COMMA, "',' before array length")
        length = self._parse_array_length()
        self._expect_closing(TokenKind.RBRACKET, "']'", open_bracket)
        return ArrayType(span=self._span_from(open_bracket), element=element, length=length)

    def _parse_array_length(self) -> int:
        """
        Parse and resolve an array length.

        The length must be a numeric literal whose digits are valid for
        its radix. Negative lengths and names are rejected.
        """
        token = self._peek()
        source_line = self._get_source_line(token.line)

        if token.kind == TokenKind.MINUS:
            raise TypeNameError(
                "array length must not be negative",
                token.location,
                source_line=source_line,
            )

        if token.kind != TokenKind.NUMBER:
            raise self._error_at(
                TypeNameError(
                    f"array length must be an integer literal, found {token.describe()}",
                    token.location,
                    source_line=source_line,
                ),
                token,
            )

        length = resolve_array_length(token.lexeme)
        if length is None:
            radix = Radix.of(token.lexeme)
            raise TypeNameError(
                f"invalid array length '{token.lexeme}'",
                token.location,
                hint=f"'{token.lexeme}' is not a valid {_RADIX_NAMES[radix]} literal",
                source_line=source_line,
            )

        self._advance()
        return length

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_body(self) -> Block:
        """Parse { statement* }, recovering from errors at statement level."""
        open_brace = self._expect(TokenKind.LBRACE, "'{'")
        statements: list[Statement] = []

        with self._nested():
            while not self._check(TokenKind.RBRACE) and not self._at_end():
                if self.errors.should_stop():
                    break
                pos = self._pos
                try:
                    statements.append(self._parse_statement())
                except ArcSyntaxError as e:
                    self._report(e)
                    self._synchronize()
                    if self._pos == pos and not self._check(TokenKind.RBRACE):
                        self._advance()

        self._expect_closing(TokenKind.RBRACE, "'}'", open_brace)
        return Block(span=self._span_from(open_brace), statements=tuple(statements))

    def _parse_statement(self) -> Statement:
        """Parse a single statement."""
        kind = self._peek().kind

        if kind == TokenKind.IF:
            return self._parse_if()
        if kind == TokenKind.WHILE:
            return self._parse_while()
        if kind == TokenKind.RETURN:
            return self._parse_return()
        if kind == TokenKind.BREAK:
            return self._parse_break()

        start = self._peek()
        expression = self._parse_expression()
        self._expect(TokenKind.SEMICOLON, "';' after expression")
        return ExprStmt(span=self._span_from(start), expression=expression)

    def _parse_if(self) -> If:
        """Parse if condition body [else body]."""
        start = self._advance()  # consume 'if'
        condition = self._parse_expression()
        consequent = self._parse_body()

        alternate = None
        if self._match(TokenKind.ELSE):
            if self._check(TokenKind.IF):
                token = self._peek()
                raise MissingTokenError(
                    "'{' after 'else'",
                    token.location,
                    self._get_source_line(token.line),
                    hint="there is no 'else if'; nest the 'if' inside an 'else' body",
                )
            alternate = self._parse_body()

        return If(
            span=self._span_from(start),
            condition=condition,
            consequent=consequent,
            alternate=alternate,
        )

    def _parse_while(self) -> While:
        start = self._advance()  # consume 'while'
        condition = self._parse_expression()
        body = self._parse_body()
        return While(span=self._span_from(start), condition=condition, body=body)

    def _parse_return(self) -> Return:
        start = self._advance()  # consume 'return'
        value = None
        if not self._check(TokenKind.SEMICOLON):
            value = self._parse_expression()
        self._expect(TokenKind.SEMICOLON, "';' after return")
        return Return(span=self._span_from(start), value=value)

    def _parse_break(self) -> Break:
        start = self._advance()  # consume 'break'
        self._expect(TokenKind.SEMICOLON, "';' after break")
        return Break(span=self._span_from(start))

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """
        Parse an expression, including a top-level assignment.

        Assignment is right-associative: a := b := c assigns c to b, then
        the result to a. The target is checked before the operator is
        consumed.
        """
        with self._nested():
            start = self._peek()
            expr = self._parse_binary(Precedence.LOGICAL_OR)

            op = ASSIGN_OPERATORS.get(self._peek().kind)
            if op is None:
                return expr

            if not expr.addressable:
                raise InvalidAssignmentTargetError(
                    start.location,
                    self._get_source_line(start.line),
                )

            self._advance()
            value = self._parse_expression()
            return Assign(span=expr.span.to(value.span), target=expr, op=op, value=value)

    def _parse_binary(self, min_precedence: int) -> Expression:
        """
        Precedence climbing over the binary operator table.

        Operators at or above min_precedence are folded into the left
        operand; the right operand is parsed one level higher, which makes
        every binary level left-associative.
        """
        left = self._parse_prefix()

        while True:
            op = BINARY_OPERATORS.get(self._peek().kind)
            if op is None or op.precedence < min_precedence:
                return left

            self._advance()
            with self._nested():
                right = self._parse_binary(op.precedence + 1)
            left = Binary(span=left.span.to(right.span), op=op, left=left, right=right)

    def _parse_prefix(self) -> Expression:
        """Parse prefix operators ! ~ - (right-associative)."""
        token = self._peek()
        op = PREFIX_OPERATORS.get(token.kind)
        if op is None:
            return self._parse_postfix()

        self._advance()
        with self._nested():
            operand = self._parse_prefix()
        return Prefix(span=self._span_from(token), op=op, operand=operand)

    def _parse_postfix(self) -> Expression:
        """Parse a primary followed by .name, [index] and (args), left to right."""
        expr = self._parse_primary()

        while True:
            if self._match(TokenKind.DOT):
                name = self._expect(TokenKind.IDENTIFIER, "member name after '.'")
                expr = Member(span=self._span_from(expr), target=expr, name=name.lexeme)

            elif self._check(TokenKind.LBRACKET):
                open_bracket = self._advance()
                index = self._parse_expression()
                self._expect_closing(TokenKind.RBRACKET, "']'", open_bracket)
                expr = Index(span=self._span_from(expr), target=expr, index=index)

            elif self._check(TokenKind.LPAREN):
                open_paren = self._advance()
                arguments = self._parse_delimited(
                    open_paren, TokenKind.RPAREN, "')'", self._parse_expression
                )
                expr = Call(span=self._span_from(expr), callee=expr, arguments=arguments)

            else:
                return expr

    def _parse_primary(self) -> Expression:
        """Parse literals, names, parenthesized expressions and array literals."""
        token = self._peek()
        kind = token.kind

        if kind == TokenKind.NUMBER:
            self._advance()
            return NumLiteral(span=token.span, text=token.lexeme, radix=Radix.of(token.lexeme))

        if kind in (TokenKind.TRUE, TokenKind.FALSE):
            self._advance()
            return BoolLiteral(span=token.span, value=kind == TokenKind.TRUE)

        if kind == TokenKind.CHAR:
            self._advance()
            return CharLiteral(span=token.span, text=token.lexeme[1:-1])

        if kind == TokenKind.STRING:
            self._advance()
            return StrLiteral(span=token.span, text=token.lexeme[1:-1])

        if kind == TokenKind.IDENTIFIER:
            self._advance()
            return Variable(span=token.span, name=token.lexeme)

        if kind == TokenKind.LPAREN:
            open_paren = self._advance()
            inner = self._parse_expression()
            self._expect_closing(TokenKind.RPAREN, "')'", open_paren)
            return Paren(span=self._span_from(open_paren), expression=inner)

        if kind == TokenKind.LBRACKET:
            open_bracket = self._advance()
            elements = self._parse_delimited(
                open_bracket, TokenKind.RBRACKET, "']'", self._parse_expression
            )
            return ArrayLiteral(span=self._span_from(open_bracket), elements=elements)

        raise self._unexpected("expression")
