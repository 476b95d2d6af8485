"""
Arc Scripting Language Front End
================================

This package implements the front end of arc, the small typed scripting
language that drives behaviour inside the Starfleet entity-component
simulation. It provides:

- A lexer producing a lazy token stream
- An operator table fixing precedence and associativity
- A recursive descent parser producing an immutable AST
- Diagnostics collected in a single pass
- A post-parse check for 'break' placement

Pipeline
--------
    Arc Source → Lexer → Parser → AST → (type checker, interpreter, ...)

Everything after the AST belongs to other stages; this package never
type-checks, evaluates or serializes a program.

Usage
-----
>>> from starfleet_sdk.arc import parse
>>> result = parse('''
... struct Engine { thrust: float, online: bool }
... fun fire(e: Engine, burst: [u8, 4]): bool {
...     if e.online { return true; } else { return false; }
... }
... ''')
>>> result.success
True
>>> [f.name for f in result.program.functions]
['fire']

Language Summary
----------------
- Types: bool, float, i8..i64, u8..u64, [T, N] arrays, named structs
- Statements: if/else, while, break, return, expression statements
- Operators: arithmetic, bitwise, shifts, comparisons, logical
- Assignment: := and compound forms (+=, <<=, ...)
- Literals: numbers (kept as text), 'chars', "strings", true/false, [arrays]
"""

from starfleet_sdk.arc.frontend import (
    ArcFrontEnd,
    ParseOptions,
    ParseResult,
    parse,
    parse_file,
)
from starfleet_sdk.arc.checks import check_program
from starfleet_sdk.arc.errors import (
    ArcError,
    ArcCompilationError,
    LexicalError,
    ArcSyntaxError,
    TypeNameError,
    RecursionLimitError,
    BreakOutsideLoopError,
    DiagnosticKind,
    ErrorCollector,
)
from starfleet_sdk.arc.lexer import Lexer, Token, TokenKind
from starfleet_sdk.arc.parser import Parser
from starfleet_sdk.arc.ast import (
    ASTNode,
    ASTVisitor,
    ASTPrinter,
    Program,
    FunctionDef,
    StructDef,
    Block,
    If,
    While,
    Return,
    Break,
    ExprStmt,
    Assign,
    Binary,
    Prefix,
    Call,
    Member,
    Index,
    Variable,
)

__all__ = [
    # Main API
    "ArcFrontEnd",
    "ParseOptions",
    "ParseResult",
    "parse",
    "parse_file",
    "check_program",
    # Errors
    "ArcError",
    "ArcCompilationError",
    "LexicalError",
    "ArcSyntaxError",
    "TypeNameError",
    "RecursionLimitError",
    "BreakOutsideLoopError",
    "DiagnosticKind",
    "ErrorCollector",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    # Parser
    "Parser",
    # AST Nodes
    "ASTNode",
    "ASTVisitor",
    "ASTPrinter",
    "Program",
    "FunctionDef",
    "StructDef",
    "Block",
    "If",
    "While",
    "Return",
    "Break",
    "ExprStmt",
    "Assign",
    "Binary",
    "Prefix",
    "Call",
    "Member",
    "Index",
    "Variable",
]
