# =============================================================================
# test_parser.py - Arc Parser Unit Tests
# =============================================================================
# Tests for statements, declarations and type names. Expression precedence
# lives in test_expressions.py; diagnostics in test_errors.py.
# =============================================================================

import pytest
from starfleet_sdk.arc import parse
from starfleet_sdk.arc.ast import (
    ASTNode,
    ArrayLiteral,
    ArrayType,
    Assign,
    Block,
    BoolType,
    Break,
    ExprStmt,
    FloatType,
    FunctionDef,
    If,
    Index,
    IntType,
    Member,
    NamedType,
    NumLiteral,
    Program,
    Return,
    StructDef,
    Variable,
    While,
    describe,
)
from starfleet_sdk.arc.operators import AssignOperator
from starfleet_sdk.arc.types import IntWidth, Radix


# =============================================================================
# Helper Functions
# =============================================================================

def parse_ok(source: str) -> Program:
    """Parse source that must be free of diagnostics."""
    result = parse(source, "<test>")
    assert result.success, result.report()
    return result.program


def first_item(source: str) -> ASTNode:
    return parse_ok(source).items[0]


def first_type(type_text: str):
    """Parse a type name through a one-parameter function."""
    function = first_item(f"fun f(x: {type_text}) {{ }}")
    return function.params[0].param_type


# =============================================================================
# Required Behaviour
# =============================================================================

class TestReferencePrograms:
    """End-to-end shapes for the canonical example programs."""

    def test_if_else(self):
        node = first_item("if true { return 1; } else { return 2; }")
        assert isinstance(node, If)
        assert describe(node.condition) == "Bool(true)"
        assert describe(node.consequent) == "[Return(Num(1))]"
        assert describe(node.alternate) == "[Return(Num(2))]"

    def test_function_definition(self):
        node = first_item("fun add(a: i32, b: i32): i32 { return a + b; }")
        assert isinstance(node, FunctionDef)
        assert node.name == "add"
        assert [describe(p) for p in node.params] == [
            "(a, Int(signed,32))",
            "(b, Int(signed,32))",
        ]
        assert describe(node.return_type) == "Int(signed,32)"
        assert describe(node.body) == "[Return(Binary(+, Variable(a), Variable(b)))]"

    def test_array_literal_assignment(self):
        node = first_item("x := [1, 2, 3];")
        assert isinstance(node, ExprStmt)
        assign = node.expression
        assert isinstance(assign, Assign)
        assert assign.op == AssignOperator.ASSIGN
        assert describe(assign.target) == "Variable(x)"
        assert describe(assign.value) == "ArrayLiteral([Num(1), Num(2), Num(3)])"

    def test_compound_assign_on_postfix_chain(self):
        """Member access resolves before indexing, left to right."""
        assign = first_item("a.b[0] += 1;").expression
        assert assign.op == AssignOperator.ADD_ASSIGN
        assert describe(assign.target) == "Index(Member(Variable(a), b), Num(0))"
        assert describe(assign.value) == "Num(1)"


# =============================================================================
# Declarations
# =============================================================================

class TestFunctions:
    """Test function definition parsing."""

    def test_no_parameters_no_return_type(self):
        node = first_item("fun tick() { }")
        assert node.params == ()
        assert node.return_type is None
        assert node.body.statements == ()

    def test_trailing_comma_in_parameters(self):
        node = first_item("fun f(a: bool, b: float,) { }")
        assert [p.name for p in node.params] == ["a", "b"]

    def test_parameter_order_preserved(self):
        node = first_item("fun f(z: u8, a: u16, m: u32) { }")
        assert [p.name for p in node.params] == ["z", "a", "m"]

    def test_struct_return_type(self):
        node = first_item("fun make(): Vector { return v; }")
        assert isinstance(node.return_type, NamedType)
        assert node.return_type.name == "Vector"

    def test_program_functions_property(self):
        program = parse_ok("fun a() { } struct S { } fun b() { }")
        assert [f.name for f in program.functions] == ["a", "b"]
        assert [s.name for s in program.structs] == ["S"]


class TestStructs:
    """Test struct definition parsing."""

    def test_struct_fields_in_order(self):
        node = first_item("struct Engine { thrust: float, online: bool, id: u16 }")
        assert isinstance(node, StructDef)
        assert node.name == "Engine"
        assert [f.name for f in node.fields] == ["thrust", "online", "id"]
        assert isinstance(node.fields[0].field_type, FloatType)
        assert isinstance(node.fields[1].field_type, BoolType)

    def test_empty_struct(self):
        assert first_item("struct Marker { }").fields == ()

    def test_trailing_comma_in_fields(self):
        node = first_item("struct P { x: i32, y: i32, }")
        assert len(node.fields) == 2

    def test_struct_field_of_struct_type(self):
        node = first_item("struct Ship { engine: Engine }")
        assert describe(node.fields[0]) == "(engine, Named(Engine))"


# =============================================================================
# Type Names
# =============================================================================

class TestTypeNames:
    """Test type name parsing."""

    @pytest.mark.parametrize("text,signed,width", [
        ("i8", True, IntWidth.EIGHT),
        ("i16", True, IntWidth.SIXTEEN),
        ("i32", True, IntWidth.THIRTY_TWO),
        ("i64", True, IntWidth.SIXTY_FOUR),
        ("u8", False, IntWidth.EIGHT),
        ("u16", False, IntWidth.SIXTEEN),
        ("u32", False, IntWidth.THIRTY_TWO),
        ("u64", False, IntWidth.SIXTY_FOUR),
    ])
    def test_integer_types(self, text, signed, width):
        node = first_type(text)
        assert isinstance(node, IntType)
        assert node.signed is signed
        assert node.width == width

    def test_bool_and_float(self):
        assert isinstance(first_type("bool"), BoolType)
        assert isinstance(first_type("float"), FloatType)

    def test_named_type(self):
        node = first_type("Shield")
        assert isinstance(node, NamedType)
        assert node.name == "Shield"

    def test_array_type(self):
        node = first_type("[u8, 16]")
        assert isinstance(node, ArrayType)
        assert node.length == 16
        assert isinstance(node.element, IntType)

    def test_nested_array_type(self):
        node = first_type("[[float, 4], 2]")
        assert describe(node) == "Array(Array(Float,4),2)"

    def test_array_length_radix_prefixes(self):
        assert first_type("[u8, 0x10]").length == 16
        assert first_type("[u8, 0b101]").length == 5
        assert first_type("[u8, 0]").length == 0

    def test_array_of_structs(self):
        assert describe(first_type("[Engine, 3]")) == "Array(Named(Engine),3)"


# =============================================================================
# Statements
# =============================================================================

class TestStatements:
    """Test statement parsing."""

    def test_while(self):
        node = first_item("while i < 10 { i += 1; }")
        assert isinstance(node, While)
        assert describe(node.condition) == "Binary(<, Variable(i), Num(10))"
        assert len(node.body.statements) == 1

    def test_if_without_else(self):
        node = first_item("if ready { launch(); }")
        assert node.alternate is None
        assert describe(node.consequent) == "[ExprStmt(Call(Variable(launch), []))]"

    def test_chained_condition_nests_in_else(self):
        node = first_item("if a { x := 1; } else { if b { x := 2; } }")
        inner = node.alternate.statements[0]
        assert isinstance(inner, If)
        assert describe(inner.condition) == "Variable(b)"

    def test_return_without_value(self):
        body = first_item("fun f() { return; }").body
        assert isinstance(body.statements[0], Return)
        assert body.statements[0].value is None

    def test_break_is_accepted_anywhere(self):
        """Loop placement of 'break' is checked by a later pass."""
        program = parse_ok("break; fun f() { break; }")
        assert isinstance(program.items[0], Break)
        assert isinstance(program.items[1].body.statements[0], Break)

    def test_bodies_are_blocks(self):
        node = first_item("while true { break; }")
        assert isinstance(node.body, Block)

    def test_top_level_statements_keep_order(self):
        program = parse_ok("a := 1; fun f() { } b := 2;")
        assert [type(item).__name__ for item in program.items] == [
            "ExprStmt",
            "FunctionDef",
            "ExprStmt",
        ]

    def test_comments_ignored(self):
        program = parse_ok("// header\nx := 1; // trailing\n")
        assert len(program.items) == 1

    def test_empty_program(self):
        program = parse_ok("")
        assert program.items == ()


# =============================================================================
# Literals
# =============================================================================

class TestLiterals:
    """Literals keep their source text."""

    def test_number_text_and_radix(self):
        values = first_item("f(10, 0xFF, 0b11);").expression.arguments
        assert [(v.text, v.radix) for v in values] == [
            ("10", Radix.DECIMAL),
            ("0xFF", Radix.HEXADECIMAL),
            ("0b11", Radix.BINARY),
        ]

    def test_invalid_radix_digits_are_not_validated(self):
        value = first_item("x := 0xg;").expression.value
        assert isinstance(value, NumLiteral)
        assert value.text == "0xg"
        assert value.radix == Radix.HEXADECIMAL

    def test_char_and_string_text(self):
        args = first_item("log('ab', \"hail\", \"\");").expression.arguments
        assert [describe(a) for a in args] == ["Char(ab)", "Str(hail)", "Str()"]

    def test_bool_literals(self):
        args = first_item("f(true, false);").expression.arguments
        assert [a.value for a in args] == [True, False]

    def test_empty_and_trailing_comma_array(self):
        args = first_item("f([], [1,]);").expression.arguments
        assert isinstance(args[0], ArrayLiteral)
        assert args[0].elements == ()
        assert len(args[1].elements) == 1


# =============================================================================
# AST Properties
# =============================================================================

def _check_spans(node: ASTNode, source_length: int) -> None:
    """Every span lies within its parent; siblings never overlap."""
    span = node.span
    assert 0 <= span.start.offset <= span.end.offset <= source_length

    previous_end = span.start.offset
    for child in node.children():
        assert span.contains(child.span), (describe(node), describe(child))
        assert child.span.start.offset >= previous_end, describe(node)
        previous_end = child.span.end.offset
        _check_spans(child, source_length)


class TestTreeProperties:
    """Structural well-formedness of parsed programs."""

    SOURCES = [
        "if true { return 1; } else { return 2; }",
        "fun add(a: i32, b: i32): i32 { return a + b; }",
        "x := [1, 2, 3];",
        "a.b[0] += 1;",
        "struct S { m: [[u8, 2], 3], n: S, }\n"
        "fun g(s: S): bool { while !s.n.ok(1,)[0] { s.m[1][0] <<= -2 * (3 + x); } return false; }",
    ]

    @pytest.mark.parametrize("source", SOURCES)
    def test_spans_well_formed(self, source):
        program = parse_ok(source)
        _check_spans(program, len(source))

    def test_span_text(self):
        source = "  fun f(): u8 { return 1 + 2; }  "
        function = parse_ok(source).items[0]
        start, end = function.span.start.offset, function.span.end.offset
        assert source[start:end] == "fun f(): u8 { return 1 + 2; }"
        ret = function.body.statements[0]
        assert source[ret.span.start.offset:ret.span.end.offset] == "return 1 + 2;"

    def test_spans_do_not_affect_equality(self):
        a = parse_ok("x := 1;")
        b = parse_ok("x   :=   1 ;")
        assert a == b

    def test_nodes_are_immutable(self):
        node = first_item("x := 1;")
        with pytest.raises(AttributeError):
            node.expression = None

    def test_children_are_tuples(self):
        node = first_item("fun f(a: i8) { g(a); }")
        assert isinstance(node.params, tuple)
        assert isinstance(node.body.statements, tuple)
        assert isinstance(node.body.statements[0].expression.arguments, tuple)

    def test_member_and_index_nodes(self):
        target = first_item("a.b[0] := 1;").expression.target
        assert isinstance(target, Index)
        assert isinstance(target.target, Member)
        assert isinstance(target.target.target, Variable)
