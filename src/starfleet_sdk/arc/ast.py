"""
Arc Abstract Syntax Tree (AST) Definitions
==========================================

This module defines the AST node types produced by the arc parser. The
AST is the only artifact the front end hands on: type checkers,
interpreters and the simulation runtime all consume it.

Node Hierarchy
--------------
ASTNode (base)
├── Program - root node containing all top-level items
├── Declarations
│   ├── FunctionDef - fun name(params): type { ... }
│   ├── Parameter - one function parameter
│   ├── StructDef - struct name { fields }
│   └── StructField - one struct field
├── Statements
│   ├── Block - { statements }
│   ├── Break - break;
│   ├── Return - return [value];
│   ├── While - while condition { ... }
│   ├── If - if condition { ... } [else { ... }]
│   └── ExprStmt - expression used as a statement
├── Expressions
│   ├── CharLiteral, StrLiteral, NumLiteral, BoolLiteral, ArrayLiteral
│   ├── Variable - name reference
│   ├── Member - target.name
│   ├── Index - target[index]
│   ├── Call - callee(arguments)
│   ├── Binary - left op right
│   ├── Prefix - op operand
│   ├── Paren - ( expression )
│   └── Assign - target := value, target op= value
└── Type names
    ├── BoolType, FloatType
    ├── IntType - signed/unsigned with width
    ├── ArrayType - [element, length]
    └── NamedType - struct reference by name

Design Notes
------------
- Nodes are frozen dataclasses; children are held in tuples, so the tree
  cannot be changed after the parser builds it
- Each node owns its children exclusively: no parent links, no sharing
- Every node carries a SourceSpan; spans are excluded from equality so
  trees can be compared structurally
"""

from dataclasses import dataclass, field, fields
from typing import Any, Optional

from starfleet_sdk.errors import SourceSpan
from starfleet_sdk.arc.operators import AssignOperator, BinaryOperator, PrefixOperator
from starfleet_sdk.arc.types import IntWidth, Radix, integer_type_name


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        span: Source range covered by this node
    """
    span: SourceSpan = field(compare=False, repr=False)

    def children(self) -> list["ASTNode"]:
        """Direct child nodes, in source order."""
        result = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ASTNode):
                result.append(value)
            elif isinstance(value, tuple):
                result.extend(item for item in value if isinstance(item, ASTNode))
        return result


@dataclass(frozen=True)
class Expression(ASTNode):
    """
    Base class for all expression nodes.

    Attributes:
        addressable: True for node types that may appear on the left of an
            assignment (Variable, Member, Index)
    """
    addressable = False


@dataclass(frozen=True)
class Statement(ASTNode):
    """Base class for all statement nodes."""
    pass


@dataclass(frozen=True)
class Declaration(ASTNode):
    """Base class for declarations that introduce a name."""
    pass


@dataclass(frozen=True)
class TypeName(ASTNode):
    """Base class for type name nodes."""
    pass


# =============================================================================
# Type Name Nodes
# =============================================================================

@dataclass(frozen=True)
class BoolType(TypeName):
    """The 'bool' type."""
    pass


@dataclass(frozen=True)
class FloatType(TypeName):
    """The 'float' type."""
    pass


@dataclass(frozen=True)
class IntType(TypeName):
    """
    Integer type.

    Attributes:
        signed: True for i8..i64, False for u8..u64
        width: Bit width
    """
    signed: bool = True
    width: IntWidth = IntWidth.THIRTY_TWO


@dataclass(frozen=True)
class ArrayType(TypeName):
    """
    Fixed-length array type [element, length].

    Attributes:
        element: Element type (may itself be an array)
        length: Element count, resolved at parse time
    """
    element: TypeName = None
    length: int = 0


@dataclass(frozen=True)
class NamedType(TypeName):
    """
    Reference to a struct type by name.

    Whether the struct exists is checked by a later stage.
    """
    name: str = ""


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class CharLiteral(Expression):
    """Char literal; text is the letters between the quotes."""
    text: str = ""


@dataclass(frozen=True)
class StrLiteral(Expression):
    """String literal; text is the letters between the quotes."""
    text: str = ""


@dataclass(frozen=True)
class NumLiteral(Expression):
    """
    Numeric literal.

    Attributes:
        text: Exact source text, never converted
        radix: Tag derived from the prefix (the digits are not validated)
    """
    text: str = ""
    radix: Radix = Radix.DECIMAL


@dataclass(frozen=True)
class BoolLiteral(Expression):
    value: bool = False


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    """Array literal [a, b, c]."""
    elements: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Variable(Expression):
    name: str = ""

    addressable = True


@dataclass(frozen=True)
class Member(Expression):
    """
    Member access target.name.

    Attributes:
        target: The expression whose member is accessed
        name: Member name
    """
    target: Expression = None
    name: str = ""

    addressable = True


@dataclass(frozen=True)
class Index(Expression):
    """Index access target[index]."""
    target: Expression = None
    index: Expression = None

    addressable = True


@dataclass(frozen=True)
class Call(Expression):
    """
    Call expression callee(arguments).

    The callee is any expression: f(x), ship.engine.fire(), table[0](1).
    """
    callee: Expression = None
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Binary(Expression):
    """Binary operation left op right."""
    op: BinaryOperator = None
    left: Expression = None
    right: Expression = None


@dataclass(frozen=True)
class Prefix(Expression):
    """Prefix operation op operand."""
    op: PrefixOperator = None
    operand: Expression = None


@dataclass(frozen=True)
class Paren(Expression):
    """Parenthesized expression, kept so spans and source shape survive."""
    expression: Expression = None


@dataclass(frozen=True)
class Assign(Expression):
    """
    Assignment target := value, or compound assignment target op= value.

    Attributes:
        target: Addressable expression (Variable, Member or Index)
        op: AssignOperator.ASSIGN or one of the compound forms
        value: Assigned value; may itself be an Assign (right-associative)
    """
    target: Expression = None
    op: AssignOperator = AssignOperator.ASSIGN
    value: Expression = None


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class Block(Statement):
    """Body enclosed in braces."""
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Break(Statement):
    """Break statement. Whether it sits inside a loop is checked later."""
    pass


@dataclass(frozen=True)
class Return(Statement):
    value: Optional[Expression] = None


@dataclass(frozen=True)
class While(Statement):
    """
    While loop.

    Attributes:
        condition: Loop condition (written without parentheses)
        body: Loop body
    """
    condition: Expression = None
    body: Block = None


@dataclass(frozen=True)
class If(Statement):
    """
    If statement with optional else body.

    There is no 'else if'; a chained condition is an If nested inside the
    alternate block.

    Attributes:
        condition: The condition expression
        consequent: Body run when the condition holds
        alternate: Optional body run otherwise
    """
    condition: Expression = None
    consequent: Block = None
    alternate: Optional[Block] = None


@dataclass(frozen=True)
class ExprStmt(Statement):
    """Expression followed by ';'."""
    expression: Expression = None


# =============================================================================
# Declaration Nodes
# =============================================================================

@dataclass(frozen=True)
class Parameter(Declaration):
    name: str = ""
    param_type: TypeName = None


@dataclass(frozen=True)
class FunctionDef(Declaration):
    """
    Function definition.

    Attributes:
        name: Function name
        params: Parameters in declaration order
        return_type: Declared return type, None when omitted
        body: The function body
    """
    name: str = ""
    params: tuple[Parameter, ...] = ()
    return_type: Optional[TypeName] = None
    body: Block = None


@dataclass(frozen=True)
class StructField(Declaration):
    name: str = ""
    field_type: TypeName = None


@dataclass(frozen=True)
class StructDef(Declaration):
    """
    Struct definition.

    Field order is kept as declared; later stages derive layout from it.
    """
    name: str = ""
    fields: tuple[StructField, ...] = ()


# =============================================================================
# Program Root Node
# =============================================================================

@dataclass(frozen=True)
class Program(ASTNode):
    """
    Root node of the AST.

    Attributes:
        items: Top-level declarations and statements, in source order
    """
    items: tuple[ASTNode, ...] = ()

    @property
    def functions(self) -> list[FunctionDef]:
        return [item for item in self.items if isinstance(item, FunctionDef)]

    @property
    def structs(self) -> list[StructDef]:
        return [item for item in self.items if isinstance(item, StructDef)]


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_<ClassName> methods for the node types they
    care about; every other node falls through to generic_visit, which
    visits the children.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.count = 0

            def visit_Call(self, node):
                self.count += 1
                self.generic_visit(node)
    """

    def visit(self, node: ASTNode) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        for child in node.children():
            self.visit(child)


# =============================================================================
# AST Pretty Printer
# =============================================================================

def describe(node: Optional[ASTNode]) -> str:
    """
    Compact one-line rendering of a node.

    Uses constructor-style notation, for example:
        Binary(+, Variable(a), Num(1))
        If(Bool(true), [Return(Num(1))], [Return(Num(2))])
    """
    if node is None:
        return "None"

    # Type names
    if isinstance(node, BoolType):
        return "Bool"
    if isinstance(node, FloatType):
        return "Float"
    if isinstance(node, IntType):
        return f"Int({'signed' if node.signed else 'unsigned'},{int(node.width)})"
    if isinstance(node, ArrayType):
        return f"Array({describe(node.element)},{node.length})"
    if isinstance(node, NamedType):
        return f"Named({node.name})"

    # Expressions
    if isinstance(node, NumLiteral):
        return f"Num({node.text})"
    if isinstance(node, BoolLiteral):
        return f"Bool({'true' if node.value else 'false'})"
    if isinstance(node, CharLiteral):
        return f"Char({node.text})"
    if isinstance(node, StrLiteral):
        return f"Str({node.text})"
    if isinstance(node, ArrayLiteral):
        return f"ArrayLiteral({_describe_list(node.elements)})"
    if isinstance(node, Variable):
        return f"Variable({node.name})"
    if isinstance(node, Member):
        return f"Member({describe(node.target)}, {node.name})"
    if isinstance(node, Index):
        return f"Index({describe(node.target)}, {describe(node.index)})"
    if isinstance(node, Call):
        return f"Call({describe(node.callee)}, {_describe_list(node.arguments)})"
    if isinstance(node, Binary):
        return f"Binary({node.op.symbol}, {describe(node.left)}, {describe(node.right)})"
    if isinstance(node, Prefix):
        return f"Prefix({node.op.symbol}, {describe(node.operand)})"
    if isinstance(node, Paren):
        return f"Paren({describe(node.expression)})"
    if isinstance(node, Assign):
        return f"Assign({node.op.symbol}, {describe(node.target)}, {describe(node.value)})"

    # Statements
    if isinstance(node, Block):
        return _describe_list(node.statements)
    if isinstance(node, Break):
        return "Break"
    if isinstance(node, Return):
        if node.value is None:
            return "Return"
        return f"Return({describe(node.value)})"
    if isinstance(node, While):
        return f"While({describe(node.condition)}, {describe(node.body)})"
    if isinstance(node, If):
        if node.alternate is None:
            return f"If({describe(node.condition)}, {describe(node.consequent)})"
        return (
            f"If({describe(node.condition)}, {describe(node.consequent)}, "
            f"{describe(node.alternate)})"
        )
    if isinstance(node, ExprStmt):
        return f"ExprStmt({describe(node.expression)})"

    # Declarations
    if isinstance(node, Parameter):
        return f"({node.name}, {describe(node.param_type)})"
    if isinstance(node, StructField):
        return f"({node.name}, {describe(node.field_type)})"
    if isinstance(node, FunctionDef):
        return (
            f"FunctionDef({node.name}, {_describe_list(node.params)}, "
            f"{describe(node.return_type)}, {describe(node.body)})"
        )
    if isinstance(node, StructDef):
        return f"StructDef({node.name}, {_describe_list(node.fields)})"
    if isinstance(node, Program):
        return f"Program({_describe_list(node.items)})"

    return f"<{type(node).__name__}>"


def _describe_list(nodes) -> str:
    return "[" + ", ".join(describe(n) for n in nodes) + "]"


def format_type(type_name: Optional[TypeName]) -> str:
    """Render a type name in source syntax, e.g. '[[u8, 4], 2]'."""
    if type_name is None:
        return ""
    if isinstance(type_name, BoolType):
        return "bool"
    if isinstance(type_name, FloatType):
        return "float"
    if isinstance(type_name, IntType):
        return integer_type_name(type_name.signed, type_name.width)
    if isinstance(type_name, ArrayType):
        return f"[{format_type(type_name.element)}, {type_name.length}]"
    if isinstance(type_name, NamedType):
        return type_name.name
    return f"<{type(type_name).__name__}>"


class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Statements and declarations get one indented line each; expressions
    are rendered inline with describe().

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _nested(self, node: Optional[ASTNode]) -> None:
        self.indent_level += 1
        if node is not None:
            self.visit(node)
        self.indent_level -= 1

    def visit_Program(self, node: Program):
        self._emit("Program")
        self.indent_level += 1
        for item in node.items:
            self.visit(item)
        self.indent_level -= 1

    def visit_FunctionDef(self, node: FunctionDef):
        params = ", ".join(f"{p.name}: {format_type(p.param_type)}" for p in node.params)
        returns = f": {format_type(node.return_type)}" if node.return_type else ""
        self._emit(f"Function: {node.name}({params}){returns}")
        self._nested(node.body)

    def visit_StructDef(self, node: StructDef):
        self._emit(f"Struct: {node.name}")
        self.indent_level += 1
        for struct_field in node.fields:
            self._emit(f"Field: {struct_field.name}: {format_type(struct_field.field_type)}")
        self.indent_level -= 1

    def visit_Block(self, node: Block):
        for stmt in node.statements:
            self.visit(stmt)

    def visit_If(self, node: If):
        self._emit(f"If {describe(node.condition)}")
        self.indent_level += 1
        self._emit("Then:")
        self._nested(node.consequent)
        if node.alternate is not None:
            self._emit("Else:")
            self._nested(node.alternate)
        self.indent_level -= 1

    def visit_While(self, node: While):
        self._emit(f"While {describe(node.condition)}")
        self._nested(node.body)

    def visit_Return(self, node: Return):
        if node.value is not None:
            self._emit(f"Return {describe(node.value)}")
        else:
            self._emit("Return")

    def visit_Break(self, node: Break):
        self._emit("Break")

    def visit_ExprStmt(self, node: ExprStmt):
        self._emit(f"Expr: {describe(node.expression)}")
