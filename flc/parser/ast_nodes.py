"""
Abstract Syntax Tree node definitions.

Nodes are immutable dataclasses built once by the parser. Sequences are
tuples, each child is owned by exactly one parent, and equality is
structural (source spans are carried along but never compared).
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple

from ..lexer.tokens import SourceLocation, Type


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTVisitor:
    """
    Base visitor for traversing AST nodes.

    visit() dispatches to a method named visit_<ClassName> when the
    subclass defines one and falls back to generic_visit, which visits
    every child in source order.
    """

    def visit(self, node: 'ASTNode') -> Any:
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: 'ASTNode') -> Any:
        for child in node.children():
            self.visit(child)


@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False, kw_only=True)

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    def children(self) -> List['ASTNode']:
        """Get all direct child nodes in source order."""
        result = []
        for f in fields(self):
            if f.name == "span":
                continue
            value = getattr(self, f.name)
            if isinstance(value, ASTNode):
                result.append(value)
            elif isinstance(value, tuple):
                result.extend(item for item in value if isinstance(item, ASTNode))
        return result

    def walk(self) -> Iterator['ASTNode']:
        """Yield this node and all of its descendants, depth first."""
        yield self
        for child in self.children():
            yield from child.walk()


class BinaryOperator(Enum):
    """Binary operators. The value is the source symbol."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_EQUAL = ">="

    @property
    def is_comparison(self) -> bool:
        return self not in (BinaryOperator.ADD, BinaryOperator.SUBTRACT,
                            BinaryOperator.MULTIPLY, BinaryOperator.DIVIDE)


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class Expr(ASTNode):
    """Base class for expressions."""


@dataclass(frozen=True)
class Identifier(Expr):
    name: str


@dataclass(frozen=True)
class I64Literal(Expr):
    value: int


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: BinaryOperator
    right: Expr


@dataclass(frozen=True)
class Assign(Expr):
    """Assignment; compound forms are lowered to Assign(name, Binary(...))."""
    name: str
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    function_name: str
    args: Tuple[Expr, ...] = ()


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class Statement(ASTNode):
    """Base class for statements."""


@dataclass(frozen=True)
class VarDeclaration(ASTNode):
    """One declared name; every name in a declaration list shares var_type."""
    var_name: str
    var_type: Type
    var_value: Optional[Expr] = None


@dataclass(frozen=True)
class VarDeclarations(Statement):
    declarations: Tuple[VarDeclaration, ...]


@dataclass(frozen=True)
class WhileLoop(Statement):
    condition: Expr
    body: Tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Return(Statement):
    value: Optional[Expr] = None


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expr: Expr


# ============================================================================
# Top-level nodes
# ============================================================================

@dataclass(frozen=True)
class FuncParam(ASTNode):
    param_type: Type
    param_name: str


@dataclass(frozen=True)
class FuncDef(ASTNode):
    """Function definition. return_type is Type.VOID when none was written."""
    name: str
    params: Tuple[FuncParam, ...]
    return_type: Type
    body: Tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Program(ASTNode):
    """Root node; func_defs keep declaration order."""
    func_defs: Tuple[FuncDef, ...] = ()

    def get_function(self, name: str) -> Optional[FuncDef]:
        for func_def in self.func_defs:
            if func_def.name == name:
                return func_def
        return None
