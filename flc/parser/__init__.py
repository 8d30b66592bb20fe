"""
flc Parser Package

Implements a recursive descent parser with precedence climbing.
Produces immutable Abstract Syntax Trees with source span information.

Key Features:
- One parsing function per precedence level
- Compound assignments lowered to plain assignments at parse time
- Typed syntax errors naming the production, expected and found tokens
- Optional function-level error recovery
"""

from .ast_nodes import (
    SourceSpan, ASTNode, ASTVisitor, Program, FuncDef, FuncParam, Type,
    Statement, VarDeclaration, VarDeclarations, WhileLoop, Return,
    ExpressionStatement, Expr, Identifier, I64Literal, Binary, Assign, Call,
    BinaryOperator
)
from .parser import Parser, parse_string, parse_file
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser",
    "parse_string",
    "parse_file",

    # AST nodes
    "SourceSpan", "ASTNode", "ASTVisitor",
    "Program", "FuncDef", "FuncParam", "Type",
    "Statement", "VarDeclaration", "VarDeclarations", "WhileLoop", "Return",
    "ExpressionStatement",
    "Expr", "Identifier", "I64Literal", "Binary", "Assign", "Call",
    "BinaryOperator",

    # Error handling
    "ParseError",
]
