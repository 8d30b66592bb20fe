"""
flc Compiler Front End

Lexer and parser for a small statically-typed imperative language. Source
text becomes a token stream, then an abstract syntax tree for later
semantic analysis and code generation.

Architecture:
    flc/
    ├── lexer/           # Tokenization and lexical diagnostics
    └── parser/          # Syntax analysis and AST generation
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Lexer, LexerError, tokenize_string, tokenize_file
from .parser import Parser, ParseError, Program, parse_string, parse_file

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Program",

    # Errors
    "LexerError",
    "ParseError",

    # Convenience functions
    "tokenize_string",
    "tokenize_file",
    "parse_string",
    "parse_file",

    # Version info
    "__version__",
    "__license__",
]
