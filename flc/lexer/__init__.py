"""
flc Lexer Package

Implements the lexical analyzer (tokenizer) for the language.

Key Features:
- Pull-based tokenization with per-token error reporting
- Significant newlines, comments and docstrings kept as tokens
- 64-bit integer literals and escaped string literals
- Source location tracking for diagnostics
"""

from .tokens import Token, TokenType, SourceLocation, Type, BracketShape, BracketDirection
from .lexer import Lexer, PositionTracker, tokenize_string, tokenize_file
from .errors import Diagnostic, ErrorKind, LexerError, LexerWarning

__all__ = [
    "Lexer",
    "PositionTracker",
    "Token",
    "TokenType",
    "SourceLocation",
    "Type",
    "BracketShape",
    "BracketDirection",
    "Diagnostic",
    "ErrorKind",
    "LexerError",
    "LexerWarning",
    "tokenize_string",
    "tokenize_file",
]
