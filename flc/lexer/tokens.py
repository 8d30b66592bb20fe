"""
Token definitions for the flc lexer.

This module defines every token type the lexer can produce:
- Punctuation and bracket marks (single characters from a fixed table)
- Multi-character operators (compound assignment, comparison, logical)
- Keywords (fn, while, ret) and primitive type names
- Literals (64-bit integers, strings), identifiers
- Comments, docstrings and significant newlines
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional, Tuple


class TokenType(Enum):
    """
    Enumeration of all token types in the language.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input (appended by tokenize())
    NEWLINE = auto()                # Statement separator
    COMMENT = auto()                # // comment
    DOCSTRING = auto()              # /// line or /** block */ docstring
    UNKNOWN = auto()                # Unrecognized character (opt-in)

    # ========================================================================
    # Literals and Identifiers
    # ========================================================================
    INTEGER = auto()                # 42
    STRING = auto()                 # "hello\n"
    IDENTIFIER = auto()             # variable_name

    # ========================================================================
    # Keywords
    # ========================================================================
    FN = auto()                     # fn
    WHILE = auto()                  # while
    RET = auto()                    # ret
    TYPE = auto()                   # i64, bool, ... (value holds the Type)

    # ========================================================================
    # Operators
    # ========================================================================

    # Arithmetic
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /

    # Assignment
    ASSIGN = auto()                 # =
    PLUS_ASSIGN = auto()            # +=
    MINUS_ASSIGN = auto()           # -=
    MULTIPLY_ASSIGN = auto()        # *=
    DIVIDE_ASSIGN = auto()          # /=

    # Comparison
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS_THAN = auto()              # <  (also the open angle bracket)
    GREATER_THAN = auto()           # >  (also the close angle bracket)
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    # Logical (reserved, rejected by the parser)
    LOGICAL_AND = auto()            # &&
    LOGICAL_OR = auto()             # ||

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }

    SEMICOLON = auto()              # ;
    COMMA = auto()                  # ,
    AMPERSAND = auto()              # &
    AT = auto()                     # @
    BACKSLASH = auto()              # \
    CARET = auto()                  # ^
    COLON = auto()                  # :
    DOLLAR = auto()                 # $
    DOT = auto()                    # .
    EXCLAMATION = auto()            # !
    HASH = auto()                   # #
    PERCENT = auto()                # %
    PIPE = auto()                   # |
    QUESTION = auto()               # ?
    SINGLE_QUOTE = auto()           # '
    TILDE = auto()                  # ~


class Type(Enum):
    """Primitive types. The value is the source spelling."""
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    F32 = "f32"
    F64 = "f64"
    BOOL = "bool"
    CHAR = "char"
    STR = "str"
    VOID = "void"                   # implicit return type only, no keyword


class BracketShape(Enum):
    ROUND = "round"
    SQUARE = "square"
    CURLY = "curly"
    ANGLE = "angle"


class BracketDirection(Enum):
    OPEN = "open"
    CLOSE = "close"


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Line and column are 1-based; offset counts characters from the start
    of the buffer.
    """
    filename: str
    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token.

    Contains the token type, lexeme (raw text), semantic value and source
    location. The payload is always an owned copy, never a view into the
    source buffer.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # int for INTEGER, Type for TYPE, str for text tokens
    location: SourceLocation

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def length(self) -> int:
        """Number of source characters this token consumed."""
        return len(self.lexeme)

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in (TokenType.INTEGER, TokenType.STRING)

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword or a type name."""
        return self.type in KEYWORDS.values() or self.type == TokenType.TYPE

    @property
    def is_identifier(self) -> bool:
        return self.type == TokenType.IDENTIFIER

    @property
    def is_trivia(self) -> bool:
        """Newlines, comments and docstrings, which the parser may skip."""
        return self.type in (TokenType.NEWLINE, TokenType.COMMENT, TokenType.DOCSTRING)

    @property
    def bracket(self) -> Optional[Tuple[BracketShape, BracketDirection]]:
        """Shape and direction for bracket tokens, None otherwise."""
        return BRACKETS.get(self.type)

    def describe(self) -> str:
        """Short human-readable form used in syntax error messages."""
        if self.type == TokenType.EOF:
            return "input ended"
        if self.type == TokenType.NEWLINE:
            return "newline"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.lexeme}'"
        if self.type == TokenType.INTEGER:
            return f"integer literal {self.value}"
        if self.type == TokenType.TYPE:
            return f"type '{self.lexeme}'"
        if self.type in (TokenType.STRING, TokenType.COMMENT, TokenType.DOCSTRING):
            return self.type.name.lower()
        return f"'{self.lexeme}'"


# Lookup tables for token recognition

KEYWORDS = {
    "fn": TokenType.FN,
    "while": TokenType.WHILE,
    "ret": TokenType.RET,
}

TYPE_KEYWORDS = {t.value: t for t in Type if t is not Type.VOID}

# Checked before the single-character table
TWO_CHAR_OPERATORS = {
    "+=": TokenType.PLUS_ASSIGN,
    "-=": TokenType.MINUS_ASSIGN,
    "*=": TokenType.MULTIPLY_ASSIGN,
    "/=": TokenType.DIVIDE_ASSIGN,
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,
    "&&": TokenType.LOGICAL_AND,
    "||": TokenType.LOGICAL_OR,
}

PUNCTUATION = {
    "&": TokenType.AMPERSAND,
    "*": TokenType.MULTIPLY,
    "@": TokenType.AT,
    "\\": TokenType.BACKSLASH,
    "^": TokenType.CARET,
    ":": TokenType.COLON,
    "-": TokenType.MINUS,
    "$": TokenType.DOLLAR,
    ".": TokenType.DOT,
    "=": TokenType.ASSIGN,
    "!": TokenType.EXCLAMATION,
    "#": TokenType.HASH,
    "%": TokenType.PERCENT,
    "|": TokenType.PIPE,
    "+": TokenType.PLUS,
    "?": TokenType.QUESTION,
    "'": TokenType.SINGLE_QUOTE,
    "/": TokenType.DIVIDE,
    "~": TokenType.TILDE,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,

    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
}

BRACKETS = {
    TokenType.LEFT_PAREN: (BracketShape.ROUND, BracketDirection.OPEN),
    TokenType.RIGHT_PAREN: (BracketShape.ROUND, BracketDirection.CLOSE),
    TokenType.LEFT_BRACKET: (BracketShape.SQUARE, BracketDirection.OPEN),
    TokenType.RIGHT_BRACKET: (BracketShape.SQUARE, BracketDirection.CLOSE),
    TokenType.LEFT_BRACE: (BracketShape.CURLY, BracketDirection.OPEN),
    TokenType.RIGHT_BRACE: (BracketShape.CURLY, BracketDirection.CLOSE),
    TokenType.LESS_THAN: (BracketShape.ANGLE, BracketDirection.OPEN),
    TokenType.GREATER_THAN: (BracketShape.ANGLE, BracketDirection.CLOSE),
}

# Escapes accepted inside string literals (\u{...} is handled separately)
SIMPLE_ESCAPES = {
    'n': '\n',
    't': '\t',
    '"': '"',
    '\\': '\\',
}
