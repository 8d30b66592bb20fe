"""
Error handling for the flc lexer.

Provides the shared Diagnostic record (also used by the parser), the closed
set of lexical error kinds with one message template each, and helper
functions for building common errors.
"""

from typing import Optional, List
from dataclasses import dataclass
from enum import Enum

from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """Base record for diagnostics (errors, warnings, info)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info", "hint"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class ErrorKind(Enum):
    """
    Closed set of lexical error kinds.

    Each member's value is (code, message template). Templates take the
    error detail as their only field.
    """
    BAD_UNICODE_ESCAPE = ("L001", "bad unicode escape sequence '{detail}'")
    INVALID_CHAR_IN_ESCAPE = ("L002", "invalid character in escape sequence: '{detail}'")
    INVALID_FLOAT = ("L003", "invalid float literal '{detail}'")
    TRUNCATED_ESCAPE_SEQUENCE = ("L004", "escape sequence is too short")
    UNKNOWN_ESCAPE = ("L005", "unknown escape '{detail}'")
    UNKNOWN_START_OF_TOKEN = ("L006", "unknown start of token ({detail})")
    UNTERMINATED_STR = ("L007", "unterminated string literal")
    INTEGER_OVERFLOW = ("L008", "integer literal '{detail}' does not fit in 64 bits")

    @property
    def code(self) -> str:
        return self.value[0]

    def render(self, detail: str = "") -> str:
        """Render the canonical message for this kind."""
        return self.value[1].format(detail=detail)


class LexerError(Exception):
    """
    Raised (or yielded) when the lexer cannot classify the input at a position.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        kind: ErrorKind,
        location: SourceLocation,
        detail: str = "",
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        message = kind.render(detail)
        super().__init__(message)
        self.kind = kind
        self.detail = detail
        self.location = location
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=kind.code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def row(self) -> int:
        return self.location.line

    @property
    def col(self) -> int:
        return self.location.column

    def __eq__(self, other) -> bool:
        if not isinstance(other, LexerError):
            return NotImplemented
        return (self.kind, self.detail, self.location) == (other.kind, other.detail, other.location)

    def __hash__(self) -> int:
        return hash((self.kind, self.detail, self.location))

    def __str__(self) -> str:
        return str(self.diagnostic)


class LexerWarning:
    """
    Represents a lexer warning that doesn't stop compilation.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None
    ):
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="warning",
            code=code,
            help_text=help_text
        )

    def __str__(self) -> str:
        return str(self.diagnostic)


# Helper functions for creating common errors

def create_unknown_start_error(char: str, location: SourceLocation) -> LexerError:
    """Create an error for a character that cannot start any token."""
    if char.isprintable():
        help_text = f"The character '{char}' is not valid here."
    else:
        help_text = "Non-printable characters are not allowed outside string literals."

    return LexerError(
        ErrorKind.UNKNOWN_START_OF_TOKEN,
        location,
        detail=f"U+{ord(char):04X}",
        help_text=help_text
    )


def create_unterminated_string_error(location: SourceLocation) -> LexerError:
    """Create an error for a string literal that runs into end of input."""
    return LexerError(
        ErrorKind.UNTERMINATED_STR,
        location,
        help_text="String literals must be closed with a matching '\"'.",
        suggestions=["Add a closing '\"'", "Check for an escaped quote '\\\"' near the end of the string"]
    )


def create_invalid_float_error(lexeme: str, location: SourceLocation) -> LexerError:
    """Create an error for a float-shaped numeric literal."""
    return LexerError(
        ErrorKind.INVALID_FLOAT,
        location,
        detail=lexeme,
        help_text="floating-point literals are not yet supported"
    )


def create_integer_overflow_error(lexeme: str, location: SourceLocation) -> LexerError:
    """Create an error for an integer literal above the signed 64-bit range."""
    return LexerError(
        ErrorKind.INTEGER_OVERFLOW,
        location,
        detail=lexeme,
        help_text=f"The largest integer literal is {2 ** 63 - 1}."
    )


def create_escape_error(kind: ErrorKind, location: SourceLocation, detail: str = "") -> LexerError:
    """Create an error for a malformed escape sequence in a string literal."""
    return LexerError(
        kind,
        location,
        detail=detail,
        help_text="Valid escapes are \\n, \\t, \\\", \\\\ and \\u{XXXX}."
    )
