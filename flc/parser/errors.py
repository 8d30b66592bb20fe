"""
Error handling for the flc parser.

Every syntax error names the production being parsed, what was expected,
and the token actually found (or that the input ended).
"""

from typing import Optional, List

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        production: str,
        expected: str,
        found: Optional[Token],
        location: SourceLocation,
        code: str = "P001",
        message: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        found_str = found.describe() if found is not None else "input ended"
        if message is None:
            message = f"Expected {expected} but found {found_str} while parsing {production}"
        super().__init__(message)
        self.production = production
        self.expected = expected
        self.found = found
        self.location = location
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.

    Recovery happens at function granularity: after an error the parser
    skips ahead to the next top-level 'fn'.
    """

    SUGGESTIONS = {
        TokenType.SEMICOLON: ["End the statement with a newline or ';'"],
        TokenType.RIGHT_PAREN: ["Add a closing parenthesis ')'"],
        TokenType.RIGHT_BRACE: ["Add a closing brace '}'"],
        TokenType.LEFT_BRACE: ["Add an opening brace '{' to start the body"],
    }

    @staticmethod
    def suggest_missing_token(expected: TokenType) -> List[str]:
        """Suggest what token might be missing."""
        return list(SyntaxErrorRecovery.SUGGESTIONS.get(expected, []))

    @staticmethod
    def synchronize_to_function(tokens: List[Token], current_pos: int) -> int:
        """
        Find the next top-level 'fn' at or after current_pos.

        A candidate must sit outside any braces opened after current_pos and
        must follow a newline or comment, or open the input. Returns the
        position to resume parsing from, or len(tokens).
        """
        depth = 0
        pos = current_pos
        while pos < len(tokens):
            token = tokens[pos]
            if token.type == TokenType.EOF:
                return pos
            if token.type == TokenType.LEFT_BRACE:
                depth += 1
            elif token.type == TokenType.RIGHT_BRACE:
                depth = max(depth - 1, 0)
            elif (token.type == TokenType.FN and depth == 0
                  and (pos == 0 or tokens[pos - 1].is_trivia)):
                return pos
            pos += 1
        return pos


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Nested function definition",
    "P003": "Chained comparison",
    "P004": "Missing return type",
    "P005": "Unsupported operator",
    "P006": "Nesting too deep",
    "P010": "Unexpected end of input",
}


# Helper functions for creating common parser errors

def create_unexpected_token_error(production: str, expected: str, found: Optional[Token],
                                  location: SourceLocation,
                                  expected_type: Optional[TokenType] = None) -> ParseError:
    """Create an error for an unexpected token, or for premature end of input."""
    suggestions = SyntaxErrorRecovery.suggest_missing_token(expected_type) if expected_type else None

    if found is None:
        return ParseError(
            production, expected, None, location,
            code="P010",
            help_text=f"The parser reached the end of the input while expecting {expected}.",
            suggestions=suggestions
        )

    return ParseError(production, expected, found, location, code="P001", suggestions=suggestions)


def create_nested_function_error(found: Token) -> ParseError:
    """Create an error for a function definition inside a body."""
    return ParseError(
        "statement", "a statement", found, found.location,
        code="P002",
        message="Nested function definitions are not allowed",
        help_text="Move the function to the top level of the file."
    )


def create_chained_comparison_error(found: Token) -> ParseError:
    """Create an error for a second comparator in one expression."""
    return ParseError(
        "comparison", "end of comparison", found, found.location,
        code="P003",
        message=f"Comparison operators cannot be chained (found {found.describe()})",
        help_text="Split the comparison into separate expressions."
    )


def create_missing_return_type_error(function_name: str, found: Optional[Token],
                                     location: SourceLocation) -> ParseError:
    """Create an error for a function signature with neither return type nor body."""
    found_str = found.describe() if found is not None else "input ended"
    return ParseError(
        f"function '{function_name}'", "return type or '{'", found, location,
        code="P004",
        message=f"Expected return type for function '{function_name}' but found {found_str}"
    )


def create_unsupported_operator_error(found: Token) -> ParseError:
    """Create an error for an operator the grammar reserves but does not support yet."""
    return ParseError(
        "expression", "an operator", found, found.location,
        code="P005",
        message=f"Operator '{found.lexeme}' is not yet supported",
        help_text="Logical operators are reserved for a future version."
    )


def create_nesting_too_deep_error(found: Optional[Token], location: SourceLocation) -> ParseError:
    """Create an error for input nested beyond the interpreter's recursion limit."""
    return ParseError(
        "expression", "a shallower expression", found, location,
        code="P006",
        message="Expression is nested too deeply to parse",
        help_text="Split the expression into smaller statements."
    )
