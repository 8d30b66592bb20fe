"""
flc Lexer - turns source text into tokens

Pull-based: next_token() classifies one token at a time, and iterating
the lexer yields tokens and errors lazily. tokenize() collects everything
up front for the parser.
"""

import logging
from typing import Iterator, List, Optional, Union

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, TYPE_KEYWORDS,
    TWO_CHAR_OPERATORS, PUNCTUATION, SIMPLE_ESCAPES
)
from .errors import (
    ErrorKind, LexerError, LexerWarning, create_unknown_start_error,
    create_unterminated_string_error, create_invalid_float_error,
    create_integer_overflow_error, create_escape_error
)

logger = logging.getLogger(__name__)

I64_MAX = 2 ** 63 - 1

# Whitespace skipped between tokens; '\n' is significant
INLINE_WHITESPACE = ' \t\r\f\v'

DIGITS = '0123456789'
HEX_DIGITS = '0123456789abcdefABCDEF'


def _is_identifier_start(char: str) -> bool:
    return char == '_' or (char.isascii() and char.isalpha())


def _is_identifier_continue(char: str) -> bool:
    return char == '_' or (char.isascii() and char.isalnum())


class PositionTracker:
    """Row/column bookkeeping for consumed characters, used for diagnostics."""

    def __init__(self):
        self.line = 1
        self.column = 1

    def advance(self, char: str):
        if char == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1

    def reset(self):
        self.line = 1
        self.column = 1


class Lexer:
    """
    Lexical analyzer.

    Converts source text into a stream of tokens. Errors are reported per
    token: after a failed attempt the cursor sits past the consumed span, so
    scanning can continue with the next call.
    """

    def __init__(self, source: str, filename: str = "<unknown>", unknown_as_tokens: bool = False):
        """
        Initialize the lexer with source code.

        Args:
            source: Complete, already decoded source text
            filename: Name of source for error reporting
            unknown_as_tokens: Emit UNKNOWN tokens for unrecognized
                characters instead of raising UNKNOWN_START_OF_TOKEN
        """
        self.source = source
        self.filename = filename
        self.unknown_as_tokens = unknown_as_tokens
        self.pos = 0
        self.position = PositionTracker()
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []
        self.warnings: List[LexerWarning] = []

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    def __iter__(self) -> Iterator[Union[Token, LexerError]]:
        return self.tokens_and_errors()

    def tokens_and_errors(self) -> Iterator[Union[Token, LexerError]]:
        """
        Lazily yield every token or lexical error from the current position.

        Errors are yielded rather than raised so one bad token does not end
        the stream.
        """
        while True:
            try:
                token = self.next_token()
            except LexerError as e:
                yield e
                continue
            if token is None:
                return
            yield token

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Lexical errors are collected in self.errors and skipped.

        Returns:
            List of tokens including EOF token
        """
        self.pos = 0
        self.position.reset()
        self.tokens = []
        self.errors = []
        self.warnings = []

        for item in self.tokens_and_errors():
            if isinstance(item, LexerError):
                self.errors.append(item)
            else:
                self.tokens.append(item)

        self.tokens.append(Token(TokenType.EOF, "", None, self._location()))

        logger.debug("%s: %d tokens, %d errors", self.filename, len(self.tokens), len(self.errors))
        return self.tokens

    def next_token(self) -> Optional[Token]:
        """
        Classify the next token.

        Returns:
            The token, or None once the input is exhausted

        Raises:
            LexerError: If the text at the cursor is malformed
        """
        self._skip_whitespace()

        if self.pos >= len(self.source):
            return None

        start_pos = self.pos
        start = self._location()
        current_char = self.source[self.pos]

        if current_char == '\n':
            self._advance()
            return self._make_token(TokenType.NEWLINE, start_pos, start)

        if self.source.startswith('//', self.pos):
            return self._tokenize_comment(start_pos, start)

        if self.source.startswith('/**', self.pos):
            return self._tokenize_block_docstring(start_pos, start)

        two_chars = self.source[self.pos:self.pos + 2]
        if two_chars in TWO_CHAR_OPERATORS:
            self._advance_by(2)
            return self._make_token(TWO_CHAR_OPERATORS[two_chars], start_pos, start)

        if current_char == '"':
            return self._tokenize_string(start_pos, start)

        if current_char in PUNCTUATION:
            self._advance()
            return self._make_token(PUNCTUATION[current_char], start_pos, start)

        if current_char in DIGITS:
            return self._tokenize_number(start_pos, start)

        if _is_identifier_start(current_char):
            return self._tokenize_identifier_or_keyword(start_pos, start)

        self._advance()
        if self.unknown_as_tokens:
            return self._make_token(TokenType.UNKNOWN, start_pos, start, current_char)
        raise create_unknown_start_error(current_char, start)

    def _tokenize_number(self, start_pos: int, start: SourceLocation) -> Token:
        """Tokenize an integer literal; float forms are rejected."""
        self._advance_while(DIGITS)

        if self._current() in ('.', 'e', 'E'):
            self._consume_float_tail()
            raise create_invalid_float_error(self.source[start_pos:self.pos], start)

        lexeme = self.source[start_pos:self.pos]
        value = int(lexeme)
        if value > I64_MAX:
            raise create_integer_overflow_error(lexeme, start)

        return self._make_token(TokenType.INTEGER, start_pos, start, value)

    def _consume_float_tail(self):
        """Consume the rest of a float-shaped literal: [.digits][(e|E)[+|-]digits]."""
        if self._current() == '.':
            self._advance()
            self._advance_while(DIGITS)
        if self._current() in ('e', 'E'):
            self._advance()
            if self._current() in ('+', '-'):
                self._advance()
            self._advance_while(DIGITS)

    def _tokenize_identifier_or_keyword(self, start_pos: int, start: SourceLocation) -> Token:
        """Tokenize an identifier, keyword or type name."""
        self._advance()
        while self.pos < len(self.source) and _is_identifier_continue(self.source[self.pos]):
            self._advance()

        lexeme = self.source[start_pos:self.pos]

        if lexeme in KEYWORDS:
            return self._make_token(KEYWORDS[lexeme], start_pos, start)
        if lexeme in TYPE_KEYWORDS:
            return self._make_token(TokenType.TYPE, start_pos, start, TYPE_KEYWORDS[lexeme])
        return self._make_token(TokenType.IDENTIFIER, start_pos, start, lexeme)

    def _tokenize_comment(self, start_pos: int, start: SourceLocation) -> Token:
        """Tokenize a // comment or /// docstring up to (not including) the newline."""
        is_docstring = self.source.startswith('///', self.pos)
        marker_len = 3 if is_docstring else 2
        self._advance_by(marker_len)

        while self.pos < len(self.source) and self.source[self.pos] != '\n':
            self._advance()

        text = self.source[start_pos + marker_len:self.pos]
        token_type = TokenType.DOCSTRING if is_docstring else TokenType.COMMENT
        return self._make_token(token_type, start_pos, start, text.strip())

    def _tokenize_block_docstring(self, start_pos: int, start: SourceLocation) -> Token:
        """Tokenize a /** ... */ docstring."""
        self._advance_by(3)

        # The closing '*/' of an empty '/**/' overlaps the opener
        search_from = self.pos - 1 if self._current() == '/' else self.pos
        end = self.source.find('*/', search_from)
        if end == -1:
            self.warnings.append(LexerWarning(
                "unterminated docstring runs to end of input",
                start,
                help_text="Close the docstring with '*/'."
            ))
            text_end = len(self.source)
            self._advance_by(text_end - self.pos)
        else:
            text_end = end
            self._advance_by(end + 2 - self.pos)

        text = self.source[start_pos + 3:text_end]
        return self._make_token(TokenType.DOCSTRING, start_pos, start, text.strip())

    def _tokenize_string(self, start_pos: int, start: SourceLocation) -> Token:
        """
        Tokenize a string literal.

        On a bad escape the rest of the literal is still consumed so that
        scanning resumes after the closing quote; the first escape error is
        then raised.
        """
        self._advance()  # Skip opening quote

        value_parts = []
        first_error: Optional[LexerError] = None

        while self.pos < len(self.source) and self.source[self.pos] != '"':
            if self.source[self.pos] == '\\':
                try:
                    value_parts.append(self._handle_escape_sequence())
                except LexerError as e:
                    if e.kind == ErrorKind.TRUNCATED_ESCAPE_SEQUENCE:
                        raise
                    if first_error is None:
                        first_error = e
            else:
                value_parts.append(self.source[self.pos])
                self._advance()

        if self.pos >= len(self.source):
            raise create_unterminated_string_error(start)

        self._advance()  # Skip closing quote

        if first_error is not None:
            raise first_error

        return self._make_token(TokenType.STRING, start_pos, start, ''.join(value_parts))

    def _handle_escape_sequence(self) -> str:
        """Decode one escape sequence starting at the backslash."""
        location = self._location()
        self._advance()  # Skip backslash

        if self.pos >= len(self.source):
            raise create_escape_error(ErrorKind.TRUNCATED_ESCAPE_SEQUENCE, location)

        escape_char = self.source[self.pos]

        if escape_char in SIMPLE_ESCAPES:
            self._advance()
            return SIMPLE_ESCAPES[escape_char]

        if escape_char == 'u':
            self._advance()
            return self._handle_unicode_escape(location)

        self._advance()
        if escape_char.isascii() and escape_char.isalnum():
            raise create_escape_error(ErrorKind.UNKNOWN_ESCAPE, location, escape_char)
        raise create_escape_error(ErrorKind.INVALID_CHAR_IN_ESCAPE, location, escape_char)

    def _handle_unicode_escape(self, location: SourceLocation) -> str:
        """Decode the \\u{XXXX} payload; the cursor is just after 'u'."""
        if self.pos >= len(self.source):
            raise create_escape_error(ErrorKind.TRUNCATED_ESCAPE_SEQUENCE, location)
        if self.source[self.pos] != '{':
            raise create_escape_error(ErrorKind.BAD_UNICODE_ESCAPE, location, "\\u")
        self._advance()

        payload_start = self.pos
        while True:
            if self.pos >= len(self.source):
                raise create_escape_error(ErrorKind.TRUNCATED_ESCAPE_SEQUENCE, location)
            char = self.source[self.pos]
            if char == '}':
                break
            if char not in HEX_DIGITS:
                # The closing quote still ends the literal
                if char != '"':
                    self._advance()
                raise create_escape_error(ErrorKind.INVALID_CHAR_IN_ESCAPE, location, char)
            self._advance()

        payload = self.source[payload_start:self.pos]
        self._advance()  # Skip closing brace

        if not 1 <= len(payload) <= 6:
            raise create_escape_error(ErrorKind.BAD_UNICODE_ESCAPE, location, f"\\u{{{payload}}}")

        codepoint = int(payload, 16)
        if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            raise create_escape_error(ErrorKind.BAD_UNICODE_ESCAPE, location, f"\\u{{{payload}}}")
        return chr(codepoint)

    def _skip_whitespace(self):
        while self.pos < len(self.source) and self.source[self.pos] in INLINE_WHITESPACE:
            self._advance()

    def _make_token(self, token_type: TokenType, start_pos: int, start: SourceLocation,
                    value=None) -> Token:
        return Token(token_type, self.source[start_pos:self.pos], value, start)

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.position.line, self.position.column, self.pos)

    def _current(self) -> str:
        if self.pos < len(self.source):
            return self.source[self.pos]
        return '\0'

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            self.position.advance(self.source[self.pos])
            self.pos += 1

    def _advance_by(self, count: int):
        for _ in range(count):
            self._advance()

    def _advance_while(self, chars: str):
        while self.pos < len(self.source) and self.source[self.pos] in chars:
            self._advance()

    def has_errors(self) -> bool:
        """Check if lexer encountered any errors."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if lexer encountered any warnings."""
        return len(self.warnings) > 0

    def get_diagnostics(self) -> List[Union[LexerError, LexerWarning]]:
        """Get all diagnostics (errors and warnings)."""
        return self.errors + self.warnings


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting

    Returns:
        List of tokens

    Raises:
        LexerError: If lexing fails
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()

    if lexer.has_errors():
        # Raise the first error encountered
        raise lexer.errors[0]

    return tokens


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexerError: If lexing fails
        OSError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
