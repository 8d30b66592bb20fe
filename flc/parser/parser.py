"""
flc Recursive Descent Parser

Turns a materialized token list into a Program. Expressions are parsed by
precedence climbing: one function per binding level, from assignment
(lowest) down to primary expressions (highest). Every decision needs at
most two tokens of lookahead, so the cursor only ever moves forward.
"""

import logging
from typing import List, Optional

from ..lexer.tokens import Token, TokenType, SourceLocation, Type
from .ast_nodes import (
    SourceSpan, Program, FuncDef, FuncParam, Statement, VarDeclaration,
    VarDeclarations, WhileLoop, Return, ExpressionStatement, Expr,
    Identifier, I64Literal, Binary, Assign, Call, BinaryOperator
)
from .errors import (
    ParseError, SyntaxErrorRecovery, create_unexpected_token_error,
    create_nested_function_error, create_chained_comparison_error,
    create_missing_return_type_error, create_unsupported_operator_error,
    create_nesting_too_deep_error
)

logger = logging.getLogger(__name__)


# Compound assignments map to the operator they desugar to; '=' maps to None
ASSIGNMENT_OPERATORS = {
    TokenType.ASSIGN: None,
    TokenType.PLUS_ASSIGN: BinaryOperator.ADD,
    TokenType.MINUS_ASSIGN: BinaryOperator.SUBTRACT,
    TokenType.MULTIPLY_ASSIGN: BinaryOperator.MULTIPLY,
    TokenType.DIVIDE_ASSIGN: BinaryOperator.DIVIDE,
}

COMPARISON_OPERATORS = {
    TokenType.EQUAL: BinaryOperator.EQUAL,
    TokenType.NOT_EQUAL: BinaryOperator.NOT_EQUAL,
    TokenType.LESS_THAN: BinaryOperator.LESS_THAN,
    TokenType.LESS_EQUAL: BinaryOperator.LESS_EQUAL,
    TokenType.GREATER_THAN: BinaryOperator.GREATER_THAN,
    TokenType.GREATER_EQUAL: BinaryOperator.GREATER_EQUAL,
}

ADDITIVE_OPERATORS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUBTRACT,
}

MULTIPLICATIVE_OPERATORS = {
    TokenType.MULTIPLY: BinaryOperator.MULTIPLY,
    TokenType.DIVIDE: BinaryOperator.DIVIDE,
}

STATEMENT_TERMINATORS = (TokenType.NEWLINE, TokenType.SEMICOLON)


class Parser:
    """
    Recursive descent parser.

    Owns a read-only view of the token list and a single cursor. Syntax
    errors are raised as ParseError; with recover=True, errors inside a
    function definition are collected and parsing resumes at the next
    top-level 'fn'.
    """

    def __init__(self, tokens: List[Token], recover: bool = False):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Complete token list from the lexer; a trailing EOF
                token is optional
            recover: Collect one error per function instead of stopping
                at the first
        """
        self.tokens = tokens
        self.current = 0
        self.recover = recover
        self.errors: List[ParseError] = []

    def parse(self) -> Program:
        """
        Parse the token stream into an AST.

        Returns:
            Program AST node representing the entire source unit

        Raises:
            ParseError: The first syntax error encountered
        """
        func_defs = []

        while True:
            self._skip_trivia()
            if self._is_at_end():
                break

            start = self.current
            try:
                func_defs.append(self._parse_guarded_func_def())
            except ParseError as e:
                if not self.recover:
                    raise
                self.errors.append(e)
                self.current = SyntaxErrorRecovery.synchronize_to_function(self.tokens, start + 1)
                logger.debug("recovered from %s at token %d", e.code, self.current)

        if self.errors:
            raise self.errors[0]

        span = None
        if func_defs:
            span = SourceSpan(func_defs[0].span.start, func_defs[-1].span.end)
        return Program(tuple(func_defs), span=span)

    # Top-level items

    def _parse_guarded_func_def(self) -> FuncDef:
        """Run parse_func_def, reporting recursion exhaustion as a ParseError."""
        try:
            return self.parse_func_def()
        except RecursionError:
            token = self._peek()
            raise create_nesting_too_deep_error(token, self._location_of(token)) from None

    def parse_func_def(self) -> FuncDef:
        """Parse 'fn name(params) [type] { body }'."""
        start_token = self._consume(TokenType.FN, "function definition", "'fn'")
        name = self._consume_identifier("function definition", "function name")
        params = self._parse_func_params(name)

        token = self._peek()
        if token is not None and token.type == TokenType.LEFT_BRACE:
            return_type = Type.VOID
        elif token is not None and token.type == TokenType.TYPE:
            return_type = self._advance().value
        else:
            raise create_missing_return_type_error(name, token, self._location_of(token))

        body = self._parse_body(f"body of function '{name}'")
        logger.debug("parsed function %s (%d statements)", name, len(body))

        return FuncDef(name, tuple(params), return_type, tuple(body),
                       span=self._span_from(start_token))

    def _parse_func_params(self, function_name: str) -> List[FuncParam]:
        """Parse '(' [type name (',' type name)*] ')'."""
        production = f"parameters of function '{function_name}'"
        self._consume(TokenType.LEFT_PAREN, production, "'('")

        params = []
        if self._match(TokenType.RIGHT_PAREN):
            return params

        while True:
            start_token = self._peek()
            param_type = self._parse_type(production)
            param_name = self._consume_identifier(production, "parameter name")
            params.append(FuncParam(param_type, param_name, span=self._span_from(start_token)))

            separator = self._expect_one_of(
                (TokenType.RIGHT_PAREN, TokenType.COMMA), production, "',' or ')'"
            )
            if separator.type == TokenType.RIGHT_PAREN:
                break

        return params

    def _parse_body(self, production: str) -> List[Statement]:
        """Parse '{' statement* '}'."""
        self._consume(TokenType.LEFT_BRACE, production, "'{'")

        body = []
        while True:
            self._skip_trivia()
            token = self._peek()
            if token is None:
                raise create_unexpected_token_error(
                    production, "'}'", None, self._end_location(), TokenType.RIGHT_BRACE
                )
            if token.type == TokenType.RIGHT_BRACE:
                self._advance()
                break
            body.append(self.parse_statement())

        return body

    # Statements

    def parse_statement(self) -> Optional[Statement]:
        """
        Parse one statement and its terminator.

        Returns None if only newlines and comments remain.
        """
        self._skip_trivia()
        token = self._peek()
        if token is None:
            return None

        if token.type == TokenType.TYPE:
            statement = self._parse_var_declarations()
        elif token.type == TokenType.WHILE:
            statement = self._parse_while_loop()
        elif token.type == TokenType.FN:
            raise create_nested_function_error(token)
        elif token.type == TokenType.RET:
            statement = self._parse_return()
        else:
            expr = self.parse_expression()
            statement = ExpressionStatement(expr, span=expr.span)

        self._consume_statement_terminator()
        return statement

    def _parse_var_declarations(self) -> VarDeclarations:
        """Parse 'type name [= expr] (, name [= expr])*'."""
        start_token = self._peek()
        var_type = self._parse_type("variable declaration")

        declarations = []
        while True:
            name_token = self._peek()
            var_name = self._consume_identifier("variable declaration", "variable name")

            var_value = None
            if self._match(TokenType.ASSIGN):
                var_value = self.parse_expression()

            declarations.append(VarDeclaration(var_name, var_type, var_value,
                                               span=self._span_from(name_token)))

            if not self._match(TokenType.COMMA):
                break

        return VarDeclarations(tuple(declarations), span=self._span_from(start_token))

    def _parse_while_loop(self) -> WhileLoop:
        start_token = self._consume(TokenType.WHILE, "while loop", "'while'")
        condition = self.parse_expression()
        body = self._parse_body("while loop")
        return WhileLoop(condition, tuple(body), span=self._span_from(start_token))

    def _parse_return(self) -> Return:
        start_token = self._consume(TokenType.RET, "return statement", "'ret'")

        self._skip_comments()
        token = self._peek()
        value = None
        if token is not None and token.type not in STATEMENT_TERMINATORS:
            value = self.parse_expression()

        return Return(value, span=self._span_from(start_token))

    def _consume_statement_terminator(self):
        """A statement ends at a newline, a ';' or the end of input."""
        self._skip_comments()
        token = self._peek()
        if token is None:
            return
        if token.type in STATEMENT_TERMINATORS:
            self._advance()
            return
        raise create_unexpected_token_error(
            "statement", "newline or ';'", token, token.location, TokenType.SEMICOLON
        )

    # Expressions, lowest precedence first

    def parse_expression(self) -> Expr:
        """Parse a full expression."""
        return self._parse_assignment()

    def _parse_assignment(self) -> Expr:
        """
        Right-associative assignment, recognized by 'identifier <assign-op>'.

        'x op= e' is lowered to Assign(x, Binary(x, op, e)).
        """
        first, second = self._peek(1), self._peek(2)
        if (first is None or second is None or first.type != TokenType.IDENTIFIER
                or second.type not in ASSIGNMENT_OPERATORS):
            return self._parse_logical_or()

        name_token = self._advance()
        operator_token = self._advance()
        value = self.parse_expression()

        operator = ASSIGNMENT_OPERATORS[operator_token.type]
        if operator is not None:
            target = Identifier(name_token.value, span=self._token_span(name_token))
            value = Binary(target, operator, value, span=self._join(target, value))

        return Assign(name_token.value, value, span=self._span_from(name_token))

    def _parse_logical_or(self) -> Expr:
        expr = self._parse_logical_and()
        token = self._peek()
        if token is not None and token.type == TokenType.LOGICAL_OR:
            raise create_unsupported_operator_error(token)
        return expr

    def _parse_logical_and(self) -> Expr:
        expr = self._parse_comparison()
        token = self._peek()
        if token is not None and token.type == TokenType.LOGICAL_AND:
            raise create_unsupported_operator_error(token)
        return expr

    def _parse_comparison(self) -> Expr:
        """At most one comparator per expression; chains are rejected."""
        left = self._parse_additive()

        token = self._peek()
        if token is None or token.type not in COMPARISON_OPERATORS:
            return left
        self._advance()

        right = self._parse_additive()

        following = self._peek()
        if following is not None and following.type in COMPARISON_OPERATORS:
            raise create_chained_comparison_error(following)

        return Binary(left, COMPARISON_OPERATORS[token.type], right, span=self._join(left, right))

    def _parse_additive(self) -> Expr:
        left = self._parse_multiplicative()

        while self._peek() is not None and self._peek().type in ADDITIVE_OPERATORS:
            operator = ADDITIVE_OPERATORS[self._advance().type]
            right = self._parse_multiplicative()
            left = Binary(left, operator, right, span=self._join(left, right))

        return left

    def _parse_multiplicative(self) -> Expr:
        left = self._parse_primary()

        while self._peek() is not None and self._peek().type in MULTIPLICATIVE_OPERATORS:
            operator = MULTIPLICATIVE_OPERATORS[self._advance().type]
            right = self._parse_primary()
            left = Binary(left, operator, right, span=self._join(left, right))

        return left

    def _parse_primary(self) -> Expr:
        """Parenthesized expression, call, identifier or integer literal."""
        token = self._peek()
        if token is None:
            raise create_unexpected_token_error(
                "expression", "identifier, integer literal or '('", None, self._end_location()
            )

        if token.type == TokenType.LEFT_PAREN:
            self._advance()
            expr = self.parse_expression()
            self._consume(TokenType.RIGHT_PAREN, "parenthesized expression", "')'")
            return expr

        if token.type == TokenType.IDENTIFIER:
            following = self._peek(2)
            if following is not None and following.type == TokenType.LEFT_PAREN:
                return self._parse_call()
            self._advance()
            return Identifier(token.value, span=self._token_span(token))

        if token.type == TokenType.INTEGER:
            self._advance()
            return I64Literal(token.value, span=self._token_span(token))

        raise create_unexpected_token_error(
            "expression", "identifier, integer literal or '('", token, token.location
        )

    def _parse_call(self) -> Call:
        """Parse 'name(args)'; args is a possibly empty comma-separated list."""
        name_token = self._advance()
        production = f"call to '{name_token.value}'"
        self._consume(TokenType.LEFT_PAREN, production, "'('")

        args = []
        if not self._match(TokenType.RIGHT_PAREN):
            while True:
                args.append(self.parse_expression())
                separator = self._expect_one_of(
                    (TokenType.RIGHT_PAREN, TokenType.COMMA), production, "',' or ')'"
                )
                if separator.type == TokenType.RIGHT_PAREN:
                    break

        return Call(name_token.value, tuple(args), span=self._span_from(name_token))

    # Utility methods

    def _peek(self, n: int = 1) -> Optional[Token]:
        """Return the n-th upcoming token without consuming, or None at end of input."""
        index = self.current + n - 1
        if index < len(self.tokens) and self.tokens[index].type != TokenType.EOF:
            return self.tokens[index]
        return None

    def _is_at_end(self) -> bool:
        return self._peek() is None

    def _advance(self) -> Optional[Token]:
        """Consume and return current token."""
        token = self._peek()
        if token is not None:
            self.current += 1
        return token

    def _previous(self) -> Optional[Token]:
        if self.current > 0:
            return self.tokens[self.current - 1]
        return None

    def _check(self, token_type: TokenType) -> bool:
        token = self._peek()
        return token is not None and token.type == token_type

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _consume(self, token_type: TokenType, production: str, expected: str) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        token = self._peek()
        raise create_unexpected_token_error(
            production, expected, token, self._location_of(token), token_type
        )

    def _expect_one_of(self, token_types, production: str, expected: str) -> Token:
        token = self._peek()
        if token is not None and token.type in token_types:
            return self._advance()
        raise create_unexpected_token_error(
            production, expected, token, self._location_of(token), token_types[0]
        )

    def _consume_identifier(self, production: str, expected: str) -> str:
        return self._consume(TokenType.IDENTIFIER, production, expected).value

    def _parse_type(self, production: str) -> Type:
        return self._consume(TokenType.TYPE, production, "type").value

    def _skip_trivia(self):
        """Skip newlines, comments and docstrings."""
        while self._peek() is not None and self._peek().is_trivia:
            self._advance()

    def _skip_comments(self):
        while self._peek() is not None and self._peek().type in (TokenType.COMMENT, TokenType.DOCSTRING):
            self._advance()

    def _location_of(self, token: Optional[Token]) -> SourceLocation:
        return token.location if token is not None else self._end_location()

    def _end_location(self) -> SourceLocation:
        """Location just past the last token."""
        if not self.tokens:
            return SourceLocation("<unknown>", 1, 1, 0)
        last = self.tokens[-1]
        if last.type == TokenType.EOF:
            return last.location
        loc = last.location
        if last.type == TokenType.NEWLINE:
            return SourceLocation(loc.filename, loc.line + 1, 1, loc.offset + 1)
        return SourceLocation(loc.filename, loc.line, loc.column + last.length, loc.offset + last.length)

    def _span_from(self, start_token: Optional[Token]) -> Optional[SourceSpan]:
        previous = self._previous()
        if start_token is None or previous is None:
            return None
        return SourceSpan(start_token.location, previous.location)

    @staticmethod
    def _token_span(token: Token) -> SourceSpan:
        return SourceSpan(token.location, token.location)

    @staticmethod
    def _join(left: Expr, right: Expr) -> Optional[SourceSpan]:
        if left.span is None or right.span is None:
            return None
        return SourceSpan(left.span.start, right.span.end)


def parse_string(source: str, filename: str = "<string>", recover: bool = False) -> Program:
    """
    Convenience function to parse a source string.

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize_string

    tokens = tokenize_string(source, filename)
    parser = Parser(tokens, recover=recover)
    return parser.parse()


def parse_file(filepath: str, recover: bool = False) -> Program:
    """
    Convenience function to parse a source file.

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
        OSError: If file cannot be read
    """
    from ..lexer import tokenize_file

    tokens = tokenize_file(filepath)
    parser = Parser(tokens, recover=recover)
    return parser.parse()
