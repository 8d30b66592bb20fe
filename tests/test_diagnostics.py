"""
Tests for diagnostic rendering and error codes.
"""

import os
import sys
import unittest

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from flc.lexer import Lexer, ErrorKind, LexerError, SourceLocation, Diagnostic, tokenize_string
from flc.parser import ParseError, parse_string
from flc.parser.errors import PARSER_ERROR_CODES, SyntaxErrorRecovery


class TestDiagnosticRendering(unittest.TestCase):

    def test_plain_diagnostic(self):
        diagnostic = Diagnostic("something odd", SourceLocation("a.fl", 3, 7, 20), "info")
        self.assertEqual(str(diagnostic), "INFO: something odd\n  --> a.fl:3:7\n")

    def test_help_and_suggestions(self):
        diagnostic = Diagnostic(
            "broken", SourceLocation("a.fl", 1, 1, 0), "error",
            help_text="try again", suggestions=["first", "second"]
        )
        lines = str(diagnostic).splitlines()
        self.assertEqual(lines[2], "  help: try again")
        self.assertEqual(lines[3], "  suggestions:")
        self.assertEqual(lines[4:], ["    - first", "    - second"])

    def test_lexer_error_rendering(self):
        with self.assertRaises(LexerError) as ctx:
            tokenize_string("`", "main.fl")
        lines = str(ctx.exception).splitlines()
        self.assertEqual(lines[0], "ERROR: unknown start of token (U+0060)")
        self.assertEqual(lines[1], "  --> main.fl:1:1")
        self.assertEqual(ctx.exception.diagnostic.code, "L006")

    def test_parse_error_rendering(self):
        with self.assertRaises(ParseError) as ctx:
            parse_string("fn main() {\n    ret 1 2\n}", "main.fl")
        lines = str(ctx.exception).splitlines()
        self.assertEqual(
            lines[0],
            "ERROR: Expected newline or ';' but found integer literal 2 while parsing statement"
        )
        self.assertEqual(lines[1], "  --> main.fl:2:11")

    def test_end_of_input_has_help(self):
        with self.assertRaises(ParseError) as ctx:
            parse_string("fn main() {", "main.fl")
        self.assertIn("  help: The parser reached the end of the input", str(ctx.exception))
        self.assertIn("Add a closing brace '}'", str(ctx.exception))

    def test_warning_rendering(self):
        lexer = Lexer("/** never closed", "doc.fl")
        lexer.tokenize()
        self.assertFalse(lexer.has_errors())
        self.assertTrue(lexer.has_warnings())
        rendered = str(lexer.warnings[0])
        self.assertTrue(rendered.startswith("WARNING: unterminated docstring"))
        self.assertIn("doc.fl:1:1", rendered)

    def test_get_diagnostics_lists_errors_before_warnings(self):
        lexer = Lexer("` /** open", "mix.fl")
        lexer.tokenize()
        diagnostics = lexer.get_diagnostics()
        self.assertEqual(len(diagnostics), 2)
        self.assertIsInstance(diagnostics[0], LexerError)
        self.assertEqual(diagnostics[1].diagnostic.severity, "warning")


class TestErrorCodes(unittest.TestCase):

    def test_lexer_codes_unique(self):
        codes = [kind.code for kind in ErrorKind]
        self.assertEqual(len(codes), len(set(codes)))
        self.assertTrue(all(code.startswith("L") for code in codes))

    def test_parser_codes_documented(self):
        self.assertTrue(all(code.startswith("P") for code in PARSER_ERROR_CODES))
        for source, code in [("fn f() { 1 < 2 < 3 }", "P003"),
                             ("fn f() { a || b }", "P005"),
                             ("fn f() { fn g() {} }", "P002")]:
            with self.subTest(source=source):
                with self.assertRaises(ParseError) as ctx:
                    parse_string(source)
                self.assertEqual(ctx.exception.code, code)
                self.assertIn(code, PARSER_ERROR_CODES)

    def test_templates(self):
        self.assertEqual(ErrorKind.TRUNCATED_ESCAPE_SEQUENCE.render(), "escape sequence is too short")
        self.assertEqual(ErrorKind.UNKNOWN_ESCAPE.render("q"), "unknown escape 'q'")
        self.assertEqual(ErrorKind.UNTERMINATED_STR.render(), "unterminated string literal")

    def test_lexer_error_equality(self):
        location = SourceLocation("<test>", 1, 1, 0)
        first = LexerError(ErrorKind.INVALID_FLOAT, location, "1.5")
        second = LexerError(ErrorKind.INVALID_FLOAT, location, "1.5", help_text="different help")
        self.assertEqual(first, second)
        self.assertEqual(len({first, second}), 1)
        self.assertEqual((first.row, first.col), (1, 1))


class TestRecoveryHelpers(unittest.TestCase):

    def test_synchronize_skips_fn_not_after_newline(self):
        tokens = tokenize_string("a fn\nfn")
        # a, fn, NEWLINE, fn, EOF
        self.assertEqual(SyntaxErrorRecovery.synchronize_to_function(tokens, 1), 3)

    def test_synchronize_skips_functions_inside_braces(self):
        tokens = tokenize_string("fn a() {\n    fn b() {}\n}\nfn c() {}")
        position = SyntaxErrorRecovery.synchronize_to_function(tokens, 1)
        self.assertEqual(tokens[position + 1].value, "c")

    def test_synchronize_stops_at_eof(self):
        tokens = tokenize_string("a b c")
        self.assertEqual(SyntaxErrorRecovery.synchronize_to_function(tokens, 0), 3)

    def test_suggestions_are_copies(self):
        from flc.lexer import TokenType
        suggestions = SyntaxErrorRecovery.suggest_missing_token(TokenType.RIGHT_PAREN)
        suggestions.append("extra")
        self.assertEqual(len(SyntaxErrorRecovery.suggest_missing_token(TokenType.RIGHT_PAREN)), 1)


if __name__ == '__main__':
    unittest.main()
