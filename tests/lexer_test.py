import unittest

from calcvm.exceptions import LexerError, ErrorCode
from calcvm.lexer import Lexer, TokenType


def kinds(text):
    return [(token.type, token.value) for token in Lexer(text).tokenize()]


class LexerTestCase(unittest.TestCase):

    def test_assignment(self):
        expected = [
            (TokenType.IDENTIFIER, "x"),
            (TokenType.ASSIGN, "="),
            (TokenType.NUMBER, "3.5"),
            (TokenType.OPERATOR, "+"),
            (TokenType.NUMBER, "4"),
            (TokenType.SEMICOLON, ";"),
            (TokenType.END, ""),
        ]
        self.assertEqual(expected, kinds("x = 3.5 + 4;"))

    def test_keywords(self):
        cases = {
            "if": TokenType.IF,
            "else": TokenType.ELSE,
            "true": TokenType.BOOLEAN,
            "false": TokenType.BOOLEAN,
            "iffy": TokenType.IDENTIFIER,
            "my_var2": TokenType.IDENTIFIER,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, Lexer(case).get_next_token().type, case)

    def test_double_character_symbols(self):
        for case in ["==", "!=", "<=", ">=", "**", "&&", "||"]:
            self.assertEqual([(TokenType.OPERATOR, case), (TokenType.END, "")], kinds(case), case)
        self.assertEqual([(TokenType.ASSIGN, "="), (TokenType.OPERATOR, "!"), (TokenType.END, "")], kinds("= !"))

    def test_brackets(self):
        self.assertEqual(
            [TokenType.LPAREN, TokenType.RPAREN, TokenType.LBRACE, TokenType.RBRACE, TokenType.END],
            [kind for kind, __ in kinds("(){}")],
        )

    def test_comments(self):
        text = "a = 1; // trailing\n/* block\ncomment */ b = 2;"
        names = [value for kind, value in kinds(text) if kind == TokenType.IDENTIFIER]
        self.assertEqual(["a", "b"], names)

    def test_positions(self):
        tokens = Lexer("a = 1;\n  bb = 2;").tokenize()
        bb = tokens[4]
        self.assertEqual("bb", bb.value)
        self.assertEqual(2, bb.lineno)
        self.assertEqual(3, bb.column)
        self.assertEqual(9, bb.offset)
        self.assertEqual(TokenType.END, tokens[-1].type)

    def test_trailing_line_comment(self):
        end = Lexer("a // note").tokenize()[-1]
        self.assertEqual(TokenType.END, end.type)
        self.assertEqual((1, 10, 9), (end.lineno, end.column, end.offset))

    def test_empty_input(self):
        self.assertEqual([(TokenType.END, "")], kinds(""))
        self.assertEqual([(TokenType.END, "")], kinds("  // nothing here"))

    def test_errors(self):
        should_raise = ["1.2.3", "4.", "a = 1 & 2", "a | b", "x = @", "/* never closed"]
        for case in should_raise:
            self.assertRaises(LexerError, Lexer(case).tokenize)

    def test_error_location(self):
        with self.assertRaises(LexerError) as context:
            Lexer("a = 1;\nb = $;").tokenize()
        self.assertEqual(ErrorCode.LEXER_ERROR, context.exception.error_code)
        self.assertEqual(2, context.exception.lineno)
        self.assertEqual(5, context.exception.column)


if __name__ == '__main__':
    unittest.main()
