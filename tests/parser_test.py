import unittest

from calcvm.ast_nodes import Assign, BinaryOp, Boolean, Identifier, If, Number, Program, UnaryOp
from calcvm.exceptions import ParserError, ErrorCode
from calcvm.lexer import Lexer
from calcvm.parser import Parser


def parse(text):
    parser = Parser(Lexer(text).tokenize())
    return parser.parse_statements(), parser.errors


def parse_expression(text):
    statements, errors = parse(f"x = {text};")
    assert not errors, errors
    return statements[0].value


class ExpressionTestCase(unittest.TestCase):

    def test_precedence(self):
        cases = {
            "1 + 2 * 3": "(1.0+(2.0*3.0))",
            "(1 + 2) * 3": "((1.0+2.0)*3.0)",
            "1 - 2 - 3": "((1.0-2.0)-3.0)",
            "8 / 4 % 3": "((8.0/4.0)%3.0)",
            "2 ^ 3 ^ 2": "(2.0^(3.0^2.0))",
            "2 ** 3 ^ 2": "(2.0**(3.0^2.0))",
            "-2 ^ 2": "(-(2.0^2.0))",
            "-a * b": "((-a)*b)",
            "!!x": "(!(!x))",
            "a < b == c > d": "(((a<b)==c)>d)",
            "a || b && c": "(a||(b&&c))",
            "a && b || c && d": "((a&&b)||(c&&d))",
            "1 + 2 >= 3 && true": "(((1.0+2.0)>=3.0)&&true)",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, repr(parse_expression(case)), case)

    def test_primary_nodes(self):
        self.assertIsInstance(parse_expression("42"), Number)
        self.assertEqual(42.0, parse_expression("42").value)
        self.assertIsInstance(parse_expression("y"), Identifier)
        self.assertIs(True, parse_expression("true").value)
        self.assertIsInstance(parse_expression("false"), Boolean)
        self.assertIs(False, parse_expression("false").value)

    def test_node_shape(self):
        node = parse_expression("-(a + 1)")
        self.assertIsInstance(node, UnaryOp)
        self.assertEqual("-", node.operator)
        self.assertIsInstance(node.operand, BinaryOp)
        self.assertEqual("+", node.operand.operator)
        self.assertIsInstance(node.operand.left, Identifier)
        self.assertIsInstance(node.operand.right, Number)


class StatementTestCase(unittest.TestCase):

    def test_assignments(self):
        statements, errors = parse("a = 1; b = a + 2\nc = 3;")
        self.assertEqual([], errors)
        self.assertEqual(["a", "b", "c"], [statement.variable for statement in statements])
        self.assertTrue(all(isinstance(statement, Assign) for statement in statements))

    def test_stray_semicolons(self):
        statements, errors = parse(";; a = 1;;; b = 2; ;")
        self.assertEqual([], errors)
        self.assertEqual(2, len(statements))

    def test_if_else(self):
        statements, errors = parse("a = 10; if (a > 5) b = 1; else b = 0;")
        self.assertEqual([], errors)
        node = statements[1]
        self.assertIsInstance(node, If)
        self.assertEqual("(a>5.0)", repr(node.condition))
        self.assertEqual("b", node.then_branch.variable)
        self.assertEqual("b", node.else_branch.variable)

    def test_if_without_else(self):
        statements, errors = parse("if (x) y = 1;")
        self.assertEqual([], errors)
        self.assertIsNone(statements[0].else_branch)

    def test_nested_if(self):
        statements, errors = parse("if (a) if (b) c = 1; else c = 2; else c = 3;")
        self.assertEqual([], errors)
        outer = statements[0]
        self.assertIsInstance(outer.then_branch, If)
        self.assertEqual(2.0, outer.then_branch.else_branch.value.value)
        self.assertEqual(3.0, outer.else_branch.value.value)

    def test_parse_wraps_program(self):
        program = Parser(Lexer("a = 1; b = 2;").tokenize()).parse()
        self.assertIsInstance(program, Program)
        self.assertEqual(2, len(program.statements))

    def test_locations(self):
        statements, __ = parse("a = 1;\nif (a) b = 2;")
        self.assertEqual(1, statements[0].start.lineno)
        self.assertEqual(2, statements[1].start.lineno)
        self.assertEqual(1, statements[1].start.column)


class RecoveryTestCase(unittest.TestCase):

    def test_single_error_is_isolated(self):
        statements, errors = parse("a = 1; b = ; c = 3; d = 4;")
        self.assertEqual(1, len(errors))
        self.assertEqual(["a", "c", "d"], [statement.variable for statement in statements])

    def test_error_location_and_message(self):
        __, errors = parse("a = 1;\nb = ;")
        error = errors[0]
        self.assertIsInstance(error, ParserError)
        self.assertEqual(ErrorCode.UNEXPECTED_TOKEN, error.error_code)
        self.assertEqual((2, 5), (error.lineno, error.column))
        self.assertIn("Expected expression, but found ';'", error.message)

    def test_missing_assign(self):
        statements, errors = parse("x 5; y = 2;")
        self.assertEqual(1, len(errors))
        self.assertIn("'=' after variable name", errors[0].message)
        self.assertEqual(["y"], [statement.variable for statement in statements])

    def test_bad_lead_token(self):
        statements, errors = parse("a = 1; ) b = 2;")
        self.assertEqual(1, len(errors))
        self.assertIn("Expected variable name, but found ')'", errors[0].message)
        self.assertEqual(["a", "b"], [statement.variable for statement in statements])

    def test_bad_lead_token_after_semicolon_makes_progress(self):
        statements, errors = parse("a = 1; ) ; b = 2;")
        self.assertEqual(1, len(errors))
        self.assertEqual(2, len(statements))

    def test_unclosed_paren(self):
        statements, errors = parse("a = (1 + 2; b = 3;")
        self.assertEqual(1, len(errors))
        self.assertIn("')' after expression", errors[0].message)
        self.assertEqual(["b"], [statement.variable for statement in statements])

    def test_end_of_input_mid_expression(self):
        statements, errors = parse("a = 1 +")
        self.assertEqual([], statements)
        self.assertEqual(ErrorCode.UNEXPECTED_END, errors[0].error_code)

    def test_resumes_at_next_identifier(self):
        # recovery stops at 'a', which then fails again as an assignment
        statements, errors = parse("if a > 1) b = 2; c = 3;")
        self.assertEqual(2, len(errors))
        self.assertIn("'(' after 'if'", errors[0].message)
        self.assertIn("'=' after variable name", errors[1].message)
        self.assertEqual(["b", "c"], [statement.variable for statement in statements])

    def test_tokens_without_end_marker(self):
        tokens = Lexer("a = 1").tokenize()[:-1]
        parser = Parser(tokens)
        self.assertEqual(1, len(parser.parse_statements()))
        self.assertEqual([], parser.errors)

    def test_deep_nesting_is_a_syntax_error(self):
        text = "a = 1;\nx = " + "(" * 500 + "1" + ")" * 500 + ";\ny = 2;"
        statements, errors = parse(text)
        self.assertEqual(1, len(errors))
        self.assertEqual(ErrorCode.NESTING_TOO_DEEP, errors[0].error_code)
        self.assertEqual((2, 1), (errors[0].lineno, errors[0].column))
        self.assertEqual(["a", "y"], [statement.variable for statement in statements])

    def test_parse_statements_never_raises(self):
        for case in ["=", "if", "if (", "((((", "1 + 2", "else a = 1;", "a = = 1;"]:
            parser = Parser(Lexer(case).tokenize())
            parser.parse_statements()
            self.assertTrue(parser.errors, case)


if __name__ == '__main__':
    unittest.main()
