import logging
from typing import Callable, List, Optional

from .ast_nodes import ASTNode, Number, Identifier, Boolean, UnaryOp, BinaryOp, Assign, If, Program
from .exceptions import ParserError, ErrorCode
from .lexer import Location, Token, TokenType

logger = logging.getLogger(__name__)

# lowest to highest precedence, every level is left associative
logical_or_operators = ('||',)
logical_and_operators = ('&&',)
comparison_operators = ('==', '!=', '<', '<=', '>', '>=')
additive_operators = ('+', '-')
multiplicative_operators = ('*', '/', '%')

unary_operators = ('-', '!')
exponent_operators = ('^', '**')

# tokens a statement can begin with, used to resynchronize after an error
statement_start_token_types = (TokenType.IF, TokenType.IDENTIFIER)


class Parser:
    """Recursive descent parser turning a token list into statement nodes.

    Syntax errors are recovered per statement: ``parse_statements`` records
    every :class:`ParserError` in ``self.errors`` and carries on with the next
    statement, so one malformed statement does not lose the rest of the program.
    """

    def __init__(self, tokens: List[Token]):
        self.tokens: List[Token] = tokens
        self.position: int = 0
        self.errors: List[ParserError] = list()

    @property
    def current_token(self) -> Token:
        if self.position >= len(self.tokens):
            return self._end_token()
        return self.tokens[self.position]

    @property
    def previous_token(self) -> Optional[Token]:
        if self.position == 0:
            return None
        return self.tokens[self.position - 1]

    def _end_token(self) -> Token:
        if self.tokens:
            location = self.tokens[-1].end
        else:
            location = Location(1, 1, 0)
        return Token(TokenType.END, '', location, location)

    def error(self, expected: str, token: Token = None):
        if token is None:
            token = self.current_token
        if token.type == TokenType.END:
            raise ParserError(error_code=ErrorCode.UNEXPECTED_END,
                              message=f'Expected {expected}, but found end of input',
                              lineno=token.lineno, column=token.column)
        raise ParserError(error_code=ErrorCode.UNEXPECTED_TOKEN,
                          message=f"Expected {expected}, but found '{token.value}'",
                          lineno=token.lineno, column=token.column)

    def advance_token(self):
        if self.position < len(self.tokens):
            self.position += 1

    def match(self, token_type: TokenType) -> bool:
        if self.current_token.type == token_type:
            self.advance_token()
            return True
        return False

    def match_operator(self, operators) -> bool:
        token = self.current_token
        if token.type == TokenType.OPERATOR and token.value in operators:
            self.advance_token()
            return True
        return False

    def expect(self, token_type: TokenType, expected: str) -> Token:
        token = self.current_token
        if token.type != token_type:
            self.error(expected)
        self.advance_token()
        return token

    def parse(self) -> Program:
        return Program(self.parse_statements())

    def parse_statements(self) -> List[ASTNode]:
        statements = list()
        while self.current_token.type != TokenType.END:
            if self.current_token.type == TokenType.SEMICOLON:
                # stray separator between statements
                self.advance_token()
                continue
            start_position = self.position
            start_token = self.current_token
            try:
                statements.append(self.parse_statement())
            except ParserError as e:
                self.recover(e, start_position)
            except RecursionError:
                # too deep for the Python stack, skipped like any other syntax error
                self.recover(ParserError(error_code=ErrorCode.NESTING_TOO_DEEP,
                                         message='Statement is nested too deeply',
                                         lineno=start_token.lineno, column=start_token.column),
                             start_position)
        return statements

    def recover(self, error: ParserError, start_position: int):
        logger.info('skipping statement: %s', error)
        self.errors.append(error)
        if self.position == start_position:
            self.advance_token()
        self.synchronize()

    def synchronize(self):
        while self.current_token.type != TokenType.END:
            if self.previous_token is not None and self.previous_token.type == TokenType.SEMICOLON:
                return
            if self.current_token.type in statement_start_token_types:
                return
            self.advance_token()

    def parse_statement(self) -> ASTNode:
        if self.current_token.type == TokenType.IF:
            return self.parse_if_statement()

        token = self.expect(TokenType.IDENTIFIER, 'variable name')
        self.expect(TokenType.ASSIGN, "'=' after variable name")
        value = self.parse_expression()
        self.match(TokenType.SEMICOLON)
        return Assign(token.value, value, start=token.start)

    def parse_if_statement(self) -> If:
        token = self.expect(TokenType.IF, "'if'")
        self.expect(TokenType.LPAREN, "'(' after 'if'")
        condition = self.parse_expression()
        self.expect(TokenType.RPAREN, "')' after condition")
        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch, start=token.start)

    def parse_expression(self) -> ASTNode:
        return self.parse_logical_or()

    def parse_left_associative(self, operators, parse_operand: Callable[[], ASTNode]) -> ASTNode:
        left = parse_operand()
        while self.match_operator(operators):
            operator = self.previous_token.value
            right = parse_operand()
            left = BinaryOp(operator, left, right, start=left.start)
        return left

    def parse_logical_or(self) -> ASTNode:
        return self.parse_left_associative(logical_or_operators, self.parse_logical_and)

    def parse_logical_and(self) -> ASTNode:
        return self.parse_left_associative(logical_and_operators, self.parse_comparison)

    def parse_comparison(self) -> ASTNode:
        return self.parse_left_associative(comparison_operators, self.parse_additive)

    def parse_additive(self) -> ASTNode:
        return self.parse_left_associative(additive_operators, self.parse_multiplicative)

    def parse_multiplicative(self) -> ASTNode:
        return self.parse_left_associative(multiplicative_operators, self.parse_unary)

    def parse_unary(self) -> ASTNode:
        token = self.current_token
        if self.match_operator(unary_operators):
            return UnaryOp(token.value, self.parse_unary(), start=token.start)
        return self.parse_exponent()

    def parse_exponent(self) -> ASTNode:
        # right associative: the exponent recurses instead of looping
        base = self.parse_primary()
        if self.match_operator(exponent_operators):
            operator = self.previous_token.value
            return BinaryOp(operator, base, self.parse_exponent(), start=base.start)
        return base

    def parse_primary(self) -> ASTNode:
        token = self.current_token
        if self.match(TokenType.NUMBER):
            return Number(float(token.value), start=token.start)
        elif self.match(TokenType.IDENTIFIER):
            return Identifier(token.value, start=token.start)
        elif self.match(TokenType.BOOLEAN):
            return Boolean(token.value == 'true', start=token.start)
        elif self.match(TokenType.LPAREN):
            expression = self.parse_expression()
            self.expect(TokenType.RPAREN, "')' after expression")
            return expression
        self.error('expression')
