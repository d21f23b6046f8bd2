from typing import List, Optional

from .lexer import Location

UNARY_OPERATORS = ('-', '!')

ARITHMETIC_OPERATORS = ('+', '-', '*', '/', '%', '^', '**')
COMPARISON_OPERATORS = ('==', '!=', '<', '<=', '>', '>=')
LOGICAL_OPERATORS = ('&&', '||')
BINARY_OPERATORS = ARITHMETIC_OPERATORS + COMPARISON_OPERATORS + LOGICAL_OPERATORS


class ASTNode:
    def __init__(self, start: Location = None):
        self.start: Optional[Location] = start


class Number(ASTNode):
    def __init__(self, value: float = None,
                 start: Location = None):
        super().__init__(start=start)
        self.value: float = value

    def __repr__(self):
        return repr(self.value)


class Identifier(ASTNode):
    def __init__(self, name: str = None,
                 start: Location = None):
        super().__init__(start=start)
        self.name: str = name

    def __repr__(self):
        return self.name


class Boolean(ASTNode):
    def __init__(self, value: bool = None,
                 start: Location = None):
        super().__init__(start=start)
        self.value: bool = value

    def __repr__(self):
        return 'true' if self.value else 'false'


class UnaryOp(ASTNode):
    def __init__(self, operator: str = None, operand: ASTNode = None,
                 start: Location = None):
        super().__init__(start=start)
        self.operator: str = operator
        self.operand: ASTNode = operand

    def __repr__(self):
        return f'({self.operator}{self.operand!r})'


class BinaryOp(ASTNode):
    def __init__(self, operator: str = None, left: ASTNode = None, right: ASTNode = None,
                 start: Location = None):
        super().__init__(start=start)
        self.operator: str = operator
        self.left: ASTNode = left
        self.right: ASTNode = right

    def __repr__(self):
        return f'({self.left!r}{self.operator}{self.right!r})'


class Assign(ASTNode):
    def __init__(self, variable: str = None, value: ASTNode = None,
                 start: Location = None):
        super().__init__(start=start)
        self.variable: str = variable
        self.value: ASTNode = value

    def __repr__(self):
        return f'{self.variable}={self.value!r};'


class If(ASTNode):
    def __init__(self, condition: ASTNode = None, then_branch: ASTNode = None, else_branch: ASTNode = None,
                 start: Location = None):
        super().__init__(start=start)
        self.condition: ASTNode = condition
        self.then_branch: ASTNode = then_branch
        self.else_branch: Optional[ASTNode] = else_branch

    def __repr__(self):
        return f'if({self.condition!r}){self.then_branch!r}' + \
               (f'else {self.else_branch!r}' if self.else_branch is not None else '')


class Program(ASTNode):
    def __init__(self, statements: List[ASTNode] = None):
        super().__init__(start=None)
        if statements is None:
            statements = list()
        self.statements: List[ASTNode] = statements

    def __repr__(self):
        return ''.join(map(repr, self.statements))
