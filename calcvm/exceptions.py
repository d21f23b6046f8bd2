from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    # LexerError
    LEXER_ERROR = 'Lexer Error'

    # ParserError
    UNEXPECTED_TOKEN = 'Unexpected token'
    UNEXPECTED_END = 'Unexpected end of input'
    NESTING_TOO_DEEP = 'Nesting too deep'

    # CodeGeneratorError
    UNEXPECTED_AST_NODE = 'Unexpected ast node'
    UNEXPECTED_OPERATOR = 'Unexpected operator'

    # VMError
    UNDEFINED_VARIABLE = 'Undefined variable'
    DIVISION_BY_ZERO = 'Division by zero'
    STACK_UNDERFLOW = 'Stack underflow'
    UNRESOLVED_LABEL = 'Unresolved label'
    UNKNOWN_OPCODE = 'Unknown opcode'


class InterpreterError(Exception):
    def __init__(self, error_code: ErrorCode, message: str = ''):
        self.error_code: ErrorCode = error_code
        self.message: str = message
        # prefix the message with the exception class name
        super().__init__(f'{self.__class__.__name__}: {error_code.value}: {message}')


class SourceError(InterpreterError):
    """An error that can be pinned to a line and column of the source text."""

    def __init__(self, error_code: ErrorCode, message: str = '',
                 lineno: Optional[int] = None, column: Optional[int] = None):
        self.lineno: Optional[int] = lineno
        self.column: Optional[int] = column
        if lineno is not None:
            message = f'{message} at line {lineno}, column {column}'
        super().__init__(error_code, message)


class LexerError(SourceError):
    pass


class ParserError(SourceError):
    pass


class CodeGeneratorError(InterpreterError):
    pass


class VMError(InterpreterError):
    def __init__(self, error_code: ErrorCode, message: str = '', pc: Optional[int] = None, code=None):
        self.pc: Optional[int] = pc
        self.code = code
        if pc is not None:
            message = f'{message} (instruction {pc}: {code!r})'
        super().__init__(error_code, message)
