import logging
import math
import operator
from typing import Dict, List, Optional

from .codegen import Code, CodeGenerator, OPCodes
from .exceptions import VMError, ErrorCode
from .lexer import Lexer
from .parser import Parser

logger = logging.getLogger(__name__)


def _compile(text: str) -> List[Code]:
    return CodeGenerator().generate(Parser(Lexer(text).tokenize()).parse())


def _power(base: float, exponent: float) -> float:
    # IEEE results instead of Python exceptions: overflow is infinite, no real result is NaN
    try:
        return math.pow(base, exponent)
    except OverflowError:
        negative = base < 0 and exponent % 2 == 1
    except ValueError:
        if base != 0:
            return math.nan
        negative = math.copysign(1.0, base) < 0 and exponent % 2 == 1
    return -math.inf if negative else math.inf


def _modulo(dividend: float, divisor: float) -> float:
    # truncated remainder, sign follows the dividend
    try:
        return math.fmod(dividend, divisor)
    except ValueError:
        return math.nan


BINARY_OPCODES = {
    OPCodes.ADD: operator.add,
    OPCodes.SUB: operator.sub,
    OPCodes.MUL: operator.mul,
    OPCodes.DIV: operator.truediv,
    OPCodes.POW: _power,
    OPCodes.MOD: _modulo,

    OPCodes.EQ: operator.eq,
    OPCodes.NEQ: operator.ne,
    OPCodes.LT: operator.lt,
    OPCodes.LTE: operator.le,
    OPCodes.GT: operator.gt,
    OPCodes.GTE: operator.ge,

    OPCodes.AND: lambda left, right: left != 0 and right != 0,
    OPCodes.OR: lambda left, right: left != 0 or right != 0,
}

JUMP_OPCODES = (OPCodes.JUMP, OPCodes.JUMP_IF_FALSE)


class VM:
    """Two-pass stack machine.

    ``run`` first maps every ``LABEL`` to its index, then executes from
    instruction 0 until the program counter passes the end of ``code_list``.
    All state is rebuilt on every call, so the same instruction list can be
    run any number of times with the same outcome.
    """

    def __init__(self, code_list: List[Code]):
        self.code_list: List[Code] = code_list
        self.labels: Dict[str, int] = dict()
        self.operate_stack: List[float] = list()
        self.variables: Dict[str, float] = dict()
        self.pc: int = 0

    @classmethod
    def run_source(cls, text: str) -> Dict[str, float]:
        return cls(code_list=_compile(text)).run()

    @classmethod
    def run_file(cls, path: str) -> Dict[str, float]:
        with open(path, 'r', encoding='utf-8') as f:
            return cls.run_source(f.read())

    @property
    def current_code(self) -> Optional[Code]:
        if self.pc < len(self.code_list):
            return self.code_list[self.pc]
        return None

    def error(self, error_code: ErrorCode, message: str = ''):
        raise VMError(error_code, message, pc=self.pc, code=self.current_code)

    def resolve_labels(self) -> Dict[str, int]:
        labels = dict()
        for index, code in enumerate(self.code_list):
            if code.opcode == OPCodes.LABEL:
                labels[code.argument] = index
        for index, code in enumerate(self.code_list):
            if code.opcode in JUMP_OPCODES and code.argument not in labels:
                raise VMError(ErrorCode.UNRESOLVED_LABEL, f"label '{code.argument}' is not defined",
                              pc=index, code=code)
        logger.debug('resolved %d labels: %r', len(labels), labels)
        return labels

    def push(self, value: float):
        self.operate_stack.append(value)

    def pop(self) -> float:
        if not self.operate_stack:
            self.error(ErrorCode.STACK_UNDERFLOW, 'pop from empty operand stack')
        return self.operate_stack.pop()

    def run(self, variables: Dict[str, float] = None) -> Dict[str, float]:
        self.operate_stack = list()
        self.variables = dict(variables) if variables is not None else dict()
        self.pc = 0
        self.labels = self.resolve_labels()

        while self.pc < len(self.code_list):
            code = self.code_list[self.pc]
            logger.debug('%04d %r stack=%r', self.pc, code, self.operate_stack)

            if code.opcode == OPCodes.PUSH_NUMBER:
                self.push(float(code.argument))
            elif code.opcode == OPCodes.PUSH_VAR:
                if code.argument not in self.variables:
                    self.error(ErrorCode.UNDEFINED_VARIABLE, f"'{code.argument}' is not defined")
                self.push(self.variables[code.argument])
            elif code.opcode == OPCodes.STORE:
                self.variables[code.argument] = self.pop()
            elif code.opcode == OPCodes.NEG:
                self.push(-self.pop())
            elif code.opcode == OPCodes.NOT:
                self.push(1.0 if self.pop() == 0 else 0.0)
            elif code.opcode in BINARY_OPCODES.keys():
                # right operand is on top
                right = self.pop()
                left = self.pop()
                if code.opcode == OPCodes.DIV and right == 0:
                    self.error(ErrorCode.DIVISION_BY_ZERO, f'{left!r} / {right!r}')
                self.push(float(BINARY_OPCODES[code.opcode](left, right)))
            elif code.opcode == OPCodes.JUMP:
                self.pc = self.labels[code.argument]
                continue
            elif code.opcode == OPCodes.JUMP_IF_FALSE:
                if self.pop() == 0:
                    self.pc = self.labels[code.argument]
                    continue
            elif code.opcode == OPCodes.LABEL:
                pass
            else:
                self.error(ErrorCode.UNKNOWN_OPCODE, repr(code.opcode))
            self.pc += 1

        logger.debug('halted after %d instructions with variables %r', len(self.code_list), self.variables)
        return self.variables
