import logging
from enum import Enum
from typing import List, Tuple, Union

from .ast_nodes import ASTNode, Number, Identifier, Boolean, UnaryOp, BinaryOp, Assign, If, Program
from .exceptions import CodeGeneratorError, ErrorCode

logger = logging.getLogger(__name__)


class ArgumentType(Enum):
    NONE = 'none'
    NUMBER = 'number'
    NAME = 'name'
    LABEL = 'label'


class OPCode:
    def __init__(self, name: str, argument_type: ArgumentType):
        self.name: str = name
        self.argument_type: ArgumentType = argument_type

    def __repr__(self):
        return self.name


class OPCodes(Enum):
    PUSH_NUMBER = OPCode('PUSH_NUMBER', ArgumentType.NUMBER)  # push(number)
    PUSH_VAR = OPCode('PUSH_VAR', ArgumentType.NAME)  # push(variables[name])
    STORE = OPCode('STORE', ArgumentType.NAME)  # variables[name] = pop()

    NEG = OPCode('NEG', ArgumentType.NONE)  # TOS = -TOS
    NOT = OPCode('NOT', ArgumentType.NONE)  # TOS = 1.0 if TOS == 0 else 0.0

    ADD = OPCode('ADD', ArgumentType.NONE)  # TOS = TOS1 + TOS
    SUB = OPCode('SUB', ArgumentType.NONE)  # TOS = TOS1 - TOS
    MUL = OPCode('MUL', ArgumentType.NONE)  # TOS = TOS1 * TOS
    DIV = OPCode('DIV', ArgumentType.NONE)  # TOS = TOS1 / TOS
    POW = OPCode('POW', ArgumentType.NONE)  # TOS = TOS1 ** TOS
    MOD = OPCode('MOD', ArgumentType.NONE)  # TOS = TOS1 % TOS

    EQ = OPCode('EQ', ArgumentType.NONE)  # TOS = TOS1 == TOS
    NEQ = OPCode('NEQ', ArgumentType.NONE)  # TOS = TOS1 != TOS
    LT = OPCode('LT', ArgumentType.NONE)  # TOS = TOS1 < TOS
    LTE = OPCode('LTE', ArgumentType.NONE)  # TOS = TOS1 <= TOS
    GT = OPCode('GT', ArgumentType.NONE)  # TOS = TOS1 > TOS
    GTE = OPCode('GTE', ArgumentType.NONE)  # TOS = TOS1 >= TOS

    AND = OPCode('AND', ArgumentType.NONE)  # TOS = TOS1 && TOS, both always evaluated
    OR = OPCode('OR', ArgumentType.NONE)  # TOS = TOS1 || TOS, both always evaluated

    JUMP = OPCode('JUMP', ArgumentType.LABEL)  # PC = labels[target]
    JUMP_IF_FALSE = OPCode('JUMP_IF_FALSE', ArgumentType.LABEL)  # if (pop() == 0) PC = labels[target]
    LABEL = OPCode('LABEL', ArgumentType.LABEL)  # jump target marker, no-op when executed

    def __repr__(self):
        return repr(self.value)


unary_operator_to_opcodes = {
    '-': OPCodes.NEG,
    '!': OPCodes.NOT,
}

binary_operator_to_opcodes = {
    '+': OPCodes.ADD,
    '-': OPCodes.SUB,
    '*': OPCodes.MUL,
    '/': OPCodes.DIV,
    '^': OPCodes.POW,
    '**': OPCodes.POW,
    '%': OPCodes.MOD,

    '==': OPCodes.EQ,
    '!=': OPCodes.NEQ,
    '<': OPCodes.LT,
    '<=': OPCodes.LTE,
    '>': OPCodes.GT,
    '>=': OPCodes.GTE,

    '&&': OPCodes.AND,
    '||': OPCodes.OR,
}


class Code:
    def __init__(self, opcode: OPCodes, argument: Union[None, float, str] = None):
        self.opcode: OPCodes = opcode
        self.argument: Union[None, float, str] = argument

    def __repr__(self):
        if not isinstance(self.opcode, OPCodes):
            # hand-built instruction the VM will reject
            return f'{self.opcode!r} {self.argument!r}'
        elif self.opcode.value.argument_type == ArgumentType.NONE:
            return repr(self.opcode)
        elif self.opcode.value.argument_type == ArgumentType.NUMBER:
            return f'{self.opcode!r} {self.argument!r}'
        else:
            return f'{self.opcode!r} {self.argument}'


class CodeGenerator:
    """Lowers AST nodes into a flat list of :class:`Code` instructions.

    Operands are emitted before the operator that consumes them. Each ``If``
    node gets a fresh pair of label names from ``label_count``, so labels stay
    unique over everything one generator instance produces.
    """

    def __init__(self):
        self.code_list: List[Code] = list()
        self.label_count: int = 0

    def generate(self, ast_node: ASTNode) -> List[Code]:
        code_list = self.gen_code(ast_node)
        logger.debug('generated %d instructions for %s', len(code_list), type(ast_node).__name__)
        self.code_list += code_list
        return self.code_list

    def new_labels(self) -> Tuple[str, str]:
        index = self.label_count
        self.label_count += 1
        return f'ELSE_{index}', f'END_{index}'

    def gen_code(self, ast_node: ASTNode) -> List[Code]:
        # post-order walk over an explicit stack, tree depth never costs Python frames
        code_list = list()
        pending: List[Union[ASTNode, Code]] = [ast_node]
        while pending:
            item = pending.pop()
            if isinstance(item, Code):
                code_list.append(item)
            else:
                pending += reversed(self.lower(item))
        return code_list

    def lower(self, ast_node: ASTNode) -> List[Union[ASTNode, Code]]:
        """Returns the children still to be lowered and the instructions of ast_node, in emission order."""
        if isinstance(ast_node, Number):
            return [Code(OPCodes.PUSH_NUMBER, float(ast_node.value))]
        elif isinstance(ast_node, Identifier):
            return [Code(OPCodes.PUSH_VAR, ast_node.name)]
        elif isinstance(ast_node, Boolean):
            return [Code(OPCodes.PUSH_NUMBER, 1.0 if ast_node.value else 0.0)]
        elif isinstance(ast_node, UnaryOp):
            opcode = unary_operator_to_opcodes.get(ast_node.operator)
            if opcode is None:
                raise CodeGeneratorError(ErrorCode.UNEXPECTED_OPERATOR, message=repr(ast_node.operator))
            return [ast_node.operand, Code(opcode)]
        elif isinstance(ast_node, BinaryOp):
            opcode = binary_operator_to_opcodes.get(ast_node.operator)
            if opcode is None:
                raise CodeGeneratorError(ErrorCode.UNEXPECTED_OPERATOR, message=repr(ast_node.operator))
            return [ast_node.left, ast_node.right, Code(opcode)]
        elif isinstance(ast_node, Assign):
            return [ast_node.value, Code(OPCodes.STORE, ast_node.variable)]
        elif isinstance(ast_node, If):
            # if (<cond>) <then> [else <else>]
            #
            #   if (<cond>)                   <cond>
            #                                 JUMP_IF_FALSE ELSE_n
            #     <then>             ===>     <then>
            #   else                          JUMP END_n
            #                                 LABEL ELSE_n
            #     <else>                      <else>
            #                                 LABEL END_n
            else_label, end_label = self.new_labels()
            items = [
                ast_node.condition,
                Code(OPCodes.JUMP_IF_FALSE, else_label),
                ast_node.then_branch,
                Code(OPCodes.JUMP, end_label),
                Code(OPCodes.LABEL, else_label),
            ]
            if ast_node.else_branch is not None:
                items.append(ast_node.else_branch)
            items.append(Code(OPCodes.LABEL, end_label))
            return items
        elif isinstance(ast_node, Program):
            return list(ast_node.statements)
        raise CodeGeneratorError(ErrorCode.UNEXPECTED_AST_NODE, message=repr(ast_node))
