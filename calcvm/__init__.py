from .lexer import Lexer
from .parser import Parser
from .codegen import CodeGenerator
from .vm import VM
from .visualizer import ASTVisualizer
