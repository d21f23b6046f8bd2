"""Command line front end: compiles and runs a file, an inline snippet or an interactive shell session."""

import argparse
import cmd
import logging

from .codegen import CodeGenerator
from .lexer import Lexer, TokenType
from .parser import Parser
from .reporting import ErrorHandler
from .visualizer import ASTVisualizer
from .vm import VM


def run_source(source, args, error_handler, variables=None):
    """Runs source through every stage, printing the stages requested in args, and returns the final variables.

    Statements the parser had to skip are reported as warnings and the rest of the program still runs.
    """
    tokens = Lexer(source).tokenize()
    if args.tokens:
        print("TOKENS:")
        for token in tokens:
            if token.type != TokenType.END:
                print(f"  {token!r}")

    parser = Parser(tokens)
    program = parser.parse()
    for error in parser.errors:
        error_handler.warn(error)

    if args.ast:
        print("AST:")
        for statement in program.statements:
            print(f"  {statement!r}")
    if args.dot:
        # a single statement is drawn on its own, several under a Program root
        root = program.statements[0] if len(program.statements) == 1 else program
        ASTVisualizer().save_dot(args.dot, root)

    code_list = CodeGenerator().generate(program)
    if args.instructions:
        print("INSTRUCTIONS:")
        for index, code in enumerate(code_list):
            print(f"  {index:04d}  {code!r}")

    return VM(code_list).run(variables)


def print_variables(variables, previous=None):
    for name, value in variables.items():
        if previous is not None and name in previous and previous[name] == value:
            continue
        print(f"{name} = {value}")


class Shell(cmd.Cmd):
    """Interactive calcvm shell. Variables persist from one line to the next."""
    intro = "calcvm :: expression compiler and stack machine\nType ':help' for more information."
    prompt = "> "

    def __init__(self, args, *a, **kwargs):
        super().__init__(*a, **kwargs)
        self.args = args
        self.error_handler = ErrorHandler(path="<stdin>", fatal=False)
        self.variables = {}

    def onecmd(self, line):
        """Dispatches ':command' lines to do_command and everything else to default."""
        line = line.strip()
        if not line:
            return self.emptyline()
        if line == "EOF":
            return self.do_EOF("")
        if line.startswith(":"):
            command, __, arg = line[1:].partition(" ")
            method = getattr(self, f"do_{command}", None)
            if method is None:
                print(f"unknown command ':{command}'")
                return False
            return method(arg.strip())
        self.default(line)
        return False

    def default(self, line):
        """Compiles and runs one line of source against the shell's variables."""
        with self.error_handler:
            self.error_handler.register_source("<stdin>", line)
            previous = self.variables
            self.variables = run_source(line, self.args, self.error_handler, variables=previous)
            print_variables(self.variables, previous)

    def do_help(self, arg):
        """Prints a short intro rather than per-command docs."""
        print("Type statements such as 'x = 3 + 4 * 2;' or 'if (x > 5) y = 1; else y = 0;'.\n"
              "Variables keep their values between lines.\n\n"
              ":vars    list every variable\n"
              ":reset   forget every variable\n"
              ":exit    leave the shell")

    def do_vars(self, arg):
        """Lists every variable."""
        print_variables(self.variables)

    def do_reset(self, arg):
        """Forgets every variable."""
        self.variables = {}

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits shell."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits shell."""
        return True


def main(argv=None):
    """Runs calcvm. Called from the calcvm console script and from main.py."""
    arg_parser = argparse.ArgumentParser(prog="calcvm", description="Compile and run calcvm programs.")
    arg_parser.add_argument("file", help="file to compile and run (if empty, goes to interactive mode)", nargs="?")
    arg_parser.add_argument("-e", "--eval", metavar="SOURCE", help="compile and run SOURCE instead of a file")
    arg_parser.add_argument("--tokens", action="store_true", help="print the token stream")
    arg_parser.add_argument("--ast", action="store_true", help="print the parsed statements")
    arg_parser.add_argument("--instructions", action="store_true", help="print the generated instructions")
    arg_parser.add_argument("--dot", metavar="PATH", help="write the AST as a Graphviz DOT file")
    arg_parser.add_argument("-v", "--verbose", action="store_true", help="log every stage, down to each instruction")
    args = arg_parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.file is None and args.eval is None:
        Shell(args).cmdloop()
        return

    with ErrorHandler() as error_handler:
        if args.eval is not None:
            path, source = "<eval>", args.eval
        else:
            path = args.file
            with open(path, "r", encoding="utf-8") as f:
                source = f.read()
        error_handler.register_source(path, source)
        print_variables(run_source(source, args, error_handler))
