"""Error reporting for the command line front end. Library code only raises InterpreterErrors; this module turns them
into coloured file:line:col messages with the offending source column underlined.
"""

import sys

from termcolor import colored

from .exceptions import ErrorCode, InterpreterError, SourceError


class ErrorHandler:
    """Context manager that reports calcvm errors instead of letting a Python traceback reach the user."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, path="<input>", source="", fatal=True):
        self.path = path
        self.source = source
        self.fatal = fatal

    def register_source(self, path, source):
        """Sets the file name and text used to locate errors. Should be called before compiling source."""
        self.path = path
        self.source = source

    def source_line(self, lineno):
        lines = self.source.splitlines()
        if lineno is None or not 0 < lineno <= len(lines):
            return None
        return lines[lineno - 1]

    def diagnose(self, error, warning=False):
        """Returns the offending source line with the error column highlighted and a caret under it."""
        line = self.source_line(error.lineno)
        if line is None:
            return None
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        start = min(max(error.column - 1, 0), len(line))

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:start + 1], color, attrs=["bold"])
        diagnosis += line[start + 1:] + "\n"
        diagnosis += "  " + " " * start + colored("^", color, attrs=["bold"])
        return diagnosis

    def format(self, error, warning=False):
        if isinstance(error, SourceError) and error.lineno is not None:
            error_msg = colored(f"{self.path}:{error.lineno}:{error.column}: ", attrs=["bold"])
        else:
            error_msg = colored(f"{self.path}: ", attrs=["bold"])

        if warning:
            error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"])
        else:
            error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += f"{error.error_code.value}: {error.message}"

        if isinstance(error, SourceError):
            diagnosis = self.diagnose(error, warning=warning)
            if diagnosis is not None:
                error_msg += "\n" + diagnosis
        return error_msg

    def warn(self, error):
        """Prints a recovered error, e.g. a statement the parser skipped."""
        print(self.format(error, warning=True), file=sys.stderr)

    def throw(self, error):
        """Prints error and exits with status 1 when fatal."""
        print(self.format(error), file=sys.stderr)
        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or exc_type is SystemExit:
            return False
        if exc_type is KeyboardInterrupt:
            print(colored("keyboard interrupt", ErrorHandler.ERROR, attrs=["bold"]), file=sys.stderr)
            if self.fatal:
                sys.exit(130)
            return True
        if issubclass(exc_type, InterpreterError):
            self.throw(exc_val)
            return True
        if issubclass(exc_type, RecursionError):
            self.throw(InterpreterError(ErrorCode.NESTING_TOO_DEEP, 'maximum recursion depth exceeded'))
            return True
        if issubclass(exc_type, OSError):
            print(colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + str(exc_val), file=sys.stderr)
            if self.fatal:
                sys.exit(1)
            return True
        # anything else is a bug in calcvm itself: show it, then let the traceback through
        print(colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"]) + f"{exc_type.__name__}: {exc_val}",
              file=sys.stderr)
        return False
