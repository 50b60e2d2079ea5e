"""
lox.diagnostics

Every phase reports into a Diagnostics object rather than into global
flags, so that one REPL line cannot leak an error into the next.
"""
import sys

from lox.exceptions import EvalError, LoxError, SyntaxError


class Diagnostics:

    def __init__(self, out=None):
        self.out = out
        self.errors = []
        self.had_error = False
        self.had_runtime_error = False

    def _write(self, text):
        # sys.stderr is looked up per write, it may have been replaced
        print(text, file=self.out or sys.stderr)

    def report(self, err: LoxError):
        "record a static (lexical, syntax or resolution) error"
        self.errors.append(err)
        self.had_error = True
        self._write(str(err))

    def error(self, line, msg):
        self.report(SyntaxError(msg, line=line))

    def token_error(self, token, msg, cls=SyntaxError):
        self.report(cls(msg, token=token))

    def runtime_error(self, err: EvalError):
        self.errors.append(err)
        self.had_runtime_error = True
        self._write(str(err))

    def reset(self):
        self.errors = []
        self.had_error = False
        self.had_runtime_error = False

    def __repr__(self):
        return f'<Diagnostics errors={len(self.errors)} at {hex(id(self))}>'
