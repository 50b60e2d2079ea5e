from lox.tokens import TokenType


class LoxError(Exception):
    def __init__(self, msg, /, token=None, line=None):
        super().__init__(msg)
        self.msg = msg
        self.token = token
        if token is not None:
            line = token.line
        self.line = line

    @property
    def where(self):
        if self.token is None:
            return ''
        if self.token.type == TokenType.EOF:
            return ' at end'
        return f" at '{self.token.lexeme}'"

    def __str__(self):
        return f'[line {self.line}] Error{self.where}: {self.msg}'


class SyntaxError(LoxError):
    "lexical and grammatical errors"


class ParseError(SyntaxError):
    """
    Raised inside the parser to unwind to the nearest statement boundary.
    It has already been reported by the time it is raised.
    """


class SemanticError(LoxError):
    "found by the resolver, before anything runs"


class EvalError(LoxError):

    def __str__(self):
        return f'{self.msg}\n[line {self.line}]'
