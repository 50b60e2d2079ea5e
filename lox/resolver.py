"""
lox.resolver

A static pass between parsing and execution. For every variable, this,
and super occurrence it works out how many environments out the
declaration lives, and records that against the node. Names it can't
find locally are left out of the table and are looked up in the
globals at run time.

Nothing here looks at a runtime value. Errors are reported to the
diagnostics and resolution carries on, so that one run surfaces them all.
"""
from enum import Enum, auto

from lox import ast
from lox.exceptions import SemanticError


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    INITIALIZER = auto()
    METHOD = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:

    def __init__(self, diagnostics):
        self.diagnostics = diagnostics
        self.scopes = []  # list of dict: name -> is fully defined
        self.locals = {}  # Expr -> hop distance
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE

    def resolve(self, statements):
        """
        Resolve a whole program and return the hop distance table.
        Each call starts from a clean slate.
        """
        self.scopes = []
        self.locals = {}
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.resolve_stmts(statements)
        return self.locals

    def error(self, token, msg):
        self.diagnostics.token_error(token, msg, cls=SemanticError)

    # --------
    #  Scopes
    # --------

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, 'Already a variable with this name in this scope.')
        scope[name.lexeme] = False

    def define(self, name):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr, name):
        for i, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.locals[expr] = i
                return
        # not found: assume global

    def resolve_function(self, function, type):
        enclosing_function = self.current_function
        self.current_function = type

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve_stmts(function.body)
        self.end_scope()

        self.current_function = enclosing_function

    # ------------
    #  Statements
    # ------------

    def resolve_stmts(self, statements):
        for stmt in statements:
            self.resolve_stmt(stmt)

    def resolve_stmt(self, stmt):
        match stmt:
            case ast.Block(statements):
                self.begin_scope()
                self.resolve_stmts(statements)
                self.end_scope()

            case ast.Class():
                self.resolve_class(stmt)

            case ast.Expression(expression) | ast.Print(expression):
                self.resolve_expr(expression)

            case ast.Function(name):
                # defined eagerly so that the function can recurse
                self.declare(name)
                self.define(name)
                self.resolve_function(stmt, FunctionType.FUNCTION)

            case ast.If(condition, then_branch, else_branch):
                self.resolve_expr(condition)
                self.resolve_stmt(then_branch)
                if else_branch is not None:
                    self.resolve_stmt(else_branch)

            case ast.Return(keyword, value):
                if self.current_function == FunctionType.NONE:
                    self.error(keyword, "Can't return from top-level code.")
                if value is not None:
                    if self.current_function == FunctionType.INITIALIZER:
                        self.error(keyword,
                                   "Can't return a value from an initializer.")
                    self.resolve_expr(value)

            case ast.Var(name, initializer):
                self.declare(name)
                if initializer is not None:
                    self.resolve_expr(initializer)
                self.define(name)

            case ast.While(condition, body):
                self.resolve_expr(condition)
                self.resolve_stmt(body)

            case _:
                raise NotImplementedError(stmt)

    def resolve_class(self, stmt):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.name.lexeme == stmt.superclass.name.lexeme:
                self.error(stmt.superclass.name,
                           "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve_expr(stmt.superclass)

            self.begin_scope()
            self.scopes[-1]['super'] = True

        self.begin_scope()
        self.scopes[-1]['this'] = True

        for method in stmt.methods:
            if method.name.lexeme == 'init':
                type = FunctionType.INITIALIZER
            else:
                type = FunctionType.METHOD
            self.resolve_function(method, type)

        self.end_scope()

        if stmt.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class

    # -------------
    #  Expressions
    # -------------

    def resolve_expr(self, expr):
        match expr:
            case ast.Assign(name, value):
                self.resolve_expr(value)
                self.resolve_local(expr, name)

            case ast.Binary(left, _, right) | ast.Logical(left, _, right):
                self.resolve_expr(left)
                self.resolve_expr(right)

            case ast.Call(callee, _, arguments):
                self.resolve_expr(callee)
                for argument in arguments:
                    self.resolve_expr(argument)

            case ast.Get(obj):
                # properties are looked up dynamically
                self.resolve_expr(obj)

            case ast.Grouping(expression):
                self.resolve_expr(expression)

            case ast.Literal():
                pass

            case ast.Set(obj, _, value):
                self.resolve_expr(value)
                self.resolve_expr(obj)

            case ast.Super(keyword):
                if self.current_class == ClassType.NONE:
                    self.error(keyword, "Can't use 'super' outside of a class.")
                elif self.current_class != ClassType.SUBCLASS:
                    self.error(keyword,
                               "Can't use 'super' in a class with no superclass.")
                self.resolve_local(expr, keyword)

            case ast.This(keyword):
                if self.current_class == ClassType.NONE:
                    self.error(keyword, "Can't use 'this' outside of a class.")
                    return
                self.resolve_local(expr, keyword)

            case ast.Unary(_, right):
                self.resolve_expr(right)

            case ast.Variable(name):
                if self.scopes and self.scopes[-1].get(name.lexeme) is False:
                    self.error(name,
                               "Can't read local variable in its own initializer.")
                self.resolve_local(expr, name)

            case _:
                raise NotImplementedError(expr)


def resolve(statements, diagnostics):
    return Resolver(diagnostics).resolve(statements)
