import math
import operator
import sys
import weakref
from dataclasses import dataclass
from typing import Any

from lox import ast
from lox.exceptions import EvalError
from lox.runtime import (
    Environment, LoxCallable, LoxClass, LoxFunction, LoxInstance, NativeFn,
    clock,
)
from lox.tokens import TokenType as T


# -------------
#  Interpreter
# -------------

@dataclass(frozen=True)
class ReturnValue:
    """
    The outcome of executing a return statement. Statements that complete
    normally produce None; anything else is handed back up through the
    enclosing blocks and loops until a function call takes it.
    """
    value: Any


def is_truthy(value):
    # zero and the empty string are truthy
    return value is not None and value is not False


def is_equal(a, b):
    if a is None:
        return b is None
    # no coercion: 1 != true
    if type(a) is not type(b):
        return False
    return a == b


def divide(left, right):
    # IEEE 754, rather than python's ZeroDivisionError
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def stringify(value):
    match value:
        case None:
            return 'nil'
        case True:
            return 'true'
        case False:
            return 'false'
        case float() if math.isnan(value):
            return 'NaN'
        case float() if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        case float() if value.is_integer() and abs(value) < 1e21:
            # whole numbers print without a fraction or an exponent
            return '%d' % value
        case float():
            return repr(value)
        case _:
            return str(value)


NUMERIC = {
    T.MINUS: operator.sub,
    T.SLASH: divide,
    T.STAR: operator.mul,
    T.GREATER: operator.gt,
    T.GREATER_EQUAL: operator.ge,
    T.LESS: operator.lt,
    T.LESS_EQUAL: operator.le,
}


def check_number_operand(operator, operand):
    if isinstance(operand, float):
        return
    raise EvalError(f"Operand of '{operator.lexeme}' must be a number.", operator)


def check_number_operands(operator, left, right):
    if isinstance(left, float) and isinstance(right, float):
        return
    raise EvalError(f"Operands of '{operator.lexeme}' must be numbers.", operator)


class Interpreter:

    def __init__(self, out=None, repl=False):
        self.out = out
        # in the repl, expression statements print their value
        self.repl = repl
        self.globals = Environment()
        self.environment = self.globals
        # Expr -> hop distance, filled in by the resolver. Weak, so that
        # nodes of repl lines nothing refers to any more drop out.
        self.locals = weakref.WeakKeyDictionary()

        self.globals.define('clock', NativeFn('clock', 0, clock))

    def resolve(self, hops):
        self.locals.update(hops)

    def interpret(self, statements, diagnostics):
        try:
            for stmt in statements:
                match stmt:
                    case ast.Expression(expression) if self.repl:
                        self.write(stringify(self.evaluate(expression)))
                    case _:
                        self.execute(stmt)
        except EvalError as e:
            diagnostics.runtime_error(e)

    def write(self, text):
        print(text, file=self.out or sys.stdout)

    # ------------
    #  Statements
    # ------------

    def execute_block(self, statements, environment):
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                if (outcome := self.execute(stmt)) is not None:
                    return outcome
            return None
        finally:
            self.environment = previous

    def execute(self, stmt):
        match stmt:
            case ast.Block(statements):
                return self.execute_block(
                    statements, Environment(self.environment)
                )

            case ast.Class():
                self.execute_class(stmt)

            case ast.Expression(expression):
                self.evaluate(expression)

            case ast.Function(name):
                function = LoxFunction(stmt, self.environment)
                self.environment.define(name.lexeme, function)

            case ast.If(condition, then_branch, else_branch):
                if is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)

            case ast.Print(expression):
                self.write(stringify(self.evaluate(expression)))

            case ast.Return(_, value):
                if value is not None:
                    return ReturnValue(self.evaluate(value))
                return ReturnValue(None)

            case ast.Var(name, initializer):
                value = None
                if initializer is not None:
                    value = self.evaluate(initializer)
                self.environment.define(name.lexeme, value)

            case ast.While(condition, body):
                while is_truthy(self.evaluate(condition)):
                    if (outcome := self.execute(body)) is not None:
                        return outcome

            case _:
                raise NotImplementedError(stmt)
        return None

    def execute_class(self, stmt):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise EvalError('Superclass must be a class.',
                                stmt.superclass.name)

        self.environment.define(stmt.name.lexeme, None)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define('super', superclass)

        methods = {
            method.name.lexeme: LoxFunction(
                method, self.environment, method.name.lexeme == 'init'
            )
            for method in stmt.methods
        }
        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)

    # -------------
    #  Expressions
    # -------------

    def look_up_variable(self, name, expr):
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def evaluate(self, expr):
        match expr:
            case ast.Literal(value):
                return value

            case ast.Grouping(expression):
                return self.evaluate(expression)

            case ast.Unary(operator, right):
                value = self.evaluate(right)
                match operator.type:
                    case T.MINUS:
                        check_number_operand(operator, value)
                        return -value
                    case T.BANG:
                        return not is_truthy(value)

            case ast.Binary(left, operator, right):
                return self.evaluate_binary(
                    operator, self.evaluate(left), self.evaluate(right)
                )

            case ast.Logical(left, operator, right):
                value = self.evaluate(left)
                if operator.type == T.OR:
                    if is_truthy(value):
                        return value
                elif not is_truthy(value):
                    return value
                return self.evaluate(right)

            case ast.Variable(name):
                return self.look_up_variable(name, expr)

            case ast.Assign(name, value_expr):
                value = self.evaluate(value_expr)
                distance = self.locals.get(expr)
                if distance is not None:
                    self.environment.assign_at(distance, name.lexeme, value)
                else:
                    self.globals.assign(name, value)
                return value

            case ast.Call(callee_expr, paren, argument_exprs):
                callee = self.evaluate(callee_expr)
                arguments = [self.evaluate(arg) for arg in argument_exprs]
                return self.call(callee, paren, arguments)

            case ast.Get(obj_expr, name):
                obj = self.evaluate(obj_expr)
                if isinstance(obj, LoxInstance):
                    return obj.get(name)
                raise EvalError('Only instances have properties.', name)

            case ast.Set(obj_expr, name, value_expr):
                obj = self.evaluate(obj_expr)
                if not isinstance(obj, LoxInstance):
                    raise EvalError('Only instances have fields.', name)
                value = self.evaluate(value_expr)
                obj.set(name, value)
                return value

            case ast.This(keyword):
                return self.look_up_variable(keyword, expr)

            case ast.Super(_, method_name):
                distance = self.locals[expr]
                superclass = self.environment.get_at(distance, 'super')
                # 'this' is always bound one scope inside 'super'
                obj = self.environment.get_at(distance - 1, 'this')
                method = superclass.find_method(method_name.lexeme)
                if method is None:
                    raise EvalError(
                        f"Undefined property '{method_name.lexeme}'.",
                        method_name
                    )
                return method.bind(obj)

        raise NotImplementedError(expr)

    def evaluate_binary(self, operator, left, right):
        match operator.type:
            case T.BANG_EQUAL:
                return not is_equal(left, right)
            case T.EQUAL_EQUAL:
                return is_equal(left, right)
            case T.PLUS:
                if isinstance(left, float) and isinstance(right, float):
                    return left + right
                if isinstance(left, str) and isinstance(right, str):
                    return left + right
                raise EvalError(
                    "Operands of '+' must be two numbers or two strings.",
                    operator
                )
            case op if op in NUMERIC:
                check_number_operands(operator, left, right)
                return NUMERIC[op](left, right)
        raise NotImplementedError(operator)

    def call(self, callee, paren, arguments):
        if not isinstance(callee, LoxCallable):
            raise EvalError('Can only call functions and classes.', paren)
        if len(arguments) != callee.arity():
            raise EvalError(
                f'Expected {callee.arity()} arguments but got {len(arguments)}.',
                paren
            )
        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise EvalError('Stack overflow.', paren) from None
