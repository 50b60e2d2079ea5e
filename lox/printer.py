"""
lox.printer

Renders the syntax tree in a parenthesized prefix form, for debugging the
parser. e.g. -123 * (45.67) prints as (* (- 123.0) (group 45.67))
"""
from lox import ast


class AstPrinter:

    def print(self, node):
        match node:
            case None:
                return ''
            case ast.Stmt():
                return self.print_stmt(node)
            case list():
                return ' '.join(map(self.print, node))
            case _:
                return self.print_expr(node)

    def parenthesize(self, name, *parts):
        rendered = [
            p if isinstance(p, str) else self.print(p) for p in parts
        ]
        return '(' + ' '.join([name, *rendered]) + ')'

    def print_expr(self, expr):
        match expr:
            case ast.Literal(None):
                return 'nil'
            case ast.Literal(True):
                return 'true'
            case ast.Literal(False):
                return 'false'
            case ast.Literal(str() as value):
                return repr(value)
            case ast.Literal(value):
                return str(value)
            case ast.Grouping(expression):
                return self.parenthesize('group', expression)
            case ast.Unary(operator, right):
                return self.parenthesize(operator.lexeme, right)
            case (ast.Binary(left, operator, right)
                  | ast.Logical(left, operator, right)):
                return self.parenthesize(operator.lexeme, left, right)
            case ast.Variable(name):
                return name.lexeme
            case ast.Assign(name, value):
                return self.parenthesize('=', name.lexeme, value)
            case ast.Call(callee, _, arguments):
                return self.parenthesize('call', callee, *arguments)
            case ast.Get(obj, name):
                return self.parenthesize('.', obj, name.lexeme)
            case ast.Set(obj, name, value):
                return self.parenthesize('=', obj, name.lexeme, value)
            case ast.This():
                return 'this'
            case ast.Super(_, method):
                return self.parenthesize('super', method.lexeme)
        raise NotImplementedError(expr)

    def print_stmt(self, stmt):
        match stmt:
            case ast.Expression(expression):
                return self.parenthesize(';', expression)
            case ast.Print(expression):
                return self.parenthesize('print', expression)
            case ast.Var(name, None):
                return self.parenthesize('var', name.lexeme)
            case ast.Var(name, initializer):
                return self.parenthesize('var', name.lexeme, '=', initializer)
            case ast.Block(statements):
                return self.parenthesize('block', *statements)
            case ast.If(condition, then_branch, None):
                return self.parenthesize('if', condition, then_branch)
            case ast.If(condition, then_branch, else_branch):
                return self.parenthesize(
                    'if-else', condition, then_branch, else_branch
                )
            case ast.While(condition, body):
                return self.parenthesize('while', condition, body)
            case ast.Function(name, params, body):
                signature = name.lexeme + '(' + ' '.join(
                    p.lexeme for p in params
                ) + ')'
                return self.parenthesize('fun', signature, *body)
            case ast.Return(_, None):
                return '(return)'
            case ast.Return(_, value):
                return self.parenthesize('return', value)
            case ast.Class(name, None, methods):
                return self.parenthesize('class', name.lexeme, *methods)
            case ast.Class(name, superclass, methods):
                return self.parenthesize(
                    'class', name.lexeme, '<', superclass.name.lexeme, *methods
                )
        raise NotImplementedError(stmt)
