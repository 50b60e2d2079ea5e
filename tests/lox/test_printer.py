from lox import ast
from lox.printer import AstPrinter
from lox.tokens import Token, TokenType as T


def token(type, lexeme):
    return Token(type, lexeme, None, 1)


def test_print_expr():
    expr = ast.Binary(
        ast.Unary(token(T.MINUS, '-'), ast.Literal(123.0)),
        token(T.STAR, '*'),
        ast.Grouping(ast.Literal(45.67)),
    )
    assert AstPrinter().print(expr) == '(* (- 123.0) (group 45.67))'


def test_print_literals():
    printer = AstPrinter()
    assert printer.print(ast.Literal(None)) == 'nil'
    assert printer.print(ast.Literal(True)) == 'true'
    assert printer.print(ast.Literal(False)) == 'false'
    assert printer.print(ast.Literal('hi')) == "'hi'"
    assert printer.print(None) == ''


def test_print_class():
    name = token(T.IDENTIFIER, 'B')
    method = ast.Function(
        token(T.IDENTIFIER, 'm'), [],
        [ast.Return(token(T.RETURN, 'return'),
                    ast.Super(token(T.SUPER, 'super'),
                              token(T.IDENTIFIER, 'm')))],
    )
    stmt = ast.Class(name, ast.Variable(token(T.IDENTIFIER, 'A')), [method])
    assert AstPrinter().print(stmt) == '(class B < A (fun m() (return (super m))))'

    stmt = ast.Class(name, None, [])
    assert AstPrinter().print(stmt) == '(class B)'


def test_print_program():
    x = token(T.IDENTIFIER, 'x')
    program = [
        ast.Var(x, ast.Literal(1.0)),
        ast.Expression(ast.Assign(x, ast.This(token(T.THIS, 'this')))),
    ]
    assert AstPrinter().print(program) == '(var x = 1.0) (; (= x this))'
