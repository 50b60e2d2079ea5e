"""
lox.parser

A recursive descent parser. Each precedence level is a method calling the
next tighter one:

    assignment -> or -> and -> equality -> comparison -> term -> factor
        -> unary -> call -> primary

A syntax error is reported to the diagnostics as soon as it is found, then
a ParseError unwinds to the enclosing declaration, which synchronizes on
the next statement boundary and carries on. A declaration that failed to
parse contributes nothing to the result.
"""
import logging

from lox import ast
from lox.exceptions import ParseError
from lox.tokens import TokenType as T

log = logging.getLogger(__name__)

MAX_ARGS = 255

STATEMENT_STARTS = (
    T.CLASS, T.FUN, T.VAR, T.FOR, T.IF, T.WHILE, T.PRINT, T.RETURN
)


class Parser:

    def __init__(self, tokens, diagnostics):
        self.tokens = tokens
        self.diagnostics = diagnostics
        self.current = 0

    def parse(self):
        statements = []
        while not self.is_at_end():
            try:
                stmt = self.declaration()
            except RecursionError:
                # unwound all the way out, so there is stack to report with
                self.error(self.peek(), 'Too much nesting.')
                self.synchronize()
                continue
            if stmt is not None:
                statements.append(stmt)
        return statements

    # -----------
    #  Utilities
    # -----------

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def is_at_end(self):
        return self.peek().type == T.EOF

    def check(self, type):
        if self.is_at_end():
            return False
        return self.peek().type == type

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def match(self, *types):
        for type in types:
            if self.check(type):
                self.advance()
                return True
        return False

    def consume(self, type, msg):
        if self.check(type):
            return self.advance()
        raise self.error(self.peek(), msg)

    def error(self, token, msg):
        self.diagnostics.token_error(token, msg)
        return ParseError(msg, token=token)

    def synchronize(self):
        self.advance()
        while not self.is_at_end():
            if self.previous().type == T.SEMICOLON:
                break
            if self.peek().type in STATEMENT_STARTS:
                break
            self.advance()
        log.debug('synchronized at %s', self.peek())

    # --------------
    #  Declarations
    # --------------

    def declaration(self):
        try:
            if self.match(T.CLASS):
                return self.class_declaration()
            if self.match(T.FUN):
                return self.function('function')
            if self.match(T.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def class_declaration(self):
        name = self.consume(T.IDENTIFIER, 'Expect class name.')

        superclass = None
        if self.match(T.LESS):
            self.consume(T.IDENTIFIER, 'Expect superclass name.')
            superclass = ast.Variable(self.previous())

        self.consume(T.LEFT_BRACE, "Expect '{' before class body.")
        methods = []
        while not self.check(T.RIGHT_BRACE) and not self.is_at_end():
            methods.append(self.function('method'))
        self.consume(T.RIGHT_BRACE, "Expect '}' after class body.")

        return ast.Class(name, superclass, methods)

    def function(self, kind):
        "kind is 'function' or 'method', used in error messages"
        name = self.consume(T.IDENTIFIER, f'Expect {kind} name.')
        self.consume(T.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params = []
        if not self.check(T.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    # reported, but we can keep parsing
                    self.error(self.peek(),
                               f"Can't have more than {MAX_ARGS} parameters.")
                params.append(
                    self.consume(T.IDENTIFIER, 'Expect parameter name.')
                )
                if not self.match(T.COMMA):
                    break
        self.consume(T.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(T.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self.block()
        return ast.Function(name, params, body)

    def var_declaration(self):
        name = self.consume(T.IDENTIFIER, 'Expect variable name.')
        initializer = None
        if self.match(T.EQUAL):
            initializer = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name, initializer)

    # ------------
    #  Statements
    # ------------

    def statement(self):
        if self.match(T.FOR):
            return self.for_statement()
        if self.match(T.IF):
            return self.if_statement()
        if self.match(T.PRINT):
            return self.print_statement()
        if self.match(T.RETURN):
            return self.return_statement()
        if self.match(T.WHILE):
            return self.while_statement()
        if self.match(T.LEFT_BRACE):
            return ast.Block(self.block())
        return self.expression_statement()

    def for_statement(self):
        """
        for is sugar. (for (init; cond; incr) body) becomes

            { init; while (cond) { body; incr; } }
        """
        self.consume(T.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(T.SEMICOLON):
            initializer = None
        elif self.match(T.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(T.SEMICOLON):
            condition = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(T.RIGHT_PAREN):
            increment = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = ast.Block([body, ast.Expression(increment)])
        if condition is None:
            condition = ast.Literal(True)
        body = ast.While(condition, body)
        if initializer is not None:
            body = ast.Block([initializer, body])
        return body

    def if_statement(self):
        self.consume(T.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        # the else binds to the nearest if
        if self.match(T.ELSE):
            else_branch = self.statement()
        return ast.If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after value.")
        return ast.Print(value)

    def return_statement(self):
        keyword = self.previous()
        value = None
        if not self.check(T.SEMICOLON):
            value = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after return value.")
        return ast.Return(keyword, value)

    def while_statement(self):
        self.consume(T.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.statement()
        return ast.While(condition, body)

    def block(self):
        statements = []
        while not self.check(T.RIGHT_BRACE) and not self.is_at_end():
            if (stmt := self.declaration()) is not None:
                statements.append(stmt)
        self.consume(T.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after expression.")
        return ast.Expression(expr)

    # -------------
    #  Expressions
    # -------------

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.or_()

        if self.match(T.EQUAL):
            equals = self.previous()
            value = self.assignment()

            match expr:
                case ast.Variable(name):
                    return ast.Assign(name, value)
                case ast.Get(obj, name):
                    return ast.Set(obj, name, value)
            # no need to synchronize, we know where we are
            self.error(equals, 'Invalid assignment target.')

        return expr

    def logical(self, type, operand):
        expr = operand()
        while self.match(type):
            operator = self.previous()
            right = operand()
            expr = ast.Logical(expr, operator, right)
        return expr

    def or_(self):
        return self.logical(T.OR, self.and_)

    def and_(self):
        return self.logical(T.AND, self.equality)

    def binary(self, types, operand):
        "a left associative run of binary operators"
        expr = operand()
        while self.match(*types):
            operator = self.previous()
            right = operand()
            expr = ast.Binary(expr, operator, right)
        return expr

    def equality(self):
        return self.binary((T.BANG_EQUAL, T.EQUAL_EQUAL), self.comparison)

    def comparison(self):
        return self.binary(
            (T.GREATER, T.GREATER_EQUAL, T.LESS, T.LESS_EQUAL), self.term
        )

    def term(self):
        return self.binary((T.MINUS, T.PLUS), self.factor)

    def factor(self):
        return self.binary((T.SLASH, T.STAR), self.unary)

    def unary(self):
        if self.match(T.BANG, T.MINUS):
            operator = self.previous()
            right = self.unary()
            return ast.Unary(operator, right)
        return self.call()

    def call(self):
        expr = self.primary()
        while True:
            if self.match(T.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(T.DOT):
                name = self.consume(T.IDENTIFIER,
                                    "Expect property name after '.'.")
                expr = ast.Get(expr, name)
            else:
                break
        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(T.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGS:
                    self.error(self.peek(),
                               f"Can't have more than {MAX_ARGS} arguments.")
                arguments.append(self.expression())
                if not self.match(T.COMMA):
                    break
        paren = self.consume(T.RIGHT_PAREN, "Expect ')' after arguments.")
        return ast.Call(callee, paren, arguments)

    def primary(self):
        if self.match(T.FALSE):
            return ast.Literal(False)
        if self.match(T.TRUE):
            return ast.Literal(True)
        if self.match(T.NIL):
            return ast.Literal(None)

        if self.match(T.NUMBER, T.STRING):
            return ast.Literal(self.previous().literal)

        if self.match(T.SUPER):
            keyword = self.previous()
            self.consume(T.DOT, "Expect '.' after 'super'.")
            method = self.consume(T.IDENTIFIER,
                                  'Expect superclass method name.')
            return ast.Super(keyword, method)

        if self.match(T.THIS):
            return ast.This(self.previous())

        if self.match(T.IDENTIFIER):
            return ast.Variable(self.previous())

        if self.match(T.LEFT_PAREN):
            expr = self.expression()
            self.consume(T.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expr)

        raise self.error(self.peek(), 'Expect expression.')


def parse(tokens, diagnostics):
    return Parser(tokens, diagnostics).parse()
