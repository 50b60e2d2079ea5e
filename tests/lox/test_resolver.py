import io

import pytest

from lox import ast
from lox.diagnostics import Diagnostics
from lox.exceptions import SemanticError
from lox.parser import parse
from lox.resolver import Resolver, resolve
from lox.scanner import scan


@pytest.fixture
def diagnostics():
    return Diagnostics(out=io.StringIO())


def parse_text(text, diagnostics):
    statements = parse(scan(text, diagnostics), diagnostics)
    assert not diagnostics.had_error
    return statements


def resolve_errors(text, diagnostics):
    resolve(parse_text(text, diagnostics), diagnostics)
    assert all(isinstance(e, SemanticError) for e in diagnostics.errors)
    return [e.msg for e in diagnostics.errors]


# -------------
#  Resolver
# -------------


def test_resolve__hop_distances(diagnostics):
    statements = parse_text("""
    var g = 1;
    {
        var a = 1;
        fun f(p) {
            print p;
            print a;
            print g;
            a = p;
        }
    }
    """, diagnostics)
    hops = resolve(statements, diagnostics)
    assert not diagnostics.had_error

    block = statements[1]
    f = block.statements[1]
    print_p, print_a, print_g, assign_a = f.body

    assert hops[print_p.expression] == 0
    assert hops[print_a.expression] == 1
    assert print_g.expression not in hops  # global
    assert hops[assign_a.expression] == 1
    # the read of p on the right hand side of the assignment
    assert hops[assign_a.expression.value] == 0


def test_resolve__closure_sees_declaration_site(diagnostics):
    statements = parse_text("""
    var a = "global";
    {
        fun show() { print a; }
        var a = "block";
        print a;
    }
    """, diagnostics)
    hops = resolve(statements, diagnostics)
    show_fn, _, print_a = statements[1].statements
    [print_in_show] = show_fn.body
    # 'a' was not yet declared in the block when show was resolved
    assert print_in_show.expression not in hops
    assert hops[print_a.expression] == 0


def test_resolve__this_and_super(diagnostics):
    statements = parse_text("""
    class A { m() { return 1; } }
    class B < A {
        m() { return super.m() + this.n; }
    }
    """, diagnostics)
    hops = resolve(statements, diagnostics)
    assert not diagnostics.had_error

    [method] = statements[1].methods
    [ret] = method.body
    super_call, this_get = ret.value.left, ret.value.right
    assert isinstance(super_call.callee, ast.Super)
    assert isinstance(this_get.object, ast.This)
    # method scope -> this scope -> super scope
    assert hops[this_get.object] == 1
    assert hops[super_call.callee] == 2
    # the superclass reference itself is global
    assert statements[1].superclass not in hops


def test_resolve__is_idempotent(diagnostics):
    statements = parse_text("""
    fun outer() {
        var x = 1;
        fun inner() { return x; }
        return inner;
    }
    { var y = 2; { print y; } }
    """, diagnostics)
    resolver = Resolver(diagnostics)
    first = dict(resolver.resolve(statements))
    second = dict(resolver.resolve(statements))
    third = Resolver(diagnostics).resolve(statements)
    assert first == second == third
    assert len(first) == 3
    assert not diagnostics.had_error


@pytest.mark.parametrize('text, message', [
    ('{ var a = a; }',
     "Can't read local variable in its own initializer."),
    ('{ var a = 1; var a = 2; }',
     'Already a variable with this name in this scope.'),
    ('fun f(a, a) {}',
     'Already a variable with this name in this scope.'),
    ('return 1;',
     "Can't return from top-level code."),
    ('class A { init() { return 1; } }',
     "Can't return a value from an initializer."),
    ('print this;',
     "Can't use 'this' outside of a class."),
    ('fun f() { return this; }',
     "Can't use 'this' outside of a class."),
    ('print super.x;',
     "Can't use 'super' outside of a class."),
    ('class A { m() { super.m(); } }',
     "Can't use 'super' in a class with no superclass."),
    ('class A < A {}',
     "A class can't inherit from itself."),
])
def test_resolve__errors(diagnostics, text, message):
    assert resolve_errors(text, diagnostics) == [message]


@pytest.mark.parametrize('text', [
    'var a = 1; var a = 2;',  # globals may be redefined
    'var a = a;',  # a global, so it's a runtime matter
    'class A { init() { return; } }',
    'fun f() { return 1; }',
    'class A { m() { return this; } }',
])
def test_resolve__no_errors(diagnostics, text):
    assert resolve_errors(text, diagnostics) == []


def test_resolve__reports_every_error(diagnostics):
    errors = resolve_errors("""
    { var a = 1; var a = 2; }
    return;
    print this;
    """, diagnostics)
    assert errors == [
        'Already a variable with this name in this scope.',
        "Can't return from top-level code.",
        "Can't use 'this' outside of a class.",
    ]
    out = diagnostics.out.getvalue()
    assert "[line 2] Error at 'a': Already a variable" in out
    assert "[line 3] Error at 'return'" in out
