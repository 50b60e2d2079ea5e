# The runtime object model shared by the interpreter and its callables

import time
from typing import Any, Optional

from lox.exceptions import EvalError


class Environment:
    """
    One scope's bindings plus a link to the lexically enclosing scope.

    Closures hold on to the environment they were defined in, so an
    environment lives for as long as any block, call or closure refers
    to it. All of them see each other's assignments.
    """

    def __init__(self, enclosing: Optional['Environment'] = None):
        self.values: dict[str, Any] = {}
        self.enclosing = enclosing

    def define(self, name: str, value):
        # redefinition is allowed; the resolver rejects it in local scopes
        self.values[name] = value

    def get(self, name):
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise EvalError(f"Undefined variable '{name.lexeme}'.", name)

    def assign(self, name, value):
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return
        raise EvalError(f"Undefined variable '{name.lexeme}'.", name)

    def ancestor(self, distance: int) -> 'Environment':
        env = self
        for _ in range(distance):
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: str):
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: str, value):
        self.ancestor(distance).values[name] = value

    def __repr__(self):
        names = ' '.join(self.values)
        return f'<Environment [{names}] at {hex(id(self))}>'


class LoxCallable:

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interp, arguments: list):
        raise NotImplementedError


class NativeFn(LoxCallable):
    """
    A function provided by the host
    """
    def __init__(self, name, arity, func):
        self.name = name
        self._arity = arity
        self.func = func

    def arity(self):
        return self._arity

    def call(self, interp, arguments):
        return self.func(*arguments)

    def __str__(self):
        return '<native fn>'

    def __repr__(self):
        return f'<NativeFn({self.name}) object at {hex(id(self))}>'


def clock():
    return time.time()


class LoxFunction(LoxCallable):

    def __init__(self, declaration, closure: Environment, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    def bind(self, instance: 'LoxInstance') -> 'LoxFunction':
        "a fresh closure over the method with 'this' defined"
        env = Environment(self.closure)
        env.define('this', instance)
        return LoxFunction(self.declaration, env, self.is_initializer)

    def arity(self):
        return len(self.declaration.params)

    def call(self, interp, arguments):
        env = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            env.define(param.lexeme, argument)

        outcome = interp.execute_block(self.declaration.body, env)

        if self.is_initializer:
            return self.closure.get_at(0, 'this')
        if outcome is not None:
            return outcome.value
        return None

    def __str__(self):
        return f'<fn {self.declaration.name.lexeme}>'

    def __repr__(self):
        return f'<LoxFunction({self.declaration.name.lexeme}) object at {hex(id(self))}>'


class LoxClass(LoxCallable):

    def __init__(self, name: str, superclass: Optional['LoxClass'],
                 methods: dict[str, LoxFunction]):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[LoxFunction]:
        klass = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self):
        initializer = self.find_method('init')
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interp, arguments):
        instance = LoxInstance(self)
        initializer = self.find_method('init')
        if initializer is not None:
            initializer.bind(instance).call(interp, arguments)
        return instance

    def __str__(self):
        return self.name

    def __repr__(self):
        return f'<LoxClass({self.name}) object at {hex(id(self))}>'


class LoxInstance:

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: dict[str, Any] = {}

    def get(self, name):
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise EvalError(f"Undefined property '{name.lexeme}'.", name)

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def __str__(self):
        return f'{self.klass.name} instance'

    def __repr__(self):
        return f'<LoxInstance({self.klass.name}) object at {hex(id(self))}>'
