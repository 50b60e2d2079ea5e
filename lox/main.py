"""
lox.main

The front end: runs a file, or reads lines from a prompt. Everything
below it is driven through run().
"""
import logging
import os
import sys
import threading
import traceback

from lox.diagnostics import Diagnostics
from lox.interp import Interpreter
from lox.parser import parse
from lox.resolver import resolve
from lox.scanner import scan

log = logging.getLogger(__name__)

# See sysexits.h
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70

# Each Lox call costs several python frames, so the default limit of 1000
# gives out after a couple of hundred calls. Run on a thread with a large
# stack instead, and let the stack be what runs out.
RECURSION_LIMIT = 50_000
STACK_SIZE = 512 * 1024 * 1024


def with_deep_stack(func, *args):
    """
    Call func(*args) on a thread with a large stack and a raised recursion
    limit, re-raising anything it raises here.
    """
    result = []
    failure = []

    def target():
        try:
            result.append(func(*args))
        except BaseException as e:
            failure.append(e)

    old_limit = sys.getrecursionlimit()
    old_size = threading.stack_size(STACK_SIZE)
    sys.setrecursionlimit(RECURSION_LIMIT)
    try:
        thread = threading.Thread(target=target, name='lox')
        thread.start()
        thread.join()
    finally:
        sys.setrecursionlimit(old_limit)
        threading.stack_size(old_size)

    if failure:
        raise failure[0]
    return result[0]


def run(source, interp, diagnostics):
    tokens = scan(source, diagnostics)
    log.debug('scanned %d tokens', len(tokens))

    statements = parse(tokens, diagnostics)
    log.debug('parsed %d statements', len(statements))
    if diagnostics.had_error:
        log.debug('not resolving: %d static errors', len(diagnostics.errors))
        return

    hops = resolve(statements, diagnostics)
    if diagnostics.had_error:
        log.debug('not running: %d static errors', len(diagnostics.errors))
        return

    interp.resolve(hops)
    interp.interpret(statements, diagnostics)


def exit_status(diagnostics):
    if diagnostics.had_error:
        return EX_DATAERR
    if diagnostics.had_runtime_error:
        return EX_SOFTWARE
    return EX_OK


def run_file(path):
    with open(path, encoding='utf-8') as f:
        source = f.read()
    diagnostics = Diagnostics()
    with_deep_stack(run, source, Interpreter(), diagnostics)
    return exit_status(diagnostics)


def run_prompt(input=input):
    interp = Interpreter(repl=True)
    diagnostics = Diagnostics()
    while True:
        try:
            line = input('> ')
        except EOFError:
            print()
            return EX_OK
        try:
            with_deep_stack(run, line, interp, diagnostics)
        except Exception:
            traceback.print_exc()
        # an error on one line shouldn't stop the next from running
        diagnostics.reset()


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    logging.basicConfig(
        level=logging.DEBUG if os.environ.get('LOX_DEBUG') else logging.WARNING,
        format='%(name)s: %(message)s',
    )

    if len(argv) > 1:
        print('Usage: lox [script]')
        return EX_USAGE
    if len(argv) == 1:
        return run_file(argv[0])

    if os.isatty(sys.stdin.fileno()):
        return run_prompt()

    diagnostics = Diagnostics()
    with_deep_stack(run, sys.stdin.read(), Interpreter(), diagnostics)
    return exit_status(diagnostics)


if __name__ == '__main__':
    sys.exit(main())
