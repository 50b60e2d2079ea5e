import pytest

from lox.main import main, run_file, run_prompt


@pytest.fixture
def write_script(tmp_path):
    def write(text, name='script.lox'):
        path = tmp_path / name
        path.write_text(text, encoding='utf-8')
        return str(path)
    return write


def test_run_file__ok(write_script, capsys):
    path = write_script('var greeting = "hi"; print greeting + "!";')
    assert run_file(path) == 0
    captured = capsys.readouterr()
    assert captured.out == 'hi!\n'
    assert captured.err == ''


def test_run_file__syntax_error(write_script, capsys):
    path = write_script('print (1;\n')
    assert run_file(path) == 65
    captured = capsys.readouterr()
    assert captured.out == ''
    assert captured.err == "[line 1] Error at ';': Expect ')' after expression.\n"


def test_run_file__lexical_error(write_script, capsys):
    path = write_script('print 1;\nprint @;\n')
    assert run_file(path) == 65
    # nothing runs when there is a static error
    assert capsys.readouterr().out == ''


def test_run_file__resolution_error(write_script, capsys):
    path = write_script('fun f() { var a = 1; var a = 2; }')
    assert run_file(path) == 65
    assert 'Already a variable' in capsys.readouterr().err


def test_run_file__runtime_error(write_script, capsys):
    path = write_script('print "ok";\nprint "a" * 2;\n')
    assert run_file(path) == 70
    captured = capsys.readouterr()
    assert captured.out == 'ok\n'
    assert captured.err == "Operands of '*' must be numbers.\n[line 2]\n"


def test_main__usage(capsys):
    assert main(['one.lox', 'two.lox']) == 64
    assert capsys.readouterr().out == 'Usage: lox [script]\n'


def test_main__script(write_script, capsys):
    path = write_script('print clock() >= 0;')
    assert main([path]) == 0
    assert capsys.readouterr().out == 'true\n'


def test_run_prompt(capsys):
    lines = iter([
        'var a = 1;',
        'a + 2;',
        'print nope;',
        'print ;',
        'a;',
        'fun f() { return a; }',
        'f();',
    ])

    def fake_input(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    assert run_prompt(input=fake_input) == 0
    captured = capsys.readouterr()
    # errors on one line don't stop later lines from running
    assert captured.out == '3\n1\n1\n\n'
    assert captured.err == (
        "Undefined variable 'nope'.\n[line 1]\n"
        "[line 1] Error at ';': Expect expression.\n"
    )


def test_run_file__deep_recursion(write_script, capsys):
    path = write_script("""
    fun sum(n) { if (n == 0) return 0; return n + sum(n - 1); }
    print sum(1000);
    """)
    assert run_file(path) == 0
    assert capsys.readouterr().out == '500500\n'


def test_run_file__stack_overflow(write_script, capsys):
    path = write_script('fun f() { f(); }\nf();\n')
    assert run_file(path) == 70
    assert capsys.readouterr().err == 'Stack overflow.\n[line 1]\n'


def test_run_file__too_much_nesting(write_script, capsys):
    depth = 100_000
    path = write_script('print ' + '(' * depth + '1' + ')' * depth + ';')
    assert run_file(path) == 65
    assert 'Too much nesting.' in capsys.readouterr().err
