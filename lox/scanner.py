"""
lox.scanner

Turns source text into a flat list of tokens. Scanning never stops at an
error: bad characters and unterminated strings are reported to the
diagnostics and skipped, so that all lexical errors surface in one pass.
"""
from lox.tokens import KEYWORDS, Token, TokenType


WHITESPACE = (' ', '\r', '\t')

SINGLE = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# c -> (type without '=', type with '=')
MAYBE_EQUAL = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}


def is_digit(c):
    return '0' <= c <= '9'


def is_ident_start(c):
    return 'a' <= c <= 'z' or 'A' <= c <= 'Z' or c == '_'


def is_ident(c):
    return is_ident_start(c) or is_digit(c)


def read_ident(source, start):
    "returns the index just past the identifier starting at start"
    i = start
    n = len(source)
    while i < n and is_ident(source[i]):
        i += 1
    return i


def read_num(source, start):
    """
    returns the value of the number literal starting at start and the
    index just past it. a fractional part needs a digit after the '.'
    """
    i = start
    n = len(source)
    while i < n and is_digit(source[i]):
        i += 1
    if i + 1 < n and source[i] == '.' and is_digit(source[i + 1]):
        i += 1
        while i < n and is_digit(source[i]):
            i += 1
    return float(source[start:i]), i


def read_str(source, start):
    """
    start is the index of the opening quote.
    returns (value or None if unterminated, end index, newlines consumed)
    """
    end = source.find('"', start + 1)
    if end == -1:
        return None, len(source), source.count('\n', start + 1)
    return source[start + 1:end], end + 1, source.count('\n', start + 1, end)


def read_comment(source, start):
    "skip to, but not past, the end of line"
    end = source.find('\n', start)
    return len(source) if end == -1 else end


def scan(source, diagnostics):
    tokens = []
    line = 1
    i = 0
    n = len(source)

    def add(type, start, end, literal=None):
        tokens.append(Token(type, source[start:end], literal, line))

    while i < n:
        start = i
        c = source[i]
        c1 = source[i + 1] if i + 1 < n else ''
        match c:
            case c if c in WHITESPACE:
                i += 1
            case '\n':
                line += 1
                i += 1
            case c if c in SINGLE:
                i += 1
                add(SINGLE[c], start, i)
            case c if c in MAYBE_EQUAL:
                without, with_equal = MAYBE_EQUAL[c]
                if c1 == '=':
                    i += 2
                    add(with_equal, start, i)
                else:
                    i += 1
                    add(without, start, i)
            case '/' if c1 == '/':
                i = read_comment(source, i)
            case '/':
                i += 1
                add(TokenType.SLASH, start, i)
            case '"':
                value, i, newlines = read_str(source, start)
                line += newlines
                if value is None:
                    diagnostics.error(line, 'Unterminated string.')
                else:
                    add(TokenType.STRING, start, i, value)
            case c if is_digit(c):
                value, i = read_num(source, start)
                add(TokenType.NUMBER, start, i, value)
            case c if is_ident_start(c):
                i = read_ident(source, start)
                text = source[start:i]
                add(KEYWORDS.get(text, TokenType.IDENTIFIER), start, i)
            case _:
                diagnostics.error(line, 'Unexpected character.')
                i += 1

    tokens.append(Token(TokenType.EOF, '', None, line))
    return tokens
