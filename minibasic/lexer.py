"""
Hand-rolled tokenizer for one BASIC statement body.

Tokens are ``lark.Token`` instances, so they compare equal to their literal
text and carry the column they started at.
"""

from typing import Iterator, List

from lark import Token

# Token kinds
EOF = 'EOF'
IDENT = 'IDENT'
NUMBER = 'NUMBER'
STRING = 'STRING'
OP = 'OP'
DELIM = 'DELIM'
KEYWORD = 'KEYWORD'
ILLEGAL = 'ILLEGAL'

KEYWORDS = {'REM', 'LET', 'PRINT', 'INPUT', 'IF', 'THEN', 'GOTO', 'END'}

STRING_SUFFIX = '$'

TWO_CHAR_OPS = ('<=', '>=', '<>')
ONE_CHAR_OPS = '=<>+-*/'
DELIMITERS = '(),'

WHITESPACE = ' \t\r'


def is_letter(ch):
    return 'A' <= ch <= 'Z' or 'a' <= ch <= 'z'


def is_digit(ch):
    return '0' <= ch <= '9'


class Lexer:
    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == EOF:
                return

    def _make(self, kind, literal, start):
        return Token(kind, literal, start_pos=start, line=1, column=start + 1)

    def _peek(self, offset=0):
        i = self.pos + offset
        return self.source[i] if i < len(self.source) else ''

    def next_token(self) -> Token:
        s = self.source
        while self.pos < len(s) and s[self.pos] in WHITESPACE:
            self.pos += 1

        start = self.pos
        if start >= len(s):
            return self._make(EOF, '', start)

        ch = s[start]

        if ch == '"':
            return self._read_string()

        if is_letter(ch):
            ident = self._read_identifier().upper()
            kind = KEYWORD if ident in KEYWORDS else IDENT
            return self._make(kind, ident, start)

        if is_digit(ch):
            return self._make(NUMBER, self._read_number(), start)

        two = s[start:start + 2]
        if two in TWO_CHAR_OPS:
            self.pos += 2
            return self._make(OP, two, start)
        if ch in ONE_CHAR_OPS:
            self.pos += 1
            return self._make(OP, ch, start)
        if ch in DELIMITERS:
            self.pos += 1
            return self._make(DELIM, ch, start)

        self.pos += 1
        return self._make(ILLEGAL, ch, start)

    def _read_identifier(self):
        start = self.pos
        while is_letter(self._peek()) or is_digit(self._peek()):
            self.pos += 1
        if self._peek() == STRING_SUFFIX:
            self.pos += 1
        return self.source[start:self.pos]

    def _read_number(self):
        start = self.pos
        seen_dot = False
        while True:
            ch = self._peek()
            if is_digit(ch):
                self.pos += 1
            elif ch == '.' and not seen_dot:
                seen_dot = True
                self.pos += 1
            else:
                break
        return self.source[start:self.pos]

    def _read_string(self):
        start = self.pos
        self.pos += 1  # opening quote
        body_start = self.pos
        while self._peek() not in ('"', '', '\n'):
            self.pos += 1
        if self._peek() != '"':
            return self._make(ILLEGAL, 'unterminated string', start)
        text = self.source[body_start:self.pos]
        self.pos += 1  # closing quote
        return self._make(STRING, text, start)


def tokenize(source: str) -> List[Token]:
    """All tokens of ``source``, ending with a single EOF token."""
    return list(Lexer(source))
