"""
Recursive-descent statement parser with precedence climbing for expressions.

The parser looks at two tokens at a time (``cur`` and ``peek``).  A failed
parse records one message in ``errors`` and yields no statement at all.
"""

import math
from typing import List, Optional, Tuple

from lark import Token

from .errors import BasicSyntaxError
from .lexer import Lexer, EOF, IDENT, NUMBER, STRING, OP, DELIM, KEYWORD, ILLEGAL
from .nodes import (
    Assignment, BinaryExpression, Comment, Conditional, End, Expression, Input,
    Jump, NumberLiteral, Print, Statement, StringLiteral, UnaryExpression,
    VariableReference,
)

# binding powers
LOWEST = 1
COMPARE = 2     # = <> < <= > >=
SUM = 3         # + -
PRODUCT = 4     # * /
PREFIX = 5      # unary + -

PRECEDENCES = {
    '=': COMPARE, '<>': COMPARE,
    '<': COMPARE, '<=': COMPARE,
    '>': COMPARE, '>=': COMPARE,
    '+': SUM, '-': SUM,
    '*': PRODUCT, '/': PRODUCT,
}

# deepest expression tree or chain of IF bodies a statement may hold
MAX_NESTING = 100

KIND_NAMES = {IDENT: 'identifier', NUMBER: 'number', OP: 'operator', DELIM: 'delimiter'}


def describe(tok: Token) -> str:
    if tok.type == EOF:
        return "end of line"
    if tok.type == ILLEGAL:
        if len(tok) == 1:
            return f"illegal character {tok.value!r}"
        return tok.value
    if tok.type == KEYWORD:
        return f"keyword {tok.value}"
    if tok.type == STRING:
        return f'string "{tok.value}"'
    return f"{KIND_NAMES[tok.type]} {tok.value!r}"


class Parser:
    def __init__(self, source: str):
        self.lexer = Lexer(source)
        self.errors: List[str] = []
        # set once REM has swallowed the rest of the line
        self.rest_ignored = False
        self.nesting = 0
        self.cur: Optional[Token] = None
        self.peek: Optional[Token] = None
        self.advance()
        self.advance()

    def advance(self):
        self.cur = self.peek
        self.peek = self.lexer.next_token()

    # ----- helpers -----
    @staticmethod
    def _is(tok, kind, value=None):
        return tok.type == kind and (value is None or tok.value == value)

    def _fail(self, message):
        raise BasicSyntaxError(message)

    def _enter(self):
        self.nesting += 1
        if self.nesting > MAX_NESTING:
            self._fail("expression nested too deeply")

    def _deeper(self, depth):
        if depth >= MAX_NESTING:
            self._fail("expression nested too deeply")
        return depth + 1

    def _line_number(self, tok, what):
        if '.' in tok.value:
            self._fail(f"invalid {what} line number {tok.value}")
        number = int(tok.value)
        if number <= 0:
            self._fail(f"{what} line number must be positive, got {number}")
        return number

    # ----- statements -----
    def parse_statement(self) -> Optional[Statement]:
        try:
            return self._statement()
        except BasicSyntaxError as e:
            self.errors.append(str(e))
            return None

    def _statement(self):
        t = self.cur
        if t.type == KEYWORD:
            if t.value == 'REM':
                self.rest_ignored = True
                return Comment()
            if t.value == 'LET':
                return self._assignment(has_let=True)
            if t.value == 'PRINT':
                return self._print()
            if t.value == 'INPUT':
                return self._input()
            if t.value == 'IF':
                return self._conditional()
            if t.value == 'GOTO':
                return self._jump()
            if t.value == 'END':
                return End()
        if t.type == IDENT:
            if self._is(self.peek, OP, '='):
                return self._assignment(has_let=False)
            self._fail(f"unexpected identifier {t.value}")
        self._fail(f"unexpected {describe(t)}")

    def _assignment(self, has_let):
        if has_let:
            self.advance()
            if self.cur.type != IDENT:
                self._fail(f"LET requires identifier, got {describe(self.cur)}")
        name = self.cur.value
        if not self._is(self.peek, OP, '='):
            self._fail(f"expected '=' after {name}")
        self.advance()  # '='
        self.advance()  # start of expression
        return Assignment(name, self._expression(LOWEST))

    def _print(self):
        if self.peek.type == EOF:
            return Print()
        self.advance()
        items = [self._expression(LOWEST)]
        while self._is(self.peek, DELIM, ','):
            self.advance()  # ','
            self.advance()  # start of expression
            items.append(self._expression(LOWEST))
        return Print(tuple(items))

    def _input(self):
        self.advance()
        if self.cur.type != IDENT:
            self._fail(f"INPUT requires identifier, got {describe(self.cur)}")
        return Input(self.cur.value)

    def _conditional(self):
        self.advance()
        condition = self._expression(LOWEST)
        if not self._is(self.peek, KEYWORD, 'THEN'):
            self._fail(f"expected THEN, got {describe(self.peek)}")
        self.advance()  # THEN
        self.advance()  # line number or statement
        if self.cur.type == EOF:
            self._fail("THEN requires statement or line number")
        if self.cur.type == NUMBER and self.peek.type == EOF:
            return Conditional(condition, target=self._line_number(self.cur, 'THEN'))
        self._enter()
        return Conditional(condition, body=self._statement())

    def _jump(self):
        self.advance()
        if self.cur.type != NUMBER:
            self._fail(f"GOTO requires line number, got {describe(self.cur)}")
        return Jump(self._line_number(self.cur, 'GOTO'))

    # ----- expressions (precedence climbing) -----
    # _climb, _infix and _prefix return (expression, depth of its tree)
    def _expression(self, min_bp) -> Expression:
        return self._climb(min_bp)[0]

    def _climb(self, min_bp):
        self._enter()
        left, depth = self._prefix()
        while self.peek.type == OP and min_bp < PRECEDENCES[self.peek.value]:
            self.advance()
            left, depth = self._infix(left, depth)
        self.nesting -= 1
        return left, depth

    def _infix(self, left, depth):
        op = self.cur.value
        bp = PRECEDENCES[op]
        self.advance()
        right, right_depth = self._climb(bp)
        return BinaryExpression(op, left, right), self._deeper(max(depth, right_depth))

    def _prefix(self):
        t = self.cur
        if t.type == NUMBER:
            value = float(t.value)
            if math.isinf(value):
                self._fail(f"invalid number {t.value!r} (too large)")
            return NumberLiteral(value), 1
        if t.type == STRING:
            return StringLiteral(t.value), 1
        if t.type == IDENT:
            return VariableReference(t.value), 1
        if t.type == OP and t.value in ('+', '-'):
            self.advance()
            operand, depth = self._climb(PREFIX)
            return UnaryExpression(t.value, operand), self._deeper(depth)
        if self._is(t, DELIM, '('):
            self.advance()
            inner, depth = self._climb(LOWEST)
            if not self._is(self.peek, DELIM, ')'):
                self._fail(f"expected ')', got {describe(self.peek)}")
            self.advance()
            return inner, depth
        self._fail(f"unexpected {describe(t)} in expression")


def parse_line(source: str) -> Tuple[Optional[Statement], List[str]]:
    """Parse one statement body (no line number); returns (statement, errors)."""
    parser = Parser(source)
    stmt = parser.parse_statement()
    if stmt is not None and not parser.rest_ignored and parser.peek.type != EOF:
        parser.errors.append(f"unexpected {describe(parser.peek)} after statement")
    if parser.errors:
        return None, list(parser.errors)
    return stmt, []
