"""
Tree-walking interpreter over a numbered Program.

The program counter is an index into the ascending line order, not a line
number; jumps go through a line -> index map built at the start of a run.
"""

import logging
import sys

from .environment import Environment, Value, is_string_name
from .errors import (
    BasicRuntimeError, DivisionByZero, InputExhausted, InputFormatError,
    StepLimitExceeded, TypeMismatch, UndefinedLine,
)
from .nodes import (
    Assignment, BinaryExpression, Comment, Conditional, End, Input, Jump,
    NumberLiteral, Print, StringLiteral, UnaryExpression, VariableReference,
    format_number,
)

log = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 1_000_000
DEFAULT_PROMPT = '? '

# returned by _execute instead of a program counter
HALT = None


def format_value(value: Value) -> str:
    if isinstance(value, str):
        return value
    return format_number(value)


def _truth(ok):
    return 1.0 if ok else 0.0


def _numeric(value, what):
    if not isinstance(value, float):
        raise TypeMismatch(f"{what} requires numbers")
    return value


def eval_binary(op, left, right):
    if op in ('+', '-', '*', '/'):
        if not isinstance(left, float) or not isinstance(right, float):
            raise TypeMismatch("arithmetic requires numbers")
        if op == '+':
            return left + right
        if op == '-':
            return left - right
        if op == '*':
            return left * right
        if right == 0.0:
            raise DivisionByZero()
        return left / right

    if op in ('=', '<>'):
        if isinstance(left, str) != isinstance(right, str):
            raise TypeMismatch("type mismatch in comparison")
        same = left == right
        return _truth(same if op == '=' else not same)

    if op in ('<', '<=', '>', '>='):
        _numeric(left, "ordered comparison")
        _numeric(right, "ordered comparison")
        if op == '<':
            return _truth(left < right)
        if op == '<=':
            return _truth(left <= right)
        if op == '>':
            return _truth(left > right)
        return _truth(left >= right)

    raise BasicRuntimeError(f"unsupported operator {op!r}")


class Interpreter:
    def __init__(self, program, stdin=None, stdout=None,
                 max_steps=DEFAULT_MAX_STEPS, prompt=DEFAULT_PROMPT):
        self.program = program
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.max_steps = max_steps      # 0 disables the limit
        self.prompt = prompt
        self.env = Environment()
        self.steps = 0

    def reset_environment(self):
        self.env = Environment()

    # --------------------------------------------------------------
    def run(self):
        linenums = self.program.ordered_lines()
        line_index = {ln: i for i, ln in enumerate(linenums)}
        log.debug("run: %d lines, step budget %s", len(linenums), self.max_steps or "unlimited")

        self.steps = 0
        i = 0
        while 0 <= i < len(linenums):
            linenum = linenums[i]
            try:
                self.steps += 1
                if self.max_steps and self.steps > self.max_steps:
                    raise StepLimitExceeded(self.max_steps)
                i = self._execute(self.program.statement(linenum), i, line_index)
            except BasicRuntimeError as e:
                if e.line is None:
                    e.line = linenum
                log.debug("run aborted after %d steps: %s", self.steps, e)
                raise
            if i is HALT:
                log.debug("END at line %d after %d steps", linenum, self.steps)
                return
        log.debug("ran off the end after %d steps", self.steps)

    def _resolve(self, target, line_index):
        if target not in line_index:
            raise UndefinedLine(target)
        log.debug("jump to line %d", target)
        return line_index[target]

    def _execute(self, stmt, i, line_index):
        """Run one statement; returns the next program counter or HALT."""
        i_next = i + 1

        if isinstance(stmt, Comment):
            return i_next

        if isinstance(stmt, Assignment):
            self.env.set(stmt.name, self.eval_expr(stmt.value))
            return i_next

        if isinstance(stmt, Print):
            # evaluate everything first so a failure prints nothing
            parts = [format_value(self.eval_expr(e)) for e in stmt.items]
            self.stdout.write(' '.join(parts) + '\n')
            return i_next

        if isinstance(stmt, Input):
            self._input(stmt.name)
            return i_next

        if isinstance(stmt, Conditional):
            cond = self.eval_expr(stmt.condition)
            if not isinstance(cond, float):
                raise TypeMismatch("IF condition must be numeric")
            if cond == 0.0:
                return i_next
            if stmt.is_jump:
                return self._resolve(stmt.target, line_index)
            return self._execute(stmt.body, i, line_index)

        if isinstance(stmt, Jump):
            return self._resolve(stmt.target, line_index)

        if isinstance(stmt, End):
            return HALT

        raise BasicRuntimeError(f"unknown statement {stmt!r}")

    def _input(self, name):
        self.stdout.write(self.prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise InputExhausted()
        line = line.strip()
        if is_string_name(name):
            self.env.set(name, line)
            return
        try:
            number = float(line)
        except ValueError:
            raise InputFormatError(f"INPUT expects number, got {line!r}") from None
        self.env.set(name, number)

    # --------------------------------------------------------------
    def eval_expr(self, expr) -> Value:
        if isinstance(expr, NumberLiteral):
            return float(expr.value)
        if isinstance(expr, StringLiteral):
            return expr.value
        if isinstance(expr, VariableReference):
            return self.env.get(expr.name)
        if isinstance(expr, UnaryExpression):
            v = _numeric(self.eval_expr(expr.operand), f"unary {expr.op}")
            return -v if expr.op == '-' else v
        if isinstance(expr, BinaryExpression):
            left = self.eval_expr(expr.left)
            right = self.eval_expr(expr.right)
            return eval_binary(expr.op, left, right)
        raise BasicRuntimeError(f"unknown expression {expr!r}")
