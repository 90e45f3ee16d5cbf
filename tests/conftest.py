"""Shared helpers for building and running small BASIC programs."""

import io

import pytest

from minibasic.interpreter import DEFAULT_MAX_STEPS, Interpreter
from minibasic.parser import parse_line
from minibasic.program import Program


def _make_program(*lines):
    program = Program()
    for text in lines:
        number, body = text.split(' ', 1)
        stmt, errors = parse_line(body)
        assert not errors, errors
        program.set(int(number), body, stmt)
    return program


def _make_interpreter(program, stdin='', max_steps=DEFAULT_MAX_STEPS):
    out = io.StringIO()
    it = Interpreter(program, io.StringIO(stdin), out, max_steps=max_steps)
    return it, out


@pytest.fixture
def make_program():
    return _make_program


@pytest.fixture
def run_program():
    """Run the given lines once and return everything the program printed."""
    def run(*lines, stdin='', max_steps=DEFAULT_MAX_STEPS):
        it, out = _make_interpreter(_make_program(*lines), stdin, max_steps)
        it.reset_environment()
        it.run()
        return out.getvalue()
    return run


@pytest.fixture
def make_interpreter():
    return _make_interpreter
