"""A line-numbered BASIC interpreter: lexer, parser, tree-walking runtime and console."""

from .console import Session, load_program, parse_command
from .environment import Environment
from .errors import (
    BasicError, BasicRuntimeError, BasicSyntaxError, DivisionByZero,
    InputExhausted, InputFormatError, StepLimitExceeded, TypeMismatch,
    UndefinedLine,
)
from .interpreter import DEFAULT_MAX_STEPS, Interpreter, format_value
from .lexer import Lexer, tokenize
from .parser import Parser, parse_line
from .program import Program

__version__ = '0.1.0'
