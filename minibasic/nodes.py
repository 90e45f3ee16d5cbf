"""
AST for one BASIC statement.

Every node is a frozen dataclass; ``str(node)`` renders it back to source
text that parses to an equal node.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple, Union


def format_number(value: float) -> str:
    """Shortest round-trip text of ``value``; integral values lose the ``.0``."""
    text = repr(float(value))
    if text.endswith('.0'):
        text = text[:-2]
    return text


def format_literal(value: float) -> str:
    """Like format_number but never in exponent form, so the lexer can read it back."""
    text = format(Decimal(repr(float(value))), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


# =========================
# Expressions
# =========================
@dataclass(frozen=True)
class NumberLiteral:
    value: float

    def __str__(self):
        return format_literal(self.value)


@dataclass(frozen=True)
class StringLiteral:
    value: str

    def __str__(self):
        return f'"{self.value}"'


@dataclass(frozen=True)
class VariableReference:
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class UnaryExpression:
    op: str
    operand: 'Expression'

    def __str__(self):
        return f"({self.op}{self.operand})"


@dataclass(frozen=True)
class BinaryExpression:
    op: str
    left: 'Expression'
    right: 'Expression'

    def __str__(self):
        return f"({self.left} {self.op} {self.right})"


Expression = Union[NumberLiteral, StringLiteral, VariableReference,
                   UnaryExpression, BinaryExpression]


# =========================
# Statements
# =========================
@dataclass(frozen=True)
class Comment:
    def __str__(self):
        return "REM"


@dataclass(frozen=True)
class Assignment:
    name: str
    value: Expression

    def __str__(self):
        return f"LET {self.name} = {self.value}"


@dataclass(frozen=True)
class Print:
    items: Tuple[Expression, ...] = ()

    def __str__(self):
        if not self.items:
            return "PRINT"
        return "PRINT " + ", ".join(str(e) for e in self.items)


@dataclass(frozen=True)
class Input:
    name: str

    def __str__(self):
        return f"INPUT {self.name}"


@dataclass(frozen=True)
class Conditional:
    """``IF cond THEN <line>`` or ``IF cond THEN <statement>``; never both."""
    condition: Expression
    body: Optional['Statement'] = None
    target: Optional[int] = None

    def __post_init__(self):
        if (self.body is None) == (self.target is None):
            raise ValueError("Conditional needs exactly one of body or target")

    @property
    def is_jump(self):
        return self.target is not None

    def __str__(self):
        if self.is_jump:
            return f"IF {self.condition} THEN {self.target}"
        return f"IF {self.condition} THEN {self.body}"


@dataclass(frozen=True)
class Jump:
    target: int

    def __str__(self):
        return f"GOTO {self.target}"


@dataclass(frozen=True)
class End:
    def __str__(self):
        return "END"


Statement = Union[Comment, Assignment, Print, Input, Conditional, Jump, End]
