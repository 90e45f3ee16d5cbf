"""Variable storage for a BASIC run."""

from typing import Dict, Union

from .errors import TypeMismatch
from .lexer import STRING_SUFFIX

Value = Union[float, str]


def is_string_name(name: str) -> bool:
    return name.endswith(STRING_SUFFIX)


def normalize(name: str) -> str:
    return name.upper()


class Environment:
    """Numeric and string variables, keyed by upper-cased name.

    The kind of a variable follows from its name: ``A$`` holds text, ``A``
    holds a number.  Unset variables read as ``0`` or ``""``.
    """

    def __init__(self):
        self.numbers: Dict[str, float] = {}
        self.strings: Dict[str, str] = {}

    def get(self, name: str) -> Value:
        name = normalize(name)
        if is_string_name(name):
            return self.strings.get(name, '')
        return self.numbers.get(name, 0.0)

    def set(self, name: str, value: Value):
        name = normalize(name)
        if is_string_name(name):
            if not isinstance(value, str):
                raise TypeMismatch(f"type mismatch: {name} is string variable")
            self.strings[name] = value
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeMismatch(f"type mismatch: {name} is numeric variable")
            self.numbers[name] = float(value)

    def __contains__(self, name):
        name = normalize(name)
        return name in self.strings or name in self.numbers

    def __len__(self):
        return len(self.numbers) + len(self.strings)
