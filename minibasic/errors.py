"""Exceptions raised by the BASIC front-end and runtime."""


class BasicError(Exception):
    pass


class BasicSyntaxError(BasicError):
    """A statement or console line could not be parsed."""


# -----------------------------
# Run-time errors
# -----------------------------
class BasicRuntimeError(BasicError):
    """Aborts the current RUN. ``line`` is filled in by the interpreter."""

    def __init__(self, message, line=None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self):
        if self.line is None:
            return f"runtime error: {self.message}"
        return f"runtime error at line {self.line}: {self.message}"


class TypeMismatch(BasicRuntimeError):
    pass


class DivisionByZero(BasicRuntimeError):
    def __init__(self, line=None):
        super().__init__("division by zero", line)


class UndefinedLine(BasicRuntimeError):
    def __init__(self, target, line=None):
        super().__init__(f"undefined line {target}", line)
        self.target = target


class InputFormatError(BasicRuntimeError):
    pass


class InputExhausted(BasicRuntimeError):
    def __init__(self, line=None):
        super().__init__("INPUT reached end of input", line)


class StepLimitExceeded(BasicRuntimeError):
    def __init__(self, limit, line=None):
        super().__init__(
            f"operation limit of {limit} steps exceeded (possible infinite loop)", line)
        self.limit = limit
