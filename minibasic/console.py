"""
Interactive console: numbered-line entry plus RUN / LIST / NEW / SAVE / LOAD.

Console lines are recognised with a small lark grammar; the statement body
of a numbered line is handed to the hand-written statement parser.
"""

import logging
import sys

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput

from .errors import BasicRuntimeError, BasicSyntaxError
from .interpreter import DEFAULT_MAX_STEPS, Interpreter
from .parser import parse_line
from .program import Program

log = logging.getLogger(__name__)

BANNER = """\
MINI BASIC
Commands: RUN, LIST, NEW, SAVE, LOAD, HELP, BYE
Enter line-numbered statements, e.g. `10 PRINT "HELLO"`"""

HELP = """\
  <n> <stmt>        store or replace program line n
  <n>               delete line n
  LIST [a][-b]      show the program, or part of it
  RUN               run the program from its lowest line
  NEW               erase the program and all variables
  SAVE "file"       write the program to a file
  LOAD "file"       replace the program with one read from a file
  BYE               leave the console
Statements:
  REM ...           comment
  [LET] V = expr    assignment (V$ holds text)
  PRINT e1, e2      print values separated by spaces
  INPUT V           read a number, or a line of text into V$
  IF c THEN n       jump to line n when c is non-zero
  IF c THEN stmt    run one statement when c is non-zero
  GOTO n            jump to line n
  END               stop the program"""

PROMPT = '] '

COMMAND_GRAMMAR = r"""
    ?start: numbered_line
          | run
          | list_cmd
          | new
          | save
          | load
          | help
          | bye

    numbered_line: LINENUM BODY?

    run: "RUN"i
    list_cmd: "LIST"i [line_range]
    new: "NEW"i
    save: "SAVE"i FILENAME
    load: "LOAD"i FILENAME
    help: "HELP"i
    bye: "BYE"i | "EXIT"i | "QUIT"i

    line_range: NUMBER                  -> single
              | [NUMBER] "-" [NUMBER]   -> span

    // a program line number must be followed by whitespace or nothing
    LINENUM: /\d+(?=\s|$)/
    NUMBER: /\d+/
    BODY: /\S.*/
    // quoted path, taken verbatim (no escape sequences)
    FILENAME: /"[^"\n]*"/

    %import common.WS_INLINE
    %ignore WS_INLINE
"""


@v_args(inline=True)
class CommandTransformer(Transformer):
    def numbered_line(self, num, body=None):
        return ('LINE', int(num), str(body).strip() if body is not None else '')

    def run(self):
        return ('RUN',)

    def list_cmd(self, line_range=None):
        return ('LIST', line_range or (None, None))

    def single(self, num):
        return (int(num), int(num))

    def span(self, first=None, last=None):
        return (int(first) if first is not None else None,
                int(last) if last is not None else None)

    def new(self):
        return ('NEW',)

    def save(self, filename):
        return ('SAVE', filename[1:-1])

    def load(self, filename):
        return ('LOAD', filename[1:-1])

    def help(self):
        return ('HELP',)

    def bye(self):
        return ('BYE',)


command_parser = Lark(COMMAND_GRAMMAR, parser='lalr', lexer='contextual')


def _lex_window(text, pos, width=80):
    a = max(0, pos - width // 2)
    b = min(len(text), pos + width // 2)
    caret = ' ' * (pos - a) + '^'
    return text[a:b] + "\n" + caret


def parse_command(text):
    """Turn one console line into a command tuple such as ``('RUN',)``."""
    try:
        tree = command_parser.parse(text)
    except UnexpectedInput as e:
        pos = getattr(e, 'pos_in_stream', None)
        if pos is None or pos < 0:
            pos = len(text)
        raise BasicSyntaxError("Unknown command\n" + _lex_window(text, pos)) from None
    command = CommandTransformer().transform(tree)
    if command[0] == 'LINE' and command[1] <= 0:
        raise BasicSyntaxError(f"line numbers must be positive, got {command[1]}")
    return command


def enter_line(program, number, body):
    """Store, replace or (with an empty body) delete one program line.

    Returns the syntax errors; on errors the program is left untouched.
    """
    if not body:
        program.delete(number)
        return []
    stmt, errors = parse_line(body)
    if errors:
        return errors
    program.set(number, body, stmt)
    return []


def load_program(text, program=None):
    """Read program-file text (one ``N statement`` per line) into a Program.

    Lines with errors are skipped; returns ``(program, messages)``.
    """
    if program is None:
        program = Program()
    messages = []
    for raw in text.splitlines():
        raw = raw.strip()
        if not raw:
            continue
        try:
            command = parse_command(raw)
        except BasicSyntaxError:
            command = None
        if command is None or command[0] != 'LINE':
            messages.append(f"Not a numbered program line: {raw}")
            continue
        _, number, body = command
        errors = enter_line(program, number, body)
        if errors:
            messages.append(f"Syntax error at line {number}: {'; '.join(errors)}")
    return program, messages


# ----------------------------------------------------------------------
#  Session
# ----------------------------------------------------------------------
class Session:
    """One console user: one Program, one Interpreter, shared I/O streams."""

    def __init__(self, stdin=None, stdout=None, max_steps=DEFAULT_MAX_STEPS):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.program = Program()
        self.interpreter = Interpreter(self.program, self.stdin, self.stdout,
                                       max_steps=max_steps)

    def write(self, text=''):
        self.stdout.write(text + '\n')

    def execute(self, text):
        """Handle one console line; returns False once the user says BYE."""
        text = text.strip()
        if not text:
            return True
        try:
            command = parse_command(text)
        except BasicSyntaxError as e:
            self.write(str(e))
            return True

        kind = command[0]
        log.debug("console command %s", kind)
        if kind == 'LINE':
            _, number, body = command
            errors = enter_line(self.program, number, body)
            if errors:
                self.write(f"Syntax error at line {number}: {'; '.join(errors)}")
        elif kind == 'RUN':
            self.run()
        elif kind == 'LIST':
            self.list_lines(*command[1])
        elif kind == 'NEW':
            self.program.clear()
            self.interpreter.reset_environment()
        elif kind == 'SAVE':
            self.save(command[1])
        elif kind == 'LOAD':
            self.load(command[1])
        elif kind == 'HELP':
            self.write(HELP)
        elif kind == 'BYE':
            return False
        return True

    def run(self):
        """RUN the program with fresh variables; returns False on a runtime error."""
        self.interpreter.reset_environment()
        try:
            self.interpreter.run()
        except BasicRuntimeError as e:
            self.write(str(e))
            return False
        return True

    def list_lines(self, start=None, end=None):
        for num, src in self.program:
            if (start is None or num >= start) and (end is None or num <= end):
                self.write(f"{num} {src}")

    def save(self, path):
        try:
            with open(path, 'w') as f:
                for num, src in self.program:
                    f.write(f"{num} {src}\n")
        except OSError as e:
            self.write(f"I/O error: {e}")
            return False
        self.write(f"Program saved to {path}")
        return True

    def load(self, path, announce=True):
        """Replace the program with the file at ``path``; False if anything failed."""
        try:
            with open(path) as f:
                text = f.read()
        except OSError as e:
            self.write(f"I/O error: {e}")
            return False
        self.program.clear()
        _, messages = load_program(text, self.program)
        for msg in messages:
            self.write(msg)
        if announce:
            self.write(f"Program loaded from {path}")
        return not messages

    def repl(self):
        self.write(BANNER)
        while True:
            self.stdout.write(PROMPT)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                self.write()
                break
            if not self.execute(line):
                break
        self.write("Bye.")
