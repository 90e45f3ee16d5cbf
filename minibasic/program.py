"""The numbered program: line number -> (source text, parsed statement)."""

from typing import Dict, Iterator, List, Tuple

from .nodes import Statement


class Program:
    """Store the numbered program lines.

    Iteration and ``ordered_lines()`` are always in ascending line order,
    whatever order the lines were entered in.
    """

    def __init__(self):
        self.lines: Dict[int, Tuple[str, Statement]] = {}

    def set(self, number: int, source: str, statement: Statement):
        if isinstance(number, bool) or not isinstance(number, int) or number <= 0:
            raise ValueError(f"line number must be a positive integer, got {number!r}")
        self.lines[number] = (source, statement)

    def delete(self, number: int):
        self.lines.pop(number, None)

    def clear(self):
        self.lines.clear()

    def ordered_lines(self) -> List[int]:
        return sorted(self.lines)

    def source(self, number: int) -> str:
        return self.lines[number][0]

    def statement(self, number: int) -> Statement:
        return self.lines[number][1]

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        for num in self.ordered_lines():
            yield num, self.lines[num][0]

    def __len__(self):
        return len(self.lines)

    def __contains__(self, number):
        return number in self.lines
