"""
Test suite for the line-indexed interpreter
"""

import io

import pytest

from minibasic.errors import (
    BasicRuntimeError, DivisionByZero, InputExhausted, InputFormatError,
    StepLimitExceeded, TypeMismatch, UndefinedLine,
)
from minibasic.interpreter import Interpreter, eval_binary, format_value
from minibasic.program import Program


class TestScenarios:
    """End-to-end programs"""

    def test_assignment_then_print(self, run_program):
        assert run_program('10 LET X = 5', '20 PRINT X + 1') == "6\n"

    def test_false_conditional_falls_through(self, run_program):
        assert run_program('10 IF 1 <> 1 THEN 40', '20 PRINT "A"', '30 END') == "A\n"

    def test_counting_loop(self, run_program):
        out = run_program(
            '10 LET X = 1',
            '20 PRINT X',
            '30 LET X = X + 1',
            '40 IF X <= 3 THEN 20',
        )
        assert out == "1\n2\n3\n"

    def test_division_by_zero(self, make_program, make_interpreter):
        it, out = make_interpreter(make_program('10 PRINT 1 / 0'))
        with pytest.raises(DivisionByZero) as exc:
            it.run()
        assert exc.value.line == 10
        assert str(exc.value) == "runtime error at line 10: division by zero"
        assert out.getvalue() == ""

    def test_deleted_line_is_skipped(self, make_program, make_interpreter):
        program = make_program('10 PRINT "A"', '20 PRINT "B"', '30 PRINT "C"')
        program.delete(20)
        assert [n for n, _ in program] == [10, 30]
        it, out = make_interpreter(program)
        it.run()
        assert out.getvalue() == "A\nC\n"

    def test_empty_program(self, make_interpreter):
        it, out = make_interpreter(Program())
        it.run()
        assert out.getvalue() == ""

    def test_insertion_order_does_not_matter(self, make_program, run_program):
        assert run_program('30 PRINT 3', '10 PRINT 1', '20 PRINT 2') == "1\n2\n3\n"

    def test_sparse_line_numbers(self, run_program):
        out = run_program('5 GOTO 1000', '10 PRINT "skipped"', '1000 PRINT "there"')
        assert out == "there\n"


class TestControlFlow:
    def test_goto_forward(self, run_program):
        assert run_program('10 GOTO 30', '20 PRINT 2', '30 PRINT 3') == "3\n"

    def test_end_stops(self, run_program):
        assert run_program('10 PRINT 1', '20 END', '30 PRINT 2') == "1\n"

    def test_goto_undefined_line(self, make_program, make_interpreter):
        it, _ = make_interpreter(make_program('10 GOTO 99'))
        with pytest.raises(UndefinedLine) as exc:
            it.run()
        assert exc.value.target == 99
        assert exc.value.line == 10
        assert "undefined line 99" in str(exc.value)

    def test_true_conditional_to_undefined_line(self, make_program, make_interpreter):
        it, _ = make_interpreter(make_program('10 PRINT 1', '20 IF 1 THEN 25'))
        with pytest.raises(UndefinedLine) as exc:
            it.run()
        assert exc.value.line == 20

    def test_false_conditional_never_resolves_target(self, run_program):
        assert run_program('10 IF 0 THEN 999', '20 PRINT "ok"') == "ok\n"

    def test_embedded_print(self, run_program):
        assert run_program('10 IF 2 > 1 THEN PRINT "Y"', '20 PRINT "N"') == "Y\nN\n"

    def test_embedded_goto(self, run_program):
        assert run_program('10 IF 1 THEN GOTO 30', '20 PRINT 2', '30 PRINT 3') == "3\n"

    def test_embedded_end(self, run_program):
        assert run_program('10 IF 1 THEN END', '20 PRINT 2') == ""

    def test_embedded_assignment(self, run_program):
        assert run_program('10 IF 1 = 1 THEN X = 7', '20 PRINT X') == "7\n"

    def test_nested_conditional(self, run_program):
        out = run_program('10 IF 1 THEN IF 0 THEN 30', '20 PRINT "inner false"', '30 END')
        assert out == "inner false\n"

    def test_string_condition_is_rejected(self, make_program, make_interpreter):
        it, _ = make_interpreter(make_program('10 IF "A" THEN 10'))
        with pytest.raises(TypeMismatch, match="IF condition must be numeric"):
            it.run()


class TestStepBudget:
    def test_infinite_loop_is_stopped(self, make_program, make_interpreter):
        it, _ = make_interpreter(make_program('10 GOTO 10'), max_steps=100)
        with pytest.raises(StepLimitExceeded) as exc:
            it.run()
        assert exc.value.line == 10
        assert "possible infinite loop" in str(exc.value)

    def test_budget_counts_every_statement(self, run_program):
        lines = ('10 X = 1', '20 PRINT X', '30 X = X + 1', '40 IF X <= 3 THEN 20')
        assert run_program(*lines, max_steps=10) == "1\n2\n3\n"
        with pytest.raises(StepLimitExceeded):
            run_program(*lines, max_steps=9)

    def test_zero_means_unlimited(self, run_program):
        lines = ('10 X = X + 1', '20 IF X < 500 THEN 10', '30 PRINT X')
        assert run_program(*lines, max_steps=0) == "500\n"


class TestPrint:
    def test_blank_line(self, run_program):
        assert run_program('10 PRINT') == "\n"

    def test_items_are_space_joined(self, run_program):
        assert run_program('10 A$ = "x"', '20 PRINT 1, A$, "b c"') == "1 x b c\n"

    def test_number_formatting(self, run_program):
        assert run_program('10 PRINT 7 / 2, 10 / 4 * 2, 1 / 3, 0.1 + 0.2') == \
            "3.5 5 0.3333333333333333 0.30000000000000004\n"

    def test_no_partial_output(self, make_program, make_interpreter):
        it, out = make_interpreter(make_program('10 PRINT "first", 1 / 0'))
        with pytest.raises(DivisionByZero):
            it.run()
        assert out.getvalue() == ""

    def test_unset_variables(self, run_program):
        assert run_program('10 PRINT X, A$, "|"') == "0  |\n"


class TestExpressions:
    def test_precedence(self, run_program):
        assert run_program('10 PRINT 1 + 2 * 3, 2 - 3 - 4, (1 + 2) * 3') == "7 -5 9\n"

    def test_unary(self, run_program):
        assert run_program('10 X = 4', '20 PRINT -X, +X, -(-X), 2 * -X') == "-4 4 4 -8\n"

    def test_comparisons(self, run_program):
        out = run_program('10 PRINT 1 < 2, 2 <= 1, 3 > 3, 3 >= 3, 1 = 1, 1 <> 1')
        assert out == "1 0 0 1 1 0\n"

    def test_greater_or_equal_is_direct(self, run_program):
        # 1 >= 5 is false even though 1 > -5
        assert run_program('10 PRINT 1 >= 5, 5 >= 1') == "0 1\n"

    def test_string_equality(self, run_program):
        out = run_program('10 A$ = "yes"', '20 PRINT A$ = "yes", A$ <> "yes", A$ = "no"')
        assert out == "1 0 0\n"

    def test_case_insensitive_variables(self, run_program):
        assert run_program('10 let x = 2', '20 print X * x') == "4\n"

    @pytest.mark.parametrize("expr", [
        '"A" + 1', '1 - "A"', '"A" * "B"', '"A" / 2',
        '1 = "1"', '"1" <> 1',
        '"A" < "B"', '1 >= "1"',
        '-"A"', '+"A"',
    ])
    def test_type_mismatch(self, make_program, make_interpreter, expr):
        it, _ = make_interpreter(make_program('10 PRINT ' + expr))
        with pytest.raises(TypeMismatch) as exc:
            it.run()
        assert exc.value.line == 10

    def test_division_by_negative_zero(self):
        with pytest.raises(DivisionByZero):
            eval_binary('/', 1.0, -0.0)

    def test_division_by_small_number_is_fine(self):
        assert eval_binary('/', 1.0, 0.5) == 2.0

    def test_format_value(self):
        assert format_value(2.0) == '2'
        assert format_value('2.0') == '2.0'


class TestAssignment:
    def test_string_into_numeric(self, make_program, make_interpreter):
        it, _ = make_interpreter(make_program('10 X = "A"'))
        with pytest.raises(TypeMismatch, match="X is numeric variable"):
            it.run()

    def test_number_into_string(self, make_program, make_interpreter):
        it, _ = make_interpreter(make_program('10 PRINT 1', '20 A$ = 5'))
        with pytest.raises(TypeMismatch) as exc:
            it.run()
        assert exc.value.line == 20


class TestInput:
    def test_numeric_input(self, run_program):
        out = run_program('10 INPUT N', '20 PRINT N * 2', stdin="42\n")
        assert out == "? 84\n"

    def test_string_input_is_trimmed(self, run_program):
        out = run_program('10 INPUT S$', '20 PRINT S$, "|"', stdin="  hello world \r\n")
        assert out == "? hello world |\n"

    def test_reads_one_line_per_input(self, run_program):
        out = run_program('10 INPUT A', '20 INPUT B', '30 PRINT A + B', stdin="1\n2.5\n")
        assert out == "? ? 3.5\n"

    def test_non_numeric_input(self, make_program, make_interpreter):
        it, _ = make_interpreter(make_program('10 INPUT N'), stdin="abc\n")
        with pytest.raises(InputFormatError) as exc:
            it.run()
        assert exc.value.line == 10

    def test_end_of_input(self, make_program, make_interpreter):
        it, _ = make_interpreter(make_program('10 INPUT N$'), stdin="")
        with pytest.raises(InputExhausted):
            it.run()

    def test_custom_prompt(self, make_program):
        out = io.StringIO()
        it = Interpreter(make_program('10 INPUT N'), io.StringIO("1\n"), out, prompt="N? ")
        it.run()
        assert out.getvalue() == "N? "


class TestRerun:
    def test_rerun_after_reset_is_identical(self, make_program, make_interpreter):
        it, out = make_interpreter(make_program('10 X = X + 1', '20 PRINT X'))
        it.reset_environment()
        it.run()
        first = out.getvalue()
        it.reset_environment()
        it.run()
        assert out.getvalue() == first * 2 == "1\n1\n"

    def test_without_reset_variables_survive(self, make_program, make_interpreter):
        it, out = make_interpreter(make_program('10 X = X + 1', '20 PRINT X'))
        it.run()
        it.run()
        assert out.getvalue() == "1\n2\n"

    def test_error_leaves_state_intact(self, make_program, make_interpreter):
        program = make_program('10 X = 5', '20 PRINT 1 / 0')
        it, _ = make_interpreter(program)
        with pytest.raises(BasicRuntimeError):
            it.run()
        assert it.env.get('X') == 5.0
        assert program.ordered_lines() == [10, 20]
