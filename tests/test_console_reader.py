#!/usr/bin/env python3
"""Tests for the interactive console reader."""

import io
from unittest.mock import patch

import pytest

import console_reader
import messages
from console_reader import ConsoleReader, in_range, parse_int
from error_handling import DiagnosticSink, ErrorHandler, InputError


def make_reader(text, **kwargs):
    """Build a reader fed from ``text`` with captured stdout."""
    stdout = io.StringIO()
    kwargs.setdefault("debug", False)
    reader = ConsoleReader(stdin=io.StringIO(text), stdout=stdout, **kwargs)
    return reader, stdout


class TestParsing:
    """Test integer parsing and range helpers."""

    @pytest.mark.parametrize("text,expected", [
        ("7", 7), ("-12", -12), ("+3", 3), ("007", 7),
        ("2147483647", 2147483647), ("-2147483648", -2147483648),
    ])
    def test_parse_int_accepts(self, text, expected):
        assert parse_int(text) == expected

    @pytest.mark.parametrize("text", [
        "", "abc", " 7", "7 ", "1_000", "3.5", "2147483648", "-2147483649", "--1", "+",
    ])
    def test_parse_int_rejects(self, text):
        assert parse_int(text) is None

    def test_in_range_bounds(self):
        assert in_range(5)
        assert in_range(1, 1, 10)
        assert in_range(10, 1, 10)
        assert not in_range(0, 1, 10)
        assert not in_range(11, 1, 10)
        assert in_range(100, min_value=1)
        assert not in_range(-1, min_value=0)


class TestLifecycle:
    """Test construction, configuration and close handling."""

    def test_debug_notices(self):
        reader, stdout = make_reader("", debug=True)
        assert stdout.getvalue() == messages.CONSOLE_OPENED + "\n"
        reader.close()
        assert stdout.getvalue().endswith(messages.CONSOLE_CLOSED + "\n")

    def test_no_notices_without_debug(self):
        reader, stdout = make_reader("")
        reader.close()
        assert stdout.getvalue() == ""

    def test_close_is_idempotent(self):
        reader, stdout = make_reader("", debug=True)
        reader.close()
        reader.close()
        assert stdout.getvalue().count(messages.CONSOLE_CLOSED) == 1
        assert reader.closed

    def test_context_manager_closes(self):
        stdout = io.StringIO()
        with ConsoleReader(debug=True, stdin=io.StringIO("x\n"), stdout=stdout) as reader:
            assert reader.read_line() == "x"
        assert reader.closed
        assert messages.CONSOLE_CLOSED in stdout.getvalue()

    def test_read_after_close_raises(self):
        reader, _ = make_reader("x\n")
        reader.close()
        with pytest.raises(ValueError):
            reader.read_line()

    def test_empty_quit_word_becomes_default(self):
        reader, _ = make_reader("", quit_word="")
        assert reader.quit_word == "q"

    def test_initial_scratch_values(self):
        reader, _ = make_reader("")
        assert reader.last_string == ""
        assert reader.last_int == 0
        assert str(reader) == ""
        assert int(reader) == 0


class TestStringInput:
    """Test the string prompts."""

    def test_read_line_prompt_and_terminator(self):
        reader, stdout = make_reader("hello\r\n")
        assert reader.read_line() == "hello"
        assert stdout.getvalue() == "-> "

    def test_read_line_with_message(self):
        reader, stdout = make_reader("\n")
        assert reader.read_line("名前: ") == ""
        assert stdout.getvalue() == "名前: -> "

    def test_read_string_skips_empty_lines(self):
        reader, stdout = make_reader("\n\nhello\n")
        assert reader.read_string() == "hello"
        assert reader.last_string == "hello"
        assert stdout.getvalue() == "-> -> -> "

    def test_read_string_reprints_message(self):
        reader, stdout = make_reader("\nabc\n")
        assert reader.read_string("名前") == "abc"
        assert stdout.getvalue() == "名前\n-> 名前\n-> "

    def test_read_string_or_quit_basic_quit_ignores_case(self):
        reader, _ = make_reader("first\nQ\n")
        assert reader.read_string_or_quit_basic() is False
        assert reader.last_string == "first"
        assert reader.read_string_or_quit_basic() is True
        assert reader.last_string == "first"

    def test_read_string_or_quit_basic_accepts_empty(self):
        reader, _ = make_reader("\n")
        assert reader.read_string_or_quit_basic() is False
        assert reader.last_string == ""

    def test_read_string_or_quit_basic_hint(self):
        reader, stdout = make_reader("word\n", quit_word="end")
        reader.read_string_or_quit_basic("入力してください")
        assert stdout.getvalue() == "入力してください\nendで終了します。\n-> "

    def test_read_string_or_quit_scenario(self):
        reader, _ = make_reader("Q\n", quit_word="q")
        assert reader.read_string_or_quit() is True
        assert reader.last_string == ""

    def test_read_string_or_quit_multichar_word(self):
        reader, _ = make_reader("EXIT\n", quit_word="exit")
        assert reader.read_string_or_quit("msg") is True

    def test_read_string_or_quit_skips_empty(self):
        reader, stdout = make_reader("\n\nvalue\n")
        assert reader.read_string_or_quit("msg") is False
        assert reader.last_string == "value"
        assert stdout.getvalue().count("msg\nqで終了します。\n-> ") == 3


class TestIntInput:
    """Test the integer prompts."""

    def test_read_int_bounded_scenario(self):
        reader, stdout = make_reader("abc\n0\n11\n7\n")
        assert reader.read_int("数値", 1, 10) == 7
        assert reader.last_int == 7
        output = stdout.getvalue()
        assert output.count(messages.NOT_A_NUMBER) == 1
        assert output.count(messages.OUT_OF_RANGE) == 2
        assert output.index(messages.NOT_A_NUMBER) < output.index(messages.OUT_OF_RANGE)

    def test_read_int_without_message(self):
        reader, stdout = make_reader("x\n-5\n")
        assert reader.read_int() == -5
        assert stdout.getvalue() == "-> " + messages.NOT_A_NUMBER + "\n-> "

    def test_read_int_message_prefix(self):
        reader, stdout = make_reader("3\n")
        reader.read_int("数値")
        assert stdout.getvalue() == "数値\n-> "

    def test_last_int_tracks_out_of_range_parse(self):
        reader, _ = make_reader("42\n5\n")
        assert reader.read_int(None, 1, 10) == 5
        assert reader.last_int == 5

    def test_read_int_or_quit_value(self):
        reader, stdout = make_reader("12\n")
        assert reader.read_int_or_quit("数値") is False
        assert reader.last_int == 12
        assert stdout.getvalue() == "数値\nqで終了します。\n-> "

    def test_read_int_or_quit_quit_is_case_sensitive(self):
        reader, stdout = make_reader("Q\nq\n")
        assert reader.read_int_or_quit() is True
        assert messages.NOT_A_NUMBER in stdout.getvalue()
        assert reader.last_int == 0

    def test_read_int_or_quit_bounds(self):
        reader, stdout = make_reader("0\nabc\n4\n")
        assert reader.read_int_or_quit("n", 1, 5) is False
        assert reader.last_int == 4
        output = stdout.getvalue()
        assert output.count(messages.OUT_OF_RANGE) == 1
        assert output.count(messages.NOT_A_NUMBER) == 1


class TestYesOrNo:
    """Test the yes/no prompt."""

    def test_reprompts_until_answer(self):
        reader, stdout = make_reader("ok\nYes\n")
        assert reader.yes_or_no("続けますか") is True
        assert stdout.getvalue() == "続けますか\n[Y/n]-> 続けますか\n[Y/n]-> "

    def test_any_y_in_answer_counts_as_yes(self):
        # "maybe" contains a y, so it is accepted without a re-prompt
        reader, stdout = make_reader("maybe\nno\n")
        assert reader.yes_or_no("続けますか") is True
        assert stdout.getvalue() == "続けますか\n[Y/n]-> "

    @pytest.mark.parametrize("answer", ["y", "Y", "yes", "nay", "NY"])
    def test_yes_wins(self, answer):
        reader, _ = make_reader(answer + "\n")
        assert reader.yes_or_no("?") is True

    @pytest.mark.parametrize("answer", ["n", "N", "no", "nope"])
    def test_no(self, answer):
        reader, _ = make_reader(answer + "\n")
        assert reader.yes_or_no("?") is False


class TestReadFailures:
    """Test behavior when standard input cannot be read."""

    def test_eof_returns_empty_string_with_diagnostic(self):
        stream = io.StringIO()
        sink = DiagnosticSink(stream=stream, handler=ErrorHandler())
        reader, _ = make_reader("", sink=sink)
        assert reader.read_line() == ""
        output = stream.getvalue()
        for line in messages.READ_FAILURE:
            assert line in output
        assert "EOFError" in output

    def test_consecutive_failures_raise_input_error(self):
        stream = io.StringIO()
        sink = DiagnosticSink(stream=stream, handler=ErrorHandler())
        reader, _ = make_reader("", sink=sink, max_read_failures=3)
        with pytest.raises(InputError):
            reader.read_string()
        assert stream.getvalue().count(messages.READ_FAILURE[0]) == 3

    @pytest.mark.parametrize("limit", [0, -1])
    def test_invalid_failure_limit_uses_config(self, limit):
        sink = DiagnosticSink(stream=io.StringIO(), handler=ErrorHandler())
        with patch.object(console_reader.config, "max_read_failures", 2):
            reader = ConsoleReader(
                debug=False, stdin=io.StringIO(""), stdout=io.StringIO(),
                sink=sink, max_read_failures=limit,
            )
        assert reader.read_line() == ""
        with pytest.raises(InputError):
            reader.read_line()

    def test_successful_read_resets_failure_count(self):
        class FlakyInput:
            def __init__(self, results):
                self.results = list(results)

            def readline(self):
                result = self.results.pop(0)
                if isinstance(result, Exception):
                    raise result
                return result

        sink = DiagnosticSink(stream=io.StringIO(), handler=ErrorHandler())
        stdin = FlakyInput([OSError("boom"), "\n", OSError("boom"), "ok\n"])
        reader = ConsoleReader(
            debug=False, stdin=stdin, stdout=io.StringIO(), sink=sink, max_read_failures=2
        )
        assert reader.read_string() == "ok"
