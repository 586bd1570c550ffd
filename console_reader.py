"""
Interactive console reader.

Blocking, line-oriented prompts for strings, integers and yes/no answers.
The ``*_or_quit`` variants return True when the configured quit word is
entered and keep the accepted value in ``last_string`` / ``last_int``
otherwise, so a loop reads naturally::

    with ConsoleReader() as cr:
        while not cr.read_int_or_quit("数値を入力してください", 1, 10):
            total += cr.last_int
"""

import re
import sys
from typing import Optional, TextIO

import messages
from config import config
from error_handling import (
    DiagnosticSink,
    ErrorCategory,
    ErrorInfo,
    ErrorSeverity,
    InputError,
    get_diagnostic_sink,
)
from logging_config import get_logger

logger = get_logger()

LINE_SEPARATOR = "\n"
INT_PATTERN = re.compile(r"[+-]?[0-9]+")
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1
YES_PATTERN = re.compile(r"[Yy]")
NO_PATTERN = re.compile(r"[Nn]")


def parse_int(text: str) -> Optional[int]:
    """Parse a signed decimal 32-bit integer, or return None."""
    if not INT_PATTERN.fullmatch(text):
        return None
    value = int(text)
    if value < INT_MIN or value > INT_MAX:
        return None
    return value


def in_range(value: int, min_value: Optional[int] = None, max_value: Optional[int] = None) -> bool:
    """Inclusive bounds check; a missing bound is unbounded."""
    if min_value is not None and value < min_value:
        return False
    if max_value is not None and value > max_value:
        return False
    return True


class ConsoleReader:
    """Console input helper that owns its stdin binding until closed."""

    def __init__(
        self,
        quit_word: Optional[str] = None,
        debug: Optional[bool] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        sink: Optional[DiagnosticSink] = None,
        max_read_failures: Optional[int] = None,
    ):
        if quit_word is None:
            quit_word = config.quit_word
        if not quit_word:
            quit_word = "q"
        self._quit_word = quit_word
        self._debug = config.console_debug if debug is None else debug
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._sink = sink
        if max_read_failures is None or max_read_failures < 1:
            max_read_failures = config.max_read_failures
        self._max_read_failures = max_read_failures
        self._read_failures = 0
        self._closed = False

        self._last_string = ""
        self._last_int = 0

        if self._debug:
            self._println(messages.CONSOLE_OPENED)
        logger.debug(f"Console reader opened (quit word {self._quit_word!r})")

    def __enter__(self) -> "ConsoleReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __str__(self) -> str:
        return self._last_string

    def __int__(self) -> int:
        return self._last_int

    @property
    def quit_word(self) -> str:
        return self._quit_word

    @property
    def debug(self) -> bool:
        return self._debug

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def last_string(self) -> str:
        """Most recently accepted string; never the quit word."""
        return self._last_string

    @property
    def last_int(self) -> int:
        """Most recently parsed integer."""
        return self._last_int

    def close(self) -> None:
        """Release the input binding. Closing twice is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._stdin = None
        if self._debug:
            self._println(messages.CONSOLE_CLOSED)
        logger.debug("Console reader closed")

    def _write(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()

    def _println(self, text: str = "") -> None:
        self._write(text + LINE_SEPARATOR)

    def _quit_hint(self) -> str:
        return messages.quit_hint(self._quit_word)

    def _readline(self) -> str:
        if self._closed:
            raise ValueError("I/O operation on closed console reader")
        line = self._stdin.readline()
        if line == "":
            raise EOFError("end of console input")
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        return line

    def read_line(self, message: Optional[str] = None) -> str:
        """
        Print the prompt and return the next line as entered.

        Empty lines are returned as is. When the read itself fails the
        diagnostic goes to the sink and "" is returned; after
        ``max_read_failures`` consecutive failures InputError is raised.
        """
        if message is not None:
            self._write(message)
        self._write(messages.RAW_PROMPT)
        try:
            line = self._readline()
        except (OSError, EOFError) as e:
            self._read_failures += 1
            sink = self._sink or get_diagnostic_sink()
            sink.report(messages.READ_FAILURE, e, context="console_reader.read_line")
            if self._read_failures >= self._max_read_failures:
                raise InputError(
                    ErrorInfo(
                        category=ErrorCategory.INPUT,
                        severity=ErrorSeverity.FATAL,
                        message=f"Console input failed {self._read_failures} times in a row",
                        details={'last_error': str(e)},
                        recoverable=False,
                    ),
                    e,
                ) from e
            return ""
        self._read_failures = 0
        return line

    def read_string(self, message: Optional[str] = None) -> str:
        """Read until a non-empty line is entered and remember it."""
        prefix = None if message is None else message + LINE_SEPARATOR
        line = self.read_line(prefix)
        while line == "":
            line = self.read_line(prefix)
        self._last_string = line
        return line

    def _accept_or_quit(self, line: str) -> bool:
        if line.lower() == self._quit_word.lower():
            return True
        self._last_string = line
        return False

    def read_string_or_quit_basic(self, message: Optional[str] = None) -> bool:
        """
        Read one line; True if it is the quit word (ignoring case).

        Any other line, the empty line included, is stored in last_string.
        """
        if message is not None:
            self._println(message + LINE_SEPARATOR + self._quit_hint())
        return self._accept_or_quit(self.read_line())

    def read_string_or_quit(self, message: str = "") -> bool:
        """Like read_string_or_quit_basic, but empty lines re-prompt."""
        while True:
            self._println(message + LINE_SEPARATOR + self._quit_hint())
            line = self.read_line()
            if line != "":
                return self._accept_or_quit(line)

    def read_int(
        self,
        message: Optional[str] = None,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
    ) -> int:
        """Read until an integer within the optional bounds is entered."""
        prefix = None if message is None else message + LINE_SEPARATOR
        while True:
            value = parse_int(self.read_line(prefix))
            if value is None:
                self._println(messages.NOT_A_NUMBER)
                continue
            self._last_int = value
            if in_range(value, min_value, max_value):
                return value
            self._println(messages.OUT_OF_RANGE)

    def read_int_or_quit(
        self,
        message: str = "",
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
    ) -> bool:
        """
        Read an integer into last_int; True if the quit word is entered.

        Unlike the string variants the quit word must match exactly.
        """
        prefix = (
            message + LINE_SEPARATOR + self._quit_hint() + LINE_SEPARATOR
        )
        while True:
            line = self.read_line(prefix)
            if line == self._quit_word:
                return True
            value = parse_int(line)
            if value is None:
                self._println(messages.NOT_A_NUMBER)
                continue
            self._last_int = value
            if in_range(value, min_value, max_value):
                return False
            self._println(messages.OUT_OF_RANGE)

    def yes_or_no(self, message: str) -> bool:
        """True for an answer containing Y/y, False for one containing N/n."""
        prefix = message + LINE_SEPARATOR + messages.YES_NO_HINT
        while True:
            line = self.read_line(prefix)
            if YES_PATTERN.search(line):
                return True
            if NO_PATTERN.search(line):
                return False
