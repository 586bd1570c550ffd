"""Template for reading a text file line by line."""

from typing import Any, Callable, Optional

import messages
from config import config
from error_handling import DiagnosticSink, KitError, get_diagnostic_sink
from logging_config import get_logger

logger = get_logger()

FILE_OPEN_ERRORS = (FileNotFoundError, IsADirectoryError, NotADirectoryError, PermissionError)


class FileReaderTemplate:
    """
    Streams the lines of a text file to a predicate.

    ``file`` may be anything whose ``str()`` is a path. Reading stops at the
    end of the file or as soon as the predicate returns a falsy value::

        FileReaderTemplate("names.txt", "shift_jis").start(
            lambda line: print(line) or True
        )
    """

    def __init__(self, file: Any, encoding: Optional[str] = None, sink: Optional[DiagnosticSink] = None):
        self._file = str(file)
        self._encoding = encoding or config.default_encoding
        self._sink = sink

    @property
    def file(self) -> str:
        return self._file

    @property
    def encoding(self) -> str:
        return self._encoding

    def _report(self, message: str, error: BaseException) -> Optional[KitError]:
        sink = self._sink or get_diagnostic_sink()
        return sink.report(message, error, context=f"file_reader:{self._file}")

    def start(self, predicate: Callable[[str], bool]) -> Optional[KitError]:
        """
        Feed each line, without its terminator, to ``predicate``.

        Returns None when the file was read (fully or up to the predicate's
        stop) and the structured error when it could not be. Exceptions
        raised by the predicate propagate after the file is closed. Malformed
        bytes are decoded as U+FFFD.
        """
        try:
            # Rejects unknown names and non-text codecs such as base64
            "".encode(self._encoding)
            reader = open(self._file, "r", encoding=self._encoding, errors="replace")
        except LookupError as e:
            return self._report(messages.READER_ENCODING_MISSING, e)
        except FILE_OPEN_ERRORS as e:
            return self._report(messages.READER_FILE_MISSING, e)
        except OSError as e:
            return self._report(messages.READER_IO_FAILURE, e)

        logger.debug(f"Reading {self._file} ({self._encoding})")
        count = 0
        with reader:
            lines = iter(reader)
            while True:
                try:
                    line = next(lines)
                except StopIteration:
                    break
                except OSError as e:
                    return self._report(messages.READER_IO_FAILURE, e)
                count += 1
                if line.endswith("\n"):
                    line = line[:-1]
                if not predicate(line):
                    break
        logger.debug(f"Delivered {count} line(s) from {self._file}")
        return None
