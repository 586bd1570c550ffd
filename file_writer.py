"""Template for writing (or appending to) a text file."""

from typing import Any, Callable, Optional, TextIO

import messages
from config import config
from error_handling import DiagnosticSink, KitError, get_diagnostic_sink
from logging_config import get_logger

logger = get_logger()

FILE_OPEN_ERRORS = (FileNotFoundError, IsADirectoryError, NotADirectoryError, PermissionError)


class FileWriterTemplate:
    """Hands a buffered text writer to a body and closes it afterwards."""

    def __init__(
        self,
        file: Any,
        encoding: Optional[str] = None,
        append: bool = False,
        sink: Optional[DiagnosticSink] = None,
    ):
        self._file = str(file)
        self._encoding = encoding or config.default_encoding
        self._append = append
        self._sink = sink

    @property
    def file(self) -> str:
        return self._file

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def append(self) -> bool:
        return self._append

    def _report(self, message: str, error: BaseException) -> Optional[KitError]:
        sink = self._sink or get_diagnostic_sink()
        return sink.report(message, error, context=f"file_writer:{self._file}")

    def start(self, body: Callable[[TextIO], Any]) -> Optional[KitError]:
        """
        Open the file, call ``body(writer)``, then flush and close.

        The encoding is checked before the file is touched, so an unknown
        encoding never truncates an existing file. Newlines are written
        exactly as the body writes them; characters the encoding cannot
        represent are written as "?".
        """
        mode = "a" if self._append else "w"
        try:
            # Rejects unknown names and non-text codecs such as base64
            "".encode(self._encoding)
            writer = open(
                self._file, mode, encoding=self._encoding, errors="replace", newline=""
            )
        except LookupError as e:
            return self._report(messages.WRITER_ENCODING_MISSING, e)
        except FILE_OPEN_ERRORS as e:
            return self._report(messages.WRITER_FILE_MISSING, e)
        except OSError as e:
            return self._report(messages.WRITER_IO_FAILURE, e)

        logger.debug(f"Writing {self._file} ({self._encoding}, mode {mode!r})")
        try:
            with writer:
                body(writer)
        except OSError as e:
            return self._report(messages.WRITER_IO_FAILURE, e)
        return None
