import io
import logging
import re
from dataclasses import dataclass
from typing import IO, Iterator, List, Optional, Union

from swiftmt.exceptions import TokenizerError

logger = logging.getLogger(__name__)

PAGE_SEPARATOR_TAG = "-"
PREAMBLE_TAG = ""

_TAG_LINE_RE = re.compile(r"^:([0-9A-Za-z]{1,3}[A-Z]?):(.*)$")


@dataclass(frozen=True)
class RawField:
    """
    One physical field occurrence in the source text.

    Attributes:
        tag (str): Field tag without colons, ``-`` for the page terminator,
            empty for untagged preamble lines.
        content (str): Everything after the tag, continuation lines joined by newlines.
        start_line (int): 1-based line number of the field's first line.
    """

    tag: str
    content: str
    start_line: int

    def to_swift_text(self) -> str:
        if self.tag == PAGE_SEPARATOR_TAG:
            return PAGE_SEPARATOR_TAG
        return f":{self.tag}:{self.content}"


class SwiftFieldReader:
    """
    Splits raw MT text into :class:`RawField` records, one field per call.

    A field opens on a ``:TAG:`` line and collects every following line until
    the next tag line or the page terminator ``-``. Continuation lines are kept
    verbatim, whitespace-only ones included. Only empty lines trailing a field
    are dropped.
    """

    def __init__(self, source: Union[str, bytes, IO[str], IO[bytes]]):
        if isinstance(source, bytes):
            try:
                source = source.decode("utf-8")
            except UnicodeDecodeError as e:
                raise TokenizerError(f"Message text is not valid UTF-8: {e}") from e
        if isinstance(source, str):
            source = io.StringIO(source)
        elif isinstance(source, (io.RawIOBase, io.BufferedIOBase)):
            source = io.TextIOWrapper(source, encoding="utf-8")
        if not hasattr(source, "readline"):
            raise TokenizerError(f"Unsupported message source type: {type(source).__name__}")

        self._source = source
        self._pending_line: Optional[str] = None
        self.line_number = 0
        self.field_line_number = 0

    def _next_line(self) -> Optional[str]:
        if self._pending_line is not None:
            line, self._pending_line = self._pending_line, None
            return line
        try:
            line = self._source.readline()
        except UnicodeDecodeError as e:
            raise TokenizerError(f"Message text is not valid UTF-8: {e}", line_number=self.line_number + 1) from e
        if not line:
            return None
        self.line_number += 1
        return line.rstrip("\r\n")

    def _push_back(self, line: str) -> None:
        self._pending_line = line

    def read_field(self) -> Optional[RawField]:
        """
        Returns the next field in source order, or None once input is exhausted.
        """
        line = self._next_line()
        while line == "":
            line = self._next_line()
        if line is None:
            return None

        start_line = self.line_number
        if line == PAGE_SEPARATOR_TAG:
            return self._emit(RawField(PAGE_SEPARATOR_TAG, "", start_line))

        match = _TAG_LINE_RE.match(line)
        if match:
            tag, first = match.group(1), match.group(2)
            lines = [first]
        else:
            tag = PREAMBLE_TAG
            lines = [line]

        while True:
            line = self._next_line()
            if line is None:
                break
            if line == PAGE_SEPARATOR_TAG or _TAG_LINE_RE.match(line):
                self._push_back(line)
                break
            lines.append(line)

        # empty lines before the next field belong to no field
        while len(lines) > 1 and lines[-1] == "":
            lines.pop()

        if tag == PREAMBLE_TAG:
            logger.debug("Untagged content on lines %d-%d", start_line, start_line + len(lines) - 1)
        return self._emit(RawField(tag, "\n".join(lines), start_line))

    def _emit(self, field: RawField) -> RawField:
        self.field_line_number = field.start_line
        return field

    def __iter__(self) -> Iterator[RawField]:
        while True:
            field = self.read_field()
            if field is None:
                return
            yield field

    def read_all(self) -> List[RawField]:
        return list(self)
