import io
import logging
from typing import IO, Generator, Union

from swiftmt.models import MT101Page
from swiftmt.parser import MT101PageReader

logger = logging.getLogger(__name__)


class StreamingParser:
    """
    Iterates every MT101 page of a multi-page source without loading it whole.
    Pages are separated by ``-`` terminator lines.
    """

    def __init__(self, source: Union[bytes, str, IO[str]], lenient: bool = False):
        """
        Initialize with raw bytes, message text, or a text file-like object.
        """
        if isinstance(source, bytes):
            source = io.TextIOWrapper(io.BytesIO(source), encoding="utf-8")
        self.reader = MT101PageReader(source, lenient=lenient)

    def iter_pages(self) -> Generator[MT101Page, None, None]:
        """
        Yields pages in source order until the source is exhausted.

        Raises:
            MessageParseError: On the first page that fails to parse. Pages
                yielded before it remain valid.
        """
        count = 0
        while True:
            page = self.reader.read()
            if page is None:
                logger.debug("Source exhausted after %d page(s)", count)
                return
            count += 1
            yield page

    @classmethod
    def from_path(cls, path: str, lenient: bool = False) -> Generator[MT101Page, None, None]:
        """Streams the pages of a file on disk."""
        with open(path, "r", encoding="utf-8") as f:
            yield from cls(f, lenient=lenient).iter_pages()
