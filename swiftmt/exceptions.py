from typing import Optional


class SwiftError(Exception):
    """
    Base exception for all swiftmt errors.

    Carries the 1-based source line number of the field that triggered the
    failure once the page reader has annotated it.
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"{self.message} (line {self.line_number})"


class GrammarSyntaxError(SwiftError, ValueError):
    """Malformed notation string. A programming error, not an input error."""


class MessageParseError(SwiftError):
    """Base class for errors caused by the message text itself."""


class FieldFormatError(MessageParseError):
    """
    Field content (or a value to render) violates a sub-field's character
    class, length rule or mandatory rule.

    Attributes:
        position (Optional[int]): Offset into the content where matching failed.
        expected_class (Optional[str]): Notation token of the failing sub-field.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expected_class: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        super().__init__(message, line_number)
        self.position = position
        self.expected_class = expected_class


class UnexpectedFieldError(MessageParseError):
    """A tag appears where the page structure does not allow it."""

    def __init__(self, message: str, tag: Optional[str] = None, line_number: Optional[int] = None):
        super().__init__(message, line_number)
        self.tag = tag


class MissingMandatoryFieldError(MessageParseError):
    """A transaction group or page closes without a required field."""

    def __init__(self, message: str, tag: Optional[str] = None, line_number: Optional[int] = None):
        super().__init__(message, line_number)
        self.tag = tag


class TokenizerError(MessageParseError):
    """The raw text cannot be split into fields at all."""
