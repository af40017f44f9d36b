"""
swiftmt: Decode, validate and re-encode SWIFT MT101 messages with a small
interpreter for the SWIFT field notation grammar.
"""

from .builder import MessageBuilder
from .exceptions import (
    FieldFormatError,
    GrammarSyntaxError,
    MessageParseError,
    MissingMandatoryFieldError,
    SwiftError,
    TokenizerError,
    UnexpectedFieldError,
)
from .field_reader import RawField, SwiftFieldReader
from .models import MT101Page, TransactionDetails, ValidationReport
from .notation import FormatSpec, compile_notation
from .parser import MT101PageReader
from .streaming import StreamingParser
from .validator import Validator

__all__ = [
    "MT101PageReader",
    "MT101Page",
    "TransactionDetails",
    "ValidationReport",
    "SwiftFieldReader",
    "RawField",
    "FormatSpec",
    "compile_notation",
    "MessageBuilder",
    "StreamingParser",
    "Validator",
    "SwiftError",
    "GrammarSyntaxError",
    "MessageParseError",
    "FieldFormatError",
    "UnexpectedFieldError",
    "MissingMandatoryFieldError",
    "TokenizerError",
]
