import io

import pytest

from swiftmt.exceptions import TokenizerError
from swiftmt.field_reader import PAGE_SEPARATOR_TAG, PREAMBLE_TAG, RawField, SwiftFieldReader

MOCK_PAGE = ":20:REF1\n:21:TXN1\n:32B:EUR100,00\n:59:/ACC1\nNAME\nSTREET 1\n-\n"


def test_read_fields_in_order():
    fields = SwiftFieldReader(MOCK_PAGE).read_all()

    assert [f.tag for f in fields] == ["20", "21", "32B", "59", "-"]
    assert fields[0] == RawField("20", "REF1", 1)
    assert fields[3].content == "/ACC1\nNAME\nSTREET 1"
    assert fields[3].start_line == 4
    assert fields[4].tag == PAGE_SEPARATOR_TAG
    assert fields[4].start_line == 7


def test_read_field_returns_none_at_end():
    reader = SwiftFieldReader(":20:ONLY")

    assert reader.read_field() == RawField("20", "ONLY", 1)
    assert reader.read_field() is None
    assert reader.read_field() is None


def test_empty_input_yields_nothing():
    assert SwiftFieldReader("").read_all() == []
    assert SwiftFieldReader("\n\n\n").read_all() == []


def test_crlf_line_endings():
    fields = SwiftFieldReader(":20:REF1\r\n:70:LINE A\r\nLINE B\r\n-\r\n").read_all()

    assert [f.tag for f in fields] == ["20", "70", "-"]
    assert fields[1].content == "LINE A\nLINE B"


def test_blank_lines_between_fields_are_skipped_but_line_numbers_kept():
    fields = SwiftFieldReader("\n:20:REF1\n\n:21:TXN1\n").read_all()

    assert fields == [RawField("20", "REF1", 2), RawField("21", "TXN1", 4)]


def test_blank_continuation_line_is_kept():
    fields = SwiftFieldReader(":59:/ACC1\n\nNAME\n:70:X").read_all()

    assert fields[0].content == "/ACC1\n\nNAME"


def test_untagged_leading_lines_become_preamble():
    fields = SwiftFieldReader("HEADER LINE\n:20:REF1\n").read_all()

    assert fields[0] == RawField(PREAMBLE_TAG, "HEADER LINE", 1)
    assert fields[1] == RawField("20", "REF1", 2)


def test_colon_inside_content_does_not_open_field():
    fields = SwiftFieldReader(":70:INVOICE :NO: 42\nREF :A:B\n").read_all()

    assert len(fields) == 1
    assert fields[0].content == "INVOICE :NO: 42\nREF :A:B"


def test_field_with_empty_content():
    assert SwiftFieldReader(":20:").read_all() == [RawField("20", "", 1)]


def test_line_number_tracking():
    reader = SwiftFieldReader(MOCK_PAGE)

    reader.read_field()
    reader.read_field()
    field = reader.read_field()

    assert field.tag == "32B"
    assert reader.field_line_number == 3


def test_accepts_bytes_and_text_streams():
    from_bytes = SwiftFieldReader(MOCK_PAGE.encode("utf-8")).read_all()
    from_stream = SwiftFieldReader(io.StringIO(MOCK_PAGE)).read_all()

    assert from_bytes == from_stream == SwiftFieldReader(MOCK_PAGE).read_all()


def test_invalid_utf8_raises_tokenizer_error():
    with pytest.raises(TokenizerError):
        SwiftFieldReader(b":20:\xff\xfe\n")


def test_unsupported_source_raises_tokenizer_error():
    with pytest.raises(TokenizerError):
        SwiftFieldReader(42)


def test_to_swift_text():
    assert RawField("20", "REF1", 1).to_swift_text() == ":20:REF1"
    assert RawField("-", "", 9).to_swift_text() == "-"


def test_whitespace_only_lines_are_kept():
    fields = SwiftFieldReader(":70:LINE1\n   \n:71A:SHA\n").read_all()

    assert fields[0].content == "LINE1\n   "
    assert fields[1] == RawField("71A", "SHA", 3)


def test_whitespace_only_line_outside_field_is_preamble():
    fields = SwiftFieldReader("-\n  \n:20:REF1\n").read_all()

    assert fields[1] == RawField(PREAMBLE_TAG, "  ", 2)


def test_accepts_binary_streams():
    fields = SwiftFieldReader(io.BytesIO(MOCK_PAGE.encode("utf-8"))).read_all()

    assert fields == SwiftFieldReader(MOCK_PAGE).read_all()


def test_invalid_utf8_in_binary_stream_raises_tokenizer_error():
    with pytest.raises(TokenizerError):
        SwiftFieldReader(io.BytesIO(b":20:\xff\xfe\n")).read_all()
