import pytest

from swiftmt.exceptions import FieldFormatError, TokenizerError
from swiftmt.models import MT101Page
from swiftmt.streaming import StreamingParser

MOCK_BATCH = b""":20:BATCH-1
:21:TX-1
:32B:USD100,00
:59:/111
SENDER ONE
-
:20:BATCH-2
:30:260222
:21:TX-2
:32B:EUR200,00
:59:/222
RECEIVER TWO
:21:TX-3
:32B:GBP300,00
:59:/333
RECEIVER THREE
-
"""


def test_streaming_multi_page_batch():
    """
    Tests that the streaming parser yields every page of a batch file in order.
    """
    pages = list(StreamingParser(MOCK_BATCH).iter_pages())

    assert len(pages) == 2
    assert all(isinstance(p, MT101Page) for p in pages)

    assert pages[0].senders_reference.reference == "BATCH-1"
    assert [t.transaction_reference.reference for t in pages[0].transaction_details] == ["TX-1"]

    assert pages[1].senders_reference.reference == "BATCH-2"
    assert pages[1].requested_execution_date.date == "260222"
    amounts = [t.currency_transaction_amount.amount for t in pages[1].transaction_details]
    assert amounts == ["200,00", "300,00"]


def test_streaming_accepts_text():
    pages = list(StreamingParser(MOCK_BATCH.decode("utf-8")).iter_pages())

    assert [p.senders_reference.reference for p in pages] == ["BATCH-1", "BATCH-2"]


def test_streaming_empty_source():
    assert list(StreamingParser(b"").iter_pages()) == []


def test_streaming_yields_pages_before_a_broken_one():
    source = MOCK_BATCH + b":20:BATCH-3\n:21:TX-4\n:32B:GBPX\n:59:/444\n-\n"
    iterator = StreamingParser(source).iter_pages()

    assert next(iterator).senders_reference.reference == "BATCH-1"
    assert next(iterator).senders_reference.reference == "BATCH-2"
    with pytest.raises(FieldFormatError) as exc:
        next(iterator)
    assert exc.value.line_number == 20


def test_streaming_invalid_utf8():
    with pytest.raises(TokenizerError):
        list(StreamingParser(b":20:REF\xff\n").iter_pages())


def test_streaming_from_path(tmp_path):
    path = tmp_path / "batch.mt101"
    path.write_bytes(MOCK_BATCH)

    pages = list(StreamingParser.from_path(str(path)))

    assert [p.senders_reference.reference for p in pages] == ["BATCH-1", "BATCH-2"]
