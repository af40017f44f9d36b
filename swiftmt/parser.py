import logging
from enum import Enum
from typing import IO, Dict, FrozenSet, List, Optional, Union

from swiftmt.exceptions import (
    MissingMandatoryFieldError,
    SwiftError,
    UnexpectedFieldError,
)
from swiftmt.field_reader import PAGE_SEPARATOR_TAG, RawField, SwiftFieldReader
from swiftmt.fields import (
    Beneficiary,
    CurrencyTransactionAmount,
    CustomerSpecifiedReference,
    DetailsOfCharges,
    InstructionCode,
    RemittanceInformation,
    RequestedExecutionDate,
    SendersReference,
    SwiftField,
    TransactionReference,
    decode_field,
)
from swiftmt.models import MT101Page, TransactionDetails

logger = logging.getLogger(__name__)


class ReaderState(Enum):
    AWAIT_SENDERS_REFERENCE = "await_senders_reference"
    AWAIT_CUSTOMER_REFERENCE = "await_customer_reference"
    AWAIT_EXECUTION_DATE = "await_execution_date"
    AWAIT_TRANSACTION = "await_transaction"
    IN_TRANSACTION = "in_transaction"


TRANSACTION_FIELD_TAGS: FrozenSet[str] = frozenset(
    {
        InstructionCode.TAG,
        CurrencyTransactionAmount.TAG,
        Beneficiary.TAG,
        RemittanceInformation.TAG,
        DetailsOfCharges.TAG,
    }
)
MANDATORY_TRANSACTION_TAGS = (CurrencyTransactionAmount.TAG, Beneficiary.TAG)


class _TransactionGroup:
    """Sequence B group under construction."""

    def __init__(self, transaction_reference: TransactionReference, line_number: int):
        self.transaction_reference = transaction_reference
        self.line_number = line_number
        self.remaining = TRANSACTION_FIELD_TAGS
        self.fields: Dict[str, SwiftField] = {}

    def accepts(self, tag: str) -> bool:
        return tag in self.remaining

    def add(self, value: SwiftField) -> None:
        self.fields[value.TAG] = value
        self.remaining = self.remaining - {value.TAG}

    def close(self, line_number: int) -> TransactionDetails:
        for tag in MANDATORY_TRANSACTION_TAGS:
            if tag not in self.fields:
                raise MissingMandatoryFieldError(
                    f"Transaction '{self.transaction_reference.reference}' is missing "
                    f"mandatory field '{tag}'",
                    tag=tag,
                    line_number=line_number,
                )
        return TransactionDetails(
            transaction_reference=self.transaction_reference,
            currency_transaction_amount=self.fields[CurrencyTransactionAmount.TAG],
            beneficiary=self.fields[Beneficiary.TAG],
            instruction_code=self.fields.get(InstructionCode.TAG),
            remittance_information=self.fields.get(RemittanceInformation.TAG),
            details_of_charges=self.fields.get(DetailsOfCharges.TAG),
        )


class MT101PageReader:
    """
    Reads MT101 pages field by field from raw message text.

    Sequence A must start with :20:, optionally followed by :21R: and then :30:
    in that order. Each :21: opens a Sequence B transaction group accepting
    :23E:, :32B:, :59:, :70: and :71A: in any order, each at most once. A group
    is closed by the next :21:, the ``-`` terminator or the end of input.

    Call :meth:`read` repeatedly; it returns None once the source is exhausted.
    """

    def __init__(self, source: Union[str, bytes, IO[str]], lenient: bool = False):
        """
        Args:
            source: Message text, UTF-8 bytes or a text file-like object.
            lenient: Accept :21: as the very first field and fill the
                sender's reference with an empty value.
        """
        self.field_reader = SwiftFieldReader(source)
        self.lenient = lenient

    def read(self) -> Optional[MT101Page]:
        """
        Reads the next page.

        Returns:
            Optional[MT101Page]: The page, or None if no field was left to read.

        Raises:
            MessageParseError: On any structural or field format violation. The
                error carries the source line number of the offending field.
        """
        state = ReaderState.AWAIT_SENDERS_REFERENCE
        senders_reference: Optional[SendersReference] = None
        customer_reference: Optional[CustomerSpecifiedReference] = None
        execution_date: Optional[RequestedExecutionDate] = None
        transactions: List[TransactionDetails] = []
        group: Optional[_TransactionGroup] = None
        consumed = False

        while True:
            raw_field = self.field_reader.read_field()
            if raw_field is None and not consumed:
                return None
            consumed = True

            if raw_field is None or raw_field.tag == PAGE_SEPARATOR_TAG:
                line_number = raw_field.start_line if raw_field else self.field_reader.line_number
                if group is not None:
                    transactions.append(group.close(line_number))
                return self._close_page(
                    senders_reference, customer_reference, execution_date, transactions, line_number
                )

            tag = raw_field.tag
            line_number = raw_field.start_line

            if state is ReaderState.AWAIT_SENDERS_REFERENCE:
                if tag == SendersReference.TAG:
                    senders_reference = self._decode(raw_field)
                    state = ReaderState.AWAIT_CUSTOMER_REFERENCE
                    continue
                if tag == TransactionReference.TAG and self.lenient:
                    logger.warning(
                        "Page starts with ':%s:' on line %d, using an empty sender's reference",
                        tag,
                        line_number,
                    )
                    senders_reference = SendersReference("")
                    state = ReaderState.AWAIT_TRANSACTION
                else:
                    raise UnexpectedFieldError(
                        f"Expected field '{SendersReference.TAG}' (Sender's Reference) as first field, "
                        f"but was '{tag}'",
                        tag=tag,
                        line_number=line_number,
                    )

            if state is ReaderState.AWAIT_CUSTOMER_REFERENCE and tag == CustomerSpecifiedReference.TAG:
                customer_reference = self._decode(raw_field)
                state = ReaderState.AWAIT_EXECUTION_DATE
                continue

            if state in (ReaderState.AWAIT_CUSTOMER_REFERENCE, ReaderState.AWAIT_EXECUTION_DATE):
                if tag == RequestedExecutionDate.TAG:
                    execution_date = self._decode(raw_field)
                    state = ReaderState.AWAIT_TRANSACTION
                    continue
                if tag != TransactionReference.TAG:
                    raise UnexpectedFieldError(
                        f"Unexpected field '{tag}' in Sequence A", tag=tag, line_number=line_number
                    )
                state = ReaderState.AWAIT_TRANSACTION

            if state is ReaderState.IN_TRANSACTION and tag != TransactionReference.TAG:
                if not group.accepts(tag):
                    raise UnexpectedFieldError(
                        f"Unexpected field '{tag}' in transaction "
                        f"'{group.transaction_reference.reference}'",
                        tag=tag,
                        line_number=line_number,
                    )
                group.add(self._decode(raw_field))
                continue

            if tag != TransactionReference.TAG:
                raise UnexpectedFieldError(
                    f"Expected field '{TransactionReference.TAG}' (Transaction Reference), but was '{tag}'",
                    tag=tag,
                    line_number=line_number,
                )

            if group is not None:
                transactions.append(group.close(line_number))
            group = _TransactionGroup(self._decode(raw_field), line_number)
            logger.debug("Opened transaction '%s' on line %d", group.transaction_reference.reference, line_number)
            state = ReaderState.IN_TRANSACTION

    def _decode(self, raw_field: RawField) -> SwiftField:
        try:
            return decode_field(raw_field)
        except SwiftError as e:
            e.line_number = raw_field.start_line
            raise

    def _close_page(
        self,
        senders_reference: Optional[SendersReference],
        customer_reference: Optional[CustomerSpecifiedReference],
        execution_date: Optional[RequestedExecutionDate],
        transactions: List[TransactionDetails],
        line_number: int,
    ) -> MT101Page:
        if senders_reference is None:
            raise MissingMandatoryFieldError(
                f"Missing mandatory field '{SendersReference.TAG}' (Sender's Reference)",
                tag=SendersReference.TAG,
                line_number=line_number,
            )
        if not transactions:
            raise MissingMandatoryFieldError(
                f"No transaction details found, expected at least one '{TransactionReference.TAG}' field",
                tag=TransactionReference.TAG,
                line_number=line_number,
            )

        logger.debug(
            "Read MT101 page '%s' with %d transaction(s)", senders_reference.reference, len(transactions)
        )
        return MT101Page(
            senders_reference=senders_reference,
            transaction_details=tuple(transactions),
            customer_specified_reference=customer_reference,
            requested_execution_date=execution_date,
        )
