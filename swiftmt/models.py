from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from swiftmt.field_reader import PAGE_SEPARATOR_TAG
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
)


@dataclass(frozen=True)
class TransactionDetails:
    """
    One Sequence B transaction group of an MT101 page.

    Attributes:
        transaction_reference (TransactionReference): Field :21:, opens the group.
        currency_transaction_amount (CurrencyTransactionAmount): Field :32B:, mandatory.
        beneficiary (Beneficiary): Field :59:, mandatory.
        instruction_code (Optional[InstructionCode]): Field :23E:.
        remittance_information (Optional[RemittanceInformation]): Field :70:.
        details_of_charges (Optional[DetailsOfCharges]): Field :71A:.
    """

    transaction_reference: TransactionReference
    currency_transaction_amount: CurrencyTransactionAmount
    beneficiary: Beneficiary
    instruction_code: Optional[InstructionCode] = None
    remittance_information: Optional[RemittanceInformation] = None
    details_of_charges: Optional[DetailsOfCharges] = None

    def __post_init__(self):
        if self.transaction_reference is None:
            raise ValueError("transaction_reference can't be None")
        if self.currency_transaction_amount is None:
            raise ValueError("currency_transaction_amount can't be None")
        if self.beneficiary is None:
            raise ValueError("beneficiary can't be None")

    def fields(self) -> List[SwiftField]:
        """Present fields in emission order: 21, 23E, 32B, 59, 70, 71A."""
        ordered = [
            self.transaction_reference,
            self.instruction_code,
            self.currency_transaction_amount,
            self.beneficiary,
            self.remittance_information,
            self.details_of_charges,
        ]
        return [f for f in ordered if f is not None]


@dataclass(frozen=True)
class MT101Page:
    """
    Structured representation of one MT101 Request for Transfer message body.

    Sequence A (general information) holds the sender's reference and the
    optional customer reference and execution date; Sequence B holds one or
    more transaction groups in message order.
    """

    MESSAGE_ID = "101"

    senders_reference: SendersReference
    transaction_details: Tuple[TransactionDetails, ...]
    customer_specified_reference: Optional[CustomerSpecifiedReference] = None
    requested_execution_date: Optional[RequestedExecutionDate] = None

    def __post_init__(self):
        if self.senders_reference is None:
            raise ValueError("senders_reference can't be None")
        if self.transaction_details is None:
            raise ValueError("transaction_details can't be None")
        object.__setattr__(self, "transaction_details", tuple(self.transaction_details))
        if not self.transaction_details:
            raise ValueError("transaction_details can't be empty")

    def get_id(self) -> str:
        return self.MESSAGE_ID

    def fields(self) -> List[SwiftField]:
        """All present fields in emission order."""
        header = [
            self.senders_reference,
            self.customer_specified_reference,
            self.requested_execution_date,
        ]
        result: List[SwiftField] = [f for f in header if f is not None]
        for transaction in self.transaction_details:
            result.extend(transaction.fields())
        return result

    def get_content(self) -> str:
        """
        Renders the page back into MT text, one tag line per field followed by
        its continuation lines, terminated by the ``-`` line.
        """
        lines = [f.to_swift_text() for f in self.fields()]
        lines.append(PAGE_SEPARATOR_TAG)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """
        Converts the page into a plain dictionary, enums replaced by their names.
        """
        return asdict(self, dict_factory=_enum_safe_dict)


def _enum_safe_dict(items: List[tuple]) -> dict:
    return {key: (value.name if isinstance(value, Enum) else value) for key, value in items}


@dataclass
class ValidationReport:
    """
    Result of validating raw MT text or a parsed page.

    Attributes:
        is_valid (bool): True if no errors were found.
        errors (List[str]): Human-readable error messages, prefixed with the
            source line where one is known.
    """

    is_valid: bool
    errors: List[str] = field(default_factory=list)
