"""
Field codecs for the MT101 message type.

Every field class wraps a compiled notation and converts between a
:class:`~swiftmt.field_reader.RawField` and a typed, immutable value:

* ``Cls.of(raw_field)`` decodes raw content (``FieldFormatError`` on bad content)
* ``instance.get_content()`` encodes the value back into raw content
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Callable, ClassVar, Dict, List, Optional, Tuple, Type

from swiftmt.exceptions import FieldFormatError
from swiftmt.field_reader import RawField
from swiftmt.notation import FormatSpec


def _require(value: object, name: str) -> None:
    if value is None:
        raise ValueError(f"{name} can't be None")


class SwiftField:
    """Common behaviour of all typed field values."""

    TAG: ClassVar[str]
    NOTATION: ClassVar[FormatSpec]

    @classmethod
    def _sub_fields(cls, raw_field: RawField) -> List[Optional[str]]:
        if raw_field.tag != cls.TAG:
            raise ValueError(f"unexpected field tag '{raw_field.tag}', expected '{cls.TAG}'")
        return cls.NOTATION.parse(raw_field.content)

    @classmethod
    def of(cls, raw_field: RawField) -> "SwiftField":
        raise NotImplementedError

    def get_tag(self) -> str:
        return self.TAG

    def get_content(self) -> str:
        raise NotImplementedError

    def to_swift_text(self) -> str:
        """Renders the field as it appears in a message: ``:TAG:content``."""
        return f":{self.TAG}:{self.get_content()}"


@dataclass(frozen=True)
class SendersReference(SwiftField):
    """
    Sender's Reference, field ``:20:``, format ``16x``.
    """

    TAG: ClassVar[str] = "20"
    NOTATION: ClassVar[FormatSpec] = FormatSpec("16x")

    reference: str

    def __post_init__(self):
        _require(self.reference, "reference")

    @classmethod
    def of(cls, raw_field: RawField) -> "SendersReference":
        return cls(cls._sub_fields(raw_field)[0])

    def get_content(self) -> str:
        return self.NOTATION.render([self.reference])


@dataclass(frozen=True)
class CustomerSpecifiedReference(SwiftField):
    """
    Customer Specified Reference, field ``:21R:``, format ``16x``.
    """

    TAG: ClassVar[str] = "21R"
    NOTATION: ClassVar[FormatSpec] = FormatSpec("16x")

    reference: str

    def __post_init__(self):
        _require(self.reference, "reference")

    @classmethod
    def of(cls, raw_field: RawField) -> "CustomerSpecifiedReference":
        return cls(cls._sub_fields(raw_field)[0])

    def get_content(self) -> str:
        return self.NOTATION.render([self.reference])


@dataclass(frozen=True)
class RequestedExecutionDate(SwiftField):
    """
    Requested Execution Date, field ``:30:``, format ``6!n`` (YYMMDD).
    """

    TAG: ClassVar[str] = "30"
    NOTATION: ClassVar[FormatSpec] = FormatSpec("6!n")

    date: str

    def __post_init__(self):
        _require(self.date, "date")

    @classmethod
    def of(cls, raw_field: RawField) -> "RequestedExecutionDate":
        return cls(cls._sub_fields(raw_field)[0])

    def get_content(self) -> str:
        return self.NOTATION.render([self.date])

    def as_date(self) -> date:
        """
        Interprets the YYMMDD value as a calendar date.

        Raises:
            ValueError: If the digits do not form a valid date.
        """
        return datetime.strptime(self.date, "%y%m%d").date()


@dataclass(frozen=True)
class TransactionReference(SwiftField):
    """
    Transaction Reference, field ``:21:``, format ``16x``. Opens a Sequence B
    transaction group.
    """

    TAG: ClassVar[str] = "21"
    NOTATION: ClassVar[FormatSpec] = FormatSpec("16x")

    reference: str

    def __post_init__(self):
        _require(self.reference, "reference")

    @classmethod
    def of(cls, raw_field: RawField) -> "TransactionReference":
        return cls(cls._sub_fields(raw_field)[0])

    def get_content(self) -> str:
        return self.NOTATION.render([self.reference])


@dataclass(frozen=True)
class InstructionCode(SwiftField):
    """
    Instruction Code, field ``:23E:``, format ``4!c[/30x]``.

    Codes outside :class:`InstructionCode.Code` decode as ``OTHR``.
    """

    class Code(Enum):
        URGP = "Urgent Payment"
        INTC = "Intra-company Payment"
        RTGS = "Real Time Gross Settlement"
        CORT = "Financial Payment"
        CHQB = "Cheque"
        DMST = "Domestic Payment"
        INTL = "International Payment"
        SDCL = "Same Day Clearing"
        BACS = "BACS Payment UK"
        OTHR = "Other"

        @property
        def description(self) -> str:
            return self.value

    TAG: ClassVar[str] = "23E"
    NOTATION: ClassVar[FormatSpec] = FormatSpec("4!c[/30x]")

    code: "InstructionCode.Code"
    additional_info: Optional[str] = None

    def __post_init__(self):
        _require(self.code, "code")

    @classmethod
    def of(cls, raw_field: RawField) -> "InstructionCode":
        code, additional_info = cls._sub_fields(raw_field)
        return cls(cls.parse_code(code), additional_info)

    @classmethod
    def parse_code(cls, code: str) -> "InstructionCode.Code":
        try:
            return cls.Code[code]
        except KeyError:
            return cls.Code.OTHR

    def get_content(self) -> str:
        return self.NOTATION.render([self.code.name, self.additional_info])


@dataclass(frozen=True)
class CurrencyTransactionAmount(SwiftField):
    """
    Currency/Transaction Amount, field ``:32B:``, format ``3!a15d``.

    The amount keeps its SWIFT spelling (decimal comma, e.g. ``1000,50``).
    """

    TAG: ClassVar[str] = "32B"
    NOTATION: ClassVar[FormatSpec] = FormatSpec("3!a15d")

    currency: str
    amount: str

    def __post_init__(self):
        _require(self.currency, "currency")
        _require(self.amount, "amount")

    @classmethod
    def of(cls, raw_field: RawField) -> "CurrencyTransactionAmount":
        currency, amount = cls._sub_fields(raw_field)
        return cls(currency, amount)

    def get_content(self) -> str:
        return self.NOTATION.render([self.currency, self.amount])

    @property
    def decimal_amount(self) -> Decimal:
        amount = self.amount
        if amount.endswith(","):
            amount += "0"
        return Decimal(amount.replace(",", "."))


class BeneficiaryShape(Enum):
    OPTION_A = "OPTION_A"
    ACCOUNT = "ACCOUNT"
    NAME_ONLY = "NAME_ONLY"


_BENEFICIARY_SHAPES: Tuple[Tuple[BeneficiaryShape, Callable[[str], bool]], ...] = (
    (BeneficiaryShape.OPTION_A, re.compile(r"[0-9]{4}[A-Z]{6}[A-Z0-9]{2}(?:[A-Z0-9]{3})?").fullmatch),
    (BeneficiaryShape.ACCOUNT, lambda line: line.startswith("/")),
    (BeneficiaryShape.NAME_ONLY, lambda line: True),
)


def sniff_beneficiary_shape(content: str) -> BeneficiaryShape:
    """Classifies beneficiary content by its first line."""
    first_line = content.split("\n", 1)[0]
    for shape, predicate in _BENEFICIARY_SHAPES:
        if predicate(first_line):
            return shape
    return BeneficiaryShape.NAME_ONLY


@dataclass(frozen=True)
class Beneficiary(SwiftField):
    """
    Beneficiary, field ``:59:``.

    The option letter is not part of the tag, so the content shape decides:

    * Option A: ``4!n4!a2!a2!c[3!c]`` identifier code line, optional account line
    * No option with account: ``/34x`` account line, up to ``4*35x`` name and
      address lines (blank lines are dropped)
    * No option without account: ``4*35x`` name and address lines
    """

    class Option(Enum):
        NO_OPTION = "NO_OPTION"
        OPTION_A = "OPTION_A"

    TAG: ClassVar[str] = "59"
    NOTATION: ClassVar[FormatSpec] = FormatSpec("/34x[\n4*35x]")
    NOTATION_NAME_ONLY: ClassVar[FormatSpec] = FormatSpec("4*35x")
    NOTATION_OPTION_A: ClassVar[FormatSpec] = FormatSpec("4!n4!a2!a2!c[3!c][\n34x]")
    NOTATION_IDENTIFIER_CODE: ClassVar[FormatSpec] = FormatSpec("4!n4!a2!a2!c[3!c]")

    option: "Beneficiary.Option"
    account: Optional[str] = None
    name_and_address: Tuple[str, ...] = field(default_factory=tuple)
    identifier_code: Optional[str] = None

    def __post_init__(self):
        _require(self.option, "option")
        _require(self.name_and_address, "name_and_address")
        object.__setattr__(self, "name_and_address", tuple(self.name_and_address))
        if self.option is Beneficiary.Option.OPTION_A:
            _require(self.identifier_code, "identifier_code")
        elif self.account is None and not self.name_and_address:
            raise ValueError("account and name_and_address can't both be empty")

    @classmethod
    def with_account(cls, account: str, name_and_address: List[str]) -> "Beneficiary":
        return cls(cls.Option.NO_OPTION, account=account, name_and_address=tuple(name_and_address))

    @classmethod
    def option_a(cls, identifier_code: str, account: Optional[str] = None) -> "Beneficiary":
        return cls(cls.Option.OPTION_A, account=account, identifier_code=identifier_code)

    @classmethod
    def of(cls, raw_field: RawField) -> "Beneficiary":
        if raw_field.tag != cls.TAG:
            raise ValueError(f"unexpected field tag '{raw_field.tag}', expected '{cls.TAG}'")

        content = raw_field.content
        shape = sniff_beneficiary_shape(content)

        if shape is BeneficiaryShape.OPTION_A:
            values = cls.NOTATION_OPTION_A.parse(content)
            identifier_code = "".join(value for value in values[:5] if value is not None)
            return cls.option_a(identifier_code, values[5])

        if shape is BeneficiaryShape.ACCOUNT:
            lines = [line for line in content.split("\n") if line.strip()]
            values = cls.NOTATION.parse("\n".join(lines))
            name_and_address = [value for value in values[1:] if value is not None]
            return cls.with_account("/" + values[0], name_and_address)

        values = cls.NOTATION_NAME_ONLY.parse(content)
        return cls(cls.Option.NO_OPTION, name_and_address=tuple(values))

    def get_content(self) -> str:
        if self.option is Beneficiary.Option.OPTION_A:
            parts = self.NOTATION_IDENTIFIER_CODE.parse(self.identifier_code)
            return self.NOTATION_OPTION_A.render(parts + [self.account])

        if self.account is None:
            return self.NOTATION_NAME_ONLY.render(list(self.name_and_address))

        if not self.account.startswith("/"):
            raise FieldFormatError(f"Beneficiary account '{self.account}' must start with '/'")
        return self.NOTATION.render([self.account[1:], *self.name_and_address])


@dataclass(frozen=True)
class RemittanceInformation(SwiftField):
    """
    Remittance Information, field ``:70:``, format ``4*35x``.
    """

    TAG: ClassVar[str] = "70"
    NOTATION: ClassVar[FormatSpec] = FormatSpec("4*35x")

    information_lines: Tuple[str, ...]

    def __post_init__(self):
        _require(self.information_lines, "information_lines")
        object.__setattr__(self, "information_lines", tuple(self.information_lines))
        if not self.information_lines:
            raise ValueError("information_lines can't be empty")

    @classmethod
    def of(cls, raw_field: RawField) -> "RemittanceInformation":
        return cls(tuple(cls._sub_fields(raw_field)))

    def get_content(self) -> str:
        return self.NOTATION.render(list(self.information_lines))


@dataclass(frozen=True)
class DetailsOfCharges(SwiftField):
    """
    Details of Charges, field ``:71A:``, format ``3!a``.

    Unlike :class:`InstructionCode`, an unknown charge code is a decode error.
    """

    class ChargeCode(Enum):
        OUR = "Our charges - sender pays"
        BEN = "Beneficiary charges - beneficiary pays"
        SHA = "Shared charges - split"

        @property
        def description(self) -> str:
            return self.value

    TAG: ClassVar[str] = "71A"
    NOTATION: ClassVar[FormatSpec] = FormatSpec("3!a")

    charge_code: "DetailsOfCharges.ChargeCode"

    def __post_init__(self):
        _require(self.charge_code, "charge_code")

    @classmethod
    def of(cls, raw_field: RawField) -> "DetailsOfCharges":
        (code,) = cls._sub_fields(raw_field)
        try:
            charge_code = cls.ChargeCode[code]
        except KeyError:
            raise FieldFormatError(
                f"Unknown charge code '{code}', expected one of "
                f"{', '.join(c.name for c in cls.ChargeCode)}",
                position=0,
                expected_class="3!a",
            ) from None
        return cls(charge_code)

    def get_content(self) -> str:
        return self.NOTATION.render([self.charge_code.name])


FIELD_TYPES: Dict[str, Type[SwiftField]] = {
    cls.TAG: cls
    for cls in (
        SendersReference,
        CustomerSpecifiedReference,
        RequestedExecutionDate,
        TransactionReference,
        InstructionCode,
        CurrencyTransactionAmount,
        Beneficiary,
        RemittanceInformation,
        DetailsOfCharges,
    )
}


def decode_field(raw_field: RawField) -> SwiftField:
    """
    Decodes a raw field with the codec registered for its tag.

    Raises:
        KeyError: If no codec exists for the tag.
        FieldFormatError: If the content does not match the field's notation.
    """
    return FIELD_TYPES[raw_field.tag].of(raw_field)
