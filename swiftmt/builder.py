from typing import Any, Dict, Iterable, List, Optional

from swiftmt.fields import (
    Beneficiary,
    CurrencyTransactionAmount,
    CustomerSpecifiedReference,
    DetailsOfCharges,
    InstructionCode,
    RemittanceInformation,
    RequestedExecutionDate,
    SendersReference,
    TransactionReference,
)
from swiftmt.models import MT101Page, TransactionDetails


class MessageBuilder:
    """
    A factory for programmatically composing MT101 pages from plain values.
    """

    _TRANSACTION_KEYS = {
        "reference",
        "currency",
        "amount",
        "account",
        "name_and_address",
        "identifier_code",
        "instruction_code",
        "instruction_info",
        "remittance_information",
        "charges",
    }

    @staticmethod
    def build_transaction(**kwargs: Any) -> TransactionDetails:
        """
        Builds one Sequence B transaction group.

        Args:
            reference (str): Transaction reference (:21:).
            currency (str), amount (str): Currency and SWIFT amount (:32B:),
                e.g. ``"EUR"`` and ``"1000,50"``.
            account (str), name_and_address (List[str]): Beneficiary without option (:59:).
            identifier_code (str): Beneficiary option A identifier code; takes
                precedence over ``name_and_address``.
            instruction_code (str), instruction_info (str): Optional :23E:.
            remittance_information (List[str] or str): Optional :70: lines.
            charges (str): Optional :71A: charge code (OUR, BEN or SHA).

        Note:
            Keys not listed above are discarded.

        Raises:
            ValueError: If a mandatory value is missing or a code is unknown.
        """
        values = {k: v for k, v in kwargs.items() if k in MessageBuilder._TRANSACTION_KEYS}

        if values.get("identifier_code"):
            beneficiary = Beneficiary.option_a(values["identifier_code"], values.get("account"))
        else:
            beneficiary = Beneficiary(
                Beneficiary.Option.NO_OPTION,
                account=values.get("account"),
                name_and_address=tuple(values.get("name_and_address") or ()),
            )

        instruction_code = None
        if values.get("instruction_code"):
            instruction_code = InstructionCode(
                InstructionCode.parse_code(values["instruction_code"]),
                values.get("instruction_info"),
            )

        remittance = values.get("remittance_information")
        if isinstance(remittance, str):
            remittance = remittance.split("\n")

        details_of_charges = None
        if values.get("charges"):
            try:
                details_of_charges = DetailsOfCharges(DetailsOfCharges.ChargeCode[values["charges"]])
            except KeyError:
                raise ValueError(f"Unknown charge code '{values['charges']}'") from None

        return TransactionDetails(
            transaction_reference=TransactionReference(values.get("reference")),
            currency_transaction_amount=CurrencyTransactionAmount(values.get("currency"), values.get("amount")),
            beneficiary=beneficiary,
            instruction_code=instruction_code,
            remittance_information=RemittanceInformation(tuple(remittance)) if remittance else None,
            details_of_charges=details_of_charges,
        )

    @staticmethod
    def build_page(
        senders_reference: str,
        transactions: Iterable[Dict[str, Any]],
        customer_reference: Optional[str] = None,
        execution_date: Optional[str] = None,
    ) -> MT101Page:
        """
        Builds an MT101 page from a sender's reference and transaction dicts
        accepted by :meth:`build_transaction`.

        The result is not checked against the field notations until it is
        rendered with :meth:`MT101Page.get_content`.
        """
        details: List[TransactionDetails] = [MessageBuilder.build_transaction(**t) for t in transactions]
        return MT101Page(
            senders_reference=SendersReference(senders_reference),
            transaction_details=tuple(details),
            customer_specified_reference=CustomerSpecifiedReference(customer_reference)
            if customer_reference
            else None,
            requested_execution_date=RequestedExecutionDate(execution_date) if execution_date else None,
        )
