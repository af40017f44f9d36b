import pytest

from swiftmt.builder import MessageBuilder
from swiftmt.fields import Beneficiary, DetailsOfCharges, InstructionCode
from swiftmt.parser import MT101PageReader


def test_build_transaction_with_account_beneficiary():
    transaction = MessageBuilder.build_transaction(
        reference="TXN-1",
        currency="EUR",
        amount="1500,00",
        account="/DE89370400440532013000",
        name_and_address=["MAX MUSTERMANN", "BERLIN"],
        instruction_code="INTC",
        instruction_info="GROUP TREASURY",
        remittance_information="INVOICE 1\nINVOICE 2",
        charges="SHA",
        ignored_key="ignored",
    )

    assert transaction.transaction_reference.reference == "TXN-1"
    assert transaction.currency_transaction_amount.amount == "1500,00"
    assert transaction.beneficiary.option is Beneficiary.Option.NO_OPTION
    assert transaction.beneficiary.name_and_address == ("MAX MUSTERMANN", "BERLIN")
    assert transaction.instruction_code == InstructionCode(InstructionCode.Code.INTC, "GROUP TREASURY")
    assert transaction.remittance_information.information_lines == ("INVOICE 1", "INVOICE 2")
    assert transaction.details_of_charges.charge_code is DetailsOfCharges.ChargeCode.SHA


def test_build_transaction_with_identifier_code():
    transaction = MessageBuilder.build_transaction(
        reference="TXN-2",
        currency="USD",
        amount="10,",
        identifier_code="1234BANKUSNYXXX",
        name_and_address=["NOT USED"],
    )

    assert transaction.beneficiary.option is Beneficiary.Option.OPTION_A
    assert transaction.beneficiary.identifier_code == "1234BANKUSNYXXX"
    assert transaction.beneficiary.name_and_address == ()
    assert transaction.instruction_code is None
    assert transaction.remittance_information is None
    assert transaction.details_of_charges is None


def test_build_transaction_rejects_missing_values():
    with pytest.raises(ValueError):
        MessageBuilder.build_transaction(currency="EUR", amount="1,", account="/A")
    with pytest.raises(ValueError):
        MessageBuilder.build_transaction(reference="T", currency="EUR", amount="1,")


def test_build_transaction_rejects_unknown_charge_code():
    with pytest.raises(ValueError) as exc:
        MessageBuilder.build_transaction(reference="T", currency="EUR", amount="1,", account="/A", charges="ALL")

    assert "ALL" in str(exc.value)


def test_build_page_renders_and_reads_back():
    page = MessageBuilder.build_page(
        "REF-2026",
        [
            {"reference": "T1", "currency": "EUR", "amount": "100,00", "account": "/ACC1", "name_and_address": ["A"]},
            {"reference": "T2", "currency": "CHF", "amount": "5,", "name_and_address": ["B", "C"], "charges": "OUR"},
        ],
        customer_reference="CUST-1",
        execution_date="261019",
    )

    assert page.get_content() == (
        ":20:REF-2026\n:21R:CUST-1\n:30:261019\n"
        ":21:T1\n:32B:EUR100,00\n:59:/ACC1\nA\n"
        ":21:T2\n:32B:CHF5,\n:59:B\nC\n:71A:OUR\n-"
    )
    assert MT101PageReader(page.get_content()).read() == page


def test_build_page_requires_transactions():
    with pytest.raises(ValueError):
        MessageBuilder.build_page("REF", [])
