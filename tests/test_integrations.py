import json

from swiftmt.integrations import PydanticMT101Page, from_dataclass
from swiftmt.parser import MT101PageReader

MOCK_MT101 = """:20:TEST-2024001
:21R:COLL-PAYMENT-001
:30:240123
:21:TXN-001
:23E:CHQB/PAY ON MONDAY
:32B:EUR1000,00
:59:/DK1234567890
COMPANY NAME
:70:Test payment
:71A:SHA
:21:TXN-002
:32B:USD5,
:59:1234BANKUSNYXXX
-
"""


def test_pydantic_conversion():
    page = MT101PageReader(MOCK_MT101).read()

    model = from_dataclass(page)

    assert isinstance(model, PydanticMT101Page)
    assert model.senders_reference.reference == "TEST-2024001"
    assert model.customer_specified_reference.reference == "COLL-PAYMENT-001"
    assert model.requested_execution_date.date == "240123"
    assert len(model.transaction_details) == 2

    first, second = model.transaction_details
    assert first.instruction_code.code == "CHQB"
    assert first.instruction_code.additional_info == "PAY ON MONDAY"
    assert first.beneficiary.option == "NO_OPTION"
    assert first.beneficiary.name_and_address == ["COMPANY NAME"]
    assert first.remittance_information.information_lines == ["Test payment"]
    assert first.details_of_charges.charge_code == "SHA"

    assert second.beneficiary.option == "OPTION_A"
    assert second.beneficiary.identifier_code == "1234BANKUSNYXXX"
    assert second.instruction_code is None


def test_pydantic_json_dump():
    page = MT101PageReader(MOCK_MT101).read()

    data = json.loads(from_dataclass(page).model_dump_json())

    assert data["senders_reference"] == {"reference": "TEST-2024001"}
    assert data["transaction_details"][0]["currency_transaction_amount"] == {
        "currency": "EUR",
        "amount": "1000,00",
    }
    assert data["transaction_details"][1]["details_of_charges"] is None


def test_dataclass_to_dict_uses_enum_names():
    page = MT101PageReader(MOCK_MT101).read()

    data = page.to_dict()

    assert data["transaction_details"][0]["details_of_charges"] == {"charge_code": "SHA"}
    assert data["transaction_details"][1]["beneficiary"]["option"] == "OPTION_A"
