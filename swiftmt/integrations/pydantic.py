from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from swiftmt.models import MT101Page


def _enum_name(value: Any) -> Any:
    return value.name if isinstance(value, Enum) else value


class PydanticReference(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reference: str


class PydanticRequestedExecutionDate(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: str


class PydanticInstructionCode(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    additional_info: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def code_name(cls, value: Any) -> Any:
        return _enum_name(value)


class PydanticCurrencyTransactionAmount(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    currency: str
    amount: str


class PydanticBeneficiary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    option: str
    account: Optional[str] = None
    name_and_address: List[str] = []
    identifier_code: Optional[str] = None

    @field_validator("option", mode="before")
    @classmethod
    def option_name(cls, value: Any) -> Any:
        return _enum_name(value)


class PydanticRemittanceInformation(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    information_lines: List[str]


class PydanticDetailsOfCharges(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    charge_code: str

    @field_validator("charge_code", mode="before")
    @classmethod
    def charge_code_name(cls, value: Any) -> Any:
        return _enum_name(value)


class PydanticTransactionDetails(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    transaction_reference: PydanticReference
    currency_transaction_amount: PydanticCurrencyTransactionAmount
    beneficiary: PydanticBeneficiary
    instruction_code: Optional[PydanticInstructionCode] = None
    remittance_information: Optional[PydanticRemittanceInformation] = None
    details_of_charges: Optional[PydanticDetailsOfCharges] = None


class PydanticMT101Page(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    senders_reference: PydanticReference
    customer_specified_reference: Optional[PydanticReference] = None
    requested_execution_date: Optional[PydanticRequestedExecutionDate] = None
    transaction_details: List[PydanticTransactionDetails]


def from_dataclass(page: MT101Page) -> PydanticMT101Page:
    """
    Converts a parsed MT101 page into its Pydantic equivalent for JSON output.
    """
    return PydanticMT101Page.model_validate(page)
