"""
Caller-facing request schemas for the FNOL and payment workflows.

Field names are snake_case in Python and camelCase on the wire.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CallerModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Contact(CallerModel):
    name: str
    telephone: str


class AccidentAddress(CallerModel):
    city: str
    state: str
    address_line1: str
    post_code: str


class FNOLRequest(CallerModel):
    """First notice of loss."""
    new_eco_fnol_id: str
    curr_house_claim_id: str
    policy_no: str
    date_of_loss: str
    date_of_notification: str
    policyholder_name: str
    contact: Contact
    accident_description: str
    accident_address: AccidentAddress

    @field_validator("new_eco_fnol_id", "curr_house_claim_id")
    @classmethod
    def validate_correlation_id(cls, v: str) -> str:
        # Both ids are embedded in "NE:<id>;CH:<id>"
        if not v:
            raise ValueError("must not be empty")
        if ";" in v or ":" in v:
            raise ValueError("must not contain ';' or ':'")
        return v


class PaymentRequest(CallerModel):
    """Payment/settlement on a claim filed through FNOL."""
    new_eco_fnol_id: str
    cause_of_loss: str
    damage_type: str
    subclaim_type: str
    estimated_loss: float
    litigation: str = "N"
    total_loss: str = "N"
    has_subrogation: str = "N"
    has_salvage: str = "N"
    damage_party: str
    damage_object: str
    claim_owner: str
    coverage_name: str
    init_loss_indemnity: float
    payment_method: str
    payment_type: str
    partial_final_option: str = "Final"
    settle_amount: float

    @field_validator("litigation", "total_loss", "has_subrogation", "has_salvage", mode="before")
    @classmethod
    def default_flag(cls, v: Optional[Any]) -> Any:
        return "N" if v is None else v

    @field_validator("partial_final_option", mode="before")
    @classmethod
    def default_partial_final(cls, v: Optional[Any]) -> Any:
        return "Final" if v is None else v
