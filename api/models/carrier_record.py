from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class Address(BaseModel):
    """Street address split out of a SAFER address cell."""
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""


class CarrierRecord(BaseModel):
    """Normalized carrier record extracted from a SAFER Company Snapshot.

    Built fresh for every verification request and never persisted. Every
    field has a concrete empty default so the JSON shape is identical whether
    or not the page carried the value.
    """

    # Outcome
    found: bool = Field(False, description="True iff a legal name was extracted")
    active: bool = Field(False, description="USDOT status is active")

    # Identity
    legal_name: str = Field("", description="Legal name of the carrier", examples=["ACME TRUCKING LLC"])
    dba_name: str = Field("", description="Doing-business-as name")
    mc_number: str = Field("", description="Canonical MC number", examples=["MC1777037"])
    dot_number: str = Field("", description="USDOT number as a digit string", examples=["3487141"])
    mx_number: str = Field("", description="Mexican carrier docket, when shown")

    # Status
    status_code: str = Field("", description="A (active), I (inactive) or empty when unknown")
    oos_date: str = Field("", description="Out-of-service date, empty when none")

    # Contact
    phone: str = ""
    fax: str = ""
    email: str = ""

    # Addresses
    physical_address: Address = Field(default_factory=Address)
    mailing_address: Address = Field(default_factory=Address)

    # Authority and classification
    carrier_operation: List[str] = Field(default_factory=list, examples=[["Interstate"]])
    operation_classification: List[str] = Field(default_factory=list, examples=[["Auth. For Hire"]])
    cargo_carried: List[str] = Field(default_factory=list, examples=[["General Freight"]])
    common_authority_status: str = Field("", description="ACTIVE, INACTIVE or empty")
    contract_authority_status: str = Field("", description="ACTIVE, INACTIVE or empty")
    broker_authority_status: str = Field("", description="ACTIVE, INACTIVE or empty")
    operating_authority_status: str = Field("", examples=["AUTHORIZED FOR Property"])

    # Insurance, as shown on the page ("$750,000", "Yes", "No")
    bipd_insurance_on_file: str = ""
    bipd_insurance_required: str = ""
    cargo_insurance_on_file: str = ""
    cargo_insurance_required: str = ""
    bond_insurance_on_file: str = ""
    bond_insurance_required: str = ""

    # Fleet
    total_power_units: int = Field(0, ge=0)
    total_drivers: int = Field(0, ge=0)

    # US inspections, 24 months
    vehicle_insp: int = Field(0, ge=0)
    vehicle_oos_insp: int = Field(0, ge=0)
    vehicle_oos_rate: float = Field(0.0, ge=0, le=100, description="Percentage, not a fraction")
    driver_insp: int = Field(0, ge=0)
    driver_oos_insp: int = Field(0, ge=0)
    driver_oos_rate: float = Field(0.0, ge=0, le=100, description="Percentage, not a fraction")
    hazmat_insp: int = Field(0, ge=0)
    hazmat_oos_insp: int = Field(0, ge=0)
    hazmat_oos_rate: float = Field(0.0, ge=0, le=100, description="Percentage, not a fraction")

    # US crashes, 24 months
    crash_total: int = Field(0, ge=0)
    fatal_crash: int = Field(0, ge=0)
    inj_crash: int = Field(0, ge=0)
    tow_crash: int = Field(0, ge=0)

    # Safety review
    safety_rating: str = ""
    safety_rating_date: str = ""
    safety_review_date: str = ""
    safety_review_type: str = ""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_response(self) -> dict:
        """Serialize with the camelCase keys used at the HTTP boundary."""
        return self.model_dump(by_alias=True)


class LookupMiss(BaseModel):
    """Result returned when no carrier record could be produced.

    `error` is only set when the lookup itself failed (timeout, transport
    error), so callers can tell "verification unavailable" apart from
    "carrier does not exist".
    """
    found: bool = False
    active: bool = False
    legal_name: str = ""
    mc_number: str = ""
    dot_number: str = ""
    error: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
