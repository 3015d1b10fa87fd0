from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from models.carrier_record import CarrierRecord


def _identifier_text(value):
    """JSON clients send identifiers as numbers as often as strings."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class VerifyCarrierRequest(BaseModel):
    """JSON body accepted by POST /api/verify-carrier."""
    mc: Optional[str] = Field(None, description="MC number, any formatting", examples=["MC-1777037"])
    dot: Optional[str] = Field(None, description="USDOT number", examples=["3487141"])

    @field_validator("mc", "dot", mode="before")
    @classmethod
    def identifiers_as_text(cls, value):
        return _identifier_text(value)


class VerifyDotMcRequest(BaseModel):
    """JSON body accepted by POST /functions/verify-dot-mc."""
    dot_number: Optional[str] = None
    mc_number: Optional[str] = None

    @field_validator("dot_number", "mc_number", mode="before")
    @classmethod
    def identifiers_as_text(cls, value):
        return _identifier_text(value)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class VerificationSummary(BaseModel):
    """Verdict envelope returned by the verify-dot-mc endpoint.

    status is one of: active, inactive, not_found, parse_error, timeout,
    unavailable, error.
    """
    verified: bool = False
    status: str
    message: str
    carrier: Optional[CarrierRecord] = None
    warnings: Optional[List[str]] = None

    def to_response(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
