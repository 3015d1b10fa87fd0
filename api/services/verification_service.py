"""
Carrier verification service.

Ties the SAFER client, the optional QC Mobile client and the record
assembler together for the two HTTP boundaries:

- verify_carrier: flat CarrierRecord / LookupMiss JSON
- verify_dot_mc: VerificationSummary envelope with warnings and a message
"""

import logging
from typing import List, Optional

from config import settings
from models.carrier_record import CarrierRecord, LookupMiss
from models.verification import VerificationSummary
from services.carrier_assembler import assemble
from services.qc_mobile_client import QCMobileClient
from services.safer_client import QUERY_BY_DOT, QUERY_BY_MC, SaferClient, SaferUnavailableError
from utils.identifiers import normalize_mc, validate_lookup

logger = logging.getLogger(__name__)

DRIVER_OOS_WARNING_RATE = 25.0
VEHICLE_OOS_WARNING_RATE = 30.0


def build_warnings(carrier: CarrierRecord) -> List[str]:
    """List the red flags a dispatcher should see before booking a carrier."""
    warnings = []
    if carrier.oos_date:
        warnings.append(f"Carrier is OUT OF SERVICE since {carrier.oos_date}")
    if carrier.status_code == "I":
        warnings.append("Carrier entity status is INACTIVE")
    if carrier.common_authority_status == "INACTIVE":
        warnings.append("Common carrier authority is INACTIVE")
    if carrier.driver_oos_rate > DRIVER_OOS_WARNING_RATE:
        warnings.append(f"High driver out-of-service rate: {carrier.driver_oos_rate:.1f}%")
    if carrier.vehicle_oos_rate > VEHICLE_OOS_WARNING_RATE:
        warnings.append(f"High vehicle out-of-service rate: {carrier.vehicle_oos_rate:.1f}%")
    if carrier.safety_rating.upper().startswith("U"):
        warnings.append("Carrier has an UNSATISFACTORY safety rating")
    return warnings


def summarize(carrier: CarrierRecord) -> VerificationSummary:
    """Turn a found carrier into a verdict with a human-readable message."""
    verified = carrier.active and not carrier.oos_date
    has_authority = "ACTIVE" in (carrier.common_authority_status, carrier.contract_authority_status)
    name = carrier.legal_name

    if verified and has_authority:
        message = f"{name} is an active carrier with valid operating authority."
    elif verified:
        message = f"{name} is registered with FMCSA but operating authority status should be reviewed."
    elif carrier.oos_date:
        message = f"{name} is OUT OF SERVICE. Do not dispatch loads to this carrier."
    else:
        message = f"{name} was found but is not in active status. Review carefully before proceeding."

    return VerificationSummary(
        verified=verified,
        status="active" if verified else "inactive",
        carrier=carrier,
        message=message,
        warnings=build_warnings(carrier) or None,
    )


class VerificationService:
    """Runs one carrier lookup per call. Holds no state between calls."""

    def __init__(self, safer_client: Optional[SaferClient] = None,
                 qc_client: Optional[QCMobileClient] = None):
        self.safer_client = safer_client or SaferClient()
        self.qc_client = qc_client or QCMobileClient()

    def _fetch(self, mc: str, dot: str, timeout: float) -> str:
        # DOT lookups are the more reliable of the two on SAFER
        if dot:
            return self.safer_client.fetch_snapshot(QUERY_BY_DOT, dot, timeout=timeout)
        return self.safer_client.fetch_snapshot(QUERY_BY_MC, mc, timeout=timeout)

    def verify_carrier(self, mc: Optional[str] = None, dot: Optional[str] = None) -> dict:
        """Verify a carrier for the verify-carrier endpoint.

        Args:
            mc: MC number, any formatting
            dot: USDOT number, any formatting

        Returns:
            dict: CarrierRecord JSON, or LookupMiss JSON. A LookupMiss carries
            `error` only when SAFER could not be reached.

        Raises:
            IdentifierError: If the identifiers fail validation
        """
        mc, dot = validate_lookup(mc, dot)

        record = self.qc_client.lookup(mc, dot)
        if record is not None and record.found:
            return record.to_response()
        if record is not None:
            logger.info(f"QC Mobile record for MC '{mc}' DOT '{dot}' had no legal name, scraping SAFER")

        try:
            html = self._fetch(mc, dot, settings.safer_timeout_seconds)
        except SaferUnavailableError as e:
            return LookupMiss(mc_number=normalize_mc(mc), dot_number=dot, error=str(e)).to_response()

        return assemble(html, mc, dot).to_response()

    def verify_dot_mc(self, dot: Optional[str] = None, mc: Optional[str] = None) -> VerificationSummary:
        """Verify a carrier and produce a verdict envelope.

        Args:
            dot: USDOT number, any formatting
            mc: MC number, any formatting

        Returns:
            VerificationSummary describing the outcome

        Raises:
            IdentifierError: If the identifiers fail validation
        """
        mc, dot = validate_lookup(mc, dot)
        identifier = f"DOT# {dot}" if dot else f"MC# {mc}"

        try:
            html = self._fetch(mc, dot, settings.safer_function_timeout_seconds)
        except SaferUnavailableError as e:
            if e.timed_out:
                return VerificationSummary(
                    status="timeout",
                    message="FMCSA SAFER database is not responding. Please try again in a moment.",
                )
            return VerificationSummary(
                status="unavailable",
                message="FMCSA SAFER could not be reached. Please try again later.",
            )

        result = assemble(html, mc, dot)
        if isinstance(result, LookupMiss):
            return VerificationSummary(
                status="not_found",
                message=f"No carrier found with {identifier}. Please verify the number and try again.",
            )
        if not result.found:
            return VerificationSummary(
                status="parse_error",
                message=(
                    "Could not parse carrier information from FMCSA. The carrier may not exist "
                    "or the SAFER page format may have changed."
                ),
            )
        return summarize(result)
