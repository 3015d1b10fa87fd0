"""
FMCSA QC Mobile API client.

Optional fast path used before the SAFER scrape when a webKey is configured.
Any failure yields None so the caller falls back to scraping.
"""

import logging
from typing import Dict, Optional

import requests

from config import settings
from models.carrier_record import Address, CarrierRecord
from services.carrier_assembler import normalize_authority
from utils.html_text import parse_float, parse_int
from utils.identifiers import normalize_dot, normalize_mc

logger = logging.getLogger(__name__)

_AUTHORITY_CODES = {"A": "ACTIVE", "I": "INACTIVE"}


class QCMobileClient:
    """Client for the QC Mobile carrier endpoints."""

    def __init__(self, web_key: Optional[str] = None, base_url: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self.web_key = web_key if web_key is not None else settings.fmcsa_web_key
        self.base_url = (base_url or settings.qc_mobile_base_url).rstrip("/")
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.web_key)

    def _get_carrier(self, endpoint: str) -> Optional[Dict]:
        """GET an endpoint and return the carrier object it wraps, if any."""
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.get(url, params={"webKey": self.web_key},
                                        timeout=settings.qc_mobile_timeout_seconds)
            if not 200 <= response.status_code < 300:
                logger.info(f"QC Mobile returned status {response.status_code} for {endpoint}")
                return None
            payload = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"QC Mobile request failed for {endpoint}: {e}")
            return None

        content = payload.get("content") if isinstance(payload, dict) else None
        if isinstance(content, list):
            content = content[0] if content else None
        carrier = content.get("carrier") if isinstance(content, dict) else None
        return carrier if isinstance(carrier, dict) else None

    def lookup(self, mc: str = "", dot: str = "") -> Optional[CarrierRecord]:
        """Look a carrier up by DOT (preferred) or MC docket.

        Args:
            mc: MC digits, may be empty
            dot: USDOT digits, may be empty

        Returns:
            CarrierRecord, or None when disabled or nothing usable came back
        """
        if not self.enabled or not (mc or dot):
            return None
        endpoint = f"/carriers/{dot}" if dot else f"/carriers/docket-number/{mc}"
        carrier = self._get_carrier(endpoint)
        if not carrier:
            return None
        logger.info(f"QC Mobile answered for {endpoint}")
        return to_record(carrier, mc, dot)


def to_record(carrier: Dict, mc: str = "", dot: str = "") -> CarrierRecord:
    """Map a QC Mobile carrier object onto a CarrierRecord."""
    def text(key: str) -> str:
        value = carrier.get(key)
        return str(value).strip() if value is not None else ""

    def authority(key: str) -> str:
        code = text(key).upper()
        return _AUTHORITY_CODES.get(code) or normalize_authority(code)

    status_code = text("statusCode").upper()
    legal_name = text("legalName")

    return CarrierRecord(
        found=bool(legal_name),
        active=status_code == "A",
        legal_name=legal_name,
        dba_name=text("dbaName"),
        mc_number=normalize_mc(mc),
        dot_number=normalize_dot(dot) or normalize_dot(text("dotNumber")),
        status_code=status_code,
        oos_date=text("oosDate"),
        physical_address=Address(
            street=text("phyStreet"),
            city=text("phyCity"),
            state=text("phyState"),
            zip=text("phyZipcode"),
        ),
        common_authority_status=authority("commonAuthorityStatus"),
        contract_authority_status=authority("contractAuthorityStatus"),
        broker_authority_status=authority("brokerAuthorityStatus"),
        bipd_insurance_on_file=text("bipdInsuranceOnFile"),
        bipd_insurance_required=text("bipdInsuranceRequired"),
        cargo_insurance_on_file=text("cargoInsuranceOnFile"),
        cargo_insurance_required=text("cargoInsuranceRequired"),
        bond_insurance_on_file=text("bondInsuranceOnFile"),
        bond_insurance_required=text("bondInsuranceRequired"),
        total_power_units=parse_int(carrier.get("totalPowerUnits")),
        total_drivers=parse_int(carrier.get("totalDrivers")),
        vehicle_insp=parse_int(carrier.get("vehicleInsp")),
        vehicle_oos_insp=parse_int(carrier.get("vehicleOosInsp")),
        vehicle_oos_rate=min(parse_float(carrier.get("vehicleOosRate")), 100.0),
        driver_insp=parse_int(carrier.get("driverInsp")),
        driver_oos_insp=parse_int(carrier.get("driverOosInsp")),
        driver_oos_rate=min(parse_float(carrier.get("driverOosRate")), 100.0),
        hazmat_insp=parse_int(carrier.get("hazmatInsp")),
        hazmat_oos_insp=parse_int(carrier.get("hazmatOosInsp")),
        hazmat_oos_rate=min(parse_float(carrier.get("hazmatOosRate")), 100.0),
        crash_total=parse_int(carrier.get("crashTotal")),
        fatal_crash=parse_int(carrier.get("fatalCrash")),
        inj_crash=parse_int(carrier.get("injCrash")),
        tow_crash=parse_int(carrier.get("towCrash")),
        safety_rating=text("safetyRating"),
        safety_rating_date=text("safetyRatingDate"),
        safety_review_date=text("safetyReviewDate"),
        safety_review_type=text("safetyReviewType"),
    )
