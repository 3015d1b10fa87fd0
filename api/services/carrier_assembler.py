"""
Carrier record assembly.

Turns a fetched SAFER Company Snapshot page into a CarrierRecord, or a
LookupMiss when the page says the carrier does not exist. Shared by both
verification endpoints.
"""

import logging
import re
from typing import Dict, Union

from models.carrier_record import Address, CarrierRecord, LookupMiss
from services import safer_extractor as sx
from utils.html_text import parse_int, to_soup
from utils.identifiers import mc_from_docket, normalize_dot, normalize_mc

logger = logging.getLogger(__name__)


NO_DATA_MARKERS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"INVALID\s+SEARCH",
    r"no\s+records?\s+match",
    r"\b0\s+records?\s+found",
    r"query\s+returned\s+0\s+results",
    r"no\s+carrier\s+found",
    r"record\s+not\s+found",
    r"could\s+not\s+be\s+found",
))

# SAFER prints these where a value would be.
_EMPTY_VALUES = {"NONE", "N/A", "NA"}

# Insurance label wording differs between page versions; matched as regex
# against header cell text, first hit wins.
INSURANCE_LABELS = {
    "bipd_insurance_on_file": (r"BIPD Insurance.*On File", r"BIPD.*On File"),
    "bipd_insurance_required": (r"BIPD Insurance.*Required", r"BIPD.*Required"),
    "cargo_insurance_on_file": (r"Cargo Insurance.*On File", r"Cargo.*On File"),
    "cargo_insurance_required": (r"Cargo Insurance.*Required", r"Cargo.*Required"),
    "bond_insurance_on_file": (r"Bond.*On File", r"Surety.*On File"),
    "bond_insurance_required": (r"Bond.*Required", r"Surety.*Required"),
}


def is_no_data_page(html: str) -> bool:
    """True when the page is SAFER's "no matching record" response."""
    return any(marker.search(html or "") for marker in NO_DATA_MARKERS)


def is_active_status(status_text: str) -> bool:
    """ACTIVE anywhere in the text, and INACTIVE nowhere."""
    upper = (status_text or "").upper()
    return "ACTIVE" in upper and "INACTIVE" not in upper


def normalize_authority(text: str) -> str:
    """Map authority wording onto ACTIVE, INACTIVE or empty."""
    upper = (text or "").upper()
    if "INACTIVE" in upper or "NOT AUTHORIZED" in upper:
        return "INACTIVE"
    if "ACTIVE" in upper or "AUTHORIZED" in upper:
        return "ACTIVE"
    return ""


def _value(html: str, *labels: str) -> str:
    value = sx.extract_first(html, labels)
    return "" if value.upper() in _EMPTY_VALUES else value


def _address(html: str, soup, element_id: str, label: str) -> Address:
    address = sx.parse_address(soup, element_id)
    if address == Address():
        address = sx.parse_address_block(sx.extract_raw(html, label))
    return address


def _insurance(soup) -> Dict[str, str]:
    result = {}
    for field, patterns in INSURANCE_LABELS.items():
        value = ""
        for pattern in patterns:
            value = sx.find_value(soup, pattern)
            if value:
                break
        result[field] = "" if value.upper() in _EMPTY_VALUES else value
    return result


def assemble(html: str, mc: str = "", dot: str = "") -> Union[CarrierRecord, LookupMiss]:
    """Build the carrier record for a fetched snapshot page.

    Args:
        html: Full SAFER snapshot HTML
        mc: MC number the caller asked for, any formatting
        dot: USDOT number the caller asked for, any formatting

    Returns:
        LookupMiss when the page reports no matching record, otherwise a
        CarrierRecord whose `found` flag says whether a legal name was read.
        Fields the page does not carry keep their empty defaults.
    """
    mc_number = normalize_mc(mc)
    dot_number = normalize_dot(dot)

    if is_no_data_page(html):
        logger.info(f"SAFER has no record for MC '{mc_number}' DOT '{dot_number}'")
        return LookupMiss(mc_number=mc_number, dot_number=dot_number)

    legal_name = sx.extract_first(html, ("Legal Name", "Entity Name"))
    status_text = sx.extract_first(html, ("USDOT Status", "Operating Status"))
    active = is_active_status(status_text)

    authority_cell = sx.extract_raw(html, "Operating Authority Status")
    operating_authority = sx.headline(authority_cell)
    common_authority = normalize_authority(
        sx.extract_first(html, ("Common Authority", "Common Carrier")) or operating_authority
    )
    contract_authority = normalize_authority(
        sx.extract_first(html, ("Contract Authority", "Contract Carrier"))
    )
    broker_authority = normalize_authority(
        sx.extract_first(html, ("Broker Authority", "Broker"))
    )

    docket = sx.extract_first(html, ("MC/MX/FF Number(s)", "MC/MX/FF Number", "MC Number"))
    page_dot = normalize_dot(sx.extract_first(html, ("USDOT Number", "DOT Number")))

    soup = to_soup(html)

    record = CarrierRecord(
        found=bool(legal_name),
        active=active,
        legal_name=legal_name,
        dba_name=sx.extract_first(html, ("DBA Name", "Doing Business As")),
        mc_number=mc_number or mc_from_docket(docket),
        dot_number=dot_number or page_dot,
        mx_number=_value(html, "MX Number"),
        status_code=("A" if active else "I") if status_text else "",
        oos_date=_value(html, "Out of Service Date", "OOS Date"),
        phone=sx.extract(html, "Phone"),
        fax=_value(html, "Fax"),
        email=_value(html, "Email", "E-Mail"),
        physical_address=_address(html, soup, "physicaladdressvalue", "Physical Address"),
        mailing_address=_address(html, soup, "mailingaddressvalue", "Mailing Address"),
        carrier_operation=sx.parse_carrier_operation(html),
        operation_classification=sx.parse_operation_classification(html),
        cargo_carried=sx.parse_cargo_carried(html),
        common_authority_status=common_authority,
        contract_authority_status=contract_authority,
        broker_authority_status=broker_authority,
        operating_authority_status=operating_authority,
        **_insurance(soup),
        total_power_units=parse_int(sx.extract_first(html, ("Power Units", "Total Power Units"))),
        total_drivers=parse_int(sx.extract_first(html, ("Drivers", "Total Drivers"))),
        safety_rating=_value(html, "Safety Rating", "Rating"),
        safety_rating_date=_value(html, "Rating Date", "Safety Rating Date"),
        safety_review_date=_value(html, "Review Date", "Safety Review Date"),
        safety_review_type=_value(html, "Review Type", "Type"),
        **sx.parse_inspections(html),
        **sx.parse_crashes(html),
    )

    if not record.found:
        logger.warning(
            f"SAFER page for MC '{mc_number}' DOT '{dot_number}' had no legal name; "
            "layout may have changed"
        )
    return record
