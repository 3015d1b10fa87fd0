"""
SAFER Company Snapshot extractors.

The snapshot page carries no semantic markup: values live in table cells
next to visible labels, and checkboxes are a literal "X" in the cell before
a label. Every extractor here is anchored to that visible text and position.

Label lookups run a small table of regex layouts over the raw page so they
tolerate the loose markup SAFER serves. Everything that walks rows and
cells (addresses, the inspection and crash tables, checkboxes) does so on a
BeautifulSoup tree.
"""

import logging
import re
from typing import Dict, Iterable, List, Sequence, Union

from bs4 import Tag

from models.carrier_record import Address
from utils.html_text import clean_text, parse_float, parse_int, text_lines, to_soup

logger = logging.getLogger(__name__)


PLACEHOLDER = "--"

# Label-value layouts, tried in order. "{label}" is replaced with the
# escaped label text; group 1 is the raw value cell.
LABEL_PATTERNS = (
    # <TH><A class="querylabel" ...>Legal Name:</A></TH><TD class="queryfield">VALUE</TD>
    r"<A[^>]*>\s*{label}\s*:?\s*</A>\s*</TH>\s*<TD[^>]*>(.*?)</TD>",
    # <TH>Rating:</TH><TD>VALUE</TD>
    r"<TH[^>]*>\s*{label}\s*:?\s*</TH>\s*<TD[^>]*>(.*?)</TD>",
    # label, any closing/opening tags, then a queryfield cell
    r">\s*{label}\s*:?\s*(?:</?[A-Z][^>]*>\s*)*?<TD[^>]*class=[\"']?queryfield[\"']?[^>]*>(.*?)</TD>",
)

_FLAGS = re.IGNORECASE | re.DOTALL

_CITY_STATE_ZIP = re.compile(r"^(.+?),\s*([A-Z]{2})\s+(\d{5}(?:-\d{4})?)\b", re.IGNORECASE)
_CRASHES = re.compile(r"\bCrashes\b", re.IGNORECASE)

CARRIER_OPERATIONS = (
    "Interstate",
    "Intrastate Only (HM)",
    "Intrastate Only (Non-HM)",
)

OPERATION_CLASSIFICATIONS = (
    "Auth. For Hire",
    "Exempt For Hire",
    "Private(Property)",
    "Priv. Pass. (Business)",
    "Priv. Pass.(Non-business)",
    "Migrant",
    "U.S. Mail",
    "Fed. Gov't",
    "State Gov't",
    "Local Gov't",
    "Indian Nation",
)


def _compiled(label: str) -> List[re.Pattern]:
    escaped = re.escape(label)
    return [re.compile(p.replace("{label}", escaped), _FLAGS) for p in LABEL_PATTERNS]


def extract_raw(html: str, label: str) -> str:
    """Return the raw HTML of the value cell next to `label`.

    Same pattern order and placeholder rules as `extract`, but the winning
    cell is returned untouched so callers can look at its inner markup.
    """
    if not html or not label:
        return ""
    for pattern in _compiled(label):
        match = pattern.search(html)
        if not match:
            continue
        value = clean_text(match.group(1))
        if value and value != PLACEHOLDER:
            return match.group(1)
    return ""


def extract(html: str, label: str) -> str:
    """Look up the value shown next to a field label.

    Args:
        html: Full page HTML
        label: Visible label text without the trailing colon, e.g. "Legal Name"

    Returns:
        Cleaned value text, or empty string when no layout matched or the
        page shows the "--" placeholder
    """
    return clean_text(extract_raw(html, label))


def extract_first(html: str, labels: Iterable[str]) -> str:
    """Return the value of the first label in `labels` that yields one."""
    for label in labels:
        value = extract(html, label)
        if value:
            return value
    return ""


def find_value(page: Union[str, Tag], label_pattern: str) -> str:
    """Value cell beside the first header cell whose text matches `label_pattern`.

    For labels that vary in wording, e.g. "BIPD Insurance On File" and
    "BIPD: On File". The pattern is a case-insensitive regex searched in the
    header text.
    """
    regex = re.compile(label_pattern, re.IGNORECASE)
    for header in to_soup(page).find_all("th"):
        if not regex.search(clean_text(header)):
            continue
        value = clean_text(header.find_next_sibling("td"))
        if value and value != PLACEHOLDER:
            return value
    return ""


def _address_from(node: Tag) -> Address:
    lines = text_lines(node)
    street = lines[0]
    # Anything after the first break belongs to the city line
    second = " ".join(line for line in lines[1:] if line)
    if not second:
        return Address(street=street)

    match = _CITY_STATE_ZIP.match(second)
    if not match:
        return Address(street=street, city=second)
    return Address(
        street=street,
        city=match.group(1).strip(),
        state=match.group(2).upper(),
        zip=match.group(3),
    )


def parse_address_block(block: str) -> Address:
    """Split raw address cell HTML into street and city/state/zip.

    The first line break separates the street from the city line. When the
    city line is not in "CITY, ST 12345[-6789]" form it is kept whole as the
    city.
    """
    if not block:
        return Address()
    return _address_from(to_soup(block))


def parse_address(page: Union[str, Tag], element_id: str) -> Address:
    """Parse the address held in the table cell with the given `id`.

    Never raises; a missing cell yields an all-empty Address.
    """
    if not page or not element_id:
        return Address()
    cell = to_soup(page).find("td", id=element_id)
    if cell is None:
        return Address()
    return _address_from(cell)


def section(html: str, start: str, ends: Sequence[str]) -> str:
    """Cut out the part of the page between `start` and the nearest end marker.

    Markers are matched case-insensitively as plain text. If no end marker
    follows the start, the section runs to the end of the page. Returns an
    empty string when the start marker is absent.
    """
    if not html:
        return ""
    lowered = html.lower()
    begin = lowered.find(start.lower())
    if begin < 0:
        return ""
    offset = begin + len(start)
    stops = [lowered.find(end.lower(), offset) for end in ends]
    stops = [stop for stop in stops if stop >= 0]
    return html[begin:min(stops)] if stops else html[begin:]


def table_rows(fragment: str) -> List[Tag]:
    """Parse a section and return its table rows.

    A section that starts inside a row has lost that row's opening <tr>;
    the stray cells are wrapped back into a row so they are not dropped.
    """
    if not fragment:
        return []
    lowered = fragment.lower()
    first_row = lowered.find("<tr")
    first_cell = lowered.find("<td")
    if first_cell >= 0 and (first_row < 0 or first_cell < first_row):
        fragment = "<tr>" + fragment
    return to_soup(fragment).find_all("tr")


def _cells(row: Tag) -> List[Tag]:
    return row.find_all("td", recursive=False)


def _row_label(row: Tag) -> str:
    header = row.find("th", recursive=False)
    if header is not None:
        return clean_text(header)
    cells = _cells(row)
    if cells:
        return clean_text(cells[0])
    # Label text of a row whose <th> was cut off by the section start
    return clean_text(" ".join(row.find_all(string=True, recursive=False)))


def parse_inspections(html: str) -> Dict[str, float]:
    """Read the US inspection summary table.

    Row labels decide what a row holds: "Inspections" (counts), "Out of
    Service" (OOS counts, any row containing "%" is skipped) and "Out of
    Service %" (rates). Columns are vehicle, driver, hazmat in that order.

    Returns:
        Dict keyed by CarrierRecord field name; all zeros when the table is
        missing
    """
    result = {
        "vehicle_insp": 0, "driver_insp": 0, "hazmat_insp": 0,
        "vehicle_oos_insp": 0, "driver_oos_insp": 0, "hazmat_oos_insp": 0,
        "vehicle_oos_rate": 0.0, "driver_oos_rate": 0.0, "hazmat_oos_rate": 0.0,
    }
    rows = table_rows(section(html, "Inspection Type", ("</table>",)))
    if not rows:
        logger.debug("No inspection table on page")
        return result

    seen = set()
    for row in rows:
        label = _row_label(row).lower()
        cells = [clean_text(cell) for cell in _cells(row)][:3]
        cells += [""] * (3 - len(cells))

        if label.startswith("out of service") and "%" in row.get_text():
            kind, parse, suffix = "rate", parse_float, "oos_rate"
        elif label.startswith("out of service"):
            kind, parse, suffix = "oos", parse_int, "oos_insp"
        elif label.startswith("inspections"):
            kind, parse, suffix = "insp", parse_int, "insp"
        else:
            continue

        if kind in seen:
            continue
        seen.add(kind)
        for column, value in zip(("vehicle", "driver", "hazmat"), cells):
            result[f"{column}_{suffix}"] = parse(value)

    for column in ("vehicle", "driver", "hazmat"):
        key = f"{column}_oos_rate"
        result[key] = min(result[key], 100.0)
    return result


def parse_crashes(html: str) -> Dict[str, int]:
    """Read the US crash summary row.

    The table runs from the "Crashes" marker to the end of its table. The
    row is the first one that mentions "Crashes" and carries queryfield
    cells; those cells are fatal, injury, tow-away and total. Fewer than
    four cells leaves every count at zero.
    """
    result = {"fatal_crash": 0, "inj_crash": 0, "tow_crash": 0, "crash_total": 0}
    for row in table_rows(section(html, "Crashes", ("</table>",))):
        if not _CRASHES.search(row.get_text(" ")):
            continue
        cells = [cell for cell in _cells(row) if "queryfield" in (cell.get("class") or [])]
        if not cells:
            continue
        if len(cells) < 4:
            logger.debug(f"Crash row has {len(cells)} cells, expected 4")
            return result
        values = [parse_int(clean_text(cell)) for cell in cells[:4]]
        result["fatal_crash"], result["inj_crash"], result["tow_crash"], result["crash_total"] = values
        return result
    return result


def _checked_label_cells(fragment: str) -> List[Tag]:
    """Cells that directly follow a cell reading "X"."""
    labels = []
    for cell in to_soup(fragment).find_all("td"):
        if clean_text(cell).upper() != "X":
            continue
        label_cell = cell.find_next_sibling("td")
        if label_cell is not None:
            labels.append(label_cell)
    return labels


def is_checked(fragment: str, label: str) -> bool:
    """True if an "X" cell sits immediately before a cell reading exactly `label`."""
    if not fragment:
        return False
    return any(clean_text(cell) == label for cell in _checked_label_cells(fragment))


def checked_labels(fragment: str, labels: Iterable[str]) -> List[str]:
    """Return the known labels whose checkbox is ticked, in vocabulary order."""
    if not fragment:
        return []
    ticked = {clean_text(cell) for cell in _checked_label_cells(fragment)}
    return [label for label in labels if label in ticked]


def parse_cargo(fragment: str) -> List[str]:
    """Collect every checked cargo label in page order.

    Unlike the operation checkboxes there is no fixed vocabulary: whatever
    styled text follows a ticked box is taken as-is.
    """
    cargo = []
    if not fragment:
        return cargo
    for cell in _checked_label_cells(fragment):
        styled = cell.find(["font", "span"], style=True)
        text = clean_text(styled)
        if text and text not in cargo:
            cargo.append(text)
    return cargo


def parse_carrier_operation(html: str) -> List[str]:
    fragment = section(html, "Carrier Operation", ("Cargo Carried",))
    return checked_labels(fragment, CARRIER_OPERATIONS)


def parse_operation_classification(html: str) -> List[str]:
    fragment = section(html, "Operation Classification", ("Carrier Operation",))
    return checked_labels(fragment, OPERATION_CLASSIFICATIONS)


def parse_cargo_carried(html: str) -> List[str]:
    fragment = section(html, "Cargo Carried", ("Inspection Type", "Inspections", "Review Information"))
    return parse_cargo(fragment)


def headline(cell: str) -> str:
    """Headline of a multi-line value cell.

    SAFER puts the status in bold ("AUTHORIZED FOR Property") and follows it
    with notes and links. Falls back to the first line when nothing is bold.
    """
    if not cell:
        return ""
    soup = to_soup(cell)
    bold = soup.find("b")
    if bold is not None and clean_text(bold):
        return clean_text(bold)
    return text_lines(soup)[0]
