"""
Shared pytest configuration for all tests.
Sets up the import path, test settings and synthetic SAFER pages.
"""
import os
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load test environment variables before any imports
from dotenv import load_dotenv

# Load test-specific environment variables
test_env_path = Path(__file__).parent.parent / ".env.test"
if test_env_path.exists():
    load_dotenv(test_env_path, override=True)
else:
    # Never call the real QC Mobile API from tests
    os.environ["FMCSA_WEB_KEY"] = ""
    os.environ["LOG_LEVEL"] = "WARNING"


SNAPSHOT_PAGE = """
<html><head><title>SAFER Web - Company Snapshot ACME TRUCKING LLC</title></head>
<body>
<!-- begin snapshot -->
<table border="1" cellpadding="4" cellspacing="0" width="100%" summary="For formatting purpose">
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#EntityType">Entity Type:</a></th>
  <td class="queryfield" valign="top" colspan="3">CARRIER&nbsp;</td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#USDOTStatus">USDOT Status:</a></th>
  <td class="queryfield" valign="top" width="30%">ACTIVE</td>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#OutOfServiceDate">Out of Service Date:</a></th>
  <td class="queryfield" valign="top" width="20%">None</td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#USDOTNumber">USDOT Number:</a></th>
  <td class="queryfield" valign="top" width="30%">3487141</td>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#StateCarrierID">State Carrier ID Number:</a></th>
  <td class="queryfield" valign="top" width="20%">&nbsp;</td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#OperatingStatus">Operating Authority Status:</a></th>
  <td class="queryfield" valign="top" colspan="3"><b>AUTHORIZED FOR Property</b><br>
    <font color="#0000C0" face="arial" size="1">For Licensing and Insurance details <a href="#">click here</a>.</font></td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#MCNumbers">MC/MX/FF Number(s):</a></th>
  <td class="queryfield" valign="top" width="30%"><a href="#">MC-1777037</a>&nbsp;</td>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#DUNSNumber">DUNS Number:</a></th>
  <td class="queryfield" valign="top" width="20%">--</td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#LegalName">Legal Name:</a></th>
  <td class="queryfield" valign="top" colspan="3">ACME TRUCKING &amp; HAULING LLC&nbsp;</td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#DBAName">DBA Name:</a></th>
  <td class="queryfield" valign="top" colspan="3">ACME FREIGHT&nbsp;</td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#PhysicalAddress">Physical Address:</a></th>
  <td class="queryfield" valign="top" colspan="3" id="physicaladdressvalue">123 MAIN ST &nbsp;<br>SPRINGFIELD, IL &nbsp; 62704</td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#Phone">Phone:</a></th>
  <td class="queryfield" valign="top" colspan="3">(217) 555-0142</td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#MailingAddress">Mailing Address:</a></th>
  <td class="queryfield" valign="top" colspan="3" id="mailingaddressvalue">PO BOX 88 &nbsp;<br>DECATUR, IL &nbsp; 62521-0088</td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#PowerUnits">Power Units:</a></th>
  <td class="queryfield" valign="top" width="30%">12</td>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#Drivers">Drivers:</a></th>
  <td class="queryfield" valign="top" width="20%"><font style="font-size:80%">14</font></td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#OperationClassification">Operation Classification:</a></th>
  <td colspan="3">
    <table summary="Operation Classification">
    <tr>
      <td class="queryfield" width="4%">X</td><td><font style="font-size:80%">Auth. For Hire</font></td>
      <td class="queryfield" width="4%">&nbsp;</td><td><font style="font-size:80%">Priv. Pass.(Non-business)</font></td>
    </tr>
    <tr>
      <td class="queryfield" width="4%">&nbsp;</td><td><font style="font-size:80%">Exempt For Hire</font></td>
      <td class="queryfield" width="4%">X</td><td><font style="font-size:80%">Private(Property)</font></td>
    </tr>
    </table>
  </td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#CarrierOperation">Carrier Operation:</a></th>
  <td colspan="3">
    <table summary="Carrier Operation">
    <tr>
      <td class="queryfield" width="4%">X</td><td><font style="font-size:80%">Interstate</font></td>
      <td class="queryfield" width="4%">&nbsp;</td><td><font style="font-size:80%">Intrastate Only (HM)</font></td>
      <td class="queryfield" width="4%">&nbsp;</td><td><font style="font-size:80%">Intrastate Only (Non-HM)</font></td>
    </tr>
    </table>
  </td>
</tr>
<tr>
  <th scope="row" class="querylabelbkg"><a class="querylabel" href="saferhelp.aspx#CargoCarried">Cargo Carried:</a></th>
  <td colspan="3">
    <table summary="Cargo Carried">
    <tr>
      <td class="queryfield" width="4%">X</td><td><font style="font-size:80%">General Freight</font></td>
      <td class="queryfield" width="4%">&nbsp;</td><td><font style="font-size:80%">Household Goods</font></td>
    </tr>
    <tr>
      <td class="queryfield" width="4%">X</td><td><font style="font-size:80%">Building Materials</font></td>
      <td class="queryfield" width="4%">X</td><td><font style="font-size:80%">Refrigerated Food</font></td>
    </tr>
    </table>
  </td>
</tr>
</table>

<h4>US Inspection results for 24 months prior to: 10/17/2026</h4>
<table border="1" summary="Inspections">
<tr><th>Inspection Type</th><th>Vehicle</th><th>Driver</th><th>Hazmat</th><th>IEP</th></tr>
<tr><th scope="row">Inspections</th><td class="queryfield">10</td><td class="queryfield">20</td><td class="queryfield">0</td><td class="queryfield">0</td></tr>
<tr><th scope="row">Out of Service</th><td class="queryfield">2</td><td class="queryfield">1</td><td class="queryfield">0</td><td class="queryfield">0</td></tr>
<tr><th scope="row">Out of Service %</th><td class="queryfield">20%</td><td class="queryfield">5%</td><td class="queryfield">0%</td><td class="queryfield">0%</td></tr>
<tr><th scope="row">Nat'l Average %</th><td>22.26%</td><td>6.67%</td><td>4.44%</td><td>N/A</td></tr>
</table>

<h4>Crashes reported to FMCSA by states for 24 months prior to: 10/17/2026</h4>
<table border="1" summary="Crashes">
<tr><th>Type</th><th>Fatal</th><th>Injury</th><th>Tow</th><th>Total</th></tr>
<tr><th scope="row">Crashes</th><td class="queryfield">0</td><td class="queryfield">1</td><td class="queryfield">2</td><td class="queryfield">3</td></tr>
</table>

<h4>Review Information</h4>
<table border="1" summary="Review Information">
<tr>
  <th scope="row">Rating Date:</th><td class="queryfield">None</td>
  <th scope="row">Review Date:</th><td class="queryfield">03/14/2024</td>
</tr>
<tr>
  <th scope="row">Rating:</th><td class="queryfield">Satisfactory</td>
  <th scope="row">Type:</th><td class="queryfield">Compliance Review</td>
</tr>
</table>
</body></html>
"""

NOT_FOUND_PAGE = """
<html><body>
<p>The record matching USDOT Number = 9999999 could not be found.</p>
</body></html>
"""


@pytest.fixture
def snapshot_html():
    """A SAFER Company Snapshot page for an active carrier."""
    return SNAPSHOT_PAGE


@pytest.fixture
def not_found_html():
    """SAFER's response when no carrier matches the query."""
    return NOT_FOUND_PAGE


@pytest.fixture
def minimal_html():
    """A snapshot with a legal name and nothing else."""
    return (
        '<table><tr><th><a class="querylabel">Legal Name:</a></th>'
        '<td class="queryfield">SOLO HAULER INC</td></tr></table>'
    )
