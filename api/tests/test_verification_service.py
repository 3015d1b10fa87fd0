"""
Unit tests for the verification service.

The SAFER and QC Mobile clients are mocked; extraction runs for real against
the synthetic pages from conftest.
"""

import pytest
from unittest.mock import Mock
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.carrier_record import CarrierRecord
from services.safer_client import SaferUnavailableError
from services.verification_service import VerificationService, build_warnings, summarize
from utils.identifiers import IdentifierError


class TestVerifyCarrier:
    """Flat response for the verify-carrier endpoint."""

    @pytest.fixture
    def safer_client(self):
        return Mock()

    @pytest.fixture
    def qc_client(self):
        client = Mock()
        client.lookup.return_value = None
        return client

    @pytest.fixture
    def service(self, safer_client, qc_client):
        return VerificationService(safer_client=safer_client, qc_client=qc_client)

    def test_found(self, service, safer_client, snapshot_html):
        safer_client.fetch_snapshot.return_value = snapshot_html

        body = service.verify_carrier(mc="MC-1777037")

        assert body["found"] is True
        assert body["active"] is True
        assert body["mcNumber"] == "MC1777037"
        assert body["dotNumber"] == "3487141"
        safer_client.fetch_snapshot.assert_called_once_with("MC_MX", "1777037", timeout=12.0)

    def test_dot_preferred_over_mc(self, service, safer_client, snapshot_html):
        safer_client.fetch_snapshot.return_value = snapshot_html

        body = service.verify_carrier(mc="1777037", dot="3487141")

        assert safer_client.fetch_snapshot.call_args.args == ("USDOT", "3487141")
        assert body["mcNumber"] == "MC1777037"

    def test_not_found(self, service, safer_client, not_found_html):
        safer_client.fetch_snapshot.return_value = not_found_html

        body = service.verify_carrier(mc="1777037")

        assert body["found"] is False
        assert body["mcNumber"] == "MC1777037"
        assert "error" not in body

    def test_timeout_is_not_not_found(self, service, safer_client):
        """A timeout says "unavailable", never "carrier does not exist"."""
        safer_client.fetch_snapshot.side_effect = SaferUnavailableError(
            "SAFER lookup timed out", timed_out=True
        )

        body = service.verify_carrier(mc="1777037")

        assert body["found"] is False
        assert body["error"] == "SAFER lookup timed out"
        assert body["mcNumber"] == "MC1777037"

    def test_transport_failure(self, service, safer_client):
        safer_client.fetch_snapshot.side_effect = SaferUnavailableError("SAFER lookup failed", status_code=502)
        body = service.verify_carrier(dot="3487141")
        assert body["error"] == "SAFER lookup failed"
        assert body["dotNumber"] == "3487141"

    def test_qc_mobile_answer_skips_scrape(self, service, safer_client, qc_client):
        qc_client.lookup.return_value = CarrierRecord(
            found=True, active=True, legal_name="QC CARRIER INC", mc_number="MC1777037"
        )

        body = service.verify_carrier(mc="1777037")

        assert body["legalName"] == "QC CARRIER INC"
        qc_client.lookup.assert_called_once_with("1777037", "")
        safer_client.fetch_snapshot.assert_not_called()

    def test_qc_mobile_record_without_name_falls_back(self, service, safer_client, qc_client,
                                                      snapshot_html):
        """An unnamed QC Mobile answer does not stand in for "no such carrier"."""
        qc_client.lookup.return_value = CarrierRecord(found=False, dot_number="3487141")
        safer_client.fetch_snapshot.return_value = snapshot_html

        body = service.verify_carrier(dot="3487141")

        assert body["found"] is True
        assert body["legalName"] == "ACME TRUCKING & HAULING LLC"
        safer_client.fetch_snapshot.assert_called_once()

    def test_invalid_input(self, service, safer_client):
        with pytest.raises(IdentifierError):
            service.verify_carrier(mc="12")
        safer_client.fetch_snapshot.assert_not_called()

    def test_unexpected_errors_propagate(self, service, safer_client):
        """Only SaferUnavailableError is absorbed here; routes handle the rest."""
        safer_client.fetch_snapshot.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            service.verify_carrier(dot="3487141")


class TestVerifyDotMc:
    """Verdict envelope for the verify-dot-mc endpoint."""

    @pytest.fixture
    def safer_client(self):
        return Mock()

    @pytest.fixture
    def service(self, safer_client):
        qc_client = Mock()
        qc_client.lookup.return_value = None
        return VerificationService(safer_client=safer_client, qc_client=qc_client)

    def test_active_carrier(self, service, safer_client, snapshot_html):
        safer_client.fetch_snapshot.return_value = snapshot_html

        summary = service.verify_dot_mc(dot="3487141")

        assert summary.verified is True
        assert summary.status == "active"
        assert summary.carrier.legal_name == "ACME TRUCKING & HAULING LLC"
        assert "valid operating authority" in summary.message
        assert summary.warnings is None
        assert safer_client.fetch_snapshot.call_args.kwargs["timeout"] == 15.0

    def test_not_found(self, service, safer_client, not_found_html):
        safer_client.fetch_snapshot.return_value = not_found_html

        summary = service.verify_dot_mc(mc="MC-1777037")

        assert summary.status == "not_found"
        assert summary.verified is False
        assert "MC# 1777037" in summary.message

    def test_parse_error(self, service, safer_client):
        safer_client.fetch_snapshot.return_value = "<html>unexpected layout</html>"
        summary = service.verify_dot_mc(dot="3487141")
        assert summary.status == "parse_error"

    def test_timeout(self, service, safer_client):
        safer_client.fetch_snapshot.side_effect = SaferUnavailableError("t", timed_out=True)
        summary = service.verify_dot_mc(dot="3487141")
        assert summary.status == "timeout"
        assert summary.verified is False

    def test_unavailable(self, service, safer_client):
        safer_client.fetch_snapshot.side_effect = SaferUnavailableError("f", status_code=500)
        summary = service.verify_dot_mc(dot="3487141")
        assert summary.status == "unavailable"

    def test_response_omits_empty_parts(self, service, safer_client):
        safer_client.fetch_snapshot.side_effect = SaferUnavailableError("t", timed_out=True)
        body = service.verify_dot_mc(dot="3487141").to_response()
        assert set(body) == {"verified", "status", "message"}


class TestSummary:
    """Warnings and messages for found carriers."""

    def test_out_of_service_carrier(self):
        carrier = CarrierRecord(
            found=True, active=True, legal_name="OOS LLC", status_code="A", oos_date="01/02/2025"
        )
        summary = summarize(carrier)
        assert summary.verified is False
        assert summary.status == "inactive"
        assert "OUT OF SERVICE" in summary.message
        assert "Carrier is OUT OF SERVICE since 01/02/2025" in summary.warnings

    def test_registered_without_authority(self):
        carrier = CarrierRecord(found=True, active=True, legal_name="PRIVATE FLEET", status_code="A")
        summary = summarize(carrier)
        assert summary.verified is True
        assert "should be reviewed" in summary.message

    def test_contract_authority_counts_as_authority(self):
        carrier = CarrierRecord(found=True, active=True, legal_name="CONTRACT ONLY LLC",
                                status_code="A", contract_authority_status="ACTIVE")
        summary = summarize(carrier)
        assert summary.verified is True
        assert "valid operating authority" in summary.message

    def test_broker_authority_alone_is_reviewed(self):
        carrier = CarrierRecord(found=True, active=True, legal_name="BROKER ONLY LLC",
                                status_code="A", broker_authority_status="ACTIVE")
        assert "should be reviewed" in summarize(carrier).message

    def test_inactive_carrier(self):
        carrier = CarrierRecord(found=True, legal_name="GONE LLC", status_code="I")
        summary = summarize(carrier)
        assert summary.status == "inactive"
        assert "not in active status" in summary.message
        assert "Carrier entity status is INACTIVE" in summary.warnings

    def test_rate_and_rating_warnings(self):
        carrier = CarrierRecord(
            found=True, active=True, legal_name="RISKY LLC", status_code="A",
            common_authority_status="INACTIVE",
            driver_oos_rate=26.0, vehicle_oos_rate=30.5, safety_rating="Unsatisfactory",
        )
        warnings = build_warnings(carrier)
        assert "Common carrier authority is INACTIVE" in warnings
        assert "High driver out-of-service rate: 26.0%" in warnings
        assert "High vehicle out-of-service rate: 30.5%" in warnings
        assert "Carrier has an UNSATISFACTORY safety rating" in warnings

    def test_thresholds_are_exclusive(self):
        carrier = CarrierRecord(driver_oos_rate=25.0, vehicle_oos_rate=30.0)
        assert build_warnings(carrier) == []
