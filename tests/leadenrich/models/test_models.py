"""
Unit tests for address and enrichment models
"""
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

ROOT = Path(__file__).resolve().parents[3]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.leadenrich.models import Address, Enrichment, PhoneRecord, ProviderHealth


class TestAddress:
    """Tests for Address validation"""

    def test_valid_address(self):
        """Test a well-formed address validates"""
        address = Address(line1="123 Main St", city="Orlando", state="FL", postal_code="32801")

        assert address.line1 == "123 Main St"
        assert address.line2 is None
        assert address.state == "FL"

    def test_whitespace_is_stripped(self):
        """Test surrounding whitespace is removed before validation"""
        address = Address(line1="  123 Main St ", city=" Orlando ", state=" FL ", postal_code=" 32801 ")

        assert address.line1 == "123 Main St"
        assert address.city == "Orlando"
        assert address.state == "FL"
        assert address.postal_code == "32801"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"line1": "12"},
            {"state": "FLA"},
            {"state": "F"},
            {"postal_code": "3280"},
            {"city": ""},
        ],
    )
    def test_invalid_fields_rejected(self, overrides):
        """Test structural validation of each constrained field"""
        data = {"line1": "123 Main St", "city": "Orlando", "state": "FL", "postal_code": "32801"}
        data.update(overrides)

        with pytest.raises(ValidationError):
            Address(**data)

    def test_blank_line2_becomes_none(self):
        """Test an empty secondary line is treated as absent"""
        address = Address(line1="123 Main St", line2="  ", city="Orlando", state="FL", postal_code="32801")
        assert address.line2 is None

    def test_identity_ignores_line2_and_case(self):
        """Test identity fields are lowercased and exclude line2"""
        address = Address(line1="123  Main St", line2="Apt 4", city="ORLANDO", state="fl", postal_code="32801")

        assert address.identity() == ("123 main st", "orlando", "fl", "32801")

    def test_one_line(self):
        """Test single-line rendering"""
        address = Address(line1="123 Main St", line2="Apt 4", city="Orlando", state="FL", postal_code="32801")
        assert address.one_line() == "123 Main St Apt 4, Orlando, FL 32801"


class TestEnrichment:
    """Tests for Enrichment defaults and serialization"""

    def test_defaults_are_empty_lists(self):
        """Test list fields default to empty, never None"""
        enrichment = Enrichment()

        assert enrichment.phones == []
        assert enrichment.emails == []
        assert enrichment.sources == []
        assert enrichment.location is None
        assert not enrichment.has_contacts()

    def test_to_dict(self):
        """Test JSON-compatible dict output"""
        enrichment = Enrichment(
            place_id="abc",
            phones=[PhoneRecord(number="4075550100", type="mobile", score=0.9)],
            sources=["GoogleProvider:geocode"],
        )

        data = enrichment.to_dict()

        assert data["place_id"] == "abc"
        assert data["phones"][0] == {"number": "4075550100", "type": "mobile", "score": 0.9}
        assert data["sources"] == ["GoogleProvider:geocode"]
        assert enrichment.has_contacts()

    def test_provider_health_optional_fields(self):
        """Test health record only requires name and ok"""
        health = ProviderHealth(name="GoogleProvider", ok=True)

        assert health.latency_ms is None
        assert health.error is None
