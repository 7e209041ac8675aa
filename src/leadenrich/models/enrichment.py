"""
Enrichment Data Models

Pydantic models for provider results and the aggregated enrichment record.
"""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

from src.leadenrich.models.address import Address


class Location(BaseModel):
    """WGS84 point."""

    lat: float = Field(..., description="WGS84 latitude", ge=-90, le=90)
    lng: float = Field(..., description="WGS84 longitude", ge=-180, le=180)


class Parcel(BaseModel):
    """
    Parcel identifiers.

    Attributes:
        apn: Assessor's parcel number
        wkt: Parcel boundary as well-known text
    """

    apn: Optional[str] = Field(None, description="Assessor's parcel number")
    wkt: Optional[str] = Field(None, description="Parcel geometry (WKT)")


class Owner(BaseModel):
    """Owner of record."""

    name: Optional[str] = Field(None, description="Owner name")


class PhoneRecord(BaseModel):
    """
    Contact phone number, verified or raw.

    Attributes:
        number: Phone number as returned by the provider
        type: Line type (mobile, landline, voip) when verified
        score: Provider confidence or reachability score
    """

    number: str
    type: Optional[str] = None
    score: Optional[float] = None


class EmailRecord(BaseModel):
    """Contact email address."""

    email: str
    score: Optional[float] = None


class GeocodeResult(BaseModel):
    """Geocoder output."""

    place_id: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class PropertyResult(BaseModel):
    """Parcel and ownership lookup output. Any field may be missing."""

    apn: Optional[str] = None
    wkt: Optional[str] = None
    owner: Optional[str] = None


class PeopleQuery(BaseModel):
    """Input to a people/skip-trace lookup."""

    name: Optional[str] = None
    address: Address


class PeopleResult(BaseModel):
    """Raw contact data from a people lookup."""

    phones: List[str] = Field(default_factory=list)
    emails: List[str] = Field(default_factory=list)


class ProviderHealth(BaseModel):
    """
    Liveness report for one provider.

    Attributes:
        name: Provider name
        ok: Whether the provider is reachable and usable
        latency_ms: Round trip of the health check
        quota: Remaining request quota, when the vendor exposes one
        error: Failure message when ok is False
    """

    name: str
    ok: bool
    latency_ms: Optional[float] = None
    quota: Optional[int] = None
    error: Optional[str] = None


class Enrichment(BaseModel):
    """
    Best-effort enriched profile for one address.

    Every field except ``sources`` is optional. ``sources`` lists
    ``"<provider>:<stage>"`` for each stage a provider satisfied, in order.
    """

    model_config = ConfigDict(validate_assignment=True)

    place_id: Optional[str] = None
    address_norm: Optional[Address] = None
    location: Optional[Location] = None
    parcel: Optional[Parcel] = None
    owner: Optional[Owner] = None
    phones: List[PhoneRecord] = Field(default_factory=list)
    emails: List[EmailRecord] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)

    def has_contacts(self) -> bool:
        """Check if any phone or email was found."""
        return bool(self.phones or self.emails)

    def to_dict(self) -> dict:
        """Convert to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")
