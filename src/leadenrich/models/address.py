"""
Address Model

Validated postal address accepted by the enrichment pipeline.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Address(BaseModel):
    """
    Structured postal address.

    Attributes:
        line1: Street line (house number and street)
        line2: Secondary unit designator, not part of the identity key
        city: City name
        state: Two-letter state abbreviation
        postal_code: ZIP or ZIP+4
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    line1: str = Field(..., min_length=3, description="Street line")
    line2: Optional[str] = Field(None, description="Unit / suite line")
    city: str = Field(..., min_length=1, description="City name")
    state: str = Field(..., min_length=2, max_length=2, description="State abbreviation")
    postal_code: str = Field(..., min_length=5, description="ZIP code")

    @field_validator("line2")
    @classmethod
    def blank_line2_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty secondary line as absent."""
        return v or None

    def identity(self) -> tuple[str, str, str, str]:
        """Lowercased, trimmed fields that define the cache key."""
        return tuple(
            " ".join(part.split()).lower()
            for part in (self.line1, self.city, self.state, self.postal_code)
        )

    def one_line(self) -> str:
        """Single-line rendering, e.g. '123 Main St, Orlando, FL 32801'."""
        street = f"{self.line1} {self.line2}" if self.line2 else self.line1
        return f"{street}, {self.city}, {self.state} {self.postal_code}"
