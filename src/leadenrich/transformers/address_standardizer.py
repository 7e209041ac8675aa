"""
Address Standardization and Fingerprinting

USPS-style normalization of street lines and the cache fingerprint used to
memoize enrichment results.
"""
import hashlib
import re
from dataclasses import dataclass
from typing import Optional

from src.leadenrich.models.address import Address
from src.leadenrich.utils.logger import get_logger

logger = get_logger(__name__)


def address_fingerprint(address: Address) -> str:
    """
    Compute the cache key for an address.

    Only line1, city, state and postal_code take part, lowercased with
    whitespace trimmed and collapsed. line2 is ignored.

    Args:
        address: Validated address

    Returns:
        Hex MD5 digest
    """
    key_string = "|".join(address.identity())
    return hashlib.md5(key_string.encode("utf-8")).hexdigest()


@dataclass
class StandardizedAddress:
    """
    Parsed street line components.

    Attributes:
        street_number: House/building number
        street_name: Street name including directionals
        street_type: Street suffix abbreviation (ST, AVE, RD, ...)
        unit_type: Unit designator (APT, STE, UNIT, ...)
        unit_number: Unit number
        zip_code: 5-digit ZIP code
    """
    street_number: Optional[str] = None
    street_name: Optional[str] = None
    street_type: Optional[str] = None
    unit_type: Optional[str] = None
    unit_number: Optional[str] = None
    zip_code: Optional[str] = None

    @property
    def street_line(self) -> Optional[str]:
        parts = [p for p in (self.street_number, self.street_name, self.street_type) if p]
        return " ".join(parts) or None

    @property
    def unit_line(self) -> Optional[str]:
        if self.unit_type and self.unit_number:
            return f"{self.unit_type} {self.unit_number}"
        return None


class AddressStandardizer:
    """
    Rewrites addresses into the abbreviated upper-case form used by
    assessor and people-data vendors.
    """

    STREET_TYPES = {
        'ALLEY': 'ALY', 'AVENUE': 'AVE', 'BOULEVARD': 'BLVD', 'CIRCLE': 'CIR',
        'COURT': 'CT', 'DRIVE': 'DR', 'EXPRESSWAY': 'EXPY', 'HIGHWAY': 'HWY',
        'LANE': 'LN', 'PARKWAY': 'PKWY', 'PLACE': 'PL', 'ROAD': 'RD',
        'STREET': 'ST', 'TERRACE': 'TER', 'TRAIL': 'TRL', 'WAY': 'WAY',
        'LOOP': 'LOOP', 'PATH': 'PATH', 'PIKE': 'PIKE', 'PLAZA': 'PLZ',
        'POINT': 'PT', 'RIDGE': 'RDG', 'RUN': 'RUN', 'SQUARE': 'SQ'
    }

    UNIT_TYPES = {
        'APARTMENT': 'APT', 'BUILDING': 'BLDG', 'FLOOR': 'FL',
        'SUITE': 'STE', 'UNIT': 'UNIT', 'ROOM': 'RM', '#': 'UNIT'
    }

    DIRECTIONS = {
        'NORTH': 'N', 'SOUTH': 'S', 'EAST': 'E', 'WEST': 'W',
        'NORTHEAST': 'NE', 'NORTHWEST': 'NW', 'SOUTHEAST': 'SE', 'SOUTHWEST': 'SW'
    }

    UNIT_PATTERN = re.compile(
        r'(?:^|\s)(?:(#)\s*|(APT|APARTMENT|UNIT|SUITE|STE|BLDG|BUILDING|FL|FLOOR|RM|ROOM)\s+)([A-Z0-9\-]+)\s*$'
    )

    def parse(self, street: str, postal_code: Optional[str] = None) -> StandardizedAddress:
        """
        Split a raw street line into standardized components.

        Args:
            street: Street line, optionally with a trailing unit
            postal_code: ZIP or ZIP+4

        Returns:
            StandardizedAddress with whatever components could be recognized
        """
        if not street:
            return StandardizedAddress(zip_code=self.normalize_zip(postal_code))

        street = " ".join(street.replace(",", " ").replace(".", "").split()).upper()
        unit_type, unit_number, street = self._extract_unit(street)
        street_number, street_name, street_type = self._parse_street(street)

        return StandardizedAddress(
            street_number=street_number,
            street_name=street_name,
            street_type=street_type,
            unit_type=unit_type,
            unit_number=unit_number,
            zip_code=self.normalize_zip(postal_code),
        )

    def standardize(self, address: Address) -> Address:
        """
        Return a corrected copy of an address.

        Units found on line1 move to line2. The ZIP is cut to 5 digits when
        it has at least that many.
        """
        parsed = self.parse(address.line1, address.postal_code)

        line2 = " ".join(address.line2.split()).upper() if address.line2 else None
        if line2:
            unit_type, unit_number, rest = self._extract_unit(line2)
            if unit_type and not rest:
                line2 = f"{unit_type} {unit_number}"
        else:
            line2 = parsed.unit_line

        result = Address(
            line1=parsed.street_line or address.line1.upper(),
            line2=line2,
            city=" ".join(address.city.split()).upper(),
            state=address.state.upper(),
            postal_code=parsed.zip_code or address.postal_code,
        )

        logger.debug(
            "address_standardized",
            original=address.line1[:50],
            standardized=result.line1[:50],
        )
        return result

    def _extract_unit(self, street: str) -> tuple[Optional[str], Optional[str], str]:
        """
        Pull a trailing unit designator off the street line.

        Returns:
            Tuple of (unit_type, unit_number, remaining_street)
        """
        match = self.UNIT_PATTERN.search(street)
        if not match:
            return None, None, street

        designator = match.group(1) or match.group(2)
        unit_type = self.UNIT_TYPES.get(designator, designator)
        return unit_type, match.group(3), street[:match.start()].strip()

    def _parse_street(self, street: str) -> tuple[Optional[str], Optional[str], Optional[str]]:
        """
        Returns:
            Tuple of (street_number, street_name, street_type)
        """
        parts = street.split()
        if not parts:
            return None, None, None

        street_number = None
        if parts[0].replace('-', '').isdigit():
            street_number = parts[0]
            parts = parts[1:]

        if not parts:
            return street_number, None, None

        street_type = None
        if len(parts) > 1 and (parts[-1] in self.STREET_TYPES or parts[-1] in self.STREET_TYPES.values()):
            street_type = self.STREET_TYPES.get(parts[-1], parts[-1])
            parts = parts[:-1]

        street_name = " ".join(self.DIRECTIONS.get(part, part) for part in parts)
        return street_number, street_name or None, street_type

    @staticmethod
    def normalize_zip(zip_code: Optional[str]) -> Optional[str]:
        """
        Normalize ZIP code to 5 digits.

        Returns:
            5-digit ZIP code or None
        """
        if not zip_code:
            return None

        digits = re.sub(r'\D', '', str(zip_code))
        if len(digits) >= 5:
            return digits[:5]
        return None
