"""
Offline address normalizer backed by AddressStandardizer.
"""
from typing import Optional

from src.leadenrich.models.address import Address
from src.leadenrich.providers.base import BaseProvider
from src.leadenrich.transformers.address_standardizer import AddressStandardizer


class StandardizerProvider(BaseProvider):
    """
    Normalizes addresses locally with USPS-style abbreviations.

    Never touches the network, so it works as the last normalizer in the
    list when vendor normalizers are down.
    """

    name = "StandardizerProvider"

    def __init__(self, name: Optional[str] = None, standardizer: Optional[AddressStandardizer] = None):
        super().__init__(name)
        self.standardizer = standardizer or AddressStandardizer()

    async def normalize(self, address: Address) -> Address:
        return self.standardizer.standardize(address)
