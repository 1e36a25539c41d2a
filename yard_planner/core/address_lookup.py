"""Address lookup stub.

Loading a yard only requires a non-blank address. There is no geocoding: the
background is an abstract canvas, so the lookup just normalizes the text.
"""

import logging

logger = logging.getLogger(__name__)


class AddressLookup:
    """Resolves a typed address to the canvas background."""

    @staticmethod
    def normalize(address: str) -> str:
        """Collapse surrounding whitespace."""
        return address.strip()

    @staticmethod
    def can_load(address: str) -> bool:
        """True if the address is usable (non-blank)."""
        return bool(AddressLookup.normalize(address=address))
