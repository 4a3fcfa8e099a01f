# utils.py
import logging
from datetime import datetime
from typing import Optional

from mac_vendor_lookup import MacLookup

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Formats a wall-clock time for console output."""
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


class VendorLookup:
    """Resolves vendor names from MAC addresses, caching results per MAC."""

    def __init__(self, mac_lookup: Optional[MacLookup] = None):
        self._mac_lookup = mac_lookup
        self._cache: dict = {}

    def __call__(self, mac: str) -> Optional[str]:
        if mac in self._cache:
            return self._cache[mac]
        try:
            if self._mac_lookup is None:
                self._mac_lookup = MacLookup()
            vendor = self._mac_lookup.lookup(mac)
        except Exception as e:
            logger.debug(f"Could not determine vendor for MAC {mac}: {e}")
            vendor = None
        self._cache[mac] = vendor
        return vendor


def update_vendor_database() -> None:
    """Downloads a fresh copy of the MAC vendor database."""
    MacLookup().update_vendors()
