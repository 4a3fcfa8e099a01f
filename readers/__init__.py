# readers/__init__.py
import logging
from typing import Optional, Set

from dynaconf import Dynaconf

from device import Device
from parsers import merge_snapshots, parse_arp_table, parse_ip_neigh_table
from .base import BaseReader, NeighborReadError, NeighborTables
from .local import LocalReader

logger = logging.getLogger(__name__)

__all__ = [
    "BaseReader",
    "LocalReader",
    "NeighborReadError",
    "NeighborTables",
    "collect_snapshot",
    "get_reader",
]


def get_reader(config: Dynaconf, reader_type: Optional[str] = None) -> BaseReader:
    """Reader factory: returns an instance of the configured reader class."""

    general = config.get("general") or {}
    reader_type = reader_type or general.get("reader_type", "local")

    if reader_type == "local":
        return LocalReader()
    raise ValueError(f"Unsupported reader type: {reader_type}")


def collect_snapshot(reader: BaseReader, interface_filter: Optional[str] = None) -> Set[Device]:
    """Reads both neighbor tables and returns the combined device snapshot.

    Raises:
        NeighborReadError: The reader could not run its command.
    """
    tables = reader.read_neighbor_tables()
    arp_devices = parse_arp_table(tables.arp, interface_filter)
    neigh_devices = parse_ip_neigh_table(tables.neigh, interface_filter)
    logger.debug(f"Parsed {len(arp_devices)} ARP and {len(neigh_devices)} neighbor entries")
    return merge_snapshots(arp_devices, neigh_devices)
