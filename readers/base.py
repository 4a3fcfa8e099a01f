# readers/base.py
import logging
from abc import ABC, abstractmethod
from typing import NamedTuple

logger = logging.getLogger(__name__)

SPLIT_MARKER = "===SPLIT==="
NEIGHBOR_SCRIPT = f"arp -a -n; echo '{SPLIT_MARKER}'; ip neigh show"


class NeighborReadError(Exception):
    """Raised when the neighbor tables cannot be read at all."""


class NeighborTables(NamedTuple):
    arp: str = ""
    neigh: str = ""


def split_tables(output: str) -> NeighborTables:
    """Splits combined script output into the ARP and neighbor blocks.

    Output without the split marker yields empty tables.
    """
    parts = output.split(SPLIT_MARKER)
    if len(parts) < 2:
        if output.strip():
            logger.warning("Neighbor output is missing the split marker, ignoring it")
        return NeighborTables()
    return NeighborTables(parts[0], parts[1])


class BaseReader(ABC):
    """Abstract base class for sources of neighbor table text."""

    @abstractmethod
    def read_neighbor_tables(self) -> NeighborTables:
        """Retrieves the raw ARP and IP neighbor tables.

        Returns:
            A NeighborTables pair. Both blocks are empty when the command ran
            but failed or produced nothing.

        Raises:
            NeighborReadError: The command could not be executed.
        """
