# readers/local.py
import logging
import subprocess

from .base import NEIGHBOR_SCRIPT, BaseReader, NeighborReadError, NeighborTables, split_tables

logger = logging.getLogger(__name__)


class LocalReader(BaseReader):
    """Reads the neighbor tables of this host by running arp and ip in one shell."""

    def __init__(self, shell: str = "sh"):
        self.shell = shell
        self.script = NEIGHBOR_SCRIPT

    def read_neighbor_tables(self) -> NeighborTables:
        try:
            result = subprocess.run(
                [self.shell, "-c", self.script],
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
            )
        except OSError as err:
            raise NeighborReadError(f"Could not run '{self.shell}': {err}") from err

        if result.returncode != 0:
            logger.warning(f"Neighbor command exited with status {result.returncode}: {result.stderr.strip()}")
            return NeighborTables()
        return split_tables(result.stdout)
