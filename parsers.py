# parsers.py
import logging
from typing import Callable, Iterable, List, Optional, Set

from device import Device, is_excluded_address

logger = logging.getLogger(__name__)

ARP_MIN_FIELDS = 7
NEIGH_MIN_FIELDS = 6


def _parse_lines(text: str, parser_func: Callable[[str], Optional[Device]],
                 interface_filter: Optional[str]) -> Set[Device]:
    """Runs a line parser over text and collects the accepted devices.

    Duplicate keys collapse, and the later line wins.
    """
    devices = {}
    for line in text.splitlines():
        device = parser_func(line)
        if device is None:
            continue
        if interface_filter and device.interface != interface_filter:
            continue
        if is_excluded_address(device.ip_address):
            logger.debug(f"Ignoring excluded address {device.ip_address}")
            continue
        devices[device.key] = device
    return set(devices.values())


def _parse_arp_line(line: str) -> Optional[Device]:
    """Parses a single line of 'arp -a -n' output.

    Example: "? (192.168.1.1) at aa:bb:cc:dd:ee:ff [ether] on wlan0"
    """
    if "at" not in line or "on" not in line:
        return None
    parts = line.split()
    if len(parts) < ARP_MIN_FIELDS:
        if parts:
            logger.debug(f"Skipping short ARP line: {line!r}")
        return None

    ip = parts[1].lstrip("(").rstrip(")")
    return Device(ip, parts[3], parts[6])


def _parse_neigh_line(line: str) -> Optional[Device]:
    """Parses a single line of 'ip neigh show' output.

    Example: "192.168.1.6 dev eth0 lladdr 11:22:33:44:55:66 REACHABLE"
    """
    parts = line.split()
    if len(parts) < NEIGH_MIN_FIELDS:
        return None

    mac = None
    iface = None
    for marker, value in zip(parts, parts[1:]):
        if marker == "lladdr":
            mac = value
        elif marker == "dev":
            iface = value

    if mac is None or iface is None:
        logger.debug(f"Skipping neighbor line without lladdr/dev: {line!r}")
        return None
    return Device(parts[0], mac, iface)


def parse_arp_table(text: str, interface_filter: Optional[str] = None) -> Set[Device]:
    """Parses the ARP table output."""
    return _parse_lines(text, _parse_arp_line, interface_filter)


def parse_ip_neigh_table(text: str, interface_filter: Optional[str] = None) -> Set[Device]:
    """Parses the IP neighbor table output."""
    return _parse_lines(text, _parse_neigh_line, interface_filter)


def merge_snapshots(*snapshots: Iterable[Device]) -> Set[Device]:
    """Unions snapshots; on duplicate keys the device from the later snapshot wins."""
    combined = {}
    for snapshot in snapshots:
        for device in snapshot:
            combined[device.key] = device
    return set(combined.values())


def order_devices(devices: Iterable[Device]) -> List[Device]:
    """Sorts devices by interface, then IP text, for stable display."""
    return sorted(devices, key=lambda d: (d.interface, d.ip_address, d.mac_address))
