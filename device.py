# device.py
from dataclasses import dataclass, field
from typing import NamedTuple

EXCLUDED_PREFIXES = ("127.", "224.", "255.")
EXCLUDED_ADDRESSES = ("::1",)


class DeviceKey(NamedTuple):
    """Identity of a neighbor: the (IP, MAC) pair as captured."""
    ip_address: str
    mac_address: str


@dataclass(frozen=True)
class Device:
    ip_address: str
    mac_address: str
    interface: str = field(default="", compare=False)  # Not part of identity

    @property
    def key(self) -> DeviceKey:
        return DeviceKey(self.ip_address, self.mac_address)


@dataclass
class TrackedDevice:
    device: Device
    last_seen: float  # Monotonic seconds


def is_excluded_address(ip: str) -> bool:
    """Checks if an address is loopback or multicast/broadcast-like.

    The 255.* prefix is excluded as a whole, including unicast addresses in it.
    """
    return ip.startswith(EXCLUDED_PREFIXES) or ip in EXCLUDED_ADDRESSES
