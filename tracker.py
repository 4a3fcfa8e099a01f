# tracker.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from device import Device, DeviceKey, TrackedDevice

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    CONNECTED = "CONNECTED"
    DISCONNECTED = "DISCONNECTED"


@dataclass(frozen=True)
class Event:
    type: EventType
    device: Device


def reconcile(tracked: Mapping[DeviceKey, TrackedDevice], snapshot: Iterable[Device],
              now: float, disconnect_timeout: float) -> Tuple[Dict[DeviceKey, TrackedDevice], List[Event]]:
    """Reconciles tracked state with a new snapshot.

    Every device in the snapshot is refreshed with last_seen = now, emitting
    CONNECTED for keys not tracked yet. Tracked keys missing from the snapshot
    are evicted with DISCONNECTED once now - last_seen exceeds the timeout
    (strictly greater). The input mapping is left untouched.

    Args:
        tracked: Current state, keyed by device identity.
        snapshot: Devices observed in this cycle.
        now: Monotonic time of the snapshot, in seconds.
        disconnect_timeout: Seconds a device may stay unseen before eviction.

    Returns:
        The new state and the events, connected events first.
    """
    state = dict(tracked)
    connected: List[Event] = []
    disconnected: List[Event] = []

    seen_keys = set()
    for device in snapshot:
        key = device.key
        seen_keys.add(key)
        if key not in state:
            connected.append(Event(EventType.CONNECTED, device))
        state[key] = TrackedDevice(device=device, last_seen=now)

    for key, entry in list(state.items()):
        if key in seen_keys:
            continue
        if now - entry.last_seen > disconnect_timeout:
            disconnected.append(Event(EventType.DISCONNECTED, entry.device))
            del state[key]

    return state, connected + disconnected


class PresenceTracker:
    """Owns the map of known devices and their last-seen times."""

    def __init__(self):
        self._tracked: Dict[DeviceKey, TrackedDevice] = {}

    def ingest(self, snapshot: Iterable[Device], now: float, disconnect_timeout: float) -> List[Event]:
        self._tracked, events = reconcile(self._tracked, snapshot, now, disconnect_timeout)
        for event in events:
            logger.debug(f"{event.type.value}: {event.device.ip_address} ({event.device.mac_address})")
        return events

    def is_present(self, device: Union[Device, DeviceKey]) -> bool:
        key = device.key if isinstance(device, Device) else device
        return key in self._tracked

    def last_seen(self, device: Union[Device, DeviceKey]) -> float:
        key = device.key if isinstance(device, Device) else device
        return self._tracked[key].last_seen

    @property
    def devices(self) -> List[Device]:
        return [entry.device for entry in self._tracked.values()]

    def __len__(self) -> int:
        return len(self._tracked)
