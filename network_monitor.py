# network_monitor.py
import argparse
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from dynaconf import Dynaconf
from rich.console import Console
from rich.text import Text

from readers import BaseReader, NeighborReadError, collect_snapshot, get_reader
from tracker import Event, EventType, PresenceTracker
from utils import VendorLookup, format_timestamp, update_vendor_database

# Load settings
config = Dynaconf(
    settings_files=['config/settings.toml'],
    envvar_prefix="NETNEIGHBOR",
)

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 2
DEFAULT_DISCONNECT_TIMEOUT = 10

EVENT_STYLES = {
    EventType.CONNECTED: "green",
    EventType.DISCONNECTED: "red",
}


@dataclass(frozen=True)
class MonitorSettings:
    interval: float = DEFAULT_INTERVAL
    interface: Optional[str] = None
    verbose: bool = False
    disconnect_timeout: float = DEFAULT_DISCONNECT_TIMEOUT


def load_settings(config: Dynaconf, args: Optional[argparse.Namespace] = None) -> MonitorSettings:
    """Builds monitor settings from the config file/environment, overridden by CLI flags."""
    general = config.get("general") or {}

    def pick(name, default):
        value = getattr(args, name, None) if args is not None else None
        return general.get(name, default) if value is None else value

    interval = float(pick("interval", DEFAULT_INTERVAL))
    disconnect_timeout = float(pick("disconnect_timeout", DEFAULT_DISCONNECT_TIMEOUT))
    if interval < 0:
        raise ValueError(f"interval must not be negative: {interval}")
    if disconnect_timeout < 0:
        raise ValueError(f"disconnect_timeout must not be negative: {disconnect_timeout}")

    interface = pick("interface", None) or None
    if args is not None and getattr(args, "all_interfaces", False):
        interface = None

    return MonitorSettings(
        interval=interval,
        interface=interface,
        verbose=bool(pick("verbose", False)),
        disconnect_timeout=disconnect_timeout,
    )


class ConsoleEventSink:
    """Prints connection events to the console with colors and the MAC vendor."""

    def __init__(self, console: Optional[Console] = None,
                 vendor_lookup: Optional[Callable[[str], Optional[str]]] = None):
        self.console = console or Console(highlight=False)
        self.vendor_lookup = vendor_lookup or VendorLookup()

    def _vendor(self, mac: str) -> str:
        try:
            return self.vendor_lookup(mac) or "Unknown"
        except Exception as e:  # pylint: disable=broad-except
            logger.warning(f"Vendor lookup failed for MAC {mac}: {e}")
            return "Unknown"

    def render(self, event: Event) -> Text:
        device = event.device
        vendor = self._vendor(device.mac_address)
        return Text.assemble(
            f"[{format_timestamp()}] ",
            (f"[{event.type.value}]", EVENT_STYLES[event.type]),
            " IP: ", (device.ip_address, "blue"),
            " | MAC: ", (device.mac_address, "yellow"),
            " | Vendor: ", (vendor, "cyan"),
            " | Interface: ", (device.interface, "magenta"),
        )

    def __call__(self, event: Event) -> None:
        try:
            self.console.print(self.render(event))
        except Exception as e:  # pylint: disable=broad-except
            logger.error(f"Could not display event for {event.device.ip_address}: {e}")


def run_cycle(reader: BaseReader, tracker: PresenceTracker, settings: MonitorSettings,
              sink: Callable[[Event], None], now: float) -> bool:
    """Runs one poll: read, parse, reconcile, report. Returns False if the read failed."""
    try:
        snapshot = collect_snapshot(reader, settings.interface)
    except NeighborReadError as e:
        logger.error(f"Error reading network state: {e}")
        return False

    for event in tracker.ingest(snapshot, now, settings.disconnect_timeout):
        sink(event)

    if settings.verbose and len(tracker) == 0:
        logger.info("No devices detected")
    return True


def run_monitor(reader: BaseReader, settings: MonitorSettings, sink: Callable[[Event], None],
                tracker: Optional[PresenceTracker] = None,
                sleep: Callable[[float], None] = time.sleep,
                clock: Callable[[], float] = time.monotonic,
                max_cycles: Optional[int] = None) -> PresenceTracker:
    """Polls the neighbor tables until interrupted, or for max_cycles cycles."""
    tracker = tracker if tracker is not None else PresenceTracker()
    cycles = 0
    while max_cycles is None or cycles < max_cycles:
        run_cycle(reader, tracker, settings, sink, clock())
        cycles += 1
        sleep(settings.interval)
    return tracker


def log_banner(settings: MonitorSettings) -> None:
    logger.info("NetNeighbor - Network Connection Monitor")
    logger.info(f"Monitoring every {settings.interval:g} seconds")
    logger.info(f"Disconnection timeout: {settings.disconnect_timeout:g} seconds")
    if settings.interface:
        logger.info(f"Interface: {settings.interface}")
    else:
        logger.info("Monitoring all interfaces")
    logger.info("Press Ctrl+C to stop")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Network connection monitor")
    parser.add_argument("-i", "--interval", type=float, help="Refresh interval in seconds")
    parser.add_argument("-n", "--interface", help="Network interface to monitor (e.g., wlan0, eth0)")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Show verbose output")
    parser.add_argument("--all-interfaces", action="store_true", help="Monitor all interfaces")
    parser.add_argument("--disconnect-timeout", type=float,
                        help="Seconds a device may go unseen before it is reported as disconnected")
    parser.add_argument("--update-mac-db", action="store_true", help="Force update of the MAC vendor database")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        settings = load_settings(config, args)
        reader = get_reader(config)
    except ValueError as e:
        parser.error(str(e))

    if args.update_mac_db:
        update_vendor_database()

    log_banner(settings)
    try:
        run_monitor(reader, settings, ConsoleEventSink())
    except KeyboardInterrupt:
        logger.info("Monitor stopped")

if __name__ == "__main__":
    main()
