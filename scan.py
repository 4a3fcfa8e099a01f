# scan.py
from dynaconf import Dynaconf

from parsers import order_devices
from readers import collect_snapshot, get_reader

config = Dynaconf(
    settings_files=['config/settings.toml'],
    envvar_prefix="NETNEIGHBOR",
)

def main():
    """Simple script to read the neighbor tables once and print the snapshot."""

    reader = get_reader(config)
    interface = (config.get("general") or {}).get("interface") or None
    devices = collect_snapshot(reader, interface)

    for device in order_devices(devices):
        print(f"{device.ip_address:<40} {device.mac_address:<18} {device.interface}")

if __name__ == "__main__":
    main()
