"""Tests for the ARP and IP neighbor table parsers."""

from device import Device, is_excluded_address
from parsers import merge_snapshots, order_devices, parse_arp_table, parse_ip_neigh_table

ARP_OUTPUT = """\
? (192.168.1.1) at 00:11:22:33:44:55 [ether] on wlan0
? (192.168.1.5) at aa:bb:cc:dd:ee:ff [ether] on wlan0
? (10.0.0.7) at 66:77:88:99:aa:bb [ether] on eth0
? (192.168.1.9) at <incomplete> on wlan0
? (127.0.0.1) at 00:00:00:00:00:00 [ether] on lo
? (224.0.0.251) at 01:00:5e:00:00:fb [ether] on wlan0
Address                  HWtype  HWaddress           Flags Mask            Iface
"""

NEIGH_OUTPUT = """\
192.168.1.6 dev eth0 lladdr 11:22:33:44:55:66 REACHABLE
fe80::1 dev wlan0 lladdr 00:11:22:33:44:55 router STALE
192.168.1.8 dev eth0  FAILED
192.168.1.10 dev wlan0 INCOMPLETE
::1 dev lo lladdr 00:00:00:00:00:00 NOARP
255.255.255.255 dev eth0 lladdr ff:ff:ff:ff:ff:ff PERMANENT
"""


def _by_ip(devices):
    return {d.ip_address: d for d in devices}


class TestParseArpTable:

    def test_single_line(self):
        devices = parse_arp_table("? (192.168.1.5) at aa:bb:cc:dd:ee:ff [ether] on wlan0")
        assert len(devices) == 1
        device = devices.pop()
        assert device.ip_address == "192.168.1.5"
        assert device.mac_address == "aa:bb:cc:dd:ee:ff"
        assert device.interface == "wlan0"

    def test_full_table_skips_malformed_and_excluded(self):
        devices = _by_ip(parse_arp_table(ARP_OUTPUT))
        assert set(devices) == {"192.168.1.1", "192.168.1.5", "10.0.0.7"}
        assert devices["10.0.0.7"].interface == "eth0"

    def test_interface_filter(self):
        devices = parse_arp_table(ARP_OUTPUT, "wlan0")
        assert {d.ip_address for d in devices} == {"192.168.1.1", "192.168.1.5"}
        assert all(d.interface == "wlan0" for d in devices)

    def test_mac_is_kept_as_captured(self):
        devices = parse_arp_table("? (192.168.1.5) at AA-BB-CC-DD-EE-FF [ether] on wlan0")
        assert devices.pop().mac_address == "AA-BB-CC-DD-EE-FF"

    def test_short_line_is_skipped(self):
        assert parse_arp_table("? (192.168.1.5) at aa:bb:cc:dd:ee:ff on") == set()

    def test_line_without_markers_is_skipped(self):
        assert parse_arp_table("x (192.168.1.5) is aa:bb:cc:dd:ee:ff [ether] in wlan0") == set()

    def test_empty_input(self):
        assert parse_arp_table("") == set()

    def test_duplicate_key_later_line_wins(self):
        text = ("? (192.168.1.5) at aa:bb:cc:dd:ee:ff [ether] on eth0\n"
                "? (192.168.1.5) at aa:bb:cc:dd:ee:ff [ether] on wlan0\n")
        devices = parse_arp_table(text)
        assert len(devices) == 1
        assert devices.pop().interface == "wlan0"


class TestParseIpNeighTable:

    def test_single_line(self):
        devices = parse_ip_neigh_table("192.168.1.6 dev eth0 lladdr 11:22:33:44:55:66 REACHABLE")
        assert devices == {Device("192.168.1.6", "11:22:33:44:55:66", "eth0")}
        assert devices.pop().interface == "eth0"

    def test_full_table(self):
        devices = _by_ip(parse_ip_neigh_table(NEIGH_OUTPUT))
        assert set(devices) == {"192.168.1.6", "fe80::1"}
        assert devices["fe80::1"].mac_address == "00:11:22:33:44:55"
        assert devices["fe80::1"].interface == "wlan0"

    def test_missing_lladdr_is_skipped(self):
        assert parse_ip_neigh_table("192.168.1.8 dev eth0 extra tokens FAILED") == set()

    def test_too_few_tokens_is_skipped(self):
        assert parse_ip_neigh_table("192.168.1.6 dev eth0 lladdr 11:22:33:44:55:66") == set()

    def test_interface_filter(self):
        devices = parse_ip_neigh_table(NEIGH_OUTPUT, "wlan0")
        assert {d.ip_address for d in devices} == {"fe80::1"}


class TestExclusions:

    def test_loopback_and_multicast_never_reported(self):
        arp = ("? (127.0.0.1) at 00:00:00:00:00:01 [ether] on eth0\n"
               "? (224.0.0.1) at 01:00:5e:00:00:01 [ether] on eth0\n")
        neigh = ("127.0.0.1 dev eth0 lladdr 00:00:00:00:00:01 PERMANENT\n"
                 "224.0.0.1 dev eth0 lladdr 01:00:5e:00:00:01 PERMANENT\n")
        for interface_filter in (None, "eth0"):
            assert parse_arp_table(arp, interface_filter) == set()
            assert parse_ip_neigh_table(neigh, interface_filter) == set()

    def test_is_excluded_address(self):
        assert is_excluded_address("127.0.0.1")
        assert is_excluded_address("::1")
        assert is_excluded_address("224.0.0.251")
        assert is_excluded_address("255.1.2.3")
        assert not is_excluded_address("192.168.1.1")
        assert not is_excluded_address("fe80::1")


def test_device_identity_ignores_interface():
    assert Device("10.0.0.1", "aa", "eth0") == Device("10.0.0.1", "aa", "wlan0")
    assert Device("1.2.3.4", "5") != Device("1.2.3.45", "")
    assert Device("1.2.3.4", "5").key != Device("1.2.3.45", "").key


def test_merge_snapshots_later_wins():
    first = {Device("10.0.0.1", "aa", "eth0"), Device("10.0.0.2", "bb", "eth0")}
    second = {Device("10.0.0.1", "aa", "wlan0")}
    merged = _by_ip(merge_snapshots(first, second))
    assert set(merged) == {"10.0.0.1", "10.0.0.2"}
    assert merged["10.0.0.1"].interface == "wlan0"


def test_order_devices():
    devices = {Device("10.0.0.2", "bb", "eth0"), Device("10.0.0.1", "aa", "eth0"), Device("10.0.0.3", "cc", "lan")}
    assert [d.ip_address for d in order_devices(devices)] == ["10.0.0.1", "10.0.0.2", "10.0.0.3"]
