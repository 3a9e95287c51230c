"""
Unit tests for the Device root object.
"""
import pytest

from zyxel_ies.config_loader import ConfigLoader
from zyxel_ies.device import Device
from zyxel_ies.enums import LineType, SnmpType
from zyxel_ies.oid_library import SLOT_OIDS, SYSTEM_OIDS, compose_oid
from zyxel_ies.snmp_gateway import OK, SnmpError, is_error
from zyxel_ies.snmp_manager import SNMPManager
from zyxel_ies.timeticks import UNKNOWN_UPTIME, ticks_to_time


def test_default_gateway_is_snmp_manager():
    device = Device("10.0.0.1", read_community="public", write_community="private", timeout=5, retries=1)

    assert isinstance(device.gateway, SNMPManager)
    assert device.gateway.timeout == 5
    assert device.gateway.retries == 1
    assert device.gateway.write_community == "private"


def test_from_config_declares_slots(tmp_path, gateway):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "device:\n"
        "  hostname: 10.0.0.1\n"
        "  read_community: public\n"
        "  slots: [1, 3]\n"
        "snmp:\n"
        "  version: 1\n"
    )

    device = Device.from_config(ConfigLoader(str(config_file)), gateway=gateway)

    assert device.hostname == "10.0.0.1"
    assert device.write_community is None
    assert sorted(device.slots) == [1, 3]
    assert device.gateway is gateway


def test_write_oid_without_write_community(gateway):
    device = Device("ies.test", read_community="public", gateway=gateway)

    result = device.write_oid('1.3.6.1.2.1.2.2.1.7.301', SnmpType.INTEGER, 2)

    assert result == SnmpError("NO_WRITE_COMMUNITY", "No set community")
    assert gateway.set_calls == []


def test_write_oid_goes_through_gateway(device, gateway):
    assert device.write_oid('1.3.6.1.2.1.2.2.1.7.301', SnmpType.INTEGER, 2) == OK
    assert gateway.set_calls == [('1.3.6.1.2.1.2.2.1.7.301', SnmpType.INTEGER, 2)]


@pytest.mark.parametrize("raw, ticks", [
    ("4711042", 4711042),
    ("(12345) 0:02:03.45", 12345),
])
def test_read_uptime(device, gateway, raw, ticks):
    gateway.values[SYSTEM_OIDS['sysUpTime']] = raw

    assert device.read_uptime() == ticks
    assert device.uptime == ticks


def test_read_uptime_failure_marks_unknown(device, gateway):
    gateway.errors[SYSTEM_OIDS['sysUpTime']] = SnmpError("SNMP_TIMEOUT", "No response from ies.test")

    result = device.read_uptime()

    assert is_error(result)
    assert device.uptime == UNKNOWN_UPTIME


def test_read_uptime_garbage_marks_unknown(device, gateway):
    gateway.values[SYSTEM_OIDS['sysUpTime']] = "soon"

    assert device.read_uptime().code == "INVALID_VALUE"
    assert device.uptime == UNKNOWN_UPTIME


def test_get_port_discovers_slot(device, gateway):
    gateway.values[compose_oid(SLOT_OIDS['cardtype'], 4)] = "SLC1224G"

    port = device.get_port(412)

    assert port.id == 412
    assert device.get_slot(4).line_type == LineType.SHDSL
    assert port.slot is device.get_slot(4)


def test_get_port_beyond_card_returns_none(device, gateway):
    gateway.values[compose_oid(SLOT_OIDS['cardtype'], 2)] = "ALC1212"

    assert device.get_port(224) is None
    assert device.get_port(212) is not None
    assert gateway.get_calls.count(compose_oid(SLOT_OIDS['cardtype'], 2)) == 1


def test_inventory_reports_each_slot(device, gateway, fill_port):
    gateway.values[compose_oid(SLOT_OIDS['cardtype'], 1)] = "ALC1202"
    gateway.values[compose_oid(SLOT_OIDS['cardtype'], 2)] = "MSC1000G"
    fill_port(101, LineType.ADSL)
    fill_port(102, LineType.ADSL)
    device.add_slot(1)
    device.add_slot(2)
    device.add_slot(9)

    results = device.inventory()

    assert results[1] == OK
    assert results[2] == OK
    assert results[9].code == "SNMP_NO_SUCH_OBJECT"


@pytest.mark.parametrize("ticks, expected", [
    (0, "0.00 seconds"),
    (150, "1.50 second"),
    (1250, "12.50 seconds"),
    (60000, "10 minutes, 00.00"),
    (366000, "1 hour, 01:00.00"),
    (18316306, "2 days, 02:52:43.06"),
])
def test_ticks_to_time(ticks, expected):
    assert ticks_to_time(ticks) == expected
