"""
Shared fixtures: an in-memory SNMP gateway that records every request, and a
Device wired to it.
"""
import logging

import pytest

from zyxel_ies.device import Device
from zyxel_ies.enums import LineType
from zyxel_ies.oid_library import PORT_OIDS, PORT_VALUE_SHAPES, SLOT_OIDS, compose_oid
from zyxel_ies.snmp_gateway import OK, SnmpError, SnmpGateway


class FakeGateway(SnmpGateway):
    """Answers GETs from a dict and echoes successful SETs back into it."""

    def __init__(self, values=None):
        super().__init__("ies.test")
        self.values = dict(values or {})
        self.errors = {}
        self.get_calls = []
        self.set_calls = []

    def get(self, oid):
        self.get_calls.append(oid)
        if oid in self.errors:
            return self.errors[oid]
        if oid in self.values:
            return str(self.values[oid])
        return SnmpError("SNMP_NO_SUCH_OBJECT", f"No such object {oid}")

    def set(self, oid, snmp_type, value):
        self.set_calls.append((oid, snmp_type, value))
        if oid in self.errors:
            return self.errors[oid]
        self.values[oid] = value
        return OK


def cardtype_oid(slot_id):
    return compose_oid(SLOT_OIDS['cardtype'], slot_id)


def firmware_oid(slot_id):
    return compose_oid(SLOT_OIDS['firmware'], slot_id)


def fill_port_values(gateway, port_id, line_type: LineType):
    """Gives every attribute that applies to the port a valid value."""
    for attribute, table in PORT_OIDS.items():
        template = table.get(line_type)
        if template is None:
            continue
        value = "Profile_1" if PORT_VALUE_SHAPES[attribute] == 'string' else "1"
        gateway.values[compose_oid(template, port_id)] = value


@pytest.fixture
def fill_port(gateway):
    """Gives every attribute that applies to a port a valid value."""
    def _fill_port(port_id, line_type):
        fill_port_values(gateway, port_id, line_type)
    return _fill_port


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def device(gateway):
    return Device("ies.test", read_community="public", write_community="private", gateway=gateway)


@pytest.fixture
def make_slot(device, gateway):
    """Creates a slot whose card type the gateway will report."""
    def _make_slot(slot_id, cardtype, firmware="V3.53(ABL.1)"):
        gateway.values[cardtype_oid(slot_id)] = cardtype
        gateway.values[firmware_oid(slot_id)] = firmware
        return device.add_slot(slot_id)
    return _make_slot


@pytest.fixture
def clean_logging():
    """Removes the handlers setup_logging installs on the package logger."""
    yield
    logger = logging.getLogger("zyxel_ies")
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
